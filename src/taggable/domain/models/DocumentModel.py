from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

from taggable.domain.models.TagSetModel import TagSet

__all__ = ["TaggedDocument"]


@dataclass
class TaggedDocument:
    id: Any
    tags: Dict[str, TagSet] = field(default_factory=lambda: {})
    fields: Dict[str, Any] = field(default_factory=lambda: {})

    def tags_for(self, context: str) -> TagSet:
        return list(self.tags.get(context) or [])

    def get(self, name: str, default: Any = None) -> Any:
        return self.fields.get(name, default)
