from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Hashable, List, Optional

from taggable.domain.models.TagSetModel import TagSet, tag_diff

__all__ = ["DocumentMutation", "MutationKind", "TagChange", "TagDelta"]


class MutationKind(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


@dataclass(frozen=True, slots=True)
class TagDelta:
    tag: str
    delta: int
    group: Optional[Hashable] = None


@dataclass(slots=True)
class TagChange:
    """
    Before/after view of one context's tag set for a single committed write.

    ``previous=None`` marks a document that had no prior state: the whole
    ``current`` set counts as added. ``applied`` is flipped by the first
    aggregator that consumes the change; later attempts are no-ops.
    """

    context: str
    previous: Optional[TagSet]
    current: TagSet = field(default_factory=list)
    previous_group: Any = None
    current_group: Any = None
    applied: bool = False

    @property
    def is_creation(self) -> bool:
        return self.previous is None

    def tags_changed(self) -> bool:
        if self.previous is None:
            return True
        return set(self.previous) != set(self.current)

    def group_changed(self) -> bool:
        return self.previous is not None and self.previous_group != self.current_group

    def has_effect(self) -> bool:
        return self.tags_changed() or self.group_changed()

    def deltas(self, grouped: bool = False) -> List[TagDelta]:
        """
        Unit deltas implied by this change, removals first.

        With grouping, removals are keyed by the group value before the write
        and additions by the value after it, so a group move with unchanged
        tags relocates every tag.
        """
        if not grouped or not self.group_changed():
            removed, added = tag_diff(self.previous, self.current)
        else:
            removed, added = list(self.previous or []), list(self.current)
        before = self.previous_group if grouped else None
        after = self.current_group if grouped else None
        return [TagDelta(tag, -1, before) for tag in removed] + [
            TagDelta(tag, 1, after) for tag in added
        ]


@dataclass(slots=True)
class DocumentMutation:
    kind: MutationKind
    document_id: Any
    changes: List[TagChange] = field(default_factory=list)

    def change_for(self, context: str) -> Optional[TagChange]:
        return next((c for c in self.changes if c.context == context), None)

    def changed_contexts(self) -> List[str]:
        if self.kind is not MutationKind.UPDATED:
            return [c.context for c in self.changes]
        return [c.context for c in self.changes if c.has_effect()]
