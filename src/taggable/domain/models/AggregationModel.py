from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Tuple

__all__ = ["TagWeight", "weights_as_pairs"]


@dataclass(frozen=True, slots=True)
class TagWeight:
    tag: str
    count: int

    def as_pair(self) -> Tuple[str, int]:
        return (self.tag, self.count)

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "TagWeight":
        return cls(tag=str(doc["tag"]), count=int(doc.get("value") or 0))


def weights_as_pairs(weights: Iterable[TagWeight]) -> List[Tuple[str, int]]:
    return [w.as_pair() for w in weights]
