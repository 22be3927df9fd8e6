from __future__ import annotations

from typing import Any, List, Optional, Protocol, Sequence

from taggable.domain.models.AggregationModel import TagWeight
from taggable.domain.models.DocumentModel import TaggedDocument


class AggregationRepo(Protocol):
    """Counter index keyed by (context, tag[, group])."""

    async def increment(
        self, context: str, tag: str, delta: int, *, group: Any = None
    ) -> None: ...

    async def recompute(self, context: str) -> None: ...

    async def weights(self, context: str, *, group: Any = None) -> List[TagWeight]: ...

    async def autocomplete(
        self,
        context: str,
        prefix: str,
        *,
        sort_by_count: bool = False,
        limit: int = 0,
        group: Any = None,
    ) -> List[TagWeight]: ...


class TaggedDocumentsRepo(Protocol):
    async def get(self, doc_id: Any) -> Optional[TaggedDocument]: ...

    async def tagged_with(self, context: str, tags: Sequence[str]) -> List[TaggedDocument]: ...
