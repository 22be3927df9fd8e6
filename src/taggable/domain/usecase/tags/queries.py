from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Tuple

from taggable.domain.models.AggregationModel import weights_as_pairs
from taggable.domain.models.DocumentModel import TaggedDocument
from taggable.domain.models.TagSetModel import normalize_tags
from taggable.domain.registry import ContextRegistry
from taggable.domain.usecase._shared import ensure_group_allowed, ensure_strategy
from taggable.domain.usecase.aggregation.batch import RecalculateTagWeights
from taggable.domain.usecase.ports import AggregationRepo, TaggedDocumentsRepo


@dataclass(slots=True)
class TagQueries:
    """
    Read side of the engine, one generic accessor set for every context.

    Listings come from the counter index and only show tags whose count is
    above zero; ``tagged_with`` reads the documents themselves.
    """

    registry: ContextRegistry
    aggregation_repo: AggregationRepo
    documents_repo: TaggedDocumentsRepo

    async def tags_for(self, context: str, group: Any = None) -> List[str]:
        weights = await self.tags_with_weight_for(context, group)
        return [tag for tag, _ in weights]

    async def tags_with_weight_for(self, context: str, group: Any = None) -> List[Tuple[str, int]]:
        ctx = ensure_strategy(self.registry, context)
        ensure_group_allowed(ctx, group)
        weights = await self.aggregation_repo.weights(ctx.name, group=group)
        return weights_as_pairs(w for w in weights if w.count > 0)

    async def tagged_with(self, context: str, tags: Any) -> List[TaggedDocument]:
        ctx = self.registry.get(context)
        wanted = normalize_tags(tags, ctx.separator)
        if not wanted:
            return []
        return await self.documents_repo.tagged_with(ctx.name, wanted)

    async def autocomplete(
        self,
        context: str,
        prefix: str,
        *,
        sort_by_count: bool = False,
        limit: int = 0,
        group: Any = None,
    ) -> List[Tuple[str, int]]:
        ctx = ensure_strategy(self.registry, context)
        ensure_group_allowed(ctx, group)
        matches = await self.aggregation_repo.autocomplete(
            ctx.name,
            (prefix or "").strip(),
            sort_by_count=sort_by_count,
            limit=max(int(limit or 0), 0),
            group=group,
        )
        return weights_as_pairs(matches)

    async def recalculate_all(self, context: str) -> float:
        return await RecalculateTagWeights(self.registry, self.aggregation_repo).execute(context)

    async def recalculate_all_contexts(self) -> dict[str, float]:
        return await RecalculateTagWeights(self.registry, self.aggregation_repo).execute_all()

    def tag_contexts(self) -> List[str]:
        return self.registry.names()

    def separator(self, context: str) -> str:
        return self.registry.separator(context)

    def set_separator(self, context: str, value: str | None) -> str:
        return self.registry.set_separator(context, value).separator
