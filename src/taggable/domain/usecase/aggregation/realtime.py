from __future__ import annotations

import logging
from dataclasses import dataclass

from taggable.domain.models.ContextModel import TaggableContext
from taggable.domain.models.MutationModel import TagChange
from taggable.domain.usecase.ports import AggregationRepo

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class IncrementalAggregator:
    """
    Real-time strategy: one atomic +1/-1 per touched (tag, group) key.

    Never reads a counter before writing it; concurrent writers rely on the
    store's upsert-increment being atomic per key.
    """

    aggregation_repo: AggregationRepo

    async def apply(self, context: TaggableContext, change: TagChange) -> int:
        if change.applied:
            logger.debug("Change for %s already aggregated; skipping", change.context)
            return 0
        change.applied = True

        deltas = change.deltas(grouped=context.is_grouped)
        for d in deltas:
            await self.aggregation_repo.increment(context.name, d.tag, d.delta, group=d.group)
        if deltas:
            logger.debug(
                "Applied %d tag delta(s) to %s: %s",
                len(deltas),
                context.name,
                ", ".join(f"{d.tag}{d.delta:+d}" for d in deltas),
            )
        return len(deltas)
