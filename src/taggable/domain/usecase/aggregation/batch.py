from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from taggable.domain.errors import AggregationUpdateFailed
from taggable.domain.models.ContextModel import TaggableContext
from taggable.domain.models.MutationModel import TagChange
from taggable.domain.registry import ContextRegistry
from taggable.domain.usecase.ports import AggregationRepo

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BatchAggregator:
    """
    Full recompute strategy.

    The stored counters for a context are replaced by a group-and-sum pass
    over the whole document collection; write history is irrelevant.
    """

    aggregation_repo: AggregationRepo

    async def recompute(self, context: TaggableContext) -> float:
        started = time.perf_counter()
        await self.aggregation_repo.recompute(context.name)
        elapsed = time.perf_counter() - started
        logger.info("Recomputed tag weights for %s in %.3fs", context.name, elapsed)
        return elapsed

    async def apply(self, context: TaggableContext, change: TagChange) -> bool:
        if change.applied:
            logger.debug("Change for %s already aggregated; skipping", change.context)
            return False
        change.applied = True
        await self.recompute(context)
        return True


@dataclass(slots=True)
class RecalculateTagWeights:
    """Force a batch recompute whatever strategy the context uses."""

    registry: ContextRegistry
    aggregation_repo: AggregationRepo

    async def execute(self, context: str | TaggableContext) -> float:
        ctx = self.registry.get(context)
        try:
            return await BatchAggregator(self.aggregation_repo).recompute(ctx)
        except Exception as exc:
            logger.exception("Recompute of tag weights for %s failed", ctx.name)
            raise AggregationUpdateFailed([ctx.name], errors=[exc]) from exc

    async def execute_all(self) -> dict[str, float]:
        batch = BatchAggregator(self.aggregation_repo)
        timings: dict[str, float] = {}
        failed: list[str] = []
        errors: list[BaseException] = []
        for ctx in self.registry.contexts():
            if not ctx.aggregates:
                continue
            try:
                timings[ctx.name] = await batch.recompute(ctx)
            except Exception as exc:
                logger.exception("Recompute of tag weights for %s failed", ctx.name)
                failed.append(ctx.name)
                errors.append(exc)

        if failed:
            raise AggregationUpdateFailed(failed, errors=errors) from errors[0]
        return timings
