from __future__ import annotations

import logging
from dataclasses import dataclass

from taggable.domain.errors import AggregationUpdateFailed
from taggable.domain.models.ContextModel import AggregationStrategy
from taggable.domain.models.MutationModel import DocumentMutation, MutationKind
from taggable.domain.registry import ContextRegistry
from taggable.domain.usecase.aggregation.batch import BatchAggregator
from taggable.domain.usecase.aggregation.realtime import IncrementalAggregator
from taggable.domain.usecase.ports import AggregationRepo

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TagAggregationSync:
    """
    Post-commit step of every document write.

    The document store calls ``on_saved`` / ``on_deleted`` after its own
    commit. Each context is routed to the aggregator its strategy names;
    all contexts are attempted before any failure is reported.
    """

    registry: ContextRegistry
    aggregation_repo: AggregationRepo

    async def on_saved(self, mutation: DocumentMutation) -> None:
        await self._dispatch(mutation)

    async def on_deleted(self, mutation: DocumentMutation) -> None:
        if mutation.kind is not MutationKind.DELETED:
            raise ValueError(f"on_deleted expects a deleted mutation, got {mutation.kind.value}")
        await self._dispatch(mutation)

    async def _dispatch(self, mutation: DocumentMutation) -> None:
        batch = BatchAggregator(self.aggregation_repo)
        incremental = IncrementalAggregator(self.aggregation_repo)

        failed: list[str] = []
        errors: list[BaseException] = []
        for name in mutation.changed_contexts():
            ctx = self.registry.get(name)
            change = mutation.change_for(name)
            if change is None or ctx.strategy is None:
                continue
            try:
                if ctx.strategy is AggregationStrategy.BATCH:
                    await batch.apply(ctx, change)
                else:
                    await incremental.apply(ctx, change)
            except Exception as exc:
                logger.exception(
                    "Tag aggregation for %s failed after %s of document %r",
                    name,
                    mutation.kind.value,
                    mutation.document_id,
                )
                failed.append(name)
                errors.append(exc)

        if failed:
            err = AggregationUpdateFailed(failed, document_id=mutation.document_id, errors=errors)
            raise err from errors[0]
