from __future__ import annotations

import logging
from typing import Any, List

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING

from taggable.domain.models.AggregationModel import TagWeight
from taggable.domain.registry import ContextRegistry
from taggable.infra.mongo.pipelines import (
    build_autocomplete_pipeline,
    build_recompute_pipeline,
    build_weights_pipeline,
)
from taggable.infra.serialization import to_bson

logger = logging.getLogger(__name__)


class TagAggregationRepoMongo:
    """Counter collections named ``<collection>_<context>_aggregation``."""

    def __init__(self, db: AsyncIOMotorDatabase[Any], registry: ContextRegistry) -> None:
        self._db = db
        self._registry = registry

    def collection_for(self, context: str):
        return self._db[self._registry.aggregation_collection(context)]

    def documents(self):
        return self._db[self._registry.collection]

    async def ensure_indexes(self) -> None:
        for ctx in self._registry.contexts():
            if not ctx.aggregates:
                continue
            await self.collection_for(ctx.name).create_index(
                [("tag", ASCENDING), ("group", ASCENDING)],
                name="ux_tag_group",
                unique=True,
            )

    async def increment(self, context: str, tag: str, delta: int, *, group: Any = None) -> None:
        # single upsert-$inc; a missing record counts as zero
        await self.collection_for(context).update_one(
            {"tag": tag, "group": to_bson(group)},
            {"$inc": {"value": int(delta)}},
            upsert=True,
        )

    async def recompute(self, context: str) -> None:
        ctx = self._registry.get(context)
        target = self._registry.aggregation_collection(ctx.name)
        pipeline = build_recompute_pipeline(ctx, target)
        # $out yields no documents; draining the cursor runs the pipeline
        await self.documents().aggregate(pipeline).to_list(length=None)
        logger.debug("Replaced %s from %s", target, self._registry.collection)

    async def weights(self, context: str, *, group: Any = None) -> List[TagWeight]:
        cursor = self.collection_for(context).aggregate(
            build_weights_pipeline(to_bson(group))
        )
        docs = await cursor.to_list(length=None)
        return [TagWeight.from_document(doc) for doc in docs]

    async def autocomplete(
        self,
        context: str,
        prefix: str,
        *,
        sort_by_count: bool = False,
        limit: int = 0,
        group: Any = None,
    ) -> List[TagWeight]:
        pipeline = build_autocomplete_pipeline(
            prefix, sort_by_count=sort_by_count, limit=limit, group=to_bson(group)
        )
        docs = await self.collection_for(context).aggregate(pipeline).to_list(length=None)
        return [TagWeight.from_document(doc) for doc in docs]
