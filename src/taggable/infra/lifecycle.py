from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from taggable.domain.registry import ContextRegistry
from taggable.domain.usecase.aggregation.sync import TagAggregationSync
from taggable.domain.usecase.tags.queries import TagQueries
from taggable.infra.db import get_db
from taggable.infra.mongo.aggregations_repo import TagAggregationRepoMongo
from taggable.infra.mongo.documents_repo import TaggedDocumentsRepoMongo


@dataclass(slots=True)
class TaggableCollection:
    registry: ContextRegistry
    documents: TaggedDocumentsRepoMongo
    aggregations: TagAggregationRepoMongo
    sync: TagAggregationSync
    queries: TagQueries


def build_collection(
    registry: ContextRegistry, db: Optional[AsyncIOMotorDatabase[Any]] = None
) -> TaggableCollection:
    database = db if db is not None else get_db()
    aggregations = TagAggregationRepoMongo(database, registry)
    sync = TagAggregationSync(registry, aggregations)
    documents = TaggedDocumentsRepoMongo(database, registry, sync)
    return TaggableCollection(
        registry=registry,
        documents=documents,
        aggregations=aggregations,
        sync=sync,
        queries=TagQueries(registry, aggregations, documents),
    )


async def open_collection(
    registry: ContextRegistry, db: Optional[AsyncIOMotorDatabase[Any]] = None
) -> TaggableCollection:
    collection = build_collection(registry, db)
    await collection.documents.ensure_indexes()
    await collection.aggregations.ensure_indexes()
    return collection

