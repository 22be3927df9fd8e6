from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, ReturnDocument

from taggable.domain.models.DocumentModel import TaggedDocument
from taggable.domain.models.MutationModel import DocumentMutation, MutationKind, TagChange
from taggable.domain.models.TagSetModel import TagSet, join_tags, normalize_tags
from taggable.domain.registry import ContextRegistry
from taggable.domain.usecase.aggregation.sync import TagAggregationSync
from taggable.infra.serialization import from_bson_value, to_bson

logger = logging.getLogger(__name__)


class TaggedDocumentsRepoMongo:
    """
    Document collection whose writes feed the tag counters.

    Every write normalizes its tag input first, commits the document, then
    hands an explicit before/after mutation to the sync step. A failed sync
    raises ``AggregationUpdateFailed`` but the document stays written.
    """

    def __init__(
        self,
        db: AsyncIOMotorDatabase[Any],
        registry: ContextRegistry,
        sync: Optional[TagAggregationSync] = None,
    ) -> None:
        self._registry = registry
        self._collection = db[registry.collection]
        self._sync = sync

    async def ensure_indexes(self) -> None:
        for ctx in self._registry.contexts():
            await self._collection.create_index(
                [(ctx.field, ASCENDING)], name=f"ix_{ctx.field}"
            )

    # ---------- mapping helpers ----------

    def _normalize(self, tags: Mapping[str, Any] | None) -> Dict[str, TagSet]:
        normalized: Dict[str, TagSet] = {}
        for name, raw in (tags or {}).items():
            ctx = self._registry.get(name)
            normalized[ctx.name] = normalize_tags(raw, ctx.separator)
        return normalized

    def _encode(self, tags: Mapping[str, TagSet], fields: Mapping[str, Any]) -> Dict[str, Any]:
        reserved = {ctx.field for ctx in self._registry.contexts()} & set(fields)
        if reserved:
            raise ValueError(f"Tag storage fields must be written through tags=: {sorted(reserved)}")
        payload: Dict[str, Any] = {k: to_bson(v) for k, v in fields.items() if k != "_id"}
        for name, tag_set in tags.items():
            payload[self._registry.get(name).field] = list(tag_set)
        return payload

    def _decode(self, doc: Mapping[str, Any]) -> TaggedDocument:
        storage = {ctx.field: ctx.name for ctx in self._registry.contexts()}
        tags: Dict[str, TagSet] = {}
        fields: Dict[str, Any] = {}
        for key, value in doc.items():
            if key == "_id":
                continue
            if key in storage:
                tags[storage[key]] = list(value or [])
            else:
                fields[key] = from_bson_value(value)
        return TaggedDocument(id=doc["_id"], tags=tags, fields=fields)

    def _group_value(self, context: str, doc: Mapping[str, Any] | None) -> Any:
        group_by = self._registry.get(context).group_by
        if group_by is None or doc is None:
            return None
        return doc.get(group_by)

    # ---------- repo API ----------

    async def get(self, doc_id: Any) -> Optional[TaggedDocument]:
        doc = await self._collection.find_one({"_id": doc_id})
        return self._decode(doc) if doc else None

    async def create(
        self,
        doc_id: Any,
        *,
        tags: Mapping[str, Any] | None = None,
        fields: Mapping[str, Any] | None = None,
    ) -> TaggedDocument:
        normalized = self._normalize(tags)
        for ctx in self._registry.contexts():
            normalized.setdefault(ctx.name, ctx.default_tags())

        payload = self._encode(normalized, fields or {})
        payload["_id"] = doc_id
        await self._collection.insert_one(payload)
        logger.debug("Created %s document %r", self._registry.collection, doc_id)

        mutation = DocumentMutation(
            kind=MutationKind.CREATED,
            document_id=doc_id,
            changes=[
                TagChange(
                    context=name,
                    previous=None,
                    current=tag_set,
                    current_group=self._group_value(name, payload),
                )
                for name, tag_set in normalized.items()
            ],
        )
        await self._after_commit(mutation)
        return self._decode(payload)

    async def update(
        self,
        doc_id: Any,
        *,
        tags: Mapping[str, Any] | None = None,
        fields: Mapping[str, Any] | None = None,
    ) -> Optional[TaggedDocument]:
        normalized = self._normalize(tags)
        payload = self._encode(normalized, fields or {})
        if not payload:
            return await self.get(doc_id)

        before = await self._collection.find_one_and_update(
            {"_id": doc_id},
            {"$set": payload},
            return_document=ReturnDocument.BEFORE,
        )
        if before is None:
            return None
        after = {**before, **payload}

        changes: List[TagChange] = []
        for ctx in self._registry.contexts():
            touches_tags = ctx.name in normalized
            touches_group = ctx.group_by is not None and ctx.group_by in payload
            if not (touches_tags or touches_group):
                continue
            changes.append(
                TagChange(
                    context=ctx.name,
                    previous=list(before.get(ctx.field) or []),
                    current=list(after.get(ctx.field) or []),
                    previous_group=self._group_value(ctx.name, before),
                    current_group=self._group_value(ctx.name, after),
                )
            )
        mutation = DocumentMutation(kind=MutationKind.UPDATED, document_id=doc_id, changes=changes)
        if mutation.changed_contexts():
            await self._after_commit(mutation)
        return self._decode(after)

    async def delete(self, doc_id: Any) -> bool:
        doc = await self._collection.find_one_and_delete({"_id": doc_id})
        if doc is None:
            return False
        logger.debug("Deleted %s document %r", self._registry.collection, doc_id)

        mutation = DocumentMutation(
            kind=MutationKind.DELETED,
            document_id=doc_id,
            changes=[
                TagChange(
                    context=ctx.name,
                    previous=list(doc.get(ctx.field) or []),
                    current=[],
                    previous_group=self._group_value(ctx.name, doc),
                    current_group=self._group_value(ctx.name, doc),
                )
                for ctx in self._registry.contexts()
            ],
        )
        if self._sync is not None:
            await self._sync.on_deleted(mutation)
        return True

    async def tagged_with(self, context: str, tags: Sequence[str]) -> List[TaggedDocument]:
        ctx = self._registry.get(context)
        wanted = normalize_tags(list(tags), ctx.separator)
        if not wanted:
            return []
        cursor = self._collection.find({ctx.field: {"$all": wanted}}).sort("_id", ASCENDING)
        docs = await cursor.to_list(length=None)
        return [self._decode(doc) for doc in docs]

    def tag_string(self, document: TaggedDocument, context: str) -> str:
        ctx = self._registry.get(context)
        return join_tags(document.tags_for(ctx.name), ctx.separator)

    def display(self, document: TaggedDocument) -> Dict[str, str]:
        return {
            ctx.display_name: self.tag_string(document, ctx.name)
            for ctx in self._registry.contexts()
        }

    async def _after_commit(self, mutation: DocumentMutation) -> None:
        if self._sync is not None:
            await self._sync.on_saved(mutation)
