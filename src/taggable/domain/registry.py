from __future__ import annotations

import logging
from typing import Any, Iterator, Mapping

from taggable.domain.errors import ContextAlreadyRegistered, UnknownContext
from taggable.domain.models.ContextModel import (
    ContextOptions,
    TaggableContext,
    aggregation_collection_name,
)

logger = logging.getLogger(__name__)


class ContextRegistry:
    """
    Holds the tag contexts declared for one document collection.

    Records are immutable; changing a separator swaps the stored record so
    callers holding the old one keep a consistent snapshot.
    """

    def __init__(self, collection: str, contexts: Mapping[str, Mapping[str, Any]] | None = None):
        if not collection:
            raise ValueError("collection name is required")
        self.collection = collection
        self._contexts: dict[str, TaggableContext] = {}
        for name, options in (contexts or {}).items():
            self.register(name, **options)

    def register(self, name: str, **options: Any) -> TaggableContext:
        if name in self._contexts:
            raise ContextAlreadyRegistered(name)
        context = TaggableContext.from_options(name, ContextOptions.model_validate(options))
        for existing in self._contexts.values():
            if existing.field == context.field:
                raise ContextAlreadyRegistered(
                    name, f"reuses storage field '{context.field}' of '{existing.name}'"
                )
        self._contexts[name] = context
        logger.debug(
            "Registered tag context %s on %s (field=%s, strategy=%s, group_by=%s)",
            name,
            self.collection,
            context.field,
            context.strategy.value if context.strategy else None,
            context.group_by,
        )
        return context

    def get(self, name: str | TaggableContext) -> TaggableContext:
        if isinstance(name, TaggableContext):
            name = name.name
        try:
            return self._contexts[name]
        except KeyError:
            raise UnknownContext(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._contexts

    def __iter__(self) -> Iterator[TaggableContext]:
        return iter(list(self._contexts.values()))

    def __len__(self) -> int:
        return len(self._contexts)

    def names(self) -> list[str]:
        return list(self._contexts)

    def contexts(self) -> list[TaggableContext]:
        return list(self._contexts.values())

    def separator(self, name: str) -> str:
        return self.get(name).separator

    def set_separator(self, name: str, value: str | None) -> TaggableContext:
        updated = self.get(name).with_separator(value)
        self._contexts[updated.name] = updated
        logger.info("Tag separator for %s.%s set to %r", self.collection, name, updated.separator)
        return updated

    def aggregation_collection(self, name: str) -> str:
        return aggregation_collection_name(self.collection, self.get(name).name)
