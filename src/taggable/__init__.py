"""Tag fields with per-context usage counters kept next to MongoDB documents."""

from taggable.domain.errors import (
    AggregationUpdateFailed,
    ContextAlreadyRegistered,
    InvalidTagFormat,
    StrategyMissing,
    TaggableError,
    UnknownContext,
)
from taggable.domain.models.ContextModel import AggregationStrategy, TaggableContext
from taggable.domain.models.TagSetModel import join_tags, normalize_tags
from taggable.domain.registry import ContextRegistry

__version__ = "0.4.0"

__all__ = [
    "AggregationStrategy",
    "AggregationUpdateFailed",
    "ContextAlreadyRegistered",
    "ContextRegistry",
    "InvalidTagFormat",
    "StrategyMissing",
    "TaggableContext",
    "TaggableError",
    "UnknownContext",
    "join_tags",
    "normalize_tags",
]
