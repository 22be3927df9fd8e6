from __future__ import annotations

from typing import Any

from taggable.domain.errors import StrategyMissing
from taggable.domain.models.ContextModel import TaggableContext
from taggable.domain.registry import ContextRegistry


def ensure_strategy(registry: ContextRegistry, context: str | TaggableContext) -> TaggableContext:
    """Return the context, refusing ones that keep no counters."""

    ctx = registry.get(context)
    if not ctx.aggregates:
        raise StrategyMissing(ctx.name)
    return ctx


def ensure_group_allowed(ctx: TaggableContext, group: Any) -> None:
    if group is not None and not ctx.is_grouped:
        raise ValueError(f"Tag context '{ctx.name}' is not grouped; cannot filter by group")
