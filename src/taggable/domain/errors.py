from __future__ import annotations

from typing import Any, Sequence


class TaggableError(Exception):
    """Base class for every error raised by the tagging engine."""


class StrategyMissing(TaggableError):
    """Raised when weights are requested for a context that aggregates nothing."""

    def __init__(self, context: str):
        super().__init__(f"No aggregation strategy configured for context '{context}'")
        self.context = context


class InvalidTagFormat(TaggableError, TypeError):
    """Raised when raw tag input is neither a string nor a list of strings."""

    def __init__(self, value: Any, reason: str | None = None):
        detail = reason or f"expected a string or a list of strings, got {type(value).__name__}"
        super().__init__(f"Invalid tag input: {detail}")
        self.value = value


class UnknownContext(TaggableError, KeyError):
    """Raised when a context name was never registered."""

    def __init__(self, context: str):
        super().__init__(context)
        self.context = context

    def __str__(self) -> str:
        return f"Unknown tag context '{self.context}'"


class ContextAlreadyRegistered(TaggableError):
    def __init__(self, context: str, reason: str = "already registered"):
        super().__init__(f"Tag context '{context}' {reason}")
        self.context = context


class AggregationUpdateFailed(TaggableError):
    """
    Raised after a document write committed but its aggregation step did not.

    The document mutation is not rolled back; the counters for ``contexts``
    stay stale until the next successful recompute.
    """

    def __init__(
        self,
        contexts: Sequence[str],
        *,
        document_id: Any = None,
        errors: Sequence[BaseException] = (),
    ):
        names = ", ".join(contexts)
        target = f" for document {document_id!r}" if document_id is not None else ""
        super().__init__(f"Tag aggregation update failed{target} in context(s): {names}")
        self.contexts = list(contexts)
        self.document_id = document_id
        self.errors = list(errors)
