from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from taggable.domain.models.TagSetModel import DEFAULT_SEPARATOR, normalize_tags

__all__ = [
    "AggregationStrategy",
    "ContextOptions",
    "TaggableContext",
    "aggregation_collection_name",
]


class AggregationStrategy(str, Enum):
    BATCH = "batch"
    REAL_TIME = "real_time"

    @classmethod
    def parse(cls, raw: "AggregationStrategy | str | None") -> Optional["AggregationStrategy"]:
        if raw is None or isinstance(raw, AggregationStrategy):
            return raw
        key = str(raw).strip().lower().replace("-", "_")
        aliases = {
            "batch": cls.BATCH,
            "map_reduce": cls.BATCH,
            "mapreduce": cls.BATCH,
            "real_time": cls.REAL_TIME,
            "realtime": cls.REAL_TIME,
        }
        if key not in aliases:
            raise ValueError(f"Unknown aggregation strategy: {raw!r}")
        return aliases[key]


class ContextOptions(BaseModel):
    """Raw per-context options as they appear in configuration."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    separator: Optional[str] = DEFAULT_SEPARATOR
    field: Optional[str] = None
    alias: Optional[str] = Field(default=None, alias="as")
    group_by: Optional[str] = Field(default=None, alias="groupBy")
    strategy: Optional[AggregationStrategy] = None
    default: Any = None

    @field_validator("separator")
    @classmethod
    def _separator_not_empty(cls, value: Optional[str]) -> str:
        if value is None:
            return DEFAULT_SEPARATOR
        if value == "":
            raise ValueError("separator cannot be empty")
        return value

    @field_validator("strategy", mode="before")
    @classmethod
    def _parse_strategy(cls, value: Any) -> Optional[AggregationStrategy]:
        return AggregationStrategy.parse(value)


def aggregation_collection_name(collection: str, context: str) -> str:
    return f"{collection}_{context}_aggregation"


@dataclass(frozen=True, slots=True)
class TaggableContext:
    """One tagging dimension of a document collection."""

    name: str
    separator: str = DEFAULT_SEPARATOR
    field: str = ""
    alias: Optional[str] = None
    group_by: Optional[str] = None
    strategy: Optional[AggregationStrategy] = None
    default: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("context name cannot be empty")
        if not self.field:
            object.__setattr__(self, "field", self.name)
        if not self.separator:
            raise ValueError("separator cannot be empty")

    @classmethod
    def from_options(cls, name: str, options: ContextOptions | None = None, **raw: Any) -> "TaggableContext":
        opts = options if options is not None else ContextOptions.model_validate(raw)
        return cls(
            name=name,
            separator=opts.separator or DEFAULT_SEPARATOR,
            field=opts.field or name,
            alias=opts.alias,
            group_by=opts.group_by,
            strategy=opts.strategy,
            default=tuple(normalize_tags(opts.default, opts.separator or DEFAULT_SEPARATOR)),
        )

    @property
    def display_name(self) -> str:
        return self.alias or self.name

    @property
    def is_grouped(self) -> bool:
        return self.group_by is not None

    @property
    def aggregates(self) -> bool:
        return self.strategy is not None

    def with_separator(self, value: str | None) -> "TaggableContext":
        return replace(self, separator=DEFAULT_SEPARATOR if value is None else str(value))

    def default_tags(self) -> list[str]:
        return list(self.default)
