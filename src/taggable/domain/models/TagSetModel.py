from __future__ import annotations

from typing import Any, Iterable, List, Sequence, Tuple

from taggable.domain.errors import InvalidTagFormat

__all__ = [
    "DEFAULT_SEPARATOR",
    "TagSet",
    "join_tags",
    "normalize_tags",
    "tag_diff",
]

DEFAULT_SEPARATOR = " "

TagSet = List[str]


def _split(raw: str, separator: str) -> list[str]:
    if not separator:
        return [raw]
    return raw.split(separator)


def _ordered_unique(items: Iterable[str]) -> TagSet:
    seen: set[str] = set()
    ordered: TagSet = []
    for item in items:
        if item in seen:
            continue
        seen.add(item)
        ordered.append(item)
    return ordered


def normalize_tags(raw: Any, separator: str = DEFAULT_SEPARATOR) -> TagSet:
    """
    Turn raw tag input into a canonical tag list.

    Strings are split on ``separator``; lists and tuples are taken as-is, so a
    list entry containing the separator stays one tag.
    ``None`` entries are dropped, entries are stripped, blanks removed and
    duplicates collapsed keeping the first occurrence. Order is preserved,
    never sorted.
    """
    if raw is None:
        return []

    if isinstance(raw, str):
        entries: Sequence[Any] = _split(raw, separator)
    elif isinstance(raw, (list, tuple)):
        entries = raw
    else:
        raise InvalidTagFormat(raw)

    cleaned: list[str] = []
    for entry in entries:
        if entry is None:
            continue
        if not isinstance(entry, str):
            raise InvalidTagFormat(
                raw, f"tag entries must be strings, got {type(entry).__name__}"
            )
        stripped = entry.strip()
        if stripped:
            cleaned.append(stripped)
    return _ordered_unique(cleaned)


def join_tags(tags: Iterable[str | None] | None, separator: str = DEFAULT_SEPARATOR) -> str:
    if not tags:
        return ""
    return separator.join(_ordered_unique(t for t in tags if t is not None))


def tag_diff(
    previous: Sequence[str] | None, current: Sequence[str] | None
) -> Tuple[TagSet, TagSet]:
    """Return ``(removed, added)`` between two tag sets; unchanged tags are omitted."""
    before = list(previous or [])
    after = list(current or [])
    before_keys = set(before)
    after_keys = set(after)
    removed = [tag for tag in _ordered_unique(before) if tag not in after_keys]
    added = [tag for tag in _ordered_unique(after) if tag not in before_keys]
    return removed, added
