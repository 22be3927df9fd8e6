from __future__ import annotations

import pytest

from fakes import FakeDatabase
from taggable.domain.registry import ContextRegistry
from taggable.infra.lifecycle import TaggableCollection, build_collection


@pytest.fixture
def fake_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def registry() -> ContextRegistry:
    return ContextRegistry(
        "articles",
        {
            "tags": {"strategy": "real_time"},
            "artists": {"strategy": "batch", "separator": ","},
            "albums": {"default": ["new"]},
            "keywords": {"strategy": "real_time", "groupBy": "owner"},
        },
    )


@pytest.fixture
def tagged(fake_db: FakeDatabase, registry: ContextRegistry) -> TaggableCollection:
    return build_collection(registry, fake_db)
