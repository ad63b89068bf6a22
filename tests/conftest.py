from __future__ import annotations

import pytest

from campustwin.state.store import EntityStore
from fakes import FakeRoutingProvider


@pytest.fixture
def store() -> EntityStore:
    return EntityStore.with_demo_data()


@pytest.fixture
def provider() -> FakeRoutingProvider:
    return FakeRoutingProvider()
