"""Shared test fixtures."""

import pytest

from tests.unit.fakes import FakeStorage
from treee.models.node import Node
from treee.store import OutlineStore


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def store(storage: FakeStorage) -> OutlineStore:
    """Return a store on empty in-memory storage."""
    return OutlineStore(storage)


@pytest.fixture
def trip_store(store: OutlineStore) -> OutlineStore:
    """Return a store whose main tree holds a small trip outline.

    Trip (0)
        Flights (1)
            Compare prices (2)
        Hotel (1)
    Groceries (0)
    """
    store.trees[0].nodes = [
        Node(id="trip", content="Trip", level=0),
        Node(id="flights", content="Flights", level=1),
        Node(id="prices", content="Compare prices", level=2, is_task=True),
        Node(id="hotel", content="Hotel", level=1, note="near the station"),
        Node(id="groceries", content="Groceries", level=0),
    ]
    store.save_trees()
    return store
