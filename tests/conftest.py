"""Shared fixtures for planner tests."""
import pytest
from datetime import date

from voyager.models.store import InMemoryPersistence, PlanStore
from voyager.services.planner import create_plan


@pytest.fixture
def plan():
    """A three-day Kyoto trip with no activities."""
    return create_plan("Kyoto", date(2026, 4, 1), date(2026, 4, 3))


@pytest.fixture
def persistence():
    return InMemoryPersistence()


@pytest.fixture
def store(plan, persistence):
    """A store holding the Kyoto trip."""
    store = PlanStore(persistence)
    store.replace(plan)
    return store
