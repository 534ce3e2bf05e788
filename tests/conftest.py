"""
Shared pytest fixtures for the storefront data layer tests.

These fixtures provide a freshly seeded store per test, the data layer built
on top of it, and the well-known ids from data/products.json.
"""

import pytest
from pathlib import Path

from commerce.remote_store import InMemoryStore
from data_layer.services import Services, build_services


@pytest.fixture
def data_dir() -> Path:
    """Path to the seed fixture directory."""
    return Path(__file__).parent.parent / "data"


@pytest.fixture
def store(data_dir: Path) -> InMemoryStore:
    """
    Fresh InMemoryStore for each test.

    Uses the real seed fixtures but creates a new instance
    so tests don't interfere with each other.
    """
    return InMemoryStore(data_dir=data_dir)


@pytest.fixture
def services(store: InMemoryStore) -> Services:
    """The full data layer wired on the test store."""
    return build_services(store)


class Recorder:
    """Observer that remembers every payload it receives."""

    def __init__(self):
        self.payloads = []

    def update(self, payload) -> None:
        self.payloads.append(payload)

    @property
    def last(self):
        return self.payloads[-1]


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def other_recorder() -> Recorder:
    return Recorder()


# =============================================================================
# Well-known ids
# =============================================================================

@pytest.fixture
def user_id() -> str:
    return "user-001"


@pytest.fixture
def other_user_id() -> str:
    return "user-002"


@pytest.fixture
def coffee_id() -> str:
    """Arabica Coffee Beans 1kg, 24.90, barcode 7891000100103."""
    return "prod-001"


@pytest.fixture
def milk_id() -> str:
    """Whole Milk 1L, 4.20, barcode 7891000300305."""
    return "prod-003"


@pytest.fixture
def bread_id() -> str:
    """Sourdough Bread, 12.00."""
    return "prod-005"
