"""Pytest fixtures for MedTerm tests."""

from datetime import datetime, timedelta, timezone

import pytest

from medterm.config import MedTermConfig
from medterm.ledger import VoteLedger
from medterm.models.suggestions import ExternalSuggestions
from medterm.paths import DataPaths
from medterm.store import FileStore, MemoryStore


class TickingClock:
    """Deterministic clock advancing one second per call."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2026, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.now = self.now + timedelta(seconds=1)
        return self.now


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def memory_store():
    """Empty in-memory store."""
    return MemoryStore()


@pytest.fixture
def ledger(memory_store, clock):
    """Vote ledger over an in-memory store with a deterministic clock."""
    return VoteLedger(memory_store, clock=clock)


@pytest.fixture
def data_dir(tmp_path):
    """Create a temporary data directory for testing.
    
    Args:
        tmp_path: pytest's built-in temporary directory fixture
        
    Returns:
        Path to temporary data directory
    """
    root = tmp_path / "medterm_data"
    root.mkdir()
    return root


@pytest.fixture
def file_store(data_dir):
    """FileStore rooted at the temporary data directory."""
    return FileStore(DataPaths.from_config(MedTermConfig(data_dir=data_dir)))


@pytest.fixture
def edema_suggestions():
    """Provider response with all three slots filled."""
    return ExternalSuggestions.from_payload({
        "clinical": {"term": "Edema", "context": "Swelling"},
        "literal": {"term": "Swelling", "context": "Fluid buildup"},
        "descriptive": {"term": "Water retention", "context": "..."},
    })
