"""Pytest configuration and fixtures for unit tests."""

import pytest

from habitquest.domain.character import Character
from tests.unit.mocks import FIXED_NOW, InMemoryProgressionStore


@pytest.fixture
def fixed_now():
    """A fixed current instant so date math is reproducible."""
    return FIXED_NOW


@pytest.fixture
def in_memory_store():
    """Provides a fresh InMemoryProgressionStore for each test."""
    return InMemoryProgressionStore()


@pytest.fixture
def character(in_memory_store):
    """A level 1 character stored for user_1."""
    return in_memory_store.add_character(Character(id="user_1", username="alice"))
