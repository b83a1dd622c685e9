"""Shared fixtures for tests."""

import pytest
from tree_sitter import Parser
from tree_sitter_language_pack import get_parser

from reorder_advisor.config import AdvisorConfig
from reorder_advisor.core.advisor import AdvisorService
from reorder_advisor.store.memory import InMemoryJobStore

# ---------------------------------------------------------------------------
# Auto-marker: every test in this suite runs without external services
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def python_parser() -> Parser:
    """Return a tree-sitter parser for Python."""
    return get_parser("python")


@pytest.fixture
def job_store() -> InMemoryJobStore:
    return InMemoryJobStore()


@pytest.fixture
def advisor_service(job_store: InMemoryJobStore) -> AdvisorService:
    return AdvisorService(job_store, AdvisorConfig(debounce_seconds=0.01))
