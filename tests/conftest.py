"""Shared fixtures for the test suite."""

import json
from pathlib import Path

import pytest

from repo_norms.config import FieldConfig
from repo_norms.logging.context import clear_log_context

FIXTURES_DIR = Path(__file__).parent / "fixtures"
SAMPLE_SNAPSHOT = FIXTURES_DIR / "sample_repos.json"


@pytest.fixture(autouse=True)
def reset_log_context():
    """Keep logging context from leaking between tests."""
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture
def sample_records():
    """Raw repository records from the bundled snapshot (archived repo included)."""
    with open(SAMPLE_SNAPSHOT, "r", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def active_records(sample_records):
    """Snapshot records without the archived repository."""
    return [record for record in sample_records if not record["archived"]]


@pytest.fixture
def default_fields():
    """The standard field configuration."""
    return FieldConfig.default()


@pytest.fixture
def no_github_env(monkeypatch):
    """Remove GitHub and log-level variables from the environment."""
    for name in ("GITHUB_TOKEN", "GITHUB_ORG", "LOG_LEVEL", "GITHUB_API_URL"):
        monkeypatch.delenv(name, raising=False)
