"""Shared pytest fixtures for cargo-harness tests."""

import shutil
from pathlib import Path

import pytest

from cargo_harness.core import config

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def fresh_config():
    """Re-read CARGO / CARGO_HARNESS_TARGET for every test."""
    config.cache_clear()
    yield
    config.cache_clear()


@pytest.fixture
def observed():
    """Observer that records every message it is offered."""
    messages = []

    def observer(message):
        messages.append(message)

    observer.messages = messages
    return observer


@pytest.fixture
def crate(tmp_path):
    """Copy a fixture crate into tmp_path; returns a factory keyed by name."""

    def _copy(name: str) -> Path:
        dest = tmp_path / name
        shutil.copytree(FIXTURES / name, dest)
        return dest

    return _copy
