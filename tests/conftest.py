"""Shared fixtures."""

import pytest

from config import RULES_DIR
from engine.rulebook import load_rulebook


@pytest.fixture(scope="session")
def rules():
    """The SRD rulebook loaded from the shipped JSON tables."""
    return load_rulebook(RULES_DIR)
