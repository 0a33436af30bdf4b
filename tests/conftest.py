"""Pytest configuration and fixtures."""

import os
from pathlib import Path

import pytest

from factories import make_issue

# Point the app at the repository's analyzer settings
os.environ["ANALYZER_CONFIG_PATH"] = str(Path(__file__).parent.parent / "config" / "analyzer.yaml")


@pytest.fixture
def scenario_a():
    """A root with two dependents at the same depth."""
    return [
        make_issue("A", effort=2, priority="P1"),
        make_issue("B", deps=["A"], effort=3, priority="P0"),
        make_issue("C", deps=["A"], effort=1, priority="P2"),
    ]


@pytest.fixture
def two_node_cycle():
    """X and Y depend on each other."""
    return [
        make_issue("X", deps=["Y"]),
        make_issue("Y", deps=["X"]),
    ]
