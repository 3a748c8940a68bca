"""Shared test fixtures for Time Mentor tests.

This module provides common fixtures used across all test modules:
- Database isolation with temporary files
- Standard usage snapshots (zero, focused hour, distracted hour)

Usage:
    def test_something(temp_db):
        # temp_db is automatically cleaned up after the test
        ...
"""

import os
import tempfile
from collections.abc import Generator
from datetime import datetime
from pathlib import Path

import pytest


# ─────────────────────────────────────────────────────────────────────────────
# Constants
# ─────────────────────────────────────────────────────────────────────────────

HOUR_MS = 3_600_000


# ─────────────────────────────────────────────────────────────────────────────
# Database Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def temp_db() -> Generator[Path, None, None]:
    """Create a temporary database file for testing.

    The database file is automatically deleted after the test completes.

    Yields:
        Path to the temporary database file
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    yield db_path

    # Cleanup
    if db_path.exists():
        os.unlink(db_path)


@pytest.fixture
def fixed_now() -> datetime:
    """Reference time for queue tests."""
    return datetime(2026, 1, 5, 9, 0, 0)


# ─────────────────────────────────────────────────────────────────────────────
# Snapshot Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def zero_snapshot() -> dict:
    """Snapshot with every counter at zero."""
    return {
        "productiveMs": 0,
        "distractingMs": 0,
        "otherMs": 0,
        "tabSwitches": 0,
        "typingKeystrokes": 0,
        "idleMs": 0,
        "samples": [],
    }


@pytest.fixture
def focused_hour_snapshot(zero_snapshot: dict) -> dict:
    """One hour on productive sites, nothing else."""
    return {**zero_snapshot, "productiveMs": HOUR_MS}


@pytest.fixture
def distracted_hour_snapshot(zero_snapshot: dict) -> dict:
    """One hour on distracting sites with heavy tab switching (~6.67/min)."""
    return {**zero_snapshot, "distractingMs": HOUR_MS, "tabSwitches": 400}
