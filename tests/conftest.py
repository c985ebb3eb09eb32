"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest


@pytest.fixture
def sample_document() -> dict:
    """Nested document touching every native kind."""
    return {
        "compact": True,
        "schema": 0,
        "name": "sensor-7",
        "ratio": 0.1,
        "blob": b"\x00\x01\x02",
        "tags": ["a", "b", None],
        "nested": {"depth": -4096, "ids": [1, 200, 70000, 2**40]},
    }


@pytest.fixture
def sample_stream() -> bytes:
    """Three concatenated top-level values: 5, "hi", [1, 2]."""
    return b"\x05\xa2hi\x92\x01\x02"
