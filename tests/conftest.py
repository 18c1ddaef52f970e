"""Pytest configuration and shared fixtures for slab optimizer tests."""

from __future__ import annotations

from typing import Any

import pytest

from stonecut.domain.value_objects import Piece, SlabSpec


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "integration: end-to-end tests running the full optimizer"
    )
    config.addinivalue_line("markers", "slow: tests that take a long time to run")


# =============================================================================
# Shared fixtures
# =============================================================================


@pytest.fixture
def jumbo_slab() -> SlabSpec:
    """Standard 3200x1600 engineered quartz slab with a 5mm kerf."""
    return SlabSpec(
        material_id="quartz",
        material_name="Quartz",
        width=3200.0,
        height=1600.0,
        kerf_width=5.0,
    )


@pytest.fixture
def make_piece():
    """Factory for rectangular pieces with sensible defaults."""

    def _make(piece_id: str, width: float, height: float, **kwargs: Any) -> Piece:
        kwargs.setdefault("material_id", "quartz")
        return Piece(id=piece_id, width=width, height=height, **kwargs)

    return _make


@pytest.fixture
def job_data() -> dict[str, Any]:
    """A minimal valid job dictionary."""
    return {
        "schema_version": "1.0",
        "materials": [
            {
                "id": "quartz",
                "name": "Quartz",
                "slab_length_mm": 3200,
                "slab_width_mm": 1600,
                "kerf_mm": 5,
            }
        ],
        "pieces": [
            {
                "id": "bench",
                "label": "Island",
                "length_mm": 2400,
                "width_mm": 900,
                "material_id": "quartz",
            }
        ],
    }
