"""Standard slab sizes by fabrication category.

Used to resolve slab dimensions for materials whose record does not carry
explicit slab sizes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class SlabSize:
    """A named raw slab size in millimetres."""

    length_mm: float
    width_mm: float
    name: str


SLAB_SIZES: dict[str, SlabSize] = {
    "ENGINEERED_QUARTZ_JUMBO": SlabSize(3200, 1600, "Engineered Quartz (Jumbo)"),
    "ENGINEERED_QUARTZ_STANDARD": SlabSize(3050, 1440, "Engineered Quartz (Standard)"),
    "NATURAL_STONE": SlabSize(2800, 1600, "Natural Stone"),
    "PORCELAIN": SlabSize(3200, 1600, "Porcelain"),
}

# Brand and stone names, normalised to lowercase letters only
CATEGORY_SLAB_SIZES: dict[str, str] = {
    "caesarstone": "ENGINEERED_QUARTZ_JUMBO",
    "silestone": "ENGINEERED_QUARTZ_JUMBO",
    "essastone": "ENGINEERED_QUARTZ_STANDARD",
    "smartstone": "ENGINEERED_QUARTZ_JUMBO",
    "engineeredquartz": "ENGINEERED_QUARTZ_JUMBO",
    "granite": "NATURAL_STONE",
    "marble": "NATURAL_STONE",
    "quartzite": "NATURAL_STONE",
    "naturalstone": "NATURAL_STONE",
    "porcelain": "PORCELAIN",
    "dekton": "PORCELAIN",
    "neolith": "PORCELAIN",
}

FALLBACK_SLAB_SIZE = SLAB_SIZES["ENGINEERED_QUARTZ_JUMBO"]


def slab_size_for_category(category: str | None) -> SlabSize | None:
    """Look up the standard slab size for a fabrication category.

    Args:
        category: Category or brand name, in any case and punctuation
            (e.g. "Caesarstone", "natural_stone").

    Returns:
        The matching SlabSize, or None if the category is unknown.
    """
    if not category:
        return None
    key = category.upper()
    if key in SLAB_SIZES:
        return SLAB_SIZES[key]
    normalised = re.sub(r"[^a-z]", "", category.lower())
    slab_key = CATEGORY_SLAB_SIZES.get(normalised)
    return SLAB_SIZES[slab_key] if slab_key else None


def resolve_slab_dimensions(
    length_mm: float | None,
    width_mm: float | None,
    category: str | None = None,
) -> tuple[float, float]:
    """Resolve slab length and width using the fallback chain.

    Explicit dimensions win, then the category default, then the jumbo
    engineered quartz size (3200 x 1600).
    """
    category_size = slab_size_for_category(category)
    default = category_size or FALLBACK_SLAB_SIZE
    return (length_mm or default.length_mm, width_mm or default.width_mm)
