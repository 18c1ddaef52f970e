"""Infrastructure layer - slab packing and the optimization pipeline."""

from .bin_packing import (
    GuillotineSlabPacker,
    PackingResult,
    Placement,
    SlabResult,
)
from .optimization_service import (
    MaterialGroupResult,
    OptimizationRequest,
    OptimizationResult,
    SlabOptimizationService,
)

__all__ = [
    "GuillotineSlabPacker",
    "MaterialGroupResult",
    "OptimizationRequest",
    "OptimizationResult",
    "PackingResult",
    "Placement",
    "SlabOptimizationService",
    "SlabResult",
]
