"""Domain layer - core slab optimization logic."""

from .services import (
    LaminationConfig,
    LaminationStripGenerator,
    MaterialConfigurationError,
    OversizeSplitter,
    ShapeDecomposer,
    decompose_piece,
)
from .value_objects import (
    EdgeSide,
    EdgeTypeNames,
    FinishedEdges,
    JoinStrategy,
    LegSpec,
    LShape,
    OversizePieceInfo,
    Piece,
    Rectangle,
    RectangleShape,
    SlabSpec,
    UnrecognizedShape,
    UShape,
)

__all__ = [
    "EdgeSide",
    "EdgeTypeNames",
    "FinishedEdges",
    "JoinStrategy",
    "LShape",
    "LaminationConfig",
    "LaminationStripGenerator",
    "LegSpec",
    "MaterialConfigurationError",
    "OversizePieceInfo",
    "OversizeSplitter",
    "Piece",
    "Rectangle",
    "RectangleShape",
    "ShapeDecomposer",
    "SlabSpec",
    "UShape",
    "UnrecognizedShape",
    "decompose_piece",
]
