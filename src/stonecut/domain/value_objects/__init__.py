"""Value objects for the slab optimization domain.

This module provides immutable data types used throughout the optimizer.
All classes are re-exported from sub-modules for convenience.
"""

from __future__ import annotations

# Input pieces and shapes
from ._pieces import (
    EdgeSide,
    EdgeTypeNames,
    FinishedEdges,
    LegSpec,
    LShape,
    Piece,
    RectangleShape,
    Shape,
    UnrecognizedShape,
    UShape,
)

# Placement units and their provenance
from ._rectangles import (
    Direct,
    GroupMember,
    LaminationStrip,
    OversizeSegment,
    Provenance,
    Rectangle,
)

# Slab configuration and oversize joins
from ._slabs import (
    JoinStrategy,
    OversizePieceInfo,
    SegmentSize,
    SlabSpec,
)

__all__ = [
    "Direct",
    "EdgeSide",
    "EdgeTypeNames",
    "FinishedEdges",
    "GroupMember",
    "JoinStrategy",
    "LShape",
    "LaminationStrip",
    "LegSpec",
    "OversizePieceInfo",
    "OversizeSegment",
    "Piece",
    "Provenance",
    "Rectangle",
    "RectangleShape",
    "SegmentSize",
    "Shape",
    "SlabSpec",
    "UShape",
    "UnrecognizedShape",
]
