"""Slab configuration and oversize join value objects."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class SlabSpec:
    """Raw slab size and cutting parameters for one material.

    ``width`` runs along the slab length (the longer side for standard
    slabs) and ``height`` across it. Usable dimensions exclude the edge
    allowance on every side.

    Attributes:
        material_id: Material identity this slab belongs to.
        material_name: Human-readable material name.
        width: Raw slab length in mm.
        height: Raw slab width in mm.
        kerf_width: Saw blade kerf in mm, reserved between adjacent cuts.
        edge_allowance_mm: Unusable margin per side in mm.
        mitre_kerf_width: Kerf of the mitring machine used for lamination
            strips. Falls back to ``kerf_width`` when not set.
    """

    material_id: str
    width: float
    height: float
    kerf_width: float = 3.0
    edge_allowance_mm: float = 0.0
    mitre_kerf_width: float | None = None
    material_name: str = ""

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Slab dimensions for material '{self.material_id}' must be positive"
            )
        if self.kerf_width < 0:
            raise ValueError("Kerf width must be non-negative")
        if self.mitre_kerf_width is not None and self.mitre_kerf_width < 0:
            raise ValueError("Mitre kerf width must be non-negative")
        if self.edge_allowance_mm < 0:
            raise ValueError("Edge allowance must be non-negative")
        if self.usable_width <= 0 or self.usable_height <= 0:
            raise ValueError(
                f"Edge allowance {self.edge_allowance_mm}mm leaves no usable area "
                f"on {self.width}x{self.height} slab"
            )
        if self.kerf_width >= min(self.usable_width, self.usable_height):
            raise ValueError(
                f"Kerf {self.kerf_width}mm must be smaller than the usable slab "
                f"dimensions ({self.usable_width}x{self.usable_height})"
            )

    @property
    def name(self) -> str:
        return self.material_name or f"Material {self.material_id}"

    @property
    def usable_width(self) -> float:
        """Length available for placement after edge allowance."""
        return self.width - 2 * self.edge_allowance_mm

    @property
    def usable_height(self) -> float:
        """Width available for placement after edge allowance."""
        return self.height - 2 * self.edge_allowance_mm

    @property
    def area(self) -> float:
        """Raw slab area in square millimetres."""
        return self.width * self.height

    @property
    def usable_area(self) -> float:
        return self.usable_width * self.usable_height

    @property
    def strip_kerf(self) -> float:
        """Kerf added to lamination strip widths."""
        if self.mitre_kerf_width is not None:
            return self.mitre_kerf_width
        return self.kerf_width


class JoinStrategy(str, Enum):
    """How an oversize piece is divided across slabs.

    - LENGTHWISE: cut across the piece's longer dimension
    - WIDTHWISE: cut across the piece's shorter dimension
    - MULTI_JOIN: both dimensions exceed the slab, grid of segments
    """

    LENGTHWISE = "LENGTHWISE"
    WIDTHWISE = "WIDTHWISE"
    MULTI_JOIN = "MULTI_JOIN"


@dataclass(frozen=True)
class SegmentSize:
    """Dimensions of one oversize segment, in mm."""

    length: float
    width: float


@dataclass(frozen=True)
class OversizePieceInfo:
    """Record of an oversize split, for fabricators and the quote display.

    Attributes:
        piece_id: Input piece the split rectangle belongs to.
        rectangle_id: Id of the rectangle that was split.
        label: Display label (includes the part label for L/U legs).
        join_strategy: How the rectangle was divided.
        segments: Segment dimensions in order.
        suggested_join_position_mm: Offset of the first join from the start
            of the split axis, rounded to the nearest 100mm.
        join_length_mm: Total length of all join lines.
    """

    piece_id: str
    rectangle_id: str
    label: str
    join_strategy: JoinStrategy
    segments: tuple[SegmentSize, ...]
    suggested_join_position_mm: float
    join_length_mm: float = 0.0

    @property
    def segment_count(self) -> int:
        return len(self.segments)
