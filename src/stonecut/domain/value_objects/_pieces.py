"""Input piece and shape value objects."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class EdgeSide(str, Enum):
    """The four outer sides of a piece, as seen on the quote drawing."""

    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class FinishedEdges:
    """Which sides of a piece carry a finished (polished) profile."""

    top: bool = False
    bottom: bool = False
    left: bool = False
    right: bool = False

    def is_finished(self, side: EdgeSide) -> bool:
        """Return True if the given side is finished."""
        return bool(getattr(self, side.value))

    @property
    def sides(self) -> tuple[EdgeSide, ...]:
        """Finished sides in top, bottom, left, right order."""
        return tuple(side for side in EdgeSide if self.is_finished(side))


@dataclass(frozen=True)
class EdgeTypeNames:
    """Edge profile names per side, e.g. '40mm Mitre' or '20mm Polished'."""

    top: str | None = None
    bottom: str | None = None
    left: str | None = None
    right: str | None = None

    def for_side(self, side: EdgeSide) -> str | None:
        """Return the edge type name for a side, if any."""
        return getattr(self, side.value)


@dataclass(frozen=True)
class LegSpec:
    """One rectangular leg of an L or U shaped benchtop."""

    length_mm: float
    width_mm: float

    def __post_init__(self) -> None:
        if self.length_mm <= 0 or self.width_mm <= 0:
            raise ValueError("Leg dimensions must be positive")


@dataclass(frozen=True)
class RectangleShape:
    """Plain rectangular piece."""


@dataclass(frozen=True)
class LShape:
    """L-shaped piece.

    Leg 1 runs horizontally along the top; leg 2 drops vertically from its
    right end. The corner square (leg1.width x leg2.width) belongs to leg 1.
    """

    leg1: LegSpec
    leg2: LegSpec


@dataclass(frozen=True)
class UShape:
    """U-shaped piece.

    The back runs across the top and both legs drop down from its ends.
    Both corner squares belong to the back.
    """

    left_leg: LegSpec
    back: LegSpec
    right_leg: LegSpec


@dataclass(frozen=True)
class UnrecognizedShape:
    """A shape type the optimizer does not know how to decompose."""

    shape_type: str


Shape = RectangleShape | LShape | UShape | UnrecognizedShape


@dataclass(frozen=True)
class Piece:
    """A fabricated stone piece submitted for slab optimization.

    ``width`` is the piece length (the dimension laid along the slab length
    when unrotated) and ``height`` its depth, both in millimetres. For L and
    U shapes these hold the bounding box.

    Attributes:
        id: Opaque identifier, stable across every pipeline stage.
        width: Piece length in mm.
        height: Piece depth in mm.
        label: Display label (e.g. "Kitchen: Island").
        material_id: Material identity used for slab grouping.
        thickness: Finished thickness in mm.
        can_rotate: Whether the piece may be turned 90 degrees on the slab.
        grain_matched: Grain-matched pieces never rotate.
        finished_edges: Sides with a finished profile.
        edge_type_names: Edge profile names per side.
        requires_lamination: Build up finished edges regardless of thickness.
        no_strip_edges: Sides against a wall that never get a strip.
        shape: Shape variant for non-rectangular pieces.
    """

    id: str
    width: float
    height: float
    label: str = ""
    material_id: str | None = None
    thickness: float = 20.0
    can_rotate: bool = True
    grain_matched: bool = False
    finished_edges: FinishedEdges | None = None
    edge_type_names: EdgeTypeNames | None = None
    requires_lamination: bool = False
    no_strip_edges: frozenset[EdgeSide] = field(default_factory=frozenset)
    shape: Shape = field(default_factory=RectangleShape)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Piece id must not be empty")
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Piece '{self.id}' dimensions must be positive")
        if self.thickness <= 0:
            raise ValueError(f"Piece '{self.id}' thickness must be positive")

    @property
    def rotation_allowed(self) -> bool:
        """True if the piece may be placed rotated."""
        return self.can_rotate and not self.grain_matched

    @property
    def display_label(self) -> str:
        """Label for warnings and reports, falling back to the id."""
        return self.label or self.id
