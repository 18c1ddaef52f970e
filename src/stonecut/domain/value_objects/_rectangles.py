"""Rectangles: the atomic unit the slab packer places.

A piece expands into one or more rectangles. Where a rectangle came from is
carried by a single provenance variant rather than a spread of optional
fields, since group, strip and segment metadata are mutually exclusive at any
one level of derivation.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ._pieces import EdgeSide


@dataclass(frozen=True)
class Direct:
    """Rectangle is the input piece itself."""


@dataclass(frozen=True)
class GroupMember:
    """One part of a decomposed L/U shape.

    All members of a group must land on the same slab.
    """

    group_id: str
    index: int
    total: int
    part_label: str

    def __post_init__(self) -> None:
        if not 0 <= self.index < self.total:
            raise ValueError("Group part index must be within 0..total-1")


@dataclass(frozen=True)
class LaminationStrip:
    """Strip glued under a finished edge to build up its visible thickness."""

    parent_piece_id: str
    side: EdgeSide


@dataclass(frozen=True)
class OversizeSegment:
    """One segment of a rectangle too large for a single slab.

    ``source`` is the provenance of the rectangle that was split.
    """

    index: int
    total: int
    source: Provenance = field(default_factory=Direct)

    def __post_init__(self) -> None:
        if self.total < 2:
            raise ValueError("An oversize split produces at least two segments")
        if not 0 <= self.index < self.total:
            raise ValueError("Segment index must be within 0..total-1")


Provenance = Direct | GroupMember | LaminationStrip | OversizeSegment


def _strip_of(provenance: Provenance) -> LaminationStrip | None:
    match provenance:
        case LaminationStrip():
            return provenance
        case OversizeSegment(source=source):
            return _strip_of(source)
        case _:
            return None


@dataclass(frozen=True)
class Rectangle:
    """A rectangle to place on a slab.

    Attributes:
        id: Unique rectangle id (derived from the owning piece id).
        piece_id: Id of the input piece this rectangle traces back to.
        width: Width in mm, unrotated.
        height: Height in mm, unrotated.
        label: Display label for cut lists and diagrams.
        material_id: Material the rectangle is cut from.
        can_rotate: Whether the packer may turn it 90 degrees.
        provenance: Where the rectangle came from.
    """

    id: str
    piece_id: str
    width: float
    height: float
    label: str = ""
    material_id: str | None = None
    can_rotate: bool = True
    provenance: Provenance = field(default_factory=Direct)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Rectangle '{self.id}' dimensions must be positive")

    @property
    def area(self) -> float:
        """Area in square millimetres."""
        return self.width * self.height

    @property
    def longer_side(self) -> float:
        return max(self.width, self.height)

    # Group cohesion only applies to undivided members; once a member has been
    # split into segments, those segments travel on their own.
    @property
    def group_id(self) -> str | None:
        if isinstance(self.provenance, GroupMember):
            return self.provenance.group_id
        return None

    @property
    def part_index(self) -> int | None:
        if isinstance(self.provenance, GroupMember):
            return self.provenance.index
        return None

    @property
    def total_parts(self) -> int | None:
        if isinstance(self.provenance, GroupMember):
            return self.provenance.total
        return None

    @property
    def is_lamination_strip(self) -> bool:
        return _strip_of(self.provenance) is not None

    @property
    def parent_piece_id(self) -> str | None:
        strip = _strip_of(self.provenance)
        return strip.parent_piece_id if strip else None

    @property
    def strip_position(self) -> EdgeSide | None:
        strip = _strip_of(self.provenance)
        return strip.side if strip else None

    @property
    def is_segment(self) -> bool:
        return isinstance(self.provenance, OversizeSegment)

    @property
    def segment_index(self) -> int | None:
        if isinstance(self.provenance, OversizeSegment):
            return self.provenance.index
        return None

    @property
    def total_segments(self) -> int | None:
        if isinstance(self.provenance, OversizeSegment):
            return self.provenance.total
        return None
