"""Lamination strip generation for built-up benchtop edges.

A 40mm benchtop is usually cut from 20mm slab with a strip glued under each
finished edge to give the appearance of full thickness. Each strip is an
extra rectangle cut from the same material, so it has to be packed onto
slabs along with the benchtops themselves.

Strips are independent placement units: they are small, and may be cut from
whichever slab has room, not necessarily the parent's.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from stonecut.domain.value_objects import (
    EdgeSide,
    LaminationStrip,
    Piece,
    Rectangle,
)

from .shape_decomposer import shape_edge_lengths

logger = logging.getLogger(__name__)

__all__ = [
    "LaminationConfig",
    "LaminationStripGenerator",
    "LaminationSummary",
    "ParentStrips",
    "StripInfo",
    "summarize_strips",
]


@dataclass(frozen=True)
class LaminationConfig:
    """Configuration for lamination strip synthesis.

    Strip width for an edge is chosen by matching the edge type name against
    ``strip_widths`` in order (case-insensitive substring match); the first
    match wins and unmatched or unnamed edges use ``default_strip_width``.
    The cutting kerf is added on top of the looked-up width.

    Attributes:
        enabled: Whether strips are generated at all.
        thickness_threshold: Pieces at least this thick (mm) get strips.
        default_strip_width: Strip width in mm when no rule matches.
        strip_widths: Ordered (edge type keyword, strip width mm) rules.
    """

    enabled: bool = True
    thickness_threshold: float = 40.0
    default_strip_width: float = 60.0
    strip_widths: tuple[tuple[str, float], ...] = (("mitre", 40.0),)

    def __post_init__(self) -> None:
        if self.thickness_threshold <= 0:
            raise ValueError("Lamination thickness threshold must be positive")
        if self.default_strip_width <= 0:
            raise ValueError("Default strip width must be positive")
        for keyword, width in self.strip_widths:
            if not keyword:
                raise ValueError("Strip width keyword must not be empty")
            if width <= 0:
                raise ValueError(f"Strip width for '{keyword}' must be positive")

    def strip_width_for(self, edge_type_name: str | None) -> float:
        """Look up the strip width (excluding kerf) for an edge type name."""
        if not edge_type_name:
            return self.default_strip_width
        lower = edge_type_name.lower()
        for keyword, width in self.strip_widths:
            if keyword.lower() in lower:
                return width
        return self.default_strip_width


@dataclass(frozen=True)
class StripInfo:
    """One strip as reported in the lamination summary."""

    position: EdgeSide
    length_mm: float
    width_mm: float


@dataclass(frozen=True)
class ParentStrips:
    """All strips synthesized for one parent piece."""

    parent_piece_id: str
    parent_label: str
    strips: tuple[StripInfo, ...]


@dataclass(frozen=True)
class LaminationSummary:
    """Reporting summary of synthesized strips. Has no effect on placement.

    Attributes:
        total_strips: Number of strips generated.
        total_strip_area_m2: Combined strip area in square metres.
        strips_by_parent: Strips grouped by parent piece, in input order.
    """

    total_strips: int
    total_strip_area_m2: float
    strips_by_parent: tuple[ParentStrips, ...] = field(default_factory=tuple)


def _strip_dimensions(strip: Rectangle) -> tuple[float, float]:
    """Return (length along the edge, strip width) for a strip rectangle."""
    if strip.strip_position in (EdgeSide.LEFT, EdgeSide.RIGHT):
        return strip.height, strip.width
    return strip.width, strip.height


def summarize_strips(
    pieces: list[Piece] | tuple[Piece, ...],
    strips: list[Rectangle] | tuple[Rectangle, ...],
) -> LaminationSummary | None:
    """Build the lamination summary, or None when no strips exist.

    Raises:
        ValueError: If a rectangle carries no lamination strip provenance.
    """
    if not strips:
        return None

    labels = {piece.id: piece.display_label for piece in pieces}
    by_parent: dict[str, list[StripInfo]] = {}
    for strip in strips:
        if strip.strip_position is None:
            raise ValueError(f"Rectangle '{strip.id}' is not a lamination strip")
        parent_id = strip.parent_piece_id or strip.piece_id
        length, width = _strip_dimensions(strip)
        by_parent.setdefault(parent_id, []).append(
            StripInfo(
                position=strip.strip_position,
                length_mm=length,
                width_mm=width,
            )
        )

    return LaminationSummary(
        total_strips=len(strips),
        total_strip_area_m2=sum(s.area for s in strips) / 1_000_000,
        strips_by_parent=tuple(
            ParentStrips(
                parent_piece_id=parent_id,
                parent_label=labels.get(parent_id, "Unknown"),
                strips=tuple(infos),
            )
            for parent_id, infos in by_parent.items()
        ),
    )


class LaminationStripGenerator:
    """Synthesizes lamination strip rectangles for thick finished edges.

    Attributes:
        config: Strip width rules and thickness threshold.
    """

    def __init__(self, config: LaminationConfig | None = None) -> None:
        self.config = config or LaminationConfig()

    def needs_lamination(self, piece: Piece) -> bool:
        """True if the piece's finished edges are built up with strips."""
        if not self.config.enabled or piece.finished_edges is None:
            return False
        return piece.requires_lamination or (
            piece.thickness >= self.config.thickness_threshold
        )

    def generate(self, piece: Piece, strip_kerf: float) -> list[Rectangle]:
        """Generate one strip per qualifying finished edge of a piece.

        Top and bottom strips run along the piece length; left and right
        strips run along its depth. Edges listed in ``no_strip_edges``
        (against a wall) are skipped.

        Args:
            piece: The parent piece.
            strip_kerf: Kerf added to every strip width (the mitring
                machine's kerf, or the general kerf).

        Returns:
            Strip rectangles in top, bottom, left, right order.
        """
        if not self.needs_lamination(piece):
            return []

        assert piece.finished_edges is not None
        edge_lengths = shape_edge_lengths(piece)
        strips: list[Rectangle] = []

        for side in piece.finished_edges.sides:
            if side in piece.no_strip_edges:
                logger.debug(
                    "Skipping %s strip for '%s': wall edge", side.value, piece.id
                )
                continue

            edge_name = (
                piece.edge_type_names.for_side(side) if piece.edge_type_names else None
            )
            strip_width = self.config.strip_width_for(edge_name) + strip_kerf
            edge_length = edge_lengths[side]
            if side in (EdgeSide.TOP, EdgeSide.BOTTOM):
                width, height = edge_length, strip_width
            else:
                width, height = strip_width, edge_length

            suffix = f" {edge_name}" if edge_name else ""
            strips.append(
                Rectangle(
                    id=f"{piece.id}-lam-{side.value}",
                    piece_id=piece.id,
                    width=width,
                    height=height,
                    label=(
                        f"{piece.display_label} "
                        f"(Lam-{side.value.capitalize()}{suffix})"
                    ),
                    material_id=piece.material_id,
                    can_rotate=piece.rotation_allowed,
                    provenance=LaminationStrip(parent_piece_id=piece.id, side=side),
                )
            )

        if strips:
            logger.debug(
                "Generated %d lamination strip(s) for '%s'",
                len(strips),
                piece.display_label,
            )
        return strips
