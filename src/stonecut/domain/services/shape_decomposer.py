"""Shape geometry and decomposition of L/U pieces into rectangle groups.

Non-rectangular benchtops are fabricated from rectangular legs joined at the
corners. For slab packing each leg becomes its own rectangle, and all legs of
one piece share a group id so they are cut from the same slab.

Decomposition is purely geometric (no kerf) and the parts tile the shape
exactly: corner squares are assigned to one leg only, so the sum of part
areas equals the net stone area of the piece.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from stonecut.domain.value_objects import (
    Direct,
    EdgeSide,
    GroupMember,
    LShape,
    Piece,
    Rectangle,
    RectangleShape,
    Shape,
    UnrecognizedShape,
    UShape,
)

logger = logging.getLogger(__name__)

__all__ = [
    "DecompositionResult",
    "ShapeDecomposer",
    "bounding_box",
    "corner_joins",
    "decompose_piece",
    "shape_bounding_box",
    "shape_edge_lengths",
    "shape_net_area_mm2",
]


@dataclass(frozen=True)
class DecompositionResult:
    """Rectangles produced for one piece, plus any fallback warnings."""

    rectangles: tuple[Rectangle, ...]
    warnings: tuple[str, ...] = ()


def _parts(piece: Piece) -> list[tuple[str, float, float]] | None:
    """Return (part label, width, height) for each leg, or None if degenerate."""
    match piece.shape:
        case LShape(leg1=leg1, leg2=leg2):
            leg2_net = leg2.length_mm - leg1.width_mm
            if leg2_net <= 0:
                return None
            return [
                ("Leg A", leg1.length_mm, leg1.width_mm),
                ("Leg B", leg2_net, leg2.width_mm),
            ]
        case UShape(left_leg=left, back=back, right_leg=right):
            left_net = left.length_mm - back.width_mm
            right_net = right.length_mm - back.width_mm
            if left_net <= 0 or right_net <= 0:
                return None
            return [
                ("Back", back.length_mm, back.width_mm),
                ("Left Leg", left_net, left.width_mm),
                ("Right Leg", right_net, right.width_mm),
            ]
        case _:
            return None


def shape_net_area_mm2(piece: Piece) -> float:
    """Net stone area of a piece in mm^2, corner overlaps deducted."""
    match piece.shape:
        case LShape(leg1=leg1, leg2=leg2):
            return (
                leg1.length_mm * leg1.width_mm
                + leg2.length_mm * leg2.width_mm
                - leg1.width_mm * leg2.width_mm
            )
        case UShape(left_leg=left, back=back, right_leg=right):
            return (
                left.length_mm * left.width_mm
                + back.length_mm * back.width_mm
                + right.length_mm * right.width_mm
                - left.width_mm * back.width_mm
                - right.width_mm * back.width_mm
            )
        case _:
            return piece.width * piece.height


def shape_bounding_box(shape: Shape) -> tuple[float, float] | None:
    """Return the (length, width) bounding box of an L/U shape, else None."""
    match shape:
        case LShape(leg1=leg1, leg2=leg2):
            return (
                max(leg1.length_mm, leg2.width_mm),
                max(leg1.width_mm, leg2.length_mm),
            )
        case UShape(left_leg=left, back=back, right_leg=right):
            return (back.length_mm, max(back.width_mm, left.length_mm, right.length_mm))
        case _:
            return None


def bounding_box(piece: Piece) -> tuple[float, float]:
    """Return the (length, width) bounding box of a piece in mm."""
    return shape_bounding_box(piece.shape) or (piece.width, piece.height)


def corner_joins(piece: Piece) -> int:
    """Number of corner joins needed to assemble the shape."""
    match piece.shape:
        case LShape():
            return 1
        case UShape():
            return 2
        case _:
            return 0


def shape_edge_lengths(piece: Piece) -> dict[EdgeSide, float]:
    """Outer edge length per side in mm.

    For L/U shapes the four sides map onto the outline as follows: top is
    the back wall run, left and right are the leg end widths, and bottom is
    the front run (the dropped leg lengths plus the exposed part of the
    top run between them).
    """
    match piece.shape:
        case LShape(leg1=leg1, leg2=leg2):
            return {
                EdgeSide.TOP: leg1.length_mm,
                EdgeSide.RIGHT: leg2.width_mm,
                EdgeSide.BOTTOM: leg2.length_mm + (leg1.length_mm - leg2.width_mm),
                EdgeSide.LEFT: leg1.width_mm,
            }
        case UShape(left_leg=left, back=back, right_leg=right):
            return {
                EdgeSide.TOP: back.length_mm,
                EdgeSide.RIGHT: right.width_mm,
                EdgeSide.BOTTOM: (
                    left.length_mm
                    + right.length_mm
                    + (back.length_mm - left.width_mm - right.width_mm)
                ),
                EdgeSide.LEFT: left.width_mm,
            }
        case _:
            return {
                EdgeSide.TOP: piece.width,
                EdgeSide.BOTTOM: piece.width,
                EdgeSide.LEFT: piece.height,
                EdgeSide.RIGHT: piece.height,
            }


def _single_rectangle(piece: Piece) -> Rectangle:
    width, height = bounding_box(piece)
    return Rectangle(
        id=piece.id,
        piece_id=piece.id,
        width=width,
        height=height,
        label=piece.display_label,
        material_id=piece.material_id,
        can_rotate=piece.rotation_allowed,
        provenance=Direct(),
    )


def decompose_piece(piece: Piece) -> DecompositionResult:
    """Expand a piece into the rectangles the packer places.

    Rectangular pieces pass through as a single rectangle with no group.
    L and U shapes become 2 or 3 group members. Unknown or degenerate
    shapes fall back to the bounding rectangle and record a warning.

    Args:
        piece: The input piece.

    Returns:
        DecompositionResult with ordered rectangles and warnings.
    """
    if isinstance(piece.shape, RectangleShape):
        return DecompositionResult(rectangles=(_single_rectangle(piece),))

    if isinstance(piece.shape, UnrecognizedShape):
        message = (
            f"Piece '{piece.display_label}' has unrecognized shape type "
            f"'{piece.shape.shape_type}'; treated as its bounding rectangle"
        )
        logger.warning(message)
        return DecompositionResult(
            rectangles=(_single_rectangle(piece),), warnings=(message,)
        )

    parts = _parts(piece)
    if parts is None:
        message = (
            f"Piece '{piece.display_label}' has leg dimensions that do not form "
            f"a valid shape; treated as its bounding rectangle"
        )
        logger.warning(message)
        return DecompositionResult(
            rectangles=(_single_rectangle(piece),), warnings=(message,)
        )

    total = len(parts)
    rectangles = tuple(
        Rectangle(
            id=f"{piece.id}:{index}",
            piece_id=piece.id,
            width=width,
            height=height,
            label=f"{piece.display_label} ({part_label})",
            material_id=piece.material_id,
            can_rotate=piece.rotation_allowed,
            provenance=GroupMember(
                group_id=piece.id,
                index=index,
                total=total,
                part_label=part_label,
            ),
        )
        for index, (part_label, width, height) in enumerate(parts)
    )

    logger.debug(
        "Decomposed '%s' into %d parts: %s",
        piece.display_label,
        total,
        ", ".join(f"{w:g}x{h:g}" for _, w, h in parts),
    )

    return DecompositionResult(rectangles=rectangles)


class ShapeDecomposer:
    """Decomposes a batch of pieces, collecting warnings in input order."""

    def decompose(
        self, pieces: list[Piece] | tuple[Piece, ...]
    ) -> tuple[dict[str, list[Rectangle]], list[str]]:
        """Decompose every piece.

        Returns:
            Tuple of (rectangles keyed by piece id in input order, warnings).
        """
        by_piece: dict[str, list[Rectangle]] = {}
        warnings: list[str] = []
        for piece in pieces:
            result = decompose_piece(piece)
            by_piece[piece.id] = list(result.rectangles)
            warnings.extend(result.warnings)
        return by_piece, warnings
