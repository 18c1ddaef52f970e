"""Oversize splitting: divide rectangles larger than a slab into segments.

A benchtop longer than the slab is fabricated from two or more segments
joined on site. The splitter picks the axis to cut, works out balanced
segment lengths that leave room for the saw kerf at every join, and records
an OversizePieceInfo so fabricators can see where the join falls.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from stonecut.domain.value_objects import (
    JoinStrategy,
    OversizePieceInfo,
    OversizeSegment,
    Rectangle,
    SegmentSize,
    SlabSpec,
)

logger = logging.getLogger(__name__)

__all__ = [
    "OversizeSplitter",
    "SplitResult",
    "balanced_segments",
    "segment_count",
    "suggested_join_position",
]

# Joins closer than this to the middle of a piece are flagged
CENTRE_JOIN_TOLERANCE_MM = 200.0
JOIN_ROUNDING_MM = 100.0


@dataclass(frozen=True)
class SplitResult:
    """Output of splitting a batch of rectangles.

    Attributes:
        rectangles: Rectangles in input order, oversize ones replaced by
            their segments.
        oversize_infos: One record per split rectangle.
        warnings: Informational split messages and join advisories.
    """

    rectangles: tuple[Rectangle, ...]
    oversize_infos: tuple[OversizePieceInfo, ...] = ()
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True)
class _AxisPlan:
    """Cut plan for one axis: segment lengths along it."""

    lengths: tuple[float, ...]
    max_segment: float
    total: float


def segment_count(length: float, max_segment: float, kerf: float) -> int:
    """Smallest n with ``n * max_segment >= length + (n - 1) * kerf``.

    Returns 1 when the length already fits.
    """
    if length <= max_segment:
        return 1
    return max(2, math.ceil((length - kerf) / (max_segment - kerf)))


def balanced_segments(
    length: float, count: int, max_segment: float, kerf: float
) -> tuple[float, ...]:
    """Split ``length`` into ``count`` near-equal segments.

    Each join consumes one kerf, so the segments together cover
    ``length + (count - 1) * kerf``. Earlier segments are rounded up to
    whole millimetres and the last takes the remainder.
    """
    if count == 1:
        return (length,)
    remaining = length + (count - 1) * kerf
    lengths: list[float] = []
    for i in range(count - 1):
        segment = min(max_segment, float(math.ceil(remaining / (count - i))))
        lengths.append(segment)
        remaining -= segment
    lengths.append(remaining)
    return tuple(lengths)


def suggested_join_position(plan_lengths: tuple[float, ...], max_segment: float) -> float:
    """First join offset rounded to the nearest 100mm, kept in feasible range.

    The first segment must be at least ``total - (n - 1) * max_segment``
    long for the remaining segments to fit, and no longer than
    ``max_segment``.
    """
    total = sum(plan_lengths)
    count = len(plan_lengths)
    lower = max(0.0, total - (count - 1) * max_segment)
    rounded = round(plan_lengths[0] / JOIN_ROUNDING_MM) * JOIN_ROUNDING_MM
    return min(max(rounded, lower), max_segment)


def _axis_plan(length: float, max_segment: float, kerf: float) -> _AxisPlan:
    count = segment_count(length, max_segment, kerf)
    lengths = balanced_segments(length, count, max_segment, kerf)
    return _AxisPlan(lengths=lengths, max_segment=max_segment, total=sum(lengths))


class OversizeSplitter:
    """Splits rectangles that fit a slab in no allowed orientation.

    Attributes:
        slab: Slab the rectangles are packed onto.
        allow_rotation: Global rotation switch, combined with each
            rectangle's own permission.
        enabled: When False, oversize rectangles pass through unchanged and
            end up unplaced.
    """

    def __init__(
        self, slab: SlabSpec, allow_rotation: bool = True, enabled: bool = True
    ) -> None:
        self.slab = slab
        self.allow_rotation = allow_rotation
        self.enabled = enabled

    def _rotatable(self, rect: Rectangle) -> bool:
        return self.allow_rotation and rect.can_rotate

    def fits(self, width: float, height: float, rotatable: bool) -> bool:
        """Whether a width x height rectangle fits the usable slab area."""
        usable_w, usable_h = self.slab.usable_width, self.slab.usable_height
        if width <= usable_w and height <= usable_h:
            return True
        return rotatable and height <= usable_w and width <= usable_h

    def _max_segment(self, cross: float, cross_is_height: bool, rotatable: bool) -> float | None:
        """Longest segment that fits, given the fixed cross dimension.

        Args:
            cross: The dimension that is not being cut.
            cross_is_height: True when cutting the width axis.
            rotatable: Whether segments may be turned.
        """
        usable_w, usable_h = self.slab.usable_width, self.slab.usable_height
        # Unrotated: cut axis runs along the slab axis it already lies on
        along, across = (usable_w, usable_h) if cross_is_height else (usable_h, usable_w)
        options = []
        if cross <= across:
            options.append(along)
        if rotatable and cross <= along:
            options.append(across)
        return max(options) if options else None

    def _grid_plan(
        self, rect: Rectangle, rotatable: bool
    ) -> tuple[_AxisPlan, _AxisPlan]:
        """Width and height plans for a grid split, fewest segments first."""
        kerf = self.slab.kerf_width
        usable_w, usable_h = self.slab.usable_width, self.slab.usable_height
        orientations = [(usable_w, usable_h)]
        if rotatable:
            orientations.append((usable_h, usable_w))

        best: tuple[_AxisPlan, _AxisPlan] | None = None
        for max_w, max_h in orientations:
            plans = (_axis_plan(rect.width, max_w, kerf), _axis_plan(rect.height, max_h, kerf))
            if best is None or (
                len(plans[0].lengths) * len(plans[1].lengths)
                < len(best[0].lengths) * len(best[1].lengths)
            ):
                best = plans
        assert best is not None
        return best

    def split(self, rect: Rectangle) -> SplitResult:
        """Split one rectangle if it is oversize.

        A rectangle that fits only when turned passes through with a warning
        that it must be rotated. One that would fit turned but may not
        rotate is split to fit unrotated, with a note saying why.

        Returns:
            SplitResult holding either the rectangle itself or its segments.
        """
        rotatable = self._rotatable(rect)
        name = f"'{rect.label or rect.id}' ({rect.width:g}x{rect.height:g}mm)"
        if self.fits(rect.width, rect.height, rotatable=False):
            return SplitResult(rectangles=(rect,))
        if rotatable and self.fits(rect.width, rect.height, rotatable=True):
            message = f"{name} must be rotated 90 degrees to fit on the slab"
            logger.info(message)
            return SplitResult(rectangles=(rect,), warnings=(message,))

        if not self.enabled:
            logger.info("Oversize splitting disabled; '%s' left whole", rect.id)
            return SplitResult(rectangles=(rect,))

        orientation_notes: list[str] = []
        if self.fits(rect.width, rect.height, rotatable=True):
            reason = (
                "the piece is locked to its orientation"
                if self.allow_rotation
                else "rotation is disabled"
            )
            orientation_notes.append(
                f"{name} would fit rotated 90 degrees but {reason}; split to fit unrotated"
            )
            logger.info(orientation_notes[0])

        kerf = self.slab.kerf_width
        candidates: list[tuple[int, int, bool, _AxisPlan]] = []
        max_w = self._max_segment(rect.height, cross_is_height=True, rotatable=rotatable)
        if max_w is not None:
            plan = _axis_plan(rect.width, max_w, kerf)
            splits_longer = rect.width >= rect.height
            candidates.append((len(plan.lengths), 0 if splits_longer else 1, True, plan))
        max_h = self._max_segment(rect.width, cross_is_height=False, rotatable=rotatable)
        if max_h is not None:
            plan = _axis_plan(rect.height, max_h, kerf)
            splits_longer = rect.height > rect.width
            candidates.append((len(plan.lengths), 0 if splits_longer else 1, False, plan))

        if candidates:
            count, longer_rank, along_width, plan = min(candidates, key=lambda c: (c[0], c[1]))
            strategy = JoinStrategy.LENGTHWISE if longer_rank == 0 else JoinStrategy.WIDTHWISE
            if along_width:
                sizes = [(length, rect.height) for length in plan.lengths]
                join_length = (count - 1) * rect.height
                piece_length = rect.width
            else:
                sizes = [(rect.width, length) for length in plan.lengths]
                join_length = (count - 1) * rect.width
                piece_length = rect.height
            join_position = suggested_join_position(plan.lengths, plan.max_segment)
        else:
            width_plan, height_plan = self._grid_plan(rect, rotatable)
            strategy = JoinStrategy.MULTI_JOIN
            sizes = [(w, h) for h in height_plan.lengths for w in width_plan.lengths]
            count = len(sizes)
            join_length = (len(width_plan.lengths) - 1) * rect.height + (
                len(height_plan.lengths) - 1
            ) * rect.width
            join_position = suggested_join_position(width_plan.lengths, width_plan.max_segment)
            plan = width_plan
            piece_length = rect.width

        if not all(self.fits(w, h, rotatable) for w, h in sizes):
            message = (
                f"{name} cannot be split to fit a {self.slab.usable_width:g}x"
                f"{self.slab.usable_height:g}mm slab"
            )
            logger.warning(message)
            return SplitResult(
                rectangles=(rect,), warnings=(*orientation_notes, message)
            )

        segments = tuple(
            Rectangle(
                id=f"{rect.id}/seg-{index}",
                piece_id=rect.piece_id,
                width=w,
                height=h,
                label=f"{rect.label or rect.id} (Segment {index + 1}/{count})",
                material_id=rect.material_id,
                can_rotate=rect.can_rotate,
                provenance=OversizeSegment(index=index, total=count, source=rect.provenance),
            )
            for index, (w, h) in enumerate(sizes)
        )

        if strategy == JoinStrategy.MULTI_JOIN:
            info_segments = tuple(SegmentSize(length=w, width=h) for w, h in sizes)
        else:
            info_segments = tuple(
                SegmentSize(length=max(w, h), width=min(w, h)) for w, h in sizes
            )
        info = OversizePieceInfo(
            piece_id=rect.piece_id,
            rectangle_id=rect.id,
            label=rect.label or rect.id,
            join_strategy=strategy,
            segments=info_segments,
            suggested_join_position_mm=join_position,
            join_length_mm=join_length,
        )

        warnings = [
            *orientation_notes,
            f"{name} exceeds the usable "
            f"slab ({self.slab.usable_width:g}x{self.slab.usable_height:g}mm); "
            f"split {strategy.value.lower()} into {count} segments, suggested "
            f"join at {join_position:g}mm"
        ]
        warnings.extend(self._advisories(info, plan, piece_length))

        logger.info(
            "Split '%s' %s into %d segments (join at %gmm)",
            rect.id,
            strategy.value,
            count,
            join_position,
        )
        return SplitResult(rectangles=segments, oversize_infos=(info,), warnings=tuple(warnings))

    def _advisories(
        self, info: OversizePieceInfo, plan: _AxisPlan, piece_length: float
    ) -> list[str]:
        match info.join_strategy:
            case JoinStrategy.LENGTHWISE:
                centre = piece_length / 2
                offset = 0.0
                for length in plan.lengths[:-1]:
                    offset += length
                    if abs(offset - centre) < CENTRE_JOIN_TOLERANCE_MM:
                        return [
                            f"'{info.label}': join is near centre of piece, "
                            "consider adjusting if possible"
                        ]
                return []
            case JoinStrategy.WIDTHWISE:
                return [
                    f"'{info.label}': widthwise join, ensure waterfall "
                    "continuity if applicable"
                ]
            case _:
                return [
                    f"'{info.label}': complex piece requires {info.segment_count} "
                    "segments, consider breaking into separate pieces if possible"
                ]

    def split_all(self, rectangles: list[Rectangle] | tuple[Rectangle, ...]) -> SplitResult:
        """Split every oversize rectangle in a batch, preserving order."""
        out: list[Rectangle] = []
        infos: list[OversizePieceInfo] = []
        warnings: list[str] = []
        for rect in rectangles:
            result = self.split(rect)
            out.extend(result.rectangles)
            infos.extend(result.oversize_infos)
            warnings.extend(result.warnings)
        return SplitResult(
            rectangles=tuple(out),
            oversize_infos=tuple(infos),
            warnings=tuple(warnings),
        )
