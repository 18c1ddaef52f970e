"""Guillotine slab packing for stone benchtop rectangles.

This module provides data structures for slab layouts and placements, and
the free-rectangle guillotine packer that builds them. Every cut in a
guillotine layout runs edge-to-edge across the remaining stone, which is
what a bridge saw can actually cut.

All result dataclasses are frozen (immutable) to ensure thread safety and
hashability.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from stonecut.domain.value_objects import EdgeSide, Provenance, Rectangle, SlabSpec

logger = logging.getLogger(__name__)

# Tolerance for float comparisons on millimetre dimensions
EPSILON = 1e-9


@dataclass(frozen=True)
class Placement:
    """A rectangle placed at a specific position on a slab.

    Coordinates are measured from the raw slab's top-left corner, so the
    first usable position is (edge allowance, edge allowance).

    Attributes:
        rectangle: The rectangle being placed.
        slab_index: Zero-based index of the slab it is cut from.
        x: Horizontal position of the left edge in mm.
        y: Vertical position of the top edge in mm.
        rotated: True if turned 90 degrees from its input orientation.
        kerf_width_mm: Kerf of the blade used to cut it.
    """

    rectangle: Rectangle
    slab_index: int
    x: float
    y: float
    rotated: bool = False
    kerf_width_mm: float = 0.0

    def __post_init__(self) -> None:
        if self.x < 0 or self.y < 0:
            raise ValueError("Position coordinates must be non-negative")
        if self.slab_index < 0:
            raise ValueError("Slab index must be non-negative")

    @property
    def rectangle_id(self) -> str:
        return self.rectangle.id

    @property
    def piece_id(self) -> str:
        return self.rectangle.piece_id

    @property
    def label(self) -> str:
        return self.rectangle.label

    @property
    def provenance(self) -> Provenance:
        return self.rectangle.provenance

    @property
    def width(self) -> float:
        """Width of the rectangle as placed (accounts for rotation)."""
        return self.rectangle.height if self.rotated else self.rectangle.width

    @property
    def height(self) -> float:
        """Height of the rectangle as placed (accounts for rotation)."""
        return self.rectangle.width if self.rotated else self.rectangle.height

    @property
    def right_edge(self) -> float:
        return self.x + self.width

    @property
    def bottom_edge(self) -> float:
        return self.y + self.height

    @property
    def area(self) -> float:
        return self.rectangle.area

    @property
    def group_id(self) -> str | None:
        return self.rectangle.group_id

    @property
    def part_index(self) -> int | None:
        return self.rectangle.part_index

    @property
    def total_parts(self) -> int | None:
        return self.rectangle.total_parts

    @property
    def is_lamination_strip(self) -> bool:
        return self.rectangle.is_lamination_strip

    @property
    def parent_piece_id(self) -> str | None:
        return self.rectangle.parent_piece_id

    @property
    def strip_position(self) -> EdgeSide | None:
        return self.rectangle.strip_position

    @property
    def is_segment(self) -> bool:
        return self.rectangle.is_segment

    @property
    def segment_index(self) -> int | None:
        return self.rectangle.segment_index

    @property
    def total_segments(self) -> int | None:
        return self.rectangle.total_segments


@dataclass(frozen=True)
class SlabResult:
    """Layout of rectangles on a single slab.

    Attributes:
        slab_index: Zero-based index of this slab.
        width: Raw slab length in mm.
        height: Raw slab width in mm.
        placements: Placed rectangles, in placement order.
    """

    slab_index: int
    width: float
    height: float
    placements: tuple[Placement, ...] = ()

    def __post_init__(self) -> None:
        if self.slab_index < 0:
            raise ValueError("Slab index must be non-negative")

    @property
    def slab_area(self) -> float:
        """Raw slab area in square millimetres."""
        return self.width * self.height

    @property
    def used_area(self) -> float:
        """Total area of placed rectangles, kerf excluded."""
        return sum(p.area for p in self.placements)

    @property
    def waste_area(self) -> float:
        return self.slab_area - self.used_area

    @property
    def waste_percent(self) -> float:
        """Percentage of the raw slab that is not placed stone."""
        if self.slab_area == 0:
            return 0.0
        return self.waste_area / self.slab_area * 100

    @property
    def piece_count(self) -> int:
        return len(self.placements)


@dataclass(frozen=True)
class PackingResult:
    """Result of packing one material group.

    Attributes:
        slabs: Slab layouts, indexed from 0 within the group.
        unplaced: Ids of rectangles that could not be placed.
        warnings: Messages for units that could not be placed.
    """

    slabs: tuple[SlabResult, ...] = ()
    unplaced: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()

    @property
    def slab_count(self) -> int:
        return len(self.slabs)

    @property
    def placements(self) -> tuple[Placement, ...]:
        return tuple(p for slab in self.slabs for p in slab.placements)


@dataclass(frozen=True)
class _FreeRect:
    """Free area on a slab, in usable-area coordinates."""

    x: float
    y: float
    width: float
    height: float

    @property
    def area(self) -> float:
        return self.width * self.height


@dataclass
class _SlabState:
    """Internal state for a slab during packing.

    Attributes:
        index: Slab index (0-based).
        free: Disjoint free rectangles still available.
        placements: Placements committed so far.
    """

    index: int
    free: list[_FreeRect]
    placements: list[Placement] = field(default_factory=list)

    def copy(self) -> _SlabState:
        return _SlabState(
            index=self.index, free=list(self.free), placements=list(self.placements)
        )


@dataclass(frozen=True)
class _Fit:
    """A candidate position for one rectangle."""

    free_index: int
    rotated: bool
    width: float
    height: float
    reserved_width: float
    reserved_height: float
    leftover: float
    x: float
    y: float

    @property
    def sort_key(self) -> tuple[float, float, float, bool]:
        return (self.leftover, self.y, self.x, self.rotated)


def _reserve(size: float, free_size: float, at_edge: bool, kerf: float) -> float | None:
    """Length a cut consumes from a free span, or None if it does not fit.

    A trailing kerf is reserved after every cut unless the free span ends at
    the slab's usable edge, where no further cut is needed.
    """
    if size > free_size + EPSILON:
        return None
    if size + kerf <= free_size + EPSILON:
        return size + kerf
    if at_edge:
        return free_size
    return None


class GuillotineSlabPacker:
    """Best-fit guillotine packing with free-rectangle tracking.

    Each slab keeps a pool of disjoint free rectangles, starting with the
    whole usable area. Placing a rectangle in a free rectangle splits the
    remainder into a right and a bottom free rectangle along the shorter
    leftover axis, which keeps every cut edge-to-edge.

    Rectangles of one decomposed shape are placed as a unit: the whole
    group is trialled on a copy of a slab's free pool and only committed if
    every member fits.

    Attributes:
        slab: Slab dimensions and kerf.
        allow_rotation: Global rotation switch, combined with each
            rectangle's own permission.
    """

    def __init__(self, slab: SlabSpec, allow_rotation: bool = True) -> None:
        self.slab = slab
        self.allow_rotation = allow_rotation

    def pack(self, rectangles: Sequence[Rectangle]) -> PackingResult:
        """Pack rectangles onto as few slabs as the heuristic finds.

        Units are placed largest first. Each unit goes onto the first open
        slab it fits; a new slab is opened only when the unit fits on an
        empty one. Units that fit nowhere are reported unplaced.

        Args:
            rectangles: Rectangles for one material, oversize ones already
                split.

        Returns:
            PackingResult with slab layouts, unplaced ids and warnings.
        """
        if not rectangles:
            return PackingResult()

        units = self._sort_units(self._build_units(rectangles))
        logger.debug(
            "Packing %d rectangles in %d units onto %s slabs",
            len(rectangles),
            len(units),
            self.slab.name,
        )

        slabs: list[_SlabState] = []
        unplaced: list[str] = []
        warnings: list[str] = []

        for unit in units:
            placed = False
            for index, state in enumerate(slabs):
                trial = self._place_unit(state, unit)
                if trial is not None:
                    slabs[index] = trial
                    placed = True
                    break

            if not placed:
                trial = self._place_unit(self._new_slab(len(slabs)), unit)
                if trial is not None:
                    slabs.append(trial)
                    placed = True

            if not placed:
                unplaced.extend(rect.id for rect in unit)
                message = self._unplaced_message(unit)
                logger.warning(message)
                warnings.append(message)

        results = tuple(
            SlabResult(
                slab_index=state.index,
                width=self.slab.width,
                height=self.slab.height,
                placements=tuple(state.placements),
            )
            for state in slabs
        )
        for result in results:
            logger.debug(
                "Slab %d: %d pieces, %.1f%% waste",
                result.slab_index,
                result.piece_count,
                result.waste_percent,
            )

        return PackingResult(
            slabs=results, unplaced=tuple(unplaced), warnings=tuple(warnings)
        )

    def _build_units(
        self, rectangles: Sequence[Rectangle]
    ) -> list[tuple[Rectangle, ...]]:
        """Collect rectangles into placement units: singletons or whole groups."""
        units: list[list[Rectangle]] = []
        groups: dict[str, list[Rectangle]] = {}
        for rect in rectangles:
            group_id = rect.group_id
            if group_id is None:
                units.append([rect])
            elif group_id in groups:
                groups[group_id].append(rect)
            else:
                groups[group_id] = [rect]
                units.append(groups[group_id])
        return [tuple(self._sort_rectangles(unit)) for unit in units]

    @staticmethod
    def _sort_rectangles(rectangles: list[Rectangle]) -> list[Rectangle]:
        return sorted(rectangles, key=lambda r: (-r.area, -r.longer_side, r.id))

    @staticmethod
    def _sort_units(
        units: list[tuple[Rectangle, ...]],
    ) -> list[tuple[Rectangle, ...]]:
        """Sort units by total area, then longest side, then id (largest first)."""
        return sorted(
            units,
            key=lambda unit: (
                -sum(r.area for r in unit),
                -max(r.longer_side for r in unit),
                min(r.id for r in unit),
            ),
        )

    def _new_slab(self, index: int) -> _SlabState:
        return _SlabState(
            index=index,
            free=[
                _FreeRect(0.0, 0.0, self.slab.usable_width, self.slab.usable_height)
            ],
        )

    def _place_unit(
        self, state: _SlabState, unit: tuple[Rectangle, ...]
    ) -> _SlabState | None:
        """Trial every rectangle of a unit on a copy of the slab state.

        Returns:
            The updated copy if all rectangles fit, otherwise None.
        """
        trial = state.copy()
        for rect in unit:
            fit = self._best_fit(trial, rect)
            if fit is None:
                return None
            self._commit(trial, rect, fit)
        return trial

    def _orientations(self, rect: Rectangle) -> list[tuple[bool, float, float]]:
        orientations = [(False, rect.width, rect.height)]
        if self.allow_rotation and rect.can_rotate and rect.width != rect.height:
            orientations.append((True, rect.height, rect.width))
        return orientations

    def _best_fit(self, state: _SlabState, rect: Rectangle) -> _Fit | None:
        """Find the free rectangle leaving the least area unused.

        Ties go to the topmost, then leftmost position, then unrotated.
        """
        kerf = self.slab.kerf_width
        usable_w = self.slab.usable_width
        usable_h = self.slab.usable_height
        best: _Fit | None = None

        for index, free in enumerate(state.free):
            at_right = free.x + free.width >= usable_w - EPSILON
            at_bottom = free.y + free.height >= usable_h - EPSILON
            for rotated, width, height in self._orientations(rect):
                reserved_w = _reserve(width, free.width, at_right, kerf)
                reserved_h = _reserve(height, free.height, at_bottom, kerf)
                if reserved_w is None or reserved_h is None:
                    continue
                fit = _Fit(
                    free_index=index,
                    rotated=rotated,
                    width=width,
                    height=height,
                    reserved_width=reserved_w,
                    reserved_height=reserved_h,
                    leftover=free.area - width * height,
                    x=free.x,
                    y=free.y,
                )
                if best is None or fit.sort_key < best.sort_key:
                    best = fit
        return best

    def _commit(self, state: _SlabState, rect: Rectangle, fit: _Fit) -> None:
        """Place a rectangle and guillotine-split its free rectangle."""
        free = state.free.pop(fit.free_index)
        leftover_w = free.width - fit.reserved_width
        leftover_h = free.height - fit.reserved_height

        # Split along the shorter leftover axis
        if leftover_w < leftover_h:
            right = _FreeRect(
                free.x + fit.reserved_width, free.y, leftover_w, fit.reserved_height
            )
            bottom = _FreeRect(
                free.x, free.y + fit.reserved_height, free.width, leftover_h
            )
        else:
            right = _FreeRect(
                free.x + fit.reserved_width, free.y, leftover_w, free.height
            )
            bottom = _FreeRect(
                free.x, free.y + fit.reserved_height, fit.reserved_width, leftover_h
            )
        for candidate in (right, bottom):
            if candidate.width > EPSILON and candidate.height > EPSILON:
                state.free.append(candidate)

        kerf = (
            self.slab.strip_kerf if rect.is_lamination_strip else self.slab.kerf_width
        )
        allowance = self.slab.edge_allowance_mm
        placement = Placement(
            rectangle=rect,
            slab_index=state.index,
            x=allowance + fit.x,
            y=allowance + fit.y,
            rotated=fit.rotated,
            kerf_width_mm=kerf,
        )
        state.placements.append(placement)
        logger.debug(
            "Placed '%s' on slab %d at (%g, %g)%s",
            rect.id,
            state.index,
            placement.x,
            placement.y,
            " rotated" if fit.rotated else "",
        )

    def _unplaced_message(self, unit: tuple[Rectangle, ...]) -> str:
        usable = f"{self.slab.usable_width:g}x{self.slab.usable_height:g}mm"
        group_id = unit[0].group_id
        if group_id is not None and len(unit) > 1:
            return (
                f"Shape '{group_id}' ({len(unit)} parts) could not be placed "
                f"together on a single {usable} slab"
            )
        rect = unit[0]
        message = (
            f"'{rect.label or rect.id}' ({rect.width:g}x{rect.height:g}mm) "
            f"does not fit on a {usable} slab"
        )
        turned_fits = (
            rect.height <= self.slab.usable_width and rect.width <= self.slab.usable_height
        )
        if turned_fits and not (self.allow_rotation and rect.can_rotate):
            message += "; it would fit rotated but rotation is not allowed"
        return message
