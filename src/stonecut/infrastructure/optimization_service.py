"""Slab optimization pipeline and result aggregation.

Runs the full pipeline for a quote: shape decomposition, lamination strip
synthesis, oversize splitting and packing, once per material group, then
combines the group results into a single OptimizationResult with globally
numbered slabs.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from typing import Mapping, Sequence

from stonecut.domain.services import (
    LaminationConfig,
    LaminationStripGenerator,
    LaminationSummary,
    MaterialGroup,
    OversizeSplitter,
    ShapeDecomposer,
    group_by_material,
    resolve_material_ids,
    summarize_strips,
)
from stonecut.domain.value_objects import (
    OversizePieceInfo,
    Piece,
    Rectangle,
    SlabSpec,
)

from .bin_packing import GuillotineSlabPacker, Placement, SlabResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OptimizationRequest:
    """Everything needed to optimize one quote.

    Attributes:
        pieces: Input pieces, with unique ids.
        slabs: Slab configuration keyed by material id.
        allow_rotation: Global rotation switch.
        primary_material_id: Material for pieces that carry none.
        lamination: Lamination strip rules.
        allow_oversize_splitting: Split rectangles larger than the slab.
        max_workers: Threads used to pack material groups; 1 packs
            sequentially.
    """

    pieces: tuple[Piece, ...]
    slabs: Mapping[str, SlabSpec]
    allow_rotation: bool = True
    primary_material_id: str | None = None
    lamination: LaminationConfig = field(default_factory=LaminationConfig)
    allow_oversize_splitting: bool = True
    max_workers: int = 1

    def __post_init__(self) -> None:
        if self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        seen: set[str] = set()
        for piece in self.pieces:
            if piece.id in seen:
                raise ValueError(f"Duplicate piece id: {piece.id}")
            seen.add(piece.id)
        for material_id, slab in self.slabs.items():
            if slab.material_id != material_id:
                raise ValueError(
                    f"Slab keyed '{material_id}' is configured for material "
                    f"'{slab.material_id}'"
                )


@dataclass(frozen=True)
class MaterialGroupResult:
    """Packing result for the pieces of one material.

    Attributes:
        material_id: Material identity.
        material_name: Display name used to prefix warnings.
        slab_width: Raw slab length in mm.
        slab_height: Raw slab width in mm.
        rectangles: Rectangles that were packed (after splitting).
        slab_results: Slab layouts, numbered globally.
        oversize_pieces: Records of oversize splits.
        unplaced_pieces: Ids of rectangles that could not be placed.
        warnings: Group warnings, prefixed with the material name.
        lamination_strips: Strips synthesized for this group, before
            splitting.
    """

    material_id: str
    material_name: str
    slab_width: float
    slab_height: float
    rectangles: tuple[Rectangle, ...] = ()
    slab_results: tuple[SlabResult, ...] = ()
    oversize_pieces: tuple[OversizePieceInfo, ...] = ()
    unplaced_pieces: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    lamination_strips: tuple[Rectangle, ...] = ()

    @property
    def slab_count(self) -> int:
        return len(self.slab_results)

    @property
    def slab_area(self) -> float:
        return self.slab_width * self.slab_height

    @property
    def used_area(self) -> float:
        return sum(slab.used_area for slab in self.slab_results)

    @property
    def waste_area(self) -> float:
        return self.slab_area * self.slab_count - self.used_area

    @property
    def waste_percent(self) -> float:
        total = self.slab_area * self.slab_count
        if total == 0:
            return 0.0
        return self.waste_area / total * 100


@dataclass(frozen=True)
class OptimizationResult:
    """Final result of a slab optimization.

    Areas are in square millimetres.

    Attributes:
        placements: Every placement, in slab order.
        slabs: Every slab layout, numbered globally in group order.
        unplaced_pieces: Ids of rectangles that could not be placed.
        lamination_summary: Strip summary, or None when no strips exist.
        warnings: All warnings in generation order.
        edge_allowance_mm: Edge allowance applied to the slabs.
        material_groups: Per-material results, in first-seen order.
    """

    placements: tuple[Placement, ...] = ()
    slabs: tuple[SlabResult, ...] = ()
    unplaced_pieces: tuple[str, ...] = ()
    lamination_summary: LaminationSummary | None = None
    warnings: tuple[str, ...] = ()
    edge_allowance_mm: float = 0.0
    material_groups: tuple[MaterialGroupResult, ...] = ()

    @property
    def total_slabs(self) -> int:
        return len(self.slabs)

    @property
    def total_used_area(self) -> float:
        return sum(group.used_area for group in self.material_groups)

    @property
    def total_waste_area(self) -> float:
        return sum(group.waste_area for group in self.material_groups)

    @property
    def waste_percent(self) -> float:
        """Overall waste across all groups, weighted by slab area."""
        total = self.total_used_area + self.total_waste_area
        if total == 0:
            return 0.0
        return self.total_waste_area / total * 100

    @property
    def oversize_pieces(self) -> tuple[OversizePieceInfo, ...]:
        return tuple(
            info for group in self.material_groups for info in group.oversize_pieces
        )


class SlabOptimizationService:
    """Coordinates the optimization pipeline across material groups.

    Configuration for every material is validated before any group is
    processed, so a configuration error never yields a partial result.
    Each group is processed independently; with ``max_workers > 1`` groups
    run on a thread pool and are merged back in group order, so the output
    is identical either way.
    """

    def __init__(self) -> None:
        self.decomposer = ShapeDecomposer()

    def optimize(self, request: OptimizationRequest) -> OptimizationResult:
        """Run the optimizer.

        Args:
            request: Pieces, slab configuration and options.

        Returns:
            OptimizationResult with placements, statistics and warnings.

        Raises:
            MaterialConfigurationError: If a piece has no material or its
                material has no slab configuration.
        """
        if not request.pieces:
            return OptimizationResult()

        material_ids = resolve_material_ids(
            request.pieces, request.slabs, request.primary_material_id
        )
        pieces = [
            piece
            if piece.material_id == material_ids[piece.id]
            else replace(piece, material_id=material_ids[piece.id])
            for piece in request.pieces
        ]
        groups = group_by_material(
            ((material_ids[piece.id], piece) for piece in pieces), request.slabs
        )

        logger.info(
            "Optimizing %d pieces across %d material groups",
            len(pieces),
            len(groups),
        )

        def run(group: MaterialGroup[Piece]) -> MaterialGroupResult:
            return self._optimize_group(group, request)

        if request.max_workers > 1 and len(groups) > 1:
            with ThreadPoolExecutor(max_workers=request.max_workers) as executor:
                group_results = list(executor.map(run, groups))
        else:
            group_results = [run(group) for group in groups]

        return self._combine(pieces, groups, group_results)

    def _optimize_group(
        self, group: MaterialGroup[Piece], request: OptimizationRequest
    ) -> MaterialGroupResult:
        """Decompose, laminate, split and pack the pieces of one material."""
        slab = group.slab
        warnings: list[str] = []

        by_piece, decompose_warnings = self.decomposer.decompose(group.items)
        warnings.extend(decompose_warnings)

        generator = LaminationStripGenerator(request.lamination)
        strips: list[Rectangle] = []
        rectangles: list[Rectangle] = []
        for piece in group.items:
            rectangles.extend(by_piece[piece.id])
            piece_strips = generator.generate(piece, slab.strip_kerf)
            strips.extend(piece_strips)
            rectangles.extend(piece_strips)

        splitter = OversizeSplitter(
            slab,
            allow_rotation=request.allow_rotation,
            enabled=request.allow_oversize_splitting,
        )
        split = splitter.split_all(rectangles)
        warnings.extend(split.warnings)

        packer = GuillotineSlabPacker(slab, allow_rotation=request.allow_rotation)
        packing = packer.pack(split.rectangles)
        warnings.extend(packing.warnings)

        logger.debug(
            "%s: %d pieces -> %d rectangles -> %d slabs",
            slab.name,
            len(group.items),
            len(split.rectangles),
            packing.slab_count,
        )

        return MaterialGroupResult(
            material_id=group.material_id,
            material_name=slab.name,
            slab_width=slab.width,
            slab_height=slab.height,
            rectangles=split.rectangles,
            slab_results=packing.slabs,
            oversize_pieces=split.oversize_infos,
            unplaced_pieces=packing.unplaced,
            warnings=tuple(f"[{slab.name}] {w}" for w in warnings),
            lamination_strips=tuple(strips),
        )

    def _combine(
        self,
        pieces: Sequence[Piece],
        groups: Sequence[MaterialGroup[Piece]],
        group_results: Sequence[MaterialGroupResult],
    ) -> OptimizationResult:
        """Renumber slabs globally and merge group results in order."""
        renumbered: list[MaterialGroupResult] = []
        offset = 0
        for group_result in group_results:
            slabs = tuple(
                replace(
                    slab,
                    slab_index=slab.slab_index + offset,
                    placements=tuple(
                        replace(p, slab_index=p.slab_index + offset)
                        for p in slab.placements
                    ),
                )
                for slab in group_result.slab_results
            )
            offset += len(slabs)
            renumbered.append(replace(group_result, slab_results=slabs))

        all_slabs = tuple(slab for g in renumbered for slab in g.slab_results)
        strips = [strip for g in renumbered for strip in g.lamination_strips]
        result = OptimizationResult(
            placements=tuple(p for slab in all_slabs for p in slab.placements),
            slabs=all_slabs,
            unplaced_pieces=tuple(pid for g in renumbered for pid in g.unplaced_pieces),
            lamination_summary=summarize_strips(pieces, strips),
            warnings=tuple(w for g in renumbered for w in g.warnings),
            edge_allowance_mm=max(
                (group.slab.edge_allowance_mm for group in groups), default=0.0
            ),
            material_groups=tuple(renumbered),
        )

        logger.info(
            "Optimization complete: %d slabs, %.1f%% waste, %d unplaced",
            result.total_slabs,
            result.waste_percent,
            len(result.unplaced_pieces),
        )
        return result
