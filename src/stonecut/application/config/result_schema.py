"""Pydantic output schemas for optimization results.

These models define the JSON shape of an OptimizationResult as written by
the CLI and consumed by quoting and cut-diagram services.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from stonecut.domain.services.lamination import LaminationSummary
    from stonecut.domain.value_objects import OversizePieceInfo
    from stonecut.infrastructure.bin_packing import Placement, SlabResult
    from stonecut.infrastructure.optimization_service import (
        MaterialGroupResult,
        OptimizationResult,
    )


class PlacementSchema(BaseModel):
    """A rectangle placed on a slab."""

    rectangle_id: str = Field(..., description="Placed rectangle id")
    piece_id: str = Field(..., description="Input piece the rectangle belongs to")
    slab_index: int = Field(..., description="Global slab index")
    x: float = Field(..., description="Left edge from raw slab corner in mm")
    y: float = Field(..., description="Top edge from raw slab corner in mm")
    width: float = Field(..., description="Placed width in mm")
    height: float = Field(..., description="Placed height in mm")
    rotated: bool = Field(..., description="Turned 90 degrees")
    label: str = Field(default="", description="Display label")
    kerf_width_mm: float = Field(..., description="Kerf of the cutting blade")
    group_id: str | None = Field(default=None, description="Shape group id")
    part_index: int | None = None
    total_parts: int | None = None
    is_lamination_strip: bool = False
    parent_piece_id: str | None = None
    strip_position: str | None = None
    is_segment: bool = False
    segment_index: int | None = None
    total_segments: int | None = None


class SlabResultSchema(BaseModel):
    """One slab and what is cut from it."""

    slab_index: int = Field(..., description="Global slab index")
    width: float = Field(..., description="Raw slab length in mm")
    height: float = Field(..., description="Raw slab width in mm")
    used_area: float = Field(..., description="Placed area in mm^2")
    waste_area: float = Field(..., description="Unused area in mm^2")
    waste_percent: float = Field(..., description="Waste percentage")
    placements: list[PlacementSchema] = Field(default_factory=list)


class SegmentSchema(BaseModel):
    length: float
    width: float


class OversizePieceSchema(BaseModel):
    """A rectangle that was split across slabs."""

    piece_id: str
    rectangle_id: str
    label: str
    join_strategy: str = Field(..., description="LENGTHWISE, WIDTHWISE or MULTI_JOIN")
    segments: list[SegmentSchema]
    suggested_join_position_mm: float
    join_length_mm: float


class StripSchema(BaseModel):
    position: str
    length_mm: float
    width_mm: float


class ParentStripsSchema(BaseModel):
    parent_piece_id: str
    parent_label: str
    strips: list[StripSchema]


class LaminationSummarySchema(BaseModel):
    """Lamination strips synthesized for the job."""

    total_strips: int
    total_strip_area_m2: float = Field(..., description="Combined strip area in m^2")
    strips_by_parent: list[ParentStripsSchema] = Field(default_factory=list)


class MaterialGroupSchema(BaseModel):
    """Per-material result."""

    material_id: str
    material_name: str
    slab_width: float
    slab_height: float
    slab_count: int
    used_area: float
    waste_area: float
    waste_percent: float
    oversize_pieces: list[OversizePieceSchema] = Field(default_factory=list)
    unplaced_pieces: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class OptimizationResultSchema(BaseModel):
    """Complete optimization result."""

    total_slabs: int = Field(..., description="Number of slabs required")
    total_used_area: float = Field(..., description="Placed area in mm^2")
    total_waste_area: float = Field(..., description="Unused area in mm^2")
    waste_percent: float = Field(..., description="Overall waste percentage")
    edge_allowance_mm: float
    slabs: list[SlabResultSchema] = Field(default_factory=list)
    unplaced_pieces: list[str] = Field(default_factory=list)
    lamination_summary: LaminationSummarySchema | None = None
    oversize_pieces: list[OversizePieceSchema] = Field(default_factory=list)
    material_groups: list[MaterialGroupSchema] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


def _placement_to_schema(placement: Placement) -> PlacementSchema:
    strip_position = placement.strip_position
    return PlacementSchema(
        rectangle_id=placement.rectangle_id,
        piece_id=placement.piece_id,
        slab_index=placement.slab_index,
        x=placement.x,
        y=placement.y,
        width=placement.width,
        height=placement.height,
        rotated=placement.rotated,
        label=placement.label,
        kerf_width_mm=placement.kerf_width_mm,
        group_id=placement.group_id,
        part_index=placement.part_index,
        total_parts=placement.total_parts,
        is_lamination_strip=placement.is_lamination_strip,
        parent_piece_id=placement.parent_piece_id,
        strip_position=strip_position.value if strip_position else None,
        is_segment=placement.is_segment,
        segment_index=placement.segment_index,
        total_segments=placement.total_segments,
    )


def _slab_to_schema(slab: SlabResult) -> SlabResultSchema:
    return SlabResultSchema(
        slab_index=slab.slab_index,
        width=slab.width,
        height=slab.height,
        used_area=slab.used_area,
        waste_area=slab.waste_area,
        waste_percent=slab.waste_percent,
        placements=[_placement_to_schema(p) for p in slab.placements],
    )


def _oversize_to_schema(info: OversizePieceInfo) -> OversizePieceSchema:
    return OversizePieceSchema(
        piece_id=info.piece_id,
        rectangle_id=info.rectangle_id,
        label=info.label,
        join_strategy=info.join_strategy.value,
        segments=[SegmentSchema(length=s.length, width=s.width) for s in info.segments],
        suggested_join_position_mm=info.suggested_join_position_mm,
        join_length_mm=info.join_length_mm,
    )


def _lamination_to_schema(summary: LaminationSummary) -> LaminationSummarySchema:
    return LaminationSummarySchema(
        total_strips=summary.total_strips,
        total_strip_area_m2=summary.total_strip_area_m2,
        strips_by_parent=[
            ParentStripsSchema(
                parent_piece_id=parent.parent_piece_id,
                parent_label=parent.parent_label,
                strips=[
                    StripSchema(
                        position=strip.position.value,
                        length_mm=strip.length_mm,
                        width_mm=strip.width_mm,
                    )
                    for strip in parent.strips
                ],
            )
            for parent in summary.strips_by_parent
        ],
    )


def _group_to_schema(group: MaterialGroupResult) -> MaterialGroupSchema:
    return MaterialGroupSchema(
        material_id=group.material_id,
        material_name=group.material_name,
        slab_width=group.slab_width,
        slab_height=group.slab_height,
        slab_count=group.slab_count,
        used_area=group.used_area,
        waste_area=group.waste_area,
        waste_percent=group.waste_percent,
        oversize_pieces=[_oversize_to_schema(info) for info in group.oversize_pieces],
        unplaced_pieces=list(group.unplaced_pieces),
        warnings=list(group.warnings),
    )


def result_to_schema(result: OptimizationResult) -> OptimizationResultSchema:
    """Convert an OptimizationResult into its JSON-serializable schema.

    Example:
        >>> schema = result_to_schema(result)
        >>> schema.model_dump_json(indent=2)
    """
    return OptimizationResultSchema(
        total_slabs=result.total_slabs,
        total_used_area=result.total_used_area,
        total_waste_area=result.total_waste_area,
        waste_percent=result.waste_percent,
        edge_allowance_mm=result.edge_allowance_mm,
        slabs=[_slab_to_schema(slab) for slab in result.slabs],
        unplaced_pieces=list(result.unplaced_pieces),
        lamination_summary=(
            _lamination_to_schema(result.lamination_summary)
            if result.lamination_summary is not None
            else None
        ),
        oversize_pieces=[_oversize_to_schema(info) for info in result.oversize_pieces],
        material_groups=[_group_to_schema(group) for group in result.material_groups],
        warnings=list(result.warnings),
    )
