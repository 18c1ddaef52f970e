"""Adapter to convert JobConfiguration into domain objects.

This module transforms the Pydantic job schema into the frozen dataclasses
the optimizer works with: pieces, slab specifications and the
OptimizationRequest that ties them together.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from stonecut.application.config.schemas import (
    EdgeFlagsConfig,
    EdgeTypesConfig,
    JobConfiguration,
    LaminationConfigSchema,
    LegConfig,
    MaterialConfig,
    PieceConfig,
    ShapeConfig,
)
from stonecut.domain.services.lamination import LaminationConfig
from stonecut.domain.services.shape_decomposer import shape_bounding_box
from stonecut.domain.slab_sizes import resolve_slab_dimensions
from stonecut.domain.value_objects import (
    EdgeSide,
    EdgeTypeNames,
    FinishedEdges,
    LegSpec,
    LShape,
    Piece,
    RectangleShape,
    Shape,
    SlabSpec,
    UnrecognizedShape,
    UShape,
)

if TYPE_CHECKING:
    from stonecut.infrastructure.optimization_service import OptimizationRequest


def _leg_to_domain(config: LegConfig | None) -> LegSpec:
    assert config is not None
    return LegSpec(length_mm=config.length_mm, width_mm=config.width_mm)


def _shape_config_to_domain(config: ShapeConfig) -> Shape:
    """Map a shape config onto the closed set of domain shapes.

    Unknown type names are kept as UnrecognizedShape so the decomposer can
    warn and fall back to the bounding rectangle.
    """
    match config.type:
        case "rectangle":
            return RectangleShape()
        case "l_shape":
            return LShape(leg1=_leg_to_domain(config.leg1), leg2=_leg_to_domain(config.leg2))
        case "u_shape":
            return UShape(
                left_leg=_leg_to_domain(config.left_leg),
                back=_leg_to_domain(config.back),
                right_leg=_leg_to_domain(config.right_leg),
            )
        case other:
            return UnrecognizedShape(shape_type=other)


def _edges_to_domain(config: EdgeFlagsConfig | None) -> FinishedEdges | None:
    if config is None:
        return None
    return FinishedEdges(
        top=config.top, bottom=config.bottom, left=config.left, right=config.right
    )


def _edge_types_to_domain(config: EdgeTypesConfig | None) -> EdgeTypeNames | None:
    if config is None:
        return None
    return EdgeTypeNames(
        top=config.top, bottom=config.bottom, left=config.left, right=config.right
    )


def config_to_piece(config: PieceConfig) -> Piece:
    """Convert one piece config to a domain Piece.

    L and U shapes without explicit dimensions take their bounding box.
    """
    shape = _shape_config_to_domain(config.shape)
    bounds = shape_bounding_box(shape)
    length = config.length_mm
    width = config.width_mm
    if bounds is not None:
        length = length or bounds[0]
        width = width or bounds[1]
    assert length is not None and width is not None

    return Piece(
        id=config.id,
        width=length,
        height=width,
        label=config.label,
        material_id=config.material_id,
        thickness=config.thickness_mm,
        can_rotate=config.can_rotate,
        grain_matched=config.grain_matched,
        finished_edges=_edges_to_domain(config.finished_edges),
        edge_type_names=_edge_types_to_domain(config.edge_types),
        requires_lamination=config.requires_lamination,
        no_strip_edges=frozenset(EdgeSide(side.value) for side in config.no_strip_edges),
        shape=shape,
    )


def config_to_slab(config: MaterialConfig) -> SlabSpec:
    """Convert a material config to a SlabSpec.

    Slab dimensions resolve through explicit values, then the category's
    standard size, then the jumbo engineered quartz size.

    Raises:
        ValueError: If the resulting slab configuration is invalid.
    """
    length, width = resolve_slab_dimensions(
        config.slab_length_mm, config.slab_width_mm, config.category
    )
    return SlabSpec(
        material_id=config.id,
        material_name=config.name,
        width=length,
        height=width,
        kerf_width=config.kerf_mm,
        edge_allowance_mm=config.edge_allowance_mm,
        mitre_kerf_width=config.mitre_kerf_mm,
    )


def config_to_lamination(config: LaminationConfigSchema) -> LaminationConfig:
    return LaminationConfig(
        enabled=config.enabled,
        thickness_threshold=config.thickness_threshold_mm,
        default_strip_width=config.default_strip_width_mm,
        strip_widths=tuple((rule.keyword, rule.width_mm) for rule in config.strip_widths),
    )


def config_to_request(config: JobConfiguration) -> OptimizationRequest:
    """Convert a JobConfiguration into an OptimizationRequest.

    Args:
        config: A validated job configuration.

    Returns:
        OptimizationRequest ready for SlabOptimizationService.optimize().

    Raises:
        ValueError: If a material's slab configuration is invalid.
    """
    # Lazy import to avoid circular dependencies
    from stonecut.infrastructure.optimization_service import OptimizationRequest

    return OptimizationRequest(
        pieces=tuple(config_to_piece(piece) for piece in config.pieces),
        slabs={material.id: config_to_slab(material) for material in config.materials},
        allow_rotation=config.options.allow_rotation,
        primary_material_id=config.options.primary_material_id,
        lamination=config_to_lamination(config.lamination),
        allow_oversize_splitting=config.options.allow_oversize_splitting,
        max_workers=config.options.max_workers,
    )
