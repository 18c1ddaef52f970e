"""Domain services for slab optimization pre-processing.

This package provides the stages that turn input pieces into the flat list
of rectangles the packer places:
- Shape decomposition of L/U benchtops into rectangle groups
- Lamination strip synthesis for built-up edges
- Oversize splitting across multiple slabs
- Grouping by material
"""

from .lamination import (
    LaminationConfig,
    LaminationStripGenerator,
    LaminationSummary,
    ParentStrips,
    StripInfo,
    summarize_strips,
)
from .material_grouper import (
    MaterialConfigurationError,
    MaterialGroup,
    group_by_material,
    resolve_material_ids,
)
from .oversize_splitter import (
    OversizeSplitter,
    SplitResult,
    balanced_segments,
    segment_count,
    suggested_join_position,
)
from .shape_decomposer import (
    DecompositionResult,
    ShapeDecomposer,
    bounding_box,
    corner_joins,
    decompose_piece,
    shape_bounding_box,
    shape_edge_lengths,
    shape_net_area_mm2,
)

__all__ = [
    "DecompositionResult",
    "LaminationConfig",
    "LaminationStripGenerator",
    "LaminationSummary",
    "MaterialConfigurationError",
    "MaterialGroup",
    "OversizeSplitter",
    "ParentStrips",
    "ShapeDecomposer",
    "SplitResult",
    "StripInfo",
    "balanced_segments",
    "bounding_box",
    "corner_joins",
    "decompose_piece",
    "group_by_material",
    "resolve_material_ids",
    "segment_count",
    "shape_bounding_box",
    "shape_edge_lengths",
    "shape_net_area_mm2",
    "suggested_join_position",
    "summarize_strips",
]
