"""Pydantic configuration schema models for slab optimization jobs.

This module defines the schema for JSON job files. A job lists the pieces
to cut, the materials they are cut from and the optimizer options. It uses
Pydantic v2 for validation and serialization.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Supported schema versions for job files
# Version 1.0: Initial schema with pieces, materials and lamination options
SUPPORTED_VERSIONS: frozenset[str] = frozenset({"1.0"})


class EdgeSideConfig(str, Enum):
    """Piece edge sides for configuration.

    Mirrors the domain EdgeSide with string values for JSON.
    """

    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"


# =============================================================================
# Pieces
# =============================================================================


class LegConfig(BaseModel):
    """One leg of an L or U shaped piece.

    Attributes:
        length_mm: Leg length along its run.
        width_mm: Leg depth.
    """

    model_config = ConfigDict(extra="forbid")

    length_mm: float = Field(..., gt=0, description="Leg length in mm")
    width_mm: float = Field(..., gt=0, description="Leg depth in mm")


class ShapeConfig(BaseModel):
    """Shape of a piece.

    ``type`` is "rectangle", "l_shape" or "u_shape". Any other value is
    accepted and treated as the piece's bounding rectangle with a warning.

    Attributes:
        type: Shape type name.
        leg1: First leg of an L shape (the top run).
        leg2: Second leg of an L shape (the dropped leg).
        left_leg: Left leg of a U shape.
        back: Back run of a U shape.
        right_leg: Right leg of a U shape.
    """

    model_config = ConfigDict(extra="forbid")

    type: str = Field(default="rectangle", min_length=1)
    leg1: LegConfig | None = None
    leg2: LegConfig | None = None
    left_leg: LegConfig | None = None
    back: LegConfig | None = None
    right_leg: LegConfig | None = None

    @field_validator("type")
    @classmethod
    def normalize_type(cls, v: str) -> str:
        """Normalize shape type names ("L-Shape", "l_shape", "L" are equal)."""
        normalized = v.strip().lower().replace("-", "_").replace(" ", "_")
        aliases = {"l": "l_shape", "lshape": "l_shape", "u": "u_shape", "ushape": "u_shape"}
        return aliases.get(normalized, normalized)

    @model_validator(mode="after")
    def validate_legs(self) -> "ShapeConfig":
        """Ensure L and U shapes carry the legs they need."""
        if self.type == "l_shape" and (self.leg1 is None or self.leg2 is None):
            raise ValueError("l_shape requires leg1 and leg2")
        if self.type == "u_shape" and (
            self.left_leg is None or self.back is None or self.right_leg is None
        ):
            raise ValueError("u_shape requires left_leg, back and right_leg")
        return self

    @property
    def is_compound(self) -> bool:
        return self.type in ("l_shape", "u_shape")


class EdgeFlagsConfig(BaseModel):
    """Which edges of a piece are finished (polished and visible)."""

    model_config = ConfigDict(extra="forbid")

    top: bool = False
    bottom: bool = False
    left: bool = False
    right: bool = False


class EdgeTypesConfig(BaseModel):
    """Edge profile name per side, e.g. "40mm Mitre" or "Pencil Round"."""

    model_config = ConfigDict(extra="forbid")

    top: str | None = None
    bottom: str | None = None
    left: str | None = None
    right: str | None = None


class PieceConfig(BaseModel):
    """Configuration for one fabricated piece.

    Rectangular pieces need ``length_mm`` and ``width_mm``. For L and U
    shapes they default to the shape's bounding box.

    Attributes:
        id: Unique piece id.
        label: Display label for cut lists.
        length_mm: Piece length (the longer run for benchtops).
        width_mm: Piece depth.
        thickness_mm: Finished thickness.
        material_id: Material the piece is cut from.
        can_rotate: Whether the piece may be turned 90 degrees.
        grain_matched: Grain-matched pieces are never rotated.
        finished_edges: Finished edges by side.
        edge_types: Edge profile names by side.
        requires_lamination: Force strips below the thickness threshold.
        no_strip_edges: Sides against a wall that never get strips.
        shape: Piece shape.
    """

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1)
    label: str = ""
    length_mm: float | None = Field(default=None, gt=0)
    width_mm: float | None = Field(default=None, gt=0)
    thickness_mm: float = Field(default=20.0, gt=0, le=200)
    material_id: str | None = None
    can_rotate: bool = True
    grain_matched: bool = False
    finished_edges: EdgeFlagsConfig | None = None
    edge_types: EdgeTypesConfig | None = None
    requires_lamination: bool = False
    no_strip_edges: list[EdgeSideConfig] = Field(default_factory=list)
    shape: ShapeConfig = Field(default_factory=ShapeConfig)

    @model_validator(mode="after")
    def validate_dimensions(self) -> "PieceConfig":
        """Require explicit dimensions unless the shape supplies them."""
        if not self.shape.is_compound and (
            self.length_mm is None or self.width_mm is None
        ):
            raise ValueError(
                f"Piece '{self.id}' requires length_mm and width_mm "
                f"for shape '{self.shape.type}'"
            )
        return self


# =============================================================================
# Materials
# =============================================================================


class MaterialConfig(BaseModel):
    """Slab configuration for one material.

    Slab dimensions fall back to the fabrication category's standard size,
    then to 3200 x 1600.

    Attributes:
        id: Material id referenced by pieces.
        name: Display name.
        category: Fabrication category or brand (e.g. "caesarstone").
        slab_length_mm: Raw slab length.
        slab_width_mm: Raw slab width.
        kerf_mm: Saw blade kerf.
        mitre_kerf_mm: Mitring machine kerf used for lamination strips.
        edge_allowance_mm: Unusable margin per slab side.
    """

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1)
    name: str = ""
    category: str | None = None
    slab_length_mm: float | None = Field(default=None, gt=0)
    slab_width_mm: float | None = Field(default=None, gt=0)
    kerf_mm: float = Field(default=3.0, ge=0, le=20)
    mitre_kerf_mm: float | None = Field(default=None, ge=0, le=20)
    edge_allowance_mm: float = Field(default=0.0, ge=0)


# =============================================================================
# Options
# =============================================================================


class StripWidthRuleConfig(BaseModel):
    """Strip width for edges whose type name contains ``keyword``."""

    model_config = ConfigDict(extra="forbid")

    keyword: str = Field(..., min_length=1)
    width_mm: float = Field(..., gt=0)


class LaminationConfigSchema(BaseModel):
    """Configuration for lamination strip synthesis.

    Attributes:
        enabled: Generate strips at all.
        thickness_threshold_mm: Pieces at least this thick get strips.
        default_strip_width_mm: Strip width when no rule matches.
        strip_widths: Ordered keyword rules; first match wins.
    """

    model_config = ConfigDict(extra="forbid")

    enabled: bool = True
    thickness_threshold_mm: float = Field(default=40.0, gt=0)
    default_strip_width_mm: float = Field(default=60.0, gt=0)
    strip_widths: list[StripWidthRuleConfig] = Field(
        default_factory=lambda: [StripWidthRuleConfig(keyword="mitre", width_mm=40.0)]
    )


class OptimizerOptionsConfig(BaseModel):
    """Optimizer switches.

    Attributes:
        allow_rotation: Allow 90 degree rotation where pieces permit it.
        allow_oversize_splitting: Split pieces larger than a slab.
        primary_material_id: Material for pieces without one.
        max_workers: Threads used to pack material groups.
    """

    model_config = ConfigDict(extra="forbid")

    allow_rotation: bool = True
    allow_oversize_splitting: bool = True
    primary_material_id: str | None = None
    max_workers: int = Field(default=1, ge=1, le=32)


# =============================================================================
# Root
# =============================================================================


class JobConfiguration(BaseModel):
    """Root configuration model for a slab optimization job.

    Attributes:
        schema_version: Version string in format "major.minor" (e.g., "1.0")
        materials: Slab configuration per material
        pieces: Pieces to cut
        options: Optimizer switches
        lamination: Lamination strip rules

    Example:
        >>> job = JobConfiguration(
        ...     schema_version="1.0",
        ...     materials=[MaterialConfig(id="m1")],
        ...     pieces=[PieceConfig(id="p1", length_mm=2000, width_mm=600, material_id="m1")],
        ... )
    """

    model_config = ConfigDict(extra="forbid")

    schema_version: str = Field(..., pattern=r"^\d+\.\d+$")
    materials: list[MaterialConfig] = Field(..., min_length=1)
    pieces: list[PieceConfig] = Field(default_factory=list)
    options: OptimizerOptionsConfig = Field(default_factory=OptimizerOptionsConfig)
    lamination: LaminationConfigSchema = Field(default_factory=LaminationConfigSchema)

    @field_validator("schema_version")
    @classmethod
    def validate_supported_version(cls, v: str) -> str:
        """Validate that schema version is supported.

        Newer minor versions within a supported major version are accepted
        for forward compatibility.
        """
        if v in SUPPORTED_VERSIONS:
            return v

        major_version = int(v.split(".")[0])
        supported_majors = {int(sv.split(".")[0]) for sv in SUPPORTED_VERSIONS}
        if major_version in supported_majors:
            return v

        raise ValueError(
            f"Unsupported schema version '{v}'. "
            f"Supported versions: {sorted(SUPPORTED_VERSIONS)}"
        )

    @model_validator(mode="after")
    def validate_unique_ids(self) -> "JobConfiguration":
        """Piece ids and material ids must each be unique."""
        for kind, ids in (
            ("material", [m.id for m in self.materials]),
            ("piece", [p.id for p in self.pieces]),
        ):
            duplicates = sorted({i for i in ids if ids.count(i) > 1})
            if duplicates:
                raise ValueError(f"Duplicate {kind} id(s): {', '.join(duplicates)}")
        return self

    def summary(self) -> dict[str, Any]:
        """Short description for CLI output."""
        return {
            "schema_version": self.schema_version,
            "materials": len(self.materials),
            "pieces": len(self.pieces),
        }
