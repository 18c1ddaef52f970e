"""Unit tests for job configuration schema and loader.

These tests verify:
- Valid jobs are loaded correctly
- Missing required fields produce clear errors
- Unknown fields are rejected (extra="forbid")
- Schema version validation
- Shape type normalization and leg requirements
- Loader error handling (file not found, JSON parse errors, validation)
"""

from pathlib import Path
from typing import Any

import pytest
from pydantic import ValidationError as PydanticValidationError

from stonecut.application.config import (
    SUPPORTED_VERSIONS,
    ConfigError,
    JobConfiguration,
    LaminationConfigSchema,
    MaterialConfig,
    OptimizerOptionsConfig,
    PieceConfig,
    ShapeConfig,
    load_job,
    load_job_from_dict,
)


# Get path to test fixtures
FIXTURES_PATH = Path(__file__).parent.parent / "fixtures" / "jobs"


class TestMaterialConfig:
    """Tests for MaterialConfig model."""

    def test_defaults(self) -> None:
        material = MaterialConfig(id="quartz")
        assert material.kerf_mm == 3.0
        assert material.mitre_kerf_mm is None
        assert material.edge_allowance_mm == 0.0
        assert material.slab_length_mm is None

    def test_negative_kerf_rejected(self) -> None:
        with pytest.raises(PydanticValidationError):
            MaterialConfig(id="quartz", kerf_mm=-1)

    def test_zero_slab_dimension_rejected(self) -> None:
        with pytest.raises(PydanticValidationError):
            MaterialConfig(id="quartz", slab_length_mm=0)

    def test_extra_field_rejected(self) -> None:
        with pytest.raises(PydanticValidationError, match="Extra inputs"):
            MaterialConfig(id="quartz", colour="white")


class TestShapeConfig:
    """Tests for ShapeConfig model."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("rectangle", "rectangle"),
            ("L-Shape", "l_shape"),
            ("l", "l_shape"),
            ("U Shape", "u_shape"),
            ("ushape", "u_shape"),
            ("Trapezoid", "trapezoid"),
        ],
    )
    def test_type_normalization(self, raw: str, expected: str) -> None:
        legs: dict[str, Any] = {}
        if expected == "l_shape":
            legs = {"leg1": {"length_mm": 2000, "width_mm": 600}, "leg2": {"length_mm": 1500, "width_mm": 600}}
        elif expected == "u_shape":
            leg = {"length_mm": 1500, "width_mm": 600}
            legs = {"left_leg": leg, "back": {"length_mm": 3000, "width_mm": 600}, "right_leg": leg}
        assert ShapeConfig(type=raw, **legs).type == expected

    def test_l_shape_requires_legs(self) -> None:
        with pytest.raises(PydanticValidationError, match="l_shape requires leg1 and leg2"):
            ShapeConfig(type="l_shape", leg1={"length_mm": 2000, "width_mm": 600})

    def test_u_shape_requires_legs(self) -> None:
        with pytest.raises(PydanticValidationError, match="u_shape requires"):
            ShapeConfig(type="u_shape")

    def test_unknown_type_is_not_compound(self) -> None:
        assert ShapeConfig(type="circle").is_compound is False


class TestPieceConfig:
    """Tests for PieceConfig model."""

    def test_defaults(self) -> None:
        piece = PieceConfig(id="p1", length_mm=2000, width_mm=600)
        assert piece.thickness_mm == 20.0
        assert piece.can_rotate is True
        assert piece.grain_matched is False
        assert piece.finished_edges is None
        assert piece.no_strip_edges == []
        assert piece.shape.type == "rectangle"

    def test_rectangle_requires_dimensions(self) -> None:
        with pytest.raises(PydanticValidationError, match="requires length_mm and width_mm"):
            PieceConfig(id="p1", length_mm=2000)

    def test_compound_shape_dimensions_optional(self) -> None:
        piece = PieceConfig(
            id="p1",
            shape={
                "type": "l_shape",
                "leg1": {"length_mm": 2000, "width_mm": 600},
                "leg2": {"length_mm": 1500, "width_mm": 600},
            },
        )
        assert piece.length_mm is None

    def test_negative_dimension_rejected(self) -> None:
        with pytest.raises(PydanticValidationError):
            PieceConfig(id="p1", length_mm=-1, width_mm=600)

    def test_empty_id_rejected(self) -> None:
        with pytest.raises(PydanticValidationError):
            PieceConfig(id="", length_mm=2000, width_mm=600)

    def test_invalid_no_strip_edge(self) -> None:
        with pytest.raises(PydanticValidationError):
            PieceConfig(id="p1", length_mm=2000, width_mm=600, no_strip_edges=["front"])


class TestOptionsConfig:
    """Tests for optimizer options and lamination models."""

    def test_option_defaults(self) -> None:
        options = OptimizerOptionsConfig()
        assert options.allow_rotation is True
        assert options.allow_oversize_splitting is True
        assert options.max_workers == 1

    def test_max_workers_bounds(self) -> None:
        with pytest.raises(PydanticValidationError):
            OptimizerOptionsConfig(max_workers=0)
        with pytest.raises(PydanticValidationError):
            OptimizerOptionsConfig(max_workers=33)

    def test_lamination_defaults(self) -> None:
        lamination = LaminationConfigSchema()
        assert lamination.thickness_threshold_mm == 40.0
        assert lamination.default_strip_width_mm == 60.0
        assert [(r.keyword, r.width_mm) for r in lamination.strip_widths] == [("mitre", 40.0)]


class TestJobConfiguration:
    """Tests for the root JobConfiguration model."""

    def test_minimal_job(self, job_data: dict[str, Any]) -> None:
        job = JobConfiguration.model_validate(job_data)
        assert job.schema_version == "1.0"
        assert len(job.pieces) == 1
        assert job.summary() == {"schema_version": "1.0", "materials": 1, "pieces": 1}

    def test_supported_versions(self) -> None:
        assert "1.0" in SUPPORTED_VERSIONS

    def test_newer_minor_version_accepted(self, job_data: dict[str, Any]) -> None:
        job_data["schema_version"] = "1.3"
        assert JobConfiguration.model_validate(job_data).schema_version == "1.3"

    def test_unsupported_major_version(self, job_data: dict[str, Any]) -> None:
        job_data["schema_version"] = "2.0"
        with pytest.raises(PydanticValidationError, match="Unsupported schema version"):
            JobConfiguration.model_validate(job_data)

    def test_malformed_version(self, job_data: dict[str, Any]) -> None:
        job_data["schema_version"] = "one"
        with pytest.raises(PydanticValidationError):
            JobConfiguration.model_validate(job_data)

    def test_materials_required(self, job_data: dict[str, Any]) -> None:
        job_data["materials"] = []
        with pytest.raises(PydanticValidationError):
            JobConfiguration.model_validate(job_data)

    def test_duplicate_piece_ids(self, job_data: dict[str, Any]) -> None:
        job_data["pieces"].append(dict(job_data["pieces"][0]))
        with pytest.raises(PydanticValidationError, match="Duplicate piece id"):
            JobConfiguration.model_validate(job_data)

    def test_duplicate_material_ids(self, job_data: dict[str, Any]) -> None:
        job_data["materials"].append(dict(job_data["materials"][0]))
        with pytest.raises(PydanticValidationError, match="Duplicate material id"):
            JobConfiguration.model_validate(job_data)

    def test_no_pieces_is_valid(self, job_data: dict[str, Any]) -> None:
        job_data["pieces"] = []
        assert JobConfiguration.model_validate(job_data).pieces == []


# =============================================================================
# Loader Tests
# =============================================================================


class TestLoadJob:
    """Tests for load_job."""

    def test_valid_fixture(self) -> None:
        job = load_job(FIXTURES_PATH / "valid_kitchen.json")
        assert [m.id for m in job.materials] == ["calacatta", "nero"]
        assert len(job.pieces) == 5
        assert job.pieces[2].shape.type == "l_shape"
        assert job.options.primary_material_id == "calacatta"

    def test_file_not_found(self, tmp_path: Path) -> None:
        path = tmp_path / "missing.json"
        with pytest.raises(ConfigError) as exc:
            load_job(path)
        assert exc.value.error_type == "file_not_found"
        assert exc.value.path == path
        assert "Job file not found" in str(exc.value)

    def test_invalid_json(self) -> None:
        with pytest.raises(ConfigError) as exc:
            load_job(FIXTURES_PATH / "invalid_json.json")
        assert exc.value.error_type == "json_parse"
        assert exc.value.details[0]["line"] >= 1
        assert "Invalid JSON" in exc.value.message

    def test_validation_errors_have_json_paths(self) -> None:
        with pytest.raises(ConfigError) as exc:
            load_job(FIXTURES_PATH / "invalid_schema.json")
        assert exc.value.error_type == "validation"
        paths = {detail["path"] for detail in exc.value.details}
        assert {"materials[0].kerf_mm", "pieces[0].length_mm", "pieces[0].colour"} <= paths
        assert exc.value.message.startswith("Job validation failed:")
        assert "(got: -2400)" in exc.value.message


class TestLoadJobFromDict:
    """Tests for load_job_from_dict."""

    def test_valid(self, job_data: dict[str, Any]) -> None:
        assert load_job_from_dict(job_data).pieces[0].id == "bench"

    def test_invalid(self, job_data: dict[str, Any]) -> None:
        del job_data["materials"]
        with pytest.raises(ConfigError) as exc:
            load_job_from_dict(job_data)
        assert exc.value.error_type == "validation"
        assert exc.value.path is None
        assert exc.value.details[0]["path"] == "materials"
