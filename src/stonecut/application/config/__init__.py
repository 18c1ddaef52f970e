"""Job configuration schema and loading for slab optimization.

This package provides JSON-based job loading and validation. It includes
Pydantic models for the job schema, a loader with comprehensive error
handling, an adapter into domain objects and output schemas for results.

Public API:
    - JobConfiguration: Root job model
    - PieceConfig / MaterialConfig: Piece and material models
    - load_job: Load a job from a JSON file
    - load_job_from_dict: Load a job from a dictionary
    - ConfigError: Exception for configuration errors
    - config_to_request: Convert a job into an OptimizationRequest
    - result_to_schema: Convert an OptimizationResult for JSON output

Example:
    >>> from pathlib import Path
    >>> from stonecut.application.config import load_job, ConfigError
    >>>
    >>> try:
    ...     job = load_job(Path("kitchen.json"))
    ...     print(f"{len(job.pieces)} pieces")
    ... except ConfigError as e:
    ...     print(f"Error: {e}")
"""

from stonecut.application.config.adapter import (
    config_to_lamination,
    config_to_piece,
    config_to_request,
    config_to_slab,
)
from stonecut.application.config.loader import (
    ConfigError,
    load_job,
    load_job_from_dict,
)
from stonecut.application.config.result_schema import (
    OptimizationResultSchema,
    result_to_schema,
)
from stonecut.application.config.schemas import (
    SUPPORTED_VERSIONS,
    EdgeFlagsConfig,
    EdgeSideConfig,
    EdgeTypesConfig,
    JobConfiguration,
    LaminationConfigSchema,
    LegConfig,
    MaterialConfig,
    OptimizerOptionsConfig,
    PieceConfig,
    ShapeConfig,
    StripWidthRuleConfig,
)

__all__ = [
    "ConfigError",
    "EdgeFlagsConfig",
    "EdgeSideConfig",
    "EdgeTypesConfig",
    "JobConfiguration",
    "LaminationConfigSchema",
    "LegConfig",
    "MaterialConfig",
    "OptimizationResultSchema",
    "OptimizerOptionsConfig",
    "PieceConfig",
    "SUPPORTED_VERSIONS",
    "ShapeConfig",
    "StripWidthRuleConfig",
    "config_to_lamination",
    "config_to_piece",
    "config_to_request",
    "config_to_slab",
    "load_job",
    "load_job_from_dict",
    "result_to_schema",
]
