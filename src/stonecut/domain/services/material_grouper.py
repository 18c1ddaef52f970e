"""Partition pieces by material so each group packs onto its own slabs."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from stonecut.domain.value_objects import Piece, SlabSpec

logger = logging.getLogger(__name__)

__all__ = [
    "MaterialConfigurationError",
    "MaterialGroup",
    "group_by_material",
    "resolve_material_ids",
]

T = TypeVar("T")


class MaterialConfigurationError(ValueError):
    """Raised when pieces cannot be matched to a slab configuration.

    Attributes:
        piece_ids: Ids of the offending pieces.
    """

    def __init__(self, message: str, piece_ids: list[str] | None = None) -> None:
        super().__init__(message)
        self.piece_ids = piece_ids or []


@dataclass(frozen=True)
class MaterialGroup(Generic[T]):
    """Items sharing one material, with that material's slab."""

    material_id: str
    slab: SlabSpec
    items: tuple[T, ...] = field(default_factory=tuple)


def resolve_material_ids(
    pieces: Iterable[Piece],
    slabs: Mapping[str, SlabSpec],
    primary_material_id: str | None = None,
) -> dict[str, str]:
    """Map each piece id to its material id, validating configuration.

    Pieces without a material use ``primary_material_id`` when given.

    Raises:
        MaterialConfigurationError: If any piece has no material, or its
            material has no slab configuration.
    """
    resolved: dict[str, str] = {}
    missing: list[str] = []
    unknown: dict[str, list[str]] = {}

    for piece in pieces:
        material_id = piece.material_id or primary_material_id
        if not material_id:
            missing.append(piece.id)
            continue
        if material_id not in slabs:
            unknown.setdefault(material_id, []).append(piece.id)
            continue
        resolved[piece.id] = material_id

    if missing:
        raise MaterialConfigurationError(
            f"{len(missing)} piece(s) have no material assigned: "
            f"{', '.join(missing)}",
            piece_ids=missing,
        )
    if unknown:
        material_list = ", ".join(sorted(unknown))
        raise MaterialConfigurationError(
            f"No slab configuration for material(s): {material_list}",
            piece_ids=[pid for ids in unknown.values() for pid in ids],
        )
    return resolved


def group_by_material(
    items: Iterable[tuple[str, T]],
    slabs: Mapping[str, SlabSpec],
) -> list[MaterialGroup[T]]:
    """Partition (material id, item) pairs in first-seen material order.

    Raises:
        MaterialConfigurationError: If a material has no slab configuration.
    """
    buckets: dict[str, list[T]] = {}
    for material_id, item in items:
        if material_id not in slabs:
            raise MaterialConfigurationError(
                f"No slab configuration for material: {material_id}"
            )
        buckets.setdefault(material_id, []).append(item)

    groups = [
        MaterialGroup(material_id=material_id, slab=slabs[material_id], items=tuple(bucket))
        for material_id, bucket in buckets.items()
    ]
    logger.info(
        "Grouped into %d material group(s): %s",
        len(groups),
        ", ".join(f"{g.slab.name} ({len(g.items)})" for g in groups),
    )
    return groups
