"""Unit tests for lamination strip generation and summaries."""

from __future__ import annotations

import pytest

from stonecut.domain.services.lamination import (
    LaminationConfig,
    LaminationStripGenerator,
    summarize_strips,
)
from stonecut.domain.value_objects import (
    EdgeSide,
    EdgeTypeNames,
    FinishedEdges,
    LaminationStrip,
    LegSpec,
    LShape,
    Piece,
    Rectangle,
)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def generator() -> LaminationStripGenerator:
    """Generator with default rules (mitre 40mm, otherwise 60mm)."""
    return LaminationStripGenerator()


@pytest.fixture
def thick_piece() -> Piece:
    """40mm benchtop with a mitred left end."""
    return Piece(
        id="p1",
        width=2000,
        height=600,
        label="Island",
        thickness=40,
        finished_edges=FinishedEdges(left=True),
        edge_type_names=EdgeTypeNames(left="40mm Mitre"),
    )


# =============================================================================
# LaminationConfig Tests
# =============================================================================


class TestLaminationConfig:
    """Tests for strip width lookups."""

    def test_keyword_match_is_case_insensitive(self) -> None:
        config = LaminationConfig()
        assert config.strip_width_for("40mm MITRE") == 40
        assert config.strip_width_for("Pencil Round") == 60
        assert config.strip_width_for(None) == 60

    def test_first_matching_rule_wins(self) -> None:
        config = LaminationConfig(strip_widths=(("waterfall", 20), ("mitre", 40)))
        assert config.strip_width_for("Waterfall Mitre") == 20

    def test_invalid_rule_raises(self) -> None:
        with pytest.raises(ValueError, match="must be positive"):
            LaminationConfig(strip_widths=(("mitre", 0),))

    def test_invalid_threshold_raises(self) -> None:
        with pytest.raises(ValueError, match="threshold must be positive"):
            LaminationConfig(thickness_threshold=0)


# =============================================================================
# Strip Generation Tests
# =============================================================================


class TestLaminationStripGenerator:
    """Tests for strip synthesis."""

    def test_single_mitred_edge_yields_one_left_strip(
        self, generator: LaminationStripGenerator, thick_piece: Piece
    ) -> None:
        """A 40mm piece with one finished mitre edge gets exactly one strip."""
        strips = generator.generate(thick_piece, strip_kerf=5)

        assert len(strips) == 1
        strip = strips[0]
        assert strip.id == "p1-lam-left"
        assert strip.piece_id == "p1"
        # Left strips run along the depth: width x length
        assert (strip.width, strip.height) == (45, 600)
        assert strip.provenance == LaminationStrip(parent_piece_id="p1", side=EdgeSide.LEFT)
        assert strip.label == "Island (Lam-Left 40mm Mitre)"
        assert strip.group_id is None

    def test_top_strip_runs_along_length(self, generator: LaminationStripGenerator) -> None:
        """Top and bottom strips are length x width."""
        piece = Piece(
            id="p2", width=2400, height=650, thickness=40,
            finished_edges=FinishedEdges(top=True, bottom=True),
        )
        strips = generator.generate(piece, strip_kerf=3)

        assert [s.strip_position for s in strips] == [EdgeSide.TOP, EdgeSide.BOTTOM]
        assert all((s.width, s.height) == (2400, 63) for s in strips)
        assert strips[0].label == "p2 (Lam-Top)"

    def test_thin_piece_gets_no_strips(self, generator: LaminationStripGenerator) -> None:
        piece = Piece(
            id="p3", width=2000, height=600, thickness=20,
            finished_edges=FinishedEdges(top=True),
        )
        assert generator.generate(piece, strip_kerf=3) == []

    def test_requires_lamination_overrides_thickness(
        self, generator: LaminationStripGenerator
    ) -> None:
        piece = Piece(
            id="p4", width=2000, height=600, thickness=20, requires_lamination=True,
            finished_edges=FinishedEdges(top=True),
        )
        assert len(generator.generate(piece, strip_kerf=3)) == 1

    def test_no_finished_edges_no_strips(self, generator: LaminationStripGenerator) -> None:
        piece = Piece(id="p5", width=2000, height=600, thickness=40)
        assert generator.generate(piece, strip_kerf=3) == []

    def test_wall_edges_are_skipped(self, generator: LaminationStripGenerator) -> None:
        """Edges against a wall never get strips."""
        piece = Piece(
            id="p6", width=2000, height=600, thickness=40,
            finished_edges=FinishedEdges(top=True, left=True),
            no_strip_edges=frozenset({EdgeSide.TOP}),
        )
        strips = generator.generate(piece, strip_kerf=3)
        assert [s.strip_position for s in strips] == [EdgeSide.LEFT]

    def test_disabled_config(self, thick_piece: Piece) -> None:
        generator = LaminationStripGenerator(LaminationConfig(enabled=False))
        assert generator.generate(thick_piece, strip_kerf=3) == []

    def test_strips_inherit_rotation_permission(
        self, generator: LaminationStripGenerator
    ) -> None:
        piece = Piece(
            id="p7", width=2000, height=600, thickness=40, grain_matched=True,
            finished_edges=FinishedEdges(top=True),
        )
        assert generator.generate(piece, strip_kerf=3)[0].can_rotate is False

    def test_l_shape_uses_outline_edge_lengths(
        self, generator: LaminationStripGenerator
    ) -> None:
        """Strip lengths follow the L outline, not the bounding box."""
        piece = Piece(
            id="L1", width=3000, height=2000, thickness=40,
            finished_edges=FinishedEdges(bottom=True),
            shape=LShape(leg1=LegSpec(3000, 600), leg2=LegSpec(2000, 600)),
        )
        strips = generator.generate(piece, strip_kerf=0)
        assert (strips[0].width, strips[0].height) == (4400, 60)

    def test_l_shape_right_strip_spans_return_end(
        self, generator: LaminationStripGenerator
    ) -> None:
        """The right side of an L is the end of the return leg."""
        piece = Piece(
            id="L1", width=3000, height=2000, thickness=40,
            finished_edges=FinishedEdges(right=True),
            shape=LShape(leg1=LegSpec(3000, 600), leg2=LegSpec(2000, 650)),
        )
        (strip,) = generator.generate(piece, strip_kerf=0)
        assert strip.strip_position is EdgeSide.RIGHT
        assert (strip.width, strip.height) == (60, 650)


# =============================================================================
# Summary Tests
# =============================================================================


class TestSummarizeStrips:
    """Tests for the reporting summary."""

    def test_none_without_strips(self, thick_piece: Piece) -> None:
        assert summarize_strips([thick_piece], []) is None

    def test_summary_groups_by_parent(
        self, generator: LaminationStripGenerator, thick_piece: Piece
    ) -> None:
        other = Piece(
            id="p2", width=1000, height=500, thickness=40,
            finished_edges=FinishedEdges(top=True, right=True),
        )
        strips = generator.generate(thick_piece, 5) + generator.generate(other, 5)
        summary = summarize_strips([thick_piece, other], strips)

        assert summary is not None
        assert summary.total_strips == 3
        expected_area = 45 * 600 + 1000 * 65 + 65 * 500
        assert summary.total_strip_area_m2 == pytest.approx(expected_area / 1_000_000)
        assert [p.parent_piece_id for p in summary.strips_by_parent] == ["p1", "p2"]
        assert summary.strips_by_parent[0].parent_label == "Island"
        right = summary.strips_by_parent[1].strips[1]
        assert right.position == EdgeSide.RIGHT
        assert (right.length_mm, right.width_mm) == (500, 65)

    def test_rejects_rectangle_without_strip_side(self, thick_piece: Piece) -> None:
        """Plain piece rectangles are not reported under a default edge."""
        plain = Rectangle(id="p1", piece_id="p1", width=2000, height=600)
        with pytest.raises(ValueError, match="'p1' is not a lamination strip"):
            summarize_strips([thick_piece], [plain])
