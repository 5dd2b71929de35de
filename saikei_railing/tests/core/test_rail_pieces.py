# ==============================================================================
# Saikei Railing - Guardrail Detailing Tools
# Copyright (c) 2025 Michael Yoder / Desert Springs Civil Engineering PLLC
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
#
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
# You should have received a copy of the GNU General Public License along with this program. If not, see <https://www.gnu.org/licenses/>.
#
# Primary Author: Michael Yoder
# Company: Desert Springs Civil Engineering PLLC
# ==============================================================================

"""
Tests for Rail Piece Requests
==============================
"""

import pytest

from saikei_railing.core.layout.rail_joiner import (
    EndKind,
    FacePlane,
    RailEnd,
    RailJoinParams,
    RailSegmentPlan,
    RailSideSpec,
    build_rail_row,
)
from saikei_railing.core.layout.rail_pieces import (
    RailStyle,
    rail_end_cap,
    rail_requests,
    row_requests,
    split_rail,
)
from saikei_railing.core.layout.vector import Vector3


@pytest.fixture
def style():
    return RailStyle()


class TestSplitRail:
    """Tests for split_rail function."""

    @pytest.mark.unit
    def test_short_rail_single_piece(self):
        spans = split_rail(Vector3(0, 0, 0), Vector3(5000, 0, 0), 6096.0)
        assert spans == [(Vector3(0, 0, 0), Vector3(5000, 0, 0))]

    @pytest.mark.unit
    def test_equal_pieces(self):
        spans = split_rail(Vector3(0, 0, 0), Vector3(7000, 0, 0), 6096.0)
        assert len(spans) == 2
        assert spans[0][1] == Vector3(3500, 0, 0)
        assert spans[1][0] == spans[0][1]

    @pytest.mark.unit
    def test_exact_stock_length(self):
        assert len(split_rail(Vector3(0, 0, 0), Vector3(12192, 0, 0), 6096.0)) == 2

    @pytest.mark.unit
    def test_sloped_rail_splits_on_true_length(self):
        spans = split_rail(Vector3(0, 0, 0), Vector3(6000, 0, 1500), 6096.0)
        assert len(spans) == 2
        assert spans[0][1].z == pytest.approx(750.0)

    @pytest.mark.unit
    def test_degenerate_rail(self):
        assert split_rail(Vector3(0, 0, 0), Vector3(0.5, 0, 0), 6096.0) == []

    @pytest.mark.unit
    def test_no_stock_limit(self):
        assert len(split_rail(Vector3(0, 0, 0), Vector3(20000, 0, 0), 0.0)) == 1


class TestRailEndCap:
    """Tests for rail_end_cap function."""

    @pytest.mark.unit
    def test_cap_square_to_rail(self, style):
        cap = rail_end_cap(Vector3(1000, 0, 500), Vector3(0, 0, 500), style)
        assert cap.name == "RAIL CAP"
        assert cap.normal == Vector3(1, 0, 0)
        assert cap.center == Vector3(1000 + 3.175 / 2, 0, 500)
        assert len(cap.contour) == 4
        assert all(p.x == pytest.approx(cap.center.x) for p in cap.contour)
        assert max(p.y for p in cap.contour) == pytest.approx(19.05)
        assert min(p.z for p in cap.contour) == pytest.approx(500 - 19.05)

    @pytest.mark.unit
    def test_cap_at_start_faces_backward(self, style):
        cap = rail_end_cap(Vector3(0, 0, 0), Vector3(0, 1000, 0), style)
        assert cap.normal == Vector3(0, -1, 0)
        assert cap.center.y == pytest.approx(-3.175 / 2)

    @pytest.mark.unit
    def test_degenerate_piece(self, style):
        assert rail_end_cap(Vector3(0, 0, 0), Vector3(0.2, 0, 0), style) is None


class TestRailRequests:
    """Tests for rail_requests and row_requests functions."""

    @pytest.mark.unit
    def test_capped_both_ends(self, style):
        rail = RailSegmentPlan(side_index=0, start=Vector3(0, 0, 0), end=Vector3(14000, 0, 0))
        result = rail_requests(rail, 0, style)
        assert len(result.pieces) == 3
        assert [p.piece_index for p in result.pieces] == [0, 1, 2]
        assert all(p.piece_count == 3 for p in result.pieces)
        assert all(p.name == "RAIL" for p in result.pieces)
        assert len(result.caps) == 2
        assert result.caps[0].center.x == pytest.approx(-3.175 / 2)
        assert result.caps[1].center.x == pytest.approx(14000 + 3.175 / 2)
        assert result.fittings == []

    @pytest.mark.unit
    def test_butt_end_gets_fitting(self, style):
        plane = FacePlane(anchor=Vector3(1000, 80, 0), normal=Vector3(0, 1, 0))
        rail = RailSegmentPlan(
            side_index=1,
            start=Vector3(1000, 80, 0),
            end=Vector3(1000, 1000, 0),
            start_end=RailEnd(EndKind.BUTT, plane),
        )
        result = rail_requests(rail, 2, style)
        assert len(result.caps) == 1
        assert len(result.fittings) == 1
        fitting = result.fittings[0]
        assert fitting.at_start
        assert fitting.row_index == 2
        assert fitting.side_index == 1
        assert fitting.point == Vector3(1000, 80, 0)
        assert fitting.plane is plane

    @pytest.mark.unit
    def test_plain_end_left_open(self, style):
        rail = RailSegmentPlan(
            side_index=0,
            start=Vector3(0, 0, 0),
            end=Vector3(1000, 0, 0),
            end_end=RailEnd(EndKind.PLAIN),
        )
        result = rail_requests(rail, 0, style)
        assert len(result.caps) == 1
        assert result.fittings == []

    @pytest.mark.unit
    def test_degenerate_rail_skipped(self, style):
        rail = RailSegmentPlan(side_index=0, start=Vector3(0, 0, 0), end=Vector3(0.5, 0, 0))
        result = rail_requests(rail, 0, style)
        assert result.pieces == []
        assert result.caps == []

    @pytest.mark.unit
    def test_row_of_corner(self, style):
        specs = []
        for index, (a, b) in enumerate([((0, 0, 0), (1000, 0, 0)), ((1000, 0, 0), (1000, 1000, 0))]):
            a = Vector3(a)
            b = Vector3(b)
            d = (b - a).normalized()
            specs.append(RailSideSpec(
                side_index=index, start_on_line=a, end_on_line=b, direction=d,
                left=Vector3(-d.y, d.x, 0.0), post_lateral=0.0, half_post_width=40.0,
                first_post_top_z=1000.0, last_post_top_z=1000.0,
            ))
        row = build_rail_row(specs, RailJoinParams(half_rail_width=20.0), 0)
        result = row_requests(row, style)
        assert len(result.pieces) == 2
        assert len(result.caps) == 3
        assert len(result.fittings) == 1
