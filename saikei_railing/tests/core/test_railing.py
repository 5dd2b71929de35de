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
Tests for the Railing Layout
=============================

End-to-end runs from defaults text to a RailingPlan.
"""

import math

import pytest

from saikei_railing.core.defaults import RailingInputs, resolve_settings
from saikei_railing.core.layout.rail_joiner import EndKind
from saikei_railing.core.layout.seats import SeatKind
from saikei_railing.core.layout.vector import Vector3
from saikei_railing.core.railing import (
    build_railing,
    half_post_width_mm,
    post_params,
    rail_params,
    rail_width_mm,
    seat_style,
)


class TestSettingsConversion:
    """Tests for inch settings to millimetre layout values."""

    @pytest.mark.unit
    def test_post_params(self, settings):
        params = post_params(settings, settings.fabrication)
        assert params.spacing == pytest.approx(1828.8)
        assert params.height == pytest.approx(1066.8)
        assert params.start_offset == pytest.approx(152.4)
        assert params.half_post_width == pytest.approx(38.1)
        assert params.lateral == pytest.approx(0.0)
        assert params.plate_thickness == pytest.approx(3.175)

    @pytest.mark.unit
    def test_post_params_deck_edge(self, defaults):
        settings = resolve_settings(RailingInputs(line_ref="RIGHT", deck_edge="2\""), defaults)
        params = post_params(settings, settings.fabrication)
        assert params.lateral == pytest.approx(-(50.8 + 38.1))

    @pytest.mark.unit
    def test_rail_params(self, settings):
        params = rail_params(settings, settings.fabrication)
        assert params.count == 2
        assert params.drop_from_top == pytest.approx(19.05)
        assert params.row_spacing == pytest.approx(457.2)
        assert params.half_rail_width == pytest.approx(19.05)

    @pytest.mark.unit
    def test_widths(self, settings):
        assert half_post_width_mm(settings) == pytest.approx(38.1)
        assert rail_width_mm(settings.fabrication) == pytest.approx(38.1)

    @pytest.mark.unit
    def test_unreadable_post_profile(self, defaults):
        settings = resolve_settings(RailingInputs(post_profile="PIPE3STD"), defaults)
        assert half_post_width_mm(settings) == 0.0

    @pytest.mark.unit
    def test_seat_style(self, settings):
        style = seat_style(settings, settings.fabrication)
        assert style.length == pytest.approx(38.1)
        assert style.hole_line == pytest.approx(19.05)
        assert style.slot_c2c == pytest.approx(12.7)
        assert style.corner_inside_travel == pytest.approx(3.175)


class TestStraightRun:
    """Tests for a single-side run."""

    @pytest.mark.unit
    def test_counts(self, straight_run, settings):
        plan = build_railing(straight_run, [], settings)
        assert plan.side_count == 1
        assert plan.inserted == 5
        assert plan.skipped == 0
        assert plan.rail_sides == 1
        assert len(plan.rows) == 2
        assert len(plan.rails) == 2
        assert len(plan.rail_caps) == 4
        assert plan.rail_fittings == []
        assert plan.corners == []
        assert len(plan.post_caps) == 5
        assert len(plan.seats) == 10
        assert all(s.kind is SeatKind.POST for s in plan.seats)

    @pytest.mark.unit
    def test_summary(self, straight_run, settings):
        plan = build_railing(straight_run, [], settings)
        assert plan.summary() == "sides=1, inserted=5, skipped=0, rail_sides=1, connections=0"

    @pytest.mark.unit
    def test_rail_geometry(self, straight_run, settings):
        plan = build_railing(straight_run, [], settings)
        top, second = plan.rails
        assert top.start == Vector3(152.4, 57.15, 1066.8 - 19.05)
        assert top.end.x == pytest.approx(5943.6)
        assert second.start.z == pytest.approx(1066.8 - 19.05 - 457.2)
        assert top.row_index == 0 and second.row_index == 1

    @pytest.mark.unit
    def test_post_seat_under_rail(self, straight_run, settings):
        plan = build_railing(straight_run, [], settings)
        seat = plan.seats[0]
        assert seat.center.y == pytest.approx(38.1)
        assert seat.center.z == pytest.approx(1066.8 - 19.05 - 19.05)
        assert len(seat.pilots) == 2

    @pytest.mark.unit
    def test_host_sets_elevation(self, straight_run, settings, deck_beam):
        plan = build_railing(straight_run, [deck_beam], settings)
        assert all(p.start.z == pytest.approx(-50.0) for p in plan.posts)
        assert plan.rails[0].start.z == pytest.approx(-50.0 + 1066.8 - 19.05)

    @pytest.mark.unit
    def test_connections(self, straight_run, defaults, deck_beam):
        settings = resolve_settings(RailingInputs(connection_enabled="1"), defaults)
        plan = build_railing(straight_run, [deck_beam], settings)
        assert plan.connections == 5
        assert plan.posts[0].connection.host.identifier == 101
        assert plan.posts[0].connection.is_numbered

    @pytest.mark.unit
    def test_rails_disabled(self, straight_run, defaults):
        settings = resolve_settings(RailingInputs(rail_enabled="0"), defaults)
        plan = build_railing(straight_run, [], settings)
        assert plan.inserted == 5
        assert plan.rails == []
        assert plan.seats == []
        assert plan.rail_sides == 0

    @pytest.mark.unit
    def test_long_rail_split(self, defaults):
        settings = resolve_settings(RailingInputs(start_offset="0", end_offset="0"), defaults)
        plan = build_railing([(0, 0, 0), (9144, 0, 0)], [], settings)
        assert len(plan.rails) == 4
        assert all(r.piece_count == 2 for r in plan.rails)
        assert len(plan.rail_caps) == 4

    @pytest.mark.unit
    def test_persisted_values(self, straight_run, settings):
        plan = build_railing(straight_run, [], settings)
        assert plan.persisted == settings.to_persisted()

    @pytest.mark.unit
    def test_too_few_points(self, settings):
        with pytest.raises(ValueError):
            build_railing([(0, 0, 0)], [], settings)


class TestCornerRun:
    """Tests for runs with corners."""

    @pytest.mark.unit
    def test_l_run_counts(self, l_run, settings):
        plan = build_railing(l_run, [], settings)
        assert plan.side_count == 2
        assert plan.inserted == 8
        assert plan.rail_sides == 2
        assert len(plan.corners) == 2
        assert len(plan.rails) == 4
        assert len(plan.rail_caps) == 6
        assert len(plan.rail_fittings) == 2
        assert len([s for s in plan.seats if s.kind is SeatKind.CORNER]) == 2
        assert len([s for s in plan.seats if s.kind is SeatKind.POST]) == 12

    @pytest.mark.unit
    def test_every_corner_one_cap_one_butt(self, l_run, settings):
        plan = build_railing(l_run, [], settings)
        for row in plan.rows:
            for joint in row.corners:
                k = joint.corner_index
                kinds = {row.rails[k].end_end.kind, row.rails[k + 1].start_end.kind}
                assert kinds == {EndKind.CAP, EndKind.BUTT}

    @pytest.mark.unit
    def test_rows_resolve_alike(self, l_run, settings):
        plan = build_railing(l_run, [], settings)
        assert plan.corners[0].is_butted
        assert plan.corners[0].butted == plan.corners[1].butted
        assert plan.corners[0].travel == pytest.approx(plan.corners[1].travel)

    @pytest.mark.unit
    def test_corner_seat_per_row(self, l_run, settings):
        plan = build_railing(l_run, [], settings)
        corner_seats = [s for s in plan.seats if s.kind is SeatKind.CORNER]
        assert [s.row_index for s in corner_seats] == [0, 1]
        assert all(s.pilots == [] for s in corner_seats)

    @pytest.mark.unit
    def test_short_side_gets_no_rail(self, settings):
        plan = build_railing([(0, 0, 0), (6096, 0, 0), (6096, 200, 0)], [], settings)
        assert plan.side_count == 2
        assert plan.rail_sides == 1
        assert plan.corners == []
        assert len(plan.seats) == 8

    @pytest.mark.unit
    def test_coincident_corner_posts(self, l_run, defaults):
        settings = resolve_settings(RailingInputs(start_offset="0", end_offset="0"), defaults)
        plan = build_railing(l_run, [], settings)
        assert plan.skipped == 1
        assert plan.inserted == 5 + 3 - 1

    @pytest.mark.unit
    def test_straight_through_joint_gets_post_seats(self, settings):
        plan = build_railing([(0, 0, 0), (3048, 0, 0), (6096, 0, 0)], [], settings)
        assert plan.inserted == 6
        assert len(plan.corners) == 2
        assert all(joint.is_straight for joint in plan.corners)
        assert [s for s in plan.seats if s.kind is SeatKind.CORNER] == []
        assert len([s for s in plan.seats if s.kind is SeatKind.POST]) == 12


class TestCornerSeatPlacement:
    """Corner seats land on the rail side, clear of the corner post."""

    @pytest.fixture
    def flush_settings(self, defaults):
        # corner posts stand on the corner point
        return resolve_settings(RailingInputs(start_offset="0", end_offset="0"), defaults)

    @staticmethod
    def corner_seats(plan):
        return [s for s in plan.seats if s.kind is SeatKind.CORNER]

    @staticmethod
    def assert_clear_of_post(seat, corner, half_post_width=38.1):
        dx = seat.center.x - corner.x
        dy = seat.center.y - corner.y
        assert max(abs(dx), abs(dy)) > half_post_width

    @pytest.mark.unit
    def test_left_turn_seat_in_inside_corner(self, l_run, flush_settings):
        plan = build_railing(l_run, [], flush_settings)
        corner = Vector3(6096, 0, 0)
        seats = self.corner_seats(plan)
        assert len(seats) == 2
        assert all(joint.inside for joint in plan.corners)

        seat = seats[0]
        offset = 19.05 + 3.175 * math.sqrt(0.5)
        assert seat.center.x == pytest.approx(6096 - 57.15 - offset)
        assert seat.center.y == pytest.approx(57.15 + offset)
        assert seat.center.z == pytest.approx(1066.8 - 19.05)
        self.assert_clear_of_post(seat, corner)

        prev_left = Vector3(0, 1, 0)
        next_left = Vector3(-1, 0, 0)
        assert (seat.center - corner).dot_xy(prev_left) > 0.0
        assert (seat.center - corner).dot_xy(next_left) > 0.0

    @pytest.mark.unit
    def test_right_turn_seat_outside_corner(self, flush_settings):
        run = [(0, 0, 0), (6096, 0, 0), (6096, -3048, 0)]
        plan = build_railing(run, [], flush_settings)
        corner = Vector3(6096, 0, 0)
        seats = self.corner_seats(plan)
        assert len(seats) == 2
        assert not any(joint.inside for joint in plan.corners)

        seat = seats[0]
        assert seat.center.x == pytest.approx(6096 + 57.15 + 57.15)
        assert seat.center.y == pytest.approx(57.15 + 57.15)
        self.assert_clear_of_post(seat, corner)

        prev_left = Vector3(0, 1, 0)
        next_left = Vector3(1, 0, 0)
        assert (seat.center - corner).dot_xy(prev_left) > 0.0
        assert (seat.center - corner).dot_xy(next_left) > 0.0

    @pytest.mark.unit
    def test_seats_stay_clear_of_rails(self, l_run, flush_settings):
        plan = build_railing(l_run, [], flush_settings)
        seat = self.corner_seats(plan)[0]
        # incoming rail face at y 76.2, outgoing rail face at x 6019.8
        assert seat.center.y > 57.15 + 19.05
        assert seat.center.x < 6096 - 57.15 - 19.05
