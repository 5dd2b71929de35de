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
Tests for Lateral Offset Model
===============================
"""

import pytest

from saikei_railing.core.layout.offsets import (
    LineReference,
    Rotation,
    compute_lateral_offset,
    direction_xy,
    left_vector_xy,
    post_rotation_from_run,
)
from saikei_railing.core.layout.vector import Vector3


class TestLineReference:
    """Tests for LineReference enum."""

    @pytest.mark.unit
    def test_signs(self):
        assert LineReference.LEFT.sign == 1
        assert LineReference.RIGHT.sign == -1
        assert LineReference.MIDDLE.sign == 0

    @pytest.mark.unit
    @pytest.mark.parametrize("text,expected", [
        ("left", LineReference.LEFT),
        (" RIGHT ", LineReference.RIGHT),
        ("Middle", LineReference.MIDDLE),
    ])
    def test_parse(self, text, expected):
        assert LineReference.parse(text) is expected

    @pytest.mark.unit
    @pytest.mark.parametrize("text", ["CENTER", "", None])
    def test_parse_invalid(self, text):
        with pytest.raises(ValueError):
            LineReference.parse(text)


class TestComputeLateralOffset:
    """Tests for compute_lateral_offset function."""

    @pytest.mark.unit
    def test_left_without_deck_edge(self):
        assert compute_lateral_offset(LineReference.LEFT, 0.0, 2.0) == pytest.approx(2.0)

    @pytest.mark.unit
    def test_right_with_deck_edge(self):
        assert compute_lateral_offset(LineReference.RIGHT, 6.0, 2.0) == pytest.approx(-8.0)

    @pytest.mark.unit
    def test_middle_without_deck_edge(self):
        assert compute_lateral_offset(LineReference.MIDDLE, 0.0, 2.0) == 0.0

    @pytest.mark.unit
    def test_middle_with_deck_edge_goes_left(self):
        """Test that a deck edge on MIDDLE is measured to the left."""
        assert compute_lateral_offset(LineReference.MIDDLE, 6.0, 2.0) == pytest.approx(8.0)

    @pytest.mark.unit
    def test_tiny_deck_edge_ignored(self):
        assert compute_lateral_offset(LineReference.RIGHT, 0.00001, 2.0) == pytest.approx(-2.0)


class TestSideFrame:
    """Tests for left vector, plan direction and rotation."""

    @pytest.mark.unit
    def test_left_vector_is_counter_clockwise(self):
        left = left_vector_xy(Vector3(1.0, 0.0, 0.0))
        assert left == Vector3(0.0, 1.0, 0.0)

    @pytest.mark.unit
    def test_left_vector_ignores_slope(self):
        left = left_vector_xy(Vector3(0.0, 3.0, 4.0))
        assert left.z == 0.0
        assert left.length == pytest.approx(1.0)
        assert left.x == pytest.approx(-1.0)

    @pytest.mark.unit
    def test_left_vector_vertical_fallback(self):
        assert left_vector_xy(Vector3(0.0, 0.0, 1.0)) == Vector3(1.0, 0.0, 0.0)

    @pytest.mark.unit
    def test_direction_xy(self):
        d = direction_xy(Vector3(3.0, 4.0, 12.0))
        assert d.x == pytest.approx(0.6)
        assert d.y == pytest.approx(0.8)
        assert d.z == 0.0

    @pytest.mark.unit
    @pytest.mark.parametrize("direction,expected", [
        (Vector3(1.0, 0.2, 0.0), Rotation.TOP),
        (Vector3(-1.0, 0.5, 0.0), Rotation.BELOW),
        (Vector3(0.1, 1.0, 0.0), Rotation.BACK),
        (Vector3(0.3, -1.0, 0.0), Rotation.FRONT),
        (Vector3(1.0, 1.0, 0.0), Rotation.TOP),
    ])
    def test_post_rotation(self, direction, expected):
        assert post_rotation_from_run(direction) is expected
