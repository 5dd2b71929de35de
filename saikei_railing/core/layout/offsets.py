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
Lateral Offset Model
=====================

Perpendicular in-plan displacement of the post line from the picked
reference path, plus the per-side frame (direction, left vector, post
rotation) the offset is measured in.

Sign convention:
    LEFT   = +1  (toward the left vector)
    RIGHT  = -1
    MIDDLE =  0

The left vector is the run direction rotated 90 degrees counter-clockwise
in plan, so a positive offset lies to the left when walking the path.
"""

from enum import Enum

from .vector import Vector3, X_AXIS, unit_xy
from ..logging_config import get_logger

logger = get_logger(__name__)

# Deck edge values below this are treated as "no deck edge"
DECK_EDGE_TOLERANCE = 1e-4


class LineReference(Enum):
    """Which side of the picked path the post line is referenced to."""
    LEFT = "LEFT"
    RIGHT = "RIGHT"
    MIDDLE = "MIDDLE"

    @property
    def sign(self) -> int:
        if self is LineReference.LEFT:
            return 1
        if self is LineReference.RIGHT:
            return -1
        return 0

    @classmethod
    def parse(cls, text: str) -> "LineReference":
        """Parse LEFT/RIGHT/MIDDLE (case-insensitive).

        Raises:
            ValueError: For any other value
        """
        value = (text or "").strip().upper()
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Line reference must be LEFT, RIGHT, or MIDDLE. Got: {text}")


class Rotation(Enum):
    """Part rotation about its own axis (post, seat and hole positioning)."""
    TOP = "TOP"        # +X dominant
    BELOW = "BELOW"    # -X dominant
    BACK = "BACK"      # +Y dominant
    FRONT = "FRONT"    # -Y dominant


def compute_lateral_offset(
    line_ref: LineReference,
    deck_edge: float,
    half_post_width: float
) -> float:
    """
    Signed perpendicular offset of the post line from the path.

    With a deck edge distance the post face sits that far from the path, so
    the post centre is deck_edge + half width away. A deck edge has to be on
    a side; MIDDLE defaults to LEFT in that case.

    Args:
        line_ref: Reference side of the path
        deck_edge: Deck edge distance (0 for none)
        half_post_width: Half the post outside width

    Returns:
        Signed offset along the left vector

    Example:
        >>> compute_lateral_offset(LineReference.RIGHT, 6.0, 2.0)
        -8.0
    """
    sign = line_ref.sign

    if abs(deck_edge) > DECK_EDGE_TOLERANCE:
        if sign == 0:
            sign = 1
        return sign * (deck_edge + half_post_width)

    return sign * half_post_width


def direction_xy(direction: Vector3) -> Vector3:
    """Plan unit direction; slope never rotates posts or brackets."""
    return unit_xy(direction, X_AXIS)


def left_vector_xy(direction: Vector3) -> Vector3:
    """Unit left perpendicular in plan (Z forced to 0).

    Args:
        direction: Run direction (need not be normalized)

    Returns:
        (-dy, dx, 0) normalized, or +X for a vertical direction
    """
    left = Vector3(-direction.y, direction.x, 0.0)
    if left.length_xy < 1e-9:
        return X_AXIS
    return left.normalized()


def post_rotation_from_run(direction: Vector3) -> Rotation:
    """Classify a run by its dominant plan axis.

    Args:
        direction: Run direction

    Returns:
        Rotation for the dominant axis and its sign
    """
    if abs(direction.x) >= abs(direction.y):
        return Rotation.TOP if direction.x >= 0.0 else Rotation.BELOW
    return Rotation.BACK if direction.y >= 0.0 else Rotation.FRONT


__all__ = [
    "DECK_EDGE_TOLERANCE",
    "LineReference",
    "Rotation",
    "compute_lateral_offset",
    "direction_xy",
    "left_vector_xy",
    "post_rotation_from_run",
]
