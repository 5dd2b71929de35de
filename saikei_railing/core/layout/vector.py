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
3D Vector Utilities for Railing Layout
=======================================

Provides a lightweight 3D vector class used for both points and directions.
Plan (XY) helpers are included because posts, rails and brackets are laid
out in plan and only carry Z along.
"""

import math


class Vector3:
    """Lightweight 3D vector for railing geometry calculations.

    Attributes:
        x: X coordinate (Easting)
        y: Y coordinate (Northing)
        z: Z coordinate (Elevation)

    Example:
        >>> a = Vector3(0.0, 0.0, 0.0)
        >>> b = Vector3(3000.0, 4000.0, 0.0)
        >>> direction = (b - a).normalized()
        >>> print(f"Length: {(b - a).length:.1f}")
    """

    __slots__ = ("x", "y", "z")

    def __init__(self, x, y=0.0, z=0.0):
        """Initialize vector from coordinates or tuple/list.

        Args:
            x: X coordinate, or tuple/list of (x, y) or (x, y, z)
            y: Y coordinate (ignored if x is tuple/list)
            z: Z coordinate (ignored if x is tuple/list)
        """
        if isinstance(x, (list, tuple)):
            self.x = float(x[0])
            self.y = float(x[1])
            self.z = float(x[2]) if len(x) > 2 else 0.0
        else:
            self.x = float(x)
            self.y = float(y)
            self.z = float(z)

    def __sub__(self, other):
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __add__(self, other):
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __mul__(self, scalar):
        return Vector3(self.x * scalar, self.y * scalar, self.z * scalar)

    def __rmul__(self, scalar):
        return self.__mul__(scalar)

    def __truediv__(self, scalar):
        return Vector3(self.x / scalar, self.y / scalar, self.z / scalar)

    def __neg__(self):
        return Vector3(-self.x, -self.y, -self.z)

    def __eq__(self, other):
        """Check equality with tolerance."""
        if not isinstance(other, Vector3):
            return False
        return (
            abs(self.x - other.x) < 1e-9
            and abs(self.y - other.y) < 1e-9
            and abs(self.z - other.z) < 1e-9
        )

    def __hash__(self):
        return hash((round(self.x, 6), round(self.y, 6), round(self.z, 6)))

    def __repr__(self):
        return f"Vector3({self.x:.3f}, {self.y:.3f}, {self.z:.3f})"

    @property
    def length(self) -> float:
        """Vector magnitude (length)."""
        return math.sqrt(self.x**2 + self.y**2 + self.z**2)

    @property
    def length_xy(self) -> float:
        """Magnitude of the plan projection."""
        return math.sqrt(self.x**2 + self.y**2)

    def normalized(self) -> "Vector3":
        """Return unit vector in same direction.

        Returns:
            Unit vector, or zero vector if length is zero.
        """
        length = self.length
        if length > 0:
            return Vector3(self.x / length, self.y / length, self.z / length)
        return Vector3(0, 0, 0)

    def flattened(self) -> "Vector3":
        """Plan projection (Z forced to 0)."""
        return Vector3(self.x, self.y, 0.0)

    def with_z(self, z: float) -> "Vector3":
        """Same plan position at a different elevation."""
        return Vector3(self.x, self.y, z)

    def dot(self, other: "Vector3") -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def dot_xy(self, other: "Vector3") -> float:
        """Dot product of the plan projections."""
        return self.x * other.x + self.y * other.y

    def cross(self, other: "Vector3") -> "Vector3":
        return Vector3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def cross_xy(self, other: "Vector3") -> float:
        """2D cross product of the plan projections (scalar z-component).

        Positive when other is counter-clockwise from self.
        """
        return self.x * other.y - self.y * other.x

    def distance_to(self, other: "Vector3") -> float:
        return (other - self).length

    def distance_xy(self, other: "Vector3") -> float:
        """Plan distance to another point."""
        return (other - self).length_xy

    def lerp(self, other: "Vector3", t: float) -> "Vector3":
        """Linear interpolation, t=0 at self and t=1 at other."""
        return Vector3(
            self.x + (other.x - self.x) * t,
            self.y + (other.y - self.y) * t,
            self.z + (other.z - self.z) * t,
        )


UP = Vector3(0.0, 0.0, 1.0)
X_AXIS = Vector3(1.0, 0.0, 0.0)


def unit_xy(v: Vector3, fallback: Vector3 = X_AXIS) -> Vector3:
    """Plan-projected unit vector, or fallback for vertical/zero vectors."""
    length = v.length_xy
    if length < 1e-9:
        return fallback
    return Vector3(v.x / length, v.y / length, 0.0)


def midpoint(a: Vector3, b: Vector3) -> Vector3:
    return a.lerp(b, 0.5)


__all__ = ["Vector3", "UP", "X_AXIS", "unit_xy", "midpoint"]
