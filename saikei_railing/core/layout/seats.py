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
Seat Angle Placement
=====================

Short angle brackets that carry the rails.

Post seat (straight run):
    A 1-1/2" piece of angle laid along the run on the rail-side face of the
    post, half a rail depth below the rail centerline. It gets a slot in
    each leg and two pilot holes bored in the post behind the post-leg slot.

Corner seat:
    A vertical 1-1/2" piece standing on the bisector of the two rails at a
    corner, pushed out from the rail intersection far enough for both legs
    to bear on the rail faces. Slots only, one per leg.

Corner orientation comes from the compass quadrant of the bisector:

    NE -> TOP    NW -> BACK    SW -> BELOW    SE -> FRONT

A bisector lying on an axis takes the missing sign from the first leg's
component across that axis. Straight and degenerate corners use TOP.

All geometry is in millimetres.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .offsets import Rotation
from .rail_joiner import CornerJoint
from .vector import UP, Vector3
from ..logging_config import get_logger

logger = get_logger(__name__)

# sin(half angle) below this is a degenerate corner
MIN_SIN_HALF_ANGLE = 0.05

# Bisector component below this counts as lying on an axis
AXIS_TOLERANCE = 1e-3


class SeatKind(Enum):
    POST = "POST"
    CORNER = "CORNER"


class HoleTarget(Enum):
    """Part a hole is cut in."""
    SEAT = "SEAT"
    POST = "POST"


@dataclass
class HoleSpec:
    """
    A hole-only bolt position (no bolt, nut or washers).

    Attributes:
        center: Hole centre
        axis: Unit direction of the hole group X axis (slot direction)
        standard: Bolt standard the hole is sized from
        size: Bolt size (mm); drives the hole or slot width
        cut_length: Cut length through the part (mm)
        slotted_length: Slot length along the X axis (mm, 0 for round)
        special_first_layer: Special hole in the first layer
        rotation: Hole group rotation
        target: Part the hole is cut in
    """
    center: Vector3
    axis: Vector3
    standard: str
    size: float
    cut_length: float
    slotted_length: float = 0.0
    special_first_layer: bool = False
    rotation: Rotation = Rotation.BELOW
    target: HoleTarget = HoleTarget.SEAT

    @property
    def is_slotted(self) -> bool:
        return self.slotted_length > 0.0


@dataclass
class SeatOrientation:
    """Positioning of the angle about its own axis."""
    plane: str
    rotation: Rotation
    depth: str


@dataclass
class SeatStyle:
    """
    Seat angle properties and hole settings (mm).

    Attributes:
        profile, material, part_class, name: Angle part properties
        length: Angle piece length
        leg_thickness: Angle leg thickness
        hole_line: Hole line distance from the bend
        slot_c2c: Slot length
        slot_size: Slot bolt size
        slot_standard: Slot bolt standard
        slot_cut_length: Slot cut length
        slot_special_first_layer: Special slot in the first layer
        pilot_c2c: Pilot hole spacing
        pilot_dia: Pilot hole size
        pilot_standard: Pilot bolt standard
        pilot_cut_length: Pilot cut length
        corner_inside_travel: Extra radial travel of an inside corner seat
    """
    profile: str = "L1-1/2X1-1/2X1/8"
    material: str = "A1011-GR.50"
    part_class: str = "6"
    name: str = "RAIL POST ANGLE"
    length: float = 38.1
    leg_thickness: float = 3.175
    hole_line: float = 19.05
    slot_c2c: float = 12.7
    slot_size: float = 9.525
    slot_standard: str = "A325N"
    slot_cut_length: float = 50.8
    slot_special_first_layer: bool = False
    pilot_c2c: float = 25.4
    pilot_dia: float = 4.7625
    pilot_standard: str = "A325N"
    pilot_cut_length: float = 50.8
    corner_inside_travel: float = 3.175


@dataclass
class SeatSpec:
    """
    A seat angle to be created.

    Attributes:
        kind: POST or CORNER
        center: Angle centre
        start: Angle axis start
        end: Angle axis end
        orientation: Plane, rotation and depth positioning
        profile, material, part_class, name: Part properties
        holes: Slot and pilot holes
        row_index: Rail row the seat carries
        side_index: Side of a post seat, incoming side of a corner seat
        station_index: Station of a post seat (None for corners)
        radial_travel: Distance from the corner reference point (corners)
        bisector: Plan direction from the corner reference point (corners)
    """
    kind: SeatKind
    center: Vector3
    start: Vector3
    end: Vector3
    orientation: SeatOrientation
    profile: str
    material: str
    part_class: str
    name: str
    holes: List[HoleSpec] = field(default_factory=list)
    row_index: int = 0
    side_index: int = 0
    station_index: Optional[int] = None
    radial_travel: float = 0.0
    bisector: Optional[Vector3] = None

    @property
    def slots(self) -> List[HoleSpec]:
        return [h for h in self.holes if h.is_slotted]

    @property
    def pilots(self) -> List[HoleSpec]:
        return [h for h in self.holes if h.target is HoleTarget.POST]


def _slot(center: Vector3, axis: Vector3, rotation: Rotation, style: SeatStyle) -> HoleSpec:
    return HoleSpec(
        center=center,
        axis=axis,
        standard=style.slot_standard,
        size=style.slot_size,
        cut_length=style.slot_cut_length,
        slotted_length=style.slot_c2c,
        special_first_layer=style.slot_special_first_layer,
        rotation=rotation,
        target=HoleTarget.SEAT,
    )


def _pilot(center: Vector3, axis: Vector3, style: SeatStyle) -> HoleSpec:
    return HoleSpec(
        center=center,
        axis=axis,
        standard=style.pilot_standard,
        size=style.pilot_dia,
        cut_length=style.pilot_cut_length,
        rotation=Rotation.BELOW,
        target=HoleTarget.POST,
    )


# =============================================================================
# Post seats
# =============================================================================

def post_seat(
    on_line: Vector3,
    dir_xy: Vector3,
    left: Vector3,
    post_lateral: float,
    half_post_width: float,
    side_sign: int,
    rail_z: float,
    half_rail_depth: float,
    style: SeatStyle,
    row_index: int = 0,
    side_index: int = 0,
    station_index: Optional[int] = None
) -> SeatSpec:
    """
    Seat angle under a rail at a straight-run post.

    Args:
        on_line: Station point on the picked path
        dir_xy: Plan unit direction of the side
        left: Plan unit left vector of the side
        post_lateral: Signed lateral offset of the post line
        half_post_width: Half the post outside width
        side_sign: +1 for rails on the left face of the post, -1 for right
        rail_z: Rail centerline elevation at the post
        half_rail_depth: Half the rail outside depth
        style: Seat properties
        row_index: Rail row
        side_index: Side index
        station_index: Station index

    Returns:
        SeatSpec with two slots and two pilot holes
    """
    z = rail_z - half_rail_depth
    lateral = post_lateral + side_sign * half_post_width
    center = (on_line + left * lateral).with_z(z)

    half = style.length * 0.5
    start = center - dir_xy * half
    end = center + dir_xy * half

    # Perpendicular biased toward the post so offsets land in the post-side leg
    side = dir_xy.cross(UP).normalized()
    post_center = (on_line + left * post_lateral).with_z(z)
    if side.dot_xy(post_center - center) < 0.0:
        side = -side

    t_half = style.leg_thickness * 0.5
    post_slot = center - UP * style.hole_line + side * t_half
    rail_slot = center - side * style.hole_line - UP * t_half

    half_pilot = style.pilot_c2c * 0.5
    holes = [
        _slot(post_slot, dir_xy, Rotation.BELOW, style),
        _slot(rail_slot, dir_xy, Rotation.BACK, style),
        _pilot(post_slot - dir_xy * half_pilot, dir_xy, style),
        _pilot(post_slot + dir_xy * half_pilot, dir_xy, style),
    ]

    return SeatSpec(
        kind=SeatKind.POST,
        center=center,
        start=start,
        end=end,
        orientation=SeatOrientation(plane="LEFT", rotation=Rotation.BELOW, depth="BEHIND"),
        profile=style.profile,
        material=style.material,
        part_class=style.part_class,
        name=style.name,
        holes=holes,
        row_index=row_index,
        side_index=side_index,
        station_index=station_index,
    )


# =============================================================================
# Corner seats
# =============================================================================

def _quadrant_rotation(x_sign: float, y_sign: float) -> Rotation:
    if x_sign > 0.0:
        return Rotation.TOP if y_sign > 0.0 else Rotation.FRONT
    return Rotation.BACK if y_sign > 0.0 else Rotation.BELOW


def corner_rotation(bisector: Optional[Vector3], first_leg: Vector3) -> Rotation:
    """
    Corner seat rotation from the bisector quadrant.

    Args:
        bisector: Plan unit bisector, or None for a straight/degenerate corner
        first_leg: Plan unit vector of the first leg leaving the corner

    Returns:
        Rotation for the quadrant

    Example:
        >>> corner_rotation(Vector3(1, 1, 0).normalized(), Vector3(-1, 0, 0))
        <Rotation.TOP: 'TOP'>
    """
    if bisector is None:
        return Rotation.TOP

    bx, by = bisector.x, bisector.y
    near_y_axis = abs(bx) < AXIS_TOLERANCE
    near_x_axis = abs(by) < AXIS_TOLERANCE

    if near_y_axis and near_x_axis:
        return Rotation.TOP

    if near_y_axis:
        if abs(first_leg.x) < AXIS_TOLERANCE:
            return Rotation.TOP
        bx = first_leg.x
    elif near_x_axis:
        if abs(first_leg.y) < AXIS_TOLERANCE:
            return Rotation.TOP
        by = first_leg.y

    return _quadrant_rotation(bx, by)


def corner_geometry(
    joint: CornerJoint,
    half_rail_depth: float,
    rail_width: float,
    inside_travel: float
):
    """
    Bisector and radial travel of a corner seat.

    Args:
        joint: Resolved corner
        half_rail_depth: Half the rail outside depth
        rail_width: Rail outside width
        inside_travel: Extra travel for an inside corner

    Returns:
        (bisector, distance, degenerate). A degenerate corner returns the
        incoming side's rail-side normal and zero travel.
    """
    u = -joint.dir_prev
    v = joint.dir_next
    total = u + v

    cos_angle = max(-1.0, min(1.0, u.dot_xy(v)))
    sin_half = math.sin(math.acos(cos_angle) * 0.5)

    if sin_half < MIN_SIN_HALF_ANGLE or total.length_xy < 1e-6:
        logger.debug(
            "Row %d corner %d: degenerate seat angle (sin %.4f), using side normal",
            joint.row_index, joint.corner_index, sin_half
        )
        return joint.prev_left * joint.lateral_sign, 0.0, True

    bisector = total.flattened().normalized()
    if not joint.inside:
        bisector = -bisector

    distance = half_rail_depth / sin_half
    if joint.inside:
        distance += inside_travel
    else:
        distance += rail_width / sin_half
    return bisector, distance, False


def corner_seat(
    joint: CornerJoint,
    half_rail_depth: float,
    rail_width: float,
    style: SeatStyle
) -> SeatSpec:
    """
    Seat angle standing in a rail corner.

    Args:
        joint: Resolved corner (reference point at the rail centerline Z)
        half_rail_depth: Half the rail outside depth
        rail_width: Rail outside width
        style: Seat properties

    Returns:
        SeatSpec with one slot per leg and no pilot holes
    """
    u = -joint.dir_prev
    v = joint.dir_next

    bisector, distance, degenerate = corner_geometry(
        joint, half_rail_depth, rail_width, style.corner_inside_travel
    )

    center = joint.reference_point + bisector * distance
    half = style.length * 0.5
    rotation = corner_rotation(None if degenerate else bisector, u)

    holes = [
        _slot(center + u * style.hole_line, u, Rotation.BELOW, style),
        _slot(center + v * style.hole_line, v, Rotation.TOP, style),
    ]

    return SeatSpec(
        kind=SeatKind.CORNER,
        center=center,
        start=center - UP * half,
        end=center + UP * half,
        orientation=SeatOrientation(plane="MIDDLE", rotation=rotation, depth="MIDDLE"),
        profile=style.profile,
        material=style.material,
        part_class=style.part_class,
        name=style.name,
        holes=holes,
        row_index=joint.row_index,
        side_index=joint.prev_side,
        radial_travel=distance,
        bisector=bisector,
    )


__all__ = [
    "MIN_SIN_HALF_ANGLE",
    "AXIS_TOLERANCE",
    "SeatKind",
    "HoleTarget",
    "HoleSpec",
    "SeatOrientation",
    "SeatStyle",
    "SeatSpec",
    "post_seat",
    "corner_rotation",
    "corner_geometry",
    "corner_seat",
]
