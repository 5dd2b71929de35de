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
Corner-Aware Rail Joiner
=========================

Builds the rail rows for every side of a run and resolves each corner
between consecutive sides into a butt joint:

    - one rail (the "moving" side) is trimmed or extended in plan until it
      meets a side face of the other rail (the "fixed" side)
    - the fixed side gets an end cap at the corner
    - the moving side gets an end fitting cut to the face plane

Both assignments are tried (NEXT butts PREV, PREV butts NEXT). For each, the
face nearer the moving rail is used, i.e. the one needing the smaller signed
outward travel. The feasible assignment with the smaller absolute travel
wins; ties go to NEXT butting PREV.

Rows are resolved independently, so different rows may choose different
assignments. The joiner keeps no state between calls.

All geometry is in millimetres.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Tuple

from .hosts import host_side_sign
from .offsets import direction_xy
from .vector import Vector3, midpoint
from ..logging_config import get_logger

if TYPE_CHECKING:
    from ..tool import HostElement

logger = get_logger(__name__)

# Rails shorter than this after a butt are rejected
MIN_RAIL_LENGTH = 1.0

# |cross| of plan directions below this is treated as a straight joint
COLINEAR_CROSS = 0.02

# |dir . normal| below this means the rail runs parallel to the face
PARALLEL_DOT = 1e-6

PREV = "PREV"
NEXT = "NEXT"


class EndKind(Enum):
    """Treatment of a rail end."""
    CAP = "CAP"      # end plate
    BUTT = "BUTT"    # end fitting cut to a face plane
    PLAIN = "PLAIN"  # left open (straight-joint fallback)


@dataclass
class FacePlane:
    """Vertical side face of a rail: a point on it and its plan normal."""
    anchor: Vector3
    normal: Vector3

    def distance_xy(self, point: Vector3) -> float:
        """Signed plan distance of a point from the face."""
        return (point - self.anchor).dot_xy(self.normal)


@dataclass
class RailEnd:
    kind: EndKind = EndKind.CAP
    plane: Optional[FacePlane] = None


@dataclass
class RailSideSpec:
    """
    Rail line of one side, between its first and last placed posts.

    Attributes:
        side_index: Index of the side in the run
        start_on_line: First station on the picked path
        end_on_line: Last station on the picked path
        direction: 3D unit direction of the side
        left: Plan unit left vector
        post_lateral: Signed lateral offset of the post line
        half_post_width: Half the post outside width
        first_post_top_z: Top of the first post
        last_post_top_z: Top of the last post
        host: Host associated with the side, or None
    """
    side_index: int
    start_on_line: Vector3
    end_on_line: Vector3
    direction: Vector3
    left: Vector3
    post_lateral: float
    half_post_width: float
    first_post_top_z: float
    last_post_top_z: float
    host: Optional["HostElement"] = None

    @property
    def side_sign(self) -> int:
        """+1 if rails go on the left face of the posts, -1 for the right."""
        sign = host_side_sign(self.left, self.start_on_line, self.host)
        return sign if sign != 0 else 1

    def rail_lateral(self, half_rail_width: float) -> float:
        """Signed lateral offset of the rail centerline from the path."""
        return self.post_lateral + self.side_sign * (self.half_post_width + half_rail_width)


@dataclass
class RailJoinParams:
    """
    Rail row values (millimetres).

    Attributes:
        start_extension: Rail extension past the first post (negative trims)
        end_extension: Rail extension past the last post (negative trims)
        drop_from_top: Top rail centerline below the post top
        count: Number of rail rows
        row_spacing: Vertical spacing between rows
        half_rail_width: Half the rail outside width (plan)
        half_rail_depth: Half the rail outside depth (vertical)
    """
    start_extension: float = 0.0
    end_extension: float = 0.0
    drop_from_top: float = 0.0
    count: int = 1
    row_spacing: float = 0.0
    half_rail_width: float = 19.05
    half_rail_depth: float = 19.05

    def row_drop(self, row: int) -> float:
        return self.drop_from_top + row * self.row_spacing


@dataclass
class RailSegmentPlan:
    """One rail of one row on one side, after corner resolution."""
    side_index: int
    start: Vector3
    end: Vector3
    start_end: RailEnd = field(default_factory=RailEnd)
    end_end: RailEnd = field(default_factory=RailEnd)

    @property
    def length(self) -> float:
        return self.start.distance_to(self.end)

    @property
    def direction(self) -> Vector3:
        return (self.end - self.start).normalized()


@dataclass
class CornerJoint:
    """
    Resolution of one corner for one rail row.

    Attributes:
        corner_index: Index of the PREV rail in the row
        row_index: Rail row
        prev_side: Side index of the incoming side
        next_side: Side index of the outgoing side
        butted: PREV or NEXT, or None when no butt was possible
        capped: Side that got the end cap at this corner
        plane: Face plane the butted rail is cut to
        travel: Signed outward travel of the butted end (+ extends)
        inside: Rails sit in the concave side of the turn
        reference_point: Plan intersection of the untrimmed rail lines
        turn: Plan cross product of the incoming and outgoing directions
        degenerate: Straight joint or no feasible butt
        dir_prev: Plan unit direction of the incoming side
        dir_next: Plan unit direction of the outgoing side
        prev_left: Plan left vector of the incoming side
        lateral_sign: Sign of the incoming rail's lateral offset
    """
    corner_index: int
    row_index: int
    prev_side: int
    next_side: int
    butted: Optional[str]
    capped: str
    plane: Optional[FacePlane]
    travel: float
    inside: bool
    reference_point: Vector3
    turn: float
    degenerate: bool
    dir_prev: Vector3
    dir_next: Vector3
    prev_left: Vector3
    lateral_sign: int

    @property
    def is_butted(self) -> bool:
        return self.butted is not None

    @property
    def is_straight(self) -> bool:
        """Sides run on through the corner in plan."""
        return abs(self.turn) < COLINEAR_CROSS


@dataclass
class RailRowLayout:
    """All rails and corner decisions of one row."""
    row_index: int
    rails: List[RailSegmentPlan] = field(default_factory=list)
    corners: List[CornerJoint] = field(default_factory=list)


@dataclass
class _ButtOption:
    moving: str
    plane: FacePlane
    point: Vector3
    travel: float


# =============================================================================
# Geometry helpers
# =============================================================================

def raw_rail_endpoints(
    spec: RailSideSpec,
    params: RailJoinParams,
    row: int
) -> Tuple[Vector3, Vector3]:
    """
    Rail endpoints of a side before corner resolution.

    Args:
        spec: Rail side
        params: Rail values
        row: Rail row index

    Returns:
        (start, end) shifted by the extensions and the rail lateral offset,
        at the row elevation below each end post top
    """
    lateral = spec.rail_lateral(params.half_rail_width)
    shift = spec.left * lateral
    drop = params.row_drop(row)

    start = spec.start_on_line - spec.direction * params.start_extension + shift
    end = spec.end_on_line + spec.direction * params.end_extension + shift
    return (
        start.with_z(spec.first_post_top_z - drop),
        end.with_z(spec.last_post_top_z - drop),
    )


def line_intersection_xy(
    p1: Vector3, d1: Vector3,
    p2: Vector3, d2: Vector3
) -> Optional[Vector3]:
    """
    Plan intersection of two lines.

    Returns:
        Intersection with Z = 0, or None for parallel lines
    """
    denom = d1.cross_xy(d2)
    if abs(denom) < 1e-9:
        return None
    t = (p2 - p1).cross_xy(d2) / denom
    return Vector3(p1.x + d1.x * t, p1.y + d1.y * t, 0.0)


def _solve_face(
    point: Vector3,
    direction: Vector3,
    plane: FacePlane
) -> Optional[float]:
    denom = direction.dot_xy(plane.normal)
    if abs(denom) < PARALLEL_DOT:
        return None
    return (plane.anchor - point).dot_xy(plane.normal) / denom


def _slide(start: Vector3, end: Vector3, moving_start: bool, t: float) -> Optional[Vector3]:
    """
    Move one end of a rail by t along its plan direction.

    Z follows the rail slope. Returns None if the rail would fall below
    MIN_RAIL_LENGTH or pass its other end.
    """
    run_xy = (end - start).length_xy
    if run_xy < 1e-9:
        return None

    if moving_start:
        remaining = run_xy - t
        f = t / run_xy
    else:
        remaining = run_xy + t
        f = 1.0 + t / run_xy

    if remaining < MIN_RAIL_LENGTH:
        return None
    return start.lerp(end, f)


def _best_face_option(
    moving: str,
    fixed_point: Vector3,
    fixed_left: Vector3,
    moving_start: Vector3,
    moving_end: Vector3,
    moving_dir: Vector3,
    half_rail_width: float
) -> Optional[_ButtOption]:
    """Try both faces of the fixed rail and keep the nearer feasible one."""
    outward = -1.0 if moving == NEXT else 1.0
    origin = moving_start if moving == NEXT else moving_end

    best = None
    for side in (1.0, -1.0):
        plane = FacePlane(anchor=fixed_point + fixed_left * (side * half_rail_width), normal=fixed_left)
        t = _solve_face(origin, moving_dir, plane)
        if t is None:
            continue

        point = _slide(moving_start, moving_end, moving == NEXT, t)
        if point is None:
            continue

        travel = outward * t
        if best is None or travel < best.travel:
            best = _ButtOption(moving=moving, plane=plane, point=point, travel=travel)
    return best


def _reference_point(
    prev_start: Vector3, prev_end: Vector3, dir_prev: Vector3,
    next_start: Vector3, next_end: Vector3, dir_next: Vector3
) -> Vector3:
    z = (prev_end.z + next_start.z) * 0.5
    hit = line_intersection_xy(prev_start, dir_prev, next_start, dir_next)
    if hit is None:
        return midpoint(prev_end, next_start).with_z(z)
    return hit.with_z(z)


# =============================================================================
# Joiner
# =============================================================================

def resolve_corner(
    prev_rail: RailSegmentPlan,
    next_rail: RailSegmentPlan,
    prev_spec: RailSideSpec,
    next_spec: RailSideSpec,
    params: RailJoinParams,
    corner_index: int,
    row: int
) -> CornerJoint:
    """
    Resolve one corner of one row, updating both rails in place.

    Args:
        prev_rail: Incoming rail (its end is at the corner)
        next_rail: Outgoing rail (its start is at the corner)
        prev_spec: Incoming side
        next_spec: Outgoing side
        params: Rail values
        corner_index: Index of prev_rail in the row
        row: Rail row index

    Returns:
        CornerJoint describing the decision
    """
    dir_prev = direction_xy(prev_spec.direction)
    dir_next = direction_xy(next_spec.direction)
    turn = dir_prev.cross_xy(dir_next)

    lateral = prev_spec.rail_lateral(params.half_rail_width)
    lateral_sign = -1 if lateral < 0.0 else 1
    inside = turn * lateral_sign > 0.0

    reference = _reference_point(
        prev_rail.start, prev_rail.end, dir_prev,
        next_rail.start, next_rail.end, dir_next,
    )

    options = []
    if abs(turn) >= COLINEAR_CROSS:
        # (a) NEXT butts the face of PREV
        option_a = _best_face_option(
            NEXT, prev_rail.end, prev_spec.left,
            next_rail.start, next_rail.end, dir_next,
            params.half_rail_width,
        )
        # (b) PREV butts the face of NEXT
        option_b = _best_face_option(
            PREV, next_rail.start, next_spec.left,
            prev_rail.start, prev_rail.end, dir_prev,
            params.half_rail_width,
        )
        options = [o for o in (option_a, option_b) if o is not None]

    joint = CornerJoint(
        corner_index=corner_index,
        row_index=row,
        prev_side=prev_spec.side_index,
        next_side=next_spec.side_index,
        butted=None,
        capped=PREV,
        plane=None,
        travel=0.0,
        inside=inside,
        reference_point=reference,
        turn=turn,
        degenerate=True,
        dir_prev=dir_prev,
        dir_next=dir_next,
        prev_left=prev_spec.left,
        lateral_sign=lateral_sign,
    )

    if not options:
        logger.debug(
            "Row %d corner %d: no butt possible (turn %.4f), previous end capped",
            row, corner_index, turn
        )
        prev_rail.end_end = RailEnd(EndKind.CAP)
        next_rail.start_end = RailEnd(EndKind.PLAIN)
        return joint

    # min() keeps the first of equal keys, so a tie goes to option (a)
    chosen = min(options, key=lambda o: abs(o.travel))

    if chosen.moving == NEXT:
        next_rail.start = chosen.point
        next_rail.start_end = RailEnd(EndKind.BUTT, chosen.plane)
        prev_rail.end_end = RailEnd(EndKind.CAP)
        joint.capped = PREV
    else:
        prev_rail.end = chosen.point
        prev_rail.end_end = RailEnd(EndKind.BUTT, chosen.plane)
        next_rail.start_end = RailEnd(EndKind.CAP)
        joint.capped = NEXT

    joint.butted = chosen.moving
    joint.plane = chosen.plane
    joint.travel = chosen.travel
    joint.degenerate = False

    logger.debug(
        "Row %d corner %d: %s butts, travel %.2f mm, %s",
        row, corner_index, chosen.moving, chosen.travel,
        "inside" if inside else "outside"
    )
    return joint


def build_rail_row(
    specs: List[RailSideSpec],
    params: RailJoinParams,
    row: int
) -> RailRowLayout:
    """
    Build one rail row over all sides and resolve its corners.

    Consecutive specs form a corner only if their sides are consecutive in
    the run; a gap (skipped side) leaves both ends capped.

    Args:
        specs: Rail sides in run order
        params: Rail values
        row: Rail row index

    Returns:
        RailRowLayout with one rail per spec
    """
    layout = RailRowLayout(row_index=row)

    for spec in specs:
        start, end = raw_rail_endpoints(spec, params, row)
        layout.rails.append(RailSegmentPlan(side_index=spec.side_index, start=start, end=end))

    for k in range(len(specs) - 1):
        prev_spec, next_spec = specs[k], specs[k + 1]
        if next_spec.side_index != prev_spec.side_index + 1:
            continue
        layout.corners.append(resolve_corner(
            layout.rails[k], layout.rails[k + 1],
            prev_spec, next_spec, params, k, row,
        ))

    return layout


def join_rails(
    specs: List[RailSideSpec],
    params: RailJoinParams
) -> List[RailRowLayout]:
    """
    Build every rail row.

    Args:
        specs: Rail sides in run order (sides with at least one post)
        params: Rail values

    Returns:
        RailRowLayout per row; empty if there are no rows or no sides
    """
    if params.count <= 0 or not specs:
        return []

    rows = [build_rail_row(specs, params, r) for r in range(params.count)]
    logger.debug(
        "Joined %d rows over %d sides (%d corners per row)",
        len(rows), len(specs), len(rows[0].corners)
    )
    return rows


__all__ = [
    "MIN_RAIL_LENGTH",
    "COLINEAR_CROSS",
    "PARALLEL_DOT",
    "PREV",
    "NEXT",
    "EndKind",
    "FacePlane",
    "RailEnd",
    "RailSideSpec",
    "RailJoinParams",
    "RailSegmentPlan",
    "CornerJoint",
    "RailRowLayout",
    "raw_rail_endpoints",
    "line_intersection_xy",
    "resolve_corner",
    "build_rail_row",
    "join_rails",
]
