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
Per-Side Post Layout
=====================

Walks a picked run polyline side by side and places posts:

    1. Side frame: 3D unit direction, plan left vector, post rotation
    2. Stations from the redistributed spacing (stationing.py)
    3. Per station: host lookup, base Z, post endpoints offset laterally
    4. Duplicate guard on a 1 mm grid across all sides
    5. Post cap plate and optional post-to-host connection request

Every side is laid out on its own. A side does not share its first post
with the previous side; coincident posts at a corner are removed by the
duplicate guard instead.

All geometry is in millimetres.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, List, Optional, Sequence, Set, Tuple

from .hosts import find_best_host, first_host, host_top_z
from .offsets import Rotation, left_vector_xy, post_rotation_from_run
from .rail_joiner import RailSideSpec
from .stationing import Station, StationDistribution, distribute_stations, station_points
from .vector import UP, Vector3
from ..logging_config import get_logger

if TYPE_CHECKING:
    from ..tool import HostElement

logger = get_logger(__name__)

# Trailing pick within this distance of the first point closes the loop
CLOSED_LOOP_TOLERANCE = 0.5

# Sides shorter than this are skipped
MIN_SIDE_LENGTH = 1.0

# Snap grid for the duplicate post guard
POST_SNAP_GRID = 1.0


# =============================================================================
# Requests
# =============================================================================

@dataclass
class PlateRequest:
    """
    A flat plate (post cap or rail end cap).

    Attributes:
        name: Part name ("POST CAP", "RAIL CAP")
        profile: Plate profile string
        material: Material grade
        part_class: Numbering class
        center: Plate centre (mid-thickness)
        normal: Unit normal of the plate
        contour: Corner points of the plate outline, in order
    """
    name: str
    profile: str
    material: str
    part_class: str
    center: Vector3
    normal: Vector3
    contour: List[Vector3] = field(default_factory=list)


@dataclass
class ConnectionRequest:
    """A post-to-host connection to be created by the host application."""
    host: Any
    name: str
    attributes: str = ""

    @property
    def is_numbered(self) -> bool:
        """True when the connection is referenced by number rather than name."""
        return self.name.lstrip("-").isdigit()


@dataclass
class PostRequest:
    """
    A post to be created.

    Attributes:
        start: Base point (bottom of post)
        end: Top point
        profile, material, part_class, name: Part properties
        rotation: Coarse self-rotation from the run direction
        side_index: Index of the side that placed the post
        station_index: Station index within that side
        is_corner_station: Post sits at a corner between two sides
        on_line: Station point on the picked path (before lateral offset)
        host: Host the post landed on, or None
        cap: Post cap plate
        connection: Connection request, or None
    """
    start: Vector3
    end: Vector3
    profile: str
    material: str
    part_class: str
    name: str
    rotation: Rotation
    side_index: int
    station_index: int
    is_corner_station: bool
    on_line: Vector3
    host: Optional["HostElement"] = None
    cap: Optional[PlateRequest] = None
    connection: Optional[ConnectionRequest] = None

    @property
    def top_z(self) -> float:
        return self.end.z

    @property
    def height(self) -> float:
        return self.end.z - self.start.z


@dataclass
class PostLayoutParams:
    """
    Resolved post layout values (millimetres).

    Attributes:
        spacing: Target maximum spacing between posts
        height: Post height
        start_offset: First station distance from each side start
        end_offset: Last station distance from each side end
        base_offset: Post base above the host top (or path Z)
        lateral: Signed lateral offset of the post line
        half_post_width: Half the post outside width (0 if unknown)
        profile, material, part_class, name: Post part properties
        connection_enabled: Emit connection requests for hosted posts
        connection_name: Connection name or number
        connection_attributes: Connection attributes file (may be blank)
        plate_thickness: Post cap thickness
        cap_name, cap_profile, cap_material, cap_class: Post cap properties
    """
    spacing: float
    height: float
    start_offset: float = 0.0
    end_offset: float = 0.0
    base_offset: float = 0.0
    lateral: float = 0.0
    half_post_width: float = 0.0
    profile: str = ""
    material: str = ""
    part_class: str = ""
    name: str = ""
    connection_enabled: bool = False
    connection_name: str = ""
    connection_attributes: str = ""
    plate_thickness: float = 3.175
    cap_name: str = "POST CAP"
    cap_profile: str = "PL3.175"
    cap_material: str = "A36"
    cap_class: str = "4"


@dataclass
class SideLayout:
    """
    Layout of one side of the run.

    Attributes:
        index: Side index (segment between point index and index + 1)
        start: Side start point
        end: Side end point
        direction: 3D unit direction
        left: Plan unit left vector
        rotation: Post rotation for the side
        distribution: Station distribution
        stations: Stations on the line
        posts: Posts placed on this side
        duplicates: Stations dropped by the duplicate guard
    """
    index: int
    start: Vector3
    end: Vector3
    direction: Vector3
    left: Vector3
    rotation: Rotation
    distribution: StationDistribution
    stations: List[Station] = field(default_factory=list)
    posts: List[PostRequest] = field(default_factory=list)
    duplicates: int = 0

    @property
    def length(self) -> float:
        return self.start.distance_to(self.end)

    @property
    def has_posts(self) -> bool:
        return bool(self.posts)

    @property
    def first_post(self) -> Optional[PostRequest]:
        return self.posts[0] if self.posts else None

    @property
    def last_post(self) -> Optional[PostRequest]:
        return self.posts[-1] if self.posts else None

    @property
    def host(self) -> Optional["HostElement"]:
        """First or last post host, whichever exists."""
        if not self.posts:
            return None
        return first_host([self.posts[0].host, self.posts[-1].host])

    def rail_side_spec(
        self,
        lateral: float,
        half_post_width: float
    ) -> Optional[RailSideSpec]:
        """
        Rail line for this side, or None if no post was placed.

        Args:
            lateral: Signed lateral offset of the post line
            half_post_width: Half the post outside width

        Returns:
            RailSideSpec between the first and last placed posts
        """
        if not self.posts:
            return None

        first = self.posts[0]
        last = self.posts[-1]
        return RailSideSpec(
            side_index=self.index,
            start_on_line=first.on_line,
            end_on_line=last.on_line,
            direction=self.direction,
            left=self.left,
            post_lateral=lateral,
            half_post_width=half_post_width,
            first_post_top_z=first.top_z,
            last_post_top_z=last.top_z,
            host=self.host,
        )


# =============================================================================
# Run normalisation
# =============================================================================

def normalize_run(points: Sequence[Any]) -> List[Vector3]:
    """
    Convert picked points to a run polyline.

    A trailing point that repeats the first (within 0.5 mm) is dropped when
    there are at least three points, so a closed pick lays out as an open
    run.

    Args:
        points: Vector3 objects or (x, y, z) tuples

    Returns:
        List of at least two points

    Raises:
        ValueError: If fewer than two points remain
    """
    run = [p if isinstance(p, Vector3) else Vector3(p) for p in points or ()]

    if len(run) >= 3 and run[-1].distance_to(run[0]) <= CLOSED_LOOP_TOLERANCE:
        logger.debug("Closing point removed from %d-point run", len(run))
        run = run[:-1]

    if len(run) < 2:
        raise ValueError(f"Run needs at least 2 points, got {len(run)}")

    return run


def post_key(point: Vector3, snap: float = POST_SNAP_GRID) -> Tuple[int, int, int]:
    """Grid key of a post base for the duplicate guard."""
    return (
        int(round(point.x / snap)),
        int(round(point.y / snap)),
        int(round(point.z / snap)),
    )


def is_corner_station(side_index: int, station_index: int, station_count: int, side_count: int) -> bool:
    """
    True for a station that sits on a corner between two sides.

    The first station of a side with a predecessor and the last station of
    a side with a successor are corner stations.
    """
    if side_count <= 1:
        return False
    if side_index > 0 and station_index == 0:
        return True
    return side_index < side_count - 1 and station_index == station_count - 1


def post_cap(top: Vector3, half_width: float, params: PostLayoutParams) -> PlateRequest:
    """
    Cap plate sitting on the post top.

    The plate outline follows the post extents in plan; its mid-plane sits
    half a thickness above the top so the bottom face bears on the post.
    """
    h = max(half_width, 1.0)
    z = top.z + params.plate_thickness * 0.5
    return PlateRequest(
        name=params.cap_name,
        profile=params.cap_profile,
        material=params.cap_material,
        part_class=params.cap_class,
        center=top.with_z(z),
        normal=UP,
        contour=[
            Vector3(top.x - h, top.y - h, z),
            Vector3(top.x + h, top.y - h, z),
            Vector3(top.x + h, top.y + h, z),
            Vector3(top.x - h, top.y + h, z),
        ],
    )


# =============================================================================
# Layout
# =============================================================================

def layout_side(
    index: int,
    p1: Vector3,
    p2: Vector3,
    side_count: int,
    hosts: Sequence["HostElement"],
    params: PostLayoutParams,
    used_keys: Optional[Set[Tuple[int, int, int]]] = None
) -> Optional[SideLayout]:
    """
    Place the posts of one side.

    Args:
        index: Side index in the run
        p1: Side start point
        p2: Side end point
        side_count: Number of sides in the run
        hosts: Candidate hosts
        params: Post layout values
        used_keys: Duplicate guard keys shared across sides (updated)

    Returns:
        SideLayout, or None if the side is shorter than 1 mm
    """
    run = p2 - p1
    length = run.length
    if length < MIN_SIDE_LENGTH:
        logger.debug("Side %d skipped: length %.3f mm", index, length)
        return None

    direction = run / length
    left = left_vector_xy(direction)
    rotation = post_rotation_from_run(direction)

    distribution = distribute_stations(
        length, params.start_offset, params.end_offset, params.spacing
    )
    side = SideLayout(
        index=index,
        start=p1,
        end=p2,
        direction=direction,
        left=left,
        rotation=rotation,
        distribution=distribution,
        stations=station_points(p1, direction, distribution.distances),
    )

    if used_keys is None:
        used_keys = set()

    station_count = len(side.stations)
    for station in side.stations:
        on_line = station.on_line
        at = on_line + left * params.lateral

        host = find_best_host(on_line, hosts) if hosts else None
        top = host_top_z(host)
        if top is None:
            if hosts:
                logger.debug("Side %d station %d: no host, using path Z", index, station.index)
            base_z = on_line.z + params.base_offset
        else:
            base_z = top + params.base_offset

        start = at.with_z(base_z)
        end = at.with_z(base_z + params.height)

        key = post_key(start)
        if key in used_keys:
            side.duplicates += 1
            logger.debug("Side %d station %d: duplicate post skipped", index, station.index)
            continue
        used_keys.add(key)

        connection = None
        if params.connection_enabled and host is not None:
            connection = ConnectionRequest(
                host=host,
                name=params.connection_name,
                attributes=params.connection_attributes,
            )

        side.posts.append(PostRequest(
            start=start,
            end=end,
            profile=params.profile,
            material=params.material,
            part_class=params.part_class,
            name=params.name,
            rotation=rotation,
            side_index=index,
            station_index=station.index,
            is_corner_station=is_corner_station(index, station.index, station_count, side_count),
            on_line=on_line,
            host=host,
            cap=post_cap(end, params.half_post_width, params),
            connection=connection,
        ))

    logger.debug(
        "Side %d: %d stations, pitch %.1f mm, %d posts",
        index, station_count, distribution.pitch, len(side.posts)
    )
    return side


def layout_posts(
    points: Sequence[Any],
    hosts: Sequence["HostElement"],
    params: PostLayoutParams
) -> List[SideLayout]:
    """
    Place posts along every side of a run.

    Args:
        points: Picked run points
        hosts: Candidate hosts
        params: Post layout values

    Returns:
        SideLayout per side that is at least 1 mm long

    Raises:
        ValueError: If the run has fewer than two points or spacing <= 0
    """
    run = normalize_run(points)
    side_count = len(run) - 1
    used_keys: Set[Tuple[int, int, int]] = set()

    sides = []
    for i in range(side_count):
        side = layout_side(i, run[i], run[i + 1], side_count, hosts, params, used_keys)
        if side is not None:
            sides.append(side)
    return sides


__all__ = [
    "CLOSED_LOOP_TOLERANCE",
    "MIN_SIDE_LENGTH",
    "POST_SNAP_GRID",
    "PlateRequest",
    "ConnectionRequest",
    "PostRequest",
    "PostLayoutParams",
    "SideLayout",
    "normalize_run",
    "post_key",
    "is_corner_station",
    "post_cap",
    "layout_side",
    "layout_posts",
]
