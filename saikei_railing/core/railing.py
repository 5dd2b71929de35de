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
Railing Layout
===============

Runs the whole layout for one railing instance:

    1. Posts per side (post_layout), with caps and host connections
    2. Rail sides from the first and last post of each side
    3. Rail rows with corner butt resolution (rail_joiner)
    4. Rail pieces, end caps and end fittings (rail_pieces)
    5. Post seats at straight-run posts and corner seats at corners (seats)

Settings come in inches (RailingSettings); everything geometric is handed
to the layout modules in millimetres.

Example:
    >>> defaults = RailingDefaults.from_text(config_text)
    >>> settings = resolve_settings(None, defaults)
    >>> plan = build_railing([(0, 0, 0), (6000, 0, 0), (6000, 3000, 0)], [], settings)
    >>> print(plan.summary())
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple

from .defaults import FabricationDefaults, RailingSettings
from .distance_formatting import inches_to_mm
from .layout.hosts import host_side_sign
from .layout.offsets import compute_lateral_offset, direction_xy
from .layout.post_layout import (
    PlateRequest,
    PostLayoutParams,
    PostRequest,
    SideLayout,
    layout_posts,
    normalize_run,
)
from .layout.rail_joiner import CornerJoint, RailJoinParams, RailRowLayout, join_rails
from .layout.rail_pieces import EndFittingRequest, RailPieceRequest, RailStyle, row_requests
from .layout.seats import SeatSpec, SeatStyle, corner_seat, post_seat
from .logging_config import get_logger
from .profiles import outside_dim_mm

logger = get_logger(__name__)


@dataclass
class RailingPlan:
    """
    Everything one railing instance asks the host application to create.

    Attributes:
        sides: Per-side post layouts
        posts: Post requests (each carries its cap and connection)
        rails: Rail piece requests
        rail_caps: Rail end cap plates
        rail_fittings: Rail end fittings at butt joints
        seats: Post and corner seat angles
        corners: Corner decisions for every rail row
        rows: Resolved rail rows
        side_count: Sides in the picked run
        skipped: Stations dropped by the duplicate guard
        rail_sides: Sides that carry rails
        persisted: Effective values formatted for storage
    """
    sides: List[SideLayout] = field(default_factory=list)
    posts: List[PostRequest] = field(default_factory=list)
    rails: List[RailPieceRequest] = field(default_factory=list)
    rail_caps: List[PlateRequest] = field(default_factory=list)
    rail_fittings: List[EndFittingRequest] = field(default_factory=list)
    seats: List[SeatSpec] = field(default_factory=list)
    corners: List[CornerJoint] = field(default_factory=list)
    rows: List[RailRowLayout] = field(default_factory=list)
    side_count: int = 0
    skipped: int = 0
    rail_sides: int = 0
    persisted: Dict[str, str] = field(default_factory=dict)

    @property
    def inserted(self) -> int:
        return len(self.posts)

    @property
    def connections(self) -> int:
        return sum(1 for p in self.posts if p.connection is not None)

    @property
    def post_caps(self) -> List[PlateRequest]:
        return [p.cap for p in self.posts if p.cap is not None]

    def summary(self) -> str:
        return (
            f"sides={self.side_count}, inserted={self.inserted}, "
            f"skipped={self.skipped}, rail_sides={self.rail_sides}, "
            f"connections={self.connections}"
        )


# =============================================================================
# Settings to layout values (inches -> mm)
# =============================================================================

def half_post_width_mm(settings: RailingSettings) -> float:
    """Half the post outside width, 0 when the profile cannot be read."""
    return outside_dim_mm(settings.post_profile, 0.0) * 0.5


def rail_width_mm(fabrication: FabricationDefaults) -> float:
    return outside_dim_mm(fabrication.rail_profile, fabrication.rail_fallback_outside_in)


def post_params(settings: RailingSettings, fabrication: FabricationDefaults) -> PostLayoutParams:
    half_width = half_post_width_mm(settings)
    lateral = compute_lateral_offset(
        settings.line_ref, inches_to_mm(settings.deck_edge_in), half_width
    )
    return PostLayoutParams(
        spacing=inches_to_mm(settings.spacing_in),
        height=inches_to_mm(settings.post_height_in),
        start_offset=inches_to_mm(settings.start_offset_in),
        end_offset=inches_to_mm(settings.end_offset_in),
        base_offset=inches_to_mm(settings.base_offset_in),
        lateral=lateral,
        half_post_width=half_width,
        profile=settings.post_profile,
        material=settings.post_material,
        part_class=settings.post_class,
        name=settings.post_name,
        connection_enabled=settings.connection_enabled,
        connection_name=settings.connection_name,
        connection_attributes=settings.connection_attributes,
        plate_thickness=inches_to_mm(fabrication.plate_thickness_in),
        cap_name=fabrication.post_cap_name,
        cap_profile=fabrication.plate_profile,
        cap_material=fabrication.plate_material,
        cap_class=fabrication.plate_class,
    )


def rail_params(settings: RailingSettings, fabrication: FabricationDefaults) -> RailJoinParams:
    half_rail = rail_width_mm(fabrication) * 0.5
    return RailJoinParams(
        start_extension=inches_to_mm(settings.rail_start_offset_in),
        end_extension=inches_to_mm(settings.rail_end_offset_in),
        drop_from_top=inches_to_mm(settings.rail_from_top_in),
        count=settings.rail_count,
        row_spacing=inches_to_mm(settings.rail_spacing_in),
        half_rail_width=half_rail,
        half_rail_depth=half_rail,
    )


def rail_style(fabrication: FabricationDefaults) -> RailStyle:
    half_rail = rail_width_mm(fabrication) * 0.5
    return RailStyle(
        profile=fabrication.rail_profile,
        material=fabrication.rail_material,
        part_class=fabrication.rail_class,
        name=fabrication.rail_name,
        max_piece_length=inches_to_mm(fabrication.rail_max_piece_length_in),
        cap_name=fabrication.rail_cap_name,
        cap_profile=fabrication.plate_profile,
        cap_material=fabrication.plate_material,
        cap_class=fabrication.plate_class,
        plate_thickness=inches_to_mm(fabrication.plate_thickness_in),
        half_width=half_rail,
        half_depth=half_rail,
    )


def seat_style(settings: RailingSettings, fabrication: FabricationDefaults) -> SeatStyle:
    return SeatStyle(
        profile=fabrication.seat_profile,
        material=fabrication.seat_material,
        part_class=fabrication.seat_class,
        name=fabrication.seat_name,
        length=inches_to_mm(fabrication.seat_length_in),
        leg_thickness=inches_to_mm(fabrication.seat_leg_thickness_in),
        hole_line=inches_to_mm(settings.seat_hole_line_in),
        slot_c2c=inches_to_mm(settings.seat_slot_c2c_in),
        slot_size=inches_to_mm(settings.seat_slot_size_in),
        slot_standard=settings.seat_slot_standard,
        slot_cut_length=inches_to_mm(settings.seat_slot_cut_length_in),
        slot_special_first_layer=settings.seat_slot_special_first_layer,
        pilot_c2c=inches_to_mm(settings.seat_pilot_c2c_in),
        pilot_dia=inches_to_mm(settings.seat_pilot_dia_in),
        pilot_standard=settings.seat_pilot_standard,
        pilot_cut_length=inches_to_mm(settings.seat_pilot_cut_length_in),
        corner_inside_travel=inches_to_mm(fabrication.corner_inside_travel_in),
    )


# =============================================================================
# Seats
# =============================================================================

def straight_seats(
    side: SideLayout,
    params: PostLayoutParams,
    rails: RailJoinParams,
    style: SeatStyle,
    straight_corners: Optional[Set[Tuple[int, int, bool]]] = None
) -> List[SeatSpec]:
    """
    Post seats for the posts of a side and every rail row.

    Corner posts are skipped unless their corner is listed in
    straight_corners as (row, side index, at side start); those corners get
    no corner seat, so the post carries an ordinary one.
    """
    seats = []
    dir_xy = direction_xy(side.direction)
    straight_corners = straight_corners or set()
    last_station = len(side.stations) - 1

    for post in side.posts:
        sign = host_side_sign(side.left, post.on_line, post.host)
        if sign == 0:
            sign = 1

        for row in range(rails.count):
            if post.is_corner_station:
                at_start = (row, side.index, True) in straight_corners and post.station_index == 0
                at_end = (row, side.index, False) in straight_corners and post.station_index == last_station
                if not (at_start or at_end):
                    continue

            seats.append(post_seat(
                on_line=post.on_line,
                dir_xy=dir_xy,
                left=side.left,
                post_lateral=params.lateral,
                half_post_width=params.half_post_width,
                side_sign=sign,
                rail_z=post.top_z - rails.row_drop(row),
                half_rail_depth=rails.half_rail_depth,
                style=style,
                row_index=row,
                side_index=side.index,
                station_index=post.station_index,
            ))
    return seats


def straight_corner_keys(rows: Sequence[RailRowLayout]) -> Set[Tuple[int, int, bool]]:
    """(row, side index, at side start) for both posts of every straight joint."""
    keys = set()
    for row in rows:
        for joint in row.corners:
            if joint.is_straight:
                keys.add((joint.row_index, joint.prev_side, False))
                keys.add((joint.row_index, joint.next_side, True))
    return keys


# =============================================================================
# Entry point
# =============================================================================

def build_railing(
    points: Sequence[Any],
    hosts: Sequence[Any],
    settings: RailingSettings,
    fabrication: Optional[FabricationDefaults] = None
) -> RailingPlan:
    """
    Lay out posts, rails and seats for a picked run.

    Args:
        points: Picked run points (Vector3 or (x, y, z) tuples, mm)
        hosts: HostElement candidates (may be empty)
        settings: Effective railing settings
        fabrication: Fixed fabrication data (settings.fabrication if None)

    Returns:
        RailingPlan of requests and counts

    Raises:
        ValueError: If the run has fewer than two points
    """
    fabrication = fabrication or settings.fabrication
    run = normalize_run(points)

    plan = RailingPlan(side_count=len(run) - 1, persisted=settings.to_persisted())

    posts = post_params(settings, fabrication)
    plan.sides = layout_posts(run, hosts, posts)
    for side in plan.sides:
        plan.posts.extend(side.posts)
        plan.skipped += side.duplicates

    if settings.rails_active:
        rails = rail_params(settings, fabrication)
        style = seat_style(settings, fabrication)

        specs = []
        seated = []
        for side in plan.sides:
            spec = side.rail_side_spec(posts.lateral, posts.half_post_width)
            if spec is None:
                continue
            specs.append(spec)
            seated.append(side)
        plan.rail_sides = len(specs)

        plan.rows = join_rails(specs, rails)
        straight = straight_corner_keys(plan.rows)
        for side in seated:
            plan.seats.extend(straight_seats(side, posts, rails, style, straight))
        pieces_style = rail_style(fabrication)
        rail_width = rails.half_rail_width * 2.0

        for row in plan.rows:
            pieces = row_requests(row, pieces_style)
            plan.rails.extend(pieces.pieces)
            plan.rail_caps.extend(pieces.caps)
            plan.rail_fittings.extend(pieces.fittings)

            for joint in row.corners:
                plan.corners.append(joint)
                if not joint.is_straight:
                    plan.seats.append(corner_seat(joint, rails.half_rail_depth, rail_width, style))

    logger.info("Railing: %s", plan.summary())
    return plan


__all__ = [
    "RailingPlan",
    "half_post_width_mm",
    "rail_width_mm",
    "post_params",
    "rail_params",
    "rail_style",
    "seat_style",
    "straight_seats",
    "straight_corner_keys",
    "build_railing",
]
