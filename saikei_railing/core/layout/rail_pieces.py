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
Rail piece requests.

Turns resolved rail rows into part requests: each rail is split into equal
pieces no longer than the stock length, capped ends get an end plate on
the outer piece, and butted ends get an end fitting cut to their face plane.
"""

import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .offsets import left_vector_xy
from .post_layout import PlateRequest
from .rail_joiner import EndKind, FacePlane, RailRowLayout, RailSegmentPlan
from .vector import Vector3
from ..logging_config import get_logger

logger = get_logger(__name__)

# Rails shorter than this are not created
MIN_PIECE_LENGTH = 1.0


@dataclass
class RailStyle:
    """Rail and rail cap part properties (lengths in mm)."""
    profile: str = "TS1-1/2X1-1/2X.188"
    material: str = "A53"
    part_class: str = "1"
    name: str = "RAIL"
    max_piece_length: float = 6096.0
    cap_name: str = "RAIL CAP"
    cap_profile: str = "PL3.175"
    cap_material: str = "A36"
    cap_class: str = "4"
    plate_thickness: float = 3.175
    half_width: float = 19.05
    half_depth: float = 19.05


@dataclass
class RailPieceRequest:
    """One rail piece to be created."""
    start: Vector3
    end: Vector3
    profile: str
    material: str
    part_class: str
    name: str
    side_index: int
    row_index: int
    piece_index: int
    piece_count: int

    @property
    def length(self) -> float:
        return self.start.distance_to(self.end)


@dataclass
class EndFittingRequest:
    """Cut of a butted rail end to the face plane of the adjoining rail."""
    side_index: int
    row_index: int
    at_start: bool
    point: Vector3
    plane: FacePlane


@dataclass
class RailRowPieces:
    pieces: List[RailPieceRequest] = field(default_factory=list)
    caps: List[PlateRequest] = field(default_factory=list)
    fittings: List[EndFittingRequest] = field(default_factory=list)


def split_rail(start: Vector3, end: Vector3, max_length: float) -> List[Tuple[Vector3, Vector3]]:
    """
    Split a rail into equal pieces no longer than max_length.

    Args:
        start: Rail start
        end: Rail end
        max_length: Maximum piece length

    Returns:
        List of (start, end) pairs; empty for rails under 1 mm

    Example:
        >>> len(split_rail(Vector3(0, 0, 0), Vector3(7000, 0, 0), 6096.0))
        2
    """
    total = start.distance_to(end)
    if total < MIN_PIECE_LENGTH:
        return []

    count = max(1, int(math.ceil(total / max_length))) if max_length > 0 else 1
    return [
        (start.lerp(end, i / count), start.lerp(end, (i + 1) / count))
        for i in range(count)
    ]


def rail_end_cap(end_point: Vector3, other_point: Vector3, style: RailStyle) -> Optional[PlateRequest]:
    """
    End plate closing a rail end.

    The plate is square to the rail with its mid-plane half a thickness
    beyond the end, so its inner face bears on the rail end.

    Args:
        end_point: The rail end being capped
        other_point: The opposite end of the same piece
        style: Rail part properties

    Returns:
        PlateRequest, or None for a piece under 1 mm
    """
    outward = end_point - other_point
    if outward.length < MIN_PIECE_LENGTH:
        return None
    outward = outward.normalized()

    center = end_point + outward * (style.plate_thickness * 0.5)
    across = left_vector_xy(outward)
    vertical = outward.cross(across).normalized()

    hw = max(1.0, style.half_width)
    hd = max(1.0, style.half_depth)
    return PlateRequest(
        name=style.cap_name,
        profile=style.cap_profile,
        material=style.cap_material,
        part_class=style.cap_class,
        center=center,
        normal=outward,
        contour=[
            center - across * hw - vertical * hd,
            center + across * hw - vertical * hd,
            center + across * hw + vertical * hd,
            center - across * hw + vertical * hd,
        ],
    )


def rail_requests(rail: RailSegmentPlan, row: int, style: RailStyle) -> RailRowPieces:
    """Pieces, caps and fittings for one resolved rail."""
    result = RailRowPieces()

    spans = split_rail(rail.start, rail.end, style.max_piece_length)
    if not spans:
        logger.debug("Row %d side %d: rail under 1 mm, not created", row, rail.side_index)
        return result

    for i, (a, b) in enumerate(spans):
        result.pieces.append(RailPieceRequest(
            start=a,
            end=b,
            profile=style.profile,
            material=style.material,
            part_class=style.part_class,
            name=style.name,
            side_index=rail.side_index,
            row_index=row,
            piece_index=i,
            piece_count=len(spans),
        ))

    first_a, first_b = spans[0]
    last_a, last_b = spans[-1]

    if rail.start_end.kind is EndKind.CAP:
        cap = rail_end_cap(first_a, first_b, style)
        if cap is not None:
            result.caps.append(cap)
    elif rail.start_end.kind is EndKind.BUTT and rail.start_end.plane is not None:
        result.fittings.append(EndFittingRequest(
            side_index=rail.side_index, row_index=row, at_start=True,
            point=first_a, plane=rail.start_end.plane,
        ))

    if rail.end_end.kind is EndKind.CAP:
        cap = rail_end_cap(last_b, last_a, style)
        if cap is not None:
            result.caps.append(cap)
    elif rail.end_end.kind is EndKind.BUTT and rail.end_end.plane is not None:
        result.fittings.append(EndFittingRequest(
            side_index=rail.side_index, row_index=row, at_start=False,
            point=last_b, plane=rail.end_end.plane,
        ))

    return result


def row_requests(row: RailRowLayout, style: RailStyle) -> RailRowPieces:
    """Pieces, caps and fittings for every rail of a row."""
    result = RailRowPieces()
    for rail in row.rails:
        part = rail_requests(rail, row.row_index, style)
        result.pieces.extend(part.pieces)
        result.caps.extend(part.caps)
        result.fittings.extend(part.fittings)
    return result


__all__ = [
    "MIN_PIECE_LENGTH",
    "RailStyle",
    "RailPieceRequest",
    "EndFittingRequest",
    "RailRowPieces",
    "split_rail",
    "rail_end_cap",
    "rail_requests",
    "row_requests",
]
