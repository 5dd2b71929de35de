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
Host resolution for post stations.

A station snaps to the host whose plan bounding box contains it; with no
containing host, the nearest host by distance to its clamped centerline
projection wins. Hosts that cannot answer a query are skipped. No host at
all is not an error: posts then sit relative to the path Z.
"""

from typing import TYPE_CHECKING, List, Optional, Sequence

from .vector import Vector3
from ..logging_config import get_logger

if TYPE_CHECKING:
    from ..tool import HostElement

logger = get_logger(__name__)

# Containment always beats proximity
CONTAINMENT_BONUS = 1_000_000.0


def _safe_bounding_box(host: "HostElement"):
    try:
        return host.bounding_box()
    except Exception as e:  # host API boundary
        logger.debug("Host %r bounding box failed: %s", host, e)
        return None


def host_top_z(host: Optional["HostElement"]) -> Optional[float]:
    """Top elevation of a host, or None if unavailable."""
    if host is None:
        return None
    try:
        return host.top_z()
    except Exception as e:  # host API boundary
        logger.debug("Host %r top Z failed: %s", host, e)
        return None


def distance_to_segment_xy(point: Vector3, start: Vector3, end: Vector3) -> float:
    """Plan distance from a point to a segment, projection clamped to its ends."""
    seg = (end - start).flattened()
    length_sq = seg.dot_xy(seg)
    if length_sq < 1e-12:
        return point.distance_xy(start)

    t = (point - start).dot_xy(seg) / length_sq
    t = max(0.0, min(1.0, t))
    return point.distance_xy(start + seg * t)


def host_score(point: Vector3, host: "HostElement") -> Optional[float]:
    """
    Score a host for a station point (lower is better).

    Args:
        point: Station point on the path line
        host: Candidate host

    Returns:
        Score, or None if the host cannot be evaluated
    """
    box = _safe_bounding_box(host)
    if box is None:
        return None
    lo, hi = box

    centre = Vector3((lo.x + hi.x) * 0.5, (lo.y + hi.y) * 0.5, 0.0)
    inside_xy = lo.x <= point.x <= hi.x and lo.y <= point.y <= hi.y
    if inside_xy:
        return point.distance_xy(centre) - CONTAINMENT_BONUS

    try:
        line = host.centerline()
    except Exception as e:  # host API boundary
        logger.debug("Host %r centerline failed: %s", host, e)
        line = None

    if line is not None:
        return distance_to_segment_xy(point, line[0], line[1])
    return point.distance_xy(centre)


def find_best_host(
    point: Vector3,
    hosts: Sequence["HostElement"]
) -> Optional["HostElement"]:
    """
    Resolve the host a station lands on.

    Args:
        point: Station point on the path line
        hosts: Candidate hosts

    Returns:
        Best host, or None if there are no usable hosts
    """
    best = None
    best_score = float("inf")

    for host in hosts or ():
        score = host_score(point, host)
        if score is None:
            continue
        if score < best_score:
            best_score = score
            best = host

    if best is None and hosts:
        logger.debug("No usable host for station at %r", point)
    return best


def host_side_sign(
    left: Vector3,
    ref_point: Optional[Vector3],
    host: Optional["HostElement"]
) -> int:
    """
    Which side of the line the host lies on.

    Args:
        left: Unit left vector of the side
        ref_point: Point on the side's line
        host: Associated host

    Returns:
        +1 if the host centroid is on the left (or on the line), -1 if on
        the right, 0 if there is no host to ask
    """
    if host is None or ref_point is None:
        return 0

    try:
        centre = host.centroid_xy()
    except Exception as e:  # host API boundary
        logger.debug("Host %r centroid failed: %s", host, e)
        return 0
    if centre is None:
        return 0

    to_host = (centre - ref_point).flattened()
    return 1 if to_host.dot_xy(left) >= 0.0 else -1


def first_host(hosts: List[Optional["HostElement"]]) -> Optional["HostElement"]:
    """First non-None host of a list."""
    for host in hosts:
        if host is not None:
            return host
    return None


__all__ = [
    "CONTAINMENT_BONUS",
    "host_top_z",
    "distance_to_segment_xy",
    "host_score",
    "find_best_host",
    "host_side_sign",
    "first_host",
]
