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
Post Station Distribution
==========================

Redistributes a target post spacing so that stations land exactly on both
ends of the usable length of a side.

    usable = length - start_offset - end_offset
    count  = max(1, ceil(usable / spacing))
    pitch  = usable / count
    d_i    = start_offset + i * pitch,  i = 0..count

A side whose usable length is at or below MIN_USABLE_LENGTH gets no
stations at all.
"""

import math
from dataclasses import dataclass, field
from typing import List

import numpy as np

from .vector import Vector3
from ..logging_config import get_logger

logger = get_logger(__name__)

# Sides shorter than this (model units, mm) are skipped
MIN_USABLE_LENGTH = 1.0


@dataclass
class StationDistribution:
    """
    Result of redistributing posts along one side.

    Attributes:
        count: Number of post spaces (stations = count + 1, or 0 if skipped)
        pitch: Actual spacing between stations
        distances: Distance of each station from the side start
    """
    count: int
    pitch: float
    distances: List[float] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.distances


@dataclass
class Station:
    """A post station on a side's line, before lateral offset."""
    index: int
    distance: float
    on_line: Vector3


def distribute_stations(
    length: float,
    start_offset: float,
    end_offset: float,
    spacing: float
) -> StationDistribution:
    """
    Redistribute a target spacing over the usable length of a side.

    Args:
        length: Side length
        start_offset: Distance from side start to the first station
        end_offset: Distance from the last station to side end
        spacing: Target (maximum) spacing between stations

    Returns:
        StationDistribution; empty when the usable length is too short

    Raises:
        ValueError: If spacing is not positive

    Example:
        >>> dist = distribute_stations(100.0, 0.0, 0.0, 24.0)
        >>> dist.count, dist.pitch
        (5, 20.0)
    """
    if spacing <= 0.0:
        raise ValueError(f"Post spacing must be > 0, got {spacing}")

    usable = length - start_offset - end_offset
    if usable <= MIN_USABLE_LENGTH:
        logger.debug("Usable length %.3f too short, side skipped", usable)
        return StationDistribution(count=0, pitch=0.0, distances=[])

    count = max(1, int(math.ceil(usable / spacing)))
    pitch = usable / count

    distances = start_offset + np.arange(count + 1, dtype=float) * pitch
    return StationDistribution(
        count=count,
        pitch=pitch,
        distances=[float(d) for d in distances],
    )


def station_points(
    start: Vector3,
    direction: Vector3,
    distances: List[float]
) -> List[Station]:
    """
    Place stations along a side's line.

    Args:
        start: Side start point
        direction: Unit 3D direction of the side (slope carries Z)
        distances: Distances from the start

    Returns:
        List of Station objects in order
    """
    return [
        Station(index=i, distance=d, on_line=start + direction * d)
        for i, d in enumerate(distances)
    ]


__all__ = [
    "MIN_USABLE_LENGTH",
    "StationDistribution",
    "Station",
    "distribute_stations",
    "station_points",
]
