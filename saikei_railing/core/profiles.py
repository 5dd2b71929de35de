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
Profile Dimension Resolver

Reads the outside dimension of tube profiles from their profile strings,
e.g. "HSS4X4X1/4" -> 4.0in or "TS1-1/2X1-1/2X.188" -> 1.5in.

Only rectangular/square tube families are understood. Anything else
resolves to None and callers fall back to a configured default.
"""

import re
from typing import Optional

from .distance_formatting import inches_to_mm, try_parse_mixed_number
from .logging_config import get_logger

logger = get_logger(__name__)

TUBE_PREFIXES = ("HSS", "RHS", "SHS", "TS")

_DIMENSION_TOKEN = re.compile(r"[0-9][0-9.\-/]*")


def _strip_family_prefix(profile: str) -> Optional[str]:
    for prefix in TUBE_PREFIXES:
        if profile.startswith(prefix):
            return profile[len(prefix):]
    return None


def parse_profile_dimension(token: str) -> Optional[float]:
    """Parse one "X"-separated profile dimension token as inches.

    Args:
        token: Dimension text such as "1-1/2" or "4"

    Returns:
        Dimension in inches, or None if the token holds no number
    """
    if not token or not token.strip():
        return None

    match = _DIMENSION_TOKEN.search(token)
    if not match:
        return None

    return try_parse_mixed_number(match.group(0))


def try_get_outside_dim_in(profile: str) -> Optional[float]:
    """
    Resolve the outside width of a tube profile.

    Args:
        profile: Profile string (e.g. "HSS2X2X3/16", "TS1-1/2X1-1/2X.188")

    Returns:
        The larger of the first two dimensions in inches, or None if the
        family prefix is unknown or a dimension is malformed
    """
    if not profile or not profile.strip():
        return None

    s = profile.strip().upper().replace(" ", "")
    remainder = _strip_family_prefix(s)
    if remainder is None:
        logger.debug("Unknown profile family: %s", profile)
        return None

    dims = [d for d in remainder.split("X") if d]
    if len(dims) < 2:
        logger.debug("Profile has fewer than two dimensions: %s", profile)
        return None

    first = parse_profile_dimension(dims[0])
    second = parse_profile_dimension(dims[1])
    if first is None or second is None:
        logger.debug("Malformed profile dimension in: %s", profile)
        return None

    outside = max(first, second)
    if inches_to_mm(outside) <= 0.001:
        return None
    return outside


def outside_dim_mm(profile: str, default_in: float) -> float:
    """Outside width in millimetres, falling back to a default in inches.

    Args:
        profile: Profile string
        default_in: Width to use when the profile cannot be read

    Returns:
        Outside width in millimetres
    """
    outside_in = try_get_outside_dim_in(profile)
    if outside_in is None:
        outside_in = default_in
    return inches_to_mm(outside_in)


__all__ = [
    "TUBE_PREFIXES",
    "parse_profile_dimension",
    "try_get_outside_dim_in",
    "outside_dim_mm",
]
