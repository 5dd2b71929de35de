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
Imperial Distance Formatting Utilities

Handles conversion between feet-inch-fraction notation and numeric inches.

Notation:
- Below one foot: X" or X"n/d, or n/d" when there are no whole inches
  Examples: 7" = 7.0in, 3"15/16 = 3.9375in, 1/2" = 0.5in
- One foot and above: F'-I" or F'-I"n/d
  Examples: 1'-0" = 12.0in, 1'-3"15/16 = 15.9375in

Accepted input is looser than the output: curly quotes and primes, mixed
numbers ("11-1/2", "11 1/2"), plain decimals, thousands separators and
"in"/"inch"/"inches" suffixes are all read.

Geometry downstream works in millimetres; inches_to_mm / mm_to_inches
convert at the boundary.
"""

import math
import re
from typing import Optional, Tuple, Union

from .logging_config import get_logger

logger = get_logger(__name__)

MM_PER_INCH = 25.4

DEFAULT_DENOMINATOR = 16

# Curly quotes and primes normalised to their straight forms
_QUOTE_REPLACEMENTS = (
    ("”", '"'),
    ("“", '"'),
    ("″", '"'),
    ("′", "'"),
    ("’", "'"),
    ("‘", "'"),
)

_UNIT_SUFFIX = re.compile(r"\s*(inches|inch|in)\s*$")


class DistanceParseError(ValueError):
    """Raised when a distance string cannot be read as inches."""


def inches_to_mm(inches: float) -> float:
    """Convert inches to millimetres."""
    return inches * MM_PER_INCH


def mm_to_inches(mm: float) -> float:
    """Convert millimetres to inches."""
    return mm / MM_PER_INCH


def _try_parse_number(text: str) -> Optional[float]:
    """Parse a plain decimal, tolerating thousands separators."""
    t = (text or "").strip().replace(",", "")
    if not t:
        return None
    try:
        value = float(t)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def try_parse_fraction(token: str) -> Optional[float]:
    """Parse "n/d" into a float.

    Args:
        token: Fraction text such as "15/16"

    Returns:
        The fraction value, or None if malformed or the denominator is zero
    """
    if not token or not token.strip():
        return None

    parts = token.strip().split("/")
    if len(parts) != 2:
        return None

    numerator = _try_parse_number(parts[0])
    denominator = _try_parse_number(parts[1])
    if numerator is None or denominator is None:
        return None
    if abs(denominator) < 1e-9:
        return None

    return numerator / denominator


def try_parse_mixed_number(text: str) -> Optional[float]:
    """Parse a whole number, decimal, fraction or mixed number.

    Accepts:
    - "11.5" -> 11.5
    - "3/4" -> 0.75
    - "11 1/2" -> 11.5
    - "11-1/2" -> 11.5

    Args:
        text: Unsigned numeric text

    Returns:
        Parsed value, or None if the text is not a number
    """
    if not text or not text.strip():
        return None

    # A dash between whole and fraction reads as a space
    parts = text.strip().replace("-", " ").split()
    if not parts:
        return None

    if len(parts) == 1:
        if "/" in parts[0]:
            return try_parse_fraction(parts[0])
        return _try_parse_number(parts[0])

    if len(parts) != 2 or "/" not in parts[1]:
        return None

    whole = _try_parse_number(parts[0])
    tail = try_parse_fraction(parts[1])
    if whole is None or tail is None:
        return None

    return whole + tail


def parse_distance(raw: Union[str, float], allow_negative: bool = True) -> float:
    """
    Parse a feet/inch distance and convert to inches.

    Accepts formats:
    - "1'-3\\"15/16" -> 15.9375
    - "2' 6" -> 30.0
    - "11-1/2" -> 11.5
    - "3/4\\"" -> 0.75
    - "-7 1/4 in" -> -7.25
    - 42 -> 42.0 (already numeric)

    Args:
        raw: Distance string or numeric inches
        allow_negative: If False, zero and negative results are rejected

    Returns:
        Distance in inches

    Raises:
        DistanceParseError: If the input is blank or malformed
    """
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        inches = float(raw)
        if not math.isfinite(inches):
            raise DistanceParseError(f"Invalid distance: {raw}")
        return _check_sign(inches, raw, allow_negative)

    if raw is None or not str(raw).strip():
        raise DistanceParseError("Distance string is blank.")

    s = str(raw).strip()
    for curly, straight in _QUOTE_REPLACEMENTS:
        s = s.replace(curly, straight)
    s = _UNIT_SUFFIX.sub("", s.lower()).strip()

    negative = False
    if s.startswith("+"):
        s = s[1:].strip()
    elif s.startswith("-"):
        negative = True
        s = s[1:].strip()

    if "'" in s:
        feet_part, inch_part = s.split("'", 1)
        feet_part = feet_part.strip()
        inch_part = inch_part.strip()
        if inch_part.startswith("-"):
            inch_part = inch_part[1:].strip()
        # 3"15/16 reads as the mixed number 3 15/16
        inch_part = inch_part.replace('"', " ").strip()

        feet = 0.0
        if feet_part:
            feet = _try_parse_number(feet_part)
            if feet is None:
                raise DistanceParseError(f"Invalid feet value: {raw}")

        inch_only = 0.0
        if inch_part:
            inch_only = try_parse_mixed_number(inch_part)
            if inch_only is None:
                raise DistanceParseError(f"Invalid inch value: {raw}")

        inches = feet * 12.0 + inch_only
    else:
        inches = try_parse_mixed_number(s.replace('"', " "))
        if inches is None:
            raise DistanceParseError(f"Invalid distance: {raw}")

    if negative:
        inches = -abs(inches)

    return _check_sign(inches, raw, allow_negative)


def _check_sign(inches: float, raw, allow_negative: bool) -> float:
    if not allow_negative and inches <= 0.0:
        raise DistanceParseError(f"Distance must be > 0: {raw}")
    return inches


def format_distance(inches: float, denom: int = DEFAULT_DENOMINATOR) -> str:
    """
    Format inches into feet/inch/fraction notation.

    The magnitude is rounded to the nearest 1/denom inch (half away from
    zero) and the fraction reduced.

    Args:
        inches: Distance in inches
        denom: Fraction denominator (default: 16)

    Returns:
        Formatted distance string

    Examples:
        >>> format_distance(0.5)
        '1/2"'
        >>> format_distance(12.0)
        '1\\'-0"'
        >>> format_distance(15.9375)
        '1\\'-3"15/16'
        >>> format_distance(-7.25)
        '-7"1/4'
    """
    if denom <= 0:
        denom = DEFAULT_DENOMINATOR

    negative = inches < 0
    ticks = int(math.floor(abs(inches) * denom + 0.5))

    # Integer ticks carry fraction->inch and inch->foot automatically
    ticks_per_foot = 12 * denom
    feet, remainder = divmod(ticks, ticks_per_foot)
    inch_whole, numerator = divmod(remainder, denom)

    denominator = denom
    if numerator:
        g = math.gcd(numerator, denominator)
        numerator //= g
        denominator //= g

    fraction = f"{numerator}/{denominator}" if numerator else ""

    if feet == 0:
        if not numerator:
            core = f'{inch_whole}"'
        elif inch_whole == 0:
            core = f'{fraction}"'
        else:
            core = f'{inch_whole}"{fraction}'
    else:
        core = f"{feet}'-{inch_whole}\"{fraction}"

    # A value that rounds to zero is never signed
    return "-" + core if negative and ticks > 0 else core


def validate_distance_input(raw: str, allow_negative: bool = True) -> Tuple[bool, str]:
    """
    Validate distance input format.

    Args:
        raw: Distance string to validate
        allow_negative: Whether zero/negative values are acceptable

    Returns:
        Tuple of (is_valid, error_message)
        If valid, error_message is empty string
    """
    try:
        parse_distance(raw, allow_negative=allow_negative)
        return True, ""
    except DistanceParseError as e:
        return False, str(e)


__all__ = [
    "MM_PER_INCH",
    "DEFAULT_DENOMINATOR",
    "DistanceParseError",
    "inches_to_mm",
    "mm_to_inches",
    "try_parse_fraction",
    "try_parse_mixed_number",
    "parse_distance",
    "format_distance",
    "validate_distance_input",
]
