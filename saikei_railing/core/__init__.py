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
Saikei Railing Core Module

Pure Python layout engine. This module contains:
- Imperial distance parsing and formatting (distance_formatting.py)
- Profile dimension lookup (profiles.py)
- Defaults, per-instance inputs and effective settings (defaults.py)
- Host and hole capability interfaces (tool.py)
- Post, rail and seat layout (layout/)
- The railing entry point (railing.py)

Usage:
    from saikei_railing.core import RailingDefaults, resolve_settings, build_railing

    settings = resolve_settings(inputs, RailingDefaults.from_text(text))
    plan = build_railing(points, hosts, settings)
"""

# Import logging configuration first (no dependencies)
from .logging_config import get_logger, setup_logging

from .distance_formatting import (
    DistanceParseError,
    format_distance,
    parse_distance,
    validate_distance_input,
)
from .defaults import (
    ConfigurationError,
    FabricationDefaults,
    RailingDefaults,
    RailingInputs,
    RailingSettings,
    parse_defaults_text,
    resolve_settings,
)
from .tool import BoxHost, HoleCapabilities, HostElement
from .railing import RailingPlan, build_railing

__all__ = [
    "get_logger",
    "setup_logging",
    "DistanceParseError",
    "format_distance",
    "parse_distance",
    "validate_distance_input",
    "ConfigurationError",
    "FabricationDefaults",
    "RailingDefaults",
    "RailingInputs",
    "RailingSettings",
    "parse_defaults_text",
    "resolve_settings",
    "BoxHost",
    "HoleCapabilities",
    "HostElement",
    "RailingPlan",
    "build_railing",
]
