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
Pytest Configuration and Fixtures
==================================

Shared fixtures for the Saikei Railing test suite.
"""

import pytest

from saikei_railing.core.defaults import RailingDefaults, resolve_settings
from saikei_railing.core.layout.vector import Vector3
from saikei_railing.core.tool import BoxHost


# =============================================================================
# Markers
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, no external deps)")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "slow: Slow running tests")


# =============================================================================
# Configuration Fixtures
# =============================================================================

SAMPLE_CONFIG = '''
# Railing defaults
SpacingIn = 6'-0"
PostHeightIn = 3'-6"
StartOffsetIn = 6"
EndOffsetIn = 6"
BaseOffsetIn = 0
LineRef = MIDDLE
DeckEdgeIn = 0

PostProfile = HSS3X3X1/4
PostMaterial = A500-GR.C
PostClass = 3
PostName = POST

; connections
CreateConnection = 0
ConnectionName = 1042
ConnectionAttr =

RailEnabled = 1
RailStartOffsetIn = 0
RailEndOffsetIn = 0
RailFromTopIn = 3/4"
RailCount = 2
RailSpacingIn = 1'-6"

SeatHoleLineFromBendIn = 3/4"
SeatSlotC2CIn = 1/2"
SeatSlotSizeIn = 3/8"
SeatSlotStandard = A325N
SeatSlotCutLengthIn = 2"
SeatSlotSpecial1 = 0
SeatPilotC2CIn = 1"
SeatPilotDiaIn = 3/16"
SeatPilotStandard = A325N
SeatPilotCutLengthIn = 2"
'''


@pytest.fixture
def sample_config_text() -> str:
    """Complete defaults text."""
    return SAMPLE_CONFIG


@pytest.fixture
def defaults() -> RailingDefaults:
    """Validated defaults built from the sample text."""
    return RailingDefaults.from_text(SAMPLE_CONFIG)


@pytest.fixture
def settings(defaults):
    """Effective settings with no instance overrides."""
    return resolve_settings(None, defaults)


# =============================================================================
# Geometry Fixtures
# =============================================================================

@pytest.fixture
def straight_run():
    """Single 20 ft side along +X (mm)."""
    return [Vector3(0.0, 0.0, 0.0), Vector3(6096.0, 0.0, 0.0)]


@pytest.fixture
def l_run():
    """Two sides: 20 ft along +X, then 10 ft along +Y (left turn)."""
    return [
        Vector3(0.0, 0.0, 0.0),
        Vector3(6096.0, 0.0, 0.0),
        Vector3(6096.0, 3048.0, 0.0),
    ]


@pytest.fixture
def deck_beam() -> BoxHost:
    """Beam under the +X side, top at elevation -50, centred on the run."""
    return BoxHost(
        Vector3(-100.0, -150.0, -600.0),
        Vector3(6200.0, 150.0, -50.0),
        identifier=101,
        start=Vector3(-100.0, 0.0, -50.0),
        end=Vector3(6200.0, 0.0, -50.0),
    )
