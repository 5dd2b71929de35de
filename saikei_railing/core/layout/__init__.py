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
Railing Layout Package
=======================

Geometry of a railing run, all in millimetres:

- vector.py: Vector3 points and directions
- stationing.py: post station redistribution
- offsets.py: lateral offset, side frame and rotations
- hosts.py: host lookup for post stations
- post_layout.py: posts, post caps and connections per side
- rail_joiner.py: rail rows and corner butt joints
- rail_pieces.py: rail splitting, end caps and end fittings
- seats.py: post and corner seat angles with their holes
"""
