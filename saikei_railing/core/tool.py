# ============================================================================
# Saikei Railing - Guardrail Detailing Tools
# Copyright (c) 2025 Michael Yoder / Desert Springs Civil Engineering PLLC
# Licensed under the GNU General Public License v3
# https://github.com/saikeicivil/SaikeiCivil
# ============================================================================
"""
Interface definitions for the railing layout engine.

The core never touches a CAD object model. Everything it needs from the host
application comes through the interfaces in this module:

    HostElement      - a framing member posts can land on (bounding box,
                       top elevation, optional centerline)
    HoleCapabilities - a versioned set of optional setters the host side
                       uses to push hole properties onto its own bolt/hole
                       objects; setters the host API lacks are left as None

Usage:
    from saikei_railing.core.tool import BoxHost

    host = BoxHost(Vector3(0, -100, -300), Vector3(5000, 100, 0), identifier=101)
    plan = build_railing(points, [host], settings)
"""
import abc
from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, Any, Callable, List, Optional, Tuple

from .layout.vector import Vector3, midpoint
from .logging_config import get_logger

if TYPE_CHECKING:
    from .layout.seats import HoleSpec

logger = get_logger(__name__)

# Bumped whenever a setter is added to HoleCapabilities
CAPABILITY_VERSION = 1


# =============================================================================
# Host elements
# =============================================================================

class HostElement(abc.ABC):
    """
    A framing member that posts are seated on.

    Implementations wrap whatever the host application exposes. Queries that
    cannot be answered return None; the layout treats that host as missing.
    """

    @abc.abstractmethod
    def bounding_box(self) -> Optional[Tuple[Vector3, Vector3]]:
        """
        Axis-aligned bounds of the member.

        Returns:
            (minimum point, maximum point), or None if unavailable
        """

    def top_z(self) -> Optional[float]:
        """Top elevation of the member (defaults to the bounding box top)."""
        box = self.bounding_box()
        return box[1].z if box else None

    def centerline(self) -> Optional[Tuple[Vector3, Vector3]]:
        """End-to-end centerline of the member, if the host knows it."""
        return None

    @property
    def identifier(self) -> Any:
        """Host-side identity, passed through untouched into requests."""
        return None

    def centroid_xy(self) -> Optional[Vector3]:
        """Plan centre of the bounding box."""
        box = self.bounding_box()
        if box is None:
            return None
        return midpoint(box[0], box[1]).flattened()


class BoxHost(HostElement):
    """Host defined directly by its bounds and optional centerline.

    Example:
        >>> beam = BoxHost(Vector3(0, -50, -300), Vector3(6000, 50, 0),
        ...                start=Vector3(0, 0, 0), end=Vector3(6000, 0, 0))
        >>> beam.top_z()
        0.0
    """

    def __init__(
        self,
        minimum: Vector3,
        maximum: Vector3,
        identifier: Any = None,
        start: Optional[Vector3] = None,
        end: Optional[Vector3] = None,
    ):
        self.minimum = minimum
        self.maximum = maximum
        self._identifier = identifier
        self.start = start
        self.end = end

    def bounding_box(self) -> Optional[Tuple[Vector3, Vector3]]:
        return (self.minimum, self.maximum)

    def centerline(self) -> Optional[Tuple[Vector3, Vector3]]:
        if self.start is None or self.end is None:
            return None
        return (self.start, self.end)

    @property
    def identifier(self) -> Any:
        return self._identifier

    def __repr__(self):
        return f"BoxHost({self._identifier!r}, {self.minimum!r}, {self.maximum!r})"


# =============================================================================
# Hole property capabilities
# =============================================================================

Setter = Callable[[Any, Any], None]


@dataclass(frozen=True)
class HoleCapabilities:
    """
    Optional setters for hole properties on a host-side hole object.

    Different host API versions expose different properties. Instead of
    probing objects at runtime, the host layer declares which setters it has
    and leaves the rest as None.

    Attributes:
        version: Capability schema version this struct was written against
        set_cut_length: (target, mm) cut length through the part
        set_slotted_length: (target, mm) slot length along the hole X axis
        set_hole_type: (target, "SLOTTED" | "STANDARD")
        set_special_first_layer: (target, bool) special hole in first layer
        set_hole_only: (target, bool) suppress bolt/nut/washer hardware
    """
    version: int = CAPABILITY_VERSION
    set_cut_length: Optional[Setter] = None
    set_slotted_length: Optional[Setter] = None
    set_hole_type: Optional[Setter] = None
    set_special_first_layer: Optional[Setter] = None
    set_hole_only: Optional[Setter] = None

    def supports(self, name: str) -> bool:
        """True if the named setter is available."""
        return getattr(self, name, None) is not None

    def available(self) -> List[str]:
        """Names of all setters that are present."""
        return [
            f.name for f in fields(self)
            if f.name.startswith("set_") and getattr(self, f.name) is not None
        ]

    def apply(self, target: Any, hole: "HoleSpec") -> List[str]:
        """
        Push the properties of a hole onto a host object.

        Args:
            target: Host-side hole/bolt object
            hole: Hole specification from the layout

        Returns:
            Names of the setters that were applied

        Raises:
            ValueError: If the struct was written for a newer schema
        """
        if self.version > CAPABILITY_VERSION:
            raise ValueError(
                f"Hole capabilities version {self.version} is newer than "
                f"supported version {CAPABILITY_VERSION}"
            )

        values = {
            "set_cut_length": hole.cut_length,
            "set_slotted_length": hole.slotted_length,
            "set_hole_type": "SLOTTED" if hole.is_slotted else "STANDARD",
            "set_special_first_layer": hole.special_first_layer,
            "set_hole_only": True,
        }

        applied = []
        for name, value in values.items():
            setter = getattr(self, name)
            if setter is None:
                continue
            setter(target, value)
            applied.append(name)

        logger.debug("Applied %d hole setters (v%d)", len(applied), self.version)
        return applied


__all__ = [
    "CAPABILITY_VERSION",
    "HostElement",
    "BoxHost",
    "HoleCapabilities",
]
