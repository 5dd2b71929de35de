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
Railing Defaults and Settings
==============================

Three layers of configuration:

    FabricationDefaults - fixed fabrication strings and dimensions (rail,
                          cap and seat profiles, materials, classes). Frozen
                          and injected into the engine.
    RailingDefaults     - the strict defaults bundle (every key required,
                          values still text). Built from a key/value mapping
                          or from "key = value" text the caller has read.
    RailingInputs       - per-instance text overrides; blank means "use the
                          default".

resolve_settings() merges inputs over defaults, parses every distance with
the imperial codec and returns RailingSettings, the typed values the layout
runs on. RailingSettings.to_persisted() formats the effective values back
for storage with the instance.

Example:
    >>> defaults = RailingDefaults.from_text(config_text)
    >>> settings = resolve_settings(RailingInputs(spacing="5'-0\\""), defaults)
    >>> settings.spacing_in
    60.0
"""

from dataclasses import dataclass, field, fields
from typing import Dict, Mapping, Optional, Tuple

from .distance_formatting import DistanceParseError, format_distance, parse_distance
from .layout.offsets import LineReference
from .logging_config import get_logger

logger = get_logger(__name__)


class ConfigurationError(ValueError):
    """Raised for missing, blank or invalid configuration values."""


# =============================================================================
# Fixed fabrication data
# =============================================================================

@dataclass(frozen=True)
class FabricationDefaults:
    """
    Fixed fabrication strings and dimensions.

    All lengths are inches.
    """
    rail_profile: str = "TS1-1/2X1-1/2X.188"
    rail_material: str = "A53"
    rail_class: str = "1"
    rail_name: str = "RAIL"
    rail_fallback_outside_in: float = 1.5
    rail_max_piece_length_in: float = 240.0

    plate_profile: str = "PL3.175"
    plate_material: str = "A36"
    plate_class: str = "4"
    plate_thickness_in: float = 0.125
    rail_cap_name: str = "RAIL CAP"
    post_cap_name: str = "POST CAP"

    seat_profile: str = "L1-1/2X1-1/2X1/8"
    seat_material: str = "A1011-GR.50"
    seat_class: str = "6"
    seat_name: str = "RAIL POST ANGLE"
    seat_length_in: float = 1.5
    seat_leg_thickness_in: float = 0.125

    # Corner seat nudge into an inside corner: 3/8" less a 1/4" field correction
    corner_inside_inset_in: float = 0.375
    corner_inset_correction_in: float = 0.25

    @property
    def corner_inside_travel_in(self) -> float:
        return self.corner_inside_inset_in - self.corner_inset_correction_in


# =============================================================================
# Text-valued defaults and overrides
# =============================================================================

# field name -> (config keys in priority order, blank allowed, persisted key)
_FIELD_KEYS: Dict[str, Tuple[Tuple[str, ...], bool, str]] = {
    "spacing": (("SpacingIn",), False, "SPACING_IN"),
    "post_height": (("PostHeightIn",), False, "POST_HEIGHT_IN"),
    "start_offset": (("StartOffsetIn",), False, "START_OFFSET_IN"),
    "end_offset": (("EndOffsetIn",), False, "END_OFFSET_IN"),
    "base_offset": (("BaseOffsetIn",), False, "BASE_OFFSET_IN"),
    "line_ref": (("LineRef",), False, "LINE_REF"),
    "deck_edge": (("DeckEdgeIn",), False, "DECK_EDGE_IN"),
    "post_profile": (("PostProfile",), False, "POST_PROFILE"),
    "post_material": (("PostMaterial",), False, "POST_MATERIAL"),
    "post_class": (("PostClass",), False, "POST_CLASS"),
    "post_name": (("PostName",), False, "POST_NAME"),
    "connection_enabled": (("CreateConnection", "ConnEnabled"), False, "CONN_ENABLED"),
    "connection_name": (("ConnectionName", "ConnName"), False, "CONN_NAME"),
    "connection_attributes": (("ConnectionAttr", "ConnAttr"), True, "CONN_ATTR"),
    "rail_enabled": (("RailEnabled",), False, "RAIL_ENABLED"),
    "rail_start_offset": (("RailStartOffsetIn",), False, "RAIL_START_OFF_IN"),
    "rail_end_offset": (("RailEndOffsetIn",), False, "RAIL_END_OFFSET_IN"),
    "rail_from_top": (("RailFromTopIn",), False, "RAIL_FROM_TOP_IN"),
    "rail_count": (("RailCount",), False, "RAIL_COUNT"),
    "rail_spacing": (("RailSpacingIn",), False, "RAIL_SPACING_IN"),
    "seat_hole_line": (("SeatHoleLineFromBendIn",), False, "SEAT_HOLELINE_IN"),
    "seat_slot_c2c": (("SeatSlotC2CIn",), False, "SEAT_SLOT_C2C_IN"),
    "seat_slot_size": (("SeatSlotSizeIn",), False, "SEAT_SLOT_SIZE_IN"),
    "seat_slot_standard": (("SeatSlotStandard",), False, "SEAT_SLOT_STANDARD"),
    "seat_slot_cut_length": (("SeatSlotCutLengthIn",), False, "SEAT_SLOT_CUTLEN_IN"),
    "seat_slot_special_first_layer": (("SeatSlotSpecial1",), False, "SEAT_SLOT_SPECIAL1"),
    "seat_pilot_c2c": (("SeatPilotC2CIn",), False, "SEAT_PILOT_C2C_IN"),
    "seat_pilot_dia": (("SeatPilotDiaIn",), False, "SEAT_PILOT_DIA_IN"),
    "seat_pilot_standard": (("SeatPilotStandard",), False, "SEAT_PILOT_STANDARD"),
    "seat_pilot_cut_length": (("SeatPilotCutLengthIn",), False, "SEAT_PILOT_CUTLEN_IN"),
}

_FLAG_FIELDS = ("connection_enabled", "rail_enabled", "seat_slot_special_first_layer")

_TRUE_WORDS = ("TRUE", "YES", "ON")
_FALSE_WORDS = ("FALSE", "NO", "OFF")


def normalize_flag(raw: str, key: str) -> str:
    """
    Normalize a 0/1 flag.

    Args:
        raw: Flag text ("0", "1", or TRUE/YES/ON/FALSE/NO/OFF)
        key: Key name for the error message

    Returns:
        "0" or "1"

    Raises:
        ConfigurationError: For any other value
    """
    value = (raw or "").strip()
    if value in ("0", "1"):
        return value

    upper = value.upper()
    if upper in _TRUE_WORDS:
        return "1"
    if upper in _FALSE_WORDS:
        return "0"

    raise ConfigurationError(f"{key} must be 0 or 1. Got: {raw}")


def parse_defaults_text(text: str) -> Dict[str, str]:
    """
    Read "key = value" lines into a dictionary.

    Blank lines and lines starting with # or ; are ignored, trailing
    # comments are stripped, and keys are case-insensitive (stored lower
    case). Later keys win.

    Args:
        text: Configuration text

    Returns:
        Dictionary of lower-case keys to stripped values
    """
    values: Dict[str, str] = {}
    for raw in (text or "").splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or line.startswith(";"):
            continue

        if "#" in line:
            line = line.split("#", 1)[0].strip()

        key, sep, value = line.partition("=")
        key = key.strip()
        if not sep or not key:
            continue
        values[key.lower()] = value.strip()
    return values


@dataclass
class RailingInputs:
    """
    Per-instance text values. Blank fields fall back to the defaults.

    Distances use the imperial notation of distance_formatting.
    """
    spacing: str = ""
    post_height: str = ""
    start_offset: str = ""
    end_offset: str = ""
    base_offset: str = ""
    line_ref: str = ""
    deck_edge: str = ""

    post_profile: str = ""
    post_material: str = ""
    post_class: str = ""
    post_name: str = ""

    connection_enabled: str = ""
    connection_name: str = ""
    connection_attributes: str = ""

    rail_enabled: str = ""
    rail_start_offset: str = ""
    rail_end_offset: str = ""
    rail_from_top: str = ""
    rail_count: str = ""
    rail_spacing: str = ""

    seat_hole_line: str = ""
    seat_slot_c2c: str = ""
    seat_slot_size: str = ""
    seat_slot_standard: str = ""
    seat_slot_cut_length: str = ""
    seat_slot_special_first_layer: str = ""
    seat_pilot_c2c: str = ""
    seat_pilot_dia: str = ""
    seat_pilot_standard: str = ""
    seat_pilot_cut_length: str = ""

    def value_or(self, name: str, fallback: str) -> str:
        """Instance value, or fallback when blank."""
        value = getattr(self, name) or ""
        return value.strip() if value.strip() else (fallback or "").strip()

    @classmethod
    def from_persisted(cls, data: Mapping[str, str]) -> "RailingInputs":
        """Rebuild inputs from values stored with a previous instance."""
        kwargs = {}
        for name, (_, _, persisted_key) in _FIELD_KEYS.items():
            kwargs[name] = data.get(persisted_key, "") or ""
        return cls(**kwargs)


@dataclass
class RailingDefaults(RailingInputs):
    """
    Strict defaults bundle: every key present and (except the connection
    attributes file) non-blank.
    """

    @classmethod
    def from_mapping(cls, data: Mapping[str, str]) -> "RailingDefaults":
        """
        Build validated defaults from configuration keys.

        Args:
            data: Mapping of configuration keys (case-insensitive) to values

        Returns:
            RailingDefaults with flags normalized and LineRef upper-cased

        Raises:
            ConfigurationError: If a key is missing, blank or invalid
        """
        lowered = {str(k).lower(): v for k, v in data.items()}

        kwargs = {}
        for name, (keys, allow_blank, _) in _FIELD_KEYS.items():
            kwargs[name] = _require_any(lowered, keys, allow_blank)

        try:
            kwargs["line_ref"] = LineReference.parse(kwargs["line_ref"]).value
        except ValueError as e:
            raise ConfigurationError(f"Config {e}")

        for name in _FLAG_FIELDS:
            kwargs[name] = normalize_flag(kwargs[name], _FIELD_KEYS[name][0][0])

        logger.debug("Loaded %d railing defaults", len(kwargs))
        return cls(**kwargs)

    @classmethod
    def from_text(cls, text: str) -> "RailingDefaults":
        """Build validated defaults from "key = value" text."""
        return cls.from_mapping(parse_defaults_text(text))


def _require_any(data: Mapping[str, str], keys: Tuple[str, ...], allow_blank: bool) -> str:
    for key in keys:
        value = data.get(key.lower())
        if value is None:
            continue
        value = str(value).strip()
        if not value and not allow_blank:
            raise ConfigurationError(f"Config key cannot be blank: {key}")
        return value

    if len(keys) == 1:
        raise ConfigurationError(f"Missing required config key: {keys[0]}")
    raise ConfigurationError(
        f"Missing required config key. Expected one of: {', '.join(keys)}"
    )


# =============================================================================
# Effective (parsed) settings
# =============================================================================

@dataclass
class RailingSettings:
    """
    Effective, parsed railing values. Distances are inches.
    """
    spacing_in: float
    post_height_in: float
    start_offset_in: float
    end_offset_in: float
    base_offset_in: float
    deck_edge_in: float
    line_ref: LineReference

    post_profile: str
    post_material: str
    post_class: str
    post_name: str

    connection_enabled: bool
    connection_name: str
    connection_attributes: str

    rail_enabled: bool
    rail_start_offset_in: float
    rail_end_offset_in: float
    rail_from_top_in: float
    rail_count: int
    rail_spacing_in: float

    seat_hole_line_in: float
    seat_slot_c2c_in: float
    seat_slot_size_in: float
    seat_slot_standard: str
    seat_slot_cut_length_in: float
    seat_slot_special_first_layer: bool
    seat_pilot_c2c_in: float
    seat_pilot_dia_in: float
    seat_pilot_standard: str
    seat_pilot_cut_length_in: float

    fabrication: FabricationDefaults = field(default_factory=FabricationDefaults)

    @property
    def rails_active(self) -> bool:
        return self.rail_enabled and self.rail_count > 0

    def to_persisted(self, denom: int = 16) -> Dict[str, str]:
        """
        Effective values in their stored text form.

        Args:
            denom: Fraction denominator for distances

        Returns:
            Dictionary keyed by persisted field name
        """
        def fmt(value: float) -> str:
            return format_distance(value, denom)

        values = {
            "spacing": fmt(self.spacing_in),
            "post_height": fmt(self.post_height_in),
            "start_offset": fmt(self.start_offset_in),
            "end_offset": fmt(self.end_offset_in),
            "base_offset": fmt(self.base_offset_in),
            "line_ref": self.line_ref.value,
            "deck_edge": fmt(self.deck_edge_in),
            "post_profile": self.post_profile,
            "post_material": self.post_material,
            "post_class": self.post_class,
            "post_name": self.post_name,
            "connection_enabled": "1" if self.connection_enabled else "0",
            "connection_name": self.connection_name,
            "connection_attributes": self.connection_attributes,
            "rail_enabled": "1" if self.rail_enabled else "0",
            "rail_start_offset": fmt(self.rail_start_offset_in),
            "rail_end_offset": fmt(self.rail_end_offset_in),
            "rail_from_top": fmt(self.rail_from_top_in),
            "rail_count": str(self.rail_count),
            "rail_spacing": fmt(self.rail_spacing_in),
            "seat_hole_line": fmt(self.seat_hole_line_in),
            "seat_slot_c2c": fmt(self.seat_slot_c2c_in),
            "seat_slot_size": fmt(self.seat_slot_size_in),
            "seat_slot_standard": self.seat_slot_standard,
            "seat_slot_cut_length": fmt(self.seat_slot_cut_length_in),
            "seat_slot_special_first_layer": "1" if self.seat_slot_special_first_layer else "0",
            "seat_pilot_c2c": fmt(self.seat_pilot_c2c_in),
            "seat_pilot_dia": fmt(self.seat_pilot_dia_in),
            "seat_pilot_standard": self.seat_pilot_standard,
            "seat_pilot_cut_length": fmt(self.seat_pilot_cut_length_in),
        }
        return {_FIELD_KEYS[name][2]: value for name, value in values.items()}


def _distance(inputs: RailingInputs, defaults: RailingDefaults, name: str, allow_negative: bool) -> float:
    raw = inputs.value_or(name, getattr(defaults, name))
    try:
        return parse_distance(raw, allow_negative=allow_negative)
    except DistanceParseError as e:
        raise DistanceParseError(f"{_FIELD_KEYS[name][2]}: {e}") from e


def _text(inputs: RailingInputs, defaults: RailingDefaults, name: str, required: bool = True) -> str:
    value = inputs.value_or(name, getattr(defaults, name))
    if required and not value:
        raise ConfigurationError(f"{_FIELD_KEYS[name][2]} cannot be blank.")
    return value


def _flag(inputs: RailingInputs, defaults: RailingDefaults, name: str) -> bool:
    raw = inputs.value_or(name, getattr(defaults, name))
    return normalize_flag(raw, _FIELD_KEYS[name][2]) == "1"


def resolve_settings(
    inputs: Optional[RailingInputs],
    defaults: RailingDefaults,
    fabrication: Optional[FabricationDefaults] = None
) -> RailingSettings:
    """
    Merge instance values over defaults and parse them.

    Args:
        inputs: Per-instance overrides (None for defaults only)
        defaults: Validated defaults bundle
        fabrication: Fixed fabrication data (library defaults if None)

    Returns:
        RailingSettings with every value parsed

    Raises:
        DistanceParseError: If a distance is malformed or out of range
        ConfigurationError: If a flag, count, line reference or required
            text value is invalid
    """
    inputs = inputs or RailingInputs()

    try:
        line_ref = LineReference.parse(inputs.value_or("line_ref", defaults.line_ref))
    except ValueError as e:
        raise ConfigurationError(str(e))

    connection_enabled = _flag(inputs, defaults, "connection_enabled")
    connection_name = _text(inputs, defaults, "connection_name", required=False)
    if connection_enabled and not connection_name:
        raise ConfigurationError("Connection name cannot be blank when connections are enabled.")

    count_raw = inputs.value_or("rail_count", defaults.rail_count)
    try:
        rail_count = int(count_raw)
    except ValueError:
        raise ConfigurationError(f"RAIL_COUNT must be an integer. Got: {count_raw}")

    settings = RailingSettings(
        spacing_in=_distance(inputs, defaults, "spacing", allow_negative=False),
        post_height_in=_distance(inputs, defaults, "post_height", allow_negative=False),
        start_offset_in=_distance(inputs, defaults, "start_offset", allow_negative=True),
        end_offset_in=_distance(inputs, defaults, "end_offset", allow_negative=True),
        base_offset_in=_distance(inputs, defaults, "base_offset", allow_negative=True),
        deck_edge_in=_distance(inputs, defaults, "deck_edge", allow_negative=True),
        line_ref=line_ref,
        post_profile=_text(inputs, defaults, "post_profile"),
        post_material=_text(inputs, defaults, "post_material"),
        post_class=_text(inputs, defaults, "post_class"),
        post_name=_text(inputs, defaults, "post_name"),
        connection_enabled=connection_enabled,
        connection_name=connection_name,
        connection_attributes=_text(inputs, defaults, "connection_attributes", required=False),
        rail_enabled=_flag(inputs, defaults, "rail_enabled"),
        rail_start_offset_in=_distance(inputs, defaults, "rail_start_offset", allow_negative=True),
        rail_end_offset_in=_distance(inputs, defaults, "rail_end_offset", allow_negative=True),
        rail_from_top_in=_distance(inputs, defaults, "rail_from_top", allow_negative=False),
        rail_count=max(0, rail_count),
        rail_spacing_in=_distance(inputs, defaults, "rail_spacing", allow_negative=False),
        seat_hole_line_in=_distance(inputs, defaults, "seat_hole_line", allow_negative=False),
        seat_slot_c2c_in=_distance(inputs, defaults, "seat_slot_c2c", allow_negative=False),
        seat_slot_size_in=_distance(inputs, defaults, "seat_slot_size", allow_negative=False),
        seat_slot_standard=_text(inputs, defaults, "seat_slot_standard"),
        seat_slot_cut_length_in=_distance(inputs, defaults, "seat_slot_cut_length", allow_negative=False),
        seat_slot_special_first_layer=_flag(inputs, defaults, "seat_slot_special_first_layer"),
        seat_pilot_c2c_in=_distance(inputs, defaults, "seat_pilot_c2c", allow_negative=False),
        seat_pilot_dia_in=_distance(inputs, defaults, "seat_pilot_dia", allow_negative=False),
        seat_pilot_standard=_text(inputs, defaults, "seat_pilot_standard"),
        seat_pilot_cut_length_in=_distance(inputs, defaults, "seat_pilot_cut_length", allow_negative=False),
        fabrication=fabrication or FabricationDefaults(),
    )

    logger.debug(
        "Resolved settings: spacing=%s, height=%s, rails=%d",
        format_distance(settings.spacing_in),
        format_distance(settings.post_height_in),
        settings.rail_count if settings.rail_enabled else 0,
    )
    return settings


__all__ = [
    "ConfigurationError",
    "FabricationDefaults",
    "RailingInputs",
    "RailingDefaults",
    "RailingSettings",
    "normalize_flag",
    "parse_defaults_text",
    "resolve_settings",
]
