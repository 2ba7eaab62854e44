"""Free-form latitude/longitude text to signed decimal degrees.

The feed writes coordinates with Indonesian hemisphere markers, e.g.
``"6.20 LS"`` (lintang selatan, south) or ``"106.81 BT"`` (bujur timur,
east). The marker may also be a single letter placed before or after the
number (``"S6.2"``, ``"6.2 S"``).
"""

from __future__ import annotations

import math
import re
from typing import Any

from .models import ParsedCoordinate

SOUTH_TOKENS = frozenset({"LS", "S"})
NORTH_TOKENS = frozenset({"LU", "N"})
EAST_TOKENS = frozenset({"BT", "E"})
WEST_TOKENS = frozenset({"BB", "W"})

_NEGATIVE_TOKENS = SOUTH_TOKENS | WEST_TOKENS
_KNOWN_TOKENS = SOUTH_TOKENS | NORTH_TOKENS | EAST_TOKENS | WEST_TOKENS

_COORDINATE_PATTERN = re.compile(
    r"""
    ^\s*
    (?P<prefix>[A-Za-z]{1,2})?
    \s*
    (?P<number>[+-]?(?:\d+(?:\.\d*)?|\.\d+))
    \s*
    (?P<suffix>[A-Za-z]{1,2})?
    \s*$
    """,
    re.VERBOSE,
)


def parse_coordinate(raw: Any) -> float:
    """Return signed decimal degrees, or ``nan`` when ``raw`` is unparseable."""
    if raw is None:
        return math.nan
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return float(raw)

    match = _COORDINATE_PATTERN.match(str(raw))
    if match is None:
        return math.nan

    prefix, suffix = match.group("prefix"), match.group("suffix")
    if prefix and suffix:
        return math.nan
    token = (prefix or suffix or "").upper()
    if token and token not in _KNOWN_TOKENS:
        return math.nan

    value = float(match.group("number"))
    if token in _NEGATIVE_TOKENS:
        return -abs(value)
    return value


def parse_coordinates(latitude_raw: Any, longitude_raw: Any) -> ParsedCoordinate:
    return ParsedCoordinate(
        latitude=parse_coordinate(latitude_raw),
        longitude=parse_coordinate(longitude_raw),
    )
