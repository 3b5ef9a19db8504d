"""
Numeric token handling for isg-format.

ISG text holds three kinds of numbers:
- plain decimals (``-9999``, ``40.25``, ``1.5e3``), used for samples, nodata
  and coordinates in deg/meters/feet;
- DMS angles (``39°50'00"``, ``-0°20'30.5"``) for coordinates in ``dms`` units;
- non-negative integer counts (``nrows``, ``ncols``, ``count``, ``EPSG code``).

Parsing never coerces: a token that does not match the grammar exactly, or
that overflows to infinity, yields ``None`` and the caller raises the typed
error with its positional context.

The second half of the module goes the other way: ``FormatSniffer`` infers a
column's ``NumberFormat`` (decimals, width, sign, DMS) from the tokens as
read, and ``format_number`` renders values with it.
"""

from __future__ import annotations

import math
import re
from decimal import ROUND_HALF_EVEN, Decimal

import numpy as np

from isg_format.models import CoordinateUnits, NumberFormat

NOT_AVAILABLE = "---"

_DECIMAL_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_DMS_RE = re.compile(r"([+-]?)(\d+)°(\d+)'(\d+(?:\.\d+)?)\"")
_COUNT_RE = re.compile(r"\+?\d+")
_INTEGER_RE = re.compile(r"[+-]?\d+")

# Seconds decimals tried when a DMS value is rendered without a hint
_MAX_DMS_DECIMALS = 12


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def parse_decimal(raw: str) -> float | None:
    """Parse a plain decimal literal; ``None`` if malformed or not finite."""
    if not _DECIMAL_RE.fullmatch(raw):
        return None
    value = float(raw)
    return value if math.isfinite(value) else None


def parse_dms(raw: str) -> float | None:
    """Parse ``D°M'S"`` into decimal degrees; ``None`` if malformed.

    Minutes and seconds must be below 60.
    """
    match = _DMS_RE.fullmatch(raw)
    if match is None:
        return None
    sign, degrees, minutes, seconds = match.groups()
    minutes_v, seconds_v = int(minutes), float(seconds)
    if minutes_v >= 60 or seconds_v >= 60:
        return None
    value = int(degrees) + minutes_v / 60 + seconds_v / 3600
    return -value if sign == "-" else value


def parse_coordinate(raw: str, units: CoordinateUnits) -> float | None:
    """Parse a coordinate token according to the header's coordinate units."""
    if units is CoordinateUnits.DMS:
        return parse_dms(raw)
    return parse_decimal(raw)


def parse_count(raw: str) -> int | None:
    """Parse a non-negative integer count; ``None`` if malformed."""
    return int(raw) if _COUNT_RE.fullmatch(raw) else None


def parse_integer(raw: str) -> int | None:
    return int(raw) if _INTEGER_RE.fullmatch(raw) else None


def decimal_places(raw: str) -> int | None:
    """Digits after the decimal point of a token.

    For DMS tokens this counts the seconds decimals.  ``None`` when the token
    cannot be reproduced with a fixed number of decimals (exponent notation,
    a bare trailing or leading point).
    """
    match = _DMS_RE.fullmatch(raw)
    if match:
        raw = match.group(4)
    body = raw.lstrip("+-")
    if "e" in body or "E" in body:
        return None
    if "." not in body:
        return 0
    int_part, frac = body.split(".", 1)
    if not int_part or not frac:
        return None
    return len(frac)


def rounding_slack(raw: str | None) -> float:
    """Half a unit in the last written place of *raw*, in value units.

    Used to widen the bounds consistency check by the rounding the writer of
    the file applied.  DMS tokens are rounded in seconds.
    """
    if not raw:
        return 0.0
    places = decimal_places(raw)
    if places is None:
        return 0.0
    slack = 0.5 * 10.0 ** -places
    if _DMS_RE.fullmatch(raw):
        slack /= 3600
    return slack


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def format_plain(value: float) -> str:
    """Shortest plain decimal that reads back as *value* (no exponent)."""
    return np.format_float_positional(value, trim="-")


def _dms_places(value: float) -> int:
    """Fewest seconds decimals that read back as *value*, to a few ulps."""
    limit = 4 * math.ulp(value)
    for places in range(_MAX_DMS_DECIMALS + 1):
        if abs(parse_dms(format_dms(value, places)) - value) <= limit:
            return places
    return _MAX_DMS_DECIMALS


def format_dms(value: float, places: int | None = None) -> str:
    """Render decimal degrees as ``D°MM'SS"`` with *places* seconds decimals."""
    if places is None:
        places = _dms_places(value)
    negative = value < 0 or (value == 0 and math.copysign(1.0, value) < 0)
    scale = 10 ** places
    # Decimal(value) is the exact binary value
    total = int(
        (Decimal(abs(value)) * 3600 * scale).to_integral_value(rounding=ROUND_HALF_EVEN)
    )
    degrees, rest = divmod(total, 3600 * scale)
    minutes, sec_units = divmod(rest, 60 * scale)
    seconds = f"{sec_units // scale:02d}"
    if places:
        seconds += f".{sec_units % scale:0{places}d}"
    return f"{'-' if negative else ''}{degrees}°{minutes:02d}'{seconds}\""


def format_number(value: float, fmt: NumberFormat | None = None) -> str:
    """Render *value* with a column format (plain decimal when *fmt* is None)."""
    fmt = fmt or NumberFormat()
    if fmt.dms:
        text = format_dms(value, fmt.decimals)
    elif fmt.decimals is None:
        text = format_plain(value)
    else:
        text = f"{value:.{fmt.decimals}f}"
    if fmt.plus_sign and not text.startswith("-"):
        text = "+" + text
    return text.rjust(fmt.width)


def sniff_format(raw: str, dms: bool = False) -> NumberFormat:
    """Format of a single token, e.g. a header value."""
    return NumberFormat(
        decimals=decimal_places(raw),
        dms=dms,
        plus_sign=raw.startswith("+"),
    )


class FormatSniffer:
    """Infers the ``NumberFormat`` of one body column, token by token.

    Decimals are kept only if every value token agrees; the width only if
    every padded token ends at the same field width and no unpadded token is
    narrower.  Nodata tokens count for width but not for decimals or sign,
    since they are written with the header's sentinel literal.
    """

    def __init__(self, dms: bool = False) -> None:
        self.dms = dms
        self._decimals: set[int | None] = set()
        self._padded_widths: set[int] = set()
        self._narrowest_unpadded: int | None = None
        self._signed = 0
        self._unsigned = 0

    def observe(self, token: str, pad: int, nodata: bool = False) -> None:
        """Record *token*, preceded by *pad* blanks of its own field."""
        if pad:
            self._padded_widths.add(pad + len(token))
        elif self._narrowest_unpadded is None or len(token) < self._narrowest_unpadded:
            self._narrowest_unpadded = len(token)
        if nodata:
            return
        self._decimals.add(decimal_places(token))
        if token.startswith("+"):
            self._signed += 1
        elif not token.startswith("-"):
            self._unsigned += 1

    def result(self) -> NumberFormat:
        decimals = next(iter(self._decimals)) if len(self._decimals) == 1 else None
        width = 0
        if len(self._padded_widths) == 1:
            width = next(iter(self._padded_widths))
            if self._narrowest_unpadded is not None and self._narrowest_unpadded < width:
                width = 0
        return NumberFormat(
            decimals=decimals,
            width=width,
            dms=self.dms,
            plus_sign=self._signed > 0 and self._unsigned == 0,
        )
