"""
Header Parser/Validator for isg-format.

Turns the lines between ``begin_of_head`` and ``end_of_head`` into a validated
``Header``.  Each line is ``label : value`` or ``label = value``; the first
``:`` or ``=`` splits.  ``---`` is the ISG "not available" marker.

Parsing runs in steps, failing on the first violation:
  1. Lex every line into (field, raw value), rejecting malformed lines,
     unknown labels and duplicates.
  2. Check ``ISG format`` is ``2.0``.
  3. Resolve the structural fields (data format, coord type, coord units)
     which decide how the rest is read.
  4. Convert every value in line order; reject bounds fields of another
     layout/coordinate combination that carry a value.
  5. Check required fields are present.
  6. Build the ``DataBounds`` variant and check its consistency.
  7. Check data ordering and map projection against the combination.

The header keeps a ``HeaderStyle`` with every line as written so the writer
can reproduce it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Sequence

from isg_format.config import ParseOptions
from isg_format.exceptions import (
    BoundsFieldMismatchError,
    DuplicateFieldError,
    InconsistentBoundsError,
    InvalidEnumValueError,
    MalformedHeaderLineError,
    MalformedNumberError,
    MissingFieldError,
    UnknownFieldError,
    UnsupportedVersionError,
)
from isg_format.fields import (
    BOUNDS_FIELD_KEYS,
    FIELDS,
    FieldSpec,
    bounds_keys,
    delta_keys,
    extent_keys,
    lookup,
    required_keys,
)
from isg_format.models import (
    BOUNDS_VARIANTS,
    SUPPORTED_VERSION,
    CoordinateKind,
    CoordinateUnits,
    FieldLine,
    Header,
    HeaderStyle,
    LayoutKind,
)
from isg_format.numbers import (
    NOT_AVAILABLE,
    parse_coordinate,
    parse_count,
    parse_decimal,
    parse_integer,
)
from isg_format.ordering import ordering_error
from isg_format.validation import check_bounds_consistency

logger = logging.getLogger(__name__)


@dataclass
class _Entry:
    """One lexed header line."""
    spec: FieldSpec
    raw: str
    line: int
    style: FieldLine

    @property
    def available(self) -> bool:
        return self.raw != NOT_AVAILABLE


def _split_line(text: str) -> int | None:
    """Index of the first ``:`` or ``=`` in *text*."""
    positions = [i for i in (text.find(":"), text.find("=")) if i >= 0]
    return min(positions) if positions else None


def _lex(lines: Sequence[str], start_line: int) -> dict[str, _Entry]:
    entries: dict[str, _Entry] = {}
    for offset, text in enumerate(lines):
        line_no = start_line + offset
        split = _split_line(text)
        if split is None:
            raise MalformedHeaderLineError(line_no, text)
        label_text, rest = text[:split], text[split + 1:]
        label = label_text.strip()
        spec = lookup(label) if label else None
        if spec is None:
            raise UnknownFieldError(label, line_no)
        if spec.key in entries:
            raise DuplicateFieldError(spec.label, line_no)
        raw = rest.strip()
        lead = rest[: len(rest) - len(rest.lstrip())]
        trail = rest[len(rest.rstrip()):] if raw else ""
        entries[spec.key] = _Entry(
            spec=spec,
            raw=raw,
            line=line_no,
            style=FieldLine(
                key=spec.key,
                label=label_text,
                separator=text[split],
                lead=lead,
                raw=raw,
                trail=trail,
            ),
        )
    return entries


def _enum_value(entry: _Entry) -> Any:
    if not entry.available:
        return None
    value = entry.spec.enum.from_literal(entry.raw) if entry.raw else None  # type: ignore[union-attr]
    if value is None:
        raise InvalidEnumValueError(entry.spec.label, entry.raw, entry.line)
    return value


def _required_enum(entries: dict[str, _Entry], key: str) -> Any:
    entry = entries.get(key)
    if entry is None or not entry.available:
        raise MissingFieldError(FIELDS[key].label, entry.line if entry else None)
    return _enum_value(entry)


def _convert(entry: _Entry, units: CoordinateUnits) -> Any:
    """Typed value of one entry (``None`` for ``---``)."""
    spec = entry.spec
    if not entry.available:
        return None
    if spec.kind == "enum":
        return _enum_value(entry)
    if spec.kind == "text":
        if not entry.raw:
            raise MalformedHeaderLineError(entry.line, entry.style.label + entry.style.separator)
        return entry.raw
    if spec.kind == "version":
        return entry.raw
    if spec.kind == "coordinate":
        value = parse_coordinate(entry.raw, units)
    elif spec.kind == "number":
        value = parse_decimal(entry.raw)
    elif spec.kind == "count":
        value = parse_count(entry.raw)
    else:
        value = parse_integer(entry.raw)
    if value is None:
        raise MalformedNumberError(spec.label, entry.raw, entry.line)
    return value


def _build_bounds(
    entries: dict[str, _Entry],
    values: dict[str, Any],
    layout: LayoutKind,
    coordinate: CoordinateKind,
    options: ParseOptions,
):
    a_min, a_max, b_min, b_max = extent_keys(coordinate)
    for lo, hi in ((a_min, a_max), (b_min, b_max)):
        if values[lo] > values[hi]:
            raise InconsistentBoundsError(
                FIELDS[hi].label, values[lo], values[hi], entries[hi].line,
            )
    variant = BOUNDS_VARIANTS[(layout, coordinate)]
    kwargs = {key: values[key] for key in extent_keys(coordinate)}

    if layout is LayoutKind.GRID:
        for key in delta_keys(coordinate):
            if values[key] <= 0:
                raise MalformedNumberError(FIELDS[key].label, entries[key].raw, entries[key].line)
            kwargs[key] = values[key]
        for key in ("rows", "cols"):
            if values[key] < 1:
                raise MalformedNumberError(FIELDS[key].label, entries[key].raw, entries[key].line)
            kwargs[key] = values[key]
        bounds = variant(**kwargs)
        hints = {key: (entry.raw, entry.line) for key, entry in entries.items()}
        check_bounds_consistency(bounds, coordinate, options.bounds_tolerance, hints)
        return bounds

    rows, count = values.get("rows"), values.get("count")
    if rows is not None and count is not None:
        raise DuplicateFieldError(FIELDS["count"].label, entries["count"].line)
    cols = values.get("cols")
    if cols is not None and cols != 3:
        raise InconsistentBoundsError(FIELDS["cols"].label, 3, cols, entries["cols"].line)
    return variant(**kwargs, count=count if count is not None else rows)


def parse_header(
    block: str | Sequence[str],
    options: ParseOptions | None = None,
    *,
    start_line: int = 1,
) -> Header:
    """Parse and validate an ISG header block (the lines between the markers).

    Args:
        block: Header text, or its lines without line terminators.
        options: Parse options (defaults apply when omitted).
        start_line: Document line number of the first header line, used to
            report errors against the whole document.

    Returns:
        A validated ``Header`` carrying a ``HeaderStyle``.

    Raises:
        IsgParseError: The first violation found (see ``exceptions.py``).
    """
    options = options or ParseOptions()
    lines = block.splitlines() if isinstance(block, str) else list(block)

    # Step 1: lex
    entries = _lex(lines, start_line)

    # Step 2: version
    version = entries.get("format_version")
    if version is None or not version.available:
        raise MissingFieldError(FIELDS["format_version"].label, version.line if version else None)
    if version.raw != SUPPORTED_VERSION:
        raise UnsupportedVersionError(version.raw, version.line)

    # Step 3: structural fields
    layout: LayoutKind = _required_enum(entries, "layout_kind")
    coordinate: CoordinateKind = _required_enum(entries, "coordinate_kind")
    units: CoordinateUnits = _required_enum(entries, "coordinate_units")

    # Step 4: convert values in line order
    allowed = set(bounds_keys(layout, coordinate))
    values: dict[str, Any] = {}
    for key, entry in sorted(entries.items(), key=lambda item: item[1].line):
        if key in BOUNDS_FIELD_KEYS and key not in allowed and entry.available:
            raise BoundsFieldMismatchError(
                entry.spec.label, layout.value, coordinate.value, entry.line,
            )
        values[key] = _convert(entry, units)

    # Step 5: required fields
    mandatory = set(required_keys(layout, coordinate))
    for key in required_keys(layout, coordinate, strict=options.strict):
        entry = entries.get(key)
        if entry is None and key == "rows" and layout is LayoutKind.SPARSE and "count" in entries:
            continue
        if entry is None:
            raise MissingFieldError(FIELDS[key].label)
        if not entry.available and key in mandatory:
            raise MissingFieldError(FIELDS[key].label, entry.line)

    # Step 6: bounds
    bounds = _build_bounds(entries, values, layout, coordinate, options)

    # Step 7: ordering & projection
    ordering = values.get("data_ordering")
    problem = ordering_error(ordering, layout, coordinate)
    if problem:
        entry = entries["data_ordering"]
        raise InvalidEnumValueError(entry.spec.label, entry.raw, entry.line)

    header = Header(
        layout_kind=layout,
        coordinate_kind=coordinate,
        coordinate_units=units,
        bounds=bounds,
        model_name=values.get("model_name"),
        model_year=values.get("model_year"),
        model_type=values.get("model_type"),
        data_type=values.get("data_type"),
        data_units=values.get("data_units"),
        data_ordering=ordering,
        ref_ellipsoid=values.get("ref_ellipsoid"),
        ref_frame=values.get("ref_frame"),
        height_datum=values.get("height_datum"),
        tide_system=values.get("tide_system"),
        map_projection=values.get("map_projection"),
        epsg_code=values.get("epsg_code"),
        nodata=values.get("nodata"),
        creation_date=values.get("creation_date"),
        format_version=SUPPORTED_VERSION,
        style=HeaderStyle(lines=tuple(e.style for e in entries.values())),
    )
    logger.debug(
        "Parsed ISG header: %d fields (%s, %s)",
        len(entries), layout.value, coordinate.value,
    )
    return header
