"""
Writer for isg-format.

Serializes a ``Document`` back to ISG 2.0 text:

    comment -> begin marker -> header lines -> end marker -> body lines

Parsed documents carry display hints (``HeaderStyle`` / ``BodyStyle``) and are
written the way they were read: same field order, labels, separators and
spacing; unchanged numbers reproduce their source text, changed ones are
rendered with the format sniffed from it, and lines end the way the source
lines did.  Documents built in code get the canonical ISG 2.0 layout.  Either
way ``loads(dumps(doc)) == doc``, except that a DMS coordinate built in code
may come back a few ulps away when no seconds rendering of up to 12 decimals
reads back exactly.

Enumerated fields are always written in their canonical spelling.
"""

from __future__ import annotations

import logging
from typing import Any

from isg_format.fields import (
    FIELDS,
    FieldSpec,
    canonical_keys,
    header_values,
    required_keys,
)
from isg_format.models import (
    DEFAULT_BEGIN_MARKER,
    DEFAULT_END_MARKER,
    BodyStyle,
    CoordinateUnits,
    Document,
    FieldLine,
    GridData,
    Header,
    LayoutKind,
    NumberFormat,
)
from isg_format.numbers import (
    NOT_AVAILABLE,
    format_number,
    parse_coordinate,
    parse_decimal,
    parse_integer,
    sniff_format,
)
from isg_format.ordering import grid_to_scan, scan_order

logger = logging.getLogger(__name__)

_LABEL_WIDTH = 15


# ---------------------------------------------------------------------------
# Header
# ---------------------------------------------------------------------------

def _canonical_line(key: str) -> FieldLine:
    spec = FIELDS[key]
    return FieldLine(key=key, label=f"{spec.label:<{_LABEL_WIDTH}}", separator=spec.separator)


def _render_value(spec: FieldSpec, value: Any, raw: str, units: CoordinateUnits) -> str:
    """Text of one header value, reusing *raw* when it still reads as *value*."""
    if value is None:
        return NOT_AVAILABLE
    if spec.kind == "enum":
        return value.value
    if spec.kind in ("text", "version"):
        return value
    usable = raw if raw and raw != NOT_AVAILABLE else ""
    if spec.kind in ("count", "integer"):
        return usable if usable and parse_integer(usable) == value else str(value)

    dms = spec.kind == "coordinate" and units is CoordinateUnits.DMS
    if usable:
        parsed = parse_coordinate(usable, units) if spec.kind == "coordinate" else parse_decimal(usable)
        if parsed == value:
            return usable
        return format_number(value, sniff_format(usable, dms=dms))
    return format_number(value, NumberFormat(dms=dms))


def _field_lines(header: Header, values: dict[str, Any]) -> list[FieldLine]:
    keys = canonical_keys(header.layout_kind, header.coordinate_kind)
    if header.style is None:
        return [_canonical_line(key) for key in keys]

    lines = list(header.style.lines)
    present = {line.key for line in lines}
    sparse = header.layout_kind is LayoutKind.SPARSE
    if sparse and "count" in present:
        present.add("rows")
    required = set(required_keys(header.layout_kind, header.coordinate_kind))
    for key in keys:
        if key in present:
            continue
        if sparse and key in ("rows", "cols"):
            continue
        if key in required or values.get(key) is not None:
            lines.append(_canonical_line(key))
    return lines


def render_header(header: Header) -> list[str]:
    """Header field lines (markers excluded)."""
    values = header_values(header)
    return [
        f"{line.label}{line.separator}{line.lead}"
        f"{_render_value(FIELDS[line.key], values.get(line.key), line.raw, header.coordinate_units)}"
        f"{line.trail}"
        for line in _field_lines(header, values)
    ]


def nodata_literal(header: Header) -> str:
    """Text of the nodata sentinel as the header writes it."""
    raw = ""
    if header.style is not None:
        raw = next((line.raw for line in header.style.lines if line.key == "nodata"), "")
    return _render_value(FIELDS["nodata"], header.nodata, raw, header.coordinate_units)


# ---------------------------------------------------------------------------
# Body
# ---------------------------------------------------------------------------

def _render_grid(header: Header, data: GridData) -> list[str]:
    style = data.style or BodyStyle()
    fmt = style.columns[0] if style.columns else NumberFormat()
    nodata = nodata_literal(header).rjust(fmt.width)
    tokens = [
        nodata if v is None else format_number(v, fmt)
        for v in grid_to_scan(data.values, header.data_ordering)  # type: ignore[arg-type]
    ]
    if style.grid_layout != "row":
        return tokens
    _, _, rows, cols = header.bounds.sampling()  # type: ignore[union-attr]
    inner = cols if scan_order(header.data_ordering).row_major else rows
    return [" ".join(tokens[k:k + inner]) for k in range(0, len(tokens), inner)]


def _render_sparse(header: Header, data) -> list[str]:
    dms = header.coordinate_units is CoordinateUnits.DMS
    columns = data.style.columns if data.style is not None else ()
    if len(columns) != 3:
        columns = (NumberFormat(dms=dms), NumberFormat(dms=dms), NumberFormat())
    nodata = nodata_literal(header).rjust(columns[2].width)
    return [
        " ".join((
            format_number(a, columns[0]),
            format_number(b, columns[1]),
            nodata if value is None else format_number(value, columns[2]),
        ))
        for a, b, value in data.points
    ]


def render_body(document: Document) -> list[str]:
    if isinstance(document.data, GridData):
        return _render_grid(document.header, document.data)
    return _render_sparse(document.header, document.data)


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------

def write_document(document: Document) -> str:
    """Serialize *document* to ISG 2.0 text, newline-terminated.

    The terminator is the one the document was read with (LF for documents
    built in code).
    """
    header = document.header
    style = header.style
    lines: list[str] = []

    begin = DEFAULT_BEGIN_MARKER if style is None else style.begin_marker
    if begin is None and document.comment:
        # a comment can only be told apart from the header by the marker
        begin = DEFAULT_BEGIN_MARKER
    if begin is not None:
        lines.append(begin)
    lines.extend(render_header(header))
    lines.append(DEFAULT_END_MARKER if style is None else style.end_marker)
    lines.extend(render_body(document))

    newline = "\n" if style is None else style.newline
    comment = document.comment
    if comment and not comment.endswith(("\n", "\r")):
        comment += newline

    logger.debug("Wrote ISG document: %d lines", len(lines))
    return comment + newline.join(lines) + newline
