"""
Data Body Parser for isg-format.

Reads the lines after ``end_of_head`` according to an already validated
``Header``:

- Grid: ``rows * cols`` samples in the header's scan order, arranged into
  row-major rows.  ``grid_layout`` says how samples are spread over lines:
  one per line (``value``), one scan line per text line (``row``), or decided
  from the first line (``auto``).
- Sparse: one ``coord_a coord_b value`` triple per line.

Samples equal to the nodata sentinel (within ``nodata_tolerance``) become
``None``.  Trailing blank lines are ignored; any other blank line is a
malformed data line.  Per-column number formats are sniffed in the same pass
and attached as a ``BodyStyle``.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Sequence

from isg_format.config import ParseOptions
from isg_format.exceptions import (
    DataCountMismatchError,
    MalformedDataLineError,
    MalformedNumberError,
)
from isg_format.models import (
    BodyStyle,
    CoordinateUnits,
    GridData,
    Header,
    LayoutKind,
    SparseData,
)
from isg_format.numbers import FormatSniffer, parse_coordinate, parse_decimal
from isg_format.ordering import scan_order, scan_to_grid

logger = logging.getLogger(__name__)

_TOKEN_RE = re.compile(r"\S+")


def _tokens(text: str) -> list[tuple[str, int]]:
    """Split a line into ``(token, pad)`` pairs.

    *pad* is the whitespace run a token owns: everything before the first
    token, and all but the single separating blank before later ones.
    """
    result = []
    end = 0
    for match in _TOKEN_RE.finditer(text):
        pad = match.start() - end - (1 if end else 0)
        result.append((match.group(), max(pad, 0)))
        end = match.end()
    return result


def _trim_trailing_blank(lines: Sequence[str]) -> list[str]:
    lines = list(lines)
    while lines and not lines[-1].strip():
        lines.pop()
    return lines


class _SampleReader:
    """Converts value tokens, mapping the nodata sentinel to ``None``."""

    def __init__(self, nodata: float | None, tolerance: float) -> None:
        self.nodata = nodata
        self.tolerance = tolerance

    def read(self, token: str, line: int) -> tuple[float | None, bool]:
        value = parse_decimal(token)
        if value is None:
            raise MalformedNumberError("data", token, line)
        if self.nodata is not None and math.isclose(
            value, self.nodata, rel_tol=self.tolerance, abs_tol=self.tolerance,
        ):
            return None, True
        return value, False


def _parse_grid(
    lines: list[str],
    header: Header,
    options: ParseOptions,
    start_line: int,
) -> GridData:
    _, _, rows, cols = header.bounds.sampling()  # type: ignore[union-attr]
    ordering = header.data_ordering
    inner = cols if scan_order(ordering).row_major else rows

    layout = options.grid_layout
    if layout == "auto":
        first = len(_tokens(lines[0])) if lines else 1
        layout = "row" if first == inner and inner > 1 else "value"
    per_line = 1 if layout == "value" else inner
    expected_lines = rows * cols // per_line
    if len(lines) != expected_lines:
        raise DataCountMismatchError(expected_lines, len(lines))

    reader = _SampleReader(header.nodata, options.nodata_tolerance)
    sniffer = FormatSniffer()
    samples: list[float | None] = []
    for offset, text in enumerate(lines):
        line_no = start_line + offset
        tokens = _tokens(text)
        if len(tokens) != per_line:
            raise MalformedDataLineError(line_no, text, per_line)
        for token, pad in tokens:
            value, is_nodata = reader.read(token, line_no)
            sniffer.observe(token, pad, nodata=is_nodata)
            samples.append(value)

    return GridData(
        values=scan_to_grid(samples, rows, cols, ordering),  # type: ignore[arg-type]
        style=BodyStyle(columns=(sniffer.result(),), grid_layout=layout),  # type: ignore[arg-type]
    )


def _parse_sparse(
    lines: list[str],
    header: Header,
    options: ParseOptions,
    start_line: int,
) -> SparseData:
    count = header.bounds.count  # type: ignore[union-attr]
    if count is not None and len(lines) != count:
        raise DataCountMismatchError(count, len(lines))

    units = header.coordinate_units
    dms = units is CoordinateUnits.DMS
    reader = _SampleReader(header.nodata, options.nodata_tolerance)
    sniffers = (FormatSniffer(dms=dms), FormatSniffer(dms=dms), FormatSniffer())
    points = []
    for offset, text in enumerate(lines):
        line_no = start_line + offset
        tokens = _tokens(text)
        if len(tokens) != 3:
            raise MalformedDataLineError(line_no, text, 3)
        coords = []
        for (token, pad), sniffer in zip(tokens[:2], sniffers):
            coord = parse_coordinate(token, units)
            if coord is None:
                raise MalformedNumberError("coordinate", token, line_no)
            sniffer.observe(token, pad)
            coords.append(coord)
        token, pad = tokens[2]
        value, is_nodata = reader.read(token, line_no)
        sniffers[2].observe(token, pad, nodata=is_nodata)
        points.append((coords[0], coords[1], value))

    return SparseData(
        points=tuple(points),
        style=BodyStyle(columns=tuple(s.result() for s in sniffers)),
    )


def parse_body(
    lines: str | Sequence[str],
    header: Header,
    options: ParseOptions | None = None,
    *,
    start_line: int = 1,
) -> GridData | SparseData:
    """Parse a data body against its header.

    Args:
        lines: Body text, or its lines without line terminators.
        header: The validated header the body belongs to.
        options: Parse options (defaults apply when omitted).
        start_line: Document line number of the first body line.

    Raises:
        DataCountMismatchError: Too many or too few samples.
        MalformedDataLineError: A line with the wrong number of tokens.
        MalformedNumberError: A token that is not a number.
    """
    options = options or ParseOptions()
    if isinstance(lines, str):
        lines = lines.splitlines()
    body = _trim_trailing_blank(lines)

    if header.layout_kind is LayoutKind.GRID:
        data: GridData | SparseData = _parse_grid(body, header, options, start_line)
        logger.debug("Parsed grid body: %dx%d", *data.shape)
    else:
        data = _parse_sparse(body, header, options, start_line)
        logger.debug("Parsed sparse body: %d points", len(data.points))
    return data
