"""
Document splitter and top-level parse for isg-format.

An ISG file is::

    <free comment lines>
    begin_of_head ================================================
    <header lines>
    end_of_head ==================================================
    <data body>

The marker lines are recognised by their prefix; whatever follows the prefix
(the ``====`` rule) is kept verbatim in the ``HeaderStyle``.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass

from isg_format.config import ParseOptions
from isg_format.exceptions import MissingMarkerError
from isg_format.models import Document
from isg_format.parsers.body import parse_body
from isg_format.parsers.header import parse_header

logger = logging.getLogger(__name__)

BEGIN_OF_HEAD = "begin_of_head"
END_OF_HEAD = "end_of_head"


@dataclass
class SplitDocument:
    """The three regions of an ISG text, with 0-based line positions.

    Attributes:
        comment: Verbatim text before the begin marker (line endings kept).
        begin_marker: The begin marker line, or ``None`` if absent.
        header_lines: Lines between the markers.
        end_marker: The end marker line.
        body_lines: Lines after the end marker.
        header_start: Index of the first header line.
        body_start: Index of the first body line.
        newline: Line terminator of the end marker line (CRLF or LF).
    """
    comment: str
    begin_marker: str | None
    header_lines: list[str]
    end_marker: str
    body_lines: list[str]
    header_start: int
    body_start: int
    newline: str = "\n"


def split_document(text: str, strict: bool = False) -> SplitDocument:
    """Split ISG text at its marker lines.

    Raises:
        MissingMarkerError: No ``end_of_head`` line, or (strict) no
            ``begin_of_head`` line.
    """
    raw_lines = text.splitlines(keepends=True)
    lines = [line.rstrip("\r\n") for line in raw_lines]

    begin = next((i for i, line in enumerate(lines) if line.startswith(BEGIN_OF_HEAD)), None)
    if begin is None and strict:
        raise MissingMarkerError(BEGIN_OF_HEAD)
    header_start = 0 if begin is None else begin + 1

    end = next(
        (i for i in range(header_start, len(lines)) if lines[i].startswith(END_OF_HEAD)),
        None,
    )
    if end is None:
        raise MissingMarkerError(END_OF_HEAD)

    return SplitDocument(
        comment="" if begin is None else "".join(raw_lines[:begin]),
        begin_marker=None if begin is None else lines[begin],
        header_lines=lines[header_start:end],
        end_marker=lines[end],
        body_lines=lines[end + 1:],
        header_start=header_start,
        body_start=end + 1,
        newline="\r\n" if raw_lines[end].endswith("\r\n") else "\n",
    )


def parse_document(text: str, options: ParseOptions | None = None) -> Document:
    """Parse a complete ISG document.

    Line numbers in errors are 1-based positions in *text*.
    """
    options = options or ParseOptions()
    parts = split_document(text, strict=options.strict)

    header = parse_header(parts.header_lines, options, start_line=parts.header_start + 1)
    header = dataclasses.replace(
        header,
        style=dataclasses.replace(
            header.style,
            begin_marker=parts.begin_marker,
            end_marker=parts.end_marker,
            newline=parts.newline,
        ),
    )
    data = parse_body(parts.body_lines, header, options, start_line=parts.body_start + 1)

    logger.info(
        "Parsed ISG document: %s %s, %d header fields",
        header.layout_kind.value,
        header.coordinate_kind.value,
        len(parts.header_lines),
    )
    return Document(header=header, data=data, comment=parts.comment)

