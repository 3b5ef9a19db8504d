"""
isg-format: reader and writer for ISG 2.0 geoid model files.

Public API surface:

- ``loads(text, options=None)`` / ``load(path, options=None)`` -- parse ISG
  2.0 text (or a file) into a validated ``Document``.  Fails fast with a
  typed ``IsgParseError`` carrying the offending line.

- ``dumps(document)`` / ``dump(document, path)`` -- serialize a
  ``Document``.  Parsed documents are written back the way they were read;
  documents built in code get the canonical ISG 2.0 layout.

- ``parse_header(...)`` / ``parse_body(...)`` -- the two parsing stages on
  their own.

- ``validate_document(document, options=None)`` -- bounds consistency check
  for documents built in code.

- ``cell_coordinate(header, i, j)``, ``to_frame(document)``,
  ``to_array(document)`` -- coordinates and tabular views.

Parsing behaviour (tolerances, strictness, grid body layout) is configured
with ``ParseOptions``, loadable from YAML via ``load_options()``.
"""

from __future__ import annotations

import logging
from pathlib import Path

from isg_format.config import ParseOptions, load_options, save_options
from isg_format.exceptions import (
    BoundsFieldMismatchError,
    DataCountMismatchError,
    DuplicateFieldError,
    InconsistentBoundsError,
    InvalidEnumValueError,
    IsgError,
    IsgParseError,
    MalformedDataLineError,
    MalformedHeaderLineError,
    MalformedNumberError,
    MissingFieldError,
    MissingMarkerError,
    OptionsError,
    UnknownFieldError,
    UnsupportedVersionError,
)
from isg_format.frame import to_array, to_frame
from isg_format.models import (
    CoordinateKind,
    CoordinateUnits,
    DataOrdering,
    DataType,
    DataUnits,
    Document,
    GridData,
    GridGeodetic,
    GridProjected,
    Header,
    LayoutKind,
    ModelType,
    SparseData,
    SparseGeodetic,
    SparseProjected,
    TideSystem,
)
from isg_format.ordering import cell_coordinate
from isg_format.parsers import parse_body, parse_document, parse_header
from isg_format.validation import validate_document
from isg_format.writer import write_document

__all__ = [
    "load", "loads", "dump", "dumps",
    "parse_header", "parse_body", "validate_document",
    "cell_coordinate", "to_frame", "to_array",
    "ParseOptions", "load_options", "save_options",
    # models
    "Document", "Header", "GridData", "SparseData",
    "GridGeodetic", "GridProjected", "SparseGeodetic", "SparseProjected",
    "ModelType", "DataType", "DataUnits", "LayoutKind", "DataOrdering",
    "TideSystem", "CoordinateKind", "CoordinateUnits",
    # errors
    "IsgError", "OptionsError", "IsgParseError",
    "UnknownFieldError", "MissingFieldError", "DuplicateFieldError",
    "MalformedHeaderLineError", "MissingMarkerError", "InvalidEnumValueError",
    "MalformedNumberError", "UnsupportedVersionError", "BoundsFieldMismatchError",
    "InconsistentBoundsError", "DataCountMismatchError", "MalformedDataLineError",
]

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def loads(text: str, options: ParseOptions | None = None) -> Document:
    """Parse ISG 2.0 text into a ``Document``.

    Args:
        text: The whole file content (``\\n`` or ``\\r\\n`` line endings).
        options: Parse options; defaults apply when omitted.

    Raises:
        IsgParseError: The first violation found, with its 1-based line.

    Examples::

        doc = isg_format.loads(text)
        doc.header.bounds.extent()
        isg_format.to_array(doc)
    """
    return parse_document(text, options)


def dumps(document: Document) -> str:
    """Serialize a ``Document`` to ISG 2.0 text (always newline-terminated)."""
    return write_document(document)


def load(path: str | Path, options: ParseOptions | None = None) -> Document:
    """Read and parse an ISG file (UTF-8; DMS coordinates use ``°``)."""
    path = Path(path)
    with open(path, "r", encoding="utf-8", newline="") as f:
        text = f.read()
    logger.info("Loading ISG file %s", path)
    return loads(text, options)


def dump(document: Document, path: str | Path) -> None:
    """Write a ``Document`` to *path* as UTF-8 ISG text."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(dumps(document))
    logger.info("Wrote ISG file %s", path)
