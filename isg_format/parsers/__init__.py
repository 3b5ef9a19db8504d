"""
Parsers sub-package for isg-format.

Turns ISG 2.0 text into the model types of ``isg_format.models``.

- document.py splits the text at the ``begin_of_head`` / ``end_of_head``
  markers and drives the other two.
- header.py implements the Header Parser/Validator.
- body.py implements the Data Body Parser (Grid and Sparse).

The header parser runs first: the body cannot be read without the layout
kind, coordinate kind, counts, nodata sentinel and ordering it establishes.
"""

from isg_format.parsers.body import parse_body
from isg_format.parsers.document import parse_document, split_document
from isg_format.parsers.header import parse_header

__all__ = ["parse_body", "parse_document", "parse_header", "split_document"]
