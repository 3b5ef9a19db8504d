"""
Unit tests for document splitting and top-level parsing
(isg_format.parsers.document, isg_format.loads).
"""

from __future__ import annotations

import pytest

import isg_format
from isg_format.config import ParseOptions
from isg_format.exceptions import MalformedNumberError, MissingMarkerError, UnsupportedVersionError
from isg_format.parsers.document import split_document
from tests.conftest import (
    SCENARIO_A_BODY,
    SCENARIO_A_HEADER,
    SCENARIO_B_BODY,
    SCENARIO_B_HEADER,
    document_text,
    replace_line,
)


class TestSplitDocument:
    """Tests for split_document()."""

    def test_regions(self):
        text = "note 1\nnote 2\nbegin_of_head ===\na: 1\nend_of_head ===\n1\n2\n"
        parts = split_document(text)
        assert parts.comment == "note 1\nnote 2\n"
        assert parts.begin_marker == "begin_of_head ==="
        assert parts.header_lines == ["a: 1"]
        assert parts.end_marker == "end_of_head ==="
        assert parts.body_lines == ["1", "2"]
        assert parts.header_start == 3
        assert parts.body_start == 5
        assert parts.newline == "\n"

    def test_crlf(self):
        text = "c\r\nbegin_of_head\r\na: 1\r\nend_of_head\r\n1\r\n"
        parts = split_document(text)
        assert parts.comment == "c\r\n"
        assert parts.header_lines == ["a: 1"]
        assert parts.body_lines == ["1"]
        assert parts.newline == "\r\n"

    def test_missing_begin_tolerated(self):
        parts = split_document("a: 1\nend_of_head\n1\n")
        assert parts.begin_marker is None
        assert parts.comment == ""
        assert parts.header_lines == ["a: 1"]

    def test_missing_begin_strict(self):
        with pytest.raises(MissingMarkerError) as exc_info:
            split_document("a: 1\nend_of_head\n1\n", strict=True)
        assert exc_info.value.marker == "begin_of_head"

    def test_missing_end(self):
        with pytest.raises(MissingMarkerError) as exc_info:
            split_document("begin_of_head\na: 1\n1\n")
        assert exc_info.value.marker == "end_of_head"


class TestLoads:
    """Tests for isg_format.loads()."""

    def test_scenario_a(self, scenario_a_text):
        doc = isg_format.loads(scenario_a_text)
        assert doc.data.values[1][1] is None
        assert doc.data.values[0][0] == 10.1
        assert isg_format.cell_coordinate(doc.header, 0, 0) == (41.0, 10.0)

    def test_scenario_b(self, scenario_b_text):
        doc = isg_format.loads(scenario_b_text)
        assert doc.data.points == ((1000.0, 2000.0, 15.234), (1000.0, 2001.0, None))

    def test_scenario_c(self):
        header = replace_line(SCENARIO_A_HEADER, "format version", "format version: 1.0")
        with pytest.raises(UnsupportedVersionError):
            isg_format.loads(document_text(header, SCENARIO_A_BODY))

    def test_comment_kept(self):
        doc = isg_format.loads(document_text(SCENARIO_A_HEADER, SCENARIO_A_BODY, "my model\n"))
        assert doc.comment == "my model\n"

    def test_markers_kept_in_style(self, scenario_a_text):
        style = isg_format.loads(scenario_a_text).header.style
        assert style.begin_marker == "begin_of_head ===="
        assert style.end_marker == "end_of_head ===="

    def test_header_line_numbers_are_document_positions(self):
        header = replace_line(SCENARIO_A_HEADER, "lat max", "lat max: x")
        text = document_text(header, SCENARIO_A_BODY, "c1\nc2\n")
        with pytest.raises(MalformedNumberError) as exc_info:
            isg_format.loads(text)
        # 2 comment lines + begin marker + 5th header line
        assert exc_info.value.line == 8

    def test_body_line_numbers_are_document_positions(self):
        body = SCENARIO_A_BODY[:-1] + ["x"]
        with pytest.raises(MalformedNumberError) as exc_info:
            isg_format.loads(document_text(SCENARIO_A_HEADER, body))
        # begin marker + 14 header lines + end marker + 9th body line
        assert exc_info.value.line == 25

    def test_sparse_count_from_data(self):
        header = replace_line(SCENARIO_B_HEADER, "count", None)
        doc = isg_format.loads(document_text(header, SCENARIO_B_BODY))
        assert doc.header.bounds.count == 2

    def test_strict_requires_begin_marker(self):
        text = "\n".join(SCENARIO_A_HEADER) + "\nend_of_head\n" + "\n".join(SCENARIO_A_BODY)
        assert isg_format.loads(text).comment == ""
        with pytest.raises(MissingMarkerError):
            isg_format.loads(text, ParseOptions(strict=True))
