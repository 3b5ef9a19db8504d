"""
Custom exception hierarchy for isg-format.

Every parse failure derives from ``IsgParseError`` and carries enough
positional context (1-based ``line``, field label, offending raw token)
to localize the fault in the source text.  Callers can catch a specific
failure (e.g. ``UnsupportedVersionError``) or the whole family at once.

Parsing is fail-fast: the first violation found during the single linear
pass is raised, and no partial document is ever returned.
"""

from __future__ import annotations


class IsgError(Exception):
    """Base exception for all isg-format errors."""


class OptionsError(IsgError):
    """Raised when a parse-options YAML file is empty or malformed."""


class IsgParseError(IsgError):
    """Base class for errors raised while parsing or validating a document.

    Attributes:
        line: 1-based line number in the whole document, or ``None`` when
            the fault is not tied to a single line (e.g. a missing field).
    """

    def __init__(self, message: str, line: int | None = None) -> None:
        self.line = line
        if line is not None:
            message = f"{message} (line: {line})"
        super().__init__(message)


class UnknownFieldError(IsgParseError):
    """Raised when a header label does not name any known ISG field."""

    def __init__(self, label: str, line: int | None = None) -> None:
        self.label = label
        super().__init__(f"unknown header field: `{label}`", line)


class MissingFieldError(IsgParseError):
    """Raised when a mandatory header field is absent (or holds ``---``)."""

    def __init__(self, field: str, line: int | None = None) -> None:
        self.field = field
        super().__init__(f"missing header field: `{field}`", line)


class DuplicateFieldError(IsgParseError):
    """Raised when the same header field appears twice (aliases included)."""

    def __init__(self, field: str, line: int | None = None) -> None:
        self.field = field
        super().__init__(f"duplicated header field: `{field}`", line)


class MalformedHeaderLineError(IsgParseError):
    """Raised when a header line is not ``label : value`` / ``label = value``.

    Also raised for descriptive (free-text) fields with an empty value.
    """

    def __init__(self, line: int, text: str) -> None:
        self.text = text
        super().__init__(f"malformed header line: `{text}`", line)


class MissingMarkerError(IsgParseError):
    """Raised when ``end_of_head`` (or, in strict mode, ``begin_of_head``)
    cannot be found."""

    def __init__(self, marker: str) -> None:
        self.marker = marker
        super().__init__(f"missing line starting with `{marker}`")


class InvalidEnumValueError(IsgParseError):
    """Raised when an enumerated field holds a value outside its domain."""

    def __init__(self, field: str, raw: str, line: int | None = None) -> None:
        self.field = field
        self.raw = raw
        super().__init__(f"invalid value `{raw}` for `{field}`", line)


class MalformedNumberError(IsgParseError):
    """Raised when a numeric token is unparsable, non-finite or out of range."""

    def __init__(self, field: str, raw: str, line: int | None = None) -> None:
        self.field = field
        self.raw = raw
        super().__init__(f"malformed number `{raw}` for `{field}`", line)


class UnsupportedVersionError(IsgParseError):
    """Raised when ``ISG format`` is anything other than ``2.0``."""

    def __init__(self, raw: str, line: int | None = None) -> None:
        self.raw = raw
        super().__init__(f"unsupported ISG format version `{raw}` (expected `2.0`)", line)


class BoundsFieldMismatchError(IsgParseError):
    """Raised when a bounds field of another (layout, coordinate) combination
    carries a value, e.g. ``north min`` in a geodetic grid header."""

    def __init__(
        self,
        field: str,
        layout_kind: str,
        coordinate_kind: str,
        line: int | None = None,
    ) -> None:
        self.field = field
        self.layout_kind = layout_kind
        self.coordinate_kind = coordinate_kind
        super().__init__(
            f"field `{field}` does not belong to a {layout_kind} {coordinate_kind} header",
            line,
        )


class InconsistentBoundsError(IsgParseError):
    """Raised when declared extent, step and count disagree.

    ``expected`` is the value implied by the other fields (e.g.
    ``min + delta * (n - 1)``); ``actual`` is the declared one.
    """

    def __init__(
        self,
        field: str,
        expected: float,
        actual: float,
        line: int | None = None,
    ) -> None:
        self.field = field
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"inconsistent bounds: `{field}` is {actual!r}, expected {expected!r}",
            line,
        )


class DataCountMismatchError(IsgParseError):
    """Raised when the body holds more or fewer samples than declared."""

    def __init__(self, expected: int, actual: int, line: int | None = None) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"data count mismatch: expected {expected} lines, found {actual}",
            line,
        )


class MalformedDataLineError(IsgParseError):
    """Raised when a body line holds the wrong number of tokens."""

    def __init__(self, line: int, text: str, expected_tokens: int) -> None:
        self.text = text
        self.expected_tokens = expected_tokens
        super().__init__(
            f"malformed data line: expected {expected_tokens} token(s), got `{text.strip()}`",
            line,
        )
