"""
Cross-field checks shared by the header parser and ``validate_document``.

The construction-time invariants of the model types cover what does not
depend on configuration.  What remains here is tolerance-driven: whether the
declared extent agrees with ``min + delta * (n - 1)`` on each grid axis.
Decimal files round that relation (``121.666667`` for ``120 + 5 * 0.333333``),
so the tolerance is widened by half a unit in the last written place of each
participating value.
"""

from __future__ import annotations

import logging
from typing import Mapping

from isg_format.config import ParseOptions
from isg_format.exceptions import InconsistentBoundsError
from isg_format.fields import FIELDS, delta_keys, extent_keys
from isg_format.models import CoordinateKind, Document, LayoutKind
from isg_format.numbers import rounding_slack

logger = logging.getLogger(__name__)

# field key -> (raw text, 1-based line)
Hints = Mapping[str, tuple[str, int | None]]


def check_grid_axis(
    start: float,
    stop: float,
    delta: float,
    n: int,
    tolerance: float,
    slack: float = 0.0,
) -> float | None:
    """Return the expected ``stop`` if it disagrees with the others, else ``None``."""
    expected = start + delta * (n - 1)
    scale = max(abs(start), abs(stop), abs(delta), 1.0)
    if abs(stop - expected) > tolerance * scale + slack:
        return expected
    return None


def check_bounds_consistency(
    bounds,
    coordinate: CoordinateKind,
    tolerance: float,
    hints: Hints | None = None,
) -> None:
    """Check ``max ~ min + delta * (n - 1)`` on both axes of a grid.

    Args:
        bounds: A ``GridGeodetic`` or ``GridProjected`` value.
        coordinate: Its coordinate kind (selects the field keys).
        tolerance: Relative tolerance (``ParseOptions.bounds_tolerance``).
        hints: Raw text and line per field key, when parsed from text.

    Raises:
        InconsistentBoundsError: Naming the ``max`` field of the first bad axis.
    """
    hints = hints or {}
    a_min, a_max, b_min, b_max = extent_keys(coordinate)
    delta_a, delta_b = delta_keys(coordinate)
    _, _, rows, cols = bounds.sampling()
    for lo_key, hi_key, delta_key, n in (
        (a_min, a_max, delta_a, rows),
        (b_min, b_max, delta_b, cols),
    ):
        raw = {key: hints.get(key, (None, None))[0] for key in (lo_key, hi_key, delta_key)}
        slack = (
            rounding_slack(raw[lo_key])
            + rounding_slack(raw[hi_key])
            + (n - 1) * rounding_slack(raw[delta_key])
        )
        actual = getattr(bounds, hi_key)
        expected = check_grid_axis(
            getattr(bounds, lo_key), actual, getattr(bounds, delta_key), n, tolerance, slack,
        )
        if expected is not None:
            line = hints.get(hi_key, (None, None))[1]
            raise InconsistentBoundsError(FIELDS[hi_key].label, expected, actual, line)


def _style_hints(document: Document) -> dict[str, tuple[str, int | None]]:
    style = document.header.style
    if style is None:
        return {}
    return {line.key: (line.raw, None) for line in style.lines}


def validate_document(document: Document, options: ParseOptions | None = None) -> None:
    """Apply the tolerance-driven checks the parser runs to a Document.

    Documents built in code only pass the construction invariants of the model
    types; this adds the bounds consistency check and reports a problem with
    the same typed error the parser raises.

    Raises:
        InconsistentBoundsError: A grid axis whose extent disagrees with its
            step and count.
    """
    options = options or ParseOptions()
    header = document.header
    if header.layout_kind is LayoutKind.GRID:
        check_bounds_consistency(
            header.bounds,
            header.coordinate_kind,
            options.bounds_tolerance,
            _style_hints(document),
        )
    logger.debug("Validated %s document", header.bounds.kind)
