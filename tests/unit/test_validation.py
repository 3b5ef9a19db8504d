"""
Unit tests for cross-field checks (isg_format.validation).
"""

from __future__ import annotations

import pytest

import isg_format
from isg_format.config import ParseOptions
from isg_format.exceptions import InconsistentBoundsError
from isg_format.models import (
    CoordinateKind,
    CoordinateUnits,
    DataOrdering,
    Document,
    GridData,
    GridGeodetic,
    Header,
    LayoutKind,
)
from isg_format.validation import check_bounds_consistency, check_grid_axis, validate_document
from tests.conftest import CANONICAL_SAMPLES, NON_CANONICAL_ISG, read_sample


def _grid_document(bounds: GridGeodetic | None = None) -> Document:
    bounds = bounds or GridGeodetic(40.0, 41.0, 10.0, 11.0, 0.5, 0.5, 3, 3)
    header = Header(
        layout_kind=LayoutKind.GRID,
        coordinate_kind=CoordinateKind.GEODETIC,
        coordinate_units=CoordinateUnits.DEG,
        bounds=bounds,
        data_ordering=DataOrdering.N_TO_S_W_TO_E,
    )
    _, _, rows, cols = bounds.sampling()
    return Document(header=header, data=GridData(values=[[1.0] * cols] * rows))


class TestCheckGridAxis:
    """Tests for check_grid_axis()."""

    def test_consistent(self):
        assert check_grid_axis(40.0, 41.0, 0.5, 3, 1e-6) is None

    def test_inconsistent_returns_expected(self):
        assert check_grid_axis(0.0, 10.0, 1.0, 10, 1e-6) == pytest.approx(9.0)

    def test_slack_widens_tolerance(self):
        assert check_grid_axis(0.0, 1.0, 0.333, 4, 1e-6) == pytest.approx(0.999)
        assert check_grid_axis(0.0, 1.0, 0.333, 4, 1e-6, slack=2e-3) is None


class TestCheckBoundsConsistency:
    """Tests for check_bounds_consistency()."""

    BOUNDS = GridGeodetic(0.0, 1.0, 0.0, 1.0, 0.333, 0.333, 4, 4)

    def test_without_hints(self):
        with pytest.raises(InconsistentBoundsError) as exc_info:
            check_bounds_consistency(self.BOUNDS, CoordinateKind.GEODETIC, 1e-6)
        assert exc_info.value.field == "lat max"
        assert exc_info.value.line is None

    def test_written_precision_accepted(self):
        """Values written to three places may be off by their rounding."""
        hints = {
            "lat_max": ("1.000", 5),
            "delta_lat": ("0.333", 7),
            "lon_max": ("1.000", 6),
            "delta_lon": ("0.333", 8),
        }
        check_bounds_consistency(self.BOUNDS, CoordinateKind.GEODETIC, 1e-6, hints)

    def test_error_carries_hint_line(self):
        hints = {"lat_max": ("1.000000", 5)}
        with pytest.raises(InconsistentBoundsError) as exc_info:
            check_bounds_consistency(self.BOUNDS, CoordinateKind.GEODETIC, 1e-6, hints)
        assert exc_info.value.line == 5


class TestValidateDocument:
    """Tests for validate_document()."""

    def test_valid(self):
        validate_document(_grid_document())

    @pytest.mark.parametrize("path", [*CANONICAL_SAMPLES, NON_CANONICAL_ISG])
    def test_parsed_samples(self, path):
        validate_document(isg_format.loads(read_sample(path), ParseOptions(grid_layout="auto")))

    def test_inconsistent_bounds(self):
        bounds = GridGeodetic(40.0, 41.0, 10.0, 11.2, 0.5, 0.5, 3, 3)
        with pytest.raises(InconsistentBoundsError) as exc_info:
            validate_document(_grid_document(bounds))
        assert exc_info.value.field == "lon max"
        assert exc_info.value.expected == pytest.approx(11.0)

    def test_tolerance_is_configurable(self):
        bounds = GridGeodetic(40.0, 41.0, 10.0, 11.0001, 0.5, 0.5, 3, 3)
        with pytest.raises(InconsistentBoundsError):
            validate_document(_grid_document(bounds))
        validate_document(_grid_document(bounds), ParseOptions(bounds_tolerance=1e-4))
