"""
Unit tests for scan-order translation and cell coordinates (isg_format.ordering).

Every grid ordering is exercised against a 2x3 grid whose cells are labelled
by their (row, column) so a mirrored or transposed translation shows up as a
wrong label rather than a wrong number.
"""

from __future__ import annotations

import pytest

from isg_format.models import (
    CoordinateKind,
    CoordinateUnits,
    DataOrdering,
    GridGeodetic,
    Header,
    LayoutKind,
    SparseGeodetic,
)
from isg_format.ordering import (
    axis_coordinates,
    cell_coordinate,
    column_names,
    grid_to_scan,
    ordering_error,
    scan_order,
    scan_to_grid,
)

# Cells of a 2x3 grid (row 0 = first scanned row) as (row, col) labels
GRID = [[(0, 0), (0, 1), (0, 2)], [(1, 0), (1, 1), (1, 2)]]

ROW_MAJOR = [
    DataOrdering.N_TO_S_W_TO_E,
    DataOrdering.N_TO_S_E_TO_W,
    DataOrdering.S_TO_N_W_TO_E,
    DataOrdering.S_TO_N_E_TO_W,
]
COLUMN_MAJOR = [
    DataOrdering.W_TO_E_N_TO_S,
    DataOrdering.W_TO_E_S_TO_N,
    DataOrdering.E_TO_W_N_TO_S,
    DataOrdering.E_TO_W_S_TO_N,
]


def _header(ordering: DataOrdering) -> Header:
    # lat 40..41 (step 1, 2 rows), lon 10..12 (step 1, 3 cols)
    return Header(
        layout_kind=LayoutKind.GRID,
        coordinate_kind=CoordinateKind.GEODETIC,
        coordinate_units=CoordinateUnits.DEG,
        bounds=GridGeodetic(40.0, 41.0, 10.0, 12.0, 1.0, 1.0, 2, 3),
        data_ordering=ordering,
    )


class TestScanTranslation:
    """Tests for scan_to_grid() / grid_to_scan()."""

    @pytest.mark.parametrize("ordering", ROW_MAJOR)
    def test_row_major(self, ordering):
        scan = [(0, 0), (0, 1), (0, 2), (1, 0), (1, 1), (1, 2)]
        assert scan_to_grid(scan, 2, 3, ordering) == GRID

    @pytest.mark.parametrize("ordering", COLUMN_MAJOR)
    def test_column_major(self, ordering):
        """Column-major scans walk down each column first."""
        scan = [(0, 0), (1, 0), (0, 1), (1, 1), (0, 2), (1, 2)]
        assert scan_to_grid(scan, 2, 3, ordering) == GRID

    @pytest.mark.parametrize("ordering", ROW_MAJOR + COLUMN_MAJOR)
    def test_inverse(self, ordering):
        scan = grid_to_scan(GRID, ordering)
        assert scan_to_grid(scan, 2, 3, ordering) == GRID

    def test_wrong_sample_count(self):
        with pytest.raises(ValueError, match="6"):
            scan_to_grid([1, 2, 3], 2, 3, DataOrdering.N_TO_S_W_TO_E)

    def test_sparse_ordering_has_no_scan(self):
        with pytest.raises(ValueError):
            scan_order(DataOrdering.LAT_LON_N)


class TestCellCoordinate:
    """Tests for cell_coordinate() across all eight grid orderings."""

    @pytest.mark.parametrize("ordering, first, last", [
        (DataOrdering.N_TO_S_W_TO_E, (41.0, 10.0), (40.0, 12.0)),
        (DataOrdering.N_TO_S_E_TO_W, (41.0, 12.0), (40.0, 10.0)),
        (DataOrdering.S_TO_N_W_TO_E, (40.0, 10.0), (41.0, 12.0)),
        (DataOrdering.S_TO_N_E_TO_W, (40.0, 12.0), (41.0, 10.0)),
        (DataOrdering.W_TO_E_N_TO_S, (41.0, 10.0), (40.0, 12.0)),
        (DataOrdering.W_TO_E_S_TO_N, (40.0, 10.0), (41.0, 12.0)),
        (DataOrdering.E_TO_W_N_TO_S, (41.0, 12.0), (40.0, 10.0)),
        (DataOrdering.E_TO_W_S_TO_N, (40.0, 12.0), (41.0, 10.0)),
    ])
    def test_corners(self, ordering, first, last):
        header = _header(ordering)
        assert cell_coordinate(header, 0, 0) == pytest.approx(first)
        assert cell_coordinate(header, 1, 2) == pytest.approx(last)

    def test_interior_cell(self):
        header = _header(DataOrdering.N_TO_S_W_TO_E)
        assert cell_coordinate(header, 1, 1) == pytest.approx((40.0, 11.0))

    def test_out_of_range(self):
        with pytest.raises(IndexError):
            cell_coordinate(_header(DataOrdering.N_TO_S_W_TO_E), 2, 0)

    def test_sparse_header_rejected(self):
        header = Header(
            layout_kind=LayoutKind.SPARSE,
            coordinate_kind=CoordinateKind.GEODETIC,
            coordinate_units=CoordinateUnits.DEG,
            bounds=SparseGeodetic(0, 1, 0, 1),
        )
        with pytest.raises(ValueError, match="grid"):
            cell_coordinate(header, 0, 0)

    def test_axis_coordinates(self):
        rows, cols = axis_coordinates(_header(DataOrdering.S_TO_N_E_TO_W))
        assert rows == pytest.approx([40.0, 41.0])
        assert cols == pytest.approx([12.0, 11.0, 10.0])


class TestOrderingCompatibility:
    """Tests for ordering_error() and column_names()."""

    def test_grid_needs_ordering(self):
        assert ordering_error(None, LayoutKind.GRID, CoordinateKind.GEODETIC)

    def test_grid_rejects_sparse_ordering(self):
        assert ordering_error(DataOrdering.LAT_LON_N, LayoutKind.GRID, CoordinateKind.GEODETIC)

    def test_sparse_rejects_grid_ordering(self):
        assert ordering_error(
            DataOrdering.N_TO_S_W_TO_E, LayoutKind.SPARSE, CoordinateKind.GEODETIC,
        )

    def test_sparse_ordering_must_name_coordinate_kind(self):
        assert ordering_error(
            DataOrdering.EAST_NORTH_N, LayoutKind.SPARSE, CoordinateKind.GEODETIC,
        )
        assert ordering_error(
            DataOrdering.EAST_NORTH_N, LayoutKind.SPARSE, CoordinateKind.PROJECTED,
        ) is None

    @pytest.mark.parametrize("ordering", [DataOrdering.N, DataOrdering.ZETA])
    def test_value_column_orderings(self, ordering):
        """Orderings naming only the value column fit any sparse header."""
        for kind in CoordinateKind:
            assert ordering_error(ordering, LayoutKind.SPARSE, kind) is None
        assert ordering_error(ordering, LayoutKind.GRID, CoordinateKind.GEODETIC)

    def test_sparse_ordering_optional(self):
        assert ordering_error(None, LayoutKind.SPARSE, CoordinateKind.PROJECTED) is None

    def test_column_names(self):
        header = Header(
            layout_kind=LayoutKind.SPARSE,
            coordinate_kind=CoordinateKind.GEODETIC,
            coordinate_units=CoordinateUnits.DEG,
            bounds=SparseGeodetic(0, 1, 0, 1),
            data_ordering=DataOrdering.LON_LAT_N,
        )
        assert column_names(header) == ("lon", "lat")
        assert column_names(_header(DataOrdering.N_TO_S_W_TO_E)) == ("lat", "lon")
