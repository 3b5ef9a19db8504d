"""
Scan-order translation and cell coordinates for isg-format.

A Grid body is a flat sequence of samples in the scan order declared by the
header's ``data ordering`` (``N-to-S, W-to-E`` is the ISG 2.0 standard: rows
from north to south, each row from west to east).  In memory a grid is always
row-major: ``values[i][j]`` with row 0 / column 0 being the first row /
column along the declared directions.  The convention is always read from the
header; nothing here assumes a default.

Key functions:
- scan_to_grid(samples, rows, cols, ordering) -> list[list]: Body order -> rows.
- grid_to_scan(values, ordering) -> list: Rows -> body order.
- cell_coordinate(header, i, j) -> (a, b): Coordinate of a grid cell.
- axis_coordinates(header) -> (a_values, b_values): All row / column coordinates.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, TypeVar

from isg_format.models import CoordinateKind, DataOrdering, Header, LayoutKind

T = TypeVar("T")


@dataclass(frozen=True)
class ScanOrder:
    """Directions of a grid ordering.

    Attributes:
        row_major: Rows (the latitude/northing axis) are the outer loop.
        north_to_south: Row 0 is the northernmost row.
        west_to_east: Column 0 is the westernmost column.
    """
    row_major: bool
    north_to_south: bool
    west_to_east: bool


_SCAN_ORDERS: dict[DataOrdering, ScanOrder] = {
    DataOrdering.N_TO_S_W_TO_E: ScanOrder(True, True, True),
    DataOrdering.N_TO_S_E_TO_W: ScanOrder(True, True, False),
    DataOrdering.S_TO_N_W_TO_E: ScanOrder(True, False, True),
    DataOrdering.S_TO_N_E_TO_W: ScanOrder(True, False, False),
    DataOrdering.W_TO_E_N_TO_S: ScanOrder(False, True, True),
    DataOrdering.W_TO_E_S_TO_N: ScanOrder(False, False, True),
    DataOrdering.E_TO_W_N_TO_S: ScanOrder(False, True, False),
    DataOrdering.E_TO_W_S_TO_N: ScanOrder(False, False, False),
}

# Sparse column order -> (coordinate kind, names of the two coordinate columns)
_SPARSE_ORDERS: dict[DataOrdering, tuple[CoordinateKind, tuple[str, str]]] = {
    DataOrdering.LAT_LON_N: (CoordinateKind.GEODETIC, ("lat", "lon")),
    DataOrdering.LON_LAT_N: (CoordinateKind.GEODETIC, ("lon", "lat")),
    DataOrdering.NORTH_EAST_N: (CoordinateKind.PROJECTED, ("north", "east")),
    DataOrdering.EAST_NORTH_N: (CoordinateKind.PROJECTED, ("east", "north")),
}

# Sparse orderings naming only the value column; coordinates in axis order
_VALUE_ORDERS = frozenset({DataOrdering.N, DataOrdering.ZETA})

_AXIS_NAMES = {
    CoordinateKind.GEODETIC: ("lat", "lon"),
    CoordinateKind.PROJECTED: ("north", "east"),
}


def is_grid_ordering(ordering: DataOrdering) -> bool:
    return ordering in _SCAN_ORDERS


def scan_order(ordering: DataOrdering | None) -> ScanOrder:
    """Directions of a grid ordering.

    Raises:
        ValueError: If *ordering* is absent or a Sparse column order.
    """
    if ordering not in _SCAN_ORDERS:
        raise ValueError(f"not a grid data ordering: {ordering!r}")
    return _SCAN_ORDERS[ordering]


def ordering_error(
    ordering: DataOrdering | None,
    layout: LayoutKind,
    coordinate: CoordinateKind,
) -> str | None:
    """Describe why *ordering* does not fit the combination, or ``None``."""
    if layout is LayoutKind.GRID:
        if ordering is None:
            return "grid header requires a data ordering"
        if ordering not in _SCAN_ORDERS:
            return f"`{ordering.value}` is not a grid data ordering"
        return None
    if ordering is None or ordering in _VALUE_ORDERS:
        return None
    if ordering not in _SPARSE_ORDERS:
        return f"`{ordering.value}` is not a sparse data ordering"
    if _SPARSE_ORDERS[ordering][0] is not coordinate:
        return f"`{ordering.value}` does not name {coordinate.value} coordinates"
    return None


def column_names(header: Header) -> tuple[str, str]:
    """Names of the two coordinate columns (``lat``/``lon`` or ``north``/``east``).

    For Sparse data the order follows the data ordering when one is declared.
    """
    ordering = header.data_ordering
    if header.layout_kind is LayoutKind.SPARSE and ordering in _SPARSE_ORDERS:
        return _SPARSE_ORDERS[ordering][1]
    return _AXIS_NAMES[header.coordinate_kind]


def scan_to_grid(
    samples: Sequence[T],
    rows: int,
    cols: int,
    ordering: DataOrdering,
) -> list[list[T]]:
    """Arrange body samples (in scan order) into row-major rows."""
    if len(samples) != rows * cols:
        raise ValueError(f"expected {rows * cols} samples, got {len(samples)}")
    if scan_order(ordering).row_major:
        return [list(samples[i * cols:(i + 1) * cols]) for i in range(rows)]
    # column-major: sample k sits at row k % rows, column k // rows
    return [list(samples[i::rows]) for i in range(rows)]


def grid_to_scan(values: Sequence[Sequence[T]], ordering: DataOrdering) -> list[T]:
    """Flatten row-major rows back into the body's scan order."""
    if scan_order(ordering).row_major:
        return [v for row in values for v in row]
    cols = len(values[0]) if values else 0
    return [row[j] for j in range(cols) for row in values]


def cell_coordinate(header: Header, i: int, j: int) -> tuple[float, float]:
    """Coordinate ``(a, b)`` of grid cell ``(i, j)``.

    ``a`` is latitude/northing and ``b`` longitude/easting.  Rows start at
    ``a_max`` for N-to-S orderings (``a_min`` otherwise) and columns at
    ``b_min`` for W-to-E orderings (``b_max`` otherwise).

    Raises:
        ValueError: If the header does not describe a Grid.
        IndexError: If ``(i, j)`` lies outside the grid.
    """
    if header.layout_kind is not LayoutKind.GRID:
        raise ValueError("cell coordinates are only defined for grid headers")
    a_min, a_max, b_min, b_max = header.bounds.extent()
    delta_a, delta_b, rows, cols = header.bounds.sampling()  # type: ignore[union-attr]
    if not (0 <= i < rows and 0 <= j < cols):
        raise IndexError(f"cell ({i}, {j}) outside a {rows}x{cols} grid")
    order = scan_order(header.data_ordering)
    a = a_max - i * delta_a if order.north_to_south else a_min + i * delta_a
    b = b_min + j * delta_b if order.west_to_east else b_max - j * delta_b
    return a, b


def axis_coordinates(header: Header) -> tuple[list[float], list[float]]:
    """Coordinates of every row and every column of a grid header."""
    _, _, rows, cols = header.bounds.sampling()  # type: ignore[union-attr]
    a_values = [cell_coordinate(header, i, 0)[0] for i in range(rows)]
    b_values = [cell_coordinate(header, 0, j)[1] for j in range(cols)]
    return a_values, b_values
