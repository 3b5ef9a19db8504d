"""
Model types for isg-format.

A parsed ISG document is a ``Document`` owning exactly one ``Header`` and one
``Data`` value.  All types are frozen dataclasses with named fields; the
polymorphic ones (``DataBounds`` and ``Data``) carry an explicit ``kind``
discriminant so that a generic marshalling adapter (``dataclasses.asdict``,
pydantic ``TypeAdapter``, ...) can represent them without knowing about this
package.

Construction enforces the structural invariants (matching variant tags,
positive steps, rectangular grids, ...) and raises ``ValueError`` when they are
violated: a malformed Document is a programming error, not a data error.
Tolerance-dependent checks (bounds consistency) live in ``validation.py``.

Formatting hints (``HeaderStyle``, ``BodyStyle``) ride along with the values
they describe so the writer can reproduce the source text.  They are excluded
from equality: two documents holding the same values compare equal however
they were formatted.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import ClassVar, Literal, Union

DEFAULT_BEGIN_MARKER = "begin_of_head " + "=" * 48
DEFAULT_END_MARKER = "end_of_head " + "=" * 50
SUPPORTED_VERSION = "2.0"


def normalize_literal(text: str) -> str:
    """Case-fold and collapse whitespace (around commas too) for matching."""
    text = " ".join(text.lower().split())
    return re.sub(r"\s*,\s*", ", ", text)


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class IsgEnum(str, Enum):
    """Enum whose value is the canonical ISG spelling of the literal."""

    @classmethod
    def from_literal(cls, raw: str) -> IsgEnum | None:
        """Match *raw* case-insensitively against spellings and aliases.

        Returns ``None`` when nothing matches.
        """
        key = normalize_literal(raw)
        for member in cls:
            if normalize_literal(member.value) == key:
                return member
        return _ALIASES.get(cls, {}).get(key)


class ModelType(IsgEnum):
    GRAVIMETRIC = "gravimetric"
    GEOMETRIC = "geometric"
    HYBRID = "hybrid"


class DataType(IsgEnum):
    GEOID = "geoid"
    QUASI_GEOID = "quasi-geoid"


class DataUnits(IsgEnum):
    METERS = "meters"
    FEET = "feet"


class LayoutKind(IsgEnum):
    GRID = "grid"
    SPARSE = "sparse"


class DataOrdering(IsgEnum):
    """Scan direction of Grid bodies, or column order of Sparse triples.

    Grid orderings name the outer (slow) axis first: ``N-to-S, W-to-E`` is the
    ISG 2.0 standard, rows from north to south, each row west to east.
    ``N`` and ``zeta`` only name the value column of Sparse triples (geoid
    height or height anomaly); the coordinates keep their usual order.
    """

    N_TO_S_W_TO_E = "N-to-S, W-to-E"
    N_TO_S_E_TO_W = "N-to-S, E-to-W"
    S_TO_N_W_TO_E = "S-to-N, W-to-E"
    S_TO_N_E_TO_W = "S-to-N, E-to-W"
    W_TO_E_N_TO_S = "W-to-E, N-to-S"
    W_TO_E_S_TO_N = "W-to-E, S-to-N"
    E_TO_W_N_TO_S = "E-to-W, N-to-S"
    E_TO_W_S_TO_N = "E-to-W, S-to-N"
    LAT_LON_N = "lat, lon, N"
    LON_LAT_N = "lon, lat, N"
    NORTH_EAST_N = "north, east, N"
    EAST_NORTH_N = "east, north, N"
    N = "N"
    ZETA = "zeta"


class TideSystem(IsgEnum):
    TIDE_FREE = "tide-free"
    MEAN_TIDE = "mean-tide"
    ZERO_TIDE = "zero-tide"


class CoordinateKind(IsgEnum):
    GEODETIC = "geodetic"
    PROJECTED = "projected"


class CoordinateUnits(IsgEnum):
    DEG = "deg"
    DMS = "dms"
    METERS = "meters"
    FEET = "feet"


_ALIASES: dict[type, dict[str, IsgEnum]] = {
    DataType: {
        "geoidheight": DataType.GEOID,
        "geoid height": DataType.GEOID,
        "quasigeoid": DataType.QUASI_GEOID,
        "quasi geoid": DataType.QUASI_GEOID,
        "quasigeoidheight": DataType.QUASI_GEOID,
        "quasi-geoid height": DataType.QUASI_GEOID,
    },
    DataUnits: {"metres": DataUnits.METERS},
    TideSystem: {
        "tidefree": TideSystem.TIDE_FREE,
        "tide free": TideSystem.TIDE_FREE,
        "meantide": TideSystem.MEAN_TIDE,
        "mean tide": TideSystem.MEAN_TIDE,
        "zerotide": TideSystem.ZERO_TIDE,
        "zero tide": TideSystem.ZERO_TIDE,
    },
    CoordinateUnits: {
        "degrees": CoordinateUnits.DEG,
        "degree": CoordinateUnits.DEG,
        "metres": CoordinateUnits.METERS,
    },
}


# ---------------------------------------------------------------------------
# Display hints
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class NumberFormat:
    """How a column of numbers is written.

    Attributes:
        decimals: Fixed decimal places (seconds decimals for DMS), or
            ``None`` for the shortest plain decimal.
        width: Minimum field width, right-aligned (0 = no padding).
        dms: Render as ``D°MM'SS"`` instead of a decimal.
        plus_sign: Prefix non-negative numbers with ``+``.
    """
    decimals: int | None = None
    width: int = 0
    dms: bool = False
    plus_sign: bool = False


@dataclass(frozen=True)
class FieldLine:
    """One header line as it appeared in the source.

    ``label`` keeps the padding that aligns separators; ``lead``/``trail``
    are the whitespace around the value and ``raw`` the value text itself.
    """
    key: str
    label: str
    separator: str
    lead: str = " "
    raw: str = ""
    trail: str = ""


@dataclass(frozen=True)
class HeaderStyle:
    """Source layout of a header: line order, spacing and marker lines.

    ``begin_marker`` is ``None`` when the source had no ``begin_of_head``;
    ``newline`` is the line terminator of the source (LF or CRLF).
    """
    lines: tuple[FieldLine, ...] = ()
    begin_marker: str | None = DEFAULT_BEGIN_MARKER
    end_marker: str = DEFAULT_END_MARKER
    newline: str = "\n"


@dataclass(frozen=True)
class BodyStyle:
    """Source layout of a data body: one ``NumberFormat`` per column."""
    columns: tuple[NumberFormat, ...] = ()
    grid_layout: Literal["value", "row"] = "value"


# ---------------------------------------------------------------------------
# Data bounds
# ---------------------------------------------------------------------------

class _Bounds:
    """Shared capability set of the four ``DataBounds`` variants.

    Subclasses declare ``_axes`` -- the attribute prefixes of the row axis
    (``a``) and the column axis (``b``).
    """

    _axes: ClassVar[tuple[str, str]]
    layout_kind: ClassVar[LayoutKind]
    coordinate_kind: ClassVar[CoordinateKind]

    def extent(self) -> tuple[float, float, float, float]:
        """Return ``(a_min, a_max, b_min, b_max)``."""
        a, b = self._axes
        return (
            getattr(self, f"{a}_min"),
            getattr(self, f"{a}_max"),
            getattr(self, f"{b}_min"),
            getattr(self, f"{b}_max"),
        )

    def __post_init__(self) -> None:
        for name in self.__dataclass_fields__:  # type: ignore[attr-defined]
            if name == "kind" or name in ("rows", "cols", "count"):
                continue
            value = float(getattr(self, name))
            if not math.isfinite(value):
                raise ValueError(f"{type(self).__name__}.{name} must be finite, got {value!r}")
            object.__setattr__(self, name, value)
        a_min, a_max, b_min, b_max = self.extent()
        for axis, lo, hi in ((self._axes[0], a_min, a_max), (self._axes[1], b_min, b_max)):
            if lo > hi:
                raise ValueError(f"{axis}_min ({lo!r}) is greater than {axis}_max ({hi!r})")


class _GridBounds(_Bounds):
    layout_kind = LayoutKind.GRID

    def sampling(self) -> tuple[float, float, int, int]:
        """Return ``(delta_a, delta_b, rows, cols)``."""
        a, b = self._axes
        return (
            getattr(self, f"delta_{a}"),
            getattr(self, f"delta_{b}"),
            self.rows,  # type: ignore[attr-defined]
            self.cols,  # type: ignore[attr-defined]
        )

    def __post_init__(self) -> None:
        super().__post_init__()
        delta_a, delta_b, rows, cols = self.sampling()
        if delta_a <= 0 or delta_b <= 0:
            raise ValueError(f"grid steps must be positive, got {delta_a!r}, {delta_b!r}")
        if rows < 1 or cols < 1:
            raise ValueError(f"grid must have at least one row and column, got {rows}x{cols}")


class _SparseBounds(_Bounds):
    layout_kind = LayoutKind.SPARSE

    def __post_init__(self) -> None:
        super().__post_init__()
        count = self.count  # type: ignore[attr-defined]
        if count is not None and count < 0:
            raise ValueError(f"sparse count must not be negative, got {count}")


@dataclass(frozen=True)
class GridGeodetic(_GridBounds):
    lat_min: float
    lat_max: float
    lon_min: float
    lon_max: float
    delta_lat: float
    delta_lon: float
    rows: int
    cols: int
    kind: Literal["grid_geodetic"] = field(default="grid_geodetic", init=False)

    _axes = ("lat", "lon")
    coordinate_kind = CoordinateKind.GEODETIC


@dataclass(frozen=True)
class GridProjected(_GridBounds):
    north_min: float
    north_max: float
    east_min: float
    east_max: float
    delta_north: float
    delta_east: float
    rows: int
    cols: int
    kind: Literal["grid_projected"] = field(default="grid_projected", init=False)

    _axes = ("north", "east")
    coordinate_kind = CoordinateKind.PROJECTED


@dataclass(frozen=True)
class SparseGeodetic(_SparseBounds):
    lat_min: float
    lat_max: float
    lon_min: float
    lon_max: float
    count: int | None = None
    kind: Literal["sparse_geodetic"] = field(default="sparse_geodetic", init=False)

    _axes = ("lat", "lon")
    coordinate_kind = CoordinateKind.GEODETIC


@dataclass(frozen=True)
class SparseProjected(_SparseBounds):
    north_min: float
    north_max: float
    east_min: float
    east_max: float
    count: int | None = None
    kind: Literal["sparse_projected"] = field(default="sparse_projected", init=False)

    _axes = ("north", "east")
    coordinate_kind = CoordinateKind.PROJECTED


DataBounds = Union[GridGeodetic, GridProjected, SparseGeodetic, SparseProjected]

BOUNDS_VARIANTS: dict[tuple[LayoutKind, CoordinateKind], type] = {
    (LayoutKind.GRID, CoordinateKind.GEODETIC): GridGeodetic,
    (LayoutKind.GRID, CoordinateKind.PROJECTED): GridProjected,
    (LayoutKind.SPARSE, CoordinateKind.GEODETIC): SparseGeodetic,
    (LayoutKind.SPARSE, CoordinateKind.PROJECTED): SparseProjected,
}


# ---------------------------------------------------------------------------
# Data
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GridData:
    """Dense samples: ``values[i][j]`` is the cell at row *i*, column *j*.

    Row 0 / column 0 are the first row / column in the direction declared by
    the header's ``data_ordering``.  ``None`` marks a nodata cell.
    """
    values: tuple[tuple[float | None, ...], ...]
    style: BodyStyle | None = field(default=None, compare=False, repr=False)
    kind: Literal["grid"] = field(default="grid", init=False)

    def __post_init__(self) -> None:
        values = tuple(
            tuple(None if v is None else float(v) for v in row) for row in self.values
        )
        widths = {len(row) for row in values}
        if len(widths) > 1:
            raise ValueError(f"grid rows must all have the same length, got {sorted(widths)}")
        object.__setattr__(self, "values", values)

    @property
    def shape(self) -> tuple[int, int]:
        return len(self.values), (len(self.values[0]) if self.values else 0)


@dataclass(frozen=True)
class SparseData:
    """Scattered samples as ``(coord_a, coord_b, value)`` triples in source order."""
    points: tuple[tuple[float, float, float | None], ...]
    style: BodyStyle | None = field(default=None, compare=False, repr=False)
    kind: Literal["sparse"] = field(default="sparse", init=False)

    def __post_init__(self) -> None:
        points = []
        for point in self.points:
            a, b, value = point
            points.append((float(a), float(b), None if value is None else float(value)))
        object.__setattr__(self, "points", tuple(points))


Data = Union[GridData, SparseData]


# ---------------------------------------------------------------------------
# Header & document
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Header:
    """Validated ISG 2.0 header.

    Construction enforces the rules that do not depend on parse options:
    ``layout_kind`` and ``coordinate_kind`` agree with the ``bounds`` variant,
    a grid header has a grid ``data_ordering`` (a sparse one, if any, fits the
    coordinate kind), a projected header names its ``map_projection`` and the
    version is ``2.0``.
    """
    layout_kind: LayoutKind
    coordinate_kind: CoordinateKind
    coordinate_units: CoordinateUnits
    bounds: DataBounds
    model_name: str | None = None
    model_year: str | None = None
    model_type: ModelType | None = None
    data_type: DataType | None = None
    data_units: DataUnits | None = None
    data_ordering: DataOrdering | None = None
    ref_ellipsoid: str | None = None
    ref_frame: str | None = None
    height_datum: str | None = None
    tide_system: TideSystem | None = None
    map_projection: str | None = None
    epsg_code: int | None = None
    nodata: float | None = None
    creation_date: str | None = None
    format_version: str = SUPPORTED_VERSION
    style: HeaderStyle | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        expected = BOUNDS_VARIANTS[(self.layout_kind, self.coordinate_kind)]
        if type(self.bounds) is not expected:
            raise ValueError(
                f"{self.layout_kind.value} {self.coordinate_kind.value} header needs "
                f"{expected.__name__} bounds, got {type(self.bounds).__name__}"
            )
        # ordering.py imports this module
        from isg_format.ordering import ordering_error

        problem = ordering_error(self.data_ordering, self.layout_kind, self.coordinate_kind)
        if problem:
            raise ValueError(problem)
        if self.coordinate_kind is CoordinateKind.PROJECTED and not self.map_projection:
            raise ValueError("projected header needs a map_projection")
        if self.format_version != SUPPORTED_VERSION:
            raise ValueError(
                f"unsupported format version {self.format_version!r}, expected {SUPPORTED_VERSION}"
            )
        if self.nodata is not None:
            if not math.isfinite(self.nodata):
                raise ValueError(f"nodata must be finite, got {self.nodata!r}")
            object.__setattr__(self, "nodata", float(self.nodata))


@dataclass(frozen=True)
class Document:
    """A complete ISG document: comment block, header and data body.

    A Sparse header without a point count takes it from ``data``.
    """
    header: Header
    data: Data
    comment: str = ""

    def __post_init__(self) -> None:
        header, data = self.header, self.data
        expected = GridData if header.layout_kind is LayoutKind.GRID else SparseData
        if not isinstance(data, expected):
            raise ValueError(
                f"{header.layout_kind.value} header needs {expected.__name__}, "
                f"got {type(data).__name__}"
            )
        if isinstance(data, GridData):
            _, _, rows, cols = header.bounds.sampling()  # type: ignore[union-attr]
            if data.shape != (rows, cols):
                raise ValueError(f"grid data is {data.shape}, header declares {(rows, cols)}")
            has_nodata = any(v is None for row in data.values for v in row)
        else:
            count = header.bounds.count  # type: ignore[union-attr]
            if count is None:
                # a Document always knows its point count
                header = replace(header, bounds=replace(header.bounds, count=len(data.points)))
                object.__setattr__(self, "header", header)
            elif count != len(data.points):
                raise ValueError(f"sparse data has {len(data.points)} points, header declares {count}")
            has_nodata = any(p[2] is None for p in data.points)
        if has_nodata and header.nodata is None:
            raise ValueError("data holds nodata cells but the header declares no nodata sentinel")
