"""
Header field registry for isg-format.

Every header line names one field.  A ``FieldSpec`` records how that field is
spelled (canonical label plus accepted aliases), which separator the canonical
writer puts after it, and what kind of value it holds.  The registry also
knows which bounds fields belong to each (layout kind, coordinate kind)
combination and the canonical line order of an ISG 2.0 header.

Key functions:
- lookup(label) -> FieldSpec | None: Resolve a label (or alias).
- bounds_keys(layout, coordinate) -> tuple[str, ...]: Bounds fields of a combination.
- canonical_keys(layout, coordinate) -> list[str]: Standard line order.
- header_values(header) -> dict: Field key -> current value of a Header.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Literal

from isg_format.models import (
    CoordinateKind,
    CoordinateUnits,
    DataOrdering,
    DataType,
    DataUnits,
    Header,
    LayoutKind,
    ModelType,
    TideSystem,
    normalize_literal,
)

FieldKind = Literal["text", "enum", "coordinate", "number", "count", "integer", "version"]


@dataclass(frozen=True)
class FieldSpec:
    """Static description of one header field."""
    key: str
    label: str
    kind: FieldKind
    separator: str = ":"
    aliases: tuple[str, ...] = ()
    enum: type | None = None


_SPECS: tuple[FieldSpec, ...] = (
    FieldSpec("model_name", "model name", "text"),
    FieldSpec("model_year", "model year", "text"),
    FieldSpec("model_type", "model type", "enum", enum=ModelType),
    FieldSpec("data_type", "data type", "enum", enum=DataType),
    FieldSpec("data_units", "data units", "enum", enum=DataUnits),
    FieldSpec("layout_kind", "data format", "enum", aliases=("layout kind",), enum=LayoutKind),
    FieldSpec("data_ordering", "data ordering", "enum", enum=DataOrdering),
    FieldSpec("ref_ellipsoid", "ref ellipsoid", "text", aliases=("reference ellipsoid",)),
    FieldSpec("ref_frame", "ref frame", "text", aliases=("reference frame",)),
    FieldSpec("height_datum", "height datum", "text"),
    FieldSpec("tide_system", "tide system", "enum", enum=TideSystem),
    FieldSpec(
        "coordinate_kind", "coord type", "enum",
        aliases=("coordinate kind", "coordinate type"), enum=CoordinateKind,
    ),
    FieldSpec(
        "coordinate_units", "coord units", "enum",
        aliases=("coordinate units",), enum=CoordinateUnits,
    ),
    FieldSpec("map_projection", "map projection", "text"),
    FieldSpec("epsg_code", "EPSG code", "integer", aliases=("epsg",)),
    FieldSpec("lat_min", "lat min", "coordinate", "="),
    FieldSpec("lat_max", "lat max", "coordinate", "="),
    FieldSpec("north_min", "north min", "coordinate", "="),
    FieldSpec("north_max", "north max", "coordinate", "="),
    FieldSpec("lon_min", "lon min", "coordinate", "="),
    FieldSpec("lon_max", "lon max", "coordinate", "="),
    FieldSpec("east_min", "east min", "coordinate", "="),
    FieldSpec("east_max", "east max", "coordinate", "="),
    FieldSpec("delta_lat", "delta lat", "coordinate", "="),
    FieldSpec("delta_lon", "delta lon", "coordinate", "="),
    FieldSpec("delta_north", "delta north", "coordinate", "="),
    FieldSpec("delta_east", "delta east", "coordinate", "="),
    FieldSpec("rows", "nrows", "count", "=", aliases=("rows",)),
    FieldSpec("cols", "ncols", "count", "=", aliases=("cols",)),
    FieldSpec("count", "count", "count", "="),
    FieldSpec("nodata", "nodata", "number", "="),
    FieldSpec("creation_date", "creation date", "text", "="),
    FieldSpec("format_version", "ISG format", "version", "=", aliases=("format version",)),
)

FIELDS: dict[str, FieldSpec] = {spec.key: spec for spec in _SPECS}

_BY_LABEL: dict[str, FieldSpec] = {}
for _spec in _SPECS:
    for _label in (_spec.label, *_spec.aliases):
        _BY_LABEL[normalize_literal(_label)] = _spec

_AXES = {
    CoordinateKind.GEODETIC: ("lat", "lon"),
    CoordinateKind.PROJECTED: ("north", "east"),
}

BOUNDS_FIELD_KEYS = frozenset(
    f"{prefix}{axis}{suffix}"
    for a, b in _AXES.values()
    for axis in (a, b)
    for prefix, suffix in (("", "_min"), ("", "_max"), ("delta_", ""))
) | {"rows", "cols", "count"}

_HEAD_KEYS = (
    "model_name", "model_year", "model_type", "data_type", "data_units",
    "layout_kind", "data_ordering", "ref_ellipsoid", "ref_frame",
    "height_datum", "tide_system", "coordinate_kind", "coordinate_units",
    "map_projection", "epsg_code",
)
_TAIL_KEYS = ("rows", "cols", "nodata", "creation_date", "format_version")


def lookup(label: str) -> FieldSpec | None:
    """Resolve a header label (canonical or alias, any case) to its spec."""
    return _BY_LABEL.get(normalize_literal(label))


def extent_keys(coordinate: CoordinateKind) -> tuple[str, str, str, str]:
    a, b = _AXES[coordinate]
    return (f"{a}_min", f"{a}_max", f"{b}_min", f"{b}_max")


def delta_keys(coordinate: CoordinateKind) -> tuple[str, str]:
    a, b = _AXES[coordinate]
    return (f"delta_{a}", f"delta_{b}")


def bounds_keys(layout: LayoutKind, coordinate: CoordinateKind) -> tuple[str, ...]:
    """Bounds fields that may carry a value for this combination."""
    if layout is LayoutKind.GRID:
        return (*extent_keys(coordinate), *delta_keys(coordinate), "rows", "cols")
    return (*extent_keys(coordinate), "rows", "cols", "count")


def canonical_keys(layout: LayoutKind, coordinate: CoordinateKind) -> list[str]:
    """Standard ISG 2.0 header line order for this combination.

    Sparse headers keep the ``delta`` lines (written as ``---``) and give the
    point count on the ``nrows`` line.
    """
    return [*_HEAD_KEYS, *extent_keys(coordinate), *delta_keys(coordinate), *_TAIL_KEYS]


def required_keys(
    layout: LayoutKind,
    coordinate: CoordinateKind,
    strict: bool = False,
) -> list[str]:
    """Fields whose line must be present.

    In lenient mode only the fields a document cannot be built without are
    required; strict mode asks for every standard line (``---`` allowed for
    the optional ones).  For Sparse headers ``count`` satisfies ``nrows``.
    """
    keys = ["layout_kind", "coordinate_kind", "coordinate_units", *extent_keys(coordinate)]
    if layout is LayoutKind.GRID:
        keys += [*delta_keys(coordinate), "rows", "cols", "data_ordering"]
    if coordinate is CoordinateKind.PROJECTED:
        keys.append("map_projection")
    keys.append("format_version")
    if strict:
        standard = [k for k in canonical_keys(layout, coordinate) if k not in keys]
        if layout is LayoutKind.SPARSE:
            standard = [k for k in standard if not k.startswith("delta_")]
        keys += standard
    return keys


def header_values(header: Header) -> dict[str, Any]:
    """Map every field key to the value the header currently holds."""
    values: dict[str, Any] = {
        key: getattr(header, key)
        for key in (*_HEAD_KEYS, "nodata", "creation_date", "format_version")
    }
    for f in dataclasses.fields(header.bounds):
        if f.name != "kind":
            values[f.name] = getattr(header.bounds, f.name)
    if header.layout_kind is LayoutKind.SPARSE:
        values["rows"] = values["count"]
        values["cols"] = 3
    return values
