"""
Tabular views of ISG documents.

Key functions:
- to_frame(document) -> pd.DataFrame: Long form, one row per sample.
- to_array(document) -> np.ndarray: ``rows x cols`` grid (Grid documents only).

Nodata samples become ``NaN`` in both views.  Column names follow the
coordinate kind (``lat``/``lon`` or ``north``/``east``); Sparse frames keep
the column order of the data ordering when the header declares one.
"""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd

from isg_format.models import Document, GridData
from isg_format.ordering import axis_coordinates, column_names

logger = logging.getLogger(__name__)


def to_array(document: Document) -> np.ndarray:
    """Grid values as a float64 array, ``values[i][j]`` at ``[i, j]``.

    Raises:
        ValueError: If the document holds Sparse data.
    """
    data = document.data
    if not isinstance(data, GridData):
        raise ValueError("to_array() needs a grid document; use to_frame() for sparse data")
    rows, cols = data.shape
    return np.array(
        [[np.nan if v is None else v for v in row] for row in data.values],
        dtype=np.float64,
    ).reshape(rows, cols)


def to_frame(document: Document) -> pd.DataFrame:
    """Long-form DataFrame with two coordinate columns and ``value``."""
    header, data = document.header, document.data
    first, second = column_names(header)

    if isinstance(data, GridData):
        rows, cols = data.shape
        a_values, b_values = axis_coordinates(header)
        df = pd.DataFrame({
            first: np.repeat(np.asarray(a_values, dtype=np.float64), cols),
            second: np.tile(np.asarray(b_values, dtype=np.float64), rows),
            "value": to_array(document).ravel(),
        })
    else:
        points = data.points
        df = pd.DataFrame({
            first: np.array([p[0] for p in points], dtype=np.float64),
            second: np.array([p[1] for p in points], dtype=np.float64),
            "value": np.array(
                [np.nan if p[2] is None else p[2] for p in points], dtype=np.float64,
            ),
        })

    logger.debug("Built %d-row frame (%s, %s, value)", len(df), first, second)
    return df
