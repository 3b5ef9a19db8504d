"""
Unit tests for tabular views (isg_format.frame).
"""

from __future__ import annotations

import math

import numpy as np
import pytest

import isg_format
from isg_format.frame import to_array, to_frame
from isg_format.models import (
    CoordinateKind,
    CoordinateUnits,
    DataOrdering,
    Document,
    Header,
    LayoutKind,
    SparseData,
    SparseGeodetic,
)
from tests.conftest import SPARSE_PROJECTED_ISG, read_sample


class TestToArray:
    """Tests for to_array()."""

    def test_grid(self, scenario_a_text):
        arr = to_array(isg_format.loads(scenario_a_text))
        assert arr.shape == (3, 3)
        assert arr.dtype == np.float64
        assert arr[0, 0] == 10.1
        assert math.isnan(arr[1, 1])

    def test_sparse_rejected(self, scenario_b_text):
        with pytest.raises(ValueError, match="to_frame"):
            to_array(isg_format.loads(scenario_b_text))


class TestToFrame:
    """Tests for to_frame()."""

    def test_grid(self, scenario_a_text):
        df = to_frame(isg_format.loads(scenario_a_text))
        assert list(df.columns) == ["lat", "lon", "value"]
        assert len(df) == 9
        assert df.iloc[0].tolist() == [41.0, 10.0, 10.1]
        assert df.iloc[4]["lat"] == pytest.approx(40.5)
        assert df.iloc[4]["lon"] == pytest.approx(10.5)
        assert math.isnan(df.iloc[4]["value"])
        assert df.iloc[8].tolist() == [40.0, 11.0, 10.9]

    def test_sparse(self, scenario_b_text):
        df = to_frame(isg_format.loads(scenario_b_text))
        assert list(df.columns) == ["north", "east", "value"]
        assert df["value"].iloc[0] == 15.234
        assert df["value"].isna().tolist() == [False, True]

    def test_sparse_sample(self):
        df = to_frame(isg_format.loads(read_sample(SPARSE_PROJECTED_ISG)))
        assert len(df) == 4
        assert df["north"].tolist() == [4500000.0, 4500000.0, 4502000.0, 4502000.0]
        assert int(df["value"].isna().sum()) == 1

    def test_sparse_column_order_follows_ordering(self):
        header = Header(
            layout_kind=LayoutKind.SPARSE,
            coordinate_kind=CoordinateKind.GEODETIC,
            coordinate_units=CoordinateUnits.DEG,
            bounds=SparseGeodetic(40.0, 41.0, 10.0, 11.0),
            data_ordering=DataOrdering.LON_LAT_N,
        )
        doc = Document(header=header, data=SparseData(points=[(10.5, 40.5, 1.0)]))
        df = to_frame(doc)
        assert list(df.columns) == ["lon", "lat", "value"]
        assert df.iloc[0].tolist() == [10.5, 40.5, 1.0]
