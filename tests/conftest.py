"""
Shared test fixtures and path constants for isg-format tests.

All sample file paths are defined here as module-level constants for
easy discovery and modification. If sample files move or new ones are
added, update this file.
"""

from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Sample file paths -- edit here if files move or new ones are added
# ---------------------------------------------------------------------------
DATA_DIR = Path(__file__).resolve().parent / "data"

# Canonical files: writing the parsed document reproduces them byte for byte
GRID_DMS_ISG = DATA_DIR / "grid_geodetic_dms.isg"        # row layout, DMS, comment block
GRID_DEG_ISG = DATA_DIR / "grid_geodetic_deg.isg"        # value layout, rounded decimal bounds
SPARSE_PROJECTED_ISG = DATA_DIR / "sparse_projected.isg"  # padded columns, `---` deltas

# Aliased labels, mixed-case enums, no begin marker
NON_CANONICAL_ISG = DATA_DIR / "non_canonical.isg"

CANONICAL_SAMPLES = [GRID_DMS_ISG, GRID_DEG_ISG, SPARSE_PROJECTED_ISG]


def read_sample(path: Path) -> str:
    with open(path, "r", encoding="utf-8", newline="") as f:
        return f.read()


# ---------------------------------------------------------------------------
# Header text builders
# ---------------------------------------------------------------------------

SCENARIO_A_HEADER = [
    "layout kind: Grid",
    "coordinate kind: Geodetic",
    "coordinate units: deg",
    "lat min: 40.0",
    "lat max: 41.0",
    "lon min: 10.0",
    "lon max: 11.0",
    "delta lat: 0.5",
    "delta lon: 0.5",
    "rows: 3",
    "cols: 3",
    "nodata: -9999",
    "data ordering: N-to-S, W-to-E",
    "format version: 2.0",
]

SCENARIO_A_BODY = ["10.1", "10.2", "10.3", "10.4", "-9999", "10.6", "10.7", "10.8", "10.9"]

SCENARIO_B_HEADER = [
    "layout kind: Sparse",
    "coordinate kind: Projected",
    "coordinate units: meters",
    "map projection: UTM zone 32N",
    "north min: 1000.0",
    "north max: 1000.0",
    "east min: 2000.0",
    "east max: 2001.0",
    "count: 2",
    "nodata: -9999",
    "format version: 2.0",
]

SCENARIO_B_BODY = ["1000.0 2000.0 15.234", "1000.0 2001.0 -9999"]


def replace_line(lines: list[str], prefix: str, new: str | None) -> list[str]:
    """Copy of *lines* with the line starting with *prefix* replaced (or
    dropped when *new* is None)."""
    out = []
    for line in lines:
        if line.startswith(prefix):
            if new is not None:
                out.append(new)
        else:
            out.append(line)
    return out


def document_text(header: list[str], body: list[str], comment: str = "") -> str:
    return (
        comment
        + "begin_of_head ====\n"
        + "\n".join(header)
        + "\nend_of_head ====\n"
        + "".join(line + "\n" for line in body)
    )


@pytest.fixture
def scenario_a_text() -> str:
    return document_text(SCENARIO_A_HEADER, SCENARIO_A_BODY)


@pytest.fixture
def scenario_b_text() -> str:
    return document_text(SCENARIO_B_HEADER, SCENARIO_B_BODY)


# ---------------------------------------------------------------------------
# Pytest markers
# ---------------------------------------------------------------------------
def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (runs against the sample files)",
    )
