"""
Parse options and YAML I/O for isg-format.

``ParseOptions`` holds every knob the parser exposes instead of hard-coding
it: the tolerances used for bounds consistency and nodata equality, the
strictness level, and how Grid bodies are laid out in the text.

Key functions:
- load_options(path) -> ParseOptions: Load and validate from YAML.
- save_options(options, path): Serialize to YAML.

Options are plain values passed into ``loads()``; there is no global
formatting or parsing state.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field

from isg_format.exceptions import OptionsError

logger = logging.getLogger(__name__)


class ParseOptions(BaseModel):
    """Options controlling how an ISG document is parsed and validated."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    bounds_tolerance: float = Field(
        1e-6,
        ge=0,
        description=(
            "Relative tolerance of the `max ~ min + delta * (n - 1)` check. "
            "Rounding of the written decimals is added on top of it."
        ),
    )
    nodata_tolerance: float = Field(
        1e-9,
        ge=0,
        description="Tolerance under which a sample equals the nodata sentinel",
    )
    strict: bool = Field(
        False,
        description=(
            "If True, require `begin_of_head` and every standard ISG 2.0 "
            "header line for the layout/coordinate combination"
        ),
    )
    grid_layout: Literal["value", "row", "auto"] = Field(
        "value",
        description=(
            "'value': one sample per line; 'row': one scan line per text line; "
            "'auto': decided from the first body line"
        ),
    )


def load_options(path: str | Path) -> ParseOptions:
    """Load and validate a parse-options YAML file.

    Raises:
        FileNotFoundError: If the options file does not exist.
        OptionsError: If the file is empty or not a mapping.
        pydantic.ValidationError: If a value fails schema validation.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Options file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    if raw is None:
        raise OptionsError(f"Options file is empty: {path}")
    if not isinstance(raw, dict):
        raise OptionsError(f"Options file must hold a mapping: {path}")
    logger.info("Loaded parse options from %s", path)
    return ParseOptions.model_validate(raw)


def save_options(options: ParseOptions, path: str | Path) -> None:
    """Serialize parse options to YAML."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = options.model_dump(mode="json")
    with open(path, "w", encoding="utf-8") as f:
        f.write("# isg-format parse options\n\n")
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)
    logger.info("Saved parse options to %s", path)
