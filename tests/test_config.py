"""
Unit tests for the job file config module.

Covers:
- Successful loading of a valid job TOML
- Default fallbacks for missing sections
- Error handling for missing files and invalid values
- Mapping of the config onto a MergeJob
"""
import tempfile
from typing import Any

import pytest
import tomlkit
from pydantic import ValidationError

import image_merge.config as im_config
from image_merge.config_defaults import (
    DEFAULT_COLUMNS,
    DEFAULT_JPEG_QUALITY,
    DEFAULT_OUTPUT_PATH,
    DEFAULT_ROWS,
    DEFAULT_TIMEOUT_SECONDS,
)
from image_merge.job import DefaultSize, FixedSize, FromNthImage, Overlay


def create_toml_file(data: dict[str, Any]) -> str:
    """Write a TOML document to a temporary file and return its path."""
    doc = tomlkit.document()
    doc.update(data)
    toml_str = tomlkit.dumps(doc)

    with tempfile.NamedTemporaryFile(
        delete=False,
        suffix=".toml",
        mode="w",
        encoding="utf-8",
    ) as temp:
        temp.write(toml_str)
        return temp.name


def test_load_valid_config() -> None:
    path = create_toml_file({
        "grid": {
            "columns": 3,
            "rows": 1,
            "base_dir": "imgs",
            "cell_size": [64, 32],
        },
        "cells": [
            {
                "source": "a.png",
                "background": "#102030",
                "overlays": [{"source": "badge.png", "offset": [5, 6]}],
            },
            {"source": "b.jpg", "background": [1, 2, 3]},
            {"source": "https://example.com/c.png"},
        ],
        "remote": {"timeout_seconds": 12.5},
        "output": {"path": "out/merged.png", "quality": 90},
    })
    cfg = im_config.ConfigLoader.load(path)

    assert cfg.grid.columns == 3  # noqa: PLR2004
    assert cfg.grid.cell_size == (64, 32)
    assert cfg.remote.timeout_seconds == 12.5  # noqa: PLR2004
    assert cfg.output.path == "out/merged.png"
    assert cfg.output.quality == 90  # noqa: PLR2004

    job = cfg.to_job()
    assert job.columns == 3  # noqa: PLR2004
    assert job.rows == 1
    assert job.base_dir == "imgs"
    assert job.sizing == FixedSize(64, 32)
    assert [g.path for g in job.grids] == [
        "a.png", "b.jpg", "https://example.com/c.png",
    ]
    assert job.grids[0].background_color == "#102030"
    assert job.grids[0].overlays == (
        Overlay(path="badge.png", offset_x=5, offset_y=6),
    )
    assert job.grids[1].background_color == (1, 2, 3)
    assert job.grids[2].background_color is None
    assert job.uses_remote()


def test_missing_file_raises() -> None:
    with pytest.raises(FileNotFoundError):
        im_config.ConfigLoader.load("nonexistent_job.toml")


def test_partial_config_uses_defaults() -> None:
    path = create_toml_file({"cells": [{"source": "a.png"}]})
    cfg = im_config.ConfigLoader.load(path)

    assert cfg.grid.columns == DEFAULT_COLUMNS
    assert cfg.grid.rows == DEFAULT_ROWS
    assert cfg.remote.timeout_seconds == DEFAULT_TIMEOUT_SECONDS
    assert cfg.output.path == DEFAULT_OUTPUT_PATH
    assert cfg.output.quality == DEFAULT_JPEG_QUALITY
    assert cfg.to_job().sizing == DefaultSize()


def test_size_from() -> None:
    cfg = im_config.MergeConfig.model_validate(
        {"grid": {"size_from": 2}, "cells": [{"source": "a.png"}]},
    )
    assert cfg.to_job().sizing == FromNthImage(2)


@pytest.mark.parametrize(
    "data",
    [
        {"grid": {"columns": 0}},
        {"grid": {"cell_size": [10, 10], "size_from": 0}},
        {"grid": {"cell_size": [0, 10]}},
        {"grid": {"size_from": -1}},
        {"cells": [{"source": "a.png", "background": [1, 2]}]},
        {"cells": [{"source": "a.png", "background": [1, 2, 300]}]},
        {"cells": [{"source": "a.png", "background": "nope"}]},
        {"cells": [{"background": "red"}]},
        {"remote": {"timeout_seconds": 0}},
        {"output": {"quality": 0}},
        {"output": {"quality": 101}},
    ],
)
def test_invalid_values(data: dict[str, Any]) -> None:
    with pytest.raises(ValidationError):
        im_config.MergeConfig.model_validate(data)


def test_empty_config_builds_empty_job() -> None:
    job = im_config.MergeConfig.model_validate({}).to_job()
    assert job.grids == ()
