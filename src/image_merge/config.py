"""
Configuration schema and loader for merge job files.

Defines Pydantic models mirroring the sections of a job TOML file and a
tomlkit-based loader with validation support.
"""

from pathlib import Path

import tomlkit
from pydantic import BaseModel, Field, field_validator, model_validator

from image_merge.config_defaults import (
    DEFAULT_COLUMNS,
    DEFAULT_JPEG_QUALITY,
    DEFAULT_OUTPUT_PATH,
    DEFAULT_ROWS,
    DEFAULT_TIMEOUT_SECONDS,
)
from image_merge.constants import JPEG_QUALITY_MAX, JPEG_QUALITY_MIN
from image_merge.job import (
    DefaultSize,
    FixedSize,
    FromNthImage,
    Grid,
    MergeJob,
    Overlay,
    SizingPolicy,
    check_color,
)
from image_merge.type_defs import Color


def _color_value(value: str | list[int] | None) -> Color | None:
    if value is None or isinstance(value, str):
        return value
    return tuple(value)  # type: ignore[return-value]


class GridConfig(BaseModel):
    """Grid shape, base directory, and cell sizing."""

    columns: int = Field(DEFAULT_COLUMNS, ge=1)
    rows: int = Field(DEFAULT_ROWS, ge=1)
    base_dir: str = ""
    cell_size: tuple[int, int] | None = None
    size_from: int | None = Field(None, ge=0)

    @model_validator(mode="after")
    def check_single_sizing(self) -> "GridConfig":
        if self.cell_size is not None and self.size_from is not None:
            msg = "cell_size and size_from are mutually exclusive"
            raise ValueError(msg)
        if self.cell_size is not None and min(self.cell_size) <= 0:
            msg = "cell_size must be positive"
            raise ValueError(msg)
        return self

    def sizing(self) -> SizingPolicy:
        """Return the sizing policy these settings describe."""
        if self.cell_size is not None:
            return FixedSize(*self.cell_size)
        if self.size_from is not None:
            return FromNthImage(self.size_from)
        return DefaultSize()


class OverlayConfig(BaseModel):
    """One overlay drawn over a cell."""

    source: str
    offset: tuple[int, int] = (0, 0)

    def to_overlay(self) -> Overlay:
        """Build the job-level overlay."""
        return Overlay(
            path=self.source,
            offset_x=self.offset[0],
            offset_y=self.offset[1],
        )


class CellConfig(BaseModel):
    """One top-level cell of the grid."""

    source: str
    background: str | list[int] | None = None
    overlays: list[OverlayConfig] = Field(default_factory=list)

    @field_validator("background")
    @classmethod
    def check_background(
        cls,
        value: str | list[int] | None,
    ) -> str | list[int] | None:
        color = _color_value(value)
        if color is not None:
            check_color(color)
        return value

    def to_grid(self) -> Grid:
        """Build the job-level grid cell."""
        return Grid(
            path=self.source,
            background_color=_color_value(self.background),
            overlays=tuple(o.to_overlay() for o in self.overlays),
        )


class RemoteConfig(BaseModel):
    """Settings for fetching http(s) sources."""

    timeout_seconds: float = Field(DEFAULT_TIMEOUT_SECONDS, gt=0)


class OutputConfig(BaseModel):
    """Where and how the merged canvas is written."""

    path: str = Field(DEFAULT_OUTPUT_PATH)
    quality: int = Field(
        DEFAULT_JPEG_QUALITY,
        ge=JPEG_QUALITY_MIN,
        le=JPEG_QUALITY_MAX,
    )


class MergeConfig(BaseModel):
    """
    Root configuration object combining all supported sections.

    Mirrors the structure of a job TOML file.
    """

    grid: GridConfig = Field(
        default_factory=lambda: GridConfig.model_validate({}),
    )
    cells: list[CellConfig] = Field(default_factory=list)
    remote: RemoteConfig = Field(
        default_factory=lambda: RemoteConfig.model_validate({}),
    )
    output: OutputConfig = Field(
        default_factory=lambda: OutputConfig.model_validate({}),
    )

    def to_job(self) -> MergeJob:
        """Build the immutable merge job described by this config."""
        return MergeJob(
            grids=tuple(cell.to_grid() for cell in self.cells),
            columns=self.grid.columns,
            rows=self.grid.rows,
            base_dir=self.grid.base_dir,
            sizing=self.grid.sizing(),
        )


class ConfigLoader:
    """
    Loads and parses a TOML job file into a typed config object.

    Falls back to defaults for any missing subsections or fields.
    """

    @staticmethod
    def load(path: str) -> MergeConfig:
        """Load and validate a merge job file."""
        config_path = Path(path)
        if not config_path.is_file():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)

        with config_path.open("r", encoding="utf-8") as f:
            doc = tomlkit.load(f)

        return MergeConfig.model_validate(doc.unwrap())
