"""
Tests for the command-line wrapper.

Modules tested:
- build_parser() and the argument validators
- build_config()
- main()
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
import tomlkit
from PIL import Image

import image_merge.cli as im_cli
from image_merge.job import FixedSize, FromNthImage

from conftest import GREEN, RED

if TYPE_CHECKING:
    from collections.abc import Callable

    from pytest_mock import MockerFixture


class TestValidators:
    def test_positive_int(self) -> None:
        assert im_cli.positive_int("3") == 3  # noqa: PLR2004
        with pytest.raises(ValueError, match="positive"):
            im_cli.positive_int("0")
        with pytest.raises(ValueError, match="integer"):
            im_cli.positive_int("x")

    def test_non_negative_int(self) -> None:
        assert im_cli.non_negative_int("0") == 0
        with pytest.raises(ValueError, match="negative"):
            im_cli.non_negative_int("-1")

    @pytest.mark.parametrize(
        ("text", "message"),
        [("10", "WxH"), ("axb", "integer"), ("0x5", "positive")],
    )
    def test_size_2d_errors(self, text: str, message: str) -> None:
        with pytest.raises(ValueError, match=message):
            im_cli.size_2d(text)

    def test_size_2d(self) -> None:
        assert im_cli.size_2d("64X32") == (64, 32)

    def test_parser_reports_validator_errors(
        self,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        parser = im_cli.build_parser()
        with pytest.raises(SystemExit) as exc_info:
            parser.parse_args(["a.png", "--columns", "0"])
        assert exc_info.value.code == 2  # noqa: PLR2004
        assert "must be positive" in capsys.readouterr().err


class TestBuildConfig:
    def _args(self, *argv: str) -> argparse.Namespace:
        return im_cli.build_parser().parse_args(list(argv))

    def test_positional_sources(self) -> None:
        cfg = im_cli.build_config(self._args(
            "a.png", "b.png", "--columns", "2", "--rows", "1",
            "--grid-size", "8x4", "--out", "x.png", "--quality", "70",
            "--timeout", "5",
        ))
        job = cfg.to_job()
        assert [g.path for g in job.grids] == ["a.png", "b.png"]
        assert (job.columns, job.rows) == (2, 1)
        assert job.sizing == FixedSize(8, 4)
        assert cfg.output.path == "x.png"
        assert cfg.output.quality == 70  # noqa: PLR2004
        assert cfg.remote.timeout_seconds == 5.0  # noqa: PLR2004

    def test_config_file_with_overrides(self, tmp_path: Path) -> None:
        path = tmp_path / "job.toml"
        path.write_text(tomlkit.dumps({
            "grid": {"columns": 1, "rows": 1, "cell_size": [4, 4]},
            "cells": [{"source": "a.png"}],
            "output": {"path": "from_file.jpg"},
        }), encoding="utf-8")
        cfg = im_cli.build_config(self._args(
            "--config", str(path), "--size-from", "0", "--base-dir", "imgs",
        ))
        job = cfg.to_job()
        assert job.sizing == FromNthImage(0)
        assert job.base_dir == "imgs"
        assert cfg.output.path == "from_file.jpg"


class TestMain:
    def test_merges_and_saves(
        self,
        make_image_file: Callable[..., Path],
        tmp_path: Path,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        a = make_image_file("a.png", RED, (16, 9))
        b = make_image_file("b.png", GREEN, (16, 9))
        out = tmp_path / "out" / "merged.png"
        code = im_cli.main([
            str(a), str(b), "--columns", "2", "--rows", "1",
            "--out", str(out),
        ])
        assert code == 0
        with Image.open(out) as img:
            assert img.size == (32, 9)
            assert img.getpixel((20, 4)) == (0, 255, 0, 255)
        assert "saved to" in caplog.text

    def test_config_run_writes_jpeg(
        self,
        make_image_file: Callable[..., Path],
        tmp_path: Path,
    ) -> None:
        make_image_file("a.png", RED)
        out = tmp_path / "result.jpg"
        job_file = tmp_path / "job.toml"
        job_file.write_text(tomlkit.dumps({
            "grid": {"columns": 1, "rows": 1, "base_dir": str(tmp_path)},
            "cells": [{"source": "a.png", "background": "white"}],
            "output": {"path": str(out), "quality": 80},
        }), encoding="utf-8")
        assert im_cli.main(["--config", str(job_file)]) == 0
        with Image.open(out) as img:
            assert img.format == "JPEG"
            assert img.size == (10, 10)

    def test_unknown_background_is_usage_error(
        self,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        job_file = tmp_path / "job.toml"
        job_file.write_text(tomlkit.dumps({
            "cells": [{"source": "a.png", "background": "nope"}],
        }), encoding="utf-8")
        with pytest.raises(SystemExit) as exc_info:
            im_cli.main(["--config", str(job_file)])
        assert exc_info.value.code == 2  # noqa: PLR2004
        assert "Unknown background color" in capsys.readouterr().err

    def test_out_directory_gets_default_name(
        self,
        make_image_file: Callable[..., Path],
        tmp_path: Path,
    ) -> None:
        a = make_image_file("a.png", RED)
        out_dir = tmp_path / "renders"
        out_dir.mkdir()
        code = im_cli.main([
            str(a), "--columns", "1", "--rows", "1", "--out", str(out_dir),
        ])
        assert code == 0
        with Image.open(out_dir / "merged_1x1.jpg") as img:
            assert img.format == "JPEG"

    def test_merge_failure_returns_one(
        self,
        tmp_path: Path,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        code = im_cli.main([
            str(tmp_path / "missing.png"), "--columns", "1", "--rows", "1",
            "--out", str(tmp_path / "x.png"),
        ])
        assert code == 1
        assert "Merge failed" in caplog.text
        assert not (tmp_path / "x.png").exists()

    @pytest.mark.parametrize(
        "argv",
        [
            [],
            ["a.png", "--config", "job.toml"],
            ["a.png", "--grid-size", "4x4", "--size-from", "0"],
            ["--config", "does_not_exist.toml"],
            ["a.png", "--quality", "100"],
        ],
    )
    def test_usage_errors(self, argv: list[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            im_cli.main(argv)
        assert exc_info.value.code == 2  # noqa: PLR2004

    def test_verbose_enables_debug(self, mocker: MockerFixture) -> None:
        setup = mocker.patch.object(im_cli, "setup_logger")
        mocker.patch.object(im_cli, "run")
        assert im_cli.main(["a.png", "-v"]) == 0
        setup.assert_called_once()
        assert setup.call_args.kwargs["level"] == 10  # noqa: PLR2004
