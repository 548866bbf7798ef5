"""Tests for settings loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest

import bqcolumns.errors as errors
import bqcolumns.settings as settings


class TestLoadSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("BQCOLUMNS_QUIET", raising=False)
        config = settings.load_settings()

        assert config.quiet is False
        assert config.log_level == "WARNING"
        assert config.compression == "snappy"
        assert config.preview_rows == 10

    def test_yaml_file(self, tmp_path: Path) -> None:
        path = tmp_path / "bqcolumns.yaml"
        path.write_text("quiet: true\nlog_level: debug\ncompression: none\npreview_rows: 3\n")

        config = settings.load_settings(path)

        assert config.quiet is True
        assert config.log_level == "DEBUG"
        assert config.parquet_compression is None
        assert config.preview_rows == 3

    def test_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BQCOLUMNS_COMPRESSION", "zstd")

        assert settings.load_settings().parquet_compression == "zstd"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(errors.ConfigNotFoundError):
            settings.load_settings(tmp_path / "missing.yaml")

    def test_unknown_key(self, tmp_path: Path) -> None:
        path = tmp_path / "bqcolumns.yaml"
        path.write_text("threads: 4\n")

        with pytest.raises(errors.ConfigValidationError, match="threads"):
            settings.load_settings(path)

    def test_bad_log_level(self, tmp_path: Path) -> None:
        path = tmp_path / "bqcolumns.yaml"
        path.write_text("log_level: LOUD\n")

        with pytest.raises(errors.ConfigValidationError, match="log_level"):
            settings.load_settings(path)

    def test_negative_preview(self, tmp_path: Path) -> None:
        path = tmp_path / "bqcolumns.yaml"
        path.write_text("preview_rows: -1\n")

        with pytest.raises(errors.ConfigValidationError):
            settings.load_settings(path)

    def test_quoted_number_rejected(self, tmp_path: Path) -> None:
        """Strict validation does not coerce strings to numbers."""
        path = tmp_path / "bqcolumns.yaml"
        path.write_text('preview_rows: "3"\n')

        with pytest.raises(errors.ConfigValidationError, match="preview_rows"):
            settings.load_settings(path)
