"""Tests for the ocifkit command line."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from ocifkit.cli import build_parser, format_error, main
from ocifkit.models.errors import LocatedError
from ocifkit.settings import Settings
from tests.conftest import MISSING_ID_DOCUMENT, SAMPLE_DOCUMENT


@pytest.fixture
def sample_file(tmp_path: Path) -> Path:
    path = tmp_path / "sample.ocif.json"
    path.write_text(SAMPLE_DOCUMENT, encoding="utf-8")
    return path


@pytest.fixture
def invalid_file(tmp_path: Path) -> Path:
    path = tmp_path / "invalid.ocif.json"
    path.write_text(MISSING_ID_DOCUMENT, encoding="utf-8")
    return path


class TestFormatError:
    def test_with_details_and_context(self) -> None:
        error = LocatedError(
            path="/nodes/0",
            message="'id' is a required property",
            line=4,
            column=5,
            details="Required property missing: id",
            context="{",
        )
        assert format_error("doc.json", error) == [
            "doc.json:4:5: /nodes/0: 'id' is a required property (Required property missing: id)",
            "    {",
        ]

    def test_minimal(self) -> None:
        error = LocatedError(path="/", message="Invalid JSON format")
        assert format_error("x", error) == ["x:1:1: /: Invalid JSON format"]


class TestValidateCommand:
    def test_valid(self, sample_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["validate", str(sample_file)]) == 0
        assert f"✅ {sample_file} is valid" in capsys.readouterr().out

    def test_invalid(self, invalid_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["validate", str(invalid_file)]) == 1
        err = capsys.readouterr().err
        assert f"{invalid_file}:4:5: /nodes/0: 'id' is a required property" in err
        assert "1 validation error(s)" in err

    def test_missing_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["validate", str(tmp_path / "nope.json")]) == 2
        assert "❌" in capsys.readouterr().err


class TestConvertCommand:
    def test_to_stdout(self, sample_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["convert", str(sample_file), "-f", "jsoncanvas"]) == 0
        captured = capsys.readouterr()
        assert json.loads(captured.out)["edges"][0]["label"] == "flow"
        assert "1 relation(s) skipped" in captured.err

    def test_to_file(
        self, sample_file: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        out = tmp_path / "out.svg"
        assert main(["convert", str(sample_file), "-o", str(out)]) == 0
        assert out.read_text(encoding="utf-8").startswith("<?xml")
        assert f"✅ Converted to {out}" in capsys.readouterr().err

    def test_invalid_document(
        self, invalid_file: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert main(["convert", str(invalid_file)]) == 1
        assert "cannot convert an invalid document" in capsys.readouterr().err

    def test_default_format_from_environment(
        self,
        sample_file: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.setenv("OCIF_DEFAULT_FORMAT", "tldraw")
        assert main(["convert", str(sample_file)]) == 0
        assert "tldrawFileFormatVersion" in json.loads(capsys.readouterr().out)

    def test_unsupported_default_format(
        self,
        sample_file: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.setenv("OCIF_DEFAULT_FORMAT", "pdf")
        assert main(["convert", str(sample_file)]) == 2
        assert "Unsupported format 'pdf'" in capsys.readouterr().err

    def test_format_choices(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["convert", "x.json", "-f", "pdf"])


class TestSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("OCIF_LOCATOR", raising=False)
        settings = Settings(_env_file=None)
        assert settings.locator == "scan"
        assert settings.default_format == "svg"
        assert settings.max_depth == 64

    def test_environment_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OCIF_LOCATOR", "span")
        monkeypatch.setenv("OCIF_ESCAPE_TEXT", "true")
        settings = Settings(_env_file=None)
        assert settings.locator == "span"
        assert settings.escape_text is True

    def test_rejects_unknown_locator(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OCIF_LOCATOR", "regex")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)
