"""Tests for the tokensync command line."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
from typer.testing import CliRunner

from tokensync import __version__
from tokensync.cli import app
from tokensync.logging import ROOT_LOGGER

runner = CliRunner()

DOCUMENT = {
    "name": "Tokens",
    "paintStyles": [
        {"name": "Brand/Primary", "paints": [{"type": "SOLID", "color": {"r": 1, "g": 0, "b": 0}}]}
    ],
    "textStyles": [
        {"name": "Text/Body", "fontName": {"family": "Inter", "style": "Regular"}, "fontSize": 16}
    ],
    "variableCollections": [
        {
            "id": "c1",
            "name": "Theme",
            "modes": [{"modeId": "m1", "name": "Light"}, {"modeId": "m2", "name": "Dark"}],
        }
    ],
    "variables": [
        {
            "id": "v1",
            "name": "Color/Primary",
            "resolvedType": "COLOR",
            "variableCollectionId": "c1",
            "valuesByMode": {"m1": {"r": 0, "g": 0, "b": 0}, "m2": {"r": 1, "g": 1, "b": 1}},
        }
    ],
}


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    yield tmp_path
    root = logging.getLogger(ROOT_LOGGER)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()


@pytest.fixture
def doc_file(workdir: Path) -> Path:
    path = workdir / "document.json"
    path.write_text(json.dumps(DOCUMENT), encoding="utf-8")
    return path


class TestExtract:
    def test_writes_full_payload(self, doc_file: Path, workdir: Path) -> None:
        out = workdir / "out" / "data.json"

        result = runner.invoke(app, ["extract", str(doc_file), "-o", str(out)])

        assert result.exit_code == 0, result.output
        data = json.loads(out.read_text(encoding="utf-8"))
        assert data["styles"]["_meta"]["fileName"] == "Tokens"
        assert data["styles"]["paintStyles"][0]["paints"][0]["color"]["hex"] == "#FF0000"
        variable = data["variables"]["collections"][0]["variables"][0]
        assert variable["valuesByMode"]["Dark"]["hex"] == "#FFFFFF"

    def test_invalid_document(self, workdir: Path) -> None:
        bad = workdir / "bad.json"
        bad.write_text("{broken", encoding="utf-8")

        result = runner.invoke(app, ["extract", str(bad)])

        assert result.exit_code == 1

    def test_missing_document(self, workdir: Path) -> None:
        result = runner.invoke(app, ["extract", str(workdir / "nope.json")])

        assert result.exit_code != 0


class TestExport:
    def test_dtcg(self, doc_file: Path, workdir: Path) -> None:
        out = workdir / "tokens.json"

        result = runner.invoke(app, ["export", str(doc_file), "-o", str(out)])

        assert result.exit_code == 0, result.output
        tokens = json.loads(out.read_text(encoding="utf-8"))
        assert tokens["Color"]["Primary"] == {"$type": "color", "$value": "#000000"}
        assert tokens["color"]["Brand"]["Primary"]["$value"] == "#FF0000"

    def test_dtcg_mode(self, doc_file: Path, workdir: Path) -> None:
        out = workdir / "tokens.json"

        runner.invoke(app, ["export", str(doc_file), "--mode", "Dark", "-o", str(out)])

        tokens = json.loads(out.read_text(encoding="utf-8"))
        assert tokens["Color"]["Primary"]["$value"] == "#FFFFFF"

    def test_css(self, doc_file: Path, workdir: Path) -> None:
        out = workdir / "tokens.css"

        result = runner.invoke(app, ["export", str(doc_file), "--format", "css", "-o", str(out)])

        assert result.exit_code == 0, result.output
        css = out.read_text(encoding="utf-8")
        assert "--color-primary: #000000;" in css
        assert '[data-mode="dark"]' in css

    def test_json(self, doc_file: Path, workdir: Path) -> None:
        out = workdir / "variables.json"

        runner.invoke(app, ["export", str(doc_file), "-f", "json", "-o", str(out)])

        data = json.loads(out.read_text(encoding="utf-8"))
        assert data["_meta"]["totalVariables"] == 1


class TestDocs:
    def test_style_outline(self, doc_file: Path) -> None:
        result = runner.invoke(app, ["docs", str(doc_file)])

        assert result.exit_code == 0, result.output
        assert "Brand Documentation" in result.output
        assert "Documentation generated — 2 groups" in result.output

    def test_variable_outline(self, doc_file: Path) -> None:
        result = runner.invoke(app, ["docs", str(doc_file), "--variables"])

        assert result.exit_code == 0, result.output
        assert "Color Variables" in result.output
        assert "Variable documentation generated — 1 variables in 1 group" in result.output


class TestConfigAndVersion:
    def test_version(self, workdir: Path) -> None:
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert f"tokensync {__version__}" in result.output

    def test_invalid_config_exits(self, workdir: Path) -> None:
        (workdir / "tokensync.toml").write_text("[sync]\ndebounce_seconds = -1", encoding="utf-8")

        result = runner.invoke(app, ["version"])

        assert result.exit_code == 2

    def test_log_dir_from_config(self, doc_file: Path, workdir: Path) -> None:
        (workdir / "tokensync.toml").write_text('[logging]\nlog_dir = "logs"', encoding="utf-8")

        result = runner.invoke(app, ["docs", str(doc_file)])

        assert result.exit_code == 0, result.output
        assert (workdir / "logs" / "tokensync.log").exists()
