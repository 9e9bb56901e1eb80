"""Tests for CLI commands."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
from typer.testing import CliRunner

from cascadewind.cli import app
from cascadewind.log import ROOT_LOGGER


@pytest.fixture
def cli_runner():
    """Return a CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo the handler the CLI callback installs on the package logger."""
    logger = logging.getLogger(ROOT_LOGGER)
    level, handlers = logger.level, list(logger.handlers)
    yield
    logger.setLevel(level)
    logger.handlers[:] = handlers


@pytest.fixture
def definitions(tmp_path: Path) -> Path:
    """Write a definitions file in source order."""
    path = tmp_path / "vars.json"
    path.write_text(
        json.dumps(
            [
                {"name": "--gap", "value": "1rem"},
                {"name": "--gap", "value": "2rem", "selector": ".card"},
                {"name": "--accent", "value": "teal", "qualifiers": ["hover"]},
                {"name": "--border", "value": "1px solid var(--accent, gray)"},
            ]
        )
    )
    return path


class TestInspectionCommands:
    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert result.output.startswith("cascadewind ")

    def test_specificity(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["specificity", ".card", "#main p"])
        assert result.exit_code == 0
        assert "(0, 1, 0)  .card" in result.output
        assert "(1, 0, 1)  #main p" in result.output

    def test_assemble(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            app, ["assemble", "flex", "-q", "hover", "-q", "hover", "-q", "md"]
        )
        assert result.exit_code == 0
        assert result.output.strip() == "md:hover:flex"

    def test_assemble_with_config(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        config = tmp_path / "cascadewind.toml"
        config.write_text('[cascadewind.screens]\ntablet = "640px"\n')
        result = cli_runner.invoke(
            app, ["assemble", "grid", "-q", "hover", "-q", "tablet", "-c", str(config)]
        )
        assert result.exit_code == 0
        assert result.output.strip() == "tablet:hover:grid"

    def test_invalid_config(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        config = tmp_path / "cascadewind.toml"
        config.write_text("[cascadewind]\nbogus = 1\n")
        result = cli_runner.invoke(app, ["assemble", "flex", "-c", str(config)])
        assert result.exit_code == 1
        assert "Error loading config" in result.output

    def test_media(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["media", "(min-width: 1024px)"])
        assert result.exit_code == 0
        assert result.output.strip() == "lg"

    def test_media_skipped(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["media", "(max-width: 600px)"])
        assert result.exit_code == 1
        assert "unsupported" in result.output

    def test_pseudo(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["pseudo", ".button:hover"])
        assert result.exit_code == 0
        assert result.output.strip() == "button hover"

    def test_pseudo_plain_class(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["pseudo", ".button"])
        assert result.output.strip() == "button (base)"

    def test_pseudo_skipped(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["pseudo", ".card .title"])
        assert result.exit_code == 1
        assert "Complex selector with combinators" in result.output


class TestResolveCommand:
    def test_resolves_global(self, cli_runner: CliRunner, definitions: Path) -> None:
        result = cli_runner.invoke(
            app, ["--silent", "resolve", str(definitions), "var(--gap) 0", "--json"]
        )
        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["value"] == "1rem 0"
        assert payload["has_unresolved"] is False

    def test_selector_scope(self, cli_runner: CliRunner, definitions: Path) -> None:
        result = cli_runner.invoke(
            app,
            [
                "--silent",
                "resolve",
                str(definitions),
                "var(--gap)",
                "--selector",
                ".card.dark",
                "--json",
            ],
        )
        assert json.loads(result.stdout)["value"] == "2rem"

    def test_qualifiers(self, cli_runner: CliRunner, definitions: Path) -> None:
        base = ["--silent", "resolve", str(definitions), "var(--border)", "--json"]
        plain = json.loads(cli_runner.invoke(app, base).stdout)
        hovered = json.loads(cli_runner.invoke(app, [*base, "-q", "hover"]).stdout)
        assert plain["value"] == "1px solid gray"
        assert hovered["value"] == "1px solid teal"

    def test_unresolved_reported(self, cli_runner: CliRunner, definitions: Path) -> None:
        result = cli_runner.invoke(
            app, ["--silent", "resolve", str(definitions), "var(--missing)", "--json"]
        )
        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["has_unresolved"] is True
        assert payload["value"] == "var(--missing)"
        assert payload["report"]["success"] is False
        assert payload["report"]["summary"]["warnings_by_kind"] == {"undefined": 1}

    def test_strict_mode_fails(
        self, cli_runner: CliRunner, definitions: Path, tmp_path: Path
    ) -> None:
        config = tmp_path / "cascadewind.yaml"
        config.write_text("cascadewind:\n  strict_mode: true\n")
        result = cli_runner.invoke(
            app,
            ["--silent", "resolve", str(definitions), "var(--missing)", "-c", str(config)],
        )
        assert result.exit_code == 1

    def test_plain_output(self, cli_runner: CliRunner, definitions: Path) -> None:
        result = cli_runner.invoke(app, ["resolve", str(definitions), "var(--gap)"])
        assert result.exit_code == 0
        assert "1rem" in result.output

    def test_bad_definitions(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "vars.json"
        path.write_text(json.dumps([{"name": "gap", "value": "1rem"}]))
        result = cli_runner.invoke(app, ["resolve", str(path), "var(--gap)"])
        assert result.exit_code == 1
        assert "Error loading definitions" in result.output

    def test_definitions_must_be_a_list(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "vars.json"
        path.write_text(json.dumps({"name": "--gap"}))
        result = cli_runner.invoke(app, ["resolve", str(path), "var(--gap)"])
        assert result.exit_code == 1
