"""End-to-end smoke tests for the Typer-based glossary CLI."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml
from loguru import logger
from typer.testing import CliRunner

from glossary.cli.common import CLIError, merge_overrides, parse_override
from glossary.cli.main import GlossaryTyper, app

DEFINITION = "A definition that is deliberately long enough to pass the eighty character minimum."


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def terms_file(tmp_path: Path) -> Path:
    payload = {
        "terms": [
            {"slug": "zeta", "term": "Zeta", "definition": DEFINITION},
            {
                "slug": "alpha",
                "term": "Alpha",
                "definition": DEFINITION,
                "humor": "h" * 150,
                "explanation": "An explanation longer than twenty characters.",
                "tags": ["a", "b", "c", "d"],
                "see_also": ["Zeta", "Omega", "Beta", "Gamma"],
                "controversy_level": "high",
            },
        ]
    }
    path = tmp_path / "terms.yaml"
    path.write_text(yaml.safe_dump(payload, sort_keys=False), encoding="utf-8")
    return path


def _write(path: Path, payload: dict) -> Path:
    path.write_text(yaml.safe_dump(payload, sort_keys=False), encoding="utf-8")
    return path


def test_parse_override_builds_nested_mapping() -> None:
    assert parse_override("export.pretty=true") == {"export": {"pretty": True}}
    assert parse_override("paths.terms_file=g.yaml") == {"paths": {"terms_file": "g.yaml"}}


def test_merge_overrides_is_deep() -> None:
    merged = merge_overrides([parse_override("export.pretty=true"), parse_override("export.only_if_new=true")])
    assert merged == {"export": {"pretty": True, "only_if_new": True}}


def test_validate_passes(runner: CliRunner, terms_file: Path) -> None:
    result = runner.invoke(app, ["validate", str(terms_file)])

    assert result.exit_code == 0, result.output
    assert "Validation passed! 2 terms are valid." in result.output


def test_validate_reports_schema_violations(runner: CliRunner, tmp_path: Path) -> None:
    path = _write(tmp_path / "bad.yaml", {"terms": [{"slug": "Bad", "term": "Bad", "definition": "short"}]})

    result = runner.invoke(app, ["validate", str(path)])

    assert result.exit_code == 1
    assert "Schema validation failed" in result.output
    assert "/terms/0/slug" in result.output
    assert "/terms/0/definition" in result.output


def test_validate_reports_consistency_violations(runner: CliRunner, tmp_path: Path) -> None:
    path = _write(
        tmp_path / "dup.yaml",
        {
            "terms": [
                {"slug": "dup", "term": "One", "definition": DEFINITION},
                {"slug": "dup", "term": "Two", "definition": DEFINITION},
            ],
            "redirects": {"old": "gone"},
        },
    )

    result = runner.invoke(app, ["validate", str(path)])

    assert result.exit_code == 1
    assert "Validation failed" in result.output
    assert "term #2 slug 'dup' duplicates term #1" in result.output
    assert "Redirect target 'gone' does not exist in terms" in result.output


def test_validate_against_base(runner: CliRunner, tmp_path: Path) -> None:
    base = _write(tmp_path / "base.yaml", {"terms": [{"slug": "old", "term": "Widget", "definition": DEFINITION}]})
    current = _write(tmp_path / "terms.yaml", {"terms": [{"slug": "new", "term": "Widget", "definition": DEFINITION}]})

    result = runner.invoke(app, ["validate", str(current), "--base", str(base)])

    assert result.exit_code == 1
    assert "changed from 'old' to 'new'" in result.output


def test_validate_unreadable_yaml(runner: CliRunner, tmp_path: Path) -> None:
    path = tmp_path / "broken.yaml"
    path.write_text("terms: [\n", encoding="utf-8")

    result = runner.invoke(app, ["validate", str(path)])

    assert result.exit_code == 1
    assert "YAML parse error" in result.output


def test_export_writes_sorted_artifact(runner: CliRunner, terms_file: Path, tmp_path: Path) -> None:
    out = tmp_path / "site" / "terms.json"

    result = runner.invoke(app, ["export", str(terms_file), "--out", str(out), "--release", "abc123"])

    assert result.exit_code == 0, result.output
    payload = json.loads(out.read_text(encoding="utf-8"))
    assert payload["version"] == "abc123"
    assert payload["terms_count"] == 2
    assert [term["slug"] for term in payload["terms"]] == ["alpha", "zeta"]
    assert payload["generated_at"].endswith("Z")


def test_export_check_mode(runner: CliRunner, terms_file: Path, tmp_path: Path) -> None:
    out = tmp_path / "terms.json"

    result = runner.invoke(app, ["export", str(terms_file), "--out", str(out), "--check"])

    assert result.exit_code == 0, result.output
    assert "Export validation passed (2 terms)" in result.output
    assert not out.exists()


def test_export_pretty_override_from_config(runner: CliRunner, terms_file: Path, tmp_path: Path) -> None:
    out = tmp_path / "terms.json"

    result = runner.invoke(app, ["-o", "export.pretty=true", "export", str(terms_file), "--out", str(out)])

    assert result.exit_code == 0, result.output
    assert out.read_text(encoding="utf-8").startswith('{\n  "version": "local"')


def test_export_only_if_new_skips(runner: CliRunner, terms_file: Path, tmp_path: Path) -> None:
    out = tmp_path / "terms.json"

    result = runner.invoke(
        app,
        ["export", str(terms_file), "--out", str(out), "--only-if-new", "--previous", str(terms_file)],
    )

    assert result.exit_code == 0, result.output
    assert "No new terms detected; skipping export" in result.output
    assert not out.exists()


def test_export_size_guard_fails(runner: CliRunner, terms_file: Path, tmp_path: Path) -> None:
    out = tmp_path / "terms.json"

    result = runner.invoke(
        app,
        ["-o", "export.size_threshold_bytes=100", "export", str(terms_file), "--out", str(out)],
    )

    assert result.exit_code == 1
    assert "exceeds 100 byte limit" in result.output
    assert not out.exists()


def test_score_plain_output(runner: CliRunner, terms_file: Path) -> None:
    result = runner.invoke(app, ["score", str(terms_file), "--plain"])

    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[0] == "SCORE:100"
    assert lines[1:] == ["BADGE:Comedy Gold", "BADGE:Flame Warrior", "BADGE:Perfectionist"]


def test_score_specific_slug(runner: CliRunner, terms_file: Path) -> None:
    result = runner.invoke(app, ["score", str(terms_file), "--slug", "zeta", "--plain"])

    assert result.exit_code == 0, result.output
    assert result.output.strip() == "SCORE:20"


def test_score_table_output(runner: CliRunner, terms_file: Path) -> None:
    result = runner.invoke(app, ["score", str(terms_file), "--slug", "zeta"])

    assert result.exit_code == 0, result.output
    assert "cross references" in result.output
    assert "total" in result.output


def test_score_unknown_slug(runner: CliRunner, terms_file: Path) -> None:
    result = runner.invoke(app, ["score", str(terms_file), "--slug", "missing"])

    assert result.exit_code != 0
    assert isinstance(result.exception, CLIError)
    assert "missing" in str(result.exception)


def test_cli_error_exits_with_code_two_outside_the_runner(
    terms_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        app(["score", str(terms_file), "--slug", "missing"], prog_name="glossary")

    assert excinfo.value.code == 2
    assert "Error:" in capsys.readouterr().out


def test_error_handler_lookup_follows_exception_hierarchy() -> None:
    typer_app = GlossaryTyper()

    @typer_app.on_error(RuntimeError)
    def runtime(exc: Exception) -> int:
        return 3

    @typer_app.on_error(CLIError)
    def cli(exc: Exception) -> int:
        return 2

    assert typer_app.handler_for(CLIError("x")) is cli
    assert typer_app.handler_for(RuntimeError("x")) is runtime
    assert typer_app.handler_for(ValueError("x")) is None


def test_unhandled_errors_propagate() -> None:
    typer_app = GlossaryTyper()

    @typer_app.command()
    def boom() -> None:
        raise ValueError("kaboom")

    with pytest.raises(ValueError, match="kaboom"):
        typer_app([], prog_name="boom")


def test_sort_check_and_rewrite(runner: CliRunner, terms_file: Path) -> None:
    checked = runner.invoke(app, ["sort", str(terms_file), "--check"])
    assert checked.exit_code == 1
    assert "is not sorted" in checked.output

    sorted_run = runner.invoke(app, ["sort", str(terms_file)])
    assert sorted_run.exit_code == 0, sorted_run.output

    rechecked = runner.invoke(app, ["sort", str(terms_file), "--check"])
    assert rechecked.exit_code == 0, rechecked.output
    slugs = [term["slug"] for term in yaml.safe_load(terms_file.read_text(encoding="utf-8"))["terms"]]
    assert slugs == ["alpha", "zeta"]


def test_invalid_configuration_override(runner: CliRunner, terms_file: Path) -> None:
    result = runner.invoke(app, ["-o", "export.oversize_action=explode", "validate", str(terms_file)])

    assert result.exit_code != 0
    assert isinstance(result.exception, CLIError)



def test_log_records_after_cli_runs_reach_live_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    # Runs after the command tests above, whose stderr buffers are closed by now.
    logger.warning("still logging")

    err = capsys.readouterr().err
    assert "still logging" in err
    assert "Logging error" not in err
