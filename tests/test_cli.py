from __future__ import annotations

import json
from pathlib import Path

import pytest

from justmcp.cli import main
from justmcp.errors import make_error
from justmcp.models import Cardinality, Parameter, Recipe


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for key in ("PROJECT", "ALLOWED_RECIPES", "ENABLE_DEBUG_TOOL", "SHOW_RECIPES", "JUST_MCP_SOURCE"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))
    monkeypatch.setattr("justmcp.cli._configure_logging", lambda _level: None)


def _recipes() -> list[Recipe]:
    return [
        Recipe("lint"),
        Recipe("test", (Parameter("files", cardinality=Cardinality.PLUS),)),
    ]


def test_show_recipes_prints_schemas_and_exits_zero(monkeypatch, tmp_path: Path, capsys) -> None:
    monkeypatch.setattr("justmcp.cli.load_recipes_for", lambda _config: _recipes())
    monkeypatch.setattr("justmcp.cli.run_mcp_server", lambda *_a: pytest.fail("server must not start"))

    code = main(["--project", str(tmp_path), "--show-recipes"])
    out = json.loads(capsys.readouterr().out)

    assert code == 0
    assert [item["name"] for item in out] == ["lint", "test"]
    assert out[1]["input_schema"]["properties"]["files"]["minItems"] == 1


def test_show_recipes_from_environment(monkeypatch, tmp_path: Path, capsys) -> None:
    monkeypatch.setenv("SHOW_RECIPES", "1")
    monkeypatch.setenv("ALLOWED_RECIPES", "lint")
    monkeypatch.setattr("justmcp.cli.load_recipes_for", lambda _config: _recipes())

    code = main(["--project", str(tmp_path)])
    out = json.loads(capsys.readouterr().out)

    assert code == 0
    assert [item["name"] for item in out] == ["lint"]


def test_serve_passes_config_and_recipes(monkeypatch, tmp_path: Path) -> None:
    captured: dict = {}

    def fake_run(config, recipes):
        captured["config"] = config
        captured["recipes"] = recipes

    monkeypatch.setattr("justmcp.cli.load_recipes_for", lambda _config: _recipes())
    monkeypatch.setattr("justmcp.cli.run_mcp_server", fake_run)

    code = main(
        [
            "--project",
            str(tmp_path),
            "--allow",
            "lint,test",
            "--source",
            "list",
            "--enable-debug-tool",
            "--",
            "--justfile",
            "ci.just",
        ]
    )

    config = captured["config"]
    assert code == 0
    assert config.project_dir == tmp_path.resolve()
    assert config.allowed_recipes == ("lint", "test")
    assert config.source == "list"
    assert config.enable_debug_tool is True
    assert config.runner_args == ("--justfile", "ci.just")
    assert [recipe.name for recipe in captured["recipes"]] == ["lint", "test"]


def test_project_from_environment(monkeypatch, tmp_path: Path) -> None:
    captured: dict = {}
    monkeypatch.setenv("PROJECT", str(tmp_path))
    def fake_load(config):
        captured["config"] = config
        return []

    monkeypatch.setattr("justmcp.cli.load_recipes_for", fake_load)
    monkeypatch.setattr("justmcp.cli.run_mcp_server", lambda *_a: None)

    assert main([]) == 0
    assert captured["config"].project_dir == tmp_path.resolve()


def test_recipe_source_failure_exits_non_zero(monkeypatch, tmp_path: Path, capsys) -> None:
    def failing(_config):
        raise make_error(
            error_code="JMCP_001",
            error_type="RecipeSourceError",
            message="just --dump exited with code 1.",
        )

    monkeypatch.setattr("justmcp.cli.load_recipes_for", failing)
    monkeypatch.setattr("justmcp.cli.run_mcp_server", lambda *_a: pytest.fail("server must not start"))

    code = main(["--project", str(tmp_path)])
    err = capsys.readouterr().err

    assert code == 1
    assert '"error_code": "JMCP_001"' in err


def test_config_error_exits_non_zero(monkeypatch, tmp_path: Path, capsys) -> None:
    monkeypatch.setenv("JUST_MCP_SOURCE", "xml")

    code = main(["--project", str(tmp_path)])

    assert code == 1
    assert '"error_code": "JMCP_004"' in capsys.readouterr().err


def test_empty_allow_flag_clears_environment_allow_list(monkeypatch, tmp_path: Path, capsys) -> None:
    monkeypatch.setenv("ALLOWED_RECIPES", "lint")
    monkeypatch.setattr("justmcp.cli.load_recipes_for", lambda _config: _recipes())

    code = main(["--project", str(tmp_path), "--allow", "", "--show-recipes"])
    out = json.loads(capsys.readouterr().out)

    assert code == 0
    assert [item["name"] for item in out] == ["lint", "test"]


def test_allow_flag_replaces_environment_allow_list(monkeypatch, tmp_path: Path, capsys) -> None:
    monkeypatch.setenv("ALLOWED_RECIPES", "lint")
    monkeypatch.setattr("justmcp.cli.load_recipes_for", lambda _config: _recipes())

    code = main(["--project", str(tmp_path), "--allow", "test", "--show-recipes"])
    out = json.loads(capsys.readouterr().out)

    assert code == 0
    assert [item["name"] for item in out] == ["test"]
