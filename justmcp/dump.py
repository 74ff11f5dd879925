"""Structured recipe source: ``just --dump --dump-format json``."""

from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path
from typing import Any

from justmcp.config import ServerConfig
from justmcp.errors import RECIPE_SOURCE_ERROR, make_error
from justmcp.models import (
    Cardinality,
    ExpressionDefault,
    LiteralDefault,
    NoDefault,
    Parameter,
    ParameterDefault,
    Recipe,
)

LOGGER = logging.getLogger(__name__)


def _run_just(command: list[str], cwd: Path) -> subprocess.CompletedProcess[str]:
    return subprocess.run(command, cwd=cwd, check=False, capture_output=True, text=True)


def _source_error(message: str, details: dict[str, Any]) -> Exception:
    return make_error(
        error_code=RECIPE_SOURCE_ERROR,
        error_type="RecipeSourceError",
        message=message,
        details=details,
        recovery_hint="Check that just is installed and the project directory contains a valid justfile.",
    )


def parse_default(raw: Any) -> ParameterDefault:
    if raw is None:
        return NoDefault()
    if isinstance(raw, str):
        return LiteralDefault(raw)
    # just serializes expression defaults as nested arrays, e.g. ["concatenate", ...].
    return ExpressionDefault(raw)


def parse_parameter(raw: dict[str, Any]) -> Parameter:
    name = raw.get("name")
    if not isinstance(name, str) or not name:
        raise ValueError(f"parameter without a name: {raw!r}")
    kind = raw.get("kind", Cardinality.SINGLE.value)
    try:
        cardinality = Cardinality(kind)
    except ValueError as exc:
        raise ValueError(f"unknown parameter kind {kind!r} for {name!r}") from exc
    return Parameter(
        name=name,
        cardinality=cardinality,
        default=parse_default(raw.get("default")),
        export=bool(raw.get("export", False)),
    )


def parse_recipe(name: str, raw: dict[str, Any]) -> Recipe:
    params_raw = raw.get("parameters") or []
    if not isinstance(params_raw, list):
        raise ValueError(f"recipe {name!r} has non-list parameters")
    doc = raw.get("doc")
    return Recipe(
        name=str(raw.get("name") or name),
        parameters=tuple(parse_parameter(item) for item in params_raw),
        doc=doc if isinstance(doc, str) and doc else None,
        private=bool(raw.get("private", False)),
    )


def parse_dump(payload: Any) -> list[Recipe]:
    if not isinstance(payload, dict) or not isinstance(payload.get("recipes"), dict):
        raise ValueError("dump payload has no 'recipes' mapping")
    recipes: list[Recipe] = []
    for name, raw in payload["recipes"].items():
        if not isinstance(raw, dict):
            raise ValueError(f"recipe {name!r} is not an object")
        recipes.append(parse_recipe(name, raw))
    return recipes


def load_recipes(config: ServerConfig) -> list[Recipe]:
    command = [config.runner, *config.runner_args, "--dump", "--dump-format", "json"]
    try:
        proc = _run_just(command, config.project_dir)
    except OSError as exc:
        raise _source_error(
            f"Could not run {config.runner}: {exc}",
            {"command": command, "project_dir": str(config.project_dir)},
        ) from exc
    if proc.returncode != 0:
        raise _source_error(
            f"{config.runner} --dump exited with code {proc.returncode}.",
            {"command": command, "stderr": (proc.stderr or "").strip()},
        )
    try:
        recipes = parse_dump(json.loads(proc.stdout))
    except (json.JSONDecodeError, ValueError) as exc:
        raise _source_error(
            f"Could not parse recipe dump: {exc}",
            {"command": command, "stderr": (proc.stderr or "").strip()},
        ) from exc
    LOGGER.debug("Loaded %d recipes from %s", len(recipes), config.project_dir)
    return recipes
