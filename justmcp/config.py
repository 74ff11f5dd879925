from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping

import yaml

from justmcp.errors import CONFIG_ERROR, make_error


SOURCES = ("dump", "list")
DEFAULT_RUNNER = "just"
DEFAULT_SHELL = "bash"
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class ServerConfig:
    project_dir: Path
    allowed_recipes: tuple[str, ...] | None = None
    enable_debug_tool: bool = False
    show_recipes: bool = False
    source: str = "dump"
    runner: str = DEFAULT_RUNNER
    shell: str = DEFAULT_SHELL
    runner_args: tuple[str, ...] = ()
    log_level: str = DEFAULT_LOG_LEVEL
    loaded_sources: tuple[str, ...] = ()


def config_path() -> Path:
    base = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return base / "just-mcp" / "config.yaml"


def parse_allowed_recipes(raw: Any) -> tuple[str, ...] | None:
    if raw is None:
        return None
    if isinstance(raw, (list, tuple)):
        names = [str(item).strip() for item in raw]
    else:
        text = str(raw).strip()
        if not text:
            return None
        names = [part.strip() for part in text.split(",")]
    return tuple(name for name in names if name)


def _flag(raw: str | None) -> bool:
    return bool(raw)


def _parse_config_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise make_error(
            error_code=CONFIG_ERROR,
            error_type="ConfigError",
            message="Invalid YAML in just-mcp config file.",
            details={"path": str(path), "yaml_error": str(exc)},
            recovery_hint="Fix the YAML syntax or start with --no-config-autoload.",
        )
    if not isinstance(raw, dict):
        raise make_error(
            error_code=CONFIG_ERROR,
            error_type="ConfigError",
            message="just-mcp config file must contain a mapping.",
            details={"path": str(path), "actual_type": type(raw).__name__},
            recovery_hint="Use 'server:' and 'runner:' sections of key-value pairs.",
        )

    out: dict[str, Any] = {}
    server = raw.get("server", {})
    runner = raw.get("runner", {})
    if isinstance(server, dict):
        if isinstance(server.get("project"), str) and server["project"].strip():
            out["project_dir"] = Path(server["project"].strip()).expanduser()
        if "allowed_recipes" in server:
            out["allowed_recipes"] = parse_allowed_recipes(server["allowed_recipes"])
        if isinstance(server.get("enable_debug_tool"), bool):
            out["enable_debug_tool"] = server["enable_debug_tool"]
        if isinstance(server.get("log_level"), str) and server["log_level"].strip():
            out["log_level"] = server["log_level"].strip().upper()
    if isinstance(runner, dict):
        if runner.get("source") in SOURCES:
            out["source"] = runner["source"]
        for key in ("binary", "shell"):
            value = runner.get(key)
            if isinstance(value, str) and value.strip():
                out["runner" if key == "binary" else "shell"] = value.strip()
        args = runner.get("args")
        if isinstance(args, list):
            out["runner_args"] = tuple(str(item) for item in args)
    return out


def load_server_config(
    environ: Mapping[str, str] | None = None,
    *,
    autoload: bool = True,
    cwd: Path | None = None,
) -> ServerConfig:
    env = os.environ if environ is None else environ
    if env.get("JUST_MCP_NO_CONFIG_AUTOLOAD") == "1":
        autoload = False

    values: dict[str, Any] = {}
    loaded: list[str] = []
    if autoload:
        path = config_path()
        values.update(_parse_config_yaml(path))
        if path.exists():
            loaded.append(str(path))

    project = env.get("PROJECT")
    if project:
        values["project_dir"] = Path(project).expanduser()
    if "ALLOWED_RECIPES" in env:
        values["allowed_recipes"] = parse_allowed_recipes(env["ALLOWED_RECIPES"])
    if "ENABLE_DEBUG_TOOL" in env:
        values["enable_debug_tool"] = _flag(env["ENABLE_DEBUG_TOOL"])
    if "SHOW_RECIPES" in env:
        values["show_recipes"] = _flag(env["SHOW_RECIPES"])
    source = env.get("JUST_MCP_SOURCE", "").strip().lower()
    if source:
        if source not in SOURCES:
            raise make_error(
                error_code=CONFIG_ERROR,
                error_type="ConfigError",
                message="JUST_MCP_SOURCE must be 'dump' or 'list'.",
                details={"source": source},
                recovery_hint="Unset JUST_MCP_SOURCE or set it to one of: dump, list.",
            )
        values["source"] = source
    for env_key, field_name in (("JUST_MCP_RUNNER", "runner"), ("JUST_MCP_SHELL", "shell")):
        value = env.get(env_key, "").strip()
        if value:
            values[field_name] = value
    log_level = env.get("JUST_MCP_LOG_LEVEL", "").strip()
    if log_level:
        values["log_level"] = log_level.upper()

    values.setdefault("project_dir", cwd or Path.cwd())
    values["project_dir"] = Path(values["project_dir"]).resolve()
    return ServerConfig(loaded_sources=tuple(loaded), **values)


def with_overrides(config: ServerConfig, **overrides: Any) -> ServerConfig:
    changes = {key: value for key, value in overrides.items() if value is not None}
    if "project_dir" in changes:
        changes["project_dir"] = Path(changes["project_dir"]).expanduser().resolve()
    return replace(config, **changes)
