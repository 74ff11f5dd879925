"""Text recipe source: parses ``just --list`` output.

The listing cannot express ``*`` cardinality or default values, so every
variadic token becomes ``PLUS`` and every parameter has no default.
"""

from __future__ import annotations

import logging
import re
import subprocess
from pathlib import Path

from justmcp.config import ServerConfig
from justmcp.models import Cardinality, Parameter, Recipe

LOGGER = logging.getLogger(__name__)

_LINE_RE = re.compile(r"^\s*(?P<name>[A-Za-z_][\w-]*)(?P<rest>.*)$")
_ENV_MARKER = "$"
_VARIADIC_MARKERS = ("+", "*")


def _run_just(command: list[str], cwd: Path) -> subprocess.CompletedProcess[str]:
    return subprocess.run(command, cwd=cwd, check=False, capture_output=True, text=True)


def _split_params(text: str) -> list[str]:
    # Defaults may contain spaces inside quotes or parentheses: a="x y" b=(c + "d").
    tokens: list[str] = []
    current: list[str] = []
    depth = 0
    quote: str | None = None
    for ch in text:
        if quote is not None:
            current.append(ch)
            if ch == quote:
                quote = None
            continue
        if ch in "\"'":
            quote = ch
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth = max(depth - 1, 0)
        elif ch.isspace() and depth == 0:
            if current:
                tokens.append("".join(current))
                current = []
            continue
        current.append(ch)
    if current:
        tokens.append("".join(current))
    return tokens


def _split_doc(text: str) -> tuple[str, str | None]:
    # The doc comment starts at the first whitespace-led "#" outside quotes and parentheses.
    depth = 0
    quote: str | None = None
    for index, ch in enumerate(text):
        if quote is not None:
            if ch == quote:
                quote = None
        elif ch in "\"'":
            quote = ch
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth = max(depth - 1, 0)
        elif ch == "#" and depth == 0 and (index == 0 or text[index - 1].isspace()):
            return text[:index], text[index + 1 :]
    return text, None


def parse_parameter_token(token: str) -> Parameter:
    export = False
    cardinality = Cardinality.SINGLE
    name = token
    if name[:1] in _VARIADIC_MARKERS:
        cardinality = Cardinality.PLUS
        name = name[1:]
    if name.startswith(_ENV_MARKER):
        export = True
        name = name[1:]
    name = name.split("=", 1)[0]
    return Parameter(name=name, cardinality=cardinality, export=export)


def parse_listing_line(line: str) -> Recipe | None:
    stripped = line.strip()
    if not stripped or stripped.startswith(("[", "#")):
        return None
    if stripped.endswith(":") and "#" not in stripped:
        return None
    match = _LINE_RE.match(line)
    if match is None:
        return None
    params_text, doc_text = _split_doc(match.group("rest"))
    params = tuple(parse_parameter_token(tok) for tok in _split_params(params_text))
    doc = (doc_text or "").strip() or None
    return Recipe(name=match.group("name"), parameters=params, doc=doc)


def parse_listing(text: str) -> list[Recipe]:
    recipes: list[Recipe] = []
    for line in text.splitlines():
        recipe = parse_listing_line(line)
        if recipe is not None:
            recipes.append(recipe)
    return recipes


def load_recipes_from_listing(config: ServerConfig) -> list[Recipe]:
    command = [config.runner, *config.runner_args, "--list"]
    try:
        proc = _run_just(command, config.project_dir)
    except OSError as exc:
        LOGGER.warning("Could not run %s, serving no recipes (%s)", config.runner, exc)
        return []
    if proc.returncode != 0:
        LOGGER.warning(
            "%s --list exited with code %s, serving no recipes: %s",
            config.runner,
            proc.returncode,
            (proc.stderr or "").strip(),
        )
        return []
    return parse_listing(proc.stdout)
