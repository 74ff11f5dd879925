from __future__ import annotations

import asyncio
import codecs
import logging
import shlex
from typing import Sequence

from justmcp.config import ServerConfig
from justmcp.errors import RECIPE_SPAWN_ERROR, make_error

LOGGER = logging.getLogger(__name__)
READ_CHUNK_SIZE = 4096


def build_command(recipe_name: str, args: Sequence[str], config: ServerConfig) -> list[str]:
    # Operator-supplied runner args go before the recipe name. Caller values
    # travel as positional parameters after "--" and are never spliced in.
    runner = " ".join([config.runner, *(shlex.quote(arg) for arg in config.runner_args)])
    script = f'{runner} {recipe_name} "$@"'
    return [config.shell, "-l", "-c", script, "--", *args]


async def _drain(stream: asyncio.StreamReader | None, sink: list[str]) -> None:
    if stream is None:
        return
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    while True:
        chunk = await stream.read(READ_CHUNK_SIZE)
        if not chunk:
            break
        sink.append(decoder.decode(chunk))
    tail = decoder.decode(b"", final=True)
    if tail:
        sink.append(tail)


async def execute_recipe(recipe_name: str, args: Sequence[str], config: ServerConfig) -> str:
    command = build_command(recipe_name, args, config)
    LOGGER.info("Running recipe %s with %d argument(s)", recipe_name, len(args))
    try:
        proc = await asyncio.create_subprocess_exec(
            *command,
            cwd=str(config.project_dir),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        raise make_error(
            error_code=RECIPE_SPAWN_ERROR,
            error_type="RecipeSpawnError",
            message=f"Failed to execute {recipe_name}: {exc}",
            details={"recipe": recipe_name, "shell": config.shell, "project_dir": str(config.project_dir)},
            recovery_hint="Check that the shell exists and the project directory is valid.",
        ) from exc

    chunks: list[str] = []
    await asyncio.gather(_drain(proc.stdout, chunks), _drain(proc.stderr, chunks))
    code = await proc.wait()
    LOGGER.info("Recipe %s exited with code %s", recipe_name, code)
    chunks.append(f"\nProcess exited with code {code}")
    return "".join(chunks)
