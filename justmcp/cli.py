from __future__ import annotations

import argparse
import json
import logging
import sys
import textwrap
from dataclasses import replace
from typing import Any

from justmcp.config import SOURCES, ServerConfig, load_server_config, parse_allowed_recipes, with_overrides
from justmcp.errors import UNKNOWN_ERROR, JustMCPError
from justmcp.mcp_server import run_mcp_server
from justmcp.registry import build_registry, describe_registry
from justmcp.sources import load_recipes_for

LOGGER = logging.getLogger("justmcp")


class _HelpFormatter(argparse.ArgumentDefaultsHelpFormatter, argparse.RawDescriptionHelpFormatter):
    pass


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="just-mcp",
        description="Serve the recipes of a justfile as MCP tools over stdio.",
        formatter_class=_HelpFormatter,
        epilog=textwrap.dedent(
            """
            Environment:
              PROJECT              project directory (default: current directory)
              ALLOWED_RECIPES      comma-separated recipe names to expose
              ENABLE_DEBUG_TOOL    expose a 'cwd' tool when set
              SHOW_RECIPES         print derived schemas and exit when set

            Arguments after '--' are passed to just on every invocation:
              just-mcp -- --justfile ci.just
            """
        ),
    )
    parser.add_argument("--project", metavar="DIR", help="Directory containing the justfile")
    parser.add_argument(
        "--allow",
        metavar="NAMES",
        help="Comma-separated recipe allow-list; an empty value exposes every recipe",
    )
    parser.add_argument(
        "--source",
        choices=SOURCES,
        default=None,
        help="Read recipes from the JSON dump or from 'just --list' output (default: dump)",
    )
    parser.add_argument(
        "--show-recipes",
        action="store_true",
        default=None,
        help="Print every recipe's derived input schema and exit",
    )
    parser.add_argument(
        "--enable-debug-tool",
        action="store_true",
        default=None,
        help="Expose a 'cwd' tool that reports the project directory",
    )
    parser.add_argument(
        "--no-config-autoload",
        action="store_true",
        help="Do not read ~/.config/just-mcp/config.yaml",
    )
    parser.add_argument("runner_args", nargs="*", metavar="JUST_ARG", help="Extra arguments for just")
    return parser


def _configure_logging(level: str) -> None:
    logging.basicConfig(stream=sys.stderr, format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger().setLevel(getattr(logging, level.upper(), logging.INFO))
    # stdout carries the protocol; keep library chatter to warnings on stderr.
    logging.getLogger("mcp").setLevel(logging.WARNING)


def _print_error(payload: dict[str, Any]) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=True), file=sys.stderr)


def resolve_config(args: argparse.Namespace) -> ServerConfig:
    config = load_server_config(autoload=not args.no_config_autoload)
    if args.allow is not None:
        # An empty --allow clears any allow-list from the environment or config file.
        config = replace(config, allowed_recipes=parse_allowed_recipes(args.allow))
    return with_overrides(
        config,
        project_dir=args.project,
        source=args.source,
        show_recipes=args.show_recipes,
        enable_debug_tool=args.enable_debug_tool,
        runner_args=tuple(args.runner_args) if args.runner_args else None,
    )


def cmd_show_recipes(config: ServerConfig) -> int:
    registry = build_registry(load_recipes_for(config), config.allowed_recipes)
    print(json.dumps(describe_registry(registry), indent=2, ensure_ascii=True))
    return 0


def cmd_serve(config: ServerConfig) -> int:
    recipes = load_recipes_for(config)
    LOGGER.info("Loaded %d recipe(s) from %s", len(recipes), config.project_dir)
    run_mcp_server(config, recipes)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = resolve_config(args)
        _configure_logging(config.log_level)
        if config.show_recipes:
            return cmd_show_recipes(config)
        return cmd_serve(config)
    except JustMCPError as exc:
        LOGGER.error("%s", exc)
        _print_error(exc.payload.to_dict())
        return 1
    except KeyboardInterrupt:
        return 0
    except Exception as exc:
        LOGGER.exception("just-mcp failed")
        _print_error(
            {
                "error_code": UNKNOWN_ERROR,
                "error_type": type(exc).__name__,
                "message": str(exc),
                "details": {},
                "recovery_hint": "Inspect the log output above.",
            }
        )
        return 1


if __name__ == "__main__":
    sys.exit(main())
