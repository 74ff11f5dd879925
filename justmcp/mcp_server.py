from __future__ import annotations

import asyncio
import logging
from typing import Any, Sequence

from justmcp.arguments import marshal_arguments
from justmcp.config import ServerConfig
from justmcp.errors import UNKNOWN_ERROR, JustMCPError
from justmcp.executor import execute_recipe
from justmcp.models import Recipe
from justmcp.registry import build_registry
from justmcp.validation import validate_tool_input

LOGGER = logging.getLogger(__name__)


def server_name(config: ServerConfig) -> str:
    return f"Just recipe runner for {config.project_dir.name}"


async def serve_mcp(config: ServerConfig, recipes: Sequence[Recipe]) -> None:
    try:
        from mcp.server import Server
        from mcp.server.stdio import stdio_server
        from mcp.types import CallToolResult, TextContent, Tool
    except ModuleNotFoundError as exc:
        raise RuntimeError("MCP dependency is not installed. Install package 'mcp' to serve recipes.") from exc

    def _ok(text: str) -> CallToolResult:
        return CallToolResult(content=[TextContent(type="text", text=text)], isError=False)

    def _err(text: str) -> CallToolResult:
        return CallToolResult(content=[TextContent(type="text", text=text)], isError=True)

    registry = build_registry(
        recipes,
        config.allowed_recipes,
        include_debug_tool=config.enable_debug_tool,
    )
    tools = [
        Tool(name=entry.name, description=entry.description, inputSchema=entry.input_schema)
        for entry in registry.values()
    ]

    server = Server(server_name(config))

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        return list(tools)

    @server.call_tool(validate_input=False)  # type: ignore[arg-type]
    async def call_tool(name: str, arguments: Any) -> Any:
        entry = registry.get(name)
        if entry is None:
            return _err(f"Unknown tool: {name}")
        args = arguments if arguments is not None else {}
        try:
            validate_tool_input(instance=args, schema=entry.input_schema, tool_name=name)
            if entry.is_debug:
                return _ok(str(config.project_dir))
            argv = marshal_arguments(args, entry.parameters)
            output = await execute_recipe(name, argv, config)
            return _ok(output)
        except JustMCPError as exc:
            LOGGER.warning("Tool %s failed: %s", name, exc)
            return _err(str(exc))
        except Exception as exc:
            LOGGER.exception("Unexpected error in tool %s", name)
            return _err(f"{UNKNOWN_ERROR} {type(exc).__name__}: {exc}")

    LOGGER.info("Starting just MCP server for %s", config.project_dir)
    if config.allowed_recipes is not None:
        LOGGER.info("Filtering recipes to: %s", ", ".join(config.allowed_recipes))
    else:
        LOGGER.info("All Just recipes are exposed to the client")

    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def run_mcp_server(config: ServerConfig, recipes: Sequence[Recipe]) -> None:
    asyncio.run(serve_mcp(config, recipes))
