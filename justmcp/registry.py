from __future__ import annotations

import logging
from typing import Any, Iterable

from justmcp.models import (
    ExpressionDefault,
    LiteralDefault,
    LiteralSequenceDefault,
    ParameterDefault,
    Recipe,
    ToolDefinition,
)
from justmcp.schema import recipe_input_schema

DEBUG_TOOL_NAME = "cwd"
LOGGER = logging.getLogger(__name__)


def default_description(recipe_name: str) -> str:
    return f"Run the {recipe_name} recipe"


def build_tool_definition(recipe: Recipe) -> ToolDefinition:
    return ToolDefinition(
        name=recipe.name,
        description=recipe.doc or default_description(recipe.name),
        input_schema=recipe_input_schema(recipe),
        parameters=recipe.parameters,
    )


def debug_tool_definition() -> ToolDefinition:
    return ToolDefinition(
        name=DEBUG_TOOL_NAME,
        description="Get the working directory that the MCP server is running in",
        input_schema={"type": "object", "properties": {}},
        is_debug=True,
    )


def build_registry(
    recipes: Iterable[Recipe],
    allowed_recipes: Iterable[str] | None = None,
    *,
    include_debug_tool: bool = False,
) -> dict[str, ToolDefinition]:
    allowed = set(allowed_recipes) if allowed_recipes is not None else None
    registry: dict[str, ToolDefinition] = {}
    if include_debug_tool:
        registry[DEBUG_TOOL_NAME] = debug_tool_definition()
    for recipe in recipes:
        if allowed is not None and recipe.name not in allowed:
            continue
        if recipe.name in registry:
            LOGGER.warning("Recipe %s replaces an already registered tool of the same name", recipe.name)
            # Re-insert so the replacement takes the later position.
            del registry[recipe.name]
        registry[recipe.name] = build_tool_definition(recipe)
    return registry


def describe_default(default: ParameterDefault) -> Any:
    if isinstance(default, LiteralDefault):
        return default.value
    if isinstance(default, LiteralSequenceDefault):
        return list(default.values)
    if isinstance(default, ExpressionDefault):
        return {"expression": default.source}
    return None


def describe_registry(registry: dict[str, ToolDefinition]) -> list[dict[str, Any]]:
    out: list[dict[str, Any]] = []
    for tool in registry.values():
        out.append(
            {
                "name": tool.name,
                "description": tool.description,
                "parameters": [
                    {
                        "name": param.name,
                        "kind": param.cardinality.value,
                        "default": describe_default(param.default),
                        "export": param.export,
                    }
                    for param in tool.parameters
                ],
                "input_schema": tool.input_schema,
            }
        )
    return out
