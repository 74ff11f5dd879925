"""Map just recipe parameters onto JSON Schema tool input.

Branch order matters: an expression default wins over cardinality, and
cardinality wins over the presence of a literal default.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from justmcp.models import (
    Cardinality,
    ExpressionDefault,
    LiteralDefault,
    LiteralSequenceDefault,
    Parameter,
    ParameterDefault,
    Recipe,
)

EXPRESSION_NOTE = "default value is an expression in the Justfile"


@dataclass(frozen=True)
class ParameterSchema:
    node: dict[str, Any]
    required: bool

    @property
    def description(self) -> str:
        return self.node["description"]


def _string(description: str) -> dict[str, Any]:
    return {"type": "string", "description": description}


def _array(description: str, *, min_items: int | None = None) -> dict[str, Any]:
    node: dict[str, Any] = {"type": "array", "items": {"type": "string"}}
    if min_items is not None:
        node["minItems"] = min_items
    node["description"] = description
    return node


def render_default(default: ParameterDefault) -> str | None:
    if isinstance(default, LiteralDefault):
        return default.value
    if isinstance(default, LiteralSequenceDefault):
        return " ".join(default.values)
    return None


def _with_export_note(description: str, param: Parameter) -> str:
    if not param.export:
        return description
    return f"{description}; exported as environment variable ${param.name}"


def _synthesize(param: Parameter, recipe_name: str) -> ParameterSchema:
    default = param.default
    if isinstance(default, ExpressionDefault):
        if param.cardinality.variadic:
            return ParameterSchema(_array(f"Parameters for the {recipe_name} recipe ({EXPRESSION_NOTE})"), False)
        return ParameterSchema(
            _string(f"Optional parameter {param.name} for the {recipe_name} recipe ({EXPRESSION_NOTE})"),
            False,
        )

    # An empty literal default counts as no default.
    literal = render_default(default) or None
    if param.cardinality is Cardinality.PLUS:
        if literal is not None:
            return ParameterSchema(_array(f"Parameters for the {recipe_name} recipe (default: {literal})"), False)
        return ParameterSchema(
            _array(f"Parameters for the {recipe_name} recipe (at least one required)", min_items=1),
            True,
        )
    if param.cardinality is Cardinality.STAR:
        return ParameterSchema(_array(f"Parameters for the {recipe_name} recipe (not required)"), False)

    if literal is not None:
        return ParameterSchema(_string(f"Optional parameter {param.name} (default: {literal})"), False)
    return ParameterSchema(_string(f"Required parameter {param.name}"), True)


def parameter_schema(param: Parameter, recipe_name: str) -> ParameterSchema:
    synthesized = _synthesize(param, recipe_name)
    synthesized.node["description"] = _with_export_note(synthesized.node["description"], param)
    return synthesized


def recipe_input_schema(recipe: Recipe) -> dict[str, Any]:
    properties: dict[str, Any] = {}
    required: list[str] = []
    for param in recipe.parameters:
        synthesized = parameter_schema(param, recipe.name)
        properties[param.name] = synthesized.node
        if synthesized.required:
            required.append(param.name)
    schema: dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema
