from __future__ import annotations

from typing import Any

import jsonschema

from justmcp.errors import INPUT_SCHEMA_ERROR, make_error


def validate_tool_input(*, instance: Any, schema: dict[str, Any], tool_name: str) -> None:
    try:
        jsonschema.validate(instance=instance, schema=schema)
    except jsonschema.ValidationError as exc:
        raise make_error(
            error_code=INPUT_SCHEMA_ERROR,
            error_type="InputSchemaError",
            message=f"Input for {tool_name} does not match its schema: {exc.message}",
            details={
                "validator": exc.validator,
                "path": list(exc.absolute_path),
                "schema_path": list(exc.absolute_schema_path),
                "reason": exc.message,
                "received": instance,
            },
            recovery_hint="Pass an object whose keys and value types match the tool input schema.",
        )
