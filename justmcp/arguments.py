from __future__ import annotations

from typing import Any, Mapping, Sequence

from justmcp.models import Parameter


def marshal_arguments(values: Mapping[str, Any] | None, parameters: Sequence[Parameter]) -> list[str]:
    """Flatten tool-call values into positional recipe arguments.

    Keys are visited in the caller's order, not declaration order. Unknown
    keys and values of the wrong shape are left out rather than rejected.
    """
    args: list[str] = []
    if not values:
        return args
    by_name = {param.name: param for param in parameters}
    for name, value in values.items():
        param = by_name.get(name)
        if param is None:
            continue
        if param.cardinality.variadic and isinstance(value, (list, tuple)):
            args.extend(item for item in value if isinstance(item, str))
        elif isinstance(value, str):
            args.append(value)
    return args
