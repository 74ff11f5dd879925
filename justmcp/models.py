from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union


class Cardinality(str, Enum):
    SINGLE = "singular"
    STAR = "star"
    PLUS = "plus"

    @property
    def variadic(self) -> bool:
        return self is not Cardinality.SINGLE


@dataclass(frozen=True)
class NoDefault:
    pass


@dataclass(frozen=True)
class LiteralDefault:
    value: str


@dataclass(frozen=True)
class LiteralSequenceDefault:
    values: tuple[str, ...]


@dataclass(frozen=True)
class ExpressionDefault:
    # Raw dump form, echoed by --show-recipes.
    source: Any = None


ParameterDefault = Union[NoDefault, LiteralDefault, LiteralSequenceDefault, ExpressionDefault]


@dataclass(frozen=True)
class Parameter:
    name: str
    cardinality: Cardinality = Cardinality.SINGLE
    default: ParameterDefault = field(default_factory=NoDefault)
    export: bool = False

    def __post_init__(self) -> None:
        if self.cardinality is Cardinality.SINGLE and isinstance(self.default, LiteralSequenceDefault):
            raise ValueError(f"Parameter {self.name!r} takes one value but has a sequence default.")


@dataclass(frozen=True)
class Recipe:
    name: str
    parameters: tuple[Parameter, ...] = ()
    doc: str | None = None
    private: bool = False


@dataclass(frozen=True)
class ToolDefinition:
    name: str
    description: str
    input_schema: dict[str, Any]
    parameters: tuple[Parameter, ...] = ()
    is_debug: bool = False
