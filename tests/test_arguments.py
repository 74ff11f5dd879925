from __future__ import annotations

from justmcp.arguments import marshal_arguments
from justmcp.models import Cardinality, LiteralDefault, Parameter


def test_single_string_is_appended() -> None:
    params = [Parameter("target", default=LiteralDefault("staging"))]

    assert marshal_arguments({"target": "production"}, params) == ["production"]


def test_empty_values_yield_no_arguments() -> None:
    params = [Parameter("target", default=LiteralDefault("staging"))]

    assert marshal_arguments({}, params) == []
    assert marshal_arguments(None, params) == []


def test_variadic_list_is_flattened_in_order() -> None:
    params = [Parameter("test_files", cardinality=Cardinality.STAR)]

    assert marshal_arguments({"test_files": ["a.test.ts", "b.test.ts"]}, params) == ["a.test.ts", "b.test.ts"]
    assert marshal_arguments({}, params) == []


def test_plus_single_element() -> None:
    params = [Parameter("ARGS", cardinality=Cardinality.PLUS)]

    assert marshal_arguments({"ARGS": ["x"]}, params) == ["x"]


def test_variadic_accepts_single_string() -> None:
    params = [Parameter("ARGS", cardinality=Cardinality.STAR)]

    assert marshal_arguments({"ARGS": "only"}, params) == ["only"]


def test_unknown_keys_are_dropped() -> None:
    assert marshal_arguments({"bogus": "x"}, []) == []
    assert marshal_arguments({"bogus": "x", "arg": "y"}, [Parameter("arg")]) == ["y"]


def test_list_for_single_parameter_is_dropped() -> None:
    assert marshal_arguments({"arg": ["a", "b"]}, [Parameter("arg")]) == []


def test_non_string_values_are_dropped() -> None:
    params = [Parameter("arg"), Parameter("ARGS", cardinality=Cardinality.STAR)]

    assert marshal_arguments({"arg": 3, "ARGS": ["a", 1, "b"]}, params) == ["a", "b"]


def test_caller_key_order_is_kept() -> None:
    params = [Parameter("first"), Parameter("second")]

    assert marshal_arguments({"second": "2", "first": "1"}, params) == ["2", "1"]


def test_mixed_required_and_variadic() -> None:
    params = [Parameter("arg"), Parameter("ARGS", cardinality=Cardinality.STAR)]

    assert marshal_arguments({"arg": "a", "ARGS": ["b", "c"]}, params) == ["a", "b", "c"]
