# sexpr.py
# S-expression renderer for the value tree built by json_parser.py
#
# Rendering rules, one per variant:
#   object  -> "(" + "(key value)" pairs joined by " " + ")"
#   array   -> "(" + elements joined by " " + ")"
#   string  -> raw payload, unquoted
#   number  -> shortest round-trip decimal, trailing ".0" dropped
#   boolean -> true | false
#   null    -> null
#
# Rendering is total: every well-formed tree renders, so there is no error type.

from typing import Callable, Dict

from json_parser import (
    DEPTH_LIMIT_DEFAULT,
    JSONArray,
    JSONBool,
    JSONNull,
    JSONNumber,
    JSONObject,
    JSONString,
    Value,
    loads,
)
from lexer import format_number

__all__ = ["format_number", "pretty_print", "json_to_sexpr"]


def _render_object(value: JSONObject) -> str:
    return "(" + " ".join(f"({key} {_render(item)})" for key, item in value.pairs) + ")"


def _render_array(value: JSONArray) -> str:
    return "(" + " ".join(_render(item) for item in value.items) + ")"


_RENDERERS: Dict[type, Callable[..., str]] = {
    JSONObject: _render_object,
    JSONArray:  _render_array,
    JSONString: lambda v: v.text,
    JSONNumber: lambda v: format_number(v.value),
    JSONBool:   lambda v: "true" if v.value else "false",
    JSONNull:   lambda v: "null",
}


def _render(value: Value) -> str:
    return _RENDERERS[type(value)](value)


def pretty_print(value: Value) -> str:
    """Render a value tree as a single-line S-expression."""
    return _render(value)


def json_to_sexpr(text: str, *, max_depth: int = DEPTH_LIMIT_DEFAULT) -> str:
    """Run the full pipeline: lex, parse, render."""
    return pretty_print(loads(text, max_depth=max_depth))
