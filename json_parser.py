# json_parser.py
# Recursive-descent JSON parser producing an immutable, order-preserving value tree
#
# =============================================================================
#  PARSER IMPLEMENTATION: RECURSIVE DESCENT FOR STRUCTURE
# =============================================================================
#
# One function per grammar rule:
#
#     value  = dict | list | string | number | "true" | "false" | "null"
#     list   = "[" [ value ("," value)* ] "]"
#     dict   = "{" [ pair ("," pair)* ] "}"
#     pair   = string ":" value
#
# Tokens are consumed left to right through a LookAhead iterator with a single
# slot of pushback; no production looks more than one token ahead and nothing
# backtracks.
#
# Objects are kept as ordered (key, value) pairs rather than dicts: key order
# is significant downstream and duplicate keys are passed through unmerged.
#
# Nesting is bounded by max_depth (default DEPTH_LIMIT_DEFAULT). Recursion
# depth tracks container nesting, so the limit keeps both this parser and the
# printer in sexpr.py below the interpreter's recursion limit.
#
# Anything after the root value is rejected as extra data.
# =============================================================================

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Union

from lexer import JSONSyntaxError, Token, TokenKind, lex

__all__ = [
    "JSONObject", "JSONArray", "JSONString", "JSONNumber", "JSONBool", "JSONNull",
    "Value", "ParseError", "LookAhead", "parse", "loads",
    "DEPTH_LIMIT_DEFAULT", "DEPTH_LIMIT_MAX",
]

log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# CONSTANTS AND TUNABLES
# ---------------------------------------------------------------------------
DEPTH_LIMIT_DEFAULT = 200   # nested containers; keeps recursion well under sys.getrecursionlimit()
DEPTH_LIMIT_MAX     = 250   # highest limit the printer can render at the default recursion limit

# ---------------------------------------------------------------------------
# VALUE TREE
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class JSONObject:
    pairs: Tuple[Tuple[str, "Value"], ...]

    def keys(self) -> List[str]:
        return [key for key, _ in self.pairs]


@dataclass(frozen=True)
class JSONArray:
    items: Tuple["Value", ...]


@dataclass(frozen=True)
class JSONString:
    text: str


@dataclass(frozen=True)
class JSONNumber:
    value: float


@dataclass(frozen=True)
class JSONBool:
    value: bool


@dataclass(frozen=True)
class JSONNull:
    pass


Value = Union[JSONObject, JSONArray, JSONString, JSONNumber, JSONBool, JSONNull]

_ATOMS = {
    TokenKind.STRING: JSONString,
    TokenKind.NUMBER: JSONNumber,
    TokenKind.TRUE:   JSONBool,
    TokenKind.FALSE:  JSONBool,
}


class ParseError(JSONSyntaxError):
    """Unexpected token, premature end of input, bad key, extra data or excess nesting."""


def _error_at(tok: Token, msg: str) -> ParseError:
    return ParseError(msg, tok.offset, tok.line, tok.column)

# ---------------------------------------------------------------------------
# LOOKAHEAD RING
# ---------------------------------------------------------------------------
class LookAhead:
    """
    One-slot pushback iterator.

    Gives the parser its single token of lookahead without buffering the
    rest of the stream. ``last`` is the most recent token pulled from the
    underlying stream, used to place errors when a stream ends without EOF.
    """
    def __init__(self, iterable: Iterable[Token]):
        self._iter = iter(iterable)
        self._buf: List[Token] = []
        self.last: Optional[Token] = None

    def __iter__(self):
        return self

    def __next__(self) -> Token:
        if self._buf:
            return self._buf.pop()
        return self._pull()

    def peek(self) -> Token:
        if not self._buf:
            self._buf.append(self._pull())
        return self._buf[-1]

    def _pull(self) -> Token:
        tok = next(self._iter)
        self.last = tok
        return tok

# ---------------------------------------------------------------------------
# PARSER UTILITY
# ---------------------------------------------------------------------------
def _end_of_input(tokens: LookAhead, expected: str) -> ParseError:
    msg = f"unexpected end of input - expected {expected}"
    if tokens.last is None:
        return ParseError(msg, 0, 1, 1)
    return _error_at(tokens.last, msg)


def _next(tokens: LookAhead, expected: str) -> Token:
    try:
        tok = next(tokens)
    except StopIteration:
        raise _end_of_input(tokens, expected) from None
    if tok.kind == TokenKind.EOF:
        raise _end_of_input(tokens, expected)
    return tok


def _peek(tokens: LookAhead, expected: str) -> Token:
    try:
        return tokens.peek()
    except StopIteration:
        raise _end_of_input(tokens, expected) from None


def _expect(tokens: LookAhead, expected_kind: str) -> Token:
    """
    Consume and verify the next token. Raises a precise error with expected and actual.
    """
    tok = _next(tokens, expected_kind)
    if tok.kind != expected_kind:
        raise _error_at(tok, f"unexpected token {tok.kind} {tok.text!r} - expected {expected_kind}")
    return tok

# ---------------------------------------------------------------------------
# CORE VALUE PARSER
# ---------------------------------------------------------------------------
def _parse_value(tokens: LookAhead, depth: int, max_depth: int) -> Value:
    """
    Dispatch on the current token: containers recurse, atoms are returned directly.
    """
    tok = _next(tokens, "value")
    kind = tok.kind

    if kind in _ATOMS:
        return _ATOMS[kind](tok.value)
    if kind == TokenKind.NULL:
        return JSONNull()
    if kind == TokenKind.LBRACE:
        return _parse_dict(tokens, tok, depth + 1, max_depth)
    if kind == TokenKind.LBRACKET:
        return _parse_list(tokens, tok, depth + 1, max_depth)

    raise _error_at(tok, f"unexpected token {kind} {tok.text!r} - value expected")


def _check_depth(opener: Token, depth: int, max_depth: int):
    if depth > max_depth:
        raise _error_at(opener, f"depth limit exceeded (max_depth={max_depth})")

# ---------------------------------------------------------------------------
# ARRAY PARSER
# ---------------------------------------------------------------------------
def _parse_list(tokens: LookAhead, opener: Token, depth: int, max_depth: int) -> JSONArray:
    """
    Parse the remainder of a list after its '['.
    """
    _check_depth(opener, depth, max_depth)
    items: List[Value] = []
    if _peek(tokens, TokenKind.RBRACKET).kind == TokenKind.RBRACKET:
        next(tokens)
        return JSONArray(())

    items.append(_parse_value(tokens, depth, max_depth))
    while _peek(tokens, TokenKind.RBRACKET).kind == TokenKind.COMMA:
        next(tokens)
        items.append(_parse_value(tokens, depth, max_depth))
    _expect(tokens, TokenKind.RBRACKET)
    return JSONArray(tuple(items))

# ---------------------------------------------------------------------------
# OBJECT PARSER
# ---------------------------------------------------------------------------
def _parse_pair(tokens: LookAhead, depth: int, max_depth: int) -> Tuple[str, Value]:
    key = _next(tokens, "string key")
    if key.kind != TokenKind.STRING:
        raise _error_at(key, f"expected string for key, got {key.kind} {key.text!r}")
    _expect(tokens, TokenKind.COLON)
    return key.value, _parse_value(tokens, depth, max_depth)


def _parse_dict(tokens: LookAhead, opener: Token, depth: int, max_depth: int) -> JSONObject:
    """
    Parse the remainder of an object after its '{'.

    Pairs are appended in source order. A repeated key is kept as a second
    pair; nothing is merged or overwritten.
    """
    _check_depth(opener, depth, max_depth)
    pairs: List[Tuple[str, Value]] = []
    if _peek(tokens, TokenKind.RBRACE).kind == TokenKind.RBRACE:
        next(tokens)
        return JSONObject(())

    pairs.append(_parse_pair(tokens, depth, max_depth))
    while _peek(tokens, TokenKind.RBRACE).kind == TokenKind.COMMA:
        next(tokens)
        pairs.append(_parse_pair(tokens, depth, max_depth))
    _expect(tokens, TokenKind.RBRACE)
    return JSONObject(tuple(pairs))

# ---------------------------------------------------------------------------
# PUBLIC API
# ---------------------------------------------------------------------------
def parse(tokens: Iterable[Token], *, max_depth: int = DEPTH_LIMIT_DEFAULT) -> Value:
    """
    Build exactly one Value from a token sequence produced by lexer.lex().

    Rejects trailing tokens so the whole input is accounted for. No partial
    tree is ever returned: any failure raises ParseError, including a
    max_depth set too high for the interpreter's recursion limit.
    """
    stream = LookAhead(tokens)
    try:
        result = _parse_value(stream, 0, max_depth)
    except RecursionError:
        raise _error_at(stream.last, "nesting too deep for the interpreter's recursion limit") from None
    try:
        extra = next(stream)
    except StopIteration:
        extra = None
    if extra is None or extra.kind == TokenKind.EOF:
        log.debug("parsed root %s", type(result).__name__)
        return result
    raise _error_at(extra, f"extra data after root value: {extra.kind} {extra.text!r}")


def loads(text: str, *, max_depth: int = DEPTH_LIMIT_DEFAULT) -> Value:
    """Lex and parse ``text`` in one call."""
    return parse(lex(text), max_depth=max_depth)
