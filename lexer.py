# lexer.py
# Hand-rolled JSON lexer feeding the recursive-descent parser in json_parser.py
#
# =============================================================================
#  LEXER IMPLEMENTATION: ONE REGEX, NAMED GROUPS
# =============================================================================
#
# Every token class is a named group in a single compiled pattern, so a match
# classifies itself through m.lastgroup. Anything the pattern cannot cover is a
# gap between two matches and is reported as a LexError with its offset.
#
# Strings are taken verbatim. Escape sequences are not recognised: a string ends
# at the first '"' after the opening quote, even when a backslash precedes it,
# and the backslash stays in the payload.
#
# Numbers are scanned as a greedy run of [0-9.eE+-] and then validated, so that
# "1.2.3" is one malformed number rather than a number followed by garbage.
# =============================================================================

import logging
import re
from typing import Iterator, List, NamedTuple, Optional, Tuple, Union

__all__ = [
    "TokenKind", "Token", "JSONSyntaxError", "LexError",
    "tokenize", "lex", "line_col", "format_number",
]

log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# ERRORS
# ---------------------------------------------------------------------------
class JSONSyntaxError(SyntaxError):
    """
    Base for every failure raised while reading JSON text.

    ``reason`` is the bare message; ``msg`` (what SyntaxError formatting and
    tracebacks print) is the reason plus its position. ``offset`` is a 0-based
    character offset into the source, ``line`` and ``column`` are 1-based.
    SyntaxError's ``text`` and ``lineno`` stay unset, so traceback formatting
    never reinterprets ``offset`` as a caret column.
    """

    def __init__(self, reason: str, offset: Optional[int] = None,
                 line: Optional[int] = None, column: Optional[int] = None):
        if offset is None:
            msg = reason
        elif line is None:
            msg = f"{reason} at offset {offset}"
        else:
            msg = f"{reason} at offset {offset} (line {line}, column {column})"
        super().__init__(msg)
        self.reason = reason
        self.offset = offset
        self.line = line
        self.column = column

    def __str__(self):
        return self.msg


class LexError(JSONSyntaxError):
    """Invalid character, unterminated string, malformed number or unknown literal."""


# ---------------------------------------------------------------------------
# TOKEN RECORD
# ---------------------------------------------------------------------------
class TokenKind:
    LBRACE   = "LBRACE"
    RBRACE   = "RBRACE"
    LBRACKET = "LBRACKET"
    RBRACKET = "RBRACKET"
    COLON    = "COLON"
    COMMA    = "COMMA"
    STRING   = "STRING"
    NUMBER   = "NUMBER"
    TRUE     = "TRUE"
    FALSE    = "FALSE"
    NULL     = "NULL"
    EOF      = "EOF"


def format_number(value: float) -> str:
    """
    Canonical decimal text for a float.

    Uses repr(), which is the shortest string that reads back as the same
    float, and drops a trailing ".0" so integral values print as integers:
    88.0 -> "88", 95.5 -> "95.5", 1e300 -> "1e+300", -0.0 -> "-0".
    """
    text = repr(value)
    if text.endswith(".0"):
        return text[:-2]
    return text


class Token(NamedTuple):
    """
    Immutable token record: (kind, value, offset, line, column).

    ``value`` is the string payload for STRING, a float for NUMBER, the Python
    constant for TRUE/FALSE/NULL and the character itself for punctuation.
    The EOF token sits at the end of the source and has value None.
    """
    kind: str
    value: Union[str, float, bool, None]
    offset: int
    line: int
    column: int

    @property
    def text(self) -> str:
        if self.kind == TokenKind.STRING:
            return self.value
        if self.kind == TokenKind.NUMBER:
            return format_number(self.value)
        if self.kind == TokenKind.EOF:
            return "EOF"
        return _KEYWORD_TEXT.get(self.kind, self.value)

    def __str__(self):
        return f"'{self.text}' at line: {self.line}"


_PUNCTUATION = {
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    "[": TokenKind.LBRACKET,
    "]": TokenKind.RBRACKET,
    ":": TokenKind.COLON,
    ",": TokenKind.COMMA,
}

_KEYWORDS = {
    "true":  (TokenKind.TRUE, True),
    "false": (TokenKind.FALSE, False),
    "null":  (TokenKind.NULL, None),
}
_KEYWORD_TEXT = {kind: word for word, (kind, _) in _KEYWORDS.items()}

# ---------------------------------------------------------------------------
# REGEX BLUEPRINT
# ---------------------------------------------------------------------------
_WHITESPACE = r"[ \t\r\n]+"
_STRING     = r'"[^"]*"'
_NUMBER_RUN = r"(?:-|[0-9])[0-9.eE+\-]*"
_WORD       = r"[A-Za-z_][A-Za-z0-9_]*"
_NUMBER_RE  = re.compile(r"-?[0-9]+(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?")

_TOKEN_RE = re.compile(
    rf"(?P<STRING>{_STRING})|"
    rf"(?P<NUMBER>{_NUMBER_RUN})|"
    rf"(?P<WORD>{_WORD})|"
    r"(?P<PUNCT>[{}\[\]:,])|"
    rf"(?P<WHITESPACE>{_WHITESPACE})",
)


def line_col(text: str, offset: int) -> Tuple[int, int]:
    """Return the 1-based (line, column) of ``offset`` in ``text``."""
    line = text.count("\n", 0, offset) + 1
    column = offset - (text.rfind("\n", 0, offset) + 1) + 1
    return line, column


def _fail(text: str, msg: str, offset: int) -> LexError:
    line, column = line_col(text, offset)
    return LexError(msg, offset, line, column)


def _number(text: str, raw: str, start: int) -> float:
    if not _NUMBER_RE.fullmatch(raw):
        raise _fail(text, f"invalid number '{raw}'", start)
    value = float(raw)
    if value in (float("inf"), float("-inf")):
        raise _fail(text, f"invalid number '{raw}' (out of range)", start)
    return value


def _gap(text: str, pos: int) -> LexError:
    ch = text[pos]
    if ch == '"':
        return _fail(text, "unterminated string", pos)
    return _fail(text, f"invalid character {ch!r}", pos)


def tokenize(text: str) -> Iterator[Token]:
    """
    Single-pass generator producing tokens. Rejects any gap in regex coverage.

    Payloads are converted to their Python types here so the parser only has
    to look at kinds.
    """
    pos = 0
    line = 1
    line_start = 0
    for m in _TOKEN_RE.finditer(text):
        group = m.lastgroup
        raw   = m.group()
        start = m.start()

        if start != pos:
            raise _gap(text, pos)
        pos = m.end()

        column = start - line_start + 1
        tok_line = line
        newlines = raw.count("\n")
        if newlines:
            line += newlines
            line_start = text.rfind("\n", start, pos) + 1

        if group == "WHITESPACE":
            continue
        if group == "STRING":
            yield Token(TokenKind.STRING, raw[1:-1], start, tok_line, column)
        elif group == "NUMBER":
            yield Token(TokenKind.NUMBER, _number(text, raw, start), start, tok_line, column)
        elif group == "WORD":
            if raw not in _KEYWORDS:
                raise _fail(text, f"unknown literal '{raw}'", start)
            kind, value = _KEYWORDS[raw]
            yield Token(kind, value, start, tok_line, column)
        else:
            yield Token(_PUNCTUATION[raw], raw, start, tok_line, column)

    if pos != len(text):
        raise _gap(text, pos)
    yield Token(TokenKind.EOF, None, pos, line, pos - line_start + 1)


def lex(text: str) -> List[Token]:
    """
    Tokenize the whole of ``text``; every LexError surfaces here, before parsing.

    The list always ends with an EOF token positioned just past the last
    character, so running out of input can be reported at a location.
    """
    tokens = list(tokenize(text))
    log.debug("lexed %d tokens from %d characters", len(tokens), len(text))
    return tokens
