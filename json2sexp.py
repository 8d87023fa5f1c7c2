# json2sexp.py
# Command-line wrapper: read a JSON file, print its S-expression rendering
#
# Exit codes: 0 on success, 1 on LexError/ParseError, 2 when the input
# cannot be read.

import argparse
import logging
import sys
from typing import List, Optional

from json_parser import DEPTH_LIMIT_DEFAULT, DEPTH_LIMIT_MAX, parse
from lexer import JSONSyntaxError, lex
from sexpr import pretty_print

log = logging.getLogger("json2sexp")


def _depth(text: str) -> int:
    value = int(text)
    if not 1 <= value <= DEPTH_LIMIT_MAX:
        raise argparse.ArgumentTypeError(f"must be between 1 and {DEPTH_LIMIT_MAX}, got {value}")
    return value


def _read(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as fh:
        return fh.read()


def _cli(argv: List[str]) -> int:
    """
    Command-line interface for conversion runs.

    0 on success, 1 on a syntax error in the input, 2 on an I/O failure.
    """
    ap = argparse.ArgumentParser(prog="json2sexp", description="Render a JSON document as an S-expression")
    ap.add_argument("file", help="JSON file to convert ('-' for stdin)")
    ap.add_argument("--tokens", action="store_true", help="dump token stream and exit")
    ap.add_argument("--max-depth", type=_depth, default=DEPTH_LIMIT_DEFAULT,
                    help=f"maximum container nesting (1-{DEPTH_LIMIT_MAX})")
    ap.add_argument("-v", "--verbose", action="store_true", help="log debug detail to stderr")
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(name)s: %(levelname)s: %(message)s")

    try:
        data = _read(args.file)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    log.debug("read %d characters from %s", len(data), args.file)

    try:
        tokens = lex(data)
        if args.tokens:
            for tok in tokens:
                print(tok)
            return 0
        print(pretty_print(parse(tokens, max_depth=args.max_depth)))
        return 0
    except JSONSyntaxError as exc:
        print(f"{type(exc).__name__}: {exc}", file=sys.stderr)
        return 1


def main(argv: Optional[List[str]] = None) -> int:
    return _cli(sys.argv[1:] if argv is None else argv)


if __name__ == "__main__":
    sys.exit(main())
