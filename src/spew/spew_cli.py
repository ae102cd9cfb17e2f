"""
Spew CLI Entrypoint.

This module provides the command-line interface for the Spew front end.
It lexes and parses a source unit and prints the result.

Features:
    - Read source from `.spew` files or inline strings.
    - Print the token stream or the declaration tree.
    - Optionally emit the tree as JSON.
    - Output to console or file.

Example usage:
    spew shapes.spew
    spew -s "struct Point { x: num, y: num? }" --json
    spew shapes.spew --tokens
    spew shapes.spew --strict -o shapes.json --json

Functions:
    run_spew(source: str, is_string: bool = False, show_tokens: bool = False,
             as_json: bool = False, strict: bool = False, out: Optional[str] = None) -> str:
        Runs the pipeline (read -> lex -> parse -> format -> output).

    main(argv: Optional[list[str]] = None) -> int:
        Parses CLI arguments, runs the pipeline and reports errors.
"""

import argparse
import json
import sys

from spew.spew_errors import SpewSyntaxError
from spew.spew_lexer import CharacterStream, Lexer, Token
from spew.spew_parser import Parser


def format_tokens(tokens: list[Token]) -> str:
    return "\n".join(f"{tok.line}:{tok.col}\t{tok!r}" for tok in tokens)


def run_spew(
    source: str,
    is_string: bool = False,
    show_tokens: bool = False,
    as_json: bool = False,
    strict: bool = False,
    out: str | None = None,
) -> str:
    """
    Run the Spew front end on one source unit and output the result.

    Args:
        source (str): The Spew source code or path to a `.spew` file.
        is_string (bool): If True, treats `source` as raw code instead of a file path.
        show_tokens (bool): If True, outputs the token stream instead of the tree.
        as_json (bool): If True, outputs JSON instead of Python reprs.
        strict (bool): If True, lexes and parses in strict mode.
        out (str | None): Optional path to write the output to. If None, prints to stdout.

    Returns:
        str: The text that was output.

    Raises:
        ValueError: If `is_string` is False and the source does not end with '.spew'.
        SpewSyntaxError: If the source fails to lex or parse.
    """
    if not is_string and not source.endswith(".spew"):
        raise ValueError("Only .spew files are supported.")
    # 1. Read source
    if not is_string:
        with open(source, encoding="utf-8") as f:
            source = f.read()

    # 2. Lexing
    tokens = Lexer(CharacterStream(source), strict=strict).tokenize()

    # 3. Parsing (skipped when only tokens are wanted)
    if show_tokens:
        if as_json:
            text = json.dumps([tok.to_dict() for tok in tokens], indent=2)
        else:
            text = format_tokens(tokens)
    else:
        ast = Parser(tokens, strict=strict).parse()
        if as_json:
            text = json.dumps([node.to_dict() for node in ast], indent=2)
        else:
            text = "\n".join(repr(node) for node in ast)

    # 4. Output
    if out:
        with open(out, "w", encoding="utf-8") as f:
            f.write(text + "\n")
    else:
        print(text)
    return text


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="spew", description="Spew language front end")
    parser.add_argument("source", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument(
        "--tokens", action="store_true", help="Print the token stream instead of the AST"
    )
    parser.add_argument("--json", action="store_true", help="Print output as JSON")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Reject unknown characters, unterminated strings and stray top-level tokens",
    )
    parser.add_argument("-o", "--out", metavar="OUTFILE", help="Output to file")
    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Entry point for the Spew CLI.

    Returns the process exit status: 0 on success, 1 when the source is
    malformed or cannot be read.
    """
    args = build_parser().parse_args(argv)
    try:
        run_spew(
            source=args.source,
            is_string=args.string,
            show_tokens=args.tokens,
            as_json=args.json,
            strict=args.strict,
            out=args.out,
        )
    except (SpewSyntaxError, OSError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    sys.exit(main())
