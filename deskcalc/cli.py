import argparse
import importlib.metadata
import io
import logging
import sys
from collections.abc import Iterator, Sequence
from typing import TextIO

from deskcalc.errors import CalcError, CalcInternalError
from deskcalc.session import Session
from deskcalc.tokenizer import KEYWORDS, QUIT
from deskcalc.variables import VariableTable

logger = logging.getLogger("deskcalc.cli")

EXIT_OK = 0
EXIT_INTERNAL_ERROR = 1
EXIT_USAGE_OR_IO_ERROR = 2

DEFAULT_PROMPT = "> "


def _version() -> str:
    try:
        return importlib.metadata.version("deskcalc")
    except importlib.metadata.PackageNotFoundError:
        return "unknown"


def _parse_definition(text: str) -> tuple[str, float]:
    name, sep, value = text.partition("=")
    name = name.strip()
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got {text!r}")
    # must read back as a single identifier token
    if not (name[0].isalpha() and name.isalnum()) or name in KEYWORDS or name.startswith(QUIT):
        raise argparse.ArgumentTypeError(f"{name!r} is not a valid variable name")
    try:
        return name, float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"value of {name!r} is not a number: {value.strip()!r}") from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="deskcalc",
        description="Evaluate arithmetic statements ('let x = 2; x * pi;'), 'q' to quit.",
    )
    parser.add_argument("files", nargs="*", metavar="FILE", help="Files to evaluate (default: standard input).")
    parser.add_argument(
        "-e",
        "--expr",
        action="append",
        default=[],
        metavar="CODE",
        help="Evaluate CODE before any files (repeatable).",
    )
    parser.add_argument(
        "--define",
        action="append",
        default=[],
        type=_parse_definition,
        metavar="NAME=VALUE",
        help="Declare a variable before evaluation starts (repeatable).",
    )
    prompt_group = parser.add_mutually_exclusive_group()
    prompt_group.add_argument(
        "--prompt",
        default=DEFAULT_PROMPT,
        help=f"Prompt shown when reading standard input (default: {DEFAULT_PROMPT!r}).",
    )
    prompt_group.add_argument("--no-prompt", action="store_true", help="Do not show a prompt.")
    parser.add_argument("--no-builtins", action="store_true", help="Start without the constants pi and e.")
    parser.add_argument(
        "--list-variables",
        action="store_true",
        help="Print every variable and its value after evaluation.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug information to stderr.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {_version()}")
    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _sources(args: argparse.Namespace) -> Iterator[tuple[str, TextIO]]:
    for code in args.expr:
        yield "<expr>", io.StringIO(code)
    for name in args.files:
        with open(name, encoding="utf-8") as f:
            yield name, f
    if not args.expr and not args.files:
        yield "<stdin>", sys.stdin


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        variables = VariableTable(with_builtins=not args.no_builtins)
        for name, value in args.define:
            variables.declare(name, value)
    except CalcError as e:
        print(f"deskcalc: --define: {e}", file=sys.stderr)
        return EXIT_USAGE_OR_IO_ERROR

    prompt = "" if args.no_prompt else args.prompt
    try:
        for source_name, source in _sources(args):
            logger.debug("Evaluating %s", source_name)
            session = Session(source, variables=variables)
            session.run(
                out=sys.stdout,
                err=sys.stderr,
                prompt=prompt if source is sys.stdin else "",
            )
            if session.quit_requested:
                break
    except (OSError, UnicodeDecodeError) as e:
        print(f"deskcalc: {e}", file=sys.stderr)
        return EXIT_USAGE_OR_IO_ERROR
    except CalcInternalError as e:
        print(f"deskcalc: internal error: {e}", file=sys.stderr)
        return EXIT_INTERNAL_ERROR

    if args.list_variables:
        for variable in variables:
            print(f"{variable.name} = {variable.value:g}")

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
