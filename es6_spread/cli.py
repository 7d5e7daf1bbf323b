"""Command-line entry point."""

from __future__ import annotations

import json
import sys

from . import CompileOptions, compile
from .errors import ConfigError, ParseError, SpreadError
from .middleend.iteration import IterationStrategy

USAGE: str = """\
es6-spread [OPTIONS] [INPUT] [-o OUTPUT]

Options:
  --iteration STRATEGY     How spread values are collected: iterator (default),
                           array-like
  --module                 Parse INPUT as an ES module instead of a script
  --source-file-name NAME  Original file name recorded in the source map
                           (defaults to INPUT)
  --source-map FILE        Write a v3 source map to FILE
  -o, --output FILE        Write output to FILE instead of stdout
  --help                   Show this help message
"""


class Args:
    """Parsed command line."""

    def __init__(self) -> None:
        self.iteration: str = IterationStrategy.ITERATOR.value
        self.module: bool = False
        self.source_file_name: str | None = None
        self.source_map_file: str | None = None
        self.input_file: str | None = None
        self.output_file: str | None = None


def read_source(input_file: str | None) -> tuple[str, int]:
    """Read source from file or stdin. Returns (source, exit_code) where exit_code 0 means OK."""
    if input_file is not None:
        try:
            with open(input_file, "rb") as f:
                raw = f.read()
        except OSError:
            print("error: cannot open '" + input_file + "'", file=sys.stderr)
            return ("", 1)
    else:
        raw = sys.stdin.buffer.read()
    try:
        source = raw.decode("utf-8")
    except ValueError:
        print("error: invalid utf-8 in input", file=sys.stderr)
        return ("", 1)
    return (source, 0)


def write_output(output: str, output_file: str | None) -> int:
    """Write output to file or stdout. Returns 0 on success, 1 on error."""
    if output_file is not None:
        try:
            with open(output_file, "w", encoding="utf-8") as f:
                f.write(output)
        except OSError:
            print("error: cannot write '" + output_file + "'", file=sys.stderr)
            return 1
        return 0
    sys.stdout.write(output)
    return 0


def _require_value(args: list[str], i: int) -> str:
    if i + 1 >= len(args):
        print("error: " + args[i] + " requires an argument", file=sys.stderr)
        sys.exit(2)
    return args[i + 1]


def parse_args(argv: list[str] | None = None) -> Args:
    """Parse command-line arguments."""
    args = sys.argv[1:] if argv is None else argv
    parsed = Args()
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--help" or arg == "-h":
            print(USAGE, end="")
            sys.exit(0)
        elif arg == "--iteration":
            parsed.iteration = _require_value(args, i)
            i += 2
        elif arg == "--module":
            parsed.module = True
            i += 1
        elif arg == "--source-file-name":
            parsed.source_file_name = _require_value(args, i)
            i += 2
        elif arg == "--source-map":
            parsed.source_map_file = _require_value(args, i)
            i += 2
        elif arg == "-o" or arg == "--output":
            parsed.output_file = _require_value(args, i)
            i += 2
        elif arg.startswith("-") and arg != "-":
            print("error: unknown flag '" + arg + "'", file=sys.stderr)
            sys.exit(2)
        else:
            if parsed.input_file is not None:
                print("error: unexpected argument '" + arg + "'", file=sys.stderr)
                sys.exit(2)
            parsed.input_file = None if arg == "-" else arg
            i += 1
    if parsed.iteration not in [s.value for s in IterationStrategy]:
        print("error: unknown iteration strategy '" + parsed.iteration + "'", file=sys.stderr)
        sys.exit(2)
    return parsed


def build_options(args: Args) -> CompileOptions:
    """CompileOptions for the parsed command line."""
    source_file_name = args.source_file_name
    if source_file_name is None:
        source_file_name = args.input_file
    source_map_name: str | None = None
    if args.source_map_file is not None:
        source_map_name = args.output_file if args.output_file is not None else "<stdout>"
    return CompileOptions(
        source_file_name=source_file_name,
        source_map_name=source_map_name,
        iteration=IterationStrategy.from_name(args.iteration),
        source_type="module" if args.module else "script",
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    source, err = read_source(args.input_file)
    if err != 0:
        return err
    options = build_options(args)
    try:
        result = compile(source, options)
    except ParseError as e:
        print("error:" + str(e.lineno) + ":" + str(e.col) + ": " + e.msg, file=sys.stderr)
        return 1
    except ConfigError as e:
        print("error: " + str(e), file=sys.stderr)
        return 2
    except SpreadError as e:
        print("error: " + str(e), file=sys.stderr)
        return 1
    if args.source_map_file is not None and result.map is not None:
        code = write_output(json.dumps(result.map) + "\n", args.source_map_file)
        if code != 0:
            return code
    return write_output(result.code, args.output_file)


if __name__ == "__main__":
    sys.exit(main())
