#!/usr/bin/env python3

import argparse
import json
import logging
import sys
import time
from typing import List, Optional, TextIO

from vmre import __version__
from vmre.config import DEFAULT_MAX_THREADS, EngineConfig
from vmre.engine import Regexp
from vmre.errors import RegexError
from vmre.re_ast import subtree_string

EXIT_COMMAND = "<EXIT>"
REGEX_COMMAND = "<REGEX>"

logger = logging.getLogger("rematch")


def scan_lines(regexp: Regexp, lines) -> List[dict]:
    """Match every line and collect one record per matching line."""
    output = []
    for line_no, line in enumerate(lines, start=1):
        text = line.rstrip("\r\n")
        result = regexp.match(text)
        if result:
            output.append(
                {
                    "line": line_no,
                    "start": result.start,
                    "end": result.end,
                    "match": text[result.start : result.end],
                }
            )
    return output


def _read_line(stream: TextIO, prompt: str, out: TextIO) -> Optional[str]:
    out.write(prompt)
    out.flush()
    line = stream.readline()
    if not line:
        return None
    return line.rstrip("\r\n")


def interactive_session(
    pattern: Optional[str], config: EngineConfig, stream: TextIO, out: TextIO
) -> int:
    """
    Prompt for subjects and report whether each one matches.

    `<REGEX>` reads a replacement pattern, `<EXIT>` (or end of input) quits.
    """
    if pattern is None:
        pattern = _read_line(stream, "[+] input regex: ", out)
        if pattern is None:
            return 0
    regexp = Regexp(pattern, config)

    while True:
        text = _read_line(stream, "[+] input string to match: ", out)
        if text is None or text == EXIT_COMMAND:
            out.write("Bye :)\n")
            return 0
        if text == REGEX_COMMAND:
            new_pattern = _read_line(stream, "[-] input new regex: ", out)
            if new_pattern is None:
                out.write("Bye :)\n")
                return 0
            try:
                regexp = Regexp(new_pattern, config)
            except RegexError as e:
                out.write(f"error: {e}\n")
            out.write("\n")
            continue
        try:
            result = regexp.match(text)
        except RegexError as e:
            out.write(f"error: {e}\n\n")
            continue
        if result:
            out.write(f"{text} => Match! [{result.start}, {result.end})\n\n")
        else:
            out.write(f"{text} => Not match.\n\n")


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Match a regular expression against lines of text with a bytecode VM."
    )
    parser.add_argument("pattern", nargs="?", help="Regular expression to match")
    parser.add_argument(
        "input_file", nargs="?", help="Path to input text; defaults to stdin"
    )
    parser.add_argument(
        "-i",
        "--interactive",
        action="store_true",
        help=f"Interactive shell ({REGEX_COMMAND} switches pattern, {EXIT_COMMAND} quits)",
    )
    parser.add_argument(
        "--pretty-print",
        action="store_true",
        help="Emit all results in a single pretty-printed JSON array",
    )
    parser.add_argument(
        "--dump-ast", action="store_true", help="Print the syntax tree and exit"
    )
    parser.add_argument(
        "--dump-bytecode",
        action="store_true",
        help="Print the compiled bytecode and exit",
    )
    parser.add_argument(
        "--no-optimize",
        action="store_true",
        help="Skip the bytecode optimizer",
    )
    parser.add_argument(
        "--max-threads",
        type=int,
        default=DEFAULT_MAX_THREADS,
        help="Maximum number of pending VM threads per match",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="WARNING",
        help="Set logging level",
    )
    parser.add_argument(
        "--show-timing",
        action="store_true",
        help="Show compile and match timing on stderr",
    )
    parser.add_argument("--version", action="store_true", help="Show version and exit")
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        default=None,
        help="Write output to this file (UTF-8, LF line endings). If omitted, output goes to stdout.",
    )
    return parser


def write_results(output: List[dict], output_stream: TextIO, pretty_print: bool):
    if pretty_print:
        json.dump(output, output_stream, indent=2)
        output_stream.write("\n")
    else:
        for item in output:
            output_stream.write(json.dumps(item))
            output_stream.write("\n")


def main(argv: Optional[List[str]] = None) -> int:
    # pylint: disable=too-many-return-statements,too-many-branches
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"rematch: {__version__}")
        return 0

    logging.basicConfig(
        level=getattr(logging, args.log_level), format="[%(levelname)s] %(message)s"
    )

    try:
        config = EngineConfig(
            max_threads=args.max_threads, optimize=not args.no_optimize
        )
    except ValueError as e:
        parser.error(str(e))

    if args.interactive:
        try:
            return interactive_session(args.pattern, config, sys.stdin, sys.stdout)
        except RegexError as e:
            sys.stderr.write(f"error: {e}\n")
            return 1

    if args.pattern is None:
        parser.error("the following arguments are required: pattern")

    compile_start = time.time()
    try:
        regexp = Regexp(args.pattern, config)
    except RegexError as e:
        sys.stderr.write(f"error: {e}\n")
        return 1
    if args.show_timing:
        sys.stderr.write(f"Compile time: {time.time() - compile_start:.3f}s\n")

    if args.dump_ast:
        print(subtree_string(regexp.tree))
        return 0
    if args.dump_bytecode:
        print(regexp.dump())
        return 0

    match_start = time.time()
    logger.info("Scanning %s", args.input_file or "<stdin>")
    try:
        if args.input_file:
            with open(args.input_file, "r", encoding="utf-8") as f:
                output = scan_lines(regexp, f)
        else:
            output = scan_lines(regexp, sys.stdin)
    except RegexError as e:
        sys.stderr.write(f"error: {e}\n")
        return 1
    if args.show_timing:
        sys.stderr.write(f"Match time: {time.time() - match_start:.3f}s\n")

    output_stream = None
    if args.output:
        output_stream = open(args.output, "w", encoding="utf-8", newline="\n")
    else:
        output_stream = sys.stdout

    try:
        write_results(output, output_stream, args.pretty_print)
    finally:
        if args.output and output_stream is not sys.stdout:
            output_stream.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
