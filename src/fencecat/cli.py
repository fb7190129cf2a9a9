# src/fencecat/cli.py
import sys
import argparse
import logging
from pathlib import Path
from typing import List, Optional

from fencecat.config import STATS_TOP_N, __version__
from fencecat.core.filters import FilterConfig
from fencecat.core.pipeline import FileStat, RunResult, run
from fencecat.core.sink import ClipboardSink, StdoutSink
from fencecat.errors import ConfigError, PathError, SinkError

EXIT_FATAL = 1
EXIT_STRICT_READ_ERRORS = 2


def create_arg_parser():
    parser = argparse.ArgumentParser(
        prog="fencecat",
        description=(
            "Recursively emit Markdown code fences labeled with relative file paths. "
            "Useful for sharing source trees in LLM chats or issue trackers."
        ),
    )
    parser.add_argument("path", type=Path, nargs="?", default=Path("."),
                        help="Root directory to scan OR a single file to emit (default: .)")
    parser.add_argument("-c", "--copy", action="store_true", help="Copy the full output to the clipboard")
    parser.add_argument("-B", "--biggest-first", action="store_true", help="Order files by size (largest first)")
    parser.add_argument("-e", "--ext", action="append", metavar="EXT[,EXT...]",
                        help="Only include these extensions, e.g. --ext rs,ts,py or --ext .md")
    parser.add_argument("-x", "--not-ext", action="append", metavar="EXT[,EXT...]",
                        help="Exclude these extensions; wins over --ext")
    parser.add_argument("-i", "--include", action="append", metavar="REGEX",
                        help="Only include relative paths matching REGEX (repeatable)")
    parser.add_argument("-X", "--exclude", action="append", metavar="REGEX",
                        help="Exclude relative paths matching REGEX (repeatable); wins over --include")
    parser.add_argument("-H", "--no-ignore", action="store_true",
                        help="Include hidden and gitignored files (disable ignore rules)")
    parser.add_argument("-D", "--dir-list", action="store_true",
                        help="Prepend a plain file listing before the fences")
    parser.add_argument("-T", "--tree", action="store_true", help="Prepend a project tree before the fences")
    parser.add_argument("-j", "--jobs", type=int, default=1, help="Read files with N threads (default: 1)")
    parser.add_argument("-s", "--stats", action="store_true",
                        help="Print file and token statistics to stderr")
    parser.add_argument("--strict", action="store_true",
                        help=f"Exit with status {EXIT_STRICT_READ_ERRORS} if any file could not be read")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def print_stats(files: List[FileStat]) -> None:
    total_bytes = sum(f.size for f in files)
    total_tokens = sum(f.token_count or 0 for f in files)
    largest = sorted(files, key=lambda f: f.size, reverse=True)[:STATS_TOP_N]

    print(f"\n--- Top {STATS_TOP_N} Largest Files ---", file=sys.stderr)
    print(f"{'Rank':<5} | {'Bytes':<10} | {'Tokens':<10} | {'File Path'}", file=sys.stderr)
    print("-" * 60, file=sys.stderr)
    for i, f in enumerate(largest):
        print(f"{i+1:<5} | {f.size:<10} | {f.token_count or 0:<10} | {f.rel_path}", file=sys.stderr)
    print("-" * 60, file=sys.stderr)
    print(f"Total files: {len(files)}", file=sys.stderr)
    print(f"Total bytes: {total_bytes}", file=sys.stderr)
    print(f"Total tokens: {total_tokens}", file=sys.stderr)


def execute(args: argparse.Namespace) -> int:
    if args.jobs < 1:
        raise ConfigError(f"--jobs must be at least 1, got {args.jobs}")

    config = FilterConfig.build(
        ext_allow=args.ext,
        ext_deny=args.not_ext,
        include=args.include,
        exclude=args.exclude,
        respect_ignore_rules=not args.no_ignore,
    )

    result: RunResult = run(
        args.path,
        config,
        biggest_first=args.biggest_first,
        jobs=args.jobs,
        dir_list=args.dir_list,
        tree=args.tree,
        count_tokens=args.stats,
    )

    try:
        StdoutSink().write(result.output)
    except SinkError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FATAL

    if args.copy:
        sink = ClipboardSink()
        try:
            sink.write(result.output)
            print(">> copied to clipboard", file=sys.stderr)
        except SinkError as e:
            print(f">> failed to copy to clipboard: {e}", file=sys.stderr)

    if args.stats:
        print_stats(result.files)

    if result.errors:
        logging.getLogger(__name__).warning("%d file(s) could not be read", len(result.errors))
        if args.strict:
            return EXIT_STRICT_READ_ERRORS
    return 0


def main(argv: Optional[List[str]] = None):
    try:
        parser = create_arg_parser()
        args = parser.parse_args(argv)
        configure_logging(args.verbose)

        code = execute(args)
        if code:
            sys.exit(code)

    except (PathError, ConfigError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(EXIT_FATAL)

    except KeyboardInterrupt:
        print("\nCancelled.", file=sys.stderr)
        sys.exit(EXIT_FATAL)

    except Exception as e:
        print(f"An unexpected error occurred: {e}", file=sys.stderr)
        sys.exit(EXIT_FATAL)


if __name__ == "__main__":
    main()
