import argparse
import logging
import sys
import time
from pathlib import Path

from wordgrid.dictionary import ORACLE_KINDS, load_dictionary, make_oracle
from wordgrid.grid import Grid, GridConfigError
from wordgrid.metrics import StageTimer
from wordgrid.settings import settings
from wordgrid.solver import Solver

logger = logging.getLogger("wordgrid")


def read_grid(path: str | Path) -> str:
    """Grid files hold one row per line; rows are stripped and joined."""
    with open(path, "r", encoding="utf-8") as f:
        return "".join(line.strip() for line in f)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="wordgrid", description="List every dictionary word hidden in a square letter grid")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("grid_file", nargs="?", help="File with one grid row per line")
    source.add_argument("--letters", help="Grid letters as a single string, rows concatenated")
    parser.add_argument("--dictionary", default=str(settings.DICTIONARY_PATH),
                        help="Sorted word list, one lowercase word per line (default: %(default)s)")
    parser.add_argument("--min-length", type=int, default=settings.MIN_WORD_LENGTH,
                        help="Shortest word to report (default: %(default)s)")
    parser.add_argument("--oracle", choices=ORACLE_KINDS, default=settings.ORACLE,
                        help="Dictionary lookup strategy (default: %(default)s)")
    parser.add_argument("--workers", type=int, default=settings.WORKERS,
                        help="Threads used to search from different starting cells (default: %(default)s)")
    parser.add_argument("--deadline", type=float, default=settings.SEARCH_DEADLINE_SECONDS,
                        help="Stop searching after this many seconds, 0 for no limit (default: %(default)s)")
    parser.add_argument("--timings", action="store_true", help="Print per-stage timings to stderr")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    timer = StageTimer()
    try:
        with timer.stage("load"):
            letters = args.letters if args.letters is not None else read_grid(args.grid_file)
            dictionary = load_dictionary(args.dictionary)
    except OSError as e:
        logger.error("Could not read input: %s", e)
        return 1

    try:
        grid = Grid(letters)
    except GridConfigError as e:
        logger.error("Not a valid grid: %s", e)
        return 1

    with timer.stage("oracle"):
        oracle = make_oracle(dictionary, args.oracle)

    with timer.stage("solve"):
        deadline = time.monotonic() + args.deadline if args.deadline > 0 else None
        result = Solver(grid, oracle, args.min_length).solve(args.workers, deadline)
    timer.record_search(result.stats)

    for word in sorted(result.words):
        print(word)

    if not result.complete:
        logger.warning("Search stopped at the deadline; results are partial")
    if args.timings:
        for name, ms in timer.summary().items():
            print(f"{name}: {ms}ms", file=sys.stderr)
        for name, count in timer.search.as_dict().items():
            print(f"{name}: {count}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
