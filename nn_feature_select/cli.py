"""Command-line interface wrapper around :func:`nn_feature_select.run_search`."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from .candidates import BACKWARD, FORWARD
from .data import load_dataset, normalize_features
from .dispatch import DEFAULT_N_JOBS, TIE_BREAKS
from .exceptions import FeatureSelectionError, InvalidChoiceError
from .report import ConsoleReporter
from .search import run_search

logger = logging.getLogger(__name__)

METHODS = {1: FORWARD, 2: BACKWARD}
METHOD_MENU = "Choose search method:\n1. Forward Selection\n2. Backward Elimination\n"


def _prompt(text: str) -> str:
    try:
        return input(text).strip()
    except EOFError:
        return ""


def _choose_direction(raw: str) -> str:
    try:
        return METHODS[int(raw)]
    except (KeyError, ValueError):
        raise InvalidChoiceError(f"Invalid choice {raw!r}.") from None


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="nn-feature-select",
        description=(
            "Greedy feature subset search scored by leave-one-out "
            "nearest-neighbor accuracy."
        ),
    )
    p.add_argument("--file", help="Data file; prompted for when omitted.")
    p.add_argument(
        "--method",
        help="1 = forward selection, 2 = backward elimination; prompted for when omitted.",
    )
    p.add_argument("--n-jobs", type=int, default=DEFAULT_N_JOBS,
                   help="Worker threads per search round.")
    p.add_argument("--tie-break", choices=TIE_BREAKS, default="first_come",
                   help="How equally accurate candidates in a round are resolved.")
    p.add_argument("--plot", metavar="PATH",
                   help="Save a search trace figure to PATH.")
    p.add_argument("--log-level", default="WARNING",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level),
        format="[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )
    logging.captureWarnings(True)


def _run(args: argparse.Namespace) -> int:
    filename = args.file if args.file is not None else _prompt("Enter the filename: ")
    data = load_dataset(filename)
    normalize_features(data)

    raw_choice = args.method if args.method is not None else _prompt(METHOD_MENU)
    direction = _choose_direction(raw_choice)

    result = run_search(
        data,
        direction,
        n_jobs=args.n_jobs,
        tie_break=args.tie_break,
        reporter=ConsoleReporter(),
    )

    if args.plot:
        from .plot import plot_search_trace

        plot_search_trace(result, save_path=args.plot)
        logger.info("Search trace saved to %s", args.plot)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.log_level)
    if args.n_jobs < 1:
        print("Error: --n-jobs must be >= 1.", file=sys.stderr)
        return 1
    try:
        return _run(args)
    except FeatureSelectionError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
