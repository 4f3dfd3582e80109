from __future__ import annotations

import argparse
import os


def add_runtime_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (overrides MARKERMATCH_LOG_LEVEL).",
    )
    parser.add_argument(
        "--max-range",
        type=int,
        help="Widest numeric range expanded into individual labels (overrides MARKERMATCH_MAX_RANGE).",
    )
    parser.add_argument(
        "--must-match-ratio",
        type=float,
        help="Share of query tokens a record key must contain (overrides MARKERMATCH_MUST_MATCH_RATIO).",
    )


def apply_runtime_overrides(args: argparse.Namespace) -> None:
    if getattr(args, "log_level", None):
        os.environ["MARKERMATCH_LOG_LEVEL"] = args.log_level
    if getattr(args, "max_range", None) is not None:
        os.environ["MARKERMATCH_MAX_RANGE"] = str(args.max_range)
    if getattr(args, "must_match_ratio", None) is not None:
        os.environ["MARKERMATCH_MUST_MATCH_RATIO"] = str(args.must_match_ratio)
