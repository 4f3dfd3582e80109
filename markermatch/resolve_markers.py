from __future__ import annotations

import argparse
import json
import logging
import sys

from dotenv import load_dotenv

from markermatch.refmarkers.analysis.match import IndexBuildError, ReferenceMarkerMatcher, classify_style
from markermatch.refmarkers.analysis.parse.bib_records import RecordFormatError, load_records
from markermatch.refmarkers.analysis.shared.normalize import analyzer_tokens
from markermatch.refmarkers.core.cli import add_runtime_args, apply_runtime_overrides
from markermatch.refmarkers.core.config import Settings
from markermatch.refmarkers.core.counters import CntManager
from markermatch.refmarkers.layout.tokens import to_text_dehyphenized, tokenize_text


def _result_payload(marker: str, matcher: ReferenceMarkerMatcher) -> dict:
    tokens = tokenize_text(marker)
    results = matcher.match(tokens)
    return {
        "marker": marker,
        "style": classify_style(to_text_dehyphenized(tokens)),
        "results": [
            {
                "text": r.text,
                "tokens": [t.text for t in r.tokens],
                "record_id": r.record.record_id if r.record else None,
                "raw": r.record.raw if r.record else None,
            }
            for r in results
        ],
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Resolve in-text reference markers against bibliography records.")
    parser.add_argument("markers", nargs="*", help="Marker texts, e.g. '[3, 5-7]' or 'Smith et al., 1990'.")
    parser.add_argument("--records", help="JSON file with bibliography records (raw, label, authors, year, id).")
    parser.add_argument("--counters", action="store_true", help="Print match counters after the results.")
    parser.add_argument("--tokenize", metavar="TEXT", help="Print analyzer tokens for TEXT and exit.")
    add_runtime_args(parser)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    load_dotenv()
    apply_runtime_overrides(args)
    try:
        settings = Settings.from_env()
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO))

    if args.tokenize is not None:
        for token in analyzer_tokens(args.tokenize):
            print(token)
        return 0

    if not args.records:
        parser.error("--records is required unless --tokenize is given")

    counters = CntManager()
    try:
        records = load_records(args.records)
        matcher = ReferenceMarkerMatcher(
            records,
            counters,
            must_match_ratio=settings.must_match_ratio,
            max_range=settings.max_range,
        )
    except (IndexBuildError, RecordFormatError, OSError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    for marker in args.markers:
        print(json.dumps(_result_payload(marker, matcher), ensure_ascii=False))
    if args.counters:
        print(json.dumps({"counters": counters.snapshot()}))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
