"""CLI entry-point: ``python -m newstone run`` / ``python -m newstone studies``."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from newstone import config
from newstone.aggregate import DOCUMENT_MEASURES
from newstone.corpus import CorpusError
from newstone.lexicon import LexiconLoadError
from newstone.models import GroupAggregate, PipelineResult
from newstone.pipeline import run_study, setup_logging
from newstone.study import StudyError, load_named_study, load_study

logger = logging.getLogger(__name__)


def _fmt(value: float | None) -> str:
    return "NA" if value is None else f"{value:.3f}"


def format_groups(groups: list[GroupAggregate]) -> str:
    """Render group aggregates as a fixed-width text table."""
    header = f"{'group':<20} {'measure':<20} {'mean':>8} {'se':>8} {'n':>5}"
    lines = [header, "-" * len(header)]
    for g in groups:
        lines.append(
            f"{g.group:<20} {g.measure:<20} {_fmt(g.mean):>8} {_fmt(g.std_error):>8} {g.n:>5}"
        )
    return "\n".join(lines)


def _print_result(result: PipelineResult, as_json: bool) -> None:
    if as_json:
        payload = {
            "groups": [g.model_dump() for g in result.groups],
            "documents": [d.model_dump() for d in result.documents],
            "skipped": [s.model_dump() for s in result.skipped],
        }
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return
    print(format_groups(result.groups))
    if result.skipped:
        print(f"\nSkipped {len(result.skipped)} documents: {', '.join(result.skipped_ids)}")


def _run(study_name: str, study_file: Path | None, corpus: Path, measure: str | None, as_json: bool) -> int:
    try:
        study = load_study(study_file) if study_file else load_named_study(study_name)
        result = run_study(study, corpus, measure=measure)
    except (StudyError, LexiconLoadError, CorpusError) as exc:
        logger.error("%s", exc)
        return 1
    _print_result(result, as_json)
    return 0


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="newstone",
        description="Lexicon-based tone of news coverage, per article and per group.",
    )
    sub = parser.add_subparsers(dest="command")

    # ── run ────────────────────────────────────────────────────────────
    run_parser = sub.add_parser("run", help="Score a corpus for a study.")
    run_parser.add_argument(
        "--study",
        default=config.DEFAULT_STUDY,
        help=f"Study name under the studies directory (default: {config.DEFAULT_STUDY}).",
    )
    run_parser.add_argument(
        "--study-file",
        type=Path,
        help="Path to a study.yml outside the studies directory.",
    )
    run_parser.add_argument(
        "--corpus",
        type=Path,
        required=True,
        help="Articles as .jsonl or .csv.",
    )
    run_parser.add_argument(
        "--measure",
        choices=DOCUMENT_MEASURES,
        help="Document measure to aggregate per group (default: the study's).",
    )
    run_parser.add_argument(
        "--json",
        action="store_true",
        help="Print groups, documents and skipped ids as JSON.",
    )

    # ── studies ────────────────────────────────────────────────────────
    sub.add_parser("studies", help="List available studies.")

    args = parser.parse_args(argv)
    setup_logging()

    if args.command == "run":
        sys.exit(_run(args.study, args.study_file, args.corpus, args.measure, args.json))
    elif args.command == "studies":
        for name in config.available_studies():
            print(name)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
