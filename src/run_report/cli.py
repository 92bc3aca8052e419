"""CLI for running the coverage report."""

from __future__ import annotations

import logging
import sys

from dotenv import load_dotenv

from common.cli_helpers import setup_logging
from common.config import load_config
from common.errors import ReportError
from run_report.helpers import apply_overrides, parse_run_report_args
from run_report.run_report import run_report

load_dotenv()

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    args = parse_run_report_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        config = apply_overrides(load_config(args.config), args)
        result = run_report(config, render=not args.no_charts)
    except ReportError as exc:
        logger.error("Report failed: %s", exc)
        sys.exit(1)

    for row in result.tables.by_topic:
        terms = [t.term for t in result.top_terms if t.topic == row.key][:5]
        logger.info(
            "  topic %s | n=%d | mean sentiment %.3f | %s",
            row.key,
            row.count,
            row.mean_sentiment,
            ", ".join(terms),
        )
    logger.info("Wrote %d files to %s", len(result.output_files) + len(result.chart_files), config.output.output_dir)


if __name__ == "__main__":
    main()
