"""Helper functions for run_report CLI."""

from __future__ import annotations

import argparse
import dataclasses

from common.cli_helpers import parse_date
from common.config import ReportConfig


def parse_run_report_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for run_report."""

    parser = argparse.ArgumentParser(
        description="Fetch news coverage of an AI product and report its sentiment and topics.",
    )

    # Input options
    parser.add_argument("--config", default=None, help="Path to a YAML config file")
    parser.add_argument("--query", default=None, help="Search query (default: from config)")
    parser.add_argument(
        "--from-date",
        type=lambda v: parse_date(v, "from-date"),
        default=None,
        help="First publication date to fetch (YYYY-MM-DD)",
    )
    parser.add_argument(
        "--to-date",
        type=lambda v: parse_date(v, "to-date"),
        default=None,
        help="Last publication date to fetch (YYYY-MM-DD, default: today UTC)",
    )
    parser.add_argument("--api-key", default=None, help="Guardian API key (default: GUARDIAN_API_KEY)")
    parser.add_argument(
        "--use-snapshot",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Reuse the article snapshot instead of fetching when it exists",
    )
    parser.add_argument("--snapshot", default=None, help="Snapshot file path (.csv or .parquet)")

    # Model options
    parser.add_argument("--n-topics", type=int, default=None, help="Number of topics")
    parser.add_argument("--seed", type=int, default=None, help="Topic model random seed")
    parser.add_argument(
        "--sentiment-method",
        default=None,
        help="Sentiment lexicon method (vader, vader_sum, textblob)",
    )

    # Output options
    parser.add_argument("--output-dir", default=None, help="Directory for tables and charts")
    parser.add_argument(
        "--interactive",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Write interactive HTML charts instead of PNGs",
    )
    parser.add_argument("--no-charts", action="store_true", help="Skip chart rendering")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    return parser.parse_args(argv)


def apply_overrides(config: ReportConfig, args: argparse.Namespace) -> ReportConfig:
    """Return a new config with CLI flags layered over file values.

    Nested configs are rebuilt with dataclasses.replace, so their validation
    runs again on the overridden values.
    """
    guardian = config.guardian
    if args.api_key:
        guardian = dataclasses.replace(guardian, api_key=args.api_key)

    topics = config.topics
    topic_overrides = {
        key: value
        for key, value in (("n_topics", args.n_topics), ("seed", args.seed))
        if value is not None
    }
    if topic_overrides:
        topics = dataclasses.replace(topics, **topic_overrides)

    sentiment = config.sentiment
    if args.sentiment_method is not None:
        sentiment = dataclasses.replace(sentiment, method=args.sentiment_method)

    output_overrides = {
        key: value
        for key, value in (
            ("output_dir", args.output_dir),
            ("snapshot_path", args.snapshot),
            ("use_snapshot", args.use_snapshot),
            ("interactive", args.interactive),
        )
        if value is not None
    }
    output = dataclasses.replace(config.output, **output_overrides)

    top_level = {
        key: value
        for key, value in (
            ("query", args.query),
            ("from_date", args.from_date),
            ("to_date", args.to_date),
        )
        if value is not None
    }
    return dataclasses.replace(
        config,
        guardian=guardian,
        topics=topics,
        sentiment=sentiment,
        output=output,
        **top_level,
    )
