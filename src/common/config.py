"""Configuration loading for the coverage report."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

import yaml
from dotenv import load_dotenv

from common.errors import ConfigError, UnsupportedMethodError
from score_sentiment.score_sentiment import SENTIMENT_METHODS

logger = logging.getLogger(__name__)

# Config directory relative to this file (repo root /configs)
CONFIG_DIR = Path(__file__).resolve().parent.parent.parent / "configs"
DEFAULT_CONFIG_NAME = "default"
API_KEY_ENV_VAR = "GUARDIAN_API_KEY"


@dataclass
class GuardianConfig:
    """Connection settings for the Guardian content API."""

    api_key: str | None = None
    base_url: str = "https://content.guardianapis.com"
    page_size: int = 50
    timeout: float = 30.0
    max_retries: int = 3
    backoff_base: float = 1.0
    max_pages: int | None = None

    def __post_init__(self) -> None:
        if not 1 <= self.page_size <= 200:
            raise ConfigError(f"page_size must be between 1 and 200, got {self.page_size}")
        if self.timeout <= 0:
            raise ConfigError(f"timeout must be positive, got {self.timeout}")
        if self.max_retries < 0:
            raise ConfigError(f"max_retries must be >= 0, got {self.max_retries}")
        if self.backoff_base < 0:
            raise ConfigError(f"backoff_base must be >= 0, got {self.backoff_base}")


@dataclass
class TokenizeConfig:
    stopwords_base: str = "english"  # "english" or "none"
    stopwords_file: str | None = None
    extra_stopwords: list[str] = field(default_factory=list)
    drop_numeric: bool = True
    exclude_query_terms: bool = True

    def __post_init__(self) -> None:
        if self.stopwords_base not in ("english", "none"):
            raise ConfigError(
                f"Invalid stopwords_base: {self.stopwords_base}. Must be 'english' or 'none'"
            )


@dataclass
class TopicConfig:
    n_topics: int = 5
    seed: int = 1234
    max_iter: int = 50
    top_terms: int = 10

    def __post_init__(self) -> None:
        if self.n_topics < 1:
            raise ConfigError(f"n_topics must be >= 1, got {self.n_topics}")
        if self.max_iter < 1:
            raise ConfigError(f"max_iter must be >= 1, got {self.max_iter}")


@dataclass
class SentimentConfig:
    method: str = "vader"

    def __post_init__(self) -> None:
        if self.method not in SENTIMENT_METHODS:
            raise UnsupportedMethodError(
                f"Unsupported sentiment method: {self.method}. "
                f"Must be one of {sorted(SENTIMENT_METHODS)}"
            )


@dataclass
class OutputConfig:
    output_dir: str = "output"
    snapshot_path: str = "output/articles_snapshot.csv"
    use_snapshot: bool = False
    interactive: bool = False
    top_words: int = 20
    top_authors: int = 15


@dataclass
class ReportConfig:
    query: str = "ChatGPT"
    from_date: date = date(2022, 11, 30)
    to_date: date | None = None
    guardian: GuardianConfig = field(default_factory=GuardianConfig)
    tokenize: TokenizeConfig = field(default_factory=TokenizeConfig)
    topics: TopicConfig = field(default_factory=TopicConfig)
    sentiment: SentimentConfig = field(default_factory=SentimentConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    def __post_init__(self) -> None:
        if not self.query or not self.query.strip():
            raise ConfigError("query must not be empty")
        if self.to_date is not None and self.to_date < self.from_date:
            raise ConfigError(
                f"to_date ({self.to_date}) must not be before from_date ({self.from_date})"
            )


def _parse_date(value, field_name: str) -> date | None:
    if value is None or isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError as exc:
        raise ConfigError(f"{field_name} must be YYYY-MM-DD, got {value!r}") from exc


def _parse_int(value, field_name: str, default: int | None = None) -> int | None:
    if value is None:
        return default
    if isinstance(value, bool):
        raise ConfigError(f"{field_name} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{field_name} must be an integer, got {value!r}") from exc


def _parse_float(value, field_name: str, default: float) -> float:
    if value is None:
        return default
    if isinstance(value, bool):
        raise ConfigError(f"{field_name} must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{field_name} must be a number, got {value!r}") from exc


def _parse_bool(value, field_name: str, default: bool) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ConfigError(f"{field_name} must be true or false, got {value!r}")
    return value


def _parse_str(value, field_name: str, default: str | None = None) -> str | None:
    if value is None:
        return default
    if isinstance(value, (dict, list)):
        raise ConfigError(f"{field_name} must be a string, got {value!r}")
    return str(value)


def _parse_section(data: dict, name: str) -> dict:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"{name} must be a mapping, got {section!r}")
    return section


def _parse_config(data: dict) -> ReportConfig:
    """Parse config dictionary into ReportConfig object."""
    guardian_data = _parse_section(data, "guardian")
    tokenize_data = _parse_section(data, "tokenize")
    topics_data = _parse_section(data, "topics")
    sentiment_data = _parse_section(data, "sentiment")
    output_data = _parse_section(data, "output")

    guardian = GuardianConfig(
        api_key=_parse_str(guardian_data.get("api_key"), "guardian.api_key") or os.environ.get(API_KEY_ENV_VAR),
        base_url=_parse_str(guardian_data.get("base_url"), "guardian.base_url", "https://content.guardianapis.com"),
        page_size=_parse_int(guardian_data.get("page_size"), "guardian.page_size", 50),
        timeout=_parse_float(guardian_data.get("timeout"), "guardian.timeout", 30.0),
        max_retries=_parse_int(guardian_data.get("max_retries"), "guardian.max_retries", 3),
        backoff_base=_parse_float(guardian_data.get("backoff_base"), "guardian.backoff_base", 1.0),
        max_pages=_parse_int(guardian_data.get("max_pages"), "guardian.max_pages"),
    )

    extra_stopwords = tokenize_data.get("extra_stopwords") or []
    if not isinstance(extra_stopwords, list):
        raise ConfigError(f"tokenize.extra_stopwords must be a list, got {extra_stopwords!r}")

    tokenize = TokenizeConfig(
        stopwords_base=_parse_str(tokenize_data.get("stopwords_base"), "tokenize.stopwords_base", "english"),
        stopwords_file=_parse_str(tokenize_data.get("stopwords_file"), "tokenize.stopwords_file"),
        extra_stopwords=[str(word) for word in extra_stopwords],
        drop_numeric=_parse_bool(tokenize_data.get("drop_numeric"), "tokenize.drop_numeric", True),
        exclude_query_terms=_parse_bool(
            tokenize_data.get("exclude_query_terms"), "tokenize.exclude_query_terms", True
        ),
    )

    topics = TopicConfig(
        n_topics=_parse_int(topics_data.get("n_topics"), "topics.n_topics", 5),
        seed=_parse_int(topics_data.get("seed"), "topics.seed", 1234),
        max_iter=_parse_int(topics_data.get("max_iter"), "topics.max_iter", 50),
        top_terms=_parse_int(topics_data.get("top_terms"), "topics.top_terms", 10),
    )

    sentiment = SentimentConfig(method=_parse_str(sentiment_data.get("method"), "sentiment.method", "vader"))

    output = OutputConfig(
        output_dir=_parse_str(output_data.get("output_dir"), "output.output_dir", "output"),
        snapshot_path=_parse_str(
            output_data.get("snapshot_path"), "output.snapshot_path", "output/articles_snapshot.csv"
        ),
        use_snapshot=_parse_bool(output_data.get("use_snapshot"), "output.use_snapshot", False),
        interactive=_parse_bool(output_data.get("interactive"), "output.interactive", False),
        top_words=_parse_int(output_data.get("top_words"), "output.top_words", 20),
        top_authors=_parse_int(output_data.get("top_authors"), "output.top_authors", 15),
    )

    return ReportConfig(
        query=_parse_str(data.get("query"), "query", "ChatGPT"),
        from_date=_parse_date(data.get("from_date"), "from_date") or date(2022, 11, 30),
        to_date=_parse_date(data.get("to_date"), "to_date"),
        guardian=guardian,
        tokenize=tokenize,
        topics=topics,
        sentiment=sentiment,
        output=output,
    )


def load_config(path: str | Path | None = None) -> ReportConfig:
    """Load configuration from a YAML file.

    Args:
        path: Path to a YAML config file. If None, uses the REPORT_CONFIG env
            var, then configs/default.yaml; if neither exists the built-in
            defaults are used.

    Returns:
        Loaded ReportConfig object

    Raises:
        ConfigError: If an explicitly requested file is missing or invalid.
        UnsupportedMethodError: If the sentiment method is unknown.
    """
    load_dotenv()

    explicit = path is not None or os.environ.get("REPORT_CONFIG") is not None
    if path is None:
        path = os.environ.get("REPORT_CONFIG") or CONFIG_DIR / f"{DEFAULT_CONFIG_NAME}.yaml"
    config_path = Path(path)

    if not config_path.exists():
        if explicit:
            raise ConfigError(f"Config file not found: {config_path}")
        logger.info("No config file at %s, using defaults", config_path)
        return _parse_config({})

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")

    logger.info("Loaded config from %s", config_path)
    return _parse_config(data)
