"""Data models for run_report pipeline stage."""

from dataclasses import dataclass
from pathlib import Path

from aggregate_sentiment.models import SummaryTables
from clean_articles.models import CleanedArticle
from fit_topics.models import DocumentTopic, TopicModel, TopicTerm
from score_sentiment.models import SentimentScore, WordContribution
from term_frequency.models import DocumentTermMatrix
from tokenize_articles.models import WordFrequency


@dataclass(frozen=True, eq=False)
class ReportResult:
    """Everything one report run produced, stage by stage."""
    articles: tuple[CleanedArticle, ...]
    token_count: int
    document_term_matrix: DocumentTermMatrix
    topic_model: TopicModel
    document_topics: tuple[DocumentTopic, ...]
    scores: tuple[SentimentScore, ...]
    tables: SummaryTables
    top_terms: tuple[TopicTerm, ...]
    word_frequencies: tuple[WordFrequency, ...]
    word_contributions: tuple[WordContribution, ...]
    output_files: tuple[Path, ...] = ()
    chart_files: tuple[Path, ...] = ()
