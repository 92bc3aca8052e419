"""Data models for tokenize_articles pipeline stage."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TokenRecord:
    """One word occurrence in a document."""
    document_id: str
    word: str


@dataclass(frozen=True)
class WordFrequency:
    """Corpus-wide occurrence count of a word."""
    word: str
    count: int
