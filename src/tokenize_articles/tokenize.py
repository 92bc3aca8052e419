"""Word tokenization with stopword filtering."""

import logging
import re
from collections import Counter
from typing import AbstractSet, Iterable, Iterator

from clean_articles.models import CleanedArticle
from tokenize_articles.models import TokenRecord, WordFrequency

logger = logging.getLogger(__name__)

# Runs of word characters, optionally joined by internal apostrophes ("don't")
TOKEN_PATTERN = re.compile(r"\w+(?:'\w+)*")
POSSESSIVE_SUFFIX = "'s"


def tokenize(
    text: str,
    stopwords: AbstractSet[str],
    drop_numeric: bool = False,
) -> Iterator[str]:
    """
    Lazily yield lower-cased word tokens from text.

    A trailing possessive "'s" is removed ("chatgpt's" -> "chatgpt") before
    tokens in `stopwords` are dropped; when `drop_numeric` is set, tokens made
    only of digits are dropped too. The generator can be re-created from the
    same text to get the same sequence.
    """
    if not text:
        return
    for match in TOKEN_PATTERN.finditer(text.lower()):
        token = match.group()
        if token.endswith(POSSESSIVE_SUFFIX):
            token = token[: -len(POSSESSIVE_SUFFIX)]
        if token in stopwords:
            continue
        if drop_numeric and token.isdigit():
            continue
        yield token


def tokenize_articles(
    articles: Iterable[CleanedArticle],
    stopwords: AbstractSet[str],
    drop_numeric: bool = False,
) -> Iterator[TokenRecord]:
    """Yield a TokenRecord for every kept token of every article's cleaned body."""
    for article in articles:
        for word in tokenize(article.body_text_cleaned, stopwords, drop_numeric):
            yield TokenRecord(document_id=article.id, word=word)


def query_terms(query: str) -> frozenset[str]:
    """Lower-cased word tokens of a search query (e.g. "ChatGPT" -> {"chatgpt"})."""
    return frozenset(tokenize(query, frozenset()))


def word_frequencies(records: Iterable[TokenRecord], n: int | None = None) -> list[WordFrequency]:
    """Most frequent words across all records, ties broken alphabetically."""
    counts = Counter(record.word for record in records)
    ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    if n is not None:
        ordered = ordered[:n]
    return [WordFrequency(word=word, count=count) for word, count in ordered]
