"""Tests for score_sentiment.score_sentiment module."""

from datetime import datetime, timezone

import pytest

from clean_articles.models import CleanedArticle
from common.errors import UnsupportedMethodError
from score_sentiment.score_sentiment import (
    SENTIMENT_METHODS,
    score_articles,
    score_text,
    vader_lexicon,
    word_contributions,
)
from tokenize_articles.models import TokenRecord


def _cleaned(article_id: str, text: str, day: int = 15) -> CleanedArticle:
    return CleanedArticle(
        id=article_id,
        section_name="Technology",
        published_at=datetime(2023, 1, day, tzinfo=timezone.utc),
        byline=None,
        body_text=text,
        word_count=len(text.split()),
        headline=None,
        body_text_cleaned=text,
    )


class TestScoreText:
    @pytest.mark.parametrize("method", sorted(SENTIMENT_METHODS))
    def test_empty_text_is_exactly_zero(self, method) -> None:
        assert score_text("", method) == 0
        assert score_text("   \n", method) == 0
        assert score_text(None, method) == 0

    @pytest.mark.parametrize("method", sorted(SENTIMENT_METHODS))
    def test_surrounding_whitespace_does_not_change_score(self, method) -> None:
        text = "The launch was a great success but the outage was terrible"
        assert score_text(f"  {text}\n\t", method) == score_text(text, method)

    def test_vader_signs(self) -> None:
        assert score_text("This is a wonderful, great and happy result", "vader") > 0
        assert score_text("This is a terrible, awful and sad failure", "vader") < 0

    def test_vader_sum_adds_lexicon_valences(self) -> None:
        lexicon = vader_lexicon()
        expected = lexicon["good"] + lexicon["bad"] + lexicon["good"]
        assert score_text("good bad good chatbot", "vader_sum") == pytest.approx(expected)

    def test_textblob_sign(self) -> None:
        assert score_text("This is a wonderful and excellent product", "textblob") > 0

    def test_unsupported_method_raises(self) -> None:
        with pytest.raises(UnsupportedMethodError):
            score_text("great", "nrc")


class TestScoreArticles:
    def test_sorted_by_document_then_date(self) -> None:
        articles = [_cleaned("b", "great"), _cleaned("a", "awful"), _cleaned("c", "")]

        scores = score_articles(articles, "vader")

        assert [s.document_id for s in scores] == ["a", "b", "c"]
        assert scores[0].score < 0 < scores[1].score
        assert scores[2].score == 0
        assert all(s.method == "vader" for s in scores)

    def test_unsupported_method_fails_before_scoring(self) -> None:
        with pytest.raises(UnsupportedMethodError):
            score_articles([_cleaned("a", "great")], "bogus")


class TestWordContributions:
    def test_ranks_by_absolute_contribution(self) -> None:
        lexicon = vader_lexicon()
        records = [TokenRecord("a1", w) for w in ("good", "good", "good", "terrible", "chatbot")]

        contributions = word_contributions(records)

        words = [c.word for c in contributions]
        assert "chatbot" not in words
        good = next(c for c in contributions if c.word == "good")
        assert good.count == 3
        assert good.contribution == pytest.approx(3 * lexicon["good"])
        assert [abs(c.contribution) for c in contributions] == sorted(
            (abs(c.contribution) for c in contributions), reverse=True
        )
