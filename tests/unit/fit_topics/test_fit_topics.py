"""Tests for fit_topics.fit_topics module."""

import numpy as np
import pytest

from common.errors import InsufficientDataError
from fit_topics.fit_topics import fit_topic_model
from term_frequency.term_frequency import build_document_term_matrix
from tokenize_articles.models import TokenRecord

CORPUS = {
    "d1": "exam student cheat essay university exam student",
    "d2": "essay university student plagiarism exam teacher",
    "d3": "teacher school student homework essay cheat",
    "d4": "stock market investor shares price profit",
    "d5": "investor shares market valuation microsoft price",
    "d6": "microsoft investment valuation market billion profit",
    "d7": "poem poetry novel author writer fiction",
    "d8": "author novel writer creative fiction copyright",
    "d9": "copyright artist creative music poetry writer",
}


def _dtm(corpus: dict[str, str], extra_ids: list[str] | None = None):
    records = [TokenRecord(doc, word) for doc, text in corpus.items() for word in text.split()]
    return build_document_term_matrix(records, document_ids=list(corpus) + (extra_ids or []))


class TestFitTopicModel:
    def test_distributions_sum_to_one(self) -> None:
        model = fit_topic_model(_dtm(CORPUS), n_topics=3, seed=42)

        assert model.topic_term_weights.shape == (3, len(model.terms))
        assert model.document_topic_probabilities.shape == (9, 3)
        np.testing.assert_allclose(model.topic_term_weights.sum(axis=1), 1.0, atol=1e-9)
        np.testing.assert_allclose(model.document_topic_probabilities.sum(axis=1), 1.0, atol=1e-9)
        assert (model.topic_term_weights >= 0).all()
        assert (model.document_topic_probabilities >= 0).all()
        assert (model.document_topic_probabilities <= 1).all()

    def test_same_seed_same_assignment(self) -> None:
        dtm = _dtm(CORPUS)

        first = fit_topic_model(dtm, n_topics=3, seed=7)
        second = fit_topic_model(dtm, n_topics=3, seed=7)

        assert first.document_topics() == second.document_topics()
        np.testing.assert_array_equal(first.topic_term_weights, second.topic_term_weights)

    def test_dominant_topic_is_argmax(self) -> None:
        model = fit_topic_model(_dtm(CORPUS), n_topics=3, seed=42)

        for doc_topic in model.document_topics():
            distribution = model.topic_distribution(doc_topic.document_id)
            assert doc_topic.dominant_topic == model.dominant_topic(doc_topic.document_id)
            assert doc_topic.probability == pytest.approx(distribution.max())

    def test_zero_token_document_gets_uniform_distribution(self) -> None:
        model = fit_topic_model(_dtm(CORPUS, extra_ids=["empty"]), n_topics=3, seed=42)

        np.testing.assert_allclose(model.topic_distribution("empty"), [1 / 3] * 3)
        # Ties go to the lowest topic index
        assert model.dominant_topic("empty") == 0

    def test_top_terms_ordered_by_weight(self) -> None:
        model = fit_topic_model(_dtm(CORPUS), n_topics=3, seed=42)

        top = model.top_terms(4)

        assert len(top) == 12
        for topic in range(3):
            weights = [t.weight for t in top if t.topic == topic]
            assert weights == sorted(weights, reverse=True)

    def test_too_few_terms_raises(self) -> None:
        dtm = _dtm({"d1": "alpha beta alpha", "d2": "beta beta"})

        with pytest.raises(InsufficientDataError):
            fit_topic_model(dtm, n_topics=5, seed=1)

    def test_empty_matrix_raises(self) -> None:
        with pytest.raises(InsufficientDataError):
            fit_topic_model(build_document_term_matrix([]), n_topics=2, seed=1)

    def test_invalid_topic_count(self) -> None:
        with pytest.raises(ValueError):
            fit_topic_model(_dtm(CORPUS), n_topics=0, seed=1)
