"""Data models for fit_topics pipeline stage."""

from dataclasses import dataclass, field

import numpy as np


@dataclass(frozen=True)
class DocumentTopic:
    """Dominant topic of a document and its membership probability."""
    document_id: str
    dominant_topic: int
    probability: float


@dataclass(frozen=True)
class TopicTerm:
    """Weight of a term within a topic."""
    topic: int
    term: str
    weight: float


@dataclass(frozen=True, eq=False)
class TopicModel:
    """
    Fitted topic model.

    `topic_term_weights` is K x V with each row summing to 1;
    `document_topic_probabilities` is D x K with each row summing to 1.
    """

    n_topics: int
    seed: int
    terms: tuple[str, ...]
    document_ids: tuple[str, ...]
    topic_term_weights: np.ndarray
    document_topic_probabilities: np.ndarray
    _row_index: dict[str, int] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_row_index", {d: i for i, d in enumerate(self.document_ids)})

    def topic_distribution(self, document_id: str) -> np.ndarray:
        return self.document_topic_probabilities[self._row_index[document_id]]

    def dominant_topic(self, document_id: str) -> int:
        """Highest-probability topic; ties go to the lowest topic index."""
        # np.argmax returns the first maximal index
        return int(np.argmax(self.topic_distribution(document_id)))

    def document_topics(self) -> list[DocumentTopic]:
        results = []
        for document_id, row in zip(self.document_ids, self.document_topic_probabilities):
            topic = int(np.argmax(row))
            results.append(
                DocumentTopic(
                    document_id=document_id,
                    dominant_topic=topic,
                    probability=float(row[topic]),
                )
            )
        return results

    def top_terms(self, n: int = 10) -> list[TopicTerm]:
        """Top-n terms per topic, ordered by topic then descending weight (ties by term)."""
        results = []
        for topic, weights in enumerate(self.topic_term_weights):
            ranked = sorted(range(len(self.terms)), key=lambda i: (-weights[i], self.terms[i]))
            for i in ranked[:n]:
                results.append(TopicTerm(topic=topic, term=self.terms[i], weight=float(weights[i])))
        return results
