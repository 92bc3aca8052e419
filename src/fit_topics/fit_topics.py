"""Fit a latent Dirichlet allocation topic model over a document-term matrix."""

import logging

import numpy as np
from sklearn.decomposition import LatentDirichletAllocation

from common.errors import InsufficientDataError
from fit_topics.models import TopicModel
from term_frequency.models import DocumentTermMatrix

logger = logging.getLogger(__name__)


def _normalize_rows(matrix: np.ndarray) -> np.ndarray:
    """Scale rows to sum to 1; all-zero rows become uniform."""
    matrix = np.asarray(matrix, dtype=np.float64)
    totals = matrix.sum(axis=1, keepdims=True)
    uniform = np.full_like(matrix, 1.0 / matrix.shape[1])
    with np.errstate(invalid="ignore", divide="ignore"):
        normalized = np.where(totals > 0, matrix / totals, uniform)
    return normalized


def fit_topic_model(
    dtm: DocumentTermMatrix,
    n_topics: int = 5,
    seed: int = 1234,
    max_iter: int = 50,
) -> TopicModel:
    """
    Fit K topics to the document-term matrix.

    Args:
        dtm: Document-term count matrix.
        n_topics: Number of topics K (>= 1).
        seed: Random seed; the same matrix and seed give the same model.
        max_iter: Maximum number of batch EM iterations.

    Returns:
        TopicModel with normalized topic-term and document-topic distributions.

    Raises:
        ValueError: If n_topics < 1.
        InsufficientDataError: If there are no documents or fewer distinct
            non-zero terms than topics.
    """
    if n_topics < 1:
        raise ValueError(f"n_topics must be >= 1, got {n_topics}")

    n_documents, _ = dtm.shape
    if n_documents == 0:
        raise InsufficientDataError("Cannot fit a topic model on an empty corpus")

    nonzero_terms = dtm.nonzero_term_count
    if nonzero_terms < n_topics:
        raise InsufficientDataError(
            f"Cannot fit {n_topics} topics: only {nonzero_terms} distinct non-zero terms"
        )

    logger.info(
        "Fitting %d topics on %d documents x %d terms (seed=%d, max_iter=%d)",
        n_topics,
        n_documents,
        len(dtm.terms),
        seed,
        max_iter,
    )
    lda = LatentDirichletAllocation(
        n_components=n_topics,
        learning_method="batch",
        max_iter=max_iter,
        random_state=seed,
    )
    document_topics = lda.fit_transform(dtm.counts)

    # Zero-token documents carry no evidence: give them the uniform distribution
    empty_rows = np.diff(dtm.counts.indptr) == 0
    document_topics = _normalize_rows(document_topics)
    document_topics[empty_rows] = 1.0 / n_topics

    topic_terms = _normalize_rows(lda.components_)

    model = TopicModel(
        n_topics=n_topics,
        seed=seed,
        terms=dtm.terms,
        document_ids=dtm.document_ids,
        topic_term_weights=topic_terms,
        document_topic_probabilities=document_topics,
    )

    sizes = np.bincount(np.argmax(document_topics, axis=1), minlength=n_topics)
    logger.info("Topic sizes: %s", ", ".join(f"{k}={int(v)}" for k, v in enumerate(sizes)))
    return model
