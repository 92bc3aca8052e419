"""Build a sparse document-term matrix from token records."""

import logging
from collections import Counter
from typing import Iterable

import numpy as np
from scipy import sparse

from term_frequency.models import DocumentTermMatrix
from tokenize_articles.models import TokenRecord

logger = logging.getLogger(__name__)


def build_document_term_matrix(
    records: Iterable[TokenRecord],
    document_ids: Iterable[str] | None = None,
) -> DocumentTermMatrix:
    """
    Count (document, word) occurrences into a DocumentTermMatrix.

    Args:
        records: Token records for the whole corpus.
        document_ids: Documents that must appear as rows even if they produced
            no tokens; they are kept as all-zero rows. Rows follow this order,
            then any other documents in the order they first appear in records.

    Returns:
        DocumentTermMatrix with sorted term columns.
    """
    row_ids: list[str] = []
    seen: set[str] = set()
    for document_id in document_ids or ():
        if document_id not in seen:
            seen.add(document_id)
            row_ids.append(document_id)

    pair_counts: Counter[tuple[str, str]] = Counter()
    for record in records:
        if record.document_id not in seen:
            seen.add(record.document_id)
            row_ids.append(record.document_id)
        pair_counts[(record.document_id, record.word)] += 1

    terms = tuple(sorted({word for _, word in pair_counts}))
    row_index = {document_id: i for i, document_id in enumerate(row_ids)}
    column_index = {term: i for i, term in enumerate(terms)}

    rows = np.fromiter((row_index[d] for d, _ in pair_counts), dtype=np.int64, count=len(pair_counts))
    cols = np.fromiter((column_index[w] for _, w in pair_counts), dtype=np.int64, count=len(pair_counts))
    data = np.fromiter(pair_counts.values(), dtype=np.int64, count=len(pair_counts))

    counts = sparse.csr_matrix((data, (rows, cols)), shape=(len(row_ids), len(terms)), dtype=np.int64)

    empty_rows = int(np.count_nonzero(np.diff(counts.indptr) == 0))
    if empty_rows:
        logger.warning("%d documents have no tokens and are kept as zero rows", empty_rows)
    logger.info(
        "Built document-term matrix: %d documents x %d terms (%d non-zero entries)",
        len(row_ids),
        len(terms),
        counts.nnz,
    )
    return DocumentTermMatrix(document_ids=tuple(row_ids), terms=terms, counts=counts)
