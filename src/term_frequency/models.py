"""Data models for term_frequency pipeline stage."""

from dataclasses import dataclass, field

import numpy as np
from scipy import sparse


@dataclass(frozen=True, eq=False)
class DocumentTermMatrix:
    """
    Sparse document-term count matrix.

    Rows follow `document_ids`, columns follow `terms` (sorted). Entries not
    stored in `counts` are zero.
    """

    document_ids: tuple[str, ...]
    terms: tuple[str, ...]
    counts: sparse.csr_matrix
    _row_index: dict[str, int] = field(init=False, repr=False, compare=False)
    _column_index: dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.counts.shape != (len(self.document_ids), len(self.terms)):
            raise ValueError(
                f"counts shape {self.counts.shape} does not match "
                f"{len(self.document_ids)} documents x {len(self.terms)} terms"
            )
        object.__setattr__(self, "_row_index", {d: i for i, d in enumerate(self.document_ids)})
        object.__setattr__(self, "_column_index", {t: i for i, t in enumerate(self.terms)})

    @property
    def shape(self) -> tuple[int, int]:
        return self.counts.shape

    @property
    def nonzero_term_count(self) -> int:
        """Number of distinct terms with a total count above zero."""
        if not self.terms:
            return 0
        totals = np.asarray(self.counts.sum(axis=0)).ravel()
        return int(np.count_nonzero(totals))

    def count(self, document_id: str, term: str) -> int:
        """Occurrences of `term` in the document; 0 for unknown terms."""
        row = self._row_index[document_id]
        column = self._column_index.get(term)
        if column is None:
            return 0
        return int(self.counts[row, column])

    def document_total(self, document_id: str) -> int:
        """Total token count of a document (its row sum)."""
        row = self._row_index[document_id]
        return int(self.counts[row].sum())
