# This source code is part of the ProtCompare package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "protcompare.compare"
__author__ = "ProtCompare contributors"
__all__ = ["SkipReason", "ComparisonRecord", "ResultSet", "RESULT_COLUMNS"]

import enum
from collections.abc import Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from ..sequence.align.metrics import calculate_metrics


# Column names of a record in tabular output
RESULT_COLUMNS = (
    "Index",
    "Identity (%)",
    "Coverage (%)",
    "Combined Score",
    "Alignment Score",
    "Empirical P-Value",
)


class SkipReason(enum.Enum):
    """
    The reason why a candidate did not produce a
    :class:`ComparisonRecord`.
    """

    INVALID_SEQUENCE = "invalid sequence"
    ALIGNMENT_FAILED = "alignment failed"
    ESTIMATION_FAILED = "estimation failed"


@dataclass(frozen=True)
class ComparisonRecord:
    """
    The comparison result of a single candidate.

    The metrics are stored unrounded, rounding is only applied in
    :meth:`as_row()`.

    Attributes
    ----------
    index : int
        The index of the candidate in the original batch.
    identity : float
        The identity in percent.
    coverage : float
        The query coverage in percent.
    combined_score : float
        The identity scaled by the fractional coverage.
    alignment_score : int or float
        The local alignment score.
    p_value : PValue
        The empirical p-value or its upper bound.
    alignment : LocalAlignment, optional
        The underlying alignment.
    """

    index: int
    identity: float
    coverage: float
    combined_score: float
    alignment_score: object
    p_value: object
    alignment: object = field(default=None, compare=False, repr=False)

    @staticmethod
    def from_alignment(index, alignment, query_length, p_value):
        """
        Create a record from the alignment of a candidate.

        Parameters
        ----------
        index : int
            The index of the candidate in the original batch.
        alignment : LocalAlignment
            The alignment of the query and the candidate.
        query_length : int
            The length of the query sequence.
        p_value : PValue
            The empirical p-value of the alignment score.

        Returns
        -------
        record : ComparisonRecord
            The record.
        """
        metrics = calculate_metrics(alignment, query_length)
        return ComparisonRecord(
            index=index,
            identity=metrics.identity,
            coverage=metrics.coverage,
            combined_score=metrics.combined_score,
            alignment_score=alignment.score,
            p_value=p_value,
            alignment=alignment,
        )

    def as_row(self, decimals=2):
        """
        Convert the record into a row for tabular output.

        Parameters
        ----------
        decimals : int, optional
            The number of decimal places of the metrics and the
            alignment score.

        Returns
        -------
        row : dict
            The row, keyed by the names in :data:`RESULT_COLUMNS`.
            The p-value is given as string, so that a bound keeps its
            ``'< '`` prefix.
        """
        return dict(
            zip(
                RESULT_COLUMNS,
                (
                    self.index,
                    round(self.identity, decimals),
                    round(self.coverage, decimals),
                    round(self.combined_score, decimals),
                    round(self.alignment_score, decimals),
                    str(self.p_value),
                ),
            )
        )


class ResultSet(Sequence):
    """
    An immutable, ranked collection of :class:`ComparisonRecord`
    objects.

    The records are sorted by descending (unrounded) combined score.
    Records with equal combined score keep the ascending order of their
    original batch index.

    Parameters
    ----------
    records : iterable object of ComparisonRecord
        The records in arbitrary order.
    skipped : dict, optional
        Maps each :class:`SkipReason` to the number of skipped
        candidates.
    total : int, optional
        The number of candidates in the batch.
        By default the number of records plus skipped candidates.
    """

    def __init__(self, records, skipped=None, total=None):
        self._records = tuple(
            sorted(records, key=lambda record: (-record.combined_score, record.index))
        )
        skipped = {reason: count for reason, count in (skipped or {}).items() if count}
        self._skipped = MappingProxyType(skipped)
        if total is None:
            total = len(self._records) + sum(skipped.values())
        self._total = total

    @property
    def skipped(self):
        """
        mapping : The number of skipped candidates for each
        :class:`SkipReason`.
        """
        return self._skipped

    @property
    def skipped_count(self):
        return sum(self._skipped.values())

    @property
    def total(self):
        """
        int : The number of candidates in the batch.
        """
        return self._total

    def top(self, number):
        """
        Get the best ranked records.

        Parameters
        ----------
        number : int
            The maximum number of records.

        Returns
        -------
        records : tuple of ComparisonRecord
            The best `number` records.
        """
        return self._records[:number]

    def indices(self):
        """
        Get the batch indices of the records in ranked order.

        Returns
        -------
        indices : list of int
            The indices.
        """
        return [record.index for record in self._records]

    def __getitem__(self, index):
        return self._records[index]

    def __len__(self):
        return len(self._records)

    def __repr__(self):
        """Represent ResultSet as a string for debugging."""
        return (
            f"ResultSet({list(self._records)!r}, "
            f"skipped={dict(self._skipped)!r}, total={self._total!r})"
        )
