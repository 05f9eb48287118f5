# This source code is part of the ProtCompare package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "protcompare.sequence.align"
__author__ = "ProtCompare contributors"
__all__ = ["AlignmentMetrics", "calculate_metrics"]

from dataclasses import dataclass


@dataclass(frozen=True)
class AlignmentMetrics:
    """
    Similarity metrics derived from a local alignment.

    All values are percentages in the range *0* to *100* and are stored
    unrounded.

    Attributes
    ----------
    identity : float
        Identical columns per alignment column.
    coverage : float
        Alignment columns per query position.
    combined_score : float
        The identity scaled by the fractional coverage.
    """

    identity: float
    coverage: float
    combined_score: float

    def rounded(self, decimals=2):
        """
        Get the metrics rounded for presentation.

        Parameters
        ----------
        decimals : int, optional
            The number of decimal places.

        Returns
        -------
        metrics : AlignmentMetrics
            The rounded metrics.
        """
        return AlignmentMetrics(
            round(self.identity, decimals),
            round(self.coverage, decimals),
            round(self.combined_score, decimals),
        )


def calculate_metrics(alignment, query_length):
    """
    Calculate identity, coverage and the combined score for a local
    alignment of a query.

    The metrics are calculated as

    .. math::

        I = 100 \\frac{n_{ident}}{L}

        C = \\min\\left(100 \\frac{L}{L_{query}}, 100\\right)

        S = I \\frac{C}{100},

    where :math:`L` is the number of alignment columns *including*
    internal gaps.
    Note that the coverage is hence not the fraction of query positions
    that are aligned to a subject symbol:
    Gaps in the subject count as covered query positions and gaps in
    the query increase the alignment length.
    In the rare case that gaps in the query make the alignment longer
    than the query, the coverage is capped at *100*.

    Parameters
    ----------
    alignment : LocalAlignment
        The local alignment of the query against a subject.
    query_length : int
        The total length of the query sequence.

    Returns
    -------
    metrics : AlignmentMetrics
        The unrounded metrics.
        For an empty alignment all metrics are zero.

    Examples
    --------

    >>> alignment = LocalAlignment(
    ...     score=30, query_range=(0, 8), subject_range=(2, 10),
    ...     length=8, identities=6, gaps=0
    ... )
    >>> metrics = calculate_metrics(alignment, query_length=10)
    >>> print(metrics.identity, metrics.coverage, metrics.combined_score)
    75.0 80.0 60.0
    """
    if query_length < 1:
        raise ValueError("The query length must be positive")
    if alignment.length == 0:
        return AlignmentMetrics(0.0, 0.0, 0.0)
    identity = alignment.identities / alignment.length * 100
    coverage = min(alignment.length / query_length * 100, 100.0)
    combined_score = identity * (coverage / 100)
    return AlignmentMetrics(identity, coverage, combined_score)
