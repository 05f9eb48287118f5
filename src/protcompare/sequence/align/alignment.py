# This source code is part of the ProtCompare package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "protcompare.sequence.align"
__author__ = "ProtCompare contributors"
__all__ = ["LocalAlignment"]

from dataclasses import dataclass


@dataclass(frozen=True)
class LocalAlignment:
    """
    The result of a local alignment of a query and a subject sequence.

    Instead of the aligned symbols, only the aligned regions and the
    column statistics of the alignment are stored, which is all that is
    required to derive identity and coverage.

    All attributes of this class are read-only.

    Parameters
    ----------
    score : int or float
        The alignment score.
    query_range, subject_range : tuple(int, int)
        The aligned region of the query and the subject, respectively,
        as 0-based, half-open ``(start, stop)`` interval.
    length : int
        The number of alignment columns, including internal gaps.
        Un-aligned flanks of both sequences are not part of a local
        alignment and hence not counted.
    identities : int
        The number of columns with identical symbols.
    gaps : int
        The number of columns with a gap in either sequence.

    Examples
    --------

    >>> query = ProteinSequence("ACDEFGHIKL")
    >>> subject = ProteinSequence("PPPDEFPPP")
    >>> alignment = align_local(query, subject, ScoringScheme.default())
    >>> print(alignment.query_range, alignment.subject_range)
    (2, 5) (3, 6)
    >>> print(alignment.score, alignment.length, alignment.identities)
    17 3 3
    """

    score: object
    query_range: tuple
    subject_range: tuple
    length: int
    identities: int
    gaps: int

    @staticmethod
    def empty():
        """
        Get the empty alignment, the result of aligning two sequences
        without any positively scoring region.

        Returns
        -------
        alignment : LocalAlignment
            An alignment with score, length and ranges of zero.
        """
        return LocalAlignment(
            score=0,
            query_range=(0, 0),
            subject_range=(0, 0),
            length=0,
            identities=0,
            gaps=0,
        )

    def is_empty(self):
        """
        Check whether the alignment contains no column.

        Returns
        -------
        is_empty : bool
            True, if the alignment has length zero.
        """
        return self.length == 0

    @property
    def mismatches(self):
        """
        int : The number of columns with non-identical symbols.
        """
        return self.length - self.identities - self.gaps
