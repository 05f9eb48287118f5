# This source code is part of the ProtCompare package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "protcompare.sequence.align"
__author__ = "ProtCompare contributors"
__all__ = ["align_local"]

import numpy as np
from .alignment import LocalAlignment
from ...error import AlignmentError


# Columns of the path information that accompanies each DP cell
_QUERY_START = 0
_SUBJECT_START = 1
_LENGTH = 2
_IDENTITIES = 3
_GAPS = 4
_N_FIELDS = 5

# Path information change for a gap column
_GAP_STEP = np.array([0, 0, 1, 0, 1], dtype=np.int64)


def align_local(query, subject, scheme, score_only=False):
    """
    Perform an optimal local alignment of two sequences based on the
    dynamic programming algorithm by Smith and Waterman [1]_ with
    affine gap penalties [2]_.

    Three states are distinguished for each cell of the alignment
    table:
    The alignment ends with two aligned symbols (*M*), with a query
    symbol aligned to a gap (*X*) or with a subject symbol aligned to a
    gap (*Y*).
    A gap in one sequence is never directly followed by a gap in the
    other sequence.
    Hence, the score can be lower than that of the textbook recurrence,
    that allows such transitions, if twice the cost of a single gap
    position (`gap_open + gap_extend`) is lower than the penalty of the
    worst mismatch.
    For the default scheme both recurrences give the same score.
    The local alignment starts and ends with two aligned symbols, so
    it never contains terminal gaps.

    Instead of a traceback, each cell keeps track of the start, the
    column count, the identity count and the gap count of the best path
    ending in it.
    Hence only two rows of the table are kept in memory at a time,
    i.e. the memory requirement scales linearly with the subject
    length.
    Each row is computed with vectorized *NumPy* operations:
    The *M* and *X* states depend only on the previous row, the *Y*
    state within the row is resolved into a prefix maximum.
    The runtime still scales with the product of both lengths, but
    the Python overhead only scales with the query length.

    The result is deterministic:
    If multiple cells share the maximum score, the first one in
    row-major order (query position first, then subject position) is
    chosen.
    Within a cell, a new alignment is started rather than extending a
    path with a score of zero or below, paths are continued from the
    *M*, *X* and *Y* state in this order of precedence, and gap
    opening takes precedence over gap extension.

    Parameters
    ----------
    query, subject : ProteinSequence
        The sequences to be aligned.
    scheme : ScoringScheme
        The substitution matrix and gap penalties used for scoring.
    score_only : bool, optional
        If true, only the alignment score is returned.

    Returns
    -------
    alignment : LocalAlignment or int or float
        The optimal local alignment.
        If no pairing of symbols has a positive score, the
        :meth:`LocalAlignment.empty()` alignment is returned.
        If `score_only` is set, only the score is returned.

    Raises
    ------
    AlignmentError
        If a sequence is empty or contains symbols that are not part of
        the alphabet of the substitution matrix.

    References
    ----------

    .. [1] TF Smith, MS Waterman,
       "Identification of common molecular subsequences."
       J Mol Biol, 147, 195-197 (1981).
    .. [2] O Gotoh,
       "An improved algorithm for matching biological sequences."
       J Mol Biol, 162, 705-708 (1982).

    Examples
    --------

    >>> query = ProteinSequence("MTSLNLLTDIPGIRVGH")
    >>> subject = ProteinSequence("AAMTSLNLLTDIPGIRVGHAA")
    >>> alignment = align_local(query, subject, ScoringScheme.default())
    >>> print(alignment.query_range, alignment.subject_range)
    (0, 17) (2, 19)
    """
    matrix = scheme.matrix
    for name, sequence in (("query", query), ("subject", subject)):
        if len(sequence) == 0:
            raise AlignmentError(f"The {name} sequence is empty")
        if not matrix.get_alphabet1().extends(sequence.get_alphabet()):
            raise AlignmentError(
                f"The {name} alphabet is not compatible with the substitution matrix"
            )
    score_matrix = matrix.score_matrix()
    query_code = np.asarray(query.code)
    subject_code = np.asarray(subject.code)
    if (
        query_code.max() >= score_matrix.shape[0]
        or subject_code.max() >= score_matrix.shape[1]
    ):
        raise AlignmentError("Sequence code contains symbols outside of the matrix")

    # The first gap position costs both, the opening and extension penalty
    open_cost = scheme.gap_open + scheme.gap_extend
    ext_cost = scheme.gap_extend
    n = len(subject_code)

    # A row of a state holds the scores of the best paths ending in each
    # column and their path information
    # Row 0 and column 0 of the table contain no alignment
    prev_m = _void_row(n)
    prev_x = _void_row(n)
    prev_y = _void_row(n)
    # The empty alignment is the baseline for the maximum,
    # hence only cells with a positive score are considered
    best_score = 0
    best_info = None
    best_end = (0, 0)

    for i, query_symbol in enumerate(query_code.tolist(), start=1):
        similarities = score_matrix[query_symbol, subject_code]
        identities = (subject_code == query_symbol).astype(np.int64)
        cur_x = _gap_from_above(prev_m, prev_x, open_cost, ext_cost)
        cur_m = _match_from_diagonal(
            prev_m, prev_x, prev_y, similarities, identities, i
        )
        cur_y = _gap_from_left(cur_m, open_cost, ext_cost)

        m_scores, m_info = cur_m
        # 'argmax()' returns the first maximum -> row-major order
        j = int(np.argmax(m_scores))
        if m_scores[j] > best_score:
            best_score = m_scores[j]
            best_info = m_info[j].copy()
            best_end = (i, j)
        prev_m, prev_x, prev_y = cur_m, cur_x, cur_y

    score = _to_score(best_score)
    if score_only:
        return score
    if best_info is None:
        return LocalAlignment.empty()
    query_start, subject_start, length, identities, gaps = best_info.tolist()
    return LocalAlignment(
        score=score,
        query_range=(query_start, best_end[0]),
        subject_range=(subject_start, best_end[1]),
        length=length,
        identities=identities,
        gaps=gaps,
    )


def _void_row(n):
    return (
        np.full(n + 1, -np.inf),
        np.zeros((n + 1, _N_FIELDS), dtype=np.int64),
    )


def _gap_from_above(prev_m, prev_x, open_cost, ext_cost):
    """
    Query symbol aligned to a gap: each column depends only on the same
    column of the previous row.
    """
    m_scores, m_info = prev_m
    x_scores, x_info = prev_x
    opened = m_scores - open_cost
    extended = x_scores - ext_cost
    is_opened = opened >= extended
    scores = np.where(is_opened, opened, extended)
    info = np.where(is_opened[:, np.newaxis], m_info, x_info) + _GAP_STEP
    scores[0] = -np.inf
    info[0] = 0
    return scores, info


def _match_from_diagonal(prev_m, prev_x, prev_y, similarities, identities, i):
    """
    Aligned symbols: column *j* continues the best path ending in column
    *j-1* of the previous row.
    """
    n = len(similarities)
    columns = np.arange(n)
    # Precedence M > X > Y, a later state must be strictly better
    pred_scores = prev_m[0][:-1]
    pred_state = np.zeros(n, dtype=np.int64)
    for state, (scores, _) in enumerate((prev_x, prev_y), start=1):
        is_better = scores[:-1] > pred_scores
        pred_scores = np.where(is_better, scores[:-1], pred_scores)
        pred_state[is_better] = state
    pred_info = np.stack([prev_m[1][:-1], prev_x[1][:-1], prev_y[1][:-1]])[
        pred_state, columns
    ]

    continued_info = pred_info.copy()
    continued_info[:, _LENGTH] += 1
    continued_info[:, _IDENTITIES] += identities
    started_info = np.zeros((n, _N_FIELDS), dtype=np.int64)
    started_info[:, _QUERY_START] = i - 1
    started_info[:, _SUBJECT_START] = columns
    started_info[:, _LENGTH] = 1
    started_info[:, _IDENTITIES] = identities

    # Local alignment specialty:
    # A path with a score of zero or below is not worth extending
    # -> start a new alignment in this cell
    is_started = pred_scores <= 0
    scores = np.full(n + 1, -np.inf)
    scores[1:] = np.where(is_started, similarities, pred_scores + similarities)
    info = np.zeros((n + 1, _N_FIELDS), dtype=np.int64)
    info[1:] = np.where(is_started[:, np.newaxis], started_info, continued_info)
    return scores, info


def _gap_from_left(cur_m, open_cost, ext_cost):
    """
    Subject symbol aligned to a gap: column *j* depends on column *j-1*
    of the same row.

    The recurrence is resolved into a prefix maximum:
    The gap ending in column *j* is opened after the *M* cell *k < j*
    maximizing ``M[k] + k * gap_extend``.
    Among equal values the latest *k* wins, as gap opening takes
    precedence over gap extension.
    """
    m_scores, m_info = cur_m
    n = len(m_scores) - 1
    origins = np.arange(n)
    ranked = m_scores[:-1] + origins * ext_cost
    is_record = ranked >= np.maximum.accumulate(ranked)
    origins = np.maximum.accumulate(np.where(is_record, origins, 0))
    gap_lengths = np.arange(1, n + 1) - origins

    scores = np.full(n + 1, -np.inf)
    scores[1:] = m_scores[origins] - open_cost - (gap_lengths - 1) * ext_cost
    info = np.zeros((n + 1, _N_FIELDS), dtype=np.int64)
    info[1:] = m_info[origins]
    info[1:, _LENGTH] += gap_lengths
    info[1:, _GAPS] += gap_lengths
    return scores, info


def _to_score(value):
    value = float(value)
    return int(value) if value.is_integer() else value
