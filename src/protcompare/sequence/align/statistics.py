# This source code is part of the ProtCompare package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "protcompare.sequence.align"
__author__ = "ProtCompare contributors"
__all__ = ["PValue", "SignificanceEstimator"]

from dataclasses import dataclass
import numpy as np
from ..seqtypes import ProteinSequence
from .pairwise import align_local
from ...error import AlignmentError, ComparisonCancelled, EstimationError


@dataclass(frozen=True)
class PValue:
    """
    An empirical p-value or an upper bound for it.

    If none of the random alignment scores reaches the observed score,
    the p-value is only known to be lower than *1/N* for *N* samples.
    In this case :attr:`is_bound` is true and :attr:`value` is *1/N*.

    The string representation keeps this distinction:
    An estimate is given with 3 significant digits, a bound with
    2 significant digits and a preceding ``'< '``.

    Attributes
    ----------
    value : float
        The p-value or the upper bound.
    is_bound : bool
        True, if `value` is an upper bound.
    sample_count : int
        The number of random samples the p-value is based on.

    Examples
    --------

    >>> print(PValue.from_scores(np.array([10, 20, 30, 40]), 30))
    0.5
    >>> print(PValue.from_scores(np.array([10, 20, 30, 40]), 50))
    < 0.25
    """

    value: float
    is_bound: bool
    sample_count: int

    @staticmethod
    def from_scores(scores, observed_score):
        """
        Calculate the empirical p-value of an observed score, i.e. the
        fraction of sampled scores that are at least as high as the
        observed score.

        Parameters
        ----------
        scores : ndarray, dtype=int or float
            The scores of the random alignments.
        observed_score : int or float
            The score of the alignment of interest.

        Returns
        -------
        p_value : PValue
            The p-value, or a bound if no sampled score reaches the
            observed score.
        """
        scores = np.asarray(scores)
        sample_count = len(scores)
        if sample_count == 0:
            raise ValueError("At least one sampled score is required")
        hits = np.count_nonzero(scores >= observed_score)
        if hits == 0:
            return PValue(1 / sample_count, True, sample_count)
        return PValue(hits / sample_count, False, sample_count)

    def __str__(self):
        if self.is_bound:
            return f"< {self.value:.2g}"
        return f"{self.value:.3g}"

    def __float__(self):
        return float(self.value)


class SignificanceEstimator:
    r"""
    This class estimates the significance of a local alignment score
    empirically by a *Monte Carlo* test:
    How likely does a random sequence of the same length align at
    least as well to the query?

    The random sequences are drawn uniformly from the 20 canonical
    amino acids, ambiguous symbols and the stop symbol are never
    sampled.
    Each random sequence is aligned to the query with the same
    :class:`ScoringScheme` as the alignment of interest.

    Every sample requires a complete dynamic programming alignment,
    hence the runtime scales linearly with the number of samples.
    In return, the p-value resolution is *1/N* for *N* samples, i.e. the
    lowest p-value that can be reported is the bound ``< 1/N``.

    Parameters
    ----------
    scheme : ScoringScheme
        The scoring scheme used for the random alignments.
    rng : Generator or int or SeedSequence, optional
        The source of randomness.
        Anything accepted by :func:`numpy.random.default_rng()` can be
        given, a :class:`numpy.random.Generator` is used as is.
        By default fresh entropy from the operating system is used.

    Examples
    --------

    >>> query = ProteinSequence("MTSLNLLTDIPGIRVGH")
    >>> scheme = ScoringScheme.default()
    >>> alignment = align_local(query, query, scheme)
    >>> estimator = SignificanceEstimator(scheme, rng=0)
    >>> p_value = estimator.estimate_pvalue(query, query, alignment.score, 50)
    >>> print(p_value)
    < 0.02
    """

    def __init__(self, scheme, rng=None):
        self._scheme = scheme
        self._rng = np.random.default_rng(rng)

    @property
    def scheme(self):
        return self._scheme

    def random_sequence(self, length):
        """
        Draw a random sequence from the canonical amino acids.

        Parameters
        ----------
        length : int
            The length of the sequence.

        Returns
        -------
        sequence : ProteinSequence
            The random sequence.
        """
        code = self._rng.integers(
            len(ProteinSequence.canonical_alphabet), size=length, dtype=np.uint8
        )
        return ProteinSequence.from_code(code)

    def sample_scores(self, query, length, sample_count, should_stop=None):
        """
        Align random sequences against the query.

        Parameters
        ----------
        query : ProteinSequence
            The query sequence.
        length : int
            The length of each random sequence.
        sample_count : int
            The number of random sequences.
        should_stop : callable, optional
            Called without arguments before each sample.
            If it returns true, the sampling is aborted.

        Returns
        -------
        scores : ndarray, dtype=float
            The alignment scores of the random sequences.

        Raises
        ------
        AlignmentError
            If any random alignment fails.
        ComparisonCancelled
            If `should_stop` requested to abort.
        """
        if sample_count < 1:
            raise ValueError("The sample count must be positive")
        if length < 1:
            raise ValueError("The random sequence length must be positive")
        scores = np.zeros(sample_count, dtype=float)
        for i in range(sample_count):
            if should_stop is not None and should_stop():
                raise ComparisonCancelled("Sampling was cancelled")
            scores[i] = align_local(
                query, self.random_sequence(length), self._scheme, score_only=True
            )
        return scores

    def estimate_pvalue(
        self, query, subject, observed_score, sample_count, should_stop=None
    ):
        """
        Estimate the empirical p-value of an alignment score.

        Parameters
        ----------
        query, subject : ProteinSequence
            The aligned sequences.
            Random sequences have the length of `subject`.
        observed_score : int or float
            The score of the alignment of `query` and `subject`.
        sample_count : int
            The number of random sequences.
            Higher values give a finer p-value resolution at
            proportionally higher cost.
        should_stop : callable, optional
            Called without arguments before each sample.
            If it returns true, the estimation is aborted.

        Returns
        -------
        p_value : PValue
            The p-value, or a bound if no random alignment reaches the
            observed score.

        Raises
        ------
        EstimationError
            If any random alignment fails.
            A p-value based on only a part of the samples is never
            returned.
        ComparisonCancelled
            If `should_stop` requested to abort.
        """
        try:
            scores = self.sample_scores(query, len(subject), sample_count, should_stop)
        except AlignmentError as e:
            raise EstimationError(
                f"Random alignment failed, no p-value is reported: {e}"
            ) from e
        return PValue.from_scores(scores, observed_score)
