# This source code is part of the ProtCompare package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "protcompare.compare"
__author__ = "ProtCompare contributors"
__all__ = [
    "RunState",
    "CandidateOutcome",
    "compare_candidate",
    "Comparator",
    "compare_sequences",
]

import enum
import logging
import numbers
import os
import threading
from collections import Counter
from collections.abc import Mapping
from concurrent.futures import FIRST_COMPLETED, ProcessPoolExecutor, wait
from dataclasses import dataclass
import numpy as np
from ..error import (
    AlignmentError,
    ComparisonCancelled,
    ConfigurationError,
    EstimationError,
    InvalidQueryError,
    InvalidSequenceError,
    NoValidAlignmentsError,
)
from ..sequence.align.matrix import ScoringScheme
from ..sequence.align.pairwise import align_local
from ..sequence.align.statistics import SignificanceEstimator
from ..sequence.seqtypes import ProteinSequence
from .records import ComparisonRecord, ResultSet, SkipReason

logger = logging.getLogger(__name__)

# Interval in seconds in which a pooled run checks for cancellation
_POLL_INTERVAL = 0.1


class RunState(enum.Enum):
    """
    The lifecycle state of a :class:`Comparator`.

    A run proceeds from ``IDLE`` via ``NORMALIZING``, ``COMPARING`` and
    ``AGGREGATING`` to ``RANKED``.
    A run that raised an exception ends in ``FAILED``, a cancelled run
    ends in ``CANCELLED``.
    """

    IDLE = "idle"
    NORMALIZING = "normalizing"
    COMPARING = "comparing"
    AGGREGATING = "aggregating"
    RANKED = "ranked"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class CandidateOutcome:
    """
    The outcome of comparing a single candidate.

    Exactly one of `record` and `reason` is set.

    Attributes
    ----------
    index : int
        The index of the candidate in the batch.
    record : ComparisonRecord or None
        The result, if the comparison succeeded.
    reason : SkipReason or None
        The reason for skipping the candidate.
    message : str
        A description of the failure.
    """

    index: int
    record: object = None
    reason: object = None
    message: str = ""

    @property
    def is_skipped(self):
        return self.record is None


def compare_candidate(
    index, query, candidate, scheme, sample_count, seed=None, should_stop=None
):
    """
    Compare a single candidate against the query.

    The candidate is normalized, aligned to the query and the
    significance of the alignment score is estimated.
    Failures of these steps do not raise, but are reported as skipped
    :class:`CandidateOutcome`, so that this function can be run in a
    worker process.

    Parameters
    ----------
    index : int
        The index of the candidate in the batch.
    query : ProteinSequence
        The normalized query.
    candidate : str or ProteinSequence or None
        The raw candidate sequence.
    scheme : ScoringScheme
        The scoring scheme for the alignments.
    sample_count : int
        The number of random sequences for the p-value estimation.
    seed : SeedSequence or int or Generator, optional
        The source of randomness for the estimation.
    should_stop : callable, optional
        Polled between random samples for cancellation.

    Returns
    -------
    outcome : CandidateOutcome
        The outcome of the comparison.

    Raises
    ------
    ComparisonCancelled
        If `should_stop` requested to abort.
    """
    if isinstance(candidate, ProteinSequence):
        subject = candidate
    else:
        try:
            subject = ProteinSequence.from_raw(candidate)
        except InvalidSequenceError as e:
            return CandidateOutcome(index, reason=SkipReason.INVALID_SEQUENCE, message=str(e))

    try:
        alignment = align_local(query, subject, scheme)
    except AlignmentError as e:
        return CandidateOutcome(index, reason=SkipReason.ALIGNMENT_FAILED, message=str(e))

    estimator = SignificanceEstimator(scheme, rng=seed)
    try:
        p_value = estimator.estimate_pvalue(
            query, subject, alignment.score, sample_count, should_stop
        )
    except EstimationError as e:
        return CandidateOutcome(index, reason=SkipReason.ESTIMATION_FAILED, message=str(e))

    record = ComparisonRecord.from_alignment(index, alignment, len(query), p_value)
    return CandidateOutcome(index, record=record)


class Comparator:
    """
    Compare a query sequence against a batch of candidate sequences and
    rank the candidates by their combined score.

    Each candidate is aligned to the query via :func:`align_local()`,
    the metrics are derived via :func:`calculate_metrics()` and the
    empirical p-value of the alignment score is estimated by a
    :class:`SignificanceEstimator`.
    Candidates are independent of each other, hence they are compared
    in parallel in a process pool if more than one worker is allowed.

    Candidates that cannot be compared are skipped and counted in
    :attr:`ResultSet.skipped`.
    Only if no candidate at all can be compared, the run fails.

    The random sequences of each candidate are drawn from a separate
    stream spawned from `seed`.
    Hence, for a given seed the result does neither depend on the
    number of workers nor on the order in which candidates finish.

    A :class:`Comparator` can be reused for multiple runs, but performs
    only one run at a time.

    Parameters
    ----------
    scheme : ScoringScheme, optional
        The scoring scheme.
        By default :meth:`ScoringScheme.default()` is used.
    sample_count : int, optional
        The number of random sequences per candidate.
    max_workers : int, optional
        The maximum number of worker processes.
        For ``1`` candidates are compared in the calling process.
        By default the number of CPUs is used.
    seed : int, optional
        The seed for the random sequences.
        By default fresh entropy is used for each run.
    progress : callable, optional
        Called with ``(completed, total)`` after each compared or
        skipped candidate.
    min_sample_count : int, optional
        The lowest accepted `sample_count`.

    Raises
    ------
    ConfigurationError
        If a parameter is out of range.

    Examples
    --------

    >>> comparator = Comparator(sample_count=20, max_workers=1, seed=0)
    >>> results = comparator.run(
    ...     "MTSLNLLTDIPGIRVGH", ["MTSLNLLTDIPGIRVGH", "GGGG", "", "MTSLNLL"]
    ... )
    >>> print(comparator.state)
    RunState.RANKED
    >>> print(results.indices())
    [0, 3, 1]
    >>> print(results.total, results.skipped_count)
    4 1
    """

    def __init__(
        self,
        scheme=None,
        sample_count=100,
        max_workers=None,
        seed=None,
        progress=None,
        min_sample_count=10,
    ):
        if scheme is None:
            scheme = ScoringScheme.default()
        elif not isinstance(scheme, ScoringScheme):
            raise ConfigurationError(
                f"Expected 'ScoringScheme', not '{type(scheme).__name__}'"
            )
        if not _is_int(min_sample_count) or min_sample_count < 1:
            raise ConfigurationError("The minimum sample count must be a positive integer")
        if not _is_int(sample_count) or sample_count < min_sample_count:
            raise ConfigurationError(
                f"The sample count must be an integer of at least "
                f"{min_sample_count}, not {sample_count!r}"
            )
        if max_workers is None:
            max_workers = os.cpu_count() or 1
        if not _is_int(max_workers) or max_workers < 1:
            raise ConfigurationError("The number of workers must be a positive integer")
        if seed is not None and (not _is_int(seed) or seed < 0):
            raise ConfigurationError("The seed must be a non-negative integer")

        self._scheme = scheme
        self._sample_count = sample_count
        self._max_workers = max_workers
        self._seed = seed
        self._progress = progress
        self._state = RunState.IDLE
        self._failure = None
        self._cancel_event = threading.Event()
        self._lock = threading.Lock()

    @property
    def scheme(self):
        return self._scheme

    @property
    def sample_count(self):
        return self._sample_count

    @property
    def max_workers(self):
        return self._max_workers

    @property
    def state(self):
        """
        RunState : The state of the current or last run.
        """
        return self._state

    @property
    def failure(self):
        """
        Exception or None : The exception that terminated the last run.
        """
        return self._failure

    def cancel(self):
        """
        Request the cancellation of the current run.

        This method may be called from any thread or from the progress
        hook.
        The run stops after the candidates that are currently compared
        in worker processes, in-process comparisons stop after the
        current random sample.
        """
        self._cancel_event.set()

    def run(self, query, candidates):
        """
        Compare the query against all candidates.

        Parameters
        ----------
        query : str or ProteinSequence
            The raw query sequence.
        candidates : iterable object of (str or None) or Mapping
            The raw candidate sequences.
            For an iterable the 0-based position is the index of a
            candidate, a mapping maps the indices to the candidates.
            Missing candidates (``None`` or *NaN*) are skipped.

        Returns
        -------
        results : ResultSet
            The ranked records.

        Raises
        ------
        InvalidQueryError
            If the query contains no amino acid.
            The candidates are not accessed in this case.
        NoValidAlignmentsError
            If no candidate could be compared.
        ComparisonCancelled
            If the run was cancelled via :meth:`cancel()`.
        """
        if not self._lock.acquire(blocking=False):
            raise RuntimeError("The comparator is already running")
        try:
            self._cancel_event.clear()
            self._failure = None
            try:
                results = self._run(query, candidates)
            except (ComparisonCancelled, KeyboardInterrupt) as e:
                self._state = RunState.CANCELLED
                self._failure = e
                logger.info("Comparison was cancelled")
                raise
            except Exception as e:
                self._state = RunState.FAILED
                self._failure = e
                raise
            self._state = RunState.RANKED
            return results
        finally:
            self._lock.release()

    def _run(self, query, candidates):
        self._state = RunState.NORMALIZING
        if not isinstance(query, ProteinSequence):
            try:
                query = ProteinSequence.from_raw(query)
            except InvalidSequenceError as e:
                raise InvalidQueryError(f"Invalid query sequence: {e}") from e

        if isinstance(candidates, Mapping):
            items = list(candidates.items())
        else:
            items = list(enumerate(candidates))
        total = len(items)
        seeds = np.random.SeedSequence(self._seed).spawn(total)

        self._state = RunState.COMPARING
        logger.info(
            "Comparing query of length %d against %d candidates "
            "with %d random samples each",
            len(query),
            total,
            self._sample_count,
        )
        if self._max_workers == 1 or total < 2:
            outcomes = self._compare_in_process(query, items, seeds)
        else:
            outcomes = self._compare_in_pool(query, items, seeds)

        self._state = RunState.AGGREGATING
        records = []
        skipped = Counter()
        for outcome in outcomes:
            if outcome.is_skipped:
                skipped[outcome.reason] += 1
            else:
                records.append(outcome.record)
        if len(records) == 0:
            raise NoValidAlignmentsError(
                f"None of the {total} candidates could be compared",
                dict(skipped),
            )
        results = ResultSet(records, skipped, total)
        logger.info(
            "Compared %d of %d candidates, %d skipped",
            len(results),
            total,
            results.skipped_count,
        )
        return results

    def _compare_in_process(self, query, items, seeds):
        outcomes = []
        for (index, candidate), seed in zip(items, seeds):
            self._check_cancelled()
            outcome = compare_candidate(
                index,
                query,
                candidate,
                self._scheme,
                self._sample_count,
                seed,
                should_stop=self._cancel_event.is_set,
            )
            self._finish(outcome, outcomes, len(items))
        return outcomes

    def _compare_in_pool(self, query, items, seeds):
        outcomes = []
        workers = min(self._max_workers, len(items))
        logger.debug("Starting process pool with %d workers", workers)
        with ProcessPoolExecutor(max_workers=workers) as executor:
            pending = {
                executor.submit(
                    compare_candidate,
                    index,
                    query,
                    candidate,
                    self._scheme,
                    self._sample_count,
                    seed,
                )
                for (index, candidate), seed in zip(items, seeds)
            }
            try:
                while pending:
                    self._check_cancelled()
                    done, pending = wait(
                        pending, timeout=_POLL_INTERVAL, return_when=FIRST_COMPLETED
                    )
                    for future in done:
                        self._finish(future.result(), outcomes, len(items))
            except BaseException:
                for future in pending:
                    future.cancel()
                raise
        return outcomes

    def _finish(self, outcome, outcomes, total):
        if outcome.is_skipped:
            logger.debug(
                "Skipped candidate %d (%s): %s",
                outcome.index,
                outcome.reason.value,
                outcome.message,
            )
        outcomes.append(outcome)
        if self._progress is not None:
            self._progress(len(outcomes), total)

    def _check_cancelled(self):
        if self._cancel_event.is_set():
            raise ComparisonCancelled("The comparison was cancelled")


def compare_sequences(query, candidates, **kwargs):
    """
    Compare a query sequence against candidate sequences.

    This is a shortcut for creating a :class:`Comparator` and calling
    :meth:`Comparator.run()`.

    Parameters
    ----------
    query : str or ProteinSequence
        The raw query sequence.
    candidates : iterable object of (str or None) or Mapping
        The raw candidate sequences.
    **kwargs
        Additional parameters for :class:`Comparator`.

    Returns
    -------
    results : ResultSet
        The ranked records.
    """
    return Comparator(**kwargs).run(query, candidates)


def _is_int(value):
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)
