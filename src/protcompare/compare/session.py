# This source code is part of the ProtCompare package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "protcompare.compare"
__author__ = "ProtCompare contributors"
__all__ = ["ComparisonSession"]

import logging
from ..config import ComparisonConfig
from ..io.table import candidates_from_frame, find_sequence_column, write_results_csv
from .comparator import Comparator

logger = logging.getLogger(__name__)


class ComparisonSession:
    """
    A session holds the results of the last successful comparison run,
    so that they can be exported afterwards.

    A failed or cancelled run leaves the results of the previous run
    untouched.

    Parameters
    ----------
    config : ComparisonConfig, optional
        The configuration used for all runs of this session.
        By default the default :class:`ComparisonConfig` is used.

    Examples
    --------

    >>> session = ComparisonSession(
    ...     ComparisonConfig(sample_count=20, max_workers=1, seed=0)
    ... )
    >>> results = session.compare("MTSLNLLTDIPGIRVGH", ["MTSLNLL", "MTSLNLLTDIPG"])
    >>> print(session.results.indices())
    [1, 0]
    """

    def __init__(self, config=None):
        if config is None:
            config = ComparisonConfig()
        self._config = config
        self._scheme = config.create_scheme()
        self._comparator = None
        self._results = None
        self._table = None
        self._column = None

    @property
    def config(self):
        return self._config

    @property
    def results(self):
        """
        ResultSet or None : The results of the last successful run.
        """
        return self._results

    @property
    def table(self):
        """
        DataFrame or None : The candidate table of the last successful
        run, if the candidates were taken from a table.
        """
        return self._table

    @property
    def sequence_column(self):
        """
        str or None : The sequence column of :attr:`table`.
        """
        return self._column

    @property
    def state(self):
        """
        RunState or None : The state of the current or last run.
        """
        if self._comparator is None:
            return None
        return self._comparator.state

    def compare(self, query, candidates, progress=None):
        """
        Compare the query against raw candidate sequences.

        Parameters
        ----------
        query : str or ProteinSequence
            The raw query sequence.
        candidates : iterable object of (str or None) or Mapping
            The raw candidate sequences.
        progress : callable, optional
            Called with ``(completed, total)`` after each candidate.

        Returns
        -------
        results : ResultSet
            The ranked records.
        """
        results = self._run(query, candidates, progress)
        self._table = None
        self._column = None
        return results

    def compare_table(self, query, table, column=None, progress=None):
        """
        Compare the query against the sequences of a candidate table.

        Parameters
        ----------
        query : str or ProteinSequence
            The raw query sequence.
        table : DataFrame
            The candidate table.
            The index of a candidate is its 0-based row position.
        column : str, optional
            The sequence column.
            By default, it is determined via
            :func:`find_sequence_column()` from the configured
            :attr:`ComparisonConfig.sequence_columns`.
        progress : callable, optional
            Called with ``(completed, total)`` after each candidate.

        Returns
        -------
        results : ResultSet
            The ranked records.
        """
        if column is None:
            column = find_sequence_column(table, self._config.sequence_columns)
        logger.info("Reading candidate sequences from column '%s'", column)
        candidates = candidates_from_frame(table, column)
        results = self._run(query, candidates, progress)
        self._table = table
        self._column = column
        return results

    def cancel(self):
        """
        Request the cancellation of the current run.
        """
        if self._comparator is not None:
            self._comparator.cancel()

    def export(self, path=None, decimals=2):
        """
        Write the results of the last successful run into a CSV file.

        If the candidates were taken from a table, the table row of each
        candidate is appended to its record.

        Parameters
        ----------
        path : str or PathLike, optional
            The output file.
            By default ``similarity_results_<date>.csv`` in the current
            directory.
        decimals : int, optional
            The number of decimal places of metrics and scores.

        Returns
        -------
        path : str or PathLike
            The path of the written file.

        Raises
        ------
        RuntimeError
            If no run has succeeded yet.
        """
        if self._results is None:
            raise RuntimeError("There are no results to export")
        return write_results_csv(self._results, path, self._table, decimals)

    def _run(self, query, candidates, progress):
        config = self._config
        self._comparator = Comparator(
            scheme=self._scheme,
            sample_count=config.sample_count,
            max_workers=config.max_workers,
            seed=config.seed,
            progress=progress,
            min_sample_count=config.min_sample_count,
        )
        results = self._comparator.run(query, candidates)
        self._results = results
        return results
