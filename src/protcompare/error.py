# This source code is part of the ProtCompare package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

"""
This module contains the errors raised during a comparison run.

Errors that invalidate a whole run (:class:`ConfigurationError`,
:class:`InvalidQueryError`, :class:`NoValidAlignmentsError`) are
propagated to the caller.
Errors that concern a single candidate (:class:`AlignmentError`,
:class:`EstimationError`) are absorbed by the comparison and only
cause the candidate to be skipped.
"""

__name__ = "protcompare"
__author__ = "ProtCompare contributors"
__all__ = [
    "ComparisonError",
    "ConfigurationError",
    "InvalidQueryError",
    "AlignmentError",
    "EstimationError",
    "NoValidAlignmentsError",
    "ComparisonCancelled",
    "InvalidSequenceError",
]


class ComparisonError(Exception):
    """
    Base class for all errors raised by a comparison run.
    """

    pass


class ConfigurationError(ComparisonError):
    """
    Indicates that the scoring scheme or the run configuration is
    malformed.
    """

    pass


class InvalidQueryError(ComparisonError):
    """
    Indicates that the query sequence contains no amino acid after
    normalization.
    """

    pass


class AlignmentError(ComparisonError):
    """
    Indicates that two sequences could not be aligned.
    """

    pass


class EstimationError(ComparisonError):
    """
    Indicates that at least one random alignment of a significance test
    failed.
    """

    pass


class NoValidAlignmentsError(ComparisonError):
    """
    Indicates that no candidate of a batch produced a result.

    Parameters
    ----------
    message : str
        The error message.
    skipped : dict, optional
        Maps each :class:`SkipReason` to the number of candidates
        skipped for this reason.
    """

    def __init__(self, message, skipped=None):
        super().__init__(message)
        self.skipped = dict(skipped) if skipped is not None else {}


class ComparisonCancelled(ComparisonError):
    """
    Indicates that a comparison run was cancelled by the caller.
    """

    pass


class InvalidSequenceError(ValueError):
    """
    Indicates that a raw sequence contains no symbol of the accepted
    alphabet.
    """

    pass
