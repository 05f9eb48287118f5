# This source code is part of the ProtCompare package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

"""
This subpackage compares a query sequence against a batch of candidate
sequences and ranks the candidates.

A :class:`Comparator` runs the comparison:
Each candidate is aligned to the query, identity, coverage and the
combined score are derived from the alignment and the significance of
the alignment score is estimated from random sequences.
Each successfully compared candidate yields a
:class:`ComparisonRecord`; candidates that are empty, contain no amino
acid or fail to align are skipped and counted.
The records are collected in a :class:`ResultSet`, ranked by
descending combined score.

Candidates are compared in parallel worker processes.
The random sequences of each candidate are drawn from a separate
stream derived from a common seed, so that a seeded run is
reproducible independent of the number of workers.

A :class:`ComparisonSession` keeps the results of the last successful
run together with the candidate table they came from, for a later
export.
"""

__name__ = "protcompare.compare"
__author__ = "ProtCompare contributors"

from .comparator import *
from .records import *
from .session import *
