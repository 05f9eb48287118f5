# This source code is part of the ProtCompare package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

"""
This subpackage provides the local alignment of protein sequences and
the evaluation of the resulting alignments.

The central classes are :class:`SubstitutionMatrix` and
:class:`ScoringScheme`:
A :class:`SubstitutionMatrix` provides similarity scores for each
symbol pairing of the protein alphabet, including the ambiguity codes
and the stop symbol.
A :class:`ScoringScheme` combines the matrix with affine gap penalties.
The default scheme uses *BLOSUM62* with a gap opening penalty of *12*
and a gap extension penalty of *0.5*.

:func:`align_local()` computes the optimal local alignment of two
sequences and returns a :class:`LocalAlignment`, which holds the score,
the aligned regions and the column statistics of the alignment.
:func:`calculate_metrics()` derives identity, query coverage and the
combined score from it.

The significance of an alignment score is estimated by a
:class:`SignificanceEstimator`, which aligns random sequences against
the query and reports the fraction of random alignments that score at
least as high as a :class:`PValue`.
"""

__name__ = "protcompare.sequence.align"
__author__ = "ProtCompare contributors"

from .alignment import *
from .matrix import *
from .metrics import *
from .pairwise import *
from .statistics import *
