# This source code is part of the ProtCompare package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

"""
This is the top-level package of *ProtCompare*.

*ProtCompare* compares a protein query sequence against a batch of
candidate sequences:
Each candidate is aligned to the query with an optimal local alignment
(affine gap penalties), identity, query coverage and a combined score
are derived from the alignment and the significance of the alignment
score is estimated empirically by aligning random sequences of the
same length against the query.

The subpackages are

    - :mod:`protcompare.sequence` - Protein sequences and alphabets
    - :mod:`protcompare.sequence.align` - Scoring, local alignment,
      metrics and significance estimation
    - :mod:`protcompare.compare` - Batch comparison and ranking
    - :mod:`protcompare.io` - Reading candidate tables and exporting
      results

This top-level package provides the error classes and the run
configuration that are shared by the subpackages.
"""

__version__ = "1.0.0"
__name__ = "protcompare"
__author__ = "ProtCompare contributors"

from .error import *
from .config import *
