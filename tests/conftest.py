# This source code is part of the ProtCompare package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

import pytest
import protcompare.sequence as seq
import protcompare.sequence.align as align


@pytest.fixture(scope="session")
def scheme():
    """
    The default scoring scheme: BLOSUM62, gap penalties 12 and 0.5.
    """
    return align.ScoringScheme.default()


@pytest.fixture(scope="session")
def query():
    return seq.ProteinSequence("MTSLNLLTDIPGIRVGH")
