# This source code is part of the ProtCompare package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

"""
This subpackage reads candidate tables and writes comparison results.

Candidate tables are Excel workbooks or CSV/TSV files with one row per
candidate.
The sequences are taken from the column whose name contains
``translation``, ``aa_sequence`` or ``prot_seq``.
Results are written as CSV, optionally followed by the columns of the
candidate table, so that each record keeps its annotation.

The tables are handled as :class:`pandas.DataFrame` objects.
"""

__name__ = "protcompare.io"
__author__ = "ProtCompare contributors"

from .table import *
