# This source code is part of the ProtCompare package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

"""
A subpackage for handling protein sequences.

A :class:`ProteinSequence` is not stored as string, but as *sequence
code*, an :class:`ndarray` of symbol codes.
The :class:`LetterAlphabet` of the sequence defines which letter
corresponds to which code.
The symbol codes are directly used as indices into substitution
matrices during alignments.

Raw text, as it is pasted by users or found in spreadsheet cells, is
converted into a :class:`ProteinSequence` via
:meth:`ProteinSequence.from_raw()`:
The text is upper-cased and every character outside of the protein
alphabet (the 20 canonical amino acids, the ambiguity codes ``B``,
``Z``, ``X`` and the stop symbol ``*``) is removed.
"""

__name__ = "protcompare.sequence"
__author__ = "ProtCompare contributors"

from .alphabet import *
from .seqtypes import *
