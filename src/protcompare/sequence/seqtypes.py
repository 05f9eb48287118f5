# This source code is part of the ProtCompare package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "protcompare.sequence"
__author__ = "ProtCompare contributors"
__all__ = ["ProteinSequence"]

import numbers
import numpy as np
from .alphabet import LetterAlphabet, AlphabetError
from ..error import InvalidSequenceError


class ProteinSequence(object):
    """
    Representation of an immutable, non-empty protein sequence.

    Internally the sequence is stored as *sequence code*, a read-only
    :class:`ndarray` of symbol codes, that can directly be used to
    index a substitution matrix.

    The :attr:`alphabet` contains the 20 canonical amino acids
    (codes 0-19), followed by the ambiguity codes ``B``, ``Z``, ``X``
    and the stop symbol ``*``.
    The :attr:`canonical_alphabet` is the prefix of :attr:`alphabet`
    containing only the 20 canonical amino acids.

    Parameters
    ----------
    sequence : str or iterable object of str
        The protein sequence.
        May take upper or lower case letters.
        Every letter must be part of :attr:`alphabet`, use
        :meth:`from_raw()` to create a sequence from text that may
        contain other characters.

    Raises
    ------
    AlphabetError
        If the sequence contains a letter that is not part of the
        alphabet.
    InvalidSequenceError
        If the sequence is empty.

    Examples
    --------

    >>> sequence = ProteinSequence("mtslnll")
    >>> print(sequence)
    MTSLNLL
    >>> print(sequence.code)
    [10 16 15  9 11  9  9]
    >>> print(ProteinSequence.from_raw("MT SL-NL\\nL 42"))
    MTSLNLL
    """

    alphabet = LetterAlphabet(
        [
            "A", "C", "D", "E", "F", "G", "H", "I", "K", "L",
            "M", "N", "P", "Q", "R", "S", "T", "V", "W", "Y",
            "B", "Z", "X", "*",
        ]
    )  # fmt: skip

    canonical_alphabet = LetterAlphabet(alphabet.get_symbols()[:20])

    def __init__(self, sequence):
        if not isinstance(sequence, str):
            sequence = "".join(sequence)
        code = self.alphabet.encode_multiple(sequence.upper())
        self._set_code(code)

    def _set_code(self, code):
        if len(code) == 0:
            raise InvalidSequenceError("The sequence is empty")
        code = np.array(code, dtype=np.uint8)
        code.setflags(write=False)
        self._code = code

    @classmethod
    def from_code(cls, code):
        """
        Create a sequence from symbol codes.

        Parameters
        ----------
        code : ndarray, dtype=int
            The symbol codes, indices into :attr:`alphabet`.

        Returns
        -------
        sequence : ProteinSequence
            The sequence.

        Raises
        ------
        AlphabetError
            If the code contains values outside of the alphabet.
        InvalidSequenceError
            If `code` is empty.
        """
        code = np.asarray(code)
        if len(code) > 0 and (code.min() < 0 or code.max() >= len(cls.alphabet)):
            raise AlphabetError("Sequence code contains invalid codes")
        sequence = cls.__new__(cls)
        sequence._set_code(code)
        return sequence

    @staticmethod
    def normalize(text):
        """
        Normalize raw text into the letters of the protein alphabet.

        ASCII letters are converted into upper case and every character
        that is not part of :attr:`alphabet` is removed.
        Non-ASCII characters are always removed, even if their upper
        case form is an ASCII letter, e.g. `'ß'` or `'ı'`.

        Parameters
        ----------
        text : str
            The raw text, e.g. a pasted sequence containing whitespace,
            line breaks or numbering.

        Returns
        -------
        normalized : str
            The normalized sequence, may be empty.
        """
        return ProteinSequence.alphabet.filter(
            "".join([char.upper() for char in text if char.isascii()])
        )

    @classmethod
    def from_raw(cls, text):
        """
        Create a sequence from raw text after normalizing it via
        :meth:`normalize()`.

        Parameters
        ----------
        text : str or None
            The raw text.
            Missing values, i.e. ``None`` or a floating point *NaN* as
            it appears in empty table cells, are treated as empty text.

        Returns
        -------
        sequence : ProteinSequence
            The normalized sequence.

        Raises
        ------
        InvalidSequenceError
            If the text is missing, is not a string or contains no
            letter of the alphabet.
        """
        if text is None or (isinstance(text, numbers.Real) and np.isnan(text)):
            raise InvalidSequenceError("The sequence is missing")
        if not isinstance(text, str):
            raise InvalidSequenceError(
                f"Expected a string, but got '{type(text).__name__}'"
            )
        normalized = cls.normalize(text)
        if len(normalized) == 0:
            raise InvalidSequenceError("No amino acids detected in the sequence")
        return cls(normalized)

    @property
    def code(self):
        """
        ndarray, dtype=uint8 : The read-only sequence code.
        """
        return self._code

    @property
    def symbols(self):
        """
        str : The sequence as string of one-letter codes.
        """
        return self.alphabet.decode_multiple(self._code)

    def get_alphabet(self):
        """
        Get the :class:`LetterAlphabet` of the sequence.

        Returns
        -------
        alphabet : LetterAlphabet
            The protein alphabet.
        """
        return self.alphabet

    def __len__(self):
        return len(self._code)

    def __str__(self):
        return self.symbols

    def __repr__(self):
        """Represent ProteinSequence as a string for debugging."""
        return f'ProteinSequence("{self.symbols}")'

    def __eq__(self, item):
        if not isinstance(item, ProteinSequence):
            return False
        return np.array_equal(self._code, item.code)

    def __hash__(self):
        return hash(self._code.tobytes())

    def __reduce__(self):
        return ProteinSequence, (self.symbols,)
