# This source code is part of the ProtCompare package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "protcompare.sequence"
__author__ = "ProtCompare contributors"
__all__ = ["LetterAlphabet", "AlphabetError"]

import string
import numpy as np


class LetterAlphabet(object):
    """
    An ordered set of single-letter symbols, that translates between
    letters and their integer symbol codes.

    The code of a letter is its position in the alphabet.
    Only printable ASCII characters other than whitespace are valid
    letters.

    A 256-element lookup table maps each byte to its code, so that a
    whole sequence is encoded by indexing the table with the sequence
    bytes.

    An alphabet *extends* another one, if it starts with the letters of
    the other alphabet in the same order.
    Each alphabet extends itself.

    An alphabet cannot be modified after creation.

    Parameters
    ----------
    symbols : iterable object or str
        The letters in the order of their codes.

    Examples
    --------

    >>> alph = LetterAlphabet("ACGT")
    >>> print(alph.encode("G"))
    2
    >>> print(alph.decode(2))
    G
    >>> print(alph.encode_multiple("GATTACA"))
    [2 0 3 3 0 1 0]
    >>> try:
    ...    alph.encode("U")
    ... except Exception as e:
    ...    print(e)
    Symbol 'U' is not in the alphabet

    Additional letters at the end extend an alphabet...

    >>> LetterAlphabet("ACGTU").extends(LetterAlphabet("ACGT"))
    True

    ...while fewer letters do not

    >>> LetterAlphabet("ACGT").extends(LetterAlphabet("ACGTU"))
    False
    """

    PRINTABLES = (
        string.digits + string.ascii_letters + string.punctuation
    ).encode("ASCII")

    # Marks a byte value without symbol code in the lookup table
    _ILLEGAL = np.iinfo(np.uint8).max

    def __init__(self, symbols):
        if len(symbols) == 0:
            raise ValueError("Symbol list is empty")
        if len(symbols) >= LetterAlphabet._ILLEGAL:
            raise ValueError("Too many symbols for a letter alphabet")
        letters = []
        for symbol in symbols:
            if isinstance(symbol, bytes):
                symbol = symbol.decode("ASCII")
            if not isinstance(symbol, str) or len(symbol) != 1:
                raise ValueError(f"Symbol '{symbol}' is not a single letter")
            if symbol.encode("ASCII") not in LetterAlphabet.PRINTABLES:
                raise ValueError(
                    f"Symbol {repr(symbol)} is not printable or whitespace"
                )
            if symbol in letters:
                raise ValueError(f"Symbol {repr(symbol)} is given twice")
            letters.append(symbol)
        self._symbols = tuple(letters)
        self._lookup = np.full(256, LetterAlphabet._ILLEGAL, dtype=np.uint8)
        for code, symbol in enumerate(self._symbols):
            self._lookup[ord(symbol)] = code
        self._lookup.setflags(write=False)

    def __repr__(self):
        return f"LetterAlphabet({self._symbols})"

    def get_symbols(self):
        """
        tuple of str : The letters in the order of their codes.
        """
        return self._symbols

    def extends(self, alphabet):
        """
        Check whether this alphabet starts with the letters of another
        alphabet.

        Parameters
        ----------
        alphabet : LetterAlphabet
            The other alphabet.

        Returns
        -------
        extends : bool
            True, if each letter of `alphabet` has the same code in
            this alphabet.
        """
        if alphabet is self:
            return True
        elif len(alphabet) > len(self):
            return False
        else:
            return alphabet.get_symbols() == self._symbols[: len(alphabet)]

    def encode(self, symbol):
        """
        Get the code of a letter.

        Parameters
        ----------
        symbol : str
            A single letter.

        Returns
        -------
        code : int
            The code of the letter.

        Raises
        ------
        AlphabetError
            If `symbol` is not in the alphabet.
        """
        if not isinstance(symbol, str) or len(symbol) != 1:
            raise AlphabetError(f"Symbol '{symbol}' is not a single letter")
        if ord(symbol) > 255:
            raise AlphabetError(f"Symbol {repr(symbol)} is not in the alphabet")
        code = self._lookup[ord(symbol)]
        if code == LetterAlphabet._ILLEGAL:
            raise AlphabetError(f"Symbol {repr(symbol)} is not in the alphabet")
        return int(code)

    def decode(self, code):
        """
        Get the letter of a code.

        Parameters
        ----------
        code : int
            A symbol code.

        Returns
        -------
        symbol : str
            The letter with this code.

        Raises
        ------
        AlphabetError
            If `code` is not a valid code in the alphabet.
        """
        if code < 0 or code >= len(self._symbols):
            raise AlphabetError(f"'{code:d}' is not a valid code")
        return self._symbols[code]

    def encode_multiple(self, symbols):
        """
        Get the codes of a sequence of letters.

        Parameters
        ----------
        symbols : str or iterable object of str
            The letters.

        Returns
        -------
        code : ndarray, dtype=uint8
            The code of each letter.

        Raises
        ------
        AlphabetError
            If any of the letters is not in the alphabet.
        """
        if not isinstance(symbols, str):
            symbols = "".join(symbols)
        try:
            raw = np.frombuffer(symbols.encode("ASCII"), dtype=np.uint8)
        except UnicodeEncodeError:
            raise AlphabetError("Symbols contain non-ASCII characters")
        code = self._lookup[raw]
        illegal = np.where(code == LetterAlphabet._ILLEGAL)[0]
        if len(illegal) > 0:
            symbol = symbols[illegal[0]]
            raise AlphabetError(f"Symbol {repr(symbol)} is not in the alphabet")
        return code

    def decode_multiple(self, code):
        """
        Get the letters of a sequence of codes.

        Parameters
        ----------
        code : ndarray, dtype=uint8
            The codes.

        Returns
        -------
        symbols : str
            The letters as string.
        """
        code = np.asarray(code)
        if len(code) > 0 and (code.min() < 0 or code.max() >= len(self)):
            raise AlphabetError("Sequence code contains invalid codes")
        return "".join([self._symbols[c] for c in code.tolist()])

    def filter(self, text):
        """
        Remove every character from a text that is not a letter of this
        alphabet.

        Parameters
        ----------
        text : str
            The text to be filtered.

        Returns
        -------
        filtered : str
            The remaining letters in their original order.

        Examples
        --------

        >>> print(LetterAlphabet("ACGT").filter("AC-G T\\nNNT"))
        ACGTT
        """
        return "".join([char for char in text if char in self])

    def __str__(self):
        return str(self._symbols)

    def __len__(self):
        return len(self._symbols)

    def __iter__(self):
        return self._symbols.__iter__()

    def __contains__(self, symbol):
        if not isinstance(symbol, str) or len(symbol) != 1 or ord(symbol) > 255:
            return False
        return self._lookup[ord(symbol)] != LetterAlphabet._ILLEGAL

    def __hash__(self):
        return hash(self._symbols)

    def __eq__(self, item):
        if item is self:
            return True
        if not isinstance(item, LetterAlphabet):
            return False
        return self._symbols == item.get_symbols()

    def __reduce__(self):
        return LetterAlphabet, (self._symbols,)


class AlphabetError(Exception):
    """
    Indicates a letter or code that is not part of a
    :class:`LetterAlphabet`.
    """

    pass
