# This source code is part of the ProtCompare package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "protcompare.sequence.align"
__author__ = "ProtCompare contributors"
__all__ = ["SubstitutionMatrix", "ScoringScheme"]

import functools
import numbers
import os
import numpy as np
from ..alphabet import AlphabetError
from ..seqtypes import ProteinSequence
from ...error import ConfigurationError


class SubstitutionMatrix(object):
    """
    Scores for the substitution of one residue by another.

    The scores are held in an integer :class:`ndarray` of shape
    *(m, n)*, where *m* and *n* are the lengths of the row and column
    alphabets.
    Row *i* and column *j* hold the score of aligning the symbol with
    code *i* of the row alphabet to the symbol with code *j* of the
    column alphabet.

    The scores can be given as

        - an :class:`ndarray` that is indexed by symbol codes,
        - a dictionary that maps each ``(row symbol, column symbol)``
          tuple to a score, which must cover all pairings or
        - the name of a matrix shipped with this package
          (see :meth:`list_db()`).

    Other matrices in NCBI format are read with :meth:`from_file()`.

    Ambiguous symbols (``B``, ``Z``, ``X``) and the stop symbol (``*``)
    get the scores the matrix assigns to them.
    Hence, a matrix must contain a score for every pairing, otherwise
    it is rejected.

    A matrix cannot be modified after creation.

    Parameters
    ----------
    alphabet1 : LetterAlphabet, length=m
        The row alphabet.
    alphabet2 : LetterAlphabet, length=n
        The column alphabet.
    score_matrix : ndarray, shape=(m,n) or dict or str
        The scores as code indexed array, as dictionary of symbol
        pairings or as name of a shipped matrix.

    Raises
    ------
    ConfigurationError
        If the matrix data is malformed, e.g. it misses a symbol
        pairing, contains non-integer scores or the matrix name is not
        in the database.

    Examples
    --------

    A small matrix from a dictionary:

    >>> rows = LetterAlphabet("AB")
    >>> columns = LetterAlphabet("CDE")
    >>> scores = {("A","C"):5,  ("A","D"):10, ("A","E"):15,
    ...           ("B","C"):42, ("B","D"):42, ("B","E"):42}
    >>> matrix = SubstitutionMatrix(rows, columns, scores)
    >>> print(matrix.score_matrix())
    [[ 5 10 15]
     [42 42 42]]
    >>> print(matrix.get_score("A", "D"))
    10
    >>> print(matrix.get_score_by_code(0, 1))
    10

    A shipped matrix:

    >>> alphabet = ProteinSequence.alphabet
    >>> matrix = SubstitutionMatrix(alphabet, alphabet, "BLOSUM62")
    >>> print(matrix.get_score("W", "W"))
    11
    """

    _db_dir = os.path.join(os.path.dirname(os.path.realpath(__file__)), "matrix_data")

    def __init__(self, alphabet1, alphabet2, score_matrix):
        self._alph1 = alphabet1
        self._alph2 = alphabet2
        if isinstance(score_matrix, dict):
            self._fill_from_dict(score_matrix)
        elif isinstance(score_matrix, np.ndarray):
            expected_shape = (len(alphabet1), len(alphabet2))
            if score_matrix.shape != expected_shape:
                raise ConfigurationError(
                    f"Score array has shape {score_matrix.shape}, "
                    f"expected {expected_shape}"
                )
            if not np.issubdtype(score_matrix.dtype, np.integer):
                if not np.all(np.isfinite(score_matrix)) or not np.array_equal(
                    score_matrix, np.round(score_matrix)
                ):
                    raise ConfigurationError("Matrix contains non-integer scores")
            self._matrix = score_matrix.astype(np.int32)
        elif isinstance(score_matrix, str):
            self._fill_from_dict(SubstitutionMatrix.dict_from_db(score_matrix))
        else:
            raise ConfigurationError(
                "Scores must be given as dictionary, 2-D ndarray or matrix name"
            )
        # Immutable
        self._matrix.setflags(write=False)

    def __repr__(self):
        return (
            f"SubstitutionMatrix({self._alph1!r}, "
            f"{self._alph2!r}, np.{np.array_repr(self._matrix)})"
        )

    def __eq__(self, item):
        if not isinstance(item, SubstitutionMatrix):
            return False
        return (
            self._alph1 == item.get_alphabet1()
            and self._alph2 == item.get_alphabet2()
            and np.array_equal(self._matrix, item.score_matrix())
        )

    def __ne__(self, item):
        return not self == item

    def __reduce__(self):
        return SubstitutionMatrix, (self._alph1, self._alph2, np.array(self._matrix))

    def _fill_from_dict(self, scores):
        self._matrix = np.zeros((len(self._alph1), len(self._alph2)), dtype=np.int32)
        for i, sym1 in enumerate(self._alph1):
            for j, sym2 in enumerate(self._alph2):
                try:
                    score = scores[sym1, sym2]
                except KeyError:
                    raise ConfigurationError(
                        f"Matrix misses a score for the pairing "
                        f"'{sym1}' - '{sym2}'"
                    )
                if not isinstance(score, numbers.Integral):
                    if not isinstance(score, numbers.Real) or score != int(score):
                        raise ConfigurationError(
                            f"Score {score!r} for the pairing '{sym1}' - '{sym2}' "
                            f"is not an integer"
                        )
                self._matrix[i, j] = int(score)

    def get_alphabet1(self):
        """
        LetterAlphabet : The row alphabet.
        """
        return self._alph1

    def get_alphabet2(self):
        """
        LetterAlphabet : The column alphabet.
        """
        return self._alph2

    def score_matrix(self):
        """
        Get the scores as array.

        Returns
        -------
        matrix : ndarray, shape=(m,n), dtype=np.int32
            The scores, indexed by the symbol codes of the row and
            column alphabet.
            The array is read-only.
        """
        return self._matrix

    def is_symmetric(self):
        """
        Check whether aligning *a* to *b* scores the same as aligning
        *b* to *a* for all symbols.

        Returns
        -------
        is_symmetric : bool
            True, if the row and column alphabet are equal and the
            score array equals its transpose.
        """
        return self._alph1 == self._alph2 and np.array_equal(
            self._matrix, np.transpose(self._matrix)
        )

    def get_score_by_code(self, code1, code2):
        """
        Get the score for aligning two symbol codes.

        Parameters
        ----------
        code1, code2 : int
            The codes of the row and column symbol.

        Returns
        -------
        score : int
            The substitution score.
        """
        return int(self._matrix[code1, code2])

    def get_score(self, symbol1, symbol2):
        """
        Get the score for aligning two symbols.

        Parameters
        ----------
        symbol1, symbol2 : str
            The row and column symbol.

        Returns
        -------
        score : int
            The substitution score.

        Raises
        ------
        AlphabetError
            If a symbol is not part of the respective alphabet.
        """
        return self.get_score_by_code(
            self._alph1.encode(symbol1), self._alph2.encode(symbol2)
        )

    def shape(self):
        """
        tuple of int : The lengths of the row and column alphabet.
        """
        return (len(self._alph1), len(self._alph2))

    def __str__(self):
        # NCBI format
        lines = [" " + "".join(f" {symbol:>3}" for symbol in self._alph2)]
        for i, symbol in enumerate(self._alph1):
            lines.append(
                f"{symbol:>1}" + "".join(f" {score:>3d}" for score in self._matrix[i])
            )
        return "\n".join(lines)

    @staticmethod
    def dict_from_str(string):
        """
        Parse a matrix in NCBI format.

        The first non-comment line holds the column symbols, each
        following line starts with a row symbol followed by its scores.
        Lines starting with ``#`` are comments.

        Parameters
        ----------
        string : str
            The matrix in NCBI format.

        Returns
        -------
        matrix_dict : dict
            Maps each ``(row symbol, column symbol)`` tuple to its
            score.

        Raises
        ------
        ConfigurationError
            If the string is not a well-formed NCBI matrix.
        """
        lines = [
            line
            for line in (line.strip() for line in string.splitlines())
            if line and not line.startswith("#")
        ]
        if len(lines) < 2:
            raise ConfigurationError("Matrix contains no scores")
        symbols2 = lines[0].split()
        matrix_dict = {}
        for line in lines[1:]:
            fields = line.split()
            symbol1 = fields[0]
            if len(fields) - 1 != len(symbols2):
                raise ConfigurationError(
                    f"Row '{symbol1}' has {len(fields) - 1} scores, "
                    f"but {len(symbols2)} columns are given"
                )
            for symbol2, score in zip(symbols2, fields[1:]):
                try:
                    matrix_dict[(symbol1, symbol2)] = int(score)
                except ValueError:
                    raise ConfigurationError(
                        f"Score '{score}' for the pairing "
                        f"'{symbol1}' - '{symbol2}' is not an integer"
                    )
        return matrix_dict

    @staticmethod
    def dict_from_db(matrix_name):
        """
        Read the scores of a matrix shipped with this package.

        Parameters
        ----------
        matrix_name : str
            The name of the matrix, e.g. ``'BLOSUM62'``.

        Returns
        -------
        matrix_dict : dict
            Maps each ``(row symbol, column symbol)`` tuple to its
            score.

        Raises
        ------
        ConfigurationError
            If the matrix is not in the database.
        """
        if matrix_name not in SubstitutionMatrix.list_db():
            raise ConfigurationError(
                f"Matrix '{matrix_name}' is not in the database, "
                f"choose from {', '.join(SubstitutionMatrix.list_db())}"
            )
        filename = os.path.join(SubstitutionMatrix._db_dir, matrix_name + ".mat")
        with open(filename, "r") as f:
            return SubstitutionMatrix.dict_from_str(f.read())

    @staticmethod
    def list_db():
        """
        Get the names of the matrices shipped with this package.

        Returns
        -------
        names : list of str
            The sorted matrix names.
        """
        return [
            os.path.splitext(file_name)[0]
            for file_name in sorted(os.listdir(SubstitutionMatrix._db_dir))
            if file_name.endswith(".mat")
        ]

    @staticmethod
    def from_file(path, alphabet=None):
        """
        Read a symmetric substitution matrix from a file in NCBI
        format.

        Parameters
        ----------
        path : str or PathLike
            The path of the matrix file.
        alphabet : LetterAlphabet, optional
            The alphabet for both dimensions of the matrix.
            By default :attr:`ProteinSequence.alphabet`.
            The file must contain scores for all pairings of this
            alphabet, additional symbols in the file are ignored.

        Returns
        -------
        matrix : SubstitutionMatrix
            The matrix read from the file.

        Raises
        ------
        ConfigurationError
            If the file cannot be read or is malformed.
        """
        if alphabet is None:
            alphabet = ProteinSequence.alphabet
        try:
            with open(path, "r") as f:
                content = f.read()
        except OSError as e:
            raise ConfigurationError(f"Cannot read matrix file '{path}': {e}")
        matrix_dict = SubstitutionMatrix.dict_from_str(content)
        return SubstitutionMatrix(alphabet, alphabet, matrix_dict)

    @staticmethod
    def std_protein_matrix():
        """
        Get the BLOSUM62 matrix.

        The matrix is created only once.

        Returns
        -------
        matrix : SubstitutionMatrix
            BLOSUM62 for :attr:`ProteinSequence.alphabet`.
        """
        return _matrix_blosum62()


@functools.cache
def _matrix_blosum62():
    return SubstitutionMatrix(
        ProteinSequence.alphabet, ProteinSequence.alphabet, "BLOSUM62"
    )


class ScoringScheme(object):
    """
    A :class:`ScoringScheme` combines a symmetric
    :class:`SubstitutionMatrix` with affine gap penalties.

    A gap of length *k* reduces the alignment score by
    ``gap_open + k * gap_extend``, i.e. the opening penalty is charged
    once per gap and the extension penalty for each gap position,
    including the first one.

    The scheme is immutable and can be shared by all alignments of a
    comparison run.

    Parameters
    ----------
    matrix : SubstitutionMatrix
        The substitution matrix.
        It must be symmetric and its alphabet must extend
        :attr:`ProteinSequence.alphabet`.
    gap_open, gap_extend : int or float
        The gap penalties as non-negative values.

    Raises
    ------
    ConfigurationError
        If the matrix is not suitable for protein sequences or a gap
        penalty is negative or not finite.

    Examples
    --------

    >>> scheme = ScoringScheme.default()
    >>> print(scheme.gap_open, scheme.gap_extend)
    12 0.5
    >>> print(scheme.score("A", "S"))
    1
    """

    def __init__(self, matrix, gap_open, gap_extend):
        if not isinstance(matrix, SubstitutionMatrix):
            raise ConfigurationError(
                f"Expected 'SubstitutionMatrix', not '{type(matrix).__name__}'"
            )
        if not matrix.is_symmetric():
            raise ConfigurationError("A symmetric substitution matrix is required")
        if not matrix.get_alphabet1().extends(ProteinSequence.alphabet):
            raise ConfigurationError(
                "The substitution matrix is not compatible with the protein alphabet"
            )
        for name, value in (("gap_open", gap_open), ("gap_extend", gap_extend)):
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise ConfigurationError(f"'{name}' must be a number")
            if not np.isfinite(value) or value < 0:
                raise ConfigurationError(
                    f"'{name}' must be a finite, non-negative value, not {value}"
                )
        self._matrix = matrix
        self._gap_open = gap_open
        self._gap_extend = gap_extend

    @staticmethod
    def default():
        """
        Get the default scheme: BLOSUM62, a gap opening penalty of 12
        and a gap extension penalty of 0.5.

        Returns
        -------
        scheme : ScoringScheme
            The default scoring scheme.
        """
        return ScoringScheme(SubstitutionMatrix.std_protein_matrix(), 12, 0.5)

    @property
    def matrix(self):
        return self._matrix

    @property
    def gap_open(self):
        return self._gap_open

    @property
    def gap_extend(self):
        return self._gap_extend

    def score(self, symbol1, symbol2):
        """
        Get the substitution score of two amino acids.

        Parameters
        ----------
        symbol1, symbol2 : str
            One-letter codes of the amino acids.

        Returns
        -------
        score : int
            The substitution score.

        Raises
        ------
        ConfigurationError
            If a symbol is not part of the matrix alphabet.
        """
        try:
            return self._matrix.get_score(symbol1, symbol2)
        except AlphabetError as e:
            raise ConfigurationError(str(e))

    def __repr__(self):
        return (
            f"ScoringScheme({self._matrix!r}, "
            f"gap_open={self._gap_open!r}, gap_extend={self._gap_extend!r})"
        )

    def __eq__(self, item):
        if not isinstance(item, ScoringScheme):
            return False
        return (
            self._matrix == item.matrix
            and self._gap_open == item.gap_open
            and self._gap_extend == item.gap_extend
        )

    def __hash__(self):
        return hash((self._matrix.score_matrix().tobytes(), self._gap_open, self._gap_extend))
