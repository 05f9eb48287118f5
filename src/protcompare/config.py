# This source code is part of the ProtCompare package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "protcompare"
__author__ = "ProtCompare contributors"
__all__ = ["ComparisonConfig", "load_config"]

import dataclasses
import math
import numbers
import os
import tomllib
from dataclasses import dataclass
from .error import ConfigurationError
from .io.table import DEFAULT_SEQUENCE_COLUMNS
from .sequence.align.matrix import ScoringScheme, SubstitutionMatrix
from .sequence.seqtypes import ProteinSequence


@dataclass(frozen=True)
class ComparisonConfig:
    """
    The configuration of a comparison run.

    All values are validated on construction.

    Attributes
    ----------
    matrix : str
        The name of a matrix in the internal database
        (see :meth:`SubstitutionMatrix.list_db()`) or the path of a
        matrix file in NCBI format.
    gap_open, gap_extend : float
        The non-negative gap penalties.
    sample_count : int
        The number of random sequences per candidate.
    min_sample_count : int
        The lowest accepted `sample_count`.
    max_workers : int or None
        The maximum number of worker processes, ``None`` for the number
        of CPUs.
    seed : int or None
        The seed for the random sequences.
    sequence_columns : tuple of str
        The accepted names of the sequence column in a candidate table.

    Examples
    --------

    >>> config = ComparisonConfig().replace(sample_count=500, seed=1)
    >>> print(config.sample_count, config.gap_open)
    500 12
    """

    matrix: str = "BLOSUM62"
    gap_open: float = 12
    gap_extend: float = 0.5
    sample_count: int = 100
    min_sample_count: int = 10
    max_workers: object = None
    seed: object = None
    sequence_columns: tuple = DEFAULT_SEQUENCE_COLUMNS

    def __post_init__(self):
        if not isinstance(self.matrix, str) or len(self.matrix) == 0:
            raise ConfigurationError("'matrix' must be a matrix name or file path")
        for name in ("gap_open", "gap_extend"):
            value = getattr(self, name)
            if (
                isinstance(value, bool)
                or not isinstance(value, numbers.Real)
                or not math.isfinite(value)
                or value < 0
            ):
                raise ConfigurationError(
                    f"'{name}' must be a finite, non-negative number, not {value!r}"
                )
        if not _is_int(self.min_sample_count) or self.min_sample_count < 1:
            raise ConfigurationError("'min_sample_count' must be a positive integer")
        if not _is_int(self.sample_count) or self.sample_count < self.min_sample_count:
            raise ConfigurationError(
                f"'sample_count' must be an integer of at least "
                f"{self.min_sample_count}, not {self.sample_count!r}"
            )
        if self.max_workers is not None and (
            not _is_int(self.max_workers) or self.max_workers < 1
        ):
            raise ConfigurationError("'max_workers' must be a positive integer")
        if self.seed is not None and (not _is_int(self.seed) or self.seed < 0):
            raise ConfigurationError("'seed' must be a non-negative integer")
        if isinstance(self.sequence_columns, str):
            columns = (self.sequence_columns,)
        else:
            try:
                columns = tuple(self.sequence_columns)
            except TypeError:
                raise ConfigurationError("'sequence_columns' must be a list of names")
        if len(columns) == 0 or not all(
            isinstance(column, str) and len(column) > 0 for column in columns
        ):
            raise ConfigurationError("'sequence_columns' must contain non-empty names")
        # The instance is frozen
        object.__setattr__(self, "sequence_columns", columns)

    def replace(self, **changes):
        """
        Create a copy of this configuration with the given values
        replaced.

        Parameters
        ----------
        **changes
            The new values.

        Returns
        -------
        config : ComparisonConfig
            The new configuration.

        Raises
        ------
        ConfigurationError
            If a name is not a configuration value or a value is
            invalid.
        """
        unknown = set(changes) - _field_names()
        if unknown:
            raise ConfigurationError(
                f"Unknown configuration value(s): {', '.join(sorted(unknown))}"
            )
        return dataclasses.replace(self, **changes)

    def create_matrix(self):
        """
        Create the substitution matrix from the :attr:`matrix` value.

        Returns
        -------
        matrix : SubstitutionMatrix
            The matrix from the internal database, if :attr:`matrix` is
            a database name, otherwise the matrix read from the file.
        """
        if self.matrix == "BLOSUM62":
            return SubstitutionMatrix.std_protein_matrix()
        if self.matrix in SubstitutionMatrix.list_db():
            alphabet = ProteinSequence.alphabet
            return SubstitutionMatrix(alphabet, alphabet, self.matrix)
        if os.path.isfile(self.matrix):
            return SubstitutionMatrix.from_file(self.matrix)
        raise ConfigurationError(
            f"'{self.matrix}' is neither a file nor a matrix in the database, "
            f"choose from {', '.join(SubstitutionMatrix.list_db())}"
        )

    def create_scheme(self):
        """
        Create the scoring scheme described by this configuration.

        Returns
        -------
        scheme : ScoringScheme
            The scoring scheme.

        Raises
        ------
        ConfigurationError
            If the matrix cannot be found or is unsuitable.
        """
        return ScoringScheme(self.create_matrix(), self.gap_open, self.gap_extend)


def load_config(path):
    """
    Load a :class:`ComparisonConfig` from a TOML file.

    The values are read from the ``[protcompare]`` table, missing
    values take their default.

    .. code-block:: toml

        [protcompare]
        matrix = "BLOSUM62"
        gap_open = 10
        gap_extend = 1
        sample_count = 1000
        seed = 42

    Parameters
    ----------
    path : str or PathLike
        The path of the TOML file.

    Returns
    -------
    config : ComparisonConfig
        The configuration.

    Raises
    ------
    ConfigurationError
        If the file cannot be read, the ``[protcompare]`` table is
        missing or contains unknown or invalid values.
    """
    try:
        with open(path, "rb") as file:
            content = tomllib.load(file)
    except OSError as e:
        raise ConfigurationError(f"Cannot read configuration file '{path}': {e}")
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Malformed configuration file '{path}': {e}")

    table = content.get("protcompare")
    if not isinstance(table, dict):
        raise ConfigurationError(
            f"Configuration file '{path}' has no [protcompare] table"
        )
    unknown = set(table) - _field_names()
    if unknown:
        raise ConfigurationError(
            f"Unknown configuration value(s): {', '.join(sorted(unknown))}"
        )
    return ComparisonConfig(**table)


def _field_names():
    return {field.name for field in dataclasses.fields(ComparisonConfig)}


def _is_int(value):
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)
