# This source code is part of the ProtCompare package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "protcompare.io"
__author__ = "ProtCompare contributors"
__all__ = [
    "TableFormatError",
    "DEFAULT_SEQUENCE_COLUMNS",
    "read_candidate_table",
    "find_sequence_column",
    "candidates_from_frame",
    "results_to_frame",
    "default_results_filename",
    "write_results_csv",
]

import datetime
import os
import warnings
import zipfile
import pandas as pd
from openpyxl.utils.exceptions import InvalidFileException
from ..error import ComparisonError

DEFAULT_SEQUENCE_COLUMNS = ("translation", "aa_sequence", "prot_seq")

_EXCEL_SUFFIXES = (".xlsx", ".xlsm")
_TAB_SUFFIXES = (".tsv", ".tab")


class TableFormatError(ComparisonError):
    """
    Indicates that a candidate table cannot be read or has no sequence
    column.
    """

    pass


def read_candidate_table(path):
    """
    Read a table of candidate sequences.

    Excel workbooks (``.xlsx``, ``.xlsm``; first sheet), comma
    separated (``.csv``) and tab separated (``.tsv``, ``.tab``) files
    are supported.
    The format is determined from the file extension.

    Parameters
    ----------
    path : str or PathLike
        The path of the table.

    Returns
    -------
    table : DataFrame
        The table with one row per candidate.
        Empty cells are *NaN*.

    Raises
    ------
    TableFormatError
        If the format is not supported or the file cannot be parsed.
    """
    suffix = os.path.splitext(os.fspath(path))[1].lower()
    if suffix not in _EXCEL_SUFFIXES + _TAB_SUFFIXES + (".csv",):
        raise TableFormatError(
            f"Unsupported table format '{suffix}', "
            f"expected an Excel, CSV or TSV file"
        )
    try:
        if suffix in _EXCEL_SUFFIXES:
            return pd.read_excel(path, engine="openpyxl")
        elif suffix in _TAB_SUFFIXES:
            return pd.read_csv(path, sep="\t")
        else:
            return pd.read_csv(path)
    except (
        OSError,
        ValueError,
        KeyError,
        zipfile.BadZipFile,
        InvalidFileException,
    ) as e:
        raise TableFormatError(f"Cannot read table '{path}': {e}") from e


def find_sequence_column(table, accepted=DEFAULT_SEQUENCE_COLUMNS):
    """
    Find the column of a table that contains the candidate sequences.

    A column qualifies, if its name contains one of the `accepted`
    names, ignoring case.
    If multiple columns qualify, the leftmost one is chosen and a
    warning is raised.

    Parameters
    ----------
    table : DataFrame
        The candidate table.
    accepted : iterable object of str, optional
        The accepted column names.

    Returns
    -------
    column : str
        The name of the sequence column.

    Raises
    ------
    TableFormatError
        If no column qualifies.

    Examples
    --------

    >>> table = pd.DataFrame({"locus_tag": ["a1"], "Translation": ["MKV"]})
    >>> print(find_sequence_column(table))
    Translation
    """
    accepted = [name.lower() for name in accepted]
    matches = [
        column
        for column in table.columns
        if any(name in str(column).lower() for name in accepted)
    ]
    if len(matches) == 0:
        raise TableFormatError(
            f"No sequence column found, expected a column named like "
            f"{', '.join(repr(name) for name in accepted)}"
        )
    if len(matches) > 1:
        warnings.warn(
            f"Multiple sequence columns found "
            f"({', '.join(repr(str(column)) for column in matches)}), "
            f"using '{matches[0]}'"
        )
    return matches[0]


def candidates_from_frame(table, column):
    """
    Get the raw candidate sequences from a table column.

    Parameters
    ----------
    table : DataFrame
        The candidate table.
    column : str
        The name of the sequence column.

    Returns
    -------
    candidates : list of (str or None)
        The raw sequences, with the 0-based row position as index.
        Missing values are ``None``.

    Raises
    ------
    TableFormatError
        If the column does not exist.
    """
    if column not in table.columns:
        raise TableFormatError(f"The table has no column '{column}'")
    return [None if pd.isna(value) else value for value in table[column].tolist()]


def results_to_frame(records, table=None, decimals=2):
    """
    Convert comparison records into a table.

    Parameters
    ----------
    records : iterable object of ComparisonRecord
        The records, e.g. a :class:`ResultSet`.
        The order of the records is kept.
    table : DataFrame, optional
        The candidate table the records refer to.
        If given, the row of each candidate is appended to its record
        instead of the index.
    decimals : int, optional
        The number of decimal places of metrics and scores.

    Returns
    -------
    frame : DataFrame
        One row per record.
        The p-values are strings, so that bounds keep their ``'< '``
        prefix.
    """
    records = list(records)
    frame = pd.DataFrame([record.as_row(decimals) for record in records])
    if table is None:
        return frame
    if len(records) > 0:
        frame = frame.drop(columns="Index")
    source = table.iloc[[record.index for record in records]].reset_index(drop=True)
    return pd.concat([frame, source], axis=1)


def default_results_filename(date=None):
    """
    Get the default file name of exported results.

    Parameters
    ----------
    date : date, optional
        The date in the file name.
        By default the current date.

    Returns
    -------
    file_name : str
        The file name, e.g. ``'similarity_results_2024-05-01.csv'``.
    """
    if date is None:
        date = datetime.date.today()
    return f"similarity_results_{date.isoformat()}.csv"


def write_results_csv(records, path=None, table=None, decimals=2):
    """
    Write comparison records into a CSV file.

    Parameters
    ----------
    records : iterable object of ComparisonRecord
        The records, e.g. a :class:`ResultSet`.
    path : str or PathLike, optional
        The output file.
        By default :func:`default_results_filename()` in the current
        directory.
    table : DataFrame, optional
        The candidate table, whose rows are appended to the records.
    decimals : int, optional
        The number of decimal places of metrics and scores.

    Returns
    -------
    path : str or PathLike
        The path of the written file.
    """
    if path is None:
        path = default_results_filename()
    results_to_frame(records, table, decimals).to_csv(path, index=False)
    return path
