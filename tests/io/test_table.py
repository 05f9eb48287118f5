# This source code is part of the ProtCompare package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

import datetime
import zipfile
from os.path import join
import pandas as pd
import pytest
import protcompare.compare as compare
import protcompare.io as pcio
import protcompare.sequence.align as align
from ..util import data_dir


@pytest.mark.parametrize("file_name", ["candidates.csv", "candidates.tsv"])
def test_read_text_table(file_name):
    table = pcio.read_candidate_table(join(data_dir("io"), file_name))
    assert list(table.columns) == ["locus_tag", "product", "translation"]
    assert len(table) == 4
    column = pcio.find_sequence_column(table)
    assert column == "translation"
    candidates = pcio.candidates_from_frame(table, column)
    assert candidates[0] == "MTSLNLLTDIPGIRVGH"
    assert candidates[2] is None


def test_read_excel(tmp_path):
    path = tmp_path / "candidates.xlsx"
    pd.DataFrame({"name": ["a", "b"], "AA_Sequence": ["MTSL", None]}).to_excel(
        path, index=False
    )
    table = pcio.read_candidate_table(path)
    assert pcio.find_sequence_column(table) == "AA_Sequence"
    assert pcio.candidates_from_frame(table, "AA_Sequence") == ["MTSL", None]


def test_unsupported_format(tmp_path):
    path = tmp_path / "candidates.fasta"
    path.write_text(">seq\nMTSL\n")
    with pytest.raises(pcio.TableFormatError):
        pcio.read_candidate_table(path)


@pytest.mark.parametrize("file_name", ["broken.xlsx", "missing.csv"])
def test_unreadable_table(tmp_path, file_name):
    path = tmp_path / file_name
    if file_name.endswith(".xlsx"):
        path.write_text("This is not a workbook")
    with pytest.raises(pcio.TableFormatError):
        pcio.read_candidate_table(path)


@pytest.mark.parametrize(
    "columns, exp_column",
    [
        (["id", "translation"], "translation"),
        (["id", "Protein_Translation"], "Protein_Translation"),
        (["AA_SEQUENCE", "id"], "AA_SEQUENCE"),
        (["id", "prot_seq_1"], "prot_seq_1"),
    ],
)
def test_find_sequence_column(columns, exp_column):
    table = pd.DataFrame(columns=columns)
    assert pcio.find_sequence_column(table) == exp_column


def test_no_sequence_column():
    table = pd.DataFrame(columns=["id", "sequence"])
    with pytest.raises(pcio.TableFormatError):
        pcio.find_sequence_column(table)
    assert pcio.find_sequence_column(table, accepted=["sequence"]) == "sequence"


def test_multiple_sequence_columns():
    table = pd.DataFrame(columns=["id", "prot_seq", "translation"])
    with pytest.warns(UserWarning, match="Multiple sequence columns"):
        assert pcio.find_sequence_column(table) == "prot_seq"


def test_missing_column():
    with pytest.raises(pcio.TableFormatError):
        pcio.candidates_from_frame(pd.DataFrame(columns=["id"]), "translation")


@pytest.fixture
def records():
    return compare.ResultSet(
        [
            compare.ComparisonRecord(0, 50.0, 40.0, 20.0, 25, align.PValue(0.3, False, 10)),
            compare.ComparisonRecord(2, 100.0, 100.0, 100.0, 87, align.PValue(0.1, True, 10)),
        ]
    )


def test_results_to_frame(records):
    frame = pcio.results_to_frame(records)
    assert list(frame.columns) == list(compare.RESULT_COLUMNS)
    assert frame["Index"].tolist() == [2, 0]
    assert frame["Empirical P-Value"].tolist() == ["< 0.1", "0.3"]


def test_results_to_frame_with_table(records):
    table = pd.DataFrame({"locus_tag": ["g0", "g1", "g2"], "translation": ["A", "C", "D"]})
    frame = pcio.results_to_frame(records, table)
    assert list(frame.columns) == list(compare.RESULT_COLUMNS[1:]) + [
        "locus_tag",
        "translation",
    ]
    assert frame["locus_tag"].tolist() == ["g2", "g0"]


def test_default_results_filename():
    assert (
        pcio.default_results_filename(datetime.date(2024, 5, 1))
        == "similarity_results_2024-05-01.csv"
    )


def test_write_results_csv(records, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = pcio.write_results_csv(records)
    assert path == pcio.default_results_filename()
    frame = pd.read_csv(tmp_path / path)
    assert frame["Combined Score"].tolist() == [100.0, 20.0]
    assert frame["Empirical P-Value"].tolist() == ["< 0.1", "0.3"]


def test_zip_without_workbook(tmp_path):
    """
    A valid ZIP archive that lacks the workbook parts is not a table.
    """
    path = tmp_path / "candidates.xlsx"
    with zipfile.ZipFile(path, "w") as archive:
        archive.writestr("hello.txt", "This is not a workbook")
    with pytest.raises(pcio.TableFormatError):
        pcio.read_candidate_table(path)
