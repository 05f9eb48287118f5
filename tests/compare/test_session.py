# This source code is part of the ProtCompare package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

import pandas as pd
import pytest
import protcompare
import protcompare.compare as compare

QUERY = "MTSLNLLTDIPGIRVGH"


@pytest.fixture
def session():
    return compare.ComparisonSession(
        protcompare.ComparisonConfig(sample_count=10, max_workers=1, seed=0)
    )


@pytest.fixture
def table():
    return pd.DataFrame(
        {
            "locus_tag": ["gene_1", "gene_2", "gene_3"],
            "Translation": ["MTSLNLL", None, QUERY],
        }
    )


def test_compare(session):
    assert session.results is None
    assert session.state is None
    results = session.compare(QUERY, ["MTSLNLL", QUERY])
    assert session.results is results
    assert session.table is None
    assert session.state == compare.RunState.RANKED


def test_compare_table(session, table):
    results = session.compare_table(QUERY, table)
    assert results.indices() == [2, 0]
    assert session.sequence_column == "Translation"
    assert session.table is table


def test_export(session, tmp_path):
    session.compare(QUERY, ["MTSLNLL", QUERY])
    path = session.export(tmp_path / "results.csv")
    frame = pd.read_csv(path)
    assert list(frame.columns) == list(compare.RESULT_COLUMNS)
    assert frame["Index"].tolist() == [1, 0]
    assert frame["Identity (%)"].tolist() == [100.0, 100.0]
    assert frame["Coverage (%)"].tolist() == [100.0, 41.18]
    assert frame["Empirical P-Value"].iloc[0] == "< 0.1"


def test_export_table(session, table, tmp_path):
    session.compare_table(QUERY, table)
    frame = pd.read_csv(session.export(tmp_path / "results.csv"))
    assert list(frame.columns) == list(compare.RESULT_COLUMNS[1:]) + [
        "locus_tag",
        "Translation",
    ]
    assert frame["locus_tag"].tolist() == ["gene_3", "gene_1"]


def test_export_without_results(session, tmp_path):
    with pytest.raises(RuntimeError):
        session.export(tmp_path / "results.csv")


def test_failed_run_keeps_results(session):
    results = session.compare(QUERY, [QUERY])
    with pytest.raises(protcompare.InvalidQueryError):
        session.compare("", [QUERY])
    assert session.results is results
    assert session.state == compare.RunState.FAILED


def test_explicit_column(session, table):
    table["prot_seq"] = ["GGG", "MTSLNLL", "AAA"]
    with pytest.warns(UserWarning):
        session.compare_table(QUERY, table)
    assert session.sequence_column == "Translation"
    session.compare_table(QUERY, table, column="prot_seq")
    assert session.sequence_column == "prot_seq"
    assert session.results.indices()[0] == 1
