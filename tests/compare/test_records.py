# This source code is part of the ProtCompare package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

import pytest
import protcompare.compare as compare
import protcompare.sequence.align as align


def create_record(index, combined_score, p_value=None):
    if p_value is None:
        p_value = align.PValue(0.5, False, 10)
    return compare.ComparisonRecord(
        index=index,
        identity=100.0,
        coverage=combined_score,
        combined_score=combined_score,
        alignment_score=10,
        p_value=p_value,
    )


@pytest.mark.parametrize("order", [[0, 1, 2], [2, 0, 1], [1, 2, 0]])
def test_ranking(order):
    """
    Records are ranked by descending combined score, ties keep the
    ascending index order.
    """
    records = [create_record(0, 80.0), create_record(1, 95.5), create_record(2, 95.5)]
    results = compare.ResultSet([records[i] for i in order])
    assert results.indices() == [1, 2, 0]


def test_ranking_uses_unrounded_scores():
    results = compare.ResultSet([create_record(0, 95.501), create_record(1, 95.504)])
    assert results.indices() == [1, 0]


def test_sequence_interface():
    results = compare.ResultSet([create_record(i, float(i)) for i in range(5)])
    assert len(results) == 5
    assert results[0].index == 4
    assert [record.index for record in results[1:3]] == [3, 2]
    assert [record.index for record in results] == [4, 3, 2, 1, 0]
    assert [record.index for record in results.top(2)] == [4, 3]
    assert len(results.top(10)) == 5


def test_skipped_counts():
    results = compare.ResultSet(
        [create_record(0, 50.0)],
        {compare.SkipReason.INVALID_SEQUENCE: 2, compare.SkipReason.ALIGNMENT_FAILED: 0},
    )
    assert dict(results.skipped) == {compare.SkipReason.INVALID_SEQUENCE: 2}
    assert results.skipped_count == 2
    assert results.total == 3
    with pytest.raises(TypeError):
        results.skipped[compare.SkipReason.ESTIMATION_FAILED] = 1


def test_as_row():
    record = compare.ComparisonRecord(
        index=3,
        identity=100 / 3,
        coverage=200 / 3,
        combined_score=200 / 9,
        alignment_score=87.5,
        p_value=align.PValue(0.01, True, 100),
    )
    assert record.as_row() == {
        "Index": 3,
        "Identity (%)": 33.33,
        "Coverage (%)": 66.67,
        "Combined Score": 22.22,
        "Alignment Score": 87.5,
        "Empirical P-Value": "< 0.01",
    }
    assert list(record.as_row()) == list(compare.RESULT_COLUMNS)


def test_from_alignment():
    alignment = align.LocalAlignment(
        score=30, query_range=(0, 8), subject_range=(2, 10),
        length=8, identities=6, gaps=0,
    )  # fmt: skip
    p_value = align.PValue(0.2, False, 10)
    record = compare.ComparisonRecord.from_alignment(7, alignment, 10, p_value)
    assert record.index == 7
    assert record.identity == pytest.approx(75)
    assert record.coverage == pytest.approx(80)
    assert record.combined_score == pytest.approx(60)
    assert record.alignment_score == 30
    assert record.p_value == p_value
    assert record.alignment == alignment
