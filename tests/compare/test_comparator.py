# This source code is part of the ProtCompare package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

import importlib
import numpy as np
import pytest
import protcompare
import protcompare.compare as compare
import protcompare.sequence as seq

QUERY = "MTSLNLLTDIPGIRVGH"


@pytest.fixture
def comparator():
    return compare.Comparator(sample_count=10, max_workers=1, seed=0)


def test_self_comparison():
    results = compare.compare_sequences(
        QUERY, [QUERY], sample_count=50, max_workers=1, seed=0
    )
    assert len(results) == 1
    record = results[0]
    assert record.index == 0
    assert record.identity == 100
    assert record.coverage == 100
    assert record.combined_score == 100
    assert record.alignment_score == 87
    assert record.p_value.is_bound
    assert str(record.p_value) == "< 0.02"


def test_short_query_long_candidate(comparator):
    results = comparator.run("ACDEFGHIKL", ["P" * 500 + "DEF" + "P" * 497])
    record = results[0]
    assert record.identity == pytest.approx(100)
    assert record.coverage == pytest.approx(30)
    assert record.combined_score == pytest.approx(30)
    assert record.alignment.subject_range == (500, 503)


def test_raw_input_is_normalized(comparator):
    results = comparator.run("mtsl nll\ntdip 42 girvgh", ["  mtslnll-tdipgirvgh  "])
    assert results[0].combined_score == 100


def test_ranking(comparator):
    results = comparator.run(QUERY, ["MTSLNLL", QUERY, "MTSLNLL"])
    assert results.indices() == [1, 0, 2]
    assert results[1].combined_score == results[2].combined_score


def test_mapping_candidates(comparator):
    results = comparator.run(QUERY, {10: "MTSLNLL", 20: QUERY, 30: None})
    assert results.indices() == [20, 10]
    assert results.total == 3


def test_skipped_candidates(comparator):
    results = comparator.run(QUERY, ["", None, np.nan, "MTSLNLL", "1234 -"])
    assert results.indices() == [3]
    assert dict(results.skipped) == {compare.SkipReason.INVALID_SEQUENCE: 4}
    assert results.total == 5
    assert comparator.state == compare.RunState.RANKED
    assert comparator.failure is None


@pytest.mark.parametrize("query", ["", "123 -", None])
def test_invalid_query(comparator, query):
    """
    An invalid query is reported before any candidate is accessed.
    """
    accessed = []

    def candidates():
        accessed.append(None)
        yield QUERY

    with pytest.raises(protcompare.InvalidQueryError):
        comparator.run(query, candidates())
    assert accessed == []
    assert comparator.state == compare.RunState.FAILED
    assert isinstance(comparator.failure, protcompare.InvalidQueryError)


def test_no_valid_alignments(comparator):
    with pytest.raises(protcompare.NoValidAlignmentsError) as exc_info:
        comparator.run(QUERY, ["", None, "12"])
    assert exc_info.value.skipped == {compare.SkipReason.INVALID_SEQUENCE: 3}
    assert comparator.state == compare.RunState.FAILED


def test_no_candidates(comparator):
    with pytest.raises(protcompare.NoValidAlignmentsError):
        comparator.run(QUERY, [])


def test_estimation_failure(monkeypatch, comparator):
    def align_local(*args, **kwargs):
        raise protcompare.AlignmentError("Test failure")

    statistics = importlib.import_module("protcompare.sequence.align.statistics")
    monkeypatch.setattr(statistics, "align_local", align_local)
    with pytest.raises(protcompare.NoValidAlignmentsError) as exc_info:
        comparator.run(QUERY, [QUERY, "MTSLNLL"])
    assert exc_info.value.skipped == {compare.SkipReason.ESTIMATION_FAILED: 2}


def test_alignment_failure(monkeypatch, comparator):
    comparator_module = importlib.import_module("protcompare.compare.comparator")
    original_align_local = comparator_module.align_local

    def align_local(query, subject, scheme, **kwargs):
        if len(subject) == 7:
            raise protcompare.AlignmentError("Test failure")
        return original_align_local(query, subject, scheme, **kwargs)

    monkeypatch.setattr(comparator_module, "align_local", align_local)
    results = comparator.run(QUERY, ["MTSLNLL", QUERY])
    assert results.indices() == [1]
    assert dict(results.skipped) == {compare.SkipReason.ALIGNMENT_FAILED: 1}


def test_compare_candidate(scheme):
    query = seq.ProteinSequence(QUERY)
    seed = np.random.SeedSequence(0)
    outcome = compare.compare_candidate(5, query, "MTSLNLL", scheme, 10, seed)
    assert not outcome.is_skipped
    assert outcome.record.index == 5
    outcome = compare.compare_candidate(6, query, "", scheme, 10, seed)
    assert outcome.is_skipped
    assert outcome.index == 6
    assert outcome.reason == compare.SkipReason.INVALID_SEQUENCE


def test_progress():
    calls = []
    comparator = compare.Comparator(
        sample_count=10,
        max_workers=1,
        seed=0,
        progress=lambda completed, total: calls.append((completed, total)),
    )
    comparator.run(QUERY, [QUERY, "", "MTSLNLL"])
    assert calls == [(1, 3), (2, 3), (3, 3)]


def test_cancel():
    def progress(completed, total):
        if total > 1:
            comparator.cancel()

    comparator = compare.Comparator(
        sample_count=10, max_workers=1, seed=0, progress=progress
    )
    with pytest.raises(protcompare.ComparisonCancelled):
        comparator.run(QUERY, [QUERY, QUERY, QUERY])
    assert comparator.state == compare.RunState.CANCELLED

    # The comparator can be reused after a cancelled run
    assert len(comparator.run(QUERY, [QUERY])) == 1
    assert comparator.state == compare.RunState.RANKED


def test_seed_reproducibility():
    candidates = ["MTSLNLLTDIPG", "GIRVGH", "MTSAALLTDIPGIRVGH"]
    results1 = compare.compare_sequences(
        QUERY, candidates, sample_count=20, max_workers=1, seed=7
    )
    results2 = compare.compare_sequences(
        QUERY, candidates, sample_count=20, max_workers=1, seed=7
    )
    assert list(results1) == list(results2)


def test_process_pool():
    """
    The result of a seeded run does not depend on the number of
    workers.
    """
    candidates = ["MTSLNLLTDIPG", "", "GIRVGH", "MTSAALLTDIPGIRVGH", QUERY]
    serial = compare.compare_sequences(
        QUERY, candidates, sample_count=10, max_workers=1, seed=3
    )
    parallel = compare.compare_sequences(
        QUERY, candidates, sample_count=10, max_workers=2, seed=3
    )
    assert list(parallel) == list(serial)
    assert dict(parallel.skipped) == dict(serial.skipped)


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(sample_count=5),
        dict(sample_count=0, min_sample_count=0),
        dict(sample_count=10.0),
        dict(max_workers=0),
        dict(seed=-1),
        dict(scheme="BLOSUM62"),
    ],
)
def test_invalid_parameters(kwargs):
    with pytest.raises(protcompare.ConfigurationError):
        compare.Comparator(**kwargs)


def test_lower_minimum_sample_count():
    comparator = compare.Comparator(sample_count=3, min_sample_count=1, max_workers=1)
    assert comparator.sample_count == 3
    assert comparator.state == compare.RunState.IDLE


def test_cancel_during_sampling(scheme):
    query = seq.ProteinSequence(QUERY)
    with pytest.raises(protcompare.ComparisonCancelled):
        compare.compare_candidate(0, query, QUERY, scheme, 10, should_stop=lambda: True)
