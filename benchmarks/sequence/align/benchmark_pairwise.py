import pickle
import numpy as np
import pytest
import protcompare.sequence as seq
import protcompare.sequence.align as align


def random_sequence(rng, length):
    return seq.ProteinSequence.from_code(
        rng.integers(len(seq.ProteinSequence.canonical_alphabet), size=length)
    )


@pytest.fixture(scope="module")
def scheme():
    return align.ScoringScheme.default()


@pytest.fixture(scope="module")
def sequences():
    LENGTH = 300

    rng = np.random.default_rng(0)
    return random_sequence(rng, LENGTH), random_sequence(rng, LENGTH)


@pytest.mark.parametrize("score_only", [False, True])
@pytest.mark.benchmark
def benchmark_align_local(sequences, scheme, score_only):
    query, subject = sequences
    align.align_local(query, subject, scheme, score_only=score_only)


@pytest.mark.benchmark
def benchmark_sample_scores(sequences, scheme):
    N_SAMPLES = 10

    query, subject = sequences
    estimator = align.SignificanceEstimator(scheme, rng=0)
    estimator.sample_scores(query, len(subject), N_SAMPLES)


@pytest.mark.benchmark
def benchmark_pickle_and_unpickle(scheme):
    pickle.loads(pickle.dumps(scheme))
