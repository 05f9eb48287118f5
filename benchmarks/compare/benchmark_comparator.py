import numpy as np
import pytest
import protcompare.compare as compare
import protcompare.sequence as seq


@pytest.fixture(scope="module")
def candidates():
    N_CANDIDATES = 20
    LENGTH = 100

    rng = np.random.default_rng(0)
    alphabet = seq.ProteinSequence.canonical_alphabet
    return [
        alphabet.decode_multiple(rng.integers(len(alphabet), size=LENGTH))
        for _ in range(N_CANDIDATES)
    ]


@pytest.mark.parametrize("max_workers", [1, 2])
@pytest.mark.benchmark
def benchmark_compare_sequences(candidates, max_workers):
    N_SAMPLES = 10

    compare.compare_sequences(
        candidates[0],
        candidates,
        sample_count=N_SAMPLES,
        max_workers=max_workers,
        seed=0,
    )
