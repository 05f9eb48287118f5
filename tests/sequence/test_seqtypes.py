# This source code is part of the ProtCompare package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

import pickle
import numpy as np
import pytest
import protcompare
import protcompare.sequence as seq


def test_protein_alphabet():
    alphabet = seq.ProteinSequence.alphabet
    assert len(alphabet) == 24
    assert "".join(alphabet.get_symbols()) == "ACDEFGHIKLMNPQRSTVWYBZX*"
    assert alphabet.extends(seq.ProteinSequence.canonical_alphabet)
    assert len(seq.ProteinSequence.canonical_alphabet) == 20


def test_construction():
    protein = seq.ProteinSequence("mtSLnll*")
    assert str(protein) == "MTSLNLL*"
    assert len(protein) == 8
    assert protein.get_alphabet() == seq.ProteinSequence.alphabet


def test_code_is_read_only():
    protein = seq.ProteinSequence("MTSL")
    with pytest.raises(ValueError):
        protein.code[0] = 0


def test_invalid_letter():
    with pytest.raises(seq.AlphabetError):
        seq.ProteinSequence("MTS1")


def test_empty_sequence():
    with pytest.raises(protcompare.InvalidSequenceError):
        seq.ProteinSequence("")


@pytest.mark.parametrize(
    "raw, exp_normalized",
    [
        ("MTSLNLL", "MTSLNLL"),
        ("mtslnll", "MTSLNLL"),
        ("  MTS LNL\nL\t", "MTSLNLL"),
        ("1 mtsl 61 nll", "MTSLNLL"),
        ("MTS-LN.LL", "MTSLNLL"),
        ("mxb*", "MXB*"),
        ("123 -.", ""),
        ("", ""),
        # Upper case forms of non-ASCII letters are not amino acids
        ("\u00df\u0131\u017f", ""),
        ("m\u00dft\uff33l", "MTL"),
    ],
)
def test_normalize(raw, exp_normalized):
    assert seq.ProteinSequence.normalize(raw) == exp_normalized


def test_normalize_idempotent():
    once = seq.ProteinSequence.normalize(" ac-DE fg\n*1")
    assert seq.ProteinSequence.normalize(once) == once


@pytest.mark.parametrize("raw", [None, np.nan, float("nan"), "", " \n", "1234", 42])
def test_from_raw_invalid(raw):
    with pytest.raises(protcompare.InvalidSequenceError):
        seq.ProteinSequence.from_raw(raw)


def test_from_raw():
    assert seq.ProteinSequence.from_raw("> 1 mtsl nll") == seq.ProteinSequence(
        "MTSLNLL"
    )


def test_from_code():
    protein = seq.ProteinSequence.from_code(np.array([10, 16, 15, 9]))
    assert str(protein) == "MTSL"
    with pytest.raises(seq.AlphabetError):
        seq.ProteinSequence.from_code(np.array([0, 24]))


def test_equality_and_hash():
    assert seq.ProteinSequence("MTSL") == seq.ProteinSequence("mtsl")
    assert seq.ProteinSequence("MTSL") != seq.ProteinSequence("MTSLL")
    assert seq.ProteinSequence("MTSL") != "MTSL"
    assert len({seq.ProteinSequence("MTSL"), seq.ProteinSequence("MTSL")}) == 1


def test_pickle():
    protein = seq.ProteinSequence("MTSLNLLTDIPGIRVGH")
    assert pickle.loads(pickle.dumps(protein)) == protein


def test_non_ascii_only():
    with pytest.raises(protcompare.InvalidSequenceError):
        seq.ProteinSequence.from_raw("ßıſ")
