# This source code is part of the Seqphylo package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

import itertools
import pytest
import seqphylo.sequence as seq


test_cases = {
    "A" : [0],
    "D" : [3],
    "ABC" : [0,1,2,],
    "ABAFF" : [0,1,0,5,5]
}  # fmt: skip


@pytest.fixture
def alphabet_symbols():
    return "ABCDEF"


@pytest.mark.parametrize("symbols, exp_code", test_cases.items())
def test_encoding(alphabet_symbols, symbols, exp_code):
    alph = seq.LetterAlphabet(alphabet_symbols)
    if len(symbols) == 1:
        assert alph.encode(symbols[0]) == exp_code[0]
    else:
        assert list(alph.encode_multiple(symbols)) == list(exp_code)


@pytest.mark.parametrize("is_single_val", [False, True])
def test_error(alphabet_symbols, is_single_val):
    alph = seq.LetterAlphabet(alphabet_symbols)
    if is_single_val:
        with pytest.raises(seq.AlphabetError):
            alph.encode("G")
    else:
        with pytest.raises(seq.AlphabetError):
            alph.encode_multiple("ABCG")


@pytest.mark.parametrize(
    "symbols",
    [
        "",
        "AAB",
        ["A", "BC"],
        "A B",
    ],
)
def test_invalid_symbols(symbols):
    """
    Test whether empty alphabets, duplicate, multi-letter and
    whitespace symbols are rejected.
    """
    with pytest.raises(ValueError):
        seq.LetterAlphabet(symbols)


def test_from_sequences():
    """
    Check whether the alphabet created from sequences contains each
    letter exactly once in sorted order.
    """
    alph = seq.LetterAlphabet.from_sequences("TTAG", "CAT", "")
    assert alph.get_symbols() == ("A", "C", "G", "T")
    assert len(alph) == 4
    assert list(alph) == ["A", "C", "G", "T"]


@pytest.mark.parametrize(
    "symbol, exp_contained",
    [("A", True), ("F", True), ("G", False), ("AB", False), (1, False)],
)
def test_contains(alphabet_symbols, symbol, exp_contained):
    alph = seq.LetterAlphabet(alphabet_symbols)
    assert (symbol in alph) == exp_contained


@pytest.mark.parametrize(
    "symbols1, symbols2",
    itertools.product(["ABC", "ABD"], ["ABC", "ABD"]),
)
def test_equality(symbols1, symbols2):
    alph1 = seq.LetterAlphabet(symbols1)
    alph2 = seq.LetterAlphabet(symbols2)
    assert (alph1 == alph2) == (symbols1 == symbols2)
    if symbols1 == symbols2:
        assert hash(alph1) == hash(alph2)
