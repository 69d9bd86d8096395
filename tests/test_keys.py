import pytest

from conterm.keys import Char, Key, UnknownEscSeq


def test_char_equality_and_hash():
    assert Char("a") == Char("a")
    assert len({Char("a"), Char("a"), Char("b")}) == 2


def test_char_keeps_value():
    assert Char("é").char == "é"
    assert str(Char("x")) == "x"


@pytest.mark.parametrize("bad", ["", "ab", 5, None])
def test_char_rejects_non_single_char(bad):
    with pytest.raises(ValueError):
        Char(bad)


def test_unknown_esc_seq_normalises_to_tuple():
    seq = UnknownEscSeq(["[", "1"])
    assert seq.chars == ("[", "1")
    assert seq == UnknownEscSeq(("[", "1"))
    assert hash(seq) == hash(UnknownEscSeq(("[", "1")))


def test_unknown_esc_seq_may_be_empty():
    assert UnknownEscSeq(()).chars == ()


def test_unknown_esc_seq_rejects_multi_char_items():
    with pytest.raises(ValueError):
        UnknownEscSeq(["[", "12"])


def test_unknown_esc_seq_is_frozen():
    seq = UnknownEscSeq(["["])
    with pytest.raises(AttributeError):
        seq.chars = ("x",)
    assert seq.chars == ("[",)


def test_keys_and_payload_keys_do_not_compare_equal():
    keys = {Key.ENTER, Char("\n"), UnknownEscSeq(["["])}
    assert len(keys) == 3