import pytest

from forgebpe.tokenizer.merges import MERGES_HEADER, MergeTable


def test_ranks_follow_learned_order():
    t = MergeTable([("e", "s"), ("es", "t")])
    assert t.rank("e", "s") == 1
    assert t.rank("es", "t") == 2
    assert t.rank("s", "t") is None
    assert [r.merged for r in t] == ["es", "est"]


def test_duplicate_rule_rejected():
    t = MergeTable([("a", "b")])
    with pytest.raises(ValueError):
        t.add("a", "b")


def test_lines_roundtrip():
    t = MergeTable([("e", "s"), ("es", "t")])
    lines = t.to_lines()
    assert lines[0] == MERGES_HEADER
    assert MergeTable.from_lines(lines) == t


def test_from_lines_without_header_and_blank_lines():
    t = MergeTable.from_lines(["a b", "", "ab c"])
    assert t.pairs == [("a", "b"), ("ab", "c")]
    assert t.ranks == {("a", "b"): 1, ("ab", "c"): 2}


@pytest.mark.parametrize("line", ["abc", "a b c", "a  b"])
def test_from_lines_malformed(line):
    with pytest.raises(ValueError, match="line 2"):
        MergeTable.from_lines([MERGES_HEADER, line])
