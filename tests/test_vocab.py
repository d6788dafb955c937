import pytest

from forgebpe.tokenizer.vocab import Vocabulary


def test_register_assigns_sequential_ids():
    v = Vocabulary()
    assert v.register("a") == 0
    assert v.register("b") == 1
    assert v.register("a") == 0
    assert v.size() == 2
    assert list(v) == ["a", "b"]


def test_lookups():
    v = Vocabulary()
    v.register("x")
    assert v.lookup_id("x") == 0
    assert v.lookup_id("y") is None
    assert v.lookup_symbol(0) == "x"
    assert v.lookup_symbol(1) is None
    assert v.lookup_symbol(-1) is None
    assert "x" in v and "y" not in v


def test_register_specials_records_ids():
    v = Vocabulary()
    v.register("a")
    sp = v.register_specials("<UNK>", "<PAD>", "<EOS>")
    assert (sp.unk_id, sp.pad_id, sp.eos_id) == (1, 2, 3)
    assert sp.id_for("UNK") == 1
    assert sp.id_for("eos") == 3
    with pytest.raises(KeyError):
        sp.id_for("bos")


def test_from_dict_roundtrip():
    v = Vocabulary()
    for s in ["a", "b", "ab"]:
        v.register(s)
    w = Vocabulary.from_dict(v.to_dict())
    assert list(w) == ["a", "b", "ab"]


@pytest.mark.parametrize("mapping", [
    {"a": 0, "b": 2},
    {"a": 0, "b": 0},
    {"a": "0"},
    {"a": 1},
])
def test_from_dict_rejects_bad_ids(mapping):
    with pytest.raises(ValueError):
        Vocabulary.from_dict(mapping)


def test_register_specials_rejects_existing_symbol():
    v = Vocabulary()
    v.register("a")
    with pytest.raises(ValueError, match="already registered"):
        v.register_specials("<UNK>", "a", "<EOS>")
    assert v.size() == 1


@pytest.mark.parametrize("name", ["end-of-sequence", "End_Of_Sequence", "EOS"])
def test_end_of_sequence_aliases(name):
    v = Vocabulary()
    sp = v.register_specials("<UNK>", "<PAD>", "<EOS>")
    assert sp.id_for(name) == sp.eos_id
    assert sp.id_for("unknown") == sp.unk_id
    assert sp.id_for("padding") == sp.pad_id
