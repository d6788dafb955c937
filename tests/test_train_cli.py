from forgebpe.tokenizer import BPETokenizer
from forgebpe.tokenizer.train_bpe import main


def test_cli_trains_and_saves(tmp_path, capsys, corpus):
    text = tmp_path / "corpus.txt"
    text.write_text("\n".join(corpus) + "\n", encoding="utf-8")
    out = tmp_path / "tok"
    main(["--text", str(text), "--merges", "2", "--out", str(out)])

    assert "Saved tokenizer" in capsys.readouterr().out
    loaded = BPETokenizer.load(out)
    assert loaded.merges.pairs == [("e", "s"), ("es", "t")]
    assert loaded.config.add_eos is False


def test_cli_multiple_files(tmp_path):
    a = tmp_path / "a.txt"
    b = tmp_path / "b.txt"
    a.write_text("ab ab\n", encoding="utf-8")
    b.write_text("ab cd\n", encoding="utf-8")
    tok = main(["--text", str(a), "--text", str(b), "--merges", "1", "--out", str(tmp_path / "tok"), "--add-eos"])
    assert tok.merges.pairs == [("a", "b")]
    assert tok.config.add_eos is True
