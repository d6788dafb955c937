import argparse
import logging
from pathlib import Path
from .bpe import BPETokenizer
from .config import TokenizerConfig

def read_corpus(paths):
    corpus = []
    for p in paths:
        corpus.extend(Path(p).read_text(encoding="utf-8").splitlines())
    return corpus

def main(argv=None):
    ap = argparse.ArgumentParser(description="Train a BPE tokenizer on one or more text files.")
    ap.add_argument("--text", required=True, action="append", help="UTF-8 text file, one corpus string per line (repeatable)")
    ap.add_argument("--merges", type=int, default=1000)
    ap.add_argument("--out", required=True, help="output directory for vocab.json / merges.txt")
    ap.add_argument("--add-eos", action="store_true", help="append <EOS> to every encoded text by default")
    ap.add_argument("--cache-size", type=int, default=None)
    ap.add_argument("--progress", action="store_true")
    ap.add_argument("--log-level", default="WARNING")
    args = ap.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    corpus = read_corpus(args.text)
    tok = BPETokenizer(config=TokenizerConfig(add_eos=args.add_eos, cache_size=args.cache_size))
    tok.train(corpus, max_merges=args.merges, progress=args.progress)
    out = tok.save(args.out)
    print(f"Saved tokenizer to {out} (vocab={tok.vocabulary_size()}, merges={len(tok.merges)})")
    return tok

if __name__ == "__main__":
    main()
