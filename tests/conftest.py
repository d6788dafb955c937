import pytest

from forgebpe.tokenizer import BPETokenizer

CORPUS = ["low", "lower", "newest", "widest"]


@pytest.fixture
def corpus():
    return list(CORPUS)


@pytest.fixture
def tok(corpus):
    t = BPETokenizer()
    t.train(corpus, max_merges=2)
    return t
