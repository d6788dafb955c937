import logging
import os
from contextlib import asynccontextmanager
from typing import Dict, List
from fastapi import FastAPI
from pydantic import BaseModel
from ..tokenizer.bpe import BPETokenizer

logger = logging.getLogger(__name__)

TOKENIZER_DIR_ENV = "FORGEBPE_TOKENIZER_DIR"

class EncodeIn(BaseModel):
    text: str
    add_eos: bool = False

class EncodeOut(BaseModel):
    ids: List[int]
    tokens: List[str]

class DecodeIn(BaseModel):
    ids: List[int]
    skip_special_tokens: bool = False

class DecodeOut(BaseModel):
    text: str

class InfoOut(BaseModel):
    vocab_size: int
    num_merges: int
    special_tokens: Dict[str, int]

def create_app(tokenizer=None):
    @asynccontextmanager
    async def lifespan(app):
        # a fresh instance is swapped in; a loaded tokenizer is never mutated
        if app.state.tok is None:
            path = os.environ.get(TOKENIZER_DIR_ENV, "data/tokenizer")
            app.state.tok = BPETokenizer.load(path)
            logger.info("serving tokenizer from %s", path)
        yield

    app = FastAPI(title="BPE Tokenizer Server", lifespan=lifespan)
    app.state.tok = tokenizer

    @app.post("/encode", response_model=EncodeOut)
    def encode(body: EncodeIn):
        tok = app.state.tok
        ids = tok.encode(body.text, add_eos=body.add_eos)
        return {"ids": ids, "tokens": [tok.vocab.id_to_token[i] for i in ids]}

    @app.post("/decode", response_model=DecodeOut)
    def decode(body: DecodeIn):
        return {"text": app.state.tok.decode(body.ids, skip_special_tokens=body.skip_special_tokens)}

    @app.get("/info", response_model=InfoOut)
    def info():
        tok = app.state.tok
        sp = tok.specials
        return {
            "vocab_size": tok.vocabulary_size(),
            "num_merges": len(tok.merges),
            "special_tokens": {sp.unk: sp.unk_id, sp.pad: sp.pad_id, sp.eos: sp.eos_id},
        }

    return app

app = create_app()
