import torch
from torch.utils.data import Dataset

def encode_to_tensor(tokenizer, text, add_eos=False):
    """Encode one text as a (1, T) long tensor, the shape the model layer expects."""
    ids = tokenizer.encode(text, add_eos=add_eos)
    return torch.tensor(ids, dtype=torch.long).unsqueeze(0)

class TokenBlockDataset(Dataset):
    """
    Next-token (x, y) blocks over the concatenated encoding of `texts`,
    with <EOS> after every text. A corpus shorter than one block becomes a
    single block right-padded with <PAD>.
    """
    def __init__(self, texts, tokenizer, block_size=256):
        if block_size < 1:
            raise ValueError("block_size must be >= 1")
        ids = []
        for t in texts:
            ids.extend(tokenizer.encode(t, add_eos=True))
        if not ids:
            raise ValueError("encoded corpus is empty")
        self.block_size = block_size
        self.pad_id = tokenizer.special_token_id("pad")
        self.blocks = []
        for i in range(0, len(ids) - block_size, block_size):
            x = ids[i:i+block_size]; y = ids[i+1:i+block_size+1]
            self.blocks.append((x, y))
        if not self.blocks:
            x = ids[:-1]; y = ids[1:]
            x += [self.pad_id]*(block_size-len(x)); y += [self.pad_id]*(block_size-len(y))
            self.blocks.append((x, y))
    def __len__(self): return len(self.blocks)
    def __getitem__(self, idx):
        x, y = self.blocks[idx]
        return torch.tensor(x, dtype=torch.long), torch.tensor(y, dtype=torch.long)
