from typing import List

WORD = "word"
SPACE = "space"
PUNCT = "punct"


def char_class(ch: str) -> str:
    if ch.isalnum():
        return WORD
    if ch.isspace():
        return SPACE
    return PUNCT


def is_whitespace_segment(segment: str) -> bool:
    return bool(segment) and segment.isspace()


def pretokenize(text: str) -> List[str]:
    """
    Split text into maximal runs of word chars (letters/digits), whitespace,
    or everything else. Training and encoding both go through here so they
    see the same segment boundaries.

    >>> pretokenize("hi, you  2")
    ['hi', ',', ' ', 'you', '  ', '2']
    """
    segments = []
    start = 0
    cur = None
    for i, ch in enumerate(text):
        cls = char_class(ch)
        if cls != cur:
            if cur is not None:
                segments.append(text[start:i])
            start, cur = i, cls
    if cur is not None:
        segments.append(text[start:])
    return segments
