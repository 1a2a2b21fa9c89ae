"""Token-set Jaccard similarity: the always-available comparison baseline."""

from __future__ import annotations

import re

_TOKEN_SPLIT = re.compile(r"\W+")


def tokenize(text: str) -> set[str]:
    """Case-folded word tokens of ``text`` as a set."""
    return {t for t in _TOKEN_SPLIT.split(text.casefold()) if t}


def similarity(a: str, b: str) -> float:
    """Jaccard overlap of the token sets of ``a`` and ``b``, in [0, 100]."""
    tokens_a = tokenize(a)
    tokens_b = tokenize(b)
    union = len(tokens_a | tokens_b) or 1
    return len(tokens_a & tokens_b) / union * 100
