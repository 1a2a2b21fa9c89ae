"""Vector math for embedding-based comparison."""

from __future__ import annotations

import math
from typing import Sequence


def cosine(u: Sequence[float], v: Sequence[float]) -> float:
    """Cosine similarity of two equal-length vectors.

    Raises:
        ValueError: On length mismatch or a zero-magnitude vector. Callers
            treat that as an embedding failure.
    """
    if len(u) != len(v):
        raise ValueError(f"Vector length mismatch: {len(u)} != {len(v)}")
    mag_u = math.sqrt(sum(x * x for x in u))
    mag_v = math.sqrt(sum(x * x for x in v))
    if mag_u == 0 or mag_v == 0:
        raise ValueError("Cosine undefined for zero-magnitude vector")
    dot = sum(a * b for a, b in zip(u, v))
    return dot / (mag_u * mag_v)
