"""Shared text utilities for the link analysis engine."""

from __future__ import annotations

import math
import re
from typing import List, Sequence

_NON_WORD_RE = re.compile(r"[^\w\s-]", re.ASCII)

MAX_TOKEN_LENGTH = 20


def normalize(text: str) -> str:
    """Lower-case ``text`` and blank out everything except words, spaces and hyphens."""

    return _NON_WORD_RE.sub(" ", text.lower())


def tokenize(text: str) -> List[str]:
    """Return normalized tokens from the provided text."""

    return normalize(text).split()


def is_url_like(token: str) -> bool:
    """Return True for tokens that look like URLs, domains or slug fragments."""

    if "." in token or "/" in token or "www" in token:
        return True
    if len(token) > MAX_TOKEN_LENGTH:
        return True
    return token.count("-") > 1


def cosine_similarity(vector_a: Sequence[float], vector_b: Sequence[float]) -> float:
    """Cosine similarity between two dense vectors of equal length.

    Returns ``0.0`` when either vector has zero magnitude, where the ratio
    would otherwise be undefined.
    """

    if len(vector_a) != len(vector_b):
        raise ValueError(
            f"Cannot compare vectors of different lengths ({len(vector_a)} != {len(vector_b)})"
        )
    dot = sum(a * b for a, b in zip(vector_a, vector_b))
    norm_a = math.sqrt(sum(value * value for value in vector_a))
    norm_b = math.sqrt(sum(value * value for value in vector_b))
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0
    return dot / (norm_a * norm_b)
