"""Keyword and phrase extraction for article text and URL slugs."""

from __future__ import annotations

import re
from collections import Counter
from typing import List, Sequence

from .text import is_url_like, tokenize
from .types import KeywordIndex

# Common SEO stop words plus generic verbs and nouns that only add noise.
STOP_WORDS = frozenset(
    {
        "a", "an", "and", "are", "as", "at", "be", "by", "for", "from", "has", "he",
        "in", "is", "it", "its", "of", "on", "that", "the", "to", "was", "were",
        "will", "with", "you", "your", "this", "they", "but", "have", "had", "what",
        "when", "where", "who", "which", "why", "how", "all", "each", "every", "both",
        "few", "more", "most", "other", "some", "such", "no", "nor", "not", "only",
        "own", "same", "so", "than", "too", "very", "can", "just", "should", "now",
        "also", "into", "over", "after", "before", "between", "under", "again",
        "further", "then", "once", "here", "there", "about", "above", "below",
        "use", "used", "using", "get", "got", "getting", "make", "made", "making",
        "way", "ways", "thing", "things", "take", "took", "taking", "look", "looks",
        "want", "wants", "need", "needs", "give", "gives", "find", "finds", "think",
        "know", "knows", "see", "sees", "feel", "seems", "call", "called", "work",
        "point", "fact", "good", "better", "best", "great", "new", "old", "big", "small",
        "well", "really", "even", "actually", "quite", "still",
        "many", "much", "any", "within",
    }
)

MIN_UNIGRAM_LENGTH = 4
MIN_NGRAM_TOKEN_LENGTH = 2
MIN_SLUG_TOKEN_LENGTH = 3

_SCHEME_HOST_RE = re.compile(r"^https?://[^/]+", re.IGNORECASE)
_EXTENSION_RE = re.compile(r"\.[a-z0-9]+$", re.IGNORECASE)
_SLUG_SPLIT_RE = re.compile(r"[-_]+")


def is_valid_ngram(words: Sequence[str]) -> bool:
    """Return True when the run of words can stand as a phrase keyword."""

    if words[0] in STOP_WORDS or words[-1] in STOP_WORDS:
        return False
    if any(len(word) < MIN_NGRAM_TOKEN_LENGTH for word in words):
        return False
    return not any(is_url_like(word) for word in words)


def extract_keywords(text: str) -> KeywordIndex:
    """Count unigrams, bigrams and trigrams found in ``text``.

    Unigrams must be longer than three characters, not a stop word and not
    URL-like. Bigrams and trigrams are contiguous runs whose boundary words
    are not stop words; they are counted independently of their unigrams.
    """

    tokens = tokenize(text)
    counts: Counter[str] = Counter()

    for word in tokens:
        if len(word) >= MIN_UNIGRAM_LENGTH and word not in STOP_WORDS and not is_url_like(word):
            counts[word] += 1

    for size in (2, 3):
        for start in range(len(tokens) - size + 1):
            gram = tokens[start:start + size]
            if is_valid_ngram(gram):
                counts[" ".join(gram)] += 1

    return dict(counts)


def extract_slug(url: str) -> str:
    """Return the final path segment of ``url`` without its file extension."""

    path = _SCHEME_HOST_RE.sub("", url.strip())
    path = path.split("?")[0].split("#")[0]
    if path.endswith("/"):
        path = path[:-1]
    if not path:
        return ""
    segment = path[path.rfind("/") + 1:]
    return _EXTENSION_RE.sub("", segment).lower()


def extract_slug_keywords(url: str) -> List[str]:
    """Return the ordered keyword tokens of the URL's slug."""

    slug = extract_slug(url)
    if not slug:
        return []
    return [
        word
        for word in _SLUG_SPLIT_RE.split(slug)
        if len(word) >= MIN_SLUG_TOKEN_LENGTH and word not in STOP_WORDS and not is_url_like(word)
    ]
