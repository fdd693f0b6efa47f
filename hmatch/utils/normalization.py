"""Text normalization used by string-similarity scorers."""

from __future__ import annotations
import re
import unicodedata
from functools import lru_cache

_bracket_pattern = re.compile(r"[\[\](){}]")
_punct_pattern = re.compile(r"[\s\-_.,;:/]+")
_non_word_pattern = re.compile(r"[^a-z0-9 ]+")

_stopwords = {"the", "a", "an", "and", "or", "of", "in", "on", "at", "to", "for", "with", "from"}


@lru_cache(maxsize=8192)
def normalize_token(s: str, sort_tokens: bool = True) -> str:
    s = s.lower().strip()
    # Unicode normalization (handle accents, diacritics)
    s = unicodedata.normalize("NFKD", s)
    s = "".join(c for c in s if not unicodedata.combining(c))
    s = _bracket_pattern.sub(" ", s)
    # Collapse punctuation and separators to spaces
    s = _punct_pattern.sub(" ", s)
    s = _non_word_pattern.sub("", s)
    tokens = [t for t in s.split() if t and t not in _stopwords]
    # Sort tokens so word order does not matter ("Beatles, The" vs "The Beatles")
    if sort_tokens:
        tokens.sort()
    return " ".join(tokens)


__all__ = ["normalize_token"]
