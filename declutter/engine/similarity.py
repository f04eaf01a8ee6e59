"""Dice's coefficient over character bigrams.

Bigrams are taken over Unicode code points, which is what indexing a Python
``str`` yields. Astral characters (most emoji) therefore count as one
character, not as a surrogate pair.
"""

from __future__ import annotations

import re
from collections import Counter

_WHITESPACE = re.compile(r"\s+")


def strip_whitespace(text: object) -> str:
    """Remove every whitespace run; non-string input becomes ``""``."""
    if not isinstance(text, str):
        return ""
    return _WHITESPACE.sub("", text)


def bigrams(text: str) -> Counter[str]:
    """Multiset of the overlapping two-character substrings of ``text``."""
    return Counter(text[i : i + 2] for i in range(len(text) - 1))


def similarity(first: object, second: object) -> float:
    """Return how alike two messages are, in ``[0, 1]``.

    Whitespace is never significant. Repeated bigrams only match as many
    times as they occur in both strings.
    """
    a = strip_whitespace(first)
    b = strip_whitespace(second)

    if not a and not b:
        return 1.0
    if not a or not b:
        return 0.0
    if a == b:
        return 1.0
    if len(a) == 1 and len(b) == 1:
        return 1.0 if a == b else 0.0
    if len(a) < 2 or len(b) < 2:
        return 0.0

    remaining = bigrams(a)
    intersection = 0
    for i in range(len(b) - 1):
        bigram = b[i : i + 2]
        if remaining[bigram] > 0:
            remaining[bigram] -= 1
            intersection += 1

    return (2.0 * intersection) / (len(a) + len(b) - 2)
