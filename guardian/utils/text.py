"""String measures shared by feature extraction."""

from __future__ import annotations

import math
from collections import Counter
from typing import Mapping

from rapidfuzz.distance import Levenshtein


def shannon_entropy(text: str) -> float:
    """Shannon entropy (bits per character) of the unigram distribution."""
    if not text:
        return 0.0
    length = len(text)
    entropy = 0.0
    for count in Counter(text).values():
        p = count / length
        entropy -= p * math.log2(p)
    return entropy


def similarity(a: str, b: str) -> float:
    """1 - Levenshtein distance / max(len(a), len(b)); 1.0 for two empty strings."""
    return Levenshtein.normalized_similarity(a, b)


def homoglyph_variants(text: str, table: Mapping[str, tuple[str, ...]]) -> list[str]:
    """Lower-case ``text`` and replace look-alike characters with letters.

    A substitute with several candidate letters (``1`` -> ``l``/``i``) yields one
    variant per candidate, applied uniformly across the string. The first
    variant always uses every substitute's first candidate.
    """
    lowered = text.lower()
    present = {ch: table[ch] for ch in set(lowered) if ch in table}
    if not present:
        return [lowered]

    width = max(len(choices) for choices in present.values())
    variants: list[str] = []
    for index in range(width):
        mapped = "".join(
            present[ch][min(index, len(present[ch]) - 1)] if ch in present else ch
            for ch in lowered
        )
        if mapped not in variants:
            variants.append(mapped)
    return variants
