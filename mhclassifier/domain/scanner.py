# mhclassifier/domain/scanner.py
from __future__ import annotations

from typing import Dict, Iterable, Mapping

from mhclassifier.domain.models import (
    POSITIVE_INDICATORS,
    Category,
    IndicatorCounts,
    KeywordSet,
)

NEGATOR = "tidak"


def _has_negator(text_lower: str) -> bool:
    return f"{NEGATOR} " in text_lower or f"{NEGATOR}nya" in text_lower


def _count_negations(text_lower: str, keywords: Iterable[str]) -> int:
    """
    Count `tidak <word>` bigrams where <word> is itself one of `keywords`.

    Only the single negator directly followed by a single-word keyword is
    handled. "tidak terlalu cemas" is not negated, and punctuation stuck to
    the word ("cemas.") defeats the match.
    """
    keyword_set = set(keywords)
    words = text_lower.split()
    n = 0
    for i in range(len(words) - 1):
        if words[i] == NEGATOR and words[i + 1] in keyword_set:
            n += 1
    return n


def scan(
    text: str,
    keyword_sets: Mapping[Category, KeywordSet],
    positive_indicators: Iterable[str] = POSITIVE_INDICATORS,
) -> IndicatorCounts:
    """
    Count keyword indicators per category.

    - text is lower-cased once; keywords match as plain substrings
      ("mood swing", "bunuh diri" included), one count per distinct keyword
    - categories missing from `keyword_sets` still get a zero entry
    - never raises; empty text gives all zeros
    """
    text = text or ""
    text_lower = text.lower()
    negation_possible = _has_negator(text_lower)

    counts: Dict[Category, int] = {c: 0 for c in Category}
    negations: Dict[Category, int] = {c: 0 for c in Category}

    for category, kset in keyword_sets.items():
        counts[category] = sum(1 for kw in kset.keywords if kw and kw in text_lower)
        if negation_possible:
            negations[category] = _count_negations(text_lower, kset.keywords)

    return IndicatorCounts(
        counts=counts,
        negations=negations,
        total_emotion_words=sum(counts.values()),
        text_length=len(text),
        question_marks=text.count("?"),
        exclamation_marks=text.count("!"),
        has_positive_indicators=any(w in text_lower for w in positive_indicators),
    )
