# mhclassifier/domain/synthesizer.py
"""Score synthesis: turn upstream scores or indicator counts into ranked predictions.

Two entry points, same output shape:

- synthesize(...)          : relabel / reweight / renormalize hosted model scores
- synthesize_fallback(...) : build scores locally from IndicatorCounts

Both are pure functions. Output lists are sorted by probability (descending),
ties broken by Category declaration order, and probabilities sum to 1 whenever
at least one score is positive.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from mhclassifier.domain.models import (
    CATEGORY_ORDER,
    LABEL_MAP,
    POSITIVE_INDICATORS,
    Category,
    CategoryLike,
    HeuristicConfig,
    IndicatorCounts,
    KeywordProfile,
    KeywordSet,
    Prediction,
    SensitivityConfig,
)
from mhclassifier.domain.scanner import scan

MIN_RAW_SCORE = 0.01
NORMAL_BOOST_CAP = 0.95
NORMAL_BOOST_FACTOR = 0.5
NEGATION_DISCOUNT = 0.5

HIGH_CONFIDENCE = 0.7
MEDIUM_CONFIDENCE = 0.4

# Emergency distribution, used only when the service itself fails.
DEFAULT_DISTRIBUTION: Tuple[Tuple[Category, float], ...] = (
    (Category.NORMAL, 0.60),
    (Category.ANXIETY, 0.15),
    (Category.DEPRESSION, 0.15),
    (Category.BIPOLAR, 0.05),
    (Category.SUICIDAL, 0.05),
)


@dataclass(frozen=True)
class UpstreamScore:
    """One `{label, score}` entry returned by the hosted model."""

    raw_label: str
    score: float


# ---------------------------
# helpers
# ---------------------------

def to_percentage(probability: float) -> float:
    """0..1 -> 0..100 with 2 decimals, rounding half up."""
    return math.floor(probability * 10000 + 0.5) / 100


def confidence_tier(probability: float, sensitivity: Optional[SensitivityConfig] = None) -> str:
    medium = MEDIUM_CONFIDENCE
    if sensitivity is not None:
        medium = min(max(MEDIUM_CONFIDENCE, sensitivity.confidence), HIGH_CONFIDENCE)

    if probability > HIGH_CONFIDENCE:
        return "high"
    if probability > medium:
        return "medium"
    return "low"


def _order_index(category: CategoryLike) -> int:
    if isinstance(category, Category):
        return CATEGORY_ORDER.index(category)
    return len(CATEGORY_ORDER)


def _boost_normal(score: float, sensitivity: SensitivityConfig) -> float:
    boosted = min(NORMAL_BOOST_CAP, score + sensitivity.normal * NORMAL_BOOST_FACTOR)
    return max(score, boosted)


def _rank(
    entries: Sequence[Tuple[CategoryLike, float, Optional[str]]],
    sensitivity: Optional[SensitivityConfig],
    is_fallback: bool,
) -> List[Prediction]:
    """Normalize raw scores, build Predictions and sort them."""
    total = sum(score for _, score, _ in entries)

    predictions: List[Prediction] = []
    for category, raw_score, original_label in entries:
        probability = raw_score / total if total > 0 else raw_score
        predictions.append(
            Prediction(
                category=category,
                raw_score=raw_score,
                probability=probability,
                percentage=to_percentage(probability),
                confidence_tier=confidence_tier(probability, sensitivity),
                original_label=original_label,
                is_fallback=is_fallback,
            )
        )

    # stable sort: unknown labels keep their input order after the enum members
    predictions.sort(key=lambda p: (-p.probability, _order_index(p.category)))
    return predictions


def _read_upstream_item(item: Any) -> Tuple[str, float]:
    if isinstance(item, UpstreamScore):
        label, score = item.raw_label, item.score
    elif isinstance(item, Mapping):
        label, score = item.get("label"), item.get("score")
    else:
        label, score = getattr(item, "label", None), getattr(item, "score", None)

    try:
        value = float(score) if score is not None else 0.0
    except (TypeError, ValueError):
        value = 0.0
    if not math.isfinite(value) or value < 0:
        value = 0.0
    return str(label or ""), value


# ---------------------------
# Mode A: upstream scores
# ---------------------------

def synthesize(
    upstream_scores: Iterable[Any],
    label_map: Mapping[str, Category] = LABEL_MAP,
    sensitivity: Optional[SensitivityConfig] = None,
    text: str = "",
) -> List[Prediction]:
    """
    Relabel and renormalize hosted model scores.

    - labels missing from `label_map` pass through as plain strings
    - with `sensitivity` and a positive cue in `text`, Normal gains
      `sensitivity.normal * 0.5` (capped at 0.95, never lowered)
    - scores are divided by their total; a zero total leaves them as-is
    - an empty upstream list gives an empty result
    """
    entries: List[Tuple[CategoryLike, float, Optional[str]]] = []
    for item in upstream_scores or []:
        raw_label, score = _read_upstream_item(item)
        entries.append((label_map.get(raw_label, raw_label), score, raw_label))

    if sensitivity is not None and entries:
        text_lower = (text or "").lower()
        if any(w in text_lower for w in POSITIVE_INDICATORS):
            entries = [
                (cat, _boost_normal(score, sensitivity) if cat == Category.NORMAL else score, label)
                for cat, score, label in entries
            ]

    return _rank(entries, sensitivity, is_fallback=False)


# ---------------------------
# Mode B: local fallback
# ---------------------------

def raw_fallback_scores(
    counts: IndicatorCounts,
    keyword_sets: Mapping[Category, KeywordSet],
    sensitivity: Optional[SensitivityConfig] = None,
    heuristics: Optional[HeuristicConfig] = None,
) -> Dict[Category, float]:
    """Unnormalized fallback scores for every Category (each >= MIN_RAW_SCORE)."""
    h = heuristics or HeuristicConfig()

    raw: Dict[Category, float] = {}
    for category in CATEGORY_ORDER:
        kset = keyword_sets.get(category)
        score = 0.0
        if kset is not None:
            score = (
                kset.base_score
                + counts.count(category) * kset.weight
                - counts.negated(category) * kset.weight * NEGATION_DISCOUNT
            )
        raw[category] = max(MIN_RAW_SCORE, score)

    # text-shape nudges
    if counts.text_length > h.long_text_threshold:
        raw[Category.DEPRESSION] += h.long_text_increment
        raw[Category.ANXIETY] += h.long_text_increment
    if counts.question_marks > h.question_mark_threshold:
        raw[Category.ANXIETY] += h.question_mark_increment
    if counts.exclamation_marks > h.exclamation_threshold:
        raw[Category.BIPOLAR] += h.exclamation_increment

    if sensitivity is not None and counts.has_positive_indicators:
        raw[Category.NORMAL] = _boost_normal(raw[Category.NORMAL], sensitivity)

    return raw


def synthesize_fallback(
    counts: IndicatorCounts,
    keyword_sets: Mapping[Category, KeywordSet],
    sensitivity: Optional[SensitivityConfig] = None,
    heuristics: Optional[HeuristicConfig] = None,
) -> List[Prediction]:
    """
    Local heuristic predictions from indicator counts.

    Always returns one Prediction per Category. The 0.01 floor on every raw
    score keeps the normalization denominator positive, so this never fails,
    even with no keyword sets at all.
    """
    raw = raw_fallback_scores(counts, keyword_sets, sensitivity, heuristics)
    entries = [(category, raw[category], None) for category in CATEGORY_ORDER]
    return _rank(entries, sensitivity, is_fallback=True)


def classify_fallback(
    text: str,
    profile: KeywordProfile,
    sensitivity: Optional[SensitivityConfig] = None,
) -> List[Prediction]:
    """scan() + synthesize_fallback() with one keyword profile."""
    counts = scan(text, profile.keyword_sets)
    return synthesize_fallback(counts, profile.keyword_sets, sensitivity, profile.heuristics)


def default_predictions() -> List[Prediction]:
    """The fixed emergency distribution as Predictions."""
    return [
        Prediction(
            category=category,
            raw_score=probability,
            probability=probability,
            percentage=to_percentage(probability),
            confidence_tier=confidence_tier(probability),
            is_fallback=True,
        )
        for category, probability in DEFAULT_DISTRIBUTION
    ]
