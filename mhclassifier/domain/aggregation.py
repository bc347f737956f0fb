from __future__ import annotations
from typing import Any, Dict, List, Sequence

from mhclassifier.domain.models import Category, IndicatorCounts, Prediction

NEGATIVE_CUES = ("tidak", "susah", "sulit")


def build_text_analysis(counts: IndicatorCounts, text: str = "") -> Dict[str, Any]:
    """Indicator summary returned next to the predictions.

    Keys follow the `<category>_indicators` shape the front-end reads,
    e.g. {"normal_indicators": 2, ..., "total_emotion_words": 2}.
    """
    analysis: Dict[str, Any] = {}
    for category in Category:
        analysis[f"{category.value.lower()}_indicators"] = counts.count(category)
    analysis["total_emotion_words"] = counts.total_emotion_words
    analysis["negated_indicators"] = sum(counts.negated(c) for c in Category)
    analysis["text_length"] = counts.text_length
    analysis["has_positive_words"] = counts.has_positive_indicators

    text_lower = (text or "").lower()
    analysis["has_negative_words"] = any(cue in text_lower for cue in NEGATIVE_CUES)
    return analysis


def predictions_to_dicts(predictions: Sequence[Prediction]) -> List[Dict[str, Any]]:
    return [p.to_dict() for p in predictions]


def format_predictions(predictions: Sequence[Prediction], max_items: int = 5) -> str:
    """Short log line, e.g. "Normal: 45.5%, Anxiety: 20.1%"."""
    return ", ".join(f"{p.label}: {p.percentage}%" for p in predictions[:max_items])
