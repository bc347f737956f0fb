"""Mental health text classifier service.

Public entrypoints:
- scan(text, keyword_sets)
- synthesize(upstream_scores, ...) / synthesize_fallback(counts, ...)
- load_keyword_profile(name)
"""

from .domain.keywords import load_keyword_profile
from .domain.models import Category, IndicatorCounts, KeywordSet, Prediction, SensitivityConfig
from .domain.scanner import scan
from .domain.synthesizer import classify_fallback, synthesize, synthesize_fallback

__all__ = [
    "Category",
    "IndicatorCounts",
    "KeywordSet",
    "Prediction",
    "SensitivityConfig",
    "classify_fallback",
    "load_keyword_profile",
    "scan",
    "synthesize",
    "synthesize_fallback",
]
