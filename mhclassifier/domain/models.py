# mhclassifier/domain/models.py
"""Domain value types for the classifier core.

Everything here is created and discarded within a single classification call;
nothing is shared mutably between requests.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Union


class Category(str, Enum):
    """Closed set of output categories. Declaration order is the tie-break order."""

    NORMAL = "Normal"
    ANXIETY = "Anxiety"
    DEPRESSION = "Depression"
    BIPOLAR = "Bipolar"
    SUICIDAL = "Suicidal"


CATEGORY_ORDER: Tuple[Category, ...] = tuple(Category)

# Hosted model label -> Category
LABEL_MAP: Dict[str, Category] = {
    "LABEL_0": Category.NORMAL,
    "LABEL_1": Category.ANXIETY,
    "LABEL_2": Category.DEPRESSION,
    "LABEL_3": Category.BIPOLAR,
    "LABEL_4": Category.SUICIDAL,
}

# Lexical cues that allow the sensitivity boost on Normal
POSITIVE_INDICATORS: Tuple[str, ...] = ("baik", "senang", "bahagia", "puas", "normal", "sehat")

# Upstream labels outside the enum pass through as plain strings.
CategoryLike = Union[Category, str]


@dataclass(frozen=True)
class KeywordSet:
    """Keywords for one category.

    - keywords: lowercase terms, matched as substrings
    - weight: score added per matched keyword
    - base_score: prior mass before any evidence
    """

    keywords: Tuple[str, ...]
    weight: float
    base_score: float


@dataclass(frozen=True)
class HeuristicConfig:
    """Text-shape nudges applied in fallback mode."""

    long_text_threshold: int = 100
    long_text_increment: float = 0.05
    question_mark_threshold: int = 2
    question_mark_increment: float = 0.08
    exclamation_threshold: int = 2
    exclamation_increment: float = 0.05


@dataclass(frozen=True)
class KeywordProfile:
    """A named, immutable parameter set for the fallback heuristic."""

    name: str
    keyword_sets: Mapping[Category, KeywordSet]
    heuristics: HeuristicConfig = field(default_factory=HeuristicConfig)


@dataclass(frozen=True)
class SensitivityConfig:
    """
    Per-request tuning knobs.

    - normal: boost on Normal when positive cues are present (boost = normal * 0.5)
    - confidence: minimum probability for the "medium" tier (never below 0.4)
    """

    normal: float = 0.3
    confidence: float = 0.15


@dataclass(frozen=True)
class IndicatorCounts:
    """
    Result of one text scan.

    - counts: matched keywords per category (one per distinct keyword)
    - negations: `tidak <keyword>` bigrams per category
    - total_emotion_words: sum of all counts
    - text_length / question_marks / exclamation_marks: text shape
    - has_positive_indicators: any POSITIVE_INDICATORS substring present
    """

    counts: Mapping[Category, int]
    negations: Mapping[Category, int]
    total_emotion_words: int = 0
    text_length: int = 0
    question_marks: int = 0
    exclamation_marks: int = 0
    has_positive_indicators: bool = False

    def count(self, category: Category) -> int:
        return self.counts.get(category, 0)

    def negated(self, category: Category) -> int:
        return self.negations.get(category, 0)


@dataclass(frozen=True)
class Prediction:
    """One ranked category score."""

    category: CategoryLike
    raw_score: float
    probability: float
    percentage: float
    confidence_tier: str
    original_label: Optional[str] = None
    is_fallback: bool = False

    @property
    def label(self) -> str:
        return self.category.value if isinstance(self.category, Category) else str(self.category)

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["category"] = self.label
        return d
