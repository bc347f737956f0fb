from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from mhclassifier.core.config import Settings
from mhclassifier.domain.aggregation import build_text_analysis, format_predictions, predictions_to_dicts
from mhclassifier.domain.keywords import load_keyword_profile
from mhclassifier.domain.models import KeywordProfile, Prediction, SensitivityConfig
from mhclassifier.domain.scanner import scan
from mhclassifier.domain.synthesizer import synthesize, synthesize_fallback
from mhclassifier.exceptions import TextValidationError
from mhclassifier.infra.hf_client import HuggingFaceClient, UpstreamFailure, UpstreamSuccess

logger = logging.getLogger(__name__)


@dataclass
class ClassificationOutcome:
    """Everything the API layer needs to answer one request."""

    predictions: List[Prediction]
    text_analysis: Dict[str, Any]
    fallback: bool
    model: str
    profile: str
    text_length: int
    processing_time_ms: int
    timestamp: str
    note: Optional[str] = None
    upstream_error: Optional[str] = None
    sensitivity: Optional[Dict[str, float]] = None

    @property
    def top(self) -> Optional[Prediction]:
        return self.predictions[0] if self.predictions else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.upstream_error is None,
            "fallback": self.fallback,
            "predictions": predictions_to_dicts(self.predictions),
            "text_analysis": self.text_analysis,
            "text_length": self.text_length,
            "processing_time": self.processing_time_ms,
            "model": self.model,
            "profile": self.profile,
            "timestamp": self.timestamp,
            "note": self.note,
            "error": self.upstream_error,
            "sensitivity": self.sensitivity,
        }


def validate_text(text: Optional[str], settings: Settings) -> str:
    """Strip and bound-check the input text; return the cleaned text."""
    if not isinstance(text, str) or not text.strip():
        raise TextValidationError("Text is required.")

    clean = text.strip()
    if len(clean) < settings.text_min_length:
        raise TextValidationError(
            f"Text too short. Minimum {settings.text_min_length} characters."
        )
    if len(clean) > settings.text_max_length:
        raise TextValidationError(
            f"Text too long. Maximum {settings.text_max_length} characters."
        )
    return clean


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def classify_text(
    text: Optional[str],
    sensitivity: Optional[SensitivityConfig] = None,
    *,
    settings: Settings,
    client: Optional[HuggingFaceClient] = None,
    profile: Optional[KeywordProfile] = None,
    use_model: bool = True,
) -> ClassificationOutcome:
    """Classify one text: hosted model first, local heuristic on failure."""
    # 1) input validation
    clean = validate_text(text, settings)

    start = time.monotonic()
    profile = profile or load_keyword_profile(settings.keyword_profile)

    # 2) indicator scan (reported in both modes)
    counts = scan(clean, profile.keyword_sets)
    text_analysis = build_text_analysis(counts, clean)

    logger.info("classifying text: chars=%d preview=%r", len(clean), clean[:50])

    # 3) hosted model
    predictions: List[Prediction] = []
    failure: Optional[UpstreamFailure] = None

    if use_model and settings.use_model and client is not None:
        result = client.classify(clean)
        if isinstance(result, UpstreamSuccess):
            predictions = synthesize(result.scores, sensitivity=sensitivity, text=clean)
            if sum(p.probability for p in predictions) <= 0:
                failure = UpstreamFailure(reason="bad_response", detail="all scores are zero")
                predictions = []
        else:
            failure = result
    else:
        failure = UpstreamFailure(reason="disabled", detail="hosted model not used")

    # 4) local fallback on the failure variant
    fallback = failure is not None
    note = None
    if fallback:
        logger.info("using keyword fallback: reason=%s", failure.reason)
        predictions = synthesize_fallback(counts, profile.keyword_sets, sensitivity, profile.heuristics)
        note = "Using keyword fallback heuristic"

    logger.info("predictions: %s", format_predictions(predictions))

    return ClassificationOutcome(
        predictions=predictions,
        text_analysis=text_analysis,
        fallback=fallback,
        model=settings.hf_model_id,
        profile=profile.name,
        text_length=len(clean),
        processing_time_ms=int((time.monotonic() - start) * 1000),
        timestamp=_now_iso(),
        note=note,
        upstream_error=None if failure is None or failure.reason == "disabled" else failure.reason,
        sensitivity=None if sensitivity is None else {
            "normal": sensitivity.normal,
            "confidence": sensitivity.confidence,
        },
    )
