# mhclassifier/app/routes_predict.py
from __future__ import annotations
import logging
from typing import Any, Dict, List, Literal, Optional, Union

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from mhclassifier.domain.models import SensitivityConfig
from mhclassifier.domain.synthesizer import default_predictions
from mhclassifier.domain.aggregation import predictions_to_dicts
from mhclassifier.exceptions import TextValidationError, KeywordProfileError
from mhclassifier.services.classification_service import ClassificationService, get_service

logger = logging.getLogger(__name__)
router = APIRouter()

# ---------------------------
# Request schemas
# ---------------------------

class SensitivityBody(BaseModel):
    normal: float = Field(0.3, ge=0.0, le=1.0, description="Normal boost when positive cues are present")
    confidence: float = Field(0.15, ge=0.0, le=1.0, description="Minimum probability for the medium tier")

    def to_config(self) -> SensitivityConfig:
        return SensitivityConfig(normal=self.normal, confidence=self.confidence)


class PredictRequest(BaseModel):
    text: Optional[str] = Field(None, description="Text to classify (Indonesian)")
    sensitivity: Optional[SensitivityBody] = None
    test: bool = Field(False, description="Connectivity check only, no classification")
    use_model: bool = Field(
        True,
        description="Use the hosted model (True) or the keyword heuristic only (False)",
    )

# ---------------------------
# Response schemas
# ---------------------------

class PredictionOut(BaseModel):
    category: str
    raw_score: float
    probability: float
    percentage: float
    confidence_tier: Literal["low", "medium", "high"]
    original_label: Optional[str] = None
    is_fallback: bool = False


class PredictResponse(BaseModel):
    success: bool
    fallback: bool
    predictions: List[PredictionOut]
    text_analysis: Dict[str, Any] = Field(default_factory=dict)
    text_length: Optional[int] = None
    processing_time: Optional[int] = None
    model: Optional[str] = None
    profile: Optional[str] = None
    timestamp: Optional[str] = None
    note: Optional[str] = None
    error: Optional[str] = None
    sensitivity: Optional[Dict[str, float]] = None


class StatusResponse(BaseModel):
    success: bool = True
    message: str
    model: str
    api_key_status: str
    use_model: bool
    profile: str
    timestamp: str


class PredictErrorResponse(BaseModel):
    success: Literal[False] = False
    error_type: str
    message: str


# ---------------------------
# Routes
# ---------------------------

def resolve_service() -> Optional[ClassificationService]:
    """
    Route dependency around get_service().

    A missing or broken keyword profile yields None so the route can still
    answer with the default distribution.
    """
    try:
        return get_service()
    except KeywordProfileError as e:
        logger.error("keyword profile error: %s", e)
        return None


@router.post(
    "/api/predict",
    response_model=Union[StatusResponse, PredictResponse, PredictErrorResponse],
)
def predict_route(
    req: PredictRequest,
    service: Optional[ClassificationService] = Depends(resolve_service),
):
    """
    Single text classification API.

    - input: text + optional sensitivity (+ `test` for a connectivity check)
    - output: ranked category predictions; keyword fallback when the hosted
      model is unavailable
    """
    if service is None:
        return _emergency_response("keyword profile unavailable")

    if req.test:
        return StatusResponse(**service.status())

    try:
        sensitivity = req.sensitivity.to_config() if req.sensitivity else None
        outcome = service.classify(req.text, sensitivity, use_model=req.use_model)
        return PredictResponse(**outcome.to_dict())

    except TextValidationError as e:
        logger.warning("text validation failed: %s", e)
        return JSONResponse(
            status_code=400,
            content=PredictErrorResponse(error_type="validation_error", message=str(e)).model_dump(),
        )

    except Exception:
        logger.exception("unexpected internal error")
        return _emergency_response("Server processing error")


def _emergency_response(error: str) -> PredictResponse:
    """Always answer with something usable: the fixed default distribution."""
    return PredictResponse(
        success=False,
        fallback=True,
        predictions=predictions_to_dicts(default_predictions()),
        error=error,
        note="Server error fallback",
    )
