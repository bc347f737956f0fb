# mhclassifier/infra/hf_client.py

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass, field
from typing import Any, List, Optional, Union

import httpx

from mhclassifier.core.config import Settings
from mhclassifier.domain.synthesizer import UpstreamScore
from mhclassifier.exceptions import UpstreamError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UpstreamSuccess:
    """Hosted model answered with a usable score list."""

    scores: List[UpstreamScore] = field(default_factory=list)
    elapsed_ms: int = 0


@dataclass(frozen=True)
class UpstreamFailure:
    """Hosted model unavailable or answered with something unusable.

    - reason: short machine-readable cause (not_configured, http_error, timeout, ...)
    - detail: human-readable message for logs / response notes
    - status_code: HTTP status when the server answered
    """

    reason: str
    detail: str = ""
    status_code: Optional[int] = None
    elapsed_ms: int = 0


UpstreamResult = Union[UpstreamSuccess, UpstreamFailure]


def parse_scores(payload: Any) -> List[UpstreamScore]:
    """
    Parse an inference API payload into UpstreamScore entries.

    Accepted shapes:
      [[{"label": "LABEL_0", "score": 0.9}, ...]]   (text-classification default)
      [{"label": "LABEL_0", "score": 0.9}, ...]     (flat)

    Raises UpstreamError for anything else, including `{"error": ...}` bodies.
    """
    if isinstance(payload, dict) and "error" in payload:
        raise UpstreamError(f"model returned an error: {payload.get('error')}")

    if not isinstance(payload, list) or not payload:
        raise UpstreamError(f"unexpected payload type: {type(payload).__name__}")

    items = payload[0] if isinstance(payload[0], list) else payload

    scores: List[UpstreamScore] = []
    for item in items:
        if not isinstance(item, dict) or "label" not in item:
            raise UpstreamError(f"unexpected score entry: {item!r}")
        try:
            score = float(item.get("score") or 0.0)
        except (TypeError, ValueError) as e:
            raise UpstreamError(f"score is not a number: {item!r}") from e
        if not math.isfinite(score) or score < 0:
            raise UpstreamError(f"score out of range: {item!r}")
        scores.append(UpstreamScore(raw_label=str(item["label"]), score=score))

    if not scores:
        raise UpstreamError("model returned an empty score list")
    return scores


class HuggingFaceClient:
    """
    Thin client for the hosted text-classification model.

    classify() never raises for transport problems: every failure comes back
    as an UpstreamFailure so the caller can switch to the local heuristic on
    purpose. No retries are attempted here.
    """

    def __init__(self, settings: Settings, http_client: Optional[httpx.Client] = None):
        self.settings = settings
        self._http = http_client

    @property
    def configured(self) -> bool:
        return bool(self.settings.hf_api_key)

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.settings.hf_api_key}",
            "Content-Type": "application/json",
        }

    def _post(self, text: str) -> httpx.Response:
        body = {"inputs": text, "parameters": {"return_all_scores": True}}
        if self._http is not None:
            return self._http.post(
                self.settings.model_url,
                headers=self._headers(),
                json=body,
                timeout=self.settings.hf_timeout,
            )
        with httpx.Client(timeout=self.settings.hf_timeout) as client:
            return client.post(self.settings.model_url, headers=self._headers(), json=body)

    def classify(self, text: str) -> UpstreamResult:
        if not self.configured:
            return UpstreamFailure(reason="not_configured", detail="HF_API_KEY is not set")

        start = time.monotonic()

        def _elapsed() -> int:
            return int((time.monotonic() - start) * 1000)

        # ====== model call ======
        try:
            logger.info("hosted model call: model=%s, chars=%d", self.settings.hf_model_id, len(text))
            resp = self._post(text)
        except httpx.TimeoutException as e:
            logger.warning("hosted model timed out after %ss", self.settings.hf_timeout)
            return UpstreamFailure(reason="timeout", detail=str(e), elapsed_ms=_elapsed())
        except httpx.HTTPError as e:
            logger.warning("hosted model request failed: %s", e)
            return UpstreamFailure(reason="network_error", detail=str(e), elapsed_ms=_elapsed())

        if resp.status_code >= 400:
            logger.error("hosted model error: status=%s body=%s", resp.status_code, resp.text[:200])
            return UpstreamFailure(
                reason="http_error",
                detail=resp.text[:200],
                status_code=resp.status_code,
                elapsed_ms=_elapsed(),
            )

        # ====== response parsing ======
        try:
            scores = parse_scores(resp.json())
        except (ValueError, UpstreamError) as e:
            logger.error("hosted model response unusable: %s", e)
            return UpstreamFailure(
                reason="bad_response",
                detail=str(e),
                status_code=resp.status_code,
                elapsed_ms=_elapsed(),
            )

        return UpstreamSuccess(scores=scores, elapsed_ms=_elapsed())
