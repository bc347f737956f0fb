from __future__ import annotations

import logging
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Dict, Optional

from mhclassifier.core.config import Settings, load_settings
from mhclassifier.domain.keywords import load_keyword_profile
from mhclassifier.domain.models import KeywordProfile, SensitivityConfig
from mhclassifier.infra.hf_client import HuggingFaceClient
from mhclassifier.usecases.classify_text import ClassificationOutcome, classify_text

logger = logging.getLogger(__name__)


class ClassificationService:
    """
    Request-facing entry point.

    Holds only immutable collaborators (settings, keyword profile, client);
    every call gets its own sensitivity value, nothing is mutated between
    requests.
    """

    def __init__(
        self,
        settings: Settings,
        client: Optional[HuggingFaceClient] = None,
        profile: Optional[KeywordProfile] = None,
    ):
        self.settings = settings
        self.client = client if client is not None else HuggingFaceClient(settings)
        self.profile = profile or load_keyword_profile(settings.keyword_profile)

    def classify(
        self,
        text: Optional[str],
        sensitivity: Optional[SensitivityConfig] = None,
        use_model: bool = True,
    ) -> ClassificationOutcome:
        return classify_text(
            text,
            sensitivity,
            settings=self.settings,
            client=self.client,
            profile=self.profile,
            use_model=use_model,
        )

    def status(self) -> Dict[str, Any]:
        """Connectivity payload for `{"test": true}` requests."""
        return {
            "success": True,
            "message": "API is working",
            "model": self.settings.hf_model_id,
            "api_key_status": "Active" if self.client.configured else "Missing",
            "use_model": self.settings.use_model,
            "profile": self.profile.name,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }


@lru_cache(maxsize=1)
def get_service() -> ClassificationService:
    """Process-wide service, built once from the environment."""
    settings = load_settings()
    service = ClassificationService(settings)
    logger.info(
        "classification service ready: model=%s, profile=%s, api_key=%s",
        settings.hf_model_id,
        service.profile.name,
        "set" if service.client.configured else "missing",
    )
    return service
