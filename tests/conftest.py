
# Ensure the mhclassifier package is importable in tests
import sys, os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from typing import List, Optional

import pytest

from mhclassifier.core.config import Settings
from mhclassifier.domain.keywords import load_keyword_profile
from mhclassifier.domain.synthesizer import UpstreamScore
from mhclassifier.infra.hf_client import UpstreamFailure, UpstreamSuccess


class FakeClient:
    """Stands in for HuggingFaceClient; returns a preset result and records calls."""

    def __init__(self, result=None, exc: Optional[Exception] = None):
        self.result = result if result is not None else UpstreamFailure(reason="http_error", status_code=503)
        self.exc = exc
        self.calls: List[str] = []

    @property
    def configured(self) -> bool:
        return True

    def classify(self, text: str):
        self.calls.append(text)
        if self.exc is not None:
            raise self.exc
        return self.result


def upstream_success(*pairs) -> UpstreamSuccess:
    return UpstreamSuccess(scores=[UpstreamScore(raw_label=l, score=s) for l, s in pairs])


@pytest.fixture
def settings():
    return Settings(hf_api_key="test-key")


@pytest.fixture
def profile():
    return load_keyword_profile("smart")


@pytest.fixture(autouse=True)
def _no_hf_env(monkeypatch):
    monkeypatch.delenv("HF_API_KEY", raising=False)
    monkeypatch.delenv("KEYWORD_PROFILE", raising=False)
    monkeypatch.delenv("USE_MODEL", raising=False)
