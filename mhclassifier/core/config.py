# mhclassifier/core/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

from dotenv import load_dotenv

# project root (the directory holding pyproject.toml)
BASE_DIR = Path(__file__).resolve().parents[2]

# .env loading
ENV_PATH = BASE_DIR / ".env"
if ENV_PATH.exists():
    load_dotenv(ENV_PATH)

# LOG_LEVEL from .env, INFO by default
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# CORS
# - CORS_ORIGINS="http://localhost:3000,http://127.0.0.1:8000" in .env restricts origins
# - unset means allow everything (["*"])
_cors_raw = os.getenv("CORS_ORIGINS", "")
if _cors_raw:
    CORS_ORIGINS = [o.strip() for o in _cors_raw.split(",") if o.strip()]
else:
    CORS_ORIGINS = ["*"]

DEFAULT_MODEL_ID = "B1NT4N9/roberta-mental-health-id"
DEFAULT_API_BASE = "https://api-inference.huggingface.co/models"

# Single accepted text window, measured after strip().
TEXT_MIN_LENGTH = 10
TEXT_MAX_LENGTH = 2000


def _env_bool(name: str, default: bool) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return v.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    v = os.getenv(name)
    if v is None:
        return default
    try:
        return float(v)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    v = os.getenv(name)
    if v is None:
        return default
    try:
        return int(v)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    """Per-process classifier settings.

    - hf_api_key: Hugging Face token (empty means the hosted model is skipped)
    - hf_model_id: hosted model repository id
    - hf_api_base: inference API base URL
    - hf_timeout: request timeout in seconds
    - text_min_length / text_max_length: accepted text window after strip
    - keyword_profile: keyword profile name used by the fallback heuristic
    - use_model: False forces the local heuristic for every request
    """

    hf_api_key: str = ""
    hf_model_id: str = DEFAULT_MODEL_ID
    hf_api_base: str = DEFAULT_API_BASE
    hf_timeout: float = 30.0
    text_min_length: int = TEXT_MIN_LENGTH
    text_max_length: int = TEXT_MAX_LENGTH
    keyword_profile: str = "smart"
    use_model: bool = True
    cors_origins: Tuple[str, ...] = ("*",)

    @property
    def model_url(self) -> str:
        return f"{self.hf_api_base.rstrip('/')}/{self.hf_model_id}"


def load_settings() -> Settings:
    """
    Build Settings from environment variables.

    Environment variables
    - HF_API_KEY (default: "")
    - HF_MODEL_ID (default: B1NT4N9/roberta-mental-health-id)
    - HF_API_BASE (default: https://api-inference.huggingface.co/models)
    - HF_TIMEOUT (default: 30)
    - TEXT_MIN_LENGTH / TEXT_MAX_LENGTH (default: 10 / 2000)
    - KEYWORD_PROFILE (default: smart)
    - USE_MODEL (default: 1)
    """
    return Settings(
        hf_api_key=os.getenv("HF_API_KEY", "").strip(),
        hf_model_id=os.getenv("HF_MODEL_ID", DEFAULT_MODEL_ID),
        hf_api_base=os.getenv("HF_API_BASE", DEFAULT_API_BASE),
        hf_timeout=_env_float("HF_TIMEOUT", 30.0),
        text_min_length=_env_int("TEXT_MIN_LENGTH", TEXT_MIN_LENGTH),
        text_max_length=_env_int("TEXT_MAX_LENGTH", TEXT_MAX_LENGTH),
        keyword_profile=os.getenv("KEYWORD_PROFILE", "smart").strip() or "smart",
        use_model=_env_bool("USE_MODEL", True),
        cors_origins=tuple(CORS_ORIGINS),
    )
