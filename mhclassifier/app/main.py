# mhclassifier/app/main.py
from __future__ import annotations
import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mhclassifier.core.config import LOG_LEVEL, Settings, load_settings
from mhclassifier.app.routes_predict import router as predict_router
from mhclassifier.app.routes_health import router as health_router

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
)

logger = logging.getLogger(__name__)

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or load_settings()
    app = FastAPI(
        title="Mental Health Text Classifier",
        version="0.1.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=False,
        allow_methods=["POST", "GET", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    app.include_router(predict_router)
    app.include_router(health_router)

    logger.info("FastAPI app initialized (log_level=%s, origins=%s)", LOG_LEVEL, settings.cors_origins)
    return app

app = create_app()
