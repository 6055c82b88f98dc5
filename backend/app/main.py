from __future__ import annotations

import logging

from fastapi import FastAPI

from app.api.router import api_router
from app.config import get_log_level


def create_app(log_level: str | None = None) -> FastAPI:
    logging.basicConfig(
        level=log_level or get_log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="Strategy Payoff Lab API", version="1.0.0")

    # API routes
    app.include_router(api_router, prefix="/api")

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    return app


app = create_app()
