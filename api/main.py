"""
api/main.py - punkt wejścia FastAPI.

Ewaluator jest bezstanowy, więc tworzony jest raz przy starcie aplikacji
i współdzielony przez wszystkie żądania.

Błędy niezmienników (MalformedExpressionError, UnsignedOverflowError) są
mapowane na 422; dzielenie przez zero wraca jako zwykły wynik.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from adapters.evaluator.stack_evaluator import StackEvaluator
from api.routers import evaluate
from api.schemas import HealthResponse
from config import Settings
from contracts import MalformedExpressionError, UnsignedOverflowError

logger = logging.getLogger("stackcalc")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    app.state.evaluator = StackEvaluator(locale=settings.message_locale)
    logger.info("StackCalc API ready (locale=%s).", settings.message_locale)
    yield
    logger.info("Shutting down.")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings()
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Routers
    app.include_router(evaluate.router)

    # Health
    @app.get("/health", response_model=HealthResponse, tags=["health"])
    def health():
        return HealthResponse(status="ok", version=settings.app_version)

    # Globalne handlery błędów
    @app.exception_handler(MalformedExpressionError)
    async def malformed_handler(request: Request, exc: MalformedExpressionError):
        logger.warning("Malformed expression: %s", exc)
        return JSONResponse(status_code=422, content={"detail": str(exc), "kind": "malformed"})

    @app.exception_handler(UnsignedOverflowError)
    async def overflow_handler(request: Request, exc: UnsignedOverflowError):
        logger.warning("Unsigned overflow: %s", exc)
        return JSONResponse(status_code=422, content={"detail": str(exc), "kind": "overflow"})

    return app


app = create_app()
