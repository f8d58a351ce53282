"""
schemas.py - Request/Response modele FastAPI.
Oddzielone od contracts.py żeby API mogło ewoluować niezależnie.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from contracts import ArithError, Expr


# ─────────────────────────── /evaluate ───────────────────────────

class EvaluateRequest(BaseModel):
    expr: Expr
    locale: Optional[str] = None  # domyślnie Settings.message_locale


class EvaluateResponse(BaseModel):
    value: Optional[int] = None
    error: Optional[ArithError] = None
    steps: list[str]
    postfix: list[str]
    infix: str
    duration_ms: float


# ─────────────────────────── /postfix ────────────────────────────

class PostfixRequest(BaseModel):
    expr: Expr


class PostfixResponse(BaseModel):
    postfix: list[str]


# ─────────────────────────── /health ─────────────────────────────

class HealthResponse(BaseModel):
    status: str
    version: str
