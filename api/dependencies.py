"""
dependencies.py - FastAPI Dependency Injection.
Każda zależność zwraca odpowiedni obiekt przez Request.app.state.
"""
from __future__ import annotations

from fastapi import Request

from adapters.evaluator.stack_evaluator import StackEvaluator


def get_evaluator(request: Request) -> StackEvaluator:
    return request.app.state.evaluator
