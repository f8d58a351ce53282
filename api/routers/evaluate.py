"""
Router: POST /evaluate, POST /postfix
Liczy drzewo Expr przesłane w postaci JSON.

Dzielenie przez zero to wynik, nie błąd HTTP: odpowiedź 200 z ustawionym `error`.
"""
from __future__ import annotations

import time

from fastapi import APIRouter, Depends

from adapters.evaluator.stack_evaluator import StackEvaluator, postfix_tokens
from api.dependencies import get_evaluator
from api.schemas import EvaluateRequest, EvaluateResponse, PostfixRequest, PostfixResponse
from contracts import to_infix

router = APIRouter(tags=["evaluate"])


@router.post("/evaluate", response_model=EvaluateResponse)
def evaluate(
    body: EvaluateRequest,
    evaluator: StackEvaluator = Depends(get_evaluator),
) -> EvaluateResponse:
    if body.locale and body.locale != evaluator.locale:
        evaluator = StackEvaluator(locale=body.locale)

    t0 = time.perf_counter()
    postfix = evaluator.to_postfix(body.expr)
    result = evaluator.reduce_postfix(postfix)
    duration_ms = (time.perf_counter() - t0) * 1000

    return EvaluateResponse(
        value=result.value,
        error=result.error,
        steps=result.steps,
        postfix=postfix_tokens(postfix),
        infix=to_infix(body.expr),
        duration_ms=round(duration_ms, 3),
    )


@router.post("/postfix", response_model=PostfixResponse)
def postfix(
    body: PostfixRequest,
    evaluator: StackEvaluator = Depends(get_evaluator),
) -> PostfixResponse:
    return PostfixResponse(postfix=postfix_tokens(evaluator.to_postfix(body.expr)))
