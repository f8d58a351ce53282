"""
Adapter: StackEvaluator
Implementuje port Evaluator - dwa przebiegi na jawnych stosach, bez rekurencji.

to_postfix()     - spłaszcza drzewo do sekwencji postfiksowej (odwrotna notacja polska)
reduce_postfix() - redukuje sekwencję do jednej liczby albo ArithError(DIV_BY_ZERO)
eval_expr()      - oba przebiegi naraz

Kolejność zdejmowania ze stosu jest istotna: najpierw prawy, potem lewy operand
(odejmowanie i dzielenie nie są przemienne).
"""
from __future__ import annotations

import logging
from typing import Callable

from contracts import (
    ArithError,
    ArithErrorKind,
    BinOpNode,
    EvalResult,
    Expr,
    MalformedExpressionError,
    NumberNode,
    Operator,
    OperatorNode,
)
from messages import DEFAULT_LOCALE

logger = logging.getLogger("stackcalc.stack_evaluator")

# Dzielenie obsługiwane osobno (sprawdzenie zera)
_OP_FUNCS: dict[Operator, Callable[[NumberNode, NumberNode], NumberNode]] = {
    Operator.ADD: lambda l, r: l + r,
    Operator.SUB: lambda l, r: l - r,
    Operator.MUL: lambda l, r: l * r,
    Operator.DIV: lambda l, r: l // r,
}


def _pop(stack: list, what: str):
    try:
        return stack.pop()
    except IndexError:
        raise MalformedExpressionError(f"pop from empty {what} stack") from None


class StackEvaluator:
    """Ewaluator drzew Expr oparty na stosach."""

    def __init__(self, locale: str = DEFAULT_LOCALE) -> None:
        self.locale = locale

    # -- Evaluator protocol ------------------------------------------------

    def eval_expr(self, expr: Expr) -> EvalResult:
        return self.reduce_postfix(self.to_postfix(expr))

    def to_postfix(self, expr: Expr) -> list[Expr]:
        work: list[Expr] = [expr]
        output: list[Expr] = []
        while True:
            node = _pop(work, "work")
            if isinstance(node, NumberNode):
                output.append(node)
                if not work:
                    break
            elif isinstance(node, BinOpNode):
                output.append(OperatorNode(op=node.op))
                work.append(node.left)
                work.append(node.right)
            else:
                raise MalformedExpressionError(
                    f"unexpected {type(node).__name__} in expression tree"
                )
        logger.debug("Flattened tree into %d postfix items.", len(output))
        return output

    def reduce_postfix(self, postfix: list[Expr]) -> EvalResult:
        """
        Consumes a copy of `postfix` from the end. The caller's list is
        left untouched.
        """
        pending = list(postfix)
        results: list[NumberNode] = []
        steps: list[str] = []
        while True:
            item = _pop(pending, "postfix")
            if isinstance(item, NumberNode):
                if item.value is None:
                    raise MalformedExpressionError("number node without a value")
                results.append(item)
                if not pending and len(results) == 1:
                    break
            elif isinstance(item, OperatorNode):
                right = _pop(results, "result")
                left = _pop(results, "result")
                if item.op is Operator.DIV and right.value == 0:
                    logger.info("Division by zero: %d / 0, evaluation aborted.", left.value)
                    return EvalResult(
                        error=ArithError.of(ArithErrorKind.DIV_BY_ZERO, self.locale),
                        steps=steps,
                    )
                value = _OP_FUNCS[item.op](left, right)
                steps.append(f"{left.value} {item.op.value} {right.value} = {value.value}")
                # Wynik wraca na sekwencję i jest zdejmowany jako zwykły operand.
                pending.append(value)
            else:
                raise MalformedExpressionError(
                    f"unexpected {type(item).__name__} in postfix sequence"
                )
        logger.debug("Reduced %d postfix items in %d steps.", len(postfix), len(steps))
        return EvalResult(value=results.pop().value, steps=steps)


_DEFAULT = StackEvaluator()


def evaluate(expr: Expr) -> EvalResult:
    """Evaluates `expr` with the default (English messages) evaluator."""
    return _DEFAULT.eval_expr(expr)


def postfix_tokens(postfix: list[Expr]) -> list[str]:
    """Symbole sekwencji w kolejności budowania (czytana od końca przy redukcji)."""
    tokens: list[str] = []
    for item in postfix:
        if isinstance(item, NumberNode):
            tokens.append("?" if item.value is None else str(item.value))
        elif isinstance(item, OperatorNode):
            tokens.append(item.op.value)
        else:
            raise MalformedExpressionError(
                f"unexpected {type(item).__name__} in postfix sequence"
            )
    return tokens
