"""
Port: Evaluator
Odpowiedzialność: deterministyczne liczenie drzewa Expr na jawnych stosach.
"""
from typing import Protocol, runtime_checkable

from contracts import EvalResult, Expr


@runtime_checkable
class Evaluator(Protocol):
    def eval_expr(self, expr: Expr) -> EvalResult:
        """
        Evaluates a well-formed expression tree to an unsigned integer.
        Returns EvalResult with:
          - value: the computed integer, or
          - error: ArithError(DIV_BY_ZERO) when a division by zero was hit
          - steps: human-readable reduction steps
        Raises MalformedExpressionError for trees that are not well-formed.
        Raises UnsignedOverflowError when a result leaves the u128 range.
        """
        ...

    def to_postfix(self, expr: Expr) -> list[Expr]:
        """
        Flattens the tree into the sequence consumed by the reduction pass
        (operator markers and operands, read back-to-front).
        Does not evaluate anything.
        """
        ...
