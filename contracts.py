"""
contracts.py - Jedyne źródło prawdy dla typów danych StackCalc.
Wszystkie moduły importują typy WYŁĄCZNIE stąd.

Drzewo wyrażenia (Expr) to unia trzech wariantów rozróżnianych polem node_type:
  BinOpNode    - operacja dwuargumentowa (węzeł wewnętrzny)
  NumberNode   - liczba całkowita bez znaku (u128)
  OperatorNode - sam znacznik operatora; istnieje tylko w sekwencji postfiksowej
"""
from __future__ import annotations

from enum import Enum, IntEnum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator

from messages import DEFAULT_LOCALE, resolve_message

CONTRACTS_VERSION = "1.0.0"

U128_MAX = 2**128 - 1


# ─────────────────────────── Errors ──────────────────────────────────────

class MalformedExpressionError(RuntimeError):
    """Invariant violation: the tree or postfix sequence is not well-formed."""


class UnsignedOverflowError(OverflowError):
    """Result of an operation does not fit into an unsigned 128-bit integer."""


class ArithErrorRaised(Exception):
    """Raised by EvalResult.unwrap() when the result holds an ArithError."""

    def __init__(self, error: ArithError):
        super().__init__(error.message)
        self.error = error


# ─────────────────────────── Operators ───────────────────────────────────

class Operator(str, Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"


# ─────────────────────────── Expression AST ──────────────────────────────

class NumberNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    node_type: Literal["number"] = "number"
    value: Optional[int]  # None = brak wartości

    @field_validator("value")
    @classmethod
    def _u128_range(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and not 0 <= v <= U128_MAX:
            raise ValueError(f"{v} is outside the unsigned 128-bit range")
        return v

    def _checked(self, result: int) -> NumberNode:
        if not 0 <= result <= U128_MAX:
            raise UnsignedOverflowError(
                f"{result} is outside the unsigned 128-bit range"
            )
        return NumberNode(value=result)

    def __add__(self, other: NumberNode) -> NumberNode:
        return self._checked(self.value + other.value)

    def __sub__(self, other: NumberNode) -> NumberNode:
        return self._checked(self.value - other.value)

    def __mul__(self, other: NumberNode) -> NumberNode:
        return self._checked(self.value * other.value)

    def __floordiv__(self, other: NumberNode) -> NumberNode:
        # Dzielnik != 0 sprawdza ewaluator, nie operator.
        return self._checked(self.value // other.value)

    __truediv__ = __floordiv__

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, int) and not isinstance(other, bool):
            return self.value == other
        return super().__eq__(other)

    def __hash__(self) -> int:
        # Spójne z __eq__ względem int: number(3) == 3.
        return hash(self.value)


class OperatorNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    node_type: Literal["operator"] = "operator"
    op: Operator


class BinOpNode(BaseModel):
    """
    Węzeł operacji. Ewaluacja jest iteracyjna, ale model_copy(deep=True),
    porównanie i serializacja schodzą rekurencyjnie: bardzo głębokie drzewa
    (tysiące poziomów) przekraczają limit rekurencji Pythona.
    """

    model_config = ConfigDict(frozen=True)

    node_type: Literal["binop"] = "binop"
    op: Operator
    left: "Expr"
    right: "Expr"


Expr = Annotated[
    Union[BinOpNode, NumberNode, OperatorNode],
    Field(discriminator="node_type"),
]
BinOpNode.model_rebuild()

_EXPR_ADAPTER: TypeAdapter[Expr] = TypeAdapter(Expr)


def number(value: int) -> NumberNode:
    """Wraps a raw unsigned integer as a NumberNode."""
    return NumberNode(value=value)


def binary_op(left: Expr, right: Expr, op: Operator | str) -> BinOpNode:
    """Builds an operation node owning both operands."""
    return BinOpNode(op=Operator(op), left=left, right=right)


def parse_expr(data: dict[str, Any] | str | bytes) -> Expr:
    """
    Validates the JSON model form of a tree (dict or JSON text) into an Expr.
    Raises pydantic.ValidationError for payloads that do not match the model.
    """
    if isinstance(data, (str, bytes)):
        return _EXPR_ADAPTER.validate_json(data)
    return _EXPR_ADAPTER.validate_python(data)


def to_infix(expr: Expr) -> str:
    """Nawiasowana reprezentacja infiksowa - tylko do wyświetlania."""
    parts: list[str] = []
    stack: list[Union[Expr, str]] = [expr]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            parts.append(item)
        elif isinstance(item, BinOpNode):
            stack.extend([")", item.right, f" {item.op.value} ", item.left, "("])
        elif isinstance(item, NumberNode):
            parts.append("?" if item.value is None else str(item.value))
        else:
            parts.append(item.op.value)
    return "".join(parts)


# ─────────────────────────── Arithmetic errors ───────────────────────────

class ArithErrorKind(IntEnum):
    SUCCESS = 0       # zarezerwowany, nigdy nie zwracany jako błąd
    DIV_BY_ZERO = 1


class ArithError(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: int
    message: str

    @classmethod
    def of(cls, kind: ArithErrorKind, locale: str = DEFAULT_LOCALE) -> ArithError:
        return cls(code=int(kind), message=resolve_message(int(kind), locale))

    @property
    def kind(self) -> Optional[ArithErrorKind]:
        try:
            return ArithErrorKind(self.code)
        except ValueError:
            return None

    def resolve(self, locale: str = DEFAULT_LOCALE) -> str:
        return resolve_message(self.code, locale)

    def __str__(self) -> str:
        return self.message


# ─────────────────────────── Evaluator ───────────────────────────────────

class EvalResult(BaseModel):
    value: Optional[int] = None
    error: Optional[ArithError] = None
    steps: list[str] = Field(default_factory=list)  # czytelne kroki redukcji

    @model_validator(mode="after")
    def _exactly_one_outcome(self) -> EvalResult:
        if (self.value is None) == (self.error is None):
            raise ValueError("EvalResult needs exactly one of value or error")
        return self

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> NumberNode:
        if self.error is not None:
            raise ArithErrorRaised(self.error)
        return NumberNode(value=self.value)

    def unwrap_err(self) -> ArithError:
        if self.error is None:
            raise ValueError(f"EvalResult holds a value: {self.value}")
        return self.error
