from __future__ import annotations

import pytest

from adapters.evaluator.stack_evaluator import StackEvaluator, evaluate, postfix_tokens
from contracts import (
    U128_MAX,
    ArithErrorKind,
    BinOpNode,
    MalformedExpressionError,
    NumberNode,
    Operator,
    OperatorNode,
    UnsignedOverflowError,
    binary_op,
    number,
)
from ports.evaluator import Evaluator


def _cross() -> BinOpNode:
    # ((14-2)*2)
    return binary_op(binary_op(number(14), number(2), Operator.SUB), number(2), Operator.MUL)


def test_stack_evaluator_satisfies_port():
    assert isinstance(StackEvaluator(), Evaluator)


def test_evaluate_bare_number_returns_it_unchanged():
    assert evaluate(number(14)).unwrap() == 14


def test_evaluate_subtraction():
    assert evaluate(binary_op(number(14), number(2), Operator.SUB)).unwrap() == 12


def test_evaluate_left_nested_tree():
    assert evaluate(_cross()).unwrap() == 24


def test_evaluate_right_nested_tree():
    expr = binary_op(number(2), binary_op(number(14), number(2), Operator.SUB), Operator.MUL)

    assert evaluate(expr).unwrap() == 24


def test_evaluate_sum_of_cloned_subtrees():
    c = _cross()
    expr = binary_op(c.model_copy(deep=True), c, Operator.ADD)

    assert evaluate(expr).unwrap() == 48


@pytest.mark.parametrize("n", [0, 1, 7, U128_MAX])
def test_division_by_zero_returns_error_for_any_dividend(n):
    result = evaluate(binary_op(number(n), number(0), Operator.DIV))

    assert not result.ok
    assert result.value is None
    assert result.unwrap_err().kind == ArithErrorKind.DIV_BY_ZERO
    assert result.unwrap_err().code == 1


def test_division_by_zero_aborts_whole_evaluation():
    # (8 - 3) + (100 / 0): lewa gałąź redukowana pierwsza, potem abort
    expr = binary_op(
        binary_op(number(8), number(3), Operator.SUB),
        binary_op(number(100), number(0), Operator.DIV),
        Operator.ADD,
    )

    result = evaluate(expr)

    assert result.error is not None
    assert result.value is None
    assert result.steps == ["8 - 3 = 5"]


@pytest.mark.parametrize("a,b", [(14, 2), (100, 1), (7, 3)])
def test_subtraction_and_division_keep_operand_order(a, b):
    assert evaluate(binary_op(number(a), number(b), Operator.SUB)).value == a - b
    assert evaluate(binary_op(number(a), number(b), Operator.DIV)).value == a // b


def test_division_truncates():
    assert evaluate(binary_op(number(7), number(2), Operator.DIV)).value == 3


def test_evaluating_clone_twice_is_idempotent():
    expr = _cross()
    clone = expr.model_copy(deep=True)

    first = evaluate(clone)
    second = evaluate(clone)

    assert first == second
    assert clone == expr


def test_steps_follow_reduction_order():
    result = evaluate(_cross())

    assert result.steps == ["14 - 2 = 12", "12 * 2 = 24"]


def test_to_postfix_pushes_operator_then_children():
    postfix = StackEvaluator().to_postfix(binary_op(number(14), number(2), Operator.SUB))

    assert postfix_tokens(postfix) == ["-", "2", "14"]


def test_to_postfix_nested_order():
    postfix = StackEvaluator().to_postfix(_cross())

    # right child is flattened first, then the left subtree
    assert postfix_tokens(postfix) == ["*", "2", "-", "2", "14"]


def test_reduce_postfix_does_not_consume_callers_list():
    evaluator = StackEvaluator()
    postfix = evaluator.to_postfix(_cross())
    before = list(postfix)

    evaluator.reduce_postfix(postfix)

    assert postfix == before


def test_deep_tree_does_not_hit_recursion_limit():
    expr = number(0)
    for _ in range(10_000):
        expr = binary_op(expr, number(1), Operator.ADD)

    assert evaluate(expr).value == 10_000


def test_subtraction_underflow_is_fatal():
    with pytest.raises(UnsignedOverflowError):
        evaluate(binary_op(number(2), number(14), Operator.SUB))


def test_addition_overflow_is_fatal():
    with pytest.raises(UnsignedOverflowError):
        evaluate(binary_op(number(U128_MAX), number(1), Operator.ADD))


def test_u128_max_is_representable():
    expr = binary_op(number(U128_MAX - 1), number(1), Operator.ADD)

    assert evaluate(expr).value == U128_MAX


def test_operator_marker_in_tree_is_malformed():
    expr = binary_op(OperatorNode(op=Operator.ADD), number(1), Operator.ADD)

    with pytest.raises(MalformedExpressionError):
        evaluate(expr)


def test_number_without_value_is_malformed():
    with pytest.raises(MalformedExpressionError):
        evaluate(NumberNode(value=None))


def test_reduce_empty_postfix_is_malformed():
    with pytest.raises(MalformedExpressionError):
        StackEvaluator().reduce_postfix([])


def test_reduce_operator_without_operands_is_malformed():
    with pytest.raises(MalformedExpressionError):
        StackEvaluator().reduce_postfix([number(1), OperatorNode(op=Operator.MUL)])


def test_error_message_uses_evaluator_locale():
    result = StackEvaluator(locale="ja").eval_expr(
        binary_op(number(1), number(0), Operator.DIV)
    )

    assert result.error.message == "解無し：ゼロ除算が発生しました。"
