#!/usr/bin/env python3
"""
stackcalc.py - CLI narzędzie StackCalc.

Działa całkowicie lokalnie, nie wymaga uruchomionego serwera API.
Drzewo wyrażenia podaje się w postaci JSON (model Expr z contracts.py):

    {"node_type": "binop", "op": "-",
     "left": {"node_type": "number", "value": 14},
     "right": {"node_type": "number", "value": 2}}

Podkomendy:
    eval     - policz drzewo i wypisz wynik (lub błąd arytmetyczny)
    postfix  - wypisz sekwencję postfiksową zbudowaną z drzewa
    demo     - policz wbudowane przykłady

Kody wyjścia:
    0 - wynik policzony
    1 - błąd arytmetyczny (dzielenie przez zero)
    2 - niepoprawne drzewo lub przepełnienie u128

Użycie:
    python stackcalc.py eval --json '{"node_type": "number", "value": 14}'
    python stackcalc.py eval --file tree.json --steps --locale ja
    python stackcalc.py postfix --file tree.json
    python stackcalc.py demo
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Any

from pydantic import ValidationError
from rich import box
from rich.console import Console
from rich.table import Table

from adapters.evaluator.stack_evaluator import StackEvaluator, postfix_tokens
from config import Settings
from contracts import (
    Expr,
    MalformedExpressionError,
    Operator,
    UnsignedOverflowError,
    binary_op,
    number,
    parse_expr,
    to_infix,
)
from messages import available_locales

EXIT_OK = 0
EXIT_ARITH_ERROR = 1
EXIT_BAD_TREE = 2


# -- helpers ---------------------------------------------------------------

_CONSOLE: Console | None = None


def _console() -> Console:
    global _CONSOLE
    if _CONSOLE is None:
        _CONSOLE = Console(highlight=False)
    return _CONSOLE


def _short(value: Any, limit: int = 64) -> str:
    s = str(value).replace("\n", " ").strip()
    if len(s) <= limit:
        return s
    return s[: limit - 3] + "..."


def _print_kv_table(title: str, rows: list[tuple[str, Any]]) -> None:
    table = Table(title=title, box=box.ASCII, show_header=False, pad_edge=False)
    table.add_column("Key", no_wrap=True, style="bold cyan")
    table.add_column("Value")
    for key, value in rows:
        table.add_row(str(key), str(value))
    _console().print(table)


def _read_tree(args: argparse.Namespace) -> Expr:
    if getattr(args, "file", None):
        try:
            with open(args.file, encoding="utf-8") as fh:
                text = fh.read()
        except OSError as e:
            print(f"Błąd odczytu pliku: {e}", file=sys.stderr)
            sys.exit(EXIT_BAD_TREE)
    else:
        text = getattr(args, "json", None) or sys.stdin.read().strip()
    if not text:
        print("Błąd: podaj drzewo przez --json, --file lub stdin", file=sys.stderr)
        sys.exit(EXIT_BAD_TREE)
    try:
        return parse_expr(text)
    except ValidationError as e:
        print(f"Niepoprawne drzewo: {e}", file=sys.stderr)
        sys.exit(EXIT_BAD_TREE)


def demo_trees() -> list[tuple[str, Expr]]:
    sub = binary_op(number(14), number(2), Operator.SUB)
    left_nested = binary_op(sub, number(2), Operator.MUL)
    right_nested = binary_op(number(2), sub, Operator.MUL)
    doubled = binary_op(left_nested.model_copy(deep=True), left_nested, Operator.ADD)
    return [
        ("literal", number(14)),
        ("sub", sub),
        ("left-nested", left_nested),
        ("right-nested", right_nested),
        ("cloned", doubled),
        ("div-by-zero", binary_op(number(7), number(0), Operator.DIV)),
    ]


# -- podkomendy ------------------------------------------------------------

def _eval(args: argparse.Namespace, settings: Settings) -> int:
    expr = _read_tree(args)
    evaluator = StackEvaluator(locale=args.locale or settings.message_locale)
    try:
        result = evaluator.eval_expr(expr)
    except (MalformedExpressionError, UnsignedOverflowError) as e:
        print(f"Błąd: {e}", file=sys.stderr)
        return EXIT_BAD_TREE

    rows: list[tuple[str, Any]] = [("expr", _short(to_infix(expr)))]
    if result.ok:
        rows.append(("value", result.value))
    else:
        rows.append(("error", f"[{result.error.code}] {result.error.message}"))
    if args.steps:
        rows.extend((f"step {i}", step) for i, step in enumerate(result.steps, 1))
    _print_kv_table("Evaluation", rows)
    return EXIT_OK if result.ok else EXIT_ARITH_ERROR


def _postfix(args: argparse.Namespace, settings: Settings) -> int:
    expr = _read_tree(args)
    try:
        tokens = postfix_tokens(StackEvaluator().to_postfix(expr))
    except MalformedExpressionError as e:
        print(f"Błąd: {e}", file=sys.stderr)
        return EXIT_BAD_TREE
    _console().print(" ".join(tokens))
    return EXIT_OK


def _demo(args: argparse.Namespace, settings: Settings) -> int:
    evaluator = StackEvaluator(locale=args.locale or settings.message_locale)
    table = Table(title="Demo", box=box.ASCII)
    table.add_column("Name", no_wrap=True, style="cyan")
    table.add_column("Expr")
    table.add_column("Result", justify="right")
    for name, expr in demo_trees():
        result = evaluator.eval_expr(expr)
        shown = str(result.value) if result.ok else result.error.message
        table.add_row(name, _short(to_infix(expr), 48), shown)
    _console().print(table)
    return EXIT_OK


# -- main ------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="stackcalc",
        description="StackCalc - stosowy ewaluator drzew wyrażeń (CLI lokalny)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # eval
    p = sub.add_parser("eval", help="Policz drzewo wyrażenia")
    p.add_argument("--json", "-j", help="Drzewo w postaci JSON (lub stdin)")
    p.add_argument("--file", "-f", help="Ścieżka do pliku JSON z drzewem")
    p.add_argument("--locale", choices=available_locales(),
                   help="Język komunikatów błędów")
    p.add_argument("--steps", "-s", action="store_true",
                   help="Wyświetl kroki redukcji")

    # postfix
    p = sub.add_parser("postfix", help="Wypisz sekwencję postfiksową")
    p.add_argument("--json", "-j", help="Drzewo w postaci JSON (lub stdin)")
    p.add_argument("--file", "-f", help="Ścieżka do pliku JSON z drzewem")

    # demo
    p = sub.add_parser("demo", help="Policz wbudowane przykłady")
    p.add_argument("--locale", choices=available_locales())

    args = parser.parse_args(argv)

    settings = Settings()
    logging.basicConfig(level=settings.log_level.upper())

    commands = {
        "eval":    _eval,
        "postfix": _postfix,
        "demo":    _demo,
    }
    return commands[args.command](args, settings)


if __name__ == "__main__":
    sys.exit(main())
