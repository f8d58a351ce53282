"""
messages.py - Katalog komunikatów błędów arytmetycznych.

Kod błędu → tekst dla danego języka. Nieznany kod nie jest błędem:
zwracany jest komunikat zastępczy.
"""
from __future__ import annotations

DEFAULT_LOCALE = "en"

UNKNOWN_CODE = -1

MESSAGES: dict[str, dict[int, str]] = {
    "en": {
        0: "Success.",
        1: "No solution: division by zero.",
        UNKNOWN_CODE: "Unknown error code.",
    },
    "ja": {
        0: "成功しました。",
        1: "解無し：ゼロ除算が発生しました。",
        UNKNOWN_CODE: "存在しないエラーコードが指定されました。",
    },
}


def available_locales() -> list[str]:
    return sorted(MESSAGES)


def resolve_message(code: int, locale: str = DEFAULT_LOCALE) -> str:
    catalog = MESSAGES.get(locale) or MESSAGES[DEFAULT_LOCALE]
    return catalog.get(code, catalog[UNKNOWN_CODE])
