from __future__ import annotations

from dataclasses import dataclass
from typing import List

BF_OPS = frozenset("+-<>[],.")


@dataclass(frozen=True)
class Token:
    symbol: str
    line: int    # 1-based
    column: int  # 1-based


def strip_comments(code: str) -> str:
    """Drop every character that is not one of the 8 symbols."""
    return "".join(ch for ch in code if ch in BF_OPS)


def tokenize(code: str) -> List[Token]:
    tokens: List[Token] = []
    line = 1
    column = 0
    for ch in code:
        if ch == '\n':
            line += 1
            column = 0
            continue
        column += 1
        if ch in BF_OPS:
            tokens.append(Token(ch, line, column))
    return tokens
