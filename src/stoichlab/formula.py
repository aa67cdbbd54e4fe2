"""Chemical formula normalization and parsing.

Formulas are read leniently: characters that cannot be classified are
skipped and malformed parentheses degrade to a best-effort composition
instead of raising.
"""

from __future__ import annotations

import re
from typing import Dict, List

from stoichlab.constants import PHASE_TAGS

SUBSCRIPT_DIGITS = "₀₁₂₃₄₅₆₇₈₉"
_TO_ASCII = str.maketrans(SUBSCRIPT_DIGITS, "0123456789")
_TO_SUBSCRIPT = str.maketrans("0123456789", SUBSCRIPT_DIGITS)
_WHITESPACE = re.compile(r"\s+")
_PHASE_SUFFIX = re.compile(r"\((%s)\)$" % "|".join(PHASE_TAGS))


def normalize_formula(text: str) -> str:
    """Convert subscript digits to ASCII and drop all whitespace."""
    return _WHITESPACE.sub("", text.translate(_TO_ASCII))


def to_subscripts(formula: str) -> str:
    return formula.translate(_TO_SUBSCRIPT)


def split_phase(formula: str) -> tuple[str, str | None]:
    """Split a trailing phase tag such as ``(aq)`` off a normalized formula."""
    match = _PHASE_SUFFIX.search(formula)
    if match is None or match.start() == 0:
        return formula, None
    return formula[: match.start()], match.group(1)


def _read_digits(text: str, index: int) -> tuple[int | None, int]:
    start = index
    while index < len(text) and "0" <= text[index] <= "9":
        index += 1
    if index == start:
        return None, index
    return int(text[start:index]), index


def _fold(target: Dict[str, int], group: Dict[str, int], multiplier: int) -> None:
    for element, count in group.items():
        target[element] = target.get(element, 0) + count * multiplier


def parse_formula_counts(formula: str) -> Dict[str, int]:
    """Return element counts for a formula such as ``Ca(OH)2`` or ``H₂O``.

    Never raises. An unmatched ``)`` is ignored and groups left open at the
    end of the input are folded in with a multiplier of 1. Unknown element
    symbols are kept in the result.
    """
    text = normalize_formula(formula)
    stack: List[Dict[str, int]] = [{}]
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == "(":
            stack.append({})
            i += 1
        elif ch == ")":
            multiplier, i = _read_digits(text, i + 1)
            if len(stack) == 1:
                continue
            group = stack.pop()
            _fold(stack[-1], group, 1 if multiplier is None else multiplier)
        elif "A" <= ch <= "Z":
            i += 1
            start = i - 1
            while i < len(text) and "a" <= text[i] <= "z":
                i += 1
            symbol = text[start:i]
            count, i = _read_digits(text, i)
            top = stack[-1]
            top[symbol] = top.get(symbol, 0) + (1 if count is None else count)
        else:
            i += 1

    while len(stack) > 1:
        group = stack.pop()
        _fold(stack[-1], group, 1)
    return stack[0]
