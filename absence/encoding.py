# -*- coding: utf-8 -*-
"""
absence/encoding.py
调用方的输入规整：字母 -> 两位数字（A=00 或 A=01，由 letter_base 决定），数字模式原样通过。
"""

from __future__ import annotations
from typing import Optional

from . import config
from .errors import InvalidPattern


def phrase_to_digits(phrase: str, letter_base: Optional[int] = None) -> str:
    """
    "HELLO" -> "0704111114" (base 0) / "0805121215" (base 1).
    Non-letters are dropped; returns "" when nothing is left.
    """
    base = config.normalize_letter_base(letter_base)
    out = []
    for ch in phrase.upper():
        if "A" <= ch <= "Z":
            out.append(f"{ord(ch) - ord('A') + base:02d}")
    return "".join(out)


def digits_only(text: str) -> str:
    s = text.strip()
    if not s or any(ch not in "0123456789" for ch in s):
        raise InvalidPattern("please enter numbers only (0-9)")
    return s


def normalize_query(text: str, letters: bool = False, letter_base: Optional[int] = None) -> str:
    if not letters:
        return digits_only(text)
    digits = phrase_to_digits(text, letter_base)
    if not digits:
        raise InvalidPattern("phrase must contain at least one letter")
    return digits


__all__ = ["phrase_to_digits", "digits_only", "normalize_query"]
