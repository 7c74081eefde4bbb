# -*- coding: utf-8 -*-
"""
absence/pattern.py
不可变的数字模式：每个符号为 0..9，长度 m >= 1。
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Sequence, Tuple, Union

from .errors import InvalidPattern

_DIGITS = "0123456789"

PatternLike = Union["Pattern", str, Sequence[int]]


@dataclass(frozen=True)
class Pattern:
    digits: Tuple[int, ...]

    def __post_init__(self):
        object.__setattr__(self, "digits", tuple(self.digits))
        if len(self.digits) == 0:
            raise InvalidPattern("pattern must contain at least one digit")
        for pos, d in enumerate(self.digits):
            if isinstance(d, bool) or not isinstance(d, int) or not 0 <= d <= 9:
                raise InvalidPattern(f"symbol {d!r} at position {pos} is not a digit 0-9")

    @classmethod
    def parse(cls, value: PatternLike) -> "Pattern":
        """Accept a Pattern, a digit string such as ``"0314"``, or a sequence of ints."""
        if isinstance(value, Pattern):
            return value
        if isinstance(value, str):
            bad = [ch for ch in value if ch not in _DIGITS]
            if bad:
                raise InvalidPattern(f"pattern contains non-digit symbols: {''.join(bad)!r}")
            return cls(tuple(_DIGITS.index(ch) for ch in value))
        if isinstance(value, (bytes, bytearray)):
            raise InvalidPattern("pattern must be str or a sequence of ints, got bytes")
        try:
            items = tuple(value)
        except TypeError as exc:
            raise InvalidPattern(f"cannot read a pattern from {type(value).__name__}") from exc
        return cls(items)

    @property
    def m(self) -> int:
        return len(self.digits)

    def __len__(self) -> int:
        return len(self.digits)

    def __getitem__(self, i):
        return self.digits[i]

    def __str__(self) -> str:
        return "".join(_DIGITS[d] for d in self.digits)


__all__ = ["Pattern", "PatternLike"]
