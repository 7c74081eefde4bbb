# -*- coding: utf-8 -*-
"""Precondition failures raised by the estimator."""

from __future__ import annotations


class AbsenceError(ValueError):
    pass


class InvalidPattern(AbsenceError):
    """Empty pattern, or a symbol outside 0..9."""


class InvalidExponent(AbsenceError):
    """Digit count that is negative, not an integer, or above the exact-backend cap."""


__all__ = ["AbsenceError", "InvalidPattern", "InvalidExponent"]
