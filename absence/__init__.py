# -*- coding: utf-8 -*-
"""Probability that a digit pattern is absent from the first N random digits."""

from .errors import AbsenceError, InvalidPattern, InvalidExponent
from .pattern import Pattern
from .automaton import failure_function, build_automaton
from .matrix import build_matrix, match_deficits
from .estimator import (
    not_found_probability,
    found_probability,
    discovery_percentage,
    expected_waiting_time,
    absence_curve,
    log_grid,
)

__all__ = [
    "AbsenceError",
    "InvalidPattern",
    "InvalidExponent",
    "Pattern",
    "failure_function",
    "build_automaton",
    "build_matrix",
    "match_deficits",
    "not_found_probability",
    "found_probability",
    "discovery_percentage",
    "expected_waiting_time",
    "absence_curve",
    "log_grid",
]
