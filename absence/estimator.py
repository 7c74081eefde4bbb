# -*- coding: utf-8 -*-
"""
absence/estimator.py
模式缺席概率：P(模式不出现在前 N 位 i.i.d. 均匀数字中)。

    not_found_probability(p, N) = sum_j (M^N)[0, j]

初始分布是状态 0 上的单位质量，因此结果向量就是 M^N 的第 0 行。
复杂度 O(m^3 log N)，N 可到 10^10 及以上。
"""
from __future__ import annotations
import math
import numbers
from fractions import Fraction
from typing import Dict, Iterable, List, Optional

import numpy as np

from . import config
from .errors import InvalidExponent
from .automaton import failure_function
from .matrix import build_matrix, mat_pow
from .ops import make_ops
from .pattern import Pattern, PatternLike
from .logging_setup import get_logger

logger = get_logger(__name__)

__all__ = [
    "check_digits",
    "not_found_probability",
    "found_probability",
    "discovery_percentage",
    "expected_waiting_time",
    "log_grid",
    "absence_curve",
]


def check_digits(n) -> int:
    if isinstance(n, bool) or not isinstance(n, numbers.Integral):
        raise InvalidExponent(f"digit count must be a non-negative integer, got {n!r}")
    n = int(n)
    if n < 0:
        raise InvalidExponent(f"digit count must be non-negative, got {n}")
    return n


def not_found_probability(pattern: PatternLike, n: int,
                          backend: Optional[str] = None,
                          device: Optional[str] = None) -> float:
    """
    Probability that ``pattern`` does not occur in the first ``n`` uniform random digits.

    backend: "numpy" (default) | "loop" | "torch" | "exact"; see :mod:`absence.ops`.
    """
    pat = Pattern.parse(pattern)
    n = check_digits(n)
    ops = make_ops(backend, device=device)
    if ops.name == "exact" and n > config.EXACT_MAX_DIGITS:
        raise InvalidExponent(
            f"exact backend supports n <= {config.EXACT_MAX_DIGITS}, got {n}; use a float backend")
    if n == 0:
        return 1.0

    logger.debug(f"[estimate] pattern={pat} m={pat.m} n={n} backend={ops.name}")
    M = build_matrix(pat, exact=(ops.name == "exact"))
    P = mat_pow(ops.prepare(M), n, mul=ops.matmul, eye=ops.identity)
    p = ops.row0_sum(P)
    if isinstance(p, Fraction):
        return float(p)
    # 浮点累加 0.1 的漂移可能让结果略超出 [0, 1]
    return min(1.0, max(0.0, p))


def found_probability(pattern: PatternLike, n: int,
                      backend: Optional[str] = None,
                      device: Optional[str] = None) -> float:
    return 1.0 - not_found_probability(pattern, n, backend=backend, device=device)


def discovery_percentage(pattern: PatternLike, n: int,
                         backend: Optional[str] = None,
                         device: Optional[str] = None) -> float:
    """(1 - p) * 100, the figure callers show as the chance of finding the pattern."""
    return 100.0 * found_probability(pattern, n, backend=backend, device=device)


def expected_waiting_time(pattern: PatternLike) -> int:
    """
    首次出现前期望读取的数字个数：E[T] = sum_{k in borders} 10^k，
    borders 为沿失败函数从 m 回退得到的全部边界长度（含 m 本身）。
    对 "7" 为 10，对 "11" 为 110，对 "12" 为 100。
    返回精确整数。
    """
    pat = Pattern.parse(pattern)
    fail = failure_function(pat)
    total = 0
    k = pat.m
    while k > 0:
        total += 10 ** k
        k = fail[k - 1]
    return total


def log_grid(n_max: int, points: Optional[int] = None) -> List[int]:
    """0 加上 [1, n_max] 上按对数间隔取的去重整数点。"""
    n_max = check_digits(n_max)
    points = config.CURVE_POINTS if points is None else int(points)
    if n_max == 0 or points <= 1:
        return sorted({0, n_max})
    raw = np.logspace(0.0, math.log10(n_max), num=points - 1)
    grid = {0, n_max}
    grid.update(int(round(x)) for x in raw)
    return sorted(v for v in grid if 0 <= v <= n_max)


def absence_curve(pattern: PatternLike, n_values: Iterable[int],
                  backend: Optional[str] = None,
                  device: Optional[str] = None) -> List[Dict]:
    pat = Pattern.parse(pattern)
    rows: List[Dict] = []
    for n in n_values:
        p = not_found_probability(pat, n, backend=backend, device=device)
        rows.append({
            "pattern": str(pat),
            "m": pat.m,
            "n": int(n),
            "p_absent": p,
            "p_found": 1.0 - p,
        })
    logger.debug(f"[curve] pattern={pat} points={len(rows)}")
    return rows
