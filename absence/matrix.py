# -*- coding: utf-8 -*-
"""
absence/matrix.py
暂态转移矩阵（m x m，次随机）与通用的矩阵工具：单位阵、三重循环乘法、二进制快速幂。
"""
from __future__ import annotations
from fractions import Fraction
from typing import Callable, List, Sequence

import numpy as np

from .automaton import ALPHABET, build_automaton
from .pattern import Pattern, PatternLike
from .logging_setup import get_logger

logger = get_logger(__name__)

__all__ = [
    "DIGIT_PROB",
    "build_matrix",
    "match_deficits",
    "identity",
    "mat_mul",
    "mat_pow",
]

DIGIT_PROB = 0.1


# ---------------- 马尔可夫矩阵 ----------------
def build_matrix(pattern: PatternLike, exact: bool = False) -> np.ndarray:
    """
    M[s, t] = P(一位随机数字把暂态 s 送到暂态 t)。
    走到吸收态 m 的概率不记入矩阵，所以每行和 = 1 - 0.1 * (该状态下完成匹配的数字个数)。
    exact=True 时条目为 Fraction(1, 10) 的倍数（object 数组），否则为 float64。
    """
    pat = Pattern.parse(pattern)
    m = pat.m
    trans = build_automaton(pat)
    if exact:
        step = Fraction(1, ALPHABET)
        M = np.full((m, m), Fraction(0), dtype=object)
    else:
        step = DIGIT_PROB
        M = np.zeros((m, m), dtype=np.float64)
    for s in range(m):
        for d in range(ALPHABET):
            nxt = trans[s][d]
            if nxt < m:
                M[s, nxt] += step
    return M


def match_deficits(pattern: PatternLike) -> List[int]:
    """每个暂态下，直接完成匹配（转到状态 m）的数字个数。"""
    pat = Pattern.parse(pattern)
    trans = build_automaton(pat)
    return [sum(1 for nxt in row if nxt == pat.m) for row in trans]


# ---------------- 通用矩阵工具 ----------------
def identity(n: int, one=1.0, zero=0.0) -> List[list]:
    return [[one if i == j else zero for j in range(n)] for i in range(n)]


def mat_mul(A: Sequence[Sequence], B: Sequence[Sequence]) -> List[list]:
    n = len(A)
    res = [[0] * n for _ in range(n)]
    for i in range(n):
        Ai = A[i]; Ri = res[i]
        for k in range(n):
            a = Ai[k]
            if a == 0:
                continue
            Bk = B[k]
            for j in range(n):
                Ri[j] += a * Bk[j]
    return res


def mat_pow(M, exp: int,
            mul: Callable = mat_mul,
            eye: Callable[[int], object] = identity):
    """
    二进制快速幂：res 从单位阵开始，base 从 M 开始；
    exp 低位为 1 时 res = res * base，随后 base 平方、exp 折半，直到 exp 为 0。
    mul / eye 可换成 numpy、torch 或有理数版本（见 absence.ops）。
    """
    res = eye(len(M))
    base = M
    mults = 0
    while exp > 0:
        if exp & 1:
            res = mul(res, base); mults += 1
        base = mul(base, base); mults += 1
        exp //= 2
    logger.debug(f"[mat_pow] size={len(M)} multiplications={mults}")
    return res
