# -*- coding: utf-8 -*-
"""
absence/automaton.py
KMP 失败函数 + 数字字母表上的完整转移表。

状态 s in 0..m 表示“已匹配的最长前缀长度”；状态 m 为吸收态（已找到），
不作为表中的行出现，只作为转移目标。
"""
from __future__ import annotations
from typing import List

from .pattern import Pattern, PatternLike

ALPHABET = 10

__all__ = ["ALPHABET", "failure_function", "build_automaton"]


def failure_function(pattern: PatternLike) -> List[int]:
    pat = Pattern.parse(pattern).digits
    m = len(pat)
    fail = [0] * m
    j = 0
    for i in range(1, m):
        while j > 0 and pat[i] != pat[j]:
            j = fail[j - 1]
        if pat[i] == pat[j]:
            j += 1
            fail[i] = j
    return fail


def build_automaton(pattern: PatternLike) -> List[List[int]]:
    """
    返回 m x 10 的表 trans[s][d]。
    失败链接只指向更小的状态，所以按 s 递增填表即可直接复用已算出的行。
    """
    pat = Pattern.parse(pattern).digits
    m = len(pat)
    fail = failure_function(pat)
    trans = [[0] * ALPHABET for _ in range(m)]
    for s in range(m):
        for d in range(ALPHABET):
            if d == pat[s]:
                trans[s][d] = s + 1
            elif s > 0:
                trans[s][d] = trans[fail[s - 1]][d]
            else:
                trans[s][d] = 0
    return trans
