# -*- coding: utf-8 -*-
"""
absence/config.py
全局轻量配置：默认位数、字母编码基数、计算后端、输出目录等。
"""

from __future__ import annotations
from pathlib import Path
import os

from typing import Optional

# 搜索空间大小（调用方常量：10^9 或 10^10，均非权威）
DEFAULT_DIGITS = int(float(os.getenv("ABSENCE_DIGITS", "1e10")))

# 字母 -> 两位数字编码的起点：0 表示 A=00，1 表示 A=01
LETTER_BASE = int(os.getenv("ABSENCE_LETTER_BASE", "0"))

# 矩阵乘法后端（loop|numpy|torch|exact）
DEFAULT_BACKEND = os.getenv("ABSENCE_BACKEND", "numpy")

# torch 后端设备（不可用时回落到 cpu）
DEFAULT_DEVICE = os.getenv("ABSENCE_DEVICE", "cpu")

# exact 后端的分母为 10^N，N 过大时位数爆炸
EXACT_MAX_DIGITS = int(os.getenv("ABSENCE_EXACT_MAX_DIGITS", "4096"))

# 视觉风格（viz.apply_style 支持的枚举）
DEFAULT_STYLE = os.getenv("ABSENCE_STYLE", "default")

# 结果根目录（各 CLI 可覆盖）
RESULTS_ROOT = Path(os.getenv("ABSENCE_RESULTS_ROOT", "./results")).resolve()
OUT_CSV_DEFAULT = RESULTS_ROOT / "out_csv"
OUT_FIG_DEFAULT = RESULTS_ROOT / "figs"

# 曲线默认采样点数
CURVE_POINTS = int(os.getenv("ABSENCE_CURVE_POINTS", "40"))

# -------------------------
# 参数规范化 / 校验
# -------------------------

_BACKEND_CHOICES = {"loop", "numpy", "torch", "exact"}
_STYLE_CHOICES = {"default", "ieee", "acm", "nature"}
_LETTER_BASE_CHOICES = {0, 1}


def normalize_backend(backend: Optional[str]) -> str:
    b = (backend or DEFAULT_BACKEND).strip().lower()
    if b in ("np", "float", "float64"):
        b = "numpy"
    elif b in ("python", "py", "naive"):
        b = "loop"
    elif b in ("fraction", "fractions", "rational"):
        b = "exact"
    if b not in _BACKEND_CHOICES:
        raise ValueError(f"backend must be one of {sorted(_BACKEND_CHOICES)}, got '{backend}'")
    return b


def normalize_style(style: Optional[str]) -> str:
    s = (style or DEFAULT_STYLE).strip().lower()
    if s not in _STYLE_CHOICES:
        raise ValueError(f"style must be one of {sorted(_STYLE_CHOICES)}, got '{style}'")
    return s


def normalize_letter_base(base: Optional[int]) -> int:
    b = LETTER_BASE if base is None else base
    try:
        b = int(b)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"letter_base must be 0 or 1, got '{base}'") from exc
    if b not in _LETTER_BASE_CHOICES:
        raise ValueError(f"letter_base must be 0 or 1, got '{base}'")
    return b


__all__ = [
    "DEFAULT_DIGITS",
    "LETTER_BASE",
    "DEFAULT_BACKEND",
    "DEFAULT_DEVICE",
    "EXACT_MAX_DIGITS",
    "DEFAULT_STYLE",
    "RESULTS_ROOT",
    "OUT_CSV_DEFAULT",
    "OUT_FIG_DEFAULT",
    "CURVE_POINTS",
    "normalize_backend",
    "normalize_style",
    "normalize_letter_base",
]
