# -*- coding: utf-8 -*-
"""
absence/ops.py
矩阵乘法后端：loop（纯 Python 三重循环）、numpy（float64）、torch（cpu/cuda）、exact（Fraction）。
每个后端提供 prepare / identity / matmul / row0_sum，供 matrix.mat_pow 复用同一套快速幂逻辑。
"""
from __future__ import annotations
from fractions import Fraction
from typing import Optional

import numpy as np
import torch

from . import config
from .matrix import identity as _identity_lists, mat_mul as _mat_mul_lists
from .logging_setup import get_logger

logger = get_logger(__name__)

__all__ = ["MatOps", "LoopOps", "NumpyOps", "TorchOps", "ExactOps", "make_ops", "resolve_device"]


class MatOps:
    name = "base"

    def prepare(self, M: np.ndarray):
        return M

    def identity(self, n: int):
        raise NotImplementedError

    def matmul(self, A, B):
        raise NotImplementedError

    def row0_sum(self, P) -> float:
        raise NotImplementedError


class LoopOps(MatOps):
    name = "loop"

    def prepare(self, M):
        return np.asarray(M, dtype=np.float64).tolist()

    def identity(self, n):
        return _identity_lists(n)

    def matmul(self, A, B):
        return _mat_mul_lists(A, B)

    def row0_sum(self, P):
        return float(sum(P[0]))


class NumpyOps(MatOps):
    name = "numpy"

    def prepare(self, M):
        return np.asarray(M, dtype=np.float64)

    def identity(self, n):
        return np.eye(n, dtype=np.float64)

    def matmul(self, A, B):
        return A @ B

    def row0_sum(self, P):
        return float(P[0].sum())


def resolve_device(device: Optional[str]) -> torch.device:
    dev = (device or config.DEFAULT_DEVICE).strip().lower()
    if dev.startswith("cuda") and not torch.cuda.is_available():
        logger.warning(f"[ops] device={dev} requested but CUDA is unavailable; using cpu")
        dev = "cpu"
    try:
        return torch.device(dev)
    except RuntimeError as exc:
        raise ValueError(f"unknown torch device '{device}'") from exc


class TorchOps(MatOps):
    name = "torch"

    def __init__(self, device: Optional[str] = None, dtype: torch.dtype = torch.float64):
        self.device = resolve_device(device); self.dtype = dtype

    def prepare(self, M):
        arr = np.asarray(M, dtype=np.float64)
        return torch.from_numpy(arr).to(device=self.device, dtype=self.dtype)

    def identity(self, n):
        return torch.eye(n, dtype=self.dtype, device=self.device)

    @torch.no_grad()
    def matmul(self, A, B):
        return A @ B

    def row0_sum(self, P):
        return float(P[0].sum().item())


class ExactOps(MatOps):
    """有理数精确后端：object 数组的 Fraction，结果无浮点漂移。"""
    name = "exact"

    def prepare(self, M):
        M = np.asarray(M, dtype=object)
        out = np.empty(M.shape, dtype=object)
        for idx, v in np.ndenumerate(M):
            out[idx] = v if isinstance(v, Fraction) else Fraction(v).limit_denominator(10)
        return out

    def identity(self, n):
        eye = np.full((n, n), Fraction(0), dtype=object)
        for i in range(n):
            eye[i, i] = Fraction(1)
        return eye

    def matmul(self, A, B):
        return A @ B

    def row0_sum(self, P):
        return sum(P[0].tolist(), Fraction(0))


def make_ops(backend: Optional[str] = None, device: Optional[str] = None) -> MatOps:
    b = config.normalize_backend(backend)
    if b == "loop":
        return LoopOps()
    if b == "torch":
        return TorchOps(device=device)
    if b == "exact":
        return ExactOps()
    return NumpyOps()
