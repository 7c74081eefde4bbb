from fractions import Fraction

import pytest

from absence import config
from absence.errors import InvalidExponent
from absence.estimator import not_found_probability
from absence.ops import ExactOps, LoopOps, NumpyOps, TorchOps, make_ops


@pytest.mark.parametrize("pattern", ["7", "121", "1212", "0314"])
@pytest.mark.parametrize("n", [0, 1, 7, 50, 1000])
def test_backends_agree(pattern, n):
    ref = not_found_probability(pattern, n, backend="numpy")
    for backend in ("loop", "torch", "exact"):
        got = not_found_probability(pattern, n, backend=backend, device="cpu")
        assert got == pytest.approx(ref, rel=1e-9, abs=1e-15), backend


def test_exact_backend_is_bit_exact():
    assert not_found_probability("7", 5, backend="exact") == float(Fraction(9, 10) ** 5)
    assert not_found_probability("11", 2, backend="exact") == 0.99


def test_exact_backend_cap(monkeypatch):
    monkeypatch.setattr(config, "EXACT_MAX_DIGITS", 10)
    assert not_found_probability("7", 10, backend="exact") == float(Fraction(9, 10) ** 10)
    with pytest.raises(InvalidExponent):
        not_found_probability("7", 11, backend="exact")


def test_make_ops_aliases():
    assert isinstance(make_ops("numpy"), NumpyOps)
    assert isinstance(make_ops("py"), LoopOps)
    assert isinstance(make_ops("rational"), ExactOps)
    assert isinstance(make_ops("torch", device="cpu"), TorchOps)
    with pytest.raises(ValueError):
        make_ops("cupy")


def test_torch_falls_back_to_cpu(monkeypatch):
    import torch

    monkeypatch.setattr(torch.cuda, "is_available", lambda: False)
    ops = TorchOps(device="cuda")
    assert ops.device.type == "cpu"
    assert not_found_probability("11", 2, backend="torch", device="cuda") == pytest.approx(0.99)


def test_unknown_torch_device_is_value_error():
    with pytest.raises(ValueError):
        not_found_probability("11", 2, backend="torch", device="bogus")
