import math

import pytest

from absence.errors import InvalidExponent, InvalidPattern
from absence.estimator import (
    absence_curve,
    discovery_percentage,
    expected_waiting_time,
    found_probability,
    log_grid,
    not_found_probability,
)


@pytest.mark.parametrize("pattern", ["7", "11", "121", "0314159265", "0" * 40])
def test_zero_digits_means_certainly_absent(pattern):
    assert not_found_probability(pattern, 0) == 1.0


@pytest.mark.parametrize("n", [0, 1, 2, 5, 17, 100, 1000])
def test_single_digit_is_geometric(n):
    assert math.isclose(not_found_probability("7", n), 0.9 ** n, rel_tol=1e-9, abs_tol=1e-300)


def test_two_digit_pattern_short_prefixes():
    assert not_found_probability("11", 1) == pytest.approx(1.0, abs=1e-12)
    assert not_found_probability("11", 2) == pytest.approx(0.99, abs=1e-12)


@pytest.mark.parametrize("pattern", ["7", "11", "121", "1212", "0314"])
def test_monotone_in_digit_count(pattern):
    values = [not_found_probability(pattern, n) for n in [0, 1, 2, 3, 5, 8, 13, 50, 10**3, 10**5, 10**8]]
    for a, b in zip(values, values[1:]):
        assert b <= a + 1e-12
    assert all(0.0 <= v <= 1.0 for v in values)


def test_large_digit_count_non_overlapping_pattern():
    # 不自重叠的 10 位模式：期望等待 10^10 位，N = 10^10 时缺席概率约 e^-1
    p = not_found_probability("0314159265", 10**10)
    assert p == pytest.approx(math.exp(-1.0), abs=1e-3)


def test_long_pattern_at_default_scale_is_almost_surely_absent():
    # 40 位模式在 10^10 位内几乎不可能出现；容差覆盖 0.1 累加带来的浮点漂移
    p = not_found_probability("0704111114" * 4, 10**10)
    assert p == pytest.approx(1.0, abs=1e-3)


def test_repeated_calls_are_identical():
    a = not_found_probability("123123", 987654321)
    b = not_found_probability("123123", 987654321)
    assert a == b


def test_found_and_percentage_are_complements():
    p = not_found_probability("42", 100)
    assert found_probability("42", 100) == pytest.approx(1.0 - p)
    assert discovery_percentage("42", 100) == pytest.approx(100.0 * (1.0 - p))


@pytest.mark.parametrize(
    "pattern, expected",
    [("7", 10.0), ("11", 110.0), ("12", 100.0), ("121", 1010.0), ("000", 1110.0)],
)
def test_expected_waiting_time(pattern, expected):
    assert expected_waiting_time(pattern) == pytest.approx(expected, rel=1e-9)


@pytest.mark.parametrize("n", [-1, -10**10])
def test_negative_digit_count_rejected(n):
    with pytest.raises(InvalidExponent):
        not_found_probability("7", n)


@pytest.mark.parametrize("n", [2.5, 1.0, "10", None, True])
def test_non_integer_digit_count_rejected(n):
    with pytest.raises(InvalidExponent):
        not_found_probability("7", n)


@pytest.mark.parametrize("pattern", ["", "3.14", "pi", [3, 14]])
def test_invalid_pattern_rejected(pattern):
    with pytest.raises(InvalidPattern):
        not_found_probability(pattern, 10)


def test_errors_are_value_errors():
    with pytest.raises(ValueError):
        not_found_probability("", 10)
    with pytest.raises(ValueError):
        not_found_probability("1", -1)


def test_log_grid_shape():
    grid = log_grid(100, 5)
    assert grid[0] == 0 and grid[-1] == 100
    assert grid == sorted(set(grid))
    assert log_grid(0, 10) == [0]
    assert log_grid(50, 1) == [0, 50]


def test_absence_curve_rows():
    rows = absence_curve("11", [0, 1, 2])
    assert [r["n"] for r in rows] == [0, 1, 2]
    assert rows[0]["p_absent"] == 1.0
    assert rows[2]["p_absent"] == pytest.approx(0.99)
    assert rows[2]["p_found"] == pytest.approx(0.01)
    assert all(r["pattern"] == "11" and r["m"] == 2 for r in rows)


@pytest.mark.parametrize(
    "pattern, expected",
    [
        ("1234567890123456", 10**16 + 10**6),
        ("0" * 20, sum(10**k for k in range(1, 21))),
        ("0704111114" * 4, 10**40 + 10**30 + 10**20 + 10**10),
        ("0" * 40, sum(10**k for k in range(1, 41))),
    ],
)
def test_expected_waiting_time_long_patterns_exact(pattern, expected):
    assert expected_waiting_time(pattern) == expected


def test_expected_waiting_time_is_exact_integer():
    wait = expected_waiting_time("1213121")
    assert isinstance(wait, int)
    # 边界 1213121 -> 121 -> 1
    assert wait == 10**7 + 10**3 + 10


def test_backend_is_logged_at_debug(caplog):
    import logging

    with caplog.at_level(logging.DEBUG, logger="absence"):
        not_found_probability("11", 5, backend="loop")
    assert any("backend=loop" in r.getMessage() for r in caplog.records)
