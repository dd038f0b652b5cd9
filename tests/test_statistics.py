import numpy as np
import pytest

from easyfit.fitting.statistics import calculate_statistics, format_statistics, pearson_r


def test_perfect_fit():
    y = np.array([1.0, 3.0, 5.0, 7.0])
    stats = calculate_statistics(y, y, 2)
    assert stats['r_squared'] == 1.0
    assert stats['chi_squared'] == 0.0
    assert stats['rmse'] == 0.0
    assert stats['aic'] == -np.inf
    assert stats['pearson_r'] == pytest.approx(1.0)
    assert stats['dof'] == 2


def test_statistics_values():
    y = np.array([1.0, 2.0, 3.0, 4.0, 5.0])
    y_fit = np.array([1.1, 1.9, 3.2, 3.8, 5.0])
    stats = calculate_statistics(y, y_fit, 2)
    ss_res = 0.01 + 0.01 + 0.04 + 0.04
    assert stats['chi_squared'] == pytest.approx(ss_res)
    assert stats['r_squared'] == pytest.approx(1 - ss_res / 10.0)
    assert stats['adj_r_squared'] == pytest.approx(1 - (ss_res / 10.0) * 4 / 2)
    assert stats['reduced_chi_squared'] == pytest.approx(ss_res / 3)
    assert stats['rmse'] == pytest.approx(np.sqrt(ss_res / 5))
    assert stats['aic'] == pytest.approx(5 * np.log(ss_res / 5) + 4)
    assert stats['bic'] == pytest.approx(5 * np.log(ss_res / 5) + 2 * np.log(5))
    assert stats['n_data'] == 5


def test_no_degrees_of_freedom():
    stats = calculate_statistics([1.0, 2.0], [1.5, 1.5], 2)
    assert stats['reduced_chi_squared'] == np.inf
    assert stats['adj_r_squared'] == stats['r_squared']


def test_pearson_r():
    assert pearson_r([1.0, 2.0, 3.0], [2.0, 4.0, 6.0]) == pytest.approx(1.0)
    assert pearson_r([1.0, 2.0, 3.0], [3.0, 2.0, 1.0]) == pytest.approx(-1.0)
    assert np.isnan(pearson_r([1.0, 2.0, 3.0], [2.0, 2.0, 2.0]))
    assert np.isnan(pearson_r([1.0], [1.0]))


def test_format_statistics():
    text = format_statistics(calculate_statistics([1.0, 2.0, 3.0], [1.0, 2.1, 2.9], 2))
    lines = text.splitlines()
    assert lines[0] == "=== Fit Statistics ==="
    assert any(line.startswith("R² = ") for line in lines)
    assert any(line.startswith("Pearson R = ") for line in lines)
    assert lines[-1] == "Degrees of freedom = 1"
