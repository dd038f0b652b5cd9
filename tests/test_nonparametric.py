import numpy as np
import pytest

from easyfit.nonparametric import fit_density, moving_average


def test_moving_average_truncates_windows_at_the_ends():
    x = np.arange(5.0)
    y = np.array([1.0, 2.0, 6.0, 4.0, 5.0])
    avg = moving_average(x, y, 3)
    np.testing.assert_allclose(avg.y, [1.5, 3.0, 4.0, 5.0, 4.5])
    np.testing.assert_allclose(avg.residues, y - avg.y)
    np.testing.assert_array_equal(avg.x, x)
    assert -1.0 <= avg.R <= 1.0


def test_moving_average_even_window_is_widened():
    x = np.arange(6.0)
    avg = moving_average(x, 2 * x, 4)
    assert avg.n == 5
    assert avg.y[2] == pytest.approx(4.0)
    assert "Moving Average" in str(avg)


def test_moving_average_window_larger_than_data():
    avg = moving_average([0.0, 1.0, 2.0], [3.0, 6.0, 9.0], 11)
    np.testing.assert_allclose(avg.y, [6.0, 6.0, 6.0])


def test_moving_average_rejects_bad_window():
    with pytest.raises(ValueError):
        moving_average([0.0, 1.0], [0.0, 1.0], 0)


def test_density_counts():
    values = np.array([0.0, 0.1, 0.2, 0.6, 0.9, 1.0])
    d = fit_density(values, nbins=2, norm=0)
    np.testing.assert_allclose(d.x, [0.25, 0.75])
    # window (x - 0.25, x + 0.25]
    np.testing.assert_array_equal(d.d, [2.0, 3.0])
    assert d.step == pytest.approx(0.5)


def test_density_is_a_probability():
    rng = np.random.default_rng(0)
    d = fit_density(rng.normal(size=20000), nbins=50)
    binstep = d.x[1] - d.x[0]
    assert np.sum(d.d) * binstep == pytest.approx(1.0, abs=0.01)
    assert d.x[np.argmax(d.d)] == pytest.approx(0.0, abs=0.5)
    assert "probability of finding" in str(d)


def test_density_relative_step():
    d = fit_density(np.linspace(0.0, 1.0, 11), nbins=10, step=2, steptype='relative')
    assert d.step == pytest.approx(0.2)


@pytest.mark.parametrize('kwargs', [
    {'steptype': 'percent', 'step': 1.0},
    {'norm': 2},
    {'vmin': 1.0, 'vmax': 1.0},
])
def test_density_rejects_bad_options(kwargs):
    with pytest.raises(ValueError):
        fit_density([0.0, 1.0, 2.0], **kwargs)
