"""
Model-free summaries of data: moving averages and density estimates.
"""

from dataclasses import dataclass

import numpy as np

from .data_preprocessing import check_data
from .fitting.statistics import pearson_r


@dataclass(frozen=True)
class MovingAverage:
    """Centered moving average of y and its agreement with the data."""
    n: int
    x: np.ndarray
    y: np.ndarray
    R: float
    residues: np.ndarray

    def __str__(self):
        return "\n".join([
            " ------------------- Moving Average ---------- ",
            f" Number of points averaged: {self.n} (± {(self.n - 1) // 2} points)",
            f" Pearson correlation coefficient, R = {self.R}",
            f" Averaged Y: y = [{self.y[0]}, {self.y[1]}...",
            f" residues = [{self.residues[0]}, {self.residues[1]}...",
            " -------------------------------------------- ",
        ])


def moving_average(x, y, n):
    """
    Average every y over a centered window of ``n`` points.

    Parameters
    ----------
    x : array_like
        X-axis data, returned unchanged in the result
    y : array_like
        Y-axis data
    n : int
        Window size; even values are increased by one. Windows are
        truncated at the ends of the data.

    Returns
    -------
    MovingAverage
        Averaged y, residues ``y - average`` and the Pearson R between them
    """
    if n < 1:
        raise ValueError(f"Window size must be at least 1, got {n}")
    x, y = check_data(x, y)
    if n % 2 == 0:
        n += 1

    half = (n - 1) // 2
    index = np.arange(len(y))
    first = np.maximum(index - half, 0)
    last = np.minimum(index + half, len(y) - 1)
    cumulative = np.concatenate([[0.0], np.cumsum(y)])
    average = (cumulative[last + 1] - cumulative[first]) / (last - first + 1)
    return MovingAverage(n=n, x=x, y=average, R=pearson_r(average, y), residues=y - average)


@dataclass(frozen=True)
class Density:
    """Histogram-like density of a sample, evaluated at bin centers."""
    x: np.ndarray
    d: np.ndarray
    step: float
    norm: int

    def __str__(self):
        what = "number of" if self.norm == 0 else "probability of finding"
        return "\n".join([
            " ------------------- Density -------------",
            f"  d contains the {what} data points within x ± {self.step / 2:.3g}",
            " -----------------------------------------",
        ])


def fit_density(values, nbins=100, step=None, steptype='absolute', vmin=None, vmax=None, norm=1):
    """
    Density function of a list of values.

    Parameters
    ----------
    values : array_like
        Sampled values
    nbins : int, optional
        Number of evaluation points between ``vmin`` and ``vmax``
    step : float, optional
        Width of the counting window around each point. Defaults to the bin
        width ``(vmax - vmin) / nbins``.
    steptype : {'absolute', 'relative'}, optional
        With 'relative', ``step`` is a multiple of the bin width
    vmin, vmax : float, optional
        Range of evaluation; defaults to the range of the values
    norm : {0, 1}, optional
        0 counts the values within ``x ± step/2``; 1 (default) returns the
        probability density

    Returns
    -------
    Density
        Bin centers ``x`` and densities ``d``
    """
    values = np.asarray(values, dtype=float).reshape(-1)
    if len(values) == 0:
        raise ValueError("No values given")
    if not np.all(np.isfinite(values)):
        raise ValueError("Values contain NaN or Inf")
    if nbins < 1:
        raise ValueError(f"nbins must be at least 1, got {nbins}")
    if norm not in (0, 1):
        raise ValueError(f"norm must be 0 or 1, got {norm}")

    vmin = float(np.min(values)) if vmin is None else float(vmin)
    vmax = float(np.max(values)) if vmax is None else float(vmax)
    if vmax <= vmin:
        raise ValueError(f"Empty value range: [{vmin}, {vmax}]")

    binstep = (vmax - vmin) / nbins
    if step is None:
        step = binstep
    elif steptype == 'relative':
        step = step * binstep
    elif steptype != 'absolute':
        raise ValueError(f"steptype must be 'relative' or 'absolute', got {steptype!r}")

    x = vmin + binstep * (np.arange(nbins) + 0.5)
    ordered = np.sort(values)
    # half-open windows (x - step/2, x + step/2]
    counts = (np.searchsorted(ordered, x + step / 2, side='right')
              - np.searchsorted(ordered, x - step / 2, side='right')).astype(float)
    if norm == 0:
        d = counts
    else:
        binsize = np.minimum(vmax, x + step / 2) - np.maximum(vmin, x - step / 2)
        d = counts / (binsize * len(values))
    return Density(x=x, d=d, step=float(step), norm=norm)
