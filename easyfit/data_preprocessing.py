"""
Data preprocessing utilities.
"""

import numpy as np


def _as_vector(values, label):
    values = np.asarray(values, dtype=float)
    if values.ndim > 2 or (values.ndim == 2 and values.shape[1] != 1):
        raise ValueError(f"Only 1D arrays are accepted, and got {label} with dimensions = {values.shape}")
    return values.reshape(-1).copy()


def check_data(x, y):
    """
    Check fit data and return float copies.

    Parameters
    ----------
    x : array_like
        X-axis data, 1D or a single column
    y : array_like
        Y-axis data, same length as x

    Returns
    -------
    x : ndarray
        1D float copy of x
    y : ndarray
        1D float copy of y

    Raises
    ------
    ValueError
        If the arrays are not 1D, differ in length, have fewer than 2 points
        or contain NaN or Inf
    """
    x = _as_vector(x, 'x')
    y = _as_vector(y, 'y')

    if len(x) != len(y):
        raise ValueError(f"X and Y must have same length: {len(x)} vs {len(y)}")

    if len(x) < 2:
        raise ValueError(f"Need at least 2 data points, got {len(x)}")

    if not np.all(np.isfinite(x)):
        raise ValueError("X data contains NaN or Inf")

    if not np.all(np.isfinite(y)):
        raise ValueError("Y data contains NaN or Inf")

    return x, y


def data_span(x, y):
    """
    Largest absolute value found in the data.

    Sizes the default range of random initial points. Returns 1.0 for all-zero
    data.
    """
    span = max(np.max(np.abs(x), initial=0.0), np.max(np.abs(y), initial=0.0))
    return float(span) if span > 0 else 1.0


def crop_roi(x, y, x_min=None, x_max=None):
    """
    Crop data to region of interest (ROI).

    Parameters
    ----------
    x : array_like
        X-axis data
    y : array_like
        Y-axis data
    x_min : float or None, optional
        Minimum x value (inclusive)
    x_max : float or None, optional
        Maximum x value (inclusive)

    Returns
    -------
    x_roi : ndarray
        X data in ROI
    y_roi : ndarray
        Y data in ROI
    """
    x = np.asarray(x)
    y = np.asarray(y)

    mask = np.ones(len(x), dtype=bool)

    if x_min is not None:
        mask &= (x >= x_min)

    if x_max is not None:
        mask &= (x <= x_max)

    return x[mask], y[mask]


def fine_mesh(x, fine=100):
    """Evenly spaced mesh of ``fine + 1`` points spanning the data."""
    x = np.asarray(x, dtype=float)
    return np.linspace(np.min(x), np.max(x), fine + 1)
