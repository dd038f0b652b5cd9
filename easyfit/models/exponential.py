"""
Single and multiple exponential models.
"""

import numpy as np

from .base import ModelSpec
from ..fitting.bounds import Variable


def sum_of_exponentials(x, a, b, c):
    """
    Sum of exponential terms plus a constant.

    Parameters
    ----------
    x : array_like
        Independent variable
    a : array_like
        Amplitudes
    b : array_like
        Rates
    c : float
        Constant offset

    Returns
    -------
    ndarray
        sum(a[i] * exp(b[i] * x)) + c
    """
    x = np.asarray(x, dtype=float)
    a = np.atleast_1d(a)
    b = np.atleast_1d(b)
    return np.exp(np.outer(x, b)) @ a + c


def exponential_model(n=1):
    """
    Model spec for ``y = a exp(b x) + c`` or its sum of ``n`` terms.

    The flattened parameter vector is ``[a[0..n-1], b[0..n-1], c]``. For
    ``n == 1`` all three parameters are scalars; otherwise ``a`` and ``b``
    are vectors of length ``n``.
    """
    if n < 1:
        raise ValueError(f"Number of exponential terms must be at least 1, got {n}")

    def func(x, p):
        p = np.asarray(p, dtype=float)
        return sum_of_exponentials(x, p[:n], p[n:2 * n], p[2 * n])

    def jac(x, p):
        x = np.asarray(x, dtype=float)
        p = np.asarray(p, dtype=float)
        e = np.exp(np.outer(x, p[n:2 * n]))
        return np.column_stack([e, e * x[:, None] * p[:n], np.ones_like(x)])

    def sort_terms(p):
        p = np.array(p, dtype=float)
        order = np.argsort(p[n:2 * n], kind='stable')
        p[:n] = p[:n][order]
        p[n:2 * n] = p[n:2 * n][order]
        return p

    def initial_range(x, y):
        # Keep |b x| <= 5 over the data so that starting points do not overflow
        xscale = max(np.max(np.abs(x)), np.finfo(float).tiny)
        yscale = max(np.max(np.abs(y)), 1.0)
        rmax = np.concatenate([np.full(n, 10.0 * yscale), np.full(n, 5.0 / xscale), [10.0 * yscale]])
        return -rmax, rmax

    if n == 1:
        variables = (Variable('a'), Variable('b'), Variable('c'))
        equation = 'y = a exp(b x) + c'
        title = 'Single Exponential Fit'
    else:
        variables = (Variable('a', kind='vector', dim=n),
                     Variable('b', kind='vector', dim=n),
                     Variable('c'))
        equation = f'y = sum(a[i] exp(b[i] x) for i in 1:{n}) + c'
        title = 'Multiple Exponential Fit'

    return ModelSpec(name='exponential', equation=equation, variables=variables,
                     func=func, jac=jac, title=title, canonical=sort_terms,
                     initial_range=initial_range)
