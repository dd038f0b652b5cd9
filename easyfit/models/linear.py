"""
Linear model.
"""

import numpy as np

from .base import ModelSpec
from ..fitting.bounds import Variable


def linear(x, a, b):
    """
    Straight line.

    Parameters
    ----------
    x : array_like
        Independent variable
    a : float
        Slope
    b : float
        Intercept

    Returns
    -------
    array_like
        a * x + b
    """
    return a * x + b


def linear_model():
    """Model spec for ``y = a x + b``; ``b`` is an unbounded constant."""

    def func(x, p):
        return linear(x, p[0], p[1])

    def jac(x, p):
        return np.column_stack([x, np.ones_like(x)])

    return ModelSpec(
        name='linear',
        equation='y = ax + b',
        variables=(Variable('a'), Variable('b', kind='constant')),
        func=func,
        jac=jac,
    )
