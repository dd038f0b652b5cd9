"""
Polynomial models.

Quadratic and cubic fits use one scalar parameter per power; the general
polynomial of degree n uses a coefficient vector. In every case the
independent term is a constant, which can be fixed but not bounded.
"""

import numpy as np

from .base import ModelSpec
from ..fitting.bounds import Variable


def _powers(x, degree):
    """Columns x**degree, ..., x**1, x**0."""
    x = np.asarray(x, dtype=float)
    return np.column_stack([x**k for k in range(degree, -1, -1)])


def _descending_model(name, equation, names):
    degree = len(names) - 1

    def func(x, p):
        return _powers(x, degree) @ np.asarray(p, dtype=float)

    def jac(x, p):
        return _powers(x, degree)

    variables = tuple(Variable(v) for v in names[:-1]) + (Variable(names[-1], kind='constant'),)
    return ModelSpec(name=name, equation=equation, variables=variables, func=func, jac=jac)


def quadratic_model():
    """Model spec for ``y = a x^2 + b x + c``."""
    return _descending_model('quadratic', 'y = ax^2 + bx + c', ['a', 'b', 'c'])


def cubic_model():
    """Model spec for ``y = a x^3 + b x^2 + c x + d``."""
    return _descending_model('cubic', 'y = ax^3 + bx^2 + cx + d', ['a', 'b', 'c', 'd'])


def polynomial_model(n=1):
    """
    Model spec for ``y = sum(a[i] * x^i for i in 1..n) + d``.

    Parameters
    ----------
    n : int
        Degree of the polynomial.

    Returns
    -------
    ModelSpec
        Parameters: vector ``a`` of length n (ascending powers), constant ``d``.
    """
    if n < 1:
        raise ValueError(f"Polynomial degree must be at least 1, got {n}")

    def design(x):
        x = np.asarray(x, dtype=float)
        return np.column_stack([x**k for k in range(1, n + 1)] + [np.ones_like(x)])

    def func(x, p):
        return design(x) @ np.asarray(p, dtype=float)

    def jac(x, p):
        return design(x)

    return ModelSpec(
        name='polynomial',
        equation=f'y = sum(a[i] * x^i for i in 1:{n}) + d',
        variables=(Variable('a', kind='vector', dim=n), Variable('d', kind='constant')),
        func=func,
        jac=jac,
    )
