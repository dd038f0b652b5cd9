"""
Spectral projected gradient minimization on a box.

Implements the nonmonotone spectral projected gradient method of
Birgin, Martinez and Raydan (SIAM J. Optim. 10(4), 1196-1211, 2000)
for problems of the form::

    minimize f(x)  subject to  lower <= x <= upper

Only function values and gradients are required. When no gradient is
supplied, it is approximated by forward differences.
"""

from collections import deque

import numpy as np
from scipy.optimize import approx_fprime

from .errors import SolverInputError
from .results import SolverStatus, TrialResult
from ..utils.logger import log_info

# Spectral step limits
MAX_STEP = 1.0e3
RESET_STEP = 100.0


def project(x, lower, upper):
    """Project ``x`` onto the box ``[lower, upper]``."""
    return np.minimum(np.maximum(x, lower), upper)


def projected_gradient_norm(x, g, lower, upper):
    """
    Infinity norm of the projected gradient.

    Largest displacement ``|P(x - g) - x|`` where P projects onto the box.
    Zero exactly at a stationary point of the constrained problem.
    """
    return float(np.max(np.abs(project(x - g, lower, upper) - x), initial=0.0))


def numerical_gradient(func):
    """Return a forward-difference gradient function for ``func``."""
    step = np.sqrt(np.finfo(float).eps)

    def grad(x):
        return approx_fprime(x, func, step * np.maximum(1.0, np.abs(x)))

    return grad


def _bound_vector(value, n, default, name):
    if value is None:
        return np.full(n, default)
    vec = np.asarray(value, dtype=float)
    if vec.ndim != 1 or len(vec) != n:
        raise SolverInputError(
            f"{name} bound vector must have the same length as x ({n}), got shape {vec.shape}"
        )
    return vec


def _evaluate_gradient(grad, x, n):
    g = np.asarray(grad(x), dtype=float).ravel()
    if len(g) != n:
        raise SolverInputError(f"Gradient must have length {n}, got {len(g)}")
    return g


def spgbox(func, grad, x0, lower=None, upper=None, eps=1e-5, nitmax=100,
           nfevalmax=1000, m=10, project_x0=True, iprint=0):
    """
    Minimize ``func`` on a box with the spectral projected gradient method.

    Parameters
    ----------
    func : callable
        Objective, ``func(x) -> float``.
    grad : callable or None
        Gradient, ``grad(x) -> ndarray`` of the same length as x. If None,
        forward differences are used.
    x0 : array_like
        Starting point. Not modified.
    lower, upper : array_like, optional
        Box bounds (inclusive). None means unbounded.
    eps : float, optional
        Convergence tolerance on the projected gradient norm.
    nitmax : int, optional
        Maximum number of iterations.
    nfevalmax : int, optional
        Maximum number of objective evaluations.
    m : int, optional
        Length of the window of previous objective values used by the
        nonmonotone line search.
    project_x0 : bool, optional
        If True, ``x0`` is projected onto the box. If False, an infeasible
        ``x0`` is an error.
    iprint : int, optional
        If positive, log progress at every iteration.

    Returns
    -------
    TrialResult
        Final point, objective value, projected gradient norm, counters and
        termination code.

    Raises
    ------
    SolverInputError
        If the lengths of x0, the bounds or the gradient disagree.

    Examples
    --------
    >>> res = spgbox(lambda x: x @ x, lambda x: 2 * x, [3.0, 4.0])
    >>> res.status
    <SolverStatus.CONVERGED: 0>
    """
    x = np.array(x0, dtype=float)
    if x.ndim != 1:
        raise SolverInputError(f"x0 must be one-dimensional, got shape {x.shape}")
    n = len(x)
    lower = _bound_vector(lower, n, -np.inf, 'Lower')
    upper = _bound_vector(upper, n, np.inf, 'Upper')
    if np.any(lower > upper):
        raise SolverInputError("Lower bound greater than upper bound")
    if m < 1:
        raise SolverInputError(f"Nonmonotone window length must be positive, got {m}")

    if project_x0:
        x = project(x, lower, upper)
    elif np.any(x < lower) or np.any(x > upper):
        i = int(np.nonzero((x < lower) | (x > upper))[0][0])
        raise SolverInputError(
            f"Initial value of variable {i} is outside the bounds and project_x0 is False"
        )

    if grad is None:
        grad = numerical_gradient(func)

    nfeval = 1
    f = float(func(x))
    g = _evaluate_gradient(grad, x, n)
    gnorm = projected_gradient_norm(x, g, lower, upper)

    tspg = 1.0
    fprev = deque([f] * m, maxlen=m)

    nit = 0
    while nit < nitmax:
        gnorm = projected_gradient_norm(x, g, lower, upper)

        if iprint > 0:
            log_info(f"SPG iteration {nit}: f = {f:.10g}, gnorm = {gnorm:.4g}, nfeval = {nfeval}")

        if gnorm <= eps:
            return TrialResult(x, f, gnorm, nit, nfeval, SolverStatus.CONVERGED)
        if nfeval >= nfevalmax:
            return TrialResult(x, f, gnorm, nit, nfeval, SolverStatus.MAX_EVALUATIONS)

        t = tspg
        fref = max(fprev)

        # Backtrack until the trial value does not exceed the reference
        while True:
            xn = project(x - t * g, lower, upper)
            nfeval += 1
            fn = float(func(xn))
            if nfeval > nfevalmax:
                return TrialResult(x, f, gnorm, nit, nfeval, SolverStatus.MAX_EVALUATIONS)
            t = t / 2
            if fn <= fref:
                break

        gn = _evaluate_gradient(grad, xn, n)
        s = xn - x
        den = float(np.dot(s, gn - g))
        if den <= 0.0:
            tspg = RESET_STEP
        else:
            tspg = min(MAX_STEP, float(np.dot(s, s)) / den)

        x, g, f = xn, gn, fn
        fprev.append(f)
        nit += 1

    gnorm = projected_gradient_norm(x, g, lower, upper)
    return TrialResult(x, f, gnorm, nit, nfeval, SolverStatus.MAX_ITERATIONS)
