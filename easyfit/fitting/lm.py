"""
Bounded least squares through lmfit.

Derivative-based alternative to the spectral projected gradient solver,
delegating to ``lmfit.minimize`` with SciPy's trust-region reflective
``least_squares`` method.
"""

import numpy as np
from lmfit import Parameters, minimize

from .errors import SolverInputError
from .results import SolverStatus, TrialResult
from .spg import project, projected_gradient_norm


def _build_parameters(x0, lower, upper):
    params = Parameters()
    for i, (value, lo, hi) in enumerate(zip(x0, lower, upper)):
        if lo == hi:
            # lmfit cannot vary a parameter with an empty interval
            params.add(f'p{i}', value=lo, vary=False)
        else:
            params.add(f'p{i}', value=value, min=lo, max=hi)
    return params


def _as_vector(params, n):
    return np.array([params[f'p{i}'].value for i in range(n)], dtype=float)


def lm_box(residuals, x0, lower=None, upper=None, grad=None, max_nfev=2000):
    """
    Minimize the sum of squared residuals on a box.

    Parameters
    ----------
    residuals : callable
        ``residuals(x) -> ndarray`` of the residual vector.
    x0 : array_like
        Starting point (projected onto the box).
    lower, upper : array_like, optional
        Box bounds. None means unbounded.
    grad : callable, optional
        Gradient of the sum of squares. Only used to report the projected
        gradient norm of the solution.
    max_nfev : int, optional
        Maximum number of residual evaluations.

    Returns
    -------
    TrialResult
        ``nit`` equals ``nfeval``, lmfit does not report iterations.

    Raises
    ------
    SolverInputError
        If the lengths of x0 and the bounds disagree.
    """
    x = np.array(x0, dtype=float)
    if x.ndim != 1:
        raise SolverInputError(f"x0 must be one-dimensional, got shape {x.shape}")
    n = len(x)
    lower = np.full(n, -np.inf) if lower is None else np.asarray(lower, dtype=float)
    upper = np.full(n, np.inf) if upper is None else np.asarray(upper, dtype=float)
    if lower.shape != (n,) or upper.shape != (n,):
        raise SolverInputError(
            f"Bound vectors must have the same length as x ({n}), got {lower.shape} and {upper.shape}"
        )
    x = project(x, lower, upper)
    params = _build_parameters(x, lower, upper)

    if not any(p.vary for p in params.values()):
        r = np.asarray(residuals(x), dtype=float)
        f = float(np.sum(r**2))
        return TrialResult(x, f, 0.0, 0, 1, SolverStatus.CONVERGED)

    def objective(params):
        return np.asarray(residuals(_as_vector(params, n)), dtype=float)

    result = minimize(objective, params, method='least_squares', max_nfev=max_nfev)

    x = _as_vector(result.params, n)
    f = float(np.sum(np.asarray(result.residual, dtype=float)**2))
    if grad is not None:
        g = np.asarray(grad(x), dtype=float).ravel()
        if len(g) != n:
            raise SolverInputError(f"Gradient must have length {n}, got {len(g)}")
        gnorm = projected_gradient_norm(x, g, lower, upper)
    else:
        gnorm = np.nan
    status = SolverStatus.CONVERGED if result.success else SolverStatus.MAX_EVALUATIONS
    return TrialResult(x, f, gnorm, result.nfev, result.nfev, status)
