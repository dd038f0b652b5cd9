"""
Sum-of-squares objective built from a model and data.
"""

import numpy as np


class LeastSquaresProblem:
    """
    Least-squares objective ``S(p) = sum((y - f(x, p))**2)``.

    Parameters
    ----------
    func : callable
        Model, ``func(x, p) -> ndarray`` evaluated on the whole x array.
    jac : callable or None
        Model Jacobian, ``jac(x, p) -> ndarray`` of shape ``(len(x), len(p))``.
        If None, ``gradient`` is None and solvers fall back to finite
        differences.
    x : array_like
        Independent variable.
    y : array_like
        Observations.
    """

    def __init__(self, func, jac, x, y):
        self.func = func
        self.jac = jac
        self.x = np.asarray(x, dtype=float)
        self.y = np.asarray(y, dtype=float)

    def predict(self, p, x=None):
        """Model values at ``x`` (the data abscissae by default)."""
        if x is None:
            x = self.x
        with np.errstate(over='ignore', invalid='ignore'):
            return np.asarray(self.func(x, np.asarray(p, dtype=float)), dtype=float)

    def residuals(self, p):
        """Residual vector ``y - f(x, p)``."""
        return self.y - self.predict(p)

    def objective(self, p):
        """Sum of squared residuals."""
        r = self.residuals(p)
        with np.errstate(over='ignore', invalid='ignore'):
            return float(np.dot(r, r))

    @property
    def gradient(self):
        """Gradient function of the sum of squares, or None without a Jacobian."""
        if self.jac is None:
            return None
        return self._gradient

    def _gradient(self, p):
        # -2 J^T r
        p = np.asarray(p, dtype=float)
        r = self.residuals(p)
        with np.errstate(over='ignore', invalid='ignore'):
            J = np.asarray(self.jac(self.x, p), dtype=float)
            return -2.0 * (J.T @ r)
