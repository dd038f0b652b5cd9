"""
Options controlling the global search and the local solvers.
"""

from dataclasses import dataclass, replace

import numpy as np

SOLVERS = ('spg', 'lm')

# Initial-point range used when no data is available to size it
DEFAULT_P0_RANGE = (-1e10, 1e10)


@dataclass(frozen=True)
class Options:
    """
    Fit options.

    Attributes
    ----------
    nbest : int
        Number of trials that must reach the best objective value (within
        ``besttol``) before the search stops.
    besttol : float
        Tolerance defining a tie between two objective values.
    maxtrials : int
        Maximum number of random restarts.
    fine : int
        Number of intervals of the fine mesh on which fitted curves are
        evaluated.
    p0_range : tuple or None
        ``(rmin, rmax)`` range for random initial points. If None, a range
        of 100 times the dynamic range of the data is used.
    debug : bool
        If True, failed trials are logged as warnings with traceback.
    solver : str
        Local solver: 'spg' (spectral projected gradient) or 'lm'
        (bounded least squares through lmfit).
    n_workers : int
        Number of trials run concurrently.
    """
    nbest: int = 5
    besttol: float = 1e-4
    maxtrials: int = 100
    fine: int = 100
    p0_range: tuple = None
    debug: bool = False
    solver: str = 'spg'
    spg_nitmax: int = 1000
    spg_nfevalmax: int = 10000
    spg_eps: float = 1e-5
    spg_m: int = 10
    lm_max_nfev: int = 2000
    n_workers: int = 1

    def __post_init__(self):
        if self.nbest < 1:
            raise ValueError(f"nbest must be at least 1, got {self.nbest}")
        if self.besttol < 0:
            raise ValueError(f"besttol must be non-negative, got {self.besttol}")
        if self.maxtrials < 1:
            raise ValueError(f"maxtrials must be at least 1, got {self.maxtrials}")
        if self.fine < 1:
            raise ValueError(f"fine must be at least 1, got {self.fine}")
        if self.solver not in SOLVERS:
            raise ValueError(f"Unknown solver: {self.solver}. Available: {list(SOLVERS)}")
        if self.spg_nitmax < 1 or self.spg_nfevalmax < 1:
            raise ValueError("spg_nitmax and spg_nfevalmax must be positive")
        if self.spg_eps <= 0:
            raise ValueError(f"spg_eps must be positive, got {self.spg_eps}")
        if self.spg_m < 1:
            raise ValueError(f"spg_m must be at least 1, got {self.spg_m}")
        if self.lm_max_nfev < 1:
            raise ValueError(f"lm_max_nfev must be positive, got {self.lm_max_nfev}")
        if self.n_workers < 1:
            raise ValueError(f"n_workers must be at least 1, got {self.n_workers}")
        if self.p0_range is not None:
            if len(self.p0_range) != 2:
                raise ValueError("p0_range must be a (min, max) pair")
            rmin, rmax = self.p0_range
            if np.any(np.asarray(rmin, dtype=float) > np.asarray(rmax, dtype=float)):
                raise ValueError(f"p0_range minimum greater than maximum: {self.p0_range}")

    def replace(self, **changes):
        """Return a copy of the options with the given fields changed."""
        return replace(self, **changes)

    def resolve_p0_range(self, x=None, y=None):
        """
        Return the initial-point range to use for the given data.

        Parameters
        ----------
        x, y : array_like, optional
            Data being fitted. Used only when ``p0_range`` is None.

        Returns
        -------
        tuple
            ``(rmin, rmax)``
        """
        if self.p0_range is not None:
            return self.p0_range
        if x is None or y is None:
            return DEFAULT_P0_RANGE
        from ..data_preprocessing import data_span
        span = 100.0 * data_span(x, y)
        return (-span, span)
