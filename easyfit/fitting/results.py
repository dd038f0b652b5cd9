"""
Result containers shared by the local solvers and the global search.
"""

from dataclasses import dataclass
from enum import IntEnum

import numpy as np


class SolverStatus(IntEnum):
    """Termination code of a local solve."""
    CONVERGED = 0
    MAX_ITERATIONS = 1
    MAX_EVALUATIONS = 2

    @property
    def description(self):
        return _STATUS_TEXT[self]


_STATUS_TEXT = {
    SolverStatus.CONVERGED: "Convergence achieved.",
    SolverStatus.MAX_ITERATIONS: "Maximum number of iterations reached.",
    SolverStatus.MAX_EVALUATIONS: "Maximum number of function evaluations reached.",
}


@dataclass(frozen=True)
class TrialResult:
    """
    Outcome of one local optimization.

    Attributes
    ----------
    x : ndarray
        Final point.
    f : float
        Objective value at ``x``.
    gnorm : float
        Infinity norm of the projected gradient at ``x``.
    nit : int
        Iterations performed.
    nfeval : int
        Objective evaluations performed.
    status : SolverStatus
        Termination code.
    """
    x: np.ndarray
    f: float
    gnorm: float
    nit: int
    nfeval: int
    status: SolverStatus

    @property
    def converged(self):
        return self.status == SolverStatus.CONVERGED

    def __str__(self):
        head = ", ".join(f"{v:.6g}" for v in self.x[:3])
        if len(self.x) > 3:
            head += ", ..."
        return "\n".join([
            self.status.description,
            f"Final objective function value = {self.f:.6g}",
            f"Best solution found = [{head}]",
            f"Projected gradient norm = {self.gnorm:.3g}",
            f"Number of iterations = {self.nit}",
            f"Number of function evaluations = {self.nfeval}",
        ])


@dataclass(frozen=True)
class SearchResult:
    """
    Outcome of a global search.

    Attributes
    ----------
    x : ndarray
        Best parameter vector found.
    objective : float
        Objective value at ``x``.
    nbest : int
        Number of trials that reached the best value when the search stopped.
    ntrials : int
        Number of trials attempted.
    nsuccess : int
        Number of trials whose local solve succeeded.
    nfailed : int
        Number of failed trials.
    best_trial : int
        Index (starting at 1) of the trial that produced ``x``.
    converged : bool
        True if the search stopped because ``nbest`` ties were reached.
    local : TrialResult
        Local solver output of the best trial.
    """
    x: np.ndarray
    objective: float
    nbest: int
    ntrials: int
    nsuccess: int
    nfailed: int
    best_trial: int
    converged: bool
    local: TrialResult
