"""
Global search by random restarts of a box-constrained local solver.

Local solves are started from random points until ``nbest`` of them agree
(within ``besttol``) on the lowest objective value found, or until
``maxtrials`` trials have been run.
"""

from concurrent.futures import ThreadPoolExecutor

import numpy as np

from .bounds import Bounds
from .errors import EasyFitError, NoSuccessfulFitError, SolverInputError
from .lm import lm_box
from .options import Options
from .results import SearchResult
from .sampler import initial_point
from .spg import spgbox
from ..utils.logger import log_debug, log_info, log_warning

# Exceptions that make a single trial fail without aborting the search
TRIAL_FAILURES = (ArithmeticError, ValueError, np.linalg.LinAlgError)


class NonFiniteObjectiveError(ArithmeticError):
    """A local solve ended on a non-finite objective value."""


class BestState:
    """
    Best result seen during one global search.

    Attributes
    ----------
    x : ndarray or None
        Best parameters.
    value : float
        Best objective value.
    nbest : int
        Number of trials that reached ``value`` within the tolerance.
    trial : int
        Trial that produced ``x``.
    """

    def __init__(self):
        self.x = None
        self.value = np.inf
        self.nbest = 0
        self.trial = 0
        self.local = None
        self.nsuccess = 0
        self.nfailed = 0

    def _record(self, trial, result):
        self.x = np.array(result.x, copy=True)
        self.value = result.f
        self.trial = trial
        self.local = result

    def update(self, trial, result, besttol):
        """
        Merge a successful trial.

        Returns
        -------
        str
            'improved', 'tie' or 'worse'.
        """
        self.nsuccess += 1
        v = result.f
        if v < self.value - besttol:
            self.nbest = 1
            self._record(trial, result)
            return 'improved'
        if abs(v - self.value) <= besttol:
            self.nbest += 1
            if v < self.value:
                self._record(trial, result)
            return 'tie'
        return 'worse'


def _make_trial(objective, gradient, residuals, n, bounds, p0_range, options):
    """Return a function running one trial with a given random generator."""

    def run(rng):
        p0 = initial_point(n, bounds, p0_range, rng)
        if options.solver == 'lm':
            result = lm_box(residuals, p0, bounds.lower, bounds.upper,
                            grad=gradient, max_nfev=options.lm_max_nfev)
        else:
            result = spgbox(objective, gradient, p0, bounds.lower, bounds.upper,
                            eps=options.spg_eps, nitmax=options.spg_nitmax,
                            nfevalmax=options.spg_nfevalmax, m=options.spg_m)
        if not np.isfinite(result.f):
            raise NonFiniteObjectiveError(f"Objective value is {result.f} at {result.x}")
        return result

    return run


def _sequential_trials(run, rng, maxtrials):
    for _ in range(maxtrials):
        yield lambda: run(rng)


def _concurrent_trials(run, rng, maxtrials, n_workers):
    # Trials run in batches; results are handed back in trial order
    with ThreadPoolExecutor(max_workers=n_workers) as executor:
        remaining = maxtrials
        while remaining > 0:
            k = min(n_workers, remaining)
            futures = [executor.submit(run, child) for child in rng.spawn(k)]
            for future in futures:
                yield future.result
            remaining -= k


def find_best_fit(objective, gradient, n, bounds=None, options=None, rng=None,
                  residuals=None, p0_range=None):
    """
    Search for the global minimum of a least-squares objective.

    Parameters
    ----------
    objective : callable
        ``objective(p) -> float``.
    gradient : callable or None
        ``gradient(p) -> ndarray``. If None, the SPG solver uses finite
        differences.
    n : int
        Number of parameters.
    bounds : Bounds, optional
        Parameter bounds. Unbounded if not given.
    options : Options, optional
        Search and solver options.
    rng : numpy.random.Generator, optional
        Random source for the initial points. A freshly seeded generator is
        used if not given.
    residuals : callable, optional
        ``residuals(p) -> ndarray``; required by the 'lm' solver.
    p0_range : tuple, optional
        Initial point range, overriding ``options``.

    Returns
    -------
    SearchResult
        Best parameters, objective value and search statistics.

    Raises
    ------
    NoSuccessfulFitError
        If no trial succeeded.
    SolverInputError
        If the inputs are inconsistent.
    """
    options = options if options is not None else Options()
    bounds = bounds if bounds is not None else Bounds.unbounded(n)
    rng = rng if rng is not None else np.random.default_rng()
    if p0_range is None:
        p0_range = options.resolve_p0_range()

    if len(bounds) != n:
        raise SolverInputError(f"Bounds have length {len(bounds)}, expected {n} parameters")
    if options.solver == 'lm' and residuals is None:
        raise SolverInputError("The 'lm' solver requires a residuals function")

    run = _make_trial(objective, gradient, residuals, n, bounds, p0_range, options)
    if options.n_workers > 1:
        trials = _concurrent_trials(run, rng, options.maxtrials, options.n_workers)
    else:
        trials = _sequential_trials(run, rng, options.maxtrials)

    state = BestState()
    last_error = None
    ntrials = 0
    try:
        for outcome in trials:
            ntrials += 1
            try:
                result = outcome()
            except EasyFitError:
                raise
            except TRIAL_FAILURES as e:
                state.nfailed += 1
                last_error = e
                if options.debug:
                    log_warning(f"Trial {ntrials} failed", e)
                else:
                    log_debug(f"Trial {ntrials} failed: {e}")
                continue

            verdict = state.update(ntrials, result, options.besttol)
            log_debug(
                f"Trial {ntrials}: objective = {result.f:.10g} ({verdict}), "
                f"best = {state.value:.10g}, nbest = {state.nbest}"
            )
            if state.nbest >= options.nbest:
                break
    finally:
        trials.close()

    if state.nsuccess == 0:
        raise NoSuccessfulFitError(
            f"No successful fit in {ntrials} trials; data may be ill-posed"
        ) from last_error

    converged = state.nbest >= options.nbest
    if converged:
        log_info(f"Best objective {state.value:.10g} found {state.nbest} times in {ntrials} trials")
    else:
        log_info(
            f"Trial budget exhausted ({ntrials} trials); best objective {state.value:.10g} "
            f"found {state.nbest} times"
        )

    return SearchResult(
        x=state.x,
        objective=state.value,
        nbest=state.nbest,
        ntrials=ntrials,
        nsuccess=state.nsuccess,
        nfailed=state.nfailed,
        best_trial=state.trial,
        converged=converged,
        local=state.local,
    )
