import logging

import numpy as np
import pytest

from easyfit.fitting.bounds import Bounds, Variable, set_bounds
from easyfit.fitting.errors import NoSuccessfulFitError, SolverInputError
from easyfit.fitting.options import Options
from easyfit.fitting.problem import LeastSquaresProblem
from easyfit.fitting.results import SolverStatus, TrialResult
from easyfit.fitting import search, spg
from easyfit.fitting.search import BestState, find_best_fit
from easyfit.utils.logger import get_logger


X = np.arange(10.0)
Y = 2.0 * X + 1.0


def line_problem():
    return LeastSquaresProblem(
        lambda x, p: p[0] * x + p[1],
        lambda x, p: np.column_stack([x, np.ones_like(x)]),
        X, Y,
    )


def trial(f, x=0.0):
    return TrialResult(np.array([x]), f, 0.0, 1, 1, SolverStatus.CONVERGED)


def failing_objective(p):
    raise ZeroDivisionError("boom")


@pytest.mark.parametrize('seed', [0, 1, 2, 3])
def test_recovers_line(seed):
    problem = line_problem()
    result = find_best_fit(problem.objective, problem.gradient, 2,
                           options=Options(p0_range=(-100.0, 100.0)),
                           rng=np.random.default_rng(seed))
    np.testing.assert_allclose(result.x, [2.0, 1.0], atol=1e-4)
    assert result.objective < 1e-6
    assert result.converged
    assert result.nbest >= 5
    assert result.ntrials == result.nsuccess + result.nfailed


def test_recovers_line_with_lm():
    problem = line_problem()
    result = find_best_fit(problem.objective, problem.gradient, 2,
                           options=Options(solver='lm', p0_range=(-100.0, 100.0)),
                           rng=np.random.default_rng(7), residuals=problem.residuals)
    np.testing.assert_allclose(result.x, [2.0, 1.0], atol=1e-6)
    assert result.converged


def test_bounds_are_respected():
    problem = line_problem()
    bounds = set_bounds([Variable('a'), Variable('b')], upper={'a': 1.0})
    result = find_best_fit(problem.objective, problem.gradient, 2, bounds=bounds,
                           options=Options(p0_range=(-100.0, 100.0)),
                           rng=np.random.default_rng(3))
    assert result.x[0] <= 1.0
    assert result.x[0] == pytest.approx(1.0, abs=1e-4)


def test_problem_gradient_from_jacobian():
    problem = line_problem()
    p = np.array([1.0, 0.0])
    r = Y - X
    np.testing.assert_allclose(problem.gradient(p), [-2.0 * X @ r, -2.0 * r.sum()])
    assert problem.objective([2.0, 1.0]) == 0.0


def test_missing_gradient_uses_finite_differences():
    problem = LeastSquaresProblem(lambda x, p: p[0] * x + p[1], None, X, Y)
    assert problem.gradient is None
    result = find_best_fit(problem.objective, None, 2,
                           options=Options(p0_range=(-10.0, 10.0), besttol=1e-3),
                           rng=np.random.default_rng(4))
    np.testing.assert_allclose(result.x, [2.0, 1.0], atol=1e-3)


def test_all_trials_fail():
    with pytest.raises(NoSuccessfulFitError, match="10 trials") as excinfo:
        find_best_fit(failing_objective, None, 1,
                      options=Options(maxtrials=10, p0_range=(-1.0, 1.0)),
                      rng=np.random.default_rng(0))
    assert isinstance(excinfo.value.__cause__, ZeroDivisionError)


def test_non_finite_objective_counts_as_failure():
    with pytest.raises(NoSuccessfulFitError):
        find_best_fit(lambda p: np.nan, lambda p: np.zeros(1), 1,
                      options=Options(maxtrials=3, p0_range=(-1.0, 1.0)),
                      rng=np.random.default_rng(0))


def test_partial_failures_are_skipped(monkeypatch):
    calls = []

    def flaky_spgbox(*args, **kwargs):
        calls.append(1)
        if len(calls) % 2 == 1:
            raise FloatingPointError("overflow")
        return spg.spgbox(*args, **kwargs)

    monkeypatch.setattr(search, "spgbox", flaky_spgbox)
    problem = line_problem()
    result = find_best_fit(problem.objective, problem.gradient, 2,
                           options=Options(p0_range=(-100.0, 100.0)),
                           rng=np.random.default_rng(11))
    np.testing.assert_allclose(result.x, [2.0, 1.0], atol=1e-4)
    assert result.ntrials == 10
    assert result.nfailed == 5
    assert result.nsuccess == 5
    assert result.best_trial % 2 == 0


def test_solver_input_errors_propagate():
    def bad_gradient(p):
        return np.zeros(len(p) + 1)

    with pytest.raises(SolverInputError):
        find_best_fit(lambda p: float(p @ p), bad_gradient, 2,
                      options=Options(p0_range=(-1.0, 1.0)), rng=np.random.default_rng(0))


@pytest.mark.parametrize('n_workers', [1, 2])
def test_trial_source_closed_when_error_propagates(monkeypatch, n_workers):
    closed = []

    def tracked(make_trials):
        def wrapper(*args):
            try:
                yield from make_trials(*args)
            finally:
                closed.append(True)
        return wrapper

    monkeypatch.setattr(search, "_sequential_trials", tracked(search._sequential_trials))
    monkeypatch.setattr(search, "_concurrent_trials", tracked(search._concurrent_trials))

    def broken_objective(p):
        raise RuntimeError("unexpected")

    with pytest.raises(RuntimeError, match="unexpected"):
        find_best_fit(broken_objective, lambda p: np.zeros(1), 1,
                      options=Options(p0_range=(-1.0, 1.0), n_workers=n_workers),
                      rng=np.random.default_rng(0))
    assert closed == [True]


def test_input_validation():
    with pytest.raises(SolverInputError):
        find_best_fit(lambda p: 0.0, None, 3, bounds=Bounds.unbounded(2))
    with pytest.raises(SolverInputError, match="residuals"):
        find_best_fit(lambda p: 0.0, None, 1, options=Options(solver='lm'))


def test_trial_budget_exhausted():
    problem = line_problem()
    result = find_best_fit(problem.objective, problem.gradient, 2,
                           options=Options(nbest=50, maxtrials=8, p0_range=(-100.0, 100.0)),
                           rng=np.random.default_rng(5))
    assert not result.converged
    assert result.ntrials == 8
    np.testing.assert_allclose(result.x, [2.0, 1.0], atol=1e-4)


def test_stops_after_nbest_ties():
    result = find_best_fit(lambda p: float(p @ p), lambda p: 2 * p, 3,
                           options=Options(nbest=3, p0_range=(-5.0, 5.0)),
                           rng=np.random.default_rng(8))
    assert result.ntrials == 3
    assert result.nbest == 3


def test_seeded_search_is_reproducible():
    problem = line_problem()
    options = Options(p0_range=(-100.0, 100.0))
    r1 = find_best_fit(problem.objective, problem.gradient, 2, options=options, rng=np.random.default_rng(9))
    r2 = find_best_fit(problem.objective, problem.gradient, 2, options=options, rng=np.random.default_rng(9))
    np.testing.assert_array_equal(r1.x, r2.x)
    assert r1.ntrials == r2.ntrials


def test_concurrent_trials():
    problem = line_problem()
    options = Options(p0_range=(-100.0, 100.0), n_workers=3)
    r1 = find_best_fit(problem.objective, problem.gradient, 2, options=options, rng=np.random.default_rng(12))
    r2 = find_best_fit(problem.objective, problem.gradient, 2, options=options, rng=np.random.default_rng(12))
    np.testing.assert_allclose(r1.x, [2.0, 1.0], atol=1e-4)
    assert r1.converged
    np.testing.assert_array_equal(r1.x, r2.x)
    assert r1.ntrials == r2.ntrials == 5


def test_best_state_ties_and_improvements():
    state = BestState()
    assert state.update(1, trial(1.0, x=1.0), 1e-4) == 'improved'
    assert state.update(2, trial(1.00005, x=2.0), 1e-4) == 'tie'
    assert state.trial == 1
    assert state.update(3, trial(0.99995, x=3.0), 1e-4) == 'tie'
    assert state.trial == 3
    assert state.value == 0.99995
    assert state.nbest == 3
    assert state.update(4, trial(2.0), 1e-4) == 'worse'
    assert state.nbest == 3
    assert state.update(5, trial(0.5, x=5.0), 1e-4) == 'improved'
    assert state.nbest == 1
    assert state.x[0] == 5.0
    assert state.nsuccess == 5


def test_failed_trials_logged_as_warnings_in_debug_mode(caplog):
    get_logger()
    with caplog.at_level(logging.WARNING, logger='EasyFit'):
        with pytest.raises(NoSuccessfulFitError):
            find_best_fit(failing_objective, None, 1,
                          options=Options(maxtrials=2, debug=True, p0_range=(-1.0, 1.0)),
                          rng=np.random.default_rng(0))
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 2
    assert "Trial 1 failed" in warnings[0].getMessage()
    assert warnings[0].exc_info is not None


def test_failed_trials_logged_at_debug_level_otherwise(caplog):
    get_logger()
    with caplog.at_level(logging.DEBUG, logger='EasyFit'):
        with pytest.raises(NoSuccessfulFitError):
            find_best_fit(failing_objective, None, 1,
                          options=Options(maxtrials=2, p0_range=(-1.0, 1.0)),
                          rng=np.random.default_rng(0))
    assert not [r for r in caplog.records if r.levelno >= logging.WARNING]
    assert any("Trial 2 failed: boom" in r.getMessage() for r in caplog.records)
