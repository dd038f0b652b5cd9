"""Fitting engine: bounds, local solvers and global search."""

from .bounds import Bounds, Variable, set_bounds
from .errors import (
    BoundsError,
    BoundsShapeError,
    EasyFitError,
    InfeasibleBoundsError,
    NoSuccessfulFitError,
    SolverInputError,
    UnknownBoundTargetError,
    UnsupportedBoundError,
)
from .fitter import CurveFit, CurveFitter
from .lm import lm_box
from .options import Options
from .problem import LeastSquaresProblem
from .results import SearchResult, SolverStatus, TrialResult
from .sampler import initial_point
from .search import find_best_fit
from .spg import spgbox
from .statistics import calculate_statistics, format_statistics, pearson_r

__all__ = [
    'Bounds',
    'Variable',
    'set_bounds',
    'BoundsError',
    'BoundsShapeError',
    'EasyFitError',
    'InfeasibleBoundsError',
    'NoSuccessfulFitError',
    'SolverInputError',
    'UnknownBoundTargetError',
    'UnsupportedBoundError',
    'CurveFit',
    'CurveFitter',
    'lm_box',
    'Options',
    'LeastSquaresProblem',
    'SearchResult',
    'SolverStatus',
    'TrialResult',
    'initial_point',
    'find_best_fit',
    'spgbox',
    'calculate_statistics',
    'format_statistics',
    'pearson_r',
]
