"""EasyFit package initialization."""

from . import fitting
from . import models
from . import data_import
from . import data_preprocessing
from . import nonparametric
from .fitting import (
    Bounds,
    CurveFit,
    CurveFitter,
    EasyFitError,
    NoSuccessfulFitError,
    Options,
    SearchResult,
    find_best_fit,
    initial_point,
    lm_box,
    set_bounds,
    spgbox,
)
from .fits import fit_linear, fit_quadratic, fit_cubic, fit_polynomial, fit_exponential
from .nonparametric import fit_density, moving_average

__version__ = '1.0.0'

__all__ = [
    'fitting',
    'models',
    'data_import',
    'data_preprocessing',
    'nonparametric',
    'Bounds',
    'CurveFit',
    'CurveFitter',
    'EasyFitError',
    'NoSuccessfulFitError',
    'Options',
    'SearchResult',
    'find_best_fit',
    'initial_point',
    'lm_box',
    'set_bounds',
    'spgbox',
    'fit_linear',
    'fit_quadratic',
    'fit_cubic',
    'fit_polynomial',
    'fit_exponential',
    'moving_average',
    'fit_density',
]
