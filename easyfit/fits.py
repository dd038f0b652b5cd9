"""
One-call fitting functions.

Each function fits one model to x, y data and returns a ``CurveFit``::

    >>> fit = fit_linear(x, y, lower={'a': 0.0})
    >>> fit.params['a'], fit.params['b']

Bounds are sparse mappings from parameter name to value. The constant term
of a model (``b`` for lines, ``c`` for quadratics, ``d`` for cubics and
polynomials) cannot be bounded but can be held fixed through the keyword of
the same name.
"""

from .fitting.fitter import CurveFitter


def _fit(x, y, name, lower, upper, options, rng, constant=None, **model_kwargs):
    fitter = CurveFitter(x, y)
    fitter.set_model(name, **model_kwargs)
    fitter.set_bounds(lower, upper)
    fitter.fix_constant(constant)
    return fitter.fit(options=options, rng=rng)


def fit_linear(x, y, lower=None, upper=None, b=None, options=None, rng=None):
    """
    Linear fit: ``y = a x + b``.

    Parameters
    ----------
    x, y : array_like
        Data
    lower, upper : dict, optional
        Bounds on ``a``
    b : float, optional
        Fixed intercept
    options : Options, optional
        Fit options
    rng : numpy.random.Generator, optional
        Random source

    Returns
    -------
    CurveFit
        Fit result, with ``sd_a`` and ``sd_b`` standard errors
    """
    return _fit(x, y, 'linear', lower, upper, options, rng, constant=b)


def fit_quadratic(x, y, lower=None, upper=None, c=None, options=None, rng=None):
    """Quadratic fit: ``y = a x^2 + b x + c``; ``c`` may be fixed."""
    return _fit(x, y, 'quadratic', lower, upper, options, rng, constant=c)


def fit_cubic(x, y, lower=None, upper=None, d=None, options=None, rng=None):
    """Cubic fit: ``y = a x^3 + b x^2 + c x + d``; ``d`` may be fixed."""
    return _fit(x, y, 'cubic', lower, upper, options, rng, constant=d)


def fit_polynomial(x, y, n=1, lower=None, upper=None, d=None, options=None, rng=None):
    """
    Polynomial fit of degree ``n``: ``y = sum(a[i] x^i for i in 1..n) + d``.

    Bounds on ``a`` must be arrays of length ``n``.
    """
    return _fit(x, y, 'polynomial', lower, upper, options, rng, constant=d, n=n)


def fit_exponential(x, y, n=1, lower=None, upper=None, options=None, rng=None):
    """
    Exponential fit: ``y = a exp(b x) + c``, or ``sum(a[i] exp(b[i] x)) + c``
    for ``n > 1``.

    For ``n > 1``, bounds on ``a`` and ``b`` must be arrays of length ``n``
    and the fitted terms are sorted by increasing rate ``b``. Unless
    ``options.p0_range`` is set, initial rates are drawn so that
    ``|b x| <= 5`` over the data.
    """
    return _fit(x, y, 'exponential', lower, upper, options, rng, n=n)
