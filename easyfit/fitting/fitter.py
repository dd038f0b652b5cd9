"""
Main curve fitter class.
"""

from dataclasses import dataclass, field

import numpy as np

from .bounds import Bounds, set_bounds
from .options import Options
from .problem import LeastSquaresProblem
from .results import SearchResult
from .sampler import slide_into_bounds
from .search import find_best_fit
from .statistics import calculate_statistics, pearson_r
from ..data_preprocessing import check_data, fine_mesh
from ..utils.logger import log_info


def _format_value(value):
    if np.ndim(value) > 0:
        return '[' + ', '.join(f"{v:.10g}" for v in value) + ']'
    return f"{value:.10g}"


def linear_standard_errors(x, y, a, b):
    """
    Standard errors of the slope and intercept of a straight line fit.

    Returns
    -------
    sd_a, sd_b : float
        nan when there are fewer than 3 points or x is constant.
    """
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    n = len(x)
    x_var = np.sum((x - np.mean(x))**2)
    if n < 3 or x_var == 0:
        return np.nan, np.nan
    sd_a = np.sqrt(np.sum((y - (a * x + b))**2) / (x_var * (n - 2)))
    sd_b = sd_a * np.sqrt(np.mean(x**2))
    return float(sd_a), float(sd_b)


@dataclass(frozen=True)
class CurveFit:
    """
    Result of a curve fit.

    Attributes
    ----------
    model : str
        Model name
    equation : str
        Fitted equation
    params : dict
        Parameter name to value (float, or ndarray for vector parameters),
        fixed constants included
    coefficients : ndarray
        Fitted free parameters, flattened
    R : float
        Pearson correlation of data and predictions
    R2 : float
        Square of R
    x, y : ndarray
        Fine mesh spanning the data and the fitted curve on it
    ypred : ndarray
        Predictions at the data points
    residues : ndarray
        ``ypred - y_data``
    ssr : float
        Sum of squared residues
    search : SearchResult
        Global search summary
    sd_a, sd_b : float or None
        Standard errors of slope and intercept (linear fits only)

    Calling a CurveFit on new x values evaluates the fitted model.
    """
    model: str
    equation: str
    params: dict
    coefficients: np.ndarray
    R: float
    R2: float
    x: np.ndarray
    y: np.ndarray
    ypred: np.ndarray
    residues: np.ndarray
    ssr: float
    search: SearchResult
    title: str = ''
    sd_a: float = None
    sd_b: float = None
    spec: object = field(default=None, repr=False, compare=False)

    def __call__(self, x):
        values = np.asarray(self.spec.func(np.atleast_1d(np.asarray(x, dtype=float)), self.coefficients))
        if np.ndim(x) == 0:
            return float(values[0])
        return values

    def __getitem__(self, name):
        return self.params[name]

    def __str__(self):
        lines = [f"------------------- {self.title} -------------", ""]
        lines.append(f"Equation: {self.equation}")
        lines.append("")
        for i, (name, value) in enumerate(self.params.items()):
            prefix = "With: " if i == 0 else "      "
            text = f"{prefix}{name} = {_format_value(value)}"
            if name == 'a' and self.sd_a is not None:
                text += f" ± {self.sd_a:.10g}"
            elif name == 'b' and self.sd_b is not None:
                text += f" ± {self.sd_b:.10g}"
            lines.append(text)
        lines.append("")
        if self.sd_a is not None:
            lines.append(f"Correlation coefficient, R² = {self.R2:.10g}")
        else:
            lines.append(f"Pearson correlation coefficient, R = {self.R:.10g}")
        lines.append(f"Average square residue = {np.mean(self.residues**2):.10g}")
        lines.append("")
        lines.append(f"Predicted Y: ypred = [{self.ypred[0]:.10g}, {self.ypred[1]:.10g}, ...]")
        lines.append(f"residues = [{self.residues[0]:.10g}, {self.residues[1]:.10g}, ...]")
        lines.append("")
        lines.append("-" * (len(self.title) + 34))
        return '\n'.join(lines)


class CurveFitter:
    """
    Fit a named model to x, y data by global least squares.

    Attributes
    ----------
    x : ndarray
        X-axis data
    y : ndarray
        Y-axis data
    model : ModelSpec or None
        Model to fit
    lower, upper : dict or None
        Sparse bound mappings, name to value
    constant : float or None
        Value at which the model constant is held, if any
    result : CurveFit or None
        Fitting result
    """

    def __init__(self, x_data, y_data):
        """
        Initialize CurveFitter.

        Parameters
        ----------
        x_data : array_like
            X-axis data
        y_data : array_like
            Y-axis data
        """
        self.x, self.y = check_data(x_data, y_data)
        self.model = None
        self.lower = None
        self.upper = None
        self.constant = None
        self.result = None

    def set_model(self, name, **kwargs):
        """
        Select the model to fit.

        Parameters
        ----------
        name : str
            Model name (see ``easyfit.models.list_models``)
        **kwargs
            Model options (``n`` for 'polynomial' and 'exponential')
        """
        from ..models import get_model

        self.model = get_model(name, **kwargs)
        self.lower = None
        self.upper = None
        self.constant = None
        self.result = None

    def set_bounds(self, lower=None, upper=None):
        """
        Set parameter bounds.

        Parameters
        ----------
        lower, upper : dict, optional
            Name to bound value; vector parameters take arrays

        Raises
        ------
        BoundsError
            If the bounds do not match the model variables
        """
        self._require_model()
        set_bounds(self.model.variables, lower, upper)
        self.lower = dict(lower or {})
        self.upper = dict(upper or {})

    def fix_constant(self, value):
        """Hold the model constant (intercept) at ``value``."""
        self._require_model()
        if value is None:
            self.constant = None
            return
        self.model.fix_constant(value)
        self.constant = float(value)

    def _require_model(self):
        if self.model is None:
            raise ValueError("No model set. Use set_model() first.")

    def _free_model_and_bounds(self):
        spec = self.model
        bounds = set_bounds(spec.variables, self.lower, self.upper)
        if self.constant is None:
            return spec, bounds
        spec = spec.fix_constant(self.constant)
        npar = spec.n_params
        return spec, Bounds(bounds.lower[:npar], bounds.upper[:npar], spec.variables)

    def fit(self, options=None, rng=None):
        """
        Perform the fit.

        Parameters
        ----------
        options : Options, optional
            Search and solver options
        rng : numpy.random.Generator, optional
            Random source for the initial points

        Returns
        -------
        CurveFit
            Fit result

        Raises
        ------
        NoSuccessfulFitError
            If every trial of the global search failed
        """
        self._require_model()
        options = options if options is not None else Options()
        spec, bounds = self._free_model_and_bounds()

        if options.p0_range is None and spec.initial_range is not None:
            p0_range = slide_into_bounds(bounds, spec.initial_range(self.x, self.y))
        else:
            p0_range = options.resolve_p0_range(self.x, self.y)

        problem = LeastSquaresProblem(spec.func, spec.jac, self.x, self.y)
        log_info(f"Fitting {spec.report_title.lower()}: {spec.equation} ({len(self.x)} points)")
        search = find_best_fit(
            problem.objective,
            problem.gradient,
            spec.n_params,
            bounds=bounds,
            options=options,
            rng=rng,
            residuals=problem.residuals,
            p0_range=p0_range,
        )

        p = search.x
        if spec.canonical is not None:
            p = spec.canonical(p)

        ypred = problem.predict(p)
        residues = ypred - self.y
        R = pearson_r(self.y, ypred)
        params = spec.unpack(p)

        sd_a = sd_b = None
        if spec.name == 'linear':
            sd_a, sd_b = linear_standard_errors(self.x, self.y, params['a'], params['b'])

        x_fine = fine_mesh(self.x, options.fine)
        self.result = CurveFit(
            model=spec.name,
            equation=spec.equation,
            params=params,
            coefficients=np.asarray(p, dtype=float),
            R=R,
            R2=R**2,
            x=x_fine,
            y=problem.predict(p, x_fine),
            ypred=ypred,
            residues=residues,
            ssr=float(np.sum(residues**2)),
            search=search,
            title=spec.report_title,
            sd_a=sd_a,
            sd_b=sd_b,
            spec=spec,
        )
        return self.result

    def get_statistics(self):
        """
        Get fit statistics.

        Returns
        -------
        dict
            Statistics dictionary (see ``calculate_statistics``)
        """
        if self.result is None:
            raise ValueError("No fit result available. Run fit() first.")
        return calculate_statistics(self.y, self.result.ypred, len(self.result.coefficients))

    def get_fit_report(self):
        """
        Get detailed fit report.

        Returns
        -------
        str
            Fit report string
        """
        if self.result is None:
            raise ValueError("No fit result available. Run fit() first.")

        search = self.result.search
        report = str(self.result) + "\n\n"
        report += "[[ SEARCH ]]\n"
        report += f"  - Trials:        {search.ntrials}\n"
        report += f"  - Successful:    {search.nsuccess}\n"
        report += f"  - Failed:        {search.nfailed}\n"
        report += f"  - Best found:    {search.nbest} times\n"
        report += f"  - Converged:     {search.converged}\n"
        report += f"  - Best trial:    {search.best_trial}\n"
        if self.result.spec.fixed:
            report += "\n[[ FIXED ]]\n"
            for name, value in self.result.spec.fixed.items():
                report += f"  - {name} = {value:.10g}\n"
        return report
