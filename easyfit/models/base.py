"""
Model specification shared by all fit models.
"""

from dataclasses import dataclass, field

import numpy as np

from ..fitting.bounds import n_parameters


@dataclass(frozen=True)
class ModelSpec:
    """
    A parametric model y = f(x, p).

    Attributes
    ----------
    name : str
        Model name.
    equation : str
        Human-readable equation.
    variables : tuple of Variable
        Parameter declarations, in flattened order.
    func : callable
        ``func(x, p) -> ndarray``
    jac : callable or None
        ``jac(x, p) -> ndarray`` of shape ``(len(x), len(p))``
    title : str or None
        Report title. Defaults to the capitalized name.
    canonical : callable or None
        ``canonical(p) -> p`` reordering equivalent solutions into a
        canonical form (e.g. exponential terms sorted by rate).
    initial_range : callable or None
        ``initial_range(x, y) -> (rmin, rmax)`` per-parameter range of random
        initial points suited to the data.
    fixed : dict
        Constants removed from the free parameters by ``fix_constant``.
    """
    name: str
    equation: str
    variables: tuple
    func: object
    jac: object = None
    title: str = None
    canonical: object = None
    initial_range: object = None
    fixed: dict = field(default_factory=dict)

    @property
    def n_params(self):
        return n_parameters(self.variables)

    @property
    def report_title(self):
        return self.title or f"{self.name.capitalize()} Fit"

    def unpack(self, p):
        """
        Split a flattened parameter vector into named values.

        Scalars and constants become floats, vectors become arrays. Fixed
        constants are included.
        """
        p = np.asarray(p, dtype=float)
        values = {}
        start = 0
        for var in self.variables:
            chunk = p[start:start + var.dim]
            values[var.name] = chunk.copy() if var.kind == 'vector' else float(chunk[0])
            start += var.dim
        values.update(self.fixed)
        return values

    def fix_constant(self, value):
        """
        Return a model with its trailing constant held at ``value``.

        Raises
        ------
        ValueError
            If the model has no trailing constant variable.
        """
        if not self.variables or self.variables[-1].kind != 'constant':
            raise ValueError(f"Model '{self.name}' has no constant term to fix")
        constant = self.variables[-1]
        value = float(value)
        npar = self.n_params - constant.dim

        def full(p):
            return np.append(np.asarray(p, dtype=float), [value] * constant.dim)

        func = self.func
        jac = self.jac
        canonical = self.canonical
        initial_range = self.initial_range

        def fixed_func(x, p):
            return func(x, full(p))

        fixed_jac = None
        if jac is not None:
            def fixed_jac(x, p):
                return jac(x, full(p))[:, :npar]

        fixed_canonical = None
        if canonical is not None:
            def fixed_canonical(p):
                return canonical(full(p))[:npar]

        fixed_range = None
        if initial_range is not None:
            def fixed_range(x, y):
                rmin, rmax = initial_range(x, y)
                return np.asarray(rmin)[:npar], np.asarray(rmax)[:npar]

        return ModelSpec(
            name=self.name,
            equation=self.equation,
            variables=self.variables[:-1],
            func=fixed_func,
            jac=fixed_jac,
            title=self.title,
            canonical=fixed_canonical,
            initial_range=fixed_range,
            fixed={**self.fixed, constant.name: value},
        )
