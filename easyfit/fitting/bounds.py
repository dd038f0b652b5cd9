"""
Lower/upper bound handling for fit parameters.

Models declare their parameters as a list of ``Variable`` descriptors. Users
give bounds as sparse mappings from variable name to value, for example::

    >>> variables = [Variable('a'), Variable('b', kind='constant')]
    >>> bounds = set_bounds(variables, lower={'a': 0.0})
    >>> bounds.lower
    array([  0., -inf])

``set_bounds`` validates the mappings against the declared variables and
flattens them into the dense vectors used by the solvers.
"""

from dataclasses import dataclass
from numbers import Real

import numpy as np

from .errors import (
    BoundsShapeError,
    InfeasibleBoundsError,
    UnknownBoundTargetError,
    UnsupportedBoundError,
)

VARIABLE_KINDS = ('scalar', 'vector', 'constant')


@dataclass(frozen=True)
class Variable:
    """
    Declaration of one named parameter group of a model.

    Attributes
    ----------
    name : str
        Parameter name as used in bound mappings.
    kind : str
        'scalar', 'vector' (fixed length ``dim``) or 'constant' (free
        intercept that cannot be bounded).
    dim : int
        Number of coordinates taken in the flattened parameter vector.
    """
    name: str
    kind: str = 'scalar'
    dim: int = 1

    def __post_init__(self):
        if self.kind not in VARIABLE_KINDS:
            raise ValueError(f"Unknown variable kind: {self.kind}. Available: {list(VARIABLE_KINDS)}")
        if self.dim < 1:
            raise ValueError(f"Variable '{self.name}' must have positive dimension, got {self.dim}")
        if self.kind == 'scalar' and self.dim != 1:
            raise ValueError(f"Scalar variable '{self.name}' must have dimension 1, got {self.dim}")

    @property
    def shape_description(self):
        if self.kind == 'vector':
            return f"vector of length {self.dim}"
        return "scalar"


@dataclass(frozen=True)
class Bounds:
    """
    Dense lower and upper bound vectors.

    Built by ``set_bounds``; ``lower[i] <= upper[i]`` for every coordinate.
    """
    lower: np.ndarray
    upper: np.ndarray
    variables: tuple = ()

    def __len__(self):
        return len(self.lower)

    def owner(self, index):
        """Return the name of the variable owning a flattened coordinate."""
        if not self.variables:
            return f"p{index}"
        start = 0
        for var in self.variables:
            if start <= index < start + var.dim:
                return var.name
            start += var.dim
        raise IndexError(f"Coordinate {index} out of range for {len(self)} parameters")

    @classmethod
    def unbounded(cls, n, dtype=np.float64):
        """Bounds for ``n`` unconstrained parameters named p0, p1, ..."""
        return set_bounds([Variable(f"p{i}") for i in range(n)], dtype=dtype)


def n_parameters(variables):
    """Length of the flattened parameter vector."""
    return sum(var.dim for var in variables)


def _type_limits(dtype):
    dtype = np.dtype(dtype)
    if np.issubdtype(dtype, np.floating):
        return -np.inf, np.inf
    if np.issubdtype(dtype, np.integer):
        info = np.iinfo(dtype)
        return info.min, info.max
    raise TypeError(f"Bounds require a real numeric type, got {dtype}")


def _describe(value):
    if isinstance(value, (bool, np.bool_)):
        return "bool"
    if isinstance(value, Real):
        return "scalar"
    arr = np.asarray(value)
    if arr.ndim == 1:
        return f"vector of length {arr.shape[0]}"
    if arr.ndim == 0:
        return type(value).__name__
    return f"array of shape {arr.shape}"


def _check_bound_input(var, value, which, default, dtype):
    """Validate one bound value against its variable and return it as an array."""
    if value is None:
        return np.full(var.dim, default, dtype=dtype)

    if var.kind == 'vector':
        if isinstance(value, (str, bytes)) or isinstance(value, Real):
            ok = False
        else:
            arr = np.asarray(value)
            ok = (arr.ndim == 1 and arr.shape[0] == var.dim
                  and (np.issubdtype(arr.dtype, np.integer) or np.issubdtype(arr.dtype, np.floating)))
        if not ok:
            raise BoundsShapeError(
                f"{which} bound of '{var.name}' must be a {var.shape_description}, "
                f"got {_describe(value)}"
            )
    elif isinstance(value, (bool, np.bool_)) or not isinstance(value, Real):
        raise BoundsShapeError(
            f"{which} bound of '{var.name}' must be a {var.shape_description}, "
            f"got {_describe(value)}"
        )

    values = np.asarray(value, dtype=float)
    if np.any(np.isnan(values)):
        raise BoundsShapeError(f"{which} bound of '{var.name}' contains NaN")
    if np.issubdtype(np.dtype(dtype), np.integer):
        _check_integer_bound(var, values, which, dtype)
    return np.full(var.dim, value, dtype=dtype)


def _check_integer_bound(var, values, which, dtype):
    info = np.iinfo(dtype)
    if not np.all(np.isfinite(values)):
        raise BoundsShapeError(
            f"{which} bound of '{var.name}' is infinite, which {np.dtype(dtype).name} "
            f"cannot represent. Leave it unset for an unbounded parameter."
        )
    if np.any(values != np.round(values)):
        raise BoundsShapeError(
            f"{which} bound of '{var.name}' must be integral for {np.dtype(dtype).name} "
            f"parameters, got {values.tolist() if values.ndim else float(values)}"
        )
    if np.any(values < info.min) or np.any(values > info.max):
        raise BoundsShapeError(
            f"{which} bound of '{var.name}' is outside the range of {np.dtype(dtype).name}: "
            f"[{info.min}, {info.max}]"
        )


def set_bounds(variables, lower=None, upper=None, dtype=np.float64):
    """
    Assemble and validate the bound vectors of a model.

    Parameters
    ----------
    variables : list of Variable
        Declared parameters, in the order they appear in the flattened
        parameter vector.
    lower : dict, optional
        Mapping from variable name to lower bound (scalar or sequence).
        Missing names (or None values) are unbounded.
    upper : dict, optional
        Mapping from variable name to upper bound.
    dtype : numpy dtype, optional
        Numeric type of the parameters. Missing bounds take -inf/+inf for
        floating types and the extreme representable values for integers.

    Returns
    -------
    Bounds
        Dense bound vectors.

    Raises
    ------
    UnknownBoundTargetError
        If a bound names something that is not a variable.
    UnsupportedBoundError
        If a bound targets a constant variable.
    BoundsShapeError
        If a bound does not match the declared shape of its variable.
    InfeasibleBoundsError
        If a lower bound is greater than the corresponding upper bound.
    """
    lower = dict(lower or {})
    upper = dict(upper or {})
    declared = {var.name: var for var in variables}

    for name in list(lower) + list(upper):
        if lower.get(name) is None and upper.get(name) is None:
            continue
        if name not in declared:
            raise UnknownBoundTargetError(
                f"A bound was set to variable '{name}', but '{name}' is not a "
                f"variable of the current fit function. Variables: {list(declared)}"
            )
        if declared[name].kind == 'constant':
            raise UnsupportedBoundError(
                f"Bounds to intercept '{name}' are not supported. "
                f"Fix it to a constant value instead."
            )

    low_default, high_default = _type_limits(dtype)
    lower_parts = []
    upper_parts = []
    for var in variables:
        lower_parts.append(_check_bound_input(var, lower.get(var.name), 'Lower', low_default, dtype))
        upper_parts.append(_check_bound_input(var, upper.get(var.name), 'Upper', high_default, dtype))

    lower_vec = np.concatenate(lower_parts) if lower_parts else np.zeros(0, dtype=dtype)
    upper_vec = np.concatenate(upper_parts) if upper_parts else np.zeros(0, dtype=dtype)

    bounds = Bounds(lower=lower_vec, upper=upper_vec, variables=tuple(variables))
    bad = np.nonzero(lower_vec > upper_vec)[0]
    if len(bad) > 0:
        i = int(bad[0])
        name = bounds.owner(i)
        where = f"'{name}'"
        if declared[name].kind == 'vector':
            where += f" (element {i - _offset(variables, name)})"
        raise InfeasibleBoundsError(
            f"Error in bounds. Lower bound of {where} greater than upper bound: "
            f"{lower_vec[i]} > {upper_vec[i]}"
        )
    return bounds


def _offset(variables, name):
    start = 0
    for var in variables:
        if var.name == name:
            return start
        start += var.dim
    raise KeyError(name)
