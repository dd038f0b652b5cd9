"""
Exceptions raised by the fitting engine.

Bounds errors are raised while the bound vectors are assembled, before any
optimization starts. ``SolverInputError`` flags malformed arguments passed to
a local solver. ``NoSuccessfulFitError`` is raised when every trial of the
global search failed.
"""


class EasyFitError(Exception):
    """Base class of all errors raised by easyfit."""


class BoundsError(EasyFitError, ValueError):
    """Invalid lower/upper bound specification."""


class BoundsShapeError(BoundsError):
    """A bound value does not match the shape declared for its variable."""


class UnknownBoundTargetError(BoundsError):
    """A bound was given for a name that is not a variable of the model."""


class UnsupportedBoundError(BoundsError):
    """A bound was given for a constant (intercept) variable."""


class InfeasibleBoundsError(BoundsError):
    """Lower bound greater than upper bound, or empty sampling interval."""


class SolverInputError(EasyFitError, ValueError):
    """Vectors passed to a local solver have inconsistent lengths."""


class NoSuccessfulFitError(EasyFitError, RuntimeError):
    """The global search ran out of trials without a single successful fit."""
