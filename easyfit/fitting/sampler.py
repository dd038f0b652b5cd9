"""
Random initial points for the global search.
"""

import numpy as np

from .errors import InfeasibleBoundsError, SolverInputError


def sampling_interval(bounds, p0_range):
    """
    Intersection of the bounds with the exploration range.

    Parameters
    ----------
    bounds : Bounds
        Parameter bounds.
    p0_range : tuple
        ``(rmin, rmax)``; each may be a scalar or an array of length n.

    Returns
    -------
    low, high : ndarray
        Per-coordinate sampling interval.
    """
    rmin, rmax = p0_range
    n = len(bounds)
    try:
        low = np.maximum(np.broadcast_to(np.asarray(rmin, dtype=float), (n,)), bounds.lower)
        high = np.minimum(np.broadcast_to(np.asarray(rmax, dtype=float), (n,)), bounds.upper)
    except ValueError as e:
        raise SolverInputError(f"p0_range does not match {n} parameters: {e}") from e
    return low, high


def slide_into_bounds(bounds, p0_range):
    """
    Move a suggested range onto the bounds wherever the two do not overlap.

    Coordinates whose window lies entirely below ``lower[i]`` (or above
    ``upper[i]``) get a window of the same width starting at ``lower[i]``
    (or ending at ``upper[i]``). Overlapping coordinates are unchanged.

    Parameters
    ----------
    bounds : Bounds
        Parameter bounds.
    p0_range : tuple
        ``(rmin, rmax)`` suggested exploration range.

    Returns
    -------
    rmin, rmax : ndarray
        Per-coordinate range that intersects the bounds.
    """
    n = len(bounds)
    try:
        rmin = np.array(np.broadcast_to(np.asarray(p0_range[0], dtype=float), (n,)))
        rmax = np.array(np.broadcast_to(np.asarray(p0_range[1], dtype=float), (n,)))
    except ValueError as e:
        raise SolverInputError(f"p0_range does not match {n} parameters: {e}") from e
    width = rmax - rmin

    above = bounds.lower > rmax
    rmin[above] = bounds.lower[above]
    rmax[above] = bounds.lower[above] + width[above]

    below = bounds.upper < rmin
    rmax[below] = bounds.upper[below]
    rmin[below] = bounds.upper[below] - width[below]
    return rmin, rmax


def initial_point(n, bounds, p0_range, rng):
    """
    Draw a feasible random starting point.

    Each coordinate is drawn uniformly from
    ``[max(rmin, lower[i]), min(rmax, upper[i])]``.

    Parameters
    ----------
    n : int
        Number of parameters.
    bounds : Bounds
        Parameter bounds (length n).
    p0_range : tuple
        ``(rmin, rmax)`` exploration range.
    rng : numpy.random.Generator
        Random source.

    Returns
    -------
    ndarray
        Starting point of length n.

    Raises
    ------
    InfeasibleBoundsError
        If the interval of some coordinate is empty or unbounded.
    """
    if len(bounds) != n:
        raise SolverInputError(f"Bounds have length {len(bounds)}, expected {n}")
    low, high = sampling_interval(bounds, p0_range)

    empty = np.nonzero(low > high)[0]
    if len(empty) > 0:
        i = int(empty[0])
        raise InfeasibleBoundsError(
            f"Initial point range {p0_range} does not intersect the bounds of "
            f"'{bounds.owner(i)}': [{bounds.lower[i]}, {bounds.upper[i]}]"
        )
    infinite = np.nonzero(~(np.isfinite(low) & np.isfinite(high)))[0]
    if len(infinite) > 0:
        i = int(infinite[0])
        raise InfeasibleBoundsError(
            f"Initial point interval of '{bounds.owner(i)}' is not finite: [{low[i]}, {high[i]}]"
        )

    return low + rng.random(n) * (high - low)
