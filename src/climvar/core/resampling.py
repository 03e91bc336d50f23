"""Express variables on the grids of other variables."""

import logging

import numpy

from climvar.core import dimensions
from climvar.core import interpolation
from climvar.core import metric
from climvar.core import numerical


logger = logging.getLogger(__name__)


class InconsistentDimensionsError(ValueError):
    """Two variables do not describe the same kinds of dimensions."""


def check_dims_consistent(x, y) -> None:
    """Ensure that two variables have matching kinds of dimensions.

    The variables must have the same number of dimensions and the same
    conventional dimension names (see `~dimensions.conventional_dim_name`),
    in the same order. Every dimension of both variables must have units,
    and the units must be equal at each position.

    Raises
    ------
    InconsistentDimensionsError
        Some condition does not hold. The message describes which one.
    """
    x_names, y_names = list(x.dims), list(y.dims)
    if len(x_names) != len(y_names):
        raise InconsistentDimensionsError(
            "Number of dimensions do not match between"
            f" x ({len(x_names)}) and y ({len(y_names)})"
        ) from None
    x_conventional = [dimensions.conventional_dim_name(n) for n in x_names]
    y_conventional = [dimensions.conventional_dim_name(n) for n in y_names]
    if x_conventional != y_conventional:
        raise InconsistentDimensionsError(
            f"Dimensions do not agree between x ({x_conventional})"
            f" and y ({y_conventional})"
        ) from None
    x_units = [x.dim_units(n) for n in x_names]
    y_units = [y.dim_units(n) for n in y_names]
    pairs = list(zip(x_names, y_names, x_units, y_units))
    missing_x = [xn for xn, _, xu, _ in pairs if not xu]
    missing_y = [yn for _, yn, _, yu in pairs if not yu]
    if missing_x and missing_y:
        raise InconsistentDimensionsError(
            f"Units for dimensions {missing_x} are missing in x"
            f" and units for dimensions {missing_y} are missing in y"
        ) from None
    if missing_x:
        raise InconsistentDimensionsError(
            f"Units for dimensions {missing_x} are missing in x"
        ) from None
    if missing_y:
        raise InconsistentDimensionsError(
            f"Units for dimensions {missing_y} are missing in y"
        ) from None
    unequal = [
        (xn, yn) for xn, yn, xu, yu in pairs
        if xu and yu and metric.Unit(xu) != metric.Unit(yu)
    ]
    if unequal:
        x_bad = [xn for xn, _ in unequal]
        y_bad = [yn for _, yn in unequal]
        raise InconsistentDimensionsError(
            f"Units for dimensions {x_bad} in x is not consistent"
            f" with units for dimensions {y_bad} in y"
        ) from None


def resampled_as(src, dest):
    """Resample `src` onto the grid of `dest` by nearest neighbor.

    For each dimension, the result takes its coordinates from `dest` and its
    data from the nearest coordinate in `src`. The result keeps the dimension
    names and all metadata of `src`.

    Raises
    ------
    InconsistentDimensionsError
        The two variables have inconsistent dimensions (see
        `check_dims_consistent`).

    OutOfBoundsError
        Some coordinate of `dest` lies outside the range of `src`.
    """
    check_dims_consistent(src, dest)
    dims = {}
    indices = []
    for src_name, dest_name in zip(src.dims, dest.dims):
        source = src.dims[src_name]
        target = dest.dims[dest_name]
        if target.min() < source.min() or target.max() > source.max():
            raise interpolation.OutOfBoundsError(
                f"Range of {dest_name} ({target.min()} to {target.max()})"
                f" exceeds range of {src_name}"
                f" ({source.min()} to {source.max()})"
            ) from None
        dims[src_name] = target
        indices.append(numerical.nearest_indices(source, target))
    logger.debug(
        "Resampling %s onto %s",
        src.data.shape,
        tuple(len(i) for i in indices),
    )
    data = src.data[numpy.ix_(*indices)] if indices else src.data
    return src._copy_with(dims=dims, data=data)
