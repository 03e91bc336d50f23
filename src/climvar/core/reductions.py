"""Reduce variables along one or more named dimensions.

The functions in this module accept any variable-like object with the
attributes of `~variable.Var` and return a new instance of the same type.
"""

import inspect
import os
import typing
import warnings

import numpy

from climvar.core import dimensions
from climvar.core import numerical


_PACKAGE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def _external_stacklevel() -> int:
    """The `stacklevel` that attributes a warning to the first caller
    outside of this package."""
    level = 0
    frame = inspect.currentframe()
    while frame is not None:
        filename = os.path.abspath(frame.f_code.co_filename)
        if not filename.startswith(_PACKAGE_DIR + os.sep):
            break
        level += 1
        frame = frame.f_back
    return level


def average_over(
    var,
    name: str,
    weighted: bool=False,
    ignore_nan: bool=True,
):
    """Average `var` over the named dimension.

    Parameters
    ----------
    var : `~variable.Var`
        The variable to reduce.

    name : string
        The dimension to remove.

    weighted : bool, default=False
        If true, weight each value by the cosine of its latitude. Only
        latitude-like dimensions support weighting.

    ignore_nan : bool, default=True
        If true, skip NaN values. Otherwise, any NaN along the dimension
        produces NaN.

    Raises
    ------
    DimensionNotFoundError
        `var` has no dimension called `name`.

    ValueError
        The caller requested weighting over a dimension that is not
        latitude-like.
    """
    return _reduce(var, (name,), weighted, ignore_nan)


def average_lat(var, weighted: bool=False, ignore_nan: bool=True):
    """Average `var` over its latitude dimension."""
    return average_over(var, var.latitude_name, weighted, ignore_nan)


def average_lon(var, ignore_nan: bool=True):
    """Average `var` over its longitude dimension."""
    return average_over(var, var.longitude_name, ignore_nan=ignore_nan)


def average_time(var, ignore_nan: bool=True):
    """Average `var` over its time dimension."""
    return average_over(var, var.time_name, ignore_nan=ignore_nan)


def average_x(var, ignore_nan: bool=True):
    """Average `var` over the horizontal box dimension 'x'."""
    return average_over(var, 'x', ignore_nan=ignore_nan)


def average_y(var, ignore_nan: bool=True):
    """Average `var` over the horizontal box dimension 'y'."""
    return average_over(var, 'y', ignore_nan=ignore_nan)


def average_xy(var, ignore_nan: bool=True):
    """Average `var` over both horizontal box dimensions at once."""
    return _reduce(var, ('x', 'y'), False, ignore_nan)


def average_lonlat(var, weighted: bool=False, ignore_nan: bool=True):
    """Average `var` over longitude and latitude at once."""
    names = (var.longitude_name, var.latitude_name)
    return _reduce(var, names, weighted, ignore_nan)


def _reduce(
    var,
    names: typing.Tuple[str, ...],
    weighted: bool,
    ignore_nan: bool,
):
    """Average `var` over one or two dimensions."""
    for name in names:
        if name not in var.dims:
            raise dimensions.DimensionNotFoundError(name, var.dims)
    order = list(var.dims)
    axes = tuple(order.index(name) for name in names)
    data = var.data
    if weighted:
        data = data * _area_weights(var, names, axes)
    mean = numerical.nanmean if ignore_nan else numpy.mean
    reduced = mean(data, axis=axes)
    attributes = dict(var.attributes)
    if 'long_name' in attributes:
        prefix = 'weighted averaged' if weighted else 'averaged'
        described = [_describe(var, name) for name in names]
        if len(names) == 1:
            suffix = f"{prefix} over {described[0]}"
        else:
            suffix = f"{prefix} horizontally over {' and '.join(described)}"
        attributes['long_name'] = f"{attributes['long_name']} {suffix}"
    return var._copy_with(
        attributes=attributes,
        dims={k: v for k, v in var.dims.items() if k not in names},
        dim_attributes={
            k: v for k, v in var.dim_attributes.items() if k not in names
        },
        data=reduced,
    )


def _describe(var, name: str) -> str:
    """Describe the range that a dimension covers."""
    lower, upper = var.range_dim(name)
    return f"{name} ({lower} to {upper}{var.dim_units(name)})"


def _area_weights(
    var,
    names: typing.Tuple[str, ...],
    axes: typing.Tuple[int, ...],
) -> numpy.ndarray:
    """Compute cosine-latitude weights with the shape of `var.data`.

    Positions where the data are NaN get NaN weight, so that the weights
    normalize to a mean of 1 over the valid data along `axes`.
    """
    latitudes = [
        (name, axis) for name, axis in zip(names, axes)
        if dimensions.REGISTRY.role_of(name) == 'latitude'
    ]
    if not latitudes:
        raise ValueError(
            f"Cannot weight over {list(names)};"
            " area weighting requires a latitude dimension"
        ) from None
    name, axis = latitudes[0]
    values = var.dims[name]
    if numpy.max(numpy.abs(values)) < 0.5 * numpy.pi:
        warnings.warn(
            "Detected latitudes are small."
            " If units are radians, results will be wrong",
            RuntimeWarning,
            stacklevel=_external_stacklevel(),
        )
    shape = [1] * var.data.ndim
    shape[axis] = -1
    weights = numerical.latitude_weights(values).reshape(shape)
    weights = numpy.where(numpy.isnan(var.data), numpy.nan, weights)
    return weights / numerical.nanmean(weights, axis=axes, keepdims=True)
