"""Select subsets of variables by coordinate value."""

import numbers

import numpy

from climvar.core import dimensions
from climvar.core import metric
from climvar.core import numerical


class InvalidRangeError(ValueError):
    """The bounds of a range are out of order."""


def slice_dims(var, **values: numbers.Real):
    """Select the coordinate nearest each given value.

    Each keyword names a dimension of `var`. For each one, this function
    selects the index whose coordinate is nearest the value (see
    `~numerical.nearest_index`), removes the dimension, records the selected
    coordinate in the attributes 'slice_<name>' and 'slice_<name>_units', and
    extends the long name.

    Examples
    --------
    Select the time nearest 200 seconds from a variable with times from 100
    to 110 seconds::

        >>> sliced = slice_dims(var, time=200.0)
        >>> sliced.attributes['slice_time']
        '110.0'
        >>> sliced.long_name
        'hi time = 1m 50.0s'
    """
    result = var
    for name, value in values.items():
        result = _slice_one(result, name, value)
    return result


def _slice_one(var, name: str, value: numbers.Real):
    """Helper for `slice_dims`."""
    if name not in var.dims:
        raise dimensions.DimensionNotFoundError(name, var.dims)
    axis = list(var.dims).index(name)
    index = numerical.nearest_index(var.dims[name], value)
    selected = numpy.take(var.data, [index], axis=axis)
    point = var.dims[name][index].item()
    units = var.dim_units(name)
    attributes = dict(var.attributes)
    attributes[f'slice_{name}'] = str(point)
    attributes[f'slice_{name}_units'] = units
    if 'long_name' in attributes:
        if dimensions.REGISTRY.role_of(name) == 'time':
            shown = numerical.seconds_to_prettystr(_as_seconds(point, units))
        else:
            shown = str(point)
        attributes['long_name'] = f"{attributes['long_name']} {name} = {shown}"
    return var._copy_with(
        attributes=attributes,
        dims={k: v for k, v in var.dims.items() if k != name},
        dim_attributes={
            k: v for k, v in var.dim_attributes.items() if k != name
        },
        data=numerical.squeeze(selected, axes=(axis,)),
    )


def _as_seconds(value: numbers.Real, units: str) -> numbers.Real:
    """Convert a time coordinate to seconds when its unit allows.

    Times without a recognized unit of time are already in seconds.
    """
    unit = metric.Unit(units)
    if unit.is_compatible_with('s') and unit != 's':
        return float(unit.convert(value, 's'))
    return value


def window(
    var,
    name: str,
    left: numbers.Real=None,
    right: numbers.Real=None,
):
    """Restrict the named dimension to coordinates in ``[left, right]``.

    Parameters
    ----------
    var : `~variable.Var`
        The variable to restrict.

    name : string
        The dimension to restrict. Other dimensions remain unchanged.

    left, right : real, optional
        The inclusive bounds. Each defaults to the corresponding extreme
        coordinate.

    Raises
    ------
    DimensionNotFoundError
        `var` has no dimension called `name`.

    InvalidRangeError
        `left` is greater than `right`.
    """
    if name not in var.dims:
        raise dimensions.DimensionNotFoundError(name, var.dims)
    lower, upper = var.range_dim(name)
    left = lower if left is None else left
    right = upper if right is None else right
    if left > right:
        raise InvalidRangeError(
            f"Left bound ({left}) is greater than right bound ({right})"
        ) from None
    values = var.dims[name]
    indices = numpy.flatnonzero((values >= left) & (values <= right))
    axis = list(var.dims).index(name)
    dims = dict(var.dims)
    dims[name] = values[indices]
    return var._copy_with(
        dims=dims,
        data=numpy.take(var.data, indices, axis=axis),
    )


def center_longitude(var, lon: numbers.Real):
    """Rotate the longitude axis so that it centers on `lon`.

    The coordinate nearest `lon` moves to index ``n // 2 - 1`` of the `n`
    longitudes and the data follow it. Coordinates that wrap around the end
    of the axis shift by 360 degrees, so the coordinates remain strictly
    increasing. On a closed grid, whose last longitude repeats the first one
    a full turn later, the repeated endpoint is rebuilt after the rotation.

    Raises
    ------
    DimensionNotFoundError
        `var` has no longitude dimension.
    """
    name = var.longitude_name
    axis = list(var.dims).index(name)
    values = numpy.asarray(var.dims[name], dtype=float)
    data = var.data
    closed = len(values) > 1 and numpy.isclose(values[-1] - values[0], 360.0)
    center = max(len(values) // 2 - 1, 0)
    if closed:
        values = values[:-1]
        data = numpy.take(data, numpy.arange(len(values)), axis=axis)
    shift = center - numerical.nearest_index(values, lon)
    rotated = numpy.roll(values, shift)
    if shift < 0:
        rotated[shift:] += 360.0
    elif shift > 0:
        rotated[:shift] -= 360.0
    data = numpy.roll(data, shift, axis=axis)
    if closed:
        rotated = numpy.append(rotated, rotated[0] + 360.0)
        data = numpy.concatenate(
            [data, numpy.take(data, [0], axis=axis)],
            axis=axis,
        )
    dims = dict(var.dims)
    dims[name] = rotated
    return var._copy_with(dims=dims, data=data)
