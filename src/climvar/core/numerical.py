import numbers
import typing
import warnings

import numpy
import numpy.typing


def nearest_index(
    values: numpy.typing.ArrayLike,
    target: numbers.Real,
) -> int:
    """Find the index of the value in a 1-D collection nearest the target.

    Parameters
    ----------
    values : array-like
        A one-dimensional collection of numbers.

    target : real
        The value for which to search in `values`.

    Returns
    -------
    int
        The index of the extreme value when `target` lies below the minimum
        or above the maximum of `values`; otherwise, the index of the value
        minimizing the absolute difference with `target`. Ties go to the
        lower index.

    Examples
    --------
    >>> nearest_index([-1, 0, 1, 2, 3, 4, 5], 3)
    4
    >>> nearest_index([-1, 0, 1, 2, 3, 4, 5], 0.1)
    1

    Notes
    -----
    This function is based on the top answer to this StackOverflow question:
    https://stackoverflow.com/questions/2566412/find-nearest-value-in-numpy-array
    """
    array = numpy.asarray(values)
    if target < array.min():
        return int(array.argmin())
    if target > array.max():
        return int(array.argmax())
    return int(numpy.abs(array - target).argmin())


def nearest_indices(
    values: numpy.typing.ArrayLike,
    targets: numpy.typing.ArrayLike,
) -> numpy.ndarray:
    """Find the nearest index in `values` for each of `targets`."""
    return numpy.array(
        [nearest_index(values, target) for target in numpy.ravel(targets)],
        dtype=int,
    )


def nanmean(
    array: numpy.typing.ArrayLike,
    axis: typing.Union[int, typing.Tuple[int, ...]]=None,
    keepdims: bool=False,
) -> numpy.ndarray:
    """Compute the mean along `axis`, ignoring NaN.

    Slices that contain only NaN produce NaN without a warning.
    """
    with warnings.catch_warnings():
        warnings.simplefilter('ignore', category=RuntimeWarning)
        return numpy.nanmean(array, axis=axis, keepdims=keepdims)


def latitude_weights(latitudes: numpy.typing.ArrayLike) -> numpy.ndarray:
    """Compute area weights for latitudes in degrees.

    The weights are proportional to the cosine of latitude and normalized
    so that their NaN-aware mean is 1.
    """
    weights = numpy.cos(numpy.deg2rad(numpy.asarray(latitudes, dtype=float)))
    return weights / nanmean(weights)


def squeeze(
    array: numpy.typing.ArrayLike,
    axes: typing.Iterable[int]=None,
) -> numpy.ndarray:
    """Remove singular axes from `array`.

    If `axes` is given, only consider removing those axes. Axes in `axes`
    with length greater than one remain in place.
    """
    array = numpy.asarray(array)
    if axes is None:
        axes = range(array.ndim)
    drop = tuple(i for i in axes if array.shape[i] == 1)
    return array.squeeze(axis=drop) if drop else array


_SECONDS_PER = {
    'y': 365 * 24 * 60 * 60,
    'd': 24 * 60 * 60,
    'h': 60 * 60,
    'm': 60,
}


def seconds_to_prettystr(seconds: numbers.Real) -> str:
    """Express a number of seconds in years, days, hours, and minutes.

    One year is defined as 365 days. Zero-valued parts are omitted.

    Examples
    --------
    >>> seconds_to_prettystr(10)
    '10s'
    >>> seconds_to_prettystr(110.0)
    '1m 50.0s'
    >>> seconds_to_prettystr(24 * 60 * 60 * 365 + 1)
    '1y 1s'
    """
    parts = []
    remainder = seconds
    for suffix, size in _SECONDS_PER.items():
        count, remainder = divmod(remainder, size)
        if count > 0:
            parts.append(f"{int(count)}{suffix}")
    if remainder > 0:
        parts.append(f"{remainder}s")
    return ' '.join(parts)
