import typing

import numpy
import numpy.typing
from scipy.interpolate import RegularGridInterpolator


class OutOfBoundsError(IndexError):
    """A requested coordinate lies outside the covered range."""


def check_bounds(
    coordinates: typing.Mapping[str, numpy.ndarray],
    points: numpy.ndarray,
) -> None:
    """Ensure that every point lies within the range of each coordinate.

    Parameters
    ----------
    coordinates : mapping
        The coordinate array of each dimension, in axis order.

    points : `numpy.ndarray`
        A 2-D array with one row per point and one column per dimension.

    Raises
    ------
    OutOfBoundsError
        Some value lies outside the closed range of its coordinate array.
    """
    for i, (name, values) in enumerate(coordinates.items()):
        lower, upper = numpy.min(values), numpy.max(values)
        column = points[:, i]
        outside = (column < lower) | (column > upper)
        if numpy.any(outside):
            raise OutOfBoundsError(
                f"Cannot interpolate {name} = {column[outside][0]}"
                f" outside of [{lower}, {upper}]"
            ) from None


class Interpolant:
    """A multilinear interpolant over a rectilinear grid."""

    def __init__(
        self,
        coordinates: typing.Mapping[str, numpy.typing.ArrayLike],
        values: numpy.typing.ArrayLike,
    ) -> None:
        """
        Parameters
        ----------
        coordinates : mapping
            The node positions along each dimension, in the axis order of
            `values`. Each array must be strictly increasing.

        values : array-like
            The values at the grid nodes.
        """
        self.coordinates = {
            name: numpy.asarray(array, dtype=float)
            for name, array in coordinates.items()
        }
        self._interp = RegularGridInterpolator(
            tuple(self.coordinates.values()),
            numpy.asarray(values, dtype=float),
            method='linear',
            bounds_error=False,
            fill_value=None,
        )

    @property
    def ndim(self) -> int:
        """The number of grid dimensions."""
        return len(self.coordinates)

    def normalize(self, arg: numpy.typing.ArrayLike) -> numpy.ndarray:
        """Convert user input into a 2-D array of points.

        A scalar is one point of a 1-D grid. For a 1-D grid, a flat sequence
        is a sequence of points. For an N-D grid, a flat sequence of length N
        is one point and a nested sequence holds one point per member.
        """
        array = numpy.asarray(arg, dtype=float)
        if array.ndim == 0:
            array = array.reshape(1, 1)
        elif array.ndim == 1:
            if self.ndim == 1:
                array = array.reshape(-1, 1)
            else:
                array = array.reshape(1, -1)
        if array.ndim != 2 or array.shape[1] != self.ndim:
            raise ValueError(
                f"Expected points with {self.ndim} coordinates;"
                f" got an array with shape {numpy.shape(arg)}"
            ) from None
        return array

    def __call__(self, arg: numpy.typing.ArrayLike):
        """Evaluate this interpolant at one or more points.

        Returns a float for a single point and an array otherwise.

        Raises
        ------
        OutOfBoundsError
            A point lies outside the grid. This interpolant never
            extrapolates.
        """
        single = numpy.ndim(arg) == 0 or (
            numpy.ndim(arg) == 1 and self.ndim > 1
        )
        points = self.normalize(arg)
        check_bounds(self.coordinates, points)
        result = self._interp(points)
        return float(result[0]) if single else result
