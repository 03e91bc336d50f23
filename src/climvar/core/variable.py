"""The labeled variable at the center of climate-model analysis."""

import copy
import numbers
import typing
import warnings

import numpy
import numpy.lib.mixins
import numpy.typing

from climvar.core import dimensions
from climvar.core import interpolation
from climvar.core import metric
from climvar.core import reductions
from climvar.core import resampling
from climvar.core import selection


class ShapeError(ValueError):
    """The data array does not match the declared dimensions."""


class IncompatibleVariablesError(ValueError):
    """Two variables cannot combine because their grids or units differ."""


Attributes = typing.TypeVar('Attributes')
Attributes = typing.Mapping[str, typing.Any]


Dimensions = typing.TypeVar('Dimensions')
Dimensions = typing.Mapping[str, numpy.typing.ArrayLike]


Instance = typing.TypeVar('Instance', bound='Var')


class Var(numpy.lib.mixins.NDArrayOperatorsMixin):
    """An N-dimensional array with named coordinate axes and metadata.

    Parameters
    ----------
    attributes : mapping
        Variable-level metadata. Conventional keys include 'short_name',
        'long_name', and 'units'; producers may add any other key.

    dims : mapping
        The coordinate array of each dimension. The order of this mapping
        defines the axis order of `data`.

    dim_attributes : mapping
        Metadata for each dimension, such as its 'units'.

    data : array-like
        The values. Its shape must equal the length of each coordinate array
        in `dims`, in order.

    Raises
    ------
    ShapeError
        The shape of `data` does not match `dims`.

    Notes
    -----
    Each instance owns copies of its inputs, and no operation modifies an
    existing instance. Every transformation returns a new instance.
    """

    def __init__(
        self,
        attributes: Attributes,
        dims: Dimensions,
        dim_attributes: typing.Mapping[str, Attributes],
        data: numpy.typing.ArrayLike,
    ) -> None:
        self.attributes = copy.deepcopy(dict(attributes))
        if 'units' in self.attributes:
            self.attributes['units'] = metric.Unit(self.attributes['units'])
        self.dims = {
            name: numpy.array(values)
            for name, values in dims.items()
        }
        self.dim_attributes = {
            name: copy.deepcopy(dict(attrs))
            for name, attrs in dim_attributes.items()
        }
        self.data = numpy.array(data)
        for name, values in self.dims.items():
            if values.ndim != 1:
                raise ShapeError(
                    f"Coordinates of {name} must be one-dimensional"
                ) from None
        expected = tuple(len(values) for values in self.dims.values())
        if self.data.shape != expected:
            raise ShapeError(
                f"Data shape {self.data.shape} does not match"
                f" the dimensions {expected}"
            ) from None
        self._interpolant = None

    @classmethod
    def from_dims(
        cls: typing.Type[Instance],
        dims: Dimensions,
        data: numpy.typing.ArrayLike,
    ) -> Instance:
        """Create a new variable without metadata."""
        return cls({}, dims, {}, data)

    def copy(self: Instance) -> Instance:
        """Create an equal variable that shares no storage with this one."""
        return self._copy_with()

    def _copy_with(self: Instance, **updates) -> Instance:
        """Create a new instance from the current attributes."""
        return type(self)(
            updates.get('attributes', self.attributes),
            updates.get('dims', self.dims),
            updates.get('dim_attributes', self.dim_attributes),
            updates.get('data', self.data),
        )

    def __eq__(self, other: typing.Any) -> bool:
        """True if two instances have equal fields."""
        if not isinstance(other, Var):
            return NotImplemented
        if list(self.dims) != list(other.dims):
            return False
        same_dims = all(
            numpy.array_equal(self.dims[name], other.dims[name])
            for name in self.dims
        )
        return (
            same_dims
            and equal_metadata(self.attributes, other.attributes)
            and set(self.dim_attributes) == set(other.dim_attributes)
            and all(
                equal_metadata(attrs, other.dim_attributes[name])
                for name, attrs in self.dim_attributes.items()
            )
            and self.data.shape == other.data.shape
            and numpy.array_equal(self.data, other.data, equal_nan=True)
        )

    def __ne__(self, other: typing.Any) -> bool:
        """True if two instances differ in any field."""
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None

    def __repr__(self) -> str:
        values = numpy.array2string(
            self.data,
            threshold=4,
            edgeitems=2,
            separator=', ',
            precision=3,
            floatmode='maxprec_equal',
        )
        parts = [
            f"dims={list(self.dims)}",
            f"shape={self.data.shape}",
            f"units={self.units!r}",
            f"short_name={self.short_name!r}",
        ]
        return f",\n".join([values, *parts])

    @property
    def ndim(self) -> int:
        """The number of dimensions."""
        return self.data.ndim

    @property
    def shape(self) -> typing.Tuple[int, ...]:
        """The length of each dimension."""
        return self.data.shape

    @property
    def short_name(self) -> str:
        """The short name of this variable, if any."""
        return self.attributes.get('short_name', '')

    @property
    def long_name(self) -> str:
        """The descriptive name of this variable, if any."""
        return self.attributes.get('long_name', '')

    @property
    def has_units(self) -> bool:
        """True if this variable carries a non-empty unit."""
        return bool(self.attributes.get('units'))

    @property
    def units(self) -> str:
        """The canonical string form of this variable's unit.

        Parsed units render in canonical form (e.g., 'm/s' becomes 'm s^-1').
        Unparsable units render as given. A missing unit renders as ''.
        """
        return str(self.attributes.get('units', ''))

    def _check_dim(self, name: str) -> None:
        if name not in self.dims:
            raise dimensions.DimensionNotFoundError(name, self.dims)

    def dim_units(self, name: str) -> str:
        """The unit of the named dimension, or '' if it has none."""
        self._check_dim(name)
        return str(self.dim_attributes.get(name, {}).get('units', ''))

    def range_dim(self, name: str) -> typing.Tuple[numbers.Real, numbers.Real]:
        """The minimum and maximum coordinates of the named dimension."""
        self._check_dim(name)
        values = self.dims[name]
        return values.min().item(), values.max().item()

    def dim_name(self, role: str) -> str:
        """The name of the dimension that plays `role`.

        See `~dimensions.ROLES` for the known roles.
        """
        return dimensions.REGISTRY.find(role, self.dims)

    def has_dim(self, role: str) -> bool:
        """True if some dimension plays `role`."""
        return dimensions.REGISTRY.has(role, self.dims)

    @property
    def time_name(self) -> str:
        return self.dim_name('time')

    @property
    def longitude_name(self) -> str:
        return self.dim_name('longitude')

    @property
    def latitude_name(self) -> str:
        return self.dim_name('latitude')

    @property
    def altitude_name(self) -> str:
        return self.dim_name('altitude')

    @property
    def has_time(self) -> bool:
        return self.has_dim('time')

    @property
    def has_longitude(self) -> bool:
        return self.has_dim('longitude')

    @property
    def has_latitude(self) -> bool:
        return self.has_dim('latitude')

    @property
    def has_altitude(self) -> bool:
        return self.has_dim('altitude')

    @property
    def times(self) -> numpy.ndarray:
        return self.dims[self.time_name]

    @property
    def longitudes(self) -> numpy.ndarray:
        return self.dims[self.longitude_name]

    @property
    def latitudes(self) -> numpy.ndarray:
        return self.dims[self.latitude_name]

    @property
    def altitudes(self) -> numpy.ndarray:
        return self.dims[self.altitude_name]

    _OPERATORS = {
        'add': '+',
        'subtract': '-',
        'multiply': '*',
        'divide': '/',
        'true_divide': '/',
    }

    def __array_ufunc__(self, ufunc, method, *args, **kwargs):
        """Support arithmetic with real numbers and other variables.

        See
        https://numpy.org/doc/stable/reference/generated/numpy.lib.mixins.NDArrayOperatorsMixin.html
        for the pattern that this method follows. Only the four basic
        arithmetic operators are supported; other universal functions return
        `NotImplemented`.
        """
        name = ufunc.__name__
        if method != '__call__' or kwargs or name not in self._OPERATORS:
            return NotImplemented
        if len(args) != 2:
            return NotImplemented
        symbol = self._OPERATORS[name]
        left, right = args
        if isinstance(left, Var) and isinstance(right, Var):
            return _combine(ufunc, symbol, left, right)
        if isinstance(left, Var) and isinstance(right, numbers.Real):
            names = {k: f"{v} {symbol} {right}" for k, v in _names(left)}
            return left._copy_with(
                attributes={**left.attributes, **names},
                data=ufunc(left.data, right),
            )
        if isinstance(right, Var) and isinstance(left, numbers.Real):
            names = {k: f"{left} {symbol} {v}" for k, v in _names(right)}
            return right._copy_with(
                attributes={**right.attributes, **names},
                data=ufunc(left, right.data),
            )
        return NotImplemented

    def __call__(self, points: numpy.typing.ArrayLike):
        """Evaluate this variable at arbitrary coordinates.

        See `~interpolation.Interpolant` for the accepted forms of `points`.

        Raises
        ------
        OutOfBoundsError
            Some point lies outside the range of a dimension.
        """
        if self._interpolant is None:
            self._interpolant = interpolation.Interpolant(self.dims, self.data)
        return self._interpolant(points)

    def convert_units(
        self: Instance,
        target: metric.UnitLike,
        conversion_function: typing.Callable[[float], float]=None,
    ) -> Instance:
        """Express this variable in a new unit.

        Parameters
        ----------
        target : string or unit
            The new unit.

        conversion_function : callable, optional
            An elementwise transformation to apply when the units are not
            both parsable and compatible. It is ignored, with a warning, when
            they are.

        Raises
        ------
        UnitConversionError
            The units are not convertible and there is no conversion
            function.
        """
        current = metric.Unit(self.attributes.get('units', ''))
        new = metric.Unit(target)
        if current.is_compatible_with(new):
            if conversion_function is not None:
                warnings.warn(
                    "Ignoring conversion_function, units are parseable.",
                    UserWarning,
                    stacklevel=2,
                )
            data = current.convert(self.data, new)
        elif conversion_function is not None:
            data = numpy.vectorize(conversion_function, otypes=[float])(
                self.data
            )
        else:
            raise metric.UnitConversionError(
                f"Cannot convert {str(current)!r} to {str(new)!r}"
                " without a conversion_function"
            ) from None
        return self._copy_with(
            attributes={**self.attributes, 'units': new},
            data=data,
        )

    def average_over(
        self: Instance,
        name: str,
        weighted: bool=False,
        ignore_nan: bool=True,
    ) -> Instance:
        """Average over the named dimension.

        See `~reductions.average_over`.
        """
        return reductions.average_over(
            self,
            name,
            weighted=weighted,
            ignore_nan=ignore_nan,
        )

    def average_lat(self, weighted: bool=False, ignore_nan: bool=True):
        """Average over latitude."""
        return reductions.average_lat(self, weighted, ignore_nan)

    def weighted_average_lat(self, ignore_nan: bool=True):
        """Average over latitude, weighting by area."""
        return reductions.average_lat(self, True, ignore_nan)

    def average_lon(self, ignore_nan: bool=True):
        """Average over longitude."""
        return reductions.average_lon(self, ignore_nan)

    def average_time(self, ignore_nan: bool=True):
        """Average over time."""
        return reductions.average_time(self, ignore_nan)

    def average_x(self, ignore_nan: bool=True):
        return reductions.average_x(self, ignore_nan)

    def average_y(self, ignore_nan: bool=True):
        return reductions.average_y(self, ignore_nan)

    def average_xy(self, ignore_nan: bool=True):
        """Average over both horizontal box dimensions."""
        return reductions.average_xy(self, ignore_nan)

    def average_lonlat(self, weighted: bool=False, ignore_nan: bool=True):
        """Average over longitude and latitude."""
        return reductions.average_lonlat(self, weighted, ignore_nan)

    def slice(self: Instance, **values: numbers.Real) -> Instance:
        """Select the nearest coordinate in each named dimension.

        See `~selection.slice_dims`.
        """
        return selection.slice_dims(self, **values)

    def window(
        self: Instance,
        name: str,
        left: numbers.Real=None,
        right: numbers.Real=None,
    ) -> Instance:
        """Restrict the named dimension to a closed range.

        See `~selection.window`.
        """
        return selection.window(self, name, left=left, right=right)

    def center_longitude(self: Instance, lon: numbers.Real) -> Instance:
        """Rotate the longitude axis to center on `lon`."""
        return selection.center_longitude(self, lon)

    def resampled_as(self: Instance, dest: 'Var') -> Instance:
        """Resample this variable onto the grid of `dest`.

        See `~resampling.resampled_as`.
        """
        return resampling.resampled_as(self, dest)


def equal_metadata(a: Attributes, b: Attributes) -> bool:
    """True if two metadata mappings have equal keys and values.

    Array-valued entries, which are common in attributes read from file,
    compare elementwise.
    """
    if set(a) != set(b):
        return False
    for key, value in a.items():
        other = b[key]
        if isinstance(value, numpy.ndarray) or isinstance(other, numpy.ndarray):
            if not numpy.array_equal(value, other):
                return False
        elif value != other:
            return False
    return True


def _names(v: Var) -> typing.Iterator[typing.Tuple[str, str]]:
    """Iterate over the name-like attributes of `v`."""
    for key in ('short_name', 'long_name'):
        if key in v.attributes:
            yield key, v.attributes[key]


def arecompatible(x: Var, y: Var) -> bool:
    """True if two variables share grids and units.

    Both variables must have the same dimension names in the same order,
    equal coordinates, equal dimension metadata, and the same (or no)
    'units' attribute.
    """
    if list(x.dims) != list(y.dims):
        return False
    for name in x.dims:
        if x.dims[name].shape != y.dims[name].shape:
            return False
        if not numpy.array_equal(x.dims[name], y.dims[name]):
            return False
        mine = x.dim_attributes.get(name, {})
        theirs = y.dim_attributes.get(name, {})
        if not equal_metadata(mine, theirs):
            return False
    return x.attributes.get('units') == y.attributes.get('units')


def _combine(ufunc, symbol: str, left: Var, right: Var) -> Var:
    """Apply a binary operator to two compatible variables."""
    if not arecompatible(left, right):
        raise IncompatibleVariablesError(
            f"Cannot apply {symbol!r} to variables with different"
            " dimensions, dimension metadata, or units"
        ) from None
    attributes = dict(left.attributes)
    theirs = dict(_names(right))
    for key, value in _names(left):
        if key in theirs:
            attributes[key] = f"{value} {symbol} {theirs[key]}"
    if symbol in {'*', '/'} and 'units' in left.attributes:
        unit = left.attributes['units']
        other = right.attributes['units']
        attributes['units'] = unit * other if symbol == '*' else unit / other
    return left._copy_with(
        attributes=attributes,
        data=ufunc(left.data, right.data),
    )
