import typing

import numpy
import pytest

from climvar.core import variable


@pytest.fixture
def coordinates() -> typing.Dict[str, numpy.ndarray]:
    """Coordinate arrays shared by the test variables."""
    return {
        'time': numpy.arange(0.0, 11.0),
        'lon': numpy.arange(0.0, 181.0),
        'lat': numpy.arange(0.0, 91.0),
    }


@pytest.fixture
def ramp() -> numpy.ndarray:
    """A 3-D array of distinct values with shape (11, 181, 91)."""
    return numpy.arange(1.0, 11 * 181 * 91 + 1).reshape(
        (11, 181, 91),
        order='F',
    )


@pytest.fixture
def sphere(coordinates, ramp) -> variable.Var:
    """A variable on a (time, longitude, latitude) grid."""
    return variable.Var(
        {'short_name': 'bob', 'long_name': 'hi'},
        coordinates,
        {'time': {}, 'lon': {'b': 2}, 'lat': {'a': 1}},
        ramp,
    )


@pytest.fixture
def box(ramp) -> variable.Var:
    """A variable on a (time, x, y) grid with units."""
    dims = {
        'time': numpy.arange(0.0, 11.0),
        'x': numpy.arange(0.0, 181.0),
        'y': numpy.arange(0.0, 91.0),
    }
    dim_attributes = {
        'time': {'units': 'seconds'},
        'x': {'units': 'km'},
        'y': {'units': 'km'},
    }
    return variable.Var({'long_name': 'hi'}, dims, dim_attributes, ramp)


@pytest.fixture
def lonvar() -> variable.Var:
    """A 1-D variable equal to its longitude coordinate."""
    lon = numpy.arange(-180.0, 181.0)
    return variable.Var(
        {'long_name': 'hi', 'units': 'm/s'},
        {'long': lon},
        {'long': {'units': 'm'}},
        lon.copy(),
    )
