import numpy
import pytest

from climvar.core import dimensions
from climvar.core import selection
from climvar.core import variable


@pytest.fixture
def timeseries() -> variable.Var:
    """A variable on a (time, altitude) grid."""
    time = numpy.arange(100.0, 111.0)
    z = numpy.arange(0.0, 21.0)
    data = numpy.arange(1.0, 11 * 21 + 1).reshape((11, 21), order='F')
    return variable.Var(
        {'long_name': 'hi'},
        {'time': time, 'z': z},
        {'time': {'units': 's'}, 'z': {'units': 'm'}},
        data,
    )


@pytest.mark.selection
def test_slice_time(timeseries: variable.Var):
    """Select the nearest time."""
    result = timeseries.slice(time=200.0)
    assert list(result.dims) == ['z']
    assert 'time' not in result.dim_attributes
    assert numpy.array_equal(result.data, timeseries.data[-1, :])
    assert result.long_name == 'hi time = 1m 50.0s'
    assert result.attributes['slice_time'] == '110.0'
    assert result.attributes['slice_time_units'] == 's'
    result = timeseries.slice(time=104.4)
    assert numpy.array_equal(result.data, timeseries.data[4, :])
    assert result.attributes['slice_time'] == '104.0'


@pytest.mark.selection
def test_slice_other_dimension(timeseries: variable.Var):
    """Select the nearest value of a non-time dimension."""
    result = timeseries.slice(z=3.2)
    assert list(result.dims) == ['time']
    assert numpy.array_equal(result.data, timeseries.data[:, 3])
    assert result.long_name == 'hi z = 3.0'
    assert result.attributes['slice_z'] == '3.0'
    assert result.attributes['slice_z_units'] == 'm'


@pytest.mark.selection
def test_slice_many(timeseries: variable.Var):
    """Select in more than one dimension at once."""
    result = timeseries.slice(time=105.0, z=10.0)
    assert result.dims == {}
    assert result.data == 116.0
    assert result.long_name == 'hi time = 1m 45.0s z = 10.0'


@pytest.mark.selection
def test_slice_time_in_hours():
    """Express the selected time in conventional units."""
    v = variable.Var(
        {'long_name': 'hi'},
        {'t': [1.0, 2.0, 3.0]},
        {'t': {'units': 'hours'}},
        [10.0, 20.0, 30.0],
    )
    result = v.slice(t=2.1)
    assert result.data == 20.0
    assert result.long_name == 'hi t = 2h'
    assert result.attributes['slice_t'] == '2.0'
    assert result.attributes['slice_t_units'] == 'hours'


@pytest.mark.selection
def test_slice_without_long_name():
    """Slicing records the selection but does not invent a long name."""
    v = variable.Var.from_dims({'z': [0.0, 1.0]}, [5.0, 6.0])
    result = v.slice(z=1.0)
    assert 'long_name' not in result.attributes
    assert result.attributes['slice_z'] == '1.0'
    assert result.attributes['slice_z_units'] == ''


@pytest.mark.selection
def test_slice_missing_dimension(timeseries: variable.Var):
    """Slicing an unknown dimension raises an exception."""
    with pytest.raises(dimensions.DimensionNotFoundError):
        timeseries.slice(lat=10.0)


@pytest.mark.selection
def test_window(sphere: variable.Var):
    """Restrict a dimension to a closed range."""
    result = sphere.window('lon', left=10.0, right=20.0)
    assert numpy.array_equal(result.dims['lon'], numpy.arange(10.0, 21.0))
    assert numpy.array_equal(result.data, sphere.data[:, 10:21, :])
    assert numpy.array_equal(result.dims['lat'], sphere.dims['lat'])
    assert result.attributes == sphere.attributes
    assert result.dim_attributes == sphere.dim_attributes
    result = sphere.window('lon', left=10.5, right=12.5)
    assert numpy.array_equal(result.dims['lon'], [11.0, 12.0])
    result = sphere.window('lat', right=2.0)
    assert numpy.array_equal(result.dims['lat'], [0.0, 1.0, 2.0])
    result = sphere.window('time', left=8.0)
    assert numpy.array_equal(result.dims['time'], [8.0, 9.0, 10.0])
    assert sphere.window('time') == sphere


@pytest.mark.selection
def test_window_errors(sphere: variable.Var):
    """Windows require a known dimension and ordered bounds."""
    with pytest.raises(selection.InvalidRangeError):
        sphere.window('lon', left=20.0, right=10.0)
    with pytest.raises(dimensions.DimensionNotFoundError):
        sphere.window('z', left=0.0, right=1.0)


@pytest.mark.selection
def test_center_longitude(lonvar: variable.Var):
    """Rotate a closed longitude axis around a new center."""
    result = lonvar.center_longitude(90.0)
    lon = result.dims['long']
    assert len(lon) == len(lonvar.dims['long'])
    assert lon[179] == 90.0
    assert result.data[179] == 90.0
    assert lon[0] == -89.0
    assert lon[-1] == 271.0
    assert result.data[-1] == result.data[0]
    assert numpy.all(numpy.diff(lon) > 0)
    assert result(100.0) == pytest.approx(100.0)
    assert result(200.0) == pytest.approx(-160.0)
    result = lonvar.center_longitude(0.0)
    lon = result.dims['long']
    assert lon[179] == 0.0
    assert lon[0] == -179.0
    assert lon[-1] == 181.0
    assert numpy.all(numpy.diff(lon) > 0)


@pytest.mark.selection
def test_center_longitude_with_other_dims():
    """The data along other axes follow the rotated longitudes."""
    lon = numpy.arange(-180.0, 181.0)
    time = numpy.arange(0.0, 11.0)
    data = numpy.arange(1.0, 361 * 11 + 1).reshape((361, 11), order='F')
    v = variable.Var.from_dims({'lon': lon, 'time': time}, data)
    result = v.center_longitude(90.0)
    assert result.dims['lon'][179] == 90.0
    assert result.data[179, 0] == 271.0
    assert numpy.array_equal(result.data[179, :], data[270, :])
    assert numpy.array_equal(result.dims['time'], time)
    assert numpy.unique(result.dims['lon']).size == 361


@pytest.mark.selection
def test_center_longitude_westward(sphere: variable.Var):
    """Coordinates that wrap to the front shift down by 360 degrees."""
    result = sphere.center_longitude(0.0)
    lon = result.dims['lon']
    assert lon[89] == 0.0
    assert lon[0] == -268.0
    assert lon[-1] == 91.0
    assert numpy.all(numpy.diff(lon) > 0)
    assert numpy.array_equal(result.data[:, 89, :], sphere.data[:, 0, :])


@pytest.mark.selection
def test_center_longitude_requires_longitude():
    """Centering requires a longitude dimension."""
    v = variable.Var.from_dims({'time': [0.0, 1.0]}, [1.0, 2.0])
    with pytest.raises(dimensions.DimensionNotFoundError):
        v.center_longitude(0.0)
