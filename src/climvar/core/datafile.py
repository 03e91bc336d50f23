"""
Tools for reading variables from NetCDF files.
"""

import logging
import typing

import netCDF4
import numpy

from climvar.core import iotools
from climvar.core import utilities
from climvar.core import variable


logger = logging.getLogger(__name__)


def _get_attributes(data) -> typing.Dict[str, typing.Any]:
    """Collect the NetCDF attributes of a dataset object."""
    return {name: data.getncattr(name) for name in data.ncattrs()}


def _get_array(data) -> numpy.ndarray:
    """Read a NetCDF variable, replacing masked values with NaN."""
    array = data[:]
    if numpy.ma.isMaskedArray(array):
        if numpy.ma.is_masked(array):
            return numpy.ma.filled(array.astype(float), numpy.nan)
        return numpy.ma.getdata(array)
    return numpy.asarray(array)


def _find_short_name(
    dataset: netCDF4.Dataset,
    path: iotools.PathLike,
) -> str:
    """Choose the variable to read when the caller does not name one."""
    matched = utilities.match_nc_filename(iotools.full_path(path).name)
    if matched is not None and matched[0] in dataset.variables:
        return matched[0]
    candidates = [
        name for name in dataset.variables
        if name not in dataset.dimensions
    ]
    if len(candidates) == 1:
        return candidates[0]
    raise KeyError(
        f"Cannot choose a variable from {candidates} in {path}"
    ) from None


def read(path: iotools.PathLike, short_name: str=None) -> variable.Var:
    """Read a variable and its coordinates from a NetCDF file.

    Parameters
    ----------
    path : path-like
        The file to read.

    short_name : string, optional
        The name of the variable to read. If omitted, this function will
        take it from a file name following the convention described in
        `~utilities.match_nc_filename` or, failing that, from the only
        variable in the file that is not a coordinate.

    Returns
    -------
    `~variable.Var`
        The variable, with one coordinate array per dimension. Dimensions
        without a coordinate variable get the coordinates 0, 1, 2, ...

    Raises
    ------
    NonExistentPathError
        The file does not exist.

    KeyError
        The file has no such variable.
    """
    full = iotools.full_path(path)
    with netCDF4.Dataset(str(full), 'r') as dataset:
        if short_name is None:
            short_name = _find_short_name(dataset, full)
        if short_name not in dataset.variables:
            raise KeyError(f"No variable called {short_name!r} in {full}")
        data = dataset.variables[short_name]
        attributes = _get_attributes(data)
        attributes.setdefault('short_name', short_name)
        dims = {}
        dim_attributes = {}
        for name in data.dimensions:
            if name in dataset.variables:
                coordinate = dataset.variables[name]
                dims[name] = _get_array(coordinate)
                dim_attributes[name] = _get_attributes(coordinate)
            else:
                dims[name] = numpy.arange(len(dataset.dimensions[name]))
                dim_attributes[name] = {}
        array = _get_array(data)
    logger.debug("Read %s %s from %s", short_name, array.shape, full)
    return variable.Var(attributes, dims, dim_attributes, array)
