import re
import typing


_NC_FILENAME = re.compile(r'^(\w+?)_(?:([a-zA-Z0-9_.]*?)_)?([a-zA-Z0-9]*)\.nc$')


def match_nc_filename(
    filename: str,
) -> typing.Optional[typing.Tuple[str, typing.Optional[str], str]]:
    """Extract the short name, period, and reduction from a file name.

    The file-name convention is ``shortname_(period_)reduction.nc``, where
    the period is optional.

    Returns
    -------
    tuple or `None`
        A tuple of `(short_name, period, reduction)`, with `period` equal to
        ``None`` when absent, or ``None`` if `filename` does not follow the
        convention.

    Examples
    --------
    >>> match_nc_filename('ta_1d_average.nc')
    ('ta', '1d', 'average')
    >>> match_nc_filename('pfull_6.0min_max.nc')
    ('pfull', '6.0min', 'max')
    >>> match_nc_filename('hu_inst.nc')
    ('hu', None, 'inst')
    >>> match_nc_filename('bob') is None
    True
    """
    match = _NC_FILENAME.match(filename)
    if match is None:
        return None
    return match.group(1), match.group(2), match.group(3)
