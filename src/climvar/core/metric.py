"""Tools for parsing, comparing, and converting physical units.

A unit string either parses into a structured `pint` unit, or remains an
opaque string that this module will carry unchanged. Both cases share the
same interface through `~metric.Unit`.
"""

import numbers
import re
import tokenize
import typing

import numpy
import numpy.typing
import pint


UNITS = pint.UnitRegistry()
"""The unit registry shared by every parsed unit."""


class UnitConversionError(ValueError):
    """Cannot convert between the requested units."""


_CF_EXPONENT = re.compile(r'(?<=[A-Za-z])([+-]?\d+)(?![\d.])')


def _preprocess(string: str) -> str:
    """Translate common notations into an expression `pint` understands.

    Handles exponents written as ``m^-1`` and the CF convention of implied
    exponents (``m s-1``).
    """
    string = string.replace('^', '**')
    return _CF_EXPONENT.sub(r'**\1', string)


def parse(string: str) -> typing.Optional[pint.Unit]:
    """Convert `string` into a `pint` unit, if possible.

    Returns ``None`` when `string` is empty or does not describe a unit known
    to the registry.
    """
    if not string or not string.strip():
        return None
    try:
        return UNITS.Unit(_preprocess(string.strip()))
    except (
        pint.PintError,
        ValueError,
        TypeError,
        AttributeError,
        SyntaxError,
        tokenize.TokenError,
    ):
        return None


def _format_exponent(exponent: numbers.Real) -> str:
    """Represent an exponent as an integer when it is integral."""
    if float(exponent).is_integer():
        return str(int(exponent))
    return str(exponent)


def canonical(unit: pint.Unit) -> str:
    """Render `unit` as space-separated symbols with signed exponents.

    Examples
    --------
    >>> canonical(UNITS.Unit('m/s'))
    'm s^-1'
    >>> canonical(UNITS.Unit('kg * m^2'))
    'kg m^2'
    """
    terms = []
    for name, exponent in unit._units.items():
        symbol = UNITS.get_symbol(name)
        if exponent == 1:
            terms.append(symbol)
        else:
            terms.append(f"{symbol}^{_format_exponent(exponent)}")
    return ' '.join(terms) or '1'


UnitLike = typing.TypeVar('UnitLike')
UnitLike = typing.Union[str, pint.Unit, 'Unit']


class Unit:
    """A unit that is either parsed or kept as the original string.

    Parameters
    ----------
    arg : string, `pint.Unit`, or `~metric.Unit`
        The unit to represent. An existing instance produces an equal copy.
        A string that the registry cannot parse produces a raw unit that
        compares and prints as the string itself.
    """

    def __init__(self, arg: UnitLike) -> None:
        if isinstance(arg, Unit):
            self._parsed = arg._parsed
            self._raw = arg._raw
        elif isinstance(arg, pint.Unit):
            self._parsed = arg
            self._raw = canonical(arg)
        else:
            self._raw = str(arg)
            self._parsed = parse(self._raw)

    @property
    def parsed(self) -> typing.Optional[pint.Unit]:
        """The structured unit, or ``None`` if the string did not parse."""
        return self._parsed

    @property
    def is_parsed(self) -> bool:
        """True if this unit has a structured representation."""
        return self._parsed is not None

    def __bool__(self) -> bool:
        """True unless this is an empty raw unit."""
        return self.is_parsed or bool(self._raw)

    def __str__(self) -> str:
        """The canonical string form of this unit."""
        if self.is_parsed:
            return canonical(self._parsed)
        return self._raw

    def __repr__(self) -> str:
        kind = 'parsed' if self.is_parsed else 'raw'
        return f"{self.__class__.__qualname__}({str(self)!r}, {kind})"

    def __eq__(self, other: typing.Any) -> bool:
        """True if two units represent the same unit.

        Parsed units compare by value (so 'm/s' equals 'm s^-1'). Raw units
        compare by string.
        """
        if isinstance(other, (str, pint.Unit)):
            other = Unit(other)
        if not isinstance(other, Unit):
            return NotImplemented
        if self.is_parsed and other.is_parsed:
            return self._parsed == other._parsed
        if self.is_parsed or other.is_parsed:
            return False
        return self._raw == other._raw

    def __hash__(self) -> int:
        return hash(str(self))

    def __copy__(self) -> 'Unit':
        return Unit(self)

    def __deepcopy__(self, memo: dict) -> 'Unit':
        # The underlying `pint` unit is immutable and bound to `UNITS`.
        return Unit(self)

    def __mul__(self, other: UnitLike) -> 'Unit':
        other = Unit(other)
        if self.is_parsed and other.is_parsed:
            return Unit(self._parsed * other._parsed)
        return Unit(f"({self}) * ({other})")

    def __truediv__(self, other: UnitLike) -> 'Unit':
        other = Unit(other)
        if self.is_parsed and other.is_parsed:
            return Unit(self._parsed / other._parsed)
        return Unit(f"({self}) / ({other})")

    def is_compatible_with(self, other: UnitLike) -> bool:
        """True if values in this unit can convert to `other`."""
        other = Unit(other)
        if self.is_parsed and other.is_parsed:
            return self._parsed.dimensionality == other._parsed.dimensionality
        return False

    def convert(
        self,
        values: numpy.typing.ArrayLike,
        target: UnitLike,
    ) -> numpy.ndarray:
        """Express `values` in this unit as values in `target`.

        This applies offsets as well as scale factors (e.g., 'K' to 'degC').

        Raises
        ------
        UnitConversionError
            Either unit did not parse, or the two units have different
            dimensions.
        """
        target = Unit(target)
        if not self.is_compatible_with(target):
            raise UnitConversionError(
                f"Cannot convert from {str(self)!r} to {str(target)!r}"
            ) from None
        quantity = UNITS.Quantity(numpy.asarray(values), self._parsed)
        return numpy.asarray(quantity.to(target._parsed).magnitude)
