"""Recognize the physical role of named dimensions.

Datasets name the same physical dimension in different ways (e.g., 'lon',
'long', and 'longitude'). The registry in this module maps each role to the
set of names that identify it.
"""

import collections.abc
import types
import typing

import climvar


ROLES = ('longitude', 'latitude', 'time', 'altitude')
"""The dimension roles known to this module."""


class DimensionNotFoundError(LookupError):
    """None of the requested dimension names is available."""

    def __init__(
        self,
        requested: typing.Union[str, typing.Iterable[str]],
        available: typing.Iterable[str],
    ) -> None:
        self.requested = requested
        self.available = list(available)

    def __str__(self) -> str:
        if isinstance(self.requested, str):
            return (
                f"Var does not have dimension {self.requested},"
                f" found {self.available}"
            )
        return f"None of {list(self.requested)} found in {self.available}"


def find_dim_name(
    aliases: typing.Iterable[str],
    available: typing.Iterable[str],
) -> str:
    """Find the first name in `available` that is also in `aliases`.

    Raises
    ------
    DimensionNotFoundError
        No available name matches.
    """
    aliases = list(aliases)
    available = list(available)
    for name in available:
        if name in aliases:
            return name
    raise DimensionNotFoundError(aliases, available)


class DimensionRegistry(collections.abc.Mapping):
    """An immutable mapping from dimension role to accepted names."""

    def __init__(
        self,
        aliases: typing.Mapping[str, typing.Iterable[str]],
    ) -> None:
        self._aliases = types.MappingProxyType(
            {role: frozenset(names) for role, names in aliases.items()}
        )

    @classmethod
    def from_environment(cls, section: str='dimensions'):
        """Create a registry from the package configuration."""
        env = climvar.Environment(section)
        return cls({
            role: [name.strip() for name in env[role].split(',') if name.strip()]
            for role in env
        })

    def __len__(self) -> int:
        return len(self._aliases)

    def __iter__(self) -> typing.Iterator[str]:
        return iter(self._aliases)

    def __getitem__(self, role: str) -> typing.FrozenSet[str]:
        if role in self._aliases:
            return self._aliases[role]
        raise KeyError(f"No dimension role {role!r}") from None

    def find(self, role: str, available: typing.Iterable[str]) -> str:
        """Find the available name that plays `role`."""
        return find_dim_name(sorted(self[role]), available)

    def has(self, role: str, available: typing.Iterable[str]) -> bool:
        """True if any available name plays `role`."""
        return not self[role].isdisjoint(available)

    def role_of(self, name: str) -> typing.Optional[str]:
        """The role that `name` plays, if any."""
        for role, names in self._aliases.items():
            if name in names:
                return role

    def conventional(self, name: str) -> str:
        """The role that `name` plays, or `name` itself."""
        return self.role_of(name) or name

    def __repr__(self) -> str:
        content = {role: sorted(names) for role, names in self.items()}
        return f"{self.__class__.__qualname__}({content})"


REGISTRY = DimensionRegistry.from_environment()
"""The default registry, built from the package configuration."""


def conventional_dim_name(name: str) -> str:
    """Map `name` to the name of its role in the default registry.

    Examples
    --------
    >>> conventional_dim_name('long')
    'longitude'
    >>> conventional_dim_name('z')
    'altitude'
    >>> conventional_dim_name('date')
    'date'
    """
    return REGISTRY.conventional(name)
