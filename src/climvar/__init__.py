import collections.abc
import configparser
import json
import logging
import os
import pathlib

from climvar.core import iotools


# read version from installed package
from importlib.metadata import version
__version__ = version("climvar")


logger = logging.getLogger(__name__)


class Environment(collections.abc.Mapping):
    """A read-only section of the package configuration."""

    def __init__(self, name: str) -> None:
        self.name = name
        """The name of the configuration section to select."""
        home = pathlib.Path('~').expanduser()
        paths = [
            pathlib.Path.cwd(), # The current working directory
            home, # The user's home directory
            home / '.config', # Linux standard (local)
            '/etc/climvar', # Linux standard (global)
            os.environ.get('CLIMVAR_INI'), # A known environment variable
            pathlib.Path(__file__).parent, # The package top
        ]
        path = iotools.search(paths, 'climvar.ini')
        if path is None:
            raise iotools.NonExistentPathError('climvar.ini')
        logger.debug("Reading configuration from %s", path)
        config = configparser.ConfigParser()
        config.read(path)
        if not config.has_section(self.name):
            raise KeyError(
                f"Configuration file {path} has no section {self.name!r}"
            ) from None
        self._config = config[self.name]
        self.path = path

    def __len__(self) -> int:
        """The number of available parameter values."""
        return len(self._config)

    def __iter__(self):
        """Iterate over available parameter values."""
        yield from self._config

    def __getitem__(self, key: str):
        """Access parameter values by mapping key."""
        if key in self._config:
            return self._config[key]
        raise KeyError(
            f"Section {self.name!r} has no value for {key!r}"
        ) from None

    def __str__(self) -> str:
        return json.dumps(
            dict(self._config),
            indent=4,
            sort_keys=True,
        )

    def __repr__(self) -> str:
        return f"{__package__}.{self.name}({self.path}):\n{self}"
