import pathlib

import pytest

import climvar
from climvar.core import iotools


def test_default_environment(tmp_path: pathlib.Path, monkeypatch):
    """The package ships a default dimension configuration."""
    monkeypatch.chdir(tmp_path)
    env = climvar.Environment('dimensions')
    assert sorted(env) == ['altitude', 'latitude', 'longitude', 'time']
    assert len(env) == 4
    assert 'lat' in env['latitude']
    assert env.path.name == 'climvar.ini'
    with pytest.raises(KeyError):
        env['pressure']
    with pytest.raises(KeyError):
        climvar.Environment('nonexistent')


def test_environment_variable(tmp_path: pathlib.Path, monkeypatch):
    """Find a configuration file through the environment."""
    directory = tmp_path / 'config'
    directory.mkdir()
    path = directory / 'climvar.ini'
    path.write_text("[custom]\nvalue = 1\n")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv('CLIMVAR_INI', str(directory))
    env = climvar.Environment('custom')
    assert env['value'] == '1'
    assert env.path == path.resolve()
    monkeypatch.setenv('CLIMVAR_INI', str(path))
    assert climvar.Environment('custom')['value'] == '1'


def test_search(tmp_path: pathlib.Path):
    """Search for a file in a sequence of paths."""
    path = tmp_path / 'target.ini'
    path.write_text('')
    missing = tmp_path / 'missing'
    found = iotools.search([None, missing, tmp_path], 'target.ini')
    assert found == path.resolve()
    assert iotools.search([path], 'target.ini') == path.resolve()
    assert iotools.search([missing], 'target.ini') is None
    with pytest.raises(iotools.NonExistentPathError):
        iotools.full_path(missing)
