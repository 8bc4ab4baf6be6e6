"""
Tests for the version module of the chainsigner SDK.
"""
import importlib
import re
from importlib import metadata as importlib_metadata
from unittest.mock import MagicMock, mock_open, patch

import pytest
import tomli

import chainsigner_sdk.version as vmod
from chainsigner_sdk import __version__


def _metadata_missing(name):
    raise importlib_metadata.PackageNotFoundError(name)


@pytest.fixture(autouse=True)
def restore_version_module():
    yield
    importlib.reload(vmod)


def test_version_format():
    """Test that the version string follows semantic versioning"""
    assert re.match(r'^\d+\.\d+\.\d+$', __version__), "Version should follow semantic versioning"


@patch('importlib.metadata.version')
def test_version_from_metadata(mock_metadata_version):
    """When metadata lookup succeeds, version comes from metadata"""
    mock_metadata_version.return_value = "2.3.4"
    importlib.reload(vmod)
    assert vmod.__version__ == "2.3.4"
    mock_metadata_version.assert_called_with("chainsigner-sdk")


@patch('importlib.metadata.version')
@patch('pathlib.Path.open', new_callable=mock_open, read_data=b'[project]\nversion = "1.2.3"\n')
def test_version_from_pyproject(mock_open_file, mock_metadata_version):
    """When metadata lookup fails, pyproject.toml is read"""
    mock_metadata_version.side_effect = importlib_metadata.PackageNotFoundError
    importlib.reload(vmod)
    assert vmod.__version__ == "1.2.3"
    mock_open_file.assert_called_with("rb")


def test_version_file_not_found(monkeypatch):
    """If pyproject.toml is missing, fall back to the default"""
    monkeypatch.setattr(importlib_metadata, 'version', _metadata_missing)
    monkeypatch.setattr('pathlib.Path.open', MagicMock(side_effect=FileNotFoundError))
    importlib.reload(vmod)
    assert vmod.__version__ == vmod.DEFAULT_VERSION


def test_version_key_error(monkeypatch):
    """If the TOML has no version key, fall back to the default"""
    monkeypatch.setattr(importlib_metadata, 'version', _metadata_missing)
    monkeypatch.setattr('pathlib.Path.open', mock_open(read_data=b'[project]\nname = "chainsigner-sdk"\n'))
    importlib.reload(vmod)
    assert vmod.__version__ == vmod.DEFAULT_VERSION


def test_version_toml_decode_error(monkeypatch):
    """If the TOML does not parse, fall back to the default"""
    monkeypatch.setattr(importlib_metadata, 'version', _metadata_missing)
    monkeypatch.setattr('pathlib.Path.open', mock_open(read_data=b'invalid toml content'))
    monkeypatch.setattr(tomli, 'load', MagicMock(side_effect=tomli.TOMLDecodeError("fail", "", 0)))
    importlib.reload(vmod)
    assert vmod.__version__ == vmod.DEFAULT_VERSION
