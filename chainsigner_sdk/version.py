"""
Version information for the chainsigner SDK.
"""
import importlib.metadata
import pathlib

import tomli

DEFAULT_VERSION = "0.1.0"


def _version_from_pyproject() -> str:
    path = pathlib.Path(__file__).parent.parent / "pyproject.toml"
    try:
        with path.open("rb") as f:
            return tomli.load(f)["project"]["version"]
    except (FileNotFoundError, KeyError, tomli.TOMLDecodeError):
        return DEFAULT_VERSION


# Installed metadata first, then the source tree's pyproject.toml
try:
    __version__ = importlib.metadata.version("chainsigner-sdk")
except importlib.metadata.PackageNotFoundError:
    __version__ = _version_from_pyproject()
