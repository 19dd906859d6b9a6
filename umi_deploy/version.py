"""
Version information for umi-deploy.
"""
import importlib.metadata
import pathlib

import tomli

DISTRIBUTION = "umi-deploy"
FALLBACK_VERSION = "0.1.0"


def _read_version() -> str:
    """
    Installed distribution version, or the one declared in a source checkout.

    Falls back to FALLBACK_VERSION when neither is available.
    """
    try:
        return importlib.metadata.version(DISTRIBUTION)
    except importlib.metadata.PackageNotFoundError:
        pass

    pyproject = pathlib.Path(__file__).resolve().parent.parent / "pyproject.toml"
    try:
        with pyproject.open("rb") as f:
            return tomli.load(f)["project"]["version"]
    except (OSError, KeyError, tomli.TOMLDecodeError):
        return FALLBACK_VERSION


__version__ = _read_version()
