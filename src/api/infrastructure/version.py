"""Application version lookup.

Installed distributions report their metadata version; a source checkout
without installed metadata falls back to pyproject.toml.
"""

import tomllib
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

DISTRIBUTION_NAME = "storefleet-api"
UNKNOWN_VERSION = "0.0.0+unknown"

# src/api/infrastructure/version.py -> repository root
_PYPROJECT = Path(__file__).resolve().parents[3] / "pyproject.toml"


def get_version(pyproject: Path = _PYPROJECT) -> str:
    """Return the running application's version string."""
    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        pass

    if not pyproject.is_file():
        return UNKNOWN_VERSION

    with pyproject.open("rb") as f:
        return tomllib.load(f)["project"]["version"]


__version__ = get_version()
