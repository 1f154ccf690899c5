"""Single source of truth for the application version.

Reads the version from pyproject.toml (tomllib, Python 3.11+). When the
package runs from an installed wheel without the source tree, the installed
distribution metadata is used instead.
"""

import tomllib
from importlib import metadata
from pathlib import Path

DISTRIBUTION_NAME = "remindr-engine"

_PROJECT_ROOT = Path(__file__).resolve().parent.parent


def get_version() -> str:
    """Return the version string from pyproject.toml or package metadata."""
    pyproject_path = _PROJECT_ROOT / "pyproject.toml"
    if not pyproject_path.exists():
        return metadata.version(DISTRIBUTION_NAME)
    with open(pyproject_path, "rb") as f:
        data = tomllib.load(f)
    return data["project"]["version"]


__version__: str = get_version()
