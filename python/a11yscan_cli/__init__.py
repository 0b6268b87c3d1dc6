# SPDX-License-Identifier: AGPL-3.0-only OR LicenseRef-Fullbleed-Commercial
"""Version metadata for the a11yscan command-line wrapper."""
from importlib.metadata import PackageNotFoundError, version


def _get_version():
    """Resolve the installed package version for CLI reporting."""
    try:
        return version("a11yscan")
    except PackageNotFoundError:
        return "0.0.0-dev"


__version__ = _get_version()
