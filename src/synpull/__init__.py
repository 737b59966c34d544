"""Pull syndicated posts from remote sites into a local content store."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("synpull")
except PackageNotFoundError:  # source checkout without an install
    __version__ = "0.0.0"
