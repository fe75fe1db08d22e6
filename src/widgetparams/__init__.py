"""
widgetparams distribution import namespace.

Re-exports the core `parameter_mapping` package for convenience.
"""

from importlib.metadata import PackageNotFoundError, version

# src/widgetparams/__init__.py
from parameter_mapping import *  # noqa: F401,F403
from parameter_mapping import __all__ as _core_all

try:
    __version__ = version("widgetparams")
except PackageNotFoundError:
    __version__ = "0+unknown"

__all__ = [*_core_all, "__version__"]
