# File: utils/__init__.py
"""Pure Python utilities for the recurrence engine.

Submodules:
    - dt_utils: Date/time parsing, local-zone conversion, calendar arithmetic

Usage:
    from .utils.dt_utils import dt_add_months, to_local_naive
"""

from . import dt_utils

__all__ = ["dt_utils"]
