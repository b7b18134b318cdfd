"""Helpers for testing code that configures understudy itself.

Provided symbols:

- :func:`make_settings` — factory for ``Settings`` without ``.env`` files
  or environment variables.
"""

from understudy.testing._settings import make_settings

__all__ = [
    "make_settings",
]
