"""Filter construction errors."""
from __future__ import annotations


class FilterConfigError(ValueError):
    """A filter could not be built from its configuration.

    The message is the user-facing explanation and is never wrapped.
    """
