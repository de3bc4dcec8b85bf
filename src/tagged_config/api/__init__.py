"""Public API layer for tagged configuration loading."""

from .conf import (
    Conf,
    load_bytes,
    load_string,
    new_conf,
)

__all__ = [
    "Conf",
    "load_bytes",
    "load_string",
    "new_conf",
]
