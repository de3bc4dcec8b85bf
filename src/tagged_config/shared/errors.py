"""Exception hierarchy for tagged configuration loading and lookup.

Errors raised while reading a source, while turning it into a tree, and while
resolving paths against that tree each have their own type so callers can
tell them apart.
"""

from typing import Dict, Optional


class TaggedConfigError(Exception):
    """Base exception for all tagged configuration errors."""


class ConfigIOError(TaggedConfigError, OSError):
    """Raised when a configuration source cannot be read."""

    def __init__(self, message: str, filename: Optional[str] = None) -> None:
        super().__init__(message)
        self.filename = filename

    def __str__(self) -> str:
        return self.args[0] if self.args else ""


class FormatError(TaggedConfigError, ValueError):
    """Raised when a document is structurally invalid.

    Attributes:
        position: Optional ``line``/``column``/``offset`` of the offending markup
    """

    def __init__(
        self,
        message: str,
        position: Optional[Dict[str, int]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.position = position

    def __str__(self) -> str:
        if self.position and "line" in self.position:
            return (
                f"{self.message} (line {self.position['line']}, "
                f"column {self.position.get('column', 0)})"
            )
        return self.message


class PathNotFoundError(TaggedConfigError, LookupError):
    """Raised when a path segment has no matching child."""

    def __init__(self, path: str, segment: str) -> None:
        super().__init__(f"segment {segment!r} not found while resolving {path!r}")
        self.path = path
        self.segment = segment

    def __str__(self) -> str:
        return self.args[0]
