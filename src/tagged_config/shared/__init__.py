"""Shared utilities for tagged configuration loading.

This module provides the settings objects, error types, diagnostics, logging
helpers and the reader/writer lock used across all layers.
"""

from .config import (
    CharacterConfig,
    ConfigValidationError,
    GlobalConfig,
    ParserConfig,
    TokenizationConfig,
    TreeConfig,
)
from .errors import (
    ConfigIOError,
    FormatError,
    PathNotFoundError,
    TaggedConfigError,
)
from .locking import ReadWriteLock
from .logging import (
    CorrelationLogger,
    get_logger,
)
from .result import (
    BuildMetrics,
    DiagnosticEntry,
    DiagnosticSeverity,
)

__all__ = [
    "BuildMetrics",
    "CharacterConfig",
    "ConfigIOError",
    "ConfigValidationError",
    "CorrelationLogger",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "FormatError",
    "GlobalConfig",
    "ParserConfig",
    "PathNotFoundError",
    "ReadWriteLock",
    "TaggedConfigError",
    "TokenizationConfig",
    "TreeConfig",
    "get_logger",
]
