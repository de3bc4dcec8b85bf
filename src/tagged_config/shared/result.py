"""Diagnostic and metric types shared by the loading layers.

Tree building reports what it did through these objects instead of through
return codes, so a successful load can still explain anything unusual it
accepted (unclosed sections, skipped lines, ignored markup).
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    INFO = auto()       # Informational messages
    WARNING = auto()    # Accepted but suspicious input


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    position: Optional[Dict[str, int]] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")


@dataclass
class BuildMetrics:
    """Counters collected while building one configuration tree."""

    processing_time_ms: float = 0.0
    characters_processed: int = 0
    tokens_processed: int = 0
    nodes_created: int = 0
    leaves_created: int = 0
    lines_skipped: int = 0
    max_depth: int = 0

    @property
    def elements_created(self) -> int:
        """Total number of nodes and leaves created."""
        return self.nodes_created + self.leaves_created

    @property
    def tokens_per_second(self) -> float:
        """Calculate tokens processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.tokens_processed * 1000.0) / self.processing_time_ms

    def to_dict(self) -> Dict[str, Any]:
        """Convert metrics to a plain dictionary."""
        return {
            "processing_time_ms": self.processing_time_ms,
            "characters_processed": self.characters_processed,
            "tokens_processed": self.tokens_processed,
            "nodes_created": self.nodes_created,
            "leaves_created": self.leaves_created,
            "lines_skipped": self.lines_skipped,
            "max_depth": self.max_depth,
        }
