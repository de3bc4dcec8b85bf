"""Tree building for the hybrid tagged-section configuration format.

This module turns a token stream into an element tree with an explicit stack
of open sections. Building always happens on a scratch root owned by the
builder; publishing the result is left to the caller, so a document that
fails half way never leaks a partial tree.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from tagged_config.shared import (
    BuildMetrics,
    DiagnosticEntry,
    DiagnosticSeverity,
    FormatError,
    TreeConfig,
    get_logger,
)
from tagged_config.tokenization import Token, TokenType

from .element import Element


@dataclass
class BuildResult:
    """Result of building one configuration tree.

    Contains the new root together with build metrics and any diagnostics
    about input that was accepted but looked suspicious.
    """

    root: Element
    metrics: BuildMetrics = field(default_factory=BuildMetrics)
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    correlation_id: Optional[str] = None

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        position: Optional[Dict[str, int]] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Add diagnostic entry to result."""
        self.diagnostics.append(DiagnosticEntry(
            severity=severity,
            message=message,
            component=component,
            position=position,
            details=details,
            correlation_id=self.correlation_id,
        ))

    def get_diagnostics_by_severity(
        self,
        severity: DiagnosticSeverity
    ) -> List[DiagnosticEntry]:
        """Get diagnostics of specific severity level."""
        return [diag for diag in self.diagnostics if diag.severity == severity]

    @property
    def has_warnings(self) -> bool:
        """Check if the build accepted any suspicious input."""
        return any(
            diag.severity == DiagnosticSeverity.WARNING for diag in self.diagnostics
        )


class TreeBuilder:
    """Builds element trees from token streams.

    Start tags descend into (or create) a node, end tags pop back out after
    checking they close the innermost open section, and text chunks become
    leaves of the innermost open section.
    """

    def __init__(
        self,
        config: Optional[TreeConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize tree builder.

        Args:
            config: Tree settings (defaults to TreeConfig())
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or TreeConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "tree_builder")

    def build(self, tokens: Iterable[Token]) -> BuildResult:
        """Build a fresh tree from ``tokens``.

        Args:
            tokens: Token stream in document order

        Returns:
            BuildResult holding the new root

        Raises:
            FormatError: If a closing tag does not match the open section, or
                nesting exceeds ``max_depth``
        """
        start_time = time.time()
        result = BuildResult(root=Element.new_root(), correlation_id=self.correlation_id)
        metrics = result.metrics
        stack: List[Element] = [result.root]

        for token in tokens:
            metrics.tokens_processed += 1
            current = stack[-1]

            if token.type is TokenType.START_TAG:
                node, found = current.find_child(token.value)
                if not found or not node.is_node():
                    node = Element.node(token.value)
                    current.add_child(token.value, node)
                    metrics.nodes_created += 1
                stack.append(node)
                self._check_depth(len(stack) - 1, token)
                metrics.max_depth = max(metrics.max_depth, len(stack) - 1)

            elif token.type is TokenType.END_TAG:
                if len(stack) == 1:
                    raise FormatError(
                        f"closing tag </{token.value}> has no open section",
                        position=token.position.to_dict(),
                    )
                if current.name != token.value:
                    raise FormatError(
                        f"closing tag </{token.value}> does not match "
                        f"open section <{current.name}>",
                        position=token.position.to_dict(),
                    )
                stack.pop()

            elif token.is_content:
                self._add_leaves(current, token.value, metrics)

            else:
                self.logger.debug(
                    "Ignoring markup token",
                    extra={
                        "token_type": token.type.name,
                        "line": token.position.line,
                    }
                )

        if len(stack) > 1:
            unclosed = [element.name for element in stack[1:]]
            result.add_diagnostic(
                DiagnosticSeverity.WARNING,
                f"{len(unclosed)} sections left open at end of input",
                "tree_builder",
                details={"unclosed": unclosed},
            )
            self.logger.warning(
                "Sections left open at end of input",
                extra={"unclosed": unclosed}
            )

        metrics.processing_time_ms = (time.time() - start_time) * 1000

        self.logger.debug(
            "Tree building completed",
            extra=metrics.to_dict()
        )

        return result

    def _add_leaves(self, node: Element, text: str, metrics: BuildMetrics) -> None:
        """Turn every ``key=value`` line of ``text`` into a leaf of ``node``."""
        separator = self.config.key_value_separator
        comment_prefix = self.config.comment_prefix

        for raw_line in text.split("\n"):
            line = raw_line.strip()
            if not line or line.startswith(comment_prefix):
                continue

            key, sep, value = line.partition(separator)
            key = key.strip()
            if not sep or not key:
                metrics.lines_skipped += 1
                continue

            node.add_child(key, Element.leaf(key, value.strip()))
            metrics.leaves_created += 1

    def _check_depth(self, depth: int, token: Token) -> None:
        """Enforce the configured nesting limit."""
        max_depth = self.config.max_depth
        if max_depth is not None and depth > max_depth:
            raise FormatError(
                f"section <{token.value}> exceeds maximum depth {max_depth}",
                position=token.position.to_dict(),
            )
