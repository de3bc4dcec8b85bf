"""Tree layer for tagged configuration loading.

Key Components:
    Element: A node (section) or leaf (``key=value`` entry) of the tree
    TreeBuilder: Builds a fresh tree from a token stream
    BuildResult: New root plus build metrics and diagnostics
    PathResolver: Resolves slash-delimited paths against a tree
"""

from .builder import (
    BuildResult,
    TreeBuilder,
)
from .element import (
    ROOT_NAME,
    Element,
    ElementKind,
)
from .resolver import (
    PATH_SEPARATOR,
    PathResolver,
    parse_path,
)

__all__ = [
    "BuildResult",
    "Element",
    "ElementKind",
    "PATH_SEPARATOR",
    "PathResolver",
    "ROOT_NAME",
    "TreeBuilder",
    "parse_path",
]
