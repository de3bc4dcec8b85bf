"""Tagged configuration loader.

Parses configuration documents made of nested tagged sections holding
``key=value`` lines and ``#`` comments, and answers path-addressed lookups
against the loaded tree from any number of threads.

Progressive API Disclosure:
- Level 1: Simple functions - new_conf(), load_string(), load_bytes()
- Level 2: Configured loader - Conf class with ParserConfig settings
- Level 3: Building blocks - TagTokenizer, TreeBuilder, PathResolver
"""

__version__ = "0.1.0"
__author__ = "Tagged Config Team"

from .api import Conf, load_bytes, load_string, new_conf
from .shared import (
    ConfigIOError,
    FormatError,
    ParserConfig,
    PathNotFoundError,
    TaggedConfigError,
)
from .tokenization import TagTokenizer
from .tree import Element, ElementKind, PathResolver, TreeBuilder

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple loading functions
    "new_conf",
    "load_string",
    "load_bytes",

    # Level 2: Configuration object and settings
    "Conf",
    "ParserConfig",

    # Level 3: Building blocks
    "Element",
    "ElementKind",
    "PathResolver",
    "TagTokenizer",
    "TreeBuilder",

    # Errors
    "ConfigIOError",
    "FormatError",
    "PathNotFoundError",
    "TaggedConfigError",
]
