"""Path resolution against a configuration tree.

Paths are slash-delimited, e.g. ``/tars/application/server``. The last segment
may carry a bracket suffix, ``prefix<inner>``, which addresses ``inner`` inside
the section ``prefix``; this lets callers build the path of a dynamically named
entry without a second separator, e.g. ``/tars/db<ip>``.
"""

from typing import Dict, List

from tagged_config.shared import PathNotFoundError

from .element import Element, ElementKind

PATH_SEPARATOR = "/"


def parse_path(path: str) -> List[str]:
    """Split ``path`` into the ordered segments to descend through.

    Empty segments (leading, trailing or doubled slashes) are dropped, and a
    ``prefix<inner>`` last segment is expanded into ``prefix`` and ``inner``.

    Examples:
        >>> parse_path("/A/B<Ip>")
        ['A', 'B', 'Ip']
        >>> parse_path("/A/<Ip>")
        ['A', 'Ip']
    """
    segments = [segment for segment in path.split(PATH_SEPARATOR) if segment]
    if not segments:
        return segments

    parts = segments[-1].split("<")
    if len(parts) == 2:
        prefix, inner = parts[0], parts[1].strip(">")
        segments[-1:] = [segment for segment in (prefix, inner) if segment]

    return segments


class PathResolver:
    """Resolves paths against a tree by greedy, case-sensitive descent."""

    def __init__(self, root: Element) -> None:
        self.root = root

    def get_elem(self, path: str) -> Element:
        """Resolve ``path`` to an element.

        Raises:
            PathNotFoundError: If any segment has no matching child
        """
        target = self.root
        for segment in parse_path(path):
            child, found = target.find_child(segment)
            if not found:
                raise PathNotFoundError(path, segment)
            target = child
        return target

    def get_value(self, path: str) -> str:
        """Return the value stored at ``path``.

        Raises:
            PathNotFoundError: If the path does not resolve
        """
        return self.get_elem(path).value

    def get_domain(self, path: str) -> List[str]:
        """Return the names of the sections directly under ``path``.

        Raises:
            PathNotFoundError: If the path does not resolve
        """
        target = self.get_elem(path)
        return [child.name for child in target.iter_children(ElementKind.NODE)]

    def get_map(self, path: str) -> Dict[str, str]:
        """Return the ``key -> value`` pairs directly under ``path``.

        Unlike the other lookups, a path that does not resolve yields an empty
        mapping rather than an error.
        """
        try:
            target = self.get_elem(path)
        except PathNotFoundError:
            return {}
        return {
            child.name: child.value
            for child in target.iter_children(ElementKind.LEAF)
        }
