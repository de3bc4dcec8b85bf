"""Tagged tree element used to hold a loaded configuration.

A tree is made of nodes (sections) and leaves (``key=value`` entries). Each
element owns its children through an insertion-ordered mapping keyed by name,
so enumeration order follows the document.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, Iterator, Optional, Tuple

ROOT_NAME = "root"


class ElementKind(Enum):
    """Kind tag for tree elements."""

    NODE = auto()   # Section that owns further elements
    LEAF = auto()   # Single key with a string value


@dataclass(eq=False)
class Element:
    """A node or leaf in the configuration tree.

    Attributes:
        kind: Whether this element is a node or a leaf
        name: Identifier, unique among siblings
        value: String payload, only meaningful for leaves
        children: Insertion-ordered mapping from name to owned child element
    """

    kind: ElementKind
    name: str
    value: str = ""
    children: Dict[str, "Element"] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        """Validate element values."""
        if not self.name:
            raise ValueError("Element name cannot be empty")
        if self.kind is ElementKind.LEAF and self.children:
            raise ValueError("Leaf elements cannot own children")

    @classmethod
    def node(cls, name: str) -> "Element":
        """Create an empty node."""
        return cls(ElementKind.NODE, name)

    @classmethod
    def leaf(cls, name: str, value: str) -> "Element":
        """Create a leaf holding ``value``."""
        return cls(ElementKind.LEAF, name, value)

    @classmethod
    def new_root(cls) -> "Element":
        """Create the empty root node every tree starts from."""
        return cls.node(ROOT_NAME)

    def is_node(self) -> bool:
        return self.kind is ElementKind.NODE

    def is_leaf(self) -> bool:
        return self.kind is ElementKind.LEAF

    def set_value(self, value: str) -> "Element":
        """Set the element's value and return the element."""
        self.value = value
        return self

    def add_child(self, name: str, child: "Element") -> "Element":
        """Store ``child`` under ``name``, replacing any existing child.

        Returns:
            This element, so calls can be chained

        Raises:
            TypeError: If this element is a leaf or ``child`` is not an Element
        """
        if self.is_leaf():
            raise TypeError(f"Leaf {self.name!r} cannot own children")
        if not isinstance(child, Element):
            raise TypeError("Child must be an Element instance")
        self.children[name] = child
        return self

    def find_child(self, name: str) -> Tuple[Optional["Element"], bool]:
        """Look up a direct child by name.

        Returns:
            Tuple of the child (or None) and whether it was found
        """
        child = self.children.get(name)
        return child, child is not None

    def iter_children(self, kind: Optional[ElementKind] = None) -> Iterator["Element"]:
        """Iterate direct children in insertion order, optionally by kind."""
        for child in self.children.values():
            if kind is None or child.kind is kind:
                yield child

    def depth(self) -> int:
        """Height of the subtree rooted here (a lone element has depth 0)."""
        deepest = 0
        stack = [(self, 0)]
        while stack:
            element, level = stack.pop()
            deepest = max(deepest, level)
            stack.extend((child, level + 1) for child in element.children.values())
        return deepest

    def render(self, indent: int = 0) -> str:
        """Render this subtree for diagnostics.

        Every element starts on a new line indented by one tab per level;
        nodes render as ``name:`` and leaves as ``name:value``.
        """
        parts = []
        stack = [(self, indent)]
        while stack:
            element, level = stack.pop()
            prefix = "\t" * level
            if element.is_leaf():
                parts.append(f"\n{prefix}{element.name}:{element.value}")
                continue
            parts.append(f"\n{prefix}{element.name}:")
            stack.extend(
                (child, level + 1) for child in reversed(list(element.children.values()))
            )
        return "".join(parts)

    def __str__(self) -> str:
        return self.render()
