#
# src/treescout/engine/elements.py
#
"""
Program element handles.

An element is an already classified, opaque reference to a package, class,
nested class or method. The discovery core only reads its kind, names and
enclosing element; what the element wraps is the provider's business.
"""

from enum import Enum
from typing import Any

from attrs import define, field


class ElementKind(Enum):
    PACKAGE = "package"
    CLASS = "class"
    NESTED_CLASS = "nested-class"
    METHOD = "method"


@define(frozen=True, slots=True)
class PyElement:
    """
    An opaque handle on something a resolver may turn into a descriptor.

    Equality uses the kind and qualified name only.
    """

    kind: ElementKind
    name: str
    qualified_name: str
    obj: Any = field(eq=False, repr=False)
    parent: "PyElement | None" = field(default=None, eq=False, repr=False)

    def parent_element(self) -> "PyElement | None":
        return self.parent

    def lineage(self) -> "tuple[PyElement, ...]":
        """The chain from the outermost package down to this element."""
        chain = []
        current: PyElement | None = self
        while current is not None:
            chain.append(current)
            current = current.parent
        return tuple(reversed(chain))


# 🔼⚙️
