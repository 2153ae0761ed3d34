#
# src/treescout/discovery/protocols.py
#
"""
Defines the protocols the discovery core depends on.

The core never introspects code itself. It talks to an element provider
(what exists), a test spec (what counts as a test) and a set of element
resolvers (how an element becomes a tree node).
"""
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from treescout.engine.descriptors import TestDescriptor
from treescout.engine.unique_id import Segment, UniqueId


@runtime_checkable
class ProgramElement(Protocol):
    """An opaque, already classified handle on a package, class or method."""

    kind: Any
    name: str
    qualified_name: str
    obj: Any

    def parent_element(self) -> "ProgramElement | None": ...

    def lineage(self) -> "tuple[ProgramElement, ...]": ...


@runtime_checkable
class TestSpec(Protocol):
    """Capability predicates deciding what is a test."""

    def is_test_method(self, element: ProgramElement) -> bool: ...

    def is_test_container(self, element: ProgramElement) -> bool: ...

    def is_nested_test_container(self, element: ProgramElement) -> bool: ...


@runtime_checkable
class ElementProvider(Protocol):
    """Reflection and metadata collaborator."""

    def load_package(self, package_name: str) -> ProgramElement | None: ...

    def load_class(self, class_name: str) -> ProgramElement | None: ...

    def element_for(self, obj: Any) -> ProgramElement | None: ...

    def element_for_method(self, cls: type, method_name: str) -> ProgramElement | None: ...

    def child_element(self, parent: ProgramElement, name: str) -> ProgramElement | None: ...

    def children_of(self, element: ProgramElement) -> list[ProgramElement]: ...

    def classes_under_root(self, root: Path) -> list[ProgramElement]: ...


@runtime_checkable
class ElementResolver(Protocol):
    """
    Extension point turning program elements into descriptors.

    Implementations must be idempotent and must not depend on the order in
    which the registry consults them.
    """

    def resolve_element(
        self,
        element: ProgramElement,
        parent: TestDescriptor,
    ) -> set[TestDescriptor]:
        """
        Forward resolution.

        Args:
            element: The candidate program element.
            parent: The node the element would be attached under.

        Returns:
            The descriptors this resolver owns for the element, each with an
            id one segment longer than the parent's. Empty if not owned.
        """
        ...

    def can_resolve_unique_id(self, segment: Segment, parent: TestDescriptor) -> bool:
        """Whether ``resolve_unique_id`` may be called for this segment and parent."""
        ...

    def resolve_unique_id(
        self,
        segment: Segment,
        parent: TestDescriptor,
        unique_id: UniqueId,
    ) -> TestDescriptor:
        """
        Reverse resolution of a single segment.

        Only valid after ``can_resolve_unique_id`` returned True for the same
        segment and parent.
        """
        ...

# 🔼⚙️
