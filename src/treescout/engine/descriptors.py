#
# src/treescout/engine/descriptors.py
#
"""
Discovery tree nodes.

A parent owns its children through an ordered mapping keyed by UniqueId.
Children refer back to their parent only through a weak reference.
"""

import weakref
from collections.abc import Callable, Iterator
from enum import Enum, auto
from typing import Any, ClassVar

import structlog
from attrs import define, field

from treescout.engine.unique_id import UniqueId

log = structlog.get_logger("engine.descriptors")

PACKAGE_SEGMENT_TYPE = "package"
CLASS_SEGMENT_TYPE = "class"
NESTED_CLASS_SEGMENT_TYPE = "nested-class"
METHOD_SEGMENT_TYPE = "method"


class DescriptorType(Enum):
    """Classification of a discovery tree node."""

    ROOT = auto()
    CONTAINER = auto()
    TEST = auto()


@define(eq=False, slots=True)
class TestDescriptor:
    """
    A node in the discovery tree.

    Identity is the unique id alone; two descriptors with equal ids compare
    equal regardless of children or element.
    """

    __test__ = False

    descriptor_type: ClassVar[DescriptorType] = DescriptorType.CONTAINER

    unique_id: UniqueId = field()
    display_name: str = field()
    element: Any = field(default=None, repr=False)
    _parent_ref: "weakref.ReferenceType[TestDescriptor] | None" = field(
        default=None, init=False, repr=False
    )
    _children: "dict[UniqueId, TestDescriptor]" = field(factory=dict, init=False, repr=False)

    @property
    def parent(self) -> "TestDescriptor | None":
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    @property
    def children(self) -> "tuple[TestDescriptor, ...]":
        return tuple(self._children.values())

    @property
    def is_root(self) -> bool:
        return self.descriptor_type is DescriptorType.ROOT

    @property
    def is_container(self) -> bool:
        return self.descriptor_type is DescriptorType.CONTAINER

    @property
    def is_test(self) -> bool:
        return self.descriptor_type is DescriptorType.TEST

    def find_child(self, unique_id: UniqueId) -> "TestDescriptor | None":
        return self._children.get(unique_id)

    def add_child(self, child: "TestDescriptor") -> "TestDescriptor":
        """
        Attaches a child, or returns the existing child with the same id.

        Raises:
            ValueError: If the child's id is not this node's id plus one
                segment, or the child is already attached elsewhere.
        """
        if child.unique_id.parent_id() != self.unique_id:
            raise ValueError(
                f"'{child.unique_id}' is not a direct child id of '{self.unique_id}'"
            )
        existing = self._children.get(child.unique_id)
        if existing is not None:
            return existing
        if child.parent is not None:
            raise ValueError(f"'{child.unique_id}' already has a parent")
        child._parent_ref = weakref.ref(self)
        self._children[child.unique_id] = child
        return child

    def remove_child(self, child: "TestDescriptor") -> None:
        removed = self._children.pop(child.unique_id, None)
        if removed is not None:
            removed._parent_ref = None

    def remove_from_hierarchy(self) -> None:
        if self.is_root:
            raise ValueError("The root descriptor cannot be removed from the hierarchy")
        parent = self.parent
        if parent is not None:
            parent.remove_child(self)

    def ancestors(self) -> "list[TestDescriptor]":
        """Returns the chain of ancestors, nearest first."""
        chain = []
        current = self.parent
        while current is not None:
            chain.append(current)
            current = current.parent
        return chain

    def walk(self) -> "Iterator[TestDescriptor]":
        """Pre-order traversal including this node."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def all_descendants(self) -> "list[TestDescriptor]":
        return list(self.walk())[1:]

    def find_by_unique_id(self, unique_id: UniqueId) -> "TestDescriptor | None":
        if not self.unique_id.is_prefix_of(unique_id):
            return None
        node: TestDescriptor | None = self
        for depth in range(len(self.unique_id), len(unique_id)):
            node = node.find_child(UniqueId(unique_id.segments[: depth + 1]))
            if node is None:
                return None
        return node

    def has_tests(self) -> bool:
        return any(node.is_test for node in self.walk())

    def prune(self) -> None:
        """Removes descendant containers that hold no tests."""
        for child in self.children:
            if child.is_container and not child.has_tests():
                log.debug("Pruning empty container", unique_id=str(child.unique_id))
                self.remove_child(child)
            else:
                child.prune()

    def accept(self, visitor: "Callable[[TestDescriptor], None]") -> None:
        visitor(self)
        for child in self.children:
            child.accept(visitor)

    def to_dict(self) -> dict[str, Any]:
        return {
            "unique_id": str(self.unique_id),
            "display_name": self.display_name,
            "type": self.descriptor_type.name.lower(),
            "children": [child.to_dict() for child in self.children],
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TestDescriptor):
            return NotImplemented
        return self.unique_id == other.unique_id

    def __hash__(self) -> int:
        return hash(self.unique_id)


@define(eq=False, slots=True, init=False)
class EngineDescriptor(TestDescriptor):
    """The distinguished root of a discovery tree."""

    descriptor_type: ClassVar[DescriptorType] = DescriptorType.ROOT

    def __init__(self, engine_id: str, display_name: str | None = None):
        self.__attrs_init__(UniqueId.for_engine(engine_id), display_name or engine_id)

    @property
    def engine_id(self) -> str:
        return self.unique_id.engine_segment.value


@define(eq=False, slots=True)
class PackageTestDescriptor(TestDescriptor):
    """A package or module namespace."""

    @property
    def package_name(self) -> str:
        return self.unique_id.last_segment.value


@define(eq=False, slots=True)
class ClassTestDescriptor(TestDescriptor):
    """A top-level test class."""

    @property
    def test_class(self) -> type | None:
        return getattr(self.element, "obj", None)


@define(eq=False, slots=True)
class NestedClassTestDescriptor(ClassTestDescriptor):
    """A test class declared inside another test class."""

    pass


@define(eq=False, slots=True)
class MethodTestDescriptor(TestDescriptor):
    """A single test method."""

    descriptor_type: ClassVar[DescriptorType] = DescriptorType.TEST

    @property
    def method_name(self) -> str:
        return self.unique_id.last_segment.value


def descriptor_for_package(
    parent: TestDescriptor, package_name: str, element: Any = None
) -> PackageTestDescriptor:
    return PackageTestDescriptor(
        parent.unique_id.append(PACKAGE_SEGMENT_TYPE, package_name), package_name, element
    )


def descriptor_for_class(
    parent: TestDescriptor, test_class: type, element: Any = None
) -> ClassTestDescriptor:
    return ClassTestDescriptor(
        parent.unique_id.append(CLASS_SEGMENT_TYPE, test_class.__name__),
        test_class.__name__,
        element,
    )

# 🔼⚙️
