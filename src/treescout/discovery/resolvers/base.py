#
# src/treescout/discovery/resolvers/base.py
#
"""
Shared behaviour for the built-in element resolvers.
"""
import structlog

from treescout.discovery.protocols import ElementProvider, ProgramElement, TestSpec
from treescout.engine.descriptors import TestDescriptor
from treescout.engine.unique_id import Segment, UniqueId
from treescout.exceptions import ResolverError

log = structlog.get_logger("discovery.resolvers")


class ElementResolverBase:
    """
    Base class for resolvers owning one segment type.

    Subclasses implement ``_owns``, ``_create`` and ``_element_for_segment``.
    The reverse contract is enforced here: ``resolve_unique_id`` refuses to
    run unless ``can_resolve_unique_id`` holds for the same arguments.
    """

    segment_type: str = ""

    def __init__(self, test_spec: TestSpec, provider: ElementProvider):
        self._test_spec = test_spec
        self._provider = provider
        self._log = log.bind(resolver=type(self).__name__, segment_type=self.segment_type)

    @property
    def name(self) -> str:
        return type(self).__name__

    def resolve_element(
        self, element: ProgramElement, parent: TestDescriptor
    ) -> set[TestDescriptor]:
        if not self._owns(element, parent):
            return set()
        descriptor = self._create(element, parent)
        self._log.debug(
            "Resolved element",
            element=element.qualified_name,
            unique_id=str(descriptor.unique_id),
            emoji_key="resolve",
        )
        return {descriptor}

    def can_resolve_unique_id(self, segment: Segment, parent: TestDescriptor) -> bool:
        if segment.type != self.segment_type:
            return False
        return self._element_for_segment(segment, parent) is not None

    def resolve_unique_id(
        self, segment: Segment, parent: TestDescriptor, unique_id: UniqueId
    ) -> TestDescriptor:
        element = self._element_for_segment(segment, parent)
        if element is None:
            raise ResolverError(
                f"Cannot resolve segment '{segment}' under '{parent.unique_id}'",
                resolver=self.name,
            )
        descriptor = self._create(element, parent)
        if descriptor.unique_id != unique_id:
            raise ResolverError(
                f"Segment '{segment}' resolved to '{descriptor.unique_id}', expected '{unique_id}'",
                resolver=self.name,
                element=element,
            )
        return descriptor

    def _owns(self, element: ProgramElement, parent: TestDescriptor) -> bool:
        raise NotImplementedError

    def _create(self, element: ProgramElement, parent: TestDescriptor) -> TestDescriptor:
        raise NotImplementedError

    def _element_for_segment(
        self, segment: Segment, parent: TestDescriptor
    ) -> ProgramElement | None:
        raise NotImplementedError


def is_child_element(element: ProgramElement, parent: TestDescriptor) -> bool:
    """True when ``element`` is declared directly inside the parent's element."""
    owner = element.parent_element()
    return (
        owner is not None
        and parent.element is not None
        and owner.qualified_name == parent.element.qualified_name
    )

# 🔼⚙️
