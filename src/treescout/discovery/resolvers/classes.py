#
# src/treescout/discovery/resolvers/classes.py
#
"""
Resolves top-level test classes.
"""
from treescout.discovery.protocols import ProgramElement
from treescout.discovery.resolvers.base import ElementResolverBase, is_child_element
from treescout.engine.descriptors import (
    CLASS_SEGMENT_TYPE,
    ClassTestDescriptor,
    PackageTestDescriptor,
    TestDescriptor,
)
from treescout.engine.elements import ElementKind
from treescout.engine.unique_id import Segment


class ClassResolver(ElementResolverBase):
    segment_type = CLASS_SEGMENT_TYPE

    def _owns(self, element: ProgramElement, parent: TestDescriptor) -> bool:
        return (
            element.kind is ElementKind.CLASS
            and isinstance(parent, PackageTestDescriptor)
            and is_child_element(element, parent)
            and self._test_spec.is_test_container(element)
        )

    def _create(self, element: ProgramElement, parent: TestDescriptor) -> TestDescriptor:
        return ClassTestDescriptor(
            parent.unique_id.append(self.segment_type, element.name),
            element.name,
            element,
        )

    def _element_for_segment(
        self, segment: Segment, parent: TestDescriptor
    ) -> ProgramElement | None:
        if not isinstance(parent, PackageTestDescriptor) or parent.element is None:
            return None
        element = self._provider.child_element(parent.element, segment.value)
        if element is None or not self._owns(element, parent):
            return None
        return element

# 🔼⚙️
