#
# src/treescout/discovery/resolvers/package.py
#
"""
Resolves packages and modules into package descriptors.
"""
from treescout.discovery.protocols import ProgramElement
from treescout.discovery.resolvers.base import ElementResolverBase
from treescout.engine.descriptors import (
    PACKAGE_SEGMENT_TYPE,
    EngineDescriptor,
    PackageTestDescriptor,
    TestDescriptor,
)
from treescout.engine.elements import ElementKind
from treescout.engine.unique_id import Segment


class PackageResolver(ElementResolverBase):
    """
    Owns packages. A top-level package attaches under the engine root; any
    other package attaches under the descriptor of its enclosing package.
    """

    segment_type = PACKAGE_SEGMENT_TYPE

    def _owns(self, element: ProgramElement, parent: TestDescriptor) -> bool:
        if element.kind is not ElementKind.PACKAGE:
            return False
        enclosing = element.qualified_name.rpartition(".")[0]
        if isinstance(parent, EngineDescriptor):
            return not enclosing
        return isinstance(parent, PackageTestDescriptor) and parent.package_name == enclosing

    def _create(self, element: ProgramElement, parent: TestDescriptor) -> TestDescriptor:
        return PackageTestDescriptor(
            parent.unique_id.append(self.segment_type, element.qualified_name),
            element.qualified_name,
            element,
        )

    def _element_for_segment(
        self, segment: Segment, parent: TestDescriptor
    ) -> ProgramElement | None:
        enclosing = segment.value.rpartition(".")[0]
        if isinstance(parent, EngineDescriptor):
            expected_parent = ""
        elif isinstance(parent, PackageTestDescriptor):
            expected_parent = parent.package_name
        else:
            return None
        if enclosing != expected_parent:
            return None
        return self._provider.load_package(segment.value)

# 🔼⚙️
