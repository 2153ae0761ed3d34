#
# src/treescout/engine/__init__.py
#
"""
Value types of the discovery tree: unique ids, elements, descriptors,
selectors, filters and requests.
"""
from .descriptors import (
    ClassTestDescriptor,
    DescriptorType,
    EngineDescriptor,
    MethodTestDescriptor,
    NestedClassTestDescriptor,
    PackageTestDescriptor,
    TestDescriptor,
    descriptor_for_class,
    descriptor_for_package,
)
from .elements import ElementKind, PyElement
from .filters import (
    ClassNameFilter,
    CompositeFilter,
    DescriptorPredicateFilter,
    DiscoveryFilter,
    Filter,
    FilterMode,
    FilterResult,
    PackageNameFilter,
    PostDiscoveryFilter,
    apply_post_discovery_filters,
    compose_filters,
    exclude_class_name_patterns,
    exclude_package_names,
    include_class_name_patterns,
    include_package_names,
)
from .request import DiscoveryRequest, DiscoveryRequestBuilder, request
from .selectors import (
    ClassSelector,
    ClasspathSelector,
    DiscoverySelector,
    MethodSelector,
    PackageSelector,
    UniqueIdSelector,
    for_class,
    for_method,
    for_package_name,
    for_path,
    for_unique_id,
)
from .unique_id import Segment, UniqueId

__all__ = [
    "ClassNameFilter",
    "ClassSelector",
    "ClassTestDescriptor",
    "ClasspathSelector",
    "CompositeFilter",
    "DescriptorPredicateFilter",
    "DescriptorType",
    "DiscoveryFilter",
    "DiscoveryRequest",
    "DiscoveryRequestBuilder",
    "DiscoverySelector",
    "ElementKind",
    "EngineDescriptor",
    "Filter",
    "FilterMode",
    "FilterResult",
    "MethodSelector",
    "MethodTestDescriptor",
    "NestedClassTestDescriptor",
    "PackageNameFilter",
    "PackageSelector",
    "PackageTestDescriptor",
    "PostDiscoveryFilter",
    "PyElement",
    "Segment",
    "TestDescriptor",
    "UniqueId",
    "UniqueIdSelector",
    "apply_post_discovery_filters",
    "compose_filters",
    "descriptor_for_class",
    "descriptor_for_package",
    "exclude_class_name_patterns",
    "exclude_package_names",
    "for_class",
    "for_method",
    "for_package_name",
    "for_path",
    "for_unique_id",
    "include_class_name_patterns",
    "include_package_names",
    "request",
]

# 🔼⚙️
