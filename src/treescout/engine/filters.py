#
# src/treescout/engine/filters.py
#
"""
Discovery and post-discovery filters.

Discovery filters are applied to program elements before a descriptor is
ever created, so excluded subtrees are never materialised. Post-discovery
filters are applied to a finished tree.
"""

import re
from collections.abc import Callable, Iterable
from enum import Enum
from typing import Any, Protocol, runtime_checkable

import structlog
from attrs import define, field

from treescout.engine.descriptors import TestDescriptor
from treescout.engine.elements import ElementKind

log = structlog.get_logger("engine.filters")


class FilterMode(Enum):
    INCLUDE = "include"
    EXCLUDE = "exclude"


@define(frozen=True, slots=True)
class FilterResult:
    """Outcome of applying a filter to one candidate."""

    included: bool
    reason: str = ""

    @classmethod
    def include(cls, reason: str = "") -> "FilterResult":
        return cls(True, reason)

    @classmethod
    def exclude(cls, reason: str = "") -> "FilterResult":
        return cls(False, reason)

    @property
    def excluded(self) -> bool:
        return not self.included


@runtime_checkable
class Filter(Protocol):
    """A side-effect free, named predicate."""

    def description(self) -> str: ...

    def apply(self, candidate: Any) -> FilterResult: ...


class DiscoveryFilter(Filter, Protocol):
    """Marker protocol for filters evaluated against program elements."""


class PostDiscoveryFilter(Filter, Protocol):
    """Marker protocol for filters evaluated against descriptors."""


def _compile(patterns: Iterable[str]) -> tuple[re.Pattern[str], ...]:
    compiled = tuple(re.compile(pattern) for pattern in patterns)
    if not compiled:
        raise ValueError("At least one pattern is required")
    return compiled


@define(frozen=True, slots=True)
class ClassNameFilter:
    """
    Includes or excludes top-level classes whose simple or fully qualified
    name fully matches one of the regular expressions. Other elements pass.
    """

    patterns: tuple[re.Pattern[str], ...] = field(converter=_compile)
    mode: FilterMode = field(default=FilterMode.INCLUDE)

    def description(self) -> str:
        joined = ", ".join(pattern.pattern for pattern in self.patterns)
        return f"{self.mode.value} class names matching [{joined}]"

    def apply(self, candidate: Any) -> FilterResult:
        if getattr(candidate, "kind", None) is not ElementKind.CLASS:
            return FilterResult.include("not a top-level class")
        matched = any(
            pattern.fullmatch(candidate.name) or pattern.fullmatch(candidate.qualified_name)
            for pattern in self.patterns
        )
        if matched == (self.mode is FilterMode.INCLUDE):
            return FilterResult.include(f"class '{candidate.qualified_name}' accepted")
        return FilterResult.exclude(f"class '{candidate.qualified_name}' rejected by {self.description()}")


@define(frozen=True, slots=True)
class PackageNameFilter:
    """
    Includes or excludes packages, and classes by their package.

    In include mode the ancestors of an included package pass too, so that
    the path down to it can still be built.
    """

    package_names: tuple[str, ...] = field(converter=tuple)
    mode: FilterMode = field(default=FilterMode.INCLUDE)

    @package_names.validator
    def _check_names(self, attribute, value) -> None:
        if not value:
            raise ValueError("At least one package name is required")

    def description(self) -> str:
        return f"{self.mode.value} packages [{', '.join(self.package_names)}]"

    def apply(self, candidate: Any) -> FilterResult:
        kind = getattr(candidate, "kind", None)
        if kind is ElementKind.PACKAGE:
            package_name = candidate.qualified_name
            allow_ancestors = True
        elif kind is ElementKind.CLASS:
            package_name = candidate.parent_element().qualified_name
            allow_ancestors = False
        else:
            return FilterResult.include("not a package or top-level class")

        within = any(self._within(package_name, name) for name in self.package_names)
        if self.mode is FilterMode.EXCLUDE:
            if within:
                return FilterResult.exclude(f"'{package_name}' rejected by {self.description()}")
            return FilterResult.include(f"'{package_name}' accepted")

        if within or (
            allow_ancestors and any(name.startswith(package_name + ".") for name in self.package_names)
        ):
            return FilterResult.include(f"'{package_name}' accepted")
        return FilterResult.exclude(f"'{package_name}' rejected by {self.description()}")

    @staticmethod
    def _within(package_name: str, prefix: str) -> bool:
        return package_name == prefix or package_name.startswith(prefix + ".")


@define(frozen=True, slots=True)
class DescriptorPredicateFilter:
    """Post-discovery filter wrapping a predicate over descriptors."""

    predicate: Callable[[TestDescriptor], bool]
    name: str = field(default="descriptor predicate")

    def description(self) -> str:
        return self.name

    def apply(self, candidate: TestDescriptor) -> FilterResult:
        if self.predicate(candidate):
            return FilterResult.include(f"'{candidate.unique_id}' matches {self.name}")
        return FilterResult.exclude(f"'{candidate.unique_id}' does not match {self.name}")


@define(frozen=True, slots=True)
class CompositeFilter:
    """AND composition; an empty composition includes everything."""

    filters: tuple[Filter, ...] = field(converter=tuple)

    def description(self) -> str:
        if not self.filters:
            return "include everything"
        return " and ".join(f"({f.description()})" for f in self.filters)

    def apply(self, candidate: Any) -> FilterResult:
        for candidate_filter in self.filters:
            result = candidate_filter.apply(candidate)
            if result.excluded:
                return result
        return FilterResult.include("accepted by all filters")


def compose_filters(*filters: Filter) -> CompositeFilter:
    return CompositeFilter(filters)


def include_class_name_patterns(*patterns: str) -> ClassNameFilter:
    return ClassNameFilter(patterns, FilterMode.INCLUDE)


def exclude_class_name_patterns(*patterns: str) -> ClassNameFilter:
    return ClassNameFilter(patterns, FilterMode.EXCLUDE)


def include_package_names(*package_names: str) -> PackageNameFilter:
    return PackageNameFilter(package_names, FilterMode.INCLUDE)


def exclude_package_names(*package_names: str) -> PackageNameFilter:
    return PackageNameFilter(package_names, FilterMode.EXCLUDE)


def apply_post_discovery_filters(
    root: TestDescriptor, filters: Iterable[PostDiscoveryFilter]
) -> int:
    """
    Removes tests rejected by the filters, then prunes empty containers.

    Returns:
        The number of tests removed.
    """
    composite = compose_filters(*filters)
    removed = 0
    for descriptor in root.all_descendants():
        if descriptor.is_test and composite.apply(descriptor).excluded:
            descriptor.remove_from_hierarchy()
            removed += 1
    root.prune()
    log.debug("Applied post-discovery filters", removed=removed, filters=composite.description())
    return removed

# 🔼⚙️
