#
# src/treescout/engine/request.py
#
"""
Discovery requests: which selectors to resolve and which filters to apply.
"""

from collections.abc import Iterable
from typing import Any, Self

from attrs import define, field

from treescout.engine.filters import CompositeFilter, Filter, compose_filters
from treescout.engine.selectors import DiscoverySelector


def _unique_in_order(items: Iterable[Any]) -> tuple[Any, ...]:
    return tuple(dict.fromkeys(items))


@define(frozen=True, slots=True)
class DiscoveryRequest:
    """
    An immutable tuple of selectors and discovery filters.

    Duplicate selectors are dropped, keeping the first occurrence.
    """

    selectors: tuple[DiscoverySelector, ...] = field(converter=_unique_in_order, factory=tuple)
    filters: tuple[Filter, ...] = field(converter=tuple, factory=tuple)

    def selectors_by_type(self, selector_type: type) -> list[DiscoverySelector]:
        return [selector for selector in self.selectors if isinstance(selector, selector_type)]

    def discovery_filter(self) -> CompositeFilter:
        return compose_filters(*self.filters)


class DiscoveryRequestBuilder:
    """Fluent builder for DiscoveryRequest."""

    def __init__(self) -> None:
        self._selectors: list[DiscoverySelector] = []
        self._filters: list[Filter] = []

    def select(self, *selectors: DiscoverySelector | Iterable[DiscoverySelector]) -> Self:
        for selector in selectors:
            if isinstance(selector, (list, tuple, set, frozenset)):
                self._selectors.extend(selector)
            else:
                self._selectors.append(selector)
        return self

    def filter(self, *filters: Filter) -> Self:
        self._filters.extend(filters)
        return self

    def build(self) -> DiscoveryRequest:
        return DiscoveryRequest(tuple(self._selectors), tuple(self._filters))


def request() -> DiscoveryRequestBuilder:
    return DiscoveryRequestBuilder()

# 🔼⚙️
