#
# src/treescout/discovery/registry.py
#
"""
The resolver registry and its fixed-point discovery algorithm.

Every selector seeds resolution tasks. A task pairs a program element with
the tree node it should be attached under, plus the part of the element's
lineage that still has to be descended to reach what the selector named.
Tasks are processed in FIFO order until the queue is empty:

* every registered resolver is asked for descriptors for the task element;
* each descriptor is attached under the task parent, or the existing child
  with the same unique id is reused;
* while lineage remains, the next element is queued under the attached node;
* once the selected element is reached its node is expanded exactly once per
  run, queueing one task per child element.

Discovery filters are checked before any task is queued, so excluded
elements never become nodes.
"""

from collections import deque
from collections.abc import Iterable
from typing import Any, Self

import structlog
from attrs import define, field

from treescout.discovery.factory import DEFAULT_RESOLVERS, get_resolver
from treescout.discovery.predicates import ConventionTestSpec
from treescout.discovery.protocols import ElementProvider, ElementResolver, ProgramElement, TestSpec
from treescout.discovery.provider import ModuleElementProvider
from treescout.engine.descriptors import TestDescriptor
from treescout.engine.filters import CompositeFilter
from treescout.engine.request import DiscoveryRequest
from treescout.engine.selectors import (
    ClassSelector,
    ClasspathSelector,
    DiscoverySelector,
    MethodSelector,
    PackageSelector,
    UniqueIdSelector,
)
from treescout.engine.unique_id import Segment, UniqueId
from treescout.exceptions import ConfigurationError, ResolverError
from treescout.telemetry import StructLogger

log: StructLogger = structlog.get_logger("discovery.registry")


@define(slots=True, eq=False)
class _ResolutionTask:
    element: ProgramElement
    parent: TestDescriptor
    remaining: tuple[ProgramElement, ...] = ()
    origin: DiscoverySelector | None = None


@define(frozen=True, slots=True)
class DiscoveryOutcome:
    """
    Result of one discovery run.

    ``root`` has been populated in place. Selectors that matched nothing are
    listed in ``unresolved_selectors``; they are not errors.
    """

    root: TestDescriptor
    unresolved_selectors: tuple[DiscoverySelector, ...] = field(factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not self.root.children

    def descriptors_of_type(self, descriptor_class: type) -> list[TestDescriptor]:
        return [node for node in self.root.all_descendants() if type(node) is descriptor_class]

    def counts(self) -> dict[str, int]:
        tally: dict[str, int] = {}
        for node in self.root.all_descendants():
            key = type(node).__name__
            tally[key] = tally.get(key, 0) + 1
        return tally

    @property
    def test_count(self) -> int:
        return sum(1 for node in self.root.all_descendants() if node.is_test)


class ResolverRegistry:
    """Owns an ordered set of element resolvers and drives discovery."""

    def __init__(self, resolvers: Iterable[ElementResolver], provider: ElementProvider):
        self._resolvers = tuple(resolvers)
        self._provider = provider
        if not self._resolvers:
            raise ConfigurationError("A resolver registry needs at least one resolver")

    @classmethod
    def builder(cls) -> "ResolverRegistryBuilder":
        return ResolverRegistryBuilder()

    @property
    def resolvers(self) -> tuple[ElementResolver, ...]:
        return self._resolvers

    @property
    def provider(self) -> ElementProvider:
        return self._provider

    def resolve(self, root: TestDescriptor, discovery_request: DiscoveryRequest) -> DiscoveryOutcome:
        """
        Populates ``root`` in place from the request.

        Raises:
            ResolverError: If a resolver fails or breaks its contract. Every
                node attached during this call is removed again first.
        """
        return _DiscoveryRun(self, root, discovery_request).execute()


class _DiscoveryRun:
    """State of a single, single-threaded resolve() call."""

    def __init__(self, registry: ResolverRegistry, root: TestDescriptor, discovery_request: DiscoveryRequest):
        self._resolvers = registry.resolvers
        self._provider = registry.provider
        self._root = root
        self._request = discovery_request
        self._filter: CompositeFilter = discovery_request.discovery_filter()
        self._queue: deque[_ResolutionTask] = deque()
        self._expanded: set[UniqueId] = set()
        self._attached: list[TestDescriptor] = []
        self._resolved: set[DiscoverySelector] = set()
        self._log = log.bind(root=str(root.unique_id))

    def execute(self) -> DiscoveryOutcome:
        self._log.info(
            "Starting discovery",
            selectors=len(self._request.selectors),
            filters=self._filter.description(),
        )
        try:
            for selector in self._request.selectors:
                self._seed(selector)
            self._drain()
        except Exception:
            self._log.error("Discovery aborted; rolling back tree", attached=len(self._attached))
            self._rollback()
            raise

        unresolved = tuple(s for s in self._request.selectors if s not in self._resolved)
        for selector in unresolved:
            self._log.warning("Selector matched nothing", selector=str(selector))
        outcome = DiscoveryOutcome(self._root, unresolved)
        self._log.info("Discovery finished", attached=len(self._attached), emoji_key="success", **outcome.counts())
        return outcome

    # --- Seeding ---

    def _seed(self, selector: DiscoverySelector) -> None:
        if isinstance(selector, UniqueIdSelector):
            self._seed_unique_id(selector)
            return
        if isinstance(selector, ClasspathSelector):
            for element in self._provider.classes_under_root(selector.root):
                self._enqueue_lineage(element, selector)
            return

        element: ProgramElement | None = None
        if isinstance(selector, PackageSelector):
            element = self._provider.load_package(selector.package_name)
        elif isinstance(selector, ClassSelector):
            element = self._provider.element_for(selector.test_class)
        elif isinstance(selector, MethodSelector):
            element = self._provider.element_for_method(selector.test_class, selector.method_name)
        else:
            raise ConfigurationError(f"Unsupported selector type: {type(selector).__name__}")

        if element is None:
            self._log.debug("Selector names no loadable element", selector=str(selector))
            return
        self._enqueue_lineage(element, selector)

    def _enqueue_lineage(self, element: ProgramElement, origin: DiscoverySelector) -> None:
        lineage = element.lineage()
        self._enqueue(lineage[0], self._root, lineage[1:], origin)

    def _seed_unique_id(self, selector: UniqueIdSelector) -> None:
        unique_id = selector.unique_id
        if unique_id.engine_segment != self._root.unique_id.engine_segment:
            self._log.debug("Unique id belongs to another engine", unique_id=str(unique_id))
            return

        # Nothing is attached until every segment has resolved.
        chain: list[tuple[TestDescriptor, ElementResolver]] = []
        parent = self._root
        current = self._root.unique_id
        for segment in unique_id.segments[len(current):]:
            current = current.append(segment.type, segment.value)
            resolver = self._resolver_for_segment(segment, parent)
            if resolver is None:
                self._log.debug("No resolver for segment", segment=str(segment), parent=str(parent.unique_id))
                return
            descriptor = self._invoke(resolver, "resolve_unique_id", segment, parent, current)
            if not isinstance(descriptor, TestDescriptor):
                raise ResolverError(
                    f"'resolve_unique_id' returned {type(descriptor).__name__}, not a TestDescriptor",
                    resolver=type(resolver).__name__,
                    element=segment,
                )
            if descriptor.element is not None and not self._accepts(descriptor.element):
                return
            chain.append((descriptor, resolver))
            existing = parent.find_child(descriptor.unique_id)
            parent = existing if existing is not None else descriptor

        if not chain:
            self._log.debug("Unique id names the engine root only", unique_id=str(unique_id))
            return
        node = self._root
        for descriptor, resolver in chain:
            node = self._attach(node, descriptor, resolver)
        self._resolved.add(selector)
        self._expand(node)

    def _resolver_for_segment(self, segment: Segment, parent: TestDescriptor) -> ElementResolver | None:
        claimants = [
            resolver
            for resolver in self._resolvers
            if self._invoke(resolver, "can_resolve_unique_id", segment, parent)
        ]
        if len(claimants) > 1:
            names = ", ".join(type(r).__name__ for r in claimants)
            raise ResolverError(f"Segment type '{segment.type}' is claimed by several resolvers: {names}")
        return claimants[0] if claimants else None

    # --- Fixed point ---

    def _enqueue(
        self,
        element: ProgramElement,
        parent: TestDescriptor,
        remaining: tuple[ProgramElement, ...] = (),
        origin: DiscoverySelector | None = None,
    ) -> None:
        if not self._accepts(element):
            return
        self._queue.append(_ResolutionTask(element, parent, remaining, origin))

    def _accepts(self, element: ProgramElement) -> bool:
        result = self._filter.apply(element)
        if result.excluded:
            self._log.debug(
                "Element excluded by filter", element=element.qualified_name, reason=result.reason, emoji_key="filter"
            )
        return result.included

    def _drain(self) -> None:
        while self._queue:
            task = self._queue.popleft()
            for node in self._resolve_task(task):
                if task.remaining:
                    self._enqueue(task.remaining[0], node, task.remaining[1:], task.origin)
                    continue
                if task.origin is not None:
                    self._resolved.add(task.origin)
                self._expand(node)

    def _resolve_task(self, task: _ResolutionTask) -> list[TestDescriptor]:
        nodes: dict[UniqueId, TestDescriptor] = {}
        for resolver in self._resolvers:
            produced = self._invoke(resolver, "resolve_element", task.element, task.parent)
            produced = self._checked(resolver, task.element, produced)
            for descriptor in sorted(produced, key=lambda d: str(d.unique_id)):
                node = self._attach(task.parent, descriptor, resolver)
                nodes.setdefault(node.unique_id, node)
        return list(nodes.values())

    def _expand(self, node: TestDescriptor) -> None:
        if node.unique_id in self._expanded or node.element is None:
            return
        self._expanded.add(node.unique_id)
        for child in self._provider.children_of(node.element):
            self._enqueue(child, node)

    def _attach(self, parent: TestDescriptor, descriptor: TestDescriptor, resolver: Any) -> TestDescriptor:
        if descriptor.unique_id.parent_id() != parent.unique_id:
            raise ResolverError(
                f"Descriptor '{descriptor.unique_id}' is not a direct child of '{parent.unique_id}'",
                resolver=type(resolver).__name__,
                element=descriptor.element,
            )
        existing = parent.find_child(descriptor.unique_id)
        if existing is not None:
            return existing
        parent.add_child(descriptor)
        self._attached.append(descriptor)
        return descriptor

    def _invoke(self, resolver: ElementResolver, operation: str, *args: Any) -> Any:
        try:
            return getattr(resolver, operation)(*args)
        except ResolverError:
            raise
        except Exception as e:
            raise ResolverError(
                f"'{operation}' failed",
                resolver=type(resolver).__name__,
                element=args[0] if args else None,
                details=e,
            ) from e

    def _checked(self, resolver: ElementResolver, element: ProgramElement, produced: Any) -> list[TestDescriptor]:
        """Descriptors from resolve_element, which must be an iterable of TestDescriptor."""
        if isinstance(produced, (str, bytes)) or not isinstance(produced, Iterable):
            raise ResolverError(
                f"'resolve_element' returned {type(produced).__name__}, not a collection of descriptors",
                resolver=type(resolver).__name__,
                element=element,
            )
        try:
            descriptors = list(produced)
        except Exception as e:
            raise ResolverError(
                "'resolve_element' failed while producing descriptors",
                resolver=type(resolver).__name__,
                element=element,
                details=e,
            ) from e
        for descriptor in descriptors:
            if not isinstance(descriptor, TestDescriptor):
                raise ResolverError(
                    f"'resolve_element' produced {type(descriptor).__name__}, not a TestDescriptor",
                    resolver=type(resolver).__name__,
                    element=element,
                )
        return descriptors

    def _rollback(self) -> None:
        for descriptor in reversed(self._attached):
            parent = descriptor.parent
            if parent is not None:
                parent.remove_child(descriptor)
        self._attached.clear()


class ResolverRegistryBuilder:
    """Assembles a ResolverRegistry from an explicit, ordered resolver list."""

    def __init__(self) -> None:
        self._resolvers: list[ElementResolver] = []
        self._provider: ElementProvider | None = None

    def with_resolver(self, resolver: ElementResolver) -> Self:
        self._resolvers.append(resolver)
        return self

    def with_resolvers(self, resolvers: Iterable[ElementResolver]) -> Self:
        self._resolvers.extend(resolvers)
        return self

    def with_provider(self, provider: ElementProvider) -> Self:
        self._provider = provider
        return self

    def build(self) -> ResolverRegistry:
        provider = self._provider or ModuleElementProvider()
        return ResolverRegistry(self._resolvers, provider)


def preconfigured_registry(
    test_spec: TestSpec | None = None,
    provider: ElementProvider | None = None,
    resolver_names: Iterable[str] | None = None,
) -> ResolverRegistry:
    """Registry wired with the built-in package, class, nested class and method resolvers."""
    test_spec = test_spec or ConventionTestSpec()
    provider = provider or ModuleElementProvider()
    names = tuple(resolver_names) if resolver_names is not None else DEFAULT_RESOLVERS
    return (
        ResolverRegistry.builder()
        .with_provider(provider)
        .with_resolvers(get_resolver(name, test_spec, provider) for name in names)
        .build()
    )

# 🔼⚙️
