#
# src/treescout/launcher.py
#
"""
Facade wiring configuration, registry and request into a discovery run.
"""

import re
from collections.abc import Iterable

import structlog

from treescout.config import TreescoutConfig, default_config
from treescout.discovery import DiscoveryOutcome, ResolverRegistry, preconfigured_registry
from treescout.discovery.predicates import ConventionTestSpec
from treescout.engine import (
    DiscoveryRequest,
    DiscoveryRequestBuilder,
    EngineDescriptor,
    Filter,
    exclude_class_name_patterns,
    exclude_package_names,
    for_class,
    for_method,
    for_package_name,
    for_path,
    for_unique_id,
    include_class_name_patterns,
    include_package_names,
    request,
)
from treescout.exceptions import ConfigurationError
from treescout.telemetry import StructLogger

log: StructLogger = structlog.get_logger("launcher")


def build_registry(config: TreescoutConfig) -> ResolverRegistry:
    discovery = config.discovery
    test_spec = ConventionTestSpec(discovery.class_patterns, discovery.method_patterns)
    return preconfigured_registry(test_spec=test_spec, resolver_names=discovery.resolvers)


def build_filters(
    include_class_names: Iterable[str] = (),
    exclude_class_names: Iterable[str] = (),
    include_packages: Iterable[str] = (),
    exclude_packages: Iterable[str] = (),
) -> list[Filter]:
    """
    Builds discovery filters from name patterns; empty groups add nothing.

    Raises:
        ConfigurationError: If a class name pattern is not a valid regex.
    """
    include_class_names = tuple(include_class_names)
    exclude_class_names = tuple(exclude_class_names)
    include_packages = tuple(include_packages)
    exclude_packages = tuple(exclude_packages)

    filters: list[Filter] = []
    try:
        if include_class_names:
            filters.append(include_class_name_patterns(*include_class_names))
        if exclude_class_names:
            filters.append(exclude_class_name_patterns(*exclude_class_names))
    except re.error as e:
        raise ConfigurationError(f"Invalid class name pattern: {e}") from e
    if include_packages:
        filters.append(include_package_names(*include_packages))
    if exclude_packages:
        filters.append(exclude_package_names(*exclude_packages))
    return filters


def filters_from_config(config: TreescoutConfig) -> list[Filter]:
    discovery = config.discovery
    return build_filters(
        discovery.include_class_names,
        discovery.exclude_class_names,
        discovery.include_packages,
        discovery.exclude_packages,
    )


def select_from_names(
    builder: DiscoveryRequestBuilder,
    packages: Iterable[str] = (),
    classes: Iterable[str] = (),
    methods: Iterable[str] = (),
    paths: Iterable[str] = (),
    unique_ids: Iterable[str] = (),
) -> DiscoveryRequestBuilder:
    """
    Adds selectors built from their textual forms.

    Raises:
        InvalidSelectorError: For the first name that cannot be turned into
            a selector.
    """
    builder.select([for_package_name(name) for name in packages])
    builder.select([for_class(name) for name in classes])
    builder.select([for_method(name) for name in methods])
    builder.select([for_path(path) for path in paths])
    builder.select([for_unique_id(text) for text in unique_ids])
    return builder


def request_from_config(config: TreescoutConfig) -> DiscoveryRequest:
    selection = config.selection
    builder = select_from_names(
        request(),
        packages=selection.packages,
        classes=selection.classes,
        methods=selection.methods,
        paths=selection.paths,
        unique_ids=selection.unique_ids,
    )
    return builder.filter(*filters_from_config(config)).build()


def discover(
    discovery_request: DiscoveryRequest,
    config: TreescoutConfig | None = None,
    registry: ResolverRegistry | None = None,
) -> DiscoveryOutcome:
    """Runs discovery into a fresh engine descriptor."""
    config = config or default_config()
    registry = registry or build_registry(config)
    root = EngineDescriptor(config.discovery.engine_id, config.discovery.display_name)
    log.debug("Launching discovery", engine_id=root.engine_id, emoji_key="discover")
    return registry.resolve(root, discovery_request)

# 🔼⚙️
