#
# src/treescout/discovery/factory.py
#
"""
Factory for creating ElementResolver instances by name.
"""
import structlog

from treescout.discovery.protocols import ElementProvider, ElementResolver, TestSpec
from treescout.discovery.resolvers import (
    ClassResolver,
    MethodResolver,
    NestedClassResolver,
    PackageResolver,
)
from treescout.exceptions import ConfigurationError

log = structlog.get_logger("discovery.factory")

# Keyed by the segment type each resolver owns.
RESOLVER_MAP = {
    PackageResolver.segment_type: PackageResolver,
    ClassResolver.segment_type: ClassResolver,
    NestedClassResolver.segment_type: NestedClassResolver,
    MethodResolver.segment_type: MethodResolver,
}

DEFAULT_RESOLVERS = tuple(RESOLVER_MAP)


def get_resolver(resolver_name: str, test_spec: TestSpec, provider: ElementProvider) -> ElementResolver:
    """
    Factory function to get an instance of a built-in ElementResolver.
    """
    resolver_key = resolver_name.lower()
    resolver_class = RESOLVER_MAP.get(resolver_key)

    if not resolver_class:
        log.error("Unsupported resolver specified", resolver=resolver_name)
        raise ConfigurationError(
            f"Unsupported resolver: '{resolver_name}'. "
            f"Available resolvers: {list(RESOLVER_MAP.keys())}"
        )

    log.debug("Instantiating resolver", resolver=resolver_name)
    return resolver_class(test_spec, provider)

# 🔼⚙️
