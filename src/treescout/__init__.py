#
# src/treescout/__init__.py
#
"""
treescout: resolves test selectors into a deduplicated discovery tree.
"""
from treescout.discovery import DiscoveryOutcome, ResolverRegistry, preconfigured_registry
from treescout.engine import EngineDescriptor, UniqueId, request
from treescout.exceptions import (
    ConfigurationError,
    InvalidSelectorError,
    MalformedIdError,
    ResolverError,
    TreescoutError,
)

__all__ = [
    "ConfigurationError",
    "DiscoveryOutcome",
    "EngineDescriptor",
    "InvalidSelectorError",
    "MalformedIdError",
    "ResolverError",
    "ResolverRegistry",
    "TreescoutError",
    "UniqueId",
    "preconfigured_registry",
    "request",
]

# 🔼⚙️
