#
# src/treescout/discovery/__init__.py
#
"""
Discovery sub-package: resolvers, the element provider and the registry.
"""
from .factory import get_resolver
from .predicates import ConventionTestSpec
from .protocols import ElementProvider, ElementResolver, ProgramElement, TestSpec
from .provider import ModuleElementProvider
from .registry import DiscoveryOutcome, ResolverRegistry, ResolverRegistryBuilder, preconfigured_registry

__all__ = [
    "ConventionTestSpec",
    "DiscoveryOutcome",
    "ElementProvider",
    "ElementResolver",
    "ModuleElementProvider",
    "ProgramElement",
    "ResolverRegistry",
    "ResolverRegistryBuilder",
    "TestSpec",
    "get_resolver",
    "preconfigured_registry",
]

# 🔼⚙️
