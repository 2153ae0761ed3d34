#
# src/treescout/discovery/resolvers/__init__.py
#
"""
Built-in element resolvers.
"""
from .base import ElementResolverBase
from .classes import ClassResolver
from .methods import MethodResolver
from .nested import NestedClassResolver
from .package import PackageResolver

__all__ = [
    "ClassResolver",
    "ElementResolverBase",
    "MethodResolver",
    "NestedClassResolver",
    "PackageResolver",
]

# 🔼⚙️
