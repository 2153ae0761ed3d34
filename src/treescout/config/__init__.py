#
# config/__init__.py
#
"""
Configuration handling sub-package for treescout.

Exports the loading function and core configuration models.
"""

from .loader import default_config, load_config
from .models import DiscoveryConfig, GlobalConfig, SelectionConfig, TreescoutConfig

__all__ = [
    "DiscoveryConfig",
    "GlobalConfig",
    "SelectionConfig",
    "TreescoutConfig",
    "default_config",
    "load_config",
]

# 🔼⚙️
