#
# src/treescout/telemetry/__init__.py
#
"""
Logging setup for treescout.
"""
from .logger import StructLogger, setup_logging

__all__ = ["StructLogger", "setup_logging"]

# 🔼⚙️
