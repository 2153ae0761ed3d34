#
# config/models.py
#
"""
Attrs-based data models for treescout configuration structure.
"""

import logging
import re
from typing import Any

from attrs import define, field

from treescout.discovery.factory import DEFAULT_RESOLVERS, RESOLVER_MAP
from treescout.discovery.predicates import DEFAULT_CLASS_PATTERNS, DEFAULT_METHOD_PATTERNS


# --- Validators ---
def _validate_log_level(inst: Any, attr: Any, value: str) -> None:
    """Validator for standard logging level names."""
    valid = logging.getLevelNamesMapping().keys()
    if value.upper() not in valid:
        raise ValueError(f"Invalid log_level '{value}'. Must be one of {list(valid)}.")


def _validate_non_empty(inst: Any, attr: Any, value: Any) -> None:
    if not value:
        raise ValueError(f"Field '{attr.name}' must not be empty")


def _validate_regexes(inst: Any, attr: Any, value: tuple[str, ...]) -> None:
    for pattern in value:
        try:
            re.compile(pattern)
        except re.error as e:
            raise ValueError(f"Field '{attr.name}' has an invalid pattern '{pattern}': {e}") from e


def _validate_resolvers(inst: Any, attr: Any, value: tuple[str, ...]) -> None:
    _validate_non_empty(inst, attr, value)
    unknown = [name for name in value if name.lower() not in RESOLVER_MAP]
    if unknown:
        raise ValueError(f"Unknown resolvers {unknown}. Available: {list(RESOLVER_MAP)}")


def _to_tuple(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    return tuple(value)


@define(frozen=True, slots=True)
class GlobalConfig:
    """Global default settings for treescout."""
    log_level: str = field(default="INFO", validator=_validate_log_level)

    @property
    def numeric_log_level(self) -> int:
        return logging.getLevelName(self.log_level.upper())


@define(frozen=True, slots=True)
class DiscoveryConfig:
    """How elements are classified and which ones are filtered out."""
    engine_id: str = field(default="treescout", validator=_validate_non_empty)
    display_name: str = field(default="treescout")
    resolvers: tuple[str, ...] = field(default=DEFAULT_RESOLVERS, converter=_to_tuple, validator=_validate_resolvers)
    class_patterns: tuple[str, ...] = field(
        default=DEFAULT_CLASS_PATTERNS, converter=_to_tuple, validator=_validate_non_empty
    )
    method_patterns: tuple[str, ...] = field(
        default=DEFAULT_METHOD_PATTERNS, converter=_to_tuple, validator=_validate_non_empty
    )
    include_class_names: tuple[str, ...] = field(factory=tuple, converter=_to_tuple, validator=_validate_regexes)
    exclude_class_names: tuple[str, ...] = field(factory=tuple, converter=_to_tuple, validator=_validate_regexes)
    include_packages: tuple[str, ...] = field(factory=tuple, converter=_to_tuple)
    exclude_packages: tuple[str, ...] = field(factory=tuple, converter=_to_tuple)


@define(frozen=True, slots=True)
class SelectionConfig:
    """Selectors to resolve when none are given on the command line."""
    packages: tuple[str, ...] = field(factory=tuple, converter=_to_tuple)
    classes: tuple[str, ...] = field(factory=tuple, converter=_to_tuple)
    methods: tuple[str, ...] = field(factory=tuple, converter=_to_tuple)
    paths: tuple[str, ...] = field(factory=tuple, converter=_to_tuple)
    unique_ids: tuple[str, ...] = field(factory=tuple, converter=_to_tuple)

    @property
    def is_empty(self) -> bool:
        return not (self.packages or self.classes or self.methods or self.paths or self.unique_ids)


@define(frozen=True, slots=True)
class TreescoutConfig:
    """Root configuration object for the treescout application."""
    global_config: GlobalConfig = field(factory=GlobalConfig, metadata={"toml_name": "global"})
    discovery: DiscoveryConfig = field(factory=DiscoveryConfig)
    selection: SelectionConfig = field(factory=SelectionConfig)

# 🔼⚙️
