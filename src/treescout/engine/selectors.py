#
# src/treescout/engine/selectors.py
#
"""
Selectors describe what the user asked to discover.

They are inert values. The factory functions validate their input at
construction time and raise InvalidSelectorError on bad input; a selector
that is valid but matches nothing simply yields no descriptors later.
"""

import inspect
from pathlib import Path
from typing import TypeAlias

import structlog
from attrs import define, field

from treescout import reflection
from treescout.engine.unique_id import UniqueId
from treescout.exceptions import InvalidSelectorError, MalformedIdError

log = structlog.get_logger("engine.selectors")


@define(frozen=True, slots=True)
class ClassSelector:
    test_class: type

    @property
    def class_name(self) -> str:
        return f"{self.test_class.__module__}.{self.test_class.__qualname__}"

    def __str__(self) -> str:
        return f"class:{self.class_name}"


@define(frozen=True, slots=True)
class MethodSelector:
    test_class: type
    method_name: str

    @property
    def class_name(self) -> str:
        return f"{self.test_class.__module__}.{self.test_class.__qualname__}"

    def __str__(self) -> str:
        return f"method:{self.class_name}.{self.method_name}"


@define(frozen=True, slots=True)
class PackageSelector:
    package_name: str

    def __str__(self) -> str:
        return f"package:{self.package_name}"


@define(frozen=True, slots=True)
class ClasspathSelector:
    root: Path = field(converter=Path)

    def __str__(self) -> str:
        return f"path:{self.root}"


@define(frozen=True, slots=True)
class UniqueIdSelector:
    unique_id: UniqueId

    def __str__(self) -> str:
        return f"unique-id:{self.unique_id}"


DiscoverySelector: TypeAlias = (
    ClassSelector | MethodSelector | PackageSelector | ClasspathSelector | UniqueIdSelector
)


def _load_class(target: type | str) -> type:
    if inspect.isclass(target):
        return target
    if isinstance(target, str) and target:
        cls = reflection.load_class(target)
        if cls is not None:
            return cls
    raise InvalidSelectorError(f"Cannot load class '{target}'")


def for_class(target: type | str) -> ClassSelector:
    """
    Selects a class, given the class itself or its name as ``module:Qual``
    or ``module.Qual``.
    """
    return ClassSelector(_load_class(target))


def for_method(target: type | str, method_name: str | None = None) -> MethodSelector:
    """
    Selects one method of a class.

    ``for_method(cls, "test_x")``, ``for_method("pkg.mod.Cls", "test_x")``
    and ``for_method("pkg.mod.Cls#test_x")`` are equivalent. With a single
    string argument and no ``#`` the last dotted component is the method.
    """
    if method_name is None:
        if not isinstance(target, str):
            raise InvalidSelectorError("A method name is required when selecting by class object")
        if "#" in target:
            target, _, method_name = target.partition("#")
        else:
            target, _, method_name = target.rpartition(".")
    cls = _load_class(target)
    if not method_name or reflection.find_method(cls, method_name) is None:
        raise InvalidSelectorError(f"Class '{cls.__qualname__}' has no method '{method_name}'")
    return MethodSelector(cls, method_name)


def for_package_name(package_name: str) -> PackageSelector:
    if not reflection.is_valid_dotted_name(package_name):
        raise InvalidSelectorError(f"'{package_name}' is not a valid package name")
    return PackageSelector(package_name)


def for_path(root: str | Path) -> ClasspathSelector:
    if root is None or str(root).strip() == "":
        raise InvalidSelectorError("A classpath root must not be empty")
    return ClasspathSelector(Path(root))


def for_unique_id(unique_id: str | UniqueId) -> UniqueIdSelector:
    if isinstance(unique_id, UniqueId):
        return UniqueIdSelector(unique_id)
    try:
        return UniqueIdSelector(UniqueId.parse(unique_id))
    except MalformedIdError as e:
        raise InvalidSelectorError(str(e)) from e

# 🔼⚙️
