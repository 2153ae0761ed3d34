#
# src/treescout/reflection.py
#
"""
Import and introspection helpers backing the program element provider.

Nothing here decides what a test is; it only loads modules and classes and
lists what they declare.
"""

import importlib
import inspect
import pkgutil
import re
import sys
from collections.abc import Iterator
from pathlib import Path
from types import ModuleType

import structlog

log = structlog.get_logger("reflection")

_DOTTED_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*")
_SKIPPED_DIRECTORIES = {"__pycache__", "site-packages", "node_modules"}


def is_valid_dotted_name(name: str) -> bool:
    return isinstance(name, str) and _DOTTED_NAME.fullmatch(name) is not None


def load_module(name: str) -> ModuleType | None:
    """Imports a module by dotted name, returning None if it cannot be loaded."""
    if not is_valid_dotted_name(name):
        return None
    try:
        return importlib.import_module(name)
    except ImportError as e:
        log.debug("Module not importable", module=name, error=str(e))
        return None
    except Exception:
        log.warning("Module raised while importing", module=name, exc_info=True)
        return None


def resolve_qualname(owner: object, qualname: str) -> object | None:
    """Follows a dotted ``__qualname__`` from a module or class."""
    target = owner
    for part in qualname.split("."):
        target = inspect.getattr_static(target, part, None)
        if target is None:
            return None
    return target


def load_class(name: str) -> type | None:
    """
    Loads a class from ``module:Qual.Name`` or ``module.Qual.Name``.

    For the dotted form the longest importable module prefix wins.
    """
    if ":" in name:
        module_name, _, qualname = name.partition(":")
        module = load_module(module_name)
        candidate = resolve_qualname(module, qualname) if module and qualname else None
        return candidate if inspect.isclass(candidate) else None

    parts = name.split(".")
    for split in range(len(parts) - 1, 0, -1):
        module = load_module(".".join(parts[:split]))
        if module is None:
            continue
        candidate = resolve_qualname(module, ".".join(parts[split:]))
        if inspect.isclass(candidate):
            return candidate
    return None


def is_nested_class(cls: type) -> bool:
    return "." in cls.__qualname__ and "<locals>" not in cls.__qualname__


def enclosing_class(cls: type) -> type | None:
    """Returns the class whose body declares ``cls``, if any."""
    if not is_nested_class(cls):
        return None
    module = sys.modules.get(cls.__module__)
    if module is None:
        return None
    owner = resolve_qualname(module, cls.__qualname__.rpartition(".")[0])
    return owner if inspect.isclass(owner) else None


def find_method(cls: type, method_name: str) -> object | None:
    """Returns the named callable attribute of a class (inherited included)."""
    if not method_name.isidentifier():
        return None
    attribute = getattr(cls, method_name, None)
    if attribute is None or inspect.isclass(attribute) or not callable(attribute):
        return None
    return attribute


def submodule_names(module: ModuleType) -> list[str]:
    """Fully qualified names of the direct sub-modules of a package, sorted."""
    search_path = getattr(module, "__path__", None)
    if not search_path:
        return []
    names = {
        f"{module.__name__}.{info.name}"
        for info in pkgutil.iter_modules(search_path)
        if info.name.isidentifier()
    }
    return sorted(names)


def module_classes(module: ModuleType) -> list[type]:
    """Top-level classes defined in a module, in definition order."""
    return [
        value
        for key, value in vars(module).items()
        if inspect.isclass(value)
        and value.__module__ == module.__name__
        and value.__qualname__ == key
    ]


def nested_classes(cls: type) -> list[type]:
    """Classes declared in the body of ``cls``, in definition order."""
    return [
        value
        for key, value in vars(cls).items()
        if inspect.isclass(value) and value.__qualname__ == f"{cls.__qualname__}.{key}"
    ]


def method_names(cls: type) -> list[str]:
    """Names of callable, non-dunder, non-class attributes of ``cls``, sorted."""
    names = []
    for name in dir(cls):
        if name.startswith("__") and name.endswith("__"):
            continue
        if find_method(cls, name) is not None:
            names.append(name)
    return names


def module_names_under_root(root: Path) -> Iterator[str]:
    """
    Yields the dotted names of every Python module found below ``root``.

    Packages are yielded before their contents; the order is stable for a
    given directory layout.
    """
    for path in sorted(root.rglob("*.py")):
        relative = path.relative_to(root)
        if any(part in _SKIPPED_DIRECTORIES or part.startswith(".") for part in relative.parts):
            continue
        parts = list(relative.with_suffix("").parts)
        if parts[-1] == "__init__":
            parts.pop()
        if not parts or not all(part.isidentifier() for part in parts):
            continue
        yield ".".join(parts)


def ensure_on_sys_path(root: Path) -> None:
    entry = str(root)
    if entry not in sys.path:
        log.info("Adding classpath root to sys.path", root=entry)
        sys.path.insert(0, entry)
        importlib.invalidate_caches()

# 🔼⚙️
