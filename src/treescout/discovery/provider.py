#
# src/treescout/discovery/provider.py
#
"""
Element provider backed by live Python modules, classes and functions.
"""

from pathlib import Path
from types import ModuleType
from typing import Any

import structlog

from treescout import reflection
from treescout.engine.elements import ElementKind, PyElement

log = structlog.get_logger("discovery.provider")


def element_for_module(module: ModuleType) -> PyElement:
    package_name, _, name = module.__name__.rpartition(".")
    parent = None
    if package_name:
        parent_module = reflection.load_module(package_name)
        if parent_module is not None:
            parent = element_for_module(parent_module)
    return PyElement(ElementKind.PACKAGE, name, module.__name__, module, parent)


def element_for_class(cls: type) -> PyElement | None:
    """Returns the element for a module-level or nested class, or None for local classes."""
    if "<locals>" in cls.__qualname__:
        return None
    if reflection.is_nested_class(cls):
        owner = reflection.enclosing_class(cls)
        if owner is None:
            return None
        parent = element_for_class(owner)
        if parent is None:
            return None
        kind = ElementKind.NESTED_CLASS
    else:
        module = reflection.load_module(cls.__module__)
        if module is None:
            return None
        parent = element_for_module(module)
        kind = ElementKind.CLASS
    return PyElement(kind, cls.__name__, f"{cls.__module__}.{cls.__qualname__}", cls, parent)


def element_for_method(cls: type, method_name: str) -> PyElement | None:
    method = reflection.find_method(cls, method_name)
    owner = element_for_class(cls)
    if method is None or owner is None:
        return None
    return PyElement(
        ElementKind.METHOD,
        method_name,
        f"{owner.qualified_name}.{method_name}",
        method,
        owner,
    )


class ModuleElementProvider:
    """
    Element provider that imports code and introspects it.

    Children of a package are its sub-modules (sorted by name) followed by
    the classes it defines. Children of a class are its nested classes
    followed by its methods.
    """

    def load_package(self, package_name: str) -> PyElement | None:
        module = reflection.load_module(package_name)
        if module is None:
            return None
        return element_for_module(module)

    def load_class(self, class_name: str) -> PyElement | None:
        cls = reflection.load_class(class_name)
        return element_for_class(cls) if cls is not None else None

    def element_for(self, obj: Any) -> PyElement | None:
        if isinstance(obj, ModuleType):
            return element_for_module(obj)
        if isinstance(obj, type):
            return element_for_class(obj)
        return None

    def element_for_method(self, cls: type, method_name: str) -> PyElement | None:
        return element_for_method(cls, method_name)

    def child_element(self, parent: PyElement, name: str) -> PyElement | None:
        """Looks up one named child without listing all of them."""
        if parent.kind is ElementKind.PACKAGE:
            if "." in name:
                return self.load_package(name)
            candidate = reflection.resolve_qualname(parent.obj, name)
            return element_for_class(candidate) if isinstance(candidate, type) else None
        if parent.kind in (ElementKind.CLASS, ElementKind.NESTED_CLASS):
            candidate = reflection.resolve_qualname(parent.obj, name)
            if isinstance(candidate, type):
                return element_for_class(candidate)
            return element_for_method(parent.obj, name)
        return None

    def children_of(self, element: PyElement) -> list[PyElement]:
        if element.kind is ElementKind.PACKAGE:
            return self._package_children(element)
        if element.kind in (ElementKind.CLASS, ElementKind.NESTED_CLASS):
            return self._class_children(element)
        return []

    def classes_under_root(self, root: Path) -> list[PyElement]:
        """Imports every module below ``root`` and returns the classes they define."""
        root = Path(root)
        if not root.is_dir():
            log.warning("Classpath root is not a directory", root=str(root))
            return []
        reflection.ensure_on_sys_path(root.resolve())

        elements = []
        for module_name in reflection.module_names_under_root(root):
            module = reflection.load_module(module_name)
            if module is None:
                log.warning("Skipping module that could not be imported", module=module_name)
                continue
            elements.extend(self._defined_classes(module))
        log.debug("Scanned classpath root", root=str(root), classes=len(elements), emoji_key="path")
        return elements

    def _package_children(self, element: PyElement) -> list[PyElement]:
        children = []
        for module_name in reflection.submodule_names(element.obj):
            module = reflection.load_module(module_name)
            if module is None:
                log.warning("Skipping module that could not be imported", module=module_name)
                continue
            children.append(PyElement(ElementKind.PACKAGE, module_name.rpartition(".")[2], module_name, module, element))
        children.extend(self._defined_classes(element.obj, element))
        return children

    def _defined_classes(self, module: ModuleType, parent: PyElement | None = None) -> list[PyElement]:
        parent = parent or element_for_module(module)
        return [
            PyElement(ElementKind.CLASS, cls.__name__, f"{module.__name__}.{cls.__qualname__}", cls, parent)
            for cls in reflection.module_classes(module)
        ]

    def _class_children(self, element: PyElement) -> list[PyElement]:
        cls = element.obj
        children: list[PyElement] = [
            PyElement(
                ElementKind.NESTED_CLASS,
                nested.__name__,
                f"{element.qualified_name}.{nested.__name__}",
                nested,
                element,
            )
            for nested in reflection.nested_classes(cls)
        ]
        children.extend(
            PyElement(
                ElementKind.METHOD,
                name,
                f"{element.qualified_name}.{name}",
                reflection.find_method(cls, name),
                element,
            )
            for name in reflection.method_names(cls)
        )
        return children

# 🔼⚙️
