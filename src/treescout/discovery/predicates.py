#
# src/treescout/discovery/predicates.py
#
"""
Name-convention based test predicates.
"""
import inspect
from fnmatch import fnmatchcase

from attrs import define, field

from treescout.discovery.protocols import ProgramElement
from treescout.engine.elements import ElementKind

DEFAULT_CLASS_PATTERNS = ("Test*",)
DEFAULT_METHOD_PATTERNS = ("test*",)


def _matches(name: str, patterns: tuple[str, ...]) -> bool:
    return any(fnmatchcase(name, pattern) for pattern in patterns)


@define(frozen=True, slots=True)
class ConventionTestSpec:
    """
    Classifies elements by glob patterns on their names.

    A test container is a concrete top-level class whose name matches
    ``class_patterns``; a nested test container is a matching class declared
    inside another class; a test method is a callable matching
    ``method_patterns``.
    """

    class_patterns: tuple[str, ...] = field(default=DEFAULT_CLASS_PATTERNS, converter=tuple)
    method_patterns: tuple[str, ...] = field(default=DEFAULT_METHOD_PATTERNS, converter=tuple)

    def is_test_container(self, element: ProgramElement) -> bool:
        return element.kind is ElementKind.CLASS and self._is_test_class(element)

    def is_nested_test_container(self, element: ProgramElement) -> bool:
        return element.kind is ElementKind.NESTED_CLASS and self._is_test_class(element)

    def is_test_method(self, element: ProgramElement) -> bool:
        return (
            element.kind is ElementKind.METHOD
            and callable(element.obj)
            and _matches(element.name, self.method_patterns)
        )

    def _is_test_class(self, element: ProgramElement) -> bool:
        return (
            inspect.isclass(element.obj)
            and not inspect.isabstract(element.obj)
            and _matches(element.name, self.class_patterns)
        )

# 🔼⚙️
