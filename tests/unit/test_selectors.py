#
# tests/unit/test_selectors.py
#
"""
Tests for selector factories and discovery requests.
"""

from pathlib import Path

import pytest

from treescout.engine import (
    ClassSelector,
    ClasspathSelector,
    MethodSelector,
    PackageSelector,
    UniqueId,
    UniqueIdSelector,
    for_class,
    for_method,
    for_package_name,
    for_path,
    for_unique_id,
    include_class_name_patterns,
    request,
)
from treescout.exceptions import InvalidSelectorError


class Widget:
    def check(self):
        pass


class TestClassSelectors:
    def test_for_class_with_class_object(self) -> None:
        selector = for_class(Widget)

        assert selector == ClassSelector(Widget)
        assert str(selector) == f"class:{__name__}.Widget"

    @pytest.mark.parametrize("name", ["acme.b.TestCalculator", "acme.b:TestCalculator"])
    def test_for_class_by_name(self, sample_root: Path, name: str) -> None:
        selector = for_class(name)

        assert selector.test_class.__name__ == "TestCalculator"
        assert selector.class_name == "acme.b.TestCalculator"

    def test_for_class_nested_by_name(self, sample_root: Path) -> None:
        selector = for_class("acme.nesting.TestOuter.TestInner")

        assert selector.test_class.__qualname__ == "TestOuter.TestInner"

    @pytest.mark.parametrize("name", ["", "acme.b.Missing", "no_such_module.Thing", "acme.b.TestCalculator.test_add"])
    def test_for_class_rejects_unloadable_names(self, sample_root: Path, name: str) -> None:
        with pytest.raises(InvalidSelectorError):
            for_class(name)


class TestMethodSelectors:
    def test_for_method_with_class_object(self) -> None:
        selector = for_method(Widget, "check")

        assert selector == MethodSelector(Widget, "check")
        assert str(selector) == f"method:{__name__}.Widget.check"

    @pytest.mark.parametrize(
        "args",
        [
            ("acme.b.TestCalculator", "test_add"),
            ("acme.b.TestCalculator#test_add",),
            ("acme.b.TestCalculator.test_add",),
        ],
    )
    def test_equivalent_method_forms(self, sample_root: Path, args: tuple[str, ...]) -> None:
        selector = for_method(*args)

        assert selector.test_class.__name__ == "TestCalculator"
        assert selector.method_name == "test_add"

    def test_missing_method_rejected(self) -> None:
        with pytest.raises(InvalidSelectorError, match="has no method"):
            for_method(Widget, "nope")

    def test_class_object_without_method_name_rejected(self) -> None:
        with pytest.raises(InvalidSelectorError):
            for_method(Widget)


class TestOtherSelectors:
    def test_for_package_name(self) -> None:
        assert for_package_name("acme.sub") == PackageSelector("acme.sub")
        assert str(for_package_name("acme")) == "package:acme"

    @pytest.mark.parametrize("name", ["", "acme..b", "1acme", "acme-b", ".acme"])
    def test_for_package_name_rejects_bad_syntax(self, name: str) -> None:
        with pytest.raises(InvalidSelectorError):
            for_package_name(name)

    def test_for_path(self, tmp_path: Path) -> None:
        selector = for_path(tmp_path)

        assert selector == ClasspathSelector(tmp_path)
        assert str(selector) == f"path:{tmp_path}"

    @pytest.mark.parametrize("root", ["", "   "])
    def test_for_path_rejects_empty(self, root: str) -> None:
        with pytest.raises(InvalidSelectorError):
            for_path(root)

    def test_for_unique_id(self) -> None:
        selector = for_unique_id("engine:e/package:acme")

        assert selector == UniqueIdSelector(UniqueId.for_engine("e").append("package", "acme"))
        assert for_unique_id(selector.unique_id) == selector

    def test_for_unique_id_rejects_malformed_text(self) -> None:
        with pytest.raises(InvalidSelectorError, match="Malformed unique id"):
            for_unique_id("engine:e//package:acme")


class TestDiscoveryRequest:
    def test_duplicate_selectors_removed_in_order(self) -> None:
        first = for_package_name("b")
        second = for_package_name("a")

        discovery_request = request().select(first, second, for_package_name("b")).build()

        assert discovery_request.selectors == (first, second)

    def test_select_accepts_collections(self) -> None:
        selectors = [for_package_name("a"), for_package_name("b")]

        discovery_request = request().select(selectors).select(for_class(Widget)).build()

        assert len(discovery_request.selectors) == 3
        assert discovery_request.selectors_by_type(PackageSelector) == selectors

    def test_filters_are_combined(self) -> None:
        discovery_request = request().filter(include_class_name_patterns("Test.*")).build()

        assert len(discovery_request.filters) == 1
        assert "Test.*" in discovery_request.discovery_filter().description()

    def test_empty_request(self) -> None:
        discovery_request = request().build()

        assert discovery_request.selectors == ()
        assert discovery_request.discovery_filter().description() == "include everything"
