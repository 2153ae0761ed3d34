#
# tests/conftest.py
#
"""
Shared fixtures: a throwaway source tree of importable sample packages.
"""

import importlib
import sys
import textwrap
from pathlib import Path

import pytest

from treescout.discovery import ResolverRegistry, preconfigured_registry
from treescout.engine import EngineDescriptor

SAMPLE_PACKAGES = ("acme", "shop")

SAMPLE_SOURCES = {
    "acme/__init__.py": "",
    "acme/b.py": """
        class TestCalculator:
            def test_add(self):
                pass

            def test_sub(self):
                pass

            def helper(self):
                pass


        class Helper:
            def test_looks_like_a_test(self):
                pass
        """,
    "acme/nesting.py": """
        class TestOuter:
            def test_outer(self):
                pass

            class TestInner:
                def test_one(self):
                    pass

                def test_two(self):
                    pass

            class Support:
                def test_ignored(self):
                    pass
        """,
    "acme/notests.py": """
        class Plain:
            def run(self):
                pass
        """,
    "acme/sub/__init__.py": "",
    "acme/sub/deep.py": """
        class TestDeep:
            def test_deep(self):
                pass
        """,
    "shop/__init__.py": "",
    "shop/cases.py": """
        class TestOrders:
            def test_create(self):
                pass

            def test_cancel(self):
                pass


        class TestLegacy:
            def test_old(self):
                pass

            class TestInner:
                def test_a(self):
                    pass

                def test_b(self):
                    pass


        class TestPayments:
            def test_pay(self):
                pass
        """,
}


def _purge_sample_modules() -> None:
    for name in list(sys.modules):
        if name.split(".")[0] in SAMPLE_PACKAGES:
            del sys.modules[name]


@pytest.fixture
def sample_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Writes the sample packages below a fresh directory on sys.path."""
    root = tmp_path / "sample_src"
    for relative, source in SAMPLE_SOURCES.items():
        target = root / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(textwrap.dedent(source).lstrip(), encoding="utf-8")

    _purge_sample_modules()
    monkeypatch.syspath_prepend(str(root))
    importlib.invalidate_caches()
    yield root
    _purge_sample_modules()


@pytest.fixture
def engine_root() -> EngineDescriptor:
    return EngineDescriptor("treescout")


@pytest.fixture
def registry() -> ResolverRegistry:
    return preconfigured_registry()
