#
# tests/unit/test_config.py
#
"""
Tests for configuration loading, validation and the launcher facade.
"""

import logging
import textwrap
from pathlib import Path

import pytest

from treescout.config import DiscoveryConfig, GlobalConfig, SelectionConfig, TreescoutConfig, default_config, load_config
from treescout.engine import ClassNameFilter, ClassSelector, PackageNameFilter, PackageSelector, UniqueIdSelector
from treescout.exceptions import ConfigurationError, InvalidSelectorError
from treescout.launcher import build_filters, discover, filters_from_config, request_from_config


@pytest.fixture
def write_config(tmp_path: Path):
    def _write(content: str) -> Path:
        path = tmp_path / "treescout.toml"
        path.write_text(textwrap.dedent(content), encoding="utf-8")
        return path

    return _write


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("TREESCOUT_LOG_LEVEL", raising=False)
    monkeypatch.delenv("TREESCOUT_ENGINE_ID", raising=False)


class TestLoadConfig:
    def test_full_config(self, write_config) -> None:
        path = write_config(
            """
            [global]
            log_level = "debug"

            [discovery]
            engine_id = "py"
            display_name = "Python tests"
            class_patterns = ["Test*", "*Spec"]
            method_patterns = "test*"
            exclude_class_names = [".*Legacy"]
            include_packages = ["acme"]

            [selection]
            packages = ["acme"]
            unique_ids = ["engine:py/package:acme"]
            """
        )

        config = load_config(path)

        assert config.global_config.numeric_log_level == logging.DEBUG
        assert config.discovery.engine_id == "py"
        assert config.discovery.class_patterns == ("Test*", "*Spec")
        assert config.discovery.method_patterns == ("test*",)
        assert config.discovery.exclude_class_names == (".*Legacy",)
        assert config.selection.packages == ("acme",)
        assert not config.selection.is_empty

    def test_empty_file_gives_defaults(self, write_config) -> None:
        config = load_config(write_config(""))

        assert config == TreescoutConfig()
        assert config.discovery.resolvers == ("package", "class", "nested-class", "method")
        assert config.selection.is_empty

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(tmp_path / "absent.toml")

    def test_invalid_toml(self, write_config) -> None:
        with pytest.raises(ConfigurationError, match="Invalid TOML"):
            load_config(write_config("[discovery\nengine_id = 1"))

    def test_unknown_section(self, write_config) -> None:
        with pytest.raises(ConfigurationError, match="Unknown sections"):
            load_config(write_config("[runner]\nparallel = true\n"))

    def test_unknown_key(self, write_config) -> None:
        with pytest.raises(ConfigurationError, match=r"Unknown keys in \[discovery\]"):
            load_config(write_config("[discovery]\nengine = 'x'\n"))

    @pytest.mark.parametrize(
        "content",
        [
            "[global]\nlog_level = 'LOUD'\n",
            "[discovery]\nengine_id = ''\n",
            "[discovery]\nresolvers = ['package', 'fixture']\n",
            "[discovery]\ninclude_class_names = ['Test[']\n",
            "[discovery]\nclass_patterns = []\n",
            "discovery = 3\n",
        ],
    )
    def test_invalid_values(self, write_config, content: str) -> None:
        with pytest.raises(ConfigurationError) as excinfo:
            load_config(write_config(content))

        assert excinfo.value.path is not None

    def test_environment_overrides_file(self, write_config, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TREESCOUT_LOG_LEVEL", "ERROR")
        monkeypatch.setenv("TREESCOUT_ENGINE_ID", "from-env")

        config = load_config(write_config("[global]\nlog_level = 'DEBUG'\n"))

        assert config.global_config.log_level == "ERROR"
        assert config.discovery.engine_id == "from-env"

    def test_default_config_uses_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TREESCOUT_ENGINE_ID", "env-engine")

        assert default_config().discovery.engine_id == "env-engine"

    def test_default_config_rejects_bad_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TREESCOUT_LOG_LEVEL", "LOUD")

        with pytest.raises(ConfigurationError):
            default_config()


class TestConfigModels:
    def test_strings_become_tuples(self) -> None:
        assert SelectionConfig(packages="acme").packages == ("acme",)

    def test_global_level_is_case_insensitive(self) -> None:
        assert GlobalConfig(log_level="warning").numeric_log_level == logging.WARNING

    def test_discovery_rejects_unknown_resolver(self) -> None:
        with pytest.raises(ValueError, match="Unknown resolvers"):
            DiscoveryConfig(resolvers=["method", "parameterized"])


class TestLauncher:
    def test_build_filters(self) -> None:
        filters = build_filters(["Test.*"], [], ["acme"], ["acme.sub"])

        assert [type(f) for f in filters] == [ClassNameFilter, PackageNameFilter, PackageNameFilter]
        assert build_filters() == []

    def test_build_filters_rejects_bad_regex(self) -> None:
        with pytest.raises(ConfigurationError, match="Invalid class name pattern"):
            build_filters(["Test["])

    def test_filters_from_config(self) -> None:
        config = TreescoutConfig(discovery=DiscoveryConfig(exclude_class_names=["X"]))

        assert len(filters_from_config(config)) == 1

    def test_request_from_config(self, sample_root: Path) -> None:
        config = TreescoutConfig(
            discovery=DiscoveryConfig(include_packages=["acme"]),
            selection=SelectionConfig(
                packages=["acme.sub"],
                classes=["acme.b.TestCalculator"],
                unique_ids=["engine:treescout/package:shop"],
            ),
        )

        discovery_request = request_from_config(config)

        assert [type(s) for s in discovery_request.selectors] == [PackageSelector, ClassSelector, UniqueIdSelector]
        assert len(discovery_request.filters) == 1

    def test_request_from_config_rejects_bad_selector(self) -> None:
        config = TreescoutConfig(selection=SelectionConfig(packages=["not valid"]))

        with pytest.raises(InvalidSelectorError):
            request_from_config(config)

    def test_discover_uses_configured_engine(self, sample_root: Path) -> None:
        config = TreescoutConfig(
            discovery=DiscoveryConfig(engine_id="py", display_name="Python", method_patterns=["test_s*"]),
            selection=SelectionConfig(classes=["acme.b.TestCalculator"]),
        )

        outcome = discover(request_from_config(config), config)

        assert outcome.root.display_name == "Python"
        assert str(outcome.root.unique_id) == "engine:py"
        assert [node.display_name for node in outcome.root.walk() if node.is_test] == ["test_sub"]
