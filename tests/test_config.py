"""Tests for configuration loading and validation."""

from __future__ import annotations

import os

import pytest

from cxx_insight.config import AnalysisConfig, load_config
from cxx_insight.exceptions import ConfigurationError, InvalidConfigError


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """No global or project config files and no CXX_INSIGHT_* variables."""
    home = tmp_path / "home"
    project = tmp_path / "project"
    home.mkdir()
    project.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(project)
    for key in list(os.environ):
        if key.startswith("CXX_INSIGHT_"):
            monkeypatch.delenv(key)
    return project


# ── Defaults and validation ───────────────────────────────────────────


class TestAnalysisConfig:
    """Defaults and range checks."""

    def test_defaults(self):
        config = AnalysisConfig()
        assert config.cyclomatic_threshold == 10
        assert config.cognitive_threshold == 15
        assert config.size_threshold == 20
        assert config.secondary_locations is False
        assert config.workers is None
        assert config.verbosity == "normal"

    @pytest.mark.parametrize("key", ["cyclomatic_threshold", "cognitive_threshold", "size_threshold"])
    def test_negative_threshold_rejected(self, key):
        with pytest.raises(InvalidConfigError) as exc_info:
            AnalysisConfig(**{key: -1})
        assert exc_info.value.key == key

    def test_zero_threshold_allowed(self):
        assert AnalysisConfig(size_threshold=0).size_threshold == 0

    def test_non_integer_threshold_rejected(self):
        with pytest.raises(InvalidConfigError):
            AnalysisConfig(cyclomatic_threshold="10")  # type: ignore[arg-type]
        with pytest.raises(InvalidConfigError):
            AnalysisConfig(cyclomatic_threshold=True)

    def test_workers_must_be_positive(self):
        with pytest.raises(InvalidConfigError):
            AnalysisConfig(workers=0)

    def test_unknown_verbosity(self):
        with pytest.raises(InvalidConfigError):
            AnalysisConfig(verbosity="loud")  # type: ignore[arg-type]

    def test_suffixes_need_a_dot(self):
        with pytest.raises(InvalidConfigError):
            AnalysisConfig(header_suffixes=("h",))

    def test_is_header(self):
        config = AnalysisConfig()
        assert config.is_header("include/widget.hh")
        assert config.is_header("Widget.HPP")
        assert not config.is_header("src/widget.cc")

    def test_frozen(self):
        with pytest.raises(Exception):
            AnalysisConfig().size_threshold = 5  # type: ignore[misc]


# ── Sources ───────────────────────────────────────────────────────────


class TestLoadConfig:
    """Merging of files, environment and overrides."""

    def test_no_sources_gives_defaults(self):
        assert load_config() == AnalysisConfig()

    def test_project_config_table(self, isolated_config):
        (isolated_config / "cxx-insight.toml").write_text(
            "[cxx-insight]\ncognitive_threshold = 18\nsecondary_locations = true\n"
        )
        config = load_config()
        assert config.cognitive_threshold == 18
        assert config.secondary_locations is True

    def test_top_level_keys(self, tmp_path):
        path = tmp_path / "custom.toml"
        path.write_text('size_threshold = 40\nheader_suffixes = [".h"]\n')
        config = load_config(path)
        assert config.size_threshold == 40
        assert config.header_suffixes == (".h",)

    def test_explicit_file_overrides_project(self, isolated_config, tmp_path):
        (isolated_config / "cxx-insight.toml").write_text("size_threshold = 30\n")
        explicit = tmp_path / "explicit.toml"
        explicit.write_text("size_threshold = 50\n")
        assert load_config(explicit).size_threshold == 50

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_config(tmp_path / "nope.toml")

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / "bad.toml"
        path.write_text("size_threshold = = 3\n")
        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_unknown_key(self, tmp_path):
        path = tmp_path / "unknown.toml"
        path.write_text("colour = 'blue'\n")
        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("CXX_INSIGHT_CYCLOMATIC_THRESHOLD", "7")
        monkeypatch.setenv("CXX_INSIGHT_SECONDARY_LOCATIONS", "yes")
        monkeypatch.setenv("CXX_INSIGHT_WORKERS", "2")
        config = load_config()
        assert config.cyclomatic_threshold == 7
        assert config.secondary_locations is True
        assert config.workers == 2

    def test_bad_environment_value(self, monkeypatch):
        monkeypatch.setenv("CXX_INSIGHT_SIZE_THRESHOLD", "big")
        with pytest.raises(InvalidConfigError) as exc_info:
            load_config()
        assert exc_info.value.key == "size_threshold"

    def test_overrides_win_and_none_is_ignored(self, monkeypatch):
        monkeypatch.setenv("CXX_INSIGHT_SIZE_THRESHOLD", "30")
        config = load_config(size_threshold=None, cognitive_threshold=25)
        assert config.size_threshold == 30
        assert config.cognitive_threshold == 25

    def test_verbosity_flags(self):
        assert load_config(verbose=True).verbosity == "verbose"
        assert load_config(quiet=True).verbosity == "quiet"
        assert load_config(verbose=False, quiet=False).verbosity == "normal"
