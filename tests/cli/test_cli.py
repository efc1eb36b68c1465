"""Tests for the cxx-insight command line."""

import json

import pytest
from typer.testing import CliRunner

from cxx_insight import __version__
from cxx_insight.cli import app

runner = CliRunner()

COMPLEX_SOURCE = """\
int parse(int a, int b) {
  if (a) {
    for (int i = 0; i < b; ++i) {
      if (i && b || a) {
        return i;
      }
    }
  }
  return 0;
}
"""


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep user and project config files out of the run."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def source(write_cpp):
    return write_cpp("src/parser.cc", COMPLEX_SOURCE)


class TestAnalyzeCommand:
    """cxx-insight analyze."""

    def test_json_output(self, source):
        result = runner.invoke(app, ["analyze", str(source), "--format", "json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["module"]["functions"] == 1
        assert data["files"][str(source)]["complexity"] == 6
        assert data["issues"] == {}

    def test_threshold_flags(self, source):
        result = runner.invoke(
            app, ["analyze", str(source), "-f", "json", "--cognitive-threshold", "5", "--cyclomatic-threshold", "5"]
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["module"]["complex_functions"] == 1
        (issue,) = data["issues"][str(source)]
        assert issue["locations"][0]["line"] == "1"
        assert len(issue["locations"]) == 1

    def test_secondary_locations_flag(self, source):
        result = runner.invoke(
            app,
            ["analyze", str(source), "-f", "json", "--cognitive-threshold", "5", "--secondary-locations"],
        )

        (issue,) = json.loads(result.stdout)["issues"][str(source)]
        assert len(issue["locations"]) > 1

    def test_directory_argument(self, source, tmp_path):
        result = runner.invoke(app, ["analyze", str(tmp_path / "src"), "-f", "json", "-w", "1"])

        assert result.exit_code == 0, result.output
        assert list(json.loads(result.stdout)["files"]) == [str(source)]

    def test_fail_on_issues(self, source):
        result = runner.invoke(
            app, ["analyze", str(source), "-f", "json", "--cognitive-threshold", "5", "--fail-on-issues"]
        )
        assert result.exit_code == 1

    def test_fail_on_issues_without_issues(self, source):
        result = runner.invoke(app, ["analyze", str(source), "-f", "json", "--fail-on-issues"])
        assert result.exit_code == 0

    def test_config_file(self, source, tmp_path):
        config = tmp_path / "strict.toml"
        config.write_text("[cxx-insight]\ncognitive_threshold = 3\n")

        result = runner.invoke(app, ["analyze", str(source), "-f", "json", "--config", str(config)])
        assert json.loads(result.stdout)["module"]["issues"] == 1

    def test_invalid_config_file(self, source, tmp_path):
        config = tmp_path / "bad.toml"
        config.write_text("colour = 'blue'\n")

        result = runner.invoke(app, ["analyze", str(source), "--config", str(config)])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_no_cpp_files(self, tmp_path):
        empty = tmp_path / "docs"
        empty.mkdir()
        (empty / "README.md").write_text("# docs\n")

        result = runner.invoke(app, ["analyze", str(empty)])
        assert result.exit_code == 0
        assert "No C++ files found." in result.output

    def test_rich_output(self, source):
        result = runner.invoke(app, ["analyze", str(source)])
        assert result.exit_code == 0, result.output

    def test_verbose_and_quiet_conflict(self, source):
        result = runner.invoke(app, ["analyze", str(source), "--verbose", "--quiet"])
        assert result.exit_code == 1
        assert "mutually exclusive" in result.output

    def test_unknown_format(self, source):
        result = runner.invoke(app, ["analyze", str(source), "--format", "xml"])
        assert result.exit_code == 1
        assert "--format must be one of" in result.output

    def test_missing_path(self, tmp_path):
        result = runner.invoke(app, ["analyze", str(tmp_path / "missing.cc")])
        assert result.exit_code == 2


class TestVersionCommand:
    def test_version(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert f"CXX Insight version {__version__}" in result.output
