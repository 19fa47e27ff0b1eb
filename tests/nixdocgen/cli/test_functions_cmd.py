"""Tests for the functions command."""

import json

import pytest
from typer.testing import CliRunner

from nixdocgen.cli.commands.functions_cmd import parse_export_list
from nixdocgen.cli.main import app
from nixdocgen.core.docs import SectionGenerator


@pytest.fixture
def runner():
    """Fixture providing a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path, monkeypatch):
    """Run commands where no configuration file can be discovered."""
    monkeypatch.delenv("NIXDOCGEN_CONFIG_PATH", raising=False)
    monkeypatch.chdir(tmp_path)


class TestParseExportList:
    """Tests for export list parsing."""

    def test_absent(self) -> None:
        """Test that a missing option means no export list."""
        assert parse_export_list(None) is None

    def test_split_and_strip(self) -> None:
        """Test comma splitting with whitespace and empty names removed."""
        assert parse_export_list(" add, sub,,mul ") == ["add", "sub", "mul"]


class TestFunctions:
    """Test the functions command."""

    def test_markdown_document(self, runner, write_nix, math_source) -> None:
        """Test rendering a category document."""
        path = write_nix(math_source, "math.nix")
        result = runner.invoke(
            app, ["functions", "-f", str(path), "-c", "math", "-d", "Math functions"]
        )
        assert result.exit_code == 0
        assert "# Math functions {#sec-functions-library-math}" in result.output
        assert "## `lib.math.add` {#function-library-lib.math.add}" in result.output
        assert "## `lib.math.sub` {#function-library-lib.math.sub}" in result.output
        assert "lib.math.mul" not in result.output
        assert "### Example" in result.output

    def test_file_doc_in_header(self, runner, write_nix, strings_source) -> None:
        """Test that the file doc comment follows the header."""
        path = write_nix(strings_source, "strings.nix")
        result = runner.invoke(
            app, ["functions", "-f", str(path), "-c", "strings", "-d", "String functions"]
        )
        assert result.exit_code == 0
        assert (
            "# String functions {#sec-functions-library-strings}\n"
            "String manipulation functions.\n" in result.output
        )

    def test_json_output(self, runner, write_nix, math_source) -> None:
        """Test the JSON record list output mode."""
        path = write_nix(math_source, "math.nix")
        result = runner.invoke(app, ["functions", "-f", str(path), "-c", "math", "--json-output"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["version"] == 1
        assert [entry["name"] for entry in data["entries"]] == ["add", "sub"]
        entries = SectionGenerator.from_json(result.stdout)
        assert entries[0].identifier == "lib.math.add"

    def test_prefix_and_anchor_prefix(self, runner, write_nix, math_source) -> None:
        """Test custom identifier and anchor prefixes."""
        path = write_nix(math_source, "math.nix")
        result = runner.invoke(
            app,
            ["functions", "-f", str(path), "-p", "utils", "-c", "math", "--anchor-prefix", "fn-"],
        )
        assert result.exit_code == 0
        assert "## `utils.math.add` {#fn-utils.math.add}" in result.output

    def test_locations(self, runner, write_nix, tmp_path, math_source) -> None:
        """Test that a location index adds location lines."""
        path = write_nix(math_source, "math.nix")
        locs = tmp_path / "locs.json"
        locs.write_text(json.dumps({"lib.math.add": "[math.nix:12](math.nix#L12)"}))
        result = runner.invoke(
            app, ["functions", "-f", str(path), "-c", "math", "-l", str(locs)]
        )
        assert result.exit_code == 0
        assert "Located at [math.nix:12](math.nix#L12)." in result.output

    def test_export_list(self, runner, write_nix) -> None:
        """Test that an export list selects let bindings."""
        source = "let\n  /** f doc */\n  f = a: a;\n  /** g doc */\n  g = 1;\nin\n{ }\n"
        path = write_nix(source)
        result = runner.invoke(app, ["functions", "-f", str(path), "-e", "g,f", "-j"])
        assert result.exit_code == 0
        names = [entry["name"] for entry in json.loads(result.stdout)["entries"]]
        assert names == ["g", "f"]

    def test_config_defaults(self, runner, write_nix, tmp_path, math_source) -> None:
        """Test that configured render defaults apply when options are absent."""
        (tmp_path / "pyproject.toml").write_text(
            '[tool.nixdocgen.render]\nprefix = "pkgs"\ncategory = "math"\n'
        )
        path = write_nix(math_source, "math.nix")
        result = runner.invoke(app, ["functions", "-f", str(path)])
        assert result.exit_code == 0
        assert "## `pkgs.math.add`" in result.output

    def test_missing_file(self, runner, tmp_path) -> None:
        """Test that an unreadable source exits with an error."""
        result = runner.invoke(app, ["functions", "-f", str(tmp_path / "missing.nix")])
        assert result.exit_code == 1
        assert "cannot be read" in result.output

    def test_parse_error(self, runner, write_nix) -> None:
        """Test that a syntax error exits with an error."""
        path = write_nix("{ a = ; }")
        result = runner.invoke(app, ["functions", "-f", str(path)])
        assert result.exit_code == 1
        assert "failed to parse" in result.output

    def test_malformed_locations(self, runner, write_nix, tmp_path, math_source) -> None:
        """Test that a malformed location index aborts before rendering."""
        path = write_nix(math_source, "math.nix")
        locs = tmp_path / "locs.json"
        locs.write_text("[1, 2]")
        result = runner.invoke(app, ["functions", "-f", str(path), "-l", str(locs)])
        assert result.exit_code == 1
        assert "malformed location data" in result.output
        assert "lib.add" not in result.output

    def test_alias_cycle(self, runner, write_nix) -> None:
        """Test that cyclic let aliases exit with an error."""
        path = write_nix("let a = b; b = a; in a")
        result = runner.invoke(app, ["functions", "-f", str(path)])
        assert result.exit_code == 1
        assert "a -> b -> a" in result.output
        assert str(path) in result.output
