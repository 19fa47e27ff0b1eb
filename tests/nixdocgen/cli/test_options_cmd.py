"""Tests for the options command."""

import json

import pytest
from typer.testing import CliRunner

from nixdocgen.cli.main import app

OPTIONS = [
    {
        "name": "services.foo.enable",
        "type": "boolean",
        "description": "Whether to enable foo.",
        "default": False,
        "declarations": ["nixos/modules/foo.nix"],
    },
    {
        "name": "services.foo.secret",
        "type": "string",
        "description": "Hidden.",
        "visible": False,
    },
]


@pytest.fixture
def runner():
    """Fixture providing a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path, monkeypatch):
    """Run commands where no configuration file can be discovered."""
    monkeypatch.delenv("NIXDOCGEN_CONFIG_PATH", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def options_file(tmp_path):
    """Options JSON in list form."""
    path = tmp_path / "options.json"
    path.write_text(json.dumps(OPTIONS))
    return path


class TestOptions:
    """Test the options command."""

    def test_stdout(self, runner, options_file) -> None:
        """Test rendering to stdout."""
        result = runner.invoke(app, ["options", "-f", str(options_file)])
        assert result.exit_code == 0
        assert result.output.startswith("# Module Options\n")
        assert "## `services.foo.enable` {#opt-services.foo.enable}" in result.output
        assert "services.foo.secret" not in result.output

    def test_output_file(self, runner, options_file, tmp_path) -> None:
        """Test writing the document to a file."""
        output = tmp_path / "options.md"
        result = runner.invoke(
            app, ["options", "-f", str(options_file), "-o", str(output), "-t", "Foo"]
        )
        assert result.exit_code == 0
        assert "Wrote 2 option(s)" in result.output
        assert output.read_text().startswith("# Foo\n")

    def test_declaration_links(self, runner, options_file) -> None:
        """Test linking declarations to a repository revision."""
        result = runner.invoke(
            app,
            [
                "options",
                "-f",
                str(options_file),
                "--declarations-base-url",
                "https://github.com/owner/repo",
                "--revision",
                "v1",
            ],
        )
        assert result.exit_code == 0
        assert (
            "(https://github.com/owner/repo/blob/v1/nixos/modules/foo.nix)" in result.output
        )

    def test_no_declarations(self, runner, options_file) -> None:
        """Test switching declaration lists off."""
        result = runner.invoke(
            app, ["options", "-f", str(options_file), "--no-include-declarations"]
        )
        assert result.exit_code == 0
        assert "Declared by" not in result.output

    def test_config_defaults(self, runner, options_file, tmp_path) -> None:
        """Test that configured option defaults apply."""
        (tmp_path / "pyproject.toml").write_text(
            '[tool.nixdocgen.options]\ntitle = "Configured"\nanchor_prefix = "o-"\n'
        )
        result = runner.invoke(app, ["options", "-f", str(options_file)])
        assert result.exit_code == 0
        assert result.output.startswith("# Configured\n")
        assert "{#o-services.foo.enable}" in result.output

    def test_invalid_json(self, runner, tmp_path) -> None:
        """Test that invalid JSON exits with an error."""
        path = tmp_path / "options.json"
        path.write_text("{")
        result = runner.invoke(app, ["options", "-f", str(path)])
        assert result.exit_code == 1
        assert "invalid JSON" in result.output
