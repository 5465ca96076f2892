"""Unit tests for CLI components."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from cm_route_gpx.cli.main import cli
from cm_route_gpx.core.resolver import RouteResolver


class TestCLI:
    """Test CLI commands."""

    @pytest.fixture(autouse=True)
    def setup_api(self, make_client, api_payloads):
        """Route every resolver built by the CLI to the fake API."""
        self.runner = CliRunner()
        self.api_payloads = api_payloads
        with patch(
            "cm_route_gpx.cli.main.RouteResolver",
            side_effect=lambda timeout: RouteResolver(client=make_client(api_payloads)),
        ) as mock_resolver_class:
            self.mock_resolver_class = mock_resolver_class
            yield

    def test_cli_version(self):
        """Test CLI version option."""
        result = self.runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_cli_help(self):
        """Test CLI help."""
        result = self.runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Carris Metropolitana Routes" in result.output

    def test_line_command_table_format(self):
        """Test line lookup with table format."""
        result = self.runner.invoke(cli, ["line", "3001"])

        assert result.exit_code == 0
        assert "Line Summary" in result.output
        assert "3001_0_1" in result.output
        assert "3001_0_2" in result.output

    def test_line_command_json_format(self):
        """Test line lookup with JSON format."""
        result = self.runner.invoke(cli, ["line", "3001", "--format", "json"])

        assert result.exit_code == 0
        output_data = json.loads(result.output)
        assert output_data["short_name"] == "3001"
        assert [p["id"] for p in output_data["patterns"]] == ["3001_0_1", "3001_0_2"]
        assert output_data["patterns"][0]["origin"] == "Cristo Rei"
        assert output_data["patterns"][0]["destination"] == "Cacilhas"

    def test_line_command_with_timeout(self):
        """Test line lookup passes the timeout to the resolver."""
        result = self.runner.invoke(cli, ["line", "3001", "--timeout", "60"])

        assert result.exit_code == 0
        self.mock_resolver_class.assert_called_once_with(timeout=60.0)

    def test_line_command_not_found(self):
        """Test unknown lines exit with an error."""
        result = self.runner.invoke(cli, ["line", "9999"], catch_exceptions=False)

        assert result.exit_code == 1
        assert "Not found" in result.output

    def test_line_command_empty_id(self):
        """Test empty line identifiers exit with an error."""
        result = self.runner.invoke(cli, ["line", "  "], catch_exceptions=False)

        assert result.exit_code == 1
        assert "cannot be empty" in result.output

    def test_line_command_pattern_error(self):
        """Test a failing pattern aborts the lookup."""
        del self.api_payloads["/patterns/3001_0_2"]

        result = self.runner.invoke(cli, ["line", "3001"], catch_exceptions=False)

        assert result.exit_code == 1
        assert "Pattern error" in result.output

    def test_export_command(self):
        """Test exporting a pattern writes the suggested file."""
        with self.runner.isolated_filesystem():
            result = self.runner.invoke(cli, ["export", "3001", "--pattern", "3001_0_1"])

            assert result.exit_code == 0
            target = Path("rota-3001-Cristo-Rei---Cacilhas.gpx")
            assert target.exists()
            content = target.read_text(encoding="utf-8")

        assert content.startswith('<?xml version="1.0" encoding="UTF-8"?>')
        assert "<name>Cristo Rei</name>" in content
        assert "<name>Cacilhas</name>" in content

    def test_export_command_output_directory(self):
        """Test exporting into an existing directory."""
        with self.runner.isolated_filesystem():
            Path("tracks").mkdir()
            result = self.runner.invoke(
                cli, ["export", "3001", "-p", "3001_0_2", "-o", "tracks"]
            )

            assert result.exit_code == 0
            assert Path("tracks/rota-3001-Cacilhas---Cristo-Rei.gpx").exists()

    def test_export_command_output_file(self):
        """Test exporting to an explicit file name."""
        with self.runner.isolated_filesystem():
            result = self.runner.invoke(
                cli, ["export", "3001", "-p", "3001_0_2", "-o", "route.gpx"]
            )

            assert result.exit_code == 0
            assert "<gpx" in Path("route.gpx").read_text(encoding="utf-8")

    def test_export_command_requires_pattern(self):
        """Test a line with several patterns needs --pattern."""
        with self.runner.isolated_filesystem():
            result = self.runner.invoke(cli, ["export", "3001"], catch_exceptions=False)

            assert result.exit_code == 1
            assert "3001_0_1" in result.output
            assert "3001_0_2" in result.output
            assert list(Path(".").glob("*.gpx")) == []

    def test_export_command_single_pattern(self):
        """Test a line with one pattern is exported without --pattern."""
        self.api_payloads["/lines/3001"] = dict(
            self.api_payloads["/lines/3001"], patterns=["3001_0_1"]
        )
        with self.runner.isolated_filesystem():
            result = self.runner.invoke(cli, ["export", "3001"])

            assert result.exit_code == 0
            assert Path("rota-3001-Cristo-Rei---Cacilhas.gpx").exists()

    def test_export_command_invalid_shape(self):
        """Test shapes without line geometry exit with an error."""
        self.api_payloads["/shapes/p2_3001_0_1"] = {
            "shape_id": "p2_3001_0_1",
            "geojson": {"type": "Feature", "geometry": None},
        }
        with self.runner.isolated_filesystem():
            result = self.runner.invoke(
                cli, ["export", "3001", "-p", "3001_0_1"], catch_exceptions=False
            )

            assert result.exit_code == 1
            assert "Invalid shape" in result.output

    def test_export_command_unwritable_output(self):
        """Test a file that cannot be written exits with an error."""
        with self.runner.isolated_filesystem():
            result = self.runner.invoke(
                cli,
                ["export", "3001", "-p", "3001_0_1", "-o", "missing/route.gpx"],
                catch_exceptions=False,
            )

            assert result.exit_code == 1
            assert "Cannot write" in result.output
            assert not Path("missing").exists()

    def test_config_show_command(self):
        """Test config show command."""
        result = self.runner.invoke(cli, ["config", "show"])

        assert result.exit_code == 0
        assert "Current Configuration" in result.output
        assert "https://api.carrismetropolitana.pt" in result.output
        assert "Request timeout: 30.0 seconds" in result.output
