"""Tests for the cna-quality command line interface."""

import json

import pytest
from typer.testing import CliRunner

from cna_quality.cli import app
from cna_quality.tosca import convert_system, save_template

runner = CliRunner()


@pytest.fixture
def shop_template_file(shop_system, isolated_config):
    template, _ = convert_system(shop_system)
    path = isolated_config / "shop.json"
    save_template(template, path)
    return path


class TestCatalogCommands:
    """Tests for `measures` and `factors`."""

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "cna-quality 0.1.0" in result.stdout

    def test_measures(self):
        result = runner.invoke(app, ["measures"])
        assert result.exit_code == 0
        assert "43 measures" in result.stdout

    def test_measures_by_scope(self):
        result = runner.invoke(app, ["measures", "--scope", "request_trace"])
        assert result.exit_code == 0
        assert "3 measures" in result.stdout

    def test_factors(self):
        result = runner.invoke(app, ["factors"])
        assert result.exit_code == 0
        assert "Quality aspects" in result.stdout
        assert "15 product factors, 12 quality aspects, 36 impacts" in result.stdout


class TestEvaluateCommand:
    """Tests for `evaluate`."""

    def test_json_output(self, shop_template_file):
        result = runner.invoke(app, ["evaluate", str(shop_template_file), "--format", "json", "-q"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["system_id"] == "shop"
        assert data["product_factors"]["serviceReplication"]["level"] == "+"
        assert len(data["quality_aspects"]) == 12

    def test_rich_output(self, shop_template_file):
        result = runner.invoke(app, ["evaluate", str(shop_template_file), "-q"])
        assert result.exit_code == 0
        assert "Quality aspects" in result.stdout
        assert "System measures" in result.stdout

    def test_config_option(self, shop_template_file, isolated_config):
        config = isolated_config / "cna-quality-strict.toml"
        config.write_text("include_request_trace_measures = false\n")
        result = runner.invoke(
            app, ["evaluate", str(shop_template_file), "-f", "json", "-q", "-c", str(config)]
        )
        assert result.exit_code == 0
        assert json.loads(result.stdout)["measures"]["request_traces"] == {}

    def test_unknown_format(self, shop_template_file):
        result = runner.invoke(app, ["evaluate", str(shop_template_file), "--format", "bad"])
        assert result.exit_code == 2

    def test_malformed_template(self, isolated_config):
        path = isolated_config / "broken.json"
        path.write_text("{not json")
        result = runner.invoke(app, ["evaluate", str(path), "-q"])
        assert result.exit_code == 1
        assert "Malformed service template" in result.stdout

    def test_missing_file(self, isolated_config):
        result = runner.invoke(app, ["evaluate", str(isolated_config / "nope.json")])
        assert result.exit_code != 0
