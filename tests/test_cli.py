import json
from pathlib import Path

from typer.testing import CliRunner

from math_pipeline.cli import app

runner = CliRunner()


def test_show_config(tmp_path: Path) -> None:
    config = tmp_path / "config.toml"
    config.write_text('[latexml]\nremote = false\n[api]\nport = 9100\n', encoding="utf-8")
    result = runner.invoke(app, ["show-config", "--config", str(config)])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["latexml"]["remote"] is False
    assert payload["api"]["port"] == 9100


def test_example_command(tmp_path: Path) -> None:
    result = runner.invoke(app, ["example", "--config", str(tmp_path / "none.toml")])
    assert result.exit_code == 0
    assert "Euler's identity" in result.stdout


def test_unknown_example(tmp_path: Path) -> None:
    result = runner.invoke(app, ["example", "nope", "--config", str(tmp_path / "none.toml")])
    assert result.exit_code == 1


def test_search_option_requires_key_value(tmp_path: Path) -> None:
    result = runner.invoke(app, ["search", "x", "--option", "minDF", "--config", str(tmp_path / "none.toml")])
    assert result.exit_code != 0
