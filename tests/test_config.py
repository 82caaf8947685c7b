import json
from pathlib import Path

import pytest

from math_pipeline.config import AppConfig, ConversionConfig, build_conversion, dump_config, load_config
from math_pipeline.core import ConfigError, parse_conversion_config


def test_missing_file_gives_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path / "missing.toml")
    assert config.latexml == ConversionConfig()
    assert config.latexml.remote is True
    assert config.search.url is None


def test_load_config_reads_sections(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text(
        "\n".join(
            [
                "[latexml]",
                "remote = false",
                'command = "/opt/latexml/bin/latexmlc"',
                "semantic_mode = true",
                f'content_path = "{tmp_path.as_posix()}"',
                "[translation]",
                'systems = ["Maple"]',
                'command = ["translator", "{cas}"]',
                "[runtime]",
                'log_level = "debug"',
                "[api]",
                "port = 9000",
            ]
        ),
        encoding="utf-8",
    )
    config = load_config(path)
    assert config.latexml.remote is False
    assert config.latexml.semantic_mode is True
    assert config.latexml.content_path == tmp_path
    assert config.translation.systems == ("Maple",)
    assert config.translation.command == ("translator", "{cas}")
    assert config.runtime.log_level == "DEBUG"
    assert config.api.port == 9000


def test_build_conversion_accepts_request_spelling(tmp_path: Path) -> None:
    base = ConversionConfig(url="http://latexml.local")
    config = build_conversion({"semanticMode": True, "contentPath": str(tmp_path)}, base)
    assert config.semantic_mode is True
    assert config.content_path == tmp_path
    assert config.url == "http://latexml.local"


def test_dump_config_is_json() -> None:
    payload = json.loads(dump_config(AppConfig()))
    assert payload["latexml"]["remote"] is True
    assert payload["latexml"]["content_path"] is None
    assert payload["api"]["port"] == 8080


def test_request_config_falls_back_to_default() -> None:
    default = ConversionConfig(url="http://latexml.local", timeout_s=12)
    assert parse_conversion_config(None, default) is default
    assert parse_conversion_config("  ", default) is default
    config = parse_conversion_config('{"remote": false}', default)
    assert config.remote is False
    assert config.url == "http://latexml.local"
    assert config.timeout_s == 12


@pytest.mark.parametrize(
    "raw",
    [
        "{not json",
        "[1, 2]",
        '{"semanticMode": true}',
        '{"timeout": 0}',
    ],
)
def test_invalid_request_config(raw: str) -> None:
    with pytest.raises(ConfigError) as info:
        parse_conversion_config(raw, ConversionConfig())
    assert info.value.code == "INVALID_CONFIG"


@pytest.mark.parametrize(("raw", "expected"), [('"false"', False), ('"0"', False), ('"true"', True), ("false", False)])
def test_request_config_parses_remote_flag_strictly(raw: str, expected: bool) -> None:
    config = parse_conversion_config(f'{{"remote": {raw}}}', ConversionConfig())
    assert config.remote is expected


def test_request_config_string_false_keeps_semantic_mode_off() -> None:
    config = parse_conversion_config('{"semanticMode": "false"}', ConversionConfig())
    assert config.semantic_mode is False


def test_request_config_rejects_non_boolean_flag() -> None:
    with pytest.raises(ConfigError):
        parse_conversion_config('{"remote": "sometimes"}', ConversionConfig())
