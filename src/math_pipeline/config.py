from __future__ import annotations

import json
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Mapping


CONFIG_FILE = Path("config.toml")

DEFAULT_LATEXML_URL = "https://drmf-latexml.wmflabs.org"
DEFAULT_MATHOID_URL = "http://localhost:10044"


@dataclass(frozen=True, slots=True)
class ConversionConfig:
    """LaTeXML invocation settings, either process-wide or per request."""

    semantic_mode: bool = False
    content_path: Path | None = None
    remote: bool = True
    url: str = DEFAULT_LATEXML_URL
    command: str = "latexmlc"
    timeout_s: float = 30.0

    def __post_init__(self) -> None:
        if self.semantic_mode and self.content_path is None:
            raise ValueError("Semantic mode requires a content path")
        if self.timeout_s <= 0:
            raise ValueError("timeout_s must be positive")


@dataclass(slots=True)
class MathoidConfig:
    url: str = DEFAULT_MATHOID_URL
    timeout_s: float = 10.0


@dataclass(slots=True)
class TranslationConfig:
    systems: tuple[str, ...] = ()
    command: tuple[str, ...] = ()
    url: str | None = None
    timeout_s: float = 30.0


@dataclass(slots=True)
class SearchBackendConfig:
    url: str | None = None
    timeout_s: float = 30.0


@dataclass(slots=True)
class RuntimeConfig:
    log_level: str = "INFO"
    log_file: Path | None = None


@dataclass(slots=True)
class APIConfig:
    host: str = "127.0.0.1"
    port: int = 8080


@dataclass(slots=True)
class AppConfig:
    latexml: ConversionConfig = field(default_factory=ConversionConfig)
    mathoid: MathoidConfig = field(default_factory=MathoidConfig)
    translation: TranslationConfig = field(default_factory=TranslationConfig)
    search: SearchBackendConfig = field(default_factory=SearchBackendConfig)
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)
    api: APIConfig = field(default_factory=APIConfig)


def _read_toml(path: Path) -> Mapping[str, object]:
    if not path.exists():
        return {}
    with path.open("rb") as handle:
        return tomllib.load(handle)


def parse_bool(value: object) -> bool:
    if isinstance(value, bool):
        return value
    normalized = str(value).strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"Not a boolean: {value!r}")


def _optional_path(value: object | None) -> Path | None:
    if value is None or value == "":
        return None
    return Path(str(value))


def _optional_str(value: object | None) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def _tuple_of_strings(value: object | None) -> tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, Iterable):
        return tuple(str(item) for item in value)
    raise TypeError(f"Expected a string list, got {value!r}")


def build_conversion(
    data: Mapping[str, object] | None, defaults: ConversionConfig | None = None
) -> ConversionConfig:
    """Build a conversion config, falling back to *defaults* per key.

    Accepts both the TOML spelling (``semantic_mode``) and the JSON spelling
    used by web clients (``semanticMode`` / ``content`` / ``contentPath``).
    """

    base = defaults or ConversionConfig()
    if not data:
        return base

    def pick(*keys: str, default: object) -> object:
        for key in keys:
            if key in data and data[key] is not None:
                return data[key]
        return default

    return ConversionConfig(
        semantic_mode=parse_bool(pick("semantic_mode", "semanticMode", "content", default=base.semantic_mode)),
        content_path=_optional_path(pick("content_path", "contentPath", default=base.content_path)),
        remote=parse_bool(pick("remote", default=base.remote)),
        url=str(pick("url", default=base.url)),
        command=str(pick("command", default=base.command)),
        timeout_s=float(pick("timeout_s", "timeout", default=base.timeout_s)),
    )


def _build_mathoid(data: Mapping[str, object] | None) -> MathoidConfig:
    if not data:
        return MathoidConfig()
    return MathoidConfig(
        url=str(data.get("url", DEFAULT_MATHOID_URL)),
        timeout_s=float(data.get("timeout_s", 10.0)),
    )


def _build_translation(data: Mapping[str, object] | None) -> TranslationConfig:
    if not data:
        return TranslationConfig()
    return TranslationConfig(
        systems=_tuple_of_strings(data.get("systems")),
        command=_tuple_of_strings(data.get("command")),
        url=_optional_str(data.get("url")),
        timeout_s=float(data.get("timeout_s", 30.0)),
    )


def _build_search(data: Mapping[str, object] | None) -> SearchBackendConfig:
    if not data:
        return SearchBackendConfig()
    return SearchBackendConfig(
        url=_optional_str(data.get("url")),
        timeout_s=float(data.get("timeout_s", 30.0)),
    )


def _build_runtime(data: Mapping[str, object] | None) -> RuntimeConfig:
    if not data:
        return RuntimeConfig()
    return RuntimeConfig(
        log_level=str(data.get("log_level", "INFO")).upper(),
        log_file=_optional_path(data.get("log_file")),
    )


def _build_api(data: Mapping[str, object] | None) -> APIConfig:
    if not data:
        return APIConfig()
    return APIConfig(host=str(data.get("host", "127.0.0.1")), port=int(data.get("port", 8080)))


def _section(raw: Mapping[str, object], name: str) -> Mapping[str, object] | None:
    value = raw.get(name)
    return value if isinstance(value, Mapping) else None


def load_config(path: Path | None = None) -> AppConfig:
    path = path or CONFIG_FILE
    raw = _read_toml(path)
    return AppConfig(
        latexml=build_conversion(_section(raw, "latexml")),
        mathoid=_build_mathoid(_section(raw, "mathoid")),
        translation=_build_translation(_section(raw, "translation")),
        search=_build_search(_section(raw, "search")),
        runtime=_build_runtime(_section(raw, "runtime")),
        api=_build_api(_section(raw, "api")),
    )


def dump_config(config: AppConfig) -> str:
    latexml = config.latexml
    payload = {
        "latexml": {
            "semantic_mode": latexml.semantic_mode,
            "content_path": str(latexml.content_path) if latexml.content_path else None,
            "remote": latexml.remote,
            "url": latexml.url,
            "command": latexml.command,
            "timeout_s": latexml.timeout_s,
        },
        "mathoid": {
            "url": config.mathoid.url,
            "timeout_s": config.mathoid.timeout_s,
        },
        "translation": {
            "systems": list(config.translation.systems),
            "command": list(config.translation.command),
            "url": config.translation.url,
            "timeout_s": config.translation.timeout_s,
        },
        "search": {
            "url": config.search.url,
            "timeout_s": config.search.timeout_s,
        },
        "runtime": {
            "log_level": config.runtime.log_level,
            "log_file": str(config.runtime.log_file) if config.runtime.log_file else None,
        },
        "api": {
            "host": config.api.host,
            "port": config.api.port,
        },
    }
    return json.dumps(payload, indent=2)
