from __future__ import annotations

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from ..backends.base import BackendError
from ..backends.search import SearchUnavailableError
from ..config import AppConfig, dump_config, load_config
from ..core import ConfigError, MathService
from ..examples import DEFAULT_EXAMPLE, ExampleNotFoundError
from ..logging import init_logging

console = Console()

app = typer.Typer(help="LaTeX and MathML conversion gateway")


def _load_config(path: Path | None) -> AppConfig:
    config = load_config(path)
    init_logging(config.runtime)
    return config


def _read_markup(value: str) -> str:
    if value.lstrip().startswith("<"):
        return value
    path = Path(value)
    if path.is_file():
        return path.read_text(encoding="utf-8")
    return value


@app.command()
def convert(
    latex: str,
    raw_latex: str | None = typer.Option(None, "--raw-latex", help="Original TeX for the annotation"),
    request_config: str | None = typer.Option(None, "--request-config", help="JSON conversion config"),
    config: Path | None = typer.Option(None, "--config", help="Path to config.toml"),
) -> None:
    service = MathService(_load_config(config))
    try:
        result = service.convert_latexml(latex, config_json=request_config, raw_latex=raw_latex, origin="cli")
    except ConfigError as exc:
        console.print(f"[red]Invalid configuration[/red]: {exc.code} - {exc}")
        raise typer.Exit(2) from exc
    except BackendError as exc:
        console.print(f"[red]Conversion failed[/red]: {exc.code} - {exc}")
        raise typer.Exit(1) from exc
    console.print(f"Status: {result.status} ({result.status_code})")
    if result.markup:
        console.print(Syntax(result.markup, "xml", word_wrap=True))
    console.print(result.log, markup=False, highlight=False)


@app.command()
def mathoid(
    latex: str,
    url: str | None = typer.Option(None, "--url", help="Mathoid endpoint"),
    config: Path | None = typer.Option(None, "--config", help="Path to config.toml"),
) -> None:
    service = MathService(_load_config(config))
    console.print(service.convert_mathoid(latex, url, origin="cli"), markup=False, highlight=False)


@app.command()
def translate(
    cas: str,
    latex: str,
    config: Path | None = typer.Option(None, "--config", help="Path to config.toml"),
) -> None:
    service = MathService(_load_config(config))
    result = service.translate(cas, latex, origin="cli")
    if result.output is None:
        console.print(f"[red]No translation[/red]: {result.log}", highlight=False)
        raise typer.Exit(1)
    console.print(result.output, markup=False, highlight=False)
    if result.log:
        console.print(result.log, markup=False, highlight=False)


@app.command()
def compare(
    mathml1: str = typer.Argument(..., help="MathML string or file"),
    mathml2: str = typer.Argument(..., help="MathML string or file"),
    mode: str = typer.Option("identical", "--type", help="identical or similar"),
    config: Path | None = typer.Option(None, "--config", help="Path to config.toml"),
) -> None:
    service = MathService(_load_config(config))
    result = service.compare(_read_markup(mathml1), _read_markup(mathml2), mode, origin="cli")
    console.print(f"Status: {result.status.value}")
    if result.message:
        console.print(result.message, markup=False)
    table = Table(title="Matches")
    table.add_column("Reference")
    table.add_column("Comparison")
    table.add_column("Depth")
    table.add_column("Coverage")
    for match in result.matches:
        table.add_row(match.reference_id, match.comparison_id, str(match.depth), f"{match.coverage:.2f}")
    console.print(table)
    for name, value in result.original_factors.items():
        console.print(f"{name}: {value}")


@app.command()
def search(
    query: str,
    option: list[str] = typer.Option([], "--option", "-o", help="Search option as KEY=VALUE"),
    config: Path | None = typer.Option(None, "--config", help="Path to config.toml"),
) -> None:
    overrides: dict[str, object | None] = {}
    for item in option:
        key, sep, value = item.partition("=")
        if not sep:
            raise typer.BadParameter(f"Expected KEY=VALUE, got {item!r}", param_hint="--option")
        overrides[key.strip()] = value.strip()
    service = MathService(_load_config(config))
    try:
        result = service.search(query, overrides, origin="cli")
    except SearchUnavailableError as exc:
        console.print(f"[red]Search unavailable[/red]: {exc}")
        raise typer.Exit(1) from exc
    except ValueError as exc:
        console.print(f"[red]Invalid search[/red]: {exc}")
        raise typer.Exit(2) from exc
    console.print_json(json.dumps(result))


@app.command()
def example(
    name: str = typer.Argument(DEFAULT_EXAMPLE),
    config: Path | None = typer.Option(None, "--config", help="Path to config.toml"),
) -> None:
    service = MathService(_load_config(config))
    try:
        item = service.example(name)
    except ExampleNotFoundError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from exc
    console.print(f"[bold]{item.title}[/bold]")
    console.print(item.latex, markup=False, highlight=False)
    console.print(Syntax(item.mathml1, "xml", word_wrap=True))
    console.print(Syntax(item.mathml2, "xml", word_wrap=True))


@app.command("show-config")
def show_config(config: Path | None = typer.Option(None, "--config", help="Path to config.toml")) -> None:
    console.print_json(dump_config(load_config(config)))


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host"),
    port: int | None = typer.Option(None, "--port", min=1, max=65535),
    config: Path | None = typer.Option(None, "--config", help="Path to config.toml"),
) -> None:
    import uvicorn

    from api.app import create_app

    cfg = load_config(config)
    uvicorn.run(create_app(cfg), host=host or cfg.api.host, port=port or cfg.api.port)


if __name__ == "__main__":
    app()
