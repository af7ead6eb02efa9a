import sys
from dataclasses import asdict, replace
from pathlib import Path
from typing import Any

import orjson
import typer
import yaml
from rich.console import Console
from rich.markup import escape

from cobmap.builder import build_model
from cobmap.config import MapperConfig, load_config, sample_config
from cobmap.copybook.parser import parse_copybook
from cobmap.copybook.records import Record
from cobmap.errors import MapperError, NoInputError
from cobmap.render import render

app = typer.Typer(help="Map COBOL copybooks to class models and diagrams.")
err_console = Console(stderr=True)


def _read_input(files: list[Path] | None) -> str:
    """Concatenate the given files, or read stdin when none could be read."""
    chunks: list[str] = []
    for path in files or []:
        if not path.is_file():
            err_console.print(f"[yellow]WARNING:[/] Unknown file: {escape(str(path))}")
            continue
        err_console.print(f"[bold green]Importing[/] {escape(str(path))}")
        chunks.append(path.read_text())

    if not chunks:
        err_console.print("[bold green]Reading[/] from stdin...")
        chunks.append(sys.stdin.read())

    text = "\n".join(chunks)
    if not text.strip():
        raise NoInputError("No input detected.")
    return text


def _fail(exc: Exception) -> typer.Exit:
    err_console.print(f"[bold red]ERROR:[/] {escape(str(exc))}")
    return typer.Exit(code=1)


def _resolve_config(config: Path | None, format: str | None) -> MapperConfig:
    try:
        cfg = load_config(config) if config else MapperConfig()
        if format:
            cfg = replace(cfg, format=format)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    return cfg


@app.command("map")
def map_command(
    files: list[Path] | None = typer.Argument(
        None, help="Copybook files to map (concatenated). Reads stdin when omitted."
    ),
    format: str | None = typer.Option(
        None, "--format", "-f", help="Output format: text | dot | json."
    ),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Optional path to write the rendered model."
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        exists=True,
        dir_okay=False,
        help="YAML or JSON file with output settings.",
    ),
) -> None:
    """Map copybook records to classes, properties and associations."""
    cfg = _resolve_config(config, format)
    try:
        text = _read_input(files)
        err_console.print("[bold green]Mapping[/]...")
        model = build_model(parse_copybook(text))
    except MapperError as exc:
        raise _fail(exc) from exc

    rendered = render(model, cfg)
    if output:
        output.write_text(rendered + ("" if rendered.endswith("\n") else "\n"))
        err_console.print(f"[bold green]Wrote {cfg.format} output[/] to {escape(str(output))}")
    else:
        typer.echo(rendered)


def _record_payload(record: Record) -> dict[str, Any]:
    payload = asdict(record)
    payload["kind"] = type(record).__name__
    payload["options"] = [
        {"kind": type(option).__name__, **asdict(option)} for option in record.options
    ]
    return payload


@app.command("records")
def records_command(
    files: list[Path] | None = typer.Argument(
        None, help="Copybook files to parse. Reads stdin when omitted."
    ),
) -> None:
    """Dump the parsed record stream as JSON."""
    try:
        records = parse_copybook(_read_input(files))
    except MapperError as exc:
        raise _fail(exc) from exc
    payload = [_record_payload(record) for record in records]
    typer.echo(orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode())


@app.command("init-config")
def init_config(
    output: Path = typer.Argument(Path("cobmap.yaml"), help="Where to write the sample config."),
) -> None:
    """Write a sample YAML config with the default dot settings."""
    if output.exists():
        raise typer.BadParameter(f"Refusing to overwrite existing file: {output}")
    output.write_text(yaml.safe_dump(sample_config(), sort_keys=False))
    err_console.print(f"[bold green]Wrote sample config[/] to {escape(str(output))}")


if __name__ == "__main__":
    app()
