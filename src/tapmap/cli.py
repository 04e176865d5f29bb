"""Typer-based CLI entry point."""

from __future__ import annotations

import json
import logging
import sys
from functools import wraps
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .configuration import MapConfiguration
from .errors import ConfigurationError, GeoJSONLoadError, TapMapError
from .geojson import load_feature_collection

app = typer.Typer(help="Inspect and display tappable GeoJSON polygon overlays")
console = Console()


def _handle_errors(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (GeoJSONLoadError, ConfigurationError) as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(1) from exc
        except TapMapError as exc:
            typer.echo(f"Unexpected error: {exc}", err=True)
            raise typer.Exit(1) from exc

    return wrapper


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")) -> None:
    """Configure logging for every sub-command."""

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


@app.command()
@_handle_errors
def inspect(path: Path = typer.Argument(..., help="GeoJSON FeatureCollection file")) -> None:
    """List the features that would be installed as polygon groups."""

    features = load_feature_collection(path)
    table = Table(title=str(path))
    table.add_column("id", justify="right")
    table.add_column("name")
    table.add_column("shapes", justify="right")
    table.add_column("holes", justify="right")
    for feature in features:
        holes = sum(len(shape.interiors) for shape in feature.shapes)
        table.add_row(str(feature.id), feature.name, str(len(feature.shapes)), str(holes))
    console.print(table)
    console.print(f"{len(features)} usable features")


@app.command()
@_handle_errors
def view(
    path: Path = typer.Argument(..., help="GeoJSON FeatureCollection file"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="JSON map configuration"),
) -> None:
    """Open a window showing the features; taps are echoed to the terminal."""

    configuration = _load_configuration(config_path)

    from PySide6.QtWidgets import QApplication

    from .main import MainWindow

    qt_app = QApplication.instance() or QApplication(sys.argv)

    def report(group, position) -> None:
        console.print(f"[bold]{group.title or group.id}[/bold] at ({position.x():.0f}, {position.y():.0f})")

    window = MainWindow(path, configuration=configuration, on_tap=report)
    window.show()
    raise typer.Exit(qt_app.exec())


def _load_configuration(config_path: Optional[Path]) -> MapConfiguration:
    if config_path is None:
        return MapConfiguration()
    try:
        data = json.loads(config_path.read_text(encoding="utf8"))
    except OSError as exc:
        raise ConfigurationError(f"Unable to read configuration file '{config_path}'") from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Configuration file '{config_path}' is not valid JSON") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file '{config_path}' must contain a JSON object")
    return MapConfiguration.from_mapping(data)


if __name__ == "__main__":
    app()
