"""
taskcanvas command line interface.

Usage:
    taskcanvas layout FILE [--json] [--circular] [--min-distance N] [--padding N]
    taskcanvas center VW VH TW TH [--scale S] [--json]
    taskcanvas viewport show [--user ID] [--project ID] [--json]
    taskcanvas viewport clear [--user ID] [--project ID]
"""

import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import click
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .config import CanvasSettings, load_settings, setup_logging
from .errors import CanvasError
from .models.geometry import Dimensions
from .models.layout import CircularLayoutConfig, LayoutElement, LayoutOptions, PositionedElement
from .models.viewport import format_transform
from .persistence.viewport_store import JsonFileViewportStore
from .services.centering import calculate_center
from .services.circular_layout import CircularLayoutEngine
from .services.geometry import compute_bounds
from .services.layout_engine import LayoutEngine


def _read_elements(path: Path) -> List[LayoutElement]:
    """Elements from a JSON list, or an object with an "elements" list."""
    with open(path) as f:
        data = json.load(f)

    if isinstance(data, dict):
        data = data.get("elements", [])
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a list of elements")

    return [LayoutElement.model_validate(item) for item in data]


def _layout_options(settings: CanvasSettings, min_distance: Optional[float], padding: Optional[float]) -> Dict[str, Any]:
    options = settings.layout.model_dump()
    if min_distance is not None:
        options["constraints"]["min_distance"] = min_distance
    if padding is not None:
        options["padding"] = padding
    return options


def display_layout(positioned: List[PositionedElement], console: Console) -> None:
    table = Table(title=f"Layout ({len(positioned)} elements)")
    table.add_column("ID", style="cyan")
    table.add_column("Parent", style="dim")
    table.add_column("X", justify="right")
    table.add_column("Y", justify="right")
    table.add_column("Size", justify="right")

    for element in positioned:
        table.add_row(
            element.id,
            element.parent_id or "-",
            f"{element.position.x:g}",
            f"{element.position.y:g}",
            f"{element.dimensions.width:g}x{element.dimensions.height:g}",
        )

    console.print(table)

    bounds = compute_bounds(element.rect for element in positioned)
    if bounds is not None:
        console.print(
            f"[dim]Extent: {bounds.width:g}x{bounds.height:g} at ({bounds.x:g}, {bounds.y:g})[/dim]"
        )


@click.group()
@click.version_option(__version__, prog_name="taskcanvas")
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr")
@click.option(
    "--settings",
    "settings_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Settings JSON file (default: ~/.config/taskcanvas/settings.json)",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, settings_path: Optional[Path]):
    """Lay out task hierarchies and inspect persisted canvas viewports."""
    setup_logging("DEBUG" if verbose else "WARNING")
    ctx.obj = load_settings(settings_path)


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "output_json", is_flag=True, help="Output JSON instead of a table")
@click.option("--circular", is_flag=True, help="Radial distribution instead of the tree layout")
@click.option("--min-distance", type=float, default=None, help="Minimum gap between elements")
@click.option("--padding", type=float, default=None, help="Padding added to sibling gaps")
@click.pass_obj
def layout(
    settings: CanvasSettings,
    file: Path,
    output_json: bool,
    circular: bool,
    min_distance: Optional[float],
    padding: Optional[float],
):
    """
    Compute positions for the elements in FILE.

    FILE is a JSON list of {"id", "dimensions": {"width", "height"},
    "parentId"} objects (snake_case keys are accepted too).

    Exit codes:
      0 - Layout computed
      1 - Invalid input or layout error (cycle, bad options)
    """
    console = Console()

    try:
        elements = _read_elements(file)
        options = _layout_options(settings, min_distance, padding)
        if circular:
            positioned = CircularLayoutEngine().distribute(elements, CircularLayoutConfig.model_validate(options))
        else:
            positioned = LayoutEngine(verify=True).layout(elements, LayoutOptions.model_validate(options))
    except CanvasError as e:
        console.print(f"[red]Layout error: {escape(str(e))}[/red]")
        sys.exit(1)
    except (ValueError, ValidationError) as e:
        console.print(f"[red]Invalid input: {escape(str(e))}[/red]")
        sys.exit(1)

    if output_json:
        click.echo(json.dumps([element.model_dump(mode="json", by_alias=True) for element in positioned], indent=2))
    else:
        display_layout(positioned, console)


@cli.command()
@click.argument("viewport_width", type=float)
@click.argument("viewport_height", type=float)
@click.argument("target_width", type=float)
@click.argument("target_height", type=float)
@click.option("--scale", type=float, default=None, help="Zoom scale (default: settings default zoom)")
@click.option("--json", "output_json", is_flag=True, help="Output JSON instead of a table")
@click.pass_obj
def center(
    settings: CanvasSettings,
    viewport_width: float,
    viewport_height: float,
    target_width: float,
    target_height: float,
    scale: Optional[float],
    output_json: bool,
):
    """Compute the transform that centers a target in the viewport."""
    transform = calculate_center(
        Dimensions(width=viewport_width, height=viewport_height),
        Dimensions(width=target_width, height=target_height),
        scale if scale is not None else settings.default_zoom_scale,
    )

    if output_json:
        click.echo(json.dumps(transform.model_dump(mode="json")))
        return

    console = Console()
    table = Table(title="Centering Transform", show_header=False)
    table.add_column("Property", style="dim")
    table.add_column("Value")
    table.add_row("Scale", f"{transform.scale:g}")
    table.add_row("Translate X", f"{transform.x:g}")
    table.add_row("Translate Y", f"{transform.y:g}")
    table.add_row("Transform", format_transform(transform.to_persisted()))
    console.print(table)


@cli.group()
def viewport():
    """Inspect or clear the persisted viewport."""
    pass


def _store(settings: CanvasSettings, user_id: Optional[str], project_id: Optional[str]) -> JsonFileViewportStore:
    return JsonFileViewportStore(
        user_id=user_id,
        project_id=project_id,
        storage_dir=settings.storage_dir,
        expiry_days=settings.expiry_days,
    )


@viewport.command("show")
@click.option("--user", "user_id", default=None, help="User id scope")
@click.option("--project", "project_id", default=None, help="Project id scope")
@click.option("--json", "output_json", is_flag=True, help="Output JSON instead of a table")
@click.pass_obj
def viewport_show(settings: CanvasSettings, user_id: Optional[str], project_id: Optional[str], output_json: bool):
    """Show the saved viewport for a user/project scope."""
    store = _store(settings, user_id, project_id)
    snapshot = asyncio.run(store.load())

    if output_json:
        click.echo(json.dumps(snapshot.model_dump(mode="json") if snapshot else None))
        return

    console = Console()
    if snapshot is None:
        console.print(f"[yellow]No saved viewport for '{store.key}'[/yellow]")
        return

    table = Table(title=f"Viewport: {store.key}", show_header=False)
    table.add_column("Property", style="dim")
    table.add_column("Value")
    table.add_row("Translate X", f"{snapshot.translate.x:g}")
    table.add_row("Translate Y", f"{snapshot.translate.y:g}")
    table.add_row("Scale", f"{snapshot.scale:g}")
    table.add_row("Transform", format_transform(snapshot))
    console.print(table)
    console.print(f"[dim]File: {escape(str(store.path))}[/dim]")


@viewport.command("clear")
@click.option("--user", "user_id", default=None, help="User id scope")
@click.option("--project", "project_id", default=None, help="Project id scope")
@click.pass_obj
def viewport_clear(settings: CanvasSettings, user_id: Optional[str], project_id: Optional[str]):
    """Delete the saved viewport for a user/project scope."""
    store = _store(settings, user_id, project_id)
    console = Console()

    if not asyncio.run(store.has_saved()):
        console.print(f"[yellow]No saved viewport for '{store.key}'[/yellow]")
        return

    asyncio.run(store.clear())
    console.print(f"[green]Cleared saved viewport '{store.key}'[/green]")


def main() -> None:
    cli()
