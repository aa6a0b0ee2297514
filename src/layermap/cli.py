"""Typer-based CLI for inspecting project layer configurations."""

from __future__ import annotations

import functools
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich import print
from rich.tree import Tree

from .errors import ConfigurationError, LayerMapError, ProjectError
from .layers.nodes import GroupNode, Node
from .map import BaseLayersMap
from .settings import load_project
from .utils.console_logger import ensure_console_logger

app = typer.Typer(help="Inspect the base layers and overlay tree of a map project")


def _handle_errors(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (ProjectError, ConfigurationError) as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(1) from exc
        except LayerMapError as exc:
            typer.echo(f"Unexpected error: {exc}", err=True)
            raise typer.Exit(1) from exc

    return wrapper


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log construction details")) -> None:
    """Configure logging for every command."""

    if verbose:
        ensure_console_logger(logging.getLogger("layermap"), "layermap-cli", level=logging.DEBUG)


def _label(node: Node) -> str:
    marker = "[green]●[/green]" if node.visible else "[dim]○[/dim]"
    if isinstance(node, GroupNode):
        flags = []
        if node.mutually_exclusive:
            flags.append("exclusive")
        if node.group_as_layer:
            flags.append("group as layer")
        suffix = f" [cyan]({', '.join(flags)})[/cyan]" if flags else ""
        return f"{marker} [bold]{node.name}[/bold]{suffix}"
    return f"{marker} {node.name} [dim]{node.source.source_type.value}[/dim]"


def _add_children(branch: Tree, group: GroupNode) -> None:
    # Top of the paint stack first, like a layer switcher.
    for child in reversed(group.children):
        sub_branch = branch.add(_label(child))
        if isinstance(child, GroupNode):
            _add_children(sub_branch, child)


@app.command()
@_handle_errors
def tree(
    project: Path = typer.Argument(..., exists=True, dir_okay=False, help="Project JSON file"),
    show: Optional[List[str]] = typer.Option(None, "--show", help="Node to make visible"),
    hide: Optional[List[str]] = typer.Option(None, "--hide", help="Node to hide"),
) -> None:
    """Print the overlay tree, optionally after toggling nodes."""

    layer_map = BaseLayersMap(load_project(project))
    requests = {name: True for name in show or []}
    requests.update({name: False for name in hide or []})
    for name in requests:
        if name not in layer_map.overlay_tree:
            typer.echo(f"Unknown layer or group: {name}", err=True)
    layer_map.overlay_tree.apply_visibility(requests)

    root = Tree(f"[bold]{project.name}[/bold]")
    _add_children(root, layer_map.overlay_layers_group)
    print(root)


@app.command()
@_handle_errors
def baselayers(
    project: Path = typer.Argument(..., exists=True, dir_okay=False, help="Project JSON file"),
    select: Optional[str] = typer.Option(None, "--select", help="Base layer to switch to"),
) -> None:
    """List the base layers and the active one."""

    layer_map = BaseLayersMap(load_project(project))
    if select is not None:
        layer_map.change_base_layer(select)

    for layer in layer_map.base_layers_group:
        marker = "[green]●[/green]" if layer.visible else "[dim]○[/dim]"
        print(f"{marker} {layer.name} [dim]{layer.source.source_type.value} {layer.crs or ''}[/dim]")
    if layer_map.has_empty_base_layer:
        print("[dim](empty base layer available)[/dim]")

    extent = layer_map.view.navigation_extent
    print(f"Navigation extent: {', '.join(f'{value:.2f}' for value in extent)}")


if __name__ == "__main__":
    app()
