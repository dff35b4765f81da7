"""CLI interface for isomenu.

Command-line tool for serving and inspecting the navigation menu.
"""

import logging
import sys
from pathlib import Path
from typing import NoReturn

import click

from isomenu.config import Config
from isomenu.core.controller import NavigationController, RenderNode
from isomenu.core.index import MenuIndex
from isomenu.core.menu import MenuConfigError, MenuNode, load_menu
from isomenu.core.types import Role

config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover isomenu.toml)",
)

menu_option = click.option(
    "--menu",
    "menu_file",
    type=click.Path(exists=True, path_type=Path, dir_okay=False),
    default=None,
    help="Menu TOML file (overrides config)",
)


@click.group()
def cli() -> None:
    """isomenu - role-aware navigation for DocManager ISO."""


@click.group()
def menu() -> None:
    """Menu inspection commands."""


cli.add_command(menu)


@cli.command()
@config_option
@menu_option
@click.option(
    "--icons",
    "icons_file",
    type=click.Path(exists=True, path_type=Path, dir_okay=False),
    default=None,
    help="Icon set JSON file (overrides config)",
)
@click.option(
    "--host",
    default=None,
    help="Host to bind to (overrides config)",
)
@click.option(
    "--port",
    "-p",
    type=int,
    default=None,
    help="Port to bind to (overrides config)",
)
@click.option(
    "--rail/--no-rail",
    default=None,
    help="Start new sessions in rail mode (overrides config, default: disabled)",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output (debug logging)",
)
def serve(
    config_path: Path | None,
    menu_file: Path | None,
    icons_file: Path | None,
    host: str | None,
    port: int | None,
    rail: bool | None,
    verbose: bool,
) -> None:
    """Start the navigation server."""
    from isomenu.server import run_server

    _setup_logging(verbose)
    config = _load_config(config_path).with_overrides(
        host=host,
        port=port,
        menu_file=menu_file,
        icons_file=icons_file,
        rail_mode=rail,
    )

    click.echo(f"Starting server on {config.server.host}:{config.server.port}")
    click.echo(f"Menu: {config.menu.file}")
    click.echo(f"Icons: {config.icons.file}")
    click.echo(f"Rail mode: {'enabled' if config.navigation.rail_mode else 'disabled'}")

    try:
        run_server(config)
    except (FileNotFoundError, MenuConfigError) as e:
        _fail(str(e))


@menu.command()
@config_option
@menu_option
@click.option(
    "--role",
    "-r",
    "roles",
    multiple=True,
    help="Viewer role (repeatable)",
)
@click.option(
    "--route",
    default="",
    help="Current route id used for active highlighting",
)
@click.option(
    "--query",
    "-q",
    default="",
    help="Search query",
)
@click.option(
    "--rail",
    is_flag=True,
    help="Render in rail (icon-only) mode",
)
def show(
    config_path: Path | None,
    menu_file: Path | None,
    roles: tuple[str, ...],
    route: str,
    query: str,
    rail: bool,
) -> None:
    """Print the menu as a viewer would see it."""
    nodes = _load_menu_or_fail(config_path, menu_file)

    controller = NavigationController(
        nodes,
        roles=[Role(role) for role in roles],
        current_route=route,
        rail_mode=rail,
    )
    controller.set_query(query)
    view = controller.render()

    if view.is_empty:
        click.echo(click.style("No results", fg="yellow"))
        return

    for item in view.items:
        _echo_node(item)


@menu.command()
@config_option
@menu_option
def check(config_path: Path | None, menu_file: Path | None) -> None:
    """Validate a menu file."""
    nodes = _load_menu_or_fail(config_path, menu_file)

    index = MenuIndex.from_nodes(nodes)
    dividers = sum(1 for node in nodes if node.kind == "divider")
    click.echo(click.style("Menu is valid", fg="green", bold=True))
    click.echo(f"Items: {len(index)}")
    click.echo(f"Dividers: {dividers}")


def _echo_node(node: RenderNode) -> None:
    indent = "  " * node.depth
    if node.kind == "divider":
        click.echo(f"{indent}-- {node.label} --")
        return

    marker = " "
    if node.has_children:
        marker = "-" if node.expanded else "+"
    line = f"{indent}{marker} {node.label} [{node.route_id}]"
    if node.badge:
        line += f" ({node.badge})"
    if node.active:
        line = click.style(f"{line} *", bold=True)
    click.echo(line)

    if node.expanded:
        for child in node.children:
            _echo_node(child)


def _load_config(config_path: Path | None) -> Config:
    try:
        return Config.load(config_path)
    except (FileNotFoundError, ValueError) as e:
        _fail(str(e))


def _load_menu_or_fail(config_path: Path | None, menu_file: Path | None) -> tuple[MenuNode, ...]:
    config = _load_config(config_path).with_overrides(menu_file=menu_file)
    try:
        return load_menu(config.menu.file)
    except (FileNotFoundError, MenuConfigError) as e:
        _fail(str(e))


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _fail(message: str) -> NoReturn:
    click.echo(click.style(f"Error: {message}", fg="red"), err=True)
    sys.exit(1)


if __name__ == "__main__":
    cli()
