"""
Click-based CLI for fwchain.

IMPORTANT: This module only ORCHESTRATES. It never parses or decides.
- Loads host profiles
- Opens a connector
- Invokes the pipeline
- Formats output
"""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from fwchain import __version__
from fwchain.actions.reporters import REPORTERS, get_reporter
from fwchain.config import ConfigManager, ProfileError
from fwchain.connector.base import Connector
from fwchain.connector.local import LocalConnector
from fwchain.connector.ssh import SSHConfig, SSHConnector
from fwchain.engine.providers import NoProviderSelected, ProviderSelector
from fwchain.engine.resource import ManifestError, ResourceValidationError
from fwchain.model.chain import Family
from fwchain.pipeline import run_check, run_host_scan

console = Console()

FORMAT_OPTION = click.option(
    "--format", "fmt", type=click.Choice(list(REPORTERS)), default="rich", help="Output format"
)


@click.group()
@click.version_option(version=__version__, prog_name="fwchain")
@click.option("--config", "-c", type=click.Path(), help="Path to config directory")
@click.option("--verbose", "-v", is_flag=True, help="Log what fwchain runs")
@click.pass_context
def main(ctx: click.Context, config: str | None, verbose: bool) -> None:
    """fwchain: firewall chain discovery for iptables, ip6tables and ebtables.

    Without SERVER every command inspects the local host.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )
    ctx.ensure_object(dict)
    config_dir = Path(config) if config else None
    ctx.obj["config_mgr"] = ConfigManager(config_dir)


def _resolve_config(ctx: click.Context, server: str) -> SSHConfig:
    """Resolve server string to SSHConfig (profile name or IP)."""
    config_mgr = ctx.obj["config_mgr"]
    cfg = config_mgr.get_profile(server)
    if cfg:
        return cfg

    # Otherwise treat as hostname/IP with default root user
    return SSHConfig(host=server, user="root")


def _connector(ctx: click.Context, server: str | None) -> Connector:
    if server is None:
        return LocalConnector()
    return SSHConnector(_resolve_config(ctx, server))


def _families(names: tuple[str, ...]) -> list[Family] | None:
    return [Family(name) for name in names] or None


@main.command()
@click.argument("server", required=False)
@FORMAT_OPTION
@click.pass_context
def tools(ctx: click.Context, server: str | None, fmt: str) -> None:
    """Show firewall tools, host facts and the default provider.

    Exits with code 1 when no provider is usable.
    """
    try:
        with _connector(ctx, server) as connector:
            with console.status("[bold blue]Locating firewall tools...[/]"):
                scan = run_host_scan(connector, families=[])
    except ConnectionError as e:
        console.print(f"[bold red]Error:[/] {escape(str(e))}")
        sys.exit(1)

    reporter = get_reporter(fmt, console)
    sys.exit(reporter.report_tools(scan.facts, scan.tools, scan.provider, scan.provider_error))


@main.command("list")
@click.argument("server", required=False)
@click.option(
    "--family", "-f", "family_names", multiple=True,
    type=click.Choice([f.value for f in Family]), help="Only enumerate this family (repeatable)",
)
@FORMAT_OPTION
@click.pass_context
def list_chains(ctx: click.Context, server: str | None, family_names: tuple[str, ...], fmt: str) -> None:
    """List every chain the save tools report.

    This is read-only and makes no changes to the host.
    Exits with code 1 if a save tool failed.
    """
    try:
        with _connector(ctx, server) as connector:
            with console.status("[bold blue]Enumerating chains...[/]"):
                scan = run_host_scan(connector, families=_families(family_names))
    except ConnectionError as e:
        console.print(f"[bold red]Error:[/] {escape(str(e))}")
        sys.exit(1)

    reporter = get_reporter(fmt, console)
    sys.exit(reporter.report_inventory(scan.inventory))


@main.command()
@click.argument("manifest", type=click.Path(exists=True, dir_okay=False))
@click.argument("server", required=False)
@FORMAT_OPTION
@click.pass_context
def check(ctx: click.Context, manifest: str, server: str | None, fmt: str) -> None:
    """Compare the chains declared in MANIFEST with the host.

    CI friendly: exits with code 1 on drift, 2 on errors.
    """
    selector = ProviderSelector()
    try:
        with _connector(ctx, server) as connector:
            with console.status("[bold blue]Enumerating chains...[/]"):
                scan = run_host_scan(connector, selector=selector)
        plan = run_check(scan, manifest, selector=selector)
    except (ConnectionError, ManifestError, ResourceValidationError, NoProviderSelected) as e:
        console.print(f"[bold red]Error:[/] {escape(str(e))}")
        sys.exit(2)
    finally:
        selector.reset()

    for failure in scan.inventory.failures:
        console.print(f"[bold yellow]Warning:[/] {escape(str(failure))}")

    reporter = get_reporter(fmt, console)
    sys.exit(reporter.report_plan(plan))


@main.group()
def config() -> None:
    """Manage host connection profiles."""
    pass


@config.command("add")
@click.argument("name")
@click.option("--host", "-h", required=True, help="Server hostname or IP")
@click.option("--user", "-u", default="root", help="SSH username")
@click.option("--port", "-p", default=22, help="SSH port")
@click.option("--password", "-pass", help="SSH password")
@click.option("--key", "-k", type=click.Path(), help="Path to SSH private key")
@click.option("--sudo/--no-sudo", default=True, help="Use sudo for commands")
@click.pass_context
def config_add(
    ctx: click.Context, name: str, host: str, user: str, port: int, password: str | None, key: str | None, sudo: bool
) -> None:
    """Add a new host profile."""
    config_mgr = ctx.obj["config_mgr"]
    cfg = SSHConfig(host=host, user=user, port=port, password=password, key_path=key, use_sudo=sudo)
    try:
        config_mgr.add_profile(name, cfg)
    except ProfileError as e:
        console.print(f"[bold red]Error:[/] {escape(str(e))}")
        sys.exit(1)
    console.print(f"[bold green]✓ Added host profile:[/] {name}")


@config.command("list")
@click.pass_context
def config_list(ctx: click.Context) -> None:
    """List all host profiles."""
    config_mgr = ctx.obj["config_mgr"]
    profiles = config_mgr.list_profiles()
    if not profiles:
        console.print("[dim]No profiles configured yet.[/]")
        return

    for name, profile in profiles.items():
        console.print(f"[bold green]{escape(name)}[/]: {escape(profile.target)}")


@config.command("remove")
@click.argument("name")
@click.pass_context
def config_remove(ctx: click.Context, name: str) -> None:
    """Remove a host profile."""
    config_mgr = ctx.obj["config_mgr"]
    if config_mgr.remove_profile(name):
        console.print(f"[bold green]✓ Removed profile:[/] {name}")
    else:
        console.print(f"[bold red]Error:[/] Profile {name} not found.")
        sys.exit(1)


if __name__ == "__main__":
    main()
