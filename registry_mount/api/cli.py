#!/usr/bin/env python3
"""
Command Line Interface for the registry storage supervisor.
Provides manual control and debugging capabilities.
"""

from __future__ import annotations

import json
import shlex
import sys
from dataclasses import asdict

import click

from registry_mount import __version__
from registry_mount.config.loader import ConfigLoader
from registry_mount.core.errors import RegistryMountError, TeardownError
from registry_mount.core.logger import get_logger, setup_logging
from registry_mount.core.shell_executor import check_command_available
from registry_mount.main import run as run_supervisor
from registry_mount.storage import (
    MountParameters,
    MountTable,
    SeaweedDriver,
    StorageHandle,
    new_storage,
)

logger = get_logger(__name__)

def _load_config(ctx: click.Context):
    try:
        return ConfigLoader.load(ctx.obj["config_path"])
    except RegistryMountError as e:
        click.echo(f"Error loading config: {e}", err=True)
        sys.exit(1)

# CLI root
@click.group()
@click.option("--config", "-c", "config_path", default=None,
              help="Path to the options JSON file")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, verbose: bool):
    """Registry storage CLI - manual control and debugging tools"""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    setup_logging("DEBUG" if verbose else "WARNING")

    if verbose:
        logger.debug("Verbose logging enabled")

@cli.command()
@click.pass_context
def run(ctx: click.Context):
    """Mount storage, run the registry, unmount on exit"""
    sys.exit(run_supervisor(ctx.obj["config_path"]))

@cli.command()
@click.pass_context
def mount(ctx: click.Context):
    """Mount storage and leave it mounted"""
    config = _load_config(ctx)

    try:
        handle = new_storage(config)
    except RegistryMountError as e:
        click.echo(f"❌ Mount failed: {e}", err=True)
        sys.exit(1)

    click.echo(json.dumps({
        "mount_path": handle.mount_path,
        "cache_dir": handle.cache_dir
    }, indent=2))

@cli.command()
@click.argument("path")
@click.option("--cache-dir", default="", help="Cache directory to remove after unmounting")
def unmount(path: str, cache_dir: str):
    """Unmount PATH and remove its cache directory"""
    handle = StorageHandle(path, MountParameters(filer="", cache_path=cache_dir))

    try:
        handle.teardown()
    except TeardownError as e:
        for error in e.errors:
            click.echo(f"❌ {error}", err=True)
        sys.exit(1)

    click.echo(f"✅ Unmounted {path}")

@cli.command()
@click.argument("path", required=False)
@click.pass_context
def status(ctx: click.Context, path: str | None):
    """Show whether the storage (or PATH) is mounted"""
    config = _load_config(ctx)
    path = path or config.storage.mount_path

    mount_table = MountTable(timeout=config.mount_list_timeout)
    if mount_table.is_mounted(path, config.fs_type):
        click.echo(f"✅ {path} mounted ({config.fs_type})")
    else:
        click.echo(f"❌ {path} not mounted ({config.fs_type})")
        sys.exit(1)

@cli.command()
@click.pass_context
def doctor(ctx: click.Context):
    """Check that required system commands exist"""
    config = _load_config(ctx)
    helper = shlex.split(config.mount_helper)[0]

    missing = []
    for command in (helper, "mount", "umount"):
        if check_command_available(command):
            click.echo(f"  ✅ {command}")
        else:
            click.echo(f"  ❌ {command}")
            missing.append(command)

    if missing:
        sys.exit(1)

# Config commands
@cli.group()
def config():
    """Configuration commands"""
    pass

@config.command(name="show")
@click.pass_context
def config_show(ctx: click.Context):
    """Show effective configuration"""
    config = _load_config(ctx)
    click.echo(json.dumps(asdict(config), indent=2))

@config.command(name="validate")
@click.pass_context
def config_validate(ctx: click.Context):
    """Validate configuration"""
    config = _load_config(ctx)

    try:
        params = MountParameters.from_param(config.storage.param)
        SeaweedDriver().validate(config.storage.mount_path, params)
    except RegistryMountError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)

    click.echo("✅ Configuration is valid")

# Meta commands
@cli.command()
def version():
    """Show version"""
    click.echo(f"registry-mount {__version__}")

if __name__ == "__main__":
    cli()
