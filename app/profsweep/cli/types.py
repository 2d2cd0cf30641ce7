"""Shared helpers for CLI commands.

This module provides host resolution, channel construction and config
loading used by more than one command module.
"""

import typer

from profsweep.core.config import ConfigError, PruneConfig, load_config
from profsweep.core.retry import RetryPolicy
from profsweep.discovery.base import DiscoveryError, HostSource
from profsweep.discovery.directory import DirectoryHostSource
from profsweep.discovery.static import StaticHostSource
from profsweep.remote.base import RemoteChannel
from profsweep.remote.winrm_channel import WinRMChannel
from profsweep.utils.formatting import print_error


def load_run_config() -> PruneConfig:
    """Load the configuration, exiting with an error message on failure."""
    try:
        return load_config()
    except ConfigError as e:
        print_error(f"Failed to load configuration: {e}")
        raise typer.Exit(code=1) from e


def get_host_source(computers: list[str] | None, config: PruneConfig) -> HostSource:
    """Pick the host source for a run.

    Args:
        computers: Explicit hosts from the command line, if any.
        config: Loaded configuration.

    Returns:
        A static source for explicit hosts, otherwise the directory source.
    """
    if computers:
        return StaticHostSource(computers)
    return DirectoryHostSource(
        server_marker=config.server_marker,
        search_base=config.directory.search_base,
        retry=RetryPolicy(max_attempts=config.collect_attempts),
    )


def resolve_hosts(computers: list[str] | None, config: PruneConfig) -> list[str]:
    """Resolve the target hosts, exiting with an error message on failure."""
    source = get_host_source(computers, config)
    try:
        hosts = source.hosts()
    except DiscoveryError as e:
        print_error(str(e))
        print_error("Pass hosts explicitly with --computer when the directory is unavailable.")
        raise typer.Exit(code=1) from e

    if not hosts:
        print_error(f"No target hosts found ({source.name}).")
        raise typer.Exit(code=1)
    return hosts


def get_channel(config: PruneConfig) -> RemoteChannel:
    """Create the remote channel for a run."""
    return WinRMChannel(config.winrm)
