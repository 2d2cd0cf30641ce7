"""Run configuration and settings.

This module provides the configuration model and I/O functions for
profsweep. Configuration is stored in ~/.config/profsweep/config.toml;
a missing file means "use the defaults". Command-line flags override
anything read from the file.
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated, Literal

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from profsweep.core.paths import get_config_path

logger = logging.getLogger(__name__)

WinRMTransport = Literal["ntlm", "kerberos", "credssp", "basic"]


class WinRMSettings(BaseModel):
    """Connection settings for the WinRM remote channel.

    Attributes:
        transport: Authentication transport passed to pywinrm.
        port: WinRM listener port. None picks 5985/5986 based on use_ssl.
        use_ssl: Connect over HTTPS.
        username: Account used for remote calls. None uses the
            current Kerberos ticket.
        password_env: Name of the environment variable holding the password.
        operation_timeout_sec: Server-side operation timeout.
        read_timeout_sec: Client-side read timeout (must exceed the operation timeout).
        probe_timeout_sec: Read timeout for the reachability probe.
    """

    model_config = ConfigDict(extra="forbid")

    transport: WinRMTransport = "kerberos"
    port: Annotated[int | None, Field(ge=1, le=65535)] = None
    use_ssl: bool = False
    username: str | None = None
    password_env: str = "PROFSWEEP_PASSWORD"
    operation_timeout_sec: Annotated[int, Field(ge=5, le=3600)] = 120
    read_timeout_sec: Annotated[int, Field(ge=10, le=3700)] = 150
    probe_timeout_sec: Annotated[int, Field(ge=1, le=120)] = 10

    @property
    def effective_port(self) -> int:
        """Return the configured port or the WinRM default for the scheme."""
        if self.port is not None:
            return self.port
        return 5986 if self.use_ssl else 5985

    @property
    def password(self) -> str | None:
        """Read the password from the configured environment variable."""
        return os.environ.get(self.password_env) or None


class DirectorySettings(BaseModel):
    """Settings for directory-based host discovery.

    Attributes:
        search_base: Distinguished name to search under. None searches
            the whole domain.
    """

    model_config = ConfigDict(extra="forbid")

    search_base: str | None = None


class PruneConfig(BaseModel):
    """Configuration for a profile pruning run.

    Attributes:
        inactive_days: Profiles unused for longer than this are eligible.
        max_workers: Concurrency cap for probes and inventory collection.
        users_root: Managed users directory on each host.
        server_marker: Hosts whose OS label contains this are never targeted.
        measure_size: Ask hosts to measure profile folder sizes (slow).
        collect_attempts: Attempts per host for inventory collection.
        winrm: Remote channel settings.
        directory: Host discovery settings.
    """

    model_config = ConfigDict(extra="forbid")

    inactive_days: Annotated[
        int,
        Field(ge=0, description="Inactivity threshold in days"),
    ] = 90
    max_workers: Annotated[
        int,
        Field(ge=1, le=256, description="Concurrent hosts during collection"),
    ] = 25
    users_root: str = "C:\\Users"
    server_marker: str = "Server"
    measure_size: bool = False
    collect_attempts: Annotated[int, Field(ge=1, le=5)] = 1
    winrm: WinRMSettings = Field(default_factory=WinRMSettings)
    directory: DirectorySettings = Field(default_factory=DirectorySettings)


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when the config file is not found."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


def load_config(path: Path | None = None, *, missing_ok: bool = True) -> PruneConfig:
    """Load configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default config path.
        missing_ok: If True, a missing file yields the default configuration.

    Returns:
        Validated PruneConfig object.

    Raises:
        ConfigNotFoundError: If the file doesn't exist and missing_ok is False.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        if missing_ok:
            logger.debug("No config file at %s, using defaults", config_path)
            return PruneConfig()
        raise ConfigNotFoundError(f"Config not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return PruneConfig.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise ConfigError(f"Invalid config content: {e}") from e


def save_config(config: PruneConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The PruneConfig object to save.
        path: Path to save the config. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    # TOML has no null, so unset optionals are left out
    data = config.model_dump(exclude_none=True)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path
