"""Configuration commands.

Shows the effective configuration and writes a default config file.
"""

from enum import Enum
from typing import Annotated

import tomli_w
import typer
from rich.table import Table

from profsweep.cli import types
from profsweep.core.config import ConfigError, PruneConfig, save_config
from profsweep.core.paths import ensure_config_dir, get_config_path
from profsweep.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Show or initialize the profsweep configuration.",
    no_args_is_help=True,
)


class OutputFormat(str, Enum):
    """Output format options for config show."""

    TABLE = "table"
    TOML = "toml"


def _flatten(data: dict[str, object], prefix: str = "") -> list[tuple[str, str]]:
    rows: list[tuple[str, str]] = []
    for key, value in data.items():
        name = f"{prefix}{key}"
        if isinstance(value, dict):
            rows.extend(_flatten(value, prefix=f"{name}."))
        else:
            rows.append((name, "-" if value is None else str(value)))
    return rows


@app.command()
def show(
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
) -> None:
    """Show the effective configuration (file values over defaults)."""
    config = types.load_run_config()

    if output_format == OutputFormat.TOML:
        console.print(
            tomli_w.dumps(config.model_dump(exclude_none=True)),
            markup=False,
            highlight=False,
            soft_wrap=True,
        )
        return

    path = get_config_path()
    table = Table(
        title="Configuration",
        caption=str(path) if path.exists() else "(defaults, no config file)",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Setting", style="info", no_wrap=True)
    table.add_column("Value")
    for name, value in _flatten(config.model_dump()):
        table.add_row(name, value)
    console.print(table)


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite an existing config file.",
        ),
    ] = False,
) -> None:
    """Write a config file populated with default values."""
    path = get_config_path()
    if path.exists() and not force:
        print_error(f"Config file already exists: {path}")
        print_info("Use --force to overwrite.")
        raise typer.Exit(code=1)

    try:
        ensure_config_dir()
        saved = save_config(PruneConfig(), path)
    except (ConfigError, OSError, RuntimeError) as e:
        print_error(f"Failed to write config: {e}")
        raise typer.Exit(code=1) from e

    print_success(f"Config written to {saved}")


@app.command()
def path() -> None:
    """Print the config file location."""
    console.print(str(get_config_path()), markup=False, highlight=False, soft_wrap=True)
