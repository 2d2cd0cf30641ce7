"""Console output helpers shared by the CLI commands and the reporter.

Messages go through themed Rich consoles; library logging is routed to
stderr through the same console.
"""

import logging
import sys

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from profsweep.core.theme import get_theme


def _make_console(*, stderr: bool = False) -> Console:
    """Create a themed console.

    Interactive terminals get truecolor so hex theme colors render exactly;
    anything else is left to Rich detection.
    """
    stream = sys.stderr if stderr else sys.stdout
    color_system = "truecolor" if stream.isatty() else "auto"
    return Console(theme=get_theme(), stderr=stderr, color_system=color_system)


console = _make_console()
err_console = _make_console(stderr=True)


def print_line(message: str) -> None:
    """Print a plain report line without markup or wrapping.

    Report lines carry literal ``[TAG]:`` prefixes that tooling greps for,
    so Rich markup and highlighting are disabled.
    """
    console.print(message, markup=False, highlight=False, soft_wrap=True)


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{escape(message)}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {escape(message)}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {escape(message)}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{escape(message)}[/]")


def configure_logging(verbose: bool = False) -> None:
    """Route library logging to stderr through Rich.

    Args:
        verbose: If True, log at DEBUG level; otherwise only warnings.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=verbose, rich_tracebacks=True)],
        force=True,
    )
