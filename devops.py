"""Developer tasks for profsweep.

Usage: uv run devops.py <task> [args...]
Tasks: fmt, lint, test, clean

Extra arguments after ``test`` are passed to pytest, e.g.
``uv run devops.py test -k orchestrator``.
"""

import subprocess
import sys
from collections.abc import Callable

SOURCES = ["app", "tests", "devops.py"]


def _run(commands: list[list[str]]) -> None:
    """Run commands in order, stopping at the first failure."""
    for cmd in commands:
        try:
            subprocess.run(cmd, check=True)  # nosec: B603, B607
        except subprocess.CalledProcessError as e:
            print(f"Command failed: {' '.join(e.cmd)}", file=sys.stderr)
            sys.exit(e.returncode)


def fmt(_args: list[str]) -> None:
    """Format sources and apply safe lint fixes."""
    _run(
        [
            ["ruff", "format", *SOURCES],
            ["ruff", "check", "--fix", *SOURCES],
        ]
    )


def lint(_args: list[str]) -> None:
    """Check formatting and lint rules without touching files."""
    _run(
        [
            ["ruff", "format", "--check", *SOURCES],
            ["ruff", "check", *SOURCES],
        ]
    )


def test(args: list[str]) -> None:
    """Run the unit test suite."""
    _run([["uv", "run", "--extra", "test", "pytest", "-q", *args]])


def clean(_args: list[str]) -> None:
    """Remove caches and build output."""
    _run(
        [
            ["find", ".", "-type", "d", "-name", "__pycache__", "-exec", "rm", "-rf", "{}", "+"],
            ["find", "app", "-type", "d", "-name", "*.egg-info", "-exec", "rm", "-rf", "{}", "+"],
            ["rm", "-rf", ".pytest_cache", ".ruff_cache", "build", "dist"],
        ]
    )


TASKS: dict[str, Callable[[list[str]], None]] = {
    "fmt": fmt,
    "lint": lint,
    "test": test,
    "clean": clean,
}


if __name__ == "__main__":
    if len(sys.argv) < 2 or sys.argv[1] not in TASKS:
        print(f"Usage: uv run devops.py <{'|'.join(TASKS)}> [args...]", file=sys.stderr)
        sys.exit(1)
    TASKS[sys.argv[1]](sys.argv[2:])
