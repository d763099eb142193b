"""
TTY-aware report output.

Unicode symbols when stdout is a UTF-8 terminal, ASCII fallbacks otherwise
(pipes, CI logs, CliRunner). Failures go to stderr.
"""

import os
import sys

import click


def use_unicode() -> bool:
    """Whether stdout can render the Unicode status symbols."""
    if not sys.stdout.isatty():
        return False
    lang = (os.environ.get("LANG") or os.environ.get("LC_ALL") or "").lower()
    return "utf" in lang or sys.platform == "darwin"


def sym_ok() -> str:
    return "✓" if use_unicode() else "[OK]"


def sym_warn() -> str:
    return "⚠" if use_unicode() else "[!]"


def sym_fail() -> str:
    return "✗" if use_unicode() else "[X]"


def arrow() -> str:
    return "→" if use_unicode() else "->"


def rule(width: int) -> str:
    return ("─" if use_unicode() else "-") * width


def success(msg: str) -> None:
    click.echo(f"  {sym_ok()} {msg}")


def warn(msg: str) -> None:
    click.echo(f"  {sym_warn()} {msg}")


def error(msg: str) -> None:
    click.echo(f"  {sym_fail()} {msg}", err=True)


def info(msg: str = "") -> None:
    click.echo(f"  {msg}" if msg else "")


def heading(msg: str) -> None:
    click.echo(f"\n{msg}\n")
