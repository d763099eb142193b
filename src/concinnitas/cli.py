"""
Main CLI for concinnitas using Click.

Commands operate on the fixed skill catalog and the OpenCode config tree
resolved from $XDG_CONFIG_HOME (or ~/.config).
"""

import sys
from pathlib import Path

import click
import structlog
import yaml
from pydantic import ValidationError

from . import __version__, output
from .catalog import SKILL_COMMANDS, SKILL_NAMES
from .config import AppConfig, load_config
from .core import (
    SkillsError,
    atomic_copy_skills,
    check_host_config_exists,
    remove_skills,
    verify_installation,
)
from .logging import configure_logging
from .metadata import InstallMetadata, MetadataStore
from .paths import (
    META_FILE_NAME,
    get_bundled_skills_dir,
    get_meta_file_path,
    get_skills_target_dir,
)
from .registry import RegistryError, fetch_latest_version

logger = structlog.get_logger()

# Exit codes
EXIT_SUCCESS = 0
EXIT_FAILED = 1
EXIT_CONFIG_ERROR = 3

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


@click.group(
    context_settings=CONTEXT_SETTINGS,
    invoke_without_command=True,
    epilog=(
        "\b\nExamples:\n"
        "  concinnitas install\n"
        "  concinnitas list\n"
        "  concinnitas --verbose update"
    ),
)
@click.version_option(
    __version__, "-v", "--version", prog_name="concinnitas", message="%(version)s"
)
@click.option(
    "-c",
    "--config",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to a YAML configuration file",
)
@click.option("--verbose", count=True, help="Technical log output (repeat for debug)")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write JSON logs to this file",
)
@click.option("--quiet", is_flag=True, help="Silence technical log output")
@click.pass_context
def main(
    ctx: click.Context,
    config: Path | None,
    verbose: int,
    log_file: Path | None,
    quiet: bool,
) -> None:
    """concinnitas - AI-guided design process for OpenCode.

    Installs the bundled design skills into OpenCode's skills directory.
    """
    try:
        app_config = load_config(
            config_path=config,
            cli_args={"verbose": verbose, "log_file": log_file},
        )
    except (FileNotFoundError, ValidationError, yaml.YAMLError, TypeError) as e:
        output.error(f"Invalid configuration: {e}")
        sys.exit(EXIT_CONFIG_ERROR)

    configure_logging(app_config.logging, quiet=quiet)
    ctx.obj = app_config

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@main.command()
def install() -> None:
    """Install skills to OpenCode."""
    output.heading("concinnitas install")

    target_dir = get_skills_target_dir()

    if not check_host_config_exists():
        output.warn("OpenCode config directory not found. Creating it anyway.")

    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        output.info("Copying skills...")
        atomic_copy_skills(get_bundled_skills_dir(), target_dir, SKILL_NAMES)
    except (SkillsError, OSError) as e:
        output.error(str(e))
        sys.exit(EXIT_FAILED)

    result = verify_installation(target_dir, SKILL_NAMES)

    for name in result.valid:
        output.success(f"{name} {output.arrow()} {target_dir / name}")
    for name in result.invalid:
        output.warn(f"{name} - installed but SKILL.md validation failed")
    for name in result.missing:
        output.error(f"{name} - missing after install")

    try:
        MetadataStore(get_meta_file_path()).save(
            InstallMetadata.now(__version__, list(SKILL_NAMES))
        )
    except OSError as e:
        output.error(f"Could not write {META_FILE_NAME}: {e}")
        sys.exit(EXIT_FAILED)

    installed = len(result.installed)
    click.echo()
    if not result.missing and not result.invalid:
        output.success(f"{installed} skills installed. Restart OpenCode to load them.")
    else:
        output.warn(f"{installed}/{len(SKILL_NAMES)} skills installed. Check warnings above.")

    output.info()
    output.info("Available commands after restart:")
    width = max(len(cmd) for cmd, _ in SKILL_COMMANDS) + 2
    for cmd, description in SKILL_COMMANDS:
        output.info(f"  {cmd.ljust(width)}{description}")


@main.command()
def uninstall() -> None:
    """Remove skills from OpenCode."""
    output.heading("concinnitas uninstall")

    try:
        removed = remove_skills(get_skills_target_dir(), SKILL_NAMES)
    except OSError as e:
        output.error(f"Could not remove skills: {e}")
        sys.exit(EXIT_FAILED)

    if not removed:
        output.info("No concinnitas skills found. Nothing to remove.")
        return

    for name in removed:
        output.success(f"Removed {name}")

    try:
        if MetadataStore(get_meta_file_path()).delete():
            output.success(f"Removed {META_FILE_NAME}")
    except OSError as e:
        output.warn(f"Could not remove {META_FILE_NAME}: {e}")

    click.echo()
    output.success(f"{len(removed)} skills removed.")


@main.command()
@click.pass_obj
def update(app_config: AppConfig) -> None:
    """Check for a newer version on the package registry."""
    output.heading("concinnitas update")

    store = MetadataStore(get_meta_file_path())
    if not store.exists():
        output.info("No concinnitas installation found. Run `install` first.")
        output.info()
        output.info("  concinnitas install")
        return

    meta = store.load()
    installed_version = meta.version if meta else __version__

    output.info("Checking for updates...")
    try:
        latest_version = fetch_latest_version(
            str(app_config.registry.url),
            timeout=app_config.registry.timeout,
        )
    except RegistryError as e:
        logger.info("update.check_failed", error=str(e))
        output.warn("Could not check for updates. Run `install` to force-reinstall.")
        return

    if installed_version == latest_version:
        output.success(f"Already up to date (v{installed_version}).")
    else:
        output.info(f"Update available: v{installed_version} {output.arrow()} v{latest_version}")
        output.info()
        output.info("Run the following to update:")
        output.info("  pip install --upgrade concinnitas && concinnitas install")


@main.command("list")
def list_skills() -> None:
    """Show installed skills."""
    meta = MetadataStore(get_meta_file_path()).load()
    version_info = f" (v{meta.version}, installed {meta.installed_date})" if meta else ""

    output.heading(f"Concinnitas Skills{version_info}")

    result = verify_installation(get_skills_target_dir(), SKILL_NAMES)
    invalid = set(result.invalid)
    installed = set(result.installed)

    name_width = max(len(n) for n in SKILL_NAMES) + 2
    output.info(f"{'Skill'.ljust(name_width)}Status")
    output.info(f"{output.rule(name_width)}{output.rule(16)}")

    for name in SKILL_NAMES:
        if name in invalid:
            status = f"{output.sym_warn()} installed (invalid SKILL.md)"
        elif name in installed:
            status = f"{output.sym_ok()} installed"
        else:
            status = f"{output.sym_fail()} missing"
        output.info(f"{name.ljust(name_width)}{status}")

    click.echo()
    output.info(f"{len(installed)}/{len(SKILL_NAMES)} skills installed.")


if __name__ == "__main__":
    main()
