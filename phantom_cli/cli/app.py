"""
Defines the installer command-line interface for the application using Typer.
"""

import asyncio
import logging
import os
import time
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TransferSpeedColumn,
)

from phantom_cli import __version__
from phantom_cli.core.acquirer import (
    AcquisitionResult,
    BinaryAcquirer,
    build_download_url,
    resolve_asset_name,
)
from phantom_cli.core.paths import ExecutableStatus, executable_status
from phantom_cli.core.platform_resolver import resolve_target_key
from phantom_cli.exceptions import UnsupportedPlatformError
from phantom_cli.models.config import InstallConfig
from phantom_cli.models.targets import ISSUES_URL, SUPPORTED_TARGETS
from phantom_cli.storage.config_manager import ConfigManager

from .formatters import print_install_summary, print_status_table

console = Console()

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            show_level=False,
            markup=True,
        )
    ],
)
log = logging.getLogger("phantom_cli")

app = typer.Typer(
    name="phantom-cli",
    help=(
        "Installer for the PhantomKit `phantom` binary. Run 'phantom-cli install'"
        " once, then use the 'phantom' command."
    ),
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)


def get_config_dir() -> Path:
    if os.name == "nt":
        base_dir = Path(os.getenv("APPDATA", "~\\AppData\\Roaming"))
    else:
        base_dir = Path(os.getenv("XDG_CONFIG_HOME", "~/.config"))
    return base_dir.expanduser() / "phantom-cli"


CONFIG_DIR = get_config_dir()
CONFIG_FILE = CONFIG_DIR / "config.ini"


def _load_config(cli_options: dict | None = None) -> InstallConfig:
    return ConfigManager(CONFIG_FILE).load_config(cli_options)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-v for debug).",
    ),
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", is_eager=True
    ),
):
    """PhantomKit binary installer"""
    if version:
        console.print(f"[bold]phantom-cli[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()

    log_level = "DEBUG" if verbose >= 1 else "INFO"
    logging.getLogger("phantom_cli").setLevel(log_level)

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@app.command()
def install(
    release_version: str | None = typer.Option(
        None,
        "--release-version",
        "-r",
        help="Release to download (default: this package's version).",
    ),
    release_host: str | None = typer.Option(
        None, "--release-host", help="Base URL of the release server."
    ),
    repository: str | None = typer.Option(
        None, "--repository", help="Repository publishing the release, as org/repo."
    ),
    timeout: float | None = typer.Option(
        None, "--timeout", "-t", help="Overall download timeout in seconds."
    ),
    verify_timeout: float | None = typer.Option(
        None,
        "--verify-timeout",
        help="Seconds to wait for the downloaded binary to answer --version.",
    ),
):
    """Download, verify and install the phantom binary for this platform."""
    config = _load_config(
        {
            "release_version": release_version,
            "release_host": release_host,
            "repository": repository,
            "download_timeout": timeout,
            "verify_timeout": verify_timeout,
        }
    )
    target_key = resolve_target_key()
    asset_name = resolve_asset_name(target_key)

    async def _install_async() -> AcquisitionResult:
        acquirer = BinaryAcquirer(config)
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(bar_width=30),
            DownloadColumn(),
            "•",
            TransferSpeedColumn(),
            console=console,
            transient=True,
        ) as progress:
            task_id = progress.add_task(asset_name, total=None)

            def on_progress(downloaded: int, total: int | None) -> None:
                progress.update(task_id, completed=downloaded, total=total)

            return await acquirer.acquire(target_key, on_progress=on_progress)

    start_time = time.monotonic()
    result = asyncio.run(_install_async())
    print_install_summary(console, result, time.monotonic() - start_time)


@app.command(name="check-platform")
def check_platform():
    """Check whether a phantom binary is published for this platform."""
    try:
        target_key = resolve_target_key()
    except UnsupportedPlatformError as e:
        console.print(f"[red]❌ Unsupported platform: {e.target_key}[/red]")
        console.print(f"Supported platforms: {', '.join(SUPPORTED_TARGETS)}")
        console.print(
            "\nIf you believe this platform should be supported,\n"
            f"please open an issue at: {ISSUES_URL}"
        )
        raise typer.Exit(code=1) from e

    console.print(f"[green]✅ Platform supported: {target_key}[/green]")


@app.command()
def status():
    """Show the resolved release asset and whether the binary is installed."""
    config = _load_config()
    target_key = resolve_target_key()
    asset_name = resolve_asset_name(target_key)
    executable_path = config.executable_path
    state = executable_status(executable_path)

    print_status_table(
        console,
        config,
        target_key,
        asset_name,
        build_download_url(config, asset_name),
        executable_path,
        state,
    )
    if state is not ExecutableStatus.PRESENT:
        console.print("Run [cyan]phantom-cli install[/cyan] to install it.")
        raise typer.Exit(code=1)
