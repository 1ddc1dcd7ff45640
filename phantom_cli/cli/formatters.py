"""
Functions for formatting and displaying data in the console using Rich.
"""

from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from phantom_cli.core.acquirer import AcquisitionResult
from phantom_cli.core.paths import ExecutableStatus
from phantom_cli.models.config import InstallConfig
from phantom_cli.models.targets import ISSUES_URL, SUPPORTED_TARGETS
from phantom_cli.utils.formatting import format_duration, format_size


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions_map = {
        "UnsupportedPlatformError": [
            f"• Supported platforms: {', '.join(SUPPORTED_TARGETS)}.",
            "• If you believe this platform should be supported,",
            f"  please open an issue at: {ISSUES_URL}",
        ],
        "DownloadFailedError": [
            "• Check your internet connection and try again.",
            "• Make sure the release exists and the binary is available.",
            "• Pin a published release with `phantom-cli install --release-version`.",
        ],
        "DownloadTimeoutError": [
            "• The release server did not respond in time.",
            "• Check your internet connection.",
            "• Allow more time with `phantom-cli install --timeout`.",
        ],
        "WriteFailedError": [
            "• Check that the package directory is writable.",
            "• Make sure there is enough free disk space.",
        ],
        "PermissionFailedError": [
            "• The file system may not allow executable files (e.g. `noexec`).",
            "• Check ownership of the package's `bin/` directory.",
        ],
        "VerificationFailedError": [
            "• This might be due to an architecture mismatch or a corrupted "
            "download.",
            "• Run `phantom-cli check-platform` to confirm the detected platform.",
            "• Run `phantom-cli install` again.",
        ],
        "NotInstalledError": [
            "• Run `phantom-cli install` to download the binary.",
        ],
        "SpawnFailedError": [
            "• The binary may have lost its execute permission.",
            "• Run `phantom-cli install` to reinstall it.",
        ],
        "ConfigurationError": [
            "• Check the values in your configuration file and "
            "`PHANTOM_CLI_*` environment variables.",
        ],
    }

    suggestions = suggestions_map.get(
        error_type, ["• Run the command with -v for detailed logs."]
    )

    error_text = Text()
    error_text.append(f"{error_type}: ", style="bold red")
    error_text.append(error_msg)

    suggestion_text = Text("\n".join(suggestions))

    content = Table.grid(padding=(1, 0))
    content.add_row(error_text)
    content.add_row()
    content.add_row(Text("Suggestions", style="bold yellow"))
    content.add_row(suggestion_text)

    if context:
        content.add_row()
        content.add_row(Text(f"Context: {context}", style="dim"))

    return Panel(
        content,
        title="[bold red]An Error Occurred[/bold red]",
        border_style="red",
        expand=False,
    )


def print_install_summary(
    console: Console, result: AcquisitionResult, duration_s: float
) -> None:
    """Displays the outcome of a successful installation."""
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold cyan")
    table.add_column()

    table.add_row("Platform:", result.target_key)
    table.add_row("Asset:", result.asset_name)
    table.add_row("Size:", format_size(result.size))
    table.add_row("Location:", f"[dim]{result.path}[/dim]")
    table.add_row("Time:", format_duration(duration_s))

    console.print(
        Panel(
            table,
            title="[bold green]✓ Phantom CLI installed successfully![/bold green]",
            border_style="green",
            expand=False,
        )
    )


def print_status_table(
    console: Console,
    config: InstallConfig,
    target_key: str,
    asset_name: str,
    url: str,
    executable_path: Path,
    status: ExecutableStatus,
) -> None:
    """Displays where the binary comes from and whether it is installed."""
    status_styles = {
        ExecutableStatus.PRESENT: "[green]✓ present[/green]",
        ExecutableStatus.MISSING: "[red]✗ missing[/red]",
        ExecutableStatus.NOT_EXECUTABLE: "[yellow]⚠ not executable[/yellow]",
    }

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold cyan")
    table.add_column()

    table.add_row("Platform:", target_key)
    table.add_row("Release:", f"v{config.release_version}")
    table.add_row("Asset:", asset_name)
    table.add_row("URL:", f"[dim]{url}[/dim]")
    table.add_row("Executable:", f"[dim]{executable_path}[/dim]")
    table.add_row("Status:", status_styles[status])

    console.print(Panel(table, title="Phantom CLI Status", border_style="cyan"))
