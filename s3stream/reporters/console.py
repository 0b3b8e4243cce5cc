"""Console reporter using Rich library for formatted CLI output.

Provides colorful, formatted output during transfers including:
- A header per transfer with size and chosen strategy
- Per-part (and optionally per-chunk) progress lines
- Final summary table of all transfers in the run
"""

from typing import Optional

from rich import box
from rich.console import Console
from rich.rule import Rule
from rich.table import Table

from s3stream.models import Chunk, Part, Strategy, TransferResult
from s3stream.reporters.base import Reporter


def format_size(size: int) -> str:
    """Render a byte count with a binary unit."""
    if size < 1024:
        return f"{size} B"
    value = size / 1024
    for unit in ("KiB", "MiB"):
        if value < 1024:
            return f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} GiB"


class ConsoleReporter(Reporter):
    """Rich-based console reporter for CLI output.

    Args:
        quiet: If True, suppress progress output (only show summary)
        show_chunks: If True, print a line for every chunk read
    """

    def __init__(self, quiet: bool = False, show_chunks: bool = False):
        # Use legacy_windows=True for ASCII-safe output on Windows consoles
        self.console = Console(legacy_windows=True)
        self.quiet = quiet
        self.show_chunks = show_chunks

    def on_transfer_start(
        self,
        source: str,
        destination: str,
        total_size: int,
        strategy: Optional[Strategy],
    ) -> None:
        if self.quiet:
            return

        self.console.print()
        self.console.print(
            Rule(f"[bold cyan]{source} -> {destination}[/bold cyan]", style="cyan", characters="-")
        )
        details = f"Size: {format_size(total_size)}"
        if strategy is not None:
            details += f" | Strategy: {strategy.value}"
        self.console.print(f"  [dim]{details}[/dim]")

    def on_chunk(self, chunk: Chunk, total_size: int) -> None:
        if self.quiet or not self.show_chunks:
            return

        done = chunk.offset + chunk.size
        progress = f"{done}/{total_size}" if total_size > 0 else str(done)
        self.console.print(f"  [dim]{chunk.size} bytes ({progress})[/dim]")

    def on_part_uploaded(self, part: Part) -> None:
        if self.quiet:
            return

        self.console.print(
            f"  [green][PART {part.part_number}][/green] "
            f"{format_size(part.size)} [dim]ETag {part.etag}[/dim]"
        )

    def on_transfer_complete(self, result: TransferResult) -> None:
        """Displays the outcome of one transfer."""
        if self.quiet:
            return

        if result.succeeded:
            status = "[bold green]DONE[/bold green]"
        else:
            status = "[bold red]FAILED[/bold red]"

        duration_str = ""
        if result.duration_seconds > 0:
            duration_str = f" in {result.duration_seconds:.1f}s"

        self.console.print(f"{result.bucket}/{result.key}: {status}{duration_str}")

        if result.etag:
            self.console.print(f"   [dim]ETag: {result.etag}[/dim]")
        if result.location:
            self.console.print(f"   [dim]Location: {result.location}[/dim]")
        if result.error_message:
            self.console.print(f"   [dim red]{result.error_message}[/dim red]")

    def on_run_complete(self, results: list[TransferResult]) -> None:
        """Displays a summary table of all transfers."""
        if not results:
            self.console.print("[yellow]No transfers to display.[/yellow]")
            return

        self.console.print()
        self.console.print(
            Rule("[bold]Transfer Summary[/bold]", style="magenta", characters="-")
        )

        table = Table(
            title="",
            show_header=True,
            header_style="bold magenta",
            border_style="dim",
            box=box.ASCII,
        )

        table.add_column("Object", style="cyan", no_wrap=True)
        table.add_column("Strategy", justify="center", no_wrap=True)
        table.add_column("Size", justify="right", no_wrap=True)
        table.add_column("Parts", justify="right", no_wrap=True)
        table.add_column("Status", justify="center", no_wrap=True)

        for result in results:
            if result.succeeded:
                status_symbol = "[green]OK[/green]"
            else:
                status_symbol = "[red]FAIL[/red]"

            table.add_row(
                f"{result.bucket}/{result.key}",
                result.strategy.value if result.strategy else "download",
                format_size(result.total_size),
                str(result.parts) if result.parts else "-",
                status_symbol,
            )

        self.console.print(table)
        self.console.print()
