"""
Handles printing summary information to the console (stderr) after a run.
"""
from rich.console import Console as RichConsole
from rich.markup import escape
from rich.table import Table
import structlog

log = structlog.get_logger(__name__)

def print_cli_summary_output(session):
    """
    Prints a per-label entry count table and walk statistics to stderr.
    'session' is a finished ListingSession.
    """
    log.debug("console_summary_output_requested")
    console = RichConsole(stderr=True)

    table = Table(title="lsct summary", title_justify="left")
    table.add_column("label", style="cyan")
    table.add_column("entries", justify="right")
    for label, count in session.label_counts.items():
        table.add_row(escape(label), f"{count:,}")
    console.print(table)

    walker = session.walker
    console.print(
        f"visited {walker.entries_visited:,} entries, "
        f"listed {walker.entries_classified:,}, "
        f"{walker.warnings:,} warning(s)",
        style="yellow" if walker.warnings else None,
    )
