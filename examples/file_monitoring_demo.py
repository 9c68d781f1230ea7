#!/usr/bin/env python3
"""
Demonstration script for the polling file watcher.

This script registers a listener against a directory, starts the watcher,
and prints every change it detects along with periodic statistics.

Usage:
    python examples/file_monitoring_demo.py [--watch-dir PATH] [--duration SECONDS]
"""

import logging.config
import time
from pathlib import Path

import click
from polling_file_watcher import FileRecord, FileWatcher, IFileNotificationListener, WatchEventType, WatcherConfig
from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, Progress, TextColumn, TimeElapsedColumn, track
from rich.table import Table

logger = logging.getLogger(__name__)

# Initialize rich console
console = Console()

EVENT_STYLES = {
    WatchEventType.CREATE: ("➕", "green"),
    WatchEventType.MODIFY: ("✏️ ", "yellow"),
    WatchEventType.DELETE: ("🗑️ ", "red"),
}


class ConsoleListener(IFileNotificationListener):
    """Prints each notification to the rich console."""

    def __init__(self):
        self.counts = {event_type: 0 for event_type in WatchEventType}

    def on_watch_event(self, event_type: WatchEventType, record: FileRecord, previous: FileRecord | None = None):
        icon, style = EVENT_STYLES[event_type]
        kind = "dir " if record.is_directory else "file"
        self.counts[event_type] += 1
        console.print(f"{icon} [{style}]{event_type.value:<6}[/{style}] {kind} [italic]{record.path}[/italic]")


def create_stats_table(stats: dict) -> Table:
    """Create a rich table for watcher statistics."""
    table = Table(title="📊 Watcher Statistics", show_header=True)
    table.add_column("Metric", style="cyan", width=22)
    table.add_column("Value", style="white", width=15)
    table.add_column("Details", style="dim", width=30)

    cycle_stats = stats["cycle_stats"]

    table.add_row("🔁 Cycles", str(cycle_stats["cycles_completed"]), "Completed scan cycles")
    table.add_row("📁 Monitored Entries", str(cycle_stats["monitored_entries"]), "Files and directories in snapshot")
    table.add_row("➕ Created", str(cycle_stats["events"]["created"]), "Entries that appeared")
    table.add_row("✏️  Modified", str(cycle_stats["events"]["modified"]), "Entries with a new mtime")
    table.add_row("🗑️  Deleted", str(cycle_stats["events"]["deleted"]), "Entries that disappeared")
    table.add_row("📨 Notifications", str(cycle_stats["notifications_delivered"]), "Listener calls delivered")
    table.add_row("⚠️  Listener Failures", str(cycle_stats["listener_failures"]), "Listener calls that raised")

    duration = cycle_stats["last_cycle_duration_seconds"]
    if duration is not None:
        table.add_row("⏱️  Last Cycle", f"{duration * 1000:.1f} ms", "Scan, diff and dispatch time")

    return table


def create_sample_files(directory: Path) -> None:
    """Create a few sample files for the demo to watch."""
    directory.mkdir(parents=True, exist_ok=True)

    sample_files = {
        "README.md": "# Sample Project\n\nFiles in this directory are watched by the demo.\n",
        "docs/getting-started.md": "# Getting Started\n\nEdit or delete me to see events.\n",
        "data/values.csv": "id,value\n1,10\n2,20\n",
    }

    for file_path, content in track(sample_files.items(), description="Creating files..."):
        full_path = directory / file_path
        full_path.parent.mkdir(parents=True, exist_ok=True)
        full_path.write_text(content, encoding='utf-8')

    console.print(f"✅ [bold green]Created {len(sample_files)} sample files in {directory}[/bold green]")


def demonstrate_watcher(watch_directory: Path, duration: int, config: WatcherConfig) -> None:
    """
    Run the watcher against a directory for a fixed duration.

    Args:
        watch_directory: Directory to monitor for changes
        duration: How long to run the demo (in seconds)
        config: Watcher configuration
    """
    console.print(
        Panel.fit(
            "🔍 [bold blue]Polling File Watcher Demo[/bold blue]\n"
            "Create, edit or delete files in the watched directory and\n"
            "watch the notifications arrive.\n\n"
            f"📁 Watching: [cyan]{watch_directory}[/cyan] | "
            f"⏱️  Interval: [yellow]{config.interval_ms} ms[/yellow] | "
            f"⌛ Duration: [yellow]{duration}s[/yellow]",
            title="Polling File Watcher",
            border_style="blue",
        )
    )

    listener = ConsoleListener()

    with FileWatcher(config) as watcher:
        watcher.register_listener(listener, watch_directory).start()
        console.print("✅ [bold green]Watcher started[/bold green]")

        start_time = time.time()
        elapsed_time = 0.0
        last_report = 0

        with Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TimeElapsedColumn(),
            console=console,
        ) as progress:
            task = progress.add_task("Watching", total=duration)
            while elapsed_time < duration:
                time.sleep(1)
                elapsed_time = time.time() - start_time
                progress.update(task, completed=min(elapsed_time, duration))

                if int(elapsed_time) // 10 > last_report:
                    last_report = int(elapsed_time) // 10
                    console.print(create_stats_table(watcher.get_monitoring_stats()))

        console.print("\n[bold green]📈 Final Statistics:[/bold green]")
        console.print(create_stats_table(watcher.get_monitoring_stats()))

    console.print("🛑 [bold green]Watcher shut down[/bold green]")


@click.command()
@click.option(
    '--watch-dir',
    '-d',
    type=click.Path(path_type=Path),
    default=Path('./watched'),
    help='Directory to monitor (will be created if it doesn\'t exist)',
)
@click.option('--duration', '-t', type=int, default=60, help='Duration to run the demo in seconds')
@click.option('--interval', '-i', type=click.IntRange(min=1), default=None, help='Scan interval in milliseconds')
@click.option('--initial-events', is_flag=True, help='Report everything found by the first scan as created')
@click.option('--create-samples', '-s', is_flag=True, help='Create sample files for testing')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
def main(
    watch_dir: Path,
    duration: int,
    interval: int | None,
    initial_events: bool,
    create_samples: bool,
    verbose: bool,
):
    """
    Run the polling file watcher demonstration.

    Example usage:

        # Watch ./watched for 60 seconds with the default 2 s interval
        python examples/file_monitoring_demo.py

        # Watch a specific directory every 500 ms for 2 minutes
        python examples/file_monitoring_demo.py -d /path/to/dir -i 500 -t 120
    """
    overrides = {"initial_scan_notification_required": initial_events}
    if interval is not None:
        overrides["interval_ms"] = interval
    if verbose:
        overrides["log_level"] = "DEBUG"
    config = WatcherConfig(**overrides)

    logging.config.dictConfig(config.get_log_config())

    try:
        if create_samples:
            create_sample_files(watch_dir)
        watch_dir.mkdir(parents=True, exist_ok=True)

        demonstrate_watcher(watch_dir, duration, config)

    except KeyboardInterrupt:
        console.print("\n⚡ [yellow]Demo interrupted by user[/yellow]")
    except Exception as e:
        console.print(f"❌ [red]Demo failed:[/red] {e}")
        logger.exception("Full error details:")
        return 1

    console.print("\n🎉 [bold green]Demo completed successfully![/bold green]")
    return 0


if __name__ == '__main__':
    exit(main())
