"""Mirror commands.

Clones and updates the local bare mirrors of every registered repository.
The sync runs on a background thread; this module drains its event
channel to drive a Rich progress display.
"""

from __future__ import annotations

import queue
import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING

import typer
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)

from chainctl.cli.display import create_sync_table, print_sync_summary
from chainctl.cli.types import build_sync_service, get_settings
from chainctl.core.registry import RegistryError
from chainctl.git.mirrors import iter_events
from chainctl.models.sync import SyncEvent, SyncEventKind, SyncSummary
from chainctl.utils.formatting import console, print_error, print_info, print_success
from chainctl.utils.shell import command_exists

if TYPE_CHECKING:
    from chainctl.git.mirrors import MirrorSyncService

app = typer.Typer(
    help="Clone and update local repository mirrors.",
    invoke_without_command=True,
    no_args_is_help=True,
)

_Batch = Callable[[queue.Queue[SyncEvent], threading.Event], SyncSummary]

# Seconds between checks that the batch thread is still alive
_POLL_SECONDS = 0.5

_EVENT_STYLES: dict[SyncEventKind, str] = {
    SyncEventKind.SKIPPED: "muted",
    SyncEventKind.SUCCEEDED: "success",
    SyncEventKind.FAILED: "error",
    SyncEventKind.CANCELLED: "warning",
}


def _run_with_progress(batch: _Batch, total: int, description: str) -> SyncSummary:
    """Run a sync batch on a background thread and render its events.

    Ctrl+C cancels every repository that has not started yet; the batch
    still runs to completion so its summary is complete.

    Args:
        batch: clone_all or update_all of a MirrorSyncService.
        total: Number of repositories in the batch.
        description: Progress bar label.

    Returns:
        The batch summary.

    Raises:
        Exception: Whatever aborted the batch before it completed.
    """
    events: queue.Queue[SyncEvent] = queue.Queue()
    cancel = threading.Event()

    with (
        ThreadPoolExecutor(max_workers=1, thread_name_prefix="mirror-batch") as executor,
        Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(bar_width=40),
            TaskProgressColumn(),
            TimeElapsedColumn(),
            console=console,
        ) as progress,
    ):
        task_id = progress.add_task(description, total=total)
        future = executor.submit(batch, events, cancel)

        stream = iter_events(events, timeout=_POLL_SECONDS)
        while True:
            try:
                event = next(stream)
            except StopIteration:
                break
            except queue.Empty:
                if future.done():
                    break
                stream = iter_events(events, timeout=_POLL_SECONDS)
                continue
            except KeyboardInterrupt:
                if cancel.is_set():
                    raise
                cancel.set()
                progress.console.print("[warning]Cancelling repositories not yet started...[/]")
                stream = iter_events(events, timeout=_POLL_SECONDS)
                continue

            if event.kind.is_terminal and event.target is not None:
                progress.advance(task_id)
                style = _EVENT_STYLES[event.kind]
                progress.console.print(f"[{style}]{event.message}[/]", highlight=False)
            elif event.kind == SyncEventKind.STARTED and event.target is not None:
                progress.update(task_id, description=f"{description} {event.target.label}")

        progress.update(task_id, description=description)
        return future.result()


def _finish(summary: SyncSummary) -> None:
    """Print the result of a batch and exit 1 if anything failed."""
    print_sync_summary(summary)
    if summary.failed:
        console.print(create_sync_table(summary))
        print_error(f"{len(summary.failed)} of {summary.total} repositories failed.")
        raise typer.Exit(code=1)
    print_success(f"{summary.operation.value.capitalize()} complete.")


def _service(ctx: typer.Context) -> MirrorSyncService:
    if not command_exists("git"):
        print_error("git is not installed or not on PATH.")
        raise typer.Exit(code=1)
    return build_sync_service(get_settings(ctx))


def _sync(batch: _Batch, total: int, description: str) -> None:
    """Run a batch, turning an aborted batch into exit code 1."""
    try:
        summary = _run_with_progress(batch, total, description)
    except (RegistryError, OSError) as e:
        print_error(f"{description} aborted: {e}")
        raise typer.Exit(code=1) from e
    _finish(summary)


@app.command()
def clone(ctx: typer.Context) -> None:
    """Clone every registered repository that has no mirror yet.

    Existing mirrors are skipped. One repository failing never stops
    the others.
    """
    service = _service(ctx)
    try:
        targets = service.clone_targets()
    except RegistryError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if not targets:
        print_info("No repositories registered.")
        return

    print_info(
        f"Cloning {len(targets)} repositories into {service.layout.base_dir} "
        f"({service.max_concurrency} in parallel)"
    )
    _sync(service.clone_all, len(targets), "Cloning")


@app.command()
def update(ctx: typer.Context) -> None:
    """Fetch all remotes for every mirror present on disk."""
    service = _service(ctx)
    try:
        targets = service.update_targets()
    except OSError as e:
        print_error(f"Cannot read mirrors in {service.layout.base_dir}: {e}")
        raise typer.Exit(code=1) from e

    if not targets:
        print_info(f"No mirrors found in {service.layout.base_dir}. Run 'chainctl mirrors clone'.")
        return

    print_info(f"Updating {len(targets)} mirrors ({service.max_concurrency} in parallel)")
    _sync(service.update_all, len(targets), "Updating")
