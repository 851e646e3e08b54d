"""Bulk classification runs and the bulk aggregate history."""

import signal
import threading
from typing import Tuple

import click

from neurolens.cli.classifier_options import classifier_options


def interrupt_handler(service, previous_handler):
    """
    SIGINT handler for a bulk run.

    While the run is processing images, Ctrl+C asks it to stop after the
    current image. Outside that window (model lookup, commit) the previous
    handler runs, which by default raises KeyboardInterrupt.
    """

    def _on_interrupt(signum, frame):
        if service.cancel():
            from neurolens.cli.progress import print_warning

            print_warning("Stopping after the current image...")
        elif callable(previous_handler):
            previous_handler(signum, frame)
        elif previous_handler != signal.SIG_IGN:
            raise KeyboardInterrupt

    return _on_interrupt


@click.group()
def bulk() -> None:
    """Bulk classification of many images."""
    pass


@bulk.command("run")
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True))
@click.option("--recursive", "-R", is_flag=True, help="Descend into subdirectories")
@click.option("--yes", "-y", is_flag=True, help="Start without asking for confirmation")
@classifier_options
def bulk_run(
    paths: Tuple[str, ...],
    recursive: bool,
    yes: bool,
    classifier_config,
    model_name,
) -> None:
    """Classify images one at a time and store one aggregate record.

    PATHS may be image files or directories. At most 500 images are processed
    per run. Press Ctrl+C to stop after the current image; the images
    processed so far are still recorded.

    Example:
        neurolens bulk run scans/ --resolution 224x224
    """
    from neurolens.cli.progress import (
        ProgressBar,
        console,
        is_terminal,
        print_info,
        print_success,
        print_summary,
        print_table,
        print_warning,
    )
    from neurolens.cli.service_helpers import handle_result, services
    from neurolens.core.constants import CLASS_LABELS
    from neurolens.models import BulkRunState

    service = services.bulk
    references = handle_result(
        services.images.select(list(paths), recursive=recursive, limit=service.max_images)
    )

    estimate = service.estimate_seconds(len(references))
    print_info(f"{len(references)} image(s) selected. Estimated time: {estimate:g} seconds")
    if not yes and is_terminal() and not click.confirm("Start bulk prediction?", default=True):
        return

    previous_handler = None
    if threading.current_thread() is threading.main_thread():
        previous_handler = signal.getsignal(signal.SIGINT)
        signal.signal(signal.SIGINT, interrupt_handler(service, previous_handler))

    try:
        with ProgressBar(
            total=len(references), description="Classifying", disable=not is_terminal()
        ) as pb:
            service.set_progress_callback(lambda p: pb.update(completed=p.completed))
            result = service.run(references, classifier_config, model_name=model_name)
    finally:
        service.set_progress_callback(None)
        if previous_handler is not None:
            signal.signal(signal.SIGINT, previous_handler)

    run = handle_result(result)
    record = run.record

    console.print()
    rows = [
        [label, record.counts[label], f"{record.mean_confidence[label]:.2f}%"]
        for label in CLASS_LABELS
    ]
    print_table("Bulk Prediction Results", ["Class", "Count", "Mean confidence"], rows)
    console.print(
        f"Model: {record.model_name}  Resolution: {record.resolution}  "
        f"Grayscale: {'yes' if record.grayscale_enabled else 'no'}"
    )
    print_summary(
        "Run",
        {
            "Processed": f"{run.processed} of {run.total}",
            "Failed": run.failed,
            "Duration (s)": run.duration_seconds,
        },
    )

    for error in run.errors:
        print_warning(error)

    if run.state is BulkRunState.CANCELLED:
        print_warning(f"Cancelled: {result.message}")
    else:
        print_success(result.message)


@bulk.command("history")
def bulk_history() -> None:
    """Show stored bulk aggregate records, newest first."""
    from neurolens.cli.progress import console, print_table
    from neurolens.cli.service_helpers import check_result, services
    from neurolens.core.constants import CLASS_LABELS

    controller = services.history_controller()
    result = controller.load_bulk_history()
    check_result(result)

    if not result.data:
        console.print("No bulk predictions yet.")
        return

    rows = []
    for record in result.data:
        classes = ", ".join(
            f"{label} {record.counts[label]} ({record.mean_confidence[label]:.2f}%)"
            for label in CLASS_LABELS
        )
        rows.append(
            [
                record.created_at,
                record.model_name,
                "yes" if record.grayscale_enabled else "no",
                classes,
                record.failed,
            ]
        )
    print_table(
        "Bulk Prediction History",
        ["Timestamp", "Model", "Grayscale", "Classes", "Failed"],
        rows,
    )


@bulk.command("delete")
@click.argument("timestamp")
def bulk_delete(timestamp: str) -> None:
    """Delete the bulk record with the given TIMESTAMP."""
    from neurolens.cli.progress import print_info, print_success
    from neurolens.cli.service_helpers import check_result, services

    controller = services.history_controller()
    check_result(controller.load_bulk_history())

    result = controller.delete_bulk_record(timestamp)
    check_result(result)

    if result.metadata.get("deleted"):
        print_success(result.message)
    else:
        print_info(result.message)
