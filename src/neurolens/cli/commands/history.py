"""Single-prediction history commands."""

import click


@click.group()
def history() -> None:
    """Single-prediction history (last 10 predictions)."""
    pass


@history.command("list")
@click.option("--details", "-d", is_flag=True, help="Show the full probability breakdown")
def history_list(details: bool) -> None:
    """List stored predictions, newest first."""
    from neurolens.cli.progress import console, print_table
    from neurolens.cli.service_helpers import check_result, services
    from neurolens.controllers import format_probabilities

    controller = services.history_controller()
    result = controller.load_single_history()
    check_result(result)

    if not result.data:
        console.print("No predictions yet.")
        return

    if details:
        for index, record in enumerate(result.data):
            console.print(f"[bold]#{index}[/bold] {record.created_at}  {record.label}")
            console.print(f"  Image: {record.image_reference}")
            console.print(f"  Model: {record.model_name}")
            for line in format_probabilities(record.probabilities).splitlines():
                console.print(f"  {line}")
            if record.note:
                console.print(f"  Note: {record.note}")
            console.print()
        return

    rows = [
        [index, record.created_at, record.label, record.model_name, record.note]
        for index, record in enumerate(result.data)
    ]
    print_table("Prediction History", ["#", "Timestamp", "Class", "Model", "Note"], rows)


@history.command("note")
@click.argument("index", type=int)
@click.argument("text")
def history_note(index: int, text: str) -> None:
    """Set the note of the prediction at INDEX (0 is the newest)."""
    from neurolens.cli.progress import print_success
    from neurolens.cli.service_helpers import check_result, services

    controller = services.history_controller()
    check_result(controller.load_single_history())

    result = controller.update_note(index, text)
    check_result(result)
    print_success(result.message)


@history.command("reset")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
def history_reset(yes: bool) -> None:
    """Delete the whole prediction history."""
    from neurolens.cli.progress import print_success
    from neurolens.cli.service_helpers import check_result, services

    if not yes:
        click.confirm("Delete all stored predictions?", abort=True)

    result = services.history_controller().reset_single_history()
    check_result(result)
    print_success(result.message)
