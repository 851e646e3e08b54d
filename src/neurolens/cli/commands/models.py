"""Server model selection commands."""

import click


@click.group()
def models() -> None:
    """Models available on the classification server."""
    pass


@models.command("info")
def models_info() -> None:
    """Show the model currently active on the server."""
    from neurolens.cli.service_helpers import handle_result, services

    name = handle_result(services.models.get_current_model(refresh=True))
    click.echo(name)


@models.command("list")
def models_list() -> None:
    """List the models the server can switch to."""
    from neurolens.cli.progress import console
    from neurolens.cli.service_helpers import handle_result, services

    names = handle_result(services.models.list_models())
    current = services.models.get_current_model()
    active = current.data if current.success else None

    for name in names:
        marker = "[green]*[/green]" if name == active else " "
        console.print(f"{marker} {name}")


@models.command("select")
@click.argument("name")
def models_select(name: str) -> None:
    """Activate model NAME on the server."""
    from neurolens.cli.progress import print_success
    from neurolens.cli.service_helpers import handle_result, services

    result = services.models.select_model(name)
    handle_result(result)
    print_success(result.message)
