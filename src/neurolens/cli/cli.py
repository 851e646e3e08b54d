"""
Neurolens CLI - Brain MRI tumor classification client
"""

from typing import Optional

import click

from neurolens import __version__

from .commands import bulk, config, history, models, predict


@click.group()
@click.version_option(version=__version__, prog_name="neurolens")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Configuration file (overrides the search path)",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def cli(config_path: Optional[str], verbose: bool) -> None:
    """Neurolens - Brain MRI tumor classification

    Sends scans to a classification server and keeps a local history of
    single and bulk predictions.

    Use 'neurolens COMMAND --help' for more information on a command.
    """
    from neurolens.core.config import get_config, load_config_cascade, set_config
    from neurolens.core.logger import set_level

    if config_path is not None:
        set_config(load_config_cascade(config_path))

    set_level("DEBUG" if verbose else get_config().get("logging", "level", "WARNING"))


# Register commands
cli.add_command(predict)
cli.add_command(bulk)
cli.add_command(history)
cli.add_command(models)
cli.add_command(config)


if __name__ == "__main__":
    cli()
