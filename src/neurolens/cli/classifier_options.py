"""Reusable Click decorators for classifier request options."""

from functools import wraps
from typing import Callable

import click

from neurolens.core.constants import RESOLUTIONS


def classifier_options(f: Callable) -> Callable:
    """Add classifier request options to a command.

    Adds:
    - --resolution: Input resolution sent to the server
    - --grayscale/--no-grayscale: Grayscale preprocessing flag
    - --model-name: Model name to record instead of asking the server

    Options left unset fall back to the [classifier] configuration section.
    The wrapped command receives a single ``classifier_config`` keyword.
    """

    @click.option(
        "--resolution",
        "-r",
        type=click.Choice(RESOLUTIONS),
        default=None,
        help="Input resolution (default from [classifier] resolution)",
    )
    @click.option(
        "--grayscale/--no-grayscale",
        default=None,
        help="Grayscale preprocessing (default from [classifier] grayscale)",
    )
    @click.option("--model-name", default=None, help="Model name to record with the results")
    @wraps(f)
    def wrapper(*args, **kwargs):
        from neurolens.core.config import get_config
        from neurolens.core.exceptions import ValidationError
        from neurolens.models import ClassifierConfig

        config = get_config()
        resolution = kwargs.pop("resolution") or config.get("classifier", "resolution", "150x150")
        grayscale = kwargs.pop("grayscale")
        if grayscale is None:
            grayscale = bool(config.get("classifier", "grayscale", False))

        try:
            kwargs["classifier_config"] = ClassifierConfig(resolution=resolution, grayscale=grayscale)
        except ValidationError as e:
            raise click.BadParameter(str(e), param_hint="--resolution")

        return f(*args, **kwargs)

    return wrapper
