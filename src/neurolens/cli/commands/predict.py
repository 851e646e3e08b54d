"""Single-image classification command."""

import click

from neurolens.cli.classifier_options import classifier_options


@click.command()
@click.argument("image", type=click.Path(exists=True, dir_okay=False))
@classifier_options
def predict(image: str, classifier_config, model_name) -> None:
    """Classify a single MRI image and add it to the prediction history.

    Example:
        neurolens predict scan.jpg --resolution 224x224 --grayscale
    """
    from neurolens.cli.progress import console, print_success, status
    from neurolens.cli.service_helpers import handle_result, services
    from neurolens.controllers import format_probabilities

    with status(f"Classifying {click.format_filename(image)}..."):
        result = services.prediction.predict(image, classifier_config, model_name=model_name)
    record = handle_result(result)

    print_success(f"Prediction: [bold]{record.label}[/bold]")
    console.print(format_probabilities(record.probabilities))
    console.print(f"[dim]Model: {record.model_name}[/dim]")
    if record.preprocess_function:
        console.print(f"[dim]Preprocessing: {record.preprocess_function}[/dim]")
