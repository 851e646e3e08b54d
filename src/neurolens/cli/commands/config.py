"""Configuration management commands."""

import click


@click.group()
def config() -> None:
    """Configuration commands."""
    pass


@config.command("show")
def config_show() -> None:
    """Show current configuration."""
    from neurolens.cli.progress import console
    from neurolens.core.config import get_config

    config_obj = get_config()

    console.print("\n[bold]Current Configuration[/bold]")
    if config_obj._source:
        console.print(f"[dim]Source: {config_obj._source}[/dim]\n")
    else:
        console.print("[dim]Source: defaults (no config file found)[/dim]\n")

    for section_name, section in config_obj.to_dict().items():
        if section:
            console.print(f"[bold blue]\\[{section_name}][/bold blue]")
            for key, value in section.items():
                console.print(f"  {key} = {value}")
            console.print()

    console.print(f"[dim]Effective server URL: {config_obj.server_url}[/dim]")


@config.command("init")
@click.option("--output", "-o", default="neurolens.toml", help="Output file path")
@click.option("--force", "-f", is_flag=True, help="Overwrite existing file")
def config_init(output: str, force: bool) -> None:
    """Create a default configuration file."""
    from pathlib import Path

    from neurolens.cli.progress import print_error, print_success
    from neurolens.core.config import create_default_config_file

    if Path(output).exists() and not force:
        print_error(f"File already exists: {output}")
        click.echo("Use --force to overwrite.")
        raise SystemExit(1)

    try:
        path = create_default_config_file(output)
    except OSError as e:
        print_error(f"Could not write {output}: {e}")
        raise SystemExit(1)

    print_success(f"Created configuration file: {path}")


@config.command("path")
def config_path() -> None:
    """Show configuration file search paths."""
    from neurolens.cli.progress import console
    from neurolens.core.config import get_config_locations

    console.print("\n[bold]Configuration File Search Paths[/bold]\n")
    console.print("Files are searched in order (first found wins):\n")
    for location in get_config_locations():
        marker = "[green]✓[/green]" if location.exists() else "[dim]•[/dim]"
        console.print(f"  {marker} {location}")
    console.print()
