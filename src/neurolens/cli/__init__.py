"""Command line interface for neurolens."""

from .cli import cli

__all__ = ["cli"]
