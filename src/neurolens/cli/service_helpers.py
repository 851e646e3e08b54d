"""
CLI Service Helpers
===================

CLI-specific utilities for working with services and the ServiceFactory.

This module provides convenience functions for CLI commands to:
1. Access a singleton ServiceFactory instance
2. Handle service result errors consistently
3. Reduce boilerplate in command implementations

Usage:
    from neurolens.cli.service_helpers import services, handle_result

    record = handle_result(services.prediction.predict("scan.jpg", config))
"""

from typing import TYPE_CHECKING, Any, List, Optional, TypeVar

import click

if TYPE_CHECKING:
    from neurolens.controllers.history import HistoryController
    from neurolens.services import ServiceFactory
    from neurolens.services.base import ServiceResult
    from neurolens.services.bulk import BulkPredictionService
    from neurolens.services.images import ImageSourceService
    from neurolens.services.models import ModelService
    from neurolens.services.prediction import PredictionService

T = TypeVar("T")


# ============================================================================
# Singleton Factory Instance
# ============================================================================

_factory: "Optional[ServiceFactory]" = None


def get_factory() -> "ServiceFactory":
    """
    Get the singleton ServiceFactory instance for CLI.

    Lazily initialized on first access from the global configuration, so the
    --config option has been applied by then. Use set_factory() to inject a
    custom instance.
    """
    global _factory
    if _factory is None:
        from neurolens.services import ServiceFactory

        _factory = ServiceFactory()
    return _factory


def set_factory(factory: "ServiceFactory") -> None:
    """
    Set a custom ServiceFactory instance.

    Example:
        # In tests
        set_factory(ServiceFactory(store=MemoryHistoryStore(), client=fake_client))
    """
    global _factory
    _factory = factory


def reset_factory() -> None:
    """Reset the singleton factory instance (for tests)."""
    global _factory
    _factory = None


class _ServiceAccessor:
    """Lazy property access to the services of the singleton factory."""

    @property
    def images(self) -> "ImageSourceService":
        return get_factory().images

    @property
    def models(self) -> "ModelService":
        return get_factory().models

    @property
    def prediction(self) -> "PredictionService":
        return get_factory().prediction

    @property
    def bulk(self) -> "BulkPredictionService":
        return get_factory().bulk

    def history_controller(self) -> "HistoryController":
        """Create a HistoryController over the factory's store."""
        return get_factory().create_history_controller()


services = _ServiceAccessor()


# ============================================================================
# Result Handling
# ============================================================================


def handle_result(result: "ServiceResult[T]") -> T:
    """
    Handle a service result, exiting with error if failed.

    Warnings attached to the result are printed either way.

    Raises:
        SystemExit: If result indicates failure (exits with code 1)
    """
    print_warnings(result.warnings)
    if not result.success:
        exit_with_error(result.error or "Unknown error")
    return result.data


def print_warnings(warnings: List[str]) -> None:
    from neurolens.cli.progress import print_warning

    for warning in warnings or []:
        print_warning(warning)


def exit_with_error(message: str, code: int = 1) -> None:
    """
    Print error message and exit.

    Raises:
        SystemExit: Always exits with specified code
    """
    click.echo(f"Error: {message}", err=True)
    raise SystemExit(code)


def check_result(result: Any, error_message: Optional[str] = None) -> bool:
    """Exit with error unless result (a ServiceResult or ControllerResult) succeeded."""
    if not result.success:
        exit_with_error(error_message or result.error or "Unknown error")
    return True


__all__ = [
    "services",
    "get_factory",
    "set_factory",
    "reset_factory",
    "handle_result",
    "print_warnings",
    "exit_with_error",
    "check_result",
]
