"""Logging setup for aio-statemachine with package filtering."""

from __future__ import annotations

import logging
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler


class PackageFilter(logging.Filter):
    """Filter to only allow logs from specified packages."""

    def __init__(self, packages: List[str]) -> None:
        super().__init__()
        self.packages = packages

    def filter(self, record: logging.LogRecord) -> bool:
        """Filter log records to only allow specified packages.

        Args:
            record: LogRecord to filter

        Returns:
            True if record should be logged, False otherwise
        """
        return any(record.name.startswith(pkg) for pkg in self.packages)


def setup_logging(
    verbose: bool = False,
    console: Optional[Console] = None,
    packages: Optional[List[str]] = None,
) -> RichHandler:
    """Configure root logging with a RichHandler.

    Replaces any handlers on the root logger. Only records from ``packages``
    (default: aio_statemachine) reach the console.

    Args:
        verbose: Enable DEBUG level logging (INFO otherwise)
        console: Optional rich Console to render to
        packages: Logger name prefixes to let through

    Returns:
        The installed RichHandler
    """
    log_level = logging.DEBUG if verbose else logging.INFO

    handler = RichHandler(
        console=console,
        level=log_level,
        show_path=verbose,
        log_time_format="%H:%M:%S",
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    handler.addFilter(PackageFilter(packages or ["aio_statemachine"]))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)
    return handler
