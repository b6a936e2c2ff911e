from __future__ import annotations

import logging
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console

from podgrid.settings import ConfigurationError, GridSettings, load_settings

from . import APP_ROOT

_CONSOLE = Console()
LOG_DIR = APP_ROOT / "logs" / "cli"


def console() -> Console:
    return _CONSOLE


def configure_logging(name: str, level: int = logging.INFO) -> None:
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    log_path = LOG_DIR / f"{name}.log"
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.FileHandler(log_path, encoding="utf-8"),
            logging.StreamHandler(),
        ],
    )


def fail(message: str) -> NoReturn:
    """Print ``message`` where the grid would be and exit with status 1."""
    console().print(message, style="red", markup=False)
    raise typer.Exit(code=1)


def settings_or_exit(path: Optional[Path]) -> GridSettings:
    try:
        return load_settings(path)
    except ConfigurationError as exc:
        fail(f"Invalid configuration: {exc}")


__all__ = [
    "LOG_DIR",
    "configure_logging",
    "console",
    "fail",
    "settings_or_exit",
]
