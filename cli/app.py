from __future__ import annotations

import logging

import typer

from .common import configure_logging
from .subapps.grid import grid_app

app = typer.Typer(help="podgrid command line interface")
app.add_typer(grid_app, name="grid")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug messages"),
) -> None:
    configure_logging("cli", level=logging.DEBUG if verbose else logging.INFO)


if __name__ == "__main__":
    app()
