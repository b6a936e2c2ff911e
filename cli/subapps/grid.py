from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import typer
from rich.table import Table

from podgrid.data_access import DataAccessError, load_observations, load_pod
from podgrid.layout import build_columns
from podgrid.schemas import CellKind, Column, ColumnKey, Observation, Pod
from podgrid.view_state import ViewHost, ViewState

from ..common import console, fail, settings_or_exit

LOGGER = logging.getLogger(__name__)

PIXELS_PER_CHAR = 8

grid_app = typer.Typer(help="Inspect and render pod observation grids")


def _load_pod(path: Path) -> Pod:
    try:
        return load_pod(path)
    except DataAccessError as exc:
        fail(f"An error occurred loading the pod: {exc}")


def _load_observations(path: Path) -> Tuple[Observation, ...]:
    try:
        return load_observations(path)
    except DataAccessError as exc:
        fail(f"An error occurred fetching observations: {exc}")


def parse_resize(spec: str) -> Tuple[ColumnKey, float]:
    """Parse ``title[@group]=width``, e.g. ``temp@engine=120``."""
    target, sep, width_text = spec.rpartition("=")
    if not sep or not target:
        raise typer.BadParameter(f"Expected title[@group]=width, got '{spec}'")
    title, _, group = target.partition("@")
    try:
        width = float(width_text)
    except ValueError as exc:
        raise typer.BadParameter(f"Width must be a number in '{spec}'") from exc
    if not width > 0 or not math.isfinite(width):
        raise typer.BadParameter(f"Width must be a positive finite number in '{spec}'")
    return ColumnKey(title, group), width


def _header(column: Column) -> str:
    return f"{column.group}\n{column.title}" if column.group else column.title


def _char_width(column: Column) -> int:
    return max(4, round(column.width / PIXELS_PER_CHAR))


def render_viewport(state: ViewState, offset: int, rows: int) -> Table:
    """Render rows ``[offset, offset + rows)``, resolving only those cells."""
    table = Table(show_lines=False)
    table.add_column("#", justify="right", style="cyan", no_wrap=True)
    for col, column in enumerate(state.columns):
        kind = state.resolver.column_kind(col)
        table.add_column(
            _header(column),
            width=_char_width(column),
            justify="right" if kind is CellKind.NUMERIC else "left",
            overflow="ellipsis",
        )

    end = min(offset + rows, state.row_count)
    for row in range(offset, end):
        cells = [state.cell(col, row).display_value for col in range(len(state.columns))]
        table.add_row(str(row + 1), *cells)
    return table


def _columns_table(columns: Sequence[Column]) -> Table:
    table = Table()
    table.add_column("#", justify="right", style="cyan", no_wrap=True)
    table.add_column("Group", style="magenta")
    table.add_column("Title", style="green")
    table.add_column("Width", justify="right")
    for idx, column in enumerate(columns):
        table.add_row(str(idx), column.group, column.title, f"{column.width:.1f}")
    return table


@grid_app.command("columns")
def columns(
    pod: Path = typer.Option(..., "--pod", help="Pod schema file (YAML or JSON)"),
    width: Optional[float] = typer.Option(None, "--width", "-w", min=1, help="Grid width in pixels"),
    config: Optional[Path] = typer.Option(None, "--config", help="Optional grid config override"),
) -> None:
    """Print the column layout derived from a pod schema."""
    settings = settings_or_exit(config)
    layout = build_columns(_load_pod(pod), width, settings)
    console().print(_columns_table(layout))


@grid_app.command("cell")
def cell(
    pod: Path = typer.Option(..., "--pod"),
    observations: Path = typer.Option(..., "--observations", "-o"),
    col: int = typer.Option(..., "--col"),
    row: int = typer.Option(..., "--row"),
    config: Optional[Path] = typer.Option(None, "--config"),
) -> None:
    """Resolve one grid coordinate and print the cell as JSON."""
    settings = settings_or_exit(config)
    host = ViewHost(settings)
    state = host.sync(_load_pod(pod), _load_observations(observations))
    if state is None:
        console().print("Pod has no observations.")
        return
    console().print_json(state.cell(col, row).model_dump_json())


@grid_app.command("show")
def show(
    pod: Path = typer.Option(..., "--pod"),
    observations: Path = typer.Option(..., "--observations", "-o"),
    offset: int = typer.Option(0, "--offset", min=0, help="First row to render (0 is the newest)"),
    rows: Optional[int] = typer.Option(None, "--rows", "-n", min=1, help="Rows in the viewport"),
    width: Optional[float] = typer.Option(None, "--width", "-w", min=1),
    resize: List[str] = typer.Option([], "--resize", help="Resize a column: title[@group]=width"),
    config: Optional[Path] = typer.Option(None, "--config"),
) -> None:
    """Render the visible slice of a pod's observation grid."""
    settings = settings_or_exit(config)
    host = ViewHost(settings)
    pod_record = _load_pod(pod)
    state = host.sync(pod_record, _load_observations(observations), total_width=width)
    if state is None:
        console().print("Pod has no observations.")
        return

    for spec in resize:
        key, new_width = parse_resize(spec)
        resized = host.resize(key, new_width)
        if resized is state:
            console().print(f"Unknown column '{spec}', ignoring", style="yellow", markup=False)
        state = resized

    viewport = rows or settings.viewport_rows
    LOGGER.info("Rendering rows %d-%d of %d", offset, offset + viewport, state.row_count)
    console().print(render_viewport(state, offset, viewport))
    console().print(f"{state.row_count} observations")
