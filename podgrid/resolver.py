"""Coordinate-to-cell resolution for the virtualized observation grid.

The rendering surface asks for one cell at a time, only for the cells that
are currently visible. Rows count backwards from the newest observation, so
row ``0`` is ``observations[-1]``. Columns are split into five consecutive
segments: time, identifiers, measurements, categories and tags.

Any coordinate resolves to a cell; coordinates outside the data resolve to
an empty numeric placeholder.
"""

from __future__ import annotations

import logging
from typing import Sequence, Tuple, Union

from .formatting import format_number, format_timestamp, resolve_zone
from .schemas import CellDescriptor, CellKind, GridCoordinate, Observation, Pod
from .settings import DEFAULT_SETTINGS, GridSettings

LOGGER = logging.getLogger(__name__)

CoordinateLike = Union[GridCoordinate, Tuple[int, int]]

EMPTY_CELL = CellDescriptor(kind=CellKind.NUMERIC, raw_value=None, display_value="")


def _text_cell(value: str) -> CellDescriptor:
    return CellDescriptor(kind=CellKind.TEXT, raw_value=value, display_value=value)


class CellResolver:
    """Resolver bound to one observation sequence and one pod schema."""

    def __init__(
        self,
        observations: Sequence[Observation],
        pod: Pod,
        settings: GridSettings = DEFAULT_SETTINGS,
    ) -> None:
        self._observations = observations
        self._pod = pod
        self._time_format = settings.time_format
        self._tag_separator = settings.tag_separator
        self._zone = resolve_zone(settings.timezone)

        self._identifiers_start = 1
        self._measurements_start = self._identifiers_start + len(pod.identifiers)
        self._categories_start = self._measurements_start + len(pod.measurements)
        self._tags_col = self._categories_start + len(pod.categories)

    @property
    def observations(self) -> Sequence[Observation]:
        return self._observations

    @property
    def pod(self) -> Pod:
        return self._pod

    @property
    def row_count(self) -> int:
        return len(self._observations)

    @property
    def column_count(self) -> int:
        return self._tags_col + 1

    def column_kind(self, col: int) -> CellKind:
        """Kind of the cells a column produces for present rows."""
        if col == 0 or self._measurements_start <= col < self._categories_start:
            return CellKind.NUMERIC
        if self._identifiers_start <= col <= self._tags_col:
            return CellKind.TEXT
        return CellKind.NUMERIC

    def __call__(self, coordinate: CoordinateLike) -> CellDescriptor:
        col, row = coordinate
        return self.resolve(col, row)

    def resolve(self, col: int, row: int) -> CellDescriptor:
        count = len(self._observations)
        if row < 0 or row >= count:
            return EMPTY_CELL
        observation = self._observations[count - row - 1]

        if col == 0:
            return CellDescriptor(
                kind=CellKind.NUMERIC,
                raw_value=observation.time,
                display_value=format_timestamp(observation.time, self._time_format, self._zone),
            )

        if self._identifiers_start <= col < self._measurements_start:
            name = self._pod.identifiers[col - self._identifiers_start]
            return _text_cell(observation.identifiers.get(name, ""))

        if self._measurements_start <= col < self._categories_start:
            name = self._pod.measurements[col - self._measurements_start]
            value = observation.measurements.get(name)
            return CellDescriptor(
                kind=CellKind.NUMERIC,
                raw_value=value,
                display_value=format_number(value),
            )

        if self._categories_start <= col < self._tags_col:
            name = self._pod.categories[col - self._categories_start]
            return _text_cell(observation.categories.get(name, ""))

        if col == self._tags_col:
            return _text_cell(self._tag_separator.join(observation.tags))

        LOGGER.debug("Column %d is outside the %d-column layout", col, self.column_count)
        return EMPTY_CELL


def resolve_cell(
    coordinate: CoordinateLike,
    observations: Sequence[Observation],
    pod: Pod,
    settings: GridSettings = DEFAULT_SETTINGS,
) -> CellDescriptor:
    """Resolve a single coordinate without keeping a bound resolver around."""
    return CellResolver(observations, pod, settings)(coordinate)
