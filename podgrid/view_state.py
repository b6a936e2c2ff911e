"""Immutable grid view state and the explicit rebuild trigger around it."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Optional, Sequence, Tuple, Union

from .layout import build_columns
from .resolver import CellResolver
from .schemas import CellDescriptor, Column, ColumnKey, Observation, Pod
from .settings import DEFAULT_SETTINGS, GridSettings

LOGGER = logging.getLogger(__name__)

KeyLike = Union[ColumnKey, Tuple[str, str]]


@dataclass(frozen=True)
class ViewState:
    """Columns and the resolver bound to them, published as one value."""

    columns: Tuple[Column, ...]
    resolver: CellResolver

    @property
    def row_count(self) -> int:
        return self.resolver.row_count

    def column_index(self, key: KeyLike) -> Optional[int]:
        """Index of the first column carrying ``key``, or ``None``."""
        target = ColumnKey(*key)
        for index, column in enumerate(self.columns):
            if column.key == target:
                return index
        return None

    def key_for(self, index: int) -> ColumnKey:
        return self.columns[index].key

    def cell(self, col: int, row: int) -> CellDescriptor:
        return self.resolver.resolve(col, row)

    def resize(self, key: KeyLike, new_width: float) -> "ViewState":
        """Return a copy where only the column ``key`` has ``new_width``.

        Unknown keys leave the view untouched and return ``self``.
        """
        if not new_width > 0 or not math.isfinite(new_width):
            raise ValueError(f"Column width must be positive, got {new_width}")
        index = self.column_index(key)
        if index is None:
            LOGGER.warning("Ignoring resize of unknown column %r", tuple(key))
            return self
        columns = list(self.columns)
        columns[index] = columns[index].model_copy(update={"width": float(new_width)})
        return replace(self, columns=tuple(columns))

    def rebind(self, observations: Sequence[Observation], settings: GridSettings = DEFAULT_SETTINGS) -> "ViewState":
        """Bind new observations while keeping the current column widths."""
        return replace(self, resolver=CellResolver(observations, self.resolver.pod, settings))


def build_view_state(
    pod: Optional[Pod],
    observations: Optional[Sequence[Observation]],
    total_width: Optional[float] = None,
    settings: GridSettings = DEFAULT_SETTINGS,
) -> Optional[ViewState]:
    """Build columns and resolver together; ``None`` while nothing is renderable."""
    if pod is None or not observations:
        return None
    columns = build_columns(pod, total_width, settings)
    resolver = CellResolver(observations, pod, settings)
    return ViewState(columns=columns, resolver=resolver)


class ViewHost:
    """Holds the published :class:`ViewState` for one display session.

    The hosting surface calls :meth:`sync` whenever it receives pod or
    observation data. Columns are rebuilt only when the pod schema changes;
    a new observation sequence only rebinds the resolver, so user resizes
    survive data refreshes. Every change replaces the whole state.
    """

    def __init__(self, settings: GridSettings = DEFAULT_SETTINGS) -> None:
        self.settings = settings
        self._state: Optional[ViewState] = None
        self._pod: Optional[Pod] = None
        self._observations: Optional[Sequence[Observation]] = None

    @property
    def state(self) -> Optional[ViewState]:
        return self._state

    def sync(
        self,
        pod: Optional[Pod],
        observations: Optional[Sequence[Observation]],
        total_width: Optional[float] = None,
    ) -> Optional[ViewState]:
        schema_changed = pod != self._pod
        data_changed = observations is not self._observations
        self._pod = pod
        self._observations = observations

        if not schema_changed and not data_changed:
            return self._state

        if schema_changed or self._state is None or not observations:
            LOGGER.info("Rebuilding grid view for pod %r", pod.name if pod is not None else None)
            self._state = build_view_state(pod, observations, total_width, self.settings)
        else:
            LOGGER.debug("Rebinding resolver to %d observations", len(observations))
            self._state = self._state.rebind(observations, self.settings)
        return self._state

    def resize(self, key: KeyLike, new_width: float) -> Optional[ViewState]:
        if self._state is None:
            LOGGER.warning("Ignoring resize of %r before the grid is built", tuple(key))
            return None
        self._state = self._state.resize(key, new_width)
        return self._state
