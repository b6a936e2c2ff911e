"""Column layout for the observation grid."""

from __future__ import annotations

import logging
from collections import Counter
from typing import Iterable, List, Optional, Tuple

from .schemas import Column, Pod
from .settings import DEFAULT_SETTINGS, GridSettings

LOGGER = logging.getLogger(__name__)

TIME_TITLE = "time"
TAGS_TITLE = "tags"


def split_field_name(name: str) -> Tuple[str, str]:
    """Return ``(group, title)`` for a dotted field name.

    ``"engine.temp"`` gives ``("engine", "temp")``; a name without a dot has
    an empty group.
    """
    group, _, title = name.rpartition(".")
    return group, title


def field_column(name: str, width: float) -> Column:
    group, title = split_field_name(name)
    return Column(title=title, group=group, width=width)


def schema_fields(pod: Pod) -> List[str]:
    """Every non-time field of ``pod`` in column order."""
    return [*pod.identifiers, *pod.measurements, *pod.categories]


def share_width(
    field_count: int,
    total_width: float,
    settings: GridSettings = DEFAULT_SETTINGS,
) -> float:
    """Width given to each non-time column, the tags column included."""
    remaining = total_width - settings.time_column_width - settings.grid_margin
    width = remaining / (field_count + 1)
    if width < settings.min_column_width:
        LOGGER.warning(
            "Grid width %s leaves %.2fpx per column; clamping to %s",
            total_width,
            width,
            settings.min_column_width,
        )
        width = settings.min_column_width
    return width


def _warn_duplicates(columns: Iterable[Column]) -> None:
    counts = Counter(column.key for column in columns)
    for key, count in counts.items():
        if count > 1:
            LOGGER.warning("Column %r appears %d times; resizing targets the first", key, count)


def build_columns(
    pod: Pod,
    total_width: Optional[float] = None,
    settings: GridSettings = DEFAULT_SETTINGS,
) -> Tuple[Column, ...]:
    """Lay out ``time``, identifiers, measurements, categories and ``tags``.

    The order only depends on the order of the pod's field lists, so the
    same pod and width always produce the same columns.
    """
    if total_width is None:
        total_width = settings.default_width

    names = schema_fields(pod)
    width = share_width(len(names), total_width, settings)

    columns = [Column(title=TIME_TITLE, width=settings.time_column_width)]
    columns.extend(field_column(name, width) for name in names)
    columns.append(Column(title=TAGS_TITLE, width=width))

    _warn_duplicates(columns)
    LOGGER.debug("Built %d columns for pod %r (width=%s)", len(columns), pod.name, total_width)
    return tuple(columns)
