"""Pydantic models shared by the layout, resolver and view layers."""

from __future__ import annotations

from enum import Enum
from typing import Dict, NamedTuple, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

RawValue = Union[int, float, str, None]


class GridCoordinate(NamedTuple):
    """Virtual cell address, independent of the scrolled viewport."""

    col: int
    row: int


class ColumnKey(NamedTuple):
    title: str
    group: str = ""


class Pod(BaseModel):
    """Schema of a pod: the field names shown as grid columns."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    identifiers: Tuple[str, ...] = ()
    measurements: Tuple[str, ...] = ()
    categories: Tuple[str, ...] = ()

    @field_validator("identifiers", "measurements", "categories", mode="before")
    @classmethod
    def _none_is_empty(cls, value):
        return () if value is None else value


class Observation(BaseModel):
    """One timestamped telemetry record of a pod."""

    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    time: int = Field(..., description="Unix timestamp in seconds")
    identifiers: Dict[str, str] = Field(default_factory=dict)
    measurements: Dict[str, Optional[float]] = Field(default_factory=dict)
    categories: Dict[str, str] = Field(default_factory=dict)
    tags: Tuple[str, ...] = ()

    @field_validator("identifiers", "measurements", "categories", mode="before")
    @classmethod
    def _none_is_empty_mapping(cls, value):
        return {} if value is None else value

    @field_validator("tags", mode="before")
    @classmethod
    def _none_is_empty_tags(cls, value):
        return () if value is None else value


class Column(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    group: str = ""
    width: float = Field(..., gt=0, description="Column width in pixels")

    @property
    def key(self) -> ColumnKey:
        return ColumnKey(self.title, self.group)


class CellKind(str, Enum):
    NUMERIC = "numeric"
    TEXT = "text"


class CellDescriptor(BaseModel):
    """What the rendering surface draws for one grid coordinate."""

    model_config = ConfigDict(frozen=True)

    kind: CellKind
    raw_value: RawValue = None
    display_value: str = ""
    editable: bool = False


__all__ = [
    "CellDescriptor",
    "CellKind",
    "Column",
    "ColumnKey",
    "GridCoordinate",
    "Observation",
    "Pod",
    "RawValue",
]
