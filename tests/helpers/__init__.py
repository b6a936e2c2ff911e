"""Shared helper utilities for the podgrid test-suite."""

from .data import (
    build_engine_pod,
    build_observation_records,
    build_observations,
    observations_frame,
    write_csv,
    write_json,
    write_yaml,
)

__all__ = [
    "build_engine_pod",
    "build_observation_records",
    "build_observations",
    "observations_frame",
    "write_csv",
    "write_json",
    "write_yaml",
]
