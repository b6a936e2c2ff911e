"""Loading pod schemas and observation records from local files."""

from __future__ import annotations

import json
import logging
import math
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, List, Tuple

import pandas as pd
import yaml
from pydantic import ValidationError

from .schemas import Observation, Pod

LOGGER = logging.getLogger(__name__)

FIELD_SECTIONS = ("identifiers", "measurements", "categories")
JSON_LINES_SUFFIXES = {".jsonl", ".ndjson"}


class DataAccessError(ValueError):
    """Raised when a pod or observation file cannot be read."""


def _file_signature(path: Path) -> Tuple[str, float]:
    if not path.exists():
        raise DataAccessError(f"File {path} does not exist")
    stat = path.stat()
    return (str(path.resolve()), stat.st_mtime)


def _read_document(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except (UnicodeDecodeError, OSError) as exc:
        raise DataAccessError(f"Cannot read {path}: {exc}") from exc
    suffix = path.suffix.lower()
    try:
        if suffix in {".yaml", ".yml"}:
            return yaml.safe_load(text)
        if suffix == ".json":
            return json.loads(text)
        if suffix in JSON_LINES_SUFFIXES:
            return [json.loads(line) for line in text.splitlines() if line.strip()]
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise DataAccessError(f"Cannot parse {path}: {exc}") from exc
    raise DataAccessError(f"Unsupported file format '{suffix}' for {path}")


@lru_cache(maxsize=32)
def _load_pod(signature: Tuple[str, float]) -> Pod:
    path = Path(signature[0])
    raw = _read_document(path)
    if not isinstance(raw, dict):
        raise DataAccessError(f"Pod file {path} must contain a mapping")
    if "pod" in raw and isinstance(raw["pod"], dict):
        raw = raw["pod"]
    try:
        return Pod.model_validate(raw)
    except ValidationError as exc:
        raise DataAccessError(f"Invalid pod in {path}: {exc}") from exc


def load_pod(path: Path | str) -> Pod:
    return _load_pod(_file_signature(Path(path)))


def _csv_records(path: Path) -> List[Dict[str, Any]]:
    try:
        frame = pd.read_csv(path, dtype=str, keep_default_na=False)
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        raise DataAccessError(f"Cannot parse {path}: {exc}") from exc
    except (UnicodeDecodeError, OSError) as exc:
        raise DataAccessError(f"Cannot read {path}: {exc}") from exc
    if "time" not in frame.columns:
        raise DataAccessError(f"Observation CSV {path} has no `time` column")

    records: List[Dict[str, Any]] = []
    for row in frame.to_dict(orient="records"):
        record: Dict[str, Any] = {section: {} for section in FIELD_SECTIONS}
        record["time"] = row.pop("time")
        tags = row.pop("tags", "")
        record["tags"] = tags.split() if tags else []
        for column, value in row.items():
            section, _, name = column.partition(".")
            if section not in FIELD_SECTIONS or not name:
                LOGGER.debug("Ignoring column %s in %s", column, path)
                continue
            if value == "":
                continue
            record[section][name] = value
        records.append(record)
    return records


def _clean_measurements(record: Dict[str, Any]) -> Dict[str, Any]:
    measurements = record.get("measurements")
    if not isinstance(measurements, dict):
        return record
    cleaned = {}
    for name, value in measurements.items():
        if value is None or (isinstance(value, float) and math.isnan(value)):
            cleaned[name] = None
        else:
            cleaned[name] = value
    return {**record, "measurements": cleaned}


def _validate_records(records: Iterable[Any], path: Path) -> List[Observation]:
    observations: List[Observation] = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            raise DataAccessError(f"Observation #{index} in {path} is not a mapping")
        try:
            observations.append(Observation.model_validate(_clean_measurements(record)))
        except ValidationError as exc:
            raise DataAccessError(f"Invalid observation #{index} in {path}: {exc}") from exc
    return observations


@lru_cache(maxsize=32)
def _load_observations(signature: Tuple[str, float]) -> Tuple[Observation, ...]:
    path = Path(signature[0])
    if path.suffix.lower() == ".csv":
        records: Any = _csv_records(path)
    else:
        records = _read_document(path)
        if isinstance(records, dict):
            records = records.get("observations")
        if not isinstance(records, list):
            raise DataAccessError(f"Observation file {path} must contain a list of records")

    observations = _validate_records(records, path)
    LOGGER.info("Loaded %d observations from %s", len(observations), path)
    return tuple(sorted(observations, key=lambda item: item.time))


def load_observations(path: Path | str) -> Tuple[Observation, ...]:
    """Return the observations stored at ``path``, oldest first."""
    return _load_observations(_file_signature(Path(path)))


def clear_cache() -> None:
    _load_pod.cache_clear()
    _load_observations.cache_clear()
