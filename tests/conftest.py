"""Shared pytest configuration and fixtures for podgrid."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, List

import pytest

from podgrid.schemas import Observation, Pod
from podgrid.settings import GridSettings
from tests.helpers import (
    build_engine_pod,
    build_observation_records,
    build_observations,
    observations_frame,
    write_csv,
    write_json,
    write_yaml,
)

LOGS_ROOT = Path(__file__).resolve().parents[1] / "logs" / "tests"
SESSION_LOG = LOGS_ROOT / "pytest.session.log"
_MODULE_HANDLERS: Dict[str, logging.Handler] = {}


def _initialise_logging() -> None:
    LOGS_ROOT.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(SESSION_LOG, mode="w", encoding="utf-8")
    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(logging.INFO)
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)


def get_test_logger(module_name: str) -> logging.Logger:
    """Return a logger writing into ``logs/tests/<module>.log``."""
    normalised = module_name.replace("tests.", "")
    logger = logging.getLogger(f"tests.{normalised}")
    logger.setLevel(logging.INFO)
    if normalised not in _MODULE_HANDLERS:
        LOGS_ROOT.mkdir(parents=True, exist_ok=True)
        log_path = LOGS_ROOT / f"{normalised}.log"
        handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
        logger.addHandler(handler)
        _MODULE_HANDLERS[normalised] = handler
    return logger


@pytest.hookimpl(tryfirst=True)
def pytest_configure(config: pytest.Config) -> None:  # noqa: D401 - pytest hook
    _initialise_logging()


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item: pytest.Item, call: pytest.CallInfo[None]) -> Iterable[pytest.TestReport]:
    outcome = yield
    report = outcome.get_result()
    if report.outcome != "failed":
        return
    module = getattr(item, "module", None)
    module_name = getattr(module, "__name__", "tests")
    target = LOGS_ROOT / f"{module_name.split('.')[-1]}.log"
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("a", encoding="utf-8") as handle:
        handle.write("\n=== TEST FAILURE ===\n")
        handle.write(f"nodeid: {item.nodeid}\n")
        handle.write(f"phase: {report.when}\n")
        handle.write(str(report.longrepr))
        handle.write("\n")


@pytest.fixture
def utc_settings() -> GridSettings:
    return GridSettings(timezone="UTC", time_format="%Y-%m-%d %H:%M:%S")


@pytest.fixture
def engine_pod() -> Pod:
    return build_engine_pod()


@pytest.fixture
def engine_observations() -> List[Observation]:
    return build_observations(5)


@pytest.fixture
def scenario_pod() -> Pod:
    return Pod(identifiers=["site"], measurements=["engine.temp"], categories=[])


@pytest.fixture
def scenario_observations() -> List[Observation]:
    return [
        Observation(
            time=1000,
            identifiers={"site": "A"},
            measurements={"engine.temp": 72.5},
            tags=["ok"],
        )
    ]


@pytest.fixture
def pod_yaml(tmp_path: Path, engine_pod: Pod) -> Path:
    return write_yaml(engine_pod.model_dump(mode="json"), tmp_path / "pods" / "rover.yaml")


@pytest.fixture
def observations_json(tmp_path: Path) -> Path:
    records = build_observation_records(5)
    return write_json(list(reversed(records)), tmp_path / "obs" / "rover.json")


@pytest.fixture
def observations_csv(tmp_path: Path) -> Path:
    frame = observations_frame(build_observation_records(5))
    return write_csv(frame, tmp_path / "obs" / "rover.csv")


@pytest.fixture(autouse=True)
def isolate_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    from podgrid import data_access, settings

    monkeypatch.delenv(settings.ENV_VAR, raising=False)
    monkeypatch.setattr(settings, "DEFAULT_CONFIG_FILE", tmp_path / "missing" / "podgrid.yaml")
    data_access.clear_cache()


__all__ = [
    "get_test_logger",
]
