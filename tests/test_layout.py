"""Column layout tests: order, grouping and width distribution."""

from __future__ import annotations

import logging

import pytest

from podgrid.layout import build_columns, split_field_name
from podgrid.schemas import Pod
from podgrid.settings import GridSettings
from tests.conftest import get_test_logger

logger = get_test_logger(__name__)
logger.info("Starting tests for layout module")


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("engine.temp", ("engine", "temp")),
        ("site", ("", "site")),
        ("a.b.c", ("a.b", "c")),
    ],
)
def test_split_field_name(name: str, expected: tuple[str, str]) -> None:
    assert split_field_name(name) == expected


def test_scenario_layout(scenario_pod: Pod) -> None:
    """One identifier and one dotted measurement give four columns."""
    logger.info("Running scenario layout test")

    columns = build_columns(scenario_pod, 1000)

    assert [(c.title, c.group) for c in columns] == [
        ("time", ""),
        ("site", ""),
        ("temp", "engine"),
        ("tags", ""),
    ]
    assert columns[0].width == 160
    share = (1000 - 160 - 32) / 3
    assert all(c.width == pytest.approx(share) for c in columns[1:])


def test_column_order_follows_schema(engine_pod: Pod) -> None:
    columns = build_columns(engine_pod, 1200)

    titles = [c.title for c in columns]
    assert titles == ["time", "site", "serial", "temp", "rpm", "battery", "mode", "tags"]
    assert len(columns) == 1 + 2 + 3 + 1 + 1
    assert columns[2].group == "unit"


def test_permuted_schema_permutes_columns() -> None:
    forward = Pod(identifiers=["a", "b"], measurements=["m.x", "m.y"], categories=["c"])
    backward = Pod(identifiers=["b", "a"], measurements=["m.y", "m.x"], categories=["c"])

    fwd = [c.key for c in build_columns(forward, 900)]
    bwd = [c.key for c in build_columns(backward, 900)]

    assert fwd[1:3] == list(reversed(bwd[1:3]))
    assert fwd[3:5] == list(reversed(bwd[3:5]))
    assert fwd[0] == bwd[0] and fwd[-2:] == bwd[-2:]


def test_layout_is_idempotent(engine_pod: Pod) -> None:
    assert build_columns(engine_pod, 1000) == build_columns(engine_pod, 1000)


def test_empty_schema_still_has_time_and_tags() -> None:
    columns = build_columns(Pod(identifiers=None, measurements=None, categories=None))

    assert [c.title for c in columns] == ["time", "tags"]
    assert columns[1].width == pytest.approx(1000 - 160 - 32)


def test_missing_width_uses_default(engine_pod: Pod) -> None:
    settings = GridSettings(default_width=800)
    assert build_columns(engine_pod, None, settings) == build_columns(engine_pod, 800, settings)


def test_narrow_width_is_clamped(engine_pod: Pod, caplog: pytest.LogCaptureFixture) -> None:
    settings = GridSettings(min_column_width=10)

    with caplog.at_level(logging.WARNING, logger="podgrid.layout"):
        columns = build_columns(engine_pod, 100, settings)

    assert all(c.width == 10 for c in columns[1:])
    assert "clamping" in caplog.text


def test_duplicate_keys_are_reported(caplog: pytest.LogCaptureFixture) -> None:
    pod = Pod(identifiers=["x.tags"], measurements=["tags"])

    with caplog.at_level(logging.WARNING, logger="podgrid.layout"):
        columns = build_columns(pod, 1000)

    assert len(columns) == 4
    assert "appears 2 times" in caplog.text
