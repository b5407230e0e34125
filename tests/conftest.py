"""Common fixtures."""

from __future__ import annotations

import logging
import random
import typing
from unittest.mock import Mock

import pytest

from zigwire.devices import PresenceSensorFP1, WindowCoveringShade

_LOGGER = logging.getLogger(__name__)


class FailOnBadFormattingHandler(logging.Handler):
    def emit(self, record):
        try:
            record.msg % record.args
        except Exception as e:  # noqa: BLE001
            pytest.fail(
                f"Failed to format log message {record.msg!r} with {record.args!r}: {e}"
            )


@pytest.fixture(autouse=True)
def raise_on_bad_log_formatting():
    handler = FailOnBadFormattingHandler()

    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(logging.DEBUG)

    try:
        yield
    finally:
        root.removeHandler(handler)


def read_attr(
    cluster_id: int,
    attribute_id: int,
    encoding: int,
    value: str,
    *,
    command: int = 0x0A,
    raw: str | None = None,
) -> str:
    """Attribute report description the way the hub prints it."""
    desc = "read attr - "

    if raw is not None:
        desc += f"raw: {raw}, "

    return desc + (
        f"dni: 1234, endpoint: 01, cluster: {cluster_id:04X}, size: 0A, "
        f"attrId: {attribute_id:04X}, encoding: {encoding:02X}, "
        f"command: {command:02X}, value: {value}"
    )


def catchall(
    cluster_id: int,
    command: int,
    payload: str = "",
    *,
    cluster_specific: bool = False,
    manufacturer: int | None = None,
) -> str:
    """Catch-all description the way the hub prints it."""
    desc = (
        f"catchall: 0104 {cluster_id:04X} 01 01 0040 00 1234 "
        f"{int(cluster_specific):02X} {int(manufacturer is not None):02X} "
        f"{manufacturer or 0:04X} {command:02X} 01"
    )

    if payload:
        desc += f" {payload}"

    return desc


@pytest.fixture
def listener() -> Mock:
    return Mock()


@pytest.fixture
def make_fp1(listener) -> typing.Iterator[typing.Callable[..., PresenceSensorFP1]]:
    devices = []

    def inner(config: dict[str, typing.Any] | None = None) -> PresenceSensorFP1:
        dev = PresenceSensorFP1("fp1", config, rng=random.Random(1))
        dev.add_listener(listener)
        devices.append(dev)
        return dev

    yield inner

    for dev in devices:
        dev.remove()


@pytest.fixture
def fp1(make_fp1) -> PresenceSensorFP1:
    return make_fp1()


@pytest.fixture
def make_shade(listener) -> typing.Iterator[typing.Callable[..., WindowCoveringShade]]:
    devices = []

    def inner(config: dict[str, typing.Any] | None = None) -> WindowCoveringShade:
        dev = WindowCoveringShade("shade", config, rng=random.Random(1))
        dev.add_listener(listener)
        devices.append(dev)
        return dev

    yield inner

    for dev in devices:
        dev.remove()


@pytest.fixture
def shade(make_shade) -> WindowCoveringShade:
    return make_shade()
