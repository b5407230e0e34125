import asyncio
import random
from unittest.mock import Mock, call

import pytest

from zigwire.exceptions import LivenessTimeout
from zigwire.health import HealthState, HealthStateMachine


@pytest.fixture
def health():
    machine = HealthStateMachine("dev", command_timeout=0.1, rng=random.Random(1))
    yield machine
    machine.remove()


@pytest.fixture
def listener(health):
    listener = Mock()
    health.add_listener(listener)
    return listener


def test_install(health, listener):
    health.install()

    assert health.state == HealthState.unknown
    assert listener.health_status_updated.mock_calls == [
        call(HealthState.unknown, None)
    ]


async def test_frame_received_online(health, listener):
    assert health.last_seen is None

    health.frame_received()
    health.frame_received()

    assert health.state == HealthState.online
    assert health.last_seen is not None
    # Only state changes are announced
    assert listener.health_status_updated.mock_calls == [call(HealthState.online, None)]


async def test_command_timeout_goes_offline_once(health, listener):
    health.frame_received()
    health.command_sent()
    assert health.timeout_pending

    await asyncio.sleep(0.15)

    assert health.state == HealthState.offline
    assert not health.timeout_pending

    health.command_sent()
    await asyncio.sleep(0.15)

    offline_calls = [
        c
        for c in listener.health_status_updated.mock_calls
        if c.args[0] == HealthState.offline
    ]
    assert len(offline_calls) == 1

    error = offline_calls[0].args[1]
    assert isinstance(error, LivenessTimeout)
    assert error.device_id == "dev"
    assert error.timeout == 0.1


async def test_reply_cancels_timeout(health, listener):
    health.command_sent()
    await asyncio.sleep(0.05)
    health.frame_received()
    await asyncio.sleep(0.1)

    assert health.state == HealthState.online
    assert not health.timeout_pending


async def test_back_online_after_offline(health, listener):
    health.command_sent()
    await asyncio.sleep(0.15)
    assert health.state == HealthState.offline

    health.frame_received()

    assert health.state == HealthState.online
    assert listener.health_status_updated.mock_calls[-1] == call(
        HealthState.online, None
    )


async def test_command_sent_supersedes(health):
    health.command_sent(timeout=0.05)
    health.command_sent(timeout=0.2)
    await asyncio.sleep(0.1)

    assert health.state == HealthState.unknown
    assert health.timeout_pending


async def test_reset(health, listener):
    health.schedule_probe(10, Mock())
    health.frame_received()
    health.command_sent()
    health.reset()

    assert health.state == HealthState.unknown
    assert health.last_seen is None
    assert not health.timeout_pending
    assert health.probe_scheduled


async def test_schedule_probe(health):
    probe = Mock()
    health.schedule_probe(10, probe)

    assert health.probe_scheduled
    assert 0 <= health.probe_offset <= 8 * 60 + 58

    health._probe_fired()

    assert probe.mock_calls == [call()]
    assert health.timeout_pending
    assert health.probe_scheduled


async def test_schedule_probe_disabled(health):
    health.schedule_probe(10, Mock())
    health.schedule_probe(0, Mock())

    assert not health.probe_scheduled
    assert health.probe_offset is None


async def test_schedule_probe_invalid_interval(health):
    with pytest.raises(ValueError):
        health.schedule_probe(7, Mock())


async def test_probe_jitter_is_seeded():
    a = HealthStateMachine("a", rng=random.Random(42))
    b = HealthStateMachine("b", rng=random.Random(42))

    a.schedule_probe(15, Mock())
    b.schedule_probe(15, Mock())

    assert a.probe_offset == b.probe_offset

    a.remove()
    b.remove()
    assert not a.probe_scheduled
