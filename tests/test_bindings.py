import pytest

from zigwire import bindings
from zigwire.commands import BindAction, Delay, ZdoBind
import zigwire.types as t

CONTROLLER = bindings.BindingDevice(
    device_id="switch",
    nwk=t.NWK(0x1234),
    ieee=t.EUI64.convert("00:0d:6f:00:0a:bc:de:f0"),
    endpoint=0x01,
)


def make_replica(device_id: str, endpoint: int | None = 0x01) -> bindings.BindingDevice:
    return bindings.BindingDevice(
        device_id=device_id,
        nwk=t.NWK(0x5678),
        ieee=t.EUI64.convert("00:0d:6f:00:0a:bc:de:f1"),
        endpoint=endpoint,
    )


def test_build_bind_commands():
    replica = make_replica("bulb")
    cmds = bindings.build_bind_commands("bind", CONTROLLER, replica)

    assert [type(cmd) for cmd in cmds] == [ZdoBind, Delay, ZdoBind, Delay, ZdoBind]
    assert [cmd.cluster_id for cmd in cmds[::2]] == [0x0006, 0x0008, 0x0300]
    assert all(cmd == Delay(200) for cmd in cmds[1::2])

    first = cmds[0]
    assert first.action is BindAction.bind
    assert first.src_endpoint == bindings.CONTROLLER_ENDPOINT
    assert first.src_ieee == CONTROLLER.ieee
    assert first.dst_ieee == replica.ieee
    assert first.dst_endpoint == 0x01
    assert first.zdo_cluster_id == 0x0021


def test_build_unbind_commands_subset():
    cmds = bindings.build_bind_commands(
        BindAction.unbind, CONTROLLER, make_replica("bulb"), power=False, color=False
    )

    assert len(cmds) == 1
    assert cmds[0].cluster_id == 0x0008
    assert cmds[0].zdo_cluster_id == 0x0022


def test_build_bind_commands_nothing_enabled():
    assert (
        bindings.build_bind_commands(
            "bind",
            CONTROLLER,
            make_replica("bulb"),
            power=False,
            level=False,
            color=False,
        )
        == []
    )


def test_build_bind_commands_without_endpoint():
    with pytest.raises(ValueError):
        bindings.build_bind_commands("bind", CONTROLLER, make_replica("bulb", None))


def test_build_bind_commands_invalid_action():
    with pytest.raises(ValueError):
        bindings.build_bind_commands("rebind", CONTROLLER, make_replica("bulb"))


def test_valid_replicas():
    bulb = make_replica("bulb")
    no_endpoint = make_replica("remote", None)

    assert bindings.valid_replicas(CONTROLLER, [bulb, no_endpoint, CONTROLLER]) == [
        bulb
    ]


def test_bind_replicas():
    result = bindings.bind_replicas(
        "bind",
        CONTROLLER,
        [make_replica("bulb"), make_replica("lamp", 0x0B), make_replica("remote", None)],
        color=False,
    )

    assert list(result) == ["bulb", "lamp"]
    assert [cmd.cluster_id for cmd in result["lamp"][::2]] == [0x0006, 0x0008]
    assert result["lamp"][0].dst_endpoint == 0x0B
