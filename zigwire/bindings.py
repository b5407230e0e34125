"""Binding of Inovelli Blue series switches to replica devices.

The switch acts as a controller. Binding its second endpoint to a replica
makes the replica follow the switch power, level and color directly.
"""

from __future__ import annotations

import dataclasses
import logging
import typing

from zigwire.commands import BindAction, Delay, Instruction, ZdoBind
from zigwire.const import (
    COLOR_CONTROL_CLUSTER,
    DELAY_MS,
    LEVEL_CONTROL_CLUSTER,
    ON_OFF_CLUSTER,
)
import zigwire.types as t

LOGGER = logging.getLogger(__name__)

CONTROLLER_ENDPOINT = 0x02


@dataclasses.dataclass(frozen=True)
class BindingDevice:
    device_id: str
    nwk: t.NWK
    ieee: t.EUI64
    endpoint: int | None = None


def valid_replicas(
    controller: BindingDevice, replicas: typing.Iterable[BindingDevice]
) -> list[BindingDevice]:
    """Replicas other than the controller that expose an endpoint."""
    return [
        replica
        for replica in replicas
        if replica.device_id != controller.device_id and replica.endpoint
    ]


def build_bind_commands(
    action: BindAction | str,
    controller: BindingDevice,
    replica: BindingDevice,
    *,
    power: bool = True,
    level: bool = True,
    color: bool = True,
) -> list[Instruction]:
    action = BindAction(action)

    if replica.endpoint is None:
        raise ValueError(f"Replica {replica.device_id!r} has no endpoint")

    clusters = [
        cluster_id
        for cluster_id, enabled in (
            (ON_OFF_CLUSTER, power),
            (LEVEL_CONTROL_CLUSTER, level),
            (COLOR_CONTROL_CLUSTER, color),
        )
        if enabled
    ]

    cmds: list[Instruction] = []

    for cluster_id in clusters:
        if cmds:
            cmds.append(Delay(DELAY_MS))

        cmds.append(
            ZdoBind(
                action=action,
                src_nwk=controller.nwk,
                src_ieee=controller.ieee,
                src_endpoint=CONTROLLER_ENDPOINT,
                cluster_id=cluster_id,
                dst_ieee=replica.ieee,
                dst_endpoint=replica.endpoint,
            )
        )

    LOGGER.debug("Zigbee %s commands: %s", action.value, cmds)
    return cmds


def bind_replicas(
    action: BindAction | str,
    controller: BindingDevice,
    replicas: typing.Iterable[BindingDevice],
    **kwargs: bool,
) -> dict[str, list[Instruction]]:
    """Bind instructions for every valid replica, keyed by replica device id."""
    return {
        replica.device_id: build_bind_commands(action, controller, replica, **kwargs)
        for replica in valid_replicas(controller, replicas)
    }
