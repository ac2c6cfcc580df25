# engine/topology/devices.py

"""
Fog/cloud device records and the topology builder.

The scoring engine only ever reads DeviceDescriptor collections.
FogDevice trees exist so callers can derive those descriptors from
a concrete parent/child layout.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from engine.topology.exceptions import TopologyError
from engine.utils import clamp

ROOT_PARENT_ID = -1


@dataclass(frozen=True, slots=True)
class DeviceDescriptor:
    """
    Read-only view of a compute node as seen by the scorers.
    """

    name: str
    latency: int
    reliability: float

    def __post_init__(self):
        if self.latency < 0:
            raise TopologyError(f"{self.name}: latency must be non-negative")
        object.__setattr__(self, "reliability", clamp(float(self.reliability)))

    def __str__(self) -> str:
        return f"{self.name} [latency={self.latency}ms, reliability={self.reliability}]"


@dataclass(frozen=True, slots=True)
class FogDevice:
    device_id: int
    name: str
    mips: int
    ram: int
    up_bw: int
    down_bw: int
    parent_id: int = ROOT_PARENT_ID

    @property
    def is_root(self) -> bool:
        return self.parent_id == ROOT_PARENT_ID

    def describe(self, latency: int, reliability: float) -> DeviceDescriptor:
        return DeviceDescriptor(name=self.name, latency=latency, reliability=reliability)


class TopologyBuilder:
    """
    Builds one device tree.

    Identifiers are assigned from a counter owned by this builder,
    so two builds never share id state.
    """

    def __init__(self, id_start: int = 0):
        self._next_id = id_start
        self._devices: Dict[str, FogDevice] = {}

    def add(
        self,
        name: str,
        *,
        mips: int,
        ram: int,
        up_bw: int,
        down_bw: int,
        parent: Optional[str] = None,
    ) -> FogDevice:
        if name in self._devices:
            raise TopologyError(f"Duplicate device name: {name}")

        parent_id = ROOT_PARENT_ID
        if parent is not None:
            if parent not in self._devices:
                raise TopologyError(f"Unknown parent device: {parent}")
            parent_id = self._devices[parent].device_id

        device = FogDevice(
            device_id=self._next_id,
            name=name,
            mips=mips,
            ram=ram,
            up_bw=up_bw,
            down_bw=down_bw,
            parent_id=parent_id,
        )
        self._next_id += 1
        self._devices[name] = device
        return device

    def children_of(self, name: str) -> List[FogDevice]:
        if name not in self._devices:
            raise TopologyError(f"Unknown device: {name}")
        parent_id = self._devices[name].device_id
        return [d for d in self._devices.values() if d.parent_id == parent_id]

    def build(self) -> List[FogDevice]:
        return list(self._devices.values())


def build_default_topology(id_start: int = 0) -> List[FogDevice]:
    """
    Two clouds, a gateway under Cloud1 and three fog nodes of
    different strength under the gateway.
    """
    builder = TopologyBuilder(id_start=id_start)

    builder.add("Cloud1", mips=20000, ram=16384, up_bw=100000, down_bw=100000)
    builder.add("Cloud2", mips=15000, ram=12000, up_bw=80000, down_bw=80000)
    builder.add("Gateway", mips=10000, ram=1024, up_bw=10000, down_bw=10000, parent="Cloud1")

    builder.add("FogNode1", mips=2000, ram=512, up_bw=1000, down_bw=1000, parent="Gateway")
    builder.add("FogNode2", mips=3000, ram=1024, up_bw=1500, down_bw=1500, parent="Gateway")
    builder.add("FogNode3", mips=1500, ram=256, up_bw=800, down_bw=800, parent="Gateway")

    return builder.build()
