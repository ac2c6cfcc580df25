import pytest

from engine.topology.devices import (
    ROOT_PARENT_ID,
    DeviceDescriptor,
    TopologyBuilder,
    build_default_topology,
)
from engine.topology.exceptions import TopologyError
from engine.topology.reliability import max_reliability


def test_default_topology_layout():
    devices = {d.name: d for d in build_default_topology()}

    assert list(devices) == ["Cloud1", "Cloud2", "Gateway", "FogNode1", "FogNode2", "FogNode3"]
    assert devices["Cloud1"].is_root and devices["Cloud2"].is_root
    assert devices["Gateway"].parent_id == devices["Cloud1"].device_id
    for node in ("FogNode1", "FogNode2", "FogNode3"):
        assert devices[node].parent_id == devices["Gateway"].device_id


def test_ids_are_scoped_to_each_build():
    first = [d.device_id for d in build_default_topology()]
    second = [d.device_id for d in build_default_topology()]

    assert first == second == list(range(6))
    assert [d.device_id for d in build_default_topology(id_start=100)][0] == 100


def test_builder_rejects_unknown_parent():
    builder = TopologyBuilder()
    with pytest.raises(TopologyError):
        builder.add("Edge", mips=1, ram=1, up_bw=1, down_bw=1, parent="Nowhere")


def test_builder_rejects_duplicate_name():
    builder = TopologyBuilder()
    builder.add("Cloud", mips=1, ram=1, up_bw=1, down_bw=1)
    with pytest.raises(TopologyError):
        builder.add("Cloud", mips=1, ram=1, up_bw=1, down_bw=1)


def test_children_of():
    builder = TopologyBuilder()
    builder.add("Cloud", mips=1, ram=1, up_bw=1, down_bw=1)
    builder.add("A", mips=1, ram=1, up_bw=1, down_bw=1, parent="Cloud")
    builder.add("B", mips=1, ram=1, up_bw=1, down_bw=1, parent="Cloud")

    assert [d.name for d in builder.children_of("Cloud")] == ["A", "B"]
    assert builder.children_of("A") == []
    assert builder.build()[0].parent_id == ROOT_PARENT_ID


def test_descriptor_clamps_reliability():
    assert DeviceDescriptor("x", 5, 1.7).reliability == 1.0
    assert DeviceDescriptor("y", 5, -0.3).reliability == 0.0


def test_descriptor_rejects_negative_latency():
    with pytest.raises(TopologyError):
        DeviceDescriptor("x", -1, 0.5)


def test_fog_device_describe():
    gateway = build_default_topology()[2]
    descriptor = gateway.describe(latency=4, reliability=0.97)
    assert descriptor == DeviceDescriptor("Gateway", 4, 0.97)


def test_max_reliability():
    devices = [DeviceDescriptor("a", 1, 0.2), DeviceDescriptor("b", 1, 0.9), DeviceDescriptor("c", 1, 0.4)]
    assert max_reliability(devices) == 0.9
    assert max_reliability([]) == 0.5
    assert max_reliability([], default=0.8) == 0.8
