from typing import Iterable

from engine.topology.devices import DeviceDescriptor

DEFAULT_RELIABILITY = 0.5


def max_reliability(
    devices: Iterable[DeviceDescriptor],
    default: float = DEFAULT_RELIABILITY,
) -> float:
    """
    Best reliability among the known devices.

    An empty collection is treated as neutral (default) rather than
    as zero or one.
    """
    return max((d.reliability for d in devices), default=default)
