"""Hardware telemetry adapters, shared snapshot store, and background sampler."""

from .disk import open_disk_adapter
from .gpu import open_gpu_adapter
from .host import HostAdapter
from .models import GPU_DETECTING, GPU_UNKNOWN, MetricsSnapshot, SamplerState
from .sampler import Sampler
from .store import SnapshotStore

__all__ = [
    "GPU_DETECTING",
    "GPU_UNKNOWN",
    "HostAdapter",
    "MetricsSnapshot",
    "Sampler",
    "SamplerState",
    "SnapshotStore",
    "open_disk_adapter",
    "open_gpu_adapter",
]
