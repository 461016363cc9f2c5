"""Typed telemetry models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


GPU_DETECTING = "Detecting..."
GPU_UNKNOWN = "Unknown GPU"

BYTES_PER_GIB = 1024**3
BYTES_PER_MIB = 1024**2


@dataclass(frozen=True)
class MetricsSnapshot:
    cpu_usage_percent: float = 0.0
    ram_used_gb: float = 0.0
    ram_total_gb: float = 0.0
    gpu_name: str = GPU_DETECTING
    gpu_pcie_tx_bps: int = 0
    gpu_pcie_rx_bps: int = 0
    gpu_vram_used_mb: int = 0
    gpu_vram_total_mb: int = 0
    disk_read_bps: int = 0
    disk_write_bps: int = 0
    cycle: int = 0
    sampled_at: datetime | None = None


class SamplerState(str, Enum):
    INITIALIZING = "initializing"
    RUNNING = "running"
    STOPPED = "stopped"
