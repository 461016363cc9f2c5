"""NVIDIA GPU identity, PCIe throughput and VRAM through NVML.

Only device index 0 is read. When NVML cannot be opened the adapter is inert
for the rest of the process; there is no per-cycle retry.
"""

from __future__ import annotations

import logging
from typing import Any

from .models import BYTES_PER_MIB, GPU_UNKNOWN


log = logging.getLogger("bwmon.telemetry.gpu")

DEVICE_INDEX = 0


class _GpuAdapter:
    active = False

    def poll(self) -> dict[str, Any]:
        return {}

    def close(self) -> None:
        return None


class _NvmlGpuAdapter(_GpuAdapter):
    active = True

    def __init__(self, nvml: Any) -> None:
        self._nvml = nvml
        nvml.nvmlInit()
        try:
            self._handle = nvml.nvmlDeviceGetHandleByIndex(DEVICE_INDEX)
        except Exception:
            nvml.nvmlShutdown()
            raise

    def name(self) -> str:
        try:
            raw = self._nvml.nvmlDeviceGetName(self._handle)
        except Exception:
            log.debug("gpu name read failed", exc_info=True)
            return GPU_UNKNOWN
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8", errors="replace")
        return str(raw) or GPU_UNKNOWN

    def _pcie_bps(self, counter: int) -> int | None:
        try:
            kb_per_s = self._nvml.nvmlDeviceGetPcieThroughput(self._handle, counter)
        except Exception:
            log.debug("gpu pcie read failed counter=%s", counter, exc_info=True)
            return None
        return max(0, int(kb_per_s)) * 1024

    def poll(self) -> dict[str, Any]:
        nvml = self._nvml
        out: dict[str, Any] = {"gpu_name": self.name()}

        tx = self._pcie_bps(nvml.NVML_PCIE_UTIL_TX_BYTES)
        if tx is not None:
            out["gpu_pcie_tx_bps"] = tx
        rx = self._pcie_bps(nvml.NVML_PCIE_UTIL_RX_BYTES)
        if rx is not None:
            out["gpu_pcie_rx_bps"] = rx

        try:
            mem = nvml.nvmlDeviceGetMemoryInfo(self._handle)
        except Exception:
            log.debug("gpu memory read failed", exc_info=True)
        else:
            out["gpu_vram_used_mb"] = int(mem.used) // BYTES_PER_MIB
            out["gpu_vram_total_mb"] = int(mem.total) // BYTES_PER_MIB
        return out

    def close(self) -> None:
        try:
            self._nvml.nvmlShutdown()
        except Exception:
            log.debug("nvml shutdown failed", exc_info=True)


def open_gpu_adapter(nvml: Any = None) -> _GpuAdapter:
    try:
        if nvml is None:
            import pynvml as nvml  # type: ignore
        adapter = _NvmlGpuAdapter(nvml)
    except Exception as exc:
        log.info(f"gpu telemetry unavailable: {exc}", extra={"event": "gpu_unavailable"})
        return _GpuAdapter()
    log.info("gpu telemetry active", extra={"event": "gpu_active"})
    return adapter
