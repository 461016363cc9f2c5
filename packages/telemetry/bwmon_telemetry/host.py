"""CPU and memory readings from psutil."""

from __future__ import annotations

import logging
from typing import Any

import psutil

from .models import BYTES_PER_GIB


log = logging.getLogger("bwmon.telemetry.host")

# psutil's non-blocking cpu_percent measures since the previous call, so the
# very first reading needs its own window.
FIRST_CPU_WINDOW_S = 0.1


class HostAdapter:
    def __init__(self, first_cpu_window_s: float = FIRST_CPU_WINDOW_S) -> None:
        self._first_cpu_window_s = first_cpu_window_s
        self._cpu_baseline = False
        self._cpu_percent: float | None = None
        self._mem_used: int | None = None
        self._mem_total: int | None = None

    def refresh(self) -> bool:
        interval = None if self._cpu_baseline else self._first_cpu_window_s
        try:
            cpu = float(psutil.cpu_percent(interval=interval))
            vm = psutil.virtual_memory()
        except Exception:
            log.debug("host refresh failed", exc_info=True)
            return False
        self._cpu_baseline = True
        self._cpu_percent = max(0.0, min(100.0, cpu))
        self._mem_used = int(vm.used)
        self._mem_total = int(vm.total)
        return True

    def cpu_usage_percent(self) -> float | None:
        return self._cpu_percent

    def ram_used_gb(self) -> float | None:
        if self._mem_used is None:
            return None
        return self._mem_used / BYTES_PER_GIB

    def ram_total_gb(self) -> float | None:
        if self._mem_total is None:
            return None
        return self._mem_total / BYTES_PER_GIB

    def poll(self) -> dict[str, Any]:
        if not self.refresh():
            return {}
        return {
            "cpu_usage_percent": self.cpu_usage_percent(),
            "ram_used_gb": self.ram_used_gb(),
            "ram_total_gb": self.ram_total_gb(),
        }

    def close(self) -> None:
        return None
