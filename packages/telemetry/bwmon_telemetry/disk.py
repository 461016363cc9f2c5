"""Aggregate physical-disk throughput from Windows performance counters."""

from __future__ import annotations

import logging
from typing import Any


log = logging.getLogger("bwmon.telemetry.disk")

READ_COUNTER_PATH = r"\PhysicalDisk(_Total)\Disk Read Bytes/sec"
WRITE_COUNTER_PATH = r"\PhysicalDisk(_Total)\Disk Write Bytes/sec"


class _DiskAdapter:
    active = False

    def poll(self) -> dict[str, Any]:
        return {}

    def close(self) -> None:
        return None


class _PdhDiskAdapter(_DiskAdapter):
    active = True

    def __init__(self, pdh: Any) -> None:
        self._pdh = pdh
        self._query = pdh.OpenQuery()
        try:
            self._read_counter = pdh.AddEnglishCounter(self._query, READ_COUNTER_PATH)
            self._write_counter = pdh.AddEnglishCounter(self._query, WRITE_COUNTER_PATH)
        except Exception:
            pdh.CloseQuery(self._query)
            raise

    def _bps(self, counter: Any) -> int | None:
        try:
            _ctype, value = self._pdh.GetFormattedCounterValue(counter, self._pdh.PDH_FMT_DOUBLE)
            # int() rejects NaN/inf; treated like a failed read.
            bps = int(value)
        except Exception:
            log.debug("disk counter format failed", exc_info=True)
            return None
        return max(0, bps)

    def poll(self) -> dict[str, Any]:
        try:
            self._pdh.CollectQueryData(self._query)
        except Exception:
            log.debug("disk counter collection failed", exc_info=True)
            return {}

        out: dict[str, Any] = {}
        read_bps = self._bps(self._read_counter)
        if read_bps is not None:
            out["disk_read_bps"] = read_bps
        write_bps = self._bps(self._write_counter)
        if write_bps is not None:
            out["disk_write_bps"] = write_bps
        return out

    def close(self) -> None:
        try:
            self._pdh.CloseQuery(self._query)
        except Exception:
            log.debug("pdh close failed", exc_info=True)


def open_disk_adapter(pdh: Any = None) -> _DiskAdapter:
    try:
        if pdh is None:
            import win32pdh as pdh  # type: ignore
        adapter = _PdhDiskAdapter(pdh)
    except Exception as exc:
        log.info(f"disk telemetry unavailable: {exc}", extra={"event": "disk_unavailable"})
        return _DiskAdapter()
    log.info("disk telemetry active", extra={"event": "disk_active"})
    return adapter
