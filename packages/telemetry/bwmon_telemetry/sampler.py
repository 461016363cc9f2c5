"""Background sampler publishing merged adapter readings into a SnapshotStore."""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Callable

from .disk import open_disk_adapter
from .gpu import open_gpu_adapter
from .host import HostAdapter
from .models import MetricsSnapshot, SamplerState
from .store import SnapshotStore


log = logging.getLogger("bwmon.telemetry.sampler")

DEFAULT_INTERVAL_S = 0.5

AdapterFactory = Callable[[], Any]


class Sampler:
    """Polls host, GPU and disk adapters once per interval.

    Adapters are opened on the sampler thread itself so their sessions never
    leave it. Each cycle gathers readings without holding the store lock and
    then publishes them in a single swap, so readers see whole cycles only.
    The sleep does not subtract sampling time.
    """

    def __init__(
        self,
        store: SnapshotStore,
        interval_s: float = DEFAULT_INTERVAL_S,
        host_factory: AdapterFactory = HostAdapter,
        gpu_factory: AdapterFactory = open_gpu_adapter,
        disk_factory: AdapterFactory = open_disk_adapter,
    ) -> None:
        self.store = store
        self.interval_s = float(interval_s)
        self._factories: list[tuple[str, AdapterFactory]] = [
            ("host", host_factory),
            ("gpu", gpu_factory),
            ("disk", disk_factory),
        ]
        self._adapters: list[tuple[str, Any]] | None = None
        self._state = SamplerState.INITIALIZING
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def state(self) -> SamplerState:
        return self._state

    @property
    def adapters(self) -> dict[str, Any]:
        return dict(self._adapters or [])

    def open_adapters(self) -> None:
        if self._adapters is not None:
            return
        opened: list[tuple[str, Any]] = []
        for name, factory in self._factories:
            try:
                opened.append((name, factory()))
            except Exception:
                # Factories are expected to degrade on their own; anything else is skipped.
                log.exception(f"adapter open failed name={name}", extra={"event": "adapter_open_failed", "adapter": name})
        self._adapters = opened

    def close_adapters(self) -> None:
        for name, adapter in self._adapters or []:
            try:
                adapter.close()
            except Exception:
                log.exception(f"adapter close failed name={name}", extra={"event": "adapter_close_failed", "adapter": name})
        self._adapters = None

    def collect(self) -> dict[str, Any]:
        updates: dict[str, Any] = {}
        for name, adapter in self._adapters or []:
            try:
                updates.update(adapter.poll())
            except Exception:
                log.exception(f"adapter poll failed name={name}", extra={"event": "adapter_poll_failed", "adapter": name})
        return updates

    def run_cycle(self) -> MetricsSnapshot:
        self.open_adapters()
        updates = self.collect()
        stamp = datetime.now(timezone.utc)

        def _publish(current: MetricsSnapshot) -> MetricsSnapshot:
            return replace(current, cycle=current.cycle + 1, sampled_at=stamp, **updates)

        return self.store.write(_publish)

    def run(self, max_cycles: int | None = None) -> None:
        self._state = SamplerState.INITIALIZING
        self.open_adapters()
        self._state = SamplerState.RUNNING
        log.info("sampler running", extra={"event": "sampler_running"})

        cycles = 0
        try:
            while not self._stop.is_set():
                self.run_cycle()
                cycles += 1
                self._stop.wait(self.interval_s)
                if max_cycles is not None and cycles >= max_cycles:
                    break
        finally:
            self.close_adapters()
            self._state = SamplerState.STOPPED
            log.info("sampler stopped", extra={"event": "sampler_stopped", "cycles": cycles})

    def start(self) -> threading.Thread:
        if self._thread is not None and self._thread.is_alive():
            return self._thread
        self._stop.clear()
        self._thread = threading.Thread(target=self.run, name="bwmon-sampler", daemon=True)
        self._thread.start()
        return self._thread

    def stop(self, timeout: float | None = None) -> None:
        self._stop.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout)
