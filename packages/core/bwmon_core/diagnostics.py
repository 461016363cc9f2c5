"""Adapter probing and offline diagnostics bundles."""

from __future__ import annotations

import json
import platform
import tempfile
import zipfile
from dataclasses import asdict, is_dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable

from bwmon_telemetry import MetricsSnapshot, open_disk_adapter, open_gpu_adapter

from .config import AppConfig, config_path
from .logging_setup import log_dir


def _jsonable(value: Any) -> Any:
    if is_dataclass(value):
        return asdict(value)
    if isinstance(value, (Path, datetime)):
        return str(value)
    return value


def probe_adapters(
    gpu_factory: Callable[[], Any] = open_gpu_adapter,
    disk_factory: Callable[[], Any] = open_disk_adapter,
) -> dict[str, Any]:
    gpu = gpu_factory()
    try:
        gpu_reading = gpu.poll()
    finally:
        gpu.close()

    disk = disk_factory()
    try:
        disk_active = bool(disk.active)
    finally:
        disk.close()

    return {
        "gpu": {
            "active": bool(gpu.active),
            "name": gpu_reading.get("gpu_name"),
            "vram_total_mb": gpu_reading.get("gpu_vram_total_mb"),
        },
        "disk": {"active": disk_active},
    }


def build_doctor_payload(cfg: AppConfig, probe: bool = True, **probe_kwargs: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "ts_utc": datetime.now(timezone.utc).isoformat(),
        "platform": platform.platform(),
        "python": platform.python_version(),
        "config": asdict(cfg),
    }
    if probe:
        payload["adapters"] = probe_adapters(**probe_kwargs)
    return payload


class DiagnosticsExporter:
    def __init__(self, app_name: str = "Bandwidth Monitor") -> None:
        self.app_name = app_name

    def bundle(
        self,
        cfg: AppConfig,
        doctor_payload: dict[str, Any],
        snapshot: MetricsSnapshot | None = None,
        output_dir: Path | None = None,
    ) -> Path:
        output_base = output_dir or Path(tempfile.gettempdir())
        output_base.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now().strftime("%Y%m%d-%H%M%S")
        zip_path = output_base / f"bwmonitor-diagnostics-{stamp}.zip"

        logs = sorted(log_dir().glob("*.log*"))

        with zipfile.ZipFile(zip_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            manifest = {
                "app": self.app_name,
                "created_utc": datetime.now(timezone.utc).isoformat(),
                "host": platform.platform(),
                "python": platform.python_version(),
                "config_path": str(config_path()),
                "log_dir": str(log_dir()),
            }
            zf.writestr("manifest.json", json.dumps(manifest, indent=2, sort_keys=True))
            zf.writestr("doctor.json", json.dumps(doctor_payload, indent=2, sort_keys=True, default=_jsonable))
            zf.writestr("config.json", json.dumps(asdict(cfg), indent=2, sort_keys=True))
            if snapshot is not None:
                zf.writestr("snapshot.json", json.dumps(asdict(snapshot), indent=2, sort_keys=True, default=_jsonable))

            for item in logs:
                zf.write(item, arcname=f"logs/{item.name}")

        return zip_path
