"""Persistent app settings schema and load/save helpers."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from .logging_setup import app_root


CONFIG_VERSION = 1

MIN_INTERVAL_MS = 100
MAX_INTERVAL_MS = 5000


@dataclass
class SamplerConfig:
    interval_ms: int = 500


@dataclass
class UiConfig:
    refresh_ms: int = 500
    always_on_top: bool = False


@dataclass
class DiagnosticsConfig:
    keep_log_files: int = 7


@dataclass
class AppConfig:
    config_version: int = CONFIG_VERSION
    sampler: SamplerConfig = field(default_factory=SamplerConfig)
    ui: UiConfig = field(default_factory=UiConfig)
    diagnostics: DiagnosticsConfig = field(default_factory=DiagnosticsConfig)

    @property
    def sampler_interval_s(self) -> float:
        return self.sampler.interval_ms / 1000.0


def config_path() -> Path:
    return app_root() / "config.json"


def _merge(dataclass_type, raw: dict[str, Any]):
    defaults = dataclass_type()  # type: ignore[misc]
    if not isinstance(raw, dict):
        return defaults
    for k, v in raw.items():
        if hasattr(defaults, k):
            setattr(defaults, k, v)
    return defaults


def _clamp_ms(value: Any, default: int) -> int:
    try:
        ms = int(value)
    except (TypeError, ValueError):
        return default
    return max(MIN_INTERVAL_MS, min(MAX_INTERVAL_MS, ms))


def _normalize(cfg: AppConfig) -> None:
    cfg.sampler.interval_ms = _clamp_ms(cfg.sampler.interval_ms, SamplerConfig.interval_ms)
    cfg.ui.refresh_ms = _clamp_ms(cfg.ui.refresh_ms, UiConfig.refresh_ms)
    cfg.ui.always_on_top = bool(cfg.ui.always_on_top)
    try:
        cfg.diagnostics.keep_log_files = max(2, int(cfg.diagnostics.keep_log_files))
    except (TypeError, ValueError):
        cfg.diagnostics.keep_log_files = DiagnosticsConfig.keep_log_files


def load_config(path: Path | None = None) -> AppConfig:
    path = path or config_path()
    if not path.exists():
        return AppConfig()

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except Exception:
        return AppConfig()
    if not isinstance(raw, dict):
        return AppConfig()

    cfg = AppConfig(
        sampler=_merge(SamplerConfig, raw.get("sampler", {})),
        ui=_merge(UiConfig, raw.get("ui", {})),
        diagnostics=_merge(DiagnosticsConfig, raw.get("diagnostics", {})),
    )
    _normalize(cfg)
    return cfg


def save_config(cfg: AppConfig, path: Path | None = None) -> Path:
    cfg.config_version = CONFIG_VERSION
    path = path or config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(cfg), indent=2, sort_keys=True), encoding="utf-8")
    return path
