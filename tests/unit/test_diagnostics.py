import json
import sys
import tempfile
import unittest
import zipfile
from pathlib import Path
from unittest import mock

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "telemetry"))
sys.path.insert(0, str(ROOT / "packages" / "core"))

from bwmon_core import diagnostics
from bwmon_core.config import load_config
from bwmon_core.diagnostics import DiagnosticsExporter, build_doctor_payload, probe_adapters
from bwmon_telemetry import MetricsSnapshot, open_disk_adapter, open_gpu_adapter

from fakes import FakeNvml, FakePdh, FakePdhError


class DiagnosticsTests(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        logs = Path(self.tmp.name) / "logs"
        logs.mkdir()
        (logs / "bwmonitor.log").write_text("{}\n", encoding="utf-8")
        patcher = mock.patch.object(diagnostics, "log_dir", lambda: logs)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_probe_reports_active_gpu_and_closes(self):
        nvml = FakeNvml(name="RTX Test", vram_total=4 * 1024**3)
        pdh = FakePdh()
        result = probe_adapters(gpu_factory=lambda: open_gpu_adapter(nvml), disk_factory=lambda: open_disk_adapter(pdh))
        self.assertEqual(result["gpu"], {"active": True, "name": "RTX Test", "vram_total_mb": 4096})
        self.assertEqual(result["disk"], {"active": True})
        self.assertEqual(nvml.calls["shutdown"], 1)
        self.assertEqual(pdh.calls["close"], 1)

    def test_probe_reports_inert_disk(self):
        pdh = FakePdh(open_error=FakePdhError("missing"))
        result = probe_adapters(gpu_factory=lambda: open_gpu_adapter(FakeNvml()), disk_factory=lambda: open_disk_adapter(pdh))
        self.assertFalse(result["disk"]["active"])

    def test_payload_without_probe(self):
        cfg = load_config(Path(self.tmp.name) / "missing.json")
        payload = build_doctor_payload(cfg, probe=False)
        self.assertNotIn("adapters", payload)
        self.assertEqual(payload["config"]["sampler"]["interval_ms"], 500)

    def test_bundle_exports_zip(self):
        cfg = load_config(Path(self.tmp.name) / "missing.json")
        doctor = build_doctor_payload(cfg, probe=False)
        snap = MetricsSnapshot(disk_read_bps=42)
        out = Path(self.tmp.name) / "out"

        bundle = DiagnosticsExporter().bundle(cfg=cfg, doctor_payload=doctor, snapshot=snap, output_dir=out)
        self.assertTrue(bundle.exists())
        with zipfile.ZipFile(bundle, "r") as zf:
            names = set(zf.namelist())
            self.assertIn("manifest.json", names)
            self.assertIn("doctor.json", names)
            self.assertIn("config.json", names)
            self.assertIn("logs/bwmonitor.log", names)
            self.assertEqual(json.loads(zf.read("snapshot.json"))["disk_read_bps"], 42)
            self.assertEqual(json.loads(zf.read("config.json"))["sampler"]["interval_ms"], 500)


if __name__ == "__main__":
    unittest.main()
