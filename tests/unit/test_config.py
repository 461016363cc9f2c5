import json
import sys
import tempfile
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "telemetry"))
sys.path.insert(0, str(ROOT / "packages" / "core"))

from bwmon_core.config import AppConfig, load_config, save_config


class ConfigTests(unittest.TestCase):
    def test_load_default_when_missing(self):
        with tempfile.TemporaryDirectory() as tmp:
            cfg = load_config(Path(tmp) / "missing.json")
            self.assertIsInstance(cfg, AppConfig)
            self.assertEqual(cfg.sampler.interval_ms, 500)
            self.assertEqual(cfg.ui.refresh_ms, 500)
            self.assertEqual(cfg.sampler_interval_s, 0.5)
            self.assertFalse(cfg.ui.always_on_top)

    def test_save_and_reload(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "nested" / "config.json"
            cfg = load_config(path)
            cfg.sampler.interval_ms = 750
            cfg.ui.always_on_top = True
            save_config(cfg, path)
            reloaded = load_config(path)
            self.assertEqual(reloaded.sampler.interval_ms, 750)
            self.assertTrue(reloaded.ui.always_on_top)

    def test_intervals_are_clamped(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            path.write_text(json.dumps({"sampler": {"interval_ms": 5}, "ui": {"refresh_ms": 999999}}), encoding="utf-8")
            cfg = load_config(path)
            self.assertEqual(cfg.sampler.interval_ms, 100)
            self.assertEqual(cfg.ui.refresh_ms, 5000)

    def test_bad_values_fall_back(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            path.write_text(
                json.dumps({"sampler": {"interval_ms": "fast", "unknown": 1}, "diagnostics": {"keep_log_files": None}}),
                encoding="utf-8",
            )
            cfg = load_config(path)
            self.assertEqual(cfg.sampler.interval_ms, 500)
            self.assertFalse(hasattr(cfg.sampler, "unknown"))
            self.assertEqual(cfg.diagnostics.keep_log_files, 7)

    def test_unreadable_file_gives_defaults(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            path.write_text("{not json", encoding="utf-8")
            self.assertEqual(load_config(path), AppConfig())


if __name__ == "__main__":
    unittest.main()
