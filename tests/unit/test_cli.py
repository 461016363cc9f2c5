import io
import json
import sys
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from unittest import mock

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "apps" / "desktop"))
sys.path.insert(0, str(ROOT / "packages" / "core"))
sys.path.insert(0, str(ROOT / "packages" / "telemetry"))

from bwmon_app import cli
from bwmon_app.cli import build_parser
from bwmon_core.config import AppConfig
from bwmon_telemetry import Sampler

from fakes import StaticAdapter


class CliTests(unittest.TestCase):
    def test_run_command(self):
        args = build_parser().parse_args(["run"])
        self.assertEqual(args.command, "run")

    def test_watch_command(self):
        args = build_parser().parse_args(["watch", "--seconds", "2.5"])
        self.assertEqual(args.command, "watch")
        self.assertEqual(args.seconds, 2.5)

    def test_snapshot_defaults_to_two_cycles(self):
        args = build_parser().parse_args(["snapshot"])
        self.assertEqual(args.cycles, 2)

    def test_doctor_command(self):
        args = build_parser().parse_args(["doctor", "--export", "--out-dir", "/tmp/x"])
        self.assertTrue(args.export)
        self.assertEqual(args.out_dir, "/tmp/x")

    def test_snapshot_prints_json(self):
        adapter = StaticAdapter({"cpu_usage_percent": 7.5, "disk_read_bps": 100})

        def fake_sampler(store, interval_s):
            return Sampler(
                store,
                interval_s=0.0,
                host_factory=lambda: adapter,
                gpu_factory=StaticAdapter,
                disk_factory=StaticAdapter,
            )

        out = io.StringIO()
        with mock.patch.object(cli, "load_config", AppConfig), mock.patch.object(cli, "Sampler", side_effect=fake_sampler):
            with redirect_stdout(out):
                rc = cli.cmd_snapshot(build_parser().parse_args(["snapshot", "--cycles", "3"]))

        self.assertEqual(rc, 0)
        data = json.loads(out.getvalue())
        self.assertEqual(data["cycle"], 3)
        self.assertEqual(data["cpu_usage_percent"], 7.5)
        self.assertEqual(data["gpu_name"], "Detecting...")
        self.assertEqual(adapter.closed, 1)


if __name__ == "__main__":
    unittest.main()
