"""CLI entrypoints for the Bandwidth Monitor window, console watcher, and diagnostics."""

from __future__ import annotations

import argparse
import json
import time
from dataclasses import asdict
from pathlib import Path

from bwmon_core import DiagnosticsExporter, build_doctor_payload, load_config
from bwmon_core.logging_setup import configure_logging, get_logger
from bwmon_telemetry import Sampler, SnapshotStore

from .view import format_console


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, sort_keys=True, default=str))


def cmd_run(_args: argparse.Namespace) -> int:
    from .app import run_gui

    return run_gui()


def cmd_watch(args: argparse.Namespace) -> int:
    cfg = load_config()
    store = SnapshotStore()
    sampler = Sampler(store, interval_s=cfg.sampler_interval_s)
    sampler.start()

    refresh_s = cfg.ui.refresh_ms / 1000.0
    deadline = None if args.seconds is None else time.monotonic() + args.seconds
    last_cycle = -1
    try:
        while deadline is None or time.monotonic() < deadline:
            snap = store.read()
            if snap.cycle != last_cycle and snap.cycle > 0:
                print(format_console(snap), flush=True)
                last_cycle = snap.cycle
            time.sleep(refresh_s)
    except KeyboardInterrupt:
        pass
    finally:
        sampler.stop(timeout=2.0)
    return 0


def cmd_snapshot(args: argparse.Namespace) -> int:
    cfg = load_config()
    store = SnapshotStore()
    sampler = Sampler(store, interval_s=cfg.sampler_interval_s)
    try:
        for i in range(max(1, args.cycles)):
            if i:
                time.sleep(sampler.interval_s)
            sampler.run_cycle()
    finally:
        sampler.close_adapters()
    _print_json(asdict(store.read()))
    return 0


def cmd_doctor(args: argparse.Namespace) -> int:
    cfg = load_config()
    payload = build_doctor_payload(cfg)

    if args.export:
        exporter = DiagnosticsExporter()
        out_dir = Path(args.out_dir).expanduser().resolve() if args.out_dir else None
        bundle = exporter.bundle(cfg=cfg, doctor_payload=payload, output_dir=out_dir)
        payload["diagnostics_bundle"] = str(bundle)

    _print_json(payload)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bwmonitor", description="Hardware bandwidth monitor")
    sub = parser.add_subparsers(dest="command", required=True)

    run_cmd = sub.add_parser("run", help="Open the monitor window")
    run_cmd.set_defaults(func=cmd_run)

    watch_cmd = sub.add_parser("watch", help="Print live readings to the console")
    watch_cmd.add_argument("--seconds", type=float, default=None, help="Stop after this many seconds")
    watch_cmd.set_defaults(func=cmd_watch)

    snap_cmd = sub.add_parser("snapshot", help="Sample synchronously and print the snapshot as JSON")
    snap_cmd.add_argument("--cycles", type=int, default=2, help="Sampling cycles to run before printing")
    snap_cmd.set_defaults(func=cmd_snapshot)

    doctor_cmd = sub.add_parser("doctor", help="Print diagnostics and adapter availability")
    doctor_cmd.add_argument("--export", action="store_true", help="Export offline diagnostics bundle")
    doctor_cmd.add_argument("--out-dir", default=None, help="Optional output directory for diagnostics bundle")
    doctor_cmd.set_defaults(func=cmd_doctor)

    return parser


def main(argv: list[str] | None = None) -> int:
    cfg = load_config()
    configure_logging(keep_files=cfg.diagnostics.keep_log_files, console=False)
    parser = build_parser()
    args = parser.parse_args(argv)
    get_logger().info(f"command {args.command}", extra={"event": "cli_command"})
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
