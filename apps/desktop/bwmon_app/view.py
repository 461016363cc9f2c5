"""Display strings for a snapshot, shared by the window and the console watcher."""

from __future__ import annotations

from dataclasses import astuple, dataclass

from bwmon_telemetry import MetricsSnapshot


TITLE = "Bandwidth Monitor"
HEADING = "Hardware Bandwidth Monitor"
STORAGE_HEADING = "Storage Bandwidth (Total Disk I/O)"
FOOTER = "Monitor detects bottlenecks in data movement between NVMe, RAM, and GPU."


@dataclass(frozen=True)
class PanelText:
    cpu: str
    ram: str
    gpu: str
    vram: str
    pcie_tx: str
    pcie_rx: str
    disk_read: str
    disk_write: str

    def lines(self) -> list[str]:
        return list(astuple(self))


def mb_per_s(bps: int) -> str:
    return f"{bps / 1024 / 1024:.2f} MB/s"


def format_panel(snap: MetricsSnapshot) -> PanelText:
    return PanelText(
        cpu=f"CPU Usage: {snap.cpu_usage_percent:.1f}%",
        ram=f"RAM: {snap.ram_used_gb:.1f}/{snap.ram_total_gb:.1f} GB",
        gpu=f"GPU: {snap.gpu_name}",
        vram=f"VRAM: {snap.gpu_vram_used_mb}/{snap.gpu_vram_total_mb} MB",
        pcie_tx=f"PCIe TX (Send): {mb_per_s(snap.gpu_pcie_tx_bps)}",
        pcie_rx=f"PCIe RX (Receive): {mb_per_s(snap.gpu_pcie_rx_bps)}",
        disk_read=f"Global Read: {mb_per_s(snap.disk_read_bps)}",
        disk_write=f"Global Write: {mb_per_s(snap.disk_write_bps)}",
    )


def format_console(snap: MetricsSnapshot) -> str:
    panel = format_panel(snap)
    stamp = snap.sampled_at.astimezone().strftime("%H:%M:%S") if snap.sampled_at else "--:--:--"
    return " | ".join([stamp, panel.cpu, panel.ram, panel.gpu, panel.vram, panel.pcie_tx, panel.pcie_rx, panel.disk_read, panel.disk_write])
