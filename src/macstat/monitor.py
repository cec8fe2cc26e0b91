"""Metric collection pipeline for macstat."""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import psutil

from macstat.commands import CommandRunner, run_command
from macstat.config import CollectorConfig
from macstat.errors import MissingToolError, UnexpectedOutputError
from macstat.models import (
    IntervalSample,
    MetricRecord,
    ProcessSnapshot,
    TopSnapshot,
    VMSnapshot,
)
from macstat.parsers import (
    parse_disk_sample,
    parse_net_counters,
    parse_page_size,
    parse_process_table,
    parse_swap_usage,
    parse_top,
    parse_vm_stat,
)

logger = logging.getLogger(__name__)

MB = 1024 * 1024

DISK_TOOL_REMEDY = (
    "Install the disk sampler there. It must run as root, and DTrace must be "
    "allowed by System Integrity Protection (csrutil enable --without dtrace)."
)
NET_TOOL_REMEDY = "Build and install the network counter helper there."


@dataclass(slots=True, frozen=True)
class SystemSnapshot:
    """OS state captured once per run and shared by several extractors."""

    top: TopSnapshot
    processes: tuple[ProcessSnapshot, ...]
    vm: VMSnapshot


class SystemMonitor:
    """
    Collects one MetricRecord from macOS command-line tools and psutil.

    Each extractor returns its own tuple of values; collect() concatenates
    them in record order. Any failure raises a MacstatError and no record is
    produced.
    """

    def __init__(
        self,
        config: CollectorConfig | None = None,
        runner: CommandRunner = run_command,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Initialize the SystemMonitor.

        Args:
            config: Paths and intervals. Defaults to CollectorConfig().
            runner: Runs an argv list and returns its stdout.
            sleep: Used for the network interval wait.
        """
        self._config = config or CollectorConfig()
        self._run = runner
        self._sleep = sleep

    @property
    def config(self) -> CollectorConfig:
        return self._config

    def collect(self) -> MetricRecord:
        """Run every extractor and assemble the record."""
        self.check_tools()
        snapshot = self._collect_snapshot()

        values = (
            *self.cpu_metrics(snapshot.top),
            *self.disk_metrics(),
            *self.paging_metrics(snapshot.vm),
            *self.memory_metrics(snapshot.vm),
            *self.swap_metrics(),
            *self.system_metrics(),
            *self.process_state_metrics(snapshot.processes, snapshot.top),
            *self.load_metrics(snapshot.top),
            *self.network_metrics(),
            *self.aggregate_process_metrics(snapshot.processes, snapshot.top),
            *self.topology_metrics(),
        )
        return MetricRecord(values)

    def check_tools(self) -> None:
        """Fail before sampling anything if a helper program is missing."""
        self._require_tool(self._config.disk_tool_path, DISK_TOOL_REMEDY)
        self._require_tool(self._config.net_tool_path, NET_TOOL_REMEDY)

    def _require_tool(self, path: Path, remedy: str) -> None:
        if not path.exists():
            raise MissingToolError(str(path), remedy)

    # Snapshot sources

    def _collect_snapshot(self) -> SystemSnapshot:
        """Capture the samples several extractors read from."""
        return SystemSnapshot(
            top=self._collect_top(),
            processes=self._collect_processes(),
            vm=self._collect_vm(),
        )

    def _collect_top(self) -> TopSnapshot:
        output = self._run(
            ["top", "-l", "2", "-n", "0", "-s", str(self._config.top_window)]
        )
        return parse_top(output)

    def _collect_processes(self) -> tuple[ProcessSnapshot, ...]:
        # State is read from ps since top's summary doesn't break it down.
        return parse_process_table(self._run(["ps", "-axo", "pid=,pcpu=,state="]))

    def _collect_vm(self) -> VMSnapshot:
        page_size = parse_page_size(self._run(["pagesize"]))
        output = self._run(["vm_stat", "-c", "2", str(self._config.vm_interval)])
        return parse_vm_stat(output, page_size)

    # Extractors, in record order

    def cpu_metrics(
        self, top: TopSnapshot
    ) -> tuple[float, float, float, int, int, int, int, int]:
        """user, sys, idle, then wait/hiq/siq/steal/guest which macOS doesn't report."""
        return (
            round(top.cpu_user, 3),
            round(top.cpu_sys, 3),
            round(top.cpu_idle, 3),
            0, 0, 0, 0, 0,
        )

    def disk_metrics(self) -> tuple[float, float]:
        """Read and write bytes/s, sampled by the disk helper over disk_interval."""
        interval = self._config.disk_interval
        path = self._config.disk_tool_path
        self._require_tool(path, DISK_TOOL_REMEDY)

        kb_read, kb_written = parse_disk_sample(self._run([str(path), str(interval), "1"]))
        metrics = (
            round(kb_read * 1024 / interval, 3),
            round(kb_written * 1024 / interval, 3),
        )
        logger.debug("disk read/write %s", metrics)
        return metrics

    def paging_metrics(self, vm: VMSnapshot) -> tuple[int, int]:
        return vm.pageins * vm.page_size, vm.pageouts * vm.page_size

    def memory_metrics(self, vm: VMSnapshot, total: int | None = None) -> tuple[int, int, int, int]:
        """
        Used, buffers, cached and free memory in bytes.

        Cached is whatever remains of physical memory after used and free.
        It is not clamped, so counters that move during sampling can make it
        negative.
        """
        if total is None:
            total = psutil.virtual_memory().total
        app_memory = vm.anonymous - vm.purgeable
        used = (app_memory + vm.wired + vm.compressed) * vm.page_size
        free = vm.free * vm.page_size
        cached = total - free - used
        buffers = vm.purgeable * vm.page_size
        logger.debug("memory total=%d used=%d cached=%d free=%d", total, used, cached, free)
        return used, buffers, cached, free

    def swap_metrics(self) -> tuple[int, int]:
        used_mb, free_mb = parse_swap_usage(self._run(["sysctl", "vm.swapusage"]))
        return round(used_mb * MB), round(free_mb * MB)

    def system_metrics(self) -> tuple[int, int]:
        # interrupts and context switches, not available without kernel access
        return 0, 0

    def process_state_metrics(
        self, processes: tuple[ProcessSnapshot, ...], top: TopSnapshot
    ) -> tuple[int, int, int]:
        """
        Runnable processes, processes in uninterruptible wait, total threads.

        A process counts when its state string contains the state letter
        anywhere, so a composite state like "RU" counts in both columns.
        """
        running = sum(1 for proc in processes if "R" in proc.state)
        blocked = sum(1 for proc in processes if "U" in proc.state)
        return running, blocked, top.threads_total

    def load_metrics(self, top: TopSnapshot) -> tuple[float, float, float]:
        one, five, fifteen = top.load_avg
        return round(one, 3), round(five, 3), round(fifteen, 3)

    def network_metrics(self) -> tuple[float, float]:
        """Received and sent bytes/s over net_interval."""
        interval = self._config.net_interval
        path = self._config.net_tool_path
        self._require_tool(path, NET_TOOL_REMEDY)

        recv_start, sent_start = parse_net_counters(self._run([str(path)]))
        self._sleep(interval)
        recv_end, sent_end = parse_net_counters(self._run([str(path)]))

        recv = IntervalSample(recv_start, recv_end, interval)
        sent = IntervalSample(sent_start, sent_end, interval)
        metrics = round(recv.rate(), 1), round(sent.rate(), 1)
        logger.debug("network recv/send %s", metrics)
        return metrics

    def aggregate_process_metrics(
        self, processes: tuple[ProcessSnapshot, ...], top: TopSnapshot
    ) -> tuple[int, int]:
        """Total processes and the pid using the most CPU (lowest pid on ties)."""
        if not processes:
            raise UnexpectedOutputError("ps", "empty process table")
        busiest = sorted(processes, key=lambda p: (-p.cpu_percent, p.pid))[0]
        return top.processes_total, busiest.pid

    def topology_metrics(self) -> tuple[int, int, int]:
        """Logical CPUs, physical CPUs, and dies (always 1 on macOS)."""
        logical = psutil.cpu_count(logical=True)
        physical = psutil.cpu_count(logical=False)
        if logical is None or physical is None:
            raise UnexpectedOutputError("psutil", "CPU count unavailable")
        return logical, physical, 1
