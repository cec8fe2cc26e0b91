"""Shared fixtures: captured macOS command output and a fake command runner."""

from collections import namedtuple
from pathlib import Path

import psutil
import pytest

from macstat.config import CollectorConfig
from macstat.errors import CommandError

TOP_OUTPUT = """\
Processes: 498 total, 3 running, 495 sleeping, 2087 threads
2026/10/19 09:30:00
Load Avg: 2.10, 1.95, 1.80
CPU usage: 12.50% user, 8.33% sys, 79.16% idle
SharedLibs: 412M resident, 71M data, 38M linkedit.
MemRegions: 155320 total, 5032M resident, 205M private, 1814M shared.
PhysMem: 15G used (2388M wired), 1123M unused.
VM: 221T vsize, 4100M framework vsize, 0(0) swapins, 0(0) swapouts.
Networks: packets: 1204312/1290M in, 872910/201M out.
Disks: 2189410/41G read, 1200511/29G written.

Processes: 501 total, 4 running, 497 sleeping, 2104 threads
2026/10/19 09:30:01
Load Avg: 2.18, 1.97, 1.81
CPU usage: 7.1234% user, 4.5678% sys, 88.3088% idle
SharedLibs: 412M resident, 71M data, 38M linkedit.
MemRegions: 155322 total, 5032M resident, 205M private, 1814M shared.
PhysMem: 15G used (2388M wired), 1120M unused.
VM: 221T vsize, 4100M framework vsize, 0(0) swapins, 0(0) swapouts.
Networks: packets: 12/4K in, 9/2K out.
Disks: 30/512K read, 12/256K written.
"""

PS_OUTPUT = """\
    1   0.3 Ss
  101  12.5 R
  202  12.5 R+
  303   0.0 U
  404   1.0 RU
  505   0.0 S
"""

VM_STAT_OUTPUT = """\
Mach Virtual Memory Statistics: (page size of 4096 bytes)
    free   active   specul inactive throttle    wired  prgable   faults     copy    0fill reactive   purged file-backed anonymous cmprssed cmprssor  dcomprs   comprs  pageins  pageout  swapins swapouts
   12000   300000     5000   290000        0   110000     4000  900000K   12000K  500000K     1000    20000      250000    340000    90000    30000   100000   200000  1500000     3000        0        0
     100   300500     5000   290100        0      200       50      900       12      500        0        0      250100       500       10    30000        0        0       12        3        0        0
"""

PAGESIZE_OUTPUT = "4096\n"

SWAP_OUTPUT = "vm.swapusage: total = 2048.00M  used = 1024.25M  free = 1023.75M  (encrypted)\n"

DISK_OUTPUT = """\
  DEVICE    RPS    WPS  RMS  WMS  RSIZE  WSIZE  R_KB  W_OPS  W_AVG  W_KB
  total      12     30  0.4  0.6      4      8  2560     30      8  5120
"""

NET_OUTPUTS = [
    "total 1000000 in 500000 out\n",
    "total 1006144 in 501536 out\n",
]

TOTAL_MEMORY = 3_000_000

EXPECTED_LINE = (
    "7.123,4.568,88.309,0,0,0,0,0,"
    "524288.0,1048576.0,"
    "49152,12288,"
    "2703360,204800,-112960,409600,"
    "1074003968,1073479680,"
    "0,0,"
    "3,2,2104,"
    "2.18,1.97,1.81,"
    "1228.8,307.2,"
    "501,101,"
    "8,4,1"
)


class FakeRunner:
    """
    Stands in for run_command, answering from captured output.

    Outputs are keyed by the basename of argv[0]. A list value is consumed one
    entry per call; a CommandError value is raised.
    """

    def __init__(self, outputs: dict) -> None:
        self.outputs = outputs
        self.calls: list[list[str]] = []

    def __call__(self, argv: list[str]) -> str:
        self.calls.append(list(argv))
        output = self.outputs[Path(argv[0]).name]
        if isinstance(output, list):
            output = output.pop(0)
        if isinstance(output, CommandError):
            raise output
        return output

    def commands(self) -> list[str]:
        return [Path(argv[0]).name for argv in self.calls]


@pytest.fixture
def config(tmp_path):
    """Config rooted in tmp_path, with both helper programs installed."""
    cfg = CollectorConfig.for_base_dir(tmp_path)
    cfg.disk_tool_dir.mkdir(parents=True)
    cfg.disk_tool_path.write_text("#!/bin/sh\n")
    cfg.net_tool_path.write_text("#!/bin/sh\n")
    return cfg


@pytest.fixture
def runner(config):
    return FakeRunner(
        {
            "top": TOP_OUTPUT,
            "ps": PS_OUTPUT,
            "pagesize": PAGESIZE_OUTPUT,
            "vm_stat": VM_STAT_OUTPUT,
            "sysctl": SWAP_OUTPUT,
            config.disk_tool_name: DISK_OUTPUT,
            config.net_tool_name: list(NET_OUTPUTS),
        }
    )


@pytest.fixture
def sleeps():
    """Records the waits the monitor asks for instead of sleeping."""
    return []


@pytest.fixture
def fake_host(monkeypatch):
    """Pin the psutil values the monitor reads: 3,000,000 bytes RAM, 8 logical / 4 physical CPUs."""
    memory = namedtuple("svmem", "total available percent used free")
    monkeypatch.setattr(
        psutil, "virtual_memory", lambda: memory(TOTAL_MEMORY, 0, 0.0, 0, 0)
    )
    monkeypatch.setattr(psutil, "cpu_count", lambda logical=True: 8 if logical else 4)
