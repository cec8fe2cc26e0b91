"""Data models for macstat."""

from dataclasses import dataclass

# Record layout, in the order the downstream parser reads it.
FIELDS: tuple[tuple[str, str], ...] = (
    ("cpuUser", "CPU time in user mode (%)"),
    ("cpuSys", "CPU time in system mode (%)"),
    ("cpuIdle", "CPU idle time (%)"),
    ("cpuWait", "CPU I/O wait (%), unsupported, always 0"),
    ("cpuHiq", "CPU hardware interrupts (%), unsupported, always 0"),
    ("cpuSiq", "CPU software interrupts (%), unsupported, always 0"),
    ("cpuSteal", "CPU steal time (%), unsupported, always 0"),
    ("cpuGuest", "CPU guest time (%), unsupported, always 0"),
    ("diskRead", "Disk read (bytes/s)"),
    ("diskWrite", "Disk write (bytes/s)"),
    ("pagingIn", "Pages paged in (bytes)"),
    ("pagingOut", "Pages paged out (bytes)"),
    ("memUsed", "Used memory: app + wired + compressed (bytes)"),
    ("memBuff", "Purgeable memory (bytes)"),
    ("memCach", "Cached memory: total - free - used (bytes)"),
    ("memFree", "Free memory (bytes)"),
    ("swapUsed", "Swap used (bytes)"),
    ("swapFree", "Swap free (bytes)"),
    ("sysInt", "Interrupts, unsupported, always 0"),
    ("sysCsw", "Context switches, unsupported, always 0"),
    ("procsRun", "Runnable processes"),
    ("procsBlk", "Processes in uninterruptible wait"),
    ("procsThreads", "Total threads"),
    ("loadAvg1m", "Load average, 1 minute"),
    ("loadAvg5m", "Load average, 5 minutes"),
    ("loadAvg15m", "Load average, 15 minutes"),
    ("netRecv", "Network received (bytes/s)"),
    ("netSend", "Network sent (bytes/s)"),
    ("procsTotal", "Total processes"),
    ("topCpuPid", "PID of the process using the most CPU"),
    ("cpuLogical", "Logical CPUs"),
    ("cpuPhysical", "Physical CPUs"),
    ("cpuDies", "CPU dies, not queryable, always 1"),
)

FIELD_NAMES: tuple[str, ...] = tuple(name for name, _ in FIELDS)
RECORD_LENGTH = len(FIELDS)

Number = int | float


@dataclass(slots=True, frozen=True)
class ProcessSnapshot:
    """One row of the process table."""

    pid: int
    cpu_percent: float
    state: str  # 'R', 'S', 'U', 'Z', plus flags such as '+', 's', '<'


@dataclass(slots=True, frozen=True)
class TopSnapshot:
    """System-wide aggregates from one top sample."""

    cpu_user: float
    cpu_sys: float
    cpu_idle: float
    load_avg: tuple[float, float, float]
    processes_total: int
    threads_total: int


@dataclass(slots=True, frozen=True)
class VMSnapshot:
    """Virtual-memory counters from one vm_stat interval row."""

    free: int
    active: int
    inactive: int
    wired: int
    purgeable: int
    anonymous: int
    compressed: int
    pageins: int
    pageouts: int
    page_size: int


@dataclass(slots=True, frozen=True)
class IntervalSample:
    """Two readings of a cumulative counter taken `interval` seconds apart."""

    start: float
    end: float
    interval: float

    def rate(self) -> float:
        """Per-second rate over the interval."""
        return (self.end - self.start) / self.interval


@dataclass(slots=True, frozen=True)
class MetricRecord:
    """
    One collector run, as the ordered values written to the log.

    Consumers parse the line by position, so the length is fixed at
    RECORD_LENGTH and unsupported metrics are kept as 0.
    """

    values: tuple[Number, ...]

    def __post_init__(self) -> None:
        if len(self.values) != RECORD_LENGTH:
            raise ValueError(
                f"MetricRecord needs {RECORD_LENGTH} values, got {len(self.values)}"
            )

    def to_line(self) -> str:
        """Comma-joined values, no quoting."""
        return ",".join(str(value) for value in self.values)

    def as_dict(self) -> dict[str, Number]:
        """Values keyed by field name."""
        return dict(zip(FIELD_NAMES, self.values))
