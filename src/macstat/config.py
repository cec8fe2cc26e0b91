"""Collector configuration."""

from dataclasses import dataclass
from pathlib import Path

DEFAULT_BASE_DIR = Path("/usr/local/macstat")


@dataclass(slots=True, frozen=True)
class CollectorConfig:
    """
    Paths and sampling intervals for one collector run.

    Intervals are in seconds. The disk sampler and network counter helpers
    are looked up as `<tool_dir>/<tool_name>`.
    """

    base_dir: Path = DEFAULT_BASE_DIR
    log_dir: Path = DEFAULT_BASE_DIR / "log"
    log_name: str = "macstat.log"
    disk_tool_dir: Path = DEFAULT_BASE_DIR / "bin"
    disk_tool_name: str = "iostat.d"
    net_tool_dir: Path = DEFAULT_BASE_DIR / "bin"
    net_tool_name: str = "netcounters"
    top_window: int = 1
    vm_interval: int = 1
    disk_interval: int = 5
    net_interval: int = 5

    def __post_init__(self) -> None:
        for name in ("top_window", "vm_interval", "disk_interval", "net_interval"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")

    @classmethod
    def for_base_dir(cls, base_dir: str | Path, **overrides) -> "CollectorConfig":
        """Build a config whose log and tool directories live under base_dir."""
        base = Path(base_dir)
        values = {
            "base_dir": base,
            "log_dir": base / "log",
            "disk_tool_dir": base / "bin",
            "net_tool_dir": base / "bin",
        }
        values.update(overrides)
        return cls(**values)

    @property
    def log_path(self) -> Path:
        return Path(self.log_dir) / self.log_name

    @property
    def disk_tool_path(self) -> Path:
        return Path(self.disk_tool_dir) / self.disk_tool_name

    @property
    def net_tool_path(self) -> Path:
        return Path(self.net_tool_dir) / self.net_tool_name
