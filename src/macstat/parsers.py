"""
Parsers for the text output of the commands the collector runs.

Every parser checks the layout it relies on and raises
UnexpectedOutputError when the output does not match, instead of letting an
IndexError or ValueError escape from deep inside the arithmetic.
"""

import re

from macstat.errors import UnexpectedOutputError
from macstat.models import ProcessSnapshot, TopSnapshot, VMSnapshot

_PROCESSES_RE = re.compile(r"^Processes:\s*(\d+) total.*?(\d+) threads", re.MULTILINE)
_LOAD_RE = re.compile(r"^Load Avg:\s*([\d.]+),\s*([\d.]+),\s*([\d.]+)", re.MULTILINE)
_CPU_RE = re.compile(
    r"^CPU usage:\s*([\d.]+)% user,\s*([\d.]+)% sys,\s*([\d.]+)% idle",
    re.MULTILINE,
)

# vm_stat column header -> VMSnapshot field
_VM_COLUMNS = {
    "free": "free",
    "active": "active",
    "inactive": "inactive",
    "wired": "wired",
    "prgable": "purgeable",
    "anonymous": "anonymous",
    "cmprssed": "compressed",
    "pageins": "pageins",
    "pageout": "pageouts",
}

_MAGNITUDES = {"K": 1000, "M": 1000**2, "G": 1000**3}


def _number(tool: str, token: str, kind=float):
    try:
        return kind(token)
    except ValueError:
        raise UnexpectedOutputError(tool, f"{token!r} is not a number") from None


def parse_top(output: str) -> TopSnapshot:
    """
    Parse `top -l 2 -n 0` output.

    Only the last sample is used: the first one top prints is averaged
    since boot.
    """
    samples = output.split("Processes:")
    if len(samples) < 2:
        raise UnexpectedOutputError("top", "no 'Processes:' line")
    sample = "Processes:" + samples[-1]

    processes = _PROCESSES_RE.search(sample)
    load = _LOAD_RE.search(sample)
    cpu = _CPU_RE.search(sample)
    if processes is None:
        raise UnexpectedOutputError("top", "no process and thread totals")
    if load is None:
        raise UnexpectedOutputError("top", "no 'Load Avg:' line")
    if cpu is None:
        raise UnexpectedOutputError("top", "no 'CPU usage:' line")

    return TopSnapshot(
        cpu_user=float(cpu.group(1)),
        cpu_sys=float(cpu.group(2)),
        cpu_idle=float(cpu.group(3)),
        load_avg=(float(load.group(1)), float(load.group(2)), float(load.group(3))),
        processes_total=int(processes.group(1)),
        threads_total=int(processes.group(2)),
    )


def parse_process_table(output: str) -> tuple[ProcessSnapshot, ...]:
    """Parse `ps -axo pid=,pcpu=,state=` output, one process per line."""
    processes = []
    for line in output.splitlines():
        tokens = line.split()
        if not tokens:
            continue
        if len(tokens) != 3:
            raise UnexpectedOutputError("ps", f"expected pid, pcpu and state in {line!r}")
        pid, pcpu, state = tokens
        processes.append(
            ProcessSnapshot(
                pid=_number("ps", pid, int),
                cpu_percent=_number("ps", pcpu),
                state=state,
            )
        )
    return tuple(processes)


def _page_count(token: str) -> int:
    # vm_stat shortens wide columns, e.g. "1234K"
    if token and token[-1] in _MAGNITUDES:
        return _number("vm_stat", token[:-1], int) * _MAGNITUDES[token[-1]]
    return _number("vm_stat", token, int)


def parse_vm_stat(output: str, page_size: int) -> VMSnapshot:
    """
    Parse `vm_stat -c 2 <interval>` output.

    The first data row holds totals since boot and is discarded; the second
    row is the one sampled over the interval.
    """
    lines = [line.split() for line in output.splitlines()]
    for index, tokens in enumerate(lines):
        if "free" in tokens and "pageins" in tokens:
            header = tokens
            rows = [row for row in lines[index + 1:] if len(row) == len(header)]
            break
    else:
        raise UnexpectedOutputError("vm_stat", "no column header")

    missing = [column for column in _VM_COLUMNS if column not in header]
    if missing:
        raise UnexpectedOutputError("vm_stat", f"missing columns {', '.join(missing)}")
    if len(rows) < 2:
        raise UnexpectedOutputError("vm_stat", f"expected 2 samples, got {len(rows)}")

    row = dict(zip(header, rows[1]))
    counts = {field: _page_count(row[column]) for column, field in _VM_COLUMNS.items()}
    return VMSnapshot(page_size=page_size, **counts)


def parse_page_size(output: str) -> int:
    """Parse `pagesize` output."""
    page_size = _number("pagesize", output.strip(), int)
    if page_size <= 0:
        raise UnexpectedOutputError("pagesize", f"page size {page_size} is not positive")
    return page_size


def parse_disk_sample(output: str) -> tuple[float, float]:
    """
    Parse the disk sampler's output into (KB read, KB written).

    The sampler prints a header line, then one aggregate row whose 8th and
    11th fields are the KB read and written over the interval.
    """
    lines = output.splitlines()
    if len(lines) < 2:
        raise UnexpectedOutputError("disk sampler", "no data line after the header")
    tokens = lines[1].split()
    if len(tokens) < 11:
        raise UnexpectedOutputError(
            "disk sampler", f"expected at least 11 fields, got {len(tokens)}"
        )
    return _number("disk sampler", tokens[7]), _number("disk sampler", tokens[10])


def parse_swap_usage(output: str) -> tuple[float, float]:
    """
    Parse `sysctl vm.swapusage` into (used MB, free MB).

    vm.swapusage: total = 2048.00M  used = 1024.25M  free = 1023.75M  (encrypted)
    """
    tokens = output.split()
    if len(tokens) < 10:
        raise UnexpectedOutputError("sysctl vm.swapusage", f"expected 10 fields, got {len(tokens)}")
    used, free = tokens[6], tokens[9]
    return (
        _number("sysctl vm.swapusage", used.removesuffix("M")),
        _number("sysctl vm.swapusage", free.removesuffix("M")),
    )


def parse_net_counters(output: str) -> tuple[int, int]:
    """Parse the network counter helper into (bytes received, bytes sent)."""
    for line in output.splitlines():
        tokens = line.split()
        if not tokens:
            continue
        if len(tokens) < 4:
            raise UnexpectedOutputError(
                "network counters", f"expected at least 4 fields, got {len(tokens)}"
            )
        return (
            _number("network counters", tokens[1], int),
            _number("network counters", tokens[3], int),
        )
    raise UnexpectedOutputError("network counters", "no output")
