"""Appending records to the collector log."""

import logging
from pathlib import Path

from macstat.models import MetricRecord

logger = logging.getLogger(__name__)


def append_record(path: Path, record: MetricRecord) -> Path:
    """
    Append one record as a line to the log at `path`.

    The log directory is created if it doesn't exist yet. Rotation is left to
    newsyslog or whatever ships the file.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    line = record.to_line()
    with path.open("a", encoding="utf-8") as log:
        log.write(line + "\n")
    logger.info("appended to %s: %s", path, line)
    return path
