import json
import os
import threading
from typing import Any, Optional

from rendezvous.models import Endpoint, LogBuffers, MatchRecord, StatsLog

STATS_FILENAME = 'stats_log.json'


class StatsSink:
    """Counters and log buffers shared by the packet loop and the flush worker.

    The packet loop only appends and increments; the flush worker swaps the
    buffers out wholesale. Both go through ``_lock`` so a swap never loses an
    entry appended mid-flush.
    """

    def __init__(self, logger, stats: Optional[StatsLog] = None, log_connected_ips: bool = False):
        self.logger = logger
        self.stats = stats or StatsLog()
        self.log_connected_ips = log_connected_ips
        self.buffers = LogBuffers()
        self._lock = threading.Lock()

    def incr(self, counter: str, amount: int = 1) -> None:
        with self._lock:
            setattr(self.stats, counter, getattr(self.stats, counter) + amount)

    def record_match(self, match_id: int, first: Endpoint, second: Endpoint) -> None:
        self.logger.info(f"[match] id={match_id}")
        if not self.log_connected_ips:
            return
        with self._lock:
            self.buffers.matches_log.append(MatchRecord(match_id, first.ip, second.ip).to_dict())

    def debug(self, message: str) -> None:
        self.logger.info(message)
        with self._lock:
            self.buffers.debug_log.append(message)

    def error(self, message: Any) -> None:
        self.logger.warning(f"[error] {message}")
        with self._lock:
            self.buffers.error_log.append(str(message))

    def swap_buffers(self) -> LogBuffers:
        with self._lock:
            taken, self.buffers = self.buffers, LogBuffers()
        return taken

    def snapshot(self) -> dict:
        with self._lock:
            return self.stats.to_dict()

    def reset(self) -> None:
        with self._lock:
            self.stats = StatsLog()


def save_file(data, filename: str) -> bool:
    """Write ``data`` as JSON. Returns False instead of raising on I/O errors."""
    try:
        with open(filename, 'w', encoding='utf-8') as fh:
            json.dump(data, fh)
        return True
    except (OSError, TypeError, ValueError):
        return False


def load_file(filename: str, errors: Optional[list] = None):
    """Load JSON from ``filename``; None when missing or unreadable.

    A file that exists but cannot be read or parsed is reported in ``errors``.
    """
    try:
        with open(filename, 'r', encoding='utf-8') as fh:
            return json.load(fh)
    except FileNotFoundError:
        return None
    except (OSError, ValueError) as exc:
        if errors is not None:
            errors.append(f"Could not load {filename}: {exc}")
        return None


def load_stats(log_dir: str, errors: Optional[list] = None) -> StatsLog:
    path = os.path.join(log_dir, STATS_FILENAME)
    data = load_file(path, errors)
    if data is None:
        return StatsLog()
    try:
        if not isinstance(data, dict):
            raise TypeError('expected a JSON object')
        return StatsLog.from_dict(data)
    except (TypeError, ValueError) as exc:
        if errors is not None:
            errors.append(f"Could not load {path}: {exc}")
        return StatsLog()
