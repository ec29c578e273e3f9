"""
Server Metrics Recorder - Metrics Module

MetricsRecorder accumulates request counts, error counts, response-time
statistics and periodic resource snapshots into one live MetricsSnapshot.

One recorder is built at startup and handed to whatever handles requests.
Call start_timer() before handling a request and record() after it.
"""

import asyncio
import logging
import threading
import time
from collections import deque
from typing import Callable, Optional, Set

from config import (
    ERROR_STATUS_THRESHOLD,
    RESPONSE_WINDOW_SIZE,
    SERVER_ERROR_THRESHOLD,
    THROUGHPUT_UPTIME_SCALE,
)
from probes import GIB, DiskSpaceProbe, ResourceProbe, select_disk_probe
from schemas import LoadAverage, MetricsSnapshot
from utils import format_uptime

# --- Logging ---
logger = logging.getLogger(__name__)


def _now_ms() -> float:
    return time.time() * 1000


def _to_gib(num_bytes: int) -> float:
    return round(num_bytes / GIB, 2)


class MetricsRecorder:
    """
    In-process server metrics.

    Writes are expected from one logical caller (the request path). The
    latency window, peak and average are updated as one unit under a lock
    so a background probe thread never interleaves with them.
    """

    def __init__(
        self,
        resource_probe: Optional[ResourceProbe] = None,
        disk_probe: Optional[DiskSpaceProbe] = None,
        window_capacity: int = RESPONSE_WINDOW_SIZE,
        throughput_scale: float = THROUGHPUT_UPTIME_SCALE,
        clock: Optional[Callable[[], float]] = None,
    ):
        if window_capacity < 1:
            raise ValueError(f"window_capacity must be >= 1, got {window_capacity}")

        self.resource_probe = resource_probe or ResourceProbe()
        self.disk_probe = disk_probe or select_disk_probe()
        self.window_capacity = window_capacity
        self.throughput_scale = throughput_scale
        self._clock = clock or _now_ms

        self._lock = threading.Lock()
        self._window: deque = deque(maxlen=window_capacity)
        self._pending: Set[asyncio.Task] = set()

        self._metrics = MetricsSnapshot()
        self._metrics.resources.ram.total = _to_gib(self.resource_probe.total_memory())

    # --- Counters ---

    def record_request(self, path: str) -> None:
        """
        Count one request.

        `path` is accepted for future per-route breakdowns but not aggregated.
        """
        with self._lock:
            self._metrics.total_requests += 1

    def record_error(self, response_code: int) -> None:
        """
        Count one error. Codes >= 500 also count as HTTP (server) errors.

        The code is not validated; only call this when a request failed.
        """
        with self._lock:
            self._metrics.errors.total_errors += 1
            if response_code >= SERVER_ERROR_THRESHOLD:
                self._metrics.errors.total_http_errors += 1

    # --- Latency ---

    def start_timer(self) -> float:
        """Current time in ms since epoch. Pass it back to record_latency()."""
        return self._clock()

    def record_latency(self, start_time: float) -> float:
        """
        Record the latency of a request started at `start_time` (ms).

        Returns:
            Latency in milliseconds
        """
        latency = self._clock() - start_time
        with self._lock:
            self._push_response_time(latency)
            self._update_peak(latency)
            self._update_average()
        return latency

    def _push_response_time(self, latency: float) -> None:
        # deque(maxlen) drops the oldest entry once full
        self._window.append(latency)
        self._metrics.response_time.response_times = list(self._window)

    def _update_peak(self, latency: float) -> None:
        stats = self._metrics.response_time
        if latency > stats.peak_response_time_ms:
            stats.peak_response_time_ms = latency

    def _update_average(self) -> None:
        average = 0.0
        if self._window:
            average = sum(self._window) / len(self._window)
        self._metrics.response_time.average_response_time_ms = average if average > 0 else 0.0

    # --- Derived values ---

    def refresh_uptime(self) -> str:
        """Recompute the formatted uptime from process uptime."""
        uptime = format_uptime(self.resource_probe.process_uptime())
        self._metrics.uptime = uptime
        return uptime

    def refresh_throughput(self) -> float:
        """
        Recompute throughput as total_requests / (uptime_seconds * scale).

        With the default scale of 1000 this is not requests per second; set
        METRICS_THROUGHPUT_SCALE=1 for that.
        """
        denominator = self.resource_probe.process_uptime() * self.throughput_scale
        throughput = self._metrics.total_requests / denominator if denominator > 0 else 0.0
        self._metrics.throughput = throughput
        return throughput

    # --- Resources ---

    def refresh_cpu(self) -> None:
        """Refresh thread count and 1/5/15 minute load averages."""
        one, five, fifteen = self.resource_probe.load_average()
        processor = self._metrics.resources.processor
        processor.load_average = LoadAverage(one=one, two=five, three=fifteen)
        processor.threads = self.resource_probe.cpu_threads()

    async def probe_resources(self) -> None:
        """
        Refresh RAM, CPU and disk figures.

        Failures are logged and swallowed; affected fields keep their last value.
        """
        try:
            self._metrics.resources.ram.free = _to_gib(self.resource_probe.free_memory())
        except Exception:
            logger.exception("free memory probe failed")

        try:
            self._metrics.resources.processor.model = self.resource_probe.cpu_model()
        except Exception:
            logger.exception("cpu model probe failed")

        try:
            self.refresh_cpu()
        except Exception:
            logger.exception("cpu load probe failed")

        try:
            disk = await self.disk_probe.read()
        except Exception as e:
            logger.warning(f"disk space probe failed: {e}")
            return

        if disk is None:
            logger.debug("disk space probe returned nothing, keeping last values")
            return

        self._metrics.resources.disk_space.total = disk.total
        self._metrics.resources.disk_space.free = disk.free

    def schedule_probe(self) -> None:
        """
        Launch probe_resources() without waiting for it.

        Runs as a task on the current event loop, or on a daemon thread when
        called outside of one. Concurrent probes are not coalesced.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            threading.Thread(
                target=asyncio.run,
                args=(self.probe_resources(),),
                name="metrics-probe",
                daemon=True,
            ).start()
            return

        task = loop.create_task(self.probe_resources())
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    @property
    def pending_probes(self) -> int:
        return len(self._pending)

    async def wait_for_probes(self) -> None:
        """Await probes still in flight on the current loop."""
        if self._pending:
            await asyncio.gather(*list(self._pending))

    # --- Entry points ---

    def record(self, start_time: float, path: str, response_code: int) -> float:
        """
        Record one handled request. Call right after the response is produced.

        Args:
            start_time: Value returned by start_timer()
            path: Request path
            response_code: HTTP status code of the response

        Returns:
            Request latency in milliseconds
        """
        latency = self.record_latency(start_time)
        self.refresh_uptime()
        self.refresh_throughput()
        self.schedule_probe()
        self.record_request(path)
        if response_code >= ERROR_STATUS_THRESHOLD:
            self.record_error(response_code)
        return latency

    def snapshot(self) -> MetricsSnapshot:
        """Return the live snapshot. Not a copy."""
        return self._metrics
