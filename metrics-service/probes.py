"""
Server Metrics Recorder - Resource Probes

OS-facing collaborators of the recorder:
- ResourceProbe reads memory, CPU and process uptime through psutil
- Disk-space probes shell out to a platform-specific command

select_disk_probe() picks the disk probe once at startup so the recorder
never branches on platform itself.
"""

import asyncio
import logging
import math
import platform
import sys
import time
from typing import NamedTuple, Optional, Tuple

import psutil

# --- Logging ---
logger = logging.getLogger(__name__)

KIB = 1024
MIB = 1024**2
GIB = 1024**3

CPUINFO_PATH = "/proc/cpuinfo"


class DiskProbeError(Exception):
    """Raised when the disk command fails or prints something unexpected."""


class DiskUsage(NamedTuple):
    total: float
    used: float
    free: float


# --- Resource probe ---


class ResourceProbe:
    """Host memory, CPU and process uptime via psutil."""

    def __init__(self):
        self._process = psutil.Process()
        self._created_at = self._process.create_time()
        self._cpu_model: Optional[str] = None

    def total_memory(self) -> int:
        return psutil.virtual_memory().total

    def free_memory(self) -> int:
        return psutil.virtual_memory().free

    def cpu_model(self) -> str:
        """
        CPU model name, read once and cached.

        Reads "model name" from /proc/cpuinfo where available, otherwise
        falls back to platform.processor(), then "N/A".
        """
        if self._cpu_model is None:
            self._cpu_model = self._read_cpu_model()
        return self._cpu_model

    def _read_cpu_model(self) -> str:
        try:
            with open(CPUINFO_PATH, encoding="utf-8") as f:
                for line in f:
                    if line.lower().startswith("model name"):
                        return line.split(":", 1)[1].strip()
        except OSError:
            pass
        return platform.processor() or "N/A"

    def cpu_threads(self) -> int:
        return psutil.cpu_count(logical=True) or 0

    def load_average(self) -> Tuple[float, float, float]:
        return psutil.getloadavg()

    def process_uptime(self) -> float:
        """Seconds since this process started."""
        return max(time.time() - self._created_at, 0.0)


# --- Disk-space probes ---


def parse_df_output(output: str) -> DiskUsage:
    """
    Parse `df -kP` output.

    Uses the second line (first filesystem). Columns 2, 3 and 4 are the
    total, used and available kilobyte counts, converted to MiB and
    rounded up.

    Raises:
        DiskProbeError: fewer lines or columns than expected, or non-numeric values
    """
    lines = output.splitlines()
    if len(lines) < 2:
        raise DiskProbeError(f"unexpected df output: {output!r}")

    columns = lines[1].split()
    if len(columns) < 4:
        raise DiskProbeError(f"unexpected df line: {lines[1]!r}")

    try:
        total_kb, used_kb, free_kb = (int(c) for c in columns[1:4])
    except ValueError as e:
        raise DiskProbeError(f"non-numeric df columns: {lines[1]!r}") from e

    def to_mib(kb: int) -> int:
        return math.ceil(kb * KIB / MIB)

    return DiskUsage(total=to_mib(total_kb), used=to_mib(used_kb), free=to_mib(free_kb))


def parse_wmic_output(output: str) -> DiskUsage:
    """
    Parse `wmic logicaldisk get freespace` output.

    The second line holds the free byte count of the first logical disk,
    converted to GiB and rounded down. wmic does not report total or used
    space here, so both stay 0.

    Raises:
        DiskProbeError: missing line or non-numeric value
    """
    # wmic ends lines with \r\r\n
    lines = output.split("\n")
    if len(lines) < 2:
        raise DiskProbeError(f"unexpected wmic output: {output!r}")

    try:
        free_bytes = int(lines[1].strip())
    except ValueError as e:
        raise DiskProbeError(f"non-numeric wmic value: {lines[1]!r}") from e

    return DiskUsage(total=0, used=0, free=math.floor(free_bytes / GIB))


class DiskSpaceProbe:
    """
    Base disk-space probe.

    Subclasses set `command` and implement `parse`. read() returns None when
    the platform has no way to report disk space.
    """

    command: Tuple[str, ...] = ()

    async def read(self) -> Optional[DiskUsage]:
        output = await self._run()
        return self.parse(output)

    def parse(self, output: str) -> DiskUsage:
        raise NotImplementedError

    async def _run(self) -> str:
        try:
            proc = await asyncio.create_subprocess_exec(
                *self.command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise DiskProbeError(f"failed to run {self.command[0]}: {e}") from e

        stdout, stderr = await proc.communicate()
        if proc.returncode != 0:
            raise DiskProbeError(
                f"{self.command[0]} exited with {proc.returncode}: "
                f"{stderr.decode(errors='replace').strip()}"
            )
        return stdout.decode(errors="replace")


class PosixDiskProbe(DiskSpaceProbe):
    # -P keeps one line per filesystem even for long device names
    command = ("df", "-kP")

    def parse(self, output: str) -> DiskUsage:
        return parse_df_output(output)


class WindowsDiskProbe(DiskSpaceProbe):
    # TODO: query Size as well so total/used get populated on Windows
    command = ("wmic", "logicaldisk", "get", "freespace")

    def parse(self, output: str) -> DiskUsage:
        return parse_wmic_output(output)


class UnsupportedDiskProbe(DiskSpaceProbe):
    """Platforms with no disk command. Reports nothing."""

    def __init__(self, platform_name: str = ""):
        self.platform_name = platform_name

    async def read(self) -> Optional[DiskUsage]:
        logger.debug(f"no disk space command for platform={self.platform_name}")
        return None


POSIX_PLATFORM_PREFIXES = ("linux", "darwin", "freebsd", "openbsd", "netbsd", "sunos", "aix")


def select_disk_probe(platform_name: Optional[str] = None) -> DiskSpaceProbe:
    """Pick the disk-space probe for the host platform."""
    name = platform_name if platform_name is not None else sys.platform

    if name.startswith(POSIX_PLATFORM_PREFIXES):
        return PosixDiskProbe()
    if name == "win32":
        return WindowsDiskProbe()

    logger.warning(f"disk space probe unsupported on platform={name}")
    return UnsupportedDiskProbe(name)
