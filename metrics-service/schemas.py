"""
Server Metrics Recorder - Snapshot Schemas

Pydantic models for the live metrics snapshot. Attributes are snake_case;
aliases give the JSON shape served by GET /metrics.
"""

from typing import List

from pydantic import BaseModel, Field


class SnapshotModel(BaseModel):
    """Base for snapshot models: mutable, populated by attribute name or alias."""

    model_config = {"populate_by_name": True}


class Errors(SnapshotModel):
    """Error totals."""

    total_errors: int = Field(0, alias="totalErrors", description="Responses with status >= 300")
    total_http_errors: int = Field(
        0, alias="totalHTTPErrors", description="Responses with status >= 500"
    )


class ResponseTime(SnapshotModel):
    """Response-time statistics."""

    response_times: List[float] = Field(
        default_factory=list,
        alias="responseTimes",
        description="Most recent latencies in ms, oldest first",
    )
    average_response_time_ms: float = Field(
        0.0, alias="AverageResponseTimeMs", description="Mean of the current window"
    )
    peak_response_time_ms: float = Field(
        0.0, alias="PeakResponseTimeMs", description="Longest latency ever recorded"
    )


class LoadAverage(SnapshotModel):
    """1, 5 and 15 minute load averages."""

    one: float = 0.0
    two: float = 0.0
    three: float = 0.0


class Processor(SnapshotModel):
    """CPU identity and load."""

    model: str = "N/A"
    threads: int = 0
    load_average: LoadAverage = Field(default_factory=LoadAverage, alias="loadAverage")


class RAM(SnapshotModel):
    """Memory in GiB."""

    total: float = 0.0
    free: float = 0.0


class DiskSpace(SnapshotModel):
    """Disk space in MiB."""

    total: float = 0.0
    free: float = 0.0


class Resources(SnapshotModel):
    """System resources."""

    processor: Processor = Field(default_factory=Processor)
    ram: RAM = Field(default_factory=RAM, alias="RAM")
    disk_space: DiskSpace = Field(default_factory=DiskSpace, alias="diskSpace")


class MetricsSnapshot(SnapshotModel):
    """Full metrics snapshot."""

    total_requests: int = Field(0, alias="totalRequests")
    errors: Errors = Field(default_factory=Errors)
    uptime: str = "0"
    throughput: float = 0.0
    response_time: ResponseTime = Field(default_factory=ResponseTime, alias="responseTime")
    resources: Resources = Field(default_factory=Resources)

    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "example": {
                "totalRequests": 500,
                "errors": {"totalErrors": 12, "totalHTTPErrors": 3},
                "uptime": "0 Years, 0 Months, 0 Days, 1 Hours, 1 Min, 1 Sec",
                "throughput": 0.000136,
                "responseTime": {
                    "responseTimes": [12.0, 8.0, 15.0],
                    "AverageResponseTimeMs": 11.67,
                    "PeakResponseTimeMs": 250.0,
                },
                "resources": {
                    "processor": {
                        "model": "Intel(R) Xeon(R) CPU @ 2.20GHz",
                        "threads": 8,
                        "loadAverage": {"one": 0.42, "two": 0.37, "three": 0.3},
                    },
                    "RAM": {"total": 15.54, "free": 6.12},
                    "diskSpace": {"total": 95869, "free": 40210},
                },
            }
        },
    }
