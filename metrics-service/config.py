"""
Server Metrics Recorder - Service Configuration

All environment variables, constants, and settings in one place.
"""

import os

# --- Recorder Configuration ---
# Response-time window capacity. Older docs quote 100; the recorder keeps 10.
RESPONSE_WINDOW_SIZE = int(os.environ.get("METRICS_WINDOW_SIZE", "10"))

# throughput = total_requests / (uptime_seconds * THROUGHPUT_UPTIME_SCALE)
# 1000 keeps parity with the historical formula; 1 gives requests per second.
THROUGHPUT_UPTIME_SCALE = float(os.environ.get("METRICS_THROUGHPUT_SCALE", "1000"))

# Paths the middleware does not measure so they don't pollute counters
EXCLUDED_PATHS = tuple(
    p.strip()
    for p in os.environ.get("METRICS_EXCLUDED_PATHS", "/health,/metrics").split(",")
    if p.strip()
)

# --- Error Thresholds ---
ERROR_STATUS_THRESHOLD = 300
SERVER_ERROR_THRESHOLD = 500

# --- Logging ---
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# --- API Configuration ---
API_VERSION = "1.0.0"

# --- Service Info ---
SERVICE_NAME = "Server Metrics Recorder"
SERVICE_DESCRIPTION = """
## Overview
In-process metrics recorder for a server process.

## Features
- Request and error counters (overall and 5xx)
- Sliding response-time window with average and peak latency
- Human-readable uptime and throughput
- Background CPU, RAM and disk snapshots
"""
