"""Host description printed above the report. Display only."""

from __future__ import annotations

import os
import platform
import sys

import psutil

from idiom_bench.core import timebase


def host_banner() -> str:
    mem_mib = psutil.virtual_memory().total // (1024 * 1024)
    return "\n".join(
        [
            f"Python: {platform.python_implementation()} {platform.python_version()}",
            f"Processors: {os.cpu_count()} (physical {psutil.cpu_count(logical=False)})",
            f"Memory: {mem_mib} MiB",
            f"Perf clock resolution: {timebase.clock_resolution_ns()} ns",
            f"Switch interval: {sys.getswitchinterval() * 1e3:.3f} ms",
        ]
    )
