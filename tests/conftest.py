import sys
from pathlib import Path

import pytest
import structlog

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Add src/ so tests run without an editable install.
for candidate in (SRC, ROOT):
    path = str(candidate)
    if path not in sys.path:
        sys.path.insert(0, path)


@pytest.fixture(autouse=True)
def _fresh_metrics():
    from idiom_bench.observability.metrics import MetricsRegistry

    MetricsRegistry.reset_for_tests()
    yield
    MetricsRegistry.reset_for_tests()


@pytest.fixture(autouse=True)
def _default_structlog():
    yield
    structlog.reset_defaults()
