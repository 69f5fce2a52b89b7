"""Relative-performance aggregation and plain-text tables.

``compare`` and ``summarize_stability`` are pure; the ``render_*`` helpers turn
their values into text for the console report.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from structlog import get_logger

from idiom_bench.core import timebase
from idiom_bench.harness.errors import ConfigurationFault
from idiom_bench.harness.stability import StabilityResult
from idiom_bench.harness.timing import BenchmarkResult

logger = get_logger("harness.report")


@dataclass(frozen=True, slots=True)
class ComparisonRow:
    variant_name: str
    elapsed_ns: int
    iterations: int
    is_baseline: bool
    # Positive means faster than the baseline; None when the baseline took 0 ns.
    delta_pct: Optional[float]

    @property
    def per_call_ns(self) -> float:
        return self.elapsed_ns / self.iterations


@dataclass(frozen=True, slots=True)
class ComparisonReport:
    baseline_name: str
    rows: tuple[ComparisonRow, ...]

    @property
    def delta_defined(self) -> bool:
        return all(row.delta_pct is not None for row in self.rows if not row.is_baseline)

    def fastest(self) -> ComparisonRow:
        return min(self.rows, key=lambda row: row.elapsed_ns)

    def row(self, variant_name: str) -> ComparisonRow:
        for row in self.rows:
            if row.variant_name == variant_name:
                return row
        raise KeyError(f"Unknown variant: {variant_name}")


@dataclass(frozen=True, slots=True)
class StabilityReport:
    rows: tuple[StabilityResult, ...]

    @property
    def total_failures(self) -> int:
        return sum(row.failure_count for row in self.rows)

    def safest(self) -> StabilityResult:
        return min(self.rows, key=lambda row: row.failure_count)


def percentage_delta(baseline_ns: int, other_ns: int) -> Optional[float]:
    if baseline_ns <= 0:
        return None
    return (baseline_ns - other_ns) / baseline_ns * 100.0


def compare(results: Sequence[BenchmarkResult], baseline_index: int = 0) -> ComparisonReport:
    if not results:
        raise ConfigurationFault("Cannot compare an empty result list")
    if not 0 <= baseline_index < len(results):
        raise ConfigurationFault(f"baseline_index {baseline_index} out of range for {len(results)} results")

    baseline = results[baseline_index]
    if baseline.elapsed_ns <= 0:
        logger.warning("Baseline elapsed time is zero; deltas undefined", baseline=baseline.variant_name)

    rows = []
    for idx, result in enumerate(results):
        is_baseline = idx == baseline_index
        rows.append(
            ComparisonRow(
                variant_name=result.variant_name,
                elapsed_ns=result.elapsed_ns,
                iterations=result.iterations,
                is_baseline=is_baseline,
                delta_pct=None if is_baseline else percentage_delta(baseline.elapsed_ns, result.elapsed_ns),
            )
        )
    return ComparisonReport(baseline_name=baseline.variant_name, rows=tuple(rows))


def summarize_stability(results: Sequence[StabilityResult]) -> StabilityReport:
    if not results:
        raise ConfigurationFault("Cannot summarize an empty stability result list")
    return StabilityReport(rows=tuple(results))


# --- Rendering ---


def _format_delta(row: ComparisonRow) -> str:
    if row.is_baseline:
        return "baseline"
    if row.delta_pct is None:
        return "n/a"
    return f"{row.delta_pct:+.2f}%"


def _table(headers: Sequence[str], body: Sequence[Sequence[str]]) -> str:
    widths = [len(h) for h in headers]
    for line in body:
        for idx, cell in enumerate(line):
            widths[idx] = max(widths[idx], len(cell))
    fmt = "  ".join(f"{{:<{w}}}" if i == 0 else f"{{:>{w}}}" for i, w in enumerate(widths))
    out = [fmt.format(*headers), "  ".join("-" * w for w in widths)]
    out.extend(fmt.format(*line) for line in body)
    return "\n".join(out)


def render_comparison(title: str, report: ComparisonReport) -> str:
    body = [
        (
            row.variant_name,
            f"{timebase.ns_to_ms(row.elapsed_ns):.3f}",
            f"{row.per_call_ns:.1f}",
            _format_delta(row),
        )
        for row in report.rows
    ]
    iterations = report.rows[0].iterations
    header = f"=== {title} ({iterations:,} iterations) ==="
    return header + "\n" + _table(("variant", "ms", "ns/call", f"vs {report.baseline_name}"), body)


def render_stability(title: str, report: StabilityReport) -> str:
    first = report.rows[0]
    body = [
        (
            row.variant_name,
            f"{row.failure_count:,}",
            f"{row.failure_rate * 100:.3f}%",
            f"{timebase.ns_to_ms(row.elapsed_ns):.1f}",
        )
        for row in report.rows
    ]
    header = (
        f"=== {title}: stability ({first.thread_count} threads x "
        f"{first.iterations_per_thread:,} iterations) ==="
    )
    return header + "\n" + _table(("variant", "absence faults", "rate", "ms"), body)
