import argparse
import sys
from typing import List, Optional, Sequence

from structlog import get_logger

from idiom_bench.config import loader
from idiom_bench.harness.allocation import render_allocations
from idiom_bench.harness.bytecode import render_profiles
from idiom_bench.harness.registry import ScenarioOutcome
from idiom_bench.harness.report import render_comparison, render_stability
from idiom_bench.observability.host import host_banner
from idiom_bench.observability.metrics import MetricsRegistry
from idiom_bench.scenarios import default_registry
from idiom_bench.utils.logging import configure_logging, resolve_level

logger = get_logger("cli")


def render_outcome(outcome: ScenarioOutcome) -> str:
    title = outcome.scenario.display_title
    sections = [render_comparison(title, outcome.comparison)]
    if outcome.allocations:
        sections.append(render_allocations(title, outcome.allocations))
    if outcome.bytecode:
        sections.append(render_profiles(title, outcome.bytecode))
    if outcome.stability is not None:
        sections.append(render_stability(title, outcome.stability))
    return "\n\n".join(sections)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="idiom-bench", description="Idiom micro-benchmark harness")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Command: run (default)
    parser_run = subparsers.add_parser("run", help="Run scenarios and print the report")
    parser_run.add_argument("--scenario", action="append", help="Scenario(s) to run; repeatable")
    parser_run.add_argument("--scale", type=float, help="Multiply every iteration count by this factor")
    parser_run.add_argument("--threads", type=int, help="Override the stability thread count")
    parser_run.add_argument(
        "--no-stability", dest="stability", action="store_false", default=None, help="Skip stability tests"
    )
    parser_run.add_argument("--log-level", help="Log level (default WARNING)")
    parser_run.add_argument("--log-format", choices=["json", "console"], help="Log renderer")
    parser_run.add_argument(
        "--metrics", action="store_true", default=None, help="Print Prometheus metrics after the report"
    )

    # Command: list
    subparsers.add_parser("list", help="List scenario names")
    return parser


def run(settings: dict) -> int:
    configure_logging(resolve_level(settings.get("log_level")), settings.get("log_format", "json"))
    logger.info("Settings", summary=loader.summarize_settings(settings))

    registry = default_registry()
    print("=== Idiom benchmark ===")
    print(host_banner())

    outcomes = registry.run(
        settings.get("scenarios") or None,
        scale=float(settings.get("scale", 1.0)),
        threads=settings.get("threads"),
        run_stability_test=bool(settings.get("stability", True)),
    )
    for outcome in outcomes:
        print()
        print(render_outcome(outcome))
        sys.stdout.flush()

    if settings.get("metrics"):
        print()
        print(MetricsRegistry.get().render_latest())
    print("\n=== Done ===")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command == "list":
        for name in default_registry().names():
            print(name)
        return 0

    overrides: dict = {}
    if args.command == "run":
        overrides = {
            "scenarios": args.scenario,
            "scale": args.scale,
            "threads": args.threads,
            "stability": args.stability,
            "log_level": args.log_level,
            "log_format": args.log_format,
            "metrics": args.metrics,
        }
    settings, _ = loader.load_settings(cli_overrides=overrides)
    return run(settings)


if __name__ == "__main__":
    raise SystemExit(main())
