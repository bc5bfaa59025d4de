"""CLI entry point for running conformance suites."""

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from conformance_harness.config_loader import load_harness_config
from conformance_harness.hosts.loading import available_hosts, load_host_manifest
from conformance_harness.models.config import HarnessConfig
from conformance_harness.report import Report
from conformance_harness.runtime import Harness
from conformance_harness.suite_loader import Suite, load_suite

STATUS_SYMBOLS = {
    "passed": "✅",
    "failed": "❌",
    "timeout": "⏱️",
    "not-run": "⏭️",
}


@dataclass(frozen=True, kw_only=True)
class SuiteError:
    """A suite that could not be loaded or failed while declaring tests."""

    suite: str
    message: str


def log_results_summary(
    log: logging.Logger,
    report: Report,
    suite_errors: Sequence[SuiteError] = (),
) -> None:
    """Log a formatted summary of test results."""
    log.info("=" * 80)
    log.info("Test Results Summary:")
    log.info("=" * 80)

    for entry in report.entries:
        symbol = STATUS_SYMBOLS.get(entry.status, "?")
        log.info(
            "%s %s: %s (%.2fs)", symbol, entry.name, entry.status, entry.duration
        )
        if entry.message:
            log.info("  Message: %s", entry.message)

    for error in suite_errors:
        log.info("❗ suite %s: %s", error.suite, error.message)


def format_output(
    report: Report, suite_errors: Sequence[SuiteError] = ()
) -> dict[str, Any]:
    """Format the report for JSON output."""
    output = report.to_dict()
    output["suite_errors"] = [
        {"suite": error.suite, "message": error.message} for error in suite_errors
    ]
    return output


async def load_config(
    config_path: Path | None, timeout_multiplier: float | None = None
) -> HarnessConfig:
    """Load the harness config file, if any, and apply CLI overrides."""
    config = (
        await load_harness_config(config_path)
        if config_path is not None
        else HarnessConfig()
    )
    if timeout_multiplier is not None:
        config = HarnessConfig.model_validate(
            config.model_dump() | {"timeout_multiplier": timeout_multiplier}
        )
    return config


def load_suites(
    suite_paths: Sequence[Path],
) -> tuple[Sequence[Suite], Sequence[SuiteError]]:
    """Load suite files, collecting the ones that fail instead of stopping."""
    suites: list[Suite] = []
    errors: list[SuiteError] = []
    for path in suite_paths:
        try:
            suites.append(load_suite(path))
        except (FileNotFoundError, ValueError) as exc:
            errors.append(SuiteError(suite=str(path), message=str(exc)))
    return suites, errors


async def run(
    suite_paths: Sequence[Path],
    host_key: str = "python",
    host_config_json: str = "{}",
    config_path: Path | None = None,
    timeout_multiplier: float | None = None,
) -> int:
    """Run the suites and return the exit code."""
    log = logging.getLogger("conformance_harness")

    log.info("Loading host: %s", host_key)
    manifest = load_host_manifest(host_key)
    host_config = manifest.config_cls(**json.loads(host_config_json))

    harness_config = await load_config(config_path, timeout_multiplier)

    suites, suite_errors = load_suites(suite_paths)
    for error in suite_errors:
        log.error("Failed to load suite %s: %s", error.suite, error.message)

    log.info("Running %d suite(s)...", len(suites))

    async with (
        manifest.host_factory(host_config) as host,
        Harness(config=harness_config, classifier=host.classify) as harness,
    ):
        declare_errors: list[SuiteError] = []
        for suite in suites:
            log.info("Declaring tests from suite %s", suite.name)
            try:
                await suite.declare(harness, host)
            except Exception as exc:
                log.error("Suite %s failed: %s", suite.name, exc, exc_info=exc)
                declare_errors.append(SuiteError(suite=suite.name, message=str(exc)))

        report = await harness.run()

    all_errors = [*suite_errors, *declare_errors]
    log_results_summary(log, report, all_errors)

    print(json.dumps(format_output(report, all_errors), indent=2))

    return 0 if report.ok and not all_errors else 1


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Run conformance test suites")
    parser.add_argument(
        "suites",
        nargs="+",
        type=Path,
        help="Suite files defining register(harness, host)",
    )
    parser.add_argument(
        "--host",
        default="python",
        help=f"Host key ({', '.join(available_hosts()) or 'none registered'})",
    )
    parser.add_argument(
        "--host-config",
        default="{}",
        help="JSON configuration for the host",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a harness.yaml with timeout settings",
    )
    parser.add_argument(
        "--timeout-multiplier",
        type=float,
        default=None,
        help="Scale applied to every test timeout",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    exit_code = asyncio.run(
        run(
            suite_paths=args.suites,
            host_key=args.host,
            host_config_json=args.host_config,
            config_path=args.config,
            timeout_multiplier=args.timeout_multiplier,
        )
    )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
