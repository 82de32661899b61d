from __future__ import annotations

import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import yaml

from budgetcheck.assertions.base import AssertionResult
from budgetcheck.checks import get_checker
from budgetcheck.config import SuiteConfig
from budgetcheck.metrics import RunSummary, summarize
from budgetcheck.reporting import console
from budgetcheck.verbose import close_logger, setup_logger


class Runner:
    """Runs the selected checkers in order and records their results."""

    def __init__(
        self,
        config: SuiteConfig,
        output_dir: Path,
        suite_filter: str | None = None,
        verbose: bool = False,
    ):
        self.config = config
        self.output_dir = output_dir
        self.suite_filter = suite_filter
        self.verbose = verbose
        self.interrupted = False
        self.results: dict[str, list[AssertionResult]] = {}
        self.summary = RunSummary()

    def _selected_suites(self) -> list[str]:
        suites = [s.value for s in self.config.suites]
        if self.suite_filter:
            if self.suite_filter not in suites:
                raise ValueError(
                    f"Suite '{self.suite_filter}' is not enabled in config. "
                    f"Enabled: {', '.join(suites)}"
                )
            suites = [self.suite_filter]
        return suites

    def execute(self) -> Path:
        """Run every selected suite sequentially. Returns the run directory."""
        suites = self._selected_suites()

        run_id = datetime.now(timezone.utc).strftime("%Y-%m-%d_%H%M%S_%f")
        run_dir = self.output_dir / run_id
        run_dir.mkdir(parents=True, exist_ok=True)

        logger = setup_logger(
            run_dir / "debug.log", verbose=self.verbose, logger_name=f"budgetcheck_{run_id}"
        )
        logger.debug(f"Starting run {run_id} with suites {suites}")

        suite_results: dict[str, dict[str, Any]] = {}
        try:
            for suite_name in suites:
                checker = get_checker(suite_name)
                console.print_header(checker.title())

                start = time.perf_counter()
                results = checker.run(self.config, logger)
                elapsed = time.perf_counter() - start

                for result in results:
                    console.print_result(result)
                console.print_blank()

                suite_summary = summarize(results)
                self.results[suite_name] = results
                self.summary = self.summary.merge(suite_summary)
                suite_results[suite_name] = {
                    "title": checker.title(),
                    "assertions": [r.to_dict() for r in results],
                    "summary": suite_summary.to_dict(),
                    "elapsed_seconds": round(elapsed, 4),
                }
                logger.info(
                    f"Suite '{suite_name}' finished: {suite_summary.passed}/{suite_summary.run} passed"
                )
        except KeyboardInterrupt:
            self.interrupted = True
            logger.warning("Run interrupted by user (Ctrl+C). Saving partial results...")

        console.print_summary(self.summary)
        self._write_results(run_dir, suite_results)
        logger.debug(f"Run {run_id} complete: {self.summary.to_dict()}")
        close_logger(logger)
        return run_dir

    @property
    def exit_code(self) -> int:
        if self.interrupted:
            return 1
        return self.summary.exit_code

    def _write_results(self, run_dir: Path, suite_results: dict[str, dict[str, Any]]) -> None:
        """Write junit.xml and meta.yaml to the run directory."""
        from budgetcheck.reporting.junit import write_junit

        write_junit(run_dir, suite_results)

        try:
            import importlib.metadata

            version = importlib.metadata.version("budgetcheck")
        except Exception:
            version = "unknown"

        meta: dict[str, Any] = {
            "run_id": run_dir.name,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "suites": list(suite_results.keys()),
            "budgetcheck_version": version,
            "summary": self.summary.to_dict(),
        }
        if self.interrupted:
            meta["interrupted"] = True

        (run_dir / "meta.yaml").write_text(yaml.dump(meta, default_flow_style=False))
