from __future__ import annotations

from pathlib import Path
from typing import Any

from junitparser import Failure, JUnitXml, TestCase, TestSuite


def _failure_text(assertion: dict[str, Any]) -> str:
    return (
        f"Expected: {assertion.get('expected')}\n"
        f"Got: {assertion.get('actual')}\n"
        f"{assertion.get('message', '')}"
    )


def write_junit(run_dir: Path, suite_results: dict[str, dict[str, Any]]) -> Path:
    """Write junit.xml from per-suite results, return path.

    ``suite_results`` maps suite name to ``{"title", "assertions", "summary",
    "elapsed_seconds"}`` as produced by the runner.
    """
    xml = JUnitXml()

    for suite_name, suite_result in suite_results.items():
        suite = TestSuite(suite_result.get("title", suite_name))
        summary = suite_result.get("summary", {})
        for key in ("run", "passed", "failed"):
            if key in summary:
                suite.add_property(key, str(summary[key]))

        for assertion in suite_result.get("assertions", []):
            case = TestCase(assertion["name"])
            case.classname = suite_name
            if not assertion.get("passed", True):
                case.result = Failure(assertion.get("message", ""))
                case.result[0].text = _failure_text(assertion)
            suite.add_testcase(case)

        # Set time after add_testcase (add_testcase resets it via update_statistics)
        suite.time = float(suite_result.get("elapsed_seconds") or 0.0)

        # Use append (not +=) to preserve properties and time
        xml.append(suite)

    junit_path = run_dir / "junit.xml"
    xml.write(str(junit_path), pretty=True)
    return junit_path


def generate_report(run_dir: Path) -> Path:
    """Render junit.xml → report.html using Jinja2 template, return path."""
    import yaml
    from jinja2 import Environment, FileSystemLoader

    junit_path = run_dir / "junit.xml"
    report_path = run_dir / "report.html"

    meta: dict = {}
    meta_path = run_dir / "meta.yaml"
    if meta_path.exists():
        meta = yaml.safe_load(meta_path.read_text()) or {}

    xml = JUnitXml.fromfile(str(junit_path))

    suites = []
    for suite in xml:
        cases = []
        for case in suite:
            failure = None
            if case.result:
                failure = {
                    "message": case.result[0].message or "",
                    "text": case.result[0].text or "",
                }
            cases.append({"name": case.name, "suite": case.classname, "failure": failure})

        suites.append(
            {
                "name": suite.name,
                "tests": suite.tests,
                "failures": suite.failures,
                "time": suite.time,
                "cases": cases,
            }
        )

    total_tests = sum(s["tests"] for s in suites)
    total_failures = sum(s["failures"] for s in suites)

    tmpl_dir = Path(__file__).parent / "templates"
    env = Environment(loader=FileSystemLoader(str(tmpl_dir)), autoescape=True)
    template = env.get_template("report.html.j2")

    html = template.render(
        suites=suites,
        total_tests=total_tests,
        total_failures=total_failures,
        total_passed=total_tests - total_failures,
        run_dir=str(run_dir),
        meta=meta,
    )
    report_path.write_text(html, encoding="utf-8")
    return report_path
