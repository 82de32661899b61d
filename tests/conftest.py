"""Pytest configuration and fixtures."""

import logging
import shutil
from pathlib import Path

import pytest

EXAMPLES_DIR = Path(__file__).resolve().parents[1] / "examples"


@pytest.fixture(autouse=True)
def cleanup_loggers():
    """Clean up budgetcheck loggers after each test to prevent name collisions."""
    yield

    loggers_to_remove = [
        name
        for name in logging.Logger.manager.loggerDict.keys()
        if name.startswith("budgetcheck")
    ]

    for name in loggers_to_remove:
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()
        del logging.Logger.manager.loggerDict[name]


@pytest.fixture
def logger():
    """DEBUG-level logger that writes nowhere in particular."""
    log = logging.getLogger("budgetcheck_test")
    log.setLevel(logging.DEBUG)
    return log


@pytest.fixture
def template_text() -> str:
    return (EXAMPLES_DIR / "templates" / "dcp.jsonc.tmpl").read_text(encoding="utf-8")


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A project with the example template, cost source and a config that
    uses ``true`` as a fast budget command."""
    project = tmp_path / "project"
    shutil.copytree(EXAMPLES_DIR / "templates", project / "templates")
    shutil.copytree(EXAMPLES_DIR / "lib", project / "lib")
    (project / "budgetcheck.yaml").write_text(
        """\
suites: [cost, template]
cost_model:
  source: lib/budget-firewall.sh
command:
  argv: ["true"]
  repeat: 2
template:
  path: templates/dcp.jsonc.tmpl
"""
    )
    return project
