"""Nox sessions orchestrating the bq_logging unit suites."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

import nox


PYTHON_VERSIONS = ["3.11", "3.12"]
PROJECT_ROOT = Path(__file__).parent

nox.options.sessions = ["tests(unit_logging)"]


def _install_test_requirements(session: nox.Session) -> None:
    """Install the package and the core testing toolchain inside the session environment."""

    session.install("-e", ".[test]")


def _run_suite(session: nox.Session, targets: Iterable[str]) -> None:
    _install_test_requirements(session)

    args = ["coverage", "run", "--source=bq_logging", "-m", "pytest", *targets]
    args.extend(session.posargs)

    session.log("Running suite: %s", " ".join(args))
    session.run(*args)
    session.run("coverage", "report", "-m")


@nox.session(python=PYTHON_VERSIONS, reuse_venv=True, name="tests(unit_logging)")
def tests_unit_logging(session: nox.Session) -> None:
    """Execute the BigQuery logging unit suites with coverage."""

    _run_suite(session, ["tests/unit/bq_logging"])
