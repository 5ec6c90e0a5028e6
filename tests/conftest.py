"""
Shared pytest fixtures and hooks for every storefront suite.

Fixtures here provide resolved settings, the synthetic data generator
and the narration logger. The hooks gate whole suites behind feature
flags and write an optional machine-readable results file.

Key Concepts Demonstrated:
- Fixture scopes (function, session)
- Collection-time skipping driven by configuration
- A small pytest plugin object holding per-session state
"""

from __future__ import annotations

import json
import time
from pathlib import Path

import pytest

from config import Settings, get_settings
from shared.constants import TAG_FEATURE_FLAGS
from shared.narration import TestLogger, narrator
from shared.test_data import TestDataGenerator


# -----------------------------------------------------------------------------
# Options and collection
# -----------------------------------------------------------------------------

def pytest_addoption(parser):
    parser.addoption(
        "--results-json",
        action="store",
        default=None,
        metavar="PATH",
        help="Write a JSON summary of test outcomes to PATH",
    )


def pytest_configure(config):
    path = config.getoption("--results-json")
    # xdist workers report to the controller, which writes the file once.
    if path and not hasattr(config, "workerinput"):
        config.pluginmanager.register(JsonResultsWriter(Path(path)), "storefront-json-results")


def pytest_collection_modifyitems(config, items):
    """Skip tests whose marker family is switched off by a feature flag."""
    settings = get_settings()
    for item in items:
        for marker_name, flag in TAG_FEATURE_FLAGS.items():
            if item.get_closest_marker(marker_name) is None:
                continue
            if not getattr(settings.feature_flags, flag):
                item.add_marker(pytest.mark.skip(reason=f"{flag} is disabled"))
                break


class JsonResultsWriter:
    """Collects test reports and dumps them as JSON at session end."""

    def __init__(self, path: Path):
        self.path = path
        self.started = time.time()
        self.results: list[dict] = []

    def pytest_runtest_logreport(self, report):
        # One entry per test: the call phase, or setup/teardown when they
        # are what failed or skipped.
        if report.when == "call" or not report.passed:
            self.results.append({
                "nodeid": report.nodeid,
                "phase": report.when,
                "outcome": report.outcome,
                "duration_s": round(report.duration, 3),
                "markers": sorted(k for k, v in report.keywords.items() if v == 1),
                "message": str(report.longrepr) if report.failed else None,
            })

    def pytest_sessionfinish(self, session, exitstatus):
        summary = {"passed": 0, "failed": 0, "skipped": 0}
        for result in self.results:
            summary[result["outcome"]] = summary.get(result["outcome"], 0) + 1
        payload = {
            "started_at": self.started,
            "duration_s": round(time.time() - self.started, 3),
            "exit_status": int(exitstatus),
            "summary": summary,
            "tests": self.results,
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")


# -----------------------------------------------------------------------------
# Shared fixtures
# -----------------------------------------------------------------------------

@pytest.fixture(scope="session")
def settings() -> Settings:
    """Resolved configuration for this test process."""
    return get_settings()


@pytest.fixture
def data_generator(settings: Settings) -> TestDataGenerator:
    """Fresh generator bound to the configured password policy."""
    return TestDataGenerator(settings.password_policy)


@pytest.fixture
def narration(request) -> TestLogger:
    """Narration logger that has already announced the current test."""
    narrator.test_start(request.node.name)
    return narrator
