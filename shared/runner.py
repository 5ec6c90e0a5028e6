"""
Command-line entry point that runs the storefront suites.

Translates a suite name plus a handful of options into a pytest
invocation, runs it in a subprocess bounded by the global suite
timeout, and re-runs only the failed tests a bounded number of times.

Usage examples::

    # Everything, with settings taken from the environment / .env:
    storefront-qa

    # API suite only, no retries:
    storefront-qa --suite api --retries 0

    # Smoke run on two browsers, headed, extra pytest args after "--":
    storefront-qa --suite smoke --browser chromium --browser firefox --headed -- -x

Exit codes are pytest's own, plus ``3`` when the global timeout expires.
"""

from __future__ import annotations

import argparse
import logging
import subprocess
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from config import BASE_DIR, Settings, get_settings
from shared.constants import BROWSERS

logger = logging.getLogger(__name__)

EXIT_TESTS_FAILED = 1
EXIT_GLOBAL_TIMEOUT = 3

DEFAULT_PROFILE = BASE_DIR / "runner.yml"
REPORTERS = ("junit", "html", "json")

# suite -> (test paths, marker expression)
SUITES: dict[str, tuple[list[str], str | None]] = {
    "all": (["tests"], None),
    "unit": (["tests/unit"], None),
    "api": (["tests/api"], "api"),
    "e2e": (["tests/e2e"], "e2e"),
    "smoke": (["tests"], "smoke"),
    "regression": (["tests"], "regression"),
}


@dataclass(frozen=True)
class RunOptions:
    """Fully resolved options for one runner invocation."""

    suite: str = "all"
    browsers: tuple[str, ...] = ("chromium",)
    device: str | None = None
    workers: str = "auto"
    retries: int = 1
    report_dir: Path = BASE_DIR / "reports"
    headed: bool = False
    test_timeout_s: int = 120
    global_timeout_s: int = 600
    reporters: tuple[str, ...] = REPORTERS
    extra_args: tuple[str, ...] = field(default_factory=tuple)


def load_profile(path: Path) -> dict[str, Any]:
    """
    Read an optional YAML runner profile.

    Returns:
        The parsed mapping, or ``{}`` when the file does not exist.

    Raises:
        ValueError: If the file is not a YAML mapping or names an unknown
            browser or reporter.
    """
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Runner profile {path} must be a mapping")

    unknown_browsers = set(data.get("browsers") or ()) - set(BROWSERS)
    if unknown_browsers:
        raise ValueError(f"Unknown browsers in {path}: {sorted(unknown_browsers)}")
    unknown_reporters = set(data.get("reporters") or ()) - set(REPORTERS)
    if unknown_reporters:
        raise ValueError(f"Unknown reporters in {path}: {sorted(unknown_reporters)}")
    return data


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="storefront-qa",
        description="Run the storefront browser and API suites.",
    )
    parser.add_argument("--suite", choices=sorted(SUITES), default="all")
    parser.add_argument(
        "--browser",
        dest="browsers",
        action="append",
        choices=BROWSERS,
        help="Browser engine; repeat to run on several",
    )
    parser.add_argument("--device", help="Playwright device descriptor name, e.g. 'iPhone 12'")
    parser.add_argument("--workers", help="Parallel workers (number or 'auto')")
    parser.add_argument("--retries", type=int, help="Re-runs of failed tests")
    parser.add_argument("--report-dir", type=Path, help="Directory for reports and artifacts")
    parser.add_argument("--headed", action="store_true", help="Show the browser window")
    parser.add_argument("--profile", type=Path, default=DEFAULT_PROFILE, help="YAML runner profile")
    parser.add_argument("pytest_args", nargs=argparse.REMAINDER, help="Extra arguments for pytest")
    return parser.parse_args(argv)


def resolve_options(args: argparse.Namespace, settings: Settings, profile: dict[str, Any]) -> RunOptions:
    """
    Merge CLI arguments, the runner profile and settings.

    Precedence is CLI, then profile, then settings defaults.
    """
    extra = list(args.pytest_args or [])
    if extra and extra[0] == "--":
        extra = extra[1:]

    workers = args.workers or profile.get("workers") or settings.workers or "auto"
    if args.retries is not None:
        retries = args.retries
    else:
        retries = int(profile.get("retries", settings.retries))

    return RunOptions(
        suite=args.suite,
        browsers=tuple(args.browsers or profile.get("browsers") or ("chromium",)),
        device=args.device or profile.get("device"),
        workers=str(workers),
        retries=max(retries, 0),
        report_dir=args.report_dir or settings.report_dir,
        headed=args.headed or not settings.headless,
        test_timeout_s=max(settings.test_timeout_ms // 1000, 1),
        global_timeout_s=max(settings.global_timeout_ms // 1000, 1),
        reporters=tuple(profile.get("reporters") or REPORTERS),
        extra_args=tuple(extra),
    )


def _report_name(stem: str, suffix: str, attempt: int) -> str:
    return f"{stem}{suffix}" if attempt == 0 else f"{stem}-retry{attempt}{suffix}"


def build_pytest_args(options: RunOptions, attempt: int = 0) -> list[str]:
    """
    Build the pytest argument list for one attempt.

    Args:
        options: Resolved run options.
        attempt: 0 for the first run; retries get their own report files
            and only re-run the previous failures.

    Returns:
        Arguments to pass after ``python -m pytest``.
    """
    paths, marker = SUITES[options.suite]
    report_dir = Path(options.report_dir)

    args = list(paths)
    if marker:
        args += ["-m", marker]
    args += ["-n", options.workers, "--timeout", str(options.test_timeout_s)]

    if "junit" in options.reporters:
        args.append(f"--junitxml={report_dir / _report_name('junit', '.xml', attempt)}")
    if "html" in options.reporters:
        args += [f"--html={report_dir / _report_name('report', '.html', attempt)}", "--self-contained-html"]
    if "json" in options.reporters:
        args.append(f"--results-json={report_dir / _report_name('results', '.json', attempt)}")

    if options.suite != "unit":
        for browser in options.browsers:
            args += ["--browser", browser]
        if options.device:
            args += ["--device", options.device]
        if options.headed:
            args.append("--headed")
        args += ["--output", str(report_dir / "artifacts")]

    if attempt > 0:
        args += ["--last-failed", "--last-failed-no-failures", "none"]

    args += list(options.extra_args)
    return args


def _run_pytest(args: list[str], timeout_s: float) -> int:
    if timeout_s <= 0:
        logger.error("Global timeout reached before pytest could start")
        return EXIT_GLOBAL_TIMEOUT
    command = [sys.executable, "-m", "pytest", *args]
    logger.info("Running: %s", " ".join(command))
    try:
        completed = subprocess.run(command, cwd=BASE_DIR, timeout=timeout_s, check=False)
    except subprocess.TimeoutExpired:
        logger.error("Global timeout of %.0fs expired; aborting run", timeout_s)
        return EXIT_GLOBAL_TIMEOUT
    return completed.returncode


def run(options: RunOptions) -> int:
    """
    Run the suite, then re-run failures up to ``options.retries`` times.

    All attempts share one global deadline.

    Returns:
        Exit code of the last attempt.
    """
    Path(options.report_dir).mkdir(parents=True, exist_ok=True)
    deadline = time.monotonic() + options.global_timeout_s

    exit_code = _run_pytest(build_pytest_args(options), deadline - time.monotonic())
    attempt = 0
    while exit_code == EXIT_TESTS_FAILED and attempt < options.retries:
        attempt += 1
        logger.info("Retrying failed tests (attempt %d of %d)", attempt, options.retries)
        exit_code = _run_pytest(build_pytest_args(options, attempt), deadline - time.monotonic())
    return exit_code


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    args = parse_args(argv)
    try:
        profile = load_profile(args.profile)
    except (OSError, yaml.YAMLError, ValueError) as exc:
        print(f"Invalid runner profile: {exc}", file=sys.stderr)
        return 2

    options = resolve_options(args, get_settings(), profile)
    logger.info(
        "Suite=%s browsers=%s workers=%s retries=%d",
        options.suite,
        ",".join(options.browsers),
        options.workers,
        options.retries,
    )
    return run(options)


if __name__ == "__main__":
    raise SystemExit(main())
