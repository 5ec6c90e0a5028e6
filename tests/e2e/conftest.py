"""Playwright fixtures for storefront E2E tests."""

from __future__ import annotations

import re
import shutil
from collections.abc import Generator
from pathlib import Path

import pytest
from playwright.sync_api import Browser, BrowserContext, Page, expect
from playwright.sync_api import Error as PlaywrightError

from config import Settings
from shared.actions import StorefrontActions, SuiteContext, build_suite_context, cleanup_test
from shared.constants import STANDARD_USER
from shared.narration import narrator
from tests.e2e.pages.cart_page import CartPage
from tests.e2e.pages.checkout_page import CheckoutPage
from tests.e2e.pages.inventory_page import InventoryPage
from tests.e2e.pages.login_page import LoginPage


def _slug(nodeid: str) -> str:
    return re.sub(r"[^A-Za-z0-9_.-]+", "_", nodeid).strip("_")


def _failed(node) -> bool:
    return any(
        getattr(node, f"rep_{when}", None) is not None and getattr(node, f"rep_{when}").failed
        for when in ("setup", "call")
    )


@pytest.fixture(scope="session")
def suite(settings: Settings) -> SuiteContext:
    return build_suite_context(settings)


@pytest.fixture(scope="session")
def base_url(settings: Settings) -> str:
    return settings.base_url


@pytest.fixture(scope="session", autouse=True)
def _assertion_timeout(settings: Settings) -> None:
    expect.set_options(timeout=settings.action_timeout_ms)


@pytest.fixture(scope="session")
def browser_type_launch_args(browser_type_launch_args: dict, settings: Settings) -> dict:
    # --headed from the command line wins over HEADLESS.
    return {"headless": settings.headless, **browser_type_launch_args}


@pytest.fixture(scope="session")
def browser_context_args(browser_context_args: dict) -> dict:
    # A --device descriptor brings its own viewport.
    return {
        "viewport": {"width": 1280, "height": 720},
        **browser_context_args,
        "ignore_https_errors": True,
    }


@pytest.fixture(scope="function")
def context(
    browser: Browser,
    browser_context_args: dict,
    settings: Settings,
    pytestconfig,
    request,
) -> Generator[BrowserContext, None, None]:
    """
    Fresh browser context per test, recording video and a trace.

    Both artifacts are kept under ``--output`` only when the test failed.
    """
    artifact_dir = Path(pytestconfig.getoption("--output")) / _slug(request.node.nodeid)
    video_dir = artifact_dir / "video"

    context = browser.new_context(**browser_context_args, record_video_dir=str(video_dir))
    context.set_default_timeout(settings.action_timeout_ms)
    context.set_default_navigation_timeout(settings.navigation_timeout_ms)
    context.tracing.start(screenshots=True, snapshots=True, sources=True)

    yield context

    failed = _failed(request.node)
    try:
        if failed:
            context.tracing.stop(path=str(artifact_dir / "trace.zip"))
        else:
            context.tracing.stop()
    except PlaywrightError as exc:
        narrator.warning(f"Could not stop tracing: {exc}")

    cleanup_test(None, context)
    if not failed:
        shutil.rmtree(video_dir, ignore_errors=True)
        if artifact_dir.exists() and not any(artifact_dir.iterdir()):
            artifact_dir.rmdir()


@pytest.fixture(scope="function")
def page(context: BrowserContext) -> Generator[Page, None, None]:
    page = context.new_page()
    yield page
    cleanup_test(page, None)


@pytest.fixture
def actions(page: Page, suite: SuiteContext, narration) -> StorefrontActions:
    return StorefrontActions(page, suite)


@pytest.fixture
def logged_in(actions: StorefrontActions) -> StorefrontActions:
    """Actions for a page already logged in as the standard user."""
    actions.login(STANDARD_USER)
    return actions


@pytest.fixture
def login_page(page: Page, suite: SuiteContext) -> LoginPage:
    return LoginPage(page, suite)


@pytest.fixture
def inventory_page(page: Page, suite: SuiteContext) -> InventoryPage:
    return InventoryPage(page, suite)


@pytest.fixture
def cart_page(page: Page, suite: SuiteContext) -> CartPage:
    return CartPage(page, suite)


@pytest.fixture
def checkout_page(page: Page, suite: SuiteContext) -> CheckoutPage:
    return CheckoutPage(page, suite)


@pytest.hookimpl(tryfirst=True, hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """Remember each phase's report and capture a screenshot on failure."""
    outcome = yield
    report = outcome.get_result()
    setattr(item, f"rep_{report.when}", report)

    if report.when == "call" and report.failed:
        page = item.funcargs.get("page")
        if page:
            settings = item.funcargs.get("settings")
            report_dir = settings.report_dir if settings else Path("reports")
            screenshot_dir = report_dir / "screenshots"
            screenshot_dir.mkdir(parents=True, exist_ok=True)
            screenshot_path = screenshot_dir / f"{_slug(item.nodeid)}.png"
            try:
                page.screenshot(path=str(screenshot_path))
                narrator.info(f"Screenshot saved: {screenshot_path}")
            except PlaywrightError as exc:
                narrator.warning(f"Failed to capture screenshot: {exc}")
