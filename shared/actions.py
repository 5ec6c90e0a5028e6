"""
Domain actions for the Sauce Demo storefront.

Translates intent ("log in as X", "add the nth product to the cart",
"sort by price") into Playwright calls and owns the wait policy, so
scenarios never hand-roll timing. Every wait is bounded and a timeout
surfaces as a named error from :mod:`shared.errors`; any other driver
error propagates untouched.

Selectors, timeouts and URLs arrive through a :class:`SuiteContext`
rather than module globals, which keeps this layer testable against
mock pages.

Key Concepts Demonstrated:
- Helper library on top of the Page Object Model
- Predicate polling instead of fixed sleeps where the UI allows it
- Guaranteed resource release in ``cleanup_test``
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from playwright.sync_api import BrowserContext, Locator, Page
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from config import Settings, get_settings
from shared.constants import (
    SELECTORS,
    TIMEOUTS,
    Credentials,
    Selectors,
    SortOrder,
    StorefrontPath,
    Timeouts,
)
from shared.errors import (
    ElementNotFound,
    LoginError,
    LoginTimeout,
    LogoutTimeout,
    NavigationTimeout,
    SortTimeout,
)
from shared.models import CartItem, CheckoutInfo, OrderSummary, Product, parse_amount
from shared.narration import TestLogger, narrator

logger = logging.getLogger(__name__)

SORT_POLL_INTERVAL_MS = 100


@dataclass(frozen=True)
class SuiteContext:
    """Everything the helper layer needs besides the page itself."""

    settings: Settings
    selectors: Selectors = SELECTORS
    timeouts: Timeouts = TIMEOUTS
    narrator: TestLogger = field(default=narrator, compare=False)


def build_suite_context(settings: Settings | None = None) -> SuiteContext:
    return SuiteContext(settings=settings or get_settings())


@dataclass
class Timing:
    label: str
    elapsed_ms: float = 0.0


@contextmanager
def measure(label: str) -> Iterator[Timing]:
    """
    Time the enclosed block in milliseconds.

    Example:
        with measure("login") as timing:
            actions.login(STANDARD_USER)
        assert timing.elapsed_ms < limit
    """
    timing = Timing(label)
    start = time.perf_counter()
    try:
        yield timing
    finally:
        timing.elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info("%s took %.0fms", label, timing.elapsed_ms)


def is_sorted_by(products: list[Product], order: SortOrder) -> bool:
    """Return True when ``products`` are in the order the dropdown promises."""
    if order.by_price:
        keys = [product.price_value for product in products]
    else:
        keys = [product.name for product in products]
    expected = sorted(keys, reverse=order.descending)
    return keys == expected


class StorefrontActions:
    """
    Named storefront operations bound to one page.

    Attributes:
        page: Playwright page driven by the actions.
        suite: Selectors, timeouts and settings in use.
    """

    def __init__(self, page: Page, suite: SuiteContext):
        self.page = page
        self.suite = suite
        self.sel = suite.selectors
        self.timeouts = suite.timeouts
        self.log = suite.narrator

    # -------------------------------------------------------------------------
    # Navigation and waiting
    # -------------------------------------------------------------------------

    def goto(self, path: str | StorefrontPath = StorefrontPath.LOGIN) -> None:
        """
        Navigate to a storefront path and wait for it to settle.

        Raises:
            NavigationTimeout: If navigation exceeds the long timeout.
        """
        path_value = path.value if isinstance(path, StorefrontPath) else path
        url = self.suite.settings.get_url(path_value)
        try:
            self.page.goto(url, timeout=self.timeouts.long)
        except PlaywrightTimeoutError as exc:
            raise NavigationTimeout(
                f"Navigation to {url} timed out", timeout_ms=self.timeouts.long
            ) from exc
        self.wait_for_page_load()

    def wait_for_page_load(self, timeout: int | None = None) -> None:
        """
        Wait for DOM-ready and network-idle, then for any loading spinner.

        The spinner wait is best effort: an absent spinner satisfies it
        immediately and a spinner that never hides only logs a warning.

        Raises:
            NavigationTimeout: If either load state is not reached.
        """
        timeout = timeout or self.timeouts.medium
        try:
            self.page.wait_for_load_state("domcontentloaded", timeout=timeout)
            self.page.wait_for_load_state("networkidle", timeout=timeout)
        except PlaywrightTimeoutError as exc:
            raise NavigationTimeout(
                f"Page {self.page.url} did not finish loading", timeout_ms=timeout
            ) from exc

        spinner = self.sel.common.loading_spinner
        try:
            self.page.locator(spinner).first.wait_for(state="hidden", timeout=self.timeouts.short)
        except PlaywrightTimeoutError:
            self.log.warning(f"Loading spinner still visible after {self.timeouts.short}ms")

    def _wait_visible(self, locator: Locator, selector: str, timeout: int) -> None:
        try:
            locator.wait_for(state="visible", timeout=timeout)
        except PlaywrightTimeoutError as exc:
            raise ElementNotFound(
                "Element not visible", selector=selector, timeout_ms=timeout
            ) from exc

    def _click(self, selector: str, locator: Locator | None = None, timeout: int | None = None) -> None:
        timeout = timeout or self.timeouts.medium
        try:
            target = locator if locator is not None else self.page.locator(selector)
            target.click(timeout=timeout)
        except PlaywrightTimeoutError as exc:
            raise ElementNotFound("Element not clickable", selector=selector, timeout_ms=timeout) from exc

    def _fill(self, selector: str, value: str, timeout: int | None = None) -> None:
        timeout = timeout or self.timeouts.medium
        try:
            self.page.locator(selector).fill(value, timeout=timeout)
        except PlaywrightTimeoutError as exc:
            raise ElementNotFound("Field not editable", selector=selector, timeout_ms=timeout) from exc

    # -------------------------------------------------------------------------
    # Authentication
    # -------------------------------------------------------------------------

    def open_login_page(self) -> None:
        self.goto(StorefrontPath.LOGIN)

    def submit_credentials(self, credentials: Credentials) -> None:
        """
        Fill and submit the login form without waiting for the outcome.

        Raises:
            ElementNotFound: If a form control is missing.
        """
        login = self.sel.login
        self._fill(login.username_input, credentials.username)
        self._fill(login.password_input, credentials.password)
        self._click(login.login_button)

    def login(self, credentials: Credentials) -> None:
        """
        Log in and block until the product list is visible.

        Calling this twice without :meth:`logout` in between is not
        supported; the login form is no longer on the page.

        Args:
            credentials: Demo account to use.

        Raises:
            LoginError: If the form shows an error banner instead.
            LoginTimeout: If the form is missing, or neither outcome appears
                within the medium timeout.
        """
        self.log.info(f"Logging in as: {credentials.username}")
        self.open_login_page()
        try:
            self.submit_credentials(credentials)
        except ElementNotFound as exc:
            raise LoginTimeout(
                f"Login form unavailable for {credentials.username}",
                selector=exc.selector,
                timeout_ms=exc.timeout_ms,
            ) from exc

        product_list = self.page.locator(self.sel.inventory.product_list)
        error_banner = self.page.locator(self.sel.login.error_message)
        timeout = self.timeouts.medium
        try:
            product_list.or_(error_banner).first.wait_for(state="visible", timeout=timeout)
        except PlaywrightTimeoutError as exc:
            raise LoginTimeout(
                f"Login as {credentials.username} did not complete",
                selector=self.sel.inventory.product_list,
                timeout_ms=timeout,
            ) from exc

        if error_banner.is_visible():
            error_text = (error_banner.text_content() or "").strip()
            raise LoginError(
                f"Login as {credentials.username} rejected: {error_text}",
                error_text=error_text,
                selector=self.sel.login.error_message,
            )

        self.log.success(f"Successfully logged in as {credentials.username}")

    def try_login(self, credentials: Credentials) -> str | None:
        """Log in, returning the error banner text instead of raising ``LoginError``."""
        try:
            self.login(credentials)
        except LoginError as exc:
            return exc.error_text
        return None

    def login_error_text(self) -> str:
        return (self.page.locator(self.sel.login.error_message).text_content() or "").strip()

    def dismiss_error(self) -> None:
        self._click(self.sel.login.error_dismiss_button, timeout=self.timeouts.short)

    def logout(self, *, strict: bool = False) -> bool:
        """
        Log out through the navigation menu.

        A missing menu or logout control within the short timeout means
        the session is already logged out: this logs a warning and
        returns False, unless ``strict`` is set.

        Returns:
            True if a logout was performed.

        Raises:
            LogoutTimeout: In strict mode when the control is missing, or
                whenever the login form does not reappear.
        """
        self.log.info("Logging out")
        nav = self.sel.nav
        short = self.timeouts.short
        try:
            self.page.locator(nav.menu_button).click(timeout=short)
            self.page.locator(nav.logout_link).click(timeout=short)
        except PlaywrightTimeoutError as exc:
            if strict:
                raise LogoutTimeout(
                    "Logout control not found", selector=nav.logout_link, timeout_ms=short
                ) from exc
            self.log.warning("Logout control not found; treating session as logged out")
            return False

        medium = self.timeouts.medium
        try:
            self.page.locator(self.sel.login.login_button).wait_for(state="visible", timeout=medium)
        except PlaywrightTimeoutError as exc:
            raise LogoutTimeout(
                "Login form did not reappear after logout",
                selector=self.sel.login.login_button,
                timeout_ms=medium,
            ) from exc

        self.log.success("Successfully logged out")
        return True

    # -------------------------------------------------------------------------
    # Inventory
    # -------------------------------------------------------------------------

    def product_item(self, index: int) -> Locator:
        return self.page.locator(self.sel.inventory.product_item).nth(index)

    def get_all_products(self) -> list[Product]:
        """Snapshot every rendered product row, in DOM order."""
        inventory = self.sel.inventory
        products = []
        for row in self.page.locator(inventory.product_item).all():
            products.append(Product(
                name=(row.locator(inventory.product_name).text_content() or "").strip(),
                price=(row.locator(inventory.product_price).text_content() or "").strip(),
                description=(row.locator(inventory.product_description).text_content() or "").strip(),
            ))
        self.log.info(f"Found {len(products)} products in inventory")
        return products

    def add_product_to_cart(self, index: int = 0) -> str:
        """
        Add the nth product (0-based) to the cart.

        The name is read before clicking so a re-render after the state
        change cannot race the read.

        Returns:
            Display name of the added product.

        Raises:
            ElementNotFound: If the product has no add control (already in
                the cart, or fewer than ``index + 1`` products).
        """
        inventory = self.sel.inventory
        item = self.product_item(index)
        add_button = item.locator(inventory.add_to_cart_button)
        self._wait_visible(add_button, inventory.add_to_cart_button, self.timeouts.short)

        product_name = (item.locator(inventory.product_name).text_content() or "").strip()
        self.log.info(f"Adding product to cart: {product_name}")
        self._click(inventory.add_to_cart_button, add_button)
        self.log.success(f"Product added to cart: {product_name}")
        return product_name

    def remove_product_from_cart(self, index: int = 0) -> str:
        """Remove the nth product from the inventory page; returns its name."""
        inventory = self.sel.inventory
        item = self.product_item(index)
        remove_button = item.locator(inventory.remove_button)
        self._wait_visible(remove_button, inventory.remove_button, self.timeouts.short)

        product_name = (item.locator(inventory.product_name).text_content() or "").strip()
        self._click(inventory.remove_button, remove_button)
        self.log.info(f"Removed product from cart: {product_name}")
        return product_name

    def cart_count(self) -> int:
        """Number on the cart badge, 0 when the badge is not shown."""
        badge = self.page.locator(self.sel.nav.cart_badge)
        if badge.count() == 0 or not badge.is_visible():
            return 0
        return int((badge.text_content() or "0").strip())

    def selected_sort_order(self) -> SortOrder:
        return SortOrder(self.page.locator(self.sel.inventory.sort_dropdown).input_value())

    def sort_products(self, order: SortOrder) -> bool:
        """
        Select a sort option and wait until the list reflects it.

        Polls the rendered products until they are in the requested order.
        Accounts whose sorting is known to be broken never satisfy that
        predicate; for them the call falls back to a fixed settle delay and
        logs a warning instead of failing.

        Returns:
            True if the ordering was observed, False if the fallback delay
            was used.

        Raises:
            SortTimeout: If the dropdown itself cannot be operated.
        """
        self.log.info(f"Sorting products by: {order.label}")
        dropdown = self.sel.inventory.sort_dropdown
        try:
            self.page.locator(dropdown).select_option(order.value, timeout=self.timeouts.short)
        except PlaywrightTimeoutError as exc:
            raise SortTimeout(
                f"Could not select sort option {order.value}",
                selector=dropdown,
                timeout_ms=self.timeouts.short,
            ) from exc

        deadline = time.monotonic() + self.timeouts.short / 1000
        while True:
            if is_sorted_by(self.get_all_products(), order):
                self.log.success(f"Products sorted by {order.label}")
                return True
            if time.monotonic() >= deadline:
                break
            self.page.wait_for_timeout(SORT_POLL_INTERVAL_MS)

        self.log.warning(
            f"Product order never matched {order.label}; "
            f"waiting {self.timeouts.sort_settle}ms settle delay"
        )
        self.page.wait_for_timeout(self.timeouts.sort_settle)
        return False

    # -------------------------------------------------------------------------
    # Menu
    # -------------------------------------------------------------------------

    def _wait_menu(self, open_: bool) -> None:
        # The panel slides off-screen rather than hiding; aria-hidden tracks it.
        selector = f'{self.sel.nav.menu_panel}[aria-hidden="{str(not open_).lower()}"]'
        try:
            self.page.locator(selector).wait_for(state="attached", timeout=self.timeouts.short)
        except PlaywrightTimeoutError as exc:
            raise ElementNotFound(
                f"Menu did not {'open' if open_ else 'close'}",
                selector=selector,
                timeout_ms=self.timeouts.short,
            ) from exc

    def open_menu(self) -> None:
        self._click(self.sel.nav.menu_button)
        self._wait_menu(open_=True)

    def close_menu(self) -> None:
        self._click(self.sel.nav.menu_close_button)
        self._wait_menu(open_=False)

    def reset_app_state(self) -> None:
        """Clear the stored cart through the menu's reset link."""
        self.open_menu()
        self._click(self.sel.nav.reset_app_link)
        self.close_menu()

    # -------------------------------------------------------------------------
    # Cart
    # -------------------------------------------------------------------------

    def open_cart(self) -> None:
        self._click(self.sel.nav.cart_link)
        self._wait_visible(
            self.page.locator(self.sel.cart.cart_list), self.sel.cart.cart_list, self.timeouts.medium
        )

    def get_cart_items(self) -> list[CartItem]:
        cart = self.sel.cart
        items = []
        for row in self.page.locator(f"{cart.cart_list} {cart.cart_item}").all():
            quantity_text = (row.locator(cart.item_quantity).text_content() or "1").strip()
            items.append(CartItem(
                name=(row.locator(cart.item_name).text_content() or "").strip(),
                price=(row.locator(cart.item_price).text_content() or "").strip(),
                quantity=int(quantity_text or "1"),
            ))
        return items

    def remove_cart_item(self, index: int = 0) -> None:
        cart = self.sel.cart
        row = self.page.locator(f"{cart.cart_list} {cart.cart_item}").nth(index)
        self._click(cart.remove_button, row.locator(cart.remove_button), self.timeouts.short)

    def continue_shopping(self) -> None:
        self._click(self.sel.cart.continue_shopping_button)
        self._wait_visible(
            self.page.locator(self.sel.inventory.product_list),
            self.sel.inventory.product_list,
            self.timeouts.medium,
        )

    # -------------------------------------------------------------------------
    # Checkout
    # -------------------------------------------------------------------------

    def start_checkout(self) -> None:
        """From the cart page, open the checkout information form."""
        self._click(self.sel.cart.checkout_button)
        checkout = self.sel.checkout
        self._wait_visible(
            self.page.locator(checkout.first_name_input), checkout.first_name_input, self.timeouts.medium
        )

    def fill_checkout_information(self, info: CheckoutInfo) -> None:
        checkout = self.sel.checkout
        self._fill(checkout.first_name_input, info.first_name)
        self._fill(checkout.last_name_input, info.last_name)
        self._fill(checkout.postal_code_input, info.postal_code)

    def continue_checkout(self) -> None:
        self._click(self.sel.checkout.continue_button)

    def checkout_error_text(self) -> str:
        return (self.page.locator(self.sel.checkout.error_message).text_content() or "").strip()

    def submit_checkout_information(self, info: CheckoutInfo) -> None:
        """Fill step one and wait for the overview page."""
        self.fill_checkout_information(info)
        self.continue_checkout()
        checkout = self.sel.checkout
        self._wait_visible(
            self.page.locator(checkout.summary_container), checkout.summary_container, self.timeouts.medium
        )

    def read_order_summary(self) -> OrderSummary:
        """Read the totals exactly as the overview page computed them."""
        checkout = self.sel.checkout
        items = []
        for row in self.page.locator(checkout.summary_item).all():
            items.append(CartItem(
                name=(row.locator(self.sel.cart.item_name).text_content() or "").strip(),
                price=(row.locator(self.sel.cart.item_price).text_content() or "").strip(),
            ))
        return OrderSummary(
            subtotal=parse_amount(self.page.locator(checkout.subtotal_label).text_content() or ""),
            tax=parse_amount(self.page.locator(checkout.tax_label).text_content() or ""),
            total=parse_amount(self.page.locator(checkout.total_label).text_content() or ""),
            items=tuple(items),
        )

    def finish_checkout(self) -> None:
        checkout = self.sel.checkout
        self._click(checkout.finish_button)
        self._wait_visible(
            self.page.locator(checkout.complete_header), checkout.complete_header, self.timeouts.medium
        )

    def back_home(self) -> None:
        self._click(self.sel.checkout.back_home_button)
        self._wait_visible(
            self.page.locator(self.sel.inventory.product_list),
            self.sel.inventory.product_list,
            self.timeouts.medium,
        )


def cleanup_test(page: Page | None, context: BrowserContext | None, log: TestLogger = narrator) -> None:
    """
    Close the page, then its browser context, never raising.

    Runs from a ``finally`` block or fixture teardown so a failing test
    body cannot leak browser processes. Close-time errors are logged as
    warnings because they must not mask the real test outcome.
    """
    if page is not None:
        try:
            if not page.is_closed():
                page.close()
        except Exception as exc:  # noqa: BLE001 - teardown must not raise
            log.warning(f"Cleanup warning (page): {exc}")
    if context is not None:
        try:
            context.close()
        except Exception as exc:  # noqa: BLE001 - teardown must not raise
            log.warning(f"Cleanup warning (context): {exc}")
