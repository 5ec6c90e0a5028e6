"""
Static values shared by every test suite.

Selectors are grouped per page surface (login form, navigation menu,
inventory list, cart, checkout) as frozen dataclasses instead of
comma-joined selector strings, so each field names exactly one element
of the Sauce Demo storefront.

Key Concepts Demonstrated:
- Immutable configuration records built once at import time
- ``data-test`` attributes as the preferred locator strategy
- Timeout tiers shared by the helper layer and the runner
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType


# -----------------------------------------------------------------------------
# Timeouts (milliseconds)
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Timeouts:
    """Bounded wait tiers used by helpers and assertions."""

    short: int = 5_000
    medium: int = 10_000
    long: int = 30_000
    extra_long: int = 60_000
    test: int = 120_000
    sort_settle: int = 500


TIMEOUTS = Timeouts()


# -----------------------------------------------------------------------------
# Test tags -> pytest markers
# -----------------------------------------------------------------------------

class TestTag(str, Enum):
    """Tags used to group scenarios; each one is a registered pytest marker."""

    __test__ = False

    SMOKE = "smoke"
    REGRESSION = "regression"
    CRITICAL = "critical"
    SANITY = "sanity"
    API = "api"
    E2E = "e2e"
    AUTH = "auth"
    ECOMMERCE = "ecommerce"
    PAYMENT = "payment"
    MOBILE = "mobile"


# Feature flag attribute that gates each tag (see config.FeatureFlags).
TAG_FEATURE_FLAGS = MappingProxyType({
    TestTag.API.value: "enable_api_tests",
    TestTag.E2E.value: "enable_e2e_tests",
    TestTag.SMOKE.value: "enable_smoke_tests",
    TestTag.REGRESSION.value: "enable_regression_tests",
    TestTag.AUTH.value: "enable_auth_tests",
    TestTag.ECOMMERCE.value: "enable_ecommerce_tests",
    TestTag.PAYMENT.value: "enable_payment_tests",
    TestTag.MOBILE.value: "enable_mobile_tests",
})


# -----------------------------------------------------------------------------
# Selectors
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class LoginSelectors:
    username_input: str = '[data-test="username"]'
    password_input: str = '[data-test="password"]'
    login_button: str = '[data-test="login-button"]'
    error_message: str = '[data-test="error"]'
    error_dismiss_button: str = ".error-message-container .error-button"


@dataclass(frozen=True)
class NavSelectors:
    menu_button: str = "#react-burger-menu-btn"
    menu_close_button: str = "#react-burger-cross-btn"
    menu_panel: str = ".bm-menu-wrap"
    all_items_link: str = "#inventory_sidebar_link"
    about_link: str = "#about_sidebar_link"
    logout_link: str = "#logout_sidebar_link"
    reset_app_link: str = "#reset_sidebar_link"
    cart_link: str = '[data-test="shopping-cart-link"]'
    cart_badge: str = '[data-test="shopping-cart-badge"]'


@dataclass(frozen=True)
class InventorySelectors:
    product_list: str = '[data-test="inventory-list"]'
    product_item: str = '[data-test="inventory-item"]'
    product_name: str = '[data-test="inventory-item-name"]'
    product_price: str = '[data-test="inventory-item-price"]'
    product_description: str = '[data-test="inventory-item-desc"]'
    product_image: str = ".inventory_item_img img"
    add_to_cart_button: str = 'button[data-test^="add-to-cart"]'
    remove_button: str = 'button[data-test^="remove"]'
    sort_dropdown: str = '[data-test="product-sort-container"]'


@dataclass(frozen=True)
class CartSelectors:
    cart_list: str = '[data-test="cart-list"]'
    cart_item: str = '[data-test="inventory-item"]'
    item_name: str = '[data-test="inventory-item-name"]'
    item_price: str = '[data-test="inventory-item-price"]'
    item_quantity: str = '[data-test="item-quantity"]'
    remove_button: str = 'button[data-test^="remove"]'
    checkout_button: str = '[data-test="checkout"]'
    continue_shopping_button: str = '[data-test="continue-shopping"]'


@dataclass(frozen=True)
class CheckoutSelectors:
    first_name_input: str = '[data-test="firstName"]'
    last_name_input: str = '[data-test="lastName"]'
    postal_code_input: str = '[data-test="postalCode"]'
    continue_button: str = '[data-test="continue"]'
    cancel_button: str = '[data-test="cancel"]'
    finish_button: str = '[data-test="finish"]'
    error_message: str = '[data-test="error"]'
    error_dismiss_button: str = ".error-message-container .error-button"
    summary_container: str = '[data-test="checkout-summary-container"]'
    summary_item: str = '[data-test="inventory-item"]'
    payment_info: str = '[data-test="payment-info-value"]'
    shipping_info: str = '[data-test="shipping-info-value"]'
    subtotal_label: str = '[data-test="subtotal-label"]'
    tax_label: str = '[data-test="tax-label"]'
    total_label: str = '[data-test="total-label"]'
    complete_header: str = '[data-test="complete-header"]'
    complete_text: str = '[data-test="complete-text"]'
    back_home_button: str = '[data-test="back-to-products"]'


@dataclass(frozen=True)
class CommonSelectors:
    loading_spinner: str = ".loading"


@dataclass(frozen=True)
class Selectors:
    """All storefront selectors, one group per page surface."""

    login: LoginSelectors = field(default_factory=LoginSelectors)
    nav: NavSelectors = field(default_factory=NavSelectors)
    inventory: InventorySelectors = field(default_factory=InventorySelectors)
    cart: CartSelectors = field(default_factory=CartSelectors)
    checkout: CheckoutSelectors = field(default_factory=CheckoutSelectors)
    common: CommonSelectors = field(default_factory=CommonSelectors)


SELECTORS = Selectors()


# -----------------------------------------------------------------------------
# Storefront paths and sort options
# -----------------------------------------------------------------------------

class StorefrontPath(str, Enum):
    LOGIN = "/"
    INVENTORY = "/inventory.html"
    CART = "/cart.html"
    CHECKOUT_INFO = "/checkout-step-one.html"
    CHECKOUT_OVERVIEW = "/checkout-step-two.html"
    CHECKOUT_COMPLETE = "/checkout-complete.html"


class SortOrder(str, Enum):
    """Option values of the product sort dropdown."""

    NAME_ASC = "az"
    NAME_DESC = "za"
    PRICE_ASC = "lohi"
    PRICE_DESC = "hilo"

    @property
    def label(self) -> str:
        return _SORT_LABELS[self]

    @property
    def by_price(self) -> bool:
        return self in (SortOrder.PRICE_ASC, SortOrder.PRICE_DESC)

    @property
    def descending(self) -> bool:
        return self in (SortOrder.NAME_DESC, SortOrder.PRICE_DESC)


_SORT_LABELS = {
    SortOrder.NAME_ASC: "Name (A to Z)",
    SortOrder.NAME_DESC: "Name (Z to A)",
    SortOrder.PRICE_ASC: "Price (low to high)",
    SortOrder.PRICE_DESC: "Price (high to low)",
}


# -----------------------------------------------------------------------------
# Demo accounts and form data
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Credentials:
    username: str
    password: str


DEMO_PASSWORD = "secret_sauce"

DEMO_USERS = MappingProxyType({
    "standard_user": Credentials("standard_user", DEMO_PASSWORD),
    "locked_out_user": Credentials("locked_out_user", DEMO_PASSWORD),
    "problem_user": Credentials("problem_user", DEMO_PASSWORD),
    "performance_glitch_user": Credentials("performance_glitch_user", DEMO_PASSWORD),
    "error_user": Credentials("error_user", DEMO_PASSWORD),
    "visual_user": Credentials("visual_user", DEMO_PASSWORD),
})

STANDARD_USER = DEMO_USERS["standard_user"]
LOCKED_OUT_USER = DEMO_USERS["locked_out_user"]

# Every account that is expected to reach the inventory page.
LOGIN_CAPABLE_USERS = tuple(
    user for name, user in DEMO_USERS.items() if name != "locked_out_user"
)

VALID_CHECKOUT_INFO = MappingProxyType({
    "first_name": "John",
    "last_name": "Doe",
    "postal_code": "12345",
})

# Inputs that must be rejected as plain text, never interpreted.
INJECTION_PAYLOADS = (
    "' OR '1'='1",
    "admin'--",
    "'; DROP TABLE users; --",
    "<script>alert('xss')</script>",
    '"><img src=x onerror=alert(1)>',
)

VALID_EMAILS = (
    "testuser@example.com",
    "qa.engineer@testdomain.com",
    "automation.test@demo.com",
)

INVALID_EMAILS = (
    "invalid-email",
    "@example.com",
    "test@",
    "test..test@example.com",
)


# -----------------------------------------------------------------------------
# HTTP
# -----------------------------------------------------------------------------

class HttpStatus:
    OK = 200
    CREATED = 201
    NO_CONTENT = 204
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    CONFLICT = 409
    INTERNAL_SERVER_ERROR = 500


class ApiEndpoint:
    """Endpoint templates of the public placeholder and auth-simulation APIs."""

    USERS = "/users"
    USER = "/users/{user_id}"
    POSTS = "/posts"
    POST = "/posts/{post_id}"
    POST_COMMENTS = "/posts/{post_id}/comments"
    COMMENTS = "/comments"
    AUTH_REGISTER = "/register"
    AUTH_LOGIN = "/login"


# -----------------------------------------------------------------------------
# Browsers, devices, environments
# -----------------------------------------------------------------------------

BROWSERS = ("chromium", "firefox", "webkit")

DESKTOP_DEVICES = ("Desktop Chrome", "Desktop Firefox", "Desktop Safari")
MOBILE_DEVICES = ("iPhone 12", "Pixel 5", "Galaxy S5")
TABLET_DEVICES = ("iPad (gen 7)", "Microsoft Surface Pro 7")

ENVIRONMENT_URLS = MappingProxyType({
    "local": "http://localhost:3000",
    "staging": "https://staging.saucedemo.com",
    "production": "https://www.saucedemo.com",
})

VALIDATION_MESSAGES = MappingProxyType({
    "locked_out": "Sorry, this user has been locked out.",
    "bad_credentials": "Username and password do not match any user in this service",
    "username_required": "Username is required",
    "password_required": "Password is required",
    "first_name_required": "First Name is required",
    "last_name_required": "Last Name is required",
    "postal_code_required": "Postal Code is required",
})
