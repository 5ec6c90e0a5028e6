"""
Suite configuration module.

Resolves the target URLs, credentials, timeouts, feature flags and
performance thresholds from environment variables (optionally seeded
from a ``.env`` file) with documented fallback defaults. The resolved
values form one immutable ``Settings`` record per process.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType

from dotenv import load_dotenv

from shared.models import PasswordPolicy

# Base directory of the project
BASE_DIR = Path(__file__).resolve().parent

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_bool(environ: Mapping[str, str], name: str, default: bool) -> bool:
    value = environ.get(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in _TRUE_VALUES


def _env_flag_off(environ: Mapping[str, str], name: str) -> bool:
    """Opt-out flag: enabled unless explicitly set to ``false``."""
    return environ.get(name, "").strip().lower() != "false"


def _env_int(environ: Mapping[str, str], name: str, default: int) -> int:
    value = environ.get(name)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r, using %s", name, value, default)
        return default


def _join_url(base: str, path: str) -> str:
    """Join ``base`` and ``path`` with exactly one slash between them."""
    base = base[:-1] if base.endswith("/") else base
    path = path if path.startswith("/") else f"/{path}"
    return f"{base}{path}"


@dataclass(frozen=True)
class Account:
    email: str
    password: str
    username: str = ""


@dataclass(frozen=True)
class ApiCredentials:
    token: str
    client_id: str
    client_secret: str


@dataclass(frozen=True)
class ExternalService:
    url: str
    api_key: str


@dataclass(frozen=True)
class FeatureFlags:
    enable_api_tests: bool = True
    enable_e2e_tests: bool = True
    enable_smoke_tests: bool = True
    enable_regression_tests: bool = True
    enable_auth_tests: bool = True
    enable_ecommerce_tests: bool = True
    enable_payment_tests: bool = True
    enable_mobile_tests: bool = False


@dataclass(frozen=True)
class PerformanceThresholds:
    max_page_load_time_ms: int = 3000
    max_api_response_time_ms: int = 1000


@dataclass(frozen=True)
class Settings:
    """Resolved configuration for one test process."""

    base_url: str = "https://www.saucedemo.com"
    api_base_url: str = "https://jsonplaceholder.typicode.com"
    is_ci: bool = False
    headless: bool = True
    workers: int | None = None
    test_timeout_ms: int = 120_000
    action_timeout_ms: int = 10_000
    navigation_timeout_ms: int = 30_000
    global_timeout_ms: int = 600_000
    retries: int = 1
    report_dir: Path = BASE_DIR / "reports"
    environment: str = "unknown"
    test_user: Account = field(
        default_factory=lambda: Account("test.user@example.com", "TestPassword123!", "testuser2024")
    )
    admin_user: Account = field(
        default_factory=lambda: Account("admin.user@example.com", "AdminPassword123!")
    )
    api: ApiCredentials = field(
        default_factory=lambda: ApiCredentials(
            "demo_api_token_12345", "demo_client_id", "demo_client_secret"
        )
    )
    external_services: Mapping[str, ExternalService] = field(default_factory=dict)
    feature_flags: FeatureFlags = field(default_factory=FeatureFlags)
    performance: PerformanceThresholds = field(default_factory=PerformanceThresholds)
    password_policy: PasswordPolicy = field(default_factory=PasswordPolicy)

    def get_url(self, path: str = "") -> str:
        """
        Build an absolute storefront URL.

        ``get_url("login")`` and ``get_url("/login")`` are identical, and a
        trailing slash on ``base_url`` never produces ``//``.
        """
        return _join_url(self.base_url, path)

    def get_api_url(self, endpoint: str) -> str:
        """Build an absolute API URL with the same rules as :meth:`get_url`."""
        return _join_url(self.api_base_url, endpoint)

    def is_feature_enabled(self, feature: str) -> bool:
        """
        Look up a feature flag by name.

        Raises:
            KeyError: If ``feature`` is not a known flag.
        """
        known = {flag.name for flag in fields(FeatureFlags)}
        if feature not in known:
            raise KeyError(f"Unknown feature flag: {feature}")
        return getattr(self.feature_flags, feature)

    def current_environment(self) -> str:
        return self.environment


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """
    Resolve settings from an environment mapping.

    Args:
        environ: Variables to read. When None, ``.env`` is loaded into
            ``os.environ`` (without overriding existing values) and
            ``os.environ`` is used.

    Returns:
        Immutable settings record.
    """
    if environ is None:
        load_dotenv(BASE_DIR / ".env", override=False)
        environ = os.environ

    is_ci = _env_bool(environ, "CI", False)
    workers = _env_int(environ, "WORKERS", 0) or None

    app_env = environ.get("APP_ENV", "").strip().lower()
    environment = app_env if app_env in {"development", "staging", "production"} else "unknown"

    report_dir = Path(environ.get("REPORT_DIR") or "reports")
    if not report_dir.is_absolute():
        report_dir = BASE_DIR / report_dir

    return Settings(
        base_url=environ.get("BASE_URL") or Settings.base_url,
        api_base_url=environ.get("API_BASE_URL") or Settings.api_base_url,
        is_ci=is_ci,
        headless=_env_bool(environ, "HEADLESS", True) or is_ci,
        workers=workers if workers and workers > 0 else None,
        test_timeout_ms=_env_int(environ, "TEST_TIMEOUT", 120_000),
        action_timeout_ms=_env_int(environ, "ACTION_TIMEOUT", 10_000),
        navigation_timeout_ms=_env_int(environ, "NAVIGATION_TIMEOUT", 30_000),
        global_timeout_ms=_env_int(environ, "GLOBAL_TIMEOUT", 600_000),
        retries=_env_int(environ, "RETRIES", 2 if is_ci else 1),
        report_dir=report_dir,
        environment=environment,
        test_user=Account(
            email=environ.get("TEST_USER_EMAIL", "test.user@example.com"),
            password=environ.get("TEST_USER_PASSWORD", "TestPassword123!"),
            username=environ.get("TEST_USER_USERNAME", "testuser2024"),
        ),
        admin_user=Account(
            email=environ.get("ADMIN_USER_EMAIL", "admin.user@example.com"),
            password=environ.get("ADMIN_USER_PASSWORD", "AdminPassword123!"),
        ),
        api=ApiCredentials(
            token=environ.get("API_TEST_TOKEN", "demo_api_token_12345"),
            client_id=environ.get("API_CLIENT_ID", "demo_client_id"),
            client_secret=environ.get("API_CLIENT_SECRET", "demo_client_secret"),
        ),
        external_services=MappingProxyType({
            "payment": ExternalService(
                url=environ.get("PAYMENT_SERVICE_URL", "https://mock-payment.example.com"),
                api_key=environ.get("PAYMENT_API_KEY", "mock_payment_key_12345"),
            ),
            "email": ExternalService(
                url=environ.get("EMAIL_SERVICE_URL", "https://mock-email.example.com"),
                api_key=environ.get("EMAIL_API_KEY", "mock_email_key_67890"),
            ),
            "external": ExternalService(
                url=environ.get("EXTERNAL_API_URL", "https://jsonplaceholder.typicode.com"),
                api_key=environ.get("EXTERNAL_API_KEY", "demo_external_api_key"),
            ),
        }),
        feature_flags=FeatureFlags(
            enable_api_tests=_env_flag_off(environ, "ENABLE_API_TESTS"),
            enable_e2e_tests=_env_flag_off(environ, "ENABLE_E2E_TESTS"),
            enable_smoke_tests=_env_flag_off(environ, "ENABLE_SMOKE_TESTS"),
            enable_regression_tests=_env_flag_off(environ, "ENABLE_REGRESSION_TESTS"),
            enable_auth_tests=_env_flag_off(environ, "ENABLE_AUTH_TESTS"),
            enable_ecommerce_tests=_env_flag_off(environ, "ENABLE_ECOMMERCE_TESTS"),
            enable_payment_tests=_env_flag_off(environ, "ENABLE_PAYMENT_TESTS"),
            enable_mobile_tests=_env_bool(environ, "ENABLE_MOBILE_TESTS", False),
        ),
        performance=PerformanceThresholds(
            max_page_load_time_ms=_env_int(environ, "MAX_PAGE_LOAD_TIME", 3000),
            max_api_response_time_ms=_env_int(environ, "MAX_API_RESPONSE_TIME", 1000),
        ),
        password_policy=PasswordPolicy(
            min_length=_env_int(environ, "PASSWORD_MIN_LENGTH", 12),
            require_upper=_env_bool(environ, "PASSWORD_REQUIRE_UPPER", True),
            require_lower=_env_bool(environ, "PASSWORD_REQUIRE_LOWER", True),
            require_digit=_env_bool(environ, "PASSWORD_REQUIRE_DIGIT", True),
            require_symbol=_env_bool(environ, "PASSWORD_REQUIRE_SYMBOL", True),
        ),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Return the process-wide settings, resolved on first use.

    Call ``get_settings.cache_clear()`` after changing the environment.
    """
    settings = load_settings()
    logger.info("Loaded settings for %s (environment=%s)", settings.base_url, settings.environment)
    return settings
