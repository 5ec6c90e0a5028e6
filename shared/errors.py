"""
Named failure kinds raised by the helper layer.

Helpers translate Playwright's generic ``TimeoutError`` into one of these
so a scenario can assert which wait failed, not merely that something
failed. Unexpected driver errors are never wrapped.
"""

from __future__ import annotations


class HelperError(Exception):
    """Base class for helper-layer failures."""

    def __init__(self, message: str, *, selector: str | None = None, timeout_ms: int | None = None):
        super().__init__(message)
        self.selector = selector
        self.timeout_ms = timeout_ms

    def __str__(self) -> str:
        details = []
        if self.selector:
            details.append(f"selector={self.selector}")
        if self.timeout_ms is not None:
            details.append(f"timeout={self.timeout_ms}ms")
        message = super().__str__()
        return f"{message} ({', '.join(details)})" if details else message


class LoginTimeout(HelperError):
    """The product list did not appear after submitting credentials."""


class LoginError(HelperError):
    """The login form rejected the credentials and displayed an error."""

    def __init__(self, message: str, *, error_text: str, selector: str | None = None):
        super().__init__(message, selector=selector)
        self.error_text = error_text


class LogoutTimeout(HelperError):
    """The logout control or the login form did not appear in time."""


class NavigationTimeout(HelperError):
    """A page did not reach its load state in time."""


class ElementNotFound(HelperError):
    """An expected element was not attached or visible within its timeout."""


class SortTimeout(HelperError):
    """The sort dropdown could not be operated in time."""
