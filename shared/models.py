"""
Test-scoped value records.

None of these records are persisted: users and payment data are generated
per test, products and order summaries are read back from the rendered
storefront. Prices are kept as the displayed strings and parsed into
``Decimal`` on demand so comparisons never suffer float rounding.
"""

from __future__ import annotations

import re
import string
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation

_AMOUNT_PATTERN = re.compile(r"\$?\s*(-?\d+(?:,\d{3})*(?:\.\d+)?)")
_CENT = Decimal("0.01")


def parse_amount(text: str) -> Decimal:
    """
    Extract the monetary amount from a display string.

    Accepts bare prices (``"$29.99"``) and labelled summary lines
    (``"Item total: $29.99"``).

    Raises:
        ValueError: If the text contains no amount.
    """
    match = _AMOUNT_PATTERN.search(text or "")
    if not match:
        raise ValueError(f"No amount found in {text!r}")
    try:
        return Decimal(match.group(1).replace(",", ""))
    except InvalidOperation as exc:
        raise ValueError(f"Invalid amount in {text!r}") from exc


@dataclass(frozen=True)
class TestUser:
    """Synthetic account for registration and login flows."""

    __test__ = False

    username: str
    email: str
    password: str
    id: int | None = None


@dataclass(frozen=True)
class Product:
    """One rendered inventory entry."""

    name: str
    price: str
    description: str

    @property
    def price_value(self) -> Decimal:
        return parse_amount(self.price)


@dataclass(frozen=True)
class CartItem:
    name: str
    price: str
    quantity: int = 1

    @property
    def price_value(self) -> Decimal:
        return parse_amount(self.price)


@dataclass(frozen=True)
class PaymentData:
    card_number: str
    expiry: str
    cvv: str
    holder_name: str


@dataclass(frozen=True)
class CheckoutInfo:
    first_name: str
    last_name: str
    postal_code: str


@dataclass(frozen=True)
class OrderSummary:
    """Totals shown on the checkout overview, as computed by the storefront."""

    subtotal: Decimal
    tax: Decimal
    total: Decimal
    items: tuple[CartItem, ...] = ()

    def is_consistent(self) -> bool:
        """Return True when subtotal + tax equals total at cent precision."""
        return (self.subtotal + self.tax).quantize(_CENT) == self.total.quantize(_CENT)

    def items_subtotal(self) -> Decimal:
        return sum((item.price_value * item.quantity for item in self.items), Decimal("0"))


@dataclass(frozen=True)
class PasswordPolicy:
    """
    Complexity rules a generated password must satisfy.

    Target applications differ, so the policy is configuration rather
    than a hard-coded rule (see ``config.Settings.password_policy``).
    """

    min_length: int = 12
    require_upper: bool = True
    require_lower: bool = True
    require_digit: bool = True
    require_symbol: bool = True
    symbols: str = field(default="!@#$%^&*")

    def __post_init__(self) -> None:
        if self.min_length < len(self.required_classes()):
            raise ValueError(
                "min_length is shorter than the number of required character classes"
            )
        if self.require_symbol and not self.symbols:
            raise ValueError("require_symbol needs a non-empty symbols alphabet")

    def required_classes(self) -> list[str]:
        classes = []
        if self.require_upper:
            classes.append(string.ascii_uppercase)
        if self.require_lower:
            classes.append(string.ascii_lowercase)
        if self.require_digit:
            classes.append(string.digits)
        if self.require_symbol:
            classes.append(self.symbols)
        return classes

    def alphabet(self) -> str:
        return "".join(self.required_classes()) or string.ascii_letters + string.digits

    def is_satisfied_by(self, password: str) -> bool:
        if len(password) < self.min_length:
            return False
        return all(
            any(char in char_class for char in password)
            for char_class in self.required_classes()
        )
