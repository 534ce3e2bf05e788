"""Small business rules shared by the cart and shopping list controllers."""

from collections.abc import Mapping
from typing import Any

from commerce.errors import ValidationError


def require_quantity(quantity: Any, minimum: int = 1) -> int:
    """Return `quantity` if it is an integer >= minimum, else raise ValidationError."""
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError(f"Quantity must be an integer, got {quantity!r}")
    if quantity < minimum:
        raise ValidationError(f"Quantity must be at least {minimum}, got {quantity}")
    return quantity


def field_of(item: Any, name: str) -> Any:
    """Read `name` from a domain object or a plain mapping."""
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)
