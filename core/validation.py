"""
POS Admin - Walidacja
=====================
Walidator kształtu DTO przed wysłaniem do API.

Obsługuje tylko: wymagane pola, maksymalne długości, przynależność do
zbioru wartości i zakresy liczbowe. Zbiera wszystkie błędy naraz.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, List, Optional, Type, TypeVar

from core.exceptions import EntityValidationError, InvalidFieldValueError

E = TypeVar('E', bound=Enum)


@dataclass
class ValidationResult:
    """Wynik walidacji"""
    is_valid: bool
    errors: List[str] = field(default_factory=list)

    def raise_if_invalid(self, entity_type: str) -> None:
        """
        Raises:
            EntityValidationError: Jeśli są błędy
        """
        if not self.is_valid:
            raise EntityValidationError(entity_type, self.errors)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class Validator:
    """
    Fluent walidator.

    Usage:
        result = (Validator()
            .required("itemCode", dto.item_code)
            .max_length("itemCode", dto.item_code, 50)
            .in_range("discount", dto.discount, 0, 100)
            .result())
    """

    def __init__(self):
        self.errors: List[str] = []

    def error(self, message: str) -> 'Validator':
        self.errors.append(message)
        return self

    def required(self, name: str, value: Any) -> 'Validator':
        if _is_blank(value):
            self.errors.append(f"{name} is required")
        return self

    def max_length(self, name: str, value: Optional[str], limit: int) -> 'Validator':
        if value is not None and len(value) > limit:
            self.errors.append(f"{name} cannot exceed {limit} characters")
        return self

    def exact_length(self, name: str, value: Optional[str], length: int) -> 'Validator':
        if value is not None and len(value) != length:
            self.errors.append(f"{name} must be exactly {length} character(s)")
        return self

    def one_of(self, name: str, value: Any, allowed: Iterable[Any]) -> 'Validator':
        allowed = list(allowed)
        if value is not None and value not in allowed:
            self.errors.append(
                f"{name} must be one of: {', '.join(str(a) for a in allowed)}"
            )
        return self

    def in_range(self, name: str, value: Optional[float], low: float, high: float) -> 'Validator':
        if value is not None and not (low <= value <= high):
            self.errors.append(f"{name} must be between {low} and {high}")
        return self

    def non_negative(self, name: str, value: Optional[float]) -> 'Validator':
        if value is not None and value < 0:
            self.errors.append(f"{name} cannot be negative")
        return self

    def positive(self, name: str, value: Optional[float]) -> 'Validator':
        if value is not None and value <= 0:
            self.errors.append(f"{name} must be greater than 0")
        return self

    def matches(self, name: str, value: Optional[str], pattern: str, message: str = None) -> 'Validator':
        if not _is_blank(value) and not re.match(pattern, value):
            self.errors.append(message or f"{name} has an invalid format")
        return self

    def result(self) -> ValidationResult:
        return ValidationResult(is_valid=not self.errors, errors=list(self.errors))


# ============================================================
# Common patterns
# ============================================================

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"

IPV4_PATTERN = (
    r"^(?:(?:25[0-5]|2[0-4]\d|[01]?\d\d?)\.){3}"
    r"(?:25[0-5]|2[0-4]\d|[01]?\d\d?)$"
)

ALPHANUMERIC_PATTERN = r"^[A-Za-z0-9]+$"


def is_valid_email(email: Optional[str]) -> bool:
    return bool(email) and re.match(EMAIL_PATTERN, email) is not None


def is_valid_ipv4(address: Optional[str]) -> bool:
    return bool(address) and re.match(IPV4_PATTERN, address) is not None


def coerce_enum(enum_cls: Type[E], value: Any, name: str) -> E:
    """
    Wartość enuma z enuma albo jego wartości.

    Raises:
        InvalidFieldValueError: Wartość spoza enuma
    """
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(str(member.value) for member in enum_cls)
        raise InvalidFieldValueError(name, value, f"allowed: {allowed}") from None
