"""
POS Admin - Wire Models
=======================
Bazowe modele Pydantic dla DTO z REST API.

- nazwy pól w Pythonie: snake_case, na wire: camelCase
- flagi "Y"/"N" konwertowane na bool przy wejściu i z powrotem przy wyjściu
- koperta stronicowania PagedResponse[T]
"""

import math
from typing import Annotated, Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

T = TypeVar("T")


# ============================================================
# Y/N <-> bool
# ============================================================

def yn_to_boolean(value: Optional[str]) -> bool:
    """
    "Y" -> True, "N" -> False.

    Tolerancja na wielkość liter i białe znaki (" y " -> True).
    None i "" -> False.
    """
    if value is None:
        return False
    return value.strip().upper() == "Y"


def boolean_to_yn(value: bool) -> str:
    """True -> "Y", False -> "N"."""
    return "Y" if value else "N"


def _parse_flag(value: Any) -> bool:
    if value is None or isinstance(value, bool):
        return bool(value)
    if isinstance(value, str):
        normalized = value.strip().upper()
        if normalized in ("", "Y", "N"):
            return normalized == "Y"
        if normalized in ("TRUE", "FALSE"):
            return normalized == "TRUE"
        raise ValueError(f"expected 'Y' or 'N', got {value!r}")
    if isinstance(value, int):
        return value != 0
    raise ValueError(f"expected 'Y' or 'N', got {value!r}")


YesNo = Annotated[
    bool,
    BeforeValidator(_parse_flag),
    PlainSerializer(boolean_to_yn, return_type=str),
]


# ============================================================
# Base model
# ============================================================

class WireModel(BaseModel):
    """
    Bazowy DTO.

    Usage:
        class Device(WireModel):
            device_code: str
            enabled: YesNo = True

        Device.from_wire({"deviceCode": "D1", "enabled": "Y"})
        device.to_wire()  # {"deviceCode": "D1", "enabled": "Y"}
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    @classmethod
    def from_wire(cls, data: Any):
        if isinstance(data, cls):
            return data
        return cls.model_validate(data)

    def to_wire(self, exclude_unset: bool = False) -> dict:
        """Słownik gotowy do wysłania jako JSON (camelCase, Y/N, bez None)."""
        return self.model_dump(
            mode="json",
            by_alias=True,
            exclude_none=True,
            exclude_unset=exclude_unset,
        )


# ============================================================
# Pagination envelope
# ============================================================

def expected_total_pages(total_count: int, page_size: int) -> int:
    """Liczba stron dla poprawnego serwera (min. 1)."""
    if total_count <= 0:
        return 1
    return math.ceil(total_count / page_size)


class PagedResponse(BaseModel, Generic[T]):
    """
    Koperta stronicowania: {totalCount, pageNumber, pageSize, totalPages, data}.

    Usage:
        page = PagedResponse[Product].model_validate(payload)
        for product in page.data: ...
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    total_count: int = 0
    page_number: int = 1
    page_size: int = 10
    total_pages: int = 1
    data: List[T] = []

    @classmethod
    def empty(cls, page_number: int = 1, page_size: int = 10):
        return cls(total_count=0, page_number=page_number, page_size=page_size,
                   total_pages=1, data=[])

    @property
    def has_next_page(self) -> bool:
        return self.page_number < self.total_pages

    @property
    def has_previous_page(self) -> bool:
        return self.page_number > 1

    def is_conformant(self) -> bool:
        """Sprawdź niezmienniki koperty zwróconej przez serwer."""
        if self.page_number < 1 or self.page_size < 1:
            return False
        if len(self.data) > self.page_size:
            return False
        if self.total_count == 0 and self.data:
            return False
        return self.total_pages == expected_total_pages(self.total_count, self.page_size)
