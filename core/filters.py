"""
POS Admin - Parametry zapytań
=============================
Paginacja, filtry i serializacja query string dla wszystkich endpointów.

Reguły serializacji:
- None i "" są pomijane (klucz nie pojawia się w URL)
- listy/krotki/zbiory -> powtórzony klucz (ids=1&ids=2), nie "1,2"
- bool -> "true"/"false", date/datetime -> ISO 8601, Enum -> value
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple
import logging

from config.settings import DEFAULT_PAGE_SIZE
from core.exceptions import InvalidFieldValueError

logger = logging.getLogger(__name__)

QueryList = List[Tuple[str, str]]


class SortOrder(Enum):
    """Kierunek sortowania"""
    ASC = "asc"
    DESC = "desc"


def _serialize_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return _serialize_value(value.value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def _is_omitted(value: Any) -> bool:
    return value is None or value == ""


def build_query_params(params: Optional[Mapping[str, Any]]) -> QueryList:
    """
    Zamień słownik parametrów na listę par (klucz, wartość) dla requests.

    Args:
        params: Parametry zapytania (może być None)

    Returns:
        Lista par w kolejności kluczy wejściowych

    Usage:
        build_query_params({"ids": [1, 2], "status": ""})
        # [("ids", "1"), ("ids", "2")]
    """
    if not params:
        return []

    query: QueryList = []
    for key, value in params.items():
        if _is_omitted(value):
            continue

        if isinstance(value, (list, tuple, set, frozenset)):
            for item in value:
                if not _is_omitted(item):
                    query.append((key, _serialize_value(item)))
            continue

        query.append((key, _serialize_value(value)))

    return query


@dataclass
class PageRequest:
    """
    Parametry listy stronicowanej (wspólne dla wszystkich encji).

    Attributes:
        page_number: Numer strony (od 1)
        page_size: Rozmiar strony
        sort_by: Pole sortowania
        sort_order: asc / desc
        filter: Fraza wyszukiwania
        status: Filtr statusu
        enabled: Filtr aktywności
        extra: Dodatkowe parametry specyficzne dla encji
    """
    page_number: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    sort_by: Optional[str] = None
    sort_order: Optional[SortOrder] = None
    filter: Optional[str] = None
    status: Optional[str] = None
    enabled: Optional[bool] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.page_number < 1:
            raise InvalidFieldValueError("pageNumber", self.page_number, "must be >= 1")
        if self.page_size < 1:
            raise InvalidFieldValueError("pageSize", self.page_size, "must be >= 1")

    def to_params(self) -> Dict[str, Any]:
        """Słownik w nazewnictwie API (camelCase)."""
        params = {
            "pageNumber": self.page_number,
            "pageSize": self.page_size,
            "sortBy": self.sort_by,
            "sortOrder": self.sort_order,
            "filter": self.filter,
            "status": self.status,
            "enabled": self.enabled,
        }
        params.update(self.extra)
        return params


def as_params(params: Any) -> Optional[Dict[str, Any]]:
    """Akceptuj PageRequest, dict lub None."""
    if params is None:
        return None
    if isinstance(params, PageRequest):
        return params.to_params()
    if hasattr(params, "to_params"):
        return params.to_params()
    return dict(params)


def create_page_request(
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
    search: str = None,
    sort: str = None,
    **filters
) -> PageRequest:
    """
    Helper do tworzenia PageRequest.

    Args:
        page: Numer strony
        page_size: Rozmiar strony
        search: Fraza wyszukiwania
        sort: Pole sortowania, "-pole" = malejąco
        **filters: Dodatkowe filtry (groupItemCode="G1", ...)

    Usage:
        params = create_page_request(page=2, search="pizza", sort="-price")
    """
    sort_by = None
    sort_order = None
    if sort:
        if sort.startswith("-"):
            sort_by, sort_order = sort[1:], SortOrder.DESC
        else:
            sort_by, sort_order = sort, SortOrder.ASC

    return PageRequest(
        page_number=page,
        page_size=page_size,
        sort_by=sort_by,
        sort_order=sort_order,
        filter=search,
        extra=filters,
    )
