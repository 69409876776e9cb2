"""
Orders Models
=============
DTO zamówień, filtr listy i słowniki statusów.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import Field

from config.settings import DEFAULT_PAGE_SIZE
from core.exceptions import InvalidFieldValueError
from core.wire import WireModel, YesNo


class OrderStatus(str, Enum):
    """docStatus"""
    PENDING = "P"
    COMPLETED = "C"
    CANCELLED = "X"
    IN_PROGRESS = "I"


class DocumentType(str, Enum):
    """docType"""
    ORDER = "O"
    INVOICE = "F"
    QUOTE = "Q"


class PaymentType(str, Enum):
    """paidType"""
    CASH = "C"
    CARD = "T"
    TRANSFER = "R"
    MIXED = "M"


class OrderLine(WireModel):
    """Pozycja zamówienia (klucz: docEntry + lineId)"""
    doc_entry: Optional[int] = None
    line_id: Optional[int] = None
    item_code: Optional[str] = None
    item_name: Optional[str] = None
    quantity: Optional[float] = None
    price: Optional[float] = None
    line_status: Optional[str] = None
    tax_code: Optional[str] = None
    line_total: Optional[float] = None


class Order(WireModel):
    """
    Zamówienie (klucz: docEntry, liczba nadawana przez serwer).

    Aktualizacje częściowe wysyłają tylko pola jawnie ustawione
    (to_wire(exclude_unset=True)).
    """
    doc_entry: Optional[int] = None
    folio_pref: Optional[str] = None
    folio_num: Optional[str] = None
    customer_code: Optional[str] = None
    customer_name: Optional[str] = None
    nick_name: Optional[str] = None
    device_code: Optional[str] = None
    doc_date: Optional[datetime] = None
    doc_due_date: Optional[datetime] = None
    doc_status: Optional[str] = None
    doc_type: Optional[str] = None
    paid_type: Optional[str] = None
    transferred: YesNo = False
    printed: YesNo = False
    doc_rate: Optional[float] = None
    doc_total: Optional[float] = None
    doc_total_fc: Optional[float] = Field(default=None, alias="docTotalFC")
    comments: Optional[str] = None
    order_lines: Optional[List[OrderLine]] = None


@dataclass
class OrderFilter:
    """
    Parametry listy zamówień.

    Zasób zamówień używa `page` zamiast `pageNumber`.
    """
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    filter: Optional[str] = None
    customer_code: Optional[str] = None
    status: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    doc_type: Optional[str] = None
    device_code: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.page < 1:
            raise InvalidFieldValueError("page", self.page, "must be >= 1")
        if self.page_size < 1:
            raise InvalidFieldValueError("pageSize", self.page_size, "must be >= 1")

    def to_params(self) -> Dict[str, Any]:
        params = {
            "page": self.page,
            "pageSize": self.page_size,
            "filter": self.filter,
            "customerCode": self.customer_code,
            "status": self.status,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "docType": self.doc_type,
            "deviceCode": self.device_code,
        }
        params.update(self.extra)
        return params
