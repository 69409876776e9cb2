"""
POS Admin - Order API Service
=============================
Klient REST dla api/order.

Różnice względem pozostałych zasobów:
- klucz liczbowy (docEntry)
- stronicowanie parametrem `page`, koperta z `totalRecords`
- update zwraca zaktualizowane zamówienie (albo wysłane zmiany przy pustym body)
- eksport CSV po stronie serwera (GET export, POST export/csv)
"""

from dataclasses import replace
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Union
import logging

from config.settings import ENDPOINTS, EXPORT_PAGE_SIZE
from core.base_service import BaseApiService
from core.filters import as_params
from core.validation import ValidationResult, Validator, coerce_enum
from core.wire import PagedResponse
from orders.models import Order, OrderFilter, OrderStatus

logger = logging.getLogger(__name__)


def _normalize_envelope(payload: Any) -> Any:
    """totalRecords -> totalCount (koperta zamówień)."""
    if isinstance(payload, dict) and "totalCount" not in payload and "totalRecords" in payload:
        payload = dict(payload, totalCount=payload["totalRecords"])
    return payload


class OrderApiService(BaseApiService[Order]):
    """
    Zamówienia.

    Usage:
        service = OrderApiService()
        page = service.get_paged(OrderFilter(status=OrderStatus.PENDING))
        service.update(page.data[0].doc_entry, {"printed": "Y"})
    """

    PATH = ENDPOINTS["ORDERS"]
    MODEL = Order
    ENTITY_NAME = "Order"

    def validate(self, dto: Order) -> ValidationResult:
        validator = Validator().required("folioNum", dto.folio_num)
        if dto.order_lines is not None and not dto.order_lines:
            validator.error("order must have at least one line")
        return validator.result()

    # ============================================================
    # CRUD
    # ============================================================

    def get_paged(self, params: Union[OrderFilter, Dict[str, Any]] = None) -> PagedResponse[Order]:
        payload = self.client.get(self.PATH, params or OrderFilter())
        return PagedResponse[Order].model_validate(_normalize_envelope(payload) or {})

    def get_all(self) -> List[Order]:
        """Brak trasy /all: jedna duża strona."""
        return self.get_paged(OrderFilter(page_size=EXPORT_PAGE_SIZE)).data

    def get_by_id(self, order_id: int) -> Optional[Order]:
        return self.get_by_code(order_id)

    def update(self, order_id: int, dto: Union[Order, Dict[str, Any]]) -> Optional[Order]:
        """
        Aktualizacja częściowa: wysyłane są tylko pola ustawione w DTO.

        Returns:
            Zamówienie z odpowiedzi; przy pustym body wysłane zmiany z docEntry
        """
        model = self._coerce(dto)
        updated = self.client.put(self._path(order_id), model.to_wire(exclude_unset=True))
        logger.info(f"[Order] Updated: {order_id}")
        if isinstance(updated, dict):
            return self._to_model(updated)
        return model.model_copy(update={"doc_entry": order_id})

    def change_status(self, order_id: int, status: Union[OrderStatus, str]) -> Optional[Order]:
        """
        Raises:
            InvalidFieldValueError: Status spoza OrderStatus (bez requestu)
        """
        status = coerce_enum(OrderStatus, status, "docStatus")
        return self.update(order_id, Order(doc_status=status.value))

    def search(self, term: str, page_number: int = 1, page_size: int = 10) -> PagedResponse[Order]:
        return self.get_paged(OrderFilter(page=page_number, page_size=page_size, filter=term))

    # ============================================================
    # Queries
    # ============================================================

    def by_customer(self, customer_code: str) -> List[Order]:
        return self._get_list("customer", customer_code)

    def by_status(self, status: str) -> List[Order]:
        return self._get_list("status", getattr(status, "value", status))

    def by_date_range(self, start_date: datetime, end_date: datetime) -> List[Order]:
        return self._get_list("date-range", params={"startDate": start_date, "endDate": end_date})

    def stats(self) -> Dict[str, Any]:
        return self.client.get(self._path("stats")) or {}

    # ============================================================
    # Export
    # ============================================================

    def export(self, order_filter: OrderFilter = None) -> bytes:
        """CSV zamówień spełniających filtr (GET api/order/export)."""
        order_filter = order_filter or OrderFilter()
        params = as_params(replace(order_filter, page_size=EXPORT_PAGE_SIZE))
        params["export"] = "csv"
        content = self.client.download(self._path("export"), params)
        logger.info(f"[Order] Exported {len(content)} bytes")
        return content

    def export_selected(self, order_ids: Iterable[int]) -> bytes:
        """CSV wybranych zamówień (POST api/order/export/csv)."""
        ids = list(order_ids)
        content = self.client.download_post(self._path("export", "csv"), {"orderIds": ids})
        logger.info(f"[Order] Exported {len(ids)} selected orders")
        return content
