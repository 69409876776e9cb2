"""
POS Admin - Order Repository
============================
Bezpieczny dostęp do zamówień + operacje statusowe i statystyki.

Zmiany statusu i flag to częściowe PUT (tylko zmienione pola).
Eksport CSV: najpierw serwer, przy błędzie CSV budowany lokalnie.
"""

from datetime import date, datetime, time, timedelta
from typing import Any, Dict, Iterable, List, Optional, Union
import logging

from config.settings import EXPORT_PAGE_SIZE
from core.base_repository import ABSORBED_ERRORS, BaseRepository, RepositoryResult
from core.events import EventBus, EventType
from orders.models import Order, OrderFilter, OrderStatus
from orders.service import OrderApiService

logger = logging.getLogger(__name__)

UNKNOWN_STATUS_KEY = "unknown"


class OrderRepository(BaseRepository):
    """
    Repozytorium zamówień.

    Usage:
        repo = OrderRepository()
        for order in repo.today_orders():
            print(repo.full_folio(order), repo.status_label(order.doc_status))
        repo.complete(order.doc_entry)
    """

    ENTITY_NAME = "Order"

    STATUS_LABELS = {
        OrderStatus.PENDING.value: "Oczekujące",
        OrderStatus.COMPLETED.value: "Zrealizowane",
        OrderStatus.CANCELLED.value: "Anulowane",
        OrderStatus.IN_PROGRESS.value: "W realizacji",
    }
    STATUS_SEVERITIES = {
        OrderStatus.PENDING.value: "warning",
        OrderStatus.COMPLETED.value: "success",
        OrderStatus.CANCELLED.value: "danger",
        OrderStatus.IN_PROGRESS.value: "info",
    }

    CSV_COLUMNS = {
        "folio": "Numer",
        "docDate": "Data",
        "customerCode": "Kod klienta",
        "customerName": "Klient",
        "deviceCode": "Urządzenie",
        "docStatus": "Status",
        "docTotal": "Wartość",
        "printed": "Wydrukowane",
        "transferred": "Przesłane",
        "comments": "Uwagi",
    }

    def __init__(self, service: OrderApiService = None, event_bus: EventBus = None):
        super().__init__(service or OrderApiService(), event_bus=event_bus)

    # ============================================================
    # CRUD (safe)
    # ============================================================

    def get_by_id(self, order_id: int) -> Optional[Order]:
        return self.get_by_code(order_id)

    def update_result(self, order_id: int, dto: Union[Order, Dict[str, Any]]) -> RepositoryResult:
        result = self._attempt(f"update({order_id})", self.service.update, None, order_id, dto)
        if result.ok:
            self._publish(EventType.RECORD_UPDATED, code=order_id)
        return result

    def update(self, order_id: int, dto: Union[Order, Dict[str, Any]]) -> Optional[Order]:
        """Zaktualizowane zamówienie albo None przy błędzie."""
        return self.update_result(order_id, dto).value

    def by_customer(self, customer_code: str) -> List[Order]:
        return self._attempt(f"by_customer({customer_code})", self.service.by_customer, [],
                             customer_code).value

    def by_status(self, status: Union[OrderStatus, str]) -> List[Order]:
        return self._attempt(f"by_status({status})", self.service.by_status, [], status).value

    def by_date_range(self, start_date: datetime, end_date: datetime) -> List[Order]:
        return self._attempt("by_date_range", self.service.by_date_range, [],
                             start_date, end_date).value

    def server_stats(self) -> Dict[str, Any]:
        return self._attempt("stats", self.service.stats, {}).value

    # ============================================================
    # Status & flags
    # ============================================================

    def change_status(self, order_id: int, status: Union[OrderStatus, str]) -> Optional[Order]:
        result = self._attempt(
            f"change_status({order_id})", self.service.change_status, None, order_id, status
        )
        if result.ok:
            self._publish(EventType.RECORD_UPDATED, code=order_id)
            logger.info(f"[Order] {order_id} -> {result.value.doc_status}")
        return result.value

    def process(self, order_id: int) -> Optional[Order]:
        return self.change_status(order_id, OrderStatus.IN_PROGRESS)

    def complete(self, order_id: int) -> Optional[Order]:
        return self.change_status(order_id, OrderStatus.COMPLETED)

    def cancel(self, order_id: int) -> Optional[Order]:
        return self.change_status(order_id, OrderStatus.CANCELLED)

    def mark_as_printed(self, order_id: int) -> Optional[Order]:
        return self.update(order_id, Order(printed=True))

    def mark_as_transferred(self, order_id: int) -> Optional[Order]:
        return self.update(order_id, Order(transferred=True))

    def update_comments(self, order_id: int, comments: str) -> Optional[Order]:
        return self.update(order_id, Order(comments=comments))

    def update_total(self, order_id: int, total: float) -> Optional[Order]:
        if total < 0:
            logger.warning(f"[Order] Negative total rejected for {order_id}: {total}")
            return None
        return self.update(order_id, Order(doc_total=total))

    # ============================================================
    # Queries
    # ============================================================

    def today_orders(self) -> List[Order]:
        today = date.today()
        return self.by_date_range(datetime.combine(today, time.min),
                                  datetime.combine(today, time.max))

    def recent_orders(self, days: int = 7) -> List[Order]:
        end = datetime.now()
        return self.by_date_range(end - timedelta(days=days), end)

    def count_by_status(self) -> Dict[str, int]:
        """Liczba zamówień per docStatus (próbka do 1000 rekordów)."""
        page = self.get_paged(OrderFilter(page_size=1000))
        counts: Dict[str, int] = {}
        for order in page.data if page else []:
            key = order.doc_status or UNKNOWN_STATUS_KEY
            counts[key] = counts.get(key, 0) + 1
        return counts

    def today_sales_total(self) -> float:
        """Suma dzisiejszych zamówień bez anulowanych."""
        return sum(
            order.doc_total or 0.0
            for order in self.today_orders()
            if order.doc_status != OrderStatus.CANCELLED.value
        )

    def stats(self, orders: Iterable[Order]) -> Dict[str, Any]:
        orders = list(orders)
        totals = [order.doc_total or 0.0 for order in orders]
        by_status: Dict[str, int] = {}
        for order in orders:
            key = order.doc_status or UNKNOWN_STATUS_KEY
            by_status[key] = by_status.get(key, 0) + 1
        return {
            "total": len(orders),
            "byStatus": by_status,
            "printed": sum(1 for order in orders if order.printed),
            "transferred": sum(1 for order in orders if order.transferred),
            "totalValue": round(sum(totals), 2),
            "averageValue": round(sum(totals) / len(totals), 2) if totals else 0.0,
        }

    def exists_by_folio(self, folio_num: str) -> bool:
        page = self.get_paged(OrderFilter(filter=folio_num, page_size=EXPORT_PAGE_SIZE))
        return page is not None and any(order.folio_num == folio_num for order in page.data)

    # ============================================================
    # Presentation helpers
    # ============================================================

    @staticmethod
    def can_edit(order: Order) -> bool:
        return order.doc_status == OrderStatus.PENDING.value and not order.transferred

    @classmethod
    def can_delete(cls, order: Order) -> bool:
        return cls.can_edit(order) and not order.printed

    @staticmethod
    def full_folio(order: Order) -> str:
        """'A-0001' / '0001' / ''"""
        if order.folio_pref and order.folio_num:
            return f"{order.folio_pref}-{order.folio_num}"
        return order.folio_num or ""

    @classmethod
    def status_label(cls, status: Optional[str]) -> str:
        return cls.STATUS_LABELS.get(getattr(status, "value", status), "Nieznany")

    @classmethod
    def status_severity(cls, status: Optional[str]) -> str:
        return cls.STATUS_SEVERITIES.get(getattr(status, "value", status), "secondary")

    def orders_to_csv(self, orders: Iterable[Order]) -> str:
        rows = []
        for order in orders:
            row = order.to_wire()
            row["folio"] = self.full_folio(order)
            row["docStatus"] = self.status_label(order.doc_status)
            rows.append(row)
        return self.to_csv(rows, self.CSV_COLUMNS)

    # ============================================================
    # Export
    # ============================================================

    def export_csv(self, order_filter: OrderFilter = None) -> bytes:
        """
        CSV zamówień: eksport serwera, a przy błędzie lokalnie z jednej dużej strony.

        Returns:
            Zawartość CSV (b"" gdy nie udało się pobrać danych)
        """
        try:
            return self.service.export(order_filter)
        except ABSORBED_ERRORS as e:
            logger.warning(f"[Order] Server export failed, building CSV locally: {e}")

        order_filter = order_filter or OrderFilter()
        page = self.get_paged(OrderFilter(
            page=1,
            page_size=EXPORT_PAGE_SIZE,
            filter=order_filter.filter,
            customer_code=order_filter.customer_code,
            status=order_filter.status,
            start_date=order_filter.start_date,
            end_date=order_filter.end_date,
            doc_type=order_filter.doc_type,
            device_code=order_filter.device_code,
        ))
        if page is None:
            return b""
        return self.orders_to_csv(page.data).encode("utf-8")

    def export_selected_csv(self, orders: Iterable[Order]) -> bytes:
        """CSV wybranych zamówień (serwer, fallback lokalny)."""
        orders = list(orders)
        ids = [order.doc_entry for order in orders if order.doc_entry is not None]
        try:
            return self.service.export_selected(ids)
        except ABSORBED_ERRORS as e:
            logger.warning(f"[Order] Server export of selection failed, building CSV locally: {e}")
        return self.orders_to_csv(orders).encode("utf-8")
