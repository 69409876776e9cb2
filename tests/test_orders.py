"""
Test Orders
===========
Zamówienia: stronicowanie (page/totalRecords), częściowe aktualizacje,
statusy, eksport CSV z fallbackiem lokalnym.
"""

from datetime import datetime

import pytest

from conftest import FakeHttp, FakeResponse, make_client
from core.exceptions import EntityValidationError
from orders.models import Order, OrderFilter, OrderLine, OrderStatus
from orders.repository import OrderRepository
from orders.service import OrderApiService


def order_repo(http) -> OrderRepository:
    return OrderRepository(OrderApiService(make_client(http)))


def page(*orders, total=None):
    data = list(orders)
    return {"totalRecords": len(data) if total is None else total, "pageNumber": 1,
            "pageSize": 10, "totalPages": 1, "data": data}


# ============================================================
# Model / filter
# ============================================================

def test_order_wire_aliases_and_flags():
    order = Order.from_wire({"docEntry": 5, "docTotalFC": 12.5, "printed": "Y", "transferred": "N"})

    assert order.doc_total_fc == 12.5
    assert order.printed is True
    assert order.to_wire()["docTotalFC"] == 12.5


def test_order_filter_params():
    params = OrderFilter(page=2, page_size=50, status=OrderStatus.PENDING,
                         start_date=datetime(2025, 1, 1)).to_params()

    assert params["page"] == 2
    assert params["pageSize"] == 50
    assert params["status"] is OrderStatus.PENDING
    assert "pageNumber" not in params


def test_order_filter_rejects_page_zero():
    with pytest.raises(ValueError):
        OrderFilter(page=0)


# ============================================================
# Service
# ============================================================

def test_get_paged_normalizes_total_records():
    http = FakeHttp([FakeResponse(200, page({"docEntry": 1}, {"docEntry": 2}, total=12))])

    result = order_repo(http).get_paged(OrderFilter(page=1, status=OrderStatus.COMPLETED))

    assert result.total_count == 12
    assert [o.doc_entry for o in result.data] == [1, 2]
    assert ("page", "1") in http.last["params"]
    assert ("status", "C") in http.last["params"]


def test_get_all_fetches_one_large_page():
    http = FakeHttp([FakeResponse(200, page({"docEntry": 1}))])

    orders = order_repo(http).get_all()

    assert len(orders) == 1
    assert http.last["url"] == "https://pos.test/api/order"
    assert ("pageSize", "10000") in http.last["params"]


def test_create_requires_folio_and_lines():
    http = FakeHttp()
    service = OrderApiService(make_client(http))

    with pytest.raises(EntityValidationError) as exc_info:
        service.create(Order(order_lines=[]))

    assert "folioNum is required" in exc_info.value.errors
    assert "order must have at least one line" in exc_info.value.errors
    assert http.calls == []


def test_create_with_lines():
    http = FakeHttp([FakeResponse(201, {"docEntry": 99, "folioNum": "0001"})])
    order = Order(folio_num="0001", order_lines=[OrderLine(item_code="P1", quantity=2, price=5)])

    created = order_repo(http).create(order)

    assert created.doc_entry == 99
    assert http.last["json"]["orderLines"][0]["itemCode"] == "P1"


def test_update_sends_only_changed_fields():
    http = FakeHttp([FakeResponse(200, {"docEntry": 7, "docStatus": "C", "printed": "N"})])

    updated = order_repo(http).complete(7)

    assert updated.doc_status == "C"
    assert http.last["method"] == "PUT"
    assert http.last["url"] == "https://pos.test/api/order/7"
    assert http.last["json"] == {"docStatus": "C"}


def test_mark_as_printed_body():
    http = FakeHttp([FakeResponse(200, {"docEntry": 7, "printed": "Y"})])

    updated = order_repo(http).mark_as_printed(7)

    assert http.last["json"] == {"printed": "Y"}
    assert updated.printed is True


def test_update_failure_returns_none():
    assert order_repo(FakeHttp([FakeResponse(409)])).cancel(7) is None


def test_update_total_rejects_negative():
    http = FakeHttp()
    assert order_repo(http).update_total(7, -1) is None
    assert http.calls == []


def test_by_status_and_customer_routes():
    http = FakeHttp([FakeResponse(200, [{"docEntry": 1}])])
    repo = order_repo(http)

    repo.by_status(OrderStatus.PENDING)
    assert http.last["url"] == "https://pos.test/api/order/status/P"

    repo.by_customer("C 1")
    assert http.last["url"] == "https://pos.test/api/order/customer/C%201"


def test_by_date_range_params():
    http = FakeHttp([FakeResponse(200, [])])

    order_repo(http).by_date_range(datetime(2025, 1, 1), datetime(2025, 1, 31, 23, 59))

    assert http.last["url"] == "https://pos.test/api/order/date-range"
    assert http.last["params"] == [("startDate", "2025-01-01T00:00:00"),
                                   ("endDate", "2025-01-31T23:59:00")]


def test_search_uses_filter_param():
    http = FakeHttp([FakeResponse(200, page())])
    order_repo(http).search("0001", 2, 5)
    assert ("filter", "0001") in http.last["params"]
    assert ("page", "2") in http.last["params"]


# ============================================================
# Queries / helpers
# ============================================================

def test_count_by_status():
    http = FakeHttp([FakeResponse(200, page(
        {"docStatus": "P"}, {"docStatus": "P"}, {"docStatus": "C"}, {},
    ))])

    assert order_repo(http).count_by_status() == {"P": 2, "C": 1, "unknown": 1}
    assert ("pageSize", "1000") in http.last["params"]


def test_today_sales_total_skips_cancelled():
    http = FakeHttp([FakeResponse(200, [
        {"docStatus": "C", "docTotal": 10.5},
        {"docStatus": "X", "docTotal": 100},
        {"docStatus": "P", "docTotal": 4.5},
    ])])

    assert order_repo(http).today_sales_total() == 15


def test_exists_by_folio():
    http = FakeHttp([FakeResponse(200, page({"folioNum": "00012"}))])
    repo = order_repo(http)

    assert repo.exists_by_folio("00012")
    assert not repo.exists_by_folio("0001")


def test_can_edit_and_delete():
    pending = Order(doc_status="P")
    printed = Order(doc_status="P", printed=True)
    transferred = Order(doc_status="P", transferred=True)

    assert OrderRepository.can_edit(pending) and OrderRepository.can_delete(pending)
    assert OrderRepository.can_edit(printed) and not OrderRepository.can_delete(printed)
    assert not OrderRepository.can_edit(transferred)
    assert not OrderRepository.can_edit(Order(doc_status="C"))


def test_full_folio():
    assert OrderRepository.full_folio(Order(folio_pref="A", folio_num="0001")) == "A-0001"
    assert OrderRepository.full_folio(Order(folio_num="0001")) == "0001"
    assert OrderRepository.full_folio(Order()) == ""


@pytest.mark.parametrize("status, label, severity", [
    ("P", "Oczekujące", "warning"),
    ("C", "Zrealizowane", "success"),
    ("X", "Anulowane", "danger"),
    ("I", "W realizacji", "info"),
    ("Z", "Nieznany", "secondary"),
    (None, "Nieznany", "secondary"),
])
def test_status_label_and_severity(status, label, severity):
    assert OrderRepository.status_label(status) == label
    assert OrderRepository.status_severity(status) == severity


def test_stats():
    orders = [
        Order(doc_status="P", doc_total=10, printed=True),
        Order(doc_status="C", doc_total=20, transferred=True),
    ]
    stats = order_repo(FakeHttp()).stats(orders)

    assert stats["byStatus"] == {"P": 1, "C": 1}
    assert stats["totalValue"] == 30
    assert stats["averageValue"] == 15
    assert stats["printed"] == 1
    assert stats["transferred"] == 1


# ============================================================
# Export
# ============================================================

def test_export_uses_server_csv():
    http = FakeHttp([FakeResponse(200, content=b"docEntry;folio\n1;A-1\n")])

    content = order_repo(http).export_csv(OrderFilter(status=OrderStatus.PENDING))

    assert content == b"docEntry;folio\n1;A-1\n"
    assert http.last["url"] == "https://pos.test/api/order/export"
    assert ("export", "csv") in http.last["params"]
    assert ("pageSize", "10000") in http.last["params"]
    assert ("status", "P") in http.last["params"]


def test_export_falls_back_to_local_csv():
    def handler(method, url, kwargs):
        if url.endswith("/export"):
            return FakeResponse(404)
        return FakeResponse(200, page({"docEntry": 1, "folioPref": "A", "folioNum": "1",
                                       "docStatus": "C", "docTotal": 9.5}))

    content = order_repo(FakeHttp(handler=handler)).export_csv()

    lines = content.decode("utf-8").splitlines()
    assert lines[0].startswith('"Numer","Data"')
    assert lines[1].startswith('"A-1"')
    assert '"Zrealizowane"' in lines[1]


def test_export_selected_posts_ids():
    http = FakeHttp([FakeResponse(200, content=b"csv")])

    content = order_repo(http).export_selected_csv([Order(doc_entry=1), Order(doc_entry=2)])

    assert content == b"csv"
    assert http.last["method"] == "POST"
    assert http.last["url"] == "https://pos.test/api/order/export/csv"
    assert http.last["json"] == {"orderIds": [1, 2]}


def test_export_selected_falls_back_to_local_csv():
    http = FakeHttp([FakeResponse(500)])

    content = order_repo(http).export_selected_csv([Order(doc_entry=1, folio_num="7")])

    assert b'"7"' in content


def test_delete_many_orders():
    def handler(method, url, kwargs):
        return FakeResponse(404) if url.endswith("/3") else FakeResponse(204)

    http = FakeHttp(handler=handler)

    result = order_repo(http).delete_many([1, 2, 3])

    assert result.success == 2
    assert result.failed == 1
    assert sorted(c["url"] for c in http.calls) == [
        "https://pos.test/api/order/1", "https://pos.test/api/order/2", "https://pos.test/api/order/3",
    ]


def test_status_change_with_empty_body_returns_sent_changes():
    http = FakeHttp([FakeResponse(204)])

    updated = order_repo(http).complete(7)

    assert updated is not None
    assert updated.doc_entry == 7
    assert updated.doc_status == "C"


def test_update_with_empty_body_succeeds():
    result = order_repo(FakeHttp([FakeResponse(200)])).update_result(7, Order(printed=True))

    assert result.ok
    assert result.value.printed is True


def test_change_status_rejects_unknown_status_without_request():
    http = FakeHttp()

    assert order_repo(http).change_status(7, "Z") is None
    assert http.calls == []


def test_search_with_invalid_page_is_absorbed():
    http = FakeHttp()
    assert order_repo(http).search("0001", 0) is None
    assert http.calls == []
