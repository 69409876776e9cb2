"""
Test ApiClient
==============
Transport: URL, nagłówki, query string, ponowienia, mapowanie błędów,
czyszczenie sesji przy 401, upload / download.
"""

import threading

import pytest
from requests.exceptions import ConnectionError as RequestsConnectionError
from requests.exceptions import Timeout

from conftest import FakeHttp, FakeResponse, make_client
from core.events import EventBus, EventType
from core.exceptions import (
    BadRequestError,
    ClientSideError,
    NotFoundError,
    ServerError,
    ServiceUnavailableError,
    UnauthorizedError,
    UnknownApiError,
)
from core.session import SessionContext


# ============================================================
# URL / headers / params
# ============================================================

def test_build_url_joins_base_and_endpoint(client):
    assert client.build_url("api/Products") == "https://pos.test/api/Products"
    assert client.build_url("/api/Products") == "https://pos.test/api/Products"


def test_build_url_drops_only_one_leading_slash(client):
    assert client.build_url("//x") == "https://pos.test//x"


def test_build_url_keeps_absolute_endpoint(client):
    assert client.build_url("http://other/x") == "http://other/x"


def test_get_sends_default_headers_without_token(http, client):
    http.responses = [FakeResponse(200, [])]
    client.get("api/Products/all")

    headers = http.last["headers"]
    assert headers["Content-Type"] == "application/json"
    assert headers["Accept"] == "application/json"
    assert "Authorization" not in headers


def test_get_sends_bearer_token():
    http = FakeHttp([FakeResponse(200, [])])
    session = SessionContext()
    session.set_token("abc")
    client = make_client(http, session=session)

    client.get("api/Products/all")

    assert http.last["headers"]["Authorization"] == "Bearer abc"


def test_params_omit_empty_and_repeat_list_keys(http, client):
    http.responses = [FakeResponse(200, [])]
    client.get("api/Products", {"ids": [1, 2], "status": "", "filter": None, "enabled": True})

    assert http.last["params"] == [("ids", "1"), ("ids", "2"), ("enabled", "true")]


def test_no_params_sends_none(http, client):
    http.responses = [FakeResponse(200, [])]
    client.get("api/Products/all")
    assert http.last["params"] is None


def test_empty_body_decodes_to_none(http, client):
    http.responses = [FakeResponse(204)]
    assert client.delete("api/Products/P1") is None


def test_delete_sends_body(http, client):
    http.responses = [FakeResponse(200, {"success": 2})]
    client.delete("api/devices/delete-multiple", body=["D1", "D2"])
    assert http.last["json"] == ["D1", "D2"]


# ============================================================
# Retry
# ============================================================

def test_retry_count_is_max_retries_plus_one():
    http = FakeHttp([FakeResponse(503)])
    client = make_client(http, max_retries=2)

    with pytest.raises(ServiceUnavailableError):
        client.get("api/Products/all")

    assert len(http.calls) == 3


def test_retry_succeeds_after_transient_failure():
    http = FakeHttp([FakeResponse(500), FakeResponse(200, [{"itemCode": "P1"}])])
    client = make_client(http, max_retries=3)

    assert client.get("api/Products/all") == [{"itemCode": "P1"}]
    assert len(http.calls) == 2


def test_retry_waits_fixed_delay_between_attempts():
    http = FakeHttp([FakeResponse(500)])
    delays = []
    client = make_client(http, max_retries=2)
    client.retry_delay = 0.5
    client._sleep = delays.append

    with pytest.raises(ServerError):
        client.get("api/Products/all")

    assert delays == [0.5, 0.5]


def test_zero_retries_makes_single_attempt():
    http = FakeHttp([FakeResponse(500)])
    client = make_client(http, max_retries=0)

    with pytest.raises(ServerError):
        client.get("api/Products/all")

    assert len(http.calls) == 1


def test_negative_max_retries_rejected():
    with pytest.raises(ValueError):
        make_client(FakeHttp(), max_retries=-1)


# ============================================================
# Error mapping
# ============================================================

@pytest.mark.parametrize("status, error_cls", [
    (400, BadRequestError),
    (401, UnauthorizedError),
    (404, NotFoundError),
    (500, ServerError),
    (503, ServiceUnavailableError),
    (418, UnknownApiError),
])
def test_status_maps_to_error_class(status, error_cls):
    client = make_client(FakeHttp([FakeResponse(status)]))

    with pytest.raises(error_cls) as exc_info:
        client.get("api/Products/all")

    assert exc_info.value.status == status
    assert exc_info.value.endpoint == "https://pos.test/api/Products/all"


def test_error_details_take_server_message():
    http = FakeHttp([FakeResponse(400, {"message": "Bad code", "errors": {"itemCode": ["x"]}})])
    client = make_client(http)

    with pytest.raises(BadRequestError) as exc_info:
        client.post("api/Products", {})

    assert exc_info.value.details["message"] == "Bad code"
    assert exc_info.value.details["errors"] == {"itemCode": ["x"]}


def test_timeout_maps_to_client_side_error():
    client = make_client(FakeHttp([Timeout("slow")]))

    with pytest.raises(ClientSideError) as exc_info:
        client.get("api/Products/all")

    assert exc_info.value.status is None
    assert exc_info.value.user_message.startswith("Error: ")


def test_connection_error_maps_to_client_side_error():
    client = make_client(FakeHttp([RequestsConnectionError("refused")]))

    with pytest.raises(ClientSideError):
        client.get("api/Products/all")


def test_failure_publishes_api_error_event():
    bus = EventBus()
    events = []
    bus.subscribe(EventType.API_ERROR, events.append)
    client = make_client(FakeHttp([FakeResponse(404)]), event_bus=bus)

    with pytest.raises(NotFoundError):
        client.get("api/Products/X")

    assert len(events) == 1
    assert events[0].data["status"] == 404
    assert events[0].data["category"] == "not_found"


# ============================================================
# 401 -> session clear
# ============================================================

def test_unauthorized_clears_session():
    session = SessionContext()
    session.set_token("abc", {"userName": "admin"})
    client = make_client(FakeHttp([FakeResponse(401)]), session=session)

    with pytest.raises(UnauthorizedError):
        client.get("api/Products/all")

    assert session.token is None
    assert session.user_info is None


def test_concurrent_unauthorized_clears_session_once():
    bus = EventBus()
    cleared = []
    bus.subscribe(EventType.SESSION_CLEARED, cleared.append)

    session = SessionContext(event_bus=bus)
    session.set_token("abc")
    client = make_client(FakeHttp([FakeResponse(401)]), session=session)

    errors = []

    def call():
        try:
            client.get("api/Products/all")
        except UnauthorizedError as e:
            errors.append(e)

    threads = [threading.Thread(target=call) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(errors) == 8
    assert len(cleared) == 1
    assert not session.is_authenticated


# ============================================================
# Pagination / upload / download / ping
# ============================================================

def test_get_paginated_builds_envelope(http, client):
    http.responses = [FakeResponse(200, {
        "totalCount": 3, "pageNumber": 1, "pageSize": 2, "totalPages": 2,
        "data": [{"a": 1}, {"a": 2}],
    })]

    page = client.get_paginated("api/Products", {"pageNumber": 1, "pageSize": 2})

    assert page.total_count == 3
    assert page.has_next_page
    assert not page.has_previous_page
    assert page.is_conformant()


def test_upload_sends_multipart_without_json_content_type(http, client):
    http.responses = [FakeResponse(200, {"id": 1})]

    client.upload("api/images/upload", ("logo.png", b"\x89PNG", "image/png"),
                  {"imageTitle": "Logo", "tag": ""})

    call = http.last
    assert call["files"] == {"file": ("logo.png", b"\x89PNG", "image/png")}
    assert call["data"] == {"imageTitle": "Logo"}
    assert "Content-Type" not in call["headers"]
    assert call["timeout"] == client.timeout * 2


def test_upload_multiple_indexes_files(http, client):
    http.responses = [FakeResponse(200, [])]

    client.upload_multiple("api/images/upload-multiple", [b"a", b"b"])

    names = [name for name, _ in http.last["files"]]
    assert names == ["files[0]", "files[1]"]
    assert http.last["timeout"] == client.timeout * 3


def test_download_returns_raw_bytes(http, client):
    http.responses = [FakeResponse(200, content=b"a;b\n1;2\n")]
    assert client.download("api/order/export", {"export": "csv"}) == b"a;b\n1;2\n"
    assert http.last["headers"]["Accept"] == "*/*"


def test_ping_never_raises():
    client = make_client(FakeHttp([FakeResponse(503)]))
    assert client.ping() is False


def test_ping_true_when_health_responds():
    http = FakeHttp([FakeResponse(200, {"status": "ok"})])
    client = make_client(http)
    assert client.ping() is True
    assert http.last["url"] == "https://pos.test/api/health"
