"""
Wspólne fixtures testów
=======================
Fałszywa sesja HTTP zamiast requests.Session - bez sieci, z zapisem
wszystkich wywołań.
"""

import json
import os
import sys
import threading
from typing import Any, Callable, Dict, List, Optional

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.api_client import ApiClient
from core.events import EventBus
from core.session import SessionContext


class FakeResponse:
    """Minimalny odpowiednik requests.Response"""

    def __init__(self, status_code: int = 200, payload: Any = None, content: bytes = None,
                 reason: str = None):
        self.status_code = status_code
        self.reason = reason or ("OK" if status_code < 400 else "Error")
        if content is not None:
            self.content = content
        elif payload is not None:
            self.content = json.dumps(payload).encode("utf-8")
        else:
            self.content = b""

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    @property
    def text(self) -> str:
        return self.content.decode("utf-8")

    def json(self):
        return json.loads(self.content.decode("utf-8"))


class FakeHttp:
    """
    Zastępstwo requests.Session.

    Odpowiedzi: kolejka (responses) albo funkcja handler(method, url, kwargs).
    Ostatnia odpowiedź z kolejki jest powtarzana.
    """

    def __init__(self, responses: List[Any] = None, handler: Callable = None):
        self.responses = list(responses or [])
        self.handler = handler
        self.calls: List[Dict[str, Any]] = []
        self._lock = threading.Lock()

    def request(self, method, url, **kwargs):
        with self._lock:
            self.calls.append({"method": method, "url": url, **kwargs})
            if self.handler is not None:
                response = self.handler(method, url, kwargs)
            elif len(self.responses) > 1:
                response = self.responses.pop(0)
            else:
                response = self.responses[0] if self.responses else FakeResponse(204)

        if isinstance(response, Exception):
            raise response
        return response

    def close(self):
        pass

    @property
    def last(self) -> Optional[Dict[str, Any]]:
        return self.calls[-1] if self.calls else None


def make_client(http: FakeHttp, session: SessionContext = None, max_retries: int = 0,
                event_bus: EventBus = None) -> ApiClient:
    return ApiClient(
        base_url="https://pos.test/",
        max_retries=max_retries,
        retry_delay=0,
        session=session or SessionContext(),
        http=http,
        event_bus=event_bus,
        verify=False,
        sleep=lambda seconds: None,
    )


@pytest.fixture(autouse=True)
def fresh_event_bus():
    EventBus.reset()
    yield
    EventBus.reset()


@pytest.fixture
def http():
    return FakeHttp()


@pytest.fixture
def client(http):
    return make_client(http)
