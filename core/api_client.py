#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
POS Admin - Klient REST API
===========================
Warstwa transportowa dla wszystkich klientów encji.

- bazowy URL + ścieżka endpointu
- nagłówki domyślne i token Bearer z SessionContext
- stały timeout, stała liczba ponowień ze stałym opóźnieniem
- mapowanie statusów HTTP na hierarchię ApiError
- przy 401 sesja jest czyszczona przed propagacją błędu
"""

import logging
import mimetypes
import time
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Optional, Tuple, Type, Union

import requests
from requests.exceptions import RequestException, Timeout

from config.settings import (
    API_BASE_URL,
    DEFAULT_HEADERS,
    ENDPOINTS,
    MAX_RETRIES,
    REQUEST_TIMEOUT,
    RETRY_DELAY,
    SESSION_FILE,
    UPLOAD_MULTIPLE_TIMEOUT_MULTIPLIER,
    UPLOAD_TIMEOUT_MULTIPLIER,
    VERIFY_SSL,
)
from core.events import EventBus, EventType, create_event, get_event_bus
from core.exceptions import (
    ApiError,
    ClientSideError,
    InvalidFieldValueError,
    UnauthorizedError,
    error_for_status,
)
from core.filters import as_params, build_query_params
from core.session import SessionContext
from core.wire import PagedResponse

logger = logging.getLogger(__name__)

FileSpec = Union[str, Path, bytes, Tuple]
UploadTuple = Tuple[str, bytes, str]


def file_tuple(file: FileSpec, default_name: str = "file") -> UploadTuple:
    """
    Znormalizuj plik do (nazwa, zawartość, mime).

    Zawartość jest czytana raz, żeby ponowienia wysyłały te same bajty.

    Raises:
        InvalidFieldValueError: Brak pliku, błąd odczytu albo nieobsługiwany typ
    """
    if isinstance(file, (str, Path)):
        path = Path(file)
        mime = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        try:
            return path.name, path.read_bytes(), mime
        except OSError as e:
            raise InvalidFieldValueError("file", path, e.strerror or str(e)) from e

    if isinstance(file, bytes):
        return default_name, file, "application/octet-stream"

    if isinstance(file, tuple):
        name, content = file[0], file[1]
        if hasattr(content, "read"):
            content = content.read()
        mime = file[2] if len(file) > 2 else (
            mimetypes.guess_type(name)[0] or "application/octet-stream"
        )
        return name, content, mime

    if hasattr(file, "read"):
        name = Path(getattr(file, "name", default_name)).name
        mime = mimetypes.guess_type(name)[0] or "application/octet-stream"
        return name, file.read(), mime

    raise InvalidFieldValueError("file", type(file).__name__, "unsupported file specification")


def _has_content_type(headers: Dict[str, str]) -> bool:
    return any(key.lower() == "content-type" for key in headers)


class ApiClient:
    """
    Klient HTTP dla backendu POS.

    Usage:
        client = ApiClient(session=SessionContext())
        products = client.get("api/Products/all")
        page = client.get_paginated("api/Products", {"pageNumber": 1}, model=Product)

    Args:
        base_url: Bazowy URL API
        timeout: Timeout requestu w sekundach
        max_retries: Liczba ponowień (łącznie max_retries + 1 prób)
        retry_delay: Stałe opóźnienie między próbami (sekundy)
        session: Kontekst sesji z tokenem
        http: Sesja requests (wstrzykiwana w testach)
        event_bus: Bus dla zdarzeń API_ERROR
        verify: Weryfikacja certyfikatu SSL
        sleep: Funkcja opóźnienia (wstrzykiwana w testach)
    """

    def __init__(
        self,
        base_url: str = None,
        timeout: float = None,
        max_retries: int = None,
        retry_delay: float = None,
        session: SessionContext = None,
        http: requests.Session = None,
        event_bus: EventBus = None,
        verify: bool = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._base_url = (base_url or API_BASE_URL).rstrip("/") + "/"
        self.timeout = REQUEST_TIMEOUT if timeout is None else timeout
        self.max_retries = MAX_RETRIES if max_retries is None else max_retries
        self.retry_delay = RETRY_DELAY if retry_delay is None else retry_delay
        self.session = session or SessionContext()
        self.http = http or requests.Session()
        self.event_bus = event_bus
        self.verify = VERIFY_SSL if verify is None else verify
        self._sleep = sleep

        if self.max_retries < 0:
            raise ValueError("max_retries cannot be negative")

    # ============================================================
    # URL / headers
    # ============================================================

    @property
    def base_url(self) -> str:
        return self._base_url

    def build_url(self, endpoint: str) -> str:
        """
        Zbuduj pełny URL.

        Endpoint zaczynający się od http:// lub https:// jest używany bez zmian.
        """
        if endpoint.startswith(("http://", "https://")):
            return endpoint
        if endpoint.startswith("/"):
            endpoint = endpoint[1:]
        return self._base_url + endpoint

    def _build_headers(self, headers: Optional[Dict[str, str]], multipart: bool) -> Dict[str, str]:
        result = dict(headers or {})

        if not multipart and not _has_content_type(result):
            for key, value in DEFAULT_HEADERS.items():
                result.setdefault(key, value)

        token = self.session.token
        if token:
            result["Authorization"] = f"Bearer {token}"

        return result

    # ============================================================
    # Core request loop
    # ============================================================

    def _send(
        self,
        method: str,
        endpoint: str,
        params: Any = None,
        json: Any = None,
        data: Dict[str, Any] = None,
        files: Any = None,
        headers: Dict[str, str] = None,
        timeout_multiplier: float = 1,
    ) -> requests.Response:
        """
        Wykonaj request z ponowieniami.

        Raises:
            ApiError: Po wyczerpaniu wszystkich prób
        """
        url = self.build_url(endpoint)
        query = build_query_params(as_params(params))
        request_headers = self._build_headers(headers, multipart=files is not None)
        timeout = self.timeout * timeout_multiplier
        attempts = self.max_retries + 1
        error: Optional[ApiError] = None

        for attempt in range(1, attempts + 1):
            try:
                response = self.http.request(
                    method,
                    url,
                    params=query or None,
                    json=json,
                    data=data,
                    files=files,
                    headers=request_headers,
                    timeout=timeout,
                    verify=self.verify,
                )
            except Timeout:
                error = ClientSideError(f"Request timed out after {timeout}s", endpoint=url)
            except RequestException as e:
                error = ClientSideError(str(e), endpoint=url)
            else:
                if response.ok:
                    logger.debug(f"[ApiClient] {method} {url} -> {response.status_code}")
                    return response
                error = error_for_status(
                    response.status_code,
                    response.reason,
                    endpoint=url,
                    details=self._error_details(response),
                )

            if attempt < attempts:
                logger.warning(
                    f"[ApiClient] {method} {url} failed "
                    f"(attempt {attempt}/{attempts}): {error.message}"
                )
                self._sleep(self.retry_delay)

        self._on_failure(method, error)
        raise error

    @staticmethod
    def _error_details(response: requests.Response) -> dict:
        try:
            body = response.json()
        except ValueError:
            text = (response.text or "").strip()
            return {"body": text[:500]} if text else {}

        if isinstance(body, dict):
            message = body.get("message") or body.get("title") or body.get("error")
            details = {"message": message} if message else {}
            if body.get("errors"):
                details["errors"] = body["errors"]
            return details
        return {"body": body}

    def _on_failure(self, method: str, error: ApiError) -> None:
        logger.error(f"[ApiClient] {method} {error.endpoint} failed: {error}")

        if isinstance(error, UnauthorizedError):
            self.session.clear()

        if self.event_bus:
            self.event_bus.publish(create_event(
                EventType.API_ERROR,
                {
                    "method": method,
                    "endpoint": error.endpoint,
                    "status": error.status,
                    "category": error.category.value,
                    "message": error.user_message,
                },
                source="api_client",
            ))

    @staticmethod
    def _decode(response: requests.Response) -> Any:
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    # ============================================================
    # Public API
    # ============================================================

    def get(self, endpoint: str, params: Any = None) -> Any:
        return self._decode(self._send("GET", endpoint, params=params))

    def get_paginated(
        self,
        endpoint: str,
        params: Any = None,
        model: Type = None,
    ) -> PagedResponse:
        """
        GET zwracający kopertę stronicowania.

        Args:
            endpoint: Ścieżka zasobu
            params: PageRequest lub dict
            model: Typ elementów data (None = surowe dict)
        """
        payload = self.get(endpoint, params)
        envelope = PagedResponse[model] if model is not None else PagedResponse
        return envelope.model_validate(payload or {})

    def post(self, endpoint: str, body: Any = None, params: Any = None) -> Any:
        return self._decode(self._send("POST", endpoint, params=params, json=body))

    def put(self, endpoint: str, body: Any = None, params: Any = None) -> Any:
        return self._decode(self._send("PUT", endpoint, params=params, json=body))

    def patch(self, endpoint: str, body: Any = None, params: Any = None) -> Any:
        return self._decode(self._send("PATCH", endpoint, params=params, json=body))

    def delete(self, endpoint: str, params: Any = None, body: Any = None) -> Any:
        return self._decode(self._send("DELETE", endpoint, params=params, json=body))

    def upload(
        self,
        endpoint: str,
        file: FileSpec,
        extra_fields: Dict[str, Any] = None,
    ) -> Any:
        """
        Upload jednego pliku (multipart, pole "file").

        Content-Type ustawia requests (boundary). Timeout x2.
        """
        files = {"file": file_tuple(file)}
        return self._decode(self._send(
            "POST",
            endpoint,
            data=self._form_fields(extra_fields),
            files=files,
            timeout_multiplier=UPLOAD_TIMEOUT_MULTIPLIER,
        ))

    def upload_multiple(
        self,
        endpoint: str,
        files: Iterable[FileSpec],
        extra_fields: Dict[str, Any] = None,
    ) -> Any:
        """Upload wielu plików jako files[0], files[1], ... Timeout x3."""
        form_files = [
            (f"files[{index}]", file_tuple(file, default_name=f"file{index}"))
            for index, file in enumerate(files)
        ]
        return self._decode(self._send(
            "POST",
            endpoint,
            data=self._form_fields(extra_fields),
            files=form_files,
            timeout_multiplier=UPLOAD_MULTIPLE_TIMEOUT_MULTIPLIER,
        ))

    def download(self, endpoint: str, params: Any = None) -> bytes:
        """Pobierz odpowiedź binarną (np. eksport CSV)."""
        response = self._send("GET", endpoint, params=params, headers={"Accept": "*/*"})
        return response.content

    def download_post(self, endpoint: str, body: Any = None) -> bytes:
        """POST z odpowiedzią binarną."""
        response = self._send("POST", endpoint, json=body, headers={"Accept": "*/*"})
        return response.content

    def ping(self) -> bool:
        """Sprawdź dostępność API (endpoint health). Nigdy nie rzuca wyjątku."""
        try:
            self._send("GET", ENDPOINTS["HEALTH"])
            return True
        except ApiError as e:
            logger.warning(f"[ApiClient] Ping failed: {e}")
            return False

    @staticmethod
    def _form_fields(extra_fields: Optional[Dict[str, Any]]) -> Dict[str, str]:
        return dict(build_query_params(extra_fields)) if extra_fields else {}

    # ============================================================
    # Lifecycle
    # ============================================================

    def close(self) -> None:
        self.http.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


# ============================================================
# Singleton
# ============================================================

_api_client: Optional[ApiClient] = None


def get_api_client() -> ApiClient:
    """
    Zwraca singleton klienta API z konfiguracją z config.settings.

    Sesja jest utrwalana w SESSION_FILE.
    """
    global _api_client

    if _api_client is None:
        event_bus = get_event_bus()
        _api_client = ApiClient(
            session=SessionContext(store_path=SESSION_FILE, event_bus=event_bus),
            event_bus=event_bus,
        )
        logger.info(f"[ApiClient] Created client for {_api_client.base_url}")

    return _api_client


def reset_client():
    """Resetuj klienta (przydatne do testów)."""
    global _api_client
    if _api_client is not None:
        _api_client.close()
    _api_client = None


def test_connection() -> bool:
    """
    Testuj połączenie z API.

    Returns:
        True jeśli endpoint health odpowiada
    """
    return get_api_client().ping()


# pytest zbiera funkcje test_* także z importów
test_connection.__test__ = False
