"""
POS Admin - Session Context
===========================
Kontekst sesji: token Bearer + dane użytkownika.

Jeden obiekt przekazywany do ApiClient zamiast globalnego stanu.
clear() jest wywoływane przez transport przy odpowiedzi 401.
"""

import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, Optional

from core.events import EventBus, EventType, create_event

logger = logging.getLogger(__name__)


class SessionContext:
    """
    Token autoryzacyjny i dane zalogowanego użytkownika.

    Args:
        store_path: Plik JSON do utrwalenia sesji (None = tylko w pamięci)
        event_bus: Bus do publikacji SESSION_STARTED / SESSION_CLEARED

    Usage:
        session = SessionContext(store_path=SESSION_FILE)
        session.set_token("eyJ...", {"userName": "admin"})
        client = ApiClient(session=session)
    """

    def __init__(self, store_path: Path = None, event_bus: EventBus = None):
        self.store_path = Path(store_path) if store_path else None
        self.event_bus = event_bus
        self._lock = threading.Lock()
        self._token: Optional[str] = None
        self._user_info: Optional[Dict[str, Any]] = None

        if self.store_path:
            self._load()

    # ============================================================
    # Properties
    # ============================================================

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def user_info(self) -> Optional[Dict[str, Any]]:
        return self._user_info

    @property
    def is_authenticated(self) -> bool:
        return bool(self._token)

    # ============================================================
    # Mutations
    # ============================================================

    def set_token(self, token: str, user_info: Dict[str, Any] = None) -> None:
        """Zapisz token (np. po zalogowaniu)."""
        with self._lock:
            self._token = token
            self._user_info = user_info
            self._save()

        logger.info("[Session] Token stored")
        self._publish(EventType.SESSION_STARTED, {"user_info": user_info})

    def clear(self) -> bool:
        """
        Usuń token i dane użytkownika.

        Bezpieczne przy równoległych 401 - tylko pierwsze wywołanie
        faktycznie czyści sesję i publikuje SESSION_CLEARED.

        Returns:
            True jeśli ta operacja usunęła token, False jeśli sesja była już pusta
        """
        with self._lock:
            if self._token is None and self._user_info is None:
                return False
            self._token = None
            self._user_info = None
            self._save()

        logger.warning("[Session] Session cleared")
        self._publish(EventType.SESSION_CLEARED, {})
        return True

    # ============================================================
    # Persistence
    # ============================================================

    def _load(self) -> None:
        if not self.store_path.exists():
            return

        try:
            payload = json.loads(self.store_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"[Session] Cannot read {self.store_path}: {e}")
            return

        self._token = payload.get("auth_token")
        self._user_info = payload.get("user_info")

    def _save(self) -> None:
        if not self.store_path:
            return

        try:
            if self._token is None and self._user_info is None:
                if self.store_path.exists():
                    self.store_path.unlink()
                return

            self.store_path.parent.mkdir(parents=True, exist_ok=True)
            self.store_path.write_text(
                json.dumps({"auth_token": self._token, "user_info": self._user_info}),
                encoding="utf-8"
            )
        except OSError as e:
            logger.error(f"[Session] Cannot write {self.store_path}: {e}")

    def _publish(self, event_type: EventType, data: dict) -> None:
        if self.event_bus:
            self.event_bus.publish(create_event(event_type, data, source="session"))
