"""
POS Admin - Event Bus
=====================
Prosty event bus - repozytoria i transport publikują zdarzenia,
warstwa prezentacji (toasty, odświeżanie list) je subskrybuje.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional
from enum import Enum
import threading
import uuid
import logging

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Typy zdarzeń w systemie"""

    # ========== Session Events ==========
    SESSION_STARTED = "session.started"
    SESSION_CLEARED = "session.cleared"

    # ========== Record Events ==========
    RECORD_CREATED = "record.created"
    RECORD_UPDATED = "record.updated"
    RECORD_DELETED = "record.deleted"

    # ========== Bulk Events ==========
    BULK_OPERATION_COMPLETED = "bulk.completed"

    # ========== Transport Events ==========
    API_ERROR = "api.error"


@dataclass
class Event:
    """
    Zdarzenie w systemie.

    Attributes:
        type: Typ zdarzenia
        data: Dane zdarzenia (payload)
        timestamp: Czas wystąpienia
        event_id: Unikalny identyfikator zdarzenia
        source: Moduł źródłowy
    """
    type: EventType
    data: Dict[str, Any]
    timestamp: datetime = field(default_factory=datetime.now)
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    source: Optional[str] = None


# Type alias dla handlera
EventHandler = Callable[[Event], None]


class EventBus:
    """
    Singleton Event Bus.

    Użycie:
        event_bus = EventBus()
        event_bus.subscribe(EventType.SESSION_CLEARED, show_login_dialog)

        event_bus.publish(Event(
            type=EventType.RECORD_DELETED,
            data={"entity": "Product", "code": "P001"}
        ))
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._handlers: Dict[EventType, List[tuple]] = {}
            cls._instance._global_handlers: List[EventHandler] = []
            cls._instance._lock = threading.Lock()
        return cls._instance

    @classmethod
    def reset(cls):
        """Reset singletona (głównie do testów)"""
        cls._instance = None

    def subscribe(
        self,
        event_type: EventType,
        handler: EventHandler,
        priority: int = 0
    ) -> None:
        """
        Subskrybuj handler na konkretny typ zdarzenia.

        Args:
            event_type: Typ zdarzenia do nasłuchiwania
            handler: Funkcja obsługująca zdarzenie
            priority: Priorytet (wyższy = wcześniej wywołany)
        """
        with self._lock:
            handlers = self._handlers.setdefault(event_type, [])
            handlers.append((priority, handler))
            handlers.sort(key=lambda x: x[0], reverse=True)

        logger.debug(f"[EventBus] Subscribed handler to {event_type.value}")

    def subscribe_all(self, handler: EventHandler) -> None:
        """Subskrybuj handler na WSZYSTKIE zdarzenia."""
        with self._lock:
            self._global_handlers.append(handler)
        logger.debug("[EventBus] Subscribed global handler")

    def unsubscribe(self, event_type: EventType, handler: EventHandler) -> bool:
        """
        Odsubskrybuj handler.

        Returns:
            True jeśli handler został usunięty, False jeśli nie znaleziono
        """
        with self._lock:
            if event_type not in self._handlers:
                return False

            original_count = len(self._handlers[event_type])
            self._handlers[event_type] = [
                (p, h) for p, h in self._handlers[event_type]
                if h != handler
            ]
            removed = len(self._handlers[event_type]) < original_count

        if removed:
            logger.debug(f"[EventBus] Unsubscribed handler from {event_type.value}")
        return removed

    def publish(self, event: Event) -> None:
        """
        Opublikuj zdarzenie.

        Handlery wywoływane synchronicznie w wątku publikującym.
        Błąd w jednym handlerze nie blokuje pozostałych.
        """
        logger.debug(f"[EventBus] Publishing: {event.type.value} | ID: {event.event_id[:8]}")

        with self._lock:
            handlers = list(self._handlers.get(event.type, []))
            global_handlers = list(self._global_handlers)

        for _, handler in handlers:
            try:
                handler(event)
            except Exception as e:
                logger.error(
                    f"[EventBus] Handler error for {event.type.value}: {e}",
                    exc_info=True
                )

        for handler in global_handlers:
            try:
                handler(event)
            except Exception as e:
                logger.error(f"[EventBus] Global handler error: {e}", exc_info=True)

    def clear(self) -> None:
        """Usuń wszystkie handlery"""
        with self._lock:
            self._handlers.clear()
            self._global_handlers.clear()


# ============================================================
# Helper Functions
# ============================================================

def create_event(
    event_type: EventType,
    data: Dict[str, Any],
    source: str = None,
) -> Event:
    """
    Helper do tworzenia zdarzeń.

    Usage:
        event = create_event(EventType.RECORD_CREATED, {"entity": "Customer"})
    """
    return Event(type=event_type, data=data, source=source)


def get_event_bus() -> EventBus:
    """Pobierz instancję Event Bus"""
    return EventBus()
