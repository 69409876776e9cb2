"""
POS Admin - Base Repository
===========================
Bazowa klasa repozytorium - adapter nad serwisem API.

Każda metoda zamienia błąd na bezpieczną wartość domyślną
(pusta lista / None / False) i loguje go. Wersje *_result zwracają
RepositoryResult z jawnym wynikiem (SUCCESS / EMPTY / FAILED), żeby
odróżnić "brak danych" od "request się nie udał".
"""

from concurrent.futures import ALL_COMPLETED, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, Generic, Iterable, List, Optional, Sequence, TypeVar
import csv
import io
import logging
import random
import string

from pydantic import ValidationError as ModelValidationError

from config.settings import BULK_MAX_WORKERS
from core.base_service import BaseApiService
from core.events import EventBus, EventType, create_event
from core.exceptions import NotFoundError, PosAdminError, UnsupportedOperationError
from core.wire import PagedResponse

logger = logging.getLogger(__name__)

T = TypeVar('T')

# Błędy zamieniane na wartości domyślne; pozostałe (bugi) propagują
ABSORBED_ERRORS = (PosAdminError, ModelValidationError)

BASE36_ALPHABET = string.digits + string.ascii_lowercase


# ============================================================
# Result types
# ============================================================

class Outcome(Enum):
    """Wynik operacji repozytorium"""
    SUCCESS = "success"
    EMPTY = "empty"
    FAILED = "failed"


@dataclass
class RepositoryResult(Generic[T]):
    """
    Wartość + jawny wynik operacji.

    Attributes:
        value: Wartość lub wartość domyślna przy błędzie
        outcome: SUCCESS / EMPTY / FAILED
        error: Wyjątek (tylko przy FAILED, przy EMPTY dla 404)
    """
    value: T
    outcome: Outcome
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.SUCCESS

    @property
    def is_empty(self) -> bool:
        return self.outcome is Outcome.EMPTY

    @property
    def failed(self) -> bool:
        return self.outcome is Outcome.FAILED

    @property
    def error_message(self) -> Optional[str]:
        if self.error is None:
            return None
        return getattr(self.error, "user_message", None) or str(self.error)


@dataclass
class BulkItemError:
    """Błąd pojedynczej pozycji operacji masowej"""
    item: Any
    error: str


@dataclass
class BulkOperationResult:
    """Podsumowanie operacji masowej"""
    success: int = 0
    failed: int = 0
    errors: List[BulkItemError] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.success + self.failed

    @property
    def all_succeeded(self) -> bool:
        return self.failed == 0


def _is_empty_value(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, PagedResponse):
        return not value.data
    if isinstance(value, (list, tuple, dict)):
        return not value
    return False


# ============================================================
# Base repository
# ============================================================

class BaseRepository:
    """
    Bazowa klasa repozytorium.

    Zapewnia:
    - bezpieczne CRUD nad BaseApiService (get_all, get_paged, get_by_code,
      create, update, delete, search) + warianty *_result
    - operacje masowe (_run_bulk) z oczekiwaniem na wszystkie wyniki
    - helpery prezentacji: etykiety, severity, CSV, generowanie kodów

    Usage:
        class DeviceRepository(BaseRepository):
            ENTITY_NAME = "Device"

            def __init__(self, service: DeviceApiService = None):
                super().__init__(service or DeviceApiService())
    """

    ENTITY_NAME: str = None

    ENABLED_LABELS = {True: "Aktywny", False: "Nieaktywny"}
    ENABLED_SEVERITIES = {True: "success", False: "danger"}

    def __init__(
        self,
        service: BaseApiService,
        event_bus: EventBus = None,
        max_workers: int = None,
    ):
        self.service = service
        self.event_bus = event_bus
        self.max_workers = max_workers or BULK_MAX_WORKERS

        if not self.ENTITY_NAME:
            self.ENTITY_NAME = service.ENTITY_NAME

    # ============================================================
    # Failure absorption
    # ============================================================

    def _attempt(
        self,
        operation: str,
        fn: Callable[..., T],
        default: T,
        *args,
        **kwargs
    ) -> RepositoryResult[T]:
        """
        Wywołaj operację serwisu i opakuj wynik.

        404 -> EMPTY, inne błędy API/walidacji -> FAILED (z logiem).
        """
        try:
            value = fn(*args, **kwargs)
        except NotFoundError as e:
            logger.info(f"[{self.ENTITY_NAME}] {operation}: not found")
            return RepositoryResult(default, Outcome.EMPTY, e)
        except ABSORBED_ERRORS as e:
            logger.error(f"[{self.ENTITY_NAME}] {operation} failed: {e}")
            return RepositoryResult(default, Outcome.FAILED, e)

        if _is_empty_value(value):
            return RepositoryResult(default if value is None else value, Outcome.EMPTY)
        return RepositoryResult(value, Outcome.SUCCESS)

    def _execute(self, operation: str, fn: Callable[..., Any], *args, **kwargs) -> RepositoryResult[bool]:
        """Operacja bez wyniku (update/delete) -> True/False."""
        try:
            fn(*args, **kwargs)
        except ABSORBED_ERRORS as e:
            logger.error(f"[{self.ENTITY_NAME}] {operation} failed: {e}")
            return RepositoryResult(False, Outcome.FAILED, e)
        return RepositoryResult(True, Outcome.SUCCESS)

    def _publish(self, event_type: EventType, **data) -> None:
        if self.event_bus:
            data.setdefault("entity", self.ENTITY_NAME)
            self.event_bus.publish(create_event(event_type, data, source=self.ENTITY_NAME))

    # ============================================================
    # CRUD (safe)
    # ============================================================

    def get_all_result(self) -> RepositoryResult[list]:
        return self._attempt("get_all", self.service.get_all, [])

    def get_all(self) -> list:
        return self.get_all_result().value

    def get_paged_result(self, params: Any = None) -> RepositoryResult[Optional[PagedResponse]]:
        return self._attempt("get_paged", self.service.get_paged, None, params)

    def get_paged(self, params: Any = None) -> Optional[PagedResponse]:
        return self.get_paged_result(params).value

    def get_by_code_result(self, code: str) -> RepositoryResult:
        return self._attempt(f"get_by_code({code})", self.service.get_by_code, None, code)

    def get_by_code(self, code: str):
        return self.get_by_code_result(code).value

    def create_result(self, dto: Any) -> RepositoryResult:
        result = self._attempt("create", self.service.create, None, dto)
        if result.ok:
            self._publish(EventType.RECORD_CREATED, record=result.value.to_wire())
        return result

    def create(self, dto: Any):
        return self.create_result(dto).value

    def update_result(self, code: str, dto: Any) -> RepositoryResult[bool]:
        result = self._execute(f"update({code})", self.service.update, code, dto)
        if result.ok:
            self._publish(EventType.RECORD_UPDATED, code=code)
        return result

    def update(self, code: str, dto: Any) -> bool:
        return self.update_result(code, dto).value

    def delete_result(self, code: str) -> RepositoryResult[bool]:
        result = self._execute(f"delete({code})", self.service.delete, code)
        if result.ok:
            self._publish(EventType.RECORD_DELETED, code=code)
        return result

    def delete(self, code: str) -> bool:
        return self.delete_result(code).value

    def search(self, term: str, page_number: int = 1, page_size: int = 10) -> Optional[PagedResponse]:
        return self._attempt(
            f"search({term})", self.service.search, None, term, page_number, page_size
        ).value

    # ============================================================
    # Bulk operations
    # ============================================================

    def _run_bulk(
        self,
        operation: str,
        items: Sequence[Any],
        fn: Callable[[Any], Any],
        on_complete: Callable[[BulkOperationResult], None] = None,
    ) -> BulkOperationResult:
        """
        Uruchom niezależne operacje równolegle i poczekaj na wszystkie.

        Każda pozycja jest osobnym requestem (bez transakcji). Wynik
        zbierany dopiero po zakończeniu wszystkich, on_complete wołane raz.

        Args:
            operation: Nazwa operacji (do logów i eventu)
            items: Pozycje (np. kody)
            fn: Operacja dla jednej pozycji (rzuca wyjątek przy błędzie)
            on_complete: Callback z podsumowaniem
        """
        items = list(items)
        result = BulkOperationResult()

        if items:
            workers = max(1, min(self.max_workers, len(items)))
            with ThreadPoolExecutor(max_workers=workers) as pool:
                futures = [(pool.submit(fn, item), item) for item in items]
                wait([future for future, _ in futures], return_when=ALL_COMPLETED)

            for future, item in futures:
                error = future.exception()
                if error is None:
                    result.success += 1
                else:
                    result.failed += 1
                    result.errors.append(BulkItemError(item=item, error=str(error)))
                    logger.error(f"[{self.ENTITY_NAME}] {operation}({item}) failed: {error}")

        logger.info(
            f"[{self.ENTITY_NAME}] {operation}: "
            f"{result.success} succeeded, {result.failed} failed"
        )
        self._publish(
            EventType.BULK_OPERATION_COMPLETED,
            operation=operation,
            success=result.success,
            failed=result.failed,
        )

        if on_complete:
            on_complete(result)
        return result

    def delete_many(
        self,
        codes: Iterable[str],
        on_complete: Callable[[BulkOperationResult], None] = None,
    ) -> BulkOperationResult:
        """Usuń wiele rekordów (niezależne DELETE)."""
        return self._run_bulk("delete_many", list(codes), self.service.delete, on_complete)

    def _set_enabled(self, code: str, enabled: bool) -> None:
        if "enabled" not in self.service.MODEL.model_fields:
            raise UnsupportedOperationError(self.ENTITY_NAME, "set_enabled_many")
        current = self.service.get_by_code(code)
        if current is None:
            raise NotFoundError(f"{self.ENTITY_NAME} {code} not found", status=404)
        self.service.update(code, current.model_copy(update={"enabled": enabled}))

    def set_enabled_many(
        self,
        codes: Iterable[str],
        enabled: bool,
        on_complete: Callable[[BulkOperationResult], None] = None,
    ) -> BulkOperationResult:
        """Włącz/wyłącz wiele rekordów (GET + PUT per rekord)."""
        return self._run_bulk(
            "set_enabled_many",
            list(codes),
            lambda code: self._set_enabled(code, enabled),
            on_complete,
        )

    # ============================================================
    # Presentation helpers
    # ============================================================

    @classmethod
    def enabled_label(cls, enabled: Optional[bool]) -> str:
        return cls.ENABLED_LABELS[bool(enabled)]

    @classmethod
    def enabled_severity(cls, enabled: Optional[bool]) -> str:
        return cls.ENABLED_SEVERITIES[bool(enabled)]

    @staticmethod
    def generate_code(
        prefix: str,
        with_seconds: bool = True,
        suffix_length: int = 6,
        uppercase: bool = False,
    ) -> str:
        """
        Generuj kod: {prefix}_{znacznik czasu}_{losowy sufiks base36}.

        Examples:
            generate_code("CG") -> "CG_20250114093015_k3x9q1"
            generate_code("POS", with_seconds=False, suffix_length=4, uppercase=True)
                -> "POS_202501140930_K3X9"
        """
        timestamp = datetime.now().strftime("%Y%m%d%H%M%S" if with_seconds else "%Y%m%d%H%M")
        suffix = "".join(random.choice(BASE36_ALPHABET) for _ in range(suffix_length))
        if uppercase:
            suffix = suffix.upper()
        return f"{prefix}_{timestamp}_{suffix}"

    @staticmethod
    def to_csv(rows: Iterable[Dict[str, Any]], columns: Dict[str, str]) -> str:
        """
        Zbuduj tekst CSV.

        Args:
            rows: Wiersze (dict)
            columns: Mapowanie klucz -> nagłówek (kolejność kolumn)

        Returns:
            Tekst CSV (wszystkie pola w cudzysłowach)
        """
        buffer = io.StringIO()
        writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
        writer.writerow(columns.values())
        for row in rows:
            writer.writerow(
                "" if row.get(key) is None else row.get(key)
                for key in columns
            )
        return buffer.getvalue()
