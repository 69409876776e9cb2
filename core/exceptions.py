"""
POS Admin - Własne wyjątki
==========================
Hierarchia wyjątków dla całego klienta.
"""

from enum import Enum
from typing import Optional


class PosAdminError(Exception):
    """Bazowy wyjątek dla wszystkich błędów POS Admin"""

    def __init__(self, message: str, code: str = None, details: dict = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"[{self.code}] {self.message} | Details: {self.details}"
        return f"[{self.code}] {self.message}"


# ============================================================
# API Errors
# ============================================================

class ErrorCategory(Enum):
    """Kategorie błędów mapowane ze statusu HTTP"""
    BAD_REQUEST = "bad_request"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    VALIDATION = "validation"
    SERVER_ERROR = "server_error"
    UNAVAILABLE = "unavailable"
    UNKNOWN = "unknown"
    CLIENT = "client"


# Komunikaty dla użytkownika (wyświetlane w toastach)
USER_MESSAGES = {
    ErrorCategory.BAD_REQUEST: "Nieprawidłowe żądanie. Sprawdź wprowadzone dane.",
    ErrorCategory.UNAUTHORIZED: "Brak autoryzacji. Zaloguj się ponownie.",
    ErrorCategory.FORBIDDEN: "Brak uprawnień do wykonania tej operacji.",
    ErrorCategory.NOT_FOUND: "Nie znaleziono zasobu.",
    ErrorCategory.CONFLICT: "Konflikt danych. Rekord już istnieje lub został zmieniony.",
    ErrorCategory.VALIDATION: "Dane nie przeszły walidacji serwera.",
    ErrorCategory.SERVER_ERROR: "Wewnętrzny błąd serwera. Spróbuj ponownie później.",
    ErrorCategory.UNAVAILABLE: "Serwis chwilowo niedostępny.",
}


class ApiError(PosAdminError):
    """
    Błąd komunikacji z REST API.

    Attributes:
        status: Kod HTTP (None gdy brak odpowiedzi)
        category: Kategoria błędu
        user_message: Komunikat do wyświetlenia użytkownikowi
        endpoint: URL requestu
    """

    category = ErrorCategory.UNKNOWN

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        endpoint: str = None,
        details: dict = None,
    ):
        details = dict(details or {})
        if status is not None:
            details.setdefault("status", status)
        if endpoint:
            details.setdefault("endpoint", endpoint)
        super().__init__(message, code=f"API_{self.category.name}", details=details)
        self.status = status
        self.endpoint = endpoint

    @property
    def user_message(self) -> str:
        return USER_MESSAGES.get(self.category, self.message)


class BadRequestError(ApiError):
    """400 - nieprawidłowe żądanie"""
    category = ErrorCategory.BAD_REQUEST


class UnauthorizedError(ApiError):
    """401 - brak lub wygasły token"""
    category = ErrorCategory.UNAUTHORIZED


class ForbiddenError(ApiError):
    """403"""
    category = ErrorCategory.FORBIDDEN


class NotFoundError(ApiError):
    """404 - zasób nie istnieje"""
    category = ErrorCategory.NOT_FOUND


class ConflictError(ApiError):
    """409 - duplikat / konflikt wersji"""
    category = ErrorCategory.CONFLICT


class UnprocessableEntityError(ApiError):
    """422 - walidacja po stronie serwera"""
    category = ErrorCategory.VALIDATION


class ServerError(ApiError):
    """500"""
    category = ErrorCategory.SERVER_ERROR


class ServiceUnavailableError(ApiError):
    """503"""
    category = ErrorCategory.UNAVAILABLE


class UnknownApiError(ApiError):
    """Każdy inny status"""
    category = ErrorCategory.UNKNOWN


class ClientSideError(ApiError):
    """Brak odpowiedzi serwera (timeout, brak połączenia, błąd przed wysłaniem)"""
    category = ErrorCategory.CLIENT

    @property
    def user_message(self) -> str:
        return f"Error: {self.message}"


class InvalidResponseError(ApiError):
    """Odpowiedź 2xx o nieoczekiwanym kształcie (np. skalar zamiast listy)"""
    category = ErrorCategory.UNKNOWN


_STATUS_ERRORS = {
    400: BadRequestError,
    401: UnauthorizedError,
    403: ForbiddenError,
    404: NotFoundError,
    409: ConflictError,
    422: UnprocessableEntityError,
    500: ServerError,
    503: ServiceUnavailableError,
}


def error_for_status(
    status: int,
    reason: str = None,
    endpoint: str = None,
    details: dict = None,
) -> ApiError:
    """
    Zbuduj wyjątek odpowiadający statusowi HTTP.

    Usage:
        raise error_for_status(response.status_code, response.reason, url)
    """
    error_cls = _STATUS_ERRORS.get(status, UnknownApiError)
    message = f"Error {status}: {reason or 'Unknown error'}"
    return error_cls(message, status=status, endpoint=endpoint, details=details)


# ============================================================
# Validation Errors
# ============================================================

class ValidationError(PosAdminError):
    """Błędy walidacji danych"""
    pass


class InvalidFieldValueError(ValidationError, ValueError):
    """Nieprawidłowa wartość pola (np. spoza enuma, strona < 1)"""

    def __init__(self, field: str, value, reason: str = None):
        msg = f"Invalid value for field '{field}': {value}"
        if reason:
            msg += f" - {reason}"
        super().__init__(
            msg,
            code="INVALID_FIELD_VALUE",
            details={"field": field, "value": str(value), "reason": reason}
        )


class EntityValidationError(ValidationError):
    """Zbiorczy błąd walidacji encji (wszystkie komunikaty naraz)"""

    def __init__(self, entity_type: str, errors: list):
        super().__init__(
            f"{entity_type} is invalid: {'; '.join(errors)}",
            code="ENTITY_INVALID",
            details={"entity_type": entity_type, "errors": list(errors)}
        )
        self.errors = list(errors)


# ============================================================
# File Errors
# ============================================================

class FileTooLargeError(ValidationError):
    """Plik jest za duży"""

    def __init__(self, filename: str, size_mb: float, max_size_mb: float):
        super().__init__(
            f"File '{filename}' is too large ({size_mb:.1f} MB). Maximum: {max_size_mb:.1f} MB",
            code="FILE_TOO_LARGE",
            details={
                "filename": filename,
                "size_mb": size_mb,
                "max_size_mb": max_size_mb
            }
        )


class InvalidFileTypeError(ValidationError):
    """Nieprawidłowy typ pliku"""

    def __init__(self, filename: str, allowed_types: list):
        super().__init__(
            f"Invalid file type: '{filename}'. Allowed: {', '.join(allowed_types)}",
            code="INVALID_FILE_TYPE",
            details={"filename": filename, "allowed_types": allowed_types}
        )


# ============================================================
# Authentication Errors
# ============================================================

class AuthError(PosAdminError):
    """Błędy autentykacji"""
    pass


# ============================================================
# Usage Errors
# ============================================================

class UnsupportedOperationError(PosAdminError):
    """Operacja generyczna niedostępna dla zasobu zagnieżdżonego"""

    def __init__(self, entity_type: str, operation: str, hint: str = None):
        msg = f"{entity_type} does not support {operation}"
        if hint:
            msg += f", use {hint}"
        super().__init__(
            msg,
            code="UNSUPPORTED_OPERATION",
            details={"entity_type": entity_type, "operation": operation}
        )
