#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
POS Admin Core Module
=====================
Wspólne komponenty dla wszystkich modułów.
"""

# API client
from core.api_client import (
    ApiClient,
    get_api_client,
    reset_client,
    test_connection,
)

# Session / auth
from core.session import SessionContext
from core.auth import AuthService

# Exceptions
from core.exceptions import (
    PosAdminError,
    ErrorCategory,
    ApiError,
    BadRequestError,
    UnauthorizedError,
    ForbiddenError,
    NotFoundError,
    ConflictError,
    UnprocessableEntityError,
    ServerError,
    ServiceUnavailableError,
    UnknownApiError,
    ClientSideError,
    InvalidResponseError,
    ValidationError,
    InvalidFieldValueError,
    EntityValidationError,
    FileTooLargeError,
    InvalidFileTypeError,
    AuthError,
    UnsupportedOperationError,
)

# Events
from core.events import (
    EventType,
    Event,
    EventBus,
    EventHandler,
    create_event,
    get_event_bus,
)

# Query params / pagination
from core.filters import (
    SortOrder,
    PageRequest,
    build_query_params,
    create_page_request,
)
from core.wire import PagedResponse, WireModel, YesNo, boolean_to_yn, yn_to_boolean

# Validation
from core.validation import ValidationResult, Validator

# Base classes
from core.base_service import BaseApiService
from core.base_repository import (
    BaseRepository,
    BulkOperationResult,
    Outcome,
    RepositoryResult,
)


__all__ = [
    # API client
    'ApiClient',
    'get_api_client',
    'reset_client',
    'test_connection',

    # Session / auth
    'SessionContext',
    'AuthService',

    # Exceptions
    'PosAdminError',
    'ErrorCategory',
    'ApiError',
    'BadRequestError',
    'UnauthorizedError',
    'ForbiddenError',
    'NotFoundError',
    'ConflictError',
    'UnprocessableEntityError',
    'ServerError',
    'ServiceUnavailableError',
    'UnknownApiError',
    'ClientSideError',
    'InvalidResponseError',
    'ValidationError',
    'InvalidFieldValueError',
    'EntityValidationError',
    'FileTooLargeError',
    'InvalidFileTypeError',
    'AuthError',
    'UnsupportedOperationError',

    # Events
    'EventType',
    'Event',
    'EventBus',
    'EventHandler',
    'create_event',
    'get_event_bus',

    # Query params / pagination
    'SortOrder',
    'PageRequest',
    'build_query_params',
    'create_page_request',
    'PagedResponse',
    'WireModel',
    'YesNo',
    'boolean_to_yn',
    'yn_to_boolean',

    # Validation
    'ValidationResult',
    'Validator',

    # Base classes
    'BaseApiService',
    'BaseRepository',
    'BulkOperationResult',
    'Outcome',
    'RepositoryResult',
]
