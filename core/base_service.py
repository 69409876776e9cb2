"""
POS Admin - Base API Service
============================
Generyczny klient zasobu REST (CRUD + stronicowanie).
Wszystkie serwisy encji dziedziczą po tej klasie.
"""

from typing import Any, Dict, Generic, List, Optional, Type, TypeVar, Union
from urllib.parse import quote
import logging

from core.api_client import ApiClient, get_api_client
from core.exceptions import InvalidResponseError
from core.filters import PageRequest
from core.validation import ValidationResult, Validator
from core.wire import PagedResponse, WireModel

logger = logging.getLogger(__name__)

M = TypeVar('M', bound=WireModel)


def unwrap_list(payload: Any) -> List[Any]:
    """
    Tablica z odpowiedzi: goła lista albo pole data koperty.

    Raises:
        InvalidResponseError: Body nie jest listą ani kopertą z listą
    """
    if payload is None:
        return []
    items = payload.get("data") if isinstance(payload, dict) else payload
    if items is None:
        return []
    if not isinstance(items, list):
        raise InvalidResponseError(
            f"Expected a JSON array, got {type(items).__name__}",
            details={"body": str(payload)[:200]},
        )
    return list(items)


class BaseApiService(Generic[M]):
    """
    Bazowy serwis zasobu REST.

    Zapewnia:
    - get_all (GET {PATH}/all - goła tablica)
    - get_paged (GET {PATH} - koperta stronicowania)
    - get_by_code / create / update / delete
    - search (filtr tekstowy + stronicowanie)
    - walidację przed create/update

    Usage:
        class DeviceApiService(BaseApiService[Device]):
            PATH = "api/devices"
            MODEL = Device
            ENTITY_NAME = "Device"

            def validate(self, dto: Device) -> ValidationResult:
                return Validator().required("deviceCode", dto.device_code).result()
    """

    # Subklasy muszą zdefiniować
    PATH: str = None
    MODEL: Type[M] = None
    ENTITY_NAME: str = None

    # Ścieżka pełnej listy względem PATH ("" = sam PATH)
    ALL_PATH: str = "all"

    # Nazwa parametru frazy wyszukiwania
    SEARCH_PARAM: str = "search"

    def __init__(self, client: ApiClient = None):
        self.client = client or get_api_client()

        if not self.PATH:
            raise ValueError(f"{self.__class__.__name__} must define PATH")
        if self.MODEL is None:
            raise ValueError(f"{self.__class__.__name__} must define MODEL")
        if not self.ENTITY_NAME:
            self.ENTITY_NAME = self.MODEL.__name__

    # ============================================================
    # Helpers
    # ============================================================

    def _path(self, *parts: Any) -> str:
        """PATH + segmenty (kodowane w URL)."""
        segments = [self.PATH.rstrip("/")]
        segments.extend(quote(str(part), safe="") for part in parts if part != "")
        return "/".join(segments)

    def _to_model(self, payload: Any) -> Optional[M]:
        if payload is None:
            return None
        return self.MODEL.from_wire(payload)

    def _to_models(self, payload: Any) -> List[M]:
        return [self.MODEL.from_wire(item) for item in unwrap_list(payload)]

    def _coerce(self, dto: Union[M, Dict[str, Any]]) -> M:
        if isinstance(dto, self.MODEL):
            return dto
        return self.MODEL.from_wire(dto)

    def _get_list(self, *parts: Any, params: Any = None) -> List[M]:
        return self._to_models(self.client.get(self._path(*parts), params))

    # ============================================================
    # Validation
    # ============================================================

    def validate(self, dto: M) -> ValidationResult:
        """
        Walidacja DTO. Subklasy nadpisują.

        Returns:
            ValidationResult
        """
        return Validator().result()

    def _validated(self, dto: Union[M, Dict[str, Any]]) -> M:
        model = self._coerce(dto)
        self.validate(model).raise_if_invalid(self.ENTITY_NAME)
        return model

    # ============================================================
    # CRUD
    # ============================================================

    def get_all(self) -> List[M]:
        return self._to_models(self.client.get(self._path(self.ALL_PATH)))

    def get_paged(self, params: Any = None) -> PagedResponse[M]:
        """
        Lista stronicowana.

        Args:
            params: PageRequest lub dict (pageNumber, pageSize, filter, ...)
        """
        return self.client.get_paginated(self.PATH, params or PageRequest(), model=self.MODEL)

    def get_by_code(self, code: str) -> Optional[M]:
        return self._to_model(self.client.get(self._path(code)))

    def create(self, dto: Union[M, Dict[str, Any]]) -> Optional[M]:
        """
        Utwórz rekord.

        Raises:
            EntityValidationError: DTO nie przeszło walidacji (bez requestu)
            ApiError: Błąd API
        """
        model = self._validated(dto)
        created = self.client.post(self.PATH, model.to_wire())
        logger.info(f"[{self.ENTITY_NAME}] Created")
        return self._to_model(created) if isinstance(created, dict) else model

    def update(self, code: str, dto: Union[M, Dict[str, Any]]) -> None:
        model = self._validated(dto)
        self.client.put(self._path(code), model.to_wire())
        logger.info(f"[{self.ENTITY_NAME}] Updated: {code}")

    def delete(self, code: str) -> None:
        self.client.delete(self._path(code))
        logger.info(f"[{self.ENTITY_NAME}] Deleted: {code}")

    def search(self, term: str, page_number: int = 1, page_size: int = 10) -> PagedResponse[M]:
        return self.get_paged({
            self.SEARCH_PARAM: term,
            "pageNumber": page_number,
            "pageSize": page_size,
        })
