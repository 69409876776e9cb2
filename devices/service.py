"""
POS Admin - Device API Services
===============================
Klienci REST dla api/devices i api/PointOfSales.
"""

from typing import Iterable, List
import logging

from config.settings import ENDPOINTS
from core.base_service import BaseApiService
from core.validation import ALPHANUMERIC_PATTERN, IPV4_PATTERN, ValidationResult, Validator
from devices.models import Device, DevicePingResult, MultipleOperationResult, PointOfSale

logger = logging.getLogger(__name__)

TAX_IDENT_PATTERN = r"^[0-9\-kK]{1,20}$"


class DeviceApiService(BaseApiService[Device]):
    """
    CRUD urządzeń + ping i operacje masowe po stronie serwera.

    Usage:
        service = DeviceApiService()
        result = service.ping("DEV_202501140930_K3X9")
        if not result.is_reachable:
            print(result.error)
    """

    PATH = ENDPOINTS["DEVICES"]
    MODEL = Device
    ENTITY_NAME = "Device"

    def validate(self, dto: Device) -> ValidationResult:
        return (Validator()
            .required("deviceCode", dto.device_code)
            .max_length("deviceCode", dto.device_code, 50)
            .required("deviceName", dto.device_name)
            .max_length("deviceName", dto.device_name, 150)
            .required("ipAddress", dto.ip_address)
            .matches("ipAddress", dto.ip_address, IPV4_PATTERN, "ipAddress has an invalid format")
            .required("dataSource", dto.data_source)
            .max_length("dataSource", dto.data_source, 1)
            .result())

    def ping(self, device_code: str) -> DevicePingResult:
        payload = self.client.get(self._path(device_code, "ping"))
        if isinstance(payload, bool):
            return DevicePingResult(is_reachable=payload)
        return DevicePingResult.from_wire(payload or {})

    def delete_multiple(self, device_codes: Iterable[str]) -> MultipleOperationResult:
        """DELETE api/devices/delete-multiple (lista kodów w body)."""
        codes = list(device_codes)
        payload = self.client.delete(self._path("delete-multiple"), body=codes)
        logger.info(f"[Device] delete-multiple: {len(codes)} codes")
        return MultipleOperationResult.from_wire(payload or {})

    def toggle_multiple(self, device_codes: Iterable[str], enabled: bool) -> MultipleOperationResult:
        """PUT api/devices/toggle-multiple"""
        codes = list(device_codes)
        payload = self.client.put(
            self._path("toggle-multiple"),
            {"deviceCodes": codes, "enabled": enabled},
        )
        logger.info(f"[Device] toggle-multiple: {len(codes)} codes -> {enabled}")
        return MultipleOperationResult.from_wire(payload or {})


class PointOfSaleApiService(BaseApiService[PointOfSale]):
    """CRUD punktów sprzedaży + filtry"""

    PATH = ENDPOINTS["POINT_OF_SALES"]
    MODEL = PointOfSale
    ENTITY_NAME = "PointOfSale"

    def validate(self, dto: PointOfSale) -> ValidationResult:
        return (Validator()
            .required("posCode", dto.pos_code)
            .max_length("posCode", dto.pos_code, 50)
            .required("posName", dto.pos_name)
            .max_length("posName", dto.pos_name, 150)
            .max_length("ipAddress", dto.ip_address, 50)
            .matches("ipAddress", dto.ip_address, IPV4_PATTERN, "ipAddress has an invalid format")
            .max_length("datasource", dto.datasource, 1)
            .max_length("sisCode", dto.sis_code, 20)
            .matches("sisCode", dto.sis_code, ALPHANUMERIC_PATTERN, "sisCode must be alphanumeric")
            .max_length("taxIdentNumber", dto.tax_ident_number, 20)
            .matches("taxIdentNumber", dto.tax_ident_number, TAX_IDENT_PATTERN,
                     "taxIdentNumber has an invalid format")
            .result())

    def enabled(self) -> List[PointOfSale]:
        return self.get_paged({"enabled": True}).data

    def with_ip_address(self) -> List[PointOfSale]:
        return self.get_paged({"hasIpAddress": True}).data

    def by_datasource(self, datasource: str) -> List[PointOfSale]:
        return self.get_paged({"datasource": datasource}).data
