"""
POS Admin - Device Repositories
===============================
Bezpieczny dostęp do urządzeń i punktów sprzedaży.
"""

from typing import Any, Dict, Iterable, List, Optional
import logging

from config.settings import DEVICE_CODE_PREFIX, POS_CODE_PREFIX
from core.base_repository import BaseRepository
from core.events import EventBus
from core.validation import is_valid_ipv4
from devices.models import Device, DevicePingResult, MultipleOperationResult, PointOfSale
from devices.service import DeviceApiService, PointOfSaleApiService

logger = logging.getLogger(__name__)


class DeviceRepository(BaseRepository):
    """
    Repozytorium urządzeń.

    Usage:
        repo = DeviceRepository()
        result = repo.delete_many(["DEV_1", "DEV_2"])
        print(result.success, result.failed)
    """

    ENTITY_NAME = "Device"

    ENABLED_LABELS = {True: "Włączone", False: "Wyłączone"}

    CSV_COLUMNS = {
        "deviceCode": "Kod",
        "deviceName": "Nazwa",
        "ipAddress": "IP",
        "enabled": "Stan",
        "dataSource": "Źródło",
        "posCode": "Punkt sprzedaży",
    }

    def __init__(self, service: DeviceApiService = None, event_bus: EventBus = None):
        super().__init__(service or DeviceApiService(), event_bus=event_bus)

    def ping(self, device_code: str) -> Optional[DevicePingResult]:
        return self._attempt(f"ping({device_code})", self.service.ping, None, device_code).value

    def delete_multiple(self, device_codes: Iterable[str]) -> Optional[MultipleOperationResult]:
        """Usuwanie masowe jednym requestem (po stronie serwera)."""
        return self._attempt(
            "delete_multiple", self.service.delete_multiple, None, list(device_codes)
        ).value

    def toggle_multiple(self, device_codes: Iterable[str], enabled: bool) -> Optional[MultipleOperationResult]:
        return self._attempt(
            "toggle_multiple", self.service.toggle_multiple, None, list(device_codes), enabled
        ).value

    @staticmethod
    def new_device() -> Device:
        return Device(device_code="", device_name="", enabled=True, ip_address="",
                      data_source="M", pos_code="")

    @classmethod
    def generate_device_code(cls) -> str:
        return cls.generate_code(DEVICE_CODE_PREFIX, with_seconds=False,
                                 suffix_length=4, uppercase=True)

    @staticmethod
    def stats(devices: Iterable[Device]) -> Dict[str, Any]:
        devices = list(devices)
        total = len(devices)
        enabled = sum(1 for device in devices if device.enabled)
        return {
            "total": total,
            "enabled": enabled,
            "disabled": total - enabled,
            "enabledPercentage": round(enabled / total * 100) if total else 0,
        }

    def devices_to_csv(self, devices: Iterable[Device]) -> str:
        rows = []
        for device in devices:
            row = device.to_wire()
            row["enabled"] = self.enabled_label(device.enabled)
            rows.append(row)
        return self.to_csv(rows, self.CSV_COLUMNS)


class PointOfSaleRepository(BaseRepository):
    """
    Repozytorium punktów sprzedaży.

    Stan łączności jest wyliczany lokalnie: bez IP -> unknown,
    włączony -> connected, wyłączony -> disconnected.
    """

    ENTITY_NAME = "PointOfSale"

    CONNECTIVITY_LABELS = {
        "connected": "Połączony",
        "disconnected": "Rozłączony",
        "unknown": "Brak IP",
    }
    CONNECTIVITY_SEVERITIES = {
        "connected": "success",
        "disconnected": "danger",
        "unknown": "warning",
    }

    NOT_CONFIGURED = "Nieskonfigurowany"

    CSV_COLUMNS = {
        "posCode": "Kod POS",
        "posName": "Nazwa",
        "ipAddress": "Adres IP",
        "enabled": "Stan",
        "datasource": "Źródło",
        "sisCode": "Kod SIS",
        "taxIdentNumber": "NIP",
        "connectivity": "Łączność",
    }

    def __init__(self, service: PointOfSaleApiService = None, event_bus: EventBus = None):
        super().__init__(service or PointOfSaleApiService(), event_bus=event_bus)

    def enabled(self) -> List[PointOfSale]:
        return self._attempt("enabled", self.service.enabled, []).value

    def with_ip_address(self) -> List[PointOfSale]:
        return self._attempt("with_ip_address", self.service.with_ip_address, []).value

    def by_datasource(self, datasource: str) -> List[PointOfSale]:
        return self._attempt(
            f"by_datasource({datasource})", self.service.by_datasource, [], datasource
        ).value

    @staticmethod
    def new_point_of_sale() -> PointOfSale:
        return PointOfSale(pos_code="", pos_name="", ip_address="", enabled=True,
                           datasource="M", sis_code="", tax_ident_number="")

    @classmethod
    def generate_pos_code(cls) -> str:
        return cls.generate_code(POS_CODE_PREFIX, with_seconds=False,
                                 suffix_length=4, uppercase=True)

    @staticmethod
    def is_code_unique(
        points: Iterable[PointOfSale],
        pos_code: str,
        current: PointOfSale = None,
    ) -> bool:
        """Kod wolny (przy edycji własny kod rekordu się nie liczy)."""
        if current is not None and current.pos_code == pos_code:
            return True
        return not any(point.pos_code == pos_code for point in points)

    @staticmethod
    def connectivity_status(point: PointOfSale) -> str:
        if not point.ip_address:
            return "unknown"
        return "connected" if point.enabled else "disconnected"

    @classmethod
    def connectivity_label(cls, point: PointOfSale) -> str:
        return cls.CONNECTIVITY_LABELS[cls.connectivity_status(point)]

    @classmethod
    def connectivity_severity(cls, point: PointOfSale) -> str:
        return cls.CONNECTIVITY_SEVERITIES[cls.connectivity_status(point)]

    @classmethod
    def network_info(cls, point: PointOfSale) -> Dict[str, Any]:
        has_ip = bool(point.ip_address)
        return {
            "hasIP": has_ip,
            "ipAddress": point.ip_address or cls.NOT_CONFIGURED,
            "networkStatus": cls.connectivity_label(point),
            "canPing": has_ip and is_valid_ipv4(point.ip_address),
        }

    @classmethod
    def stats(cls, points: Iterable[PointOfSale]) -> Dict[str, Any]:
        points = list(points)
        total = len(points)
        enabled = sum(1 for point in points if point.enabled)
        with_ip = sum(1 for point in points if point.ip_address and point.ip_address.strip())

        by_data_source: Dict[str, int] = {}
        connectivity = {"connected": 0, "disconnected": 0, "unknown": 0}
        for point in points:
            source = point.datasource or cls.NOT_CONFIGURED
            by_data_source[source] = by_data_source.get(source, 0) + 1
            connectivity[cls.connectivity_status(point)] += 1

        return {
            "total": total,
            "enabled": enabled,
            "disabled": total - enabled,
            "withIP": with_ip,
            "withoutIP": total - with_ip,
            "byDataSource": by_data_source,
            "connectivityStats": connectivity,
        }

    def points_to_csv(self, points: Iterable[PointOfSale]) -> str:
        rows = []
        for point in points:
            row = point.to_wire()
            row["enabled"] = self.enabled_label(point.enabled)
            row["connectivity"] = self.connectivity_label(point)
            rows.append(row)
        return self.to_csv(rows, self.CSV_COLUMNS)
