"""
Devices Models
==============
DTO urządzeń i punktów sprzedaży.
"""

from typing import List, Optional

from core.wire import WireModel, YesNo


class Device(WireModel):
    """Urządzenie (klucz: deviceCode)"""
    device_code: Optional[str] = None
    device_name: Optional[str] = None
    enabled: YesNo = True
    ip_address: Optional[str] = None
    data_source: Optional[str] = "M"
    pos_code: Optional[str] = None


class DevicePingResult(WireModel):
    """Wynik GET api/devices/{code}/ping"""
    is_reachable: bool = False
    response_time: Optional[float] = None
    error: Optional[str] = None


class MultipleOperationResult(WireModel):
    """Podsumowanie operacji masowej wykonanej po stronie serwera"""
    success: int = 0
    failed: int = 0
    errors: List[str] = []


class PointOfSale(WireModel):
    """Punkt sprzedaży (klucz: posCode)"""
    pos_code: Optional[str] = None
    pos_name: Optional[str] = None
    ip_address: Optional[str] = None
    enabled: YesNo = True
    datasource: Optional[str] = "M"
    sis_code: Optional[str] = None
    tax_ident_number: Optional[str] = None
