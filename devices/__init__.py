"""
POS Admin - Devices Module
==========================
Urządzenia i punkty sprzedaży.
"""

from devices.models import Device, DevicePingResult, MultipleOperationResult, PointOfSale
from devices.repository import DeviceRepository, PointOfSaleRepository
from devices.service import DeviceApiService, PointOfSaleApiService

__all__ = [
    'Device',
    'DevicePingResult',
    'MultipleOperationResult',
    'PointOfSale',
    'DeviceApiService',
    'PointOfSaleApiService',
    'DeviceRepository',
    'PointOfSaleRepository',
]
