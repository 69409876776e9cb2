"""
POS Admin - Orders Module
=========================
Zamówienia: lista, statusy, flagi druku/transferu, eksport CSV.
"""

from orders.models import DocumentType, Order, OrderFilter, OrderLine, OrderStatus, PaymentType
from orders.repository import OrderRepository
from orders.service import OrderApiService

__all__ = [
    'DocumentType',
    'Order',
    'OrderFilter',
    'OrderLine',
    'OrderStatus',
    'PaymentType',
    'OrderApiService',
    'OrderRepository',
]
