"""
POS Admin - Customers Module
============================
Grupy klientów i klienci.
"""

from customers.models import Customer, CustomerGroup
from customers.repository import CustomerGroupRepository, CustomerRepository
from customers.service import CustomerApiService, CustomerGroupApiService

__all__ = [
    'Customer',
    'CustomerGroup',
    'CustomerApiService',
    'CustomerGroupApiService',
    'CustomerRepository',
    'CustomerGroupRepository',
]
