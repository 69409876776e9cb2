"""
Customers Models
================
DTO grup klientów i klientów.
"""

from typing import Optional

from core.wire import WireModel, YesNo


class CustomerGroup(WireModel):
    """Grupa klientów (klucz: customerGroupCode)"""
    customer_group_code: Optional[str] = None
    customer_group_name: Optional[str] = None
    enabled: YesNo = True
    datasource: Optional[str] = "M"  # M = ręcznie


class Customer(WireModel):
    """Klient (klucz: customerCode)"""
    customer_code: Optional[str] = None
    customer_name: Optional[str] = None
    tax_ident_number: Optional[str] = None
    cell_phone_number: Optional[str] = None
    email: Optional[str] = None
    enabled: YesNo = True
    datasource: Optional[str] = "M"
    customer_group_code: Optional[str] = None
