"""
POS Admin - Customer API Services
=================================
Klienci REST dla api/CustomerGroups i api/Customers.
"""

import logging

from config.settings import ENDPOINTS
from core.base_service import BaseApiService
from core.validation import EMAIL_PATTERN, ValidationResult, Validator
from customers.models import Customer, CustomerGroup

logger = logging.getLogger(__name__)


class CustomerGroupApiService(BaseApiService[CustomerGroup]):
    """CRUD grup klientów"""

    PATH = ENDPOINTS["CUSTOMER_GROUPS"]
    MODEL = CustomerGroup
    ENTITY_NAME = "CustomerGroup"

    def validate(self, dto: CustomerGroup) -> ValidationResult:
        return (Validator()
            .required("customerGroupCode", dto.customer_group_code)
            .max_length("customerGroupCode", dto.customer_group_code, 50)
            .required("customerGroupName", dto.customer_group_name)
            .max_length("customerGroupName", dto.customer_group_name, 100)
            .required("datasource", dto.datasource)
            .exact_length("datasource", dto.datasource, 1)
            .result())


class CustomerApiService(BaseApiService[Customer]):
    """CRUD klientów"""

    PATH = ENDPOINTS["CUSTOMERS"]
    MODEL = Customer
    ENTITY_NAME = "Customer"

    def validate(self, dto: Customer) -> ValidationResult:
        return (Validator()
            .required("customerCode", dto.customer_code)
            .max_length("customerCode", dto.customer_code, 50)
            .required("customerName", dto.customer_name)
            .max_length("customerName", dto.customer_name, 100)
            .max_length("taxIdentNumber", dto.tax_ident_number, 20)
            .max_length("cellPhoneNumber", dto.cell_phone_number, 15)
            .max_length("email", dto.email, 100)
            .matches("email", dto.email, EMAIL_PATTERN, "email has an invalid format")
            .max_length("customerGroupCode", dto.customer_group_code, 50)
            .result())
