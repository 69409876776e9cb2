"""
POS Admin - Customer Repositories
=================================
Bezpieczny dostęp do grup klientów i klientów + helpery formularzy.
"""

import logging
from typing import Dict, Iterable, List, Optional

from config.settings import CUSTOMER_CODE_PREFIX, CUSTOMER_GROUP_CODE_PREFIX
from core.base_repository import BaseRepository
from core.events import EventBus
from core.validation import is_valid_email
from customers.models import Customer, CustomerGroup
from customers.service import CustomerApiService, CustomerGroupApiService

logger = logging.getLogger(__name__)

NO_GROUP_LABEL = "Bez grupy"


class CustomerGroupRepository(BaseRepository):
    """
    Repozytorium grup klientów.

    Usage:
        repo = CustomerGroupRepository()
        groups = repo.get_all()          # [] przy błędzie
        options = repo.group_options(groups)
    """

    ENTITY_NAME = "CustomerGroup"

    CSV_COLUMNS = {
        "customerGroupCode": "Kod",
        "customerGroupName": "Nazwa",
        "enabled": "Aktywny",
        "datasource": "Źródło",
    }

    def __init__(self, service: CustomerGroupApiService = None, event_bus: EventBus = None):
        super().__init__(service or CustomerGroupApiService(), event_bus=event_bus)

    @staticmethod
    def new_group() -> CustomerGroup:
        """Pusta grupa dla formularza 'nowy'."""
        return CustomerGroup(customer_group_code="", customer_group_name="",
                             enabled=True, datasource="M")

    @staticmethod
    def group_name(groups: Iterable[CustomerGroup], group_code: Optional[str]) -> str:
        """Nazwa grupy po kodzie; fallback: sam kod albo 'Bez grupy'."""
        for group in groups:
            if group.customer_group_code == group_code:
                return group.customer_group_name
        return group_code or NO_GROUP_LABEL

    @staticmethod
    def enabled_groups(groups: Iterable[CustomerGroup]) -> List[CustomerGroup]:
        return [group for group in groups if group.enabled]

    @classmethod
    def group_options(cls, groups: Iterable[CustomerGroup]) -> List[Dict[str, str]]:
        """Opcje dropdownu (tylko aktywne grupy)."""
        return [
            {"label": group.customer_group_name, "value": group.customer_group_code}
            for group in cls.enabled_groups(groups)
        ]

    @staticmethod
    def code_exists(groups: Iterable[CustomerGroup], code: str) -> bool:
        return any(group.customer_group_code == code for group in groups)

    @classmethod
    def generate_group_code(cls) -> str:
        return cls.generate_code(CUSTOMER_GROUP_CODE_PREFIX)

    def groups_to_csv(self, groups: Iterable[CustomerGroup]) -> str:
        return self.to_csv((group.to_wire() for group in groups), self.CSV_COLUMNS)


class CustomerRepository(BaseRepository):
    """
    Repozytorium klientów.

    Usage:
        repo = CustomerRepository()
        page = repo.search("kowalski")   # None przy błędzie
    """

    ENTITY_NAME = "Customer"

    CSV_COLUMNS = {
        "customerCode": "Kod",
        "customerName": "Nazwa",
        "taxIdentNumber": "NIP",
        "cellPhoneNumber": "Telefon",
        "email": "Email",
        "enabled": "Aktywny",
        "customerGroupCode": "Grupa",
    }

    def __init__(self, service: CustomerApiService = None, event_bus: EventBus = None):
        super().__init__(service or CustomerApiService(), event_bus=event_bus)

    @staticmethod
    def new_customer() -> Customer:
        return Customer(customer_code="", customer_name="", tax_ident_number="",
                        cell_phone_number="", email="", enabled=True,
                        datasource="M", customer_group_code="")

    @staticmethod
    def enabled_customers(customers: Iterable[Customer]) -> List[Customer]:
        return [customer for customer in customers if customer.enabled]

    @staticmethod
    def code_exists(customers: Iterable[Customer], code: str) -> bool:
        return any(customer.customer_code == code for customer in customers)

    @classmethod
    def generate_customer_code(cls) -> str:
        return cls.generate_code(CUSTOMER_CODE_PREFIX)

    @staticmethod
    def is_valid_email(email: Optional[str]) -> bool:
        return is_valid_email(email)

    def customers_to_csv(
        self,
        customers: Iterable[Customer],
        groups: Iterable[CustomerGroup] = (),
    ) -> str:
        """CSV klientów; jeśli podano grupy, kolumna grupy zawiera nazwę."""
        groups = list(groups)
        rows = []
        for customer in customers:
            row = customer.to_wire()
            if groups:
                row["customerGroupCode"] = CustomerGroupRepository.group_name(
                    groups, customer.customer_group_code
                )
            rows.append(row)
        return self.to_csv(rows, self.CSV_COLUMNS)
