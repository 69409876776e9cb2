"""
POS Admin - Product Repositories
================================
Bezpieczny dostęp do katalogu produktów + helpery prezentacji.

Metody odczytu zwracają wartości domyślne przy błędzie API
(pusta lista / None / False), helpery liczą ceny, statusy,
statystyki i eksport CSV z danych już pobranych.
"""

from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple
import logging

from core.base_repository import BaseRepository, BulkOperationResult, RepositoryResult
from core.events import EventBus, EventType
from core.wire import PagedResponse
from products.models import (
    AvailableProduct,
    CategoryAccompaniment,
    CategoryWithAccompaniments,
    Combo,
    ComboOption,
    Product,
    ProductCategory,
    ProductGroup,
    ProductTree,
    ProductTreeItem,
    ProductType,
    Size,
    Variant,
    VariantBulkResult,
)
from products.service import (
    AccompanimentApiService,
    ComboApiService,
    ProductApiService,
    ProductCategoryApiService,
    ProductGroupApiService,
    ProductTreeApiService,
    SizeApiService,
    VariantApiService,
)

logger = logging.getLogger(__name__)

NO_GROUP_KEY = "bez_grupy"
NO_BRAND_LABEL = "Bez marki"


def _average(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


# ============================================================
# Grupy produktów
# ============================================================

class ProductGroupRepository(BaseRepository):
    """
    Repozytorium grup produktów.

    Usage:
        repo = ProductGroupRepository()
        groups = repo.sort_by_vis_order(repo.get_all())
        form = repo.new_group(next_order=repo.next_vis_order(groups))
    """

    ENTITY_NAME = "ProductGroup"

    CSV_COLUMNS = {
        "productGroupCode": "Kod",
        "productGroupName": "Nazwa",
        "frgnName": "Nazwa obca",
        "description": "Opis",
        "enabled": "Aktywna",
        "visOrder": "Kolejność",
        "dataSource": "Źródło",
        "productGroupCodeERP": "Kod ERP",
        "productGroupCodePOS": "Kod POS",
    }

    def __init__(self, service: ProductGroupApiService = None, event_bus: EventBus = None):
        super().__init__(service or ProductGroupApiService(), event_bus=event_bus)

    @staticmethod
    def new_group(next_order: int = 1) -> ProductGroup:
        return ProductGroup(product_group_code="", product_group_name="", enabled=True,
                            vis_order=next_order, data_source="M")

    @staticmethod
    def next_vis_order(groups: Iterable[ProductGroup]) -> int:
        """Następna kolejność wyświetlania (max + 1, dla pustej listy 1)."""
        orders = [group.vis_order or 0 for group in groups]
        return max(orders) + 1 if orders else 1

    @staticmethod
    def sort_by_vis_order(groups: Iterable[ProductGroup]) -> List[ProductGroup]:
        return sorted(groups, key=lambda group: group.vis_order or 0)

    @staticmethod
    def group_name(groups: Iterable[ProductGroup], group_code: Optional[str]) -> Optional[str]:
        for group in groups:
            if group.product_group_code == group_code:
                return group.product_group_name
        return group_code

    @staticmethod
    def group_options(groups: Iterable[ProductGroup]) -> List[Dict[str, str]]:
        return [
            {"label": group.product_group_name, "value": group.product_group_code}
            for group in groups
            if group.enabled
        ]

    @staticmethod
    def stats(groups: Iterable[ProductGroup]) -> Dict[str, Any]:
        """
        Statystyki grup.

        Returns:
            {'total', 'enabled', 'disabled', 'enabledPercentage', 'averageVisOrder'}
        """
        groups = list(groups)
        total = len(groups)
        enabled = sum(1 for group in groups if group.enabled)
        return {
            "total": total,
            "enabled": enabled,
            "disabled": total - enabled,
            "enabledPercentage": round(enabled / total * 100) if total else 0,
            "averageVisOrder": round(_average([group.vis_order or 0 for group in groups])),
        }

    def groups_to_csv(self, groups: Iterable[ProductGroup]) -> str:
        return self.to_csv((group.to_wire() for group in groups), self.CSV_COLUMNS)


# ============================================================
# Kategorie produktów
# ============================================================

class ProductCategoryRepository(BaseRepository):
    """Repozytorium kategorii produktów"""

    ENTITY_NAME = "ProductCategory"

    CSV_COLUMNS = {
        "categoryItemCode": "Kod",
        "categoryItemName": "Nazwa",
        "frgnName": "Nazwa obca",
        "description": "Opis",
        "groupItemCode": "Grupa",
        "enabled": "Aktywna",
        "visOrder": "Kolejność",
        "dataSource": "Źródło",
    }

    def __init__(self, service: ProductCategoryApiService = None, event_bus: EventBus = None):
        super().__init__(service or ProductCategoryApiService(), event_bus=event_bus)

    def by_group(self, group_code: str) -> List[ProductCategory]:
        return self._attempt(f"by_group({group_code})", self.service.by_group, [], group_code).value

    def search_by_group(
        self,
        group_code: str,
        term: str = None,
        page_number: int = 1,
        page_size: int = 10,
    ) -> Optional[PagedResponse]:
        return self._attempt(
            f"search_by_group({group_code})", self.service.search_by_group, None,
            group_code, term, page_number, page_size,
        ).value

    @staticmethod
    def new_category(group_code: str = None, next_order: int = 1) -> ProductCategory:
        return ProductCategory(category_item_code="", category_item_name="", enabled=True,
                               vis_order=next_order, data_source="M",
                               group_item_code=group_code)

    @staticmethod
    def categories_by_group(
        categories: Iterable[ProductCategory],
        group_code: Optional[str],
    ) -> List[ProductCategory]:
        return [category for category in categories if category.group_item_code == group_code]

    @classmethod
    def next_vis_order_for_group(cls, categories: Iterable[ProductCategory], group_code: str) -> int:
        orders = [category.vis_order or 0 for category in cls.categories_by_group(categories, group_code)]
        return max(orders) + 1 if orders else 1

    @staticmethod
    def group_by_product_group(categories: Iterable[ProductCategory]) -> Dict[str, List[ProductCategory]]:
        """Kategorie pogrupowane po kodzie grupy (bez grupy -> 'bez_grupy')."""
        grouped: Dict[str, List[ProductCategory]] = OrderedDict()
        for category in categories:
            grouped.setdefault(category.group_item_code or NO_GROUP_KEY, []).append(category)
        return grouped

    @staticmethod
    def category_name(categories: Iterable[ProductCategory], category_code: Optional[str]) -> Optional[str]:
        for category in categories:
            if category.category_item_code == category_code:
                return category.category_item_name
        return category_code

    def categories_to_csv(self, categories: Iterable[ProductCategory]) -> str:
        return self.to_csv((category.to_wire() for category in categories), self.CSV_COLUMNS)


# ============================================================
# Produkty
# ============================================================

@dataclass
class ProductRow:
    """Produkt z rozwiązanymi nazwami grupy i kategorii"""
    product: Product
    group_name: Optional[str]
    category_name: Optional[str]


class ProductRepository(BaseRepository):
    """
    Repozytorium produktów.

    Usage:
        repo = ProductRepository()
        rows = repo.with_names(repo.get_all())
        for row in rows:
            print(row.product.item_code, row.group_name, repo.status_label(row.product))
    """

    ENTITY_NAME = "Product"

    STATUS_LABELS = {"active": "Aktywny", "partial": "Częściowo", "inactive": "Nieaktywny"}
    STATUS_SEVERITIES = {"active": "success", "partial": "warning", "inactive": "danger"}

    CSV_COLUMNS = {
        "itemCode": "Kod",
        "eanCode": "EAN",
        "itemName": "Nazwa",
        "frgnName": "Nazwa obca",
        "price": "Cena",
        "discount": "Rabat",
        "description": "Opis",
        "sellItem": "Sprzedawany",
        "available": "Dostępny",
        "enabled": "Aktywny",
        "groupItemCode": "Grupa",
        "categoryItemCode": "Kategoria",
        "waitingTime": "Czas oczekiwania",
        "rating": "Ocena",
    }

    def __init__(
        self,
        service: ProductApiService = None,
        size_service: SizeApiService = None,
        group_repository: ProductGroupRepository = None,
        category_repository: ProductCategoryRepository = None,
        event_bus: EventBus = None,
    ):
        super().__init__(service or ProductApiService(), event_bus=event_bus)
        self.size_service = size_service or SizeApiService(self.service.client)
        self.group_repository = group_repository or ProductGroupRepository(
            ProductGroupApiService(self.service.client)
        )
        self.category_repository = category_repository or ProductCategoryRepository(
            ProductCategoryApiService(self.service.client)
        )

    # ============================================================
    # Filtry (safe)
    # ============================================================

    def by_group(self, group_code: str) -> List[Product]:
        return self._attempt(f"by_group({group_code})", self.service.by_group, [], group_code).value

    def by_category(self, category_code: str) -> List[Product]:
        return self._attempt(
            f"by_category({category_code})", self.service.by_category, [], category_code
        ).value

    def available(self) -> List[Product]:
        return self._attempt("available", self.service.available, []).value

    def enabled(self) -> List[Product]:
        return self._attempt("enabled", self.service.enabled, []).value

    def sellable(self) -> List[Product]:
        return self._attempt("sellable", self.service.sellable, []).value

    def by_price_range(self, min_price: float, max_price: float) -> Optional[PagedResponse]:
        return self._attempt(
            "by_price_range", self.service.by_price_range, None, min_price, max_price
        ).value

    def sizes(self) -> List[Size]:
        return self._attempt("sizes", self.size_service.get_all, []).value

    @staticmethod
    def size_name(sizes: Iterable[Size], size_code: Optional[str]) -> Optional[str]:
        for size in sizes:
            if size.size_code == size_code:
                return size.size_name
        return size_code

    # ============================================================
    # Ceny i statusy
    # ============================================================

    @staticmethod
    def discounted_price(product: Product) -> float:
        price = product.price or 0
        return price - price * (product.discount or 0) / 100

    @staticmethod
    def savings(product: Product) -> float:
        return (product.price or 0) * (product.discount or 0) / 100

    @staticmethod
    def has_discount(product: Product) -> bool:
        return (product.discount or 0) > 0

    @staticmethod
    def is_fully_active(product: Product) -> bool:
        return product.sell_item and product.available and product.enabled

    @staticmethod
    def overall_status(product: Product) -> str:
        """active gdy wszystkie flagi, inactive gdy żadna, inaczej partial."""
        flags = (product.sell_item, product.available, product.enabled)
        if all(flags):
            return "active"
        if not any(flags):
            return "inactive"
        return "partial"

    @classmethod
    def status_label(cls, product: Product) -> str:
        return cls.STATUS_LABELS[cls.overall_status(product)]

    @classmethod
    def status_severity(cls, product: Product) -> str:
        return cls.STATUS_SEVERITIES[cls.overall_status(product)]

    @staticmethod
    def yn_label(value: Optional[bool], true_label: str = "Tak", false_label: str = "Nie") -> str:
        return true_label if value else false_label

    @staticmethod
    def yn_severity(value: Optional[bool]) -> str:
        return "success" if value else "danger"

    @classmethod
    def stats(cls, products: Iterable[Product]) -> Dict[str, Any]:
        products = list(products)
        statuses = [cls.overall_status(product) for product in products]
        return {
            "total": len(products),
            "active": statuses.count("active"),
            "partial": statuses.count("partial"),
            "inactive": statuses.count("inactive"),
            "withDiscount": sum(1 for product in products if cls.has_discount(product)),
            "combos": sum(1 for product in products if product.is_combo),
            "averagePrice": _average([product.price or 0 for product in products]),
        }

    # ============================================================
    # Formularze i eksport
    # ============================================================

    @staticmethod
    def new_product() -> Product:
        return Product(item_code="", ean_code="", item_name="", frgn_name="", price=0,
                       discount=0, description="", sell_item=True, available=True,
                       enabled=True, group_item_code="", category_item_code="",
                       waiting_time="", rating=0, product_type=ProductType.SIMPLE,
                       material=[], accompaniment=[])

    def with_names(self, products: Iterable[Product]) -> List[ProductRow]:
        """
        Produkty z nazwami grupy i kategorii.

        Grupy i kategorie pobierane raz; przy błędzie pozostaje sam kod.
        """
        groups = self.group_repository.get_all()
        categories = self.category_repository.get_all()
        return [
            ProductRow(
                product=product,
                group_name=ProductGroupRepository.group_name(groups, product.group_item_code),
                category_name=ProductCategoryRepository.category_name(
                    categories, product.category_item_code
                ),
            )
            for product in products
        ]

    def products_to_csv(self, products: Iterable[Product]) -> str:
        rows = []
        for product in products:
            row = product.to_wire()
            row["sellItem"] = self.yn_label(product.sell_item)
            row["available"] = self.yn_label(product.available)
            row["enabled"] = self.yn_label(product.enabled)
            rows.append(row)
        return self.to_csv(rows, self.CSV_COLUMNS)


# ============================================================
# Drzewa składników
# ============================================================

class ProductTreeRepository(BaseRepository):
    """Repozytorium drzew składników"""

    ENTITY_NAME = "ProductTree"

    DATA_SOURCE_OPTIONS = [
        {"label": "Wewnętrzne", "value": "Internal"},
        {"label": "Zewnętrzne", "value": "External"},
        {"label": "Mieszane", "value": "Mixed"},
    ]

    CSV_COLUMNS = {
        "itemCode": "Kod",
        "itemName": "Nazwa",
        "quantity": "Ilość",
        "enabled": "Aktywne",
        "dataSource": "Źródło",
        "components": "Składniki",
    }

    def __init__(self, service: ProductTreeApiService = None, event_bus: EventBus = None):
        super().__init__(service or ProductTreeApiService(), event_bus=event_bus)

    def enabled(self) -> List[ProductTree]:
        return self._attempt("enabled", self.service.enabled, []).value

    def by_data_source(self, data_source: str) -> List[ProductTree]:
        return self._attempt(
            f"by_data_source({data_source})", self.service.by_data_source, [], data_source
        ).value

    def by_quantity_range(self, min_quantity: float, max_quantity: float) -> Optional[PagedResponse]:
        return self._attempt(
            "by_quantity_range", self.service.by_quantity_range, None, min_quantity, max_quantity
        ).value

    @staticmethod
    def new_tree() -> ProductTree:
        return ProductTree(item_code="", item_name="", quantity=1, enabled=True,
                           data_source="Internal", items1=[])

    @staticmethod
    def new_tree_item() -> ProductTreeItem:
        return ProductTreeItem(item_code="", item_name="", quantity=1, image_url="",
                               product_tree_item_code="", combo_item_code="")

    @staticmethod
    def total_components_quantity(tree: ProductTree) -> float:
        return sum(item.quantity or 0 for item in tree.items1)

    @staticmethod
    def has_components(tree: ProductTree) -> bool:
        return bool(tree.items1)

    @staticmethod
    def stats(trees: Iterable[ProductTree]) -> Dict[str, Any]:
        trees = list(trees)
        total = len(trees)
        enabled = sum(1 for tree in trees if tree.enabled)
        components = sum(len(tree.items1) for tree in trees)
        by_data_source: Dict[str, int] = {}
        for tree in trees:
            by_data_source[tree.data_source] = by_data_source.get(tree.data_source, 0) + 1
        return {
            "total": total,
            "enabled": enabled,
            "disabled": total - enabled,
            "totalComponents": components,
            "averageComponentsPerTree": components / total if total else 0,
            "byDataSource": by_data_source,
        }

    def trees_to_csv(self, trees: Iterable[ProductTree]) -> str:
        rows = []
        for tree in trees:
            row = tree.to_wire()
            row["enabled"] = self.enabled_label(tree.enabled)
            row["components"] = len(tree.items1)
            rows.append(row)
        return self.to_csv(rows, self.CSV_COLUMNS)


# ============================================================
# Dodatki kategorii
# ============================================================

class AccompanimentRepository(BaseRepository):
    """
    Repozytorium dodatków kategorii.

    Operacje adresowane parą (kod kategorii, lineNumber).
    """

    ENTITY_NAME = "Accompaniment"

    CSV_COLUMNS = {
        "category": "Kategoria",
        "accompanimentItemCode": "Kod dodatku",
        "accompanimentItemName": "Nazwa dodatku",
        "accompanimentPrice": "Cena",
        "discount": "Rabat (%)",
        "enlargementItemCode": "Kod powiększenia",
        "enlargementDiscount": "Rabat powiększenia (%)",
    }

    def __init__(self, service: AccompanimentApiService = None, event_bus: EventBus = None):
        super().__init__(service or AccompanimentApiService(), event_bus=event_bus)

    def categories(self) -> List[CategoryWithAccompaniments]:
        return self.get_all()

    def by_category(self, category_code: str) -> Optional[CategoryWithAccompaniments]:
        return self.get_by_code(category_code)

    def get(self, category_code: str, line_number: int) -> Optional[CategoryAccompaniment]:
        return self._attempt(
            f"get({category_code}/{line_number})", self.service.get, None,
            category_code, line_number,
        ).value

    def create_result(self, category_code: str, item: Any) -> RepositoryResult:
        result = self._attempt(f"add({category_code})", self.service.create, None, category_code, item)
        if result.ok:
            self._publish(EventType.RECORD_CREATED, code=category_code,
                          record=result.value.to_wire())
        return result

    def add(self, category_code: str, item: Any) -> Optional[CategoryAccompaniment]:
        return self.create_result(category_code, item).value

    create = add

    def add_many(self, category_code: str, items: Iterable[Any]) -> List[CategoryAccompaniment]:
        result = self._attempt(
            f"add_many({category_code})", self.service.add_many, [], category_code, list(items)
        )
        if result.ok:
            self._publish(EventType.RECORD_CREATED, code=category_code, count=len(result.value))
        return result.value

    def update_result(
        self,
        category_code: str,
        line_number: int,
        item: Any,
    ) -> RepositoryResult[bool]:
        result = self._execute(
            f"update({category_code}/{line_number})", self.service.update,
            category_code, line_number, item,
        )
        if result.ok:
            self._publish(EventType.RECORD_UPDATED, code=category_code, line_number=line_number)
        return result

    def update(self, category_code: str, line_number: int, item: Any) -> bool:
        return self.update_result(category_code, line_number, item).value

    def update_many(self, category_code: str, updates: Iterable[Tuple[int, Any]]) -> bool:
        result = self._execute(
            f"update_many({category_code})", self.service.update_many, category_code, list(updates)
        )
        if result.ok:
            self._publish(EventType.RECORD_UPDATED, code=category_code)
        return result.value

    def remove(self, category_code: str, line_number: int) -> bool:
        result = self._execute(
            f"remove({category_code}/{line_number})", self.service.remove,
            category_code, line_number,
        )
        if result.ok:
            self._publish(EventType.RECORD_DELETED, code=category_code, line_number=line_number)
        return result.value

    def remove_all(self, category_code: str) -> bool:
        return self.delete(category_code)

    def available_products(self) -> List[AvailableProduct]:
        return self._attempt("available_products", self.service.available_products, []).value

    @staticmethod
    def product_options(products: Iterable[AvailableProduct]) -> List[Dict[str, str]]:
        return [
            {"label": f"{product.item_code} - {product.item_name}", "value": product.item_code}
            for product in products
        ]

    @staticmethod
    def discounted_price(item: CategoryAccompaniment) -> float:
        price = item.accompaniment_price or 0
        if not item.discount:
            return price
        return price * (1 - item.discount / 100)

    @staticmethod
    def has_discount(item: CategoryAccompaniment) -> bool:
        return (item.discount or 0) > 0

    @staticmethod
    def has_enlargement(item: CategoryAccompaniment) -> bool:
        return bool(item.enlargement_item_code)

    @staticmethod
    def discount_label(discount: Optional[float]) -> str:
        return f"{discount:g}% RABATU" if discount else "Bez rabatu"

    @staticmethod
    def discount_severity(discount: Optional[float]) -> str:
        if not discount:
            return "secondary"
        if discount >= 50:
            return "success"
        if discount >= 25:
            return "warning"
        return "info"

    @classmethod
    def stats(cls, categories: Iterable[CategoryWithAccompaniments]) -> Dict[str, Any]:
        categories = list(categories)
        items = [item for category in categories for item in category.available_accompaniments]
        discounts = [item.discount for item in items if cls.has_discount(item)]
        return {
            "totalCategories": len(categories),
            "totalAccompaniments": len(items),
            "withDiscount": len(discounts),
            "withEnlargement": sum(1 for item in items if cls.has_enlargement(item)),
            "averagePrice": _average([item.accompaniment_price or 0 for item in items]),
            "averageDiscount": _average(discounts),
        }

    def accompaniments_to_csv(self, categories: Iterable[CategoryWithAccompaniments]) -> str:
        rows = []
        for category in categories:
            for item in category.available_accompaniments:
                row = item.to_wire()
                row["category"] = category.category_item_name
                row["discount"] = item.discount or 0
                row["enlargementDiscount"] = item.enlargement_discount or 0
                rows.append(row)
        return self.to_csv(rows, self.CSV_COLUMNS)


# ============================================================
# Combo
# ============================================================

class ComboRepository(BaseRepository):
    """Repozytorium combo i opcji combo"""

    ENTITY_NAME = "Combo"

    def __init__(self, service: ComboApiService = None, event_bus: EventBus = None):
        super().__init__(service or ComboApiService(), event_bus=event_bus)

    def combo_products(self) -> List[Combo]:
        return self._attempt("combo_products", self.service.combo_products, []).value

    def options(self, product_code: str) -> List[ComboOption]:
        return self._attempt(f"options({product_code})", self.service.options, [], product_code).value

    def add_option(self, product_code: str, option: Any) -> Optional[ComboOption]:
        return self._attempt(
            f"add_option({product_code})", self.service.add_option, None, product_code, option
        ).value

    def add_options(
        self,
        product_code: str,
        options: Iterable[Any],
        on_complete: Callable[[BulkOperationResult], None] = None,
    ) -> BulkOperationResult:
        """Dodaj wiele opcji (niezależne POST, wynik po zakończeniu wszystkich)."""
        return self._run_bulk(
            f"add_options({product_code})",
            list(options),
            lambda option: self.service.add_option(product_code, option),
            on_complete,
        )

    def update_option(self, product_code: str, group_code: str, option_code: str, option: Any) -> bool:
        return self._execute(
            f"update_option({product_code}/{group_code}/{option_code})",
            self.service.update_option, product_code, group_code, option_code, option,
        ).value

    def remove_option(self, product_code: str, group_code: str, option_code: str) -> bool:
        return self._execute(
            f"remove_option({product_code}/{group_code}/{option_code})",
            self.service.remove_option, product_code, group_code, option_code,
        ).value

    def create_combo_product(self, combo: Any) -> Optional[Combo]:
        result = self._attempt("create_combo_product", self.service.create_combo_product, None, combo)
        if result.ok:
            self._publish(EventType.RECORD_CREATED, record=result.value.to_wire())
        return result.value

    @staticmethod
    def calculate_combo_price(base_price: float, selected_options: Iterable[ComboOption]) -> float:
        return base_price + sum(option.price_delta or 0 for option in selected_options)

    @staticmethod
    def option_groups(options: Iterable[ComboOption]) -> List[str]:
        """Unikalne kody grup w kolejności wystąpienia."""
        return list(OrderedDict.fromkeys(option.group_item_code for option in options))

    @staticmethod
    def default_options(options: Iterable[ComboOption]) -> List[ComboOption]:
        return [option for option in options if option.is_default]


# ============================================================
# Warianty
# ============================================================

class VariantRepository(BaseRepository):
    """
    Repozytorium wariantów produktu.

    Usage:
        repo = VariantRepository()
        by_brand = repo.group_by_brand(repo.list("TSHIRT"))
    """

    ENTITY_NAME = "Variant"

    AVAILABLE_LABELS = {True: "Dostępny", False: "Niedostępny"}

    def __init__(self, service: VariantApiService = None, event_bus: EventBus = None):
        super().__init__(service or VariantApiService(), event_bus=event_bus)

    def get_all_result(self, product_code: str) -> RepositoryResult[list]:
        return self._attempt(f"list({product_code})", self.service.list, [], product_code)

    def get_all(self, product_code: str) -> List[Variant]:
        return self.get_all_result(product_code).value

    list = get_all

    def create_result(self, product_code: str, variant: Any) -> RepositoryResult:
        result = self._attempt(f"create({product_code})", self.service.create, None, product_code, variant)
        if result.ok:
            self._publish(EventType.RECORD_CREATED, code=product_code, record=result.value.to_wire())
        return result

    def create(self, product_code: str, variant: Any) -> Optional[Variant]:
        return self.create_result(product_code, variant).value

    def create_bulk(self, product_code: str, variants: Iterable[Any]) -> Optional[VariantBulkResult]:
        return self._attempt(
            f"create_bulk({product_code})", self.service.create_bulk, None,
            product_code, list(variants),
        ).value

    def update_result(
        self,
        product_code: str,
        variant_id: int,
        variant: Any,
    ) -> RepositoryResult[bool]:
        result = self._execute(
            f"update({product_code}/{variant_id})", self.service.update,
            product_code, variant_id, variant,
        )
        if result.ok:
            self._publish(EventType.RECORD_UPDATED, code=product_code, variant_id=variant_id)
        return result

    def update(self, product_code: str, variant_id: int, variant: Any) -> bool:
        return self.update_result(product_code, variant_id, variant).value

    def delete_result(self, product_code: str, variant_id: int) -> RepositoryResult[bool]:
        result = self._execute(
            f"delete({product_code}/{variant_id})", self.service.delete, product_code, variant_id
        )
        if result.ok:
            self._publish(EventType.RECORD_DELETED, code=product_code, variant_id=variant_id)
        return result

    def delete(self, product_code: str, variant_id: int) -> bool:
        return self.delete_result(product_code, variant_id).value

    def delete_many(
        self,
        product_code: str,
        variant_ids: Iterable[int],
        on_complete: Callable[[BulkOperationResult], None] = None,
    ) -> BulkOperationResult:
        """Usuń wiele wariantów produktu (niezależne DELETE)."""
        return self._run_bulk(
            f"delete_many({product_code})",
            list(variant_ids),
            lambda variant_id: self.service.delete(product_code, variant_id),
            on_complete,
        )

    @staticmethod
    def new_variant() -> Variant:
        return Variant(variant_name="", brand_name="", price_adjustment=0, available=True)

    @classmethod
    def available_label(cls, available: Optional[bool]) -> str:
        return cls.AVAILABLE_LABELS[bool(available)]

    @staticmethod
    def final_price(base_price: float, price_adjustment: float) -> float:
        return base_price + price_adjustment

    @staticmethod
    def price_adjustment_severity(adjustment: Optional[float]) -> str:
        """Droższy wariant -> danger, tańszy -> success, bez zmiany -> secondary."""
        if adjustment and adjustment > 0:
            return "danger"
        if adjustment and adjustment < 0:
            return "success"
        return "secondary"

    @staticmethod
    def group_by_brand(variants: Iterable[Variant]) -> Dict[str, List[Variant]]:
        grouped: Dict[str, List[Variant]] = OrderedDict()
        for variant in variants:
            grouped.setdefault(variant.brand_name or NO_BRAND_LABEL, []).append(variant)
        return grouped

    @staticmethod
    def stats(variants: Iterable[Variant]) -> Dict[str, Any]:
        variants = list(variants)
        adjustments = [variant.price_adjustment or 0 for variant in variants]
        available = sum(1 for variant in variants if variant.available)
        return {
            "total": len(variants),
            "available": available,
            "unavailable": len(variants) - available,
            "averagePriceAdjustment": _average(adjustments),
            "maxPriceAdjustment": max(adjustments) if adjustments else 0,
            "minPriceAdjustment": min(adjustments) if adjustments else 0,
            "brands": list(OrderedDict.fromkeys(variant.brand_name for variant in variants)),
        }
