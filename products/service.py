"""
POS Admin - Product API Services
================================
Klienci REST katalogu produktów:

- ProductApiService        api/Products
- SizeApiService           api/Products/sizes
- ProductGroupApiService   api/ProductGroups
- ProductCategoryApiService api/ProductCategories
- ProductTreeApiService    api/producttrees (pełna lista pod korzeniem)
- AccompanimentApiService  api/accompaniments (dodatki per kategoria)
- ComboApiService          api/Combos + trasy combo pod api/Products
- VariantApiService        api/Products/{code}/Variants

Każda metoda rzuca ApiError; walidacja przed create/update rzuca
EntityValidationError bez wysyłania requestu.
"""

from typing import Any, Dict, Iterable, List, Optional, Tuple, Union
from urllib.parse import quote
import logging

from config.settings import ENDPOINTS
from core.base_service import BaseApiService, unwrap_list
from core.exceptions import UnsupportedOperationError
from core.validation import ValidationResult, Validator
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
    ProductType,
    Size,
    Variant,
    VariantBulkResult,
)

logger = logging.getLogger(__name__)


# ============================================================
# Produkty
# ============================================================

class ProductApiService(BaseApiService[Product]):
    """
    CRUD produktów + filtry.

    Usage:
        service = ProductApiService()
        pizzas = service.by_category("PIZZA")
        page = service.by_price_range(10, 50)
    """

    PATH = ENDPOINTS["PRODUCTS"]
    MODEL = Product
    ENTITY_NAME = "Product"

    PRODUCT_TYPES = [product_type.value for product_type in ProductType]

    def validate(self, dto: Product) -> ValidationResult:
        product_type = dto.product_type.value if dto.product_type else None
        return (Validator()
            .required("itemCode", dto.item_code)
            .max_length("itemCode", dto.item_code, 50)
            .required("itemName", dto.item_name)
            .max_length("itemName", dto.item_name, 150)
            .required("price", dto.price)
            .non_negative("price", dto.price)
            .in_range("discount", dto.discount, 0, 100)
            .in_range("rating", dto.rating, 0, 5)
            .max_length("eanCode", dto.ean_code, 20)
            .one_of("u_ProductType", product_type, self.PRODUCT_TYPES)
            .result())

    def by_group(self, group_code: str) -> List[Product]:
        return self._get_list("Groups", group_code)

    def by_category(self, category_code: str) -> List[Product]:
        return self._get_list("Categories", category_code)

    def available(self) -> List[Product]:
        return self.get_paged({"available": "Y"}).data

    def enabled(self) -> List[Product]:
        return self.get_paged({"enabled": True}).data

    def sellable(self) -> List[Product]:
        return self.get_paged({"sellItem": "Y"}).data

    def by_price_range(self, min_price: float, max_price: float) -> PagedResponse[Product]:
        return self.get_paged({"minPrice": min_price, "maxPrice": max_price})


class SizeApiService(BaseApiService[Size]):
    """Rozmiary (tylko odczyt, goła tablica pod korzeniem)"""

    PATH = ENDPOINTS["PRODUCT_SIZES"]
    MODEL = Size
    ENTITY_NAME = "Size"
    ALL_PATH = ""


# ============================================================
# Grupy i kategorie
# ============================================================

class ProductGroupApiService(BaseApiService[ProductGroup]):
    """CRUD grup produktów"""

    PATH = ENDPOINTS["PRODUCT_GROUPS"]
    MODEL = ProductGroup
    ENTITY_NAME = "ProductGroup"

    def validate(self, dto: ProductGroup) -> ValidationResult:
        return (Validator()
            .required("productGroupCode", dto.product_group_code)
            .max_length("productGroupCode", dto.product_group_code, 50)
            .required("productGroupName", dto.product_group_name)
            .max_length("productGroupName", dto.product_group_name, 150)
            .max_length("frgnName", dto.frgn_name, 150)
            .max_length("imageUrl", dto.image_url, 255)
            .max_length("description", dto.description, 255)
            .max_length("frgnDescription", dto.frgn_description, 255)
            .required("visOrder", dto.vis_order)
            .non_negative("visOrder", dto.vis_order)
            .exact_length("dataSource", dto.data_source, 1)
            .max_length("productGroupCodeERP", dto.product_group_code_erp, 50)
            .max_length("productGroupCodePOS", dto.product_group_code_pos, 50)
            .result())


class ProductCategoryApiService(BaseApiService[ProductCategory]):
    """CRUD kategorii produktów + filtr po grupie"""

    PATH = ENDPOINTS["PRODUCT_CATEGORIES"]
    MODEL = ProductCategory
    ENTITY_NAME = "ProductCategory"

    def validate(self, dto: ProductCategory) -> ValidationResult:
        return (Validator()
            .required("categoryItemCode", dto.category_item_code)
            .max_length("categoryItemCode", dto.category_item_code, 50)
            .required("categoryItemName", dto.category_item_name)
            .max_length("categoryItemName", dto.category_item_name, 150)
            .max_length("frgnName", dto.frgn_name, 150)
            .max_length("imageUrl", dto.image_url, 255)
            .max_length("description", dto.description, 255)
            .max_length("frgnDescription", dto.frgn_description, 255)
            .required("visOrder", dto.vis_order)
            .non_negative("visOrder", dto.vis_order)
            .exact_length("dataSource", dto.data_source, 1)
            .max_length("groupItemCode", dto.group_item_code, 50)
            .result())

    def by_group(self, group_code: str) -> List[ProductCategory]:
        return self._get_list("Groups", group_code)

    def search_by_group(
        self,
        group_code: str,
        term: str = None,
        page_number: int = 1,
        page_size: int = 10,
    ) -> PagedResponse[ProductCategory]:
        return self.get_paged({
            "groupItemCode": group_code,
            "search": term,
            "pageNumber": page_number,
            "pageSize": page_size,
        })


# ============================================================
# Drzewa składników
# ============================================================

class ProductTreeApiService(BaseApiService[ProductTree]):
    """CRUD drzew składników (receptur)"""

    PATH = ENDPOINTS["PRODUCT_TREES"]
    MODEL = ProductTree
    ENTITY_NAME = "ProductTree"
    ALL_PATH = ""

    def validate(self, dto: ProductTree) -> ValidationResult:
        return (Validator()
            .required("itemCode", dto.item_code)
            .max_length("itemCode", dto.item_code, 50)
            .required("itemName", dto.item_name)
            .max_length("itemName", dto.item_name, 150)
            .required("quantity", dto.quantity)
            .non_negative("quantity", dto.quantity)
            .required("dataSource", dto.data_source)
            .result())

    def enabled(self) -> List[ProductTree]:
        return self.get_paged({"enabled": "Y"}).data

    def by_data_source(self, data_source: str) -> List[ProductTree]:
        return self.get_paged({"dataSource": data_source}).data

    def by_quantity_range(self, min_quantity: float, max_quantity: float) -> PagedResponse[ProductTree]:
        return self.get_paged({"minQuantity": min_quantity, "maxQuantity": max_quantity})


# ============================================================
# Dodatki kategorii
# ============================================================

class AccompanimentApiService(BaseApiService[CategoryWithAccompaniments]):
    """
    Dodatki przypisane do kategorii.

    Klucz dodatku to (kod kategorii, lineNumber). get_all zwraca
    wszystkie kategorie z dodatkami, delete(kategoria) usuwa wszystkie
    dodatki kategorii.
    """

    PATH = ENDPOINTS["ACCOMPANIMENTS"]
    MODEL = CategoryWithAccompaniments
    ENTITY_NAME = "Accompaniment"
    ALL_PATH = ""

    def validate(self, dto: CategoryAccompaniment, require_code: bool = True) -> ValidationResult:
        validator = Validator()
        if require_code:
            validator.required("accompanimentItemCode", dto.accompaniment_item_code)
        validator.in_range("discount", dto.discount, 0, 100)
        validator.in_range("enlargementDiscount", dto.enlargement_discount, 0, 100)
        if dto.enlargement_discount and not dto.enlargement_item_code:
            validator.error("enlargementItemCode is required when enlargementDiscount is set")
        return validator.result()

    def _item(self, dto: Union[CategoryAccompaniment, Dict[str, Any]], require_code: bool = True) -> CategoryAccompaniment:
        item = dto if isinstance(dto, CategoryAccompaniment) else CategoryAccompaniment.from_wire(dto)
        self.validate(item, require_code=require_code).raise_if_invalid(self.ENTITY_NAME)
        return item

    @staticmethod
    def _items(payload: Any) -> List[CategoryAccompaniment]:
        return [CategoryAccompaniment.from_wire(item) for item in unwrap_list(payload)]

    def get_paged(self, params: Any = None) -> PagedResponse[CategoryWithAccompaniments]:
        raise UnsupportedOperationError(self.ENTITY_NAME, "get_paged", "categories()")

    def search(
        self,
        term: str,
        page_number: int = 1,
        page_size: int = 10,
    ) -> PagedResponse[CategoryWithAccompaniments]:
        raise UnsupportedOperationError(self.ENTITY_NAME, "search", "by_category(category_code)")

    def categories(self) -> List[CategoryWithAccompaniments]:
        return self.get_all()

    def by_category(self, category_code: str) -> Optional[CategoryWithAccompaniments]:
        return self.get_by_code(category_code)

    def get(self, category_code: str, line_number: int) -> Optional[CategoryAccompaniment]:
        payload = self.client.get(self._path(category_code, line_number))
        return CategoryAccompaniment.from_wire(payload) if payload is not None else None

    def add_many(
        self,
        category_code: str,
        items: Iterable[Union[CategoryAccompaniment, Dict[str, Any]]],
    ) -> List[CategoryAccompaniment]:
        body = [self._item(item).to_wire() for item in items]
        created = self.client.post(self._path(category_code), body)
        logger.info(f"[Accompaniment] Added {len(body)} to {category_code}")
        return self._items(created)

    def create(
        self,
        category_code: str,
        dto: Union[CategoryAccompaniment, Dict[str, Any]],
    ) -> Optional[CategoryAccompaniment]:
        item = self._item(dto)
        created = self.client.post(self._path(category_code, "single"), item.to_wire())
        logger.info(f"[Accompaniment] Added {item.accompaniment_item_code} to {category_code}")
        return CategoryAccompaniment.from_wire(created) if isinstance(created, dict) else item

    add = create

    def update_many(
        self,
        category_code: str,
        updates: Iterable[Tuple[int, Union[CategoryAccompaniment, Dict[str, Any]]]],
    ) -> None:
        """
        Aktualizacja wsadowa.

        Args:
            updates: Pary (lineNumber, dane do zmiany)
        """
        body = [
            {
                "lineNumber": line_number,
                "updateData": self._item(dto, require_code=False).to_wire(),
            }
            for line_number, dto in updates
        ]
        self.client.put(self._path(category_code), body)
        logger.info(f"[Accompaniment] Updated {len(body)} in {category_code}")

    def update(
        self,
        category_code: str,
        line_number: int,
        dto: Union[CategoryAccompaniment, Dict[str, Any]],
    ) -> None:
        item = self._item(dto, require_code=False)
        self.client.put(self._path(category_code, line_number), item.to_wire())
        logger.info(f"[Accompaniment] Updated: {category_code}/{line_number}")

    def remove(self, category_code: str, line_number: int) -> None:
        self.client.delete(self._path(category_code, line_number))
        logger.info(f"[Accompaniment] Removed: {category_code}/{line_number}")

    def remove_all(self, category_code: str) -> None:
        self.delete(category_code)

    def available_products(self) -> List[AvailableProduct]:
        payload = self.client.get(self._path("available-products"))
        return [AvailableProduct.from_wire(item) for item in unwrap_list(payload)]


# ============================================================
# Combo
# ============================================================

class ComboApiService(BaseApiService[Combo]):
    """
    Combo: jednolity CRUD pod api/Combos oraz trasy opcji combo
    pod api/Products/{code}/combo-options.
    """

    PATH = ENDPOINTS["COMBOS"]
    MODEL = Combo
    ENTITY_NAME = "Combo"

    def validate(self, dto: Combo) -> ValidationResult:
        validator = (Validator()
            .required("itemCode", dto.item_code)
            .required("itemName", dto.item_name)
            .required("price", dto.price)
            .positive("price", dto.price))
        if not dto.is_combo:
            validator.error("isCombo must be Y")
        return validator.result()

    def validate_option(self, option: ComboOption) -> ValidationResult:
        return (Validator()
            .required("groupItemCode", option.group_item_code)
            .required("optionItemCode", option.option_item_code)
            .required("priceDelta", option.price_delta)
            .required("upgradeLevel", option.upgrade_level)
            .non_negative("upgradeLevel", option.upgrade_level)
            .result())

    @staticmethod
    def _product_path(*parts: Any) -> str:
        segments = [ENDPOINTS["PRODUCTS"]]
        segments.extend(quote(str(part), safe="") for part in parts)
        return "/".join(segments)

    def _option(self, dto: Union[ComboOption, Dict[str, Any]]) -> ComboOption:
        option = dto if isinstance(dto, ComboOption) else ComboOption.from_wire(dto)
        self.validate_option(option).raise_if_invalid("ComboOption")
        return option

    def combo_products(self) -> List[Combo]:
        return self._to_models(self.client.get(ENDPOINTS["PRODUCT_COMBOS"]))

    def options(self, product_code: str) -> List[ComboOption]:
        payload = self.client.get(self._product_path(product_code, "combo-options"))
        if isinstance(payload, dict) and "comboOptions" in payload:
            payload = payload["comboOptions"]
        return [ComboOption.from_wire(item) for item in unwrap_list(payload)]

    def add_option(self, product_code: str, dto: Union[ComboOption, Dict[str, Any]]) -> Optional[ComboOption]:
        option = self._option(dto)
        created = self.client.post(self._product_path(product_code, "combo-options"), option.to_wire())
        logger.info(
            f"[Combo] Option added: {product_code} "
            f"{option.group_item_code}/{option.option_item_code}"
        )
        return ComboOption.from_wire(created) if isinstance(created, dict) else option

    def update_option(
        self,
        product_code: str,
        group_code: str,
        option_code: str,
        dto: Union[ComboOption, Dict[str, Any]],
    ) -> Optional[ComboOption]:
        option = self._option(dto)
        updated = self.client.put(
            self._product_path(product_code, "combo-options", group_code, option_code),
            option.to_wire(),
        )
        logger.info(f"[Combo] Option updated: {product_code} {group_code}/{option_code}")
        return ComboOption.from_wire(updated) if isinstance(updated, dict) else None

    def remove_option(self, product_code: str, group_code: str, option_code: str) -> None:
        self.client.delete(
            self._product_path(product_code, "combo-options", group_code, option_code)
        )
        logger.info(f"[Combo] Option removed: {product_code} {group_code}/{option_code}")

    def create_combo_product(self, dto: Union[Combo, Dict[str, Any]]) -> Optional[Combo]:
        """Utwórz produkt combo (POST api/Products z isCombo = Y)."""
        combo = self._coerce(dto).model_copy(update={"is_combo": True})
        self.validate(combo).raise_if_invalid(self.ENTITY_NAME)
        created = self.client.post(ENDPOINTS["PRODUCTS"], combo.to_wire())
        logger.info(f"[Combo] Combo product created: {combo.item_code}")
        return self._to_model(created) if isinstance(created, dict) else combo


# ============================================================
# Warianty
# ============================================================

class VariantApiService(BaseApiService[Variant]):
    """
    Warianty produktu. Zasób zagnieżdżony: każda operacja wymaga
    kodu produktu nadrzędnego.
    """

    PATH = ENDPOINTS["VARIANTS"]
    MODEL = Variant
    ENTITY_NAME = "Variant"

    def validate(self, dto: Variant) -> ValidationResult:
        return (Validator()
            .required("variantName", dto.variant_name)
            .max_length("variantName", dto.variant_name, 150)
            .required("brandName", dto.brand_name)
            .max_length("brandName", dto.brand_name, 100)
            .required("priceAdjustment", dto.price_adjustment)
            .result())

    def _variants_path(self, product_code: str, *parts: Any) -> str:
        segments = [self.PATH.format(code=quote(str(product_code), safe=""))]
        segments.extend(quote(str(part), safe="") for part in parts)
        return "/".join(segments)

    def list(self, product_code: str) -> List[Variant]:
        return self._to_models(self.client.get(self._variants_path(product_code)))

    def get_all(self, product_code: str) -> List[Variant]:
        return self.list(product_code)

    def get_paged(self, params: Any = None) -> PagedResponse[Variant]:
        raise UnsupportedOperationError(self.ENTITY_NAME, "get_paged", "list(product_code)")

    def get_by_code(self, code: str) -> Optional[Variant]:
        raise UnsupportedOperationError(self.ENTITY_NAME, "get_by_code", "list(product_code)")

    def search(self, term: str, page_number: int = 1, page_size: int = 10) -> PagedResponse[Variant]:
        raise UnsupportedOperationError(self.ENTITY_NAME, "search", "list(product_code)")

    def create(self, product_code: str, dto: Union[Variant, Dict[str, Any]]) -> Optional[Variant]:
        variant = self._validated(dto)
        created = self.client.post(self._variants_path(product_code), variant.to_wire())
        logger.info(f"[Variant] Created for {product_code}: {variant.variant_name}")
        return self._to_model(created) if isinstance(created, dict) else variant

    def create_bulk(
        self,
        product_code: str,
        dtos: Iterable[Union[Variant, Dict[str, Any]]],
    ) -> VariantBulkResult:
        """
        Utwórz wiele wariantów jednym requestem.

        Returns:
            VariantBulkResult (created + errors per indeks)
        """
        variants = [self._validated(dto).to_wire() for dto in dtos]
        payload = self.client.post(self._variants_path(product_code, "bulk"), {"variants": variants})
        result = VariantBulkResult.from_wire(payload or {})
        logger.info(
            f"[Variant] Bulk for {product_code}: "
            f"{len(result.created)} created, {len(result.errors)} errors"
        )
        return result

    def update(
        self,
        product_code: str,
        variant_id: int,
        dto: Union[Variant, Dict[str, Any]],
    ) -> Optional[Variant]:
        variant = self._validated(dto)
        updated = self.client.put(self._variants_path(product_code, variant_id), variant.to_wire())
        logger.info(f"[Variant] Updated: {product_code}/{variant_id}")
        return self._to_model(updated) if isinstance(updated, dict) else None

    def delete(self, product_code: str, variant_id: int) -> None:
        self.client.delete(self._variants_path(product_code, variant_id))
        logger.info(f"[Variant] Deleted: {product_code}/{variant_id}")
