"""
Products Models
===============
DTO katalogu: produkty, rozmiary, grupy, kategorie, drzewa składników,
dodatki kategorii, opcje combo, warianty.
"""

from enum import Enum
from typing import Any, List, Optional

from pydantic import Field

from core.wire import WireModel, YesNo


class ProductType(str, Enum):
    """u_ProductType"""
    SIMPLE = "S"
    VARIABLE = "V"
    COMBO = "C"


# ============================================================
# Produkty
# ============================================================

class ProductParent(WireModel):
    """Produkt nadrzędny wariantu"""
    item_code: Optional[str] = None
    item_name: Optional[str] = None
    price: Optional[float] = None
    image_url: Optional[str] = None


class ProductVariantSummary(WireModel):
    """Wariant w liście wariantów produktu"""
    item_code: Optional[str] = None
    item_name: Optional[str] = None
    price: Optional[float] = None
    size_code: Optional[str] = None
    size_name: Optional[str] = None
    image_url: Optional[str] = None
    available: YesNo = True


class ProductMaterial(WireModel):
    """Składnik produktu"""
    item_code: Optional[str] = None
    item_name: Optional[str] = None
    quantity: Optional[float] = None
    image_url: Optional[str] = None
    is_customizable: YesNo = False
    product_item_code: Optional[str] = None


class ProductAccompaniment(WireModel):
    """Dodatek produktu"""
    item_code: Optional[str] = None
    item_name: Optional[str] = None
    price_old: Optional[float] = None
    price: Optional[float] = None
    image_url: Optional[str] = None
    product_item_code: Optional[str] = None


class Product(WireModel):
    """Produkt (klucz: itemCode)"""
    item_code: Optional[str] = None
    ean_code: Optional[str] = None
    item_name: Optional[str] = None
    frgn_name: Optional[str] = None
    price: Optional[float] = None
    discount: Optional[float] = None
    image_url: Optional[str] = None
    description: Optional[str] = None
    frgn_description: Optional[str] = None
    sell_item: YesNo = True
    available: YesNo = True
    enabled: YesNo = True
    is_combo: YesNo = False
    group_item_code: Optional[str] = None
    category_item_code: Optional[str] = None
    waiting_time: Optional[str] = None
    rating: Optional[float] = None
    size_code: Optional[str] = None
    product_type: Optional[ProductType] = Field(default=None, alias="u_ProductType")
    has_variants: YesNo = Field(default=False, alias="u_HasVariants")
    is_variant: YesNo = Field(default=False, alias="u_IsVariant")
    parent_item: Optional[str] = Field(default=None, alias="u_ParentItem")
    size_name: Optional[str] = None
    parent_product: Optional[ProductParent] = None
    variants: Optional[List[ProductVariantSummary]] = None
    material: Optional[List[ProductMaterial]] = None
    accompaniment: Optional[List[ProductAccompaniment]] = None
    options: Optional[List[Any]] = None


class Size(WireModel):
    """Rozmiar (OSZC)"""
    size_code: Optional[str] = None
    size_name: Optional[str] = None


# ============================================================
# Grupy i kategorie
# ============================================================

class ProductGroup(WireModel):
    """Grupa produktów (klucz: productGroupCode)"""
    product_group_code: Optional[str] = None
    product_group_name: Optional[str] = None
    frgn_name: Optional[str] = None
    image_url: Optional[str] = None
    description: Optional[str] = None
    frgn_description: Optional[str] = None
    enabled: YesNo = True
    vis_order: Optional[int] = None
    data_source: Optional[str] = "M"
    product_group_code_erp: Optional[str] = Field(default=None, alias="productGroupCodeERP")
    product_group_code_pos: Optional[str] = Field(default=None, alias="productGroupCodePOS")


class ProductCategory(WireModel):
    """Kategoria produktów (klucz: categoryItemCode)"""
    category_item_code: Optional[str] = None
    category_item_name: Optional[str] = None
    frgn_name: Optional[str] = None
    image_url: Optional[str] = None
    description: Optional[str] = None
    frgn_description: Optional[str] = None
    vis_order: Optional[int] = None
    enabled: YesNo = True
    data_source: Optional[str] = "M"
    group_item_code: Optional[str] = None


# ============================================================
# Drzewa składników (receptury)
# ============================================================

class ProductTreeItem(WireModel):
    """Składnik drzewa"""
    item_code: Optional[str] = None
    line_number: Optional[int] = None
    item_name: Optional[str] = None
    component_name: Optional[str] = None
    quantity: Optional[float] = None
    image_url: Optional[str] = None
    combo_item_code: Optional[str] = None
    is_customizable: YesNo = False
    product_tree_item_code: Optional[str] = None
    group_code: Optional[str] = None
    display_order: Optional[int] = None
    is_default: YesNo = False
    price_delta: Optional[float] = None
    upgrade_level: Optional[int] = None


class ProductTree(WireModel):
    """Drzewo składników (klucz: itemCode)"""
    item_code: Optional[str] = None
    item_name: Optional[str] = None
    quantity: Optional[float] = None
    combo_description: Optional[str] = None
    display_order: Optional[int] = None
    enabled: YesNo = True
    data_source: Optional[str] = None
    items1: List[ProductTreeItem] = []


# ============================================================
# Dodatki kategorii
# ============================================================

class CategoryAccompaniment(WireModel):
    """Dodatek przypisany do kategorii (klucz: kategoria + lineNumber)"""
    line_number: Optional[int] = None
    accompaniment_item_code: Optional[str] = None
    accompaniment_item_name: Optional[str] = None
    accompaniment_image_url: Optional[str] = None
    accompaniment_price: Optional[float] = None
    discount: Optional[float] = None
    enlargement_item_code: Optional[str] = None
    enlargement_discount: Optional[float] = None


class CategoryWithAccompaniments(WireModel):
    """Kategoria z listą dostępnych dodatków"""
    category_item_code: Optional[str] = None
    category_item_name: Optional[str] = None
    image_url: Optional[str] = None
    description: Optional[str] = None
    available_accompaniments: List[CategoryAccompaniment] = []


class AvailableProduct(WireModel):
    """Produkt, który może być dodatkiem"""
    item_code: Optional[str] = None
    item_name: Optional[str] = None
    price: Optional[float] = None
    image_url: Optional[str] = None


# ============================================================
# Combo
# ============================================================

class ComboOption(WireModel):
    """Opcja combo (klucz: itemCode + groupItemCode + optionItemCode)"""
    item_code: Optional[str] = None
    group_item_code: Optional[str] = None
    option_item_code: Optional[str] = None
    option_item_name: Optional[str] = None
    option_price: Optional[float] = None
    price_delta: Optional[float] = None
    final_price: Optional[float] = None
    is_default: YesNo = False
    upgrade_level: Optional[int] = None
    upgrade_label: Optional[str] = None
    image_url: Optional[str] = None
    description: Optional[str] = None


class Combo(Product):
    """Produkt combo z opcjami"""
    is_combo: YesNo = True
    combo_options: List[ComboOption] = []


# ============================================================
# Warianty
# ============================================================

class Variant(WireModel):
    """Wariant produktu (klucz: variantID)"""
    variant_id: Optional[int] = Field(default=None, alias="variantID")
    item_code: Optional[str] = None
    variant_name: Optional[str] = None
    brand_name: Optional[str] = None
    size_code: Optional[str] = None
    color_code: Optional[str] = None
    price_adjustment: Optional[float] = None
    available: YesNo = True
    size_name: Optional[str] = None
    color_name: Optional[str] = None
    base_price: Optional[float] = None
    final_price: Optional[float] = None


class VariantBulkError(WireModel):
    index: int
    variant: Optional[Variant] = None
    error: Optional[str] = None


class VariantBulkResult(WireModel):
    """Odpowiedź POST .../Variants/bulk"""
    created: List[Variant] = []
    errors: List[VariantBulkError] = []
