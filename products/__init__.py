"""
POS Admin - Products Module
===========================
Katalog: produkty, rozmiary, grupy, kategorie, drzewa składników,
dodatki kategorii, combo i warianty.

Usage:
    from products import ProductRepository

    repo = ProductRepository()
    for row in repo.with_names(repo.get_all()):
        print(row.product.item_name, row.group_name, repo.status_label(row.product))
"""

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
from products.repository import (
    AccompanimentRepository,
    ComboRepository,
    ProductCategoryRepository,
    ProductGroupRepository,
    ProductRepository,
    ProductRow,
    ProductTreeRepository,
    VariantRepository,
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

__all__ = [
    # Models
    'AvailableProduct',
    'CategoryAccompaniment',
    'CategoryWithAccompaniments',
    'Combo',
    'ComboOption',
    'Product',
    'ProductCategory',
    'ProductGroup',
    'ProductTree',
    'ProductTreeItem',
    'ProductType',
    'Size',
    'Variant',
    'VariantBulkResult',
    # Services
    'AccompanimentApiService',
    'ComboApiService',
    'ProductApiService',
    'ProductCategoryApiService',
    'ProductGroupApiService',
    'ProductTreeApiService',
    'SizeApiService',
    'VariantApiService',
    # Repositories
    'AccompanimentRepository',
    'ComboRepository',
    'ProductCategoryRepository',
    'ProductGroupRepository',
    'ProductRepository',
    'ProductRow',
    'ProductTreeRepository',
    'VariantRepository',
]
