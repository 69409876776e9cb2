"""
Test Products
=============
Produkty, grupy, kategorie, drzewa, dodatki, combo, warianty.
"""

import pytest

from conftest import FakeHttp, FakeResponse, make_client
from core.exceptions import EntityValidationError
from products.models import (
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
    Variant,
)
from products.repository import (
    NO_BRAND_LABEL,
    NO_GROUP_KEY,
    AccompanimentRepository,
    ComboRepository,
    ProductCategoryRepository,
    ProductGroupRepository,
    ProductRepository,
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
    VariantApiService,
)


def product_repo(http) -> ProductRepository:
    return ProductRepository(ProductApiService(make_client(http)))


# ============================================================
# Produkty
# ============================================================

def test_product_wire_aliases():
    product = Product.from_wire({
        "itemCode": "P1", "u_ProductType": "V", "u_HasVariants": "Y",
        "u_IsVariant": "N", "sellItem": "Y", "available": "N",
    })

    assert product.product_type is ProductType.VARIABLE
    assert product.has_variants is True
    assert product.available is False

    wire = product.to_wire()
    assert wire["u_ProductType"] == "V"
    assert wire["u_HasVariants"] == "Y"
    assert wire["available"] == "N"


def test_product_validation_collects_all_errors():
    service = ProductApiService(make_client(FakeHttp()))
    result = service.validate(Product(item_code="", item_name="X", price=-1, discount=120, rating=6))

    assert not result.is_valid
    assert "itemCode is required" in result.errors
    assert "price cannot be negative" in result.errors
    assert len(result.errors) == 4


def test_by_category_route():
    http = FakeHttp([FakeResponse(200, [{"itemCode": "P1"}])])
    products = product_repo(http).by_category("PIZZA")

    assert products[0].item_code == "P1"
    assert http.last["url"] == "https://pos.test/api/Products/Categories/PIZZA"


def test_available_uses_paged_filter():
    http = FakeHttp([FakeResponse(200, {"totalCount": 1, "data": [{"itemCode": "P1"}]})])

    products = product_repo(http).available()

    assert [p.item_code for p in products] == ["P1"]
    assert ("available", "Y") in http.last["params"]


def test_filters_return_empty_list_on_failure():
    repo = product_repo(FakeHttp([FakeResponse(500)]))
    assert repo.by_group("G1") == []
    assert repo.sellable() == []
    assert repo.sizes() == []


def test_sizes_use_root_route():
    http = FakeHttp([FakeResponse(200, [{"sizeCode": "L", "sizeName": "Duża"}])])
    repo = product_repo(http)

    sizes = repo.sizes()

    assert http.last["url"] == "https://pos.test/api/Products/sizes"
    assert ProductRepository.size_name(sizes, "L") == "Duża"
    assert ProductRepository.size_name(sizes, "XL") == "XL"


def test_price_helpers():
    product = Product(price=50, discount=20)

    assert ProductRepository.discounted_price(product) == 40
    assert ProductRepository.savings(product) == 10
    assert ProductRepository.has_discount(product)
    assert not ProductRepository.has_discount(Product(price=10))


@pytest.mark.parametrize("flags, status, label", [
    ((True, True, True), "active", "Aktywny"),
    ((True, False, True), "partial", "Częściowo"),
    ((False, False, False), "inactive", "Nieaktywny"),
])
def test_overall_status(flags, status, label):
    sell_item, available, enabled = flags
    product = Product(sell_item=sell_item, available=available, enabled=enabled)

    assert ProductRepository.overall_status(product) == status
    assert ProductRepository.status_label(product) == label


def test_product_stats():
    products = [
        Product(price=10, discount=10),
        Product(price=30, enabled=False, is_combo=True),
    ]
    stats = ProductRepository.stats(products)

    assert stats["total"] == 2
    assert stats["active"] == 1
    assert stats["partial"] == 1
    assert stats["withDiscount"] == 1
    assert stats["combos"] == 1
    assert stats["averagePrice"] == 20


def test_with_names_resolves_group_and_category():
    def handler(method, url, kwargs):
        if url.endswith("api/ProductGroups/all"):
            return FakeResponse(200, [{"productGroupCode": "G1", "productGroupName": "Napoje"}])
        if url.endswith("api/ProductCategories/all"):
            return FakeResponse(500)
        return FakeResponse(404)

    repo = product_repo(FakeHttp(handler=handler))
    rows = repo.with_names([Product(item_code="P1", group_item_code="G1", category_item_code="C9")])

    assert rows[0].group_name == "Napoje"
    assert rows[0].category_name == "C9"


def test_products_csv_uses_yes_no_labels():
    repo = product_repo(FakeHttp())
    csv_text = repo.products_to_csv([Product(item_code="P1", item_name="Cola", available=False)])

    header, row = csv_text.splitlines()
    assert header.startswith('"Kod","EAN","Nazwa"')
    assert '"Tak","Nie","Tak"' in row


# ============================================================
# Grupy i kategorie
# ============================================================

def test_group_wire_aliases():
    group = ProductGroup(product_group_code="G1", product_group_code_erp="E1", vis_order=1)
    wire = group.to_wire()
    assert wire["productGroupCodeERP"] == "E1"
    assert wire["dataSource"] == "M"


def test_group_validation_requires_vis_order():
    service = ProductGroupApiService(make_client(FakeHttp()))
    result = service.validate(ProductGroup(product_group_code="G1", product_group_name="Napoje"))
    assert "visOrder is required" in result.errors


def test_group_helpers():
    groups = [
        ProductGroup(product_group_code="G1", product_group_name="A", vis_order=3, enabled=True),
        ProductGroup(product_group_code="G2", product_group_name="B", vis_order=1, enabled=False),
    ]

    assert ProductGroupRepository.next_vis_order(groups) == 4
    assert ProductGroupRepository.next_vis_order([]) == 1
    assert [g.product_group_code for g in ProductGroupRepository.sort_by_vis_order(groups)] == ["G2", "G1"]

    stats = ProductGroupRepository.stats(groups)
    assert stats["enabledPercentage"] == 50
    assert stats["averageVisOrder"] == 2


def test_categories_grouped_by_product_group():
    categories = [
        ProductCategory(category_item_code="C1", group_item_code="G1", vis_order=2),
        ProductCategory(category_item_code="C2"),
        ProductCategory(category_item_code="C3", group_item_code="G1", vis_order=5),
    ]

    grouped = ProductCategoryRepository.group_by_product_group(categories)

    assert list(grouped) == ["G1", NO_GROUP_KEY]
    assert ProductCategoryRepository.next_vis_order_for_group(categories, "G1") == 6
    assert ProductCategoryRepository.next_vis_order_for_group(categories, "G9") == 1


def test_category_by_group_route():
    http = FakeHttp([FakeResponse(200, [])])
    repo = ProductCategoryRepository(ProductCategoryApiService(make_client(http)))

    assert repo.by_group("G1") == []
    assert http.last["url"] == "https://pos.test/api/ProductCategories/Groups/G1"


# ============================================================
# Drzewa składników
# ============================================================

def test_tree_all_uses_root_route():
    http = FakeHttp([FakeResponse(200, [{"itemCode": "T1", "items1": [{"itemCode": "I1", "quantity": 2}]}])])
    repo = ProductTreeRepository(ProductTreeApiService(make_client(http)))

    trees = repo.get_all()

    assert http.last["url"] == "https://pos.test/api/producttrees"
    assert ProductTreeRepository.total_components_quantity(trees[0]) == 2


def test_tree_stats():
    trees = [
        ProductTree(item_code="T1", data_source="Internal",
                    items1=[ProductTreeItem(quantity=1), ProductTreeItem(quantity=2)]),
        ProductTree(item_code="T2", data_source="External", enabled=False),
    ]
    stats = ProductTreeRepository.stats(trees)

    assert stats["totalComponents"] == 2
    assert stats["averageComponentsPerTree"] == 1
    assert stats["byDataSource"] == {"Internal": 1, "External": 1}
    assert not ProductTreeRepository.has_components(trees[1])


# ============================================================
# Dodatki
# ============================================================

def accompaniment_repo(http) -> AccompanimentRepository:
    return AccompanimentRepository(AccompanimentApiService(make_client(http)))


def test_accompaniment_add_single_route():
    http = FakeHttp([FakeResponse(200, {"lineNumber": 3, "accompanimentItemCode": "FRY"})])

    created = accompaniment_repo(http).add("BURGER", {"accompanimentItemCode": "FRY", "discount": 10})

    assert created.line_number == 3
    assert http.last["url"] == "https://pos.test/api/accompaniments/BURGER/single"
    assert http.last["json"] == {"accompanimentItemCode": "FRY", "discount": 10.0}


def test_accompaniment_enlargement_discount_requires_code():
    http = FakeHttp()
    service = AccompanimentApiService(make_client(http))

    with pytest.raises(EntityValidationError):
        service.create("BURGER", CategoryAccompaniment(accompaniment_item_code="FRY",
                                                       enlargement_discount=20))
    assert http.calls == []


def test_accompaniment_update_many_body():
    http = FakeHttp([FakeResponse(204)])

    ok = accompaniment_repo(http).update_many("BURGER", [(1, {"discount": 15})])

    assert ok is True
    assert http.last["method"] == "PUT"
    assert http.last["json"] == [{"lineNumber": 1, "updateData": {"discount": 15.0}}]


def test_accompaniment_remove_all_deletes_category():
    http = FakeHttp([FakeResponse(204)])
    assert accompaniment_repo(http).remove_all("BURGER") is True
    assert http.last["method"] == "DELETE"
    assert http.last["url"] == "https://pos.test/api/accompaniments/BURGER"


@pytest.mark.parametrize("discount, severity", [(None, "secondary"), (60, "success"), (30, "warning"), (5, "info")])
def test_discount_severity(discount, severity):
    assert AccompanimentRepository.discount_severity(discount) == severity


def test_accompaniment_stats_and_price():
    category = CategoryWithAccompaniments(
        category_item_code="BURGER",
        category_item_name="Burgery",
        available_accompaniments=[
            CategoryAccompaniment(accompaniment_price=10, discount=50, enlargement_item_code="FRY_L"),
            CategoryAccompaniment(accompaniment_price=6),
        ],
    )

    stats = AccompanimentRepository.stats([category])

    assert AccompanimentRepository.discounted_price(category.available_accompaniments[0]) == 5
    assert stats["totalAccompaniments"] == 2
    assert stats["withDiscount"] == 1
    assert stats["withEnlargement"] == 1
    assert stats["averagePrice"] == 8


# ============================================================
# Combo
# ============================================================

def combo_repo(http) -> ComboRepository:
    return ComboRepository(ComboApiService(make_client(http)))


def test_combo_options_unwrap_key():
    http = FakeHttp([FakeResponse(200, {"comboOptions": [
        {"groupItemCode": "DRINK", "optionItemCode": "COLA", "priceDelta": 0, "isDefault": "Y"},
        {"groupItemCode": "SIDE", "optionItemCode": "FRY", "priceDelta": 2.5},
    ]})])

    options = combo_repo(http).options("MENU1")

    assert http.last["url"] == "https://pos.test/api/Products/MENU1/combo-options"
    assert ComboRepository.option_groups(options) == ["DRINK", "SIDE"]
    assert [o.option_item_code for o in ComboRepository.default_options(options)] == ["COLA"]
    assert ComboRepository.calculate_combo_price(20, options) == 22.5


def test_combo_create_product_forces_flag():
    http = FakeHttp([FakeResponse(201, {"itemCode": "MENU1", "isCombo": "Y"})])

    combo = combo_repo(http).create_combo_product({"itemCode": "MENU1", "itemName": "Zestaw",
                                                   "price": 25, "isCombo": "N"})

    assert combo.is_combo is True
    assert http.last["url"] == "https://pos.test/api/Products"
    assert http.last["json"]["isCombo"] == "Y"


def test_combo_price_must_be_positive():
    service = ComboApiService(make_client(FakeHttp()))
    result = service.validate(Combo(item_code="M", item_name="Z", price=0))
    assert "price must be greater than 0" in result.errors


def test_add_options_bulk_counts_failures():
    http = FakeHttp([FakeResponse(200, {})])
    options = [
        ComboOption(group_item_code="DRINK", option_item_code="COLA", price_delta=0, upgrade_level=0),
        ComboOption(group_item_code="DRINK", option_item_code="", price_delta=0, upgrade_level=0),
    ]
    callbacks = []

    result = combo_repo(http).add_options("MENU1", options, on_complete=callbacks.append)

    assert result.success == 1
    assert result.failed == 1
    assert len(http.calls) == 1
    assert callbacks == [result]


# ============================================================
# Warianty
# ============================================================

def variant_repo(http) -> VariantRepository:
    return VariantRepository(VariantApiService(make_client(http)))


def test_variant_routes():
    http = FakeHttp([FakeResponse(200, [{"variantID": 7, "variantName": "Czerwona", "brandName": "X"}])])
    repo = variant_repo(http)

    variants = repo.list("T SHIRT")

    assert variants[0].variant_id == 7
    assert http.last["url"] == "https://pos.test/api/Products/T%20SHIRT/Variants"

    http.responses = [FakeResponse(204)]
    assert repo.delete("TSHIRT", 7) is True
    assert http.last["url"] == "https://pos.test/api/Products/TSHIRT/Variants/7"


def test_variant_bulk_result():
    http = FakeHttp([FakeResponse(200, {
        "created": [{"variantID": 1, "variantName": "A", "brandName": "B"}],
        "errors": [{"index": 1, "error": "duplicate"}],
    })])
    variants = [
        Variant(variant_name="A", brand_name="B", price_adjustment=0),
        Variant(variant_name="A", brand_name="B", price_adjustment=0),
    ]

    result = variant_repo(http).create_bulk("TSHIRT", variants)

    assert http.last["url"] == "https://pos.test/api/Products/TSHIRT/Variants/bulk"
    assert len(http.last["json"]["variants"]) == 2
    assert result.errors[0].index == 1


def test_variant_requires_brand():
    service = VariantApiService(make_client(FakeHttp()))
    with pytest.raises(EntityValidationError):
        service.create("TSHIRT", Variant(variant_name="A", price_adjustment=0))


def test_variant_helpers():
    variants = [
        Variant(variant_name="A", brand_name="Nike", price_adjustment=5),
        Variant(variant_name="B", price_adjustment=-2, available=False),
    ]

    grouped = VariantRepository.group_by_brand(variants)
    stats = VariantRepository.stats(variants)

    assert list(grouped) == ["Nike", NO_BRAND_LABEL]
    assert stats["available"] == 1
    assert stats["maxPriceAdjustment"] == 5
    assert VariantRepository.price_adjustment_severity(5) == "danger"
    assert VariantRepository.price_adjustment_severity(-2) == "success"
    assert VariantRepository.price_adjustment_severity(0) == "secondary"
    assert VariantRepository.final_price(100, -2) == 98


# ============================================================
# Zasoby zagnieżdżone: wejścia generyczne repozytorium
# ============================================================

def test_accompaniment_result_variants_use_category_routes():
    http = FakeHttp([FakeResponse(200, {"lineNumber": 1, "accompanimentItemCode": "FRY"})])
    repo = accompaniment_repo(http)

    created = repo.create_result("BURGER", CategoryAccompaniment(accompaniment_item_code="FRY"))

    assert created.ok
    assert created.value.line_number == 1
    assert http.last["url"] == "https://pos.test/api/accompaniments/BURGER/single"

    http.responses = [FakeResponse(204)]
    updated = repo.update_result("BURGER", 1, CategoryAccompaniment(discount=10))

    assert updated.ok
    assert http.last["method"] == "PUT"
    assert http.last["url"] == "https://pos.test/api/accompaniments/BURGER/1"


def test_accompaniment_paging_and_search_are_absorbed():
    http = FakeHttp()
    repo = accompaniment_repo(http)

    assert repo.get_paged() is None
    assert repo.search("FRY") is None
    assert repo.get_paged_result().error.code == "UNSUPPORTED_OPERATION"
    assert http.calls == []


def test_accompaniment_set_enabled_many_fails_per_item_without_requests():
    http = FakeHttp()

    result = accompaniment_repo(http).set_enabled_many(["BURGER", "PIZZA"], True)

    assert result.failed == 2
    assert "set_enabled_many" in result.errors[0].error
    assert http.calls == []


def test_variant_get_all_is_scoped_to_product():
    http = FakeHttp([FakeResponse(200, [{"variantID": 1, "variantName": "A", "brandName": "B"}])])

    variants = variant_repo(http).get_all("TSHIRT")

    assert [v.variant_id for v in variants] == [1]
    assert http.last["url"] == "https://pos.test/api/Products/TSHIRT/Variants"


def test_variant_result_variants_use_product_routes():
    http = FakeHttp([FakeResponse(201, {"variantID": 9, "variantName": "A", "brandName": "B"})])
    repo = variant_repo(http)
    variant = Variant(variant_name="A", brand_name="B", price_adjustment=0)

    created = repo.create_result("TSHIRT", variant)
    assert created.ok
    assert created.value.variant_id == 9
    assert http.last["url"] == "https://pos.test/api/Products/TSHIRT/Variants"

    http.responses = [FakeResponse(204)]
    assert repo.update_result("TSHIRT", 9, variant).ok
    assert http.last["url"] == "https://pos.test/api/Products/TSHIRT/Variants/9"

    assert repo.delete_result("TSHIRT", 9).ok
    assert http.last["method"] == "DELETE"


def test_variant_generic_lookups_are_absorbed_without_requests():
    http = FakeHttp()
    repo = variant_repo(http)

    assert repo.get_paged() is None
    assert repo.get_by_code("TSHIRT") is None
    assert repo.search("red") is None
    assert http.calls == []


def test_variant_delete_many_is_scoped_to_product():
    def handler(method, url, kwargs):
        return FakeResponse(500) if url.endswith("/3") else FakeResponse(204)

    http = FakeHttp(handler=handler)

    result = variant_repo(http).delete_many("TSHIRT", [1, 2, 3])

    assert result.success == 2
    assert result.failed == 1
    assert all("/api/Products/TSHIRT/Variants/" in call["url"] for call in http.calls)


def test_variant_set_enabled_many_fails_per_item_without_requests():
    http = FakeHttp()

    result = variant_repo(http).set_enabled_many([1, 2], False)

    assert result.failed == 2
    assert http.calls == []
