"""
Tests for the product listing query and its count.

The page query and the count share one filter builder; these tests pin the
aggregate stock semantics and check that counts always match the pages.
"""

from inventory_dashboard.services.inventory_query_service import (
    build_pagination_meta,
    count_filtered_products,
    fetch_products_with_stock,
    list_products,
    resolve_sort_field,
)
from inventory_dashboard.validation import FilterDescriptor, PaginationDescriptor, SortDescriptor


def _names(rows):
    return [row["name"] for row in rows]


def _all_pages(filters, sort, limit):
    out = []
    page = 1
    while True:
        rows = fetch_products_with_stock(filters, sort, PaginationDescriptor(page=page, limit=limit))
        if not rows:
            return out
        out.extend(rows)
        page += 1


class TestStockAggregation:
    """total_stock and status come from the sum over warehouses."""

    def test_aggregates_across_warehouses(self, stocked_catalog):
        rows = fetch_products_with_stock(FilterDescriptor(), SortDescriptor())
        by_name = {row["name"]: row for row in rows}

        assert by_name["Alpha Cable"]["total_stock"] == 0
        assert by_name["Alpha Cable"]["stock_status"] == "out_of_stock"
        assert by_name["Alpha Cable"]["warehouse_count"] == 0

        assert by_name["Bravo Hub"]["total_stock"] == 30
        assert by_name["Bravo Hub"]["stock_status"] == "low_stock"
        assert by_name["Bravo Hub"]["warehouse_count"] == 2

        assert by_name["Charlie Monitor"]["total_stock"] == 150
        assert by_name["Charlie Monitor"]["stock_status"] == "adequate"
        assert by_name["Charlie Monitor"]["total_value_cents"] == 150 * 20000

    def test_product_without_stock_rows_is_listed_as_out_of_stock(self, db_session, make_product):
        make_product("Loose Item", reorder_point=5)

        rows = fetch_products_with_stock(FilterDescriptor(), SortDescriptor())

        assert len(rows) == 1
        assert rows[0]["total_stock"] == 0
        assert rows[0]["stock_status"] == "out_of_stock"

    def test_inactive_products_hidden(self, stocked_catalog, make_product):
        make_product("Retired Gadget", is_active=False)

        rows = fetch_products_with_stock(FilterDescriptor(), SortDescriptor())

        assert "Retired Gadget" not in _names(rows)
        assert count_filtered_products(FilterDescriptor()) == 3


class TestStockFilter:
    """stock_filter is applied to the aggregate, after grouping."""

    def test_low_stock_returns_only_low_product(self, stocked_catalog):
        filters = FilterDescriptor(stock_filter="low_stock")

        rows = fetch_products_with_stock(filters, SortDescriptor())

        assert _names(rows) == ["Bravo Hub"]
        assert count_filtered_products(filters) == 1

    def test_out_of_stock(self, stocked_catalog):
        rows = fetch_products_with_stock(FilterDescriptor(stock_filter="out_of_stock"), SortDescriptor())
        assert _names(rows) == ["Alpha Cable"]

    def test_in_stock(self, stocked_catalog):
        rows = fetch_products_with_stock(FilterDescriptor(stock_filter="in_stock"), SortDescriptor())
        assert _names(rows) == ["Bravo Hub", "Charlie Monitor"]

    def test_partial_zero_warehouse_is_still_in_stock(self, make_warehouse, make_product, make_stock):
        """One empty warehouse must not make the whole product out of stock."""
        main = make_warehouse("Main")
        spare = make_warehouse("Spare")
        product = make_product("Split Stock", reorder_point=5)
        make_stock(product, main, 40)
        make_stock(product, spare, 0)

        out_rows = fetch_products_with_stock(FilterDescriptor(stock_filter="out_of_stock"), SortDescriptor())
        in_rows = fetch_products_with_stock(FilterDescriptor(stock_filter="in_stock"), SortDescriptor())

        assert out_rows == []
        assert _names(in_rows) == ["Split Stock"]


class TestFilters:
    """Search, category, price and warehouse filters."""

    def test_search_matches_name_case_insensitive(self, stocked_catalog):
        rows = fetch_products_with_stock(FilterDescriptor(search="bravo"), SortDescriptor())
        assert _names(rows) == ["Bravo Hub"]

    def test_search_matches_sku(self, stocked_catalog):
        sku = stocked_catalog["p3"].sku
        rows = fetch_products_with_stock(FilterDescriptor(search=sku.lower()), SortDescriptor())
        assert _names(rows) == ["Charlie Monitor"]

    def test_search_matches_description(self, db_session, make_product):
        make_product("Plain Name", description="Braided 2m USB-C lead")
        rows = fetch_products_with_stock(FilterDescriptor(search="braided"), SortDescriptor())
        assert _names(rows) == ["Plain Name"]

    def test_search_wildcards_are_literal(self, db_session, make_product):
        make_product("100% Cotton Rag")
        make_product("Cotton Swab")

        rows = fetch_products_with_stock(FilterDescriptor(search="100%"), SortDescriptor())

        assert _names(rows) == ["100% Cotton Rag"]

    def test_category(self, stocked_catalog):
        rows = fetch_products_with_stock(FilterDescriptor(category="Accessories"), SortDescriptor())
        assert _names(rows) == ["Alpha Cable", "Bravo Hub"]

    def test_price_range_on_sale_price(self, stocked_catalog):
        filters = FilterDescriptor(price_min_cents=1500, price_max_cents=4000)
        rows = fetch_products_with_stock(filters, SortDescriptor())
        assert _names(rows) == ["Alpha Cable", "Bravo Hub"]

    def test_warehouse_scope_restricts_aggregates(self, stocked_catalog):
        filters = FilterDescriptor(warehouse_id=stocked_catalog["east"].id)

        rows = fetch_products_with_stock(filters, SortDescriptor())
        by_name = {row["name"]: row for row in rows}

        assert by_name["Bravo Hub"]["total_stock"] == 10
        assert by_name["Charlie Monitor"]["total_stock"] == 50
        assert by_name["Charlie Monitor"]["stock_status"] == "adequate"

    def test_warehouse_scope_lists_only_products_carried_there(
        self, stocked_catalog, make_warehouse, make_product, make_stock
    ):
        north = make_warehouse("North")
        make_stock(stocked_catalog["p3"], north, 5)

        filters = FilterDescriptor(warehouse_id=north.id)
        rows = fetch_products_with_stock(filters, SortDescriptor())

        assert _names(rows) == ["Charlie Monitor"]
        assert rows[0]["stock_status"] == "low_stock"
        assert count_filtered_products(filters) == 1

    def test_unknown_warehouse_is_empty(self, stocked_catalog):
        filters = FilterDescriptor(warehouse_id=9999)
        assert fetch_products_with_stock(filters, SortDescriptor()) == []
        assert count_filtered_products(filters) == 0


class TestSorting:
    """Allow-listed sort fields with a stable id tie-breaker."""

    def test_default_is_name_ascending(self, stocked_catalog):
        rows = fetch_products_with_stock(FilterDescriptor(), SortDescriptor())
        assert _names(rows) == ["Alpha Cable", "Bravo Hub", "Charlie Monitor"]

    def test_total_stock_descending(self, stocked_catalog):
        rows = fetch_products_with_stock(FilterDescriptor(), SortDescriptor("total_stock", "desc"))
        assert _names(rows) == ["Charlie Monitor", "Bravo Hub", "Alpha Cable"]

    def test_sale_price_descending(self, stocked_catalog):
        rows = fetch_products_with_stock(FilterDescriptor(), SortDescriptor("sale_price", "desc"))
        assert _names(rows) == ["Charlie Monitor", "Bravo Hub", "Alpha Cable"]

    def test_unknown_field_sorts_like_name(self, stocked_catalog):
        by_name = fetch_products_with_stock(FilterDescriptor(), SortDescriptor("name", "asc"))
        by_unknown = fetch_products_with_stock(FilterDescriptor(), SortDescriptor("colour", "asc"))
        assert by_unknown == by_name

    def test_resolve_sort_field(self):
        assert resolve_sort_field("sku") == "sku"
        assert resolve_sort_field("price; DROP TABLE products") == "name"
        assert resolve_sort_field(None) == "name"

    def test_ties_broken_by_id(self, db_session, make_product):
        first = make_product("Same Name")
        second = make_product("Same Name")

        rows = fetch_products_with_stock(FilterDescriptor(), SortDescriptor())

        assert [row["id"] for row in rows] == [first.id, second.id]


class TestCountReconciliation:
    """count(F) equals the unpaginated result and the concatenated pages."""

    def _bulk_catalog(self, make_warehouse, make_product, make_stock):
        main = make_warehouse("Main")
        spare = make_warehouse("Spare")
        for i in range(23):
            product = make_product(f"Item {i % 5}", category="Even" if i % 2 == 0 else "Odd", reorder_point=20)
            make_stock(product, main, (i * 7) % 30)
            if i % 3 == 0:
                make_stock(product, spare, i)

    def test_count_matches_unpaginated_result(self, make_warehouse, make_product, make_stock):
        self._bulk_catalog(make_warehouse, make_product, make_stock)

        for stock_filter in ("all", "in_stock", "low_stock", "out_of_stock"):
            for category in (None, "Even"):
                filters = FilterDescriptor(category=category, stock_filter=stock_filter)
                rows = fetch_products_with_stock(filters, SortDescriptor())
                assert count_filtered_products(filters) == len(rows)

    def test_pages_concatenate_to_full_result(self, make_warehouse, make_product, make_stock):
        self._bulk_catalog(make_warehouse, make_product, make_stock)

        for sort in (SortDescriptor(), SortDescriptor("total_stock", "desc"), SortDescriptor("category", "asc")):
            filters = FilterDescriptor(stock_filter="in_stock")
            full = fetch_products_with_stock(filters, sort)
            paged = _all_pages(filters, sort, limit=4)

            assert paged == full
            assert len({row["id"] for row in paged}) == len(paged)


class TestListProducts:
    """Response shape of the listing operation."""

    def test_response_shape(self, stocked_catalog):
        result = list_products(
            FilterDescriptor(category="Accessories"),
            PaginationDescriptor(page=1, limit=1),
            SortDescriptor("bogus", "asc"),
        )

        assert _names(result["products"]) == ["Alpha Cable"]
        assert result["filters"] == {"stock_filter": "all", "category": "Accessories"}
        assert result["sort"] == {"sort_by": "name", "sort_order": "asc"}
        assert result["pagination"] == {
            "page": 1,
            "limit": 1,
            "total": 2,
            "totalPages": 2,
            "hasNext": True,
            "hasPrev": False,
        }

    def test_page_past_the_end(self, stocked_catalog):
        result = list_products(FilterDescriptor(), PaginationDescriptor(page=5, limit=10), SortDescriptor())

        assert result["products"] == []
        assert result["pagination"]["total"] == 3
        assert result["pagination"]["hasNext"] is False
        assert result["pagination"]["hasPrev"] is True


class TestPaginationMeta:
    def test_empty_result(self):
        meta = build_pagination_meta(PaginationDescriptor(page=1, limit=10), 0)
        assert meta["totalPages"] == 0
        assert meta["hasNext"] is False
        assert meta["hasPrev"] is False

    def test_partial_last_page(self):
        meta = build_pagination_meta(PaginationDescriptor(page=2, limit=10), 21)
        assert meta["totalPages"] == 3
        assert meta["hasNext"] is True
        assert meta["hasPrev"] is True
