"""
Tests for warehouse-to-warehouse transfer suggestions.

Suggestions are a ranking heuristic: high-stock warehouses (above 1.3x the
average product count) feed low-stock ones (below 0.7x), 20% of the gap.
"""

from inventory_dashboard.services.distribution_analysis import WarehouseAggregate
from inventory_dashboard.services.transfer_service import (
    split_by_stock_level,
    suggest_transfers,
    transfer_priority,
)


def _wh(warehouse_id, total_products, low=0, out=0):
    return WarehouseAggregate(
        warehouse_id=warehouse_id,
        warehouse_name=f"Warehouse {warehouse_id}",
        total_products=total_products,
        low_stock_count=low,
        out_of_stock_count=out,
    )


class TestSuggestTransfers:
    def test_large_gap_produces_suggestion(self):
        suggestions = suggest_transfers([_wh(1, 600), _wh(2, 50)])

        assert len(suggestions) == 1
        suggestion = suggestions[0]
        assert suggestion.from_warehouse_id == 1
        assert suggestion.to_warehouse_id == 2
        assert suggestion.suggested_quantity == 110
        assert suggestion.priority == "low"
        assert suggestion.reason == "Balance stock distribution"

    def test_priority_follows_receiver_out_of_stock(self):
        suggestions = suggest_transfers([_wh(1, 600), _wh(2, 50, out=6)])

        assert suggestions[0].priority == "high"
        assert suggestions[0].reason == "Critical: 6 products out of stock"

    def test_priority_medium_for_many_low_items(self):
        suggestions = suggest_transfers([_wh(1, 600), _wh(2, 50, low=11, out=5)])

        assert suggestions[0].priority == "medium"
        assert suggestions[0].reason == "11 products running low"

    def test_single_warehouse(self):
        assert suggest_transfers([_wh(1, 600)]) == []

    def test_no_warehouses(self):
        assert suggest_transfers([]) == []

    def test_small_gap_suppressed(self):
        # avg 45: 70 is high, 10 is low, floor(0.2 * 60) = 12 > 10
        assert len(suggest_transfers([_wh(1, 70), _wh(2, 10), _wh(3, 55)])) == 1
        # avg 37.5: floor(0.2 * 50) = 10 is not above the minimum
        assert suggest_transfers([_wh(1, 60), _wh(2, 10), _wh(3, 40), _wh(4, 40)]) == []

    def test_balanced_warehouses(self):
        assert suggest_transfers([_wh(1, 100), _wh(2, 100), _wh(3, 100)]) == []

    def test_ordered_by_priority_then_pair_order(self):
        aggregates = [
            _wh(1, 900),
            _wh(2, 800),
            _wh(3, 10),
            _wh(4, 20, out=8),
            _wh(5, 30, low=12),
        ]

        suggestions = suggest_transfers(aggregates)
        pairs = [(s.from_warehouse_id, s.to_warehouse_id, s.priority) for s in suggestions]

        assert pairs == [
            (1, 4, "high"),
            (2, 4, "high"),
            (1, 5, "medium"),
            (2, 5, "medium"),
            (1, 3, "low"),
            (2, 3, "low"),
        ]

    def test_high_priority_only_with_more_than_five_out_of_stock(self):
        for out in range(0, 10):
            for s in suggest_transfers([_wh(1, 600), _wh(2, 50, out=out)]):
                assert (s.priority == "high") == (out > 5)

    def test_every_suggestion_above_minimum(self):
        aggregates = [_wh(i, count) for i, count in enumerate([5, 12, 80, 150, 300, 41, 0], start=1)]
        for s in suggest_transfers(aggregates):
            assert s.suggested_quantity > 10

    def test_to_dict(self):
        data = suggest_transfers([_wh(1, 600), _wh(2, 50)])[0].to_dict()
        assert data == {
            "from_warehouse_id": 1,
            "from_warehouse_name": "Warehouse 1",
            "to_warehouse_id": 2,
            "to_warehouse_name": "Warehouse 2",
            "suggested_quantity": 110,
            "reason": "Balance stock distribution",
            "priority": "low",
        }


class TestHelpers:
    def test_split_by_stock_level(self):
        high, low = split_by_stock_level([_wh(1, 600), _wh(2, 50), _wh(3, 325)])
        # avg 325
        assert [w.warehouse_id for w in high] == [1]
        assert [w.warehouse_id for w in low] == [2]

    def test_transfer_priority_boundaries(self):
        assert transfer_priority(_wh(1, 0, out=5))[0] == "low"
        assert transfer_priority(_wh(1, 0, low=10))[0] == "low"
        assert transfer_priority(_wh(1, 0, low=11))[0] == "medium"
        assert transfer_priority(_wh(1, 0, out=6, low=50))[0] == "high"
