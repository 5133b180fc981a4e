# Overview: Heuristic warehouse-to-warehouse transfer suggestions from per-warehouse aggregates.

"""
Transfer suggestion engine.

Greedy ranking, not an optimizer: every (high-stock, low-stock) warehouse
pair is considered once, O(H x L). Warehouse counts are small (tens).

    avg  = mean(total_products)
    high = total_products > 1.3 * avg
    low  = total_products < 0.7 * avg
    qty  = floor(0.2 * (high.total_products - low.total_products))
    emit only when qty > 10

Priority is decided by the RECEIVING (low-stock) warehouse:
    out_of_stock_count > 5  -> high
    low_stock_count > 10    -> medium
    otherwise               -> low

Output is ordered high, medium, low; equal priorities keep pair order.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from fractions import Fraction
from typing import Sequence

from .distribution_analysis import WarehouseAggregate, average_product_count

HIGH_STOCK_FACTOR = 1.3
LOW_STOCK_FACTOR = 0.7
TRANSFER_SHARE = Fraction(1, 5)  # 20% of the product-count gap, exact
MIN_TRANSFER_QUANTITY = 10  # exclusive

CRITICAL_OUT_OF_STOCK = 5  # exclusive
RUNNING_LOW_COUNT = 10  # exclusive

PRIORITY_RANK = {"high": 3, "medium": 2, "low": 1}


@dataclass(frozen=True)
class TransferSuggestion:
    from_warehouse_id: int
    from_warehouse_name: str
    to_warehouse_id: int
    to_warehouse_name: str
    suggested_quantity: int
    reason: str
    priority: str

    def to_dict(self) -> dict:
        return {
            "from_warehouse_id": self.from_warehouse_id,
            "from_warehouse_name": self.from_warehouse_name,
            "to_warehouse_id": self.to_warehouse_id,
            "to_warehouse_name": self.to_warehouse_name,
            "suggested_quantity": self.suggested_quantity,
            "reason": self.reason,
            "priority": self.priority,
        }


def transfer_priority(receiver: WarehouseAggregate) -> tuple[str, str]:
    """(priority, reason) for a transfer into receiver."""
    if receiver.out_of_stock_count > CRITICAL_OUT_OF_STOCK:
        return "high", f"Critical: {receiver.out_of_stock_count} products out of stock"
    if receiver.low_stock_count > RUNNING_LOW_COUNT:
        return "medium", f"{receiver.low_stock_count} products running low"
    return "low", "Balance stock distribution"


def split_by_stock_level(
    aggregates: Sequence[WarehouseAggregate],
) -> tuple[list[WarehouseAggregate], list[WarehouseAggregate]]:
    """(high_stock, low_stock) warehouses relative to the cross-warehouse average."""
    avg = average_product_count(aggregates)
    high = [a for a in aggregates if a.total_products > avg * HIGH_STOCK_FACTOR]
    low = [a for a in aggregates if a.total_products < avg * LOW_STOCK_FACTOR]
    return high, low


def suggest_transfers(aggregates: Sequence[WarehouseAggregate]) -> list[TransferSuggestion]:
    if len(aggregates) < 2:
        return []

    high_stock, low_stock = split_by_stock_level(aggregates)

    suggestions: list[TransferSuggestion] = []
    for source in high_stock:
        for receiver in low_stock:
            difference = source.total_products - receiver.total_products
            quantity = math.floor(difference * TRANSFER_SHARE)
            if quantity <= MIN_TRANSFER_QUANTITY:
                continue

            priority, reason = transfer_priority(receiver)
            suggestions.append(
                TransferSuggestion(
                    from_warehouse_id=source.warehouse_id,
                    from_warehouse_name=source.warehouse_name,
                    to_warehouse_id=receiver.warehouse_id,
                    to_warehouse_name=receiver.warehouse_name,
                    suggested_quantity=quantity,
                    reason=reason,
                    priority=priority,
                )
            )

    # sorted() is stable: ties keep pair-generation order
    return sorted(suggestions, key=lambda s: -PRIORITY_RANK[s.priority])
