# Overview: Pure analysis of per-warehouse aggregates: imbalance score and capacity bands.

"""
Distribution analysis over WarehouseAggregate values.

Everything here is a pure function of its inputs; aggregates are frozen and
rebuilt on every request (never cached).

Imbalance score:
    avg = mean(total_products)
    score = max(|count - avg| / avg) over warehouses
    fewer than 2 warehouses, or avg == 0 -> 0

Capacity utilization:
    utilization% = total_products / max(total_products) * 100 (0 when max is 0)
    <30 low, [30,70) optimal, [70,90) high, >=90 critical
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

IMBALANCE_MEDIUM_THRESHOLD = 0.2
IMBALANCE_HIGH_THRESHOLD = 0.5

CAPACITY_LOW_BELOW = 30.0
CAPACITY_OPTIMAL_BELOW = 70.0
CAPACITY_HIGH_BELOW = 90.0

CAPACITY_ACTIONS = {
    "low": "Consider consolidating inventory or increasing stock",
    "optimal": None,
    "high": "Monitor capacity, consider expansion",
    "critical": "Urgent: Redistribute stock or expand capacity",
}


@dataclass(frozen=True)
class WarehouseAggregate:
    warehouse_id: int
    warehouse_name: str
    total_products: int
    total_value_cents: int = 0
    low_stock_count: int = 0
    out_of_stock_count: int = 0

    def to_dict(self) -> dict:
        return {
            "warehouse_id": self.warehouse_id,
            "warehouse_name": self.warehouse_name,
            "total_products": self.total_products,
            "total_value_cents": self.total_value_cents,
            "low_stock_count": self.low_stock_count,
            "out_of_stock_count": self.out_of_stock_count,
        }


@dataclass(frozen=True)
class ImbalanceSummary:
    score: float
    level: str

    def to_dict(self) -> dict:
        return {"score": round(self.score, 4), "level": self.level}


@dataclass(frozen=True)
class CapacityInfo:
    warehouse_id: int
    warehouse_name: str
    utilization_percentage: float
    capacity_status: str
    recommended_action: str | None

    def to_dict(self) -> dict:
        return {
            "warehouse_id": self.warehouse_id,
            "warehouse_name": self.warehouse_name,
            "utilization_percentage": round(self.utilization_percentage, 2),
            "capacity_status": self.capacity_status,
            "recommended_action": self.recommended_action,
        }


def average_product_count(aggregates: Sequence[WarehouseAggregate]) -> float:
    if not aggregates:
        return 0.0
    return sum(a.total_products for a in aggregates) / len(aggregates)


def imbalance_score(aggregates: Sequence[WarehouseAggregate]) -> float:
    if len(aggregates) < 2:
        return 0.0

    avg = average_product_count(aggregates)
    if avg == 0:
        return 0.0

    return max(abs(a.total_products - avg) / avg for a in aggregates)


def imbalance_level(score: float) -> str:
    if score < IMBALANCE_MEDIUM_THRESHOLD:
        return "low"
    if score < IMBALANCE_HIGH_THRESHOLD:
        return "medium"
    return "high"


def analyze_imbalance(aggregates: Sequence[WarehouseAggregate]) -> ImbalanceSummary:
    score = imbalance_score(aggregates)
    return ImbalanceSummary(score=score, level=imbalance_level(score))


def capacity_status(utilization_percentage: float) -> str:
    if utilization_percentage < CAPACITY_LOW_BELOW:
        return "low"
    if utilization_percentage < CAPACITY_OPTIMAL_BELOW:
        return "optimal"
    if utilization_percentage < CAPACITY_HIGH_BELOW:
        return "high"
    return "critical"


def classify_capacity(aggregates: Sequence[WarehouseAggregate]) -> list[CapacityInfo]:
    """One CapacityInfo per warehouse, in input order."""
    if not aggregates:
        return []

    max_products = max(a.total_products for a in aggregates)

    out = []
    for a in aggregates:
        utilization = (a.total_products / max_products) * 100 if max_products > 0 else 0.0
        status = capacity_status(utilization)
        out.append(
            CapacityInfo(
                warehouse_id=a.warehouse_id,
                warehouse_name=a.warehouse_name,
                utilization_percentage=utilization,
                capacity_status=status,
                recommended_action=CAPACITY_ACTIONS[status],
            )
        )
    return out
