from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Sequence

from aggregation import (
    ShoppingTotals,
    TransactionTotals,
    budget_percentage,
    compute_shopping_totals,
    compute_transaction_totals,
    index_products,
    line_value,
)
from categories import format_category
from models import PlanningList, Product, ShoppingList, TransactionType

BUDGET_ALERT_RATIO = 0.8


@dataclass(frozen=True)
class CategoryShare:
    category_id: str
    label: str
    value: float
    width: float


@dataclass(frozen=True)
class ProductStat:
    id: str
    name: str
    frequency: int
    price_change: int
    total_spent: float


@dataclass(frozen=True)
class Alert:
    kind: str
    percentage: float


@dataclass(frozen=True)
class ListBalance:
    id: str
    name: str
    balance: float
    width: float

    @property
    def is_positive(self) -> bool:
        return self.balance >= 0


@dataclass(frozen=True)
class DashboardSummary:
    planning: TransactionTotals
    shopping: ShoppingTotals
    top_categories: list[CategoryShare] = field(default_factory=list)
    top_products: list[ProductStat] = field(default_factory=list)
    alerts: list[Alert] = field(default_factory=list)
    balances: list[ListBalance] = field(default_factory=list)


def planning_overview(lists: Iterable[PlanningList]) -> TransactionTotals:
    return compute_transaction_totals(
        txn for planning_list in lists for txn in planning_list.transactions
    )


def shopping_overview(lists: Sequence[ShoppingList]) -> ShoppingTotals:
    budget = sum((float(lst.budget or 0) for lst in lists), 0.0)
    return compute_shopping_totals(
        (item for lst in lists for item in lst.items), budget
    )


def top_expense_categories(
    lists: Iterable[PlanningList], limit: int = 5
) -> list[CategoryShare]:
    totals: dict[str, float] = {}
    for planning_list in lists:
        for txn in planning_list.transactions:
            if txn.type != TransactionType.expense:
                continue
            totals[txn.category_id] = totals.get(txn.category_id, 0.0) + float(
                txn.amount or 0
            )

    ranked = sorted(totals.items(), key=lambda kv: kv[1], reverse=True)[:limit]
    top_value = ranked[0][1] if ranked else 0.0
    return [
        CategoryShare(
            category_id=str(getattr(category, "value", category)),
            label=format_category(category),
            value=value,
            width=(value / top_value * 100) if top_value else 0.0,
        )
        for category, value in ranked
    ]


def price_trend(prices: Sequence[tuple[datetime, float]]) -> int:
    """Percent change between the oldest and newest recorded price."""
    if len(prices) < 2:
        return 0
    ordered = sorted(prices, key=lambda entry: entry[0])
    oldest = ordered[0][1]
    latest = ordered[-1][1]
    if oldest <= 0:
        return 0
    return round((latest - oldest) / oldest * 100)


def top_products(
    shopping_lists: Sequence[ShoppingList],
    products: Iterable[Product],
    limit: int = 5,
) -> list[ProductStat]:
    by_id = index_products(products)

    history: dict[str, list[tuple[datetime, float]]] = {}
    for lst in shopping_lists:
        listed_at = lst.created_at or datetime.min
        for item in lst.items:
            history.setdefault(item.product_id, []).append(
                (listed_at, float(item.price or 0))
            )

    frequency: dict[str, int] = {}
    spent: dict[str, float] = {}
    for lst in shopping_lists:
        for item in lst.items:
            if item.product_id not in by_id:
                continue
            frequency[item.product_id] = frequency.get(item.product_id, 0) + 1
            spent[item.product_id] = spent.get(item.product_id, 0.0) + line_value(item)

    stats = [
        ProductStat(
            id=product_id,
            name=by_id[product_id].name,
            frequency=count,
            price_change=price_trend(history.get(product_id, [])),
            total_spent=spent[product_id],
        )
        for product_id, count in frequency.items()
    ]
    stats.sort(key=lambda stat: stat.total_spent, reverse=True)
    return stats[:limit]


def dashboard_alerts(
    planning: TransactionTotals, shopping: ShoppingTotals
) -> list[Alert]:
    alerts: list[Alert] = []
    if planning.expense > planning.income:
        if planning.income > 0:
            pct = abs((planning.expense - planning.income) / planning.income * 100)
        else:
            pct = 0.0
        alerts.append(Alert(kind="expense_over_income", percentage=pct))
    if shopping.spent > BUDGET_ALERT_RATIO * shopping.budget:
        alerts.append(
            Alert(
                kind="budget_near_limit",
                percentage=budget_percentage(shopping.spent, shopping.budget),
            )
        )
    return alerts


def balance_comparison(lists: Sequence[PlanningList]) -> list[ListBalance]:
    balances = [
        (lst, compute_transaction_totals(lst.transactions).balance) for lst in lists
    ]
    max_abs = max((abs(balance) for _, balance in balances), default=0.0)
    return [
        ListBalance(
            id=lst.id,
            name=lst.name,
            balance=balance,
            width=min(abs(balance) / (max_abs or 1) * 100, 100.0),
        )
        for lst, balance in balances
    ]


def build_dashboard(
    planning_lists: Sequence[PlanningList],
    shopping_lists: Sequence[ShoppingList],
    products: Sequence[Product],
    limit: int = 5,
) -> DashboardSummary:
    planning = planning_overview(planning_lists)
    shopping = shopping_overview(shopping_lists)
    return DashboardSummary(
        planning=planning,
        shopping=shopping,
        top_categories=top_expense_categories(planning_lists, limit),
        top_products=top_products(shopping_lists, products, limit),
        alerts=dashboard_alerts(planning, shopping),
        balances=balance_comparison(planning_lists),
    )
