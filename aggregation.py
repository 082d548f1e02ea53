"""
List aggregation and filtering.

Pure functions over already-fetched planning transactions and shopping items.
Nothing here touches the database or mutates its inputs; callers hand in
rows (ORM objects or anything exposing the same attributes) and get back new
lists or small frozen result objects.
"""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass, field
from datetime import datetime
from functools import cmp_to_key
from typing import Callable, Iterable, Literal, Optional, Sequence

from models import (
    PlanningTransaction,
    Product,
    ProductCategory,
    ShoppingItem,
    TransactionCategory,
    TransactionType,
)

TypeTab = Literal["all", "income", "expense", "pending"]
TransactionSortField = Literal["date", "amount", "description"]
ShoppingSortField = Literal["name", "price", "quantity", "category"]
SortOrder = Literal["asc", "desc"]

ALL_CATEGORIES = "all"


def _num(value: object) -> float:
    if value is None:
        return 0.0
    return float(value)


def _sign(value: float) -> int:
    return (value > 0) - (value < 0)


def _collation_key(text: str) -> tuple[str, str]:
    # accents and case only break ties: "Açúcar" sorts with the "a" words
    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), text.casefold()


def _text_compare(a: str, b: str) -> int:
    left, right = _collation_key(a), _collation_key(b)
    if left == right:
        return _sign((a > b) - (a < b))
    return -1 if left < right else 1


@dataclass(frozen=True)
class TransactionTotals:
    income: float = 0.0
    expense: float = 0.0
    balance: float = 0.0

    @property
    def is_positive(self) -> bool:
        return self.balance >= 0


@dataclass(frozen=True)
class ShoppingTotals:
    budget: float = 0.0
    spent: float = 0.0
    remaining: float = 0.0
    percentage: float = 0.0

    @property
    def progress_width(self) -> float:
        """Bar width for display; the percentage itself stays unclamped."""
        return min(self.percentage, 100.0)

    @property
    def is_over_budget(self) -> bool:
        return self.remaining < 0


def compute_transaction_totals(
    transactions: Iterable[PlanningTransaction],
) -> TransactionTotals:
    income = 0.0
    expense = 0.0
    for txn in transactions:
        if txn.type == TransactionType.income:
            income += _num(txn.amount)
        elif txn.type == TransactionType.expense:
            expense += _num(txn.amount)
    return TransactionTotals(income=income, expense=expense, balance=income - expense)


def line_value(item: ShoppingItem) -> float:
    return _num(item.price) * _num(item.quantity)


def budget_percentage(spent: float, budget: float) -> float:
    if budget <= 0:
        return 0.0
    return spent / budget * 100


def compute_shopping_totals(
    items: Iterable[ShoppingItem], budget: object
) -> ShoppingTotals:
    # checked and unchecked items both count: the budget tracks commitment
    spent = sum((line_value(item) for item in items), 0.0)
    budget_value = _num(budget)
    return ShoppingTotals(
        budget=budget_value,
        spent=spent,
        remaining=budget_value - spent,
        percentage=budget_percentage(spent, budget_value),
    )


@dataclass(frozen=True)
class TransactionFilters:
    type_tab: TypeTab = "all"
    search_term: str = ""
    category_id: Optional[TransactionCategory] = None
    paid_only: bool = False


def _matches_tab(txn: PlanningTransaction, tab: TypeTab) -> bool:
    if tab == "all":
        return True
    if tab == "pending":
        return txn.type == TransactionType.expense and not txn.is_paid
    return txn.type == TransactionType(tab)


def filter_transactions(
    transactions: Sequence[PlanningTransaction], filters: TransactionFilters
) -> list[PlanningTransaction]:
    needle = (filters.search_term or "").lower()
    category = filters.category_id
    if category == ALL_CATEGORIES:
        category = None

    def keep(txn: PlanningTransaction) -> bool:
        if not _matches_tab(txn, filters.type_tab):
            return False
        if needle and needle not in (txn.description or "").lower():
            return False
        if category and txn.category_id != category:
            return False
        if filters.paid_only and not txn.is_paid:
            return False
        return True

    return [txn for txn in transactions if keep(txn)]


def _created_at(txn: PlanningTransaction) -> datetime:
    return txn.created_at or datetime.min


def _transaction_comparator(
    sort_field: TransactionSortField,
) -> Callable[[PlanningTransaction, PlanningTransaction], int]:
    if sort_field == "date":
        # recency of creation, not the editable date field
        return lambda a, b: _sign((_created_at(b) - _created_at(a)).total_seconds())
    if sort_field == "amount":
        return lambda a, b: _sign(_num(b.amount) - _num(a.amount))
    if sort_field == "description":
        return lambda a, b: _text_compare(a.description or "", b.description or "")
    raise ValueError(f"Unsupported sort field: {sort_field}")


def sort_transactions(
    transactions: Sequence[PlanningTransaction],
    sort_field: TransactionSortField = "date",
    order: SortOrder = "desc",
) -> list[PlanningTransaction]:
    """
    Order transactions for display.

    The base comparison already reads as "desc" for date (newest created
    first) and amount (largest first) and as A-Z for description. Asking for
    "asc" negates it, so asc on description gives Z-A. Equal elements keep
    their input order.
    """
    base = _transaction_comparator(sort_field)
    if order == "asc":
        compare = lambda a, b: -base(a, b)  # noqa: E731
    else:
        compare = base
    return sorted(transactions, key=cmp_to_key(compare))


@dataclass(frozen=True)
class ShoppingItemFilters:
    search_term: str = ""
    category: Optional[ProductCategory] = None
    purchased_only: bool = False
    sort_field: ShoppingSortField = "name"
    sort_order: SortOrder = "asc"


@dataclass(frozen=True)
class ShoppingPartition:
    to_buy: list[ShoppingItem] = field(default_factory=list)
    purchased: list[ShoppingItem] = field(default_factory=list)

    @property
    def filtered(self) -> list[ShoppingItem]:
        return self.to_buy + self.purchased


def index_products(products: Iterable[Product]) -> dict[str, Product]:
    return {product.id: product for product in products}


def _product_matches_search(product: Optional[Product], needle: str) -> bool:
    if product is None:
        return False
    if needle in (product.name or "").lower():
        return True
    return bool(product.brand) and needle in product.brand.lower()


def _shopping_comparator(
    sort_field: ShoppingSortField, by_id: dict[str, Product]
) -> Callable[[ShoppingItem, ShoppingItem], int]:
    def compare(a: ShoppingItem, b: ShoppingItem) -> int:
        product_a = by_id.get(a.product_id)
        product_b = by_id.get(b.product_id)
        if product_a is None or product_b is None:
            return 0
        if sort_field == "name":
            return _text_compare(product_a.name or "", product_b.name or "")
        if sort_field == "price":
            return _sign(_num(a.price) - _num(b.price))
        if sort_field == "quantity":
            return _sign(_num(a.quantity) - _num(b.quantity))
        if sort_field == "category":
            return _text_compare(
                ProductCategory(product_a.category).value,
                ProductCategory(product_b.category).value,
            )
        raise ValueError(f"Unsupported sort field: {sort_field}")

    return compare


def sort_shopping_items(
    items: Sequence[ShoppingItem],
    products: Iterable[Product],
    sort_field: ShoppingSortField = "name",
    order: SortOrder = "asc",
) -> list[ShoppingItem]:
    # items without a resolvable product compare equal to everything
    base = _shopping_comparator(sort_field, index_products(products))
    if order == "desc":
        compare = lambda a, b: -base(a, b)  # noqa: E731
    else:
        compare = base
    return sorted(items, key=cmp_to_key(compare))


def filter_shopping_items(
    items: Sequence[ShoppingItem],
    products: Sequence[Product],
    filters: ShoppingItemFilters,
) -> ShoppingPartition:
    by_id = index_products(products)
    needle = (filters.search_term or "").lower()
    category = filters.category
    if category == ALL_CATEGORIES:
        category = None

    filtered = list(items)
    if needle:
        filtered = [
            item
            for item in filtered
            if _product_matches_search(by_id.get(item.product_id), needle)
        ]
    if category:
        filtered = [
            item
            for item in filtered
            if item.product_id in by_id and by_id[item.product_id].category == category
        ]
    if filters.purchased_only:
        filtered = [item for item in filtered if item.checked]

    to_buy = [item for item in filtered if not item.checked]
    purchased = [item for item in filtered if item.checked]
    return ShoppingPartition(
        to_buy=sort_shopping_items(
            to_buy, products, filters.sort_field, filters.sort_order
        ),
        purchased=sort_shopping_items(
            purchased, products, filters.sort_field, filters.sort_order
        ),
    )
