from datetime import datetime
from decimal import Decimal
from typing import Optional

import pytest

from aggregation import (
    ShoppingItemFilters,
    TransactionFilters,
    compute_shopping_totals,
    compute_transaction_totals,
    filter_shopping_items,
    filter_transactions,
    sort_shopping_items,
    sort_transactions,
)
from models import (
    PlanningTransaction,
    Product,
    ProductCategory,
    ShoppingItem,
    TransactionCategory,
    TransactionType,
    UnitMeasure,
)


def make_txn(
    description: str,
    amount: str,
    txn_type: TransactionType = TransactionType.expense,
    category: TransactionCategory = TransactionCategory.outros_gastos,
    is_paid: bool = False,
    created_at: datetime = datetime(2025, 1, 1, 12, 0),
) -> PlanningTransaction:
    return PlanningTransaction(
        id=description,
        description=description,
        amount=Decimal(amount),
        type=txn_type,
        category_id=category,
        is_paid=is_paid,
        created_at=created_at,
    )


def make_product(
    product_id: str,
    name: str,
    category: ProductCategory = ProductCategory.outros,
    brand: Optional[str] = None,
) -> Product:
    return Product(
        id=product_id, name=name, brand=brand, category=category, unit=UnitMeasure.un
    )


def make_item(
    item_id: str,
    product_id: str,
    price: str,
    quantity: str = "1",
    checked: bool = False,
) -> ShoppingItem:
    return ShoppingItem(
        id=item_id,
        product_id=product_id,
        price=Decimal(price),
        quantity=Decimal(quantity),
        checked=checked,
    )


def test_transaction_totals_split_income_and_expense() -> None:
    transactions = [
        make_txn("Salário", "5000", TransactionType.income, TransactionCategory.salario),
        make_txn("Aluguel", "1500", category=TransactionCategory.moradia),
        make_txn("Mercado", "800", category=TransactionCategory.alimentacao),
    ]

    totals = compute_transaction_totals(transactions)

    assert totals.income == pytest.approx(5000)
    assert totals.expense == pytest.approx(2300)
    assert totals.balance == pytest.approx(2700)
    assert totals.is_positive


def test_transaction_totals_ignore_paid_status_and_allow_negative_balance() -> None:
    transactions = [
        make_txn("Freela", "100", TransactionType.income, TransactionCategory.freelance),
        make_txn("Conta", "250", is_paid=True),
        make_txn("Cartão", "50", is_paid=False),
    ]

    totals = compute_transaction_totals(transactions)

    assert totals.expense == pytest.approx(300)
    assert totals.balance == pytest.approx(-200)
    assert not totals.is_positive


def test_empty_list_has_zero_totals() -> None:
    totals = compute_transaction_totals([])

    assert (totals.income, totals.expense, totals.balance) == (0, 0, 0)
    assert totals.is_positive


def test_shopping_totals_count_every_item_against_budget() -> None:
    items = [
        make_item("a", "p1", "20.99", "2", checked=True),
        make_item("b", "p2", "8.99", "3"),
    ]

    totals = compute_shopping_totals(items, Decimal("500"))

    assert totals.spent == pytest.approx(68.95)
    assert totals.remaining == pytest.approx(431.05)
    assert totals.percentage == pytest.approx(13.79, abs=0.01)
    assert not totals.is_over_budget


def test_shopping_totals_with_zero_budget_report_zero_percent() -> None:
    totals = compute_shopping_totals([make_item("a", "p1", "10", "2")], 0)

    assert totals.spent == pytest.approx(20)
    assert totals.remaining == pytest.approx(-20)
    assert totals.percentage == 0
    assert totals.is_over_budget


def test_over_budget_percentage_is_not_clamped() -> None:
    totals = compute_shopping_totals([make_item("a", "p1", "150")], 100)

    assert totals.percentage == pytest.approx(150)
    assert totals.progress_width == 100
    assert totals.remaining == pytest.approx(-50)


def test_default_filters_keep_everything_in_order() -> None:
    transactions = [make_txn("B", "1"), make_txn("A", "2"), make_txn("C", "3")]

    result = filter_transactions(transactions, TransactionFilters())

    assert result == transactions


def test_pending_tab_keeps_only_unpaid_expenses() -> None:
    unpaid_expense = make_txn("Luz", "90")
    paid_expense = make_txn("Água", "60", is_paid=True)
    unpaid_income = make_txn(
        "Salário", "5000", TransactionType.income, TransactionCategory.salario
    )

    result = filter_transactions(
        [unpaid_expense, paid_expense, unpaid_income],
        TransactionFilters(type_tab="pending"),
    )

    assert result == [unpaid_expense]


def test_type_tab_search_category_and_paid_filters_combine() -> None:
    rent = make_txn(
        "Aluguel apto", "1500", category=TransactionCategory.moradia, is_paid=True
    )
    condo = make_txn("Condomínio", "400", category=TransactionCategory.moradia)
    market = make_txn(
        "Mercado", "300", category=TransactionCategory.alimentacao, is_paid=True
    )
    salary = make_txn(
        "Salário", "5000", TransactionType.income, TransactionCategory.salario, True
    )
    transactions = [rent, condo, market, salary]

    assert filter_transactions(
        transactions, TransactionFilters(type_tab="income")
    ) == [salary]
    assert filter_transactions(
        transactions, TransactionFilters(search_term="ALUGUEL")
    ) == [rent]
    assert filter_transactions(
        transactions, TransactionFilters(category_id=TransactionCategory.moradia)
    ) == [rent, condo]
    assert filter_transactions(
        transactions,
        TransactionFilters(
            type_tab="expense", category_id=TransactionCategory.moradia, paid_only=True
        ),
    ) == [rent]


def test_all_category_means_no_category_filter() -> None:
    transactions = [make_txn("A", "1"), make_txn("B", "2")]

    result = filter_transactions(transactions, TransactionFilters(category_id="all"))

    assert result == transactions


def test_date_sort_uses_creation_time() -> None:
    old = make_txn("Old", "1", created_at=datetime(2025, 1, 1, 8, 0))
    new = make_txn("New", "1", created_at=datetime(2025, 3, 1, 8, 0))
    mid = make_txn("Mid", "1", created_at=datetime(2025, 2, 1, 8, 0))

    assert sort_transactions([old, new, mid], "date", "desc") == [new, mid, old]
    assert sort_transactions([old, new, mid], "date", "asc") == [old, mid, new]


def test_amount_sort_desc_puts_largest_first() -> None:
    small = make_txn("Small", "10")
    large = make_txn("Large", "1000")
    medium = make_txn("Medium", "100")

    assert sort_transactions([small, large, medium], "amount", "desc") == [
        large,
        medium,
        small,
    ]
    assert sort_transactions([small, large, medium], "amount", "asc") == [
        small,
        medium,
        large,
    ]


def test_description_sort_asc_is_reverse_alphabetical() -> None:
    banana = make_txn("banana", "1")
    apple = make_txn("Apple", "1")
    cherry = make_txn("cherry", "1")

    assert sort_transactions([banana, apple, cherry], "description", "desc") == [
        apple,
        banana,
        cherry,
    ]
    assert sort_transactions([banana, apple, cherry], "description", "asc") == [
        cherry,
        banana,
        apple,
    ]


def test_sort_keeps_ties_in_input_order() -> None:
    first = make_txn("First", "50")
    second = make_txn("Second", "50")
    third = make_txn("Third", "50")

    assert sort_transactions([first, second, third], "amount", "desc") == [
        first,
        second,
        third,
    ]


def test_sort_does_not_mutate_input() -> None:
    transactions = [make_txn("B", "1"), make_txn("A", "2")]
    snapshot = list(transactions)

    sort_transactions(transactions, "description", "desc")

    assert transactions == snapshot


def test_shopping_items_split_into_to_buy_and_purchased() -> None:
    products = [
        make_product("p1", "Leite", ProductCategory.laticinios_leites),
        make_product("p2", "Arroz", ProductCategory.graos_cereais),
        make_product("p3", "Café", ProductCategory.cafe),
    ]
    milk = make_item("i1", "p1", "5.49")
    rice = make_item("i2", "p2", "22.90", checked=True)
    coffee = make_item("i3", "p3", "18.00")

    partition = filter_shopping_items(
        [milk, rice, coffee], products, ShoppingItemFilters()
    )

    assert partition.to_buy == [coffee, milk]
    assert partition.purchased == [rice]
    assert len(partition.filtered) == 3


def test_shopping_search_matches_name_or_brand() -> None:
    products = [
        make_product("p1", "Sabão em pó", brand="Omo"),
        make_product("p2", "Detergente", brand="Ypê"),
    ]
    soap = make_item("i1", "p1", "30")
    detergent = make_item("i2", "p2", "3")

    by_brand = filter_shopping_items(
        [soap, detergent], products, ShoppingItemFilters(search_term="omo")
    )
    by_name = filter_shopping_items(
        [soap, detergent], products, ShoppingItemFilters(search_term="DETER")
    )

    assert by_brand.filtered == [soap]
    assert by_name.filtered == [detergent]


def test_unresolved_products_are_dropped_by_search_and_category() -> None:
    products = [make_product("p1", "Pão", ProductCategory.padaria_paes)]
    bread = make_item("i1", "p1", "8")
    orphan = make_item("i2", "missing", "2")

    no_filter = filter_shopping_items([bread, orphan], products, ShoppingItemFilters())
    searched = filter_shopping_items(
        [bread, orphan], products, ShoppingItemFilters(search_term="p")
    )
    by_category = filter_shopping_items(
        [bread, orphan],
        products,
        ShoppingItemFilters(category=ProductCategory.padaria_paes),
    )

    assert set(item.id for item in no_filter.to_buy) == {"i1", "i2"}
    assert searched.filtered == [bread]
    assert by_category.filtered == [bread]


def test_purchased_only_empties_the_to_buy_group() -> None:
    products = [make_product("p1", "Ovos"), make_product("p2", "Farinha")]
    eggs = make_item("i1", "p1", "12", checked=True)
    flour = make_item("i2", "p2", "6")

    partition = filter_shopping_items(
        [eggs, flour], products, ShoppingItemFilters(purchased_only=True)
    )

    assert partition.to_buy == []
    assert partition.purchased == [eggs]


def test_shopping_sort_fields_and_order() -> None:
    products = [
        make_product("p1", "Banana", ProductCategory.hortifruti_frutas),
        make_product("p2", "Alface", ProductCategory.hortifruti_verduras),
        make_product("p3", "Carne", ProductCategory.carnes_bovinas),
    ]
    banana = make_item("i1", "p1", "7", "6")
    lettuce = make_item("i2", "p2", "4", "1")
    beef = make_item("i3", "p3", "45", "2")
    items = [banana, lettuce, beef]

    assert sort_shopping_items(items, products, "name", "asc") == [lettuce, banana, beef]
    assert sort_shopping_items(items, products, "name", "desc") == [beef, banana, lettuce]
    assert sort_shopping_items(items, products, "price", "asc") == [lettuce, banana, beef]
    assert sort_shopping_items(items, products, "quantity", "desc") == [
        banana,
        beef,
        lettuce,
    ]
    assert sort_shopping_items(items, products, "category", "asc") == [
        beef,
        banana,
        lettuce,
    ]


def test_text_sorts_ignore_accents_for_primary_order() -> None:
    products = [
        make_product("p1", "Arroz"),
        make_product("p2", "Açúcar"),
        make_product("p3", "Óleo"),
        make_product("p4", "Pão"),
    ]
    items = [make_item(f"i{n}", f"p{n}", "1") for n in range(1, 5)]

    by_name = sort_shopping_items(items, products, "name", "asc")

    assert [item.product_id for item in by_name] == ["p2", "p1", "p3", "p4"]

    transactions = [
        make_txn("Pão", "1"),
        make_txn("Óleo", "1"),
        make_txn("Arroz", "1"),
        make_txn("Água", "1"),
    ]

    by_description = sort_transactions(transactions, "description", "desc")

    assert [txn.description for txn in by_description] == [
        "Água",
        "Arroz",
        "Óleo",
        "Pão",
    ]


def test_unresolved_product_holds_its_place_when_sorting() -> None:
    products = [make_product("p1", "Arroz"), make_product("p2", "Banana")]
    orphan = make_item("i0", "missing", "99", "9")
    rice = make_item("i1", "p1", "20")
    banana = make_item("i2", "p2", "7")

    assert sort_shopping_items([orphan, rice, banana], products, "name", "asc") == [
        orphan,
        rice,
        banana,
    ]
    assert sort_shopping_items([orphan, banana, rice], products, "name", "desc") == [
        orphan,
        banana,
        rice,
    ]
    assert sort_shopping_items([orphan, rice, banana], products, "price", "desc") == [
        orphan,
        rice,
        banana,
    ]


def test_partition_is_disjoint_and_covers_filtered_items() -> None:
    products = [
        make_product("p1", "Queijo minas", ProductCategory.laticinios_queijos),
        make_product(
            "p2", "Queijo prato", ProductCategory.laticinios_queijos, "Tirolez"
        ),
        make_product("p3", "Requeijão", ProductCategory.laticinios_manteigas),
        make_product("p4", "Pão de queijo", ProductCategory.congelados),
    ]
    items = [
        make_item("i1", "p1", "30", checked=True),
        make_item("i2", "p2", "25"),
        make_item("i3", "p3", "9", checked=True),
        make_item("i4", "p4", "15"),
        make_item("i5", "p1", "31"),
        make_item("i6", "missing", "1", checked=True),
        make_item("i7", "p2", "26", checked=True),
    ]
    filters = ShoppingItemFilters(
        search_term="queijo", category=ProductCategory.laticinios_queijos
    )

    partition = filter_shopping_items(items, products, filters)

    to_buy = {item.id for item in partition.to_buy}
    purchased = {item.id for item in partition.purchased}
    assert to_buy.isdisjoint(purchased)
    assert to_buy | purchased == {"i1", "i2", "i5", "i7"}
    assert all(not item.checked for item in partition.to_buy)
    assert all(item.checked for item in partition.purchased)
