import pytest
from pydantic import ValidationError

from categories import (
    UnknownCategoryError,
    category_type,
    format_category,
    format_product_category,
    format_unit,
    parse_product_category,
    parse_transaction_category,
    transaction_category_options,
)
from models import ProductCategory, TransactionCategory, TransactionType, UnitMeasure
from schemas import TransactionIn


def test_categories_belong_to_exactly_one_type() -> None:
    assert category_type(TransactionCategory.salario) == TransactionType.income
    assert category_type(TransactionCategory.investimentos) == TransactionType.expense
    assert category_type(TransactionCategory.outros_ganhos) == TransactionType.income

    income = transaction_category_options(TransactionType.income)
    expense = transaction_category_options(TransactionType.expense)
    assert len(income) == 7
    assert len(expense) == 21
    assert {o["group"] for o in income} == {"Receitas"}
    assert {o["group"] for o in expense} == {"Despesas"}
    assert len(transaction_category_options()) == len(TransactionCategory)


def test_labels_and_parsing() -> None:
    assert format_category("alimentacao") == "Alimentação"
    assert format_product_category(ProductCategory.laticinios_queijos) == "Queijos"
    assert format_unit(UnitMeasure.kg)
    assert parse_transaction_category(" lazer ") == TransactionCategory.lazer
    assert parse_product_category("cafe") == ProductCategory.cafe


def test_unknown_category_is_rejected() -> None:
    with pytest.raises(UnknownCategoryError):
        parse_transaction_category("mercado")
    with pytest.raises(UnknownCategoryError):
        parse_product_category("eletronicos")


def test_transaction_input_requires_matching_category() -> None:
    with pytest.raises(ValidationError):
        TransactionIn(
            description="Salário",
            amount="5000",
            type=TransactionType.expense,
            category_id=TransactionCategory.salario,
        )

    txn = TransactionIn(
        description="Salário",
        amount="5000",
        type=TransactionType.income,
        category_id=TransactionCategory.salario,
        observation="   ",
    )
    assert txn.observation is None
