from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from models import (
    PlanningList,
    PlanningTransaction,
    Product,
    ShoppingItem,
    ShoppingList,
    TransactionType,
)
from schemas import (
    PlanningListIn,
    ProductIn,
    ShoppingItemIn,
    ShoppingItemUpdate,
    ShoppingListIn,
    TransactionIn,
)

logger = logging.getLogger(__name__)

COPY_SUFFIX = " (Cópia)"


class NotFoundError(ValueError):
    pass


class ProductInUseError(ValueError):
    pass


class PlanningListService:
    def __init__(self, session: Session, user_id: str) -> None:
        self.session = session
        self.user_id = user_id

    def list_all(self) -> list[PlanningList]:
        stmt = (
            select(PlanningList)
            .options(selectinload(PlanningList.transactions))
            .where(PlanningList.user_id == self.user_id)
            .order_by(PlanningList.created_at.desc())
        )
        return list(self.session.scalars(stmt).all())

    def get(self, list_id: str) -> PlanningList:
        stmt = (
            select(PlanningList)
            .options(selectinload(PlanningList.transactions))
            .where(PlanningList.id == list_id, PlanningList.user_id == self.user_id)
        )
        planning_list = self.session.scalar(stmt)
        if not planning_list:
            raise NotFoundError("Planning list not found")
        return planning_list

    def create(self, data: PlanningListIn) -> PlanningList:
        planning_list = PlanningList(user_id=self.user_id, name=data.name)
        self.session.add(planning_list)
        self.session.commit()
        self.session.refresh(planning_list)
        logger.info(f"planning_list_created: id={planning_list.id}")
        return planning_list

    def rename(self, list_id: str, data: PlanningListIn) -> PlanningList:
        planning_list = self.get(list_id)
        planning_list.name = data.name
        self.session.commit()
        return planning_list

    def delete(self, list_id: str) -> None:
        planning_list = self.get(list_id)
        count = len(planning_list.transactions)
        self.session.delete(planning_list)
        self.session.commit()
        logger.info(f"planning_list_deleted: id={list_id} transactions={count}")


class TransactionService:
    def __init__(self, session: Session, user_id: str) -> None:
        self.session = session
        self.user_id = user_id

    def get(self, txn_id: str) -> PlanningTransaction:
        txn = self.session.get(PlanningTransaction, txn_id)
        if not txn or txn.user_id != self.user_id:
            raise NotFoundError("Transaction not found")
        return txn

    def create(self, list_id: str, data: TransactionIn) -> PlanningTransaction:
        planning_list = PlanningListService(self.session, self.user_id).get(list_id)
        txn = PlanningTransaction(
            user_id=self.user_id,
            description=data.description.strip(),
            amount=data.amount,
            type=data.type,
            category_id=data.category_id,
            is_paid=data.is_paid,
            observation=data.observation,
        )
        if data.date:
            txn.date = data.date
        planning_list.transactions.append(txn)
        self.session.commit()
        self.session.refresh(txn)
        return txn

    def update(self, txn_id: str, data: TransactionIn) -> PlanningTransaction:
        txn = self.get(txn_id)
        txn.description = data.description.strip()
        txn.amount = data.amount
        txn.type = data.type
        txn.category_id = data.category_id
        txn.is_paid = data.is_paid
        txn.observation = data.observation
        if data.date:
            txn.date = data.date
        self.session.commit()
        self.session.refresh(txn)
        return txn

    def set_paid(self, txn_id: str, is_paid: bool) -> PlanningTransaction:
        txn = self.get(txn_id)
        txn.is_paid = is_paid
        self.session.commit()
        return txn

    def delete(self, txn_id: str) -> None:
        txn = self.get(txn_id)
        self.session.delete(txn)
        self.session.commit()

    def last_matching(
        self, description: str, txn_type: TransactionType
    ) -> Optional[PlanningTransaction]:
        """Most recent transaction with the same description, used to pre-fill forms."""
        clean = description.strip()
        if not clean:
            return None
        stmt = (
            select(PlanningTransaction)
            .where(
                PlanningTransaction.user_id == self.user_id,
                PlanningTransaction.description == clean,
                PlanningTransaction.type == txn_type,
            )
            .order_by(PlanningTransaction.created_at.desc())
            .limit(1)
        )
        return self.session.scalar(stmt)


class ShoppingListService:
    def __init__(self, session: Session, user_id: str) -> None:
        self.session = session
        self.user_id = user_id

    def list_all(self) -> list[ShoppingList]:
        stmt = (
            select(ShoppingList)
            .options(selectinload(ShoppingList.items))
            .where(ShoppingList.user_id == self.user_id)
            .order_by(ShoppingList.created_at.desc())
        )
        return list(self.session.scalars(stmt).all())

    def get(self, list_id: str) -> ShoppingList:
        stmt = (
            select(ShoppingList)
            .options(selectinload(ShoppingList.items))
            .where(ShoppingList.id == list_id, ShoppingList.user_id == self.user_id)
        )
        shopping_list = self.session.scalar(stmt)
        if not shopping_list:
            raise NotFoundError("Shopping list not found")
        return shopping_list

    def create(self, data: ShoppingListIn) -> ShoppingList:
        shopping_list = ShoppingList(
            user_id=self.user_id, name=data.name, budget=data.budget
        )
        self.session.add(shopping_list)
        self.session.commit()
        self.session.refresh(shopping_list)
        logger.info(f"shopping_list_created: id={shopping_list.id}")
        return shopping_list

    def update(self, list_id: str, data: ShoppingListIn) -> ShoppingList:
        shopping_list = self.get(list_id)
        shopping_list.name = data.name
        shopping_list.budget = data.budget
        self.session.commit()
        return shopping_list

    def delete(self, list_id: str) -> None:
        shopping_list = self.get(list_id)
        count = len(shopping_list.items)
        self.session.delete(shopping_list)
        self.session.commit()
        logger.info(f"shopping_list_deleted: id={list_id} items={count}")

    def duplicate(self, list_id: str) -> ShoppingList:
        original = self.get(list_id)
        copy = ShoppingList(
            user_id=self.user_id,
            name=f"{original.name}{COPY_SUFFIX}",
            budget=original.budget,
        )
        for item in original.items:
            copy.items.append(
                ShoppingItem(
                    product_id=item.product_id,
                    user_id=self.user_id,
                    quantity=item.quantity,
                    price=item.price,
                    checked=False,
                )
            )
        self.session.add(copy)
        self.session.commit()
        self.session.refresh(copy)
        logger.info(
            f"shopping_list_duplicated: source={original.id} copy={copy.id} "
            f"items={len(copy.items)}"
        )
        return copy


class ShoppingItemService:
    def __init__(self, session: Session, user_id: str) -> None:
        self.session = session
        self.user_id = user_id

    def get(self, item_id: str) -> ShoppingItem:
        item = self.session.get(ShoppingItem, item_id)
        if not item or item.user_id != self.user_id:
            raise NotFoundError("Shopping item not found")
        return item

    def add(self, list_id: str, data: ShoppingItemIn) -> ShoppingItem:
        shopping_list = ShoppingListService(self.session, self.user_id).get(list_id)
        product = ProductService(self.session, self.user_id).get(data.product_id)

        price = data.price
        if price is None:
            if product.last_price is None:
                raise ValueError("Price is required for a product without a last price")
            price = Decimal(product.last_price)

        item = ShoppingItem(
            product_id=product.id,
            user_id=self.user_id,
            quantity=data.quantity,
            price=price,
            checked=False,
        )
        product.last_price = price
        shopping_list.items.append(item)
        self.session.commit()
        self.session.refresh(item)
        return item

    def update(self, item_id: str, data: ShoppingItemUpdate) -> ShoppingItem:
        item = self.get(item_id)
        item.quantity = data.quantity
        item.price = data.price
        self.session.commit()
        self.session.refresh(item)
        return item

    def toggle(self, item_id: str) -> ShoppingItem:
        item = self.get(item_id)
        item.checked = not item.checked
        self.session.commit()
        return item

    def delete(self, item_id: str) -> None:
        item = self.get(item_id)
        self.session.delete(item)
        self.session.commit()


class ProductService:
    def __init__(self, session: Session, user_id: str) -> None:
        self.session = session
        self.user_id = user_id

    def list_all(self) -> list[Product]:
        stmt = (
            select(Product)
            .where(Product.user_id == self.user_id)
            .order_by(Product.name)
        )
        return list(self.session.scalars(stmt).all())

    def search(self, term: str) -> list[Product]:
        # case-insensitive over full Unicode; % and _ match literally
        needle = term.strip().casefold()
        products = self.list_all()
        if not needle:
            return products
        return [
            product
            for product in products
            if needle in product.name.casefold()
            or (product.brand and needle in product.brand.casefold())
        ]

    def get(self, product_id: str) -> Product:
        product = self.session.get(Product, product_id)
        if not product or product.user_id != self.user_id:
            raise NotFoundError("Product not found")
        return product

    def create(self, data: ProductIn) -> Product:
        product = Product(
            user_id=self.user_id,
            name=data.name.strip(),
            brand=data.brand,
            category=data.category,
            unit=data.unit,
        )
        self.session.add(product)
        self.session.commit()
        self.session.refresh(product)
        return product

    def update(self, product_id: str, data: ProductIn) -> Product:
        product = self.get(product_id)
        product.name = data.name.strip()
        product.brand = data.brand
        product.category = data.category
        product.unit = data.unit
        self.session.commit()
        self.session.refresh(product)
        return product

    def delete(self, product_id: str) -> None:
        product = self.get(product_id)
        in_use = self.session.scalar(
            select(func.count(ShoppingItem.id)).where(
                ShoppingItem.product_id == product.id
            )
        )
        if in_use:
            raise ProductInUseError(
                "Product is used by one or more shopping lists and cannot be deleted"
            )
        self.session.delete(product)
        self.session.commit()
        logger.info(f"product_deleted: id={product_id}")
