import uuid
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Enum as SAEnum,
    ForeignKey,
    Index,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class TransactionType(str, Enum):
    income = "income"
    expense = "expense"


class TransactionCategory(str, Enum):
    # income
    salario = "salario"
    freelance = "freelance"
    beneficio = "beneficio"
    presente = "presente"
    aluguel = "aluguel"
    dividendos = "dividendos"
    outros_ganhos = "outros_ganhos"
    # expense
    moradia = "moradia"
    alimentacao = "alimentacao"
    transporte = "transporte"
    saude = "saude"
    educacao = "educacao"
    lazer = "lazer"
    vestuario = "vestuario"
    contas = "contas"
    credito = "credito"
    pets = "pets"
    viagens = "viagens"
    tecnologia = "tecnologia"
    beleza = "beleza"
    esportes = "esportes"
    cultura = "cultura"
    presentes = "presentes"
    doacoes = "doacoes"
    seguros = "seguros"
    impostos = "impostos"
    investimentos = "investimentos"
    outros_gastos = "outros_gastos"


class ProductCategory(str, Enum):
    laticinios = "laticinios"
    carnes = "carnes"
    graos = "graos"
    bebidas = "bebidas"
    hortifruti = "hortifruti"
    padaria = "padaria"
    higiene = "higiene"
    limpeza = "limpeza"
    outros = "outros"
    bebidas_alcoolicas = "bebidas_alcoolicas"
    bebidas_nao_alcoolicas = "bebidas_nao_alcoolicas"
    carnes_bovinas = "carnes_bovinas"
    carnes_suinas = "carnes_suinas"
    carnes_aves = "carnes_aves"
    carnes_peixes = "carnes_peixes"
    carnes_frios = "carnes_frios"
    massas_frescas = "massas_frescas"
    massas_secas = "massas_secas"
    graos_cereais = "graos_cereais"
    graos_leguminosas = "graos_leguminosas"
    hortifruti_verduras = "hortifruti_verduras"
    hortifruti_legumes = "hortifruti_legumes"
    hortifruti_frutas = "hortifruti_frutas"
    padaria_paes = "padaria_paes"
    padaria_bolos = "padaria_bolos"
    padaria_salgados = "padaria_salgados"
    laticinios_leites = "laticinios_leites"
    laticinios_queijos = "laticinios_queijos"
    laticinios_iogurtes = "laticinios_iogurtes"
    laticinios_manteigas = "laticinios_manteigas"
    higiene_pessoal = "higiene_pessoal"
    higiene_bucal = "higiene_bucal"
    limpeza_roupas = "limpeza_roupas"
    limpeza_casa = "limpeza_casa"
    limpeza_cozinha = "limpeza_cozinha"
    pet_shop = "pet_shop"
    bebes = "bebes"
    congelados = "congelados"
    enlatados = "enlatados"
    temperos = "temperos"
    doces = "doces"
    snacks = "snacks"
    cafe = "cafe"
    chas = "chas"
    suplementos = "suplementos"
    medicamentos = "medicamentos"


class UnitMeasure(str, Enum):
    kg = "kg"
    g = "g"
    l = "l"  # noqa: E741
    ml = "ml"
    un = "un"


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )


class PlanningList(Base, TimestampMixin):
    __tablename__ = "planning_lists"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)

    transactions: Mapped[list["PlanningTransaction"]] = relationship(
        "PlanningTransaction",
        back_populates="planning_list",
        cascade="all, delete-orphan",
    )


class PlanningTransaction(Base, TimestampMixin):
    __tablename__ = "planning_transactions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    list_id: Mapped[str] = mapped_column(
        ForeignKey("planning_lists.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    description: Mapped[str] = mapped_column(String(200), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    type: Mapped[TransactionType] = mapped_column(
        SAEnum(TransactionType), nullable=False
    )
    category_id: Mapped[TransactionCategory] = mapped_column(
        SAEnum(TransactionCategory), nullable=False
    )
    date: Mapped[date] = mapped_column(Date, default=date.today, nullable=False)
    is_paid: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    observation: Mapped[Optional[str]] = mapped_column(Text)

    planning_list: Mapped["PlanningList"] = relationship(
        "PlanningList", back_populates="transactions"
    )

    __table_args__ = (
        Index("ix_planning_txn_user_list", "user_id", "list_id"),
        Index("ix_planning_txn_user_description", "user_id", "description", "type"),
        CheckConstraint("amount >= 0", name="ck_planning_txn_amount_positive"),
    )


class Product(Base, TimestampMixin):
    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    brand: Mapped[Optional[str]] = mapped_column(String(120))
    category: Mapped[ProductCategory] = mapped_column(
        SAEnum(ProductCategory), nullable=False
    )
    unit: Mapped[UnitMeasure] = mapped_column(
        SAEnum(UnitMeasure), default=UnitMeasure.un, nullable=False
    )
    last_price: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2))

    items: Mapped[list["ShoppingItem"]] = relationship(
        "ShoppingItem", back_populates="product"
    )

    __table_args__ = (
        Index("ix_products_user_name", "user_id", "name"),
        CheckConstraint(
            "last_price IS NULL OR last_price >= 0",
            name="ck_products_last_price_positive",
        ),
    )


class ShoppingList(Base, TimestampMixin):
    __tablename__ = "shopping_lists"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    budget: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), default=Decimal("0"), nullable=False
    )

    items: Mapped[list["ShoppingItem"]] = relationship(
        "ShoppingItem",
        back_populates="shopping_list",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        CheckConstraint("budget >= 0", name="ck_shopping_lists_budget_positive"),
    )


class ShoppingItem(Base, TimestampMixin):
    __tablename__ = "shopping_items"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    list_id: Mapped[str] = mapped_column(
        ForeignKey("shopping_lists.id", ondelete="CASCADE"), nullable=False
    )
    product_id: Mapped[str] = mapped_column(
        ForeignKey("products.id"), nullable=False
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    quantity: Mapped[Decimal] = mapped_column(
        Numeric(10, 3), default=Decimal("1"), nullable=False
    )
    price: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), default=Decimal("0"), nullable=False
    )
    checked: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    shopping_list: Mapped["ShoppingList"] = relationship(
        "ShoppingList", back_populates="items"
    )
    product: Mapped["Product"] = relationship("Product", back_populates="items")

    __table_args__ = (
        Index("ix_shopping_items_user_list", "user_id", "list_id"),
        Index("ix_shopping_items_product", "product_id"),
        CheckConstraint("quantity > 0", name="ck_shopping_items_quantity_positive"),
        CheckConstraint("price >= 0", name="ck_shopping_items_price_positive"),
    )
