"""initial schema

Revision ID: 202610191200
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""

from alembic import op
import sqlalchemy as sa


revision = "202610191200"
down_revision = None
branch_labels = None
depends_on = None


TRANSACTION_CATEGORIES = (
    "salario",
    "freelance",
    "beneficio",
    "presente",
    "aluguel",
    "dividendos",
    "outros_ganhos",
    "moradia",
    "alimentacao",
    "transporte",
    "saude",
    "educacao",
    "lazer",
    "vestuario",
    "contas",
    "credito",
    "pets",
    "viagens",
    "tecnologia",
    "beleza",
    "esportes",
    "cultura",
    "presentes",
    "doacoes",
    "seguros",
    "impostos",
    "investimentos",
    "outros_gastos",
)

PRODUCT_CATEGORIES = (
    "laticinios",
    "carnes",
    "graos",
    "bebidas",
    "hortifruti",
    "padaria",
    "higiene",
    "limpeza",
    "outros",
    "bebidas_alcoolicas",
    "bebidas_nao_alcoolicas",
    "carnes_bovinas",
    "carnes_suinas",
    "carnes_aves",
    "carnes_peixes",
    "carnes_frios",
    "massas_frescas",
    "massas_secas",
    "graos_cereais",
    "graos_leguminosas",
    "hortifruti_verduras",
    "hortifruti_legumes",
    "hortifruti_frutas",
    "padaria_paes",
    "padaria_bolos",
    "padaria_salgados",
    "laticinios_leites",
    "laticinios_queijos",
    "laticinios_iogurtes",
    "laticinios_manteigas",
    "higiene_pessoal",
    "higiene_bucal",
    "limpeza_roupas",
    "limpeza_casa",
    "limpeza_cozinha",
    "pet_shop",
    "bebes",
    "congelados",
    "enlatados",
    "temperos",
    "doces",
    "snacks",
    "cafe",
    "chas",
    "suplementos",
    "medicamentos",
)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def upgrade():
    op.create_table(
        "planning_lists",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_planning_lists_user_id", "planning_lists", ["user_id"])

    op.create_table(
        "planning_transactions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "list_id",
            sa.String(length=36),
            sa.ForeignKey("planning_lists.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("description", sa.String(length=200), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column(
            "type", sa.Enum("income", "expense", name="transactiontype"), nullable=False
        ),
        sa.Column(
            "category_id",
            sa.Enum(*TRANSACTION_CATEGORIES, name="transactioncategory"),
            nullable=False,
        ),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("is_paid", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("observation", sa.Text()),
        *_timestamps(),
        sa.CheckConstraint("amount >= 0", name="ck_planning_txn_amount_positive"),
    )
    op.create_index(
        "ix_planning_txn_user_list", "planning_transactions", ["user_id", "list_id"]
    )
    op.create_index(
        "ix_planning_txn_user_description",
        "planning_transactions",
        ["user_id", "description", "type"],
    )

    op.create_table(
        "products",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("brand", sa.String(length=120)),
        sa.Column(
            "category",
            sa.Enum(*PRODUCT_CATEGORIES, name="productcategory"),
            nullable=False,
        ),
        sa.Column(
            "unit",
            sa.Enum("kg", "g", "l", "ml", "un", name="unitmeasure"),
            nullable=False,
            server_default="un",
        ),
        sa.Column("last_price", sa.Numeric(12, 2)),
        *_timestamps(),
        sa.CheckConstraint(
            "last_price IS NULL OR last_price >= 0",
            name="ck_products_last_price_positive",
        ),
    )
    op.create_index("ix_products_user_name", "products", ["user_id", "name"])

    op.create_table(
        "shopping_lists",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("budget", sa.Numeric(12, 2), nullable=False, server_default="0"),
        *_timestamps(),
        sa.CheckConstraint("budget >= 0", name="ck_shopping_lists_budget_positive"),
    )
    op.create_index("ix_shopping_lists_user_id", "shopping_lists", ["user_id"])

    op.create_table(
        "shopping_items",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "list_id",
            sa.String(length=36),
            sa.ForeignKey("shopping_lists.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "product_id",
            sa.String(length=36),
            sa.ForeignKey("products.id"),
            nullable=False,
        ),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("quantity", sa.Numeric(10, 3), nullable=False, server_default="1"),
        sa.Column("price", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("checked", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.CheckConstraint("quantity > 0", name="ck_shopping_items_quantity_positive"),
        sa.CheckConstraint("price >= 0", name="ck_shopping_items_price_positive"),
    )
    op.create_index(
        "ix_shopping_items_user_list", "shopping_items", ["user_id", "list_id"]
    )
    op.create_index("ix_shopping_items_product", "shopping_items", ["product_id"])


def downgrade():
    op.drop_index("ix_shopping_items_product", table_name="shopping_items")
    op.drop_index("ix_shopping_items_user_list", table_name="shopping_items")
    op.drop_table("shopping_items")
    op.drop_index("ix_shopping_lists_user_id", table_name="shopping_lists")
    op.drop_table("shopping_lists")
    op.drop_index("ix_products_user_name", table_name="products")
    op.drop_table("products")
    op.drop_index("ix_planning_txn_user_description", table_name="planning_transactions")
    op.drop_index("ix_planning_txn_user_list", table_name="planning_transactions")
    op.drop_table("planning_transactions")
    op.drop_index("ix_planning_lists_user_id", table_name="planning_lists")
    op.drop_table("planning_lists")
