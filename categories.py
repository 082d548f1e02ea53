from typing import Optional

from models import ProductCategory, TransactionCategory, TransactionType, UnitMeasure


class UnknownCategoryError(ValueError):
    pass


INCOME_CATEGORY_LABELS: dict[TransactionCategory, str] = {
    TransactionCategory.salario: "Salário",
    TransactionCategory.freelance: "Freelance",
    TransactionCategory.beneficio: "Benefício",
    TransactionCategory.presente: "Presente",
    TransactionCategory.aluguel: "Aluguel",
    TransactionCategory.dividendos: "Dividendos",
    TransactionCategory.outros_ganhos: "Outros Ganhos",
}

EXPENSE_CATEGORY_LABELS: dict[TransactionCategory, str] = {
    TransactionCategory.moradia: "Moradia",
    TransactionCategory.alimentacao: "Alimentação",
    TransactionCategory.transporte: "Transporte",
    TransactionCategory.saude: "Saúde",
    TransactionCategory.educacao: "Educação",
    TransactionCategory.lazer: "Lazer",
    TransactionCategory.vestuario: "Vestuário",
    TransactionCategory.contas: "Contas",
    TransactionCategory.credito: "Crédito",
    TransactionCategory.pets: "Pets",
    TransactionCategory.viagens: "Viagens",
    TransactionCategory.tecnologia: "Tecnologia",
    TransactionCategory.beleza: "Beleza",
    TransactionCategory.esportes: "Esportes",
    TransactionCategory.cultura: "Cultura",
    TransactionCategory.presentes: "Presentes",
    TransactionCategory.doacoes: "Doações",
    TransactionCategory.seguros: "Seguros",
    TransactionCategory.impostos: "Impostos",
    TransactionCategory.investimentos: "Investimentos",
    TransactionCategory.outros_gastos: "Outros Gastos",
}

PRODUCT_CATEGORY_LABELS: dict[ProductCategory, str] = {
    ProductCategory.laticinios: "Laticínios",
    ProductCategory.carnes: "Carnes",
    ProductCategory.graos: "Grãos",
    ProductCategory.bebidas: "Bebidas",
    ProductCategory.hortifruti: "Hortifruti",
    ProductCategory.padaria: "Padaria",
    ProductCategory.higiene: "Higiene",
    ProductCategory.limpeza: "Limpeza",
    ProductCategory.outros: "Outros",
    ProductCategory.bebidas_alcoolicas: "Bebidas Alcoólicas",
    ProductCategory.bebidas_nao_alcoolicas: "Bebidas Não Alcoólicas",
    ProductCategory.carnes_bovinas: "Carnes Bovinas",
    ProductCategory.carnes_suinas: "Carnes Suínas",
    ProductCategory.carnes_aves: "Aves",
    ProductCategory.carnes_peixes: "Peixes",
    ProductCategory.carnes_frios: "Frios",
    ProductCategory.massas_frescas: "Massas Frescas",
    ProductCategory.massas_secas: "Massas Secas",
    ProductCategory.graos_cereais: "Cereais",
    ProductCategory.graos_leguminosas: "Leguminosas",
    ProductCategory.hortifruti_verduras: "Verduras",
    ProductCategory.hortifruti_legumes: "Legumes",
    ProductCategory.hortifruti_frutas: "Frutas",
    ProductCategory.padaria_paes: "Pães",
    ProductCategory.padaria_bolos: "Bolos",
    ProductCategory.padaria_salgados: "Salgados",
    ProductCategory.laticinios_leites: "Leites",
    ProductCategory.laticinios_queijos: "Queijos",
    ProductCategory.laticinios_iogurtes: "Iogurtes",
    ProductCategory.laticinios_manteigas: "Manteigas",
    ProductCategory.higiene_pessoal: "Higiene Pessoal",
    ProductCategory.higiene_bucal: "Higiene Bucal",
    ProductCategory.limpeza_roupas: "Limpeza de Roupas",
    ProductCategory.limpeza_casa: "Limpeza da Casa",
    ProductCategory.limpeza_cozinha: "Limpeza da Cozinha",
    ProductCategory.pet_shop: "Pet Shop",
    ProductCategory.bebes: "Bebês",
    ProductCategory.congelados: "Congelados",
    ProductCategory.enlatados: "Enlatados",
    ProductCategory.temperos: "Temperos",
    ProductCategory.doces: "Doces",
    ProductCategory.snacks: "Snacks",
    ProductCategory.cafe: "Café",
    ProductCategory.chas: "Chás",
    ProductCategory.suplementos: "Suplementos",
    ProductCategory.medicamentos: "Medicamentos",
}

UNIT_LABELS: dict[UnitMeasure, str] = {
    UnitMeasure.kg: "Quilograma",
    UnitMeasure.g: "Grama",
    UnitMeasure.l: "Litro",
    UnitMeasure.ml: "Mililitro",
    UnitMeasure.un: "Unidade",
}

TRANSACTION_GROUP_LABELS: dict[TransactionType, str] = {
    TransactionType.income: "Receitas",
    TransactionType.expense: "Despesas",
}


def parse_transaction_category(value: object) -> TransactionCategory:
    if isinstance(value, TransactionCategory):
        return value
    try:
        return TransactionCategory(str(value).strip())
    except ValueError as exc:
        raise UnknownCategoryError(f"Unknown transaction category: {value!r}") from exc


def parse_product_category(value: object) -> ProductCategory:
    if isinstance(value, ProductCategory):
        return value
    try:
        return ProductCategory(str(value).strip())
    except ValueError as exc:
        raise UnknownCategoryError(f"Unknown product category: {value!r}") from exc


def categories_for(txn_type: TransactionType) -> dict[TransactionCategory, str]:
    if txn_type == TransactionType.income:
        return INCOME_CATEGORY_LABELS
    return EXPENSE_CATEGORY_LABELS


def category_type(category: TransactionCategory) -> TransactionType:
    if category in INCOME_CATEGORY_LABELS:
        return TransactionType.income
    return TransactionType.expense


def format_category(category: TransactionCategory) -> str:
    category = parse_transaction_category(category)
    return INCOME_CATEGORY_LABELS.get(category) or EXPENSE_CATEGORY_LABELS[category]


def format_product_category(category: ProductCategory) -> str:
    return PRODUCT_CATEGORY_LABELS[parse_product_category(category)]


def format_unit(unit: UnitMeasure) -> str:
    return UNIT_LABELS[UnitMeasure(unit)]


def transaction_category_options(
    txn_type: Optional[TransactionType] = None,
) -> list[dict[str, str]]:
    types = [txn_type] if txn_type else [TransactionType.income, TransactionType.expense]
    return [
        {
            "value": category.value,
            "label": label,
            "group": TRANSACTION_GROUP_LABELS[t],
        }
        for t in types
        for category, label in categories_for(t).items()
    ]


def product_category_options() -> list[dict[str, str]]:
    return [
        {"value": category.value, "label": label}
        for category, label in PRODUCT_CATEGORY_LABELS.items()
    ]
