import logging
import uuid
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request, Response
from sqlalchemy.orm import Session

from aggregation import (
    ShoppingItemFilters,
    ShoppingTotals,
    TransactionFilters,
    TransactionTotals,
    compute_shopping_totals,
    compute_transaction_totals,
    filter_shopping_items,
    filter_transactions,
    index_products,
    line_value,
    sort_transactions,
)
from auth import current_user_id
from categories import (
    UnknownCategoryError,
    format_category,
    format_product_category,
    format_unit,
    parse_product_category,
    parse_transaction_category,
    product_category_options,
    transaction_category_options,
)
from config import get_settings
from dashboard import build_dashboard
from database import get_db
from models import (
    PlanningList,
    PlanningTransaction,
    Product,
    ShoppingItem,
    ShoppingList,
    TransactionType,
    UnitMeasure,
)
from schemas import (
    PaidStatusIn,
    PlanningListIn,
    ProductIn,
    ShoppingItemIn,
    ShoppingItemUpdate,
    ShoppingListIn,
    TransactionIn,
)
from services import (
    NotFoundError,
    PlanningListService,
    ProductInUseError,
    ProductService,
    ShoppingItemService,
    ShoppingListService,
    TransactionService,
)

logging.basicConfig(level=get_settings().log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="Fluxora")

TYPE_TABS = ("all", "income", "expense", "pending")
TRANSACTION_SORT_FIELDS = ("date", "amount", "description")
SHOPPING_SORT_FIELDS = ("name", "price", "quantity", "category")
SORT_ORDERS = ("asc", "desc")
TRUTHY = ("1", "true", "on", "yes")


def http_error(exc: ValueError) -> HTTPException:
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, ProductInUseError):
        return HTTPException(status_code=409, detail=str(exc))
    return HTTPException(status_code=400, detail=str(exc))


def require_uuid(value: str, what: str) -> str:
    try:
        uuid.UUID(value)
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=f"{what} not found") from exc
    return value


def _choice(request: Request, name: str, choices: tuple[str, ...], default: str) -> str:
    value = (request.query_params.get(name) or default).lower()
    if value not in choices:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid {name}: expected one of {', '.join(choices)}",
        )
    return value


def _flag(request: Request, name: str) -> bool:
    return (request.query_params.get(name) or "").lower() in TRUTHY


def transaction_filters_from_request(request: Request) -> TransactionFilters:
    category_param = (request.query_params.get("category") or "").strip()
    category_id = None
    if category_param and category_param != "all":
        try:
            category_id = parse_transaction_category(category_param)
        except UnknownCategoryError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
    return TransactionFilters(
        type_tab=_choice(request, "tab", TYPE_TABS, "all"),
        search_term=request.query_params.get("q") or "",
        category_id=category_id,
        paid_only=_flag(request, "paid_only"),
    )


def shopping_filters_from_request(request: Request) -> ShoppingItemFilters:
    category_param = (request.query_params.get("category") or "").strip()
    category = None
    if category_param and category_param != "all":
        try:
            category = parse_product_category(category_param)
        except UnknownCategoryError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
    return ShoppingItemFilters(
        search_term=request.query_params.get("q") or "",
        category=category,
        purchased_only=_flag(request, "purchased_only"),
        sort_field=_choice(request, "sort", SHOPPING_SORT_FIELDS, "name"),
        sort_order=_choice(request, "order", SORT_ORDERS, "asc"),
    )


def transaction_totals_out(totals: TransactionTotals) -> dict[str, object]:
    return {
        "income": totals.income,
        "expense": totals.expense,
        "balance": totals.balance,
        "is_positive": totals.is_positive,
    }


def shopping_totals_out(totals: ShoppingTotals) -> dict[str, object]:
    return {
        "budget": totals.budget,
        "spent": totals.spent,
        "remaining": totals.remaining,
        "percentage": totals.percentage,
        "progress_width": totals.progress_width,
        "is_over_budget": totals.is_over_budget,
    }


def transaction_out(txn: PlanningTransaction) -> dict[str, object]:
    return {
        "id": txn.id,
        "list_id": txn.list_id,
        "description": txn.description,
        "amount": float(txn.amount),
        "type": txn.type.value,
        "category_id": txn.category_id.value,
        "category": format_category(txn.category_id),
        "date": txn.date.isoformat(),
        "is_paid": txn.is_paid,
        "observation": txn.observation,
        "created_at": txn.created_at.isoformat(),
    }


def product_out(product: Product) -> dict[str, object]:
    return {
        "id": product.id,
        "name": product.name,
        "brand": product.brand,
        "category": product.category.value,
        "category_label": format_product_category(product.category),
        "unit": UnitMeasure(product.unit).value,
        "unit_label": format_unit(product.unit),
        "last_price": (
            float(product.last_price) if product.last_price is not None else None
        ),
    }


def item_out(item: ShoppingItem, by_id: dict[str, Product]) -> dict[str, object]:
    product = by_id.get(item.product_id)
    return {
        "id": item.id,
        "list_id": item.list_id,
        "product_id": item.product_id,
        "product": product_out(product) if product else None,
        "quantity": float(item.quantity),
        "price": float(item.price),
        "total": line_value(item),
        "checked": item.checked,
    }


def planning_summary_out(planning_list: PlanningList) -> dict[str, object]:
    return {
        "id": planning_list.id,
        "name": planning_list.name,
        "totals": transaction_totals_out(
            compute_transaction_totals(planning_list.transactions)
        ),
    }


def shopping_summary_out(shopping_list: ShoppingList) -> dict[str, object]:
    return {
        "id": shopping_list.id,
        "name": shopping_list.name,
        "item_count": len(shopping_list.items),
        "totals": shopping_totals_out(
            compute_shopping_totals(shopping_list.items, shopping_list.budget)
        ),
    }


@app.get("/api/dashboard")
def api_dashboard(
    db: Session = Depends(get_db), user_id: str = Depends(current_user_id)
):
    try:
        summary = build_dashboard(
            PlanningListService(db, user_id).list_all(),
            ShoppingListService(db, user_id).list_all(),
            ProductService(db, user_id).list_all(),
        )
    except Exception as exc:
        logging.exception("Error building dashboard")
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return {
        "planning": transaction_totals_out(summary.planning),
        "shopping": shopping_totals_out(summary.shopping),
        "top_categories": [
            {
                "category_id": share.category_id,
                "label": share.label,
                "value": share.value,
                "width": share.width,
            }
            for share in summary.top_categories
        ],
        "top_products": [
            {
                "id": stat.id,
                "name": stat.name,
                "frequency": stat.frequency,
                "price_change": stat.price_change,
                "total_spent": stat.total_spent,
            }
            for stat in summary.top_products
        ],
        "alerts": [
            {"kind": alert.kind, "percentage": alert.percentage}
            for alert in summary.alerts
        ],
        "balances": [
            {
                "id": entry.id,
                "name": entry.name,
                "balance": entry.balance,
                "width": entry.width,
                "is_positive": entry.is_positive,
            }
            for entry in summary.balances
        ],
    }


@app.get("/api/categories")
def api_categories(user_id: str = Depends(current_user_id)):
    return {
        "transaction": transaction_category_options(),
        "product": product_category_options(),
        "units": [unit.value for unit in UnitMeasure],
    }


@app.get("/api/planning-lists")
def api_planning_lists(
    request: Request,
    db: Session = Depends(get_db),
    user_id: str = Depends(current_user_id),
):
    lists = PlanningListService(db, user_id).list_all()
    query = (request.query_params.get("q") or "").strip().lower()
    if query:
        lists = [lst for lst in lists if query in lst.name.lower()]
    return {"items": [planning_summary_out(lst) for lst in lists]}


@app.post("/api/planning-lists", status_code=201)
def api_create_planning_list(
    data: PlanningListIn,
    db: Session = Depends(get_db),
    user_id: str = Depends(current_user_id),
):
    planning_list = PlanningListService(db, user_id).create(data)
    return planning_summary_out(planning_list)


@app.get("/api/planning-lists/{list_id}")
def api_planning_list_detail(
    list_id: str,
    request: Request,
    db: Session = Depends(get_db),
    user_id: str = Depends(current_user_id),
):
    require_uuid(list_id, "Planning list")
    filters = transaction_filters_from_request(request)
    sort_field = _choice(request, "sort", TRANSACTION_SORT_FIELDS, "date")
    order = _choice(request, "order", SORT_ORDERS, "desc")
    try:
        planning_list = PlanningListService(db, user_id).get(list_id)
    except ValueError as exc:
        raise http_error(exc) from exc

    transactions = sort_transactions(
        filter_transactions(planning_list.transactions, filters), sort_field, order
    )
    return {
        "id": planning_list.id,
        "name": planning_list.name,
        "totals": transaction_totals_out(
            compute_transaction_totals(planning_list.transactions)
        ),
        "transactions": [transaction_out(txn) for txn in transactions],
    }


@app.patch("/api/planning-lists/{list_id}")
def api_rename_planning_list(
    list_id: str,
    data: PlanningListIn,
    db: Session = Depends(get_db),
    user_id: str = Depends(current_user_id),
):
    require_uuid(list_id, "Planning list")
    try:
        planning_list = PlanningListService(db, user_id).rename(list_id, data)
    except ValueError as exc:
        raise http_error(exc) from exc
    return planning_summary_out(planning_list)


@app.delete("/api/planning-lists/{list_id}", status_code=204)
def api_delete_planning_list(
    list_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(current_user_id),
):
    require_uuid(list_id, "Planning list")
    try:
        PlanningListService(db, user_id).delete(list_id)
    except ValueError as exc:
        raise http_error(exc) from exc
    return Response(status_code=204)


@app.post("/api/planning-lists/{list_id}/transactions", status_code=201)
def api_create_transaction(
    list_id: str,
    data: TransactionIn,
    db: Session = Depends(get_db),
    user_id: str = Depends(current_user_id),
):
    require_uuid(list_id, "Planning list")
    try:
        txn = TransactionService(db, user_id).create(list_id, data)
    except ValueError as exc:
        raise http_error(exc) from exc
    return transaction_out(txn)


@app.get("/api/transactions/suggestion")
def api_transaction_suggestion(
    description: str,
    txn_type: TransactionType = Query(..., alias="type"),
    db: Session = Depends(get_db),
    user_id: str = Depends(current_user_id),
):
    txn = TransactionService(db, user_id).last_matching(description, txn_type)
    if txn is None:
        return {"found": False}
    return {
        "found": True,
        "amount": float(txn.amount),
        "category_id": txn.category_id.value,
    }


@app.put("/api/transactions/{txn_id}")
def api_update_transaction(
    txn_id: str,
    data: TransactionIn,
    db: Session = Depends(get_db),
    user_id: str = Depends(current_user_id),
):
    try:
        txn = TransactionService(db, user_id).update(txn_id, data)
    except ValueError as exc:
        raise http_error(exc) from exc
    return transaction_out(txn)


@app.post("/api/transactions/{txn_id}/paid")
def api_set_transaction_paid(
    txn_id: str,
    data: PaidStatusIn,
    db: Session = Depends(get_db),
    user_id: str = Depends(current_user_id),
):
    try:
        txn = TransactionService(db, user_id).set_paid(txn_id, data.is_paid)
    except ValueError as exc:
        raise http_error(exc) from exc
    return transaction_out(txn)


@app.delete("/api/transactions/{txn_id}", status_code=204)
def api_delete_transaction(
    txn_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(current_user_id),
):
    try:
        TransactionService(db, user_id).delete(txn_id)
    except ValueError as exc:
        raise http_error(exc) from exc
    return Response(status_code=204)


@app.get("/api/shopping-lists")
def api_shopping_lists(
    request: Request,
    db: Session = Depends(get_db),
    user_id: str = Depends(current_user_id),
):
    lists = ShoppingListService(db, user_id).list_all()
    query = (request.query_params.get("q") or "").strip().lower()
    if query:
        lists = [lst for lst in lists if query in lst.name.lower()]
    return {"items": [shopping_summary_out(lst) for lst in lists]}


@app.post("/api/shopping-lists", status_code=201)
def api_create_shopping_list(
    data: ShoppingListIn,
    db: Session = Depends(get_db),
    user_id: str = Depends(current_user_id),
):
    shopping_list = ShoppingListService(db, user_id).create(data)
    return shopping_summary_out(shopping_list)


@app.get("/api/shopping-lists/{list_id}")
def api_shopping_list_detail(
    list_id: str,
    request: Request,
    db: Session = Depends(get_db),
    user_id: str = Depends(current_user_id),
):
    require_uuid(list_id, "Shopping list")
    filters = shopping_filters_from_request(request)
    try:
        shopping_list = ShoppingListService(db, user_id).get(list_id)
    except ValueError as exc:
        raise http_error(exc) from exc

    products = ProductService(db, user_id).list_all()
    by_id = index_products(products)
    partition = filter_shopping_items(shopping_list.items, products, filters)
    return {
        "id": shopping_list.id,
        "name": shopping_list.name,
        "totals": shopping_totals_out(
            compute_shopping_totals(shopping_list.items, shopping_list.budget)
        ),
        "to_buy": [item_out(item, by_id) for item in partition.to_buy],
        "purchased": [item_out(item, by_id) for item in partition.purchased],
    }


@app.patch("/api/shopping-lists/{list_id}")
def api_update_shopping_list(
    list_id: str,
    data: ShoppingListIn,
    db: Session = Depends(get_db),
    user_id: str = Depends(current_user_id),
):
    require_uuid(list_id, "Shopping list")
    try:
        shopping_list = ShoppingListService(db, user_id).update(list_id, data)
    except ValueError as exc:
        raise http_error(exc) from exc
    return shopping_summary_out(shopping_list)


@app.delete("/api/shopping-lists/{list_id}", status_code=204)
def api_delete_shopping_list(
    list_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(current_user_id),
):
    require_uuid(list_id, "Shopping list")
    try:
        ShoppingListService(db, user_id).delete(list_id)
    except ValueError as exc:
        raise http_error(exc) from exc
    return Response(status_code=204)


@app.post("/api/shopping-lists/{list_id}/duplicate", status_code=201)
def api_duplicate_shopping_list(
    list_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(current_user_id),
):
    require_uuid(list_id, "Shopping list")
    try:
        copy = ShoppingListService(db, user_id).duplicate(list_id)
    except ValueError as exc:
        raise http_error(exc) from exc
    return shopping_summary_out(copy)


@app.post("/api/shopping-lists/{list_id}/items", status_code=201)
def api_add_shopping_item(
    list_id: str,
    data: ShoppingItemIn,
    db: Session = Depends(get_db),
    user_id: str = Depends(current_user_id),
):
    require_uuid(list_id, "Shopping list")
    try:
        item = ShoppingItemService(db, user_id).add(list_id, data)
    except ValueError as exc:
        raise http_error(exc) from exc
    return item_out(item, {item.product.id: item.product})


@app.patch("/api/items/{item_id}")
def api_update_shopping_item(
    item_id: str,
    data: ShoppingItemUpdate,
    db: Session = Depends(get_db),
    user_id: str = Depends(current_user_id),
):
    try:
        item = ShoppingItemService(db, user_id).update(item_id, data)
    except ValueError as exc:
        raise http_error(exc) from exc
    return item_out(item, {item.product.id: item.product})


@app.post("/api/items/{item_id}/toggle")
def api_toggle_shopping_item(
    item_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(current_user_id),
):
    try:
        item = ShoppingItemService(db, user_id).toggle(item_id)
    except ValueError as exc:
        raise http_error(exc) from exc
    return item_out(item, {item.product.id: item.product})


@app.delete("/api/items/{item_id}", status_code=204)
def api_delete_shopping_item(
    item_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(current_user_id),
):
    try:
        ShoppingItemService(db, user_id).delete(item_id)
    except ValueError as exc:
        raise http_error(exc) from exc
    return Response(status_code=204)


@app.get("/api/products")
def api_products(
    q: Optional[str] = None,
    db: Session = Depends(get_db),
    user_id: str = Depends(current_user_id),
):
    service = ProductService(db, user_id)
    products = service.search(q) if q else service.list_all()
    return {"items": [product_out(product) for product in products]}


@app.post("/api/products", status_code=201)
def api_create_product(
    data: ProductIn,
    db: Session = Depends(get_db),
    user_id: str = Depends(current_user_id),
):
    return product_out(ProductService(db, user_id).create(data))


@app.put("/api/products/{product_id}")
def api_update_product(
    product_id: str,
    data: ProductIn,
    db: Session = Depends(get_db),
    user_id: str = Depends(current_user_id),
):
    try:
        product = ProductService(db, user_id).update(product_id, data)
    except ValueError as exc:
        raise http_error(exc) from exc
    return product_out(product)


@app.delete("/api/products/{product_id}", status_code=204)
def api_delete_product(
    product_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(current_user_id),
):
    try:
        ProductService(db, user_id).delete(product_id)
    except ValueError as exc:
        logger.info(f"product_delete_rejected: id={product_id} reason={exc}")
        raise http_error(exc) from exc
    return Response(status_code=204)


def main():
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=False)


if __name__ == "__main__":
    main()
