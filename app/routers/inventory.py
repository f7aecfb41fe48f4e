# app/routers/inventory.py

from datetime import date, datetime, timezone

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session, joinedload, selectinload

from app.database import get_db
from app.core.inventory_health import (
    AggregatePolicy,
    InventoryStatus,
    aggregate,
    classify,
    filter_by_status,
    search,
)
from app.models.products import Product
from app.schemas.inventory import (
    InventoryItemResponse,
    InventorySummaryResponse,
)
from app.schemas.product import ProductResponse

router = APIRouter(
    prefix="/inventory",
    tags=["Inventory"],
)


def _load_products(db: Session):
    return (
        db.query(Product)
        .options(
            joinedload(Product.category),
            joinedload(Product.unit),
            selectinload(Product.prices),
        )
        .order_by(Product.id.asc())
        .all()
    )


def _resolve_as_of(as_of: date | None) -> date:
    return as_of or datetime.now(timezone.utc).date()


@router.get("", response_model=list[InventoryItemResponse])
def list_inventory(
    status_filter: InventoryStatus | None = Query(None, alias="status"),
    search_term: str | None = Query(None, alias="search"),
    as_of: date | None = Query(None),
    policy: AggregatePolicy = Query(AggregatePolicy.PARTITION),
    db: Session = Depends(get_db),
):
    today = _resolve_as_of(as_of)

    products = filter_by_status(_load_products(db), status_filter, today, policy)
    products = search(products, search_term)

    return [
        InventoryItemResponse(
            **ProductResponse.model_validate(product).model_dump(),
            status=classify(product, today),
        )
        for product in products
    ]


@router.get("/summary", response_model=InventorySummaryResponse)
def inventory_summary(
    as_of: date | None = Query(None),
    policy: AggregatePolicy = Query(AggregatePolicy.PARTITION),
    db: Session = Depends(get_db),
):
    today = _resolve_as_of(as_of)

    summary = aggregate(_load_products(db), today, policy)

    return {
        "as_of": today,
        "policy": policy,
        **summary.as_dict(),
    }
