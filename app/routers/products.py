# app/routers/products.py

import logging

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, selectinload

from app.database import get_db
from app.core.errors import InventoryError, StorageError
from app.core.inventory_health import search
from app.core.stock import clean_price_tiers, reconcile, replace_prices
from app.core.storage import save_upload
from app.models.categories import Category, Subcategory
from app.models.product_prices import ProductPrice
from app.models.products import Product
from app.models.units import Unit
from app.schemas.product import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
)

logger = logging.getLogger("app")

router = APIRouter(
    prefix="/products",
    tags=["Products"],
)


def _product_query(db: Session):
    return db.query(Product).options(
        joinedload(Product.category),
        joinedload(Product.unit),
        selectinload(Product.prices),
    )


def _get_product_or_404(db: Session, product_id: int) -> Product:
    product = _product_query(db).filter(Product.id == product_id).first()

    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found",
        )

    return product


def _check_references(db: Session, values: dict) -> dict:
    """Validate the referenced rows and return the values with the category filled in."""
    values = dict(values)
    category_id = values.get("category_id")
    subcategory_id = values.get("subcategory_id")
    unit_id = values.get("unit_id")

    if category_id is not None and db.get(Category, category_id) is None:
        raise HTTPException(status_code=404, detail="Category not found")

    if subcategory_id is not None:
        subcategory = db.get(Subcategory, subcategory_id)
        if subcategory is None:
            raise HTTPException(status_code=404, detail="Subcategory not found")

        # A subcategory implies its category
        if category_id is None:
            values["category_id"] = subcategory.category_id
        elif subcategory.category_id != category_id:
            raise HTTPException(
                status_code=400,
                detail="Subcategory does not belong to the selected category",
            )

    if unit_id is not None and db.get(Unit, unit_id) is None:
        raise HTTPException(status_code=404, detail="Unit not found")

    return values


@router.get("", response_model=list[ProductResponse])
def list_products(
    search_term: str | None = Query(None, alias="search"),
    db: Session = Depends(get_db),
):
    products = _product_query(db).order_by(Product.id.asc()).all()

    return search(products, search_term)


@router.get("/{product_id}", response_model=ProductResponse)
def get_product(
    product_id: int,
    db: Session = Depends(get_db),
):
    return _get_product_or_404(db, product_id)


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_product(
    product_data: ProductCreate,
    db: Session = Depends(get_db),
):
    values = _check_references(db, product_data.model_dump(exclude={"prices"}))

    valid_prices = clean_price_tiers(product_data.prices)

    if product_data.prices and not valid_prices:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="All price entries are invalid or empty",
        )

    product = Product(
        **values,
        prices=[
            ProductPrice(label=label, amount=amount)
            for label, amount in valid_prices
        ],
    )

    try:
        db.add(product)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Failed to create product {product_data.name!r}")
        raise StorageError("Unable to create product")

    logger.info(f"Created product {product.id} ({product.name})")

    return _get_product_or_404(db, product.id)


@router.put("/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: int,
    product_data: ProductUpdate,
    db: Session = Depends(get_db),
):
    product = _get_product_or_404(db, product_id)

    changes = product_data.model_dump(
        exclude_unset=True,
        exclude={"prices", "stock_quantity", "entered_amount"},
    )

    # Validate against the references the product will end up with
    references = _check_references(
        db,
        {
            "category_id": changes.get("category_id", product.category_id),
            "subcategory_id": changes.get("subcategory_id", product.subcategory_id),
            "unit_id": changes.get("unit_id", product.unit_id),
        },
    )

    if references["category_id"] != product.category_id:
        changes["category_id"] = references["category_id"]

    current_stock = (
        product_data.stock_quantity
        if product_data.stock_quantity is not None
        else product.stock_quantity
    )

    # Field update and price replacement share one transaction
    try:
        product.stock_quantity = reconcile(current_stock, product_data.entered_amount)

        for field, value in changes.items():
            setattr(product, field, value)

        if product_data.prices is not None:
            replace_prices(db, product.id, product_data.prices)

        db.commit()

    except InventoryError:
        db.rollback()
        raise

    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Failed to update product {product_id}")
        raise StorageError("Unable to update product")

    logger.info(
        f"Updated product {product_id} "
        f"stock: {current_stock} -> {product.stock_quantity}"
    )

    return _get_product_or_404(db, product_id)


@router.post("/{product_id}/image", response_model=ProductResponse)
def upload_product_image(
    product_id: int,
    image: UploadFile = File(...),
    db: Session = Depends(get_db),
):
    product = _get_product_or_404(db, product_id)

    product.image_url = save_upload(image)
    db.commit()

    return _get_product_or_404(db, product_id)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: int,
    db: Session = Depends(get_db),
):
    product = db.query(Product).filter(Product.id == product_id).first()

    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found",
        )

    db.delete(product)
    db.commit()

    logger.info(f"Deleted product {product_id}")

    return None
