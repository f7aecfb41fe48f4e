# app/routers/categories.py

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session, selectinload

from app.database import get_db
from app.models.categories import Category, Subcategory
from app.schemas.category import (
    CategoryCreate,
    CategoryResponse,
    SubcategoryCreate,
    SubcategoryResponse,
)

logger = logging.getLogger("app")

router = APIRouter(
    prefix="/categories",
    tags=["Categories"],
)


@router.get("", response_model=list[CategoryResponse])
def list_categories(db: Session = Depends(get_db)):
    return (
        db.query(Category)
        .options(selectinload(Category.subcategories))
        .order_by(Category.id.asc())
        .all()
    )


@router.post(
    "",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_category(
    category_data: CategoryCreate,
    db: Session = Depends(get_db),
):
    name = category_data.name.strip()

    existing = db.query(Category).filter(Category.name == name).first()
    if existing:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Category with this name already exists",
        )

    category = Category(name=name)

    db.add(category)
    db.commit()
    db.refresh(category)

    logger.info(f"Created category {category.id} ({category.name})")

    return category


@router.post(
    "/{category_id}/subcategory",
    response_model=SubcategoryResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_subcategory(
    category_id: int,
    subcategory_data: SubcategoryCreate,
    db: Session = Depends(get_db),
):
    category = db.get(Category, category_id)

    if not category:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Category not found",
        )

    name = subcategory_data.name.strip()

    existing = (
        db.query(Subcategory)
        .filter(
            Subcategory.category_id == category_id,
            Subcategory.name == name,
        )
        .first()
    )
    if existing:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Subcategory with this name already exists",
        )

    subcategory = Subcategory(name=name, category_id=category_id)

    db.add(subcategory)
    db.commit()
    db.refresh(subcategory)

    return subcategory
