# app/models/products.py

from sqlalchemy import CheckConstraint, Column, Date, DateTime, Float, ForeignKey, Index, Integer, String
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from app.database import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    name_localized = Column(String, nullable=True)
    barcode = Column(String, nullable=True, index=True)
    rating = Column(Float, nullable=True)

    stock_quantity = Column(Integer, nullable=False, default=0)

    production_date = Column(Date, nullable=True)
    expiry_date = Column(Date, nullable=True)

    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    subcategory_id = Column(Integer, ForeignKey("subcategories.id", ondelete="SET NULL"), nullable=True)
    unit_id = Column(Integer, ForeignKey("units.id", ondelete="SET NULL"), nullable=True)

    image_url = Column(String, nullable=True)

    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    category = relationship("Category")
    subcategory = relationship("Subcategory")
    unit = relationship("Unit")
    prices = relationship(
        "ProductPrice",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductPrice.id",
    )

    __table_args__ = (
        Index("ix_products_expiry_date", "expiry_date"),
        CheckConstraint("stock_quantity >= 0", name="ck_stock_quantity_non_negative"),
    )
