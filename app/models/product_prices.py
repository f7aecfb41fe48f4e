# app/models/product_prices.py

from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from app.database import Base


class ProductPrice(Base):
    __tablename__ = "product_prices"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    label = Column(String, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)

    product = relationship("Product", back_populates="prices")

    __table_args__ = (
        CheckConstraint("amount >= 0", name="ck_price_amount_non_negative"),
    )
