# =========================================================
# STOCK RECONCILIATION
#
# - New stock level from an operator-entered delta
# - Price tier cleaning
# - Destructive price tier replacement
# =========================================================

from collections.abc import Iterable, Mapping
from decimal import Decimal

from sqlalchemy.orm import Session

from app.core.coercion import MAX_DB_INT, coerce_decimal, coerce_int
from app.core.errors import NotFoundError
from app.models.product_prices import ProductPrice
from app.models.products import Product


def reconcile(current_stock, entered_amount=None) -> int:
    """Add the entered amount to the current stock.

    Blank, malformed or out-of-range inputs count as 0. The result is
    kept between 0 and the largest storable integer, so
    ``reconcile(10, "abc") == 10`` and ``reconcile(2, -5) == 0``.
    """
    current = coerce_int(current_stock, default=0)
    entered = coerce_int(entered_amount, default=0)

    return min(max(current + entered, 0), MAX_DB_INT)


def _tier_value(tier, *names):
    for name in names:
        if isinstance(tier, Mapping):
            if tier.get(name) is not None:
                return tier[name]
        elif getattr(tier, name, None) is not None:
            return getattr(tier, name)
    return None


def clean_price_tiers(tiers: Iterable | None) -> list[tuple[str, Decimal]]:
    """Drop tiers with a blank label or a missing, non-numeric or negative amount."""
    cleaned = []

    for tier in tiers or []:
        if tier is None:
            continue

        label = _tier_value(tier, "label", "name")
        amount = coerce_decimal(_tier_value(tier, "amount", "value"))

        if not isinstance(label, str) or not label.strip():
            continue
        if amount is None or amount < 0:
            continue

        cleaned.append((label.strip(), amount))

    return cleaned


def replace_prices(db: Session, product_id: int, tiers: Iterable | None) -> list[ProductPrice]:
    """Replace every stored price tier of a product with ``tiers``.

    Runs inside the caller's transaction and does not commit: the caller
    commits the whole product update once, or rolls it back.
    """
    product = db.get(Product, product_id)
    if product is None:
        raise NotFoundError("Product", product_id)

    cleaned = clean_price_tiers(tiers)

    # Drop the loaded collection so it cannot resurrect deleted rows
    db.expire(product, ["prices"])

    db.query(ProductPrice).filter(
        ProductPrice.product_id == product_id
    ).delete(synchronize_session="fetch")

    new_prices = [
        ProductPrice(product_id=product_id, label=label, amount=amount)
        for label, amount in cleaned
    ]
    db.add_all(new_prices)
    db.flush()

    return new_prices
