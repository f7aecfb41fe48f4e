from pydantic import BaseModel
from datetime import date

from app.core.inventory_health import AggregatePolicy, InventoryStatus
from app.schemas.product import ProductResponse


class InventoryItemResponse(ProductResponse):
    status: InventoryStatus


class InventorySummaryResponse(BaseModel):
    as_of: date
    policy: AggregatePolicy
    total: int
    low_stock: int
    expired: int
    expiring_soon: int
    healthy: int
