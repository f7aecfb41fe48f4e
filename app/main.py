# Main application file



import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app.database import engine, Base
from app.core.config import settings
from app.core.errors import NotFoundError, StorageError
from app.core.rate_limiter import limiter
from app.core.storage import UPLOAD_URL_PREFIX, ensure_upload_dir
# Register every model on Base before create_all
from app.models import (  # noqa: F401
    categories as category_models,
    product_prices as product_price_models,
    products as product_models,
    units as unit_models,
)
from app.routers import (
    products,
    inventory,
    categories,
    units,
    uploads,
)


# LOGGING CONFIGURATION

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s | %(levelname)s | %(message)s",
)

logger = logging.getLogger("app")


# DATABASE

Base.metadata.create_all(bind=engine)


# APP INIT

app = FastAPI(
    title="Inventory Dashboard API",
    description="Products, price tiers and stock health for the inventory dashboard",
    version="1.0.0",
)


# CORS

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type"],
)


# RATE LIMITING

app.state.limiter = limiter
app.add_exception_handler(
    RateLimitExceeded,
    _rate_limit_exceeded_handler
)


# ERROR HANDLING

@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    logger.error(f"{request.method} {request.url.path} storage failure: {exc}")
    return JSONResponse(status_code=500, content={"detail": str(exc)})


# REQUEST LOGGING MIDDLEWARE

@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()

    response = await call_next(request)

    duration = round((time.time() - start_time) * 1000, 2)

    logger.info(
        f"{request.method} {request.url.path} "
        f"Status: {response.status_code} "
        f"Time: {duration}ms"
    )

    return response


# ROUTERS

app.include_router(products.router)
app.include_router(inventory.router)
app.include_router(categories.router)
app.include_router(units.router)
app.include_router(uploads.router)


# UPLOADED FILES

app.mount(
    UPLOAD_URL_PREFIX,
    StaticFiles(directory=ensure_upload_dir()),
    name="uploads",
)


# ROOT

@app.get("/")
def root():
    logger.info("Health check endpoint called")
    return {"message": "Inventory Dashboard API is running"}
