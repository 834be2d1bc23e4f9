"""
FastAPI Application Entry Point

Agustin Pizzeria - Order API

Endpoints:
    - GET /api/products: Catalog grouped by category
    - POST /api/orders/calculate: Price a prospective order
    - POST /api/orders: Place an order
    - GET /api/orders/{tracking_id}: Order detail
    - GET / and /dashboard: Live operations dashboard
    - GET /health: System health check

Run:
    python -m pizzeria.main    (or the `pizzeria` console script)
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path

import uvicorn
from fastapi import FastAPI, Depends, Request
from fastapi.responses import JSONResponse, HTMLResponse
from fastapi.templating import Jinja2Templates
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pizzeria.core.config import get_settings, setup_logging
from pizzeria.core.errors import (
    OrderingError,
    ValidationError,
    ProductNotFoundError,
    OrderNotFoundError,
    StoreError,
)
from pizzeria.database import get_db, init_db, engine, async_session_maker
from pizzeria.models import OrderStatus
from pizzeria.schemas import (
    CatalogData,
    CatalogResponse,
    CreatedOrderData,
    ErrorResponse,
    HealthResponse,
    OrderCreateResponse,
    OrderData,
    OrderRequest,
    OrderResponse,
    PricedOrderResponse,
)
from pizzeria.seed import seed_catalog
from pizzeria.services import (
    CatalogReader,
    OrderPricer,
    OrderStore,
    get_catalog_reader,
    get_order_pricer,
    get_order_store,
    group_by_category,
)

# Initialize configuration and logging
settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)

# Template configuration
templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))

STATUS_BADGE_CLASSES = {
    OrderStatus.NEW.value: "bg-blue-100 text-blue-800",
    OrderStatus.PREPARING.value: "bg-yellow-100 text-yellow-800",
    OrderStatus.DELIVERING.value: "bg-purple-100 text-purple-800",
    OrderStatus.COMPLETED.value: "bg-green-100 text-green-800",
}

ERROR_STATUS_CODES = {
    ValidationError: 400,
    ProductNotFoundError: 400,
    OrderNotFoundError: 404,
    StoreError: 500,
}


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown events.
    """
    # Startup
    logger.info("=" * 60)
    logger.info(f"Starting {settings.app_name}")
    logger.info(f"   Version: {settings.app_version}")
    logger.info(f"   Environment: {settings.env_mode.value}")
    logger.info(f"   Debug: {settings.debug}")
    logger.info("=" * 60)

    await init_db()

    if settings.seed_catalog:
        async with async_session_maker() as session:
            await seed_catalog(session)

    logger.info("Application ready")

    yield  # Application runs

    # Shutdown
    logger.info("Shutting down...")
    await engine.dispose()
    logger.info("Cleanup complete")


# =============================================================================
# APPLICATION INSTANCE
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description="Order management API: catalog, quoting, ordering and tracking.",
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins_list,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every incoming request."""
    logger.info(f"Incoming {request.method} request to {request.url}")
    return await call_next(request)


# =============================================================================
# CATALOG ENDPOINTS
# =============================================================================

@app.get(
    "/api/products",
    response_model=CatalogResponse,
    responses={500: {"model": ErrorResponse}},
    tags=["Catalog"],
    summary="List Products by Category",
)
async def list_products(
    catalog: CatalogReader = Depends(get_catalog_reader),
) -> CatalogResponse:
    """Return the whole menu grouped by category, sorted by name in each group."""
    products = await catalog.list_products()
    logger.info(f"Fetched {len(products)} products")
    return CatalogResponse(data=CatalogData(categories=group_by_category(products)))


# =============================================================================
# ORDER API ENDPOINTS
# =============================================================================

@app.post(
    "/api/orders/calculate",
    response_model=PricedOrderResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    tags=["Orders"],
    summary="Price an Order",
)
async def calculate_order(
    order_data: OrderRequest,
    pricer: OrderPricer = Depends(get_order_pricer),
) -> PricedOrderResponse:
    """Quote an order without saving it."""
    priced = await pricer.price_order(order_data.order_items, order_data.customer_address)
    logger.info(f"Order calculation completed. Total: {priced.total:.2f}")
    return PricedOrderResponse(data=priced)


@app.post(
    "/api/orders",
    response_model=OrderCreateResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    tags=["Orders"],
    summary="Create Order",
)
async def create_order(
    order_data: OrderRequest,
    pricer: OrderPricer = Depends(get_order_pricer),
    store: OrderStore = Depends(get_order_store),
) -> OrderCreateResponse:
    """
    Price and place an order.

    The response carries the generated tracking id and the stored order as
    read back from the database.
    """
    priced = await pricer.price_order(order_data.order_items, order_data.customer_address)
    tracking_id = await store.create_order(priced)
    logger.info(f"Order created successfully: {tracking_id}")

    order = await store.get_order(tracking_id)
    return OrderCreateResponse(
        data=CreatedOrderData(tracking_id=tracking_id, order=order)
    )


@app.get(
    "/api/orders/{tracking_id}",
    response_model=OrderResponse,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    tags=["Orders"],
    summary="Get Order",
)
async def get_order(
    tracking_id: str,
    store: OrderStore = Depends(get_order_store),
) -> OrderResponse:
    """Get a specific order by tracking id."""
    order = await store.get_order(tracking_id)
    if order is None:
        raise OrderNotFoundError(tracking_id)
    return OrderResponse(data=OrderData(order=order))


# =============================================================================
# DASHBOARD
# =============================================================================

@app.get("/", response_class=HTMLResponse, tags=["Dashboard"])
@app.get("/dashboard", response_class=HTMLResponse, tags=["Dashboard"])
async def dashboard_page(
    request: Request,
    store: OrderStore = Depends(get_order_store),
) -> HTMLResponse:
    """Render the live orders dashboard."""
    try:
        orders = await store.list_orders()
    except OrderingError as e:
        logger.error(f"Dashboard generation failed: {e.message}")
        return HTMLResponse(
            "<html><body><h1>Error</h1><p>Failed to load orders</p></body></html>",
            status_code=500,
        )

    logger.info(f"Rendering dashboard with {len(orders)} orders")
    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            "app_name": settings.app_name,
            "orders": orders,
            "badge_classes": STATUS_BADGE_CLASSES,
            "refresh_seconds": settings.dashboard_refresh_seconds,
        },
    )


# =============================================================================
# HEALTH
# =============================================================================

@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="System Health Check",
)
async def health_check(
    db: AsyncSession = Depends(get_db)
) -> HealthResponse:
    """Verify the database answers."""
    db_status = "healthy"
    try:
        await db.execute(select(1))
    except Exception as e:
        db_status = f"unhealthy: {str(e)}"
        logger.error(f"Database health check failed: {e}")

    return HealthResponse(
        status="operational" if db_status == "healthy" else "degraded",
        database=db_status,
        timestamp=datetime.now(timezone.utc),
    )


# =============================================================================
# ERROR HANDLERS
# =============================================================================

@app.exception_handler(OrderingError)
async def ordering_exception_handler(request: Request, exc: OrderingError) -> JSONResponse:
    """Map ordering errors to HTTP responses."""
    status_code = ERROR_STATUS_CODES.get(type(exc), 500)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.warning(f"{request.method} {request.url.path}: {exc.message}")

    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": exc.message,
            "timestamp": _now_iso(),
        },
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler."""
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal Server Error",
            "timestamp": _now_iso(),
            "detail": str(exc) if settings.debug else "An unexpected error occurred",
        },
    )


# =============================================================================
# ENTRY POINT
# =============================================================================

def run() -> None:
    """Serve the API with uvicorn on the configured host and port."""
    uvicorn.run(
        "pizzeria.main:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    run()
