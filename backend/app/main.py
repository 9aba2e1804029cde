from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from core.config import settings
from core.database import engine
from core.exceptions import register_exception_handlers
from core.redis_config import close_redis_connection, redis_health_check
from app.startup import configure_startup_logging, run_startup_checks

# ========== Catalog ==========
from modules.catalog import catalog_router

# ========== Cart ==========
from modules.cart import cart_router

# ========== Orders ==========
from modules.orders.routes.order_routes import router as order_router

# ========== Customers & Loyalty ==========
from modules.customers import customer_router
from modules.loyalty.routes.loyalty_routes import router as loyalty_router

configure_startup_logging()

app = FastAPI(
    title="O'Sushi Ordering API",
    description="""
    Ordering backend for the O'Sushi storefront.

    ## Features

    * **Catalog** - Categories, products and their variants
    * **Cart** - Per-session carts priced from the catalog
    * **Orders** - Checkout, order history and status tracking
    * **Loyalty** - Points earned on every order, redeemable at checkout

    ## Sessions and identity

    Cart endpoints and checkout read the cart named by the `X-Cart-Session`
    header. The purchaser is identified by `X-User-Id`; requests without it
    check out as guests.
    """,
    version="1.0.0",
)

# Register exception handlers for consistent error responses
register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(catalog_router)
app.include_router(cart_router)
app.include_router(order_router)
app.include_router(customer_router)
app.include_router(loyalty_router)


@app.on_event("startup")
async def startup_event():
    """Initialize services on application startup"""
    run_startup_checks()


@app.on_event("shutdown")
async def shutdown_event():
    close_redis_connection()


@app.get("/")
def read_root():
    return {"message": "O'Sushi ordering backend is running"}


@app.get("/health")
def health_check():
    """Liveness plus the state of the database and the cart store"""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        database = {"status": "healthy"}
    except SQLAlchemyError as e:
        database = {"status": "unhealthy", "message": str(e)}

    return {
        "status": "healthy" if database["status"] == "healthy" else "degraded",
        "environment": settings.environment,
        "ordering_enabled": settings.ordering_enabled,
        "cart_storage": settings.cart_storage_backend,
        "database": database,
        "redis": redis_health_check(),
    }
