"""
KundaPay: FastAPI application entry point.

Configures the app, middleware, and registers all API routers.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from kundapay.api import payments, promo_codes, quotes, rates, transfers
from kundapay.config import settings


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    from kundapay.database import engine
    from kundapay.redis_client import redis

    yield

    # Shutdown: close connections
    await engine.dispose()
    await redis.aclose()


app = FastAPI(
    title=settings.APP_NAME,
    description="Money transfers between Gabon, France, China, the USA and Canada.",
    version="0.1.0",
    lifespan=lifespan,
)

# --- CORS Middleware ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Routers ---
app.include_router(quotes.router, prefix="/api/v1/quotes", tags=["Quotes"])
app.include_router(rates.router, prefix="/api/v1/rates", tags=["Rates"])
app.include_router(promo_codes.router, prefix="/api/v1/promo-codes", tags=["Promo codes"])
app.include_router(transfers.router, prefix="/api/v1/transfers", tags=["Transfers"])
app.include_router(payments.router, prefix="/api/v1/payments", tags=["Payments"])


@app.get("/health")
async def health_check():
    """Health check endpoint for load balancers and monitoring."""
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": "0.1.0",
    }
