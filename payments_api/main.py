"""
FastAPI application factory and entry point.

This module creates and configures the FastAPI application:
  1. Lifespan manager — logging setup, table creation, currency seeding
  2. CORS middleware — allows the browser frontend to call the API
  3. Exception handlers — maps domain errors to HTTP responses
  4. Router registration — mounts all API endpoint groups under /api

Running locally:
    uvicorn payments_api.main:app --reload

The --reload flag watches for file changes and restarts automatically,
which is ideal for development but should not be used in production.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import payments_api.models  # noqa: F401  (registers every table on Base.metadata)
from payments_api.config import settings
from payments_api.database import engine, Base, AsyncSessionLocal
from payments_api.exceptions import register_exception_handlers
from payments_api.logging_config import configure_logging
from payments_api.routers import auth, bank_accounts, currencies, payments
from payments_api.services.currency_service import seed_currencies

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup:
      Configures logging, creates all tables if they don't exist and seeds
      the currency catalogue. In production you'd manage the schema with
      migrations instead of create_all.

    Shutdown:
      Disposes of the database engine, closing all connections cleanly.
    """
    # --- Startup ---
    configure_logging()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with AsyncSessionLocal() as session:
        inserted = await seed_currencies(session)
        await session.commit()
    logger.info(
        "Payments API started",
        extra={"version": settings.APP_VERSION, "currencies_seeded": inserted},
    )
    yield
    # --- Shutdown ---
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Banking REST API with bank accounts, payments and payment verification",
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# Middleware
# ---------------------------------------------------------------------------

# allow_credentials=True is required for the browser to send the session cookie
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Exception handlers
# ---------------------------------------------------------------------------

register_exception_handlers(app)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------

app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(bank_accounts.router, prefix="/api/bank-accounts", tags=["Bank Accounts"])
app.include_router(currencies.router, prefix="/api/currencies", tags=["Currencies"])
app.include_router(payments.router, prefix="/api/payments", tags=["Payments"])


# ---------------------------------------------------------------------------
# Health check
# ---------------------------------------------------------------------------

@app.get("/health", tags=["Health"])
async def health_check():
    """Liveness probe for load balancers and orchestrators."""
    return {"status": "ok", "version": settings.APP_VERSION}
