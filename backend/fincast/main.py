"""
main.py — FastAPI Application Entrypoint

Purpose:
- Initialize application services (logging, config, DB tables).
- Register API routers.
- Define root-level health/status endpoints.
- Provide `app` object used by ASGI server (uvicorn / hypercorn).

This file should stay clean — no business logic here.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fincast.api.v1 import financial_data, investment_models, models, projects, valuation_parameters
from fincast.core.config import settings
from fincast.core.database import init_db
from fincast.core.logging import configure_logging, get_logger

# -----------------------------------------------------------------------------
# App Initialization
# -----------------------------------------------------------------------------

configure_logging(settings.LOG_LEVEL)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    init_db()
    logger.info("Database tables ready")
    yield


app = FastAPI(
    title="fincast Backend",
    description="Financial projection engine + saved-model persistence",
    version="0.1.0",
    lifespan=lifespan,
)

# -----------------------------------------------------------------------------
# CORS (browser client)
# -----------------------------------------------------------------------------

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -----------------------------------------------------------------------------
# Router Registration
# -----------------------------------------------------------------------------

# Mount all v1 API routers under the configured prefix (default /api/v1)
app.include_router(financial_data.router, prefix=settings.API_PREFIX)
app.include_router(valuation_parameters.router, prefix=settings.API_PREFIX)
app.include_router(investment_models.router, prefix=settings.API_PREFIX)
app.include_router(projects.router, prefix=settings.API_PREFIX)
app.include_router(models.router, prefix=settings.API_PREFIX)

# -----------------------------------------------------------------------------
# Health Check
# -----------------------------------------------------------------------------

@app.get("/")
def root():
    return {"status": "ok", "message": "fincast backend running"}
