"""
Mesa - restaurant reservation backend (FastAPI application)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
import structlog

from app.config import settings
from app.api import restaurants, shifts, tables, reservations
from app.engine import InvalidDateFormat

# Configure structured logging
logging.basicConfig(format="%(message)s", level=settings.log_level.upper())

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
        if settings.log_format == "json"
        else structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    logger.info("Starting Mesa API", version="1.0.0")
    yield
    logger.info("Shutting down Mesa API")


# Create FastAPI application
app = FastAPI(
    title="Mesa",
    description="Table and shift availability for restaurant reservations",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InvalidDateFormat)
async def invalid_date_handler(request: Request, exc: InvalidDateFormat):
    """Malformed dates or clock times are client errors"""
    return JSONResponse(status_code=400, content={"detail": str(exc)})


# Health check endpoints
@app.get("/health")
async def health():
    """Basic health check"""
    return {"status": "healthy", "service": "api", "version": "1.0.0"}


@app.get("/health/ready")
async def ready():
    """Readiness check with database verification"""
    from app.database import SessionLocal
    
    checks = {}
    
    try:
        async with SessionLocal() as db:
            await db.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except Exception as e:
        checks["database"] = f"failed: {str(e)}"
    
    all_ok = all(v == "ok" for v in checks.values())
    
    return {
        "status": "ready" if all_ok else "not_ready",
        "checks": checks,
    }


# Include API routers
app.include_router(restaurants.router, prefix="/restaurants", tags=["Restaurants"])
app.include_router(shifts.router, prefix="/restaurants/{restaurant_id}/shifts", tags=["Shifts"])
app.include_router(tables.router, prefix="/restaurants/{restaurant_id}/tables", tags=["Tables"])
app.include_router(
    tables.environments_router,
    prefix="/restaurants/{restaurant_id}/environments",
    tags=["Environments"],
)
app.include_router(
    reservations.router,
    prefix="/restaurants/{restaurant_id}/reservations",
    tags=["Reservations"],
)


if __name__ == "__main__":
    import uvicorn
    
    uvicorn.run(
        "app.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug,
    )
