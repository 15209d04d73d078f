import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.errors import register_exception_handlers
from app.db.base import Base
from app.db.init_db import backfill_company_status, seed_superadmin
from app.db.session import SessionLocal, engine

# Import all models so SQLAlchemy can discover them for table creation
from app import models  # noqa: F401

# Import API router
from app.api.api import api_router

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create database tables, fix legacy company rows and seed the superadmin."""
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        fixed = backfill_company_status(db)
        if fixed:
            logger.info("Backfilled status on %d company record(s)", fixed)
        seed_superadmin(db)
    finally:
        db.close()
    yield


app = FastAPI(
    title=settings.APP_NAME,
    description="Job board API: companies, employees, housekeeping and public flyers",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS Middleware - allowlist from env (comma-separated)
ALLOWED_ORIGINS = [
    origin.strip()
    for origin in settings.BACKEND_CORS_ORIGINS.split(",")
    if origin.strip()
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
    expose_headers=["*"],
)

register_exception_handlers(app)


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint."""
    return {"message": f"Welcome to {settings.APP_NAME} API"}


# Include API router with /api prefix
app.include_router(api_router, prefix="/api")
