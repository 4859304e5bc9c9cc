from dotenv import load_dotenv
load_dotenv()

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from arthavidhi.core.config import Settings, settings as default_settings
from arthavidhi.core.db import Database, run_migrations
from arthavidhi.core.errors import BillingError
from arthavidhi.core.logging_config import configure_logging
from arthavidhi.schemas.common import describe_errors

# Routers
from arthavidhi.routes import account, auth, bills, companies, dashboard, system
from arthavidhi.services.user_service import ensure_default_user

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL)

    # ==========================
    # Lifespan: open DB, migrate, seed; dispose on shutdown
    # ==========================
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database = Database(settings.DATABASE_URL)
        run_migrations(database.engine)

        with database.SessionLocal() as db:
            ensure_default_user(db, settings)

        app.state.database = database
        logger.info("%s is running", settings.APP_NAME)
        try:
            yield
        finally:
            database.dispose()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # ==========================
    # CORS (Required for the web frontend)
    # ==========================
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ==========================
    # Error responses: {"error": "..."}
    # ==========================
    @app.exception_handler(BillingError)
    async def billing_error_handler(request: Request, exc: BillingError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=422, content={"error": describe_errors(exc.errors())})

    # ==========================
    # Routers
    # ==========================
    app.include_router(system.router, prefix="/system", tags=["system"])
    app.include_router(auth.router, prefix="/auth", tags=["auth"])
    app.include_router(account.router, prefix="/account", tags=["account"])
    app.include_router(companies.router, prefix="/companies", tags=["companies"])
    app.include_router(bills.router, prefix="/bills", tags=["bills"])
    app.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])

    # ==========================
    # Root Endpoint
    # ==========================
    @app.get("/")
    def root():
        return {
            "service": "arthavidhi-api",
            "status": "running",
            "endpoints": {
                "system": "/system/health",
                "bills": "/bills/",
                "dashboard": "/dashboard/summary",
                "company": "/companies/me",
                "account": "/account/",
                "auth": "/auth/me",
            },
        }

    return app


app = create_app()
