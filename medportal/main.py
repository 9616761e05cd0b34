"""
Main FastAPI application entry point.
Configures the application, middleware, and includes routers.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .admin.router import router as admin_router
from .auth.router import router as auth_router
from .config import settings
from .core.bootstrap import bootstrap_admin_if_needed
from .core.middleware import setup_middlewares
from .database import Database
from .doctors.router import router as doctors_router
from .exceptions import register_exception_handlers

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create missing tables and the first admin, then release the pool on shutdown."""
    database: Database = app.state.database
    logger.info("Starting Healthcare Portal API...")

    database.create_all()
    db = database.session()
    try:
        bootstrap_admin_if_needed(db)
    except Exception:
        logger.exception("Bootstrap process failed")
    finally:
        db.close()

    yield

    database.dispose()
    logger.info("Healthcare Portal API stopped")


def create_app(database: Optional[Database] = None) -> FastAPI:
    """
    Build the application around one database pool.

    Args:
        database: Pool to use; defaults to one built from ``DATABASE_URL``
    """
    app = FastAPI(
        title="Healthcare Portal API",
        description="Authentication, role authorization and account provisioning for the healthcare portal",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.database = database or Database(settings.database_url, pool_pre_ping=True)

    # Register exception handlers
    register_exception_handlers(app)

    # Configure CORS middleware
    origins = [settings.frontend_url, *settings.cors_origins]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Setup custom middleware
    setup_middlewares(app)

    # Include routers
    app.include_router(auth_router)
    app.include_router(admin_router)
    app.include_router(doctors_router)

    @app.get("/")
    def root():
        """
        Root endpoint.

        Returns:
            dict: Simple welcome message
        """
        return {"message": "Welcome to the Healthcare Portal API"}

    @app.get("/health")
    def health_check():
        """
        Health check endpoint for monitoring.
        """
        return {"status": "healthy"}

    return app


app = create_app()
