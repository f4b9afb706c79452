"""
Main FastAPI application entry point.
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from workforce.config import get_settings
from workforce.database import init_db
from workforce.exceptions import register_exception_handlers
from workforce.logging_config import get_logger
from workforce.routers import actions, admin, auth, inspections, messages, rams, reports, timesheets

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan events for the application.
    Handles startup and shutdown events.
    """
    # Startup
    logger.info(f"🚀 Starting {settings.app_name}...")
    logger.info("📊 Initializing database...")
    await init_db()
    logger.info("✅ Database initialized successfully")
    logger.info(f"🌐 API available at: {settings.api_v1_prefix}")

    yield

    # Shutdown
    logger.info(f"👋 Shutting down {settings.app_name}...")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    ## Workforce Docs API

    Digital paperwork for a haulage and construction workforce.

    ### Entities:
    * **Timesheets**: Weekly hours, sign-off, approval and adjustment
    * **Inspections**: Daily vehicle checks with defect follow-up actions
    * **RAMS**: Risk assessments assigned to employees for signature
    * **Messages**: Toolbox talks and reminders
    * **Reports**: Dashboard statistics, Excel and PDF exports
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include routers
app.include_router(auth.router, prefix=settings.api_v1_prefix)
app.include_router(admin.router, prefix=settings.api_v1_prefix)
app.include_router(timesheets.router, prefix=settings.api_v1_prefix)
app.include_router(inspections.router, prefix=settings.api_v1_prefix)
app.include_router(actions.router, prefix=settings.api_v1_prefix)
app.include_router(rams.router, prefix=settings.api_v1_prefix)
app.include_router(messages.router, prefix=settings.api_v1_prefix)
app.include_router(reports.router, prefix=settings.api_v1_prefix)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": f"Welcome to {settings.app_name} API",
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.app_version,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "workforce.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
