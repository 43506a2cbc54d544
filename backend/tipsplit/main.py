"""
Main FastAPI application
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.middleware.sessions import SessionMiddleware

from tipsplit import __version__
from tipsplit.api.routes import admin_pages, calculations, health, metrics
from tipsplit.core.auth import AdminLoginRequired
from tipsplit.core.config import get_settings
from tipsplit.core.logging_config import LoggingConfig
from tipsplit.core.middleware import LoggingContextMiddleware
from tipsplit.core.middleware_metrics import MetricsMiddleware
from tipsplit.core.templates import flash

LoggingConfig.configure()

logger = LoggingConfig.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan events for FastAPI app"""
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} in {settings.app_env} mode...")
    yield
    logger.info(f"Shutting down {settings.app_name}...")


def create_app() -> FastAPI:
    """Build the application with middleware, exception handlers and routers"""
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        description="Tip calculator and bill splitter with an admin dashboard",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(MetricsMiddleware)
    app.add_middleware(LoggingContextMiddleware)
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.secret_key,
        session_cookie=settings.session_cookie_name,
        same_site="lax",
        https_only=settings.session_https_only,
        max_age=None,
    )

    @app.exception_handler(AdminLoginRequired)
    async def admin_login_required_handler(request: Request, exc: AdminLoginRequired):
        """Send anonymous visitors of admin pages to the login form"""
        flash(request, "Please log in to access the admin dashboard.", kind="alert")
        return RedirectResponse("/admin/login", status_code=302)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler to log all unhandled errors"""
        logger.error(
            "Unhandled exception",
            exc_info=exc,
            extra={
                "error_type": type(exc).__name__,
                "path": request.url.path,
                "method": request.method,
            }
        )
        return JSONResponse(
            status_code=500,
            content={
                "detail": str(exc),
                "type": type(exc).__name__
            }
        )

    app.include_router(calculations.router)
    app.include_router(admin_pages.router)
    app.include_router(health.router)
    app.include_router(metrics.router)

    @app.get("/api")
    async def root():
        """Root API endpoint"""
        return {
            "name": settings.app_name,
            "version": __version__,
            "status": "running",
            "environment": settings.app_env,
        }

    return app


app = create_app()
