"""
Bookstore API

FastAPI application entry point. One factory builds any subset of the four
services; the CLI runs one of them per process on its own port.
"""

import argparse
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Iterable, Optional

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from fastapi import FastAPI, Request
from sqlalchemy.exc import SQLAlchemyError

from .. import __version__
from .schemas import HealthResponse
from .routes import books_router, users_router, cart_router, orders_router
from .middleware import (
    setup_cors,
    setup_logging,
    setup_exception_handlers,
    LoggingConfig,
)
from .dependencies import (
    ALL_SERVICES,
    DEFAULT_PORTS,
    get_settings,
    ServiceContainer,
    Settings,
)
from ..events.notifier import NotificationSink, NullNotificationSink
from ..storage.database import ping

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

SERVICE_ROUTERS = {
    "books": books_router,
    "users": users_router,
    "cart": cart_router,
    "orders": orders_router,
}

API_PREFIX = "/api"


# =============================================================================
# Application Lifespan
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Repositories and the broker connection are created lazily on first use;
    shutdown releases whatever was opened.
    """
    settings: Settings = app.state.settings
    logger.info(
        f"Starting bookstore services {list(app.state.service_names)} "
        f"in {settings.environment} mode"
    )
    try:
        yield
    finally:
        logger.info("Shutting down bookstore services...")
        app.state.services.close()
        logger.info("Shutdown complete")


# =============================================================================
# Application Factory
# =============================================================================

def create_app(
    settings: Settings = None,
    services: Optional[Iterable[str]] = None,
    notification_sink: Optional[NotificationSink] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Application settings. If None, loads from environment.
        services: Service names to mount (books, users, cart, orders).
            Defaults to settings.enabled_services.
        notification_sink: Sink for book events. If None, one is built
            from settings.rabbitmq_url.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = get_settings()

    service_names = tuple(services) if services is not None else settings.enabled_services
    unknown = [s for s in service_names if s not in SERVICE_ROUTERS]
    if unknown:
        raise ValueError(f"Unknown service(s): {', '.join(unknown)}")

    app = FastAPI(
        title="Bookstore Services",
        description="Catalog, users, cart and orders for a small online bookstore.",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )

    # Explicit dependencies for the routes; see dependencies.get_service_container
    app.state.settings = settings
    app.state.service_names = service_names
    app.state.services = ServiceContainer(settings, notification_sink=notification_sink)

    # ==========================================================================
    # Middleware (order matters - last added = outermost)
    # ==========================================================================

    setup_exception_handlers(app)

    setup_logging(app, config=LoggingConfig(log_request_body=settings.debug))

    setup_cors(app, settings.environment, settings.cors_allowed_origins)

    # ==========================================================================
    # Routers
    # ==========================================================================

    for name in service_names:
        app.include_router(SERVICE_ROUTERS[name], prefix=API_PREFIX)

    # ==========================================================================
    # Root Routes
    # ==========================================================================

    @app.get("/health", response_model=HealthResponse, tags=["System"])
    def health_check(request: Request) -> HealthResponse:
        """Report database reachability and event publishing mode."""
        container: ServiceContainer = request.app.state.services
        components = {}
        overall_healthy = True

        try:
            ping(container.engine)
            components["database"] = "healthy"
        except SQLAlchemyError as e:
            components["database"] = f"unhealthy: {type(e).__name__}"
            overall_healthy = False

        if "books" in service_names:
            if isinstance(container.notification_sink, NullNotificationSink):
                components["events"] = "disabled"
            else:
                components["events"] = "configured"

        return HealthResponse(
            status="healthy" if overall_healthy else "degraded",
            version=__version__,
            services=list(service_names),
            components=components,
        )

    return app


# =============================================================================
# Application Instance
# =============================================================================

app = create_app()


# =============================================================================
# CLI Entry Point
# =============================================================================

def main(argv=None):
    """Run one service (or all of them) using uvicorn."""
    import uvicorn

    parser = argparse.ArgumentParser(description="Run a bookstore service")
    parser.add_argument(
        "service",
        nargs="?",
        default="all",
        choices=(*ALL_SERVICES, "all"),
        help="Service to run (default: all in one process)",
    )
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=None)
    args = parser.parse_args(argv)

    settings = get_settings()
    if args.service == "all":
        services = settings.enabled_services
        port = args.port or 8000
    else:
        services = (args.service,)
        port = args.port or DEFAULT_PORTS[args.service]

    uvicorn.run(
        create_app(settings, services=services),
        host=args.host,
        port=port,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    main()
