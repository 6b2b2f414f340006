"""
FastAPI application initialization and configuration.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config import Settings, settings as default_settings
from database.engine import build_engine, build_session_factory, init_db, close_db
from database.store import EntityStore, SQLAlchemyEntityStore
from api.services.audit import AuditRecorder, StoreAuditRecorder
from api.routes import health
from api.routes.v1 import (
    candidates,
    decisions,
    employees,
    interviews,
    positions,
    statistics,
    users,
)

# Import middleware components
from core.middleware import (
    ErrorHandlingMiddleware,
    setup_error_handlers,
    StructuredLoggingMiddleware,
    setup_logging,
    AuthenticationMiddleware,
)

logger = logging.getLogger(__name__)


def create_app(
    store: Optional[EntityStore] = None,
    audit: Optional[AuditRecorder] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        store: Entity store to serve from. When omitted the lifespan builds
            one from ``settings.database_url`` and disposes it on shutdown.
        audit: Audit recorder; defaults to writing through ``store``.
        settings: Settings to use instead of the environment-loaded ones.
    """
    settings = settings or default_settings

    # Setup structured logging (do this first, before anything else)
    setup_logging(log_level=settings.log_level, json_logs=settings.json_logs)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage application lifespan events."""
        logger.info(f"Starting {settings.app_name} in {settings.app_env} environment")
        engine = None
        if getattr(app.state, "store", None) is None:
            engine_kwargs = {}
            if not settings.database_url.startswith("sqlite"):
                engine_kwargs["pool_size"] = settings.database_pool_size
            engine = build_engine(
                settings.database_url, echo=settings.database_echo, **engine_kwargs
            )
            await init_db(engine)
            app.state.store = SQLAlchemyEntityStore(build_session_factory(engine))
            app.state.audit = StoreAuditRecorder(app.state.store)

        yield

        logger.info(f"Shutting down {settings.app_name}")
        if engine is not None:
            await close_db(engine)

    app = FastAPI(
        title=settings.app_name,
        description="Candidate and interview workflow for the HR recruitment pipeline",
        version="0.1.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.audit = audit or (StoreAuditRecorder(store) if store is not None else None)

    # Setup error handlers (before middleware)
    setup_error_handlers(app)

    # Add middleware (order matters - the last one added runs first)
    # 1. Authentication (innermost - resolves the acting user)
    app.add_middleware(
        AuthenticationMiddleware,
        jwt_secret=settings.auth_jwt_secret,
        jwt_algorithm=settings.auth_jwt_algorithm,
        audience=settings.auth_jwt_audience,
    )

    # 2. Structured logging middleware (logs all requests/responses)
    app.add_middleware(
        StructuredLoggingMiddleware,
        log_request_body=settings.log_request_body,
        max_body_size=settings.log_max_body_size,
    )

    # 3. Error handling middleware (catches anything the handlers did not)
    app.add_middleware(ErrorHandlingMiddleware, debug=settings.debug)

    # 4. CORS middleware (outermost)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health check routes
    app.include_router(health.router, tags=["Health"])

    # API v1 routes
    prefix = settings.api_v1_prefix
    app.include_router(positions.router, prefix=f"{prefix}/positions", tags=["Positions"])
    app.include_router(candidates.router, prefix=f"{prefix}/candidates", tags=["Candidates"])
    app.include_router(decisions.router, prefix=f"{prefix}/candidates", tags=["Decisions"])
    app.include_router(interviews.router, prefix=f"{prefix}/interviews", tags=["Interviews"])
    app.include_router(users.router, prefix=f"{prefix}/users", tags=["Users"])
    app.include_router(employees.router, prefix=f"{prefix}/employees", tags=["Employees"])
    app.include_router(statistics.router, prefix=prefix, tags=["Statistics"])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=default_settings.debug,
        log_level=default_settings.log_level.lower(),
    )
