import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from settlement_server import __version__
from settlement_server.api import create_api_router
from settlement_server.core.config import Settings, get_settings
from settlement_server.core.container import ApplicationContainer
from settlement_server.core.logging import configure_logging
from settlement_server.infrastructure.database.session import dispose_engine, init_db
from settlement_server.interfaces.http.routers import health

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, container: Optional[ApplicationContainer] = None) -> FastAPI:
    settings = settings or (container.settings if container else get_settings())
    configure_logging(settings)
    owns_container = container is None

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.container = container or ApplicationContainer.build(settings)
        app.state.container.init_infrastructure()
        await init_db(settings)
        logger.info("%s %s started (%s)", settings.project_name, __version__, settings.environment)
        try:
            yield
        finally:
            if owns_container:
                await app.state.container.aclose()
            await dispose_engine()

    app = FastAPI(
        title=settings.project_name,
        description="Round settlement, lives ledger and payment reconciliation service",
        version=__version__,
        lifespan=lifespan,
    )
    if container is not None:
        app.state.container = container
    app.dependency_overrides[get_settings] = lambda: settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": "Invalid request", "errors": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )

    app.include_router(create_api_router(settings.api_prefix))
    app.include_router(health.router)

    return app


app = create_app()
