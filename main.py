from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
from framework.config import Settings, settings
from framework.middleware.logging_md import LoggingMiddleware
from framework.logging.logger import LogConfig, get_logger
from framework.database.manager import DatabaseManager
from framework.exceptions.handler import BusinessException, global_exception_handler
from apps.products.api.router import router as products_router
from apps.products.context import ProductContextFactory


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Build the API for one deployment (demo or sample)."""
    app_settings = app_settings or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger = get_logger("lifespan")
        # Bind the shared engine to this app's settings before any request arrives
        DatabaseManager.get_instance(app_settings)
        if app_settings.AUTO_CREATE_SCHEMA:
            context = ProductContextFactory.create(app_settings)
            await context.create_schema()
        logger.info(f"{app_settings.APP_NAME} started | Deployment: {app_settings.DEPLOYMENT}")
        yield
        await DatabaseManager.reset_instance()
        logger.info(f"{app_settings.APP_NAME} stopped")

    app = FastAPI(
        title=app_settings.APP_NAME,
        description=app_settings.APP_DESCRIPTION,
        version=app_settings.APP_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Initialize logging configuration
    LogConfig.setup_logging(deployment=app_settings.DEPLOYMENT)

    # Register global exception handlers
    app.add_exception_handler(BusinessException, global_exception_handler)
    app.add_exception_handler(RequestValidationError, global_exception_handler)
    app.add_exception_handler(SQLAlchemyError, global_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    app.add_middleware(LoggingMiddleware, deployment=app_settings.DEPLOYMENT)

    # Mount routers (prefix depends on the deployment)
    app.include_router(
        products_router,
        prefix=app_settings.API_PRODUCTS_PREFIX,
        tags=["Products"]
    )

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
