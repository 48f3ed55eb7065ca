from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from loguru import logger
from framework.config import settings
from framework.database.manager import DatabaseManager
from framework.exceptions.errors import RepositoryError
from framework.middleware.logging_md import LoggingMiddleware
from framework.logging.logger import LogConfig
from framework.exceptions.handler import BusinessException, global_exception_handler
from apps.orders.api.router import router as order_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    manager = DatabaseManager.get_instance()
    await manager.sql.connect()
    if settings.DB_CREATE_TABLES:
        await manager.sql.create_tables()
        logger.info("Database tables ensured")
    yield
    await manager.sql.disconnect()


app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan
)

# Initialize logging configuration
LogConfig.setup_logging()

# Register global exception handlers
app.add_exception_handler(BusinessException, global_exception_handler)
app.add_exception_handler(RepositoryError, global_exception_handler)
app.add_exception_handler(RequestValidationError, global_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

app.add_middleware(LoggingMiddleware)

app.include_router(
    order_router,
    prefix=settings.API_V1_ORDERS_PREFIX,
    tags=["Orders"]
)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
