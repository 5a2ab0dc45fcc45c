import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlmodel import SQLModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.app.plugins import EventBus, HookDispatcher, HookRegistry
from src.app.services.cache import TTLCache
from .error import ClientError, ServerError
from .middleware import (
    BodySizeLimitMiddleware,
    RateLimiter,
    RateLimitMiddleware,
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
)
from .responses import error_body

logger = logging.getLogger(__name__)

HTTP_ERROR_CODES = {
    status.HTTP_401_UNAUTHORIZED: "UNAUTHORIZED",
    status.HTTP_403_FORBIDDEN: "FORBIDDEN",
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
}


def _error_response(code: str, message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=error_body(code, message, status_code))


async def handle_client_error(request: Request, exc: ClientError):
    logger.warning(f"Client error: {exc.base_error.code} {exc.base_error.message}")
    return _error_response(exc.base_error.code, exc.base_error.message, exc.status_code)


async def handle_server_error(request: Request, exc: ServerError):
    logger.error(f"Server error: {exc.base_error.code} {exc.base_error.message}")
    message = exc.base_error.message if _is_development(request) else "Internal server error"
    return _error_response(exc.base_error.code, message, status.HTTP_500_INTERNAL_SERVER_ERROR)


async def handle_validation_error(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else first.get("msg")
    else:
        message = "Invalid request"
    logger.warning(f"Validation error on {request.url.path}: {message}")
    return _error_response("VALIDATION_ERROR", message, status.HTTP_400_BAD_REQUEST)


async def handle_http_error(request: Request, exc: StarletteHTTPException):
    code = HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR")
    return _error_response(code, str(exc.detail), exc.status_code)


async def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    message = str(exc) if _is_development(request) else "Internal server error"
    return _error_response("INTERNAL_ERROR", message, status.HTTP_500_INTERNAL_SERVER_ERROR)


def _is_development(request: Request) -> bool:
    return request.app.state.config.NODE_ENV == "development"


@asynccontextmanager
async def lifespan(app: FastAPI):
    from src.app.use_cases.auth import EnsureSuperAdminUseCase
    from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
    from src.depends import AsyncSessionLocal, engine

    config = app.state.config
    if config.DB_AUTO_CREATE:
        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    async with AsyncSessionLocal() as session:
        result = await EnsureSuperAdminUseCase(
            SqlAlchemyUnitOfWork(session), bcrypt_rounds=config.BCRYPT_ROUNDS
        ).execute(config.SUPER_ADMIN_EMAIL, config.SUPER_ADMIN_PASSWORD, config.SUPER_ADMIN_API_KEY)
    if result.is_err():
        logger.error(f"Super admin bootstrap failed: {result.error.message}")

    yield
    await engine.dispose()


def create_app(ApplicationConfig) -> FastAPI:
    logging.basicConfig(
        level=ApplicationConfig.LOG_LEVEL.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = FastAPI(title="Commerce API", version="0.1.0", lifespan=lifespan)

    tenant_cache = TTLCache(ttl_seconds=ApplicationConfig.TENANT_CACHE_TTL_SECONDS)
    hook_registry = HookRegistry(plugin_dir=ApplicationConfig.PLUGIN_DIR)
    event_bus = EventBus()

    app.state.config = ApplicationConfig
    app.state.tenant_cache = tenant_cache
    app.state.rate_limiter = RateLimiter(
        max_requests=ApplicationConfig.RATE_LIMIT_MAX_REQUESTS,
        window_seconds=ApplicationConfig.RATE_LIMIT_WINDOW_SECONDS,
    )
    app.state.hook_registry = hook_registry
    app.state.event_bus = event_bus
    app.state.hook_dispatcher = HookDispatcher(hook_registry, events=event_bus)

    # Last added runs first
    if ApplicationConfig.ENABLE_LOGGING_MIDDLEWARE:
        app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(BodySizeLimitMiddleware, max_bytes=ApplicationConfig.MAX_FILE_SIZE)
    app.add_middleware(RateLimitMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from src.api.routes import (
        admin,
        auth,
        catalog,
        configuration,
        health_check,
        orders,
        plugins,
        storefront,
    )

    prefix = ApplicationConfig.API_PREFIX
    app.include_router(health_check.router, tags=["Health"])
    app.include_router(auth.router, prefix=prefix)
    app.include_router(admin.router, prefix=prefix)
    app.include_router(plugins.catalog_router, prefix=prefix)
    app.include_router(plugins.router, prefix=prefix)
    app.include_router(catalog.product_types, prefix=prefix, tags=["Product Types"])
    app.include_router(catalog.router, prefix=prefix)
    app.include_router(orders.router, prefix=prefix)
    app.include_router(orders.payment_gateways, prefix=prefix, tags=["Payment Gateways"])
    app.include_router(configuration.workflows, prefix=prefix, tags=["Workflows"])
    app.include_router(configuration.delivery_methods, prefix=prefix, tags=["Delivery Methods"])
    app.include_router(configuration.integrations, prefix=prefix, tags=["Integrations"])
    app.include_router(storefront.router, prefix=prefix)

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    return app
