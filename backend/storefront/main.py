import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront.api.health import router as health_router
from storefront.api.routes_auth import router as auth_router
from storefront.api.routes_cart import router as cart_router
from storefront.api.routes_catalogue import router as catalogue_router
from storefront.config import Settings, get_settings
from storefront.db import Store
from storefront.errors import InfrastructureError, StoreError, UnauthorizedError
from storefront.seed import seed_catalog
from storefront.utils.logging_config import configure_logging

logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path"))
    return f"{loc}: {first.get('msg')}" if loc else str(first.get("msg"))


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        if isinstance(exc, InfrastructureError):
            logger.error("Infrastructure failure on %s %s: %s", request.method, request.url.path, exc.message)
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthorizedError) else None
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        # malformed request data is InvalidInput (400), not 422
        return JSONResponse(
            status_code=400,
            content={"message": _validation_message(exc), "error": "invalid_input"},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error("Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"message": "Internal server error", "error": "infrastructure"},
        )


def create_app(settings: Optional[Settings] = None, store: Optional[Store] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)
    store = store or Store.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store.open()
        store.init_schema(reset=settings.RESET_DB)
        if settings.SEED_DB:
            db = store.session()
            try:
                seed_catalog(db)
            finally:
                db.close()
        try:
            yield
        finally:
            store.close()

    app = FastAPI(title="Storefront - Backend", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.FRONTEND_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    install_error_handlers(app)

    app.include_router(health_router, prefix="/api", tags=["health"])
    app.include_router(auth_router, tags=["auth"])
    app.include_router(catalogue_router, tags=["catalogue"])
    app.include_router(cart_router, tags=["cart"])

    @app.get("/", include_in_schema=False)
    def root():
        return {"message": "Storefront API is running"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    s = get_settings()
    uvicorn.run("storefront.main:app", host=s.APP_HOST, port=s.APP_PORT)
