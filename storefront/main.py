# storefront/main.py
import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from . import carts, products
from .database import DATABASE_URL, build_engine, build_session_maker, create_tables
from .errors import InternalError, StorefrontError, ValidationError

logger = logging.getLogger(__name__)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(database_url: Optional[str] = None) -> FastAPI:
    """Build the API. The database engine is owned by the app and lives on ``app.state``."""
    engine = build_engine(database_url or DATABASE_URL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await create_tables(engine)
        logger.info("database ready")
        yield
        await engine.dispose()

    app = FastAPI(
        title="Storefront",
        description="🛒 Products and shopping carts API",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.engine = engine
    app.state.session_maker = build_session_maker(engine)

    # ✅ CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ✅ Routers
    app.include_router(products.router)
    app.include_router(carts.router)

    @app.exception_handler(StorefrontError)
    async def storefront_error_handler(request: Request, exc: StorefrontError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()
        )
        error = ValidationError("Invalid request data", details=problems)
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        # DB is unavailable or other SQL error
        logger.exception("database error on %s %s", request.method, request.url.path)
        error = InternalError("Database error, please try again later", details=str(exc))
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception("unhandled error on %s %s", request.method, request.url.path)
        error = InternalError("Internal server error", details=str(exc))
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    @app.get("/")
    async def root():
        return {"message": "🚀 Storefront API is running"}

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


if __name__ == "__main__":
    configure_logging()
    uvicorn.run(
        create_app(),
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
    )
