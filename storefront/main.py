# storefront/main.py
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from storefront.data.database import Base, SessionLocal, engine
from storefront.api.routers import cart, catalog, customers, health, orders, reviews, wishlist
from storefront.domain.errors import StorefrontError
from storefront.utils.settings import SEED_CATALOG
from storefront.utils.logging import get_logger

# import wszystkich modeli przed create_all
import storefront.data.models  # noqa: F401

logger = get_logger(__name__)


def init_db():
    logger.info(f"Initializing database, tables: {list(Base.metadata.tables.keys())}")
    try:
        Base.metadata.create_all(bind=engine)
    except Exception as e:
        logger.error(f"Failed to create tables: {e}")
        raise

    if SEED_CATALOG:
        from storefront.data.seed import seed

        db = SessionLocal()
        try:
            seed(db)
        finally:
            db.close()


async def storefront_error_handler(request: Request, exc: StorefrontError):
    logger.info(f"{request.method} {request.url.path} -> {exc.code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_error_handler(request: Request, exc: RequestValidationError):
    fields = [".".join(str(p) for p in err.get("loc", ())) for err in exc.errors()]
    return JSONResponse(
        status_code=422,
        content={
            "error": "InvalidInput",
            "message": "Missing or malformed fields.",
            "fields": fields,
        },
    )


def create_app() -> FastAPI:
    app = FastAPI(
        title="Storefront API",
        version="1.0.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StorefrontError, storefront_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(customers.router)
    app.include_router(catalog.router)
    app.include_router(reviews.router)
    app.include_router(cart.router)
    app.include_router(wishlist.router)
    app.include_router(orders.router)

    return app


init_db()
app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
