from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from typing import Any, Dict, List
import logging

from storefront.config import settings
from storefront.core.errors import APIError
from storefront.db.database import init_db
from storefront.api import auth, categories, products, orders, health

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

# Error types that mean "field absent or blank"
REQUIRED_ERROR_TYPES = {"missing", "string_too_short", "too_short"}
LOCATION_SOURCES = {"body", "query", "path", "header", "cookie"}


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Starting Storefront Service...")
    await init_db()
    logger.info("Storefront Service started successfully")
    yield
    # Shutdown
    logger.info("Shutting down Storefront Service...")


app = FastAPI(
    title="Storefront Service",
    description="""
    Storefront and admin back office API.

    **Features:**
    - Registration, login, password reset and profile management
    - Category and product management (admin)
    - Catalog browsing, filtering, search and pagination
    - Checkout through the Stripe payment gateway
    - Order history and status management

    **Authentication:**
    Protected endpoints require the token returned by `/api/v1/auth/login`:
    ```
    Authorization: Bearer <your-jwt-token>
    ```

    **Roles:**
    - **user** (role 0): browse, buy, manage own profile and orders
    - **admin** (role 1): full catalog and order management

    **Responses** use the envelope `{"success": bool, "message": str, ...}`.
    """,
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "Accept", "Origin", "X-Requested-With"],
    max_age=3600,
)


def _envelope(status_code: int, message: str, **extra) -> JSONResponse:
    content = {"success": False, "message": message}
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


def validation_message(errors: List[Dict[str, Any]]) -> str:
    """Human readable message for the first validation error"""
    if not errors:
        return "Invalid request"
    error = errors[0]
    fields = [str(part) for part in error.get("loc", ()) if part not in LOCATION_SOURCES]
    if not fields:
        return error.get("msg", "Invalid request")

    label = fields[0].replace("_", " ").title()
    if error.get("type") in REQUIRED_ERROR_TYPES:
        return f"{label} is Required"
    ctx_error = (error.get("ctx") or {}).get("error")
    if error.get("type") == "value_error" and ctx_error is not None:
        return str(ctx_error)
    return f"{label}: {error.get('msg')}"


@app.exception_handler(APIError)
async def api_error_handler(request: Request, exc: APIError):
    """Render domain errors raised by the service layer"""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return _envelope(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors"""
    errors = exc.errors()
    logger.warning(
        f"Validation error: {errors}",
        extra={
            "path": request.url.path,
            "method": request.method,
        }
    )
    return _envelope(
        status.HTTP_400_BAD_REQUEST,
        validation_message(errors),
        errors=jsonable_encoder(errors)
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Unknown routes and methods keep the envelope shape"""
    return _envelope(exc.status_code, str(exc.detail))


# Global exception handler for unhandled exceptions
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch all unhandled exceptions and log them properly"""
    logger.error(
        f"Unhandled exception: {type(exc).__name__}: {str(exc)}",
        exc_info=True,
        extra={
            "path": request.url.path,
            "method": request.method,
        }
    )
    return _envelope(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal server error",
        error=type(exc).__name__
    )


# Include routers
app.include_router(health.router)
app.include_router(auth.router, prefix=API_PREFIX)
app.include_router(categories.router, prefix=API_PREFIX)
app.include_router(products.router, prefix=API_PREFIX)
app.include_router(orders.router, prefix=API_PREFIX)


@app.get("/")
async def root():
    return {"service": settings.app_name, "version": "1.0.0"}
