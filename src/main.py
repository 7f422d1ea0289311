"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api import auth, cart, items, orders, users
from src.api.dependencies import get_request_context
from src.config import get_settings
from src.services.errors import AuthError, InvalidToken

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    logging.basicConfig(level=logging.DEBUG if settings.is_development else logging.INFO)
    yield


app = FastAPI(
    title="Storefront API",
    description="Storefront backend: accounts, permissions, items, cart and orders",
    version="0.1.0",
    lifespan=lifespan,
    # Resolve the session cookie for every request before any handler runs
    dependencies=[Depends(get_request_context)],
)

# The storefront sends the session cookie cross-origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AuthError)
async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    """Render domain errors as JSON with their HTTP status."""
    response = JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "code": exc.code},
    )
    if isinstance(exc, InvalidToken):
        # Drop the unverifiable session cookie
        auth.clear_session_cookie(response, get_settings())
    return response


# Register routers
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(items.router)
app.include_router(cart.router)
app.include_router(orders.router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "environment": settings.environment}
