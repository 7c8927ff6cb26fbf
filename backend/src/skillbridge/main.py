"""SkillBridge Backend - Main FastAPI Application

Multi-tenant marketplace connecting staffing companies (ses) and client
companies (end) through brokered talent and opportunity requests.

This module creates and configures the FastAPI application, including:
- Routers (auth, tenant users, requests, listings, audit, observability)
- Middleware (request ID correlation, CORS)
- Exception handlers rendering the three denial layers:
    authorization  → 401 / 303 redirect / 403
    business_rule  → 409
    workflow       → 403 / 404 / 409 / 422
"""

import logging
from contextlib import asynccontextmanager
from typing import Any
from urllib.parse import urlencode

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from sqlalchemy.exc import SQLAlchemyError

from .config import settings
from .exceptions import DomainError

# Observability
from .observability.logging_config import configure_logging
from .observability.middleware import RequestIDMiddleware
from .observability.router import router as observability_router

# Authentication & Authorization
from .auth.pipeline import AccessDenied, DenyReason
from .auth.router import router as auth_router
from .users.guard import UserMutationDenied
from .users.router import router as users_router

# Requests
from .workflow.router import router as workflow_router
from .directory.router import router as directory_router

# Audit
from .audit.router import router as audit_router

configure_logging(level=settings.LOG_LEVEL, json_format=settings.LOG_JSON)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("SkillBridge API starting up...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Debug mode: {settings.DEBUG}")

    yield

    logger.info("SkillBridge API shutting down...")


app = FastAPI(
    title="SkillBridge API",
    description="Multi-tenant SES / END marketplace",
    version="0.1.0",
    docs_url="/docs" if not settings.is_production else None,
    redoc_url=None,
    openapi_url="/openapi.json" if not settings.is_production else None,
    lifespan=lifespan,
)


# =============================================================================
# MIDDLEWARE CONFIGURATION
# =============================================================================

app.add_middleware(RequestIDMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

@app.exception_handler(AccessDenied)
async def access_denied_handler(request: Request, exc: AccessDenied):
    """Render access pipeline denials.

    Unauthenticated callers get 401 when they asked for JSON and a 303
    redirect to the login page otherwise. Every other reason is a 403.
    """
    if exc.reason == DenyReason.UNAUTHENTICATED:
        if not exc.wants_json:
            login_url = f"{settings.LOGIN_PATH}?{urlencode({'next': request.url.path})}"
            return RedirectResponse(login_url, status_code=status.HTTP_303_SEE_OTHER)
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={
                "error": "unauthenticated",
                "layer": exc.layer,
                "reason": exc.reason.value,
                "message": "Authentication required",
            },
            headers={"WWW-Authenticate": "Bearer"},
        )

    return JSONResponse(
        status_code=status.HTTP_403_FORBIDDEN,
        content={
            "error": "forbidden",
            "layer": exc.layer,
            "reason": exc.reason.value,
            "message": "You are not allowed to perform this operation",
        },
    )


@app.exception_handler(UserMutationDenied)
async def user_mutation_denied_handler(request: Request, exc: UserMutationDenied) -> JSONResponse:
    """Render role-hierarchy guard denials as a warning naming the rule."""
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={
            "error": "business_rule_violation",
            "layer": exc.layer,
            "reason": exc.reason.value,
            "message": exc.message,
        },
    )


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Render workflow-layer errors (not found, invalid input/state, conflicts)."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.code,
            "layer": exc.layer,
            "message": exc.message,
        },
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """Handle Pydantic validation errors with field-level details."""
    logger.warning(f"Validation error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "validation_error",
            "message": "Request validation failed",
            "details": jsonable_encoder(exc.errors()),
        },
    )


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(
    request: Request,
    exc: SQLAlchemyError
) -> JSONResponse:
    """Handle database errors.

    Logs the full error but returns a generic message to prevent
    information leakage.
    """
    logger.error(
        f"Database error on {request.method} {request.url.path}",
        exc_info=exc
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "database_error",
            "message": "A database error occurred. Please try again later.",
        },
    )


@app.exception_handler(Exception)
async def generic_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """Handle uncaught exceptions without exposing details to the client."""
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}",
        exc_info=exc
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "internal_error",
            "message": "An unexpected error occurred. Please try again later.",
        },
    )


# =============================================================================
# ROUTER REGISTRATION
# =============================================================================

# Observability (health, healthz, metrics)
app.include_router(observability_router)

# Authentication
app.include_router(auth_router)

# Tenant-scoped resources
app.include_router(users_router)
app.include_router(workflow_router)
app.include_router(directory_router)
app.include_router(audit_router)


@app.get("/", include_in_schema=False)
async def root() -> dict[str, Any]:
    """Root endpoint - API information."""
    return {
        "name": "SkillBridge API",
        "version": "0.1.0",
        "status": "running",
        "docs": "/docs" if not settings.is_production else None,
    }


if __name__ == "__main__":
    import os
    import uvicorn

    uvicorn.run(
        "skillbridge.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=settings.ENVIRONMENT == "development",
        log_level=settings.LOG_LEVEL.lower(),
    )
