"""Main FastAPI application."""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from userhub.config import settings
from userhub.rate_limiter import limiter
from userhub.schemas.common import ErrorResponse
from userhub.services.exceptions import (
    ErrorCategory,
    TokenExpiredError,
    TokenInvalidError,
    UserServiceError,
)

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)

STATUS_BY_CATEGORY = {
    ErrorCategory.NOT_FOUND: 404,
    ErrorCategory.ALREADY_EXISTS: 409,
    ErrorCategory.CONFLICT: 409,
    ErrorCategory.INVALID_CREDENTIALS: 401,
    ErrorCategory.INVALID_TOKEN: 401,
    ErrorCategory.EXPIRED_TOKEN: 401,
    ErrorCategory.VALIDATION: 400,
    ErrorCategory.UPSTREAM: 502,
}

# Create FastAPI app
app = FastAPI(
    title="UserHub API",
    description="User management and token lifecycle service",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Add rate limiter to app state and exception handler
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def status_for(exc: UserServiceError) -> int:
    """HTTP status code for a service error."""
    # A bad or stale verification link is a client input problem, not an auth failure
    if isinstance(exc, (TokenInvalidError, TokenExpiredError)):
        return 400
    return STATUS_BY_CATEGORY.get(exc.category, 400)


async def user_service_error_handler(request: Request, exc: UserServiceError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")

    data = exc.response.model_dump() if isinstance(exc, TokenExpiredError) else None
    body = ErrorResponse(error=exc.category, message=exc.message, data=data)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


app.add_exception_handler(UserServiceError, user_service_error_handler)


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "UserHub API", "version": "0.1.0", "status": "running"}


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


# Import and include routers
from userhub.routers import auth, users  # noqa: E402

app.include_router(auth.router, prefix="/api")
app.include_router(users.router, prefix="/api")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000, reload=True)
