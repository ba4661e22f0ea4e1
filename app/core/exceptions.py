import logging
from fastapi import status
from fastapi.responses import JSONResponse
from fastapi.requests import Request

logger = logging.getLogger(__name__)

# ---------------------------
# Source activity (GitHub)
# ---------------------------

class SourceActivityError(Exception):
    """Base class for all source-hosting API errors."""
    pass

class NoTokenError(SourceActivityError):
    """Raised when the token provider has no GitHub token for the identity."""

    def __init__(self, message: str = "No GitHub token available"):
        super().__init__(message)

class FetchError(SourceActivityError):
    """Raised on any transport or API failure; wraps the underlying cause."""

    def __init__(self, message: str, cause: Exception = None):
        self.cause = cause
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)

# ---------------------------
# Service (Business logic)
# ---------------------------

class BusinessError(Exception):
    """Base class for all business logic errors."""
    pass

class NotFoundError(BusinessError):
    """Raised when a requested resource does not exist."""
    pass

class UnauthorizedError(BusinessError):
    """Raised when authentication fails."""
    pass

class RecordWriteError(BusinessError):
    """Raised when a record store write degraded to an empty result."""
    pass


# ---------------------------
# FastAPI Exception Handlers
# ---------------------------

def register_exception_handlers(app):
    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": str(exc)},
        )

    @app.exception_handler(UnauthorizedError)
    async def unauthorized_handler(request: Request, exc: UnauthorizedError):
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"detail": str(exc)},
        )

    @app.exception_handler(NoTokenError)
    async def no_token_handler(request: Request, exc: NoTokenError):
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"detail": str(exc)},
        )

    @app.exception_handler(FetchError)
    async def fetch_error_handler(request: Request, exc: FetchError):
        logger.error(f"GitHub fetch failed: {exc}")
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"detail": str(exc)},
        )

    @app.exception_handler(RecordWriteError)
    async def record_write_handler(request: Request, exc: RecordWriteError):
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": str(exc)},
        )
