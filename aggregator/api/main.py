"""FastAPI application for the DEX aggregator."""

import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from aggregator import __version__
from aggregator.api.endpoints import router
from aggregator.errors import (
    AboveMaximumSupply,
    AggregatorError,
    BelowMinimumTarget,
    ExecutionFailed,
    InvalidAmount,
    InvalidCurrencyId,
    NoPossibleTradingPath,
)
from aggregator.models.api import ErrorResponse

logger = structlog.get_logger()

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("AGGREGATOR_HOST", "0.0.0.0")
PORT = int(os.environ.get("AGGREGATOR_PORT", "8000"))
DEBUG = os.environ.get("AGGREGATOR_DEBUG", "false").lower() in ("true", "1", "yes")

# Maximum request body size (1 MB)
MAX_REQUEST_SIZE = 1024 * 1024

ERROR_STATUS: dict[type[AggregatorError], int] = {
    InvalidAmount: 422,
    InvalidCurrencyId: 400,
    NoPossibleTradingPath: 404,
    BelowMinimumTarget: 409,
    AboveMaximumSupply: 409,
    ExecutionFailed: 409,
}

app = FastAPI(
    title="DEX Aggregator",
    description="Multi-hop swap routing across AMM venues",
    version=__version__,
)


@app.middleware("http")
async def limit_request_size(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Reject requests with body larger than MAX_REQUEST_SIZE."""
    content_length = request.headers.get("content-length")
    if content_length and int(content_length) > MAX_REQUEST_SIZE:
        return JSONResponse(status_code=413, content={"detail": "Request too large"})
    return await call_next(request)


@app.exception_handler(AggregatorError)
async def aggregator_error_handler(request: Request, exc: AggregatorError) -> JSONResponse:
    """Map aggregator errors to a status code and a stable error body."""
    status_code = ERROR_STATUS.get(type(exc), 400)
    logger.info(
        "request_rejected",
        path=request.url.path,
        error=exc.code,
        status_code=status_code,
    )
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=exc.code, detail=str(exc)).model_dump(),
    )


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


def run() -> None:
    """Run the aggregator API server.

    Configuration via environment variables:
    - AGGREGATOR_HOST: Host to bind to (default: 0.0.0.0)
    - AGGREGATOR_PORT: Port to bind to (default: 8000)
    - AGGREGATOR_DEBUG: Enable debug/reload mode (default: false)
    """
    uvicorn.run(
        "aggregator.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
