"""
Wagering Service - Main Application
===================================

FastAPI application for bet pools, zk settlement and arena matches.

Version: 0.1.0
"""

from contextlib import asynccontextmanager
from typing import Any

from uuid import uuid4

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from arena_shared.config import settings
from arena_shared.errors import ErrorCategory, WagerError
from arena_shared.logging import bind_context, clear_context, get_logger, setup_logging
from arena_shared.models import ErrorResponse, HealthResponse

from arena_services.wagering.routes import bets, matches, pools, treasury, verifier
from arena_services.wagering.services import get_runtime

# Setup logging
setup_logging(
    log_level=settings.log_level.value,
    json_logs=settings.is_production,
    service_name="wagering",
)

logger = get_logger(__name__)

CATEGORY_STATUS = {
    ErrorCategory.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCategory.STATE_VIOLATION: status.HTTP_409_CONFLICT,
    ErrorCategory.AUTHORIZATION: status.HTTP_403_FORBIDDEN,
    ErrorCategory.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorCategory.CRYPTOGRAPHIC: status.HTTP_400_BAD_REQUEST,
    ErrorCategory.ECONOMIC: status.HTTP_409_CONFLICT,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> Any:
    """Application lifespan manager."""
    logger.info(
        "wagering_starting",
        environment=settings.environment.value,
        port=settings.ports.wagering,
        chain_mode=settings.chain.mode.value,
    )

    # Startup
    try:
        get_runtime()
        logger.info("contracts_deployed")
    except Exception as e:
        logger.error("startup_failed", error=str(e))
        raise

    yield

    # Shutdown
    logger.info("wagering_shutting_down")


# Create FastAPI application
app = FastAPI(
    title="Veilstar Arena Wagering Service",
    description="Commit-reveal bet pools with Groth16 settlement",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors.origins_list,
    allow_credentials=settings.cors.allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context(request: Request, call_next: Any) -> Any:
    """Tag every log line emitted while serving a request."""
    clear_context()
    request_id = request.headers.get("x-request-id") or uuid4().hex
    bind_context(request_id=request_id, path=request.url.path)
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


# ============================================================================
# Health Check Endpoints
# ============================================================================


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """
    Service health check.

    Returns health status of the service and its ledger.
    """
    runtime = get_runtime()
    components: dict[str, dict[str, Any]] = {
        "ledger": await runtime.ledger.health_check(),
        "contracts": {
            "status": "healthy",
            "betting": runtime.betting.address,
            "arena": runtime.arena.address,
            "verifier": runtime.verifier.address,
            "pools": runtime.betting.get_pool_counter(),
        },
    }

    all_healthy = all(
        c.get("status") == "healthy" for c in components.values()
    )

    return HealthResponse(
        status="healthy" if all_healthy else "degraded",
        service="wagering",
        version="0.1.0",
        components=components,
    )


@app.get("/", tags=["Health"])
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "service": "Veilstar Arena Wagering Service",
        "version": "0.1.0",
        "docs": "/docs",
    }


# ============================================================================
# Include Routers
# ============================================================================

app.include_router(
    pools.router,
    prefix="/api/v1/pools",
    tags=["Pools"],
)

app.include_router(
    bets.router,
    prefix="/api/v1/bets",
    tags=["Bets"],
)

app.include_router(
    matches.router,
    prefix="/api/v1/matches",
    tags=["Matches"],
)

app.include_router(
    verifier.router,
    prefix="/api/v1/verifier",
    tags=["Verifier"],
)

app.include_router(
    treasury.router,
    prefix="/api/v1/treasury",
    tags=["Treasury"],
)


# ============================================================================
# Error Handlers
# ============================================================================


@app.exception_handler(WagerError)
async def wager_error_handler(request: Any, exc: WagerError) -> Any:
    """Map contract failures to HTTP statuses by category."""
    status_code = CATEGORY_STATUS.get(exc.category, status.HTTP_400_BAD_REQUEST)
    logger.warning(
        "contract_call_rejected",
        error_code=exc.error_code,
        code=exc.code,
        path=request.url.path,
    )
    body = ErrorResponse(
        error=str(exc),
        error_code=exc.error_code,
        code=exc.code,
        category=exc.category.value,
        details=exc.details or None,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Any, exc: HTTPException) -> Any:
    """Handle HTTP exceptions."""
    logger.warning(
        "http_exception",
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.detail,
            "status_code": exc.status_code,
        },
        headers=exc.headers,
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Any, exc: Exception) -> Any:
    """Handle unexpected exceptions."""
    logger.error(
        "unhandled_exception",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "error": "Internal server error",
            "status_code": 500,
        },
    )


# ============================================================================
# Run with Uvicorn
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "arena_services.wagering.main:app",
        host="0.0.0.0",
        port=settings.ports.wagering,
        reload=settings.debug,
        log_level=settings.log_level.value.lower(),
    )
