from __future__ import annotations

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from hues_dex.api.deps import get_initialization_service, get_registry, get_snapshot_repository
from hues_dex.api.routers import config, debug, pool_metrics, pools, rebalance, swap, system, tokens
from hues_dex.api.schemas.common import failure
from hues_dex.application.use_cases.diagnostics import restore_latest_snapshot
from hues_dex.domain.exceptions import ContractCallError
from hues_dex.infrastructure.scheduler import PeriodicDiscoveryRunner
from hues_dex.shared.config import get_settings


settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    repository = get_snapshot_repository()
    if repository is not None:
        restored = restore_latest_snapshot(registry=get_registry(), snapshot_port=repository)
        logger.info("startup: snapshot_restore restored=%s", restored)

    runner = PeriodicDiscoveryRunner(
        get_initialization_service(),
        interval_seconds=settings.discovery_interval_seconds,
    )
    runner.start()
    try:
        yield
    finally:
        runner.stop()


app = FastAPI(title="Hues DEX API", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(config.router)
app.include_router(pools.router)
app.include_router(pool_metrics.router)
app.include_router(rebalance.router)
app.include_router(swap.router)
app.include_router(tokens.router)
app.include_router(system.router)
app.include_router(debug.router)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(_request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content=failure(str(exc.detail)))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(_request: Request, exc: RequestValidationError):
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        messages.append(f"{location}: {error.get('msg')}")
    return JSONResponse(status_code=400, content=failure("; ".join(messages) or "Invalid request."))


@app.exception_handler(ContractCallError)
async def contract_call_exception_handler(request: Request, exc: ContractCallError):
    logger.error("api: contract_call_failed path=%s error=%s", request.url.path, exc)
    return JSONResponse(status_code=500, content=failure(str(exc)))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("api: unhandled_error path=%s", request.url.path)
    return JSONResponse(status_code=500, content=failure("Internal server error"))
