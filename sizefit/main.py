import os
import time
import hashlib
from typing import Dict
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import structlog

from .config import Settings, settings as default_settings
from .routers.data import router as data_router
from .routers.library import router as library_router
from .routers.profile import router as profile_router
from .routers.recommend import router as recommend_router
from .security import issue_client_token
from .services.recommender import Recommender
from .services.reference_data import load_brands
from .services.storage import get_backend
from .services.storage_manager import StorageManager


logger = structlog.get_logger("sizefit")


def _request_id(request: Request) -> str:
    return hashlib.md5(f"{request.client.host if request.client else 'unknown'}{time.time()}".encode()).hexdigest()[:8]


def _timestamp() -> str:
    return time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())


def _validate_config(cfg: Settings) -> None:
    strict = os.getenv("STRICT_CONFIG", "0") == "1"
    errors = []
    if not cfg.api_key or cfg.api_key == "change-me":
        errors.append("API_KEY must be set to a secure value")
    if cfg.storage_backend.lower() == "file" and not cfg.storage_dir:
        errors.append("STORAGE_DIR must be set for the file storage backend")
    if cfg.history_limit < 1:
        errors.append("HISTORY_LIMIT must be at least 1")
    if errors:
        if strict:
            raise RuntimeError("Configuration error: " + "; ".join(errors))
        else:
            for e in errors:
                logger.warning("config_warning", warning=e)


def build_recommender(cfg: Settings) -> Recommender:
    brands = load_brands(cfg.brand_data_path) if cfg.brand_data_path else None
    return Recommender(brands=brands, default_product_type=cfg.default_product_type)


def build_storage(cfg: Settings) -> StorageManager:
    backend = get_backend(cfg.storage_backend, cfg.storage_dir)
    return StorageManager(backend, namespace=cfg.storage_namespace, history_limit=cfg.history_limit)


def create_app(
    cfg: Settings | None = None,
    recommender: Recommender | None = None,
    storage: StorageManager | None = None,
) -> FastAPI:
    cfg = cfg or default_settings
    _validate_config(cfg)

    app = FastAPI(title="Sizefit Size Recommender", version="1.0.0")
    app.state.settings = cfg
    app.state.recommender = recommender or build_recommender(cfg)
    app.state.storage = storage or build_storage(cfg)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Token bucket per client ip: ident -> (tokens, last refill)
    buckets: Dict[str, tuple[float, float]] = {}

    def _allow(ident: str) -> bool:
        refill_rate = cfg.rate_limit_per_min / 60.0
        capacity = float(cfg.rate_limit_burst)
        now = time.time()
        tokens, last = buckets.get(ident, (capacity, now))
        tokens = min(capacity, tokens + refill_rate * (now - last))
        if tokens < 1.0:
            buckets[ident] = (tokens, now)
            return False
        buckets[ident] = (tokens - 1.0, now)
        return True

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.time()
        request_id = _request_id(request)
        client_ip = request.client.host if request.client else "unknown"
        resp = None

        try:
            if not _allow(client_ip):
                logger.warning("rate_limit_exceeded", client_ip=client_ip, request_id=request_id)
                resp = JSONResponse(status_code=429, content={"detail": "Too Many Requests"})
                return resp

            logger.info("request_started",
                        request_id=request_id,
                        path=str(request.url.path),
                        method=request.method,
                        client_ip=client_ip,
                        user_agent=request.headers.get("user-agent", "unknown"))

            resp = await call_next(request)
            return resp

        except Exception as e:
            logger.error("request_failed",
                         request_id=request_id,
                         path=str(request.url.path),
                         method=request.method,
                         error=str(e),
                         duration_ms=int((time.time() - start) * 1000),
                         exc_info=True)
            raise
        finally:
            logger.info("request_completed",
                        request_id=request_id,
                        path=str(request.url.path),
                        method=request.method,
                        status=getattr(resp, "status_code", 0) if resp else 0,
                        duration_ms=int((time.time() - start) * 1000))

    @app.exception_handler(Exception)
    async def handle_exceptions(request: Request, exc: Exception):
        request_id = _request_id(request)
        logger.error("unhandled_exception",
                     request_id=request_id,
                     path=str(request.url.path),
                     method=request.method,
                     error=str(exc),
                     error_type=type(exc).__name__,
                     exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "error_code": "INTERNAL_ERROR",
                "request_id": request_id,
                "timestamp": _timestamp(),
            },
        )

    @app.get("/v1/health")
    async def health():
        return {"status": "ok"}

    @app.get("/v1/debug/status")
    async def debug_status(request: Request):
        """Report storage reachability and reference data size."""
        storage: StorageManager = request.app.state.storage
        probe = await storage.save("_status_probe", {"checked_at": _timestamp()})
        if probe["success"]:
            await storage.delete("_status_probe")
        return {
            "status": "ok" if probe["success"] else "degraded",
            "timestamp": _timestamp(),
            "storage": {
                "backend": cfg.storage_backend,
                "namespace": storage.namespace,
                "status": "ok" if probe["success"] else f"error: {probe.get('error')}",
            },
            "brands": len(request.app.state.recommender.supported_brands()),
            "rate_limiting": {
                "requests_per_min": cfg.rate_limit_per_min,
                "burst_capacity": cfg.rate_limit_burst,
                "active_buckets": len(buckets),
            },
        }

    @app.post("/v1/auth/token")
    async def issue_token():
        return {"token": issue_client_token("sizefit-client")}

    app.include_router(recommend_router, prefix="/v1")
    app.include_router(profile_router, prefix="/v1")
    app.include_router(library_router, prefix="/v1")
    app.include_router(data_router, prefix="/v1")

    return app


app = create_app()
