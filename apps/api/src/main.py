import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from src.core import get_settings, limiter
from src.db.session import async_session
from src.db.store import SqlAlchemyProfileStore
from src.routers import ROUTERS
from src.schemas import ErrorResponse
from src.services.geocoding import create_geocoder
from src.services.search.filter_options import FilterOptionsError
from src.services.search.store import StoreError

logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One geocode cache per process, shared by all requests
    app.state.geocoder = create_geocoder()
    app.state.profile_store = SqlAlchemyProfileStore(async_session)
    if app.state.geocoder.provider is None:
        logger.warning("GEOCODE_API_KEY not set; location searches fall back to standard search")
    yield


app = FastAPI(
    title="Worker Discovery API",
    description="Filtered and distance-ranked search over support-worker profiles.",
    version="0.1.0",
    lifespan=lifespan,
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    if isinstance(exc, FilterOptionsError):
        error = "Failed to fetch filter options"
    else:
        error = "Failed to fetch workers"
    body = ErrorResponse(error=error, message=str(exc))
    return JSONResponse(status_code=500, content=body.model_dump(by_alias=True))


@app.middleware("http")
async def response_time_header(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    response.headers["X-Response-Time"] = f"{(time.perf_counter() - started) * 1000:.1f}ms"
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Response-Time"],
)

for router in ROUTERS:
    app.include_router(router)


@app.get("/health")
async def health():
    return {"status": "ok"}
