import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dynform.api.form_schema import router as form_schema_router
from dynform.api.health import router as health_router
from dynform.api.root import router as root_router
from dynform.api.submissions import router as submissions_router
from dynform.core.config import settings
from dynform.core.logging_config import configure_logging
from dynform.core.rate_limit import FixedWindowRateLimiter, RateLimitMiddleware
from dynform.core.submission_store import InMemorySubmissionStore
from dynform.db.base import Base
from dynform.db.session import engine

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger("dynform.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.SUBMISSION_STORE == "database" and settings.APP_ENV == "local":
        # outside local dev the schema is managed by alembic
        Base.metadata.create_all(bind=engine)
    logger.info("Started (env=%s, store=%s)", settings.APP_ENV, settings.SUBMISSION_STORE)
    yield


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

# owned by this app instance; only read when SUBMISSION_STORE=memory
app.state.submission_store = InMemorySubmissionStore()

# CORS middleware for frontend access
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

if settings.RATE_LIMIT_ENABLED:
    app.add_middleware(
        RateLimitMiddleware,
        limiter=FixedWindowRateLimiter(settings.RATE_LIMIT_POINTS, settings.RATE_LIMIT_DURATION),
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info("%s %s %s %.1fms", request.method, request.url.path, response.status_code, elapsed_ms)
    return response


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


app.include_router(root_router)
app.include_router(health_router)
app.include_router(form_schema_router)
app.include_router(submissions_router)
