import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

import urbanswap.database.connection as db_connection
from urbanswap import config
from urbanswap.api.auth import router as auth_router
from urbanswap.api.listings import router as listings_router
from urbanswap.api.swaps import router as swaps_router
from urbanswap.database.connection import create_asyncpg_pool
from urbanswap.errors import register_exception_handlers
from urbanswap.middleware.rate_limit import custom_rate_limit_handler, limiter
from urbanswap.models import HealthResponse

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    db_connection._db_pool = await create_asyncpg_pool()
    logger.info("Database pool created at startup")

    yield  # App runs

    # Shutdown
    if db_connection._db_pool:
        await db_connection._db_pool.close()
        db_connection._db_pool = None
        logger.info("Database pool closed")


app = FastAPI(title="UrbanSwap API", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        config.CLIENT_URL,
        "http://localhost:8080",  # Local development
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, custom_rate_limit_handler)
register_exception_handlers(app)

app.include_router(auth_router, prefix="/api")
app.include_router(listings_router, prefix="/api")
app.include_router(swaps_router, prefix="/api")


@app.get("/api/health", response_model=HealthResponse)
@limiter.limit("100/minute")
async def health_check(request: Request):
    logger.info("Health check endpoint accessed")
    return HealthResponse(
        status="ok",
        message="UrbanSwap API is running",
        timestamp=datetime.now(timezone.utc),
        environment=config.ENV,
    )


if __name__ == "__main__":

    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
