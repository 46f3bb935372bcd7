import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from cropfit.api.rest_routes.crop_history import router as crop_history_router
from cropfit.api.rest_routes.crop_recommendation import (
    router as crop_recommendation_router,
)
from cropfit.api.rest_routes.environment import router as environment_router
from cropfit.api.rest_routes.farm_profile import router as farm_profile_router
from cropfit.core.config import settings
from cropfit.core.errors import InsufficientInputData, InvalidInput, UpstreamUnavailable
from cropfit.core.logging import configure_logging
from cropfit.core.mongodb import close_mongo_client, init_mongo_client
from cropfit.services.cache import MongoResultCache, get_result_cache

load_dotenv()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.LOG_LEVEL)
    await init_mongo_client()
    cache = get_result_cache()
    if isinstance(cache, MongoResultCache):
        await cache.ensure_indexes()
    yield
    await close_mongo_client()


app = FastAPI(lifespan=lifespan)


@app.exception_handler(InvalidInput)
async def invalid_input_handler(request: Request, exc: InvalidInput) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


@app.exception_handler(UpstreamUnavailable)
async def upstream_unavailable_handler(
    request: Request, exc: UpstreamUnavailable
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": f"Could not fetch {exc.kind} data"},
    )


@app.exception_handler(InsufficientInputData)
async def insufficient_input_handler(
    request: Request, exc: InsufficientInputData
) -> JSONResponse:
    logger.error("Scoring invoked without input data: %s", exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"detail": str(exc)}
    )


app.include_router(environment_router)
app.include_router(crop_recommendation_router)
app.include_router(crop_history_router)
app.include_router(farm_profile_router)


@app.get("/")
async def root():
    return {"message": "Welcome to the Cropfit crop suitability API!"}
