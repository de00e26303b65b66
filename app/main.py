import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.rest_routes.assistant import router as assistant_router
from app.api.rest_routes.auth import router as auth_router
from app.api.rest_routes.chat import router as chat_router
from app.api.rest_routes.crop_recommendation import (
    router as crop_recommendation_router,
)
from app.api.rest_routes.profile import router as profile_router
from app.api.rest_routes.reports import router as reports_router
from app.api.rest_routes.yield_prediction import (
    router as yield_prediction_router,
)
from app.core.config import settings
from app.core.errors import AIServiceError, ai_service_error_handler
from app.core.mongodb import close_mongo_client, init_mongo_client

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_mongo_client()
    yield
    await close_mongo_client()


app = FastAPI(title="AgriTrust API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_methods=["*"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)
app.add_exception_handler(AIServiceError, ai_service_error_handler)

app.include_router(auth_router)
app.include_router(profile_router)
app.include_router(crop_recommendation_router)
app.include_router(yield_prediction_router)
app.include_router(assistant_router)
app.include_router(reports_router)
app.include_router(chat_router)


@app.get("/")
async def root():
    return {"message": "Welcome to AgriTrust - Smart Agriculture Intelligence!"}
