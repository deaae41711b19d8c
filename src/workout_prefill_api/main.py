"""Main FastAPI application."""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from workout_prefill_api.api.routes import router
from workout_prefill_api.api.workout_routes import router as workout_router
from workout_prefill_api.config import settings

app = FastAPI(title="Workout Prefill API")

# Configure CORS to allow requests from the UI
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)
app.include_router(workout_router)
