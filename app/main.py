import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.routers.feedback import router as feedback_router
from app.api.routers.places import router as places_router
from app.api.routers.suggestions import router as suggestions_router
from app.core.geocoding_service import LocationIQGeocodingService
from app.core.recommendation_engine import RecommendationEngine
from app.core.repository import get_repository
from app.core.search_service import YouSearchService
from app.core.settings import get_settings

load_dotenv()


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    application = FastAPI(title="PlanPal Venue Recommendations")

    # CORS: frontend dev server plus any origins from ALLOWED_ORIGINS
    allowed_origins = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]
    if settings.allowed_origins:
        allowed_origins.extend(
            [origin.strip() for origin in settings.allowed_origins.split(",") if origin.strip()]
        )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    # Shared collaborators: one geocoder (and so one rate limiter) per app
    repo = get_repository(settings)
    search = YouSearchService.from_settings(settings)
    geocoder = LocationIQGeocodingService.from_settings(settings, cache=repo)

    application.state.repo = repo
    application.state.geocoder = geocoder
    application.state.engine = RecommendationEngine(
        search=search,
        geocoder=geocoder,
        preference_history=repo,
        settings=settings,
    )

    @application.get("/healthz")
    def healthz() -> dict[str, str]:
        return {"status": "ok"}

    application.include_router(suggestions_router)
    application.include_router(places_router)
    application.include_router(feedback_router)
    return application


app = create_app()
