# main.py
from pathlib import Path

from dotenv import load_dotenv

# Ensure repo-root .env is loaded for the running server process.
load_dotenv(dotenv_path=Path(__file__).resolve().parents[1] / ".env")

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from jobreco.config import settings
from jobreco.config import build_sqlalchemy_db_url
from jobreco.database import Base, engine
import jobreco.models  # noqa: F401  # register all tables on Base.metadata
from jobreco.api.routes.health import router as health_router
from jobreco.routers import applications, recommendations, users


def create_app() -> FastAPI:
    application = FastAPI(
        title=settings.app_name,
        version=settings.version,
        debug=settings.debug,
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health endpoints (do not depend on API_PREFIX)
    application.include_router(health_router)

    application.include_router(users.router, prefix=settings.api_prefix)
    application.include_router(recommendations.router, prefix=settings.api_prefix)
    application.include_router(applications.router, prefix=settings.api_prefix)

    # Avoid accidental schema changes in shared MySQL databases.
    db_url = build_sqlalchemy_db_url(settings)
    if db_url.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)
    return application


app = create_app()
