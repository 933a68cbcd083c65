"""
Luma Circadian Lighting API
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from luma.config import Settings


def create_app(settings: Settings) -> FastAPI:
    """Create and configure FastAPI application"""

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description="""
# Luma Circadian Lighting API

Precomputed color temperature schedules for circadian lighting devices.

- **Profiles** - Sleep schedule, location, timezone and color temperature limits
- **Schedules** - Tables of (UTC timestamp, Kelvin) points a device follows
  without asking the server for every update

Schedules are recomputed on every request and are never stored.
        """,
        docs_url="/docs" if settings.api_docs_enabled else None,
        redoc_url="/redoc" if settings.api_docs_enabled else None,
        openapi_tags=[
            {
                "name": "system",
                "description": "System health endpoints.",
            },
            {
                "name": "profiles",
                "description": "Manage circadian lighting profiles.",
            },
            {
                "name": "schedules",
                "description": "Generate lighting schedules from stored or inline profiles.",
            },
        ],
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get(
        "/health",
        summary="Health Check",
        description="Check if the service is running. Use this endpoint for monitoring and health probes.",
        tags=["system"],
    )
    async def health_check():
        """Health check endpoint for monitoring"""
        return {
            "status": "healthy",
            "version": settings.api_version,
            "service": "luma",
        }

    # Register API routers
    from luma.api.routes import profiles, schedule

    app.include_router(profiles.router, prefix="/api/profiles", tags=["profiles"])
    app.include_router(schedule.router, prefix="/api", tags=["schedules"])

    return app
