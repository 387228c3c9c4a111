"""
FastAPI Application Entry Point.
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from typing import Optional

from .api import router
from .config import Settings, settings as default_settings
from .models.store import JsonFilePersistence, PersistencePort, PlanStore
from .services.lookup import LookupService, LookupTracker


def create_app(
    config: Optional[Settings] = None,
    persistence: Optional[PersistencePort] = None,
    lookup_service: Optional[LookupService] = None
) -> FastAPI:
    """Build the app with its own plan store and lookup tracker."""
    config = config or default_settings

    app = FastAPI(
        title="Voyager Trip Planner",
        description="Day-by-day trip schedule and packing list",
        version="1.0.0"
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    store = PlanStore(persistence or JsonFilePersistence(config.storage_path))
    store.load()
    app.state.store = store
    app.state.lookup_tracker = LookupTracker(lookup_service or LookupService(config=config))

    # Include API routes
    app.include_router(router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "plan_loaded": app.state.store.plan is not None
        }

    return app


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "voyager.main:create_app",
        factory=True,
        host=default_settings.host,
        port=default_settings.port,
        reload=default_settings.debug,
        log_level="debug" if default_settings.debug else "info"
    )
