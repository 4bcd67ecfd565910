"""
Main application module for the curve editor backend.

This file sets up the FastAPI application, configures CORS so the
browser front end can make cross-origin requests, mounts the static
front-end files when they exist, and exposes a simple health check
endpoint.

Routers for sessions, point edits and exports are included under the
``/api`` namespace.
"""

from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from .api.routes_export import router as export_router
from .api.routes_points import router as points_router
from .api.routes_sessions import router as sessions_router


def create_app() -> FastAPI:
    """Factory to create and configure the FastAPI application.

    Returns:
        FastAPI: The configured FastAPI application instance.
    """
    app = FastAPI(title="Hermite curve editor")

    # Allow all origins by default.  In production you should restrict
    # this to the domains that are allowed to access your API.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health check endpoint for monitoring and deployment probes.
    @app.get("/api/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(sessions_router, prefix="/api", tags=["sessions"])
    app.include_router(points_router, prefix="/api", tags=["points"])
    app.include_router(export_router, prefix="/api", tags=["export"])

    # Serve the chart front end from ../../frontend when it is present.
    frontend_dir = Path(__file__).resolve().parents[2] / "frontend"
    if frontend_dir.exists():
        app.mount(
            "/",
            StaticFiles(directory=str(frontend_dir), html=True),
            name="frontend",
        )

    return app


# Create the application instance.  Uvicorn will import this when
# running `uvicorn curve_editor.main:app` from within backend/.
app = create_app()
