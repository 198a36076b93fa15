"""FastAPI application factory for the task log REST API."""

from fastapi import APIRouter, FastAPI

from daily_tasks.api.routes import register_routes


def create_app(cache) -> FastAPI:
    """Build and return a FastAPI app wired to the given WorkspaceCache."""
    app = FastAPI(title="daily-task-logger", docs_url="/api/docs", openapi_url="/api/openapi.json")

    api = APIRouter(prefix="/api")
    register_routes(api, cache)
    app.include_router(api)

    return app
