"""REST API routes for daily-task-logger."""

from typing import Any, Optional, Type, TypeVar

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from daily_tasks.api.handlers import (
    ERROR_INVALID_DATE,
    ERROR_NOT_FOUND,
    handle_cache_status,
    handle_daily_html,
    handle_daily_tasks,
    handle_file_tasks,
    handle_parse_tasks,
    handle_parse_tasks_all_dates,
    handle_task_logs,
)


# ---------------------------------------------------------------------------
# Request body models
# ---------------------------------------------------------------------------


class ParseAllDatesBody(BaseModel):
    lines: Any = None


class ParseBody(ParseAllDatesBody):
    model_config = ConfigDict(populate_by_name=True)

    target_date: Any = Field(default=None, alias="targetDate")


_Body = TypeVar("_Body", bound=BaseModel)

_STATUS_BY_CODE = {
    ERROR_INVALID_DATE: 400,
    ERROR_NOT_FOUND: 404,
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def _read_json(request: Request) -> Any:
    """Request body as JSON; an empty or undecodable body reads as None."""
    try:
        return await request.json()
    except ValueError:
        return None


def _load_body(model: Type[_Body], payload: Any) -> _Body:
    """Validate a JSON object payload; any other payload gets the model defaults."""
    if isinstance(payload, dict):
        try:
            return model.model_validate(payload)
        except ValidationError:
            pass
    return model()


def _raise_on_error(result: dict) -> dict:
    if "error" in result:
        status_code = _STATUS_BY_CODE.get(result.get("code"), 400)
        raise HTTPException(status_code=status_code, detail=result["error"])
    return result


# ---------------------------------------------------------------------------
# Route registration
# ---------------------------------------------------------------------------


def register_routes(app_router: APIRouter, cache) -> None:
    """Attach all REST routes that use the shared cache."""

    # --- Parsing ---
    # Bodies are read by hand: a malformed payload parses as no lines, never a 422.

    @app_router.post("/parse")
    async def parse(request: Request):
        body = _load_body(ParseBody, await _read_json(request))
        return handle_parse_tasks(lines=body.lines, target_date=body.target_date)

    @app_router.post("/parse/all-dates")
    async def parse_all_dates(request: Request):
        payload = await _read_json(request)
        # A bare JSON array is taken as the lines themselves
        if not isinstance(payload, list):
            payload = _load_body(ParseAllDatesBody, payload).lines
        return handle_parse_tasks_all_dates(lines=payload)

    # --- Workspace ---

    @app_router.get("/daily")
    def daily(date: Optional[str] = Query(None)):
        return _raise_on_error(handle_daily_tasks(cache, date=date))

    @app_router.get("/daily.html", response_class=HTMLResponse)
    def daily_html(date: Optional[str] = Query(None)):
        result = _raise_on_error(handle_daily_html(cache, date=date))
        return HTMLResponse(result["html"])

    @app_router.get("/logs")
    def logs():
        return handle_task_logs(cache)

    @app_router.get("/files/tasks")
    def file_tasks(path: str = Query(...), date: Optional[str] = Query(None)):
        return _raise_on_error(handle_file_tasks(cache, file_path=path, date=date))

    # --- Cache ---

    @app_router.get("/cache/status")
    def cache_status():
        return handle_cache_status(cache)
