"""Tests for application errors and Problem Details responses."""

import json

from fastapi import FastAPI, Query
from httpx import ASGITransport, AsyncClient

from app.core.exceptions import (
    BadRequestError,
    DatabaseError,
    PosDashboardError,
    register_exception_handlers,
)
from app.core.logging import request_id_ctx
from app.core.problem_details import problem_response


def test_bad_request_error_defaults():
    """BadRequestError maps to HTTP 400."""
    error = BadRequestError("startDate is required when period is custom")

    assert isinstance(error, PosDashboardError)
    assert error.status_code == 400
    assert error.code == "BAD_REQUEST"
    assert error.title == "Bad Request"


def test_database_error_keeps_details_separate():
    """Internal details are kept off the public message."""
    error = DatabaseError("Failed to get dashboard stats", details={"error_type": "OperationalError"})

    assert error.status_code == 500
    assert error.message == "Failed to get dashboard stats"
    assert error.details == {"error_type": "OperationalError"}


def test_problem_response_exposes_error_field():
    """Problem bodies mirror the message under 'error'."""
    token = request_id_ctx.set("req-42")
    try:
        response = problem_response(
            status=500,
            title="Database Error",
            detail="Failed to get dashboard stats",
            error_code="DATABASE_ERROR",
        )
    finally:
        request_id_ctx.reset(token)

    body = json.loads(response.body)
    assert response.status_code == 500
    assert response.media_type == "application/problem+json"
    assert body["error"] == "Failed to get dashboard stats"
    assert body["detail"] == "Failed to get dashboard stats"
    assert body["type"] == "/errors/database"
    assert body["request_id"] == "req-42"
    assert body["instance"] == "/requests/req-42"


def test_problem_response_without_detail_uses_title():
    """The error field falls back to the title."""
    body = json.loads(problem_response(status=400, title="Bad Request").body)

    assert body["error"] == "Bad Request"
    assert "request_id" not in body


async def test_validation_errors_are_problem_details():
    """Request validation failures are rendered as 422 problem documents."""
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/items")
    async def items(limit: int = Query(...)) -> dict[str, int]:
        return {"limit": limit}

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        response = await ac.get("/items", params={"limit": "many"})

    assert response.status_code == 422
    body = response.json()
    assert body["code"] == "VALIDATION_ERROR"
    assert body["errors"][0]["field"] == "limit"
