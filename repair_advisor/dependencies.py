"""FastAPI dependencies."""

from fastapi import Request

from repair_advisor.controller import DiagnosticsController


async def get_controller(request: Request) -> DiagnosticsController:
    """Controller built once in the app lifespan."""
    return request.app.state.controller
