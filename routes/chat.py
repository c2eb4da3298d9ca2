"""
Route handlers for the assistant chat endpoint.
Handles POST /api/chat (single complete reply, no streaming).
"""
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from services.chat_service import ChatGateway
from utils.constants import INVALID_JSON_ERROR
from utils.logger import app_logger

router = APIRouter()


def get_gateway(request: Request) -> ChatGateway:
    """Gateway built at startup and stored on the application state."""
    return request.app.state.gateway


@router.post("/api/chat")
async def chat(request: Request):
    """
    Chat endpoint: receives the whole conversation and returns one reply.
    Body: {"messages": [{"role": "user"|"assistant", "content": "..."}]}
    """
    try:
        payload = await request.json()
    except ValueError:
        app_logger.warning(f"Invalid JSON body from {request.client.host if request.client else 'unknown'}")
        return JSONResponse(status_code=400, content={"error": INVALID_JSON_ERROR})

    outcome = await get_gateway(request).handle(payload)
    return JSONResponse(status_code=outcome.status_code, content=outcome.body)
