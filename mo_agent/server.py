"""
WebSocket server definition for mo-agent.
"""

import logging
from typing import Any

from fastapi import Depends, FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from mo_agent.dispatcher import ActionDispatcher
from mo_agent.models.session import Session
from mo_agent.utils.dependencies import get_dispatcher

# Get a module-level logger
logger = logging.getLogger(__name__)


def build_server() -> FastAPI:
    """Build the FastAPI application with permissive CORS."""
    app = FastAPI(title="mo-agent")
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=".*",  # The agent runs on an arbitrary web origin.
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    return app


app = build_server()


def _server_address(websocket: WebSocket) -> str:
    server = websocket.scope.get("server")
    port = server[1] if server else None
    return f"http://localhost:{port}" if port else "http://localhost"


@app.get("/health")
async def health(dispatcher: ActionDispatcher = Depends(get_dispatcher)) -> dict[str, Any]:
    return {"status": "ok", "root": str(dispatcher.root)}


@app.websocket("/")
@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket, dispatcher: ActionDispatcher = Depends(get_dispatcher)):
    """
    Serves one peer: sends the initial snapshot, then handles messages one at
    a time until the peer disconnects.
    """
    await websocket.accept()
    session = Session()
    logger.info("Client connected: %s", websocket.client)

    await websocket.send_json(await dispatcher.open_session(session, _server_address(websocket)))

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break

            raw = message.get("text")
            if raw is None:
                raw = message.get("bytes") or b""
            reply = await dispatcher.handle_frame(session, raw)
            if reply is not None:
                await websocket.send_json(reply)
    except WebSocketDisconnect:
        pass

    logger.info(
        "Client disconnected: %s (%d uncommitted change(s) discarded)",
        websocket.client,
        len(session.pending_changes),
    )
