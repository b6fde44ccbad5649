from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

import socketio
from fastapi import Body, FastAPI, Header, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from guahh_auth.exceptions import MalformedSession


if TYPE_CHECKING:
    import uvicorn

    from guahh_auth.core import SessionManager
    from guahh_auth.web.gui_manager import WebGUIManager
    from guahh_auth.web.simple_api import GuahhAuthAPI


logger = logging.getLogger("GuahhAuth")

# Create FastAPI app
app = FastAPI(title="Guahh Auth", version="2.0.0")

# Create Socket.IO server
sio = socketio.AsyncServer(
    async_mode="asgi", cors_allowed_origins=[], logger=False, engineio_logger=False
)

# Wrap with ASGI app
socket_app = socketio.ASGIApp(sio, app)

# Global references (set by __main__)
gui_manager: WebGUIManager | None = None
session_manager: SessionManager | None = None
auth_api: GuahhAuthAPI | None = None
_server_instance: uvicorn.Server | None = None


def set_managers(gui: WebGUIManager, manager: SessionManager, api: GuahhAuthAPI):
    """Called by __main__ to set up references"""
    global gui_manager, session_manager, auth_api
    gui_manager = gui
    session_manager = manager
    auth_api = api
    gui.set_socketio(sio)


# Pydantic models for API
class ShowRequest(BaseModel):
    name: str | None = None
    url: str | None = None


class ElementInfo(BaseModel):
    id: str
    tag: str = "DIV"


# ==================== REST API Endpoints ====================


@app.get("/api/user")
async def get_user():
    """Get the currently logged in user"""
    if not session_manager:
        raise HTTPException(status_code=503, detail="Session manager not initialized")

    try:
        user = session_manager.get_user()
    except MalformedSession:
        logger.warning("Stored session is malformed, reporting no user")
        user = None
    return {"user": user, "logged_in": user is not None}


@app.get("/api/ready")
async def get_ready():
    """Whether the session manager has been initialized"""
    return {"ready": bool(auth_api and auth_api.is_ready())}


@app.get("/api/status")
async def get_status():
    """Get the login status as shown to web clients"""
    if not gui_manager:
        raise HTTPException(status_code=503, detail="GUI not initialized")

    return gui_manager.status.get_status()


@app.post("/api/show")
async def show_popup(request: ShowRequest):
    """Open the authentication popup"""
    if not session_manager:
        raise HTTPException(status_code=503, detail="Session manager not initialized")

    service = request.model_dump(exclude_none=True)
    popup = await session_manager.show(service)  # type: ignore[arg-type]
    return {"success": popup is not None}


@app.post("/api/logout")
async def logout():
    """Log out the current user"""
    if not session_manager:
        raise HTTPException(status_code=503, detail="Session manager not initialized")

    user = session_manager.logout()
    return {"success": True, "user": user}


@app.post("/api/handshake")
async def receive_handshake(
    payload: Any = Body(default=None),
    origin: str | None = Header(default=None),
):
    """Receive the result message posted by the authentication popup"""
    if not session_manager:
        raise HTTPException(status_code=503, detail="Session manager not initialized")

    accepted = session_manager.receive_message(payload, origin)
    return {"accepted": accepted}


# ==================== Socket.IO Events ====================


@sio.event
async def connect(sid, environ):
    """Client connected"""
    logger.info(f"Web client connected: {sid}")

    # Send initial state to new client
    if gui_manager:
        await sio.emit("initial_state", gui_manager.get_initial_state(), to=sid)


@sio.event
async def disconnect(sid):
    """Client disconnected"""
    logger.info(f"Web client disconnected: {sid}")


@sio.event
async def register_elements(sid, data):
    """Client announced the element IDs present on its page"""
    if not gui_manager:
        return
    for item in data or []:
        info = ElementInfo(**item)
        gui_manager.elements.register(info.id, info.tag)
    await sio.emit("elements_state", gui_manager.elements.snapshot(), to=sid)


@sio.event
async def element_click(sid, data):
    """Client clicked a bound element"""
    if gui_manager and data and "id" in data:
        await gui_manager.elements.click(data["id"])


def allowed_origins() -> list[str]:
    """Origins allowed to call the API from a browser: the page and the auth page"""
    origins: set[str] = set()
    if session_manager:
        origins.update(session_manager.handshake.trusted_origins)
        page_url = session_manager.popup.page_origin
        if page_url:
            origins.add(page_url)
    return sorted(origins)


# Development server runner
async def run_server(host: str = "127.0.0.1", port: int = 8080):
    """Run the web server"""
    global _server_instance
    import uvicorn

    origins = allowed_origins()
    logger.debug(f"Allowed CORS origins: {origins}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
    sio.eio.cors_allowed_origins = origins

    config = uvicorn.Config(socket_app, host=host, port=port, log_level="info", access_log=False)
    server = uvicorn.Server(config)
    _server_instance = server
    try:
        await server.serve()
    finally:
        _server_instance = None


async def shutdown_server():
    """Gracefully shutdown the web server"""
    if _server_instance:
        logger.info("Setting server.should_exit = True")
        _server_instance.should_exit = True
        # Give the server a moment to process the shutdown signal
        # The uvicorn server checks should_exit periodically
        await asyncio.sleep(0.1)
