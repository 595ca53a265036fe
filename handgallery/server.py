"""
WebSocket broadcaster: streams tracking snapshots and interaction events to a
browser front end and accepts its lifecycle messages (select, close, items).
"""

import json
import logging
from dataclasses import asdict
from datetime import datetime
from typing import Any, Dict, Optional, Set, Tuple, Union

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from pydantic import BaseModel

from .session import InteractionSession
from .types import GalleryItem, InteractionEvent, TrackingSnapshot

logger = logging.getLogger(__name__)


class StatusResponse(BaseModel):
    success: bool
    is_ready: bool
    connections: int
    selected: Optional[str] = None
    timestamp: str


class SelectMessage(BaseModel):
    id: Union[str, int]
    position: Optional[Tuple[float, float]] = None


def snapshot_to_dict(snapshot: TrackingSnapshot) -> Dict[str, Any]:
    """JSON-ready form of a snapshot."""
    return {"type": "snapshot", **asdict(snapshot)}


def event_to_dict(event: InteractionEvent) -> Dict[str, Any]:
    """JSON-ready form of an event, tagged with its class name."""
    return {"type": "event", "name": type(event).__name__, **asdict(event)}


class SnapshotBroadcaster:
    """Presenter that fans snapshots and events out to every connected client"""

    def __init__(self, session: InteractionSession):
        self.session = session
        self.active_connections: Set[WebSocket] = set()
        self.last_snapshot = TrackingSnapshot()

    async def connect(self, websocket: WebSocket):
        """Handle new WebSocket connection"""
        await websocket.accept()
        self.active_connections.add(websocket)
        logger.info(f"🔌 Client connected ({len(self.active_connections)} active)")

        # Send initial status
        selected = self.session.selected.id if self.session.selected else None
        await websocket.send_json({
            "type": "status",
            "connected": True,
            "is_ready": self.last_snapshot.is_ready,
            "selected": selected,
        })

    async def disconnect(self, websocket: WebSocket):
        """Handle WebSocket disconnection"""
        self.active_connections.discard(websocket)
        logger.info(f"🔌 Client disconnected ({len(self.active_connections)} active)")

    async def on_snapshot(self, snapshot: TrackingSnapshot) -> None:
        self.last_snapshot = snapshot
        await self.broadcast(snapshot_to_dict(snapshot))

    async def on_event(self, event: InteractionEvent) -> None:
        await self.broadcast(event_to_dict(event))

    async def handle_message(self, websocket: WebSocket, message: str):
        """Handle lifecycle messages from the client"""
        try:
            msg = json.loads(message)
            if not isinstance(msg, dict):
                raise ValueError(f"Expected a JSON object, got {type(msg).__name__}")
            msg_type = msg.get("type")

            if msg_type == "select":
                select = SelectMessage(**{k: v for k, v in msg.items() if k != "type"})
                index = self.session.gallery.index_of(str(select.id))
                if index < 0:
                    await websocket.send_json({"type": "error", "message": f"Unknown item {select.id!r}"})
                    return
                events = self.session.select(self.session.gallery[index], select.position)

            elif msg_type == "close":
                events = self.session.close()

            elif msg_type == "items":
                items = [GalleryItem(id=str(i["id"]), src=i["src"], title=i["title"])
                         for i in msg.get("items", [])]
                events = self.session.set_items(items)

            else:
                logger.warning(f"Unknown message type: {msg_type}")
                return

            for event in events:
                await self.on_event(event)

        except (ValueError, KeyError, TypeError) as e:
            logger.error(f"Error handling message: {e}")
            await websocket.send_json({"type": "error", "message": str(e)})

    async def broadcast(self, message: dict):
        """Broadcast message to all connected clients"""
        disconnected = set()
        for connection in list(self.active_connections):
            try:
                await connection.send_json(message)
            except Exception as e:
                logger.debug(f"Dropping client after send failure: {e}")
                disconnected.add(connection)

        # Remove disconnected clients
        for conn in disconnected:
            self.active_connections.discard(conn)


def create_app(broadcaster: SnapshotBroadcaster) -> FastAPI:
    """Build the FastAPI app serving the status route and the /ws stream."""
    app = FastAPI(title="Hand Gallery")

    @app.get("/", response_model=StatusResponse)
    async def status():
        selected = broadcaster.session.selected
        return StatusResponse(
            success=True,
            is_ready=broadcaster.last_snapshot.is_ready,
            connections=len(broadcaster.active_connections),
            selected=selected.id if selected else None,
            timestamp=datetime.now().isoformat(),
        )

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        await broadcaster.connect(websocket)

        try:
            while True:
                message = await websocket.receive_text()
                await broadcaster.handle_message(websocket, message)

        except WebSocketDisconnect:
            pass
        finally:
            await broadcaster.disconnect(websocket)

    return app
