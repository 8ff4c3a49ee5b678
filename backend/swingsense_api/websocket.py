"""
WebSocket Handler

Real-time pose similarity via WebSocket connection.
Allows the frontend to stream detected poses during playback and
receive a match percentage against the reference skeleton instantly.
"""

import json
import time
import logging
from dataclasses import dataclass
from typing import Optional, Tuple
from fastapi import WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from .schemas import (
    FrameMessage,
    SessionConfigMessage,
    SimilarityResultMessage,
    WebSocketMessageType,
)
from .converters import to_camera_view, to_frame, to_frame_size, to_handedness
from swingsense.domain import (
    CameraView,
    Handedness,
    ReferencePhase,
    get_reference_pose,
    phase_for_progress,
)
from swingsense.services import PoseSimilarityEngine

# Configure logging
logger = logging.getLogger(__name__)


@dataclass
class SimilaritySession:
    """What one connection's frames are compared against."""
    phase: ReferencePhase = ReferencePhase.CONTACT
    handedness: Handedness = Handedness.RIGHT
    view: CameraView = CameraView.SIDE
    align: bool = False
    frame_size: Optional[Tuple[float, float]] = None


class ConnectionManager:
    """
    Manages WebSocket connections.

    Each connection keeps its own session settings.
    """

    def __init__(self):
        self.active_connections: list[WebSocket] = []
        self.sessions: dict[WebSocket, SimilaritySession] = {}
        self.engine = PoseSimilarityEngine()

    async def connect(self, websocket: WebSocket) -> None:
        """Accept new WebSocket connection."""
        await websocket.accept()
        self.active_connections.append(websocket)
        self.sessions[websocket] = SimilaritySession()

        logger.info(f"New WebSocket connection. Total: {len(self.active_connections)}")

    def disconnect(self, websocket: WebSocket) -> None:
        """Handle WebSocket disconnection."""
        if websocket in self.active_connections:
            self.active_connections.remove(websocket)
        self.sessions.pop(websocket, None)

        logger.info(f"WebSocket disconnected. Remaining: {len(self.active_connections)}")

    def get_session(self, websocket: WebSocket) -> Optional[SimilaritySession]:
        """Get session settings for a connection."""
        return self.sessions.get(websocket)

    async def send_json(self, websocket: WebSocket, data: dict) -> None:
        """Send JSON data to a specific connection."""
        try:
            await websocket.send_json(data)
        except Exception as e:
            logger.error(f"Failed to send WebSocket message: {e}")

    async def send_message(self, websocket: WebSocket, msg_type: WebSocketMessageType, data: dict) -> None:
        await self.send_json(websocket, {
            "type": msg_type.value,
            "data": data,
            "timestamp": int(time.time() * 1000)
        })

    async def send_error(self, websocket: WebSocket, error: str) -> None:
        await self.send_message(websocket, WebSocketMessageType.ERROR, {"error": error})


# Global connection manager
manager = ConnectionManager()


async def websocket_endpoint(websocket: WebSocket) -> None:
    """
    WebSocket endpoint for real-time pose similarity.

    Protocol:
    1. Client connects
    2. Client optionally sends start_session with phase, handedness, view, align
    3. Client sends detected poses as frame messages
    4. Server responds to each with a similarity_result
    5. Client sends end_session or disconnects when done

    Message format (client -> server):
    {
        "type": "frame",
        "data": {
            "frame_number": 0,
            "timestamp_ms": 0,
            "landmarks": [{"name": "nose", "x": 0.5, "y": 0.25, "confidence": 0.9}],
            "progress": 0.5
        },
        "timestamp": 1704067200000
    }

    Message format (server -> client):
    {
        "type": "similarity_result",
        "data": {
            "frame_number": 0,
            "phase": "contact",
            "overall": 87,
            "regions": {"head": 95, "torso": 90, ...},
            "landmarks_compared": 17,
            "processing_time_ms": 0.4
        },
        "timestamp": 1704067200001
    }
    """
    await manager.connect(websocket)

    try:
        # Send session started message
        await manager.send_message(websocket, WebSocketMessageType.SESSION_STARTED, {
            "message": "Connected to SwingSense pose similarity"
        })

        # Main message loop
        while True:
            try:
                # Receive message from client
                data = await websocket.receive_json()
                if not isinstance(data, dict):
                    await manager.send_error(websocket, "Message must be a JSON object")
                    continue

                # Process based on message type
                msg_type = data.get("type")

                if msg_type == WebSocketMessageType.FRAME.value:
                    await handle_frame(websocket, data)

                elif msg_type == WebSocketMessageType.START_SESSION.value:
                    await handle_start_session(websocket, data)

                elif msg_type == WebSocketMessageType.END_SESSION.value:
                    await manager.send_message(websocket, WebSocketMessageType.SESSION_ENDED, {
                        "message": "Session ended"
                    })
                    break

                else:
                    await manager.send_error(websocket, f"Unknown message type: {msg_type}")

            except json.JSONDecodeError:
                await manager.send_error(websocket, "Invalid JSON")

    except WebSocketDisconnect:
        logger.info("Client disconnected")
    except Exception as e:
        logger.error(f"WebSocket error: {e}")
    finally:
        manager.disconnect(websocket)


async def handle_start_session(websocket: WebSocket, message: dict) -> None:
    """
    Configure what the connection's frames are compared against.
    """
    session = manager.get_session(websocket)
    if session is None:
        await manager.send_error(websocket, "Session not initialized")
        return

    try:
        config = SessionConfigMessage(**message.get("data", {}))
        session.phase = ReferencePhase(config.phase.lower())
        session.handedness = to_handedness(config.handedness)
    except (ValidationError, ValueError) as e:
        await manager.send_error(websocket, f"Invalid session settings: {e}")
        return

    session.view = to_camera_view(config.view)
    session.align = config.align
    session.frame_size = to_frame_size(config.frame_width, config.frame_height)

    await manager.send_message(websocket, WebSocketMessageType.SESSION_STARTED, {
        "phase": session.phase.value,
        "handedness": session.handedness.value,
        "view": session.view.value,
        "align": session.align,
    })


async def handle_frame(websocket: WebSocket, message: dict) -> None:
    """
    Compare a detected pose with the session's reference and return the result.
    """
    start_time = time.time()

    session = manager.get_session(websocket)
    if session is None:
        await manager.send_error(websocket, "Session not initialized")
        return

    try:
        frame_data = FrameMessage(**message.get("data", {}))
    except ValidationError as e:
        await manager.send_error(websocket, f"Invalid frame: {e}")
        return

    try:
        phase = (
            phase_for_progress(frame_data.progress)
            if frame_data.progress is not None else session.phase
        )
        reference = get_reference_pose(phase, handedness=session.handedness, view=session.view)
        result = manager.engine.compare(
            to_frame(frame_data.timestamp_ms, frame_data.landmarks),
            reference,
            align=session.align,
            frame_size=session.frame_size,
        )

        processing_time = (time.time() - start_time) * 1000

        payload = SimilarityResultMessage(
            frame_number=frame_data.frame_number,
            phase=phase.value,
            overall=result.overall,
            regions={region.value: pct for region, pct in result.regions.items()},
            landmarks_compared=result.landmarks_compared,
            processing_time_ms=processing_time,
        )
        await manager.send_message(websocket, WebSocketMessageType.SIMILARITY_RESULT, payload.model_dump())

    except Exception as e:
        logger.error(f"Frame processing error: {e}")
        await manager.send_error(websocket, str(e))
