"""
Pose API Schemas

Pydantic models for keypoint frames and the real-time similarity
WebSocket. These define the JSON structure for communication with the
frontend.
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from enum import Enum


class LandmarkSchema(BaseModel):
    """
    Single body landmark from the pose detector.

    Coordinates are pixels or normalized (0.0 to 1.0), as long as every
    frame in a request uses the same space.
    """
    name: str = Field(..., description="Keypoint name (e.g., 'left_shoulder')")
    x: float = Field(..., description="Horizontal position (0=left)")
    y: float = Field(..., description="Vertical position (0=top, grows downward)")
    confidence: float = Field(1.0, ge=0.0, le=1.0, description="Detection confidence")

    class Config:
        json_schema_extra = {
            "example": {
                "name": "left_shoulder",
                "x": 0.45,
                "y": 0.32,
                "confidence": 0.95,
            }
        }


class FrameSchema(BaseModel):
    """
    Pose detection result for one frame.

    Names outside the 17-point vocabulary are ignored.
    """
    timestamp_ms: float = Field(..., ge=0, description="Video timestamp in milliseconds")
    landmarks: List[LandmarkSchema] = Field(default_factory=list, description="Detected landmarks")

    class Config:
        json_schema_extra = {
            "example": {
                "timestamp_ms": 1500,
                "landmarks": [
                    {"name": "nose", "x": 0.5, "y": 0.2, "confidence": 0.99}
                ],
            }
        }


class SwingEventsSchema(BaseModel):
    """
    Event frame indices. Omit an event the segmenter did not find.
    """
    load_start: Optional[int] = Field(None, description="Weight shifts back")
    stride_plant: Optional[int] = Field(None, description="Lead foot plants")
    launch: Optional[int] = Field(None, description="Peak hip rotation")
    contact: Optional[int] = Field(None, description="Bat meets ball")
    extension: Optional[int] = Field(None, description="Arms extend through the zone")
    finish: Optional[int] = Field(None, description="Follow through complete")

    class Config:
        json_schema_extra = {
            "example": {"stride_plant": 27, "launch": 36, "contact": 45, "finish": 81}
        }


# =============================================================================
# WebSocket Message Schemas
# =============================================================================

class WebSocketMessageType(str, Enum):
    """Types of WebSocket messages."""
    # Client -> Server
    FRAME = "frame"                    # Send detected pose for comparison
    START_SESSION = "start_session"    # Configure the comparison
    END_SESSION = "end_session"        # End the session

    # Server -> Client
    SIMILARITY_RESULT = "similarity_result"
    ERROR = "error"
    SESSION_STARTED = "session_started"
    SESSION_ENDED = "session_ended"


class WebSocketMessage(BaseModel):
    """
    Base WebSocket message structure.

    All WebSocket communication uses this format.
    """
    type: WebSocketMessageType = Field(..., description="Message type")
    data: dict = Field(default_factory=dict, description="Message payload")
    timestamp: int = Field(0, description="Unix timestamp in milliseconds")

    class Config:
        json_schema_extra = {
            "example": {
                "type": "frame",
                "data": {"frame_number": 0, "timestamp_ms": 0, "landmarks": []},
                "timestamp": 1704067200000
            }
        }


class SessionConfigMessage(BaseModel):
    """
    Payload of start_session: what the stream is compared against.
    """
    phase: str = Field("contact", description="Reference phase for frames without progress")
    handedness: str = Field("right", description="Batter handedness")
    view: str = Field("side", description="Camera view")
    align: bool = Field(False, description="Fit the reference onto the detected pose")
    frame_width: Optional[float] = Field(None, gt=0, description="Video width for pixel landmarks")
    frame_height: Optional[float] = Field(None, gt=0, description="Video height for pixel landmarks")


class FrameMessage(BaseModel):
    """
    Payload of a frame message.

    When progress is given, the reference phase follows playback instead
    of the session phase.
    """
    frame_number: int = Field(0, description="Frame sequence number")
    timestamp_ms: float = Field(0, ge=0, description="Video timestamp")
    landmarks: List[LandmarkSchema] = Field(default_factory=list)
    progress: Optional[float] = Field(None, ge=0.0, le=1.0, description="Playback progress (0-1)")


class SimilarityResultMessage(BaseModel):
    """
    Payload of a similarity_result message.
    """
    frame_number: int = Field(..., description="Corresponding frame number")
    phase: str = Field(..., description="Reference phase compared against")
    overall: int = Field(..., ge=0, le=100, description="Overall match percentage")
    regions: dict[str, int] = Field(default_factory=dict, description="Per-region match percentage")
    landmarks_compared: int = Field(0, description="Landmarks that took part")
    processing_time_ms: float = Field(..., description="Processing time")
