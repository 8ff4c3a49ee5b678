"""
SwingSense Backend API

FastAPI application for baseball swing analysis from pose keypoints.

Run with:
    uvicorn main:app --reload --host 0.0.0.0 --port 8000

API docs available at:
    http://localhost:8000/docs (Swagger UI)
    http://localhost:8000/redoc (ReDoc)
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from swingsense_api.routes import router as api_router
from swingsense_api.settings import get_metric_specs, get_settings
from swingsense_api.websocket import websocket_endpoint

settings = get_settings()

# =============================================================================
# Logging Configuration
# =============================================================================

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


# =============================================================================
# Lifespan (startup/shutdown)
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs startup code before app starts accepting requests,
    and cleanup code when app shuts down.
    """
    # Startup
    logger.info(f"{settings.app_name} starting up...")
    logger.info("API docs: http://localhost:8000/docs")
    logger.info("WebSocket: ws://localhost:8000/ws/similarity")

    # Fail fast on a broken spec table
    specs = get_metric_specs()
    logger.info(f"Scoring with {len(specs)} metrics")

    yield  # App runs here

    # Shutdown
    logger.info(f"{settings.app_name} shutting down...")


# =============================================================================
# FastAPI App
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description="""
    **Baseball Swing Analyzer**

    Biomechanical metrics, scoring and coaching from pose keypoints.

    ## Features

    - **Swing Metrics** at the swing's event frames
    - **Composite Scoring** against target ranges
    - **Coaching Tips** for the weakest metrics
    - **Bat Speed** estimation from wrist travel
    - **Pose Similarity** against reference skeletons, live over WebSocket

    ## Endpoints

    - `GET /api/health` - Health check
    - `POST /api/analysis/swing` - Full swing analysis
    - `POST /api/analysis/score` - Score raw metric values
    - `POST /api/analysis/bat-speed` - Bat speed estimate
    - `POST /api/similarity` - Compare one pose with a reference phase
    - `GET /api/reference/{phase}` - Reference skeleton
    - `WS /ws/similarity` - Real-time pose similarity stream

    ## WebSocket Protocol

    Connect to `/ws/similarity` and send detected poses as JSON:
```json
    {
        "type": "frame",
        "data": {"frame_number": 0, "timestamp_ms": 0, "landmarks": [...]},
        "timestamp": 1704067200000
    }
```
    """,
    version=settings.version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


# =============================================================================
# CORS Middleware
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Routes
# =============================================================================

# Include REST API routes
app.include_router(api_router, prefix="/api")

# WebSocket endpoint
app.websocket("/ws/similarity")(websocket_endpoint)


# =============================================================================
# Root endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - API information.
    """
    return {
        "name": settings.app_name,
        "version": settings.version,
        "description": "Baseball Swing Analyzer",
        "docs": "/docs",
        "health": "/api/health",
        "websocket": "ws://localhost:8000/ws/similarity"
    }


# =============================================================================
# Run directly (for development)
# =============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=settings.log_level.lower()
    )
