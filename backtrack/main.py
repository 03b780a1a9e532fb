# Main FastAPI Application - BackTrack Posture Engine
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel, Field

from backtrack import config
from backtrack import logger
from backtrack.models import (
    CalibrationState,
    FrameInput,
    Notification,
    PermissionState,
    PoseAnalysis,
    SessionSummary,
    Thresholds,
)
from backtrack.notifications import NotificationCenter
from backtrack.notifier import create_notifier
from backtrack.scheduler import AsyncioScheduler
from backtrack.session import PostureStore
from backtrack.tracker import PostureTracker

# Initialize FastAPI
app = FastAPI(
    title="BackTrack Posture Engine API",
    description="Landmark-based sitting posture classification, session stats and alerts",
    version="1.0.0"
)

# Tracking controller, created on startup inside the event loop
TRACKER: Optional[PostureTracker] = None


# ============================================================================
# PYDANTIC MODELS
# ============================================================================

class CalibrationRequest(BaseModel):
    duration_seconds: Optional[float] = None
    min_samples: Optional[int] = None


class ThresholdsUpdate(BaseModel):
    """PUT /thresholds body; every limit must be positive"""
    min_distance: float = Field(default=config.DEFAULT_MIN_DISTANCE, gt=0)
    max_lean_angle: float = Field(default=config.DEFAULT_MAX_LEAN_ANGLE, gt=0)
    max_slouch_angle: float = Field(default=config.DEFAULT_MAX_SLOUCH_ANGLE, gt=0)


class PermissionResponse(BaseModel):
    permission: PermissionState


class StatusResponse(BaseModel):
    status: str
    confidence: int
    distance: int
    lean_angle: float
    shoulder_angle: float
    is_tracking: bool
    is_calibrated: bool
    bad_posture_duration: float


# ============================================================================
# DEPENDENCY INJECTION
# ============================================================================

def build_tracker(scheduler=None, notifier=None) -> PostureTracker:
    """Wire store, notification center and tracker together."""
    store = PostureStore()
    notifications = NotificationCenter(scheduler or AsyncioScheduler(), notifier)
    return PostureTracker(store, notifications)


def get_tracker() -> PostureTracker:
    if TRACKER is None:
        raise HTTPException(status_code=503, detail="Tracker not initialized")
    return TRACKER


# ============================================================================
# STARTUP/SHUTDOWN EVENTS
# ============================================================================

@app.on_event("startup")
async def startup_event():
    """Create the tracking controller on startup"""
    global TRACKER
    logger.log_lifecycle("STARTUP", "Initializing BackTrack Posture Engine")

    notifier = create_notifier()
    TRACKER = build_tracker(notifier=notifier)

    logger.log_success("Server Ready", {
        "thresholds": TRACKER.store.thresholds.model_dump(),
        "platform_notifier": "webhook" if notifier else "none",
        "log_level": config.LOG_LEVEL
    })


@app.on_event("shutdown")
async def shutdown_event():
    """Stop tracking on shutdown"""
    logger.log_lifecycle("SHUTDOWN", "Stopping tracker")
    if TRACKER is not None and TRACKER.store.is_tracking:
        TRACKER.stop()


# ============================================================================
# HEALTH CHECK
# ============================================================================

@app.get("/health")
async def health_check():
    return {
        "status": "healthy" if TRACKER is not None else "starting",
        "tracking": bool(TRACKER and TRACKER.store.is_tracking),
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


@app.get("/status", response_model=StatusResponse)
async def get_status(tracker: PostureTracker = Depends(get_tracker)):
    store = tracker.store
    return StatusResponse(
        status=store.status.value,
        confidence=store.confidence,
        distance=store.distance,
        lean_angle=store.lean_angle,
        shoulder_angle=store.shoulder_angle,
        is_tracking=store.is_tracking,
        is_calibrated=store.is_calibrated,
        bad_posture_duration=store.bad_posture_duration
    )


# ============================================================================
# THRESHOLDS
# ============================================================================

@app.get("/thresholds", response_model=Thresholds)
async def get_thresholds(tracker: PostureTracker = Depends(get_tracker)):
    return tracker.store.thresholds


@app.put("/thresholds", response_model=Thresholds)
async def update_thresholds(update: ThresholdsUpdate, tracker: PostureTracker = Depends(get_tracker)):
    thresholds = Thresholds(**update.model_dump())
    tracker.store.thresholds = thresholds
    logger.log_info("Thresholds Updated", thresholds.model_dump())
    return thresholds


# ============================================================================
# SESSION ROUTES
# ============================================================================

@app.post("/sessions/start", response_model=SessionSummary)
async def start_session(tracker: PostureTracker = Depends(get_tracker)):
    tracker.start()
    return tracker.summary()


@app.post("/sessions/stop", response_model=SessionSummary)
async def stop_session(tracker: PostureTracker = Depends(get_tracker)):
    if not tracker.store.is_tracking:
        raise HTTPException(status_code=409, detail="No active session")
    tracker.stop()
    return tracker.summary()


@app.get("/sessions/stats", response_model=SessionSummary)
async def session_stats(tracker: PostureTracker = Depends(get_tracker)):
    return tracker.summary()


# ============================================================================
# FRAME INGESTION
# ============================================================================

@app.post("/frames", response_model=PoseAnalysis)
async def ingest_frame(frame: FrameInput, tracker: PostureTracker = Depends(get_tracker)):
    """
    Classify one frame of pose landmarks

    An empty or short landmark list is a normal outcome (nobody in view)
    and yields status "not_detected".
    """
    return tracker.process_frame(frame.landmarks, frame.timestamp_ms)


# ============================================================================
# CALIBRATION
# ============================================================================

@app.get("/calibration", response_model=CalibrationState)
async def get_calibration(tracker: PostureTracker = Depends(get_tracker)):
    return tracker.calibration_state()


@app.post("/calibration", response_model=CalibrationState)
async def start_calibration(request: Optional[CalibrationRequest] = None,
                            tracker: PostureTracker = Depends(get_tracker)):
    request = request or CalibrationRequest()
    tracker.begin_calibration(request.duration_seconds, request.min_samples)
    return tracker.calibration_state()


@app.delete("/calibration", response_model=CalibrationState)
async def reset_calibration(tracker: PostureTracker = Depends(get_tracker)):
    tracker.reset_calibration()
    return tracker.calibration_state()


# ============================================================================
# NOTIFICATIONS
# ============================================================================

@app.get("/notifications", response_model=List[Notification])
async def list_notifications(tracker: PostureTracker = Depends(get_tracker)):
    return tracker.notifications.notifications


@app.delete("/notifications/{notification_id}")
async def dismiss_notification(notification_id: int, tracker: PostureTracker = Depends(get_tracker)):
    center = tracker.notifications
    if not any(n.id == notification_id for n in center.notifications):
        raise HTTPException(status_code=404, detail="Notification not found")
    center.remove(notification_id)
    return {"message": "Notification dismissed", "id": notification_id}


@app.delete("/notifications")
async def clear_notifications(tracker: PostureTracker = Depends(get_tracker)):
    tracker.notifications.clear()
    return {"message": "Notifications cleared"}


@app.post("/notifications/permission", response_model=PermissionResponse)
async def request_permission(tracker: PostureTracker = Depends(get_tracker)):
    return PermissionResponse(permission=tracker.notifications.request_permission())
