# Configuration Module - Procedural approach with module-level variables
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Logging Configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Posture Thresholds (defaults shown in the settings panel)
# - Distance: OSHA recommends 50-70cm (arm's length) from screen
# - Lean: Shoulder asymmetry >8° causes muscle strain over time
# - Slouch: Forward head posture >12° significantly increases cervical load
DEFAULT_MIN_DISTANCE = float(os.getenv("DEFAULT_MIN_DISTANCE", "50"))
DEFAULT_MAX_LEAN_ANGLE = float(os.getenv("DEFAULT_MAX_LEAN_ANGLE", "8"))
DEFAULT_MAX_SLOUCH_ANGLE = float(os.getenv("DEFAULT_MAX_SLOUCH_ANGLE", "12"))

# Severity multipliers
DANGER_DISTANCE_FACTOR = 0.7   # closer than 70% of min distance
DANGER_ANGLE_FACTOR = 1.5      # beyond 150% of max angle

# Landmark Geometry
MIN_LANDMARKS = 25             # MediaPipe Pose upper-body contract
DISTANCE_CONSTANT = 24         # normalized shoulder width * cm
SLOUCH_SCALE_FACTOR = 150      # ratio deviation -> pseudo-degrees
MIN_SHOULDER_SEPARATION = 0.01

# Calibration
CALIBRATION_SECONDS = float(os.getenv("CALIBRATION_SECONDS", "3"))
CALIBRATION_MIN_SAMPLES = int(os.getenv("CALIBRATION_MIN_SAMPLES", "10"))

# Tracking Loop
ALERT_DELAY_SECONDS = float(os.getenv("ALERT_DELAY_SECONDS", "3"))
ALERT_COOLDOWN_SECONDS = float(os.getenv("ALERT_COOLDOWN_SECONDS", "30"))
MAX_FRAME_GAP_SECONDS = float(os.getenv("MAX_FRAME_GAP_SECONDS", "2"))

# Notifications
NOTIFICATION_DURATION_MS = 5000
NOTIFICATION_EXIT_MS = 300
NOTIFICATION_TITLE = "BackTrack"
NOTIFICATION_ICON = "/favicon.svg"
NOTIFICATION_TAG_PREFIX = "posture-alert"
NOTIFICATION_GLYPHS = {
    "danger": "🚨",
    "warning": "⚠️",
    "success": "✅",
    "info": "ℹ️"
}

# Platform Notifier (optional webhook, e.g. ntfy/gotify bridge)
NOTIFY_WEBHOOK_URL = os.getenv("NOTIFY_WEBHOOK_URL")  # Optional: Set in .env file
NOTIFY_TIMEOUT_SECONDS = float(os.getenv("NOTIFY_TIMEOUT_SECONDS", "5"))

# Simulator
SIMULATOR_BASE_URL = os.getenv("SIMULATOR_BASE_URL", "http://localhost:8000")
SIMULATOR_FPS = int(os.getenv("SIMULATOR_FPS", "10"))
