# Structured Logging Module - Procedural Approach
from datetime import datetime
from typing import Any, Dict, Optional

from backtrack import config

# ANSI Color Codes for Terminal
class Colors:
    BLUE = '\033[94m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    PURPLE = '\033[95m'
    CYAN = '\033[96m'
    WHITE = '\033[97m'
    RESET = '\033[0m'
    BOLD = '\033[1m'

# Step Prefixes with Emojis
STEP_PREFIXES = {
    "TRACKER": "🎥",
    "SESSION": "⏱️",
    "CALIBRATION": "📐",
    "ALERT": "🔔",
    "NOTIFY": "📨",
    "API": "🌐",
    "SYSTEM": "🔧",
    "INFO": "🔹",
    "ERROR": "❌",
    "SUCCESS": "✅",
    "WARNING": "⚠️"
}

# Next Step Suggestions
NEXT_STEPS = {
    "SESSION:STARTED": "Stream landmark frames via POST /frames",
    "CALIBRATION:STARTED": "Sit upright and hold still while samples are collected",
    "CALIBRATION:COMPLETE": "Slouch angle is now measured against the personal baseline",
    "ALERT:RAISED": "Notification queued, fetch via GET /notifications",
    "NOTIFY:UPDATED": "Warnings and dangers are forwarded only while permission is granted",
    "API:REQUEST": "Processing request",
}

LEVELS = {"DEBUG": 10, "INFO": 20, "WARNING": 30, "ERROR": 40}


def get_timestamp() -> str:
    """Get formatted timestamp"""
    return datetime.now().strftime("%H:%M:%S.%f")[:-3]


def _enabled(level: str) -> bool:
    return LEVELS.get(level, 20) >= LEVELS.get(config.LOG_LEVEL, 20)


def log_step(step: str, action: str, data: Optional[Dict[str, Any]] = None,
             color: str = Colors.CYAN, level: str = "INFO"):
    """
    Log a step with structured format

    Args:
        step: Step category (TRACKER, SESSION, CALIBRATION, ALERT, etc.)
        action: Description of the action
        data: Optional dictionary of data to display
        color: ANSI color code
        level: Severity used to filter against LOG_LEVEL
    """
    if not _enabled(level):
        return

    prefix = STEP_PREFIXES.get(step, "🔹")
    timestamp = get_timestamp()

    print(f"{color}{Colors.BOLD}[{timestamp}] {prefix} [{step}]{Colors.RESET} {action}")

    if data:
        for key, value in data.items():
            # Truncate long values
            if isinstance(value, str) and len(value) > 100:
                value = value[:97] + "..."
            print(f"   {Colors.WHITE}├─ {key}: {value}{Colors.RESET}")

    # Suggest next step
    next_step_key = f"{step}:{action.split()[-1].upper()}"
    if next_step_key in NEXT_STEPS:
        print(f"   {Colors.YELLOW}└─ >>> Next: {NEXT_STEPS[next_step_key]}{Colors.RESET}")
    print()  # Blank line for readability


def log_tracker(action: str, data: Optional[Dict[str, Any]] = None):
    """Log tracking loop events"""
    log_step("TRACKER", action, data, Colors.BLUE)


def log_session(action: str, data: Optional[Dict[str, Any]] = None):
    """Log session statistics events"""
    log_step("SESSION", action, data, Colors.CYAN)


def log_calibration(action: str, data: Optional[Dict[str, Any]] = None):
    """Log calibration events"""
    log_step("CALIBRATION", action, data, Colors.PURPLE)


def log_alert(action: str, data: Optional[Dict[str, Any]] = None):
    """Log posture alerts"""
    log_step("ALERT", action, data, Colors.YELLOW)


def log_notify(action: str, data: Optional[Dict[str, Any]] = None):
    """Log platform notification events"""
    log_step("NOTIFY", action, data, Colors.GREEN)


def log_api(action: str, data: Optional[Dict[str, Any]] = None):
    """Log API events"""
    log_step("API", action, data, Colors.CYAN, level="DEBUG")


def log_info(action: str, data: Optional[Dict[str, Any]] = None):
    """Log informational events"""
    log_step("INFO", action, data, Colors.WHITE)


def log_error(action: str, error: Exception, data: Optional[Dict[str, Any]] = None):
    """Log errors with exception details"""
    error_data = dict(data or {})
    error_data["Error"] = str(error)
    error_data["Type"] = type(error).__name__
    log_step("ERROR", action, error_data, Colors.RED, level="ERROR")


def log_success(action: str, data: Optional[Dict[str, Any]] = None):
    """Log success events"""
    log_step("SUCCESS", action, data, Colors.GREEN)


def log_warning(action: str, data: Optional[Dict[str, Any]] = None):
    """Log warnings"""
    log_step("WARNING", action, data, Colors.YELLOW, level="WARNING")


def log_lifecycle(phase: str, details: str = ""):
    """
    Log major lifecycle events with clear visual separation

    Args:
        phase: Phase name (e.g., "STARTUP", "SESSION_START", "SHUTDOWN")
        details: Optional details
    """
    if not _enabled("INFO"):
        return
    separator = "=" * 80
    print(f"\n{Colors.BOLD}{Colors.CYAN}{separator}{Colors.RESET}")
    print(f"{Colors.BOLD}{Colors.CYAN}>>> {phase} {details}{Colors.RESET}")
    print(f"{Colors.BOLD}{Colors.CYAN}{separator}{Colors.RESET}\n")
