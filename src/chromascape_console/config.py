"""
Configuration constants for the ChromaScape console.

Defaults for every tunable value in one place. Settings loaded at runtime
(see settings.py) start from these.
"""

# =============================================================================
# BACKEND
# =============================================================================

BACKEND_URL = "http://localhost:8080"
REQUEST_TIMEOUT = 10.0  # seconds, per HTTP request

# REST endpoints
SCRIPTS_PATH = "/api/scripts"
RUN_CONFIG_PATH = "/api/runConfig"
STOP_PATH = "/api/stop"
LOGS_PATH = "/api/logs"
PROGRESS_PATH = "/api/progress"
STATE_PATH = "/api/isRunning"
SLIDER_PATH = "/api/slider"
ORIGINAL_IMAGE_PATH = "/api/originalImage"
MODIFIED_IMAGE_PATH = "/api/modifiedImage"
SUBMIT_COLOUR_PATH = "/api/submitColour"

# WebSocket topics
LOGS_SOCKET_PATH = "/ws/logs"
PROGRESS_SOCKET_PATH = "/ws/progress"
STATE_SOCKET_PATH = "/ws/state"

# =============================================================================
# CHANNELS
# =============================================================================

TRANSPORT = "push"  # "push" (WebSocket) or "pull" (polling)
RECONNECT_DELAY = 2.0  # seconds between push reconnect attempts

# Poll cadence per topic (seconds)
LOGS_POLL_INTERVAL = 0.6
PROGRESS_POLL_INTERVAL = 5.0
STATE_POLL_INTERVAL = 0.5

# =============================================================================
# LOG VIEW
# =============================================================================

LOG_VIEW_ROWS = 20  # visible rows in the log viewport
LOG_PIN_THRESHOLD = 5  # rows from bottom that still count as "at bottom"
LOG_MAX_LINES = 1000  # retention bound, oldest lines evicted first

# =============================================================================
# SCRIPTS
# =============================================================================

# Non-runnable entry the backend lists alongside real scripts
CATALOG_PLACEHOLDER = "package-info.java"

# =============================================================================
# COLOUR FILTER (HSV ranges, OpenCV scale)
# =============================================================================

SLIDER_CHANNELS = ("hueMin", "satMin", "valMin", "hueMax", "satMax", "valMax")

SLIDER_DEFAULTS = {
    "hueMin": 0,
    "satMin": 0,
    "valMin": 0,
    "hueMax": 179,
    "satMax": 255,
    "valMax": 255,
}

# OpenCV hue is 0-179, saturation and value 0-255
SLIDER_LIMITS = {
    "hueMin": (0, 179),
    "satMin": (0, 255),
    "valMin": (0, 255),
    "hueMax": (0, 179),
    "satMax": (0, 255),
    "valMax": (0, 255),
}

SLIDER_DEBOUNCE = 0.15  # seconds of quiet before a slider value is sent
