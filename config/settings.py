"""
Central Configuration File

ALL process-level configuration values live here. This is the single source
of truth for paths, timings and collaborator endpoints.

Guidelines:
- Secrets (API keys, endpoints with tokens) should be in .env, NOT here
- Import these settings in modules: from config.settings import ASSET_DIR
- User-mutable settings (resolution, location toggle, retention days) are NOT
  here - they live in the Config Store (storage/implementations/yaml_config_store.py)
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _env_float(name: str, default: str) -> float:
    value = os.getenv(name, default)
    return float(value) if value else float(default)


# =============================================================================
# STORAGE CONFIGURATION
# =============================================================================

# Canonical asset directory (single flat directory, no subdirectories)
ASSET_DIR = Path(os.getenv("ASSET_DIR", "./videos/CameraApp"))

# Where capture devices write transient raw output before finalization
CAPTURE_TEMP_DIR = Path(os.getenv("CAPTURE_TEMP_DIR", "./videos/.capture"))

# Asset File Naming: VID_<epoch-millis>.mp4
ASSET_FILENAME_PREFIX = "VID_"
ASSET_FILENAME_EXTENSION = ".mp4"

# Config Store (persisted key-value settings + metadata records)
CONFIG_STORE_PATH = Path(os.getenv("CONFIG_STORE_PATH", "config/app_store.yaml"))

# Config Store keys
KEY_RESOLUTION = "resolution"
KEY_LOCATION_ENABLED = "locationEnabled"
KEY_AUTO_DELETE_DAYS = "autoDeleteDays"
KEY_LAST_SAVED_VIDEO = "lastSavedVideo"
METADATA_KEY_PREFIX = "video_"

# Defaults applied when the store has no value (or an invalid one)
DEFAULT_RESOLUTION = "1080p"
DEFAULT_LOCATION_ENABLED = True
DEFAULT_AUTO_DELETE_DAYS = 0

# Gallery / media index registration
# Command template run after an asset is saved, e.g. "termux-media-scan {path}"
# Empty = no platform gallery, assets stay in app storage only
MEDIA_SCAN_COMMAND = os.getenv("MEDIA_SCAN_COMMAND", "")
MEDIA_SCAN_TIMEOUT = 10.0  # seconds

# =============================================================================
# RETENTION CONFIGURATION
# =============================================================================

SECONDS_PER_DAY = 86400

# 0 = sweep only once at startup; > 0 = also sweep on this interval (seconds)
SWEEP_INTERVAL_SECONDS = int(os.getenv("SWEEP_INTERVAL_SECONDS", "0"))

# =============================================================================
# RECORDING CONFIGURATION
# =============================================================================

# Target video bit rates per resolution (bits per second)
BIT_RATE_720P = 4_000_000
BIT_RATE_1080P = 8_000_000
BIT_RATE_4K = 35_000_000

# Video Settings
VIDEO_FPS = 30
VIDEO_CODEC = "libx264"
VIDEO_PRESET = "ultrafast"  # FFmpeg encoding preset
VIDEO_FORMAT = "mp4"

# Camera Configuration
CAMERA_DEVICE_BACK = os.getenv("CAMERA_DEVICE_BACK", "/dev/video0")
CAMERA_DEVICE_FRONT = os.getenv("CAMERA_DEVICE_FRONT", "/dev/video2")
CAMERA_WARMUP_TIME = 1.0  # seconds
CAMERA_STOP_TIMEOUT = 5.0  # seconds for ffmpeg to finalize the file

# Status messages auto-clear after this delay (seconds)
STATUS_CLEAR_DELAY = 1.5

# =============================================================================
# LOCATION CONFIGURATION
# =============================================================================

# Poll cadence while location tagging is enabled
LOCATION_POLL_INTERVAL = 15.0  # seconds

# Position request options
POSITION_HIGH_ACCURACY = True
POSITION_TIMEOUT = 5.0  # seconds
POSITION_MAX_AGE = 10.0  # seconds

# GPS receiver (NMEA over serial)
GPS_SERIAL_PORT = os.getenv("GPS_SERIAL_PORT", "/dev/ttyUSB0")
GPS_BAUDRATE = int(os.getenv("GPS_BAUDRATE", "9600"))

# Static coordinates for installations without a GPS receiver
FIXED_LATITUDE = os.getenv("FIXED_LATITUDE", "")
FIXED_LONGITUDE = os.getenv("FIXED_LONGITUDE", "")

# Whether the operator granted location access ("true"/"false")
LOCATION_PERMISSION_GRANTED = (
    os.getenv("LOCATION_PERMISSION_GRANTED", "true").lower() == "true"
)

# Reverse geocoding
GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"
GEOCODE_TIMEOUT = _env_float("GEOCODE_TIMEOUT", "5.0")  # seconds

# =============================================================================
# PUSH / SYNC CONFIGURATION
# =============================================================================

PUSH_TIMEOUT = 10  # seconds
LOG_PUSH_DELAY = 0.3  # seconds - simulated latency of the log-only notifier

# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

LOG_DIR = "/var/log/capture"
LOG_SERVICE_FILE = "service.log"
LOG_BACKUP_COUNT = 7

# =============================================================================
# SECRETS (loaded from .env)
# =============================================================================
# IMPORTANT: These should NEVER be committed to version control!
# Create a .env file in the project root with these values

GOOGLE_MAPS_API_KEY = os.getenv("GOOGLE_MAPS_API_KEY", "")
PUSH_ENDPOINT_URL = os.getenv("PUSH_ENDPOINT_URL", "")
PUSH_API_TOKEN = os.getenv("PUSH_API_TOKEN", "")
