"""
Upload Module Constants

Push payload and HTTP constants. Endpoint and credentials live in
config/settings.py (loaded from .env).
"""

# HTTP headers sent with every push
PUSH_CONTENT_TYPE = "application/json"
PUSH_USER_AGENT = "capture-lifecycle/1.0"

# Authorization header scheme used when PUSH_API_TOKEN is set
PUSH_AUTH_SCHEME = "Bearer"

# Payload event name
PUSH_EVENT_ASSET_SAVED = "asset_saved"
