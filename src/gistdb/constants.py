from __future__ import annotations


DEFAULT_API_BASE = "https://api.github.com"
RAW_CONTENT_HOST = "gist.githubusercontent.com"
RAW_CONTENT_BASE = f"https://{RAW_CONTENT_HOST}"

# Public relay used when a browser-side caller asks for a CORS prefix
CORS_RELAY_BASE = "https://cors-anywhere.herokuapp.com/"

REQUIRED_SCOPE = "gist"
SCOPES_HEADER = "X-OAuth-Scopes"

MARKER_PREFIX = "__"
MARKER_SUFFIX = "-db-from-github-gist-api.txt"
MARKER_NOTICE = (
    "This is the persistent store for the <APP-NAME> app. "
    "Playing with this gist directly, may have adverse "
    "effects in your application."
)
APP_NAME_PLACEHOLDER = "<APP-NAME>"
