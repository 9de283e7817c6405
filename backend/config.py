import os

# Browser / navigation
NAVIGATION_TIMEOUT_MS = int(os.environ.get("SVG_NAVIGATION_TIMEOUT_MS", "30000"))
# Extra wait after the network settles, for lazily inserted content
SETTLE_DELAY_MS = int(os.environ.get("SVG_SETTLE_DELAY_MS", "1500"))
# Wall-clock budget for a whole extraction request
REQUEST_TIMEOUT_SECONDS = float(os.environ.get("SVG_REQUEST_TIMEOUT_SECONDS", "60"))
USER_AGENT = os.environ.get(
    "SVG_USER_AGENT",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
)

# Serialized inline graphics shorter than this are treated as empty
MIN_CONTENT_LENGTH = int(os.environ.get("SVG_MIN_CONTENT_LENGTH", "20"))

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
