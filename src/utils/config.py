# runtime settings, read once from the environment
import os

API_URL = os.getenv("SALESDESK_API_URL", "http://localhost:3000/api").rstrip("/")

# durable session snapshot lives here (remember-me sessions)
STATE_DB_PATH = os.getenv("SALESDESK_STATE_DB", "data/session.sqlite")

HTTP_TIMEOUT = float(os.getenv("SALESDESK_HTTP_TIMEOUT", "10"))

LOG_LEVEL = os.getenv("SALESDESK_LOG_LEVEL")

# used when a product carries no minThreshold of its own
DEFAULT_MIN_THRESHOLD = 10
