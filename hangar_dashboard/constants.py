"""Shared constants for Hangar Dashboard."""

APP_NAME = "Hangar Dashboard"
SERVER_VERSION = "0.1.0"

# Network defaults
DEFAULT_SERVER_URL = "http://127.0.0.1:3000"
API_PREFIX = "/api/"

# Polling / reload timing (seconds)
STATUS_POLL_INTERVAL = 5.0
METRICS_POLL_INTERVAL = 3.0
RELOAD_DELAY = 1.5

# Public links
DEFAULT_APP_DOMAIN = "hangar.garageisep.com"
DEFAULT_PHPMYADMIN_URL = "https://phpmyadmin.hangar.garageisep.com"
DEFAULT_GITHUB_APP_NAME = "hangar-app"
GITHUB_INSTALLATIONS_URL = "https://github.com/settings/installations"

# Logging defaults
LOG_DIR = "logs"
DEFAULT_LOG_LEVEL = "INFO"

# Languages with a translation table
SUPPORTED_LANGUAGES = ("en", "fr")
DEFAULT_LANGUAGE = "en"
