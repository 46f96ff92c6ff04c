"""
config.py - Runtime settings for the dining locations backend

Values come from environment variables. A .env file next to this module
(or the path in DINING_ENV_FILE) is loaded first when present.
"""

import os

from dotenv import load_dotenv

BASE_DIR = os.path.dirname(os.path.abspath(__file__))

load_dotenv(os.getenv("DINING_ENV_FILE", os.path.join(BASE_DIR, ".env")))

DATABASE_PATH = os.getenv("DINING_DATABASE_PATH", os.path.join(BASE_DIR, "dining.db"))

# Civil timezone of the campus; every schedule is evaluated in this zone
TIMEZONE = os.getenv("DINING_TIMEZONE", "America/Chicago")
TIMEZONE_LABEL = os.getenv("DINING_TIMEZONE_LABEL", "CST")

# Push dispatch function (e.g. https://<project>.supabase.co/functions/v1/manual-push-notification)
PUSH_FUNCTION_URL = os.getenv("PUSH_FUNCTION_URL", "")
PUSH_API_KEY = os.getenv("PUSH_API_KEY", "")
PUSH_TIMEOUT_SECONDS = int(os.getenv("PUSH_TIMEOUT_SECONDS", "20"))

STATUS_REFRESH_MINUTES = int(os.getenv("STATUS_REFRESH_MINUTES", "5"))

DEFAULT_APP_TITLE = os.getenv("DEFAULT_APP_TITLE", "UT Dining")
DEFAULT_APP_DESCRIPTION = os.getenv(
    "DEFAULT_APP_DESCRIPTION",
    "Find dining locations, menus, and meal times across UT Austin campus.",
)

PORT = int(os.getenv("PORT", "8080"))
