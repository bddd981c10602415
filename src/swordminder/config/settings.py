"""Global configuration and constants for SwordMinder."""

from __future__ import annotations

import os
from typing import Final

# Autosave layout: <app support root>/<APP_FOLDER_NAME>/<document filename>
APP_FOLDER_NAME: Final = "org.thedigitalpath.swordminder"
DOCUMENT_EXTENSION: Final = "swordminder"
PLAYER_FILENAME: Final = f"Player.{DOCUMENT_EXTENSION}"
LEADERBOARD_FILENAME: Final = f"Leaderboard.{DOCUMENT_EXTENSION}"
CACHE_FOLDER_NAME: Final = "cache"

# Replaces the platform application-support root when set (tests, portable installs)
APP_SUPPORT_DIR: Final = os.environ.get("SWORDMINDER_APP_SUPPORT_DIR")

BIBLE_SOURCE_URL: Final = os.environ.get(
    "SWORDMINDER_BIBLE_URL",
    "https://raw.githubusercontent.com/thiagobodruk/bible/master/json/{code}.json",
)
BIBLE_CACHE_TTL: Final = 30 * 24 * 3600  # seconds

DEFAULT_USER_AGENT: Final = "SwordMinder/0.1 (+https://thedigitalpath.org)"
DEFAULT_TIMEOUT: Final = 15  # seconds
DEFAULT_RETRIES: Final = 2
DEFAULT_BACKOFF_FACTOR: Final = 0.5
